"""Database connection management for KùzuDB."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import kuzu

logger = logging.getLogger(__name__)

# Node tables, created in this order
NODE_TABLES = {
    "Memory": """
        CREATE NODE TABLE IF NOT EXISTS Memory (
            id STRING,
            content STRING,
            timestamp TIMESTAMP,
            payload STRING,
            created_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
    "MoodScore": """
        CREATE NODE TABLE IF NOT EXISTS MoodScore (
            id STRING,
            memory_id STRING,
            score DOUBLE,
            confidence DOUBLE,
            descriptors STRING,
            algorithm_version STRING,
            processing_time_ms INT64,
            calculated_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
    "MoodFactor": """
        CREATE NODE TABLE IF NOT EXISTS MoodFactor (
            id STRING,
            memory_id STRING,
            position INT64,
            type STRING,
            weight DOUBLE,
            description STRING,
            evidence STRING,
            internal_score DOUBLE,
            PRIMARY KEY (id)
        )
    """,
    "MoodDelta": """
        CREATE NODE TABLE IF NOT EXISTS MoodDelta (
            id STRING,
            memory_id STRING,
            conversation_id STRING,
            magnitude DOUBLE,
            direction STRING,
            type STRING,
            confidence DOUBLE,
            factors STRING,
            previous_score DOUBLE,
            current_score DOUBLE,
            significance DOUBLE,
            position STRING,
            preceding_deltas INT64,
            following_deltas INT64,
            relative_timestamp INT64,
            delta_sequence INT64,
            detected_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
    "DeltaPattern": """
        CREATE NODE TABLE IF NOT EXISTS DeltaPattern (
            id STRING,
            memory_id STRING,
            pattern_type STRING,
            description STRING,
            duration INT64,
            average_magnitude DOUBLE,
            significance DOUBLE,
            confidence DOUBLE,
            created_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
    "TurningPoint": """
        CREATE NODE TABLE IF NOT EXISTS TurningPoint (
            id STRING,
            memory_id STRING,
            delta_id STRING,
            type STRING,
            magnitude DOUBLE,
            description STRING,
            factors STRING,
            timestamp TIMESTAMP,
            significance DOUBLE,
            position STRING,
            preceding_magnitude DOUBLE,
            following_magnitude DOUBLE,
            context_duration INT64,
            PRIMARY KEY (id)
        )
    """,
    "ValidationResult": """
        CREATE NODE TABLE IF NOT EXISTS ValidationResult (
            id STRING,
            memory_id STRING,
            mood_score_id STRING,
            human_score DOUBLE,
            algorithm_score DOUBLE,
            agreement DOUBLE,
            discrepancy DOUBLE,
            validator_id STRING,
            method STRING,
            feedback STRING,
            validated_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
    "MemoryCluster": """
        CREATE NODE TABLE IF NOT EXISTS MemoryCluster (
            id STRING,
            theme STRING,
            coherence_score DOUBLE,
            psychological_significance DOUBLE,
            memory_count INT64,
            quality_metrics STRING,
            created_at TIMESTAMP,
            updated_at TIMESTAMP,
            PRIMARY KEY (id)
        )
    """,
}

REL_TABLES = {
    # MoodScore → MoodFactor
    "HAS_FACTOR": """
        CREATE REL TABLE IF NOT EXISTS HAS_FACTOR (
            FROM MoodScore TO MoodFactor
        )
    """,
    # DeltaPattern → MoodDelta, in pattern order
    "PATTERN_INCLUDES": """
        CREATE REL TABLE IF NOT EXISTS PATTERN_INCLUDES (
            FROM DeltaPattern TO MoodDelta,
            sequence_order INT64
        )
    """,
    # Memory → MemoryCluster
    "MEMBER_OF": """
        CREATE REL TABLE IF NOT EXISTS MEMBER_OF (
            FROM Memory TO MemoryCluster,
            membership_strength DOUBLE,
            contribution_score DOUBLE,
            added_at TIMESTAMP
        )
    """,
}


class DatabaseConnection:
    """Manages a KùzuDB database and a single connection to it.

    Multi-statement writes run inside transaction(); a failure rolls the
    whole block back and re-raises.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the database connection.

        Args:
            db_path: Path to the database directory.
        """
        self._db_path = db_path
        self._db: kuzu.Database | None = None
        self._conn: kuzu.Connection | None = None
        self._initialized = False
        self._transaction_depth = 0

    @property
    def db(self) -> kuzu.Database:
        """Get the database instance, creating if needed."""
        if self._db is None:
            import kuzu

            logger.info(f"Initializing database at: {self._db_path}")
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._db = kuzu.Database(str(self._db_path))
        return self._db

    @property
    def conn(self) -> kuzu.Connection:
        """Get a database connection, initializing schema if needed."""
        if self._conn is None:
            import kuzu

            self._conn = kuzu.Connection(self.db)
            if not self._initialized:
                self._init_schema()
                self._initialized = True
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    def _init_schema(self) -> None:
        """Initialize the database schema."""
        logger.info("Initializing database schema...")

        for ddl in NODE_TABLES.values():
            self.conn.execute(ddl)
        for ddl in REL_TABLES.values():
            self.conn.execute(ddl)

        logger.info("Database schema initialized successfully")

    def execute(self, query: str, parameters: dict | None = None) -> kuzu.QueryResult:
        """Execute a query on the database.

        Args:
            query: Cypher query string.
            parameters: Optional query parameters.

        Returns:
            Query result.
        """
        if parameters:
            return self.conn.execute(query, parameters=parameters)
        return self.conn.execute(query)

    @contextmanager
    def transaction(self) -> Generator[DatabaseConnection, None, None]:
        """Run a block of writes atomically.

        Nested calls join the outermost transaction.
        """
        if self._transaction_depth > 0:
            self._transaction_depth += 1
            try:
                yield self
            finally:
                self._transaction_depth -= 1
            return

        self.conn.execute("BEGIN TRANSACTION")
        self._transaction_depth = 1
        try:
            yield self
        except BaseException:
            logger.warning("Rolling back transaction")
            try:
                self.conn.execute("ROLLBACK")
            except RuntimeError as e:
                # A failed statement may already have ended the transaction
                logger.debug(f"Rollback skipped: {e}")
            raise
        else:
            self.conn.execute("COMMIT")
        finally:
            self._transaction_depth = 0

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn = None
        if self._db is not None:
            self._db = None
        logger.info("Database connection closed")
