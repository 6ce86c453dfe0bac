"""Base repository mixin with common functionality.

This module provides the foundation for all repository operations including:
- Query execution (read/write) with storage errors wrapped
- Transactions
- Parent-record checks
- Timestamp and JSON column conversion
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ...domain.exceptions import DatabaseError, ReferentialIntegrityError
from ..database import DatabaseConnection

if TYPE_CHECKING:
    import kuzu

logger = logging.getLogger(__name__)


def to_db_time(value: datetime) -> datetime:
    """Naive UTC datetime for TIMESTAMP columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_time(value: datetime | None) -> datetime | None:
    """Timezone-aware UTC datetime from a TIMESTAMP column."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepositoryMixin:
    """Base mixin providing common repository functionality.

    All other repository mixins inherit from this class to access shared
    methods like _execute_read, _execute_write and _transaction.
    """

    # Set by __init__ in the concrete class
    _db: DatabaseConnection

    def _init_base(self, db: DatabaseConnection) -> None:
        """Initialize base repository attributes.

        Args:
            db: Database connection.
        """
        self._db = db

    # =========================================================================
    # Query Execution
    # =========================================================================

    def _execute(self, query: str, parameters: dict | None = None) -> kuzu.QueryResult:
        try:
            return self._db.execute(query, parameters=parameters)
        except RuntimeError as e:
            raise DatabaseError(f"Query failed: {e}") from e

    def _execute_read(
        self, query: str, parameters: dict | None = None
    ) -> kuzu.QueryResult:
        """Execute a read query."""
        return self._execute(query, parameters)

    def _execute_write(
        self, query: str, parameters: dict | None = None
    ) -> kuzu.QueryResult:
        """Execute a write query."""
        return self._execute(query, parameters)

    def _fetch_all(self, query: str, parameters: dict | None = None) -> list[list[Any]]:
        result = self._execute_read(query, parameters)
        rows = []
        while result.has_next():
            rows.append(result.get_next())
        return rows

    def _fetch_one(self, query: str, parameters: dict | None = None) -> list[Any] | None:
        result = self._execute_read(query, parameters)
        if not result.has_next():
            return None
        return result.get_next()

    @contextmanager
    def _transaction(self) -> Generator[None, None, None]:
        """Group writes so they commit or roll back together."""
        try:
            with self._db.transaction():
                yield
        except RuntimeError as e:
            raise DatabaseError(f"Transaction failed: {e}") from e

    # =========================================================================
    # Parent Checks
    # =========================================================================

    def memory_exists(self, memory_id: str) -> bool:
        row = self._fetch_one(
            "MATCH (m:Memory {id: $id}) RETURN m.id", parameters={"id": memory_id}
        )
        return row is not None

    def _require_memory(self, memory_id: str) -> None:
        """Raise ReferentialIntegrityError if the memory does not exist."""
        if not self.memory_exists(memory_id):
            raise ReferentialIntegrityError("memory", memory_id)

    def _require_deltas(self, memory_id: str, delta_ids: list[str]) -> None:
        """Raise ReferentialIntegrityError for the first delta missing from the memory.

        A delta stored under another memory counts as missing.
        """
        rows = self._fetch_all(
            """
            MATCH (d:MoodDelta)
            WHERE d.id IN $ids AND d.memory_id = $memory_id
            RETURN d.id
            """,
            parameters={"ids": delta_ids, "memory_id": memory_id},
        )
        found = {row[0] for row in rows}
        for delta_id in delta_ids:
            if delta_id not in found:
                raise ReferentialIntegrityError("delta", delta_id)

    # =========================================================================
    # Column Conversion
    # =========================================================================

    @staticmethod
    def _dumps(value: Any) -> str:
        return json.dumps(value)

    @staticmethod
    def _loads(value: str | None, default: Any = None) -> Any:
        if not value:
            return default
        return json.loads(value)
