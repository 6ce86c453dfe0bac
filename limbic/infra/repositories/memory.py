"""Memory storage operations.

Memories are stored whole as a JSON payload alongside the columns
queries filter on. Deleting a memory removes everything derived from it.
"""

from __future__ import annotations

import logging

from ...domain.models import ExtractedMemory
from .base import BaseRepositoryMixin, to_db_time, utc_now

logger = logging.getLogger(__name__)

# Tables whose rows belong to one memory, deleted leaf-first
_DEPENDENT_TABLES = (
    "MoodFactor",
    "MoodScore",
    "TurningPoint",
    "DeltaPattern",
    "MoodDelta",
    "ValidationResult",
)


class MemoryMixin(BaseRepositoryMixin):
    """Mixin for memory storage operations."""

    # =========================================================================
    # Create Operations
    # =========================================================================

    def store_memory(self, memory: ExtractedMemory) -> ExtractedMemory:
        """Store a memory, replacing the payload of an existing one.

        Args:
            memory: Memory to store.

        Returns:
            The stored memory.
        """
        parameters = {
            "id": memory.id,
            "content": memory.content,
            "timestamp": to_db_time(memory.timestamp),
            "payload": memory.model_dump_json(),
        }

        if self.memory_exists(memory.id):
            self._execute_write(
                """
                MATCH (m:Memory {id: $id})
                SET m.content = $content,
                    m.timestamp = $timestamp,
                    m.payload = $payload
                """,
                parameters=parameters,
            )
            logger.info(f"Updated memory {memory.id}")
            return memory

        self._execute_write(
            """
            CREATE (m:Memory {
                id: $id,
                content: $content,
                timestamp: $timestamp,
                payload: $payload,
                created_at: $created_at
            })
            """,
            parameters={**parameters, "created_at": to_db_time(utc_now())},
        )
        logger.info(f"Stored memory {memory.id}")
        return memory

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_memory(self, memory_id: str) -> ExtractedMemory | None:
        """Get a memory by ID, or None if it does not exist."""
        row = self._fetch_one(
            "MATCH (m:Memory {id: $id}) RETURN m.payload",
            parameters={"id": memory_id},
        )
        if row is None:
            return None
        return ExtractedMemory.model_validate_json(row[0])

    def list_memories(self, memory_ids: list[str] | None = None) -> list[ExtractedMemory]:
        """List memories ordered by timestamp, optionally restricted to IDs."""
        if memory_ids is not None and not memory_ids:
            return []
        if memory_ids is None:
            rows = self._fetch_all(
                "MATCH (m:Memory) RETURN m.payload ORDER BY m.timestamp, m.id"
            )
        else:
            rows = self._fetch_all(
                """
                MATCH (m:Memory)
                WHERE m.id IN $ids
                RETURN m.payload
                ORDER BY m.timestamp, m.id
                """,
                parameters={"ids": memory_ids},
            )
        return [ExtractedMemory.model_validate_json(row[0]) for row in rows]

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_memory(self, memory_id: str) -> bool:
        """Delete a memory and everything derived from it.

        Scores, factors, deltas, patterns, turning points, validations and
        cluster memberships go in one transaction. Clusters the memory
        belonged to have their memory_count decremented.

        Returns:
            True if the memory existed.
        """
        if not self.memory_exists(memory_id):
            return False

        params = {"id": memory_id}
        with self._transaction():
            self._execute_write(
                """
                MATCH (m:Memory {id: $id})-[:MEMBER_OF]->(c:MemoryCluster)
                SET c.memory_count = CASE WHEN c.memory_count > 0
                                          THEN c.memory_count - 1 ELSE 0 END,
                    c.updated_at = $now
                """,
                parameters={**params, "now": to_db_time(utc_now())},
            )
            self._execute_write(
                "MATCH (m:Memory {id: $id})-[r:MEMBER_OF]->(:MemoryCluster) DELETE r",
                parameters=params,
            )
            self._execute_write(
                """
                MATCH (s:MoodScore)-[r:HAS_FACTOR]->(:MoodFactor)
                WHERE s.memory_id = $id
                DELETE r
                """,
                parameters=params,
            )
            self._execute_write(
                """
                MATCH (p:DeltaPattern)-[r:PATTERN_INCLUDES]->(:MoodDelta)
                WHERE p.memory_id = $id
                DELETE r
                """,
                parameters=params,
            )
            self._execute_write(
                """
                MATCH (:DeltaPattern)-[r:PATTERN_INCLUDES]->(d:MoodDelta)
                WHERE d.memory_id = $id
                DELETE r
                """,
                parameters=params,
            )
            for table in _DEPENDENT_TABLES:
                self._execute_write(
                    f"MATCH (n:{table}) WHERE n.memory_id = $id DELETE n",
                    parameters=params,
                )
            self._execute_write("MATCH (m:Memory {id: $id}) DELETE m", parameters=params)

        logger.info(f"Deleted memory {memory_id} and its derived records")
        return True
