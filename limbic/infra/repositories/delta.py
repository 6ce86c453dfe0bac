"""Delta history, pattern and turning point storage.

Deltas are annotated by the significance engine before they are written;
pattern significance and confidence and turning point significance are
computed here at write time.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from ...brain.hippocampus import DeltaSignificanceEngine
from ...domain.models import (
    DeltaDirection,
    DeltaPattern,
    DeltaPatternInput,
    DeltaPatternType,
    DeltaTemporalContext,
    DeltaType,
    MoodDelta,
    StoredMoodDelta,
    TemporalPosition,
    TurningPoint,
    TurningPointContext,
    TurningPointInput,
    TurningPointType,
)
from .base import BaseRepositoryMixin, from_db_time, to_db_time, utc_now

logger = logging.getLogger(__name__)

_DELTA_COLUMNS = """
    d.id, d.memory_id, d.conversation_id, d.magnitude, d.direction, d.type,
    d.confidence, d.factors, d.previous_score, d.current_score, d.significance,
    d.position, d.preceding_deltas, d.following_deltas, d.relative_timestamp,
    d.delta_sequence, d.detected_at
"""

_PATTERN_COLUMNS = """
    p.id, p.memory_id, p.pattern_type, p.description, p.duration,
    p.average_magnitude, p.significance, p.confidence, p.created_at
"""

_TURNING_POINT_COLUMNS = """
    t.id, t.memory_id, t.delta_id, t.type, t.magnitude, t.description,
    t.factors, t.timestamp, t.significance, t.position,
    t.preceding_magnitude, t.following_magnitude, t.context_duration
"""


class DeltaMixin(BaseRepositoryMixin):
    """Mixin for delta, pattern and turning point operations."""

    # Set by __init__ in the concrete class
    _significance: DeltaSignificanceEngine

    # =========================================================================
    # Create Operations
    # =========================================================================

    def store_delta_history(
        self,
        memory_id: str,
        conversation_id: str,
        deltas: list[MoodDelta],
        duration_ms: int,
        start_time: datetime,
    ) -> list[StoredMoodDelta]:
        """Annotate and store a conversation's deltas atomically.

        Args:
            memory_id: Memory the deltas belong to.
            conversation_id: Conversation they were detected in.
            deltas: Deltas in conversation order.
            duration_ms: Conversation length in milliseconds.
            start_time: Conversation start; detected_at is
                start_time + relative_timestamp.

        Returns:
            Stored deltas in sequence order.

        Raises:
            ReferentialIntegrityError: If the memory does not exist.
        """
        self._require_memory(memory_id)

        annotated = self._significance.annotate(deltas, duration_ms)
        stored: list[StoredMoodDelta] = []

        with self._transaction():
            for delta in annotated:
                context = delta.temporal_context
                record = StoredMoodDelta(
                    **delta.model_dump(exclude={"temporal_context"}),
                    temporal_context=context,
                    id=str(uuid.uuid4()),
                    memory_id=memory_id,
                    conversation_id=conversation_id,
                    detected_at=start_time
                    + timedelta(milliseconds=context.relative_timestamp),
                )
                self._execute_write(
                    """
                    CREATE (d:MoodDelta {
                        id: $id,
                        memory_id: $memory_id,
                        conversation_id: $conversation_id,
                        magnitude: $magnitude,
                        direction: $direction,
                        type: $type,
                        confidence: $confidence,
                        factors: $factors,
                        previous_score: $previous_score,
                        current_score: $current_score,
                        significance: $significance,
                        position: $position,
                        preceding_deltas: $preceding_deltas,
                        following_deltas: $following_deltas,
                        relative_timestamp: $relative_timestamp,
                        delta_sequence: $delta_sequence,
                        detected_at: $detected_at
                    })
                    """,
                    parameters={
                        "id": record.id,
                        "memory_id": memory_id,
                        "conversation_id": conversation_id,
                        "magnitude": record.magnitude,
                        "direction": record.direction.value,
                        "type": record.type.value,
                        "confidence": record.confidence,
                        "factors": self._dumps(record.factors),
                        "previous_score": record.previous_score,
                        "current_score": record.current_score,
                        "significance": record.significance,
                        "position": context.position.value,
                        "preceding_deltas": context.preceding_deltas,
                        "following_deltas": context.following_deltas,
                        "relative_timestamp": context.relative_timestamp,
                        "delta_sequence": record.delta_sequence,
                        "detected_at": to_db_time(record.detected_at),
                    },
                )
                stored.append(record)

        logger.info(f"Stored {len(stored)} deltas for memory {memory_id}")
        return stored

    def store_delta_pattern(
        self, memory_id: str, pattern: DeltaPatternInput
    ) -> DeltaPattern:
        """Store a delta pattern and link it to its deltas atomically.

        Raises:
            ReferentialIntegrityError: If the memory does not exist or any
                delta is not stored under it.
        """
        self._require_memory(memory_id)
        self._require_deltas(memory_id, pattern.delta_ids)

        count = len(pattern.delta_ids)
        record = DeltaPattern(
            **pattern.model_dump(),
            id=str(uuid.uuid4()),
            memory_id=memory_id,
            significance=self._significance.pattern_significance(
                count, pattern.average_magnitude
            ),
            confidence=self._significance.pattern_confidence(
                count, pattern.average_magnitude
            ),
            created_at=utc_now(),
        )

        with self._transaction():
            self._execute_write(
                """
                CREATE (p:DeltaPattern {
                    id: $id,
                    memory_id: $memory_id,
                    pattern_type: $pattern_type,
                    description: $description,
                    duration: $duration,
                    average_magnitude: $average_magnitude,
                    significance: $significance,
                    confidence: $confidence,
                    created_at: $created_at
                })
                """,
                parameters={
                    "id": record.id,
                    "memory_id": memory_id,
                    "pattern_type": record.pattern_type.value,
                    "description": record.description,
                    "duration": record.duration,
                    "average_magnitude": record.average_magnitude,
                    "significance": record.significance,
                    "confidence": record.confidence,
                    "created_at": to_db_time(record.created_at),
                },
            )
            for order, delta_id in enumerate(record.delta_ids):
                self._execute_write(
                    """
                    MATCH (p:DeltaPattern {id: $pattern_id}), (d:MoodDelta {id: $delta_id})
                    CREATE (p)-[:PATTERN_INCLUDES {sequence_order: $sequence_order}]->(d)
                    """,
                    parameters={
                        "pattern_id": record.id,
                        "delta_id": delta_id,
                        "sequence_order": order,
                    },
                )

        logger.info(
            f"Stored {record.pattern_type.value} pattern {record.id} "
            f"({count} deltas, significance {record.significance:.2f})"
        )
        return record

    def store_turning_point(
        self,
        memory_id: str,
        turning_point: TurningPointInput,
        context: TurningPointContext | None = None,
        delta_id: str | None = None,
    ) -> TurningPoint:
        """Store a turning point.

        delta_id is a weak reference and is not checked.

        Raises:
            ReferentialIntegrityError: If the memory does not exist.
        """
        self._require_memory(memory_id)
        context = context or TurningPointContext()

        record = TurningPoint(
            **turning_point.model_dump(),
            id=str(uuid.uuid4()),
            memory_id=memory_id,
            delta_id=delta_id,
            significance=self._significance.turning_point_significance(
                turning_point, context
            ),
            temporal_context=context,
        )

        self._execute_write(
            """
            CREATE (t:TurningPoint {
                id: $id,
                memory_id: $memory_id,
                delta_id: $delta_id,
                type: $type,
                magnitude: $magnitude,
                description: $description,
                factors: $factors,
                timestamp: $timestamp,
                significance: $significance,
                position: $position,
                preceding_magnitude: $preceding_magnitude,
                following_magnitude: $following_magnitude,
                context_duration: $context_duration
            })
            """,
            parameters={
                "id": record.id,
                "memory_id": memory_id,
                "delta_id": delta_id,
                "type": record.type.value,
                "magnitude": record.magnitude,
                "description": record.description,
                "factors": self._dumps(record.factors),
                "timestamp": to_db_time(record.timestamp),
                "significance": record.significance,
                "position": context.position.value,
                "preceding_magnitude": context.preceding_magnitude,
                "following_magnitude": context.following_magnitude,
                "context_duration": context.context_duration,
            },
        )

        logger.info(f"Stored {record.type.value} turning point {record.id}")
        return record

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_delta_history_by_memory_id(self, memory_id: str) -> list[StoredMoodDelta]:
        """Deltas of a memory ordered by sequence."""
        rows = self._fetch_all(
            f"""
            MATCH (d:MoodDelta)
            WHERE d.memory_id = $memory_id
            RETURN {_DELTA_COLUMNS}
            ORDER BY d.delta_sequence ASC, d.detected_at ASC
            """,
            parameters={"memory_id": memory_id},
        )
        return [self._row_to_delta(row) for row in rows]

    def get_deltas_by_significance(
        self, min_significance: float, limit: int = 50
    ) -> list[StoredMoodDelta]:
        """Deltas at or above a significance, most significant first."""
        rows = self._fetch_all(
            f"""
            MATCH (d:MoodDelta)
            WHERE d.significance >= $min_significance
            RETURN {_DELTA_COLUMNS}
            ORDER BY d.significance DESC
            LIMIT $limit
            """,
            parameters={"min_significance": min_significance, "limit": limit},
        )
        return [self._row_to_delta(row) for row in rows]

    def get_temporal_delta_sequence(
        self, memory_id: str, start: datetime, end: datetime
    ) -> list[StoredMoodDelta]:
        """Deltas of a memory detected within [start, end], oldest first."""
        rows = self._fetch_all(
            f"""
            MATCH (d:MoodDelta)
            WHERE d.memory_id = $memory_id
              AND d.detected_at >= $start
              AND d.detected_at <= $end_time
            RETURN {_DELTA_COLUMNS}
            ORDER BY d.detected_at ASC, d.delta_sequence ASC
            """,
            parameters={
                "memory_id": memory_id,
                "start": to_db_time(start),
                "end_time": to_db_time(end),
            },
        )
        return [self._row_to_delta(row) for row in rows]

    def get_delta_patterns_by_memory_id(self, memory_id: str) -> list[DeltaPattern]:
        """Patterns of a memory, most significant first."""
        rows = self._fetch_all(
            f"""
            MATCH (p:DeltaPattern)
            WHERE p.memory_id = $memory_id
            RETURN {_PATTERN_COLUMNS}
            ORDER BY p.significance DESC, p.created_at ASC
            """,
            parameters={"memory_id": memory_id},
        )
        return [self._row_to_pattern(row) for row in rows]

    def get_turning_points_by_memory_id(self, memory_id: str) -> list[TurningPoint]:
        """Turning points of a memory, oldest first."""
        rows = self._fetch_all(
            f"""
            MATCH (t:TurningPoint)
            WHERE t.memory_id = $memory_id
            RETURN {_TURNING_POINT_COLUMNS}
            ORDER BY t.timestamp ASC
            """,
            parameters={"memory_id": memory_id},
        )
        return [self._row_to_turning_point(row) for row in rows]

    # =========================================================================
    # Row Mapping
    # =========================================================================

    def _pattern_delta_ids(self, pattern_id: str) -> list[str]:
        rows = self._fetch_all(
            """
            MATCH (p:DeltaPattern {id: $id})-[r:PATTERN_INCLUDES]->(d:MoodDelta)
            RETURN d.id
            ORDER BY r.sequence_order
            """,
            parameters={"id": pattern_id},
        )
        return [row[0] for row in rows]

    def _row_to_delta(self, row: list) -> StoredMoodDelta:
        return StoredMoodDelta(
            id=row[0],
            memory_id=row[1],
            conversation_id=row[2],
            magnitude=row[3],
            direction=DeltaDirection(row[4]),
            type=DeltaType(row[5]),
            confidence=row[6],
            factors=self._loads(row[7], []),
            previous_score=row[8],
            current_score=row[9],
            significance=row[10],
            temporal_context=DeltaTemporalContext(
                position=TemporalPosition(row[11]),
                preceding_deltas=row[12],
                following_deltas=row[13],
                relative_timestamp=row[14],
            ),
            delta_sequence=row[15],
            detected_at=from_db_time(row[16]),
        )

    def _row_to_pattern(self, row: list) -> DeltaPattern:
        return DeltaPattern(
            id=row[0],
            memory_id=row[1],
            pattern_type=DeltaPatternType(row[2]),
            delta_ids=self._pattern_delta_ids(row[0]),
            description=row[3],
            duration=row[4],
            average_magnitude=row[5],
            significance=row[6],
            confidence=row[7],
            created_at=from_db_time(row[8]),
        )

    def _row_to_turning_point(self, row: list) -> TurningPoint:
        return TurningPoint(
            id=row[0],
            memory_id=row[1],
            delta_id=row[2],
            type=TurningPointType(row[3]),
            magnitude=row[4],
            description=row[5],
            factors=self._loads(row[6], []),
            timestamp=from_db_time(row[7]),
            significance=row[8],
            temporal_context=TurningPointContext(
                position=TemporalPosition(row[9]),
                preceding_magnitude=row[10],
                following_magnitude=row[11],
                context_duration=row[12],
            ),
        )
