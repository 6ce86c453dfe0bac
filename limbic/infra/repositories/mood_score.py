"""Mood score storage and queries."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from ...domain.models import FactorType, MoodAnalysisResult, MoodFactor, StoredMoodScore
from .base import BaseRepositoryMixin, from_db_time, to_db_time, utc_now

logger = logging.getLogger(__name__)

_SCORE_COLUMNS = """
    s.id, s.memory_id, s.score, s.confidence, s.descriptors,
    s.algorithm_version, s.processing_time_ms, s.calculated_at
"""


class MoodScoreMixin(BaseRepositoryMixin):
    """Mixin for mood score operations."""

    # =========================================================================
    # Create Operations
    # =========================================================================

    def store_mood_score(
        self,
        memory_id: str,
        result: MoodAnalysisResult,
        duration_ms: int = 0,
        algorithm_version: str = "1.0.0",
    ) -> StoredMoodScore:
        """Store a mood score and its factors atomically.

        Args:
            memory_id: Memory the score belongs to.
            result: Mood analysis to store.
            duration_ms: Time the analysis took.
            algorithm_version: Version tag of the scoring algorithm.

        Returns:
            The stored score.

        Raises:
            ReferentialIntegrityError: If the memory does not exist.
        """
        self._require_memory(memory_id)

        score_id = str(uuid.uuid4())
        now = utc_now()

        with self._transaction():
            self._execute_write(
                """
                CREATE (s:MoodScore {
                    id: $id,
                    memory_id: $memory_id,
                    score: $score,
                    confidence: $confidence,
                    descriptors: $descriptors,
                    algorithm_version: $algorithm_version,
                    processing_time_ms: $processing_time_ms,
                    calculated_at: $calculated_at
                })
                """,
                parameters={
                    "id": score_id,
                    "memory_id": memory_id,
                    "score": result.score,
                    "confidence": result.confidence,
                    "descriptors": self._dumps(result.descriptors),
                    "algorithm_version": algorithm_version,
                    "processing_time_ms": max(0, int(duration_ms)),
                    "calculated_at": to_db_time(now),
                },
            )
            for position, factor in enumerate(result.factors):
                factor_id = str(uuid.uuid4())
                self._execute_write(
                    """
                    CREATE (f:MoodFactor {
                        id: $id,
                        memory_id: $memory_id,
                        position: $position,
                        type: $type,
                        weight: $weight,
                        description: $description,
                        evidence: $evidence,
                        internal_score: $internal_score
                    })
                    """,
                    parameters={
                        "id": factor_id,
                        "memory_id": memory_id,
                        "position": position,
                        "type": factor.type.value,
                        "weight": factor.weight,
                        "description": factor.description,
                        "evidence": self._dumps(factor.evidence),
                        "internal_score": factor.internal_score,
                    },
                )
                self._execute_write(
                    """
                    MATCH (s:MoodScore {id: $score_id}), (f:MoodFactor {id: $factor_id})
                    CREATE (s)-[:HAS_FACTOR]->(f)
                    """,
                    parameters={"score_id": score_id, "factor_id": factor_id},
                )

        logger.info(
            f"Stored mood score {score_id} for memory {memory_id} "
            f"({result.score}, {len(result.factors)} factors)"
        )
        return StoredMoodScore(
            id=score_id,
            memory_id=memory_id,
            score=result.score,
            confidence=result.confidence,
            descriptors=list(result.descriptors),
            factors=list(result.factors),
            algorithm_version=algorithm_version,
            processing_time_ms=max(0, int(duration_ms)),
            calculated_at=now,
        )

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_mood_score_by_memory_id(self, memory_id: str) -> StoredMoodScore | None:
        """Latest mood score of a memory."""
        scores = self._query_scores(
            "WHERE s.memory_id = $memory_id",
            {"memory_id": memory_id},
            order="s.calculated_at DESC",
            limit=1,
        )
        return scores[0] if scores else None

    def get_mood_scores_by_memory_id(self, memory_id: str) -> list[StoredMoodScore]:
        return self._query_scores(
            "WHERE s.memory_id = $memory_id", {"memory_id": memory_id}
        )

    def get_mood_scores_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[StoredMoodScore]:
        return self._query_scores(
            "WHERE s.calculated_at >= $start AND s.calculated_at <= $end_time",
            {"start": to_db_time(start), "end_time": to_db_time(end)},
        )

    def get_mood_scores_by_confidence_range(
        self, min_confidence: float, max_confidence: float
    ) -> list[StoredMoodScore]:
        return self._query_scores(
            "WHERE s.confidence >= $low AND s.confidence <= $high",
            {"low": min_confidence, "high": max_confidence},
        )

    def get_mood_scores_by_score_range(
        self, min_score: float, max_score: float
    ) -> list[StoredMoodScore]:
        return self._query_scores(
            "WHERE s.score >= $low AND s.score <= $high",
            {"low": min_score, "high": max_score},
        )

    def get_recent_mood_scores(self, limit: int = 10) -> list[StoredMoodScore]:
        return self._query_scores("", {}, order="s.calculated_at DESC", limit=limit)

    def _query_scores(
        self,
        where: str,
        parameters: dict,
        order: str = "s.calculated_at ASC",
        limit: int | None = None,
    ) -> list[StoredMoodScore]:
        query = f"MATCH (s:MoodScore) {where} RETURN {_SCORE_COLUMNS} ORDER BY {order}"
        params = dict(parameters)
        if limit is not None:
            query += " LIMIT $limit"
            params["limit"] = limit
        rows = self._fetch_all(query, params or None)
        return [self._row_to_score(row) for row in rows]

    def _factors_for_score(self, score_id: str) -> list[MoodFactor]:
        rows = self._fetch_all(
            """
            MATCH (s:MoodScore {id: $id})-[:HAS_FACTOR]->(f:MoodFactor)
            RETURN f.type, f.weight, f.description, f.evidence, f.internal_score
            ORDER BY f.position
            """,
            parameters={"id": score_id},
        )
        return [
            MoodFactor(
                type=FactorType(row[0]),
                weight=row[1],
                description=row[2],
                evidence=self._loads(row[3], []),
                internal_score=row[4],
            )
            for row in rows
        ]

    def _row_to_score(self, row: list) -> StoredMoodScore:
        """Convert a database row to StoredMoodScore.

        Row format:
            (id, memory_id, score, confidence, descriptors,
             algorithm_version, processing_time_ms, calculated_at)
        """
        return StoredMoodScore(
            id=row[0],
            memory_id=row[1],
            score=row[2],
            confidence=row[3],
            descriptors=self._loads(row[4], []),
            factors=self._factors_for_score(row[0]),
            algorithm_version=row[5],
            processing_time_ms=row[6] or 0,
            calculated_at=from_db_time(row[7]),
        )
