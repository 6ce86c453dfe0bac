"""Human validation of algorithm mood scores."""

from __future__ import annotations

import logging
import uuid

from ...domain.exceptions import ValidationError
from ...domain.models import ValidationResult
from .base import BaseRepositoryMixin, from_db_time, to_db_time, utc_now

logger = logging.getLogger(__name__)


class ValidationMixin(BaseRepositoryMixin):
    """Mixin for validation result operations."""

    def store_validation_result(
        self,
        memory_id: str,
        human_score: float,
        algorithm_score: float,
        validator_id: str,
        method: str = "manual",
        feedback: str = "",
        mood_score_id: str | None = None,
    ) -> ValidationResult:
        """Record how a human rating compares with the algorithm's score.

        agreement = 1 - |human - algorithm| / 10; discrepancy = |human - algorithm|.

        Raises:
            ValidationError: If either score is outside 0-10.
            ReferentialIntegrityError: If the memory does not exist.
        """
        for name, value in (("human_score", human_score), ("algorithm_score", algorithm_score)):
            if not (0.0 <= value <= 10.0):
                raise ValidationError(f"{name} must be between 0 and 10, got {value}")
        self._require_memory(memory_id)

        discrepancy = abs(human_score - algorithm_score)
        record = ValidationResult(
            id=str(uuid.uuid4()),
            memory_id=memory_id,
            mood_score_id=mood_score_id,
            human_score=human_score,
            algorithm_score=algorithm_score,
            agreement=1.0 - discrepancy / 10,
            discrepancy=discrepancy,
            validator_id=validator_id,
            method=method,
            feedback=feedback,
            validated_at=utc_now(),
        )

        self._execute_write(
            """
            CREATE (v:ValidationResult {
                id: $id,
                memory_id: $memory_id,
                mood_score_id: $mood_score_id,
                human_score: $human_score,
                algorithm_score: $algorithm_score,
                agreement: $agreement,
                discrepancy: $discrepancy,
                validator_id: $validator_id,
                method: $method,
                feedback: $feedback,
                validated_at: $validated_at
            })
            """,
            parameters={
                **record.model_dump(exclude={"validated_at"}),
                "validated_at": to_db_time(record.validated_at),
            },
        )

        logger.info(
            f"Stored validation {record.id} for memory {memory_id} "
            f"(agreement {record.agreement:.2f})"
        )
        return record

    def get_validation_results_by_memory_id(self, memory_id: str) -> list[ValidationResult]:
        rows = self._fetch_all(
            """
            MATCH (v:ValidationResult)
            WHERE v.memory_id = $memory_id
            RETURN v.id, v.memory_id, v.mood_score_id, v.human_score,
                   v.algorithm_score, v.agreement, v.discrepancy,
                   v.validator_id, v.method, v.feedback, v.validated_at
            ORDER BY v.validated_at ASC
            """,
            parameters={"memory_id": memory_id},
        )
        return [
            ValidationResult(
                id=row[0],
                memory_id=row[1],
                mood_score_id=row[2],
                human_score=row[3],
                algorithm_score=row[4],
                agreement=row[5],
                discrepancy=row[6],
                validator_id=row[7],
                method=row[8],
                feedback=row[9] or "",
                validated_at=from_db_time(row[10]),
            )
            for row in rows
        ]
