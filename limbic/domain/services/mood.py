"""Mood Service - scoring conversations and tracking emotional change.

Coordinates the amygdala (scoring, delta detection), the hippocampus
(patterns, turning points) and the storage gateway.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ...brain.amygdala import DeltaDetector, MoodScoringAnalyzer
from ...brain.hippocampus import DeltaPatternDetector, TurningPointDetector
from ..exceptions import ValidationError
from ..models import (
    Conversation,
    DeltaPattern,
    DeltaTrackingResult,
    MoodAnalysisResult,
    StoredMoodDelta,
    StoredMoodScore,
    TurningPoint,
    ValidationResult,
)

if TYPE_CHECKING:
    from ...infra.repositories import AnalyticsRepository

logger = logging.getLogger(__name__)


class MoodService:
    """Service for mood scoring and delta tracking."""

    def __init__(
        self,
        repository: AnalyticsRepository,
        analyzer: MoodScoringAnalyzer | None = None,
        delta_detector: DeltaDetector | None = None,
        pattern_detector: DeltaPatternDetector | None = None,
        turning_point_detector: TurningPointDetector | None = None,
        algorithm_version: str = "1.0.0",
    ) -> None:
        """Initialize the service.

        Args:
            repository: Storage gateway.
            analyzer: Mood scoring analyzer.
            delta_detector: Delta detector.
            pattern_detector: Groups stored deltas into patterns.
            turning_point_detector: Promotes large deltas to turning points.
            algorithm_version: Version tag written with every mood score.
        """
        self._repo = repository
        self._analyzer = analyzer or MoodScoringAnalyzer()
        self._delta_detector = delta_detector or DeltaDetector()
        self._pattern_detector = pattern_detector or DeltaPatternDetector()
        self._turning_point_detector = turning_point_detector or TurningPointDetector()
        self._algorithm_version = algorithm_version

    # =========================================================================
    # Scoring
    # =========================================================================

    def analyze_conversation(
        self, conversation: Conversation | dict[str, Any]
    ) -> MoodAnalysisResult:
        """Score a conversation without storing anything."""
        return self._analyzer.analyze_conversation(conversation)

    def score_memory(
        self, memory_id: str, conversation: Conversation | dict[str, Any]
    ) -> StoredMoodScore:
        """Score a conversation and store the result against a memory.

        Raises:
            ValidationError: If the conversation is malformed.
            ReferentialIntegrityError: If the memory does not exist.
        """
        started = time.perf_counter()
        result = self._analyzer.analyze_conversation(conversation)
        duration_ms = int((time.perf_counter() - started) * 1000)

        return self._repo.store_mood_score(
            memory_id,
            result,
            duration_ms=duration_ms,
            algorithm_version=self._algorithm_version,
        )

    # =========================================================================
    # Delta Tracking
    # =========================================================================

    def track_deltas(
        self,
        memory_id: str,
        conversation_id: str,
        analyses: list[MoodAnalysisResult | dict[str, Any]],
        start_time: datetime,
        duration_ms: int,
    ) -> DeltaTrackingResult:
        """Detect, store and summarise the deltas across a conversation.

        Steps: detect deltas, store the history, then detect and store
        patterns and turning points over the stored deltas.

        Raises:
            ValidationError: If an analysis is malformed or duration is negative.
            ReferentialIntegrityError: If the memory does not exist.
        """
        if duration_ms < 0:
            raise ValidationError(f"duration_ms must be non-negative, got {duration_ms}")

        deltas = self._delta_detector.detect_conversational_deltas(analyses)
        stored = self._repo.store_delta_history(
            memory_id, conversation_id, deltas, duration_ms, start_time
        )

        patterns = [
            self._repo.store_delta_pattern(memory_id, pattern)
            for pattern in self._pattern_detector.detect(stored)
        ]
        turning_points = [
            self._repo.store_turning_point(memory_id, tp, context, delta_id=delta_id)
            for tp, context, delta_id in self._turning_point_detector.detect(stored)
        ]

        logger.info(
            f"Tracked {len(stored)} deltas for memory {memory_id}: "
            f"{len(patterns)} patterns, {len(turning_points)} turning points"
        )
        return DeltaTrackingResult(
            memory_id=memory_id,
            conversation_id=conversation_id,
            deltas=stored,
            patterns=patterns,
            turning_points=turning_points,
        )

    def get_significant_deltas(
        self, min_significance: float = 0.0, limit: int = 50
    ) -> list[StoredMoodDelta]:
        return self._repo.get_deltas_by_significance(min_significance, limit)

    def get_delta_patterns(self, memory_id: str) -> list[DeltaPattern]:
        return self._repo.get_delta_patterns_by_memory_id(memory_id)

    def get_turning_points(self, memory_id: str) -> list[TurningPoint]:
        return self._repo.get_turning_points_by_memory_id(memory_id)

    # =========================================================================
    # Validation
    # =========================================================================

    def record_validation(
        self,
        memory_id: str,
        human_score: float,
        validator_id: str,
        algorithm_score: float | None = None,
        method: str = "manual",
        feedback: str = "",
    ) -> ValidationResult:
        """Record a human rating against the algorithm's score.

        When algorithm_score is omitted the memory's latest stored score is
        used.

        Raises:
            ValidationError: If no algorithm score is available.
        """
        mood_score_id = None
        if algorithm_score is None:
            latest = self._repo.get_mood_score_by_memory_id(memory_id)
            if latest is None:
                raise ValidationError(f"Memory '{memory_id}' has no mood score to validate")
            algorithm_score = latest.score
            mood_score_id = latest.id

        return self._repo.store_validation_result(
            memory_id,
            human_score=human_score,
            algorithm_score=algorithm_score,
            validator_id=validator_id,
            method=method,
            feedback=feedback,
            mood_score_id=mood_score_id,
        )
