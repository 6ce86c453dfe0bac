"""Mood Delta Detection.

Compares sequential mood analyses and classifies each change:

- mood_repair: recovery from a low or declining state
- celebration: a rise within an already positive state
- decline: a significant drop
- plateau: everything else

Also provides trajectory-level helpers (velocity, plateaus, sudden
transitions and turning points) used when deciding whether a change is
worth remembering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from pydantic import ValidationError as PydanticValidationError

from ...domain.exceptions import ValidationError
from ...domain.models import (
    DeltaDirection,
    DeltaType,
    EmotionalTrajectory,
    MoodAnalysisResult,
    MoodDelta,
    MoodFactor,
    MoodTransition,
    TrajectoryPoint,
    TrajectoryTurningPoint,
    TransitionType,
    TurningPointType,
)
from .lexicon import EmotionalLexicon
from .trajectory import population_variance

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000


@dataclass
class DeltaDetectorConfig:
    """Thresholds for delta detection."""

    minimum_magnitude: float = 0.0  # pairs below this are not emitted
    neutral_epsilon: float = 0.05  # changes below this have neutral direction
    significant_magnitude: float = 2.0  # repair/celebration/decline floor
    prior_trend_threshold: float = 1.0  # drop that counts as a negative trend
    celebration_threshold: float = 3.0
    decline_threshold: float = 2.5
    plateau_variance_threshold: float = 0.5
    transition_magnitude: float = 2.0
    sudden_velocity: float = 20.0  # points per hour

    def __post_init__(self) -> None:
        if self.minimum_magnitude < 0 or self.neutral_epsilon < 0:
            raise ValueError("Magnitude thresholds must be non-negative")


@dataclass
class PlateauResult:
    """Outcome of plateau detection."""

    is_plateau: bool
    duration_ms: int
    average_score: float


def parse_analysis(analysis: MoodAnalysisResult | dict[str, Any]) -> MoodAnalysisResult:
    """Validate a mood analysis once at the boundary."""
    if isinstance(analysis, MoodAnalysisResult):
        return analysis
    try:
        return MoodAnalysisResult.model_validate(analysis)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid mood analysis: {e}") from e


class DeltaDetector:
    """Identifies mood changes between sequential analyses."""

    BASE_CONFIDENCE = 0.8
    CONTEXT_CONFIDENCE_BOOST = 1.1

    def __init__(self, config: DeltaDetectorConfig | None = None) -> None:
        self.config = config or DeltaDetectorConfig()

    # =========================================================================
    # Delta detection
    # =========================================================================

    def detect_conversational_deltas(
        self, analyses: list[MoodAnalysisResult | dict[str, Any]]
    ) -> list[MoodDelta]:
        """Emit one delta for every sequential pair of analyses.

        Args:
            analyses: Mood analyses in conversation order.

        Returns:
            Deltas in input order. Pairs below ``minimum_magnitude`` are
            skipped; with the default of 0.0 every pair yields a delta.

        Raises:
            ValidationError: If any analysis is malformed.
        """
        parsed = [parse_analysis(a) for a in analyses]
        if len(parsed) < 2:
            return []

        deltas: list[MoodDelta] = []
        for i in range(1, len(parsed)):
            prior_trend = parsed[i - 1].score - parsed[i - 2].score if i >= 2 else 0.0
            delta = self.detect_mood_delta(parsed[i], parsed[i - 1], prior_trend)
            if delta.magnitude < self.config.minimum_magnitude:
                logger.debug(f"Skipping delta {i}: magnitude {delta.magnitude}")
                continue
            deltas.append(self._enhance_with_context(delta, i, len(parsed)))

        logger.debug(f"Detected {len(deltas)} deltas across {len(parsed)} analyses")
        return deltas

    def detect_mood_delta(
        self,
        current: MoodAnalysisResult,
        previous: MoodAnalysisResult,
        prior_trend: float = 0.0,
    ) -> MoodDelta:
        """Classify the change from previous to current.

        Args:
            current: The later analysis.
            previous: The earlier analysis.
            prior_trend: Score change of the pair before this one; a drop of
                at least ``prior_trend_threshold`` marks a negative trend.
        """
        change = current.score - previous.score
        magnitude = round(abs(change), 4)

        if magnitude < self.config.neutral_epsilon:
            direction = DeltaDirection.NEUTRAL
        elif change > 0:
            direction = DeltaDirection.POSITIVE
        else:
            direction = DeltaDirection.NEGATIVE

        factors = self._identify_factors(current, previous)
        delta_type = self._classify(current, previous, direction, magnitude, prior_trend)
        confidence = self._calculate_confidence(
            delta_type, magnitude, current, previous, len(factors)
        )

        return MoodDelta(
            magnitude=magnitude,
            direction=direction,
            type=delta_type,
            confidence=confidence,
            factors=factors or ["Basic delta detected"],
            previous_score=previous.score,
            current_score=current.score,
        )

    def _classify(
        self,
        current: MoodAnalysisResult,
        previous: MoodAnalysisResult,
        direction: DeltaDirection,
        magnitude: float,
        prior_trend: float,
    ) -> DeltaType:
        significant = magnitude >= self.config.significant_magnitude
        prev, cur = previous.score, current.score

        if direction == DeltaDirection.POSITIVE and significant:
            healing = any(
                d in EmotionalLexicon.HEALING_DESCRIPTORS for d in current.descriptors
            )
            if prev < 4 and cur > 6:
                return DeltaType.MOOD_REPAIR
            if prev < 4.5 and cur > 5.5 and magnitude >= 2.5:
                return DeltaType.MOOD_REPAIR
            if prev < 3.5 and healing:
                return DeltaType.MOOD_REPAIR
            if prior_trend <= -self.config.prior_trend_threshold:
                return DeltaType.MOOD_REPAIR
            if prev > 6 and cur > 7:
                return DeltaType.CELEBRATION
        elif direction == DeltaDirection.NEGATIVE and significant:
            return DeltaType.DECLINE
        return DeltaType.PLATEAU

    def _calculate_confidence(
        self,
        delta_type: DeltaType,
        magnitude: float,
        current: MoodAnalysisResult,
        previous: MoodAnalysisResult,
        factor_count: int,
    ) -> float:
        confidence = self.BASE_CONFIDENCE
        if delta_type == DeltaType.MOOD_REPAIR:
            if magnitude >= 3.5:
                confidence += 0.1
            if current.confidence > 0.9:
                confidence += 0.05
            if factor_count >= 2:
                confidence += 0.05
        elif delta_type == DeltaType.CELEBRATION:
            if current.score > 8.0:
                confidence += 0.05
            if magnitude >= 3.0:
                confidence += 0.05

        input_confidence = (current.confidence + previous.confidence) / 2
        confidence *= 0.5 + 0.5 * input_confidence
        return round(min(1.0, confidence), 4)

    def _identify_factors(
        self, current: MoodAnalysisResult, previous: MoodAnalysisResult
    ) -> list[str]:
        factors: list[str] = []

        new_descriptors = [d for d in current.descriptors if d not in previous.descriptors]
        if new_descriptors:
            factors.append(f"New emotional expressions: {', '.join(new_descriptors)}")

        current_dominant = _dominant_factor(current.factors)
        previous_dominant = _dominant_factor(previous.factors)
        if (
            current_dominant is not None
            and previous_dominant is not None
            and current_dominant.type != previous_dominant.type
        ):
            factors.append(
                f"Shift from {previous_dominant.type.value} "
                f"to {current_dominant.type.value}"
            )

        current_evidence = sum(len(f.evidence) for f in current.factors)
        previous_evidence = sum(len(f.evidence) for f in previous.factors)
        if current_evidence > 0 and current_evidence > previous_evidence * 1.5:
            factors.append("Increased emotional expressiveness")

        return factors

    def _enhance_with_context(
        self, delta: MoodDelta, position: int, total: int
    ) -> MoodDelta:
        factors = list(delta.factors)
        if position == 1:
            factors.append("Early conversation shift")
        elif position == total - 1:
            factors.append("Conversation conclusion shift")

        confidence = round(min(1.0, delta.confidence * self.CONTEXT_CONFIDENCE_BOOST), 4)
        return delta.model_copy(update={"factors": factors, "confidence": confidence})

    # =========================================================================
    # Extraction triggers
    # =========================================================================

    def should_trigger_extraction(self, delta: MoodDelta) -> bool:
        """Whether a delta is worth turning into a memory."""
        if delta.type == DeltaType.MOOD_REPAIR:
            return True
        if delta.type == DeltaType.CELEBRATION:
            return delta.magnitude >= self.config.celebration_threshold
        if delta.type == DeltaType.DECLINE:
            return delta.magnitude >= self.config.decline_threshold
        return False

    @staticmethod
    def calculate_delta_magnitude(delta: MoodDelta) -> float:
        """Confidence-weighted magnitude."""
        return delta.magnitude * delta.confidence

    # =========================================================================
    # Trajectory helpers
    # =========================================================================

    @staticmethod
    def calculate_mood_velocity(points: list[TrajectoryPoint]) -> float:
        """Mood change from first to last point, in points per hour."""
        if len(points) < 2:
            return 0.0
        first, last = points[0], points[-1]
        elapsed_ms = (last.timestamp - first.timestamp).total_seconds() * 1000
        if elapsed_ms == 0:
            return 0.0
        return (last.mood_score - first.mood_score) / elapsed_ms * MS_PER_HOUR

    def detect_emotional_plateau(self, points: list[TrajectoryPoint]) -> PlateauResult:
        """A plateau is three or more points with low score variance."""
        if len(points) < 3:
            return PlateauResult(is_plateau=False, duration_ms=0, average_score=0.0)

        scores = [p.mood_score for p in points]
        is_plateau = population_variance(scores) < self.config.plateau_variance_threshold
        duration_ms = (
            int((points[-1].timestamp - points[0].timestamp).total_seconds() * 1000)
            if is_plateau
            else 0
        )
        return PlateauResult(
            is_plateau=is_plateau,
            duration_ms=duration_ms,
            average_score=float(np.mean(scores)),
        )

    def detect_sudden_transitions(
        self, points: list[TrajectoryPoint]
    ) -> list[MoodTransition]:
        """Changes of at least ``transition_magnitude`` between adjacent points."""
        transitions: list[MoodTransition] = []
        for i in range(1, len(points)):
            previous, current = points[i - 1], points[i]
            magnitude = abs(current.mood_score - previous.mood_score)
            if magnitude < self.config.transition_magnitude:
                continue

            elapsed_ms = (current.timestamp - previous.timestamp).total_seconds() * 1000
            velocity = (
                (current.mood_score - previous.mood_score) / elapsed_ms * MS_PER_HOUR
                if elapsed_ms > 0
                else 0.0
            )
            window = points[max(0, i - 2) : i + 1]
            transitions.append(
                MoodTransition(
                    from_score=previous.mood_score,
                    to_score=current.mood_score,
                    magnitude=round(magnitude, 4),
                    velocity=round(abs(velocity), 4),
                    type=self.classify_transition(velocity, window),
                    started_at=previous.timestamp,
                    ended_at=current.timestamp,
                )
            )
        return transitions

    def classify_transition(
        self, velocity: float, points: list[TrajectoryPoint]
    ) -> TransitionType:
        """Sudden when fast; otherwise recovery, decline or gradual by shape."""
        if abs(velocity) >= self.config.sudden_velocity:
            return TransitionType.SUDDEN

        if len(points) >= 3:
            scores = [p.mood_score for p in points]
            if min(scores) < 4.0 and scores[-1] > scores[0] + 2.0:
                return TransitionType.RECOVERY
            if max(scores) > 6.0 and scores[-1] < scores[0] - 2.0:
                return TransitionType.DECLINE

        return TransitionType.GRADUAL

    def identify_turning_points(
        self, trajectory: EmotionalTrajectory
    ) -> list[TrajectoryTurningPoint]:
        """Direction changes and sharp accelerations within a trajectory."""
        points = trajectory.points
        if len(points) < 3:
            return []

        turning_points: list[TrajectoryTurningPoint] = []
        for i in range(1, len(points) - 1):
            prev, curr, nxt = points[i - 1], points[i], points[i + 1]
            prev_diff = curr.mood_score - prev.mood_score
            next_diff = nxt.mood_score - curr.mood_score
            magnitude = abs(prev_diff) + abs(next_diff)

            if prev_diff * next_diff < 0:
                if magnitude < 2:
                    continue
                tp_type = _turning_point_type(prev, curr, nxt)
            elif prev_diff != 0 and next_diff != 0:
                acceleration = abs(next_diff / prev_diff - 1)
                if not (acceleration > 1.0 and magnitude > 2.0):
                    continue
                if prev_diff > 0 and next_diff > 0:
                    tp_type = TurningPointType.BREAKTHROUGH
                else:
                    tp_type = TurningPointType.SETBACK
            else:
                continue

            turning_points.append(
                TrajectoryTurningPoint(
                    timestamp=curr.timestamp,
                    type=tp_type,
                    magnitude=round(magnitude, 4),
                    description=_describe_turning_point(tp_type, curr.mood_score),
                    factors=_turning_point_factors(prev, curr, nxt),
                )
            )
        return turning_points


def _dominant_factor(factors: list[MoodFactor]) -> MoodFactor | None:
    """The factor pulling hardest away from neutral."""
    if not factors:
        return None

    def pull(factor: MoodFactor) -> float:
        score = factor.internal_score if factor.internal_score is not None else 5.0
        return factor.weight * abs(score - 5.0)

    return max(factors, key=pull)


def _turning_point_type(
    prev: TrajectoryPoint, curr: TrajectoryPoint, nxt: TrajectoryPoint
) -> TurningPointType:
    improving = nxt.mood_score > prev.mood_score
    if improving and prev.mood_score < 4 and nxt.mood_score > 6:
        return TurningPointType.BREAKTHROUGH
    if not improving and prev.mood_score > 6 and nxt.mood_score < 4:
        return TurningPointType.SETBACK
    if improving and curr.context and "support" in curr.context.lower():
        return TurningPointType.SUPPORT_RECEIVED
    return TurningPointType.REALIZATION


def _describe_turning_point(tp_type: TurningPointType, score: float) -> str:
    templates = {
        TurningPointType.BREAKTHROUGH: f"Emotional breakthrough with mood improving to {score}",
        TurningPointType.SETBACK: f"Emotional setback with mood declining to {score}",
        TurningPointType.REALIZATION: f"Emotional shift at mood level {score}",
        TurningPointType.SUPPORT_RECEIVED: f"Support received leading to mood improvement to {score}",
    }
    return templates[tp_type]


def _turning_point_factors(
    prev: TrajectoryPoint, curr: TrajectoryPoint, nxt: TrajectoryPoint
) -> list[str]:
    factors: list[str] = []
    new_emotions = [e for e in nxt.emotions if e not in prev.emotions]
    if new_emotions:
        factors.append(f"New emotions: {', '.join(new_emotions)}")
    if curr.context and curr.context != prev.context:
        factors.append(f"Context shift: {curr.context}")
    factors.append(f"Total mood change: {abs(nxt.mood_score - prev.mood_score):.1f} points")
    return factors
