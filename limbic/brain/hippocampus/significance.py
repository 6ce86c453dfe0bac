"""Delta Significance - prioritising emotional changes.

Significance blends four things:
- Type: repairs matter more than declines, which matter more than
  celebrations and plateaus
- Magnitude: how far the mood moved
- Confidence: how sure the detector was
- Temporal position: changes that open or close a conversation carry
  more weight than those in the middle

Pattern and turning point significance are capped at 10; individual
delta significance is not capped so the orderings above always hold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.models import (
    DeltaTemporalContext,
    DeltaType,
    MoodDelta,
    TemporalPosition,
    TurningPointContext,
    TurningPointInput,
    TurningPointType,
)

logger = logging.getLogger(__name__)


@dataclass
class SignificanceWeights:
    """Weight tables for significance scoring."""

    # Delta type weights
    mood_repair: float = 1.5
    decline: float = 1.3
    celebration: float = 1.2
    plateau: float = 0.8

    # Temporal position weights
    conclusion: float = 1.3
    early: float = 1.2
    middle: float = 1.0

    # Turning point type weights
    breakthrough: float = 2.0
    setback: float = 1.8
    support_received: float = 1.5
    realization: float = 1.2

    # Pattern scoring
    pattern_multiplier: float = 2.0
    significance_cap: float = 10.0

    def __post_init__(self) -> None:
        """Validate the weight orderings."""
        if not (self.mood_repair > self.decline > self.celebration > self.plateau):
            raise ValueError(
                "Type weights must be ordered mood_repair > decline > "
                "celebration > plateau"
            )
        if not (self.conclusion > self.early > self.middle):
            raise ValueError(
                "Position weights must be ordered conclusion > early > middle"
            )
        if self.breakthrough <= self.realization:
            raise ValueError("Breakthrough must outweigh realization")


class DeltaSignificanceEngine:
    """Annotates deltas with sequence, temporal context and significance."""

    def __init__(self, weights: SignificanceWeights | None = None) -> None:
        self.weights = weights or SignificanceWeights()

    # =========================================================================
    # Weight lookups
    # =========================================================================

    def type_weight(self, delta_type: DeltaType) -> float:
        return {
            DeltaType.MOOD_REPAIR: self.weights.mood_repair,
            DeltaType.DECLINE: self.weights.decline,
            DeltaType.CELEBRATION: self.weights.celebration,
            DeltaType.PLATEAU: self.weights.plateau,
        }[delta_type]

    def position_weight(self, position: TemporalPosition) -> float:
        return {
            TemporalPosition.CONCLUSION: self.weights.conclusion,
            TemporalPosition.EARLY: self.weights.early,
            TemporalPosition.MIDDLE: self.weights.middle,
        }[position]

    def turning_point_weight(self, tp_type: TurningPointType) -> float:
        return {
            TurningPointType.BREAKTHROUGH: self.weights.breakthrough,
            TurningPointType.SETBACK: self.weights.setback,
            TurningPointType.SUPPORT_RECEIVED: self.weights.support_received,
            TurningPointType.REALIZATION: self.weights.realization,
        }[tp_type]

    # =========================================================================
    # Deltas
    # =========================================================================

    @staticmethod
    def temporal_position(index: int, total: int) -> TemporalPosition:
        """First (or only) delta is early, last is conclusion, rest middle."""
        if index == 0 or total <= 1:
            return TemporalPosition.EARLY
        if index == total - 1:
            return TemporalPosition.CONCLUSION
        return TemporalPosition.MIDDLE

    def delta_significance(self, delta: MoodDelta, position: TemporalPosition) -> float:
        """type_weight * magnitude * confidence * position_weight."""
        return (
            self.type_weight(delta.type)
            * delta.magnitude
            * delta.confidence
            * self.position_weight(position)
        )

    def annotate(self, deltas: list[MoodDelta], duration_ms: int) -> list[MoodDelta]:
        """Return copies of deltas with their derived fields filled in.

        Args:
            deltas: Deltas in conversation order.
            duration_ms: Conversation length used to spread relative
                timestamps; each delta sits at floor(i * duration / n).

        Returns:
            New MoodDelta instances; the inputs are not modified.
        """
        total = len(deltas)
        duration_ms = max(0, duration_ms)
        annotated: list[MoodDelta] = []

        for index, delta in enumerate(deltas):
            position = self.temporal_position(index, total)
            context = DeltaTemporalContext(
                position=position,
                preceding_deltas=index,
                following_deltas=total - index - 1,
                relative_timestamp=index * duration_ms // total,
            )
            annotated.append(
                delta.model_copy(
                    update={
                        "delta_sequence": index,
                        "temporal_context": context,
                        "significance": self.delta_significance(delta, position),
                    }
                )
            )

        logger.debug(f"Annotated {total} deltas over {duration_ms}ms")
        return annotated

    # =========================================================================
    # Patterns and turning points
    # =========================================================================

    def pattern_significance(self, delta_count: int, average_magnitude: float) -> float:
        """min(10, average_magnitude * delta_count * 2.0)."""
        return min(
            self.weights.significance_cap,
            average_magnitude * delta_count * self.weights.pattern_multiplier,
        )

    @staticmethod
    def pattern_confidence(delta_count: int, average_magnitude: float) -> float:
        """0.7 + min(0.2, 0.05n) + min(0.1, 0.02m), capped at 1."""
        confidence = (
            0.7 + min(0.2, 0.05 * delta_count) + min(0.1, 0.02 * average_magnitude)
        )
        return round(min(1.0, confidence), 6)

    def turning_point_significance(
        self, turning_point: TurningPointInput, context: TurningPointContext
    ) -> float:
        """magnitude * type_weight, amplified by surrounding change, capped at 10."""
        surrounding = context.preceding_magnitude + context.following_magnitude
        context_factor = min(2.0, 1.0 + 0.1 * surrounding)
        significance = (
            turning_point.magnitude
            * self.turning_point_weight(turning_point.type)
            * context_factor
        )
        return min(self.weights.significance_cap, significance)
