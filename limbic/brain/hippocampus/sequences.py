"""Delta sequences - patterns and turning points over stored deltas."""

from __future__ import annotations

import logging

import numpy as np

from ...domain.models import (
    DeltaDirection,
    DeltaPatternInput,
    DeltaPatternType,
    DeltaType,
    StoredMoodDelta,
    TemporalPosition,
    TurningPointContext,
    TurningPointInput,
    TurningPointType,
)

logger = logging.getLogger(__name__)


def _span_ms(deltas: list[StoredMoodDelta]) -> int:
    if len(deltas) < 2:
        return 0
    return max(0, int((deltas[-1].detected_at - deltas[0].detected_at).total_seconds() * 1000))


class DeltaPatternDetector:
    """Groups consecutive deltas into recovery, decline, oscillation and
    plateau-break patterns.
    """

    def __init__(
        self,
        min_run_length: int = 2,
        min_oscillation_length: int = 3,
        plateau_break_magnitude: float = 2.0,
    ) -> None:
        self.min_run_length = min_run_length
        self.min_oscillation_length = min_oscillation_length
        self.plateau_break_magnitude = plateau_break_magnitude

    def detect(self, deltas: list[StoredMoodDelta]) -> list[DeltaPatternInput]:
        """Detect patterns in deltas ordered by sequence."""
        ordered = sorted(deltas, key=lambda d: d.delta_sequence)
        patterns: list[DeltaPatternInput] = []
        patterns.extend(self._directional_runs(ordered, DeltaDirection.POSITIVE))
        patterns.extend(self._directional_runs(ordered, DeltaDirection.NEGATIVE))
        patterns.extend(self._oscillations(ordered))
        patterns.extend(self._plateau_breaks(ordered))
        logger.debug(f"Detected {len(patterns)} delta patterns in {len(ordered)} deltas")
        return patterns

    def _directional_runs(
        self, deltas: list[StoredMoodDelta], direction: DeltaDirection
    ) -> list[DeltaPatternInput]:
        pattern_type = (
            DeltaPatternType.RECOVERY_SEQUENCE
            if direction == DeltaDirection.POSITIVE
            else DeltaPatternType.DECLINE_SEQUENCE
        )
        label = "improvements" if direction == DeltaDirection.POSITIVE else "declines"

        runs: list[list[StoredMoodDelta]] = []
        current: list[StoredMoodDelta] = []
        for delta in deltas:
            if delta.direction == direction:
                current.append(delta)
                continue
            if len(current) >= self.min_run_length:
                runs.append(current)
            current = []
        if len(current) >= self.min_run_length:
            runs.append(current)

        return [
            self._build(pattern_type, run, f"{len(run)} consecutive {label}")
            for run in runs
        ]

    def _oscillations(self, deltas: list[StoredMoodDelta]) -> list[DeltaPatternInput]:
        runs: list[list[StoredMoodDelta]] = []
        current: list[StoredMoodDelta] = []
        for delta in deltas:
            if delta.direction == DeltaDirection.NEUTRAL:
                if len(current) >= self.min_oscillation_length:
                    runs.append(current)
                current = []
                continue
            if current and current[-1].direction == delta.direction:
                if len(current) >= self.min_oscillation_length:
                    runs.append(current)
                current = [delta]
                continue
            current.append(delta)
        if len(current) >= self.min_oscillation_length:
            runs.append(current)

        return [
            self._build(
                DeltaPatternType.OSCILLATION,
                run,
                f"Mood alternated direction {len(run)} times",
            )
            for run in runs
        ]

    def _plateau_breaks(self, deltas: list[StoredMoodDelta]) -> list[DeltaPatternInput]:
        patterns: list[DeltaPatternInput] = []
        for plateau, breaker in zip(deltas, deltas[1:]):
            if plateau.type != DeltaType.PLATEAU or breaker.type == DeltaType.PLATEAU:
                continue
            if breaker.magnitude < self.plateau_break_magnitude:
                continue
            patterns.append(
                self._build(
                    DeltaPatternType.PLATEAU_BREAK,
                    [plateau, breaker],
                    f"Plateau broken by {breaker.type.value}",
                )
            )
        return patterns

    @staticmethod
    def _build(
        pattern_type: DeltaPatternType,
        run: list[StoredMoodDelta],
        description: str,
    ) -> DeltaPatternInput:
        return DeltaPatternInput(
            pattern_type=pattern_type,
            delta_ids=[d.id for d in run],
            description=description,
            duration=_span_ms(run),
            average_magnitude=round(float(np.mean([d.magnitude for d in run])), 4),
        )


class TurningPointDetector:
    """Promotes high-magnitude deltas to turning points."""

    def __init__(self, magnitude_threshold: float = 2.5) -> None:
        self.magnitude_threshold = magnitude_threshold

    def classify(self, delta: StoredMoodDelta) -> TurningPointType | None:
        """Turning point type for a delta, or None if it is not one."""
        if delta.direction == DeltaDirection.NEUTRAL:
            return None
        if delta.magnitude < self.magnitude_threshold:
            return None
        if delta.type == DeltaType.MOOD_REPAIR:
            if delta.previous_score < 4 and delta.current_score > 6:
                return TurningPointType.BREAKTHROUGH
            return TurningPointType.SUPPORT_RECEIVED
        if delta.type == DeltaType.DECLINE:
            return TurningPointType.SETBACK
        if delta.type == DeltaType.CELEBRATION:
            return TurningPointType.BREAKTHROUGH
        return None

    def detect(
        self, deltas: list[StoredMoodDelta]
    ) -> list[tuple[TurningPointInput, TurningPointContext, str]]:
        """Return (turning point, context, originating delta id) triples."""
        ordered = sorted(deltas, key=lambda d: d.delta_sequence)
        results: list[tuple[TurningPointInput, TurningPointContext, str]] = []

        for i, delta in enumerate(ordered):
            tp_type = self.classify(delta)
            if tp_type is None:
                continue

            before = ordered[i - 1] if i > 0 else None
            after = ordered[i + 1] if i + 1 < len(ordered) else None
            window = [d for d in (before, delta, after) if d is not None]

            turning_point = TurningPointInput(
                type=tp_type,
                magnitude=delta.magnitude,
                description=(
                    f"{tp_type.value.replace('_', ' ').capitalize()}: mood moved "
                    f"from {delta.previous_score} to {delta.current_score}"
                ),
                factors=list(delta.factors),
                timestamp=delta.detected_at,
            )
            context = TurningPointContext(
                position=(
                    delta.temporal_context.position
                    if delta.temporal_context
                    else TemporalPosition.MIDDLE
                ),
                preceding_magnitude=before.magnitude if before else 0.0,
                following_magnitude=after.magnitude if after else 0.0,
                context_duration=_span_ms(window),
            )
            results.append((turning_point, context, delta.id))

        logger.debug(f"Detected {len(results)} turning points in {len(ordered)} deltas")
        return results
