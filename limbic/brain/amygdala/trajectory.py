"""Emotional trajectory construction.

Turns a conversation into one mood point per message, then summarises the
curve: overall direction, local turning points and a 0-1 significance.
"""

from __future__ import annotations

import logging

import numpy as np

from ...domain.models import (
    Conversation,
    EmotionalTrajectory,
    TrajectoryDirection,
    TrajectoryPoint,
    TrajectoryTurningPoint,
    TurningPointType,
)
from .lexicon import EmotionalLexicon

logger = logging.getLogger(__name__)

# (lower bound, emotions) checked top-down
_EMOTION_BANDS: list[tuple[float, list[str]]] = [
    (8.5, ["joyful", "positive"]),
    (7.5, ["excited", "enthusiastic"]),
    (6.5, ["content", "satisfied"]),
    (5.0, ["neutral", "calm"]),
    (4.0, ["concerned", "uncertain"]),
    (3.0, ["frustrated", "troubled"]),
    (2.0, ["sad", "disappointed"]),
]


def emotions_for_score(score: float) -> list[str]:
    """Emotion labels for a mood score."""
    for lower, emotions in _EMOTION_BANDS:
        if score >= lower:
            return list(emotions)
    return ["distressed", "struggling"]


def population_variance(values: list[float]) -> float:
    """Population variance, 0.0 for an empty list."""
    if not values:
        return 0.0
    return float(np.var(values))


class TrajectoryBuilder:
    """Builds and summarises emotional trajectories."""

    TURNING_POINT_MAGNITUDE = 2.0
    SHORT_TRAJECTORY_SIGNIFICANCE = 0.3

    def __init__(self, lexicon: EmotionalLexicon | None = None) -> None:
        self.lexicon = lexicon or EmotionalLexicon()

    def build(self, conversation: Conversation) -> EmotionalTrajectory:
        """Build a trajectory with one point per non-empty message."""
        points: list[TrajectoryPoint] = []
        for message in conversation.messages:
            if not message.content.strip():
                continue
            mood = self.lexicon.message_mood(message.content)
            score = 5.0 if mood is None else round(mood, 2)
            points.append(
                TrajectoryPoint(
                    timestamp=message.timestamp,
                    mood_score=score,
                    emotions=emotions_for_score(score),
                    message_id=message.id,
                    context=message.content[:80],
                )
            )
        return self.summarise(points)

    def summarise(self, points: list[TrajectoryPoint]) -> EmotionalTrajectory:
        """Compute direction, turning points and significance for points."""
        if len(points) < 2:
            return EmotionalTrajectory(
                points=list(points),
                direction=TrajectoryDirection.STABLE,
                significance=self.SHORT_TRAJECTORY_SIGNIFICANCE,
                turning_points=[],
            )

        ordered = sorted(points, key=lambda p: p.timestamp)
        direction = self.determine_direction(ordered)
        turning_points = self.find_turning_points(ordered)
        significance = self.calculate_significance(ordered, turning_points)

        logger.debug(
            f"Trajectory of {len(ordered)} points: {direction.value}, "
            f"{len(turning_points)} turning points"
        )
        return EmotionalTrajectory(
            points=ordered,
            direction=direction,
            significance=significance,
            turning_points=turning_points,
        )

    @staticmethod
    def determine_direction(points: list[TrajectoryPoint]) -> TrajectoryDirection:
        """Compare the mean of the second half against the first half."""
        if len(points) < 2:
            return TrajectoryDirection.STABLE

        scores = [p.mood_score for p in points]
        half = len(scores) // 2
        difference = float(np.mean(scores[half:]) - np.mean(scores[:half]))

        if population_variance(scores) > 2:
            return TrajectoryDirection.VOLATILE
        if difference > 1:
            return TrajectoryDirection.IMPROVING
        if difference < -1:
            return TrajectoryDirection.DECLINING
        return TrajectoryDirection.STABLE

    def find_turning_points(
        self, points: list[TrajectoryPoint]
    ) -> list[TrajectoryTurningPoint]:
        """Local extrema whose combined rise and fall exceeds the threshold."""
        turning_points: list[TrajectoryTurningPoint] = []
        for i in range(1, len(points) - 1):
            prev = points[i - 1].mood_score
            curr = points[i].mood_score
            nxt = points[i + 1].mood_score

            is_peak = curr > prev and curr > nxt
            is_trough = curr < prev and curr < nxt
            if not (is_peak or is_trough):
                continue

            magnitude = abs(curr - prev) + abs(curr - nxt)
            if magnitude <= self.TURNING_POINT_MAGNITUDE:
                continue

            if is_trough:
                tp_type = TurningPointType.SETBACK
                description = f"Mood dipped to {curr} before recovering"
            else:
                tp_type = TurningPointType.BREAKTHROUGH
                description = f"Mood peaked at {curr}"

            turning_points.append(
                TrajectoryTurningPoint(
                    timestamp=points[i].timestamp,
                    type=tp_type,
                    magnitude=round(magnitude, 4),
                    description=description,
                    factors=["mood_change"],
                )
            )
        return turning_points

    @staticmethod
    def calculate_significance(
        points: list[TrajectoryPoint],
        turning_points: list[TrajectoryTurningPoint],
    ) -> float:
        """Blend of range, volatility and turning point density (0-1)."""
        if not points:
            return 0.0
        scores = [p.mood_score for p in points]
        range_factor = min((max(scores) - min(scores)) / 10, 1.0)
        volatility_factor = min(population_variance(scores) / 5, 1.0)
        turning_point_factor = min(len(turning_points) / len(points), 1.0)
        return round(
            range_factor * 0.4 + volatility_factor * 0.3 + turning_point_factor * 0.3,
            4,
        )
