"""Ordered keyword rules shared by the feature extractors.

Every keyword-driven choice is a tuple of Rule entries evaluated top to
bottom; the first predicate that holds wins. Matching is plain
lower-cased substring containment.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from ...domain.models import ExtractedMemory, TrajectoryDirection

T = TypeVar("T")

# Content that reads like logistics rather than feeling
NEUTRAL_CONTENT_INDICATORS = (
    "discussed",
    "agreed",
    "meeting",
    "timeline",
    "project",
    "next steps",
)

MINIMAL_CONTENT_INDICATORS = ("meeting", "3pm", "scheduled", "timeline", "project")
MINIMAL_CONTENT_LENGTH = 30

# |score - 5| below this is a neutral mood
NEUTRAL_MOOD_BAND = 0.5


def contains_any(text: str, words: Iterable[str]) -> bool:
    return any(word in text for word in words)


def count_matches(text: str, words: Iterable[str]) -> int:
    """Number of words that occur in text (each word counted once)."""
    return sum(1 for word in words if word in text)


def matched_words(text: str, words: Iterable[str]) -> list[str]:
    return [word for word in words if word in text]


@dataclass(frozen=True)
class Rule(Generic[T]):
    """A predicate and the result it selects."""

    predicate: Callable[[MemorySignals], bool]
    result: T


def first_match(rules: Sequence[Rule[T]], signals: MemorySignals, default: T) -> T:
    for rule in rules:
        if rule.predicate(signals):
            return rule.result
    return default


@dataclass(frozen=True)
class MemorySignals:
    """Lower-cased views of a memory that the rules test against."""

    memory: ExtractedMemory
    content: str
    markers: tuple[str, ...]
    themes: tuple[str, ...]

    @classmethod
    def from_memory(cls, memory: ExtractedMemory) -> MemorySignals:
        context = memory.emotional_context
        return cls(
            memory=memory,
            content=memory.content.lower(),
            markers=tuple(w.lower() for w in context.indicators.emotional_words),
            themes=tuple(t.lower() for t in context.themes),
        )

    def has(self, *words: str) -> bool:
        return contains_any(self.content, words)

    def has_marker(self, *words: str) -> bool:
        return any(m in words for m in self.markers)

    def has_theme(self, *themes: str) -> bool:
        return any(t in themes for t in self.themes)

    @property
    def mood_score(self) -> float:
        return self.memory.emotional_analysis.mood_scoring.score

    @property
    def mood_confidence(self) -> float:
        return self.memory.emotional_analysis.mood_scoring.confidence

    @property
    def is_neutral_mood(self) -> bool:
        return abs(self.mood_score - 5.0) < NEUTRAL_MOOD_BAND

    @property
    def has_neutral_content(self) -> bool:
        return contains_any(self.content, NEUTRAL_CONTENT_INDICATORS)

    @property
    def is_minimal(self) -> bool:
        return len(self.content) < MINIMAL_CONTENT_LENGTH and contains_any(
            self.content, MINIMAL_CONTENT_INDICATORS
        )

    @property
    def is_low_signal(self) -> bool:
        return self.is_minimal or (self.is_neutral_mood and self.has_neutral_content)

    @property
    def is_improving(self) -> bool:
        direction = self.memory.emotional_analysis.trajectory.direction
        return direction == TrajectoryDirection.IMPROVING

    @property
    def first_turning_point_magnitude(self) -> float | None:
        points = self.memory.emotional_analysis.trajectory.turning_points
        return points[0].magnitude if points else None

    @property
    def communication_pattern(self) -> str:
        return self.memory.relationship_dynamics.communication_pattern.lower()
