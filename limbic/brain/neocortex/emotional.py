"""Emotional tone features - sentiment, intensity, variance and stability."""

from __future__ import annotations

import logging

from ...domain.models import EmotionalToneFeatures, ExtractedMemory
from .rules import MemorySignals, count_matches

logger = logging.getLogger(__name__)


class EmotionalToneExtractor:
    """Extracts the emotional tone dimension of a memory."""

    POSITIVE_WORDS = (
        "grateful",
        "happy",
        "better",
        "calm",
        "supported",
        "confident",
        "proud",
        "excited",
        "joy",
    )
    NEGATIVE_WORDS = (
        "anxious",
        "worried",
        "stressed",
        "sad",
        "frustrated",
        "angry",
        "disappointed",
    )
    ANXIETY_WORDS = ("anxious", "worried", "nervous", "stressed", "overwhelmed", "panic")
    GRATITUDE_WORDS = ("grateful", "thankful", "appreciate", "thank", "blessed")

    MIXED_THEMES = ("mixed", "complex", "conflicted")

    WORD_WEIGHT = 0.2
    MIXED_PRESENCE = 0.7
    MIXED_THRESHOLD = 0.3

    def extract(self, memory: ExtractedMemory) -> EmotionalToneFeatures:
        signals = MemorySignals.from_memory(memory)
        mood = memory.emotional_analysis.mood_scoring

        features = EmotionalToneFeatures(
            sentiment_vector=self.sentiment_vector(signals),
            emotional_intensity=self.intensity(signals),
            emotional_variance=self.variance(signals),
            mood_score=mood.score,
            emotional_descriptors=list(mood.descriptors),
            emotional_stability=self.stability(signals),
        )
        logger.debug(f"Emotional tone for {memory.id}: {features.sentiment_vector}")
        return features

    def sentiment_vector(self, signals: MemorySignals) -> list[float]:
        """[positive, negative, anxiety, gratitude, mixed] presences.

        A lexicon word also listed among the memory's emotional words or
        themes is counted a second time when it appears in the content.
        """
        signal_words = signals.markers + signals.themes

        def presence(words: tuple[str, ...]) -> float:
            extended = list(words) + [w for w in signal_words if w in words]
            return min(1.0, count_matches(signals.content, extended) * self.WORD_WEIGHT)

        positive = presence(self.POSITIVE_WORDS)
        negative = presence(self.NEGATIVE_WORDS)
        mixed = (
            self.MIXED_PRESENCE
            if positive > self.MIXED_THRESHOLD and negative > self.MIXED_THRESHOLD
            else 0.0
        )
        return [
            positive,
            negative,
            presence(self.ANXIETY_WORDS),
            presence(self.GRATITUDE_WORDS),
            mixed,
        ]

    def intensity(self, signals: MemorySignals) -> float:
        base = signals.memory.emotional_context.intensity
        intensity = base * signals.mood_confidence * (1 + 0.1 * len(signals.themes))

        if signals.is_neutral_mood and signals.has_neutral_content:
            intensity *= 0.3
        elif signals.is_neutral_mood:
            intensity *= 0.5

        return min(1.0, intensity)

    def variance(self, signals: MemorySignals) -> float:
        variance = 0.5 if signals.has_theme(*self.MIXED_THEMES) else 0.0

        points = signals.memory.emotional_analysis.trajectory.points
        if points:
            trajectory_variance = abs(points[-1].mood_score - points[0].mood_score) / 10
            if signals.is_neutral_mood:
                trajectory_variance *= 0.1
            variance += trajectory_variance

        theme_variance = 0.3 if len(signals.themes) > 2 else 0.1
        if signals.is_neutral_mood and signals.themes:
            theme_variance *= 0.2
        variance += theme_variance

        return min(1.0, variance)

    def stability(self, signals: MemorySignals) -> float:
        neutral = signals.is_neutral_mood
        stability = 0.85 if neutral else 0.8

        first_magnitude = signals.first_turning_point_magnitude
        if first_magnitude is not None:
            stability -= 0.03 if neutral else min(0.4, first_magnitude / 10)

        if signals.has_theme(*self.MIXED_THEMES) and not neutral:
            stability -= 0.2

        return max(0.0, min(1.0, stability))
