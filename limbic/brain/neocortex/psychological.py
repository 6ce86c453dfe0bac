"""Psychological indicator features - coping, resilience, stress, growth.

Low-signal memories (minimal logistics, or neutral mood with neutral
content) produce no coping, resilience, stress or growth entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.models import (
    CopingMechanism,
    CopingMechanismType,
    ExtractedMemory,
    GrowthIndicator,
    GrowthIndicatorType,
    PsychologicalIndicatorFeatures,
    ResilienceIndicator,
    ResilienceIndicatorType,
    StressMarker,
    StressMarkerType,
)
from .rules import MemorySignals, matched_words

logger = logging.getLogger(__name__)

SUPPORT_WORDS = ("talking", "help", "support")
EFFECTIVE_WORDS = ("helped", "better")


@dataclass(frozen=True)
class StressKeywords:
    """A stress marker emitted when any of its words appear in the content."""

    type: StressMarkerType
    words: tuple[str, ...]
    intensity: float


STRESS_KEYWORDS = (
    StressKeywords(
        StressMarkerType.PERFORMANCE_ANXIETY, ("presentation", "interview", "performance"), 0.7
    ),
    StressKeywords(StressMarkerType.WORK_PRESSURE, ("work", "deadline", "project"), 0.6),
    StressKeywords(StressMarkerType.HEALTH_CONCERNS, ("health", "doctor", "medical"), 0.5),
    StressKeywords(StressMarkerType.LIFE_TRANSITIONS, ("change", "new", "transition"), 0.5),
)


class PsychologicalIndicatorExtractor:
    """Extracts the psychological dimension of a memory."""

    def extract(self, memory: ExtractedMemory) -> PsychologicalIndicatorFeatures:
        signals = MemorySignals.from_memory(memory)

        if signals.is_low_signal:
            logger.debug(f"Low-signal memory {memory.id}: no psychological indicators")
            coping, resilience, stress, growth = [], [], [], []
        else:
            coping = self.coping_mechanisms(signals)
            resilience = self.resilience_indicators(signals)
            stress = self.stress_markers(signals)
            growth = self.growth_indicators(signals)

        return PsychologicalIndicatorFeatures(
            coping_mechanisms=coping,
            resilience_indicators=resilience,
            stress_markers=stress,
            support_utilization=self.support_utilization(signals),
            emotional_regulation=self.emotional_regulation(signals),
            growth_indicators=growth,
        )

    def coping_mechanisms(self, signals: MemorySignals) -> list[CopingMechanism]:
        mechanisms = []
        if signals.has(*SUPPORT_WORDS):
            mechanisms.append(
                CopingMechanism(
                    type=CopingMechanismType.SUPPORT_SEEKING,
                    strength=0.8,
                    effectiveness=0.8 if signals.has(*EFFECTIVE_WORDS) else 0.5,
                )
            )
        if signals.has("solution", "plan", "strategy"):
            mechanisms.append(
                CopingMechanism(
                    type=CopingMechanismType.PROBLEM_SOLVING, strength=0.6, effectiveness=0.7
                )
            )
        if signals.is_improving and not signals.is_minimal:
            mechanisms.append(
                CopingMechanism(
                    type=CopingMechanismType.EMOTION_REGULATION,
                    strength=0.7,
                    effectiveness=0.8,
                )
            )
        if signals.has_theme("gratitude") or signals.has("learn", "understand"):
            mechanisms.append(
                CopingMechanism(
                    type=CopingMechanismType.MEANING_MAKING, strength=0.6, effectiveness=0.7
                )
            )
        if signals.has_theme("avoidance") or signals.has("avoid", "ignore"):
            mechanisms.append(
                CopingMechanism(
                    type=CopingMechanismType.AVOIDANCE, strength=0.4, effectiveness=0.3
                )
            )
        return mechanisms

    def resilience_indicators(self, signals: MemorySignals) -> list[ResilienceIndicator]:
        indicators = []
        support = matched_words(signals.content, SUPPORT_WORDS)
        if support:
            indicators.append(
                ResilienceIndicator(
                    type=ResilienceIndicatorType.SOCIAL_SUPPORT_UTILIZATION,
                    strength=0.8,
                    evidence=["seeking support from others", *support],
                )
            )
        if signals.is_improving and signals.first_turning_point_magnitude is not None:
            indicators.append(
                ResilienceIndicator(
                    type=ResilienceIndicatorType.EMOTIONAL_RECOVERY,
                    strength=0.7,
                    evidence=["mood recovered over the conversation"],
                )
            )
        if signals.has_theme("gratitude") or signals.has("perspective", "positive"):
            indicators.append(
                ResilienceIndicator(
                    type=ResilienceIndicatorType.ADAPTIVE_THINKING,
                    strength=0.6,
                    evidence=matched_words(signals.content, ("perspective", "positive")),
                )
            )
        growth_words = matched_words(signals.content, ("learn", "grow", "understand"))
        if growth_words:
            indicators.append(
                ResilienceIndicator(
                    type=ResilienceIndicatorType.GROWTH_MINDSET,
                    strength=0.6,
                    evidence=growth_words,
                )
            )
        return indicators

    def stress_markers(self, signals: MemorySignals) -> list[StressMarker]:
        markers = []
        for keywords in STRESS_KEYWORDS:
            found = matched_words(signals.content, keywords.words)
            if found:
                markers.append(
                    StressMarker(
                        type=keywords.type, intensity=keywords.intensity, indicators=found
                    )
                )
        # Themes, not content, carry relationship stress
        if signals.has_theme("relationship") and signals.has_theme("stress"):
            markers.append(
                StressMarker(
                    type=StressMarkerType.RELATIONSHIP_STRESS,
                    intensity=0.6,
                    indicators=["relationship", "stress"],
                )
            )
        return markers

    def support_utilization(self, signals: MemorySignals) -> float:
        utilization = 0.0
        if signals.has("talking", "help"):
            utilization += 0.4
        if signals.has("helped", "better", "calm"):
            utilization += 0.4
        patterns = signals.memory.emotional_analysis.patterns
        if any(p.type == "support_seeking" for p in patterns):
            utilization += 0.3
        return min(1.0, utilization)

    def emotional_regulation(self, signals: MemorySignals) -> float:
        regulation = 0.5
        if signals.is_improving:
            regulation += 0.3
        first_magnitude = signals.first_turning_point_magnitude
        if first_magnitude is not None and first_magnitude > 2:
            regulation += 0.2
        if signals.mood_confidence > 0.7:
            regulation += 0.1
        return min(1.0, regulation)

    def growth_indicators(self, signals: MemorySignals) -> list[GrowthIndicator]:
        indicators = []
        awareness = matched_words(signals.content, ("feeling", "realize", "understand"))
        if awareness:
            indicators.append(
                GrowthIndicator(
                    type=GrowthIndicatorType.EMOTIONAL_AWARENESS,
                    strength=0.7,
                    evidence=awareness,
                )
            )
        skills = matched_words(signals.content, ("communication", "talking", "express"))
        if skills:
            indicators.append(
                GrowthIndicator(
                    type=GrowthIndicatorType.RELATIONSHIP_SKILLS,
                    strength=0.6,
                    evidence=skills,
                )
            )
        if signals.is_improving and signals.has("help"):
            indicators.append(
                GrowthIndicator(
                    type=GrowthIndicatorType.COPING_IMPROVEMENT,
                    strength=0.7,
                    evidence=["mood improved with help"],
                )
            )
        significance = signals.memory.emotional_analysis.trajectory.significance
        if significance > 0.7 and signals.is_improving:
            indicators.append(
                GrowthIndicator(
                    type=GrowthIndicatorType.RESILIENCE_BUILDING,
                    strength=0.8,
                    evidence=["significant improving trajectory"],
                )
            )
        return indicators
