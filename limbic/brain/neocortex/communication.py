"""Communication style features."""

from __future__ import annotations

import logging

from ...domain.models import (
    CommunicationStyleFeatures,
    CopingCommunicationStyle,
    ExtractedMemory,
    LinguisticPattern,
    LinguisticPatternType,
    SupportSeekingStyle,
)
from .rules import MemorySignals, Rule, count_matches, first_match, matched_words

logger = logging.getLogger(__name__)

# (pattern, words, presence threshold)
LINGUISTIC_PATTERNS: tuple[tuple[LinguisticPatternType, tuple[str, ...], float], ...] = (
    (
        LinguisticPatternType.EMOTIONAL_EXPRESSION,
        ("feeling", "felt", "emotions", "anxious", "happy", "sad", "worried"),
        0.2,
    ),
    (
        LinguisticPatternType.GRATITUDE_EXPRESSION,
        ("thank", "grateful", "appreciate", "helped", "support"),
        0.1,
    ),
    (
        LinguisticPatternType.VULNERABILITY_SHARING,
        ("anxious", "worried", "stressed", "struggling", "difficult", "scared"),
        0.2,
    ),
    (
        LinguisticPatternType.SUPPORT_LANGUAGE,
        ("help", "support", "listen", "understand", "comfort", "advice"),
        0.1,
    ),
    (
        LinguisticPatternType.STRESS_LANGUAGE,
        ("pressure", "overwhelmed", "deadline", "performance", "interview", "presentation"),
        0.1,
    ),
)

SUPPORT_SEEKING_RULES: tuple[Rule[SupportSeekingStyle], ...] = (
    Rule(lambda s: s.has("help", "advice", "what should"), SupportSeekingStyle.DIRECT_VERBAL),
    Rule(
        lambda s: s.has("feeling", "emotions", "anxious"),
        SupportSeekingStyle.EMOTIONAL_EXPRESSION,
    ),
    Rule(lambda s: s.has("problem", "issue", "struggle"), SupportSeekingStyle.PROBLEM_SHARING),
    Rule(
        lambda s: s.has("difficult", "challenging", "overwhelmed"),
        SupportSeekingStyle.INDIRECT_HINT,
    ),
)

COPING_RULES: tuple[Rule[CopingCommunicationStyle], ...] = (
    Rule(
        lambda s: s.has("talking", "help", "support"),
        CopingCommunicationStyle.SUPPORT_SEEKING,
    ),
    Rule(
        lambda s: s.has_marker("frustrated", "angry", "upset"),
        CopingCommunicationStyle.EMOTIONAL_VENTING,
    ),
    Rule(
        lambda s: s.has("solution", "plan", "strategy"),
        CopingCommunicationStyle.PROBLEM_SOLVING,
    ),
    Rule(
        lambda s: s.has("fine", "okay", "not a big deal"),
        CopingCommunicationStyle.MINIMIZATION,
    ),
    Rule(
        lambda s: s.has("rather not", "prefer not", "difficult to"),
        CopingCommunicationStyle.AVOIDANCE,
    ),
)


class CommunicationStyleExtractor:
    """Extracts how the author communicates about what happened."""

    PATTERN_WORD_WEIGHT = 0.25

    VULNERABILITY_WORDS = ("anxious", "worried", "scared", "struggling", "difficult")
    PERSONAL_PHRASES = ("i feel", "i was", "i am", "my", "me")
    INTIMACY_INDICATORS = (
        "always",
        "exactly what to say",
        "knows me",
        "comfortable",
        "trust",
    )

    DEFAULT_CONNECTION = 0.3

    def extract(self, memory: ExtractedMemory) -> CommunicationStyleFeatures:
        signals = MemorySignals.from_memory(memory)
        return CommunicationStyleFeatures(
            linguistic_patterns=self.linguistic_patterns(signals),
            emotional_openness=self.emotional_openness(signals),
            support_seeking_style=first_match(
                SUPPORT_SEEKING_RULES, signals, SupportSeekingStyle.MINIMAL_SEEKING
            ),
            coping_communication=first_match(
                COPING_RULES, signals, CopingCommunicationStyle.SUPPORT_SEEKING
            ),
            relationship_intimacy=self.relationship_intimacy(signals),
        )

    def linguistic_patterns(self, signals: MemorySignals) -> list[LinguisticPattern]:
        patterns = []
        for pattern_type, words, threshold in LINGUISTIC_PATTERNS:
            found = matched_words(signals.content, words)
            strength = min(1.0, len(found) * self.PATTERN_WORD_WEIGHT)
            if strength > threshold:
                patterns.append(
                    LinguisticPattern(type=pattern_type, strength=strength, indicators=found)
                )
        return patterns

    def emotional_openness(self, signals: MemorySignals) -> float:
        openness = (
            count_matches(signals.content, self.VULNERABILITY_WORDS) * 0.2
            + count_matches(signals.content, self.PERSONAL_PHRASES) * 0.15
            + len(signals.markers) * 0.1
        )
        return min(1.0, openness)

    def relationship_intimacy(self, signals: MemorySignals) -> float:
        dynamics = signals.memory.relationship_dynamics
        intimacy = dynamics.connection_strength or self.DEFAULT_CONNECTION

        if signals.communication_pattern == "intimate":
            intimacy += 0.2
        elif signals.communication_pattern == "supportive":
            intimacy += 0.1

        intimacy += count_matches(signals.content, self.INTIMACY_INDICATORS) * 0.1
        return min(1.0, intimacy)
