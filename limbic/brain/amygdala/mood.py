"""Mood Scoring.

Combines five rule-based factors into a single mood score (0-10):

- sentiment_analysis: emotional keyword valence per message
- psychological_indicators: coping, growth and distress phrases
- relationship_context: support and conflict phrases
- conversational_flow: participation, pacing and trajectory shape
- historical_baseline: the author's prior mood, if known

Each factor produces its own internal score; the final score is their
weighted mean and the confidence reflects evidence volume and how much
the factors agree with each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from pydantic import ValidationError as PydanticValidationError

from ...domain.exceptions import ValidationError
from ...domain.models import (
    Conversation,
    ConversationMessage,
    EmotionalTrajectory,
    FactorType,
    MoodAnalysisResult,
    MoodFactor,
    TrajectoryDirection,
)
from .lexicon import EmotionalLexicon
from .trajectory import TrajectoryBuilder, population_variance

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 5.0
DEGENERATE_CONFIDENCE = 0.1
MAX_EVIDENCE = 5
MAX_DESCRIPTORS = 5


@dataclass
class MoodFactorWeights:
    """Weights for the five mood factors."""

    sentiment: float = 0.35
    psychological: float = 0.25
    relationship: float = 0.20
    conversational_flow: float = 0.15
    historical_baseline: float = 0.05

    def __post_init__(self) -> None:
        """Validate weights sum to 1.0."""
        total = (
            self.sentiment
            + self.psychological
            + self.relationship
            + self.conversational_flow
            + self.historical_baseline
        )
        if not (0.99 <= total <= 1.01):
            raise ValueError(f"Weights must sum to 1.0, got {total}")

    def for_type(self, factor_type: FactorType) -> float:
        return {
            FactorType.SENTIMENT_ANALYSIS: self.sentiment,
            FactorType.PSYCHOLOGICAL_INDICATORS: self.psychological,
            FactorType.RELATIONSHIP_CONTEXT: self.relationship,
            FactorType.CONVERSATIONAL_FLOW: self.conversational_flow,
            FactorType.HISTORICAL_BASELINE: self.historical_baseline,
        }[factor_type]


# (lower bound, descriptors) checked top-down
_SCORE_DESCRIPTORS: list[tuple[float, list[str]]] = [
    (8.0, ["positive", "uplifted"]),
    (6.5, ["content", "stable"]),
    (4.5, ["neutral", "balanced"]),
    (3.0, ["concerned", "unsettled"]),
]


def descriptors_for_score(score: float) -> list[str]:
    """Base mood descriptors for a score."""
    for lower, descriptors in _SCORE_DESCRIPTORS:
        if score >= lower:
            return list(descriptors)
    return ["distressed", "struggling"]


def parse_conversation(conversation: Conversation | dict[str, Any]) -> Conversation:
    """Validate conversation input once at the boundary.

    Raises:
        ValidationError: If the input does not describe a conversation.
    """
    if isinstance(conversation, Conversation):
        return conversation
    try:
        return Conversation.model_validate(conversation)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid conversation: {e}") from e


class MoodScoringAnalyzer:
    """Computes mood scores from conversation transcripts.

    Pure and deterministic: the same conversation always produces the
    same result.
    """

    def __init__(
        self,
        weights: MoodFactorWeights | None = None,
        lexicon: EmotionalLexicon | None = None,
        trajectory_builder: TrajectoryBuilder | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            weights: Factor weights. Defaults to MoodFactorWeights().
            lexicon: Keyword tables. Defaults to EmotionalLexicon().
            trajectory_builder: Used by the conversational flow factor.
        """
        self.weights = weights or MoodFactorWeights()
        self.lexicon = lexicon or EmotionalLexicon()
        self.trajectory_builder = trajectory_builder or TrajectoryBuilder(self.lexicon)

    # =========================================================================
    # Public API
    # =========================================================================

    def analyze_conversation(
        self, conversation: Conversation | dict[str, Any]
    ) -> MoodAnalysisResult:
        """Score the mood of a conversation.

        Args:
            conversation: A Conversation or a dict in the conversation format.

        Returns:
            MoodAnalysisResult with score, confidence, descriptors and all
            five factors.

        Raises:
            ValidationError: If the input is malformed or a factor cannot be
                scored.
        """
        conv = parse_conversation(conversation)
        messages = [m for m in conv.messages if m.content.strip()]

        if not messages:
            logger.warning(
                f"Conversation {conv.id} has no content, returning neutral baseline"
            )
            return self._neutral_baseline()

        try:
            factors = [
                self._analyze_sentiment(messages),
                self._analyze_psychological_indicators(messages),
                self._analyze_relationship_context(messages),
                self._analyze_conversational_flow(conv, messages),
                self._analyze_historical_baseline(conv),
            ]
        except PydanticValidationError as e:
            raise ValidationError(f"Mood factor produced no usable score: {e}") from e

        score = self._combine_scores(factors)
        confidence = self._calculate_confidence(factors)
        descriptors = self._generate_descriptors(score, factors)

        logger.debug(
            f"Mood analysis for {conv.id}: score={score}, confidence={confidence}"
        )
        return MoodAnalysisResult(
            score=score,
            confidence=confidence,
            descriptors=descriptors,
            factors=factors,
        )

    def calculate_message_mood(self, content: str) -> float:
        """Mood (0-10) of a single message; neutral when no emotional words."""
        mood = self.lexicon.message_mood(content)
        return NEUTRAL_SCORE if mood is None else mood

    def build_trajectory(
        self, conversation: Conversation | dict[str, Any]
    ) -> EmotionalTrajectory:
        """Build the per-message emotional trajectory of a conversation."""
        return self.trajectory_builder.build(parse_conversation(conversation))

    def recognize_patterns(self, conversation: Conversation | dict[str, Any]) -> list[str]:
        """Recognise escalation, recovery, volatility and sustained emotion."""
        conv = parse_conversation(conversation)
        sentiments = [
            self.lexicon.raw_sentiment(m.content)
            for m in conv.messages
            if m.content.strip()
        ]
        if not sentiments:
            return []

        patterns: list[str] = []

        escalating = all(b > a for a, b in zip(sentiments, sentiments[1:]))
        if escalating and len(sentiments) > 2:
            patterns.append("emotional_escalation")

        has_recovery = any(
            sentiments[i] > sentiments[i - 1] and sentiments[i - 1] < sentiments[i - 2]
            for i in range(2, len(sentiments))
        )
        if has_recovery:
            patterns.append("emotional_recovery")

        if population_variance(sentiments) > 1.5:
            patterns.append("emotional_volatility")

        average = float(np.mean(sentiments))
        consistent = all(abs(s - average) < 0.5 for s in sentiments)
        if consistent and abs(average) > 0.3:
            patterns.append("sustained_emotion")

        return patterns

    # =========================================================================
    # Factors
    # =========================================================================

    def _analyze_sentiment(self, messages: list[ConversationMessage]) -> MoodFactor:
        moods: list[float] = []
        words: list[str] = []
        for message in messages:
            mood = self.lexicon.message_mood(message.content)
            if mood is not None:
                moods.append(mood)
            for word in self.lexicon.emotional_words(message.content):
                if word not in words:
                    words.append(word)

        internal = float(np.mean(moods)) if moods else NEUTRAL_SCORE
        return MoodFactor(
            type=FactorType.SENTIMENT_ANALYSIS,
            weight=self.weights.sentiment,
            description=f"Found {len(words)} distinct emotional words",
            evidence=[f'Emotional word "{w}" detected' for w in words[:MAX_EVIDENCE]],
            internal_score=_clamp_score(internal),
        )

    def _analyze_psychological_indicators(
        self, messages: list[ConversationMessage]
    ) -> MoodFactor:
        matches = self._collect_phrases(messages, self.lexicon.PSYCHOLOGICAL_PHRASES)
        internal = _phrase_score(matches)
        return MoodFactor(
            type=FactorType.PSYCHOLOGICAL_INDICATORS,
            weight=self.weights.psychological,
            description="Coping, growth and distress indicators",
            evidence=[
                f'{"Coping" if w > 0 else "Distress"} indicator "{p}"'
                for p, w in matches[:MAX_EVIDENCE]
            ],
            internal_score=internal,
        )

    def _analyze_relationship_context(
        self, messages: list[ConversationMessage]
    ) -> MoodFactor:
        matches = self._collect_phrases(messages, self.lexicon.RELATIONSHIP_PHRASES)
        internal = _phrase_score(matches)
        return MoodFactor(
            type=FactorType.RELATIONSHIP_CONTEXT,
            weight=self.weights.relationship,
            description="Support and conflict in the relationship",
            evidence=[
                f'{"Support" if w > 0 else "Conflict"} cue "{p}"'
                for p, w in matches[:MAX_EVIDENCE]
            ],
            internal_score=internal,
        )

    def _analyze_conversational_flow(
        self, conv: Conversation, messages: list[ConversationMessage]
    ) -> MoodFactor:
        score = NEUTRAL_SCORE
        evidence: list[str] = []

        counts: dict[str, int] = {}
        for message in messages:
            counts[message.author_id] = counts.get(message.author_id, 0) + 1
        if len(counts) > 1:
            if max(counts.values()) / min(counts.values()) < 2:
                evidence.append("Balanced participation indicates healthy interaction")
                score += 0.5
            else:
                evidence.append("Imbalanced participation may indicate support dynamics")
                score -= 0.25

        questions = sum(1 for m in messages if "?" in m.content)
        if questions / len(messages) > 0.3:
            evidence.append("High question frequency suggests support-seeking")
            score -= 0.25

        if len(messages) >= 3:
            ordered = sorted(messages, key=lambda m: m.timestamp)
            gaps = [
                (b.timestamp - a.timestamp).total_seconds()
                for a, b in zip(ordered, ordered[1:])
            ]
            if float(np.mean(gaps)) < 60:
                evidence.append("Rapid message exchange suggests emotional intensity")
        if len(messages) > 10:
            evidence.append("Extended conversation indicates deep engagement")
            score += 0.25

        run = longest = 0
        last_author: str | None = None
        for message in messages:
            run = run + 1 if message.author_id == last_author else 1
            last_author = message.author_id
            longest = max(longest, run)
        if longest > 3:
            evidence.append("Extended monologues detected")
            score -= 0.5

        direction = self.trajectory_builder.build(conv).direction
        if direction == TrajectoryDirection.IMPROVING:
            evidence.append("Mood improved over the conversation")
            score += 1.0
        elif direction == TrajectoryDirection.DECLINING:
            evidence.append("Mood declined over the conversation")
            score -= 1.0
        elif direction == TrajectoryDirection.VOLATILE:
            evidence.append("Volatile emotional trajectory")
            score -= 0.5

        return MoodFactor(
            type=FactorType.CONVERSATIONAL_FLOW,
            weight=self.weights.conversational_flow,
            description="Analysis of conversational interaction patterns",
            evidence=evidence[:MAX_EVIDENCE],
            internal_score=_clamp_score(score),
        )

    def _analyze_historical_baseline(self, conv: Conversation) -> MoodFactor:
        if conv.baseline_score is None:
            return MoodFactor(
                type=FactorType.HISTORICAL_BASELINE,
                weight=self.weights.historical_baseline,
                description="No historical baseline available",
                evidence=[],
                internal_score=NEUTRAL_SCORE,
            )
        return MoodFactor(
            type=FactorType.HISTORICAL_BASELINE,
            weight=self.weights.historical_baseline,
            description="Prior mood baseline of the author",
            evidence=[f"Baseline mood {conv.baseline_score}"],
            internal_score=conv.baseline_score,
        )

    # =========================================================================
    # Aggregation
    # =========================================================================

    def _neutral_baseline(self) -> MoodAnalysisResult:
        factors = [
            MoodFactor(
                type=factor_type,
                weight=self.weights.for_type(factor_type),
                description="No content to analyze",
                evidence=[],
                internal_score=NEUTRAL_SCORE,
            )
            for factor_type in FactorType
        ]
        return MoodAnalysisResult(
            score=NEUTRAL_SCORE,
            confidence=DEGENERATE_CONFIDENCE,
            descriptors=descriptors_for_score(NEUTRAL_SCORE),
            factors=factors,
        )

    @staticmethod
    def _combine_scores(factors: list[MoodFactor]) -> float:
        total_weight = sum(f.weight for f in factors)
        if total_weight == 0:
            return NEUTRAL_SCORE
        weighted = sum(f.internal_score * f.weight for f in factors)  # type: ignore[operator]
        return _clamp_score(round(weighted / total_weight, 1))

    @staticmethod
    def _calculate_confidence(factors: list[MoodFactor]) -> float:
        """Evidence volume (60%) blended with inter-factor agreement (40%)."""
        average_evidence = sum(len(f.evidence) for f in factors) / len(factors)
        evidence_confidence = min(average_evidence / MAX_EVIDENCE, 1.0)

        scores = [f.internal_score for f in factors if f.internal_score is not None]
        agreement_confidence = max(0.0, 1 - population_variance(scores) / 25)

        return round(evidence_confidence * 0.6 + agreement_confidence * 0.4, 2)

    @staticmethod
    def _generate_descriptors(score: float, factors: list[MoodFactor]) -> list[str]:
        descriptors = descriptors_for_score(score)
        for factor in factors:
            if len(factor.evidence) <= 3:
                continue
            if factor.type == FactorType.SENTIMENT_ANALYSIS:
                descriptors.append("expressive")
            elif factor.type == FactorType.CONVERSATIONAL_FLOW:
                descriptors.append("engaged")
        return list(dict.fromkeys(descriptors))[:MAX_DESCRIPTORS]

    @staticmethod
    def _collect_phrases(
        messages: list[ConversationMessage], table: dict[str, float]
    ) -> list[tuple[str, float]]:
        matches: list[tuple[str, float]] = []
        for message in messages:
            matches.extend(EmotionalLexicon.match_phrases(message.content, table))
        return matches


def _clamp_score(value: float) -> float:
    return max(0.0, min(10.0, value))


def _phrase_score(matches: list[tuple[str, float]]) -> float:
    """Map the mean phrase weight (-1 to 1) onto 0-10; neutral with no matches."""
    if not matches:
        return NEUTRAL_SCORE
    mean = sum(w for _, w in matches) / len(matches)
    return _clamp_score((mean + 1) * 5)
