"""Feature Similarity - weighted comparison across five dimensions.

Overall similarity is the weighted sum of the per-dimension scores:

    emotional_tone           0.35
    communication_style      0.25
    relationship_context     0.20
    psychological_indicators 0.15
    temporal_context         0.05

Memories that share no emotional descriptor are penalised twice: once
inside the emotional tone dimension and once on the overall score.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from ...domain.models import (
    ClusteringFeatures,
    CommunicationStyleFeatures,
    EmotionalToneFeatures,
    ExtractedMemory,
    LinguisticPattern,
    PsychologicalIndicatorFeatures,
    RelationshipContextFeatures,
    SimilarityBreakdown,
    SupportDynamics,
    TemporalContextFeatures,
)
from ..temporal_lobe import TemporalContextExtractor
from .communication import CommunicationStyleExtractor
from .emotional import EmotionalToneExtractor
from .psychological import PsychologicalIndicatorExtractor
from .relationship import RelationshipContextExtractor

logger = logging.getLogger(__name__)

EMOTIONAL_MISMATCH_PENALTY = 0.2
GLOBAL_MISMATCH_PENALTY = 0.6


@dataclass
class FeatureWeights:
    """Weights for the five similarity dimensions."""

    emotional_tone: float = 0.35
    communication_style: float = 0.25
    relationship_context: float = 0.20
    psychological_indicators: float = 0.15
    temporal_context: float = 0.05

    def __post_init__(self) -> None:
        """Validate weights sum to 1.0."""
        total = (
            self.emotional_tone
            + self.communication_style
            + self.relationship_context
            + self.psychological_indicators
            + self.temporal_context
        )
        if not (0.99 <= total <= 1.01):
            raise ValueError(f"Weights must sum to 1.0, got {total}")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of two vectors; 0.0 for mismatched lengths or zero norms."""
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.dot(va, vb) / norm)


def overlap(a: Iterable[Hashable], b: Iterable[Hashable]) -> float:
    """|A & B| / max(|A|, |B|); two empty sets are identical."""
    set_a, set_b = set(a), set(b)
    if not set_a and not set_b:
        return 1.0
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / max(len(set_a), len(set_b))


def closeness(a: float, b: float, scale: float = 1.0) -> float:
    return 1.0 - abs(a - b) / scale


def match(a: object, b: object, mismatch: float) -> float:
    return 1.0 if a == b else mismatch


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class FeatureSimilarityCalculator:
    """Extracts clustering features and compares memories."""

    def __init__(
        self,
        weights: FeatureWeights | None = None,
        emotional: EmotionalToneExtractor | None = None,
        communication: CommunicationStyleExtractor | None = None,
        relationship: RelationshipContextExtractor | None = None,
        psychological: PsychologicalIndicatorExtractor | None = None,
        temporal: TemporalContextExtractor | None = None,
    ) -> None:
        self.weights = weights or FeatureWeights()
        self.emotional = emotional or EmotionalToneExtractor()
        self.communication = communication or CommunicationStyleExtractor()
        self.relationship = relationship or RelationshipContextExtractor()
        self.psychological = psychological or PsychologicalIndicatorExtractor()
        self.temporal = temporal or TemporalContextExtractor()

    # =========================================================================
    # Extraction
    # =========================================================================

    def extract_all_features(
        self,
        memory: ExtractedMemory,
        others: Sequence[ExtractedMemory] = (),
    ) -> ClusteringFeatures:
        """Extract all five feature dimensions of a memory.

        Args:
            memory: Memory to analyse.
            others: Memories used for temporal proximity.

        Returns:
            ClusteringFeatures with every dimension filled.
        """
        return ClusteringFeatures(
            emotional_tone=self.emotional.extract(memory),
            communication_style=self.communication.extract(memory),
            relationship_context=self.relationship.extract(memory),
            psychological_indicators=self.psychological.extract(memory),
            temporal_context=self.temporal.extract(memory, others),
        )

    # =========================================================================
    # Comparison
    # =========================================================================

    def calculate_similarity(self, a: ExtractedMemory, b: ExtractedMemory) -> float:
        """Overall similarity of two memories in [0, 1]."""
        return self.compare(a, b).overall

    def compare(self, a: ExtractedMemory, b: ExtractedMemory) -> SimilarityBreakdown:
        """Per-dimension similarity, the global penalty flag and the overall score."""
        if a.id == b.id and a.content == b.content:
            return SimilarityBreakdown(
                emotional_tone=1.0,
                communication_style=1.0,
                relationship_context=1.0,
                psychological_indicators=1.0,
                temporal_context=1.0,
                overall=1.0,
            )
        return self.compare_features(
            self.extract_all_features(a), self.extract_all_features(b)
        )

    def compare_features(
        self, a: ClusteringFeatures, b: ClusteringFeatures
    ) -> SimilarityBreakdown:
        emotional = self.calculate_emotional_similarity(a.emotional_tone, b.emotional_tone)
        communication = self.calculate_communication_similarity(
            a.communication_style, b.communication_style
        )
        relationship = self.calculate_relationship_similarity(
            a.relationship_context, b.relationship_context
        )
        psychological = self.calculate_psychological_similarity(
            a.psychological_indicators, b.psychological_indicators
        )
        temporal = self.calculate_temporal_similarity(
            a.temporal_context, b.temporal_context
        )

        overall = (
            emotional * self.weights.emotional_tone
            + communication * self.weights.communication_style
            + relationship * self.weights.relationship_context
            + psychological * self.weights.psychological_indicators
            + temporal * self.weights.temporal_context
        )

        shares_descriptor = bool(
            set(a.emotional_tone.emotional_descriptors)
            & set(b.emotional_tone.emotional_descriptors)
        )
        if not shares_descriptor:
            overall *= GLOBAL_MISMATCH_PENALTY

        breakdown = SimilarityBreakdown(
            emotional_tone=_clamp(emotional),
            communication_style=_clamp(communication),
            relationship_context=_clamp(relationship),
            psychological_indicators=_clamp(psychological),
            temporal_context=_clamp(temporal),
            global_penalty_applied=not shares_descriptor,
            overall=_clamp(overall),
        )
        logger.debug(f"Similarity breakdown: {breakdown.model_dump()}")
        return breakdown

    # =========================================================================
    # Dimensions
    # =========================================================================

    def calculate_emotional_similarity(
        self, a: EmotionalToneFeatures, b: EmotionalToneFeatures
    ) -> float:
        similarity = (
            cosine_similarity(a.sentiment_vector, b.sentiment_vector) * 0.3
            + closeness(a.emotional_intensity, b.emotional_intensity) * 0.25
            + closeness(a.mood_score, b.mood_score, scale=10.0) * 0.2
            + closeness(a.emotional_stability, b.emotional_stability) * 0.15
            + overlap(a.emotional_descriptors, b.emotional_descriptors) * 0.1
        )
        if not set(a.emotional_descriptors) & set(b.emotional_descriptors):
            similarity *= EMOTIONAL_MISMATCH_PENALTY
        return _clamp(similarity)

    def calculate_communication_similarity(
        self, a: CommunicationStyleFeatures, b: CommunicationStyleFeatures
    ) -> float:
        similarity = (
            closeness(a.emotional_openness, b.emotional_openness) * 0.25
            + match(a.support_seeking_style, b.support_seeking_style, 0.3) * 0.25
            + match(a.coping_communication, b.coping_communication, 0.3) * 0.2
            + closeness(a.relationship_intimacy, b.relationship_intimacy) * 0.15
            + self.linguistic_pattern_similarity(
                a.linguistic_patterns, b.linguistic_patterns
            )
            * 0.15
        )
        return _clamp(similarity)

    @staticmethod
    def linguistic_pattern_similarity(
        a: list[LinguisticPattern], b: list[LinguisticPattern]
    ) -> float:
        if not a and not b:
            return 1.0
        if not a or not b:
            return 0.0
        strengths_b = {p.type: p.strength for p in b}
        common = [
            closeness(p.strength, strengths_b[p.type]) for p in a if p.type in strengths_b
        ]
        if not common:
            return 0.0
        return sum(common) / len(common)

    def calculate_relationship_similarity(
        self, a: RelationshipContextFeatures, b: RelationshipContextFeatures
    ) -> float:
        similarity = (
            match(a.relationship_type, b.relationship_type, 0.2) * 0.3
            + closeness(a.intimacy_level, b.intimacy_level) * 0.25
            + closeness(a.emotional_safety, b.emotional_safety) * 0.25
            + self.support_dynamics_similarity(a.support_dynamics, b.support_dynamics) * 0.2
        )
        return _clamp(similarity)

    @staticmethod
    def support_dynamics_similarity(a: SupportDynamics, b: SupportDynamics) -> float:
        return (
            match(a.level, b.level, 0.3) * 0.3
            + match(a.direction, b.direction, 0.3) * 0.3
            + closeness(a.effectiveness, b.effectiveness) * 0.2
            + closeness(a.reciprocity, b.reciprocity) * 0.2
        )

    def calculate_psychological_similarity(
        self, a: PsychologicalIndicatorFeatures, b: PsychologicalIndicatorFeatures
    ) -> float:
        similarity = (
            overlap(
                (m.type for m in a.coping_mechanisms),
                (m.type for m in b.coping_mechanisms),
            )
            * 0.3
            + closeness(a.support_utilization, b.support_utilization) * 0.25
            + closeness(a.emotional_regulation, b.emotional_regulation) * 0.25
            + overlap(
                (r.type for r in a.resilience_indicators),
                (r.type for r in b.resilience_indicators),
            )
            * 0.2
        )
        return _clamp(similarity)

    def calculate_temporal_similarity(
        self, a: TemporalContextFeatures, b: TemporalContextFeatures
    ) -> float:
        similarity = (
            match(a.time_of_day, b.time_of_day, 0.3) * 0.2
            + match(a.day_of_week, b.day_of_week, 0.7) * 0.2
            + match(a.seasonal_context, b.seasonal_context, 0.5) * 0.3
            + closeness(a.temporal_stability, b.temporal_stability) * 0.3
        )
        return _clamp(similarity)
