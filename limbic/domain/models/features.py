"""Clustering feature bundles, one per behavioral dimension."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .enums import (
    CommunicationPatternType,
    CopingCommunicationStyle,
    CopingMechanismType,
    GrowthIndicatorType,
    LinguisticPatternType,
    ParticipantRoleType,
    RelationshipType,
    ResilienceIndicatorType,
    Season,
    StressMarkerType,
    SupportDirection,
    SupportLevel,
    SupportRole,
    SupportSeekingStyle,
    TimeOfDay,
)

SENTIMENT_DIMENSIONS = ("positive", "negative", "anxiety", "gratitude", "mixed")


class EmotionalToneFeatures(BaseModel):
    """Sentiment, intensity and stability of a memory."""

    sentiment_vector: list[float] = Field(
        ..., description="[positive, negative, anxiety, gratitude, mixed]"
    )
    emotional_intensity: float = Field(..., ge=0.0, le=1.0)
    emotional_variance: float = Field(..., ge=0.0, le=1.0)
    mood_score: float = Field(..., ge=0.0, le=10.0)
    emotional_descriptors: list[str] = Field(default_factory=list)
    emotional_stability: float = Field(..., ge=0.0, le=1.0)

    @field_validator("sentiment_vector")
    @classmethod
    def _five_dimensions(cls, v: list[float]) -> list[float]:
        if len(v) != len(SENTIMENT_DIMENSIONS):
            raise ValueError(
                f"Sentiment vector must have {len(SENTIMENT_DIMENSIONS)} "
                f"dimensions, got {len(v)}"
            )
        return v


class LinguisticPattern(BaseModel):
    type: LinguisticPatternType
    strength: float = Field(..., ge=0.0, le=1.0)
    indicators: list[str] = Field(default_factory=list)


class CommunicationStyleFeatures(BaseModel):
    """How openly and in what style the author communicates."""

    linguistic_patterns: list[LinguisticPattern] = Field(default_factory=list)
    emotional_openness: float = Field(..., ge=0.0, le=1.0)
    support_seeking_style: SupportSeekingStyle
    coping_communication: CopingCommunicationStyle
    relationship_intimacy: float = Field(..., ge=0.0, le=1.0)


class SupportDynamics(BaseModel):
    level: SupportLevel
    direction: SupportDirection
    effectiveness: float = Field(..., ge=0.0, le=1.0)
    reciprocity: float = Field(..., ge=0.0, le=1.0)


class CommunicationPattern(BaseModel):
    type: CommunicationPatternType
    frequency: float = Field(..., ge=0.0, le=1.0)
    effectiveness: float = Field(..., ge=0.0, le=1.0)


class ParticipantRole(BaseModel):
    participant_id: str
    role: ParticipantRoleType
    support_level: SupportRole


class RelationshipContextFeatures(BaseModel):
    """Who the memory involves and how safe the relationship feels."""

    relationship_type: RelationshipType
    intimacy_level: float = Field(..., ge=0.0, le=1.0)
    support_dynamics: SupportDynamics
    communication_patterns: list[CommunicationPattern] = Field(default_factory=list)
    emotional_safety: float = Field(..., ge=0.0, le=1.0)
    participant_roles: list[ParticipantRole] = Field(default_factory=list)


class CopingMechanism(BaseModel):
    type: CopingMechanismType
    strength: float = Field(..., ge=0.0, le=1.0)
    effectiveness: float = Field(..., ge=0.0, le=1.0)


class ResilienceIndicator(BaseModel):
    type: ResilienceIndicatorType
    strength: float = Field(..., ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)


class StressMarker(BaseModel):
    type: StressMarkerType
    intensity: float = Field(..., ge=0.0, le=1.0)
    indicators: list[str] = Field(default_factory=list)


class GrowthIndicator(BaseModel):
    type: GrowthIndicatorType
    strength: float = Field(..., ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)


class PsychologicalIndicatorFeatures(BaseModel):
    """Coping, resilience, stress and growth signals."""

    coping_mechanisms: list[CopingMechanism] = Field(default_factory=list)
    resilience_indicators: list[ResilienceIndicator] = Field(default_factory=list)
    stress_markers: list[StressMarker] = Field(default_factory=list)
    support_utilization: float = Field(..., ge=0.0, le=1.0)
    emotional_regulation: float = Field(..., ge=0.0, le=1.0)
    growth_indicators: list[GrowthIndicator] = Field(default_factory=list)


class TemporalContextFeatures(BaseModel):
    """When the remembered event happened."""

    time_of_day: TimeOfDay
    day_of_week: str
    temporal_proximity: float = Field(default=0.0, ge=0.0, le=1.0)
    seasonal_context: Season
    temporal_stability: float = Field(default=0.8, ge=0.0, le=1.0)


class ClusteringFeatures(BaseModel):
    """All five feature dimensions of a memory."""

    emotional_tone: EmotionalToneFeatures
    communication_style: CommunicationStyleFeatures
    relationship_context: RelationshipContextFeatures
    psychological_indicators: PsychologicalIndicatorFeatures
    temporal_context: TemporalContextFeatures


class SimilarityBreakdown(BaseModel):
    """Per-dimension similarity between two memories."""

    emotional_tone: float = Field(..., ge=0.0, le=1.0)
    communication_style: float = Field(..., ge=0.0, le=1.0)
    relationship_context: float = Field(..., ge=0.0, le=1.0)
    psychological_indicators: float = Field(..., ge=0.0, le=1.0)
    temporal_context: float = Field(..., ge=0.0, le=1.0)
    global_penalty_applied: bool = False
    overall: float = Field(..., ge=0.0, le=1.0)
