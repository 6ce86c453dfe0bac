"""Extracted memory models consumed by the feature extractors."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .conversation import Participant
from .mood import EmotionalTrajectory, MoodAnalysisResult


class EmotionalIndicators(BaseModel):
    """Surface cues found in the memory text."""

    phrases: list[str] = Field(default_factory=list)
    emotional_words: list[str] = Field(default_factory=list)


class EmotionalContext(BaseModel):
    """Emotional summary attached to a memory."""

    intensity: float = Field(default=0.5, ge=0.0, le=1.0)
    valence: float = Field(default=0.0, ge=-1.0, le=1.0)
    themes: list[str] = Field(default_factory=list)
    indicators: EmotionalIndicators = Field(default_factory=EmotionalIndicators)


class HealthIndicators(BaseModel):
    """Signals of relationship health."""

    positive: list[str] = Field(default_factory=list)
    negative: list[str] = Field(default_factory=list)
    repair_patterns: list[str] = Field(default_factory=list)


class RelationshipDynamics(BaseModel):
    """Relationship summary attached to a memory."""

    communication_pattern: str = Field(
        default="neutral",
        description="supportive, intimate, conflicting, neutral, ...",
    )
    interaction_quality: str = Field(
        default="neutral",
        description="positive, neutral, strained, negative, mixed",
    )
    connection_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    quality: float = Field(default=0.0, ge=0.0, le=10.0)
    patterns: list[str] = Field(default_factory=list)
    health_indicators: HealthIndicators = Field(default_factory=HealthIndicators)


class EmotionalPattern(BaseModel):
    """A recognised emotional pattern (e.g. support_seeking)."""

    type: str
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    description: str = ""
    evidence: list[str] = Field(default_factory=list)
    significance: float = Field(default=0.5, ge=0.0, le=1.0)


class EmotionalAnalysis(BaseModel):
    """Mood scoring, trajectory and patterns for a memory."""

    context: EmotionalContext = Field(default_factory=EmotionalContext)
    mood_scoring: MoodAnalysisResult
    trajectory: EmotionalTrajectory = Field(default_factory=EmotionalTrajectory)
    patterns: list[EmotionalPattern] = Field(default_factory=list)


class ExtractedMemory(BaseModel):
    """A memory extracted from a conversation.

    Immutable input to the analysis core; owned by the repository once stored.
    """

    model_config = {"frozen": True}

    id: str = Field(..., description="Unique identifier")
    content: str = Field(..., description="Memory text")
    timestamp: datetime = Field(..., description="When the remembered event happened")
    author: Participant
    participants: list[Participant] = Field(default_factory=list)
    emotional_context: EmotionalContext = Field(default_factory=EmotionalContext)
    relationship_dynamics: RelationshipDynamics = Field(
        default_factory=RelationshipDynamics
    )
    emotional_analysis: EmotionalAnalysis
