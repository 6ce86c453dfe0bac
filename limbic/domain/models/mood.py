"""Mood scoring and trajectory models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import FactorType, TrajectoryDirection, TurningPointType


class MoodFactor(BaseModel):
    """A weighted contribution to a mood score."""

    type: FactorType = Field(..., description="Factor kind")
    weight: float = Field(..., ge=0.0, le=1.0, description="Share of the final score")
    description: str = Field(..., description="Human-readable summary")
    evidence: list[str] = Field(default_factory=list, description="Supporting cues")
    internal_score: float | None = Field(
        default=None,
        ge=0.0,
        le=10.0,
        description="Factor-local mood estimate (0-10)",
    )


class MoodAnalysisResult(BaseModel):
    """Mood score computed from a conversation."""

    score: float = Field(..., ge=0.0, le=10.0, description="Mood score (0-10)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence (0-1)")
    descriptors: list[str] = Field(
        default_factory=list, max_length=5, description="Ordered mood descriptors"
    )
    factors: list[MoodFactor] = Field(default_factory=list)


class StoredMoodScore(MoodAnalysisResult):
    """A mood score persisted for a memory."""

    id: str
    memory_id: str
    algorithm_version: str
    processing_time_ms: int = Field(default=0, ge=0)
    calculated_at: datetime


class TrajectoryPoint(BaseModel):
    """Mood at a point in a conversation."""

    timestamp: datetime
    mood_score: float = Field(..., ge=0.0, le=10.0)
    emotions: list[str] = Field(default_factory=list)
    message_id: str | None = None
    context: str | None = None


class TrajectoryTurningPoint(BaseModel):
    """A pivotal moment inside an emotional trajectory."""

    timestamp: datetime
    type: TurningPointType
    magnitude: float = Field(..., ge=0.0)
    description: str = ""
    factors: list[str] = Field(default_factory=list)


class EmotionalTrajectory(BaseModel):
    """How mood moved over the course of a conversation."""

    points: list[TrajectoryPoint] = Field(default_factory=list)
    direction: TrajectoryDirection = TrajectoryDirection.STABLE
    significance: float = Field(default=0.0, ge=0.0, le=1.0)
    turning_points: list[TrajectoryTurningPoint] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Comparison of a human rating against the algorithm's score."""

    id: str
    memory_id: str
    mood_score_id: str | None = None
    human_score: float = Field(..., ge=0.0, le=10.0)
    algorithm_score: float = Field(..., ge=0.0, le=10.0)
    agreement: float = Field(..., ge=0.0, le=1.0)
    discrepancy: float = Field(..., ge=0.0, le=10.0)
    validator_id: str
    method: str = "manual"
    feedback: str = ""
    validated_at: datetime
