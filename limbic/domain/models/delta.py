"""Emotional delta, pattern and turning point models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import (
    DeltaDirection,
    DeltaPatternType,
    DeltaType,
    TemporalPosition,
    TransitionType,
    TurningPointType,
)


class DeltaTemporalContext(BaseModel):
    """Position of a delta within its sequence."""

    position: TemporalPosition
    preceding_deltas: int = Field(..., ge=0)
    following_deltas: int = Field(..., ge=0)
    relative_timestamp: int = Field(
        ..., ge=0, description="Milliseconds since the start of the conversation"
    )


class MoodDelta(BaseModel):
    """A change in mood between two sequential analyses.

    ``significance``, ``temporal_context`` and ``delta_sequence`` are derived
    fields filled in by the significance engine before persistence.
    """

    magnitude: float = Field(..., ge=0.0)
    direction: DeltaDirection
    type: DeltaType
    confidence: float = Field(..., ge=0.0, le=1.0)
    factors: list[str] = Field(default_factory=list)
    previous_score: float = Field(default=5.0, ge=0.0, le=10.0)
    current_score: float = Field(default=5.0, ge=0.0, le=10.0)
    significance: float | None = Field(default=None, ge=0.0)
    temporal_context: DeltaTemporalContext | None = None
    delta_sequence: int | None = Field(default=None, ge=0)


class StoredMoodDelta(MoodDelta):
    """A delta persisted for a memory."""

    id: str
    memory_id: str
    conversation_id: str
    significance: float = Field(..., ge=0.0)
    temporal_context: DeltaTemporalContext
    delta_sequence: int = Field(..., ge=0)
    detected_at: datetime


class DeltaPatternInput(BaseModel):
    """A run of related deltas to be stored as a pattern."""

    pattern_type: DeltaPatternType
    delta_ids: list[str] = Field(..., min_length=1)
    description: str = ""
    duration: int = Field(default=0, ge=0, description="Span in milliseconds")
    average_magnitude: float = Field(..., ge=0.0)


class DeltaPattern(DeltaPatternInput):
    """A stored delta pattern with derived significance and confidence."""

    id: str
    memory_id: str
    significance: float = Field(..., ge=0.0, le=10.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    created_at: datetime


class TurningPointInput(BaseModel):
    """A pivotal emotional event to be stored."""

    type: TurningPointType
    magnitude: float = Field(..., ge=0.0)
    description: str = ""
    factors: list[str] = Field(default_factory=list)
    timestamp: datetime


class TurningPointContext(BaseModel):
    """Surroundings of a turning point."""

    position: TemporalPosition = TemporalPosition.MIDDLE
    preceding_magnitude: float = Field(default=0.0, ge=0.0)
    following_magnitude: float = Field(default=0.0, ge=0.0)
    context_duration: int = Field(default=0, ge=0)


class TurningPoint(TurningPointInput):
    """A stored turning point."""

    id: str
    memory_id: str
    delta_id: str | None = Field(
        default=None, description="Originating delta, if any (weak reference)"
    )
    significance: float = Field(..., ge=0.0, le=10.0)
    temporal_context: TurningPointContext


class MoodTransition(BaseModel):
    """A large change between two trajectory points."""

    from_score: float
    to_score: float
    magnitude: float = Field(..., ge=0.0)
    velocity: float = Field(..., ge=0.0, description="Points per hour")
    type: TransitionType
    started_at: datetime
    ended_at: datetime
