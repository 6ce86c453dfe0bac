"""Conversation input models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Participant(BaseModel):
    """A person taking part in a conversation or memory."""

    id: str = Field(..., description="Participant identifier")
    name: str = Field(..., description="Display name")
    role: str = Field(
        default="other",
        description="Relationship to the author (self, friend, family, partner, "
        "professional, other)",
    )


class ConversationMessage(BaseModel):
    """A single message in a conversation."""

    id: str = Field(..., description="Message identifier")
    content: str = Field(..., description="Message text")
    author_id: str = Field(..., description="ID of the participant who wrote it")
    timestamp: datetime = Field(..., description="When the message was sent")


class Conversation(BaseModel):
    """A conversation transcript to be analyzed."""

    id: str = Field(..., description="Conversation identifier")
    messages: list[ConversationMessage] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    timestamp: datetime = Field(..., description="When the conversation occurred")
    start_time: datetime = Field(..., description="When the conversation started")
    end_time: datetime = Field(..., description="When the conversation ended")
    baseline_score: float | None = Field(
        default=None,
        ge=0.0,
        le=10.0,
        description="Prior mood of the author, used as a historical baseline",
    )

    @property
    def duration_ms(self) -> int:
        """Conversation length in milliseconds (never negative)."""
        return max(0, int((self.end_time - self.start_time).total_seconds() * 1000))
