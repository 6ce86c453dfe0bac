"""Memory cluster models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ClusterQualityMetrics(BaseModel):
    """How well a cluster holds together."""

    overall_coherence: float = Field(default=1.0, ge=0.0, le=1.0)
    emotional_consistency: float = Field(default=1.0, ge=0.0, le=1.0)
    thematic_unity: float = Field(default=1.0, ge=0.0, le=1.0)
    psychological_meaningfulness: float = Field(default=0.0, ge=0.0, le=1.0)
    incoherent_memory_count: int = Field(default=0, ge=0)
    confidence_level: float = Field(default=0.6, ge=0.0, le=1.0)


class ClusterMetadata(BaseModel):
    created_at: datetime
    memory_count: int = Field(default=0, ge=0)
    quality_metrics: ClusterQualityMetrics = Field(
        default_factory=ClusterQualityMetrics
    )


class MemoryCluster(BaseModel):
    """A group of psychologically similar memories."""

    cluster_id: str
    theme: str
    coherence_score: float = Field(..., ge=0.0, le=1.0)
    psychological_significance: float = Field(..., ge=0.0, le=1.0)
    memory_ids: list[str] = Field(default_factory=list)
    metadata: ClusterMetadata


class ClusterMembership(BaseModel):
    """Link between a memory and the cluster it belongs to."""

    cluster_id: str
    memory_id: str
    membership_strength: float = Field(..., ge=0.0, le=1.0)
    contribution_score: float = Field(..., ge=0.0, le=1.0)
    added_at: datetime


class ClusterAssignment(BaseModel):
    """Outcome of placing one memory into the cluster set."""

    cluster: MemoryCluster
    membership: ClusterMembership
    created_new: bool = False
