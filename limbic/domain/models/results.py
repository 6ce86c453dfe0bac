"""Result models for service operations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .delta import DeltaPattern, StoredMoodDelta, TurningPoint
from .features import ClusteringFeatures, SimilarityBreakdown


class DeltaTrackingResult(BaseModel):
    """Everything stored while tracking deltas for one memory."""

    memory_id: str
    conversation_id: str
    deltas: list[StoredMoodDelta] = Field(default_factory=list)
    patterns: list[DeltaPattern] = Field(default_factory=list)
    turning_points: list[TurningPoint] = Field(default_factory=list)


class FeatureExtractionResult(BaseModel):
    memory_id: str
    features: ClusteringFeatures


class MemoryComparisonResult(BaseModel):
    memory_id_a: str
    memory_id_b: str
    similarity: SimilarityBreakdown
