"""Domain layer - Core business logic and models."""

from .exceptions import (
    ClusterNotFoundError,
    DatabaseError,
    LimbicError,
    MemoryNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from .models import (
    ClusteringFeatures,
    Conversation,
    DeltaPattern,
    ExtractedMemory,
    MemoryCluster,
    MoodAnalysisResult,
    MoodDelta,
    StoredMoodDelta,
    StoredMoodScore,
    TurningPoint,
)

__all__ = [
    # Exceptions
    "LimbicError",
    "ValidationError",
    "ReferentialIntegrityError",
    "MemoryNotFoundError",
    "ClusterNotFoundError",
    "DatabaseError",
    # Models
    "Conversation",
    "MoodAnalysisResult",
    "StoredMoodScore",
    "MoodDelta",
    "StoredMoodDelta",
    "DeltaPattern",
    "TurningPoint",
    "ExtractedMemory",
    "ClusteringFeatures",
    "MemoryCluster",
]
