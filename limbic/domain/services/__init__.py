"""Domain Services Package.

This package contains the orchestration layer for Limbic.

Main components:
- MoodService: Mood scoring, delta tracking and validation
- ClusteringService: Feature extraction, comparison and clustering
"""

from .clustering import ClusteringService
from .mood import MoodService

__all__ = [
    "ClusteringService",
    "MoodService",
]
