"""Repository pattern implementation using Mixin-based composition.

This package provides a modular storage gateway over KùzuDB:
- base.py: Common functionality (query execution, transactions, checks)
- memory.py: Memory store, read, list and cascading delete
- mood_score.py: Mood scores, their factors and range queries
- delta.py: Delta history, patterns and turning points
- validation.py: Human validation records
- cluster.py: Memory clusters and memberships

The AnalyticsRepository class combines all mixins into a single facade.
"""

from __future__ import annotations

import logging

from ...brain.hippocampus import DeltaSignificanceEngine
from ..database import DatabaseConnection
from .base import BaseRepositoryMixin
from .cluster import ClusterMixin
from .delta import DeltaMixin
from .memory import MemoryMixin
from .mood_score import MoodScoreMixin
from .validation import ValidationMixin

logger = logging.getLogger(__name__)


class AnalyticsRepository(
    MemoryMixin,
    MoodScoreMixin,
    DeltaMixin,
    ValidationMixin,
    ClusterMixin,
    BaseRepositoryMixin,
):
    """Storage gateway for memories and everything derived from them.

    Uses Mixin composition to combine functionality from multiple modules:
    - MemoryMixin: store_memory, get_memory, list_memories, delete_memory
    - MoodScoreMixin: store_mood_score and score queries
    - DeltaMixin: delta history, patterns, turning points
    - ValidationMixin: store_validation_result and queries
    - ClusterMixin: clusters and memberships

    All mixins share common methods from BaseRepositoryMixin.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        significance_engine: DeltaSignificanceEngine | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            db: Database connection.
            significance_engine: Scores deltas, patterns and turning points
                at write time.
        """
        self._init_base(db)
        self._significance = significance_engine or DeltaSignificanceEngine()


__all__ = ["AnalyticsRepository"]
