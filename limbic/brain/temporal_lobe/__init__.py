"""Temporal Lobe module - Temporal Processing.

In Limbic, this module handles:
- Time-of-day, weekday and seasonal context of memories
- Temporal proximity between memories
"""

from .context import TemporalContextExtractor

__all__ = ["TemporalContextExtractor"]
