"""Temporal context features - when a memory happened."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timezone

from ...domain.models import ExtractedMemory, Season, TemporalContextFeatures, TimeOfDay

DAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

PROXIMITY_SCALE_SECONDS = 7 * 24 * 3600


class TemporalContextExtractor:
    """Derives time-of-day, weekday, season and proximity features.

    The timestamp's own hour is used; no timezone conversion happens.
    """

    def __init__(self, stability: float = 0.8) -> None:
        self.stability = stability

    def extract(
        self,
        memory: ExtractedMemory,
        others: Sequence[ExtractedMemory] = (),
    ) -> TemporalContextFeatures:
        timestamp = memory.timestamp
        return TemporalContextFeatures(
            time_of_day=self.time_of_day(timestamp),
            day_of_week=DAY_NAMES[timestamp.weekday()],
            temporal_proximity=self.temporal_proximity(memory, others),
            seasonal_context=self.season(timestamp),
            temporal_stability=self.stability,
        )

    @staticmethod
    def time_of_day(timestamp: datetime) -> TimeOfDay:
        hour = timestamp.hour
        if 6 <= hour < 12:
            return TimeOfDay.MORNING
        if 12 <= hour < 18:
            return TimeOfDay.AFTERNOON
        if 18 <= hour < 22:
            return TimeOfDay.EVENING
        return TimeOfDay.NIGHT

    @staticmethod
    def season(timestamp: datetime) -> Season:
        month = timestamp.month
        if 3 <= month <= 5:
            return Season.SPRING
        if 6 <= month <= 8:
            return Season.SUMMER
        if 9 <= month <= 11:
            return Season.FALL
        return Season.WINTER

    @staticmethod
    def temporal_proximity(
        memory: ExtractedMemory, others: Sequence[ExtractedMemory]
    ) -> float:
        """Mean exp(-|dt| / 7 days) against the other memories, 0.0 if none."""
        others = [o for o in others if o.id != memory.id]
        if not others:
            return 0.0
        anchor = _as_utc(memory.timestamp)
        decays = [
            math.exp(
                -abs((anchor - _as_utc(other.timestamp)).total_seconds())
                / PROXIMITY_SCALE_SECONDS
            )
            for other in others
        ]
        return sum(decays) / len(decays)


def _as_utc(timestamp: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)
