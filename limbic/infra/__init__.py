"""Infrastructure layer - Database and storage gateway."""

from .database import DatabaseConnection
from .repositories import AnalyticsRepository

__all__ = [
    "AnalyticsRepository",
    "DatabaseConnection",
]
