"""Configuration settings for Limbic."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Config:
    """Limbic configuration."""

    # Data storage
    data_dir: Path = field(default_factory=lambda: Path.home() / ".limbic")
    db_name: str = "limbic_db"

    # Scoring
    algorithm_version: str = "1.0.0"

    # Delta tracking
    delta_minimum_magnitude: float = 0.0
    delta_neutral_epsilon: float = 0.05
    turning_point_threshold: float = 2.5

    # Clustering
    cluster_similarity_threshold: float = 0.7
    max_cluster_size: int = 50

    # Server
    server_transport: str = "stdio"
    server_host: str = "127.0.0.1"
    server_port: int = 8765

    @property
    def db_path(self) -> Path:
        """Get the full database path."""
        return self.data_dir / self.db_name

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables."""
        data_dir_str = os.environ.get("LIMBIC_DATA_DIR")
        data_dir = Path(data_dir_str) if data_dir_str else Path.home() / ".limbic"

        return cls(
            data_dir=data_dir,
            db_name=os.environ.get("LIMBIC_DB_NAME", "limbic_db"),
            algorithm_version=os.environ.get("LIMBIC_ALGORITHM_VERSION", "1.0.0"),
            delta_minimum_magnitude=float(
                os.environ.get("LIMBIC_DELTA_MIN_MAGNITUDE", "0.0")
            ),
            delta_neutral_epsilon=float(os.environ.get("LIMBIC_DELTA_EPSILON", "0.05")),
            turning_point_threshold=float(
                os.environ.get("LIMBIC_TURNING_POINT_THRESHOLD", "2.5")
            ),
            cluster_similarity_threshold=float(
                os.environ.get("LIMBIC_CLUSTER_THRESHOLD", "0.7")
            ),
            max_cluster_size=int(os.environ.get("LIMBIC_MAX_CLUSTER_SIZE", "50")),
            server_transport=os.environ.get("LIMBIC_TRANSPORT", "stdio"),
            server_host=os.environ.get("LIMBIC_HOST", "127.0.0.1"),
            server_port=int(os.environ.get("LIMBIC_PORT", "8765")),
        )


_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the config (for testing)."""
    global _config
    _config = None
