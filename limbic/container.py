"""Dependency injection container for Limbic."""

from __future__ import annotations

from dataclasses import dataclass

from .brain.amygdala import DeltaDetector, DeltaDetectorConfig, MoodScoringAnalyzer
from .brain.hippocampus import (
    DeltaPatternDetector,
    DeltaSignificanceEngine,
    TurningPointDetector,
)
from .brain.neocortex import ClusteringConfig, ClusteringEngine, FeatureSimilarityCalculator
from .config import Config, get_config
from .domain.services import ClusteringService, MoodService
from .infra.database import DatabaseConnection
from .infra.repositories import AnalyticsRepository


@dataclass
class Container:
    """Dependency injection container.

    Manages the lifecycle of all application components with proper
    dependency injection.
    """

    config: Config
    _database: DatabaseConnection | None = None
    _repository: AnalyticsRepository | None = None
    _mood_service: MoodService | None = None
    _clustering_service: ClusteringService | None = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create a new container with the given config.

        Args:
            config: Optional config. Uses global config if not provided.

        Returns:
            A new Container instance.
        """
        return cls(config=config or get_config())

    @property
    def database(self) -> DatabaseConnection:
        """Get the database connection (lazy initialization)."""
        if self._database is None:
            self._database = DatabaseConnection(db_path=self.config.db_path)
        return self._database

    @property
    def repository(self) -> AnalyticsRepository:
        """Get the storage gateway (lazy initialization)."""
        if self._repository is None:
            self._repository = AnalyticsRepository(
                db=self.database,
                significance_engine=DeltaSignificanceEngine(),
            )
        return self._repository

    @property
    def mood_service(self) -> MoodService:
        """Get the mood service (lazy initialization)."""
        if self._mood_service is None:
            detector = DeltaDetector(
                DeltaDetectorConfig(
                    minimum_magnitude=self.config.delta_minimum_magnitude,
                    neutral_epsilon=self.config.delta_neutral_epsilon,
                )
            )
            self._mood_service = MoodService(
                repository=self.repository,
                analyzer=MoodScoringAnalyzer(),
                delta_detector=detector,
                pattern_detector=DeltaPatternDetector(),
                turning_point_detector=TurningPointDetector(
                    magnitude_threshold=self.config.turning_point_threshold
                ),
                algorithm_version=self.config.algorithm_version,
            )
        return self._mood_service

    @property
    def clustering_service(self) -> ClusteringService:
        """Get the clustering service (lazy initialization)."""
        if self._clustering_service is None:
            similarity = FeatureSimilarityCalculator()
            engine = ClusteringEngine(
                config=ClusteringConfig(
                    similarity_threshold=self.config.cluster_similarity_threshold,
                    max_cluster_size=self.config.max_cluster_size,
                ),
                similarity=similarity,
            )
            self._clustering_service = ClusteringService(
                repository=self.repository,
                similarity=similarity,
                engine=engine,
            )
        return self._clustering_service

    def close(self) -> None:
        """Close all resources."""
        if self._database is not None:
            self._database.close()
            self._database = None
        self._repository = None
        self._mood_service = None
        self._clustering_service = None


_container: Container | None = None


def get_container() -> Container:
    """Get the global container instance."""
    global _container
    if _container is None:
        _container = Container.create()
    return _container


def reset_container() -> None:
    """Reset the container (for testing)."""
    global _container
    if _container is not None:
        _container.close()
    _container = None
