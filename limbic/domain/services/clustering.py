"""Clustering Service - feature extraction, comparison and clustering.

Loads memories from the storage gateway, runs the neocortex analysis on
them and persists cluster assignments.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...brain.neocortex import ClusteringEngine, FeatureSimilarityCalculator
from ..exceptions import MemoryNotFoundError
from ..models import (
    ClusterAssignment,
    ClusterMembership,
    ExtractedMemory,
    FeatureExtractionResult,
    MemoryCluster,
    MemoryComparisonResult,
)

if TYPE_CHECKING:
    from ...infra.repositories import AnalyticsRepository

logger = logging.getLogger(__name__)


class ClusteringService:
    """Service for memory features and clustering."""

    def __init__(
        self,
        repository: AnalyticsRepository,
        similarity: FeatureSimilarityCalculator | None = None,
        engine: ClusteringEngine | None = None,
    ) -> None:
        self._repo = repository
        self._similarity = similarity or FeatureSimilarityCalculator()
        self._engine = engine or ClusteringEngine(similarity=self._similarity)

    def _require(self, memory_id: str) -> ExtractedMemory:
        memory = self._repo.get_memory(memory_id)
        if memory is None:
            raise MemoryNotFoundError(memory_id)
        return memory

    # =========================================================================
    # Memories
    # =========================================================================

    def store_memory(self, memory: ExtractedMemory) -> ExtractedMemory:
        return self._repo.store_memory(memory)

    def get_memory(self, memory_id: str) -> ExtractedMemory:
        """Get a memory.

        Raises:
            MemoryNotFoundError: If the memory does not exist.
        """
        return self._require(memory_id)

    def delete_memory(self, memory_id: str) -> None:
        """Delete a memory and everything derived from it.

        Raises:
            MemoryNotFoundError: If the memory does not exist.
        """
        if not self._repo.delete_memory(memory_id):
            raise MemoryNotFoundError(memory_id)

    # =========================================================================
    # Features
    # =========================================================================

    def extract_features(self, memory_id: str) -> FeatureExtractionResult:
        """Extract all five feature dimensions of a stored memory.

        Temporal proximity is measured against every other stored memory.
        """
        memory = self._require(memory_id)
        others = [m for m in self._repo.list_memories() if m.id != memory_id]
        features = self._similarity.extract_all_features(memory, others)
        return FeatureExtractionResult(memory_id=memory_id, features=features)

    def compare_memories(self, memory_id_a: str, memory_id_b: str) -> MemoryComparisonResult:
        a = self._require(memory_id_a)
        b = self._require(memory_id_b)
        return MemoryComparisonResult(
            memory_id_a=memory_id_a,
            memory_id_b=memory_id_b,
            similarity=self._similarity.compare(a, b),
        )

    # =========================================================================
    # Clustering
    # =========================================================================

    def cluster_memory(self, memory_id: str) -> ClusterAssignment:
        """Assign a stored memory to a cluster and persist the result.

        A memory belongs to at most one cluster; moving it detaches it from
        its previous cluster in the same transaction.
        """
        memory = self._require(memory_id)

        candidates: list[tuple[MemoryCluster, list[ExtractedMemory]]] = []
        for cluster in self._repo.list_clusters():
            members = self._repo.list_memories(cluster.memory_ids)
            if members:
                candidates.append((cluster, members))

        assignment = self._engine.assign(memory, candidates)
        target = assignment.cluster.cluster_id
        previous = None
        for cluster, members in candidates:
            if memory_id in cluster.memory_ids and cluster.cluster_id != target:
                previous = self._without(cluster, members, {memory_id})
                break

        stored = self._repo.add_memory_to_cluster(
            assignment.cluster, assignment.membership, previous=previous
        )
        return assignment.model_copy(update={"cluster": stored})

    def recluster(self, memory_ids: list[str] | None = None) -> list[MemoryCluster]:
        """Rebuild clusters from scratch for the given (or all) memories.

        Without memory_ids every existing cluster is deleted first. With
        memory_ids only those memories leave their clusters; other members
        keep their memberships.
        """
        memories = self._repo.list_memories(memory_ids)
        if memory_ids is None:
            for cluster in self._repo.list_clusters():
                self._repo.delete_cluster(cluster.cluster_id)
        else:
            self._detach({m.id for m in memories})

        clusters = self._engine.cluster_memories(memories)
        by_id = {m.id: m for m in memories}
        stored: list[MemoryCluster] = []

        for cluster in clusters:
            members = [by_id[i] for i in cluster.memory_ids]
            self._repo.create_cluster(cluster)
            for member in members:
                others = [m for m in members if m.id != member.id]
                strength = (
                    self._engine.membership_strength(member, others) if others else 1.0
                )
                intensity = self._similarity.emotional.extract(member).emotional_intensity
                self._repo.add_memory_to_cluster(
                    cluster,
                    ClusterMembership(
                        cluster_id=cluster.cluster_id,
                        memory_id=member.id,
                        membership_strength=strength,
                        contribution_score=self._engine.contribution_score(
                            strength, intensity
                        ),
                        added_at=cluster.metadata.created_at,
                    ),
                )
            stored.append(self._repo.get_cluster(cluster.cluster_id))

        logger.info(f"Reclustered {len(memories)} memories into {len(stored)} clusters")
        return stored

    def list_clusters(self) -> list[MemoryCluster]:
        return self._repo.list_clusters()

    def _without(
        self,
        cluster: MemoryCluster,
        members: list[ExtractedMemory],
        leaving: set[str],
    ) -> MemoryCluster:
        """Snapshot of a cluster once the leaving memories are gone."""
        remaining = [m for m in members if m.id not in leaving]
        if not remaining:
            return cluster.model_copy(update={"memory_ids": []})
        return self._engine.build_cluster(
            cluster.cluster_id, remaining, created_at=cluster.metadata.created_at
        )

    def _detach(self, memory_ids: set[str]) -> None:
        """Take memories out of their clusters, deleting clusters left empty."""
        for cluster in self._repo.list_clusters():
            leaving = [i for i in cluster.memory_ids if i in memory_ids]
            if not leaving:
                continue
            members = self._repo.list_memories(cluster.memory_ids)
            snapshot = self._without(cluster, members, memory_ids)
            for memory_id in leaving:
                self._repo.remove_memory_from_cluster(snapshot, memory_id)
