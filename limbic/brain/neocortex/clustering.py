"""Memory Clustering - greedy, deterministic grouping by similarity.

A memory joins the existing cluster it is most similar to (mean
similarity to the cluster's members) when that similarity reaches the
threshold and the cluster has room; otherwise it starts a new cluster.
Clusters are always recomputed from their full member list.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import combinations

import numpy as np

from ...domain.models import (
    ClusterAssignment,
    ClusteringFeatures,
    ClusterMembership,
    ClusterMetadata,
    ClusterQualityMetrics,
    ExtractedMemory,
    MemoryCluster,
)
from .similarity import FeatureSimilarityCalculator

logger = logging.getLogger(__name__)

DEFAULT_THEME = "uncategorized"
BASE_CONFIDENCE = 0.6


@dataclass
class ClusteringConfig:
    """Thresholds for cluster assignment."""

    similarity_threshold: float = 0.7
    max_cluster_size: int = 50

    def __post_init__(self) -> None:
        if not (0.0 <= self.similarity_threshold <= 1.0):
            raise ValueError(
                f"similarity_threshold must be between 0 and 1, got {self.similarity_threshold}"
            )
        if self.max_cluster_size < 1:
            raise ValueError(
                f"max_cluster_size must be at least 1, got {self.max_cluster_size}"
            )


class ClusteringEngine:
    """Assigns memories to psychologically coherent clusters."""

    def __init__(
        self,
        config: ClusteringConfig | None = None,
        similarity: FeatureSimilarityCalculator | None = None,
    ) -> None:
        self.config = config or ClusteringConfig()
        self.similarity = similarity or FeatureSimilarityCalculator()

    def assign(
        self,
        memory: ExtractedMemory,
        candidates: Sequence[tuple[MemoryCluster, Sequence[ExtractedMemory]]],
    ) -> ClusterAssignment:
        """Place a memory into the best existing cluster or a new one.

        Args:
            memory: Memory to place.
            candidates: (cluster, member memories) pairs. Ties between
                clusters go to the one listed first.

        Returns:
            ClusterAssignment with the recomputed cluster and the membership.
            A memory that fits nowhere but already has a cluster of its own
            keeps that cluster.
        """
        best: tuple[MemoryCluster, Sequence[ExtractedMemory]] | None = None
        best_strength = -1.0
        own: MemoryCluster | None = None

        for cluster, members in candidates:
            others = [m for m in members if m.id != memory.id]
            if not others:
                if memory.id in cluster.memory_ids:
                    own = cluster
                continue
            if memory.id not in cluster.memory_ids and len(others) >= self.config.max_cluster_size:
                logger.debug(f"Cluster {cluster.cluster_id} is full")
                continue
            strength = self.membership_strength(memory, others)
            if strength >= self.config.similarity_threshold and strength > best_strength:
                best, best_strength = (cluster, others), strength

        now = datetime.now(timezone.utc)
        if best is None and own is not None:
            cluster = self.build_cluster(
                own.cluster_id, [memory], created_at=own.metadata.created_at
            )
            logger.debug(f"Memory {memory.id} stays alone in cluster {cluster.cluster_id}")
            strength, created_new = 1.0, False
        elif best is None:
            cluster = self.build_cluster(str(uuid.uuid4()), [memory], created_at=now)
            logger.info(f"Created cluster {cluster.cluster_id} for memory {memory.id}")
            strength, created_new = 1.0, True
        else:
            existing, others = best
            cluster = self.build_cluster(
                existing.cluster_id,
                [*others, memory],
                created_at=existing.metadata.created_at,
            )
            logger.info(
                f"Memory {memory.id} joined cluster {cluster.cluster_id} "
                f"(strength {best_strength:.3f})"
            )
            strength, created_new = best_strength, False

        intensity = self.similarity.emotional.extract(memory).emotional_intensity
        membership = ClusterMembership(
            cluster_id=cluster.cluster_id,
            memory_id=memory.id,
            membership_strength=strength,
            contribution_score=self.contribution_score(strength, intensity),
            added_at=now,
        )
        return ClusterAssignment(cluster=cluster, membership=membership, created_new=created_new)

    def cluster_memories(self, memories: Sequence[ExtractedMemory]) -> list[MemoryCluster]:
        """Cluster a batch of memories greedily in input order."""
        groups: list[tuple[MemoryCluster, list[ExtractedMemory]]] = []

        for memory in memories:
            assignment = self.assign(memory, groups)
            if assignment.created_new:
                groups.append((assignment.cluster, [memory]))
                continue
            for i, (cluster, members) in enumerate(groups):
                if cluster.cluster_id == assignment.cluster.cluster_id:
                    groups[i] = (assignment.cluster, [*members, memory])
                    break

        logger.info(f"Clustered {len(memories)} memories into {len(groups)} clusters")
        return [cluster for cluster, _ in groups]

    # =========================================================================
    # Scoring
    # =========================================================================

    def membership_strength(
        self, memory: ExtractedMemory, members: Sequence[ExtractedMemory]
    ) -> float:
        """Mean similarity of a memory to the given members."""
        if not members:
            return 0.0
        scores = [self.similarity.calculate_similarity(memory, m) for m in members]
        return float(np.mean(scores))

    @staticmethod
    def contribution_score(membership_strength: float, emotional_intensity: float) -> float:
        return max(0.0, min(1.0, membership_strength * emotional_intensity))

    def build_cluster(
        self,
        cluster_id: str,
        members: Sequence[ExtractedMemory],
        created_at: datetime | None = None,
    ) -> MemoryCluster:
        """Recompute a cluster snapshot from its members."""
        features = [self.similarity.extract_all_features(m) for m in members]
        coherence, per_member = self._coherence(members)
        significance = self._psychological_significance(features)
        theme, top_descriptor = self._theme(features)

        thematic = (
            sum(
                1
                for f in features
                if top_descriptor in f.emotional_tone.emotional_descriptors
            )
            / len(features)
            if top_descriptor
            else 0.0
        )
        scores = [f.emotional_tone.mood_score for f in features]
        consistency = max(0.0, 1.0 - float(np.std(scores)) / 10)
        incoherent = sum(
            1 for s in per_member if s < self.config.similarity_threshold
        )

        quality = ClusterQualityMetrics(
            overall_coherence=coherence,
            emotional_consistency=consistency,
            thematic_unity=thematic,
            psychological_meaningfulness=significance,
            incoherent_memory_count=incoherent,
            confidence_level=min(1.0, BASE_CONFIDENCE + 0.05 * (len(members) - 1)),
        )
        return MemoryCluster(
            cluster_id=cluster_id,
            theme=theme,
            coherence_score=coherence,
            psychological_significance=significance,
            memory_ids=[m.id for m in members],
            metadata=ClusterMetadata(
                created_at=created_at or datetime.now(timezone.utc),
                memory_count=len(members),
                quality_metrics=quality,
            ),
        )

    def _coherence(self, members: Sequence[ExtractedMemory]) -> tuple[float, list[float]]:
        """Mean pairwise similarity and each member's mean similarity to the rest."""
        if len(members) < 2:
            return 1.0, [1.0] * len(members)

        totals = [0.0] * len(members)
        pair_scores = []
        for i, j in combinations(range(len(members)), 2):
            score = self.similarity.calculate_similarity(members[i], members[j])
            pair_scores.append(score)
            totals[i] += score
            totals[j] += score

        per_member = [t / (len(members) - 1) for t in totals]
        return float(np.mean(pair_scores)), per_member

    @staticmethod
    def _psychological_significance(features: list[ClusteringFeatures]) -> float:
        values = [
            0.4 * f.emotional_tone.emotional_intensity
            + 0.3 * f.psychological_indicators.support_utilization
            + 0.3 * f.psychological_indicators.emotional_regulation
            for f in features
        ]
        return max(0.0, min(1.0, float(np.mean(values))))

    @staticmethod
    def _theme(features: list[ClusteringFeatures]) -> tuple[str, str | None]:
        counts = Counter(
            d for f in features for d in f.emotional_tone.emotional_descriptors
        )
        top = [d for d, _ in counts.most_common(2)]
        if not top:
            return DEFAULT_THEME, None
        return " & ".join(top), top[0]
