"""Unit tests for the clustering engine."""

from __future__ import annotations

import pytest

from limbic.brain.neocortex import ClusteringConfig, ClusteringEngine


class TestClusteringConfig:
    """Tests for ClusteringConfig."""

    def test_threshold_range(self):
        """Test the similarity threshold must be a fraction."""
        with pytest.raises(ValueError, match="similarity_threshold"):
            ClusteringConfig(similarity_threshold=1.5)

    def test_max_cluster_size(self):
        """Test clusters must hold at least one memory."""
        with pytest.raises(ValueError, match="max_cluster_size"):
            ClusteringConfig(max_cluster_size=0)


class TestAssign:
    """Tests for ClusteringEngine.assign."""

    def test_first_memory_starts_cluster(self, base_memory):
        """Test a memory with no candidates gets a new cluster."""
        assignment = ClusteringEngine().assign(base_memory, [])

        assert assignment.created_new
        assert assignment.membership.membership_strength == 1.0
        assert assignment.cluster.memory_ids == [base_memory.id]
        assert assignment.cluster.theme == "anxious & supported"
        assert assignment.cluster.coherence_score == 1.0
        assert assignment.cluster.metadata.quality_metrics.confidence_level == 0.6

    def test_similar_memory_joins(self, base_memory, similar_memory):
        """Test a similar memory joins the existing cluster."""
        engine = ClusteringEngine()
        first = engine.assign(base_memory, [])

        second = engine.assign(similar_memory, [(first.cluster, [base_memory])])

        assert not second.created_new
        assert second.cluster.cluster_id == first.cluster.cluster_id
        assert second.cluster.memory_ids == [base_memory.id, similar_memory.id]
        assert second.cluster.metadata.memory_count == 2
        assert second.cluster.metadata.created_at == first.cluster.metadata.created_at
        assert second.cluster.theme == "supported & anxious"
        quality = second.cluster.metadata.quality_metrics
        assert quality.thematic_unity == 1.0
        assert quality.confidence_level == pytest.approx(0.65)
        assert quality.incoherent_memory_count == 0
        assert second.membership.membership_strength >= 0.7

    def test_dissimilar_memory_starts_cluster(self, base_memory, celebration_memory):
        """Test a dissimilar memory gets its own cluster."""
        engine = ClusteringEngine()
        first = engine.assign(base_memory, [])

        second = engine.assign(celebration_memory, [(first.cluster, [base_memory])])

        assert second.created_new
        assert second.cluster.cluster_id != first.cluster.cluster_id

    def test_memory_keeps_own_cluster(self, base_memory):
        """Test a memory alone in its cluster is reassigned to that cluster."""
        engine = ClusteringEngine()
        first = engine.assign(base_memory, [])

        again = engine.assign(base_memory, [(first.cluster, [base_memory])])

        assert not again.created_new
        assert again.cluster.cluster_id == first.cluster.cluster_id
        assert again.cluster.memory_ids == [base_memory.id]
        assert again.cluster.metadata.created_at == first.cluster.metadata.created_at

    def test_full_cluster_skipped(self, base_memory, similar_memory):
        """Test full clusters do not accept new members."""
        engine = ClusteringEngine(ClusteringConfig(max_cluster_size=1))
        first = engine.assign(base_memory, [])

        second = engine.assign(similar_memory, [(first.cluster, [base_memory])])

        assert second.created_new

    def test_contribution_score(self, base_memory):
        """Test contribution is strength times emotional intensity."""
        assignment = ClusteringEngine().assign(base_memory, [])
        assert assignment.membership.contribution_score == pytest.approx(0.7462)
        assert ClusteringEngine.contribution_score(0.8, 0.5) == pytest.approx(0.4)


class TestClusterMemories:
    """Tests for batch clustering."""

    def test_groups_by_similarity(self, base_memory, similar_memory, celebration_memory):
        """Test stress-plus-support memories group apart from celebrations."""
        clusters = ClusteringEngine().cluster_memories(
            [base_memory, similar_memory, celebration_memory]
        )

        assert len(clusters) == 2
        assert clusters[0].memory_ids == [base_memory.id, similar_memory.id]
        assert clusters[1].memory_ids == [celebration_memory.id]

    def test_deterministic_membership(self, base_memory, similar_memory, celebration_memory):
        """Test the same input gives the same grouping."""
        engine = ClusteringEngine()
        memories = [base_memory, similar_memory, celebration_memory]

        first = [c.memory_ids for c in engine.cluster_memories(memories)]
        second = [c.memory_ids for c in engine.cluster_memories(memories)]

        assert first == second

    def test_uncategorized_theme(self, empty_memory):
        """Test a cluster without descriptors is uncategorized."""
        (cluster,) = ClusteringEngine().cluster_memories([empty_memory])
        assert cluster.theme == "uncategorized"
        assert cluster.metadata.quality_metrics.thematic_unity == 0.0

    def test_empty_input(self):
        """Test no memories yield no clusters."""
        assert ClusteringEngine().cluster_memories([]) == []
