"""Unit tests for weighted memory similarity."""

from __future__ import annotations

import pytest

from limbic.brain.neocortex import FeatureSimilarityCalculator, FeatureWeights
from limbic.brain.neocortex.similarity import closeness, cosine_similarity, overlap


class TestHelpers:
    """Tests for vector and set helpers."""

    def test_cosine_identical(self):
        """Test identical vectors have similarity 1."""
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_cosine_orthogonal(self):
        """Test orthogonal vectors have similarity 0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    @pytest.mark.parametrize(
        "a,b",
        [([0.0, 0.0], [1.0, 1.0]), ([1.0], [1.0, 2.0]), ([], [])],
    )
    def test_cosine_degenerate(self, a, b):
        """Test zero norms and mismatched lengths give 0."""
        assert cosine_similarity(a, b) == 0.0

    def test_overlap(self):
        """Test overlap divides by the larger set."""
        assert overlap(["a", "b"], ["b", "c", "d"]) == pytest.approx(1 / 3)
        assert overlap([], []) == 1.0
        assert overlap(["a"], []) == 0.0

    def test_closeness(self):
        """Test closeness on a scale."""
        assert closeness(6.8, 7.2, scale=10.0) == pytest.approx(0.96)


class TestFeatureWeights:
    """Tests for FeatureWeights."""

    def test_defaults(self):
        """Test default weights."""
        weights = FeatureWeights()
        assert weights.emotional_tone == 0.35
        assert weights.temporal_context == 0.05

    def test_invalid_weights(self):
        """Test that weights must sum to 1.0."""
        with pytest.raises(ValueError, match="Weights must sum to 1.0"):
            FeatureWeights(emotional_tone=0.5)


class TestFeatureSimilarityCalculator:
    """Tests for FeatureSimilarityCalculator."""

    def test_identical_memory(self, base_memory):
        """Test a memory compared with itself scores 1."""
        calculator = FeatureSimilarityCalculator()
        assert calculator.calculate_similarity(base_memory, base_memory) == 1.0

    def test_similar_memories(self, base_memory, similar_memory):
        """Test stress-plus-support memories are highly similar."""
        breakdown = FeatureSimilarityCalculator().compare(base_memory, similar_memory)

        assert 0.7 < breakdown.overall < 1.0
        assert not breakdown.global_penalty_applied
        assert breakdown.temporal_context == pytest.approx(1.0)
        assert breakdown.communication_style > 0.9
        assert breakdown.emotional_tone > 0.75

    def test_different_emotions_penalised(self, base_memory, celebration_memory):
        """Test memories with no shared descriptor are pushed apart."""
        breakdown = FeatureSimilarityCalculator().compare(base_memory, celebration_memory)

        assert breakdown.global_penalty_applied
        assert breakdown.overall < 0.4
        assert breakdown.emotional_tone < 0.2

    def test_empty_memory(self, base_memory, empty_memory):
        """Test an empty memory is dissimilar to an emotional one."""
        similarity = FeatureSimilarityCalculator().calculate_similarity(
            base_memory, empty_memory
        )
        assert similarity < 0.35

    def test_symmetric(self, base_memory, similar_memory):
        """Test similarity does not depend on argument order."""
        calculator = FeatureSimilarityCalculator()
        assert calculator.calculate_similarity(
            base_memory, similar_memory
        ) == pytest.approx(calculator.calculate_similarity(similar_memory, base_memory))

    def test_weights_change_overall(self, base_memory, similar_memory):
        """Test custom weights are applied."""
        temporal_only = FeatureWeights(
            emotional_tone=0.0,
            communication_style=0.0,
            relationship_context=0.0,
            psychological_indicators=0.0,
            temporal_context=1.0,
        )
        calculator = FeatureSimilarityCalculator(weights=temporal_only)
        assert calculator.calculate_similarity(
            base_memory, similar_memory
        ) == pytest.approx(1.0)

    def test_extract_all_features(self, base_memory, similar_memory):
        """Test every dimension is extracted."""
        features = FeatureSimilarityCalculator().extract_all_features(
            base_memory, [similar_memory]
        )

        assert len(features.emotional_tone.sentiment_vector) == 5
        assert features.relationship_context.participant_roles
        assert features.temporal_context.temporal_proximity == pytest.approx(1.0)
