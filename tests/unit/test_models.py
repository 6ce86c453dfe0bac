"""Unit tests for domain models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from limbic.domain.models import (
    ClusterMembership,
    Conversation,
    DeltaDirection,
    DeltaPatternInput,
    DeltaPatternType,
    DeltaType,
    EmotionalToneFeatures,
    ExtractedMemory,
    FactorType,
    MoodAnalysisResult,
    MoodDelta,
    MoodFactor,
    TurningPointType,
)


class TestMoodAnalysisResult:
    """Tests for MoodAnalysisResult model."""

    def test_create_result(self):
        """Test creating a result with factors."""
        result = MoodAnalysisResult(
            score=7.5,
            confidence=0.8,
            descriptors=["content", "stable"],
            factors=[
                MoodFactor(
                    type=FactorType.SENTIMENT_ANALYSIS,
                    weight=0.35,
                    description="Found 2 distinct emotional words",
                    evidence=['Emotional word "happy" detected'],
                    internal_score=8.0,
                )
            ],
        )

        assert result.score == 7.5
        assert result.factors[0].type == FactorType.SENTIMENT_ANALYSIS
        assert result.factors[0].internal_score == 8.0

    def test_score_out_of_range(self):
        """Test that scores outside 0-10 are rejected."""
        with pytest.raises(ValidationError):
            MoodAnalysisResult(score=10.5, confidence=0.5)

    def test_confidence_out_of_range(self):
        """Test that confidence outside 0-1 is rejected."""
        with pytest.raises(ValidationError):
            MoodAnalysisResult(score=5.0, confidence=1.2)

    def test_factor_types(self):
        """Test all factor types."""
        assert FactorType.SENTIMENT_ANALYSIS.value == "sentiment_analysis"
        assert FactorType.PSYCHOLOGICAL_INDICATORS.value == "psychological_indicators"
        assert FactorType.RELATIONSHIP_CONTEXT.value == "relationship_context"
        assert FactorType.CONVERSATIONAL_FLOW.value == "conversational_flow"
        assert FactorType.HISTORICAL_BASELINE.value == "historical_baseline"


class TestMoodDelta:
    """Tests for MoodDelta model."""

    def test_optional_annotations(self):
        """Test that derived fields are unset until annotated."""
        delta = MoodDelta(
            magnitude=2.0,
            direction=DeltaDirection.POSITIVE,
            type=DeltaType.MOOD_REPAIR,
            confidence=0.9,
        )

        assert delta.significance is None
        assert delta.temporal_context is None
        assert delta.delta_sequence is None

    def test_negative_magnitude_rejected(self):
        """Test that magnitude must be non-negative."""
        with pytest.raises(ValidationError):
            MoodDelta(
                magnitude=-1.0,
                direction=DeltaDirection.NEGATIVE,
                type=DeltaType.DECLINE,
                confidence=0.9,
            )

    def test_delta_pattern_requires_deltas(self):
        """Test that a pattern needs at least one delta."""
        with pytest.raises(ValidationError):
            DeltaPatternInput(
                pattern_type=DeltaPatternType.OSCILLATION,
                delta_ids=[],
                average_magnitude=1.0,
            )

    def test_enum_values(self):
        """Test delta and turning point enum values."""
        assert DeltaType.MOOD_REPAIR.value == "mood_repair"
        assert DeltaPatternType.PLATEAU_BREAK.value == "plateau_break"
        assert TurningPointType.SUPPORT_RECEIVED.value == "support_received"


class TestConversation:
    """Tests for Conversation model."""

    def test_parse_from_dict(self, supportive_conversation):
        """Test parsing a conversation from raw data."""
        conversation = Conversation.model_validate(supportive_conversation)

        assert conversation.id == "conv-1"
        assert len(conversation.messages) == 3
        assert conversation.baseline_score is None
        assert conversation.messages[0].timestamp.tzinfo is not None

    def test_baseline_out_of_range(self, supportive_conversation):
        """Test that the baseline score is bounded."""
        supportive_conversation["baseline_score"] = 12
        with pytest.raises(ValidationError):
            Conversation.model_validate(supportive_conversation)


class TestExtractedMemory:
    """Tests for ExtractedMemory model."""

    def test_parse_from_dict(self, memory_data):
        """Test parsing a memory from raw data."""
        memory = ExtractedMemory.model_validate(memory_data)

        assert memory.id == "test-memory-1"
        assert memory.author.role == "self"
        assert memory.emotional_analysis.mood_scoring.score == 6.8
        assert memory.emotional_analysis.trajectory.turning_points[0].magnitude == 3.3

    def test_memory_is_frozen(self, base_memory):
        """Test that memories cannot be mutated."""
        with pytest.raises(ValidationError):
            base_memory.content = "changed"

    def test_defaults(self):
        """Test default values for optional sections."""
        memory = ExtractedMemory.model_validate(
            {
                "id": "m",
                "content": "hello",
                "timestamp": datetime(2024, 5, 1, tzinfo=timezone.utc),
                "author": {"id": "u", "name": "U"},
                "emotional_analysis": {
                    "mood_scoring": {"score": 5.0, "confidence": 0.5},
                },
            }
        )

        assert memory.participants == []
        assert memory.author.role == "other"
        assert memory.relationship_dynamics.communication_pattern == "neutral"
        assert memory.emotional_context.intensity == 0.5


class TestFeatureModels:
    """Tests for clustering feature models."""

    def test_sentiment_vector_length(self):
        """Test that the sentiment vector has exactly five entries."""
        with pytest.raises(ValidationError):
            EmotionalToneFeatures(
                sentiment_vector=[0.1, 0.2],
                emotional_intensity=0.5,
                emotional_variance=0.1,
                mood_score=5.0,
                emotional_stability=0.8,
            )

    def test_membership_bounds(self):
        """Test that membership strength is bounded to 0-1."""
        with pytest.raises(ValidationError):
            ClusterMembership(
                cluster_id="c",
                memory_id="m",
                membership_strength=1.5,
                contribution_score=0.5,
                added_at=datetime.now(timezone.utc),
            )
