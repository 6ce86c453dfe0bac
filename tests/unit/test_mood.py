"""Unit tests for mood scoring, the emotional lexicon and trajectories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from limbic.brain.amygdala import (
    EmotionalLexicon,
    MoodFactorWeights,
    MoodScoringAnalyzer,
    TrajectoryBuilder,
)
from limbic.brain.amygdala import mood
from limbic.domain.exceptions import ValidationError
from limbic.domain.models import (
    Conversation,
    FactorType,
    TrajectoryDirection,
    TrajectoryPoint,
    TurningPointType,
)

T0 = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def points(*scores: float) -> list[TrajectoryPoint]:
    return [
        TrajectoryPoint(timestamp=T0 + timedelta(minutes=i), mood_score=s)
        for i, s in enumerate(scores)
    ]


class TestEmotionalLexicon:
    """Tests for the keyword lexicon."""

    def test_message_mood_single_word(self):
        """Test a single positive word maps valence onto 0-10."""
        lexicon = EmotionalLexicon()
        # happy has valence 0.8 -> (0.8 + 1) * 5
        assert lexicon.message_mood("I am happy") == pytest.approx(9.0)

    def test_message_mood_without_keywords(self):
        """Test that text with no emotional words has no mood."""
        assert EmotionalLexicon().message_mood("The bus leaves at noon") is None

    def test_tokens_ignore_punctuation_and_case(self):
        """Test words are matched case-insensitively without punctuation."""
        words = EmotionalLexicon().emotional_words("SAD, then Happy!")
        assert words == ["sad", "happy"]

    def test_match_phrases(self):
        """Test phrase matching returns each phrase with its weight."""
        matches = EmotionalLexicon.match_phrases(
            "I can't cope and I feel hopeless", EmotionalLexicon.PSYCHOLOGICAL_PHRASES
        )
        assert ("can't cope", -0.9) in matches
        assert ("hopeless", -0.9) in matches


class TestMoodFactorWeights:
    """Tests for MoodFactorWeights."""

    def test_default_weights_sum_to_one(self):
        """Test default weights are valid."""
        weights = MoodFactorWeights()
        total = sum(weights.for_type(t) for t in FactorType)
        assert total == pytest.approx(1.0)

    def test_invalid_weights(self):
        """Test that weights must sum to 1.0."""
        with pytest.raises(ValueError, match="Weights must sum to 1.0"):
            MoodFactorWeights(sentiment=0.9)


class TestMoodScoringAnalyzer:
    """Tests for MoodScoringAnalyzer."""

    def test_five_factors(self, supportive_conversation):
        """Test every factor is reported with its weight."""
        result = MoodScoringAnalyzer().analyze_conversation(supportive_conversation)

        assert {f.type for f in result.factors} == set(FactorType)
        assert sum(f.weight for f in result.factors) == pytest.approx(1.0)
        assert all(0.0 <= f.internal_score <= 10.0 for f in result.factors)
        assert 0.0 <= result.score <= 10.0
        assert 0.0 <= result.confidence <= 1.0

    def test_positive_outscores_distressed(
        self, positive_conversation, distressed_conversation
    ):
        """Test positive conversations score well above distressed ones."""
        analyzer = MoodScoringAnalyzer()
        positive = analyzer.analyze_conversation(positive_conversation)
        distressed = analyzer.analyze_conversation(distressed_conversation)

        assert positive.score >= 6.5
        assert distressed.score < 4.0
        assert positive.score - distressed.score > 3.0

    def test_descriptors(self, positive_conversation, distressed_conversation):
        """Test descriptors follow the score band."""
        analyzer = MoodScoringAnalyzer()
        positive = analyzer.analyze_conversation(positive_conversation)
        distressed = analyzer.analyze_conversation(distressed_conversation)

        assert "content" in positive.descriptors
        assert "expressive" in positive.descriptors
        assert distressed.descriptors[:2] == ["distressed", "struggling"]
        assert len(positive.descriptors) <= 5

    def test_deterministic(self, supportive_conversation):
        """Test the same conversation always gives the same result."""
        analyzer = MoodScoringAnalyzer()
        first = analyzer.analyze_conversation(supportive_conversation)
        second = analyzer.analyze_conversation(supportive_conversation)
        assert first == second

    def test_accepts_model_and_dict(self, supportive_conversation):
        """Test parsed and raw conversations score identically."""
        analyzer = MoodScoringAnalyzer()
        parsed = Conversation.model_validate(supportive_conversation)
        assert analyzer.analyze_conversation(parsed) == analyzer.analyze_conversation(
            supportive_conversation
        )

    def test_empty_conversation_is_neutral(self, conversation_factory):
        """Test a conversation without content gets the neutral baseline."""
        result = MoodScoringAnalyzer().analyze_conversation(
            conversation_factory([("user-1", "   "), ("user-2", "")])
        )

        assert result.score == 5.0
        assert result.confidence == 0.1
        assert result.descriptors == ["neutral", "balanced"]
        assert len(result.factors) == 5

    def test_historical_baseline(self, conversation_factory):
        """Test a baseline score feeds the historical factor."""
        conversation = conversation_factory(
            [("user-1", "Nothing much today.")], baseline_score=9.0
        )
        result = MoodScoringAnalyzer().analyze_conversation(conversation)
        baseline = next(
            f for f in result.factors if f.type == FactorType.HISTORICAL_BASELINE
        )
        assert baseline.internal_score == 9.0

    def test_malformed_conversation(self):
        """Test malformed input is rejected at the boundary."""
        with pytest.raises(ValidationError, match="Invalid conversation"):
            MoodScoringAnalyzer().analyze_conversation({"messages": "nope"})

    def test_unscorable_factor(self, monkeypatch, supportive_conversation):
        """Test a factor without a finite score raises the domain error."""
        monkeypatch.setattr(mood, "_phrase_score", lambda matches: float("nan"))

        with pytest.raises(ValidationError, match="no usable score"):
            MoodScoringAnalyzer().analyze_conversation(supportive_conversation)

    def test_message_mood_default(self):
        """Test a message without emotional words is neutral."""
        assert MoodScoringAnalyzer().calculate_message_mood("See you at noon") == 5.0

    def test_recognize_patterns(self, positive_conversation):
        """Test escalation and sustained emotion are recognised."""
        patterns = MoodScoringAnalyzer().recognize_patterns(positive_conversation)
        assert patterns == ["emotional_escalation", "sustained_emotion"]


class TestTrajectoryBuilder:
    """Tests for TrajectoryBuilder."""

    def test_build_from_conversation(self, supportive_conversation):
        """Test one point per message with a peak turning point."""
        trajectory = MoodScoringAnalyzer().build_trajectory(supportive_conversation)

        assert len(trajectory.points) == 3
        assert trajectory.points[0].mood_score < 4.0
        assert trajectory.points[1].mood_score > 8.0
        assert [tp.type for tp in trajectory.turning_points] == [
            TurningPointType.BREAKTHROUGH
        ]
        assert 0.0 < trajectory.significance <= 1.0

    def test_short_trajectory(self):
        """Test fewer than two points is stable with fixed significance."""
        trajectory = TrajectoryBuilder().summarise(points(5.0))

        assert trajectory.direction == TrajectoryDirection.STABLE
        assert trajectory.significance == 0.3
        assert trajectory.turning_points == []

    @pytest.mark.parametrize(
        "scores,expected",
        [
            ((4.0, 4.5, 5.5, 6.0), TrajectoryDirection.IMPROVING),
            ((6.0, 5.5, 4.5, 4.0), TrajectoryDirection.DECLINING),
            ((5.0, 5.0, 5.0), TrajectoryDirection.STABLE),
            ((1.0, 9.0, 1.0, 9.0), TrajectoryDirection.VOLATILE),
        ],
    )
    def test_direction(self, scores, expected):
        """Test direction classification."""
        assert TrajectoryBuilder.determine_direction(points(*scores)) == expected

    def test_trough_is_setback(self):
        """Test a dip and recovery is reported as a setback."""
        turning_points = TrajectoryBuilder().find_turning_points(points(7.0, 3.0, 7.5))

        assert len(turning_points) == 1
        assert turning_points[0].type == TurningPointType.SETBACK
        assert turning_points[0].magnitude == pytest.approx(8.5)

    def test_small_extremum_ignored(self):
        """Test extrema below the magnitude threshold are ignored."""
        assert TrajectoryBuilder().find_turning_points(points(5.0, 5.5, 5.0)) == []
