"""Unit tests for delta significance scoring."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from limbic.brain.hippocampus import DeltaSignificanceEngine, SignificanceWeights
from limbic.domain.models import (
    DeltaDirection,
    DeltaType,
    MoodDelta,
    TemporalPosition,
    TurningPointContext,
    TurningPointInput,
    TurningPointType,
)


def make_delta(
    delta_type: DeltaType = DeltaType.MOOD_REPAIR,
    magnitude: float = 2.0,
    confidence: float = 1.0,
) -> MoodDelta:
    return MoodDelta(
        magnitude=magnitude,
        direction=DeltaDirection.POSITIVE,
        type=delta_type,
        confidence=confidence,
    )


class TestSignificanceWeights:
    """Tests for SignificanceWeights."""

    def test_type_ordering_enforced(self):
        """Test type weights must keep their priority order."""
        with pytest.raises(ValueError, match="Type weights"):
            SignificanceWeights(celebration=2.0)

    def test_position_ordering_enforced(self):
        """Test position weights must keep their priority order."""
        with pytest.raises(ValueError, match="Position weights"):
            SignificanceWeights(early=1.5)


class TestDeltaSignificance:
    """Tests for per-delta significance."""

    @pytest.mark.parametrize(
        "index,total,expected",
        [
            (0, 1, TemporalPosition.EARLY),
            (0, 3, TemporalPosition.EARLY),
            (1, 3, TemporalPosition.MIDDLE),
            (2, 3, TemporalPosition.CONCLUSION),
        ],
    )
    def test_temporal_position(self, index, total, expected):
        """Test first is early, last is conclusion, the rest middle."""
        assert DeltaSignificanceEngine.temporal_position(index, total) == expected

    def test_formula(self):
        """Test type * magnitude * confidence * position."""
        engine = DeltaSignificanceEngine()
        significance = engine.delta_significance(
            make_delta(magnitude=2.0), TemporalPosition.CONCLUSION
        )
        assert significance == pytest.approx(1.5 * 2.0 * 1.0 * 1.3)

    def test_type_ordering(self):
        """Test repair > decline > celebration > plateau for equal deltas."""
        engine = DeltaSignificanceEngine()
        scores = [
            engine.delta_significance(make_delta(t), TemporalPosition.MIDDLE)
            for t in (
                DeltaType.MOOD_REPAIR,
                DeltaType.DECLINE,
                DeltaType.CELEBRATION,
                DeltaType.PLATEAU,
            )
        ]
        assert scores == sorted(scores, reverse=True)
        assert len(set(scores)) == 4

    def test_position_ordering(self):
        """Test conclusion > early > middle for equal deltas."""
        engine = DeltaSignificanceEngine()
        delta = make_delta()
        conclusion = engine.delta_significance(delta, TemporalPosition.CONCLUSION)
        early = engine.delta_significance(delta, TemporalPosition.EARLY)
        middle = engine.delta_significance(delta, TemporalPosition.MIDDLE)
        assert conclusion > early > middle

    def test_not_capped(self):
        """Test individual delta significance can exceed 10."""
        engine = DeltaSignificanceEngine()
        significance = engine.delta_significance(
            make_delta(magnitude=10.0), TemporalPosition.CONCLUSION
        )
        assert significance == pytest.approx(19.5)


class TestAnnotate:
    """Tests for annotate."""

    def test_annotations(self):
        """Test sequence, position, counts and relative timestamps."""
        engine = DeltaSignificanceEngine()
        deltas = [make_delta(), make_delta(DeltaType.PLATEAU), make_delta(DeltaType.DECLINE)]

        annotated = engine.annotate(deltas, duration_ms=9000)

        assert [d.delta_sequence for d in annotated] == [0, 1, 2]
        assert [d.temporal_context.position for d in annotated] == [
            TemporalPosition.EARLY,
            TemporalPosition.MIDDLE,
            TemporalPosition.CONCLUSION,
        ]
        assert [d.temporal_context.relative_timestamp for d in annotated] == [0, 3000, 6000]
        assert annotated[1].temporal_context.preceding_deltas == 1
        assert annotated[1].temporal_context.following_deltas == 1
        assert all(d.significance is not None for d in annotated)

    def test_inputs_untouched(self):
        """Test annotate returns copies."""
        deltas = [make_delta()]
        DeltaSignificanceEngine().annotate(deltas, duration_ms=1000)
        assert deltas[0].significance is None
        assert deltas[0].temporal_context is None

    def test_relative_timestamps_floor(self):
        """Test relative timestamps are floored."""
        annotated = DeltaSignificanceEngine().annotate(
            [make_delta() for _ in range(3)], duration_ms=1000
        )
        assert [d.temporal_context.relative_timestamp for d in annotated] == [0, 333, 666]

    def test_empty(self):
        """Test annotating nothing returns nothing."""
        assert DeltaSignificanceEngine().annotate([], duration_ms=1000) == []


class TestPatternAndTurningPointSignificance:
    """Tests for pattern and turning point scoring."""

    def test_pattern_significance_capped(self):
        """Test three deltas averaging 2.3 hit the cap."""
        engine = DeltaSignificanceEngine()
        assert engine.pattern_significance(3, 2.3) == 10.0
        assert engine.pattern_confidence(3, 2.3) == pytest.approx(0.896)

    def test_pattern_significance_below_cap(self):
        """Test small patterns scale with count and magnitude."""
        engine = DeltaSignificanceEngine()
        assert engine.pattern_significance(2, 1.0) == pytest.approx(4.0)
        assert engine.pattern_confidence(2, 1.0) == pytest.approx(0.82)

    def test_pattern_confidence_capped(self):
        """Test confidence never exceeds 1.0."""
        assert DeltaSignificanceEngine.pattern_confidence(50, 50.0) == 1.0

    def test_turning_point_significance(self):
        """Test surrounding change amplifies significance."""
        engine = DeltaSignificanceEngine()
        tp = TurningPointInput(
            type=TurningPointType.BREAKTHROUGH,
            magnitude=3.0,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        context = TurningPointContext(preceding_magnitude=1.0, following_magnitude=1.0)
        assert engine.turning_point_significance(tp, context) == pytest.approx(7.2)

    def test_turning_point_significance_capped(self):
        """Test turning point significance is capped at 10."""
        engine = DeltaSignificanceEngine()
        tp = TurningPointInput(
            type=TurningPointType.BREAKTHROUGH,
            magnitude=5.0,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        context = TurningPointContext(preceding_magnitude=1.0, following_magnitude=1.0)
        assert engine.turning_point_significance(tp, context) == 10.0
