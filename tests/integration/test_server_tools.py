"""Integration tests for the MCP tool functions."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from limbic import server
from limbic.config import reset_config
from limbic.container import reset_container


@pytest.fixture
def fresh_container() -> Generator[None, None, None]:
    """Global container rebuilt against the temporary data directory."""
    reset_config()
    reset_container()
    yield
    reset_container()
    reset_config()


@pytest.fixture
def stored_memory(fresh_container, memory_data):
    """Base memory stored through the tool."""
    result = server.store_memory(memory_data)
    assert result["success"]
    return memory_data["id"]


class TestPing:
    """Tests for limbic_ping."""

    def test_ping(self):
        """Test the health check."""
        assert server.ping() == {"status": "ok", "message": "Limbic is operational"}


class TestMoodTools:
    """Tests for the mood tools."""

    def test_analyze_conversation(self, fresh_container, supportive_conversation):
        """Test scoring without storage."""
        result = server.analyze_conversation(supportive_conversation)

        assert result["success"]
        assert 0.0 <= result["score"] <= 10.0
        assert len(result["factors"]) == 5

    def test_analyze_malformed_conversation(self, fresh_container):
        """Test malformed input comes back as an error."""
        result = server.analyze_conversation({"messages": "nope"})

        assert result["success"] is False
        assert "Invalid conversation" in result["error"]

    def test_score_memory(self, stored_memory, supportive_conversation):
        """Test scoring a stored memory."""
        result = server.score_memory(stored_memory, supportive_conversation)

        assert result["success"]
        assert result["mood_score"]["memory_id"] == stored_memory

    def test_score_missing_memory(self, fresh_container, supportive_conversation):
        """Test scoring an unknown memory is an error."""
        result = server.score_memory("ghost", supportive_conversation)

        assert result == {
            "success": False,
            "error": "Referenced memory 'ghost' does not exist",
        }

    def test_track_deltas(self, stored_memory, analysis_factory):
        """Test tracking deltas through the tool."""
        result = server.track_deltas(
            memory_id=stored_memory,
            conversation_id="conv-1",
            analyses=[analysis_factory(s) for s in (2.5, 6.5, 8.0, 5.0)],
            start_time="2024-01-15T14:30:00Z",
            duration_ms=12000,
        )

        assert result["success"]
        assert result["delta_count"] == 3
        assert len(result["turning_points"]) == 2

        patterns = server.get_delta_patterns(stored_memory)
        assert patterns["total_found"] == 2
        points = server.get_turning_points(stored_memory)
        assert [p["type"] for p in points["turning_points"]] == ["breakthrough", "setback"]

    def test_track_deltas_bad_start_time(self, fresh_container, analysis_factory):
        """Test an unparseable start time is an error."""
        result = server.track_deltas(
            memory_id="m",
            conversation_id="conv-1",
            analyses=[analysis_factory(5.0)],
            start_time="yesterday",
            duration_ms=0,
        )

        assert result["success"] is False
        assert "Invalid start_time" in result["error"]

    def test_significant_deltas_limit_clamped(self, stored_memory, analysis_factory):
        """Test the limit is clamped to at least one."""
        server.track_deltas(
            memory_id=stored_memory,
            conversation_id="conv-1",
            analyses=[analysis_factory(s) for s in (2.5, 6.5, 8.0)],
            start_time="2024-01-15T14:30:00Z",
            duration_ms=6000,
        )

        result = server.get_significant_deltas(min_significance=0.0, limit=0)

        assert result["total_found"] == 1

    def test_record_validation(self, stored_memory):
        """Test recording a validation with an explicit score."""
        result = server.record_validation(
            memory_id=stored_memory,
            human_score=7.0,
            validator_id="rater-1",
            algorithm_score=6.8,
        )

        assert result["success"]
        assert result["validation"]["agreement"] == pytest.approx(0.98)

    def test_record_validation_out_of_range(self, stored_memory):
        """Test out-of-range scores come back as errors."""
        result = server.record_validation(
            memory_id=stored_memory,
            human_score=11.0,
            validator_id="rater-1",
            algorithm_score=6.8,
        )

        assert result["success"] is False
        assert "human_score" in result["error"]


class TestMemoryTools:
    """Tests for the memory and clustering tools."""

    def test_store_invalid_memory(self, fresh_container):
        """Test invalid memories are rejected before storage."""
        result = server.store_memory({"id": "broken"})

        assert result["success"] is False
        assert result["error"].startswith("Invalid memory:")

    def test_get_and_delete_memory(self, stored_memory):
        """Test reading and deleting a memory."""
        loaded = server.get_memory(stored_memory)
        assert loaded["success"]
        assert loaded["memory"]["id"] == stored_memory

        deleted = server.delete_memory(stored_memory)
        assert deleted == {"success": True, "message": f"Memory '{stored_memory}' deleted"}

        missing = server.get_memory(stored_memory)
        assert missing["success"] is False
        assert "not found" in missing["error"]

    def test_extract_features(self, stored_memory):
        """Test feature extraction through the tool."""
        result = server.extract_features(stored_memory)

        assert result["success"]
        assert result["memory_id"] == stored_memory
        assert set(result["features"]) == {
            "emotional_tone",
            "communication_style",
            "relationship_context",
            "psychological_indicators",
            "temporal_context",
        }

    def test_compare_memories(self, stored_memory):
        """Test comparing a memory with itself."""
        result = server.compare_memories(stored_memory, stored_memory)

        assert result["success"]
        assert result["similarity"]["overall"] == 1.0

    def test_clustering_tools(self, stored_memory):
        """Test clustering, reclustering and listing."""
        assigned = server.cluster_memory(stored_memory)
        assert assigned["success"]
        assert assigned["created_new"] is True
        assert assigned["membership"]["memory_id"] == stored_memory

        listed = server.list_clusters()
        assert listed["total_clusters"] == 1

        rebuilt = server.recluster()
        assert rebuilt["success"]
        assert rebuilt["total_clusters"] == 1
        assert rebuilt["clusters"][0]["memory_ids"] == [stored_memory]

    def test_cluster_missing_memory(self, fresh_container):
        """Test clustering an unknown memory is an error."""
        result = server.cluster_memory("ghost")

        assert result["success"] is False
        assert "ghost" in result["error"]
