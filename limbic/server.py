"""MCP Server for Limbic."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .container import get_container
from .domain.exceptions import LimbicError
from .domain.models import ExtractedMemory

logger = logging.getLogger(__name__)


# =============================================================================
# Helper Functions
# =============================================================================


def _dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a model into JSON-safe primitives."""
    return model.model_dump(mode="json")


def _error(e: Exception) -> dict[str, Any]:
    return {"success": False, "error": str(e)}


def _parse_time(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# =============================================================================
# Server Instructions
# =============================================================================

SERVER_INSTRUCTIONS = """
Limbic scores the emotional content of conversations and groups memories
by psychological similarity.

## Mood
- `limbic_analyze_conversation` scores a conversation (0-10) without storing it.
- `limbic_score_memory` scores a conversation and stores the result against a memory.
- `limbic_track_deltas` records how mood moved across a conversation and
  detects patterns and turning points.

## Memories and clusters
- Store memories with `limbic_store_memory` before scoring or clustering them.
- `limbic_extract_features` and `limbic_compare_memories` expose the five
  feature dimensions (emotional, communication, relationship,
  psychological, temporal).
- `limbic_cluster_memory` assigns a memory to the closest cluster or starts a new one.

Every result is deterministic: the same input always gives the same output.
"""


# =============================================================================
# MCP Server
# =============================================================================

mcp = FastMCP("limbic", instructions=SERVER_INSTRUCTIONS)


@mcp.tool(name="limbic_ping")
def ping() -> dict[str, Any]:
    """Health check to verify Limbic is running.

    Returns:
        Status information about the server.
    """
    return {"status": "ok", "message": "Limbic is operational"}


# =============================================================================
# Mood Tools
# =============================================================================


@mcp.tool(name="limbic_analyze_conversation")
def analyze_conversation(conversation: dict[str, Any]) -> dict[str, Any]:
    """Score the mood of a conversation without storing anything.

    Args:
        conversation: Conversation with id, messages, participants, timestamp,
            start_time, end_time and an optional baseline_score.

    Returns:
        Score (0-10), confidence, descriptors and contributing factors.
    """
    container = get_container()

    try:
        result = container.mood_service.analyze_conversation(conversation)
        return {"success": True, **_dump(result)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_score_memory")
def score_memory(memory_id: str, conversation: dict[str, Any]) -> dict[str, Any]:
    """Score a conversation and store the result against a stored memory.

    Args:
        memory_id: ID of the memory the conversation belongs to.
        conversation: The conversation to score.

    Returns:
        The stored mood score with its factors.
    """
    container = get_container()

    try:
        stored = container.mood_service.score_memory(memory_id, conversation)
        return {"success": True, "mood_score": _dump(stored)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_track_deltas")
def track_deltas(
    memory_id: str,
    conversation_id: str,
    analyses: list[dict[str, Any]],
    start_time: str,
    duration_ms: int,
) -> dict[str, Any]:
    """Track mood changes across a sequence of per-message analyses.

    Args:
        memory_id: ID of the stored memory.
        conversation_id: ID of the conversation the analyses come from.
        analyses: Mood analyses in conversation order.
        start_time: ISO-8601 start of the conversation.
        duration_ms: Conversation length in milliseconds.

    Returns:
        Stored deltas, detected patterns and turning points.
    """
    try:
        started = _parse_time(start_time)
    except ValueError:
        return {"success": False, "error": f"Invalid start_time: {start_time!r}"}

    container = get_container()

    try:
        result = container.mood_service.track_deltas(
            memory_id=memory_id,
            conversation_id=conversation_id,
            analyses=analyses,
            start_time=started,
            duration_ms=duration_ms,
        )
        return {
            "success": True,
            "delta_count": len(result.deltas),
            **_dump(result),
        }
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_get_significant_deltas")
def get_significant_deltas(min_significance: float = 0.0, limit: int = 50) -> dict[str, Any]:
    """List stored deltas at or above a significance, most significant first.

    Args:
        min_significance: Minimum significance to include.
        limit: Maximum number of deltas (1-500).
    """
    limit = max(1, min(limit, 500))
    container = get_container()

    try:
        deltas = container.mood_service.get_significant_deltas(min_significance, limit)
        return {"deltas": [_dump(d) for d in deltas], "total_found": len(deltas)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_get_delta_patterns")
def get_delta_patterns(memory_id: str) -> dict[str, Any]:
    """List the delta patterns stored for a memory."""
    container = get_container()
    patterns = container.mood_service.get_delta_patterns(memory_id)
    return {"patterns": [_dump(p) for p in patterns], "total_found": len(patterns)}


@mcp.tool(name="limbic_get_turning_points")
def get_turning_points(memory_id: str) -> dict[str, Any]:
    """List the turning points stored for a memory in time order."""
    container = get_container()
    points = container.mood_service.get_turning_points(memory_id)
    return {"turning_points": [_dump(t) for t in points], "total_found": len(points)}


@mcp.tool(name="limbic_record_validation")
def record_validation(
    memory_id: str,
    human_score: float,
    validator_id: str,
    algorithm_score: float | None = None,
    method: str = "manual",
    feedback: str = "",
) -> dict[str, Any]:
    """Record a human rating of a memory's mood against the algorithm.

    Args:
        memory_id: ID of the scored memory.
        human_score: Human rating (0-10).
        validator_id: Who gave the rating.
        algorithm_score: Score being validated. Defaults to the latest stored score.
        method: How the rating was collected.
        feedback: Free-form notes.

    Returns:
        The stored validation with agreement and discrepancy.
    """
    container = get_container()

    try:
        result = container.mood_service.record_validation(
            memory_id=memory_id,
            human_score=human_score,
            validator_id=validator_id,
            algorithm_score=algorithm_score,
            method=method,
            feedback=feedback,
        )
        return {"success": True, "validation": _dump(result)}
    except LimbicError as e:
        return _error(e)


# =============================================================================
# Memory Tools
# =============================================================================


@mcp.tool(name="limbic_store_memory")
def store_memory(memory: dict[str, Any]) -> dict[str, Any]:
    """Store (or replace) an extracted memory.

    Args:
        memory: Memory with id, content, timestamp, author, participants,
            emotional_context, relationship_dynamics and emotional_analysis.
    """
    try:
        parsed = ExtractedMemory.model_validate(memory)
    except PydanticValidationError as e:
        return {"success": False, "error": f"Invalid memory: {e}"}

    container = get_container()

    try:
        stored = container.clustering_service.store_memory(parsed)
        return {
            "success": True,
            "memory_id": stored.id,
            "message": f"Memory '{stored.id}' stored",
        }
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_get_memory")
def get_memory(memory_id: str) -> dict[str, Any]:
    """Get a stored memory by ID."""
    container = get_container()

    try:
        memory = container.clustering_service.get_memory(memory_id)
        return {"success": True, "memory": _dump(memory)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_delete_memory")
def delete_memory(memory_id: str) -> dict[str, Any]:
    """Delete a memory together with its scores, deltas and memberships."""
    container = get_container()

    try:
        container.clustering_service.delete_memory(memory_id)
        return {"success": True, "message": f"Memory '{memory_id}' deleted"}
    except LimbicError as e:
        return _error(e)


# =============================================================================
# Feature and Clustering Tools
# =============================================================================


@mcp.tool(name="limbic_extract_features")
def extract_features(memory_id: str) -> dict[str, Any]:
    """Extract the five clustering feature dimensions of a stored memory."""
    container = get_container()

    try:
        result = container.clustering_service.extract_features(memory_id)
        return {"success": True, **_dump(result)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_compare_memories")
def compare_memories(memory_id_a: str, memory_id_b: str) -> dict[str, Any]:
    """Compare two stored memories across every feature dimension.

    Returns:
        Overall similarity (0-1) with a per-dimension breakdown.
    """
    container = get_container()

    try:
        result = container.clustering_service.compare_memories(memory_id_a, memory_id_b)
        return {"success": True, **_dump(result)}
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_cluster_memory")
def cluster_memory(memory_id: str) -> dict[str, Any]:
    """Assign a stored memory to the most similar cluster, or start a new one."""
    container = get_container()

    try:
        assignment = container.clustering_service.cluster_memory(memory_id)
        return {
            "success": True,
            "created_new": assignment.created_new,
            "cluster": _dump(assignment.cluster),
            "membership": _dump(assignment.membership),
        }
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_recluster")
def recluster(memory_ids: list[str] | None = None) -> dict[str, Any]:
    """Rebuild all clusters from scratch.

    Args:
        memory_ids: Restrict to these memories. Defaults to every stored memory.
    """
    container = get_container()

    try:
        clusters = container.clustering_service.recluster(memory_ids)
        return {
            "success": True,
            "clusters": [_dump(c) for c in clusters],
            "total_clusters": len(clusters),
        }
    except LimbicError as e:
        return _error(e)


@mcp.tool(name="limbic_list_clusters")
def list_clusters() -> dict[str, Any]:
    """List every memory cluster with its members and quality metrics."""
    container = get_container()
    clusters = container.clustering_service.list_clusters()
    return {"clusters": [_dump(c) for c in clusters], "total_clusters": len(clusters)}
