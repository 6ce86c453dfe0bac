"""Pytest fixtures for Limbic tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from limbic.config import Config, reset_config
from limbic.container import Container, reset_container
from limbic.domain.models import ExtractedMemory

BASE_TIME = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_data_dir: Path) -> Generator[Config, None, None]:
    """Create a test configuration."""
    config = Config(
        data_dir=temp_data_dir,
        db_name="test_db",
        algorithm_version="test-1.0.0",
        delta_minimum_magnitude=0.0,
        delta_neutral_epsilon=0.05,
        turning_point_threshold=2.5,
        cluster_similarity_threshold=0.7,
        max_cluster_size=50,
    )
    yield config


@pytest.fixture
def container(test_config: Config) -> Generator[Container, None, None]:
    """Create a test container with isolated dependencies."""
    # Reset any global state
    reset_config()
    reset_container()

    container = Container.create(test_config)
    yield container

    # Cleanup
    container.close()
    reset_container()
    reset_config()


@pytest.fixture
def repository(container: Container):
    """Storage gateway backed by a temporary KùzuDB database."""
    return container.repository


@pytest.fixture(autouse=True)
def set_test_env(temp_data_dir: Path) -> Generator[None, None, None]:
    """Set environment variables for tests."""
    old_env = os.environ.get("LIMBIC_DATA_DIR")
    os.environ["LIMBIC_DATA_DIR"] = str(temp_data_dir)
    yield
    if old_env:
        os.environ["LIMBIC_DATA_DIR"] = old_env
    else:
        os.environ.pop("LIMBIC_DATA_DIR", None)


# =============================================================================
# Memory fixtures
# =============================================================================


def make_memory_data(**overrides: Any) -> dict[str, Any]:
    """Raw data for an anxiety-plus-support memory; overrides replace top-level keys."""
    data: dict[str, Any] = {
        "id": "test-memory-1",
        "content": (
            "I was feeling really anxious about the presentation, but talking with "
            "Sarah helped me feel so much better. She always knows exactly what to "
            "say to calm me down."
        ),
        "timestamp": BASE_TIME.isoformat(),
        "author": {"id": "user-1", "name": "Alex", "role": "self"},
        "participants": [
            {"id": "user-1", "name": "Alex", "role": "self"},
            {"id": "user-2", "name": "Sarah", "role": "friend"},
        ],
        "emotional_context": {
            "intensity": 0.7,
            "valence": -0.2,
            "themes": ["stress", "support", "connection"],
            "indicators": {
                "phrases": [
                    "feeling really anxious",
                    "helped me feel so much better",
                    "always knows exactly what to say",
                ],
                "emotional_words": ["anxious", "calm", "grateful"],
            },
        },
        "relationship_dynamics": {
            "communication_pattern": "supportive",
            "interaction_quality": "positive",
            "connection_strength": 0.8,
            "quality": 8.5,
            "patterns": ["supportive_listening", "reassurance"],
            "health_indicators": {
                "positive": ["mutual support", "active listening", "emotional validation"],
            },
        },
        "emotional_analysis": {
            "mood_scoring": {
                "score": 6.8,
                "confidence": 0.82,
                "descriptors": ["anxious", "supported", "grateful"],
                "factors": [],
            },
            "trajectory": {
                "points": [
                    {
                        "timestamp": BASE_TIME.isoformat(),
                        "mood_score": 4.2,
                        "emotions": ["anxious", "worried"],
                    },
                    {
                        "timestamp": (BASE_TIME + timedelta(minutes=10)).isoformat(),
                        "mood_score": 7.5,
                        "emotions": ["grateful", "calm"],
                    },
                ],
                "direction": "improving",
                "significance": 0.8,
                "turning_points": [
                    {
                        "timestamp": (BASE_TIME + timedelta(minutes=5)).isoformat(),
                        "type": "support_received",
                        "magnitude": 3.3,
                        "description": "Support from Sarah led to mood improvement",
                        "factors": ["empathetic listening", "reassurance"],
                    }
                ],
            },
            "patterns": [
                {
                    "type": "support_seeking",
                    "confidence": 0.9,
                    "description": "Seeking and receiving emotional support",
                    "evidence": ["talking with Sarah helped"],
                    "significance": 0.8,
                }
            ],
        },
    }
    data.update(overrides)
    return data


def _with_mood(data: dict[str, Any], score: float, confidence: float, descriptors: list[str]):
    analysis = dict(data["emotional_analysis"])
    analysis["mood_scoring"] = {
        "score": score,
        "confidence": confidence,
        "descriptors": descriptors,
        "factors": [],
    }
    data["emotional_analysis"] = analysis
    return data


@pytest.fixture
def memory_data() -> dict[str, Any]:
    """Raw data for the base memory."""
    return make_memory_data()


@pytest.fixture
def base_memory() -> ExtractedMemory:
    """Anxiety about a presentation eased by a friend's support."""
    return ExtractedMemory.model_validate(make_memory_data())


@pytest.fixture
def similar_memory() -> ExtractedMemory:
    """Same theme as base_memory: stress eased by support."""
    data = make_memory_data(
        id="test-memory-2",
        content=(
            "I was stressed about the interview, but my mom gave me such great "
            "advice and I felt much more confident."
        ),
    )
    return ExtractedMemory.model_validate(
        _with_mood(data, 7.2, 0.8, ["stressed", "supported", "confident"])
    )


@pytest.fixture
def celebration_memory() -> ExtractedMemory:
    """A celebration that shares no emotional descriptor with base_memory."""
    data = make_memory_data(
        id="test-memory-3",
        content=(
            "We celebrated my promotion at the restaurant. Everyone was so happy "
            "and excited for me!"
        ),
        emotional_context={
            "intensity": 0.8,
            "valence": 0.9,
            "themes": ["celebration", "achievement", "connection"],
            "indicators": {
                "phrases": ["celebrated my promotion", "Everyone was so happy"],
                "emotional_words": ["happy", "excited", "proud"],
            },
        },
    )
    return ExtractedMemory.model_validate(
        _with_mood(data, 8.5, 0.9, ["happy", "excited", "proud"])
    )


@pytest.fixture
def empty_memory() -> ExtractedMemory:
    """A memory with no content and no descriptors."""
    data = make_memory_data(id="test-memory-empty", content="")
    return ExtractedMemory.model_validate(_with_mood(data, 5.0, 0.1, []))


@pytest.fixture
def minimal_memory() -> ExtractedMemory:
    """Short logistics with no emotional content."""
    data = make_memory_data(
        id="test-memory-minimal",
        content="Meeting at 3pm.",
        emotional_context={
            "intensity": 0.2,
            "valence": 0.0,
            "themes": [],
            "indicators": {"phrases": ["Meeting at 3pm"], "emotional_words": []},
        },
    )
    return ExtractedMemory.model_validate(_with_mood(data, 5.0, 0.3, ["neutral"]))


@pytest.fixture
def neutral_memory() -> ExtractedMemory:
    """Neutral mood with logistics content."""
    data = make_memory_data(
        id="test-memory-neutral",
        content="We discussed the project timeline and agreed on next steps.",
    )
    return ExtractedMemory.model_validate(_with_mood(data, 5.0, 0.6, ["neutral", "focused"]))


# =============================================================================
# Conversation fixtures
# =============================================================================


def make_conversation(messages: list[tuple[str, str]], **overrides: Any) -> dict[str, Any]:
    """Conversation dict from (author_id, content) pairs one minute apart."""
    data: dict[str, Any] = {
        "id": "conv-1",
        "messages": [
            {
                "id": f"msg-{i}",
                "content": content,
                "author_id": author,
                "timestamp": (BASE_TIME + timedelta(minutes=i)).isoformat(),
            }
            for i, (author, content) in enumerate(messages)
        ],
        "participants": [
            {"id": "user-1", "name": "Alex", "role": "self"},
            {"id": "user-2", "name": "Sarah", "role": "friend"},
        ],
        "timestamp": BASE_TIME.isoformat(),
        "start_time": BASE_TIME.isoformat(),
        "end_time": (BASE_TIME + timedelta(minutes=len(messages))).isoformat(),
    }
    data.update(overrides)
    return data


@pytest.fixture
def supportive_conversation() -> dict[str, Any]:
    """A conversation that moves from distress to relief."""
    return make_conversation(
        [
            ("user-1", "I'm so stressed and anxious about the presentation tomorrow."),
            ("user-2", "I'm here for you. I understand, and I'm proud of you."),
            ("user-1", "Thank you, I feel better now. I'm really grateful and hopeful."),
        ]
    )


@pytest.fixture
def positive_conversation() -> dict[str, Any]:
    """A uniformly happy conversation."""
    return make_conversation(
        [
            ("user-1", "I'm so happy and excited, I got the job!"),
            ("user-2", "That's wonderful, I'm thrilled and proud of you!"),
            ("user-1", "Thank you, I feel grateful and joyful."),
        ]
    )


@pytest.fixture
def distressed_conversation() -> dict[str, Any]:
    """A conversation dominated by distress."""
    return make_conversation(
        [
            ("user-1", "I feel hopeless and devastated, I can't cope anymore."),
            ("user-2", "Why are you overreacting?"),
            ("user-1", "I'm lonely and heartbroken and so tired of this."),
        ]
    )


def analysis(score: float, confidence: float = 0.9, descriptors: list[str] | None = None):
    """A minimal mood analysis dict."""
    return {
        "score": score,
        "confidence": confidence,
        "descriptors": descriptors or [],
        "factors": [],
    }


@pytest.fixture
def conversation_factory():
    """Build conversation dicts from (author_id, content) pairs."""
    return make_conversation


@pytest.fixture
def analysis_factory():
    """Build minimal mood analysis dicts."""
    return analysis
