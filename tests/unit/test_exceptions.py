"""Unit tests for custom exceptions."""

from __future__ import annotations

import pytest

from limbic.domain.exceptions import (
    ClusterNotFoundError,
    DatabaseError,
    LimbicError,
    MemoryNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)


class TestExceptions:
    """Tests for custom exceptions."""

    def test_memory_not_found_error(self):
        """Test MemoryNotFoundError."""
        error = MemoryNotFoundError("test-id-123")

        assert error.memory_id == "test-id-123"
        assert "test-id-123" in str(error)
        assert "not found" in str(error)

    def test_cluster_not_found_error(self):
        """Test ClusterNotFoundError."""
        error = ClusterNotFoundError("cluster-9")

        assert error.cluster_id == "cluster-9"
        assert "cluster-9" in str(error)

    def test_referential_integrity_error(self):
        """Test ReferentialIntegrityError names the missing parent."""
        error = ReferentialIntegrityError("memory", "m-1")

        assert error.entity == "memory"
        assert error.entity_id == "m-1"
        assert str(error) == "Referenced memory 'm-1' does not exist"

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad"),
            DatabaseError("down"),
            MemoryNotFoundError("m"),
            ClusterNotFoundError("c"),
            ReferentialIntegrityError("delta", "d"),
        ],
    )
    def test_inheritance(self, error):
        """Test that every domain error is a LimbicError."""
        assert isinstance(error, LimbicError)
        assert isinstance(error, Exception)
