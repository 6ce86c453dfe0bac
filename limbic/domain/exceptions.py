"""Custom exceptions for Limbic."""

from __future__ import annotations


class LimbicError(Exception):
    """Base exception for Limbic."""

    pass


class ValidationError(LimbicError):
    """Raised when input validation fails."""

    pass


class ReferentialIntegrityError(LimbicError):
    """Raised when a write references a parent record that does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"Referenced {entity} '{entity_id}' does not exist")


class MemoryNotFoundError(LimbicError):
    """Raised when a memory is not found."""

    def __init__(self, memory_id: str) -> None:
        self.memory_id = memory_id
        super().__init__(f"Memory with ID '{memory_id}' not found")


class ClusterNotFoundError(LimbicError):
    """Raised when a memory cluster is not found."""

    def __init__(self, cluster_id: str) -> None:
        self.cluster_id = cluster_id
        super().__init__(f"Cluster with ID '{cluster_id}' not found")


class DatabaseError(LimbicError):
    """Raised when a database operation fails."""

    pass
