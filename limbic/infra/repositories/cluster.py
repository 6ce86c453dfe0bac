"""Memory cluster storage.

Cluster snapshots live on MemoryCluster nodes; membership is the
MEMBER_OF relationship. memory_count is maintained explicitly on every
membership change rather than derived by counting relationships.
"""

from __future__ import annotations

import logging

from ...domain.exceptions import ClusterNotFoundError
from ...domain.models import (
    ClusterMembership,
    ClusterMetadata,
    ClusterQualityMetrics,
    MemoryCluster,
)
from .base import BaseRepositoryMixin, from_db_time, to_db_time, utc_now

logger = logging.getLogger(__name__)

_CLUSTER_COLUMNS = """
    c.id, c.theme, c.coherence_score, c.psychological_significance,
    c.memory_count, c.quality_metrics, c.created_at
"""


class ClusterMixin(BaseRepositoryMixin):
    """Mixin for memory cluster operations."""

    # =========================================================================
    # Create / Update Operations
    # =========================================================================

    def create_cluster(self, cluster: MemoryCluster) -> MemoryCluster:
        """Create an empty cluster node from a snapshot.

        Members are attached with add_memory_to_cluster, which keeps
        memory_count in step.
        """
        self._execute_write(
            """
            CREATE (c:MemoryCluster {
                id: $id,
                theme: $theme,
                coherence_score: $coherence_score,
                psychological_significance: $psychological_significance,
                memory_count: 0,
                quality_metrics: $quality_metrics,
                created_at: $created_at,
                updated_at: $updated_at
            })
            """,
            parameters={
                **self._snapshot_parameters(cluster),
                "created_at": to_db_time(cluster.metadata.created_at),
            },
        )
        logger.info(f"Created cluster {cluster.cluster_id} ({cluster.theme})")
        return self.get_cluster(cluster.cluster_id)

    def add_memory_to_cluster(
        self,
        cluster: MemoryCluster,
        membership: ClusterMembership,
        previous: MemoryCluster | None = None,
    ) -> MemoryCluster:
        """Upsert a cluster snapshot and one membership atomically.

        Args:
            cluster: Snapshot of the target cluster including the memory.
            membership: The memory's membership in it.
            previous: Snapshot of the cluster the memory is leaving, without
                the memory. Detached in the same transaction.

        Raises:
            ReferentialIntegrityError: If the memory does not exist.
        """
        self._require_memory(membership.memory_id)

        with self._transaction():
            if previous is not None and previous.cluster_id != cluster.cluster_id:
                self.remove_memory_from_cluster(previous, membership.memory_id)
            if self._cluster_row(cluster.cluster_id) is None:
                self.create_cluster(cluster)
            else:
                self._execute_write(
                    """
                    MATCH (c:MemoryCluster {id: $id})
                    SET c.theme = $theme,
                        c.coherence_score = $coherence_score,
                        c.psychological_significance = $psychological_significance,
                        c.quality_metrics = $quality_metrics,
                        c.updated_at = $updated_at
                    """,
                    parameters=self._snapshot_parameters(cluster),
                )

            link = {
                "memory_id": membership.memory_id,
                "cluster_id": membership.cluster_id,
                "membership_strength": membership.membership_strength,
                "contribution_score": membership.contribution_score,
                "added_at": to_db_time(membership.added_at),
            }
            existing = self._fetch_one(
                """
                MATCH (:Memory {id: $memory_id})-[r:MEMBER_OF]->(:MemoryCluster {id: $cluster_id})
                RETURN r.added_at
                """,
                parameters={
                    "memory_id": membership.memory_id,
                    "cluster_id": membership.cluster_id,
                },
            )
            if existing is None:
                self._execute_write(
                    """
                    MATCH (m:Memory {id: $memory_id}), (c:MemoryCluster {id: $cluster_id})
                    CREATE (m)-[:MEMBER_OF {
                        membership_strength: $membership_strength,
                        contribution_score: $contribution_score,
                        added_at: $added_at
                    }]->(c)
                    """,
                    parameters=link,
                )
                self._execute_write(
                    """
                    MATCH (c:MemoryCluster {id: $id})
                    SET c.memory_count = c.memory_count + 1
                    """,
                    parameters={"id": membership.cluster_id},
                )
            else:
                self._execute_write(
                    """
                    MATCH (:Memory {id: $memory_id})-[r:MEMBER_OF]->(:MemoryCluster {id: $cluster_id})
                    SET r.membership_strength = $membership_strength,
                        r.contribution_score = $contribution_score,
                        r.added_at = $added_at
                    """,
                    parameters=link,
                )

        logger.info(f"Memory {membership.memory_id} added to cluster {cluster.cluster_id}")
        return self.get_cluster(cluster.cluster_id)

    def remove_memory_from_cluster(self, cluster: MemoryCluster, memory_id: str) -> bool:
        """Detach one memory from a cluster atomically.

        Args:
            cluster: Snapshot of the cluster without the memory. A snapshot
                with no members deletes the cluster.
            memory_id: Memory to detach.

        Returns:
            True if the memory was a member.
        """
        params = {"memory_id": memory_id, "cluster_id": cluster.cluster_id}
        with self._transaction():
            existing = self._fetch_one(
                """
                MATCH (:Memory {id: $memory_id})-[r:MEMBER_OF]->(:MemoryCluster {id: $cluster_id})
                RETURN r.added_at
                """,
                parameters=params,
            )
            if existing is None:
                return False
            if not cluster.memory_ids:
                self.delete_cluster(cluster.cluster_id)
                return True

            self._execute_write(
                """
                MATCH (:Memory {id: $memory_id})-[r:MEMBER_OF]->(:MemoryCluster {id: $cluster_id})
                DELETE r
                """,
                parameters=params,
            )
            self._execute_write(
                """
                MATCH (c:MemoryCluster {id: $id})
                SET c.memory_count = CASE WHEN c.memory_count > 0
                                          THEN c.memory_count - 1 ELSE 0 END,
                    c.theme = $theme,
                    c.coherence_score = $coherence_score,
                    c.psychological_significance = $psychological_significance,
                    c.quality_metrics = $quality_metrics,
                    c.updated_at = $updated_at
                """,
                parameters=self._snapshot_parameters(cluster),
            )

        logger.info(f"Memory {memory_id} removed from cluster {cluster.cluster_id}")
        return True

    def delete_cluster(self, cluster_id: str) -> bool:
        """Delete a cluster and its memberships. Memories are kept."""
        if self._cluster_row(cluster_id) is None:
            return False
        with self._transaction():
            self._execute_write(
                "MATCH (:Memory)-[r:MEMBER_OF]->(c:MemoryCluster {id: $id}) DELETE r",
                parameters={"id": cluster_id},
            )
            self._execute_write(
                "MATCH (c:MemoryCluster {id: $id}) DELETE c",
                parameters={"id": cluster_id},
            )
        logger.info(f"Deleted cluster {cluster_id}")
        return True

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_cluster(self, cluster_id: str) -> MemoryCluster:
        """Get a cluster by ID.

        Raises:
            ClusterNotFoundError: If the cluster does not exist.
        """
        row = self._cluster_row(cluster_id)
        if row is None:
            raise ClusterNotFoundError(cluster_id)
        return self._row_to_cluster(row)

    def list_clusters(self) -> list[MemoryCluster]:
        """All clusters, oldest first."""
        rows = self._fetch_all(
            f"MATCH (c:MemoryCluster) RETURN {_CLUSTER_COLUMNS} ORDER BY c.created_at, c.id"
        )
        return [self._row_to_cluster(row) for row in rows]

    def get_cluster_memberships(self, cluster_id: str) -> list[ClusterMembership]:
        rows = self._fetch_all(
            """
            MATCH (m:Memory)-[r:MEMBER_OF]->(c:MemoryCluster {id: $id})
            RETURN m.id, r.membership_strength, r.contribution_score, r.added_at
            ORDER BY r.added_at, m.id
            """,
            parameters={"id": cluster_id},
        )
        return [
            ClusterMembership(
                cluster_id=cluster_id,
                memory_id=row[0],
                membership_strength=row[1],
                contribution_score=row[2],
                added_at=from_db_time(row[3]),
            )
            for row in rows
        ]

    # =========================================================================
    # Row Mapping
    # =========================================================================

    def _cluster_row(self, cluster_id: str) -> list | None:
        return self._fetch_one(
            f"MATCH (c:MemoryCluster {{id: $id}}) RETURN {_CLUSTER_COLUMNS}",
            parameters={"id": cluster_id},
        )

    def _snapshot_parameters(self, cluster: MemoryCluster) -> dict:
        return {
            "id": cluster.cluster_id,
            "theme": cluster.theme,
            "coherence_score": cluster.coherence_score,
            "psychological_significance": cluster.psychological_significance,
            "quality_metrics": cluster.metadata.quality_metrics.model_dump_json(),
            "updated_at": to_db_time(utc_now()),
        }

    def _row_to_cluster(self, row: list) -> MemoryCluster:
        """Convert a database row to MemoryCluster.

        Row format:
            (id, theme, coherence_score, psychological_significance,
             memory_count, quality_metrics, created_at)
        """
        memberships = self.get_cluster_memberships(row[0])
        quality = (
            ClusterQualityMetrics.model_validate_json(row[5])
            if row[5]
            else ClusterQualityMetrics()
        )
        return MemoryCluster(
            cluster_id=row[0],
            theme=row[1],
            coherence_score=row[2],
            psychological_significance=row[3],
            memory_ids=[m.memory_id for m in memberships],
            metadata=ClusterMetadata(
                created_at=from_db_time(row[6]),
                memory_count=max(0, row[4] or 0),
                quality_metrics=quality,
            ),
        )
