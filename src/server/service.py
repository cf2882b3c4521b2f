"""Cluster status operations behind the HTTP API.

Resolves a cluster name through the registry, then runs the ensemble
status collector or the replicated-table presenter. Holds no per-request
state, so one instance serves every request thread.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..collectors.base import CollectorError, UpstreamServiceError
from ..collectors.replication import ReplicatedTableSource
from ..collectors.zookeeper import get_statuses
from ..data.clusters import ClusterNotFoundError, ClusterRegistry
from ..data.models import NodeStatusRecord, ReplicationStatusMatrix
from ..data.presentation import build_presentation
from .config import ZookeeperConfig


class ClusterStatusService:
    """Status queries for the clusters held by a registry."""

    def __init__(
        self,
        registry: ClusterRegistry,
        table_source: ReplicatedTableSource,
        zookeeper: Optional[ZookeeperConfig] = None,
    ):
        self.registry = registry
        self.table_source = table_source
        self.zookeeper = zookeeper or ZookeeperConfig()

    def get_zk_status(self, cluster_name: str) -> List[NodeStatusRecord]:
        """Return the status of every ensemble node of a cluster.

        Raises:
            ClusterNotFoundError: Before any node is queried.
            CollectorError: The first failing node; no partial results.
        """
        cluster = self.registry.get(cluster_name)
        nodes = cluster.node_addresses(self.zookeeper.status_port)
        return get_statuses(
            nodes,
            timeout=self.zookeeper.timeout,
            max_workers=self.zookeeper.effective_workers,
        )

    def get_replicated_table_status(self, cluster_name: str) -> ReplicationStatusMatrix:
        """Return the replicated-table status laid out by shard/replica.

        Raises:
            ClusterNotFoundError: If the cluster is not configured.
            UpstreamServiceError: If the table status source fails.
        """
        cluster = self.registry.get(cluster_name)
        try:
            tables = self.table_source.get_replicated_table_status(cluster)
        except CollectorError:
            raise
        except Exception as exc:
            raise UpstreamServiceError(cluster.name, str(exc), exc)
        return build_presentation(cluster.topology, tables)

    def list_clusters(self) -> List[Dict[str, Any]]:
        clusters = []
        for name in self.registry.names():
            try:
                cluster = self.registry.get(name)
            except ClusterNotFoundError:
                continue
            clusters.append({
                "name": name,
                "zk_nodes": list(cluster.zk_nodes),
                "shards": len(cluster.topology.shards),
                "replicas": cluster.topology.replica_count,
            })
        return clusters
