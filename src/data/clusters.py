"""Cluster configuration and lookup by cluster name."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .models import (
    ZK_STATUS_DEFAULT_PORT,
    ClusterTopology,
    NodeAddress,
    Replica,
    Shard,
)


class ClusterNotFoundError(Exception):
    """Raised when a cluster name does not resolve to a configuration."""

    def __init__(self, cluster_name: str):
        self.cluster_name = cluster_name
        super().__init__(f"cluster {cluster_name} does not exist")


@dataclass
class ClusterConfig:
    """Configuration of one managed ClickHouse cluster."""

    name: str
    zk_nodes: List[str] = field(default_factory=list)  # Ensemble hosts, in order
    zk_status_port: Optional[int] = None  # AdminServer port override
    topology: ClusterTopology = field(default_factory=ClusterTopology)

    def node_addresses(self, default_port: int = ZK_STATUS_DEFAULT_PORT) -> List[NodeAddress]:
        """Return the ensemble's diagnostic endpoints in configured order."""
        port = self.zk_status_port or default_port
        return [NodeAddress(host=host, port=port) for host in self.zk_nodes]

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "ClusterConfig":
        """Create cluster config from its YAML mapping.

        Replicas may be given as ``{host_name: ...}`` mappings or plain
        host name strings.
        """
        shards = []
        for shard_data in data.get("shards", []) or []:
            replicas = []
            for replica_data in (shard_data or {}).get("replicas", []) or []:
                if isinstance(replica_data, dict):
                    host_name = replica_data.get("host_name") or replica_data.get("hostname", "")
                else:
                    host_name = str(replica_data)
                replicas.append(Replica(host_name=host_name))
            shards.append(Shard(replicas=replicas))

        status_port = data.get("zk_status_port")
        return cls(
            name=name,
            zk_nodes=[str(host) for host in data.get("zk_nodes", []) or []],
            zk_status_port=int(status_port) if status_port else None,
            topology=ClusterTopology(shards=shards),
        )


class ClusterRegistry:
    """Thread-safe name -> ClusterConfig lookup.

    Passed to the status service explicitly so tests can build their own.
    """

    def __init__(self, clusters: Optional[Iterable[ClusterConfig]] = None):
        self._clusters: Dict[str, ClusterConfig] = {}
        self._lock = threading.Lock()
        for cluster in clusters or []:
            self.register(cluster)

    def register(self, cluster: ClusterConfig) -> None:
        with self._lock:
            self._clusters[cluster.name] = cluster

    def get(self, name: str) -> ClusterConfig:
        """Look up a cluster.

        Raises:
            ClusterNotFoundError: If no cluster is registered under name.
        """
        with self._lock:
            cluster = self._clusters.get(name)
        if cluster is None:
            raise ClusterNotFoundError(name)
        return cluster

    def names(self) -> List[str]:
        with self._lock:
            return list(self._clusters)
