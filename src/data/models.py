"""Data models for ZooKeeper ensemble status monitoring.

This module defines the core data structures shared by the node status
aggregator and the replicated-table presenter:

1. TOPOLOGY
   - Shards and replicas are kept in the order the cluster configuration
     declares them. That order defines row/column position in every
     presented matrix and is never re-sorted.

2. EXPLICIT UNITS
   - avg_latency: milliseconds (float)
   - approximate_data_size: bytes (integer)
   - znode_count: znodes (integer)

3. PER-REQUEST LIFECYCLE
   - Status records and matrices are built fresh for every request and
     are never cached.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List

# Port of the ZooKeeper AdminServer serving /commands/mntr
ZK_STATUS_DEFAULT_PORT = 8080


# =============================================================================
# Status Enumerations
# =============================================================================


class ServerRole(str, Enum):
    """Role a coordination node reports in its server_state field."""

    LEADER = "leader"
    FOLLOWER = "follower"
    OBSERVER = "observer"
    STANDALONE = "standalone"
    UNKNOWN = "unknown"


# =============================================================================
# Topology Model
# =============================================================================


@dataclass(frozen=True)
class Replica:
    """A single ClickHouse replica within a shard."""

    host_name: str


@dataclass(frozen=True)
class Shard:
    """A shard with its replicas in declared order."""

    replicas: List[Replica] = field(default_factory=list)

    def host_names(self) -> List[str]:
        return [replica.host_name for replica in self.replicas]


@dataclass(frozen=True)
class ClusterTopology:
    """Shard/replica layout of a cluster."""

    shards: List[Shard] = field(default_factory=list)

    @property
    def replica_count(self) -> int:
        return sum(len(shard.replicas) for shard in self.shards)


# =============================================================================
# Node Status Model
# =============================================================================


@dataclass(frozen=True)
class NodeAddress:
    """Location of a coordination node's diagnostic endpoint."""

    host: str
    port: int = ZK_STATUS_DEFAULT_PORT

    @property
    def mntr_url(self) -> str:
        return f"http://{self.host}:{self.port}/commands/mntr"


@dataclass(frozen=True)
class NodeStatusRecord:
    """Parsed mntr output for one coordination node.

    Units:
    - avg_latency: milliseconds (float)
    - approximate_data_size: bytes (integer)
    - znode_count: znodes (integer)
    """

    host: str
    version: str = ""  # Semantic version, build metadata stripped
    server_state: str = ""  # 'leader', 'follower', 'standalone', ...
    peer_state: str = ""  # e.g. "following - broadcast"
    avg_latency: float = 0.0  # Unit: milliseconds
    approximate_data_size: int = 0  # Unit: bytes
    znode_count: int = 0  # Unit: znodes

    @property
    def role(self) -> ServerRole:
        """Return server_state as enum."""
        try:
            return ServerRole(self.server_state.strip().lower())
        except ValueError:
            return ServerRole.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Replication Presentation Model
# =============================================================================


@dataclass(frozen=True)
class ReplicationStatusMatrix:
    """Replicated-table status laid out by shard/replica topology.

    header[shard_index][replica_index] is the replica's host name. The
    tables payload comes from the replicated-table status source and is
    carried through untouched.
    """

    header: List[List[str]]
    tables: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"header": self.header, "tables": self.tables}
