"""Data layer - models, cluster registry, presentation, and caching."""

from .persistence import DataStore, get_data_dir
from .models import (
    ZK_STATUS_DEFAULT_PORT,
    ServerRole,
    Replica,
    Shard,
    ClusterTopology,
    NodeAddress,
    NodeStatusRecord,
    ReplicationStatusMatrix,
)
from .clusters import ClusterConfig, ClusterNotFoundError, ClusterRegistry
from .presentation import build_header, build_presentation

__all__ = [
    "DataStore",
    "get_data_dir",
    "ZK_STATUS_DEFAULT_PORT",
    "ServerRole",
    "Replica",
    "Shard",
    "ClusterTopology",
    "NodeAddress",
    "NodeStatusRecord",
    "ReplicationStatusMatrix",
    "ClusterConfig",
    "ClusterNotFoundError",
    "ClusterRegistry",
    "build_header",
    "build_presentation",
]
