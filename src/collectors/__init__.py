"""Data collectors - ZooKeeper mntr queries and replicated-table sources."""

from .base import (
    CollectorError,
    NodeUnreachableError,
    NodeErrorResponse,
    MalformedStatusResponse,
    UpstreamServiceError,
)
from .mntr import parse_mntr_response
from .zookeeper import ZookeeperStatusCollector, get_statuses
from .replication import ReplicatedTableSource, CachedReplicatedTableSource

__all__ = [
    "CollectorError",
    "NodeUnreachableError",
    "NodeErrorResponse",
    "MalformedStatusResponse",
    "UpstreamServiceError",
    "parse_mntr_response",
    "ZookeeperStatusCollector",
    "get_statuses",
    "ReplicatedTableSource",
    "CachedReplicatedTableSource",
]
