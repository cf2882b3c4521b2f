"""Reshape replicated-table status into a shard x replica matrix."""

from __future__ import annotations

from typing import Any, List

from .models import ClusterTopology, ReplicationStatusMatrix


def build_header(topology: ClusterTopology) -> List[List[str]]:
    """Project each shard onto the ordered host names of its replicas."""
    return [shard.host_names() for shard in topology.shards]


def build_presentation(topology: ClusterTopology, table_status: Any) -> ReplicationStatusMatrix:
    """Pair the topology header with the replicated-table payload.

    The header is derived from ``topology`` on every call. ``table_status``
    is passed through as-is; its contents are never inspected.
    """
    return ReplicationStatusMatrix(header=build_header(topology), tables=table_status)
