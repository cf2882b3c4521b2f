"""Replicated-table status sources.

The status of replicated tables is computed elsewhere (from the
coordination service's table znodes); this module only defines how it
is obtained for a cluster.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Optional

from ..data.clusters import ClusterConfig
from ..data.persistence import DataStore, cache_key
from .base import UpstreamServiceError

CACHE_PREFIX = "replicated_tables"


class ReplicatedTableSource(ABC):
    """Provides the replicated-table status payload of a cluster."""

    @abstractmethod
    def get_replicated_table_status(self, cluster: ClusterConfig) -> Any:
        """Return the per-table status payload for ``cluster``.

        The payload's shape belongs to the source and is passed through
        to callers untouched.

        Raises:
            UpstreamServiceError: If the status cannot be obtained.
        """


class CachedReplicatedTableSource(ReplicatedTableSource):
    """Serves snapshots another process stored in the DataStore cache.

    Snapshots live under ``replicated_tables_<cluster>``.
    """

    def __init__(self, store: DataStore, max_age: Optional[timedelta] = None):
        self.store = store
        self.max_age = max_age

    @staticmethod
    def cache_name(cluster_name: str) -> str:
        return cache_key(CACHE_PREFIX, cluster_name)

    def get_replicated_table_status(self, cluster: ClusterConfig) -> Any:
        payload = self.store.load_cache(self.cache_name(cluster.name), max_age=self.max_age)
        if payload is None:
            raise UpstreamServiceError(cluster.name, "no current replicated table status snapshot")
        return payload

    def store_status(self, cluster_name: str, payload: Any) -> None:
        """Save a freshly computed snapshot for ``cluster_name``."""
        self.store.save_cache(self.cache_name(cluster_name), payload)
