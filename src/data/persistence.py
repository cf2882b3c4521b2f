"""JSON cache for status payloads produced outside the request path.

Replicated-table status snapshots are written here by whatever job computes
them and read back when the replication matrix is requested. Everything is
stored in ~/.zk_status/ so it survives restarts.
"""

from __future__ import annotations

import json
import os
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional


def get_data_dir() -> Path:
    """Get user-persistent data directory.

    Returns ~/.zk_status/ by default, or ZK_STATUS_DATA_DIR env var.
    Creates subdirectories if they don't exist.
    """
    data_dir = Path(os.environ.get("ZK_STATUS_DATA_DIR", Path.home() / ".zk_status"))
    (data_dir / "cache").mkdir(parents=True, exist_ok=True)
    return data_dir


def cache_key(*parts: str) -> str:
    """Build a filesystem-safe cache name from its parts."""
    return "_".join(re.sub(r"[^A-Za-z0-9_.-]", "_", part) for part in parts)


class DataStore:
    """File-backed JSON cache."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = data_dir or get_data_dir()
        self.cache_dir = self.data_dir / "cache"
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _cache_file(self, name: str) -> Path:
        return self.cache_dir / f"{name}.json"

    def save_cache(self, name: str, data: Any) -> None:
        """Save data to JSON cache file.

        Args:
            name: Cache name (e.g., 'replicated_tables_test')
            data: JSON-serialisable payload
        """
        self._cache_file(name).write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")

    def load_cache(self, name: str, max_age: Optional[timedelta] = None) -> Optional[Any]:
        """Load data from JSON cache file.

        Args:
            name: Cache name
            max_age: Maximum age of cache to accept (None = any age)

        Returns:
            Cached data or None if not found/expired/unreadable
        """
        cache_file = self._cache_file(name)
        if not cache_file.exists():
            return None

        if max_age is not None:
            mtime = datetime.fromtimestamp(cache_file.stat().st_mtime)
            if datetime.now() - mtime > max_age:
                return None

        try:
            return json.loads(cache_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return None
