"""Configuration management for the ZooKeeper status monitor.

Supports YAML-based configuration, including the managed cluster list.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..data.clusters import ClusterConfig, ClusterRegistry
from ..data.models import ZK_STATUS_DEFAULT_PORT


@dataclass
class ZookeeperConfig:
    """How ensemble nodes are queried."""

    status_port: int = ZK_STATUS_DEFAULT_PORT
    timeout: int = 10  # seconds, per node query
    max_workers: int = 8
    parallel: bool = True

    @property
    def effective_workers(self) -> int:
        return max(1, self.max_workers) if self.parallel else 1


@dataclass
class ReplicatedTablesConfig:
    """Replicated-table status snapshot settings."""

    max_age: Optional[int] = None  # seconds; None accepts any age


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8808
    url_prefix: str = ""


@dataclass
class Config:
    """Main configuration container."""

    deployment_name: str = "ZooKeeper Status Monitor"

    server: ServerConfig = field(default_factory=ServerConfig)
    zookeeper: ZookeeperConfig = field(default_factory=ZookeeperConfig)
    replicated_tables: ReplicatedTablesConfig = field(default_factory=ReplicatedTablesConfig)

    clusters: Dict[str, ClusterConfig] = field(default_factory=dict)

    # Data directory override
    data_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        deployment = data.get("deployment", {}) or {}

        server_data = data.get("server", {}) or {}
        server = ServerConfig(
            host=server_data.get("host", "0.0.0.0"),
            port=server_data.get("port", 8808),
            url_prefix=server_data.get("url_prefix", ""),
        )

        zk_data = data.get("zookeeper", {}) or {}
        zookeeper = ZookeeperConfig(
            status_port=zk_data.get("status_port", ZK_STATUS_DEFAULT_PORT),
            timeout=zk_data.get("timeout", 10),
            max_workers=zk_data.get("max_workers", 8),
            parallel=zk_data.get("parallel", True),
        )

        rt_data = data.get("replicated_tables", {}) or {}
        replicated_tables = ReplicatedTablesConfig(max_age=rt_data.get("max_age"))

        clusters = {}
        for name, cluster_data in (data.get("clusters", {}) or {}).items():
            if isinstance(cluster_data, dict):
                clusters[str(name)] = ClusterConfig.from_dict(str(name), cluster_data)

        return cls(
            deployment_name=deployment.get("name", "ZooKeeper Status Monitor"),
            server=server,
            zookeeper=zookeeper,
            replicated_tables=replicated_tables,
            clusters=clusters,
            data_dir=data.get("data_dir"),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load config from YAML file."""
        if not path.exists():
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load config from path or defaults.

        Checks in order:
        1. Provided path
        2. ZK_STATUS_CONFIG env var
        3. ./configs/config.yaml
        4. ./config.yaml
        5. ~/.zk_status/config.yaml
        6. Default config
        """
        paths_to_try = []

        if config_path:
            paths_to_try.append(Path(config_path))

        if env_path := os.environ.get("ZK_STATUS_CONFIG"):
            paths_to_try.append(Path(env_path))

        paths_to_try.extend([
            Path("./configs/config.yaml"),
            Path("./config.yaml"),
            Path.home() / ".zk_status" / "config.yaml",
        ])

        for path in paths_to_try:
            if path.exists():
                return cls.from_yaml(path)

        return cls()

    def build_registry(self) -> ClusterRegistry:
        """Create a registry holding every configured cluster."""
        return ClusterRegistry(self.clusters.values())
