"""Tests for configuration management."""

import os
import time
from datetime import timedelta

import pytest

from src.collectors.base import UpstreamServiceError
from src.server.config import (
    Config,
    ReplicatedTablesConfig,
    ZookeeperConfig,
)
from src.server.main import build_service


class TestConfig:
    def test_default_config(self):
        config = Config()
        assert config.deployment_name == "ZooKeeper Status Monitor"
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8808
        assert config.zookeeper.status_port == 8080
        assert config.zookeeper.parallel is True
        assert config.replicated_tables.max_age is None
        assert config.clusters == {}

    def test_from_dict(self, sample_cluster_dict):
        data = {
            "deployment": {"name": "Test Monitor"},
            "server": {"host": "localhost", "port": 9000, "url_prefix": "/zk"},
            "zookeeper": {"status_port": 18080, "timeout": 3, "max_workers": 4, "parallel": False},
            "replicated_tables": {"max_age": 600},
            "clusters": {"prod": sample_cluster_dict},
        }
        config = Config.from_dict(data)

        assert config.deployment_name == "Test Monitor"
        assert config.server.host == "localhost"
        assert config.server.port == 9000
        assert config.server.url_prefix == "/zk"
        assert config.zookeeper.status_port == 18080
        assert config.zookeeper.timeout == 3
        assert config.zookeeper.effective_workers == 1
        assert config.replicated_tables.max_age == 600
        assert config.clusters["prod"].zk_nodes == ["zk1", "zk2", "zk3"]

    def test_from_yaml(self, tmp_path):
        yaml_content = """
deployment:
  name: "YAML Test"
server:
  port: 8888
zookeeper:
  timeout: 5
clusters:
  test:
    zk_nodes: [zk1, zk2, zk3]
    shards:
      - replicas:
          - host_name: ck1
          - host_name: ck2
"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml_content)

        config = Config.from_yaml(config_file)

        assert config.deployment_name == "YAML Test"
        assert config.server.port == 8888
        assert config.zookeeper.timeout == 5
        cluster = config.clusters["test"]
        assert cluster.topology.shards[0].host_names() == ["ck1", "ck2"]

    def test_from_yaml_missing_file(self, tmp_path):
        config = Config.from_yaml(tmp_path / "nope.yaml")
        assert config.server.port == 8808

    def test_load_from_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("deployment:\n  name: From Env\n")
        monkeypatch.setenv("ZK_STATUS_CONFIG", str(config_file))
        monkeypatch.chdir(tmp_path)

        assert Config.load().deployment_name == "From Env"

    def test_load_explicit_path_first(self, tmp_path, monkeypatch):
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("deployment:\n  name: Explicit\n")
        env_file = tmp_path / "env.yaml"
        env_file.write_text("deployment:\n  name: From Env\n")
        monkeypatch.setenv("ZK_STATUS_CONFIG", str(env_file))

        assert Config.load(str(explicit)).deployment_name == "Explicit"

    def test_build_registry(self, sample_cluster_dict):
        config = Config.from_dict({"clusters": {"a": sample_cluster_dict, "b": {"zk_nodes": ["zk9"]}}})
        registry = config.build_registry()
        assert sorted(registry.names()) == ["a", "b"]
        assert registry.get("b").zk_nodes == ["zk9"]


class TestZookeeperConfig:
    @pytest.mark.parametrize(
        "max_workers,parallel,expected",
        [(8, True, 8), (8, False, 1), (0, True, 1), (3, True, 3)],
    )
    def test_effective_workers(self, max_workers, parallel, expected):
        assert ZookeeperConfig(max_workers=max_workers, parallel=parallel).effective_workers == expected


class TestBuildService:
    @pytest.mark.parametrize(
        "max_age,expected",
        [(None, None), (0, timedelta(0)), (600, timedelta(seconds=600))],
    )
    def test_snapshot_max_age(self, temp_data_dir, max_age, expected):
        config = Config(
            replicated_tables=ReplicatedTablesConfig(max_age=max_age),
            data_dir=str(temp_data_dir),
        )
        assert build_service(config).table_source.max_age == expected

    def test_zero_max_age_rejects_snapshots(self, temp_data_dir, test_cluster):
        config = Config(
            replicated_tables=ReplicatedTablesConfig(max_age=0),
            clusters={"test": test_cluster},
            data_dir=str(temp_data_dir),
        )
        service = build_service(config)
        service.table_source.store_status("test", {"t": 1})
        snapshot = temp_data_dir / "cache" / "replicated_tables_test.json"
        second_ago = time.time() - 1
        os.utime(snapshot, (second_ago, second_ago))

        with pytest.raises(UpstreamServiceError):
            service.get_replicated_table_status("test")
