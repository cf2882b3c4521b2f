"""Pytest configuration and shared fixtures."""

import json
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

from src.data.clusters import ClusterConfig, ClusterRegistry


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory for tests."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_mntr_json():
    """Sample AdminServer /commands/mntr response body."""
    return json.dumps({
        "version": "3.6.2--803c7f1a12f85978cb049af5e4ef23bd8b688715, built on 09/04/2020 12:44 GMT",
        "avg_latency": 0.4929,
        "max_latency": 58,
        "min_latency": 0,
        "packets_received": 1029,
        "packets_sent": 1032,
        "num_alive_connections": 3,
        "outstanding_requests": 0,
        "server_state": "follower",
        "znode_count": 926,
        "watch_count": 12,
        "ephemerals_count": 4,
        "approximate_data_size": 141979,
        "open_file_descriptor_count": 71,
        "max_file_descriptor_count": 1048576,
        "peer_state": "following - broadcast",
        "command": "monitor",
        "error": None,
    }).encode("utf-8")


@pytest.fixture
def sample_mntr_text():
    """Sample four-letter-word mntr output."""
    return (
        "zk_version\t3.6.2--803c7f1a12f85978cb049af5e4ef23bd8b688715, built on 09/04/2020 12:44 GMT\n"
        "zk_avg_latency\t0.4929\n"
        "zk_max_latency\t58\n"
        "zk_server_state\tleader\n"
        "zk_znode_count\t926\n"
        "zk_approximate_data_size\t141979\n"
        "zk_peer_state\tleading - broadcast\n"
        "zk_synced_followers\t2\n"
    ).encode("utf-8")


@pytest.fixture
def mntr_body():
    """Factory for minimal JSON mntr bodies."""
    def _build(server_state="follower", version="3.6.2--abcdef123", **extra):
        data = {
            "version": version,
            "server_state": server_state,
            "peer_state": "following - broadcast",
            "avg_latency": 0.5,
            "approximate_data_size": 1024,
            "znode_count": 10,
        }
        data.update(extra)
        return json.dumps(data).encode("utf-8")
    return _build


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    def _build(status_code=200, content=b"", reason="OK"):
        resp = MagicMock()
        resp.status_code = status_code
        resp.reason = reason
        resp.content = content
        return resp
    return _build


@pytest.fixture
def sample_cluster_dict():
    """Cluster section as it appears in config.yaml."""
    return {
        "zk_nodes": ["zk1", "zk2", "zk3"],
        "shards": [
            {"replicas": [{"host_name": "ck1"}, {"host_name": "ck2"}]},
            {"replicas": ["ck3", "ck4", "ck5"]},
        ],
    }


@pytest.fixture
def test_cluster():
    """The 'test' cluster: one shard, replicas ck1 and ck2."""
    return ClusterConfig.from_dict("test", {
        "zk_nodes": ["zk1", "zk2", "zk3"],
        "shards": [{"replicas": [{"host_name": "ck1"}, {"host_name": "ck2"}]}],
    })


@pytest.fixture
def registry(test_cluster):
    return ClusterRegistry([test_cluster])
