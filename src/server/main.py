#!/usr/bin/env python3
"""
ZooKeeper Status Monitor - Main entry point.

Runs the status API server for the ZooKeeper ensembles of the configured
ClickHouse clusters.
"""

from __future__ import annotations

import argparse
from datetime import timedelta
from http.server import ThreadingHTTPServer
from pathlib import Path

from .config import Config
from .routes import StatusRequestHandler
from .service import ClusterStatusService
from ..collectors.replication import CachedReplicatedTableSource
from ..data.persistence import DataStore


def build_service(config: Config) -> ClusterStatusService:
    """Wire registry, table source and collector settings from config."""
    store = DataStore(Path(config.data_dir) if config.data_dir else None)
    max_age = config.replicated_tables.max_age
    table_source = CachedReplicatedTableSource(
        store,
        max_age=timedelta(seconds=max_age) if max_age is not None else None,
    )
    return ClusterStatusService(
        config.build_registry(),
        table_source,
        zookeeper=config.zookeeper,
    )


def run_server(args) -> None:
    """Run the status API server."""
    config = Config.load(args.config)
    print(f"[config] Loaded: deployment={config.deployment_name!r}, clusters={sorted(config.clusters)}")

    # Override config with CLI args
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.url_prefix:
        config.server.url_prefix = args.url_prefix
    if args.timeout:
        config.zookeeper.timeout = args.timeout
    if args.sequential:
        config.zookeeper.parallel = False

    service = build_service(config)

    StatusRequestHandler.service = service
    StatusRequestHandler.url_prefix = config.server.url_prefix

    server = ThreadingHTTPServer((config.server.host, config.server.port), StatusRequestHandler)

    print(f"[server] Serving on http://{config.server.host}:{config.server.port}")
    if config.server.url_prefix:
        print(f"[server] URL prefix: {config.server.url_prefix}")
    print(
        f"[server] mntr port={config.zookeeper.status_port}, timeout={config.zookeeper.timeout}s, "
        f"workers={config.zookeeper.effective_workers}"
    )

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n[server] Shutting down...")
    finally:
        server.server_close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="ZooKeeper ensemble and replicated table status API",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (overrides config)")
    parser.add_argument("--config", type=str, help="Path to config YAML file")
    parser.add_argument(
        "--url-prefix",
        default="",
        help="Path prefix for reverse proxy setup",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Per-node mntr request timeout in seconds",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Query ensemble nodes one at a time",
    )

    return parser.parse_args(argv)


def main():
    """Entry point for the zk-status command."""
    args = parse_args()
    run_server(args)


if __name__ == "__main__":
    main()
