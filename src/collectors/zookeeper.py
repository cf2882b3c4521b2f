"""ZooKeeper ensemble status collector.

Queries the AdminServer ``/commands/mntr`` endpoint of every node in an
ensemble and returns one NodeStatusRecord per node, in ensemble order.

Aggregation is all-or-nothing: a single unreachable node, non-200 answer,
or unparseable body fails the whole collection. Nothing is retried.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..data.models import NodeAddress, NodeStatusRecord
from .base import CollectorError, NodeErrorResponse, NodeUnreachableError
from .mntr import parse_mntr_response

DEFAULT_TIMEOUT = 10  # seconds
DEFAULT_MAX_WORKERS = 8
USER_AGENT = "zk-status-monitor/1.0"


def _log(msg: str) -> None:
    """Print with flush for reliable output from worker threads."""
    print(msg, flush=True)


def make_session(pool_size: int = DEFAULT_MAX_WORKERS) -> requests.Session:
    """Create a requests session that never retries.

    A failed node query must fail the aggregation immediately, so the
    adapter is mounted with a zero retry budget.
    """
    session = requests.Session()
    retry = Retry(total=0, connect=0, read=0, status=0)
    adapter = HTTPAdapter(
        max_retries=retry,
        pool_connections=max(1, pool_size),
        pool_maxsize=max(1, pool_size),
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def fetch_mntr(session: requests.Session, node: NodeAddress, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch the raw mntr body of one node.

    Raises:
        NodeUnreachableError: On any transport error.
        NodeErrorResponse: If the node does not answer 200.
    """
    try:
        resp = session.get(node.mntr_url, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise NodeUnreachableError(node.host, exc)

    try:
        if resp.status_code != 200:
            raise NodeErrorResponse(node.host, f"{resp.status_code} {resp.reason or ''}".strip())
        return resp.content
    finally:
        resp.close()


class ZookeeperStatusCollector:
    """Collector for the status of every node in a ZooKeeper ensemble.

    Queries fan out over a thread pool bounded by ``max_workers``. With
    ``max_workers=1`` the nodes are queried sequentially in the calling
    thread. Both modes return identical results.
    """

    def __init__(
        self,
        nodes: Sequence[NodeAddress],
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
        session: Optional[requests.Session] = None,
    ):
        self.nodes = list(nodes)
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self._session = session

    def collect(self) -> List[NodeStatusRecord]:
        """Query every node and return their status records in order.

        Raises:
            CollectorError: The first node failure; no partial results.
        """
        if not self.nodes:
            return []

        owns_session = self._session is None
        session = self._session or make_session(min(self.max_workers, len(self.nodes)))
        try:
            if self.max_workers == 1 or len(self.nodes) == 1:
                return [self._query_node(session, node) for node in self.nodes]
            return self._collect_parallel(session)
        finally:
            if owns_session:
                session.close()

    def _query_node(self, session: requests.Session, node: NodeAddress) -> NodeStatusRecord:
        body = fetch_mntr(session, node, timeout=self.timeout)
        return parse_mntr_response(node.host, body)

    def _collect_parallel(self, session: requests.Session) -> List[NodeStatusRecord]:
        workers = min(self.max_workers, len(self.nodes))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zk-mntr")
        try:
            futures = [executor.submit(self._query_node, session, node) for node in self.nodes]
            # Results are taken in ensemble order, so the error raised is the
            # earliest failing node, as in sequential mode.
            return [future.result() for future in futures]
        finally:
            # Abandon queued queries; in-flight ones finish on their own.
            executor.shutdown(wait=False, cancel_futures=True)


def get_statuses(
    nodes: Sequence[NodeAddress],
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
    session: Optional[requests.Session] = None,
) -> List[NodeStatusRecord]:
    """Return the status of every node, or raise on the first failure.

    Raises:
        CollectorError: NodeUnreachableError, NodeErrorResponse or
            MalformedStatusResponse for the failing node.
    """
    collector = ZookeeperStatusCollector(nodes, timeout=timeout, max_workers=max_workers, session=session)
    try:
        return collector.collect()
    except CollectorError as exc:
        _log(f"[zookeeper] Status collection failed: {exc}")
        raise
