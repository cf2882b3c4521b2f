"""HTTP request handlers for the ZooKeeper status API.

Every response is a JSON envelope ``{"code", "message", "data"}``. On
failure ``data`` carries the human-readable error detail.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict, Optional, Tuple, Type, TYPE_CHECKING
from urllib.parse import unquote, urlparse

from ..collectors.base import (
    MalformedStatusResponse,
    NodeErrorResponse,
    NodeUnreachableError,
    UpstreamServiceError,
)
from ..data.clusters import ClusterNotFoundError

if TYPE_CHECKING:
    from .service import ClusterStatusService

API_PREFIX = "/api/v1/zk"

SUCCESS = 200
CLUSTER_NOT_FOUND = 5100
NODE_UNREACHABLE = 5101
NODE_ERROR_RESPONSE = 5102
MALFORMED_STATUS_RESPONSE = 5103
UPSTREAM_SERVICE_FAILURE = 5104
INTERNAL_ERROR = 5500

# Exception class -> (envelope code, envelope message, HTTP status)
ERROR_CODES: Dict[Type[Exception], Tuple[int, str, HTTPStatus]] = {
    ClusterNotFoundError: (CLUSTER_NOT_FOUND, "cluster not found", HTTPStatus.NOT_FOUND),
    NodeUnreachableError: (NODE_UNREACHABLE, "zookeeper node unreachable", HTTPStatus.BAD_GATEWAY),
    NodeErrorResponse: (NODE_ERROR_RESPONSE, "zookeeper node returned an error", HTTPStatus.BAD_GATEWAY),
    MalformedStatusResponse: (
        MALFORMED_STATUS_RESPONSE,
        "malformed zookeeper status response",
        HTTPStatus.BAD_GATEWAY,
    ),
    UpstreamServiceError: (
        UPSTREAM_SERVICE_FAILURE,
        "get replicated table status fail",
        HTTPStatus.BAD_GATEWAY,
    ),
}


def _log(msg: str) -> None:
    print(msg, flush=True)


def error_envelope(exc: Exception) -> Tuple[Dict[str, Any], HTTPStatus]:
    """Map an exception onto its envelope and HTTP status."""
    for exc_type, (code, message, status) in ERROR_CODES.items():
        if isinstance(exc, exc_type):
            return {"code": code, "message": message, "data": str(exc)}, status
    return (
        {"code": INTERNAL_ERROR, "message": "internal error", "data": str(exc)},
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


class StatusRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the status API.

    Serves:
    - GET /api/v1/zk/status/{cluster}
    - GET /api/v1/zk/replicated-table-status/{cluster}
    - GET /api/v1/zk/clusters
    """

    # These will be set by the server
    service: Optional["ClusterStatusService"] = None
    url_prefix: str = ""

    def do_GET(self):
        parsed = urlparse(self.path)
        stripped = self._strip_prefix(parsed.path)
        if stripped is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Invalid prefix")
            return
        if not self.service:
            self.send_error(HTTPStatus.SERVICE_UNAVAILABLE, "Server not initialized.")
            return

        if stripped == f"{API_PREFIX}/clusters":
            return self._handle_clusters()
        if stripped.startswith(f"{API_PREFIX}/status/"):
            cluster_name = self._cluster_from_path(stripped, f"{API_PREFIX}/status/")
            return self._handle_zk_status(cluster_name)
        if stripped.startswith(f"{API_PREFIX}/replicated-table-status/"):
            cluster_name = self._cluster_from_path(stripped, f"{API_PREFIX}/replicated-table-status/")
            return self._handle_replicated_table_status(cluster_name)

        self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")

    # --- API Handlers ---

    def _handle_zk_status(self, cluster_name: Optional[str]):
        if cluster_name is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")
            return
        if not cluster_name:
            self.send_error(HTTPStatus.BAD_REQUEST, "Invalid cluster identifier.")
            return
        try:
            records = self.service.get_zk_status(cluster_name)
        except Exception as exc:
            return self._send_failure(exc, cluster_name)
        self._send_success([record.to_dict() for record in records])

    def _handle_replicated_table_status(self, cluster_name: Optional[str]):
        if cluster_name is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")
            return
        if not cluster_name:
            self.send_error(HTTPStatus.BAD_REQUEST, "Invalid cluster identifier.")
            return
        try:
            matrix = self.service.get_replicated_table_status(cluster_name)
        except Exception as exc:
            return self._send_failure(exc, cluster_name)
        self._send_success(matrix.to_dict())

    def _handle_clusters(self):
        self._send_success(self.service.list_clusters())

    # --- Helper Methods ---

    def _send_success(self, data: Any):
        self._send_json({"code": SUCCESS, "message": "ok", "data": data})

    def _send_failure(self, exc: Exception, cluster_name: str):
        envelope, status = error_envelope(exc)
        _log(f"[api] {self.command} {self.path} cluster={cluster_name!r} failed: {exc}")
        self._send_json(envelope, status_code=status)

    def _send_json(self, data: Any, *, status_code: HTTPStatus = HTTPStatus.OK):
        body = json.dumps(data).encode("utf-8")
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store, max-age=0")
        self.send_header("Access-Control-Allow-Origin", "*")
        self.end_headers()
        self.wfile.write(body)

    @staticmethod
    def _cluster_from_path(path: str, route: str) -> Optional[str]:
        """Return the cluster segment, or None if the path has more segments."""
        name = unquote(path[len(route):].rstrip("/"))
        if "/" in name:
            return None
        return name

    def _strip_prefix(self, path: str) -> Optional[str]:
        norm_prefix = (self.url_prefix or "").rstrip("/")
        if not norm_prefix:
            return path or "/"
        if not norm_prefix.startswith("/"):
            norm_prefix = f"/{norm_prefix}"
        if not path.startswith(norm_prefix):
            return None
        stripped = path[len(norm_prefix):] or "/"
        if not stripped.startswith("/"):
            stripped = "/" + stripped
        return stripped

    def log_message(self, format, *args):
        _log(f"[api] {self.address_string()} - {format % args}")
