"""Collector error types."""

from typing import Optional


class CollectorError(Exception):
    """Exception raised when a collector fails to collect data."""

    def __init__(self, collector_name: str, message: str, cause: Optional[Exception] = None):
        self.collector_name = collector_name
        self.cause = cause
        self.detail = message
        super().__init__(f"[{collector_name}] {message}")


class NodeUnreachableError(CollectorError):
    """Transport-level failure reaching a node's diagnostic endpoint."""

    def __init__(self, host: str, cause: Exception):
        self.host = host
        super().__init__("zookeeper", f"get zookeeper node {host} status fail: {cause}", cause)


class NodeErrorResponse(CollectorError):
    """The node answered with a non-200 status."""

    def __init__(self, host: str, status_line: str):
        self.host = host
        self.status_line = status_line
        super().__init__("zookeeper", f"get zookeeper node {host} status fail: {status_line}")


class MalformedStatusResponse(CollectorError):
    """The mntr body could not be parsed into a status record."""

    def __init__(self, host: str, reason: str, cause: Optional[Exception] = None):
        self.host = host
        self.reason = reason
        super().__init__("zookeeper", f"malformed mntr response from {host}: {reason}", cause)


class UpstreamServiceError(CollectorError):
    """The replicated-table status source failed."""

    def __init__(self, cluster_name: str, message: str, cause: Optional[Exception] = None):
        self.cluster_name = cluster_name
        super().__init__(
            "replicated_tables",
            f"get replicated table status of cluster {cluster_name} fail: {message}",
            cause,
        )
