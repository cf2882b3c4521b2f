"""Parser for ZooKeeper ``mntr`` diagnostic output.

Two encodings are understood:

- AdminServer JSON, as served by ``/commands/mntr``::

    {"version": "3.6.2--803c7f1a..., built on 09/04/2020 12:44 GMT",
     "server_state": "follower", "avg_latency": 0.4929, ...}

- The four-letter-word text form, one ``zk_<key><TAB><value>`` per line.

The parser is transport independent; it only sees the response body.
"""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Dict, Union

from ..data.models import NodeStatusRecord
from .base import MalformedStatusResponse

# Separates the semantic version from build metadata in the version field
VERSION_BUILD_DELIMITER = "--"

TEXT_KEY_PREFIX = "zk_"


def _to_float(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


def _to_int(value: Any) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"non-integral count {value!r}")
    return int(value)


_FIELD_TYPES: Dict[str, Callable[[Any], Any]] = {
    "version": str,
    "server_state": str,
    "peer_state": str,
    "avg_latency": _to_float,
    "approximate_data_size": _to_int,
    "znode_count": _to_int,
}


def parse_mntr_response(host: str, body: Union[bytes, str]) -> NodeStatusRecord:
    """Decode an mntr response body into a NodeStatusRecord.

    Unknown keys are ignored and missing keys keep the record's zero value.
    A version that lacks the ``--`` build delimiter is rejected so build
    metadata never leaks into the record.

    Raises:
        MalformedStatusResponse: If the body or one of its fields cannot be
            decoded.
    """
    if isinstance(body, bytes):
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedStatusResponse(host, "body is not valid UTF-8", exc)
    else:
        text = body

    stripped = text.strip()
    if stripped.startswith("{"):
        raw = _parse_json(host, stripped)
    else:
        raw = _parse_text(stripped)

    fields: Dict[str, Any] = {}
    for key, convert in _FIELD_TYPES.items():
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            raise MalformedStatusResponse(host, f"field {key!r} has unexpected value {value!r}")
        try:
            fields[key] = convert(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise MalformedStatusResponse(host, f"field {key!r} has unexpected value {value!r}", exc)

    if "version" in fields:
        fields["version"] = truncate_version(host, fields["version"])

    return NodeStatusRecord(host=host, **fields)


def truncate_version(host: str, version: str) -> str:
    """Strip build metadata: ``"3.6.2--abcdef123"`` -> ``"3.6.2"``."""
    index = version.find(VERSION_BUILD_DELIMITER)
    if index < 0:
        raise MalformedStatusResponse(
            host, f"version {version!r} is missing the {VERSION_BUILD_DELIMITER!r} delimiter"
        )
    return version[:index]


def _parse_json(host: str, text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedStatusResponse(host, f"invalid JSON body: {exc}", exc)
    if not isinstance(data, dict):
        raise MalformedStatusResponse(host, "JSON body is not an object")
    return data


def _parse_text(text: str) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.strip().split(None, 1)
        if not parts:
            continue
        key = parts[0]
        if key.startswith(TEXT_KEY_PREFIX):
            key = key[len(TEXT_KEY_PREFIX):]
        data[key] = parts[1] if len(parts) > 1 else ""
    return data
