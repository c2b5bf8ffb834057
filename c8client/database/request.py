"""
Request and response value types for the dispatcher.

A RequestDescriptor is the logical description of one call; the
Connection turns it into an HTTP exchange and wraps the outcome in a
ResponseEnvelope.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..constants import QUERY_LIST_SEPARATOR


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable description of a single API call.

    Attributes:
        method: HTTP method
        path: Path below the fabric API prefix, e.g. "/collection/users"
        qs: Query parameters; None values are omitted from the URL
        body: Structured value (JSON-encoded) or raw str/bytes when ``is_binary``
        headers: Extra request headers
        is_binary: Send ``body`` unmodified instead of JSON-encoding it
        host: Pin the request to this host URL, bypassing failover
    """

    method: str = "GET"
    path: str = "/"
    qs: Mapping[str, Any] | None = None
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    is_binary: bool = False
    host: str | None = None


@dataclass(frozen=True)
class ResponseEnvelope:
    """Outcome of one completed HTTP exchange."""

    status_code: int
    headers: Mapping[str, str]
    body: Any
    host: str


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, (list, tuple)):
        return QUERY_LIST_SEPARATOR.join(_query_value(item) for item in value)
    return str(value)


def serialize_query(qs: Mapping[str, Any] | None) -> dict[str, str]:
    """
    Turn query options into URL parameters.

    Keys whose value is None are dropped and booleans become
    ``true``/``false``. Sequences are joined with a comma; mappings are
    sent as compact JSON.
    """
    if not qs:
        return {}
    return {key: _query_value(value) for key, value in qs.items() if value is not None}


def encode_body(descriptor: RequestDescriptor) -> tuple[bytes | str | None, dict[str, str]]:
    """
    Serialize the body of ``descriptor``.

    Returns:
        Tuple of (content, headers to add). Binary bodies pass through
        unchanged; everything else is JSON-encoded.
    """
    body = descriptor.body
    if body is None:
        return None, {}
    if descriptor.is_binary:
        if isinstance(body, (bytes, bytearray)):
            return bytes(body), {"content-type": "application/octet-stream"}
        return str(body), {"content-type": "text/plain"}
    return json.dumps(body), {"content-type": "application/json"}


def decode_body(content: bytes, content_type: str) -> Any:
    """Decode a response body: JSON when declared, text otherwise, None when empty."""
    if not content:
        return None
    text = content.decode("utf-8", "replace")
    if "json" in content_type.lower():
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text
