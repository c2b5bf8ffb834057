"""
Shared test helpers for c8client tests.

Importable from test modules as ``helpers`` (tests/ is on sys.path through
the root conftest).
"""

from typing import Any

import httpx

from c8client.database.request import ResponseEnvelope
from c8client.types import ErrorPayload

DC1 = "http://dc1.test:8529"
DC2 = "http://dc2.test:8529"


def envelope(body: Any = None, status_code: int = 200, host: str = DC1) -> ResponseEnvelope:
    """Build a ResponseEnvelope as the Connection would produce it."""
    return ResponseEnvelope(status_code=status_code, headers={}, body=body, host=host)


def json_response(body: Any, status_code: int = 200) -> httpx.Response:
    """Build an httpx JSON response."""
    return httpx.Response(status_code, json=body)


def error_body(error_num: int, code: int, message: str = "error") -> ErrorPayload:
    """Build the server's error payload."""
    return {"error": True, "errorNum": error_num, "errorMessage": message, "code": code}
