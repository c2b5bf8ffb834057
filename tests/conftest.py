"""
Pytest configuration and shared fixtures for c8client tests.

This module provides:
- A fake connection that records request descriptors
- httpx.MockTransport based connections for dispatch tests
- Test data factories
"""

import json
from collections import deque
from typing import Any, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from c8client.config import ClientConfig
from c8client.database.connection import Connection
from c8client.database.request import RequestDescriptor, ResponseEnvelope
from helpers import DC1, DC2, envelope, json_response


# ============================================================================
# FAKE CONNECTION FIXTURES
# ============================================================================


def build_fake_connection(c8_major: int = 3) -> MagicMock:
    """
    Create a mock Connection for collection and cursor tests.

    Queue bodies, envelopes or exceptions on ``fake_connection.responses``;
    each ``request()`` consumes one (an empty dict body when the queue is
    empty), applies the projector, and records the descriptor on
    ``fake_connection.calls``.
    """
    connection = MagicMock(spec=Connection)
    connection.c8_major = c8_major
    connection.responses = deque()
    connection.calls = []
    connection.stream = MagicMock(return_value=None)

    async def respond(descriptor: RequestDescriptor, projector: Callable | None = None):
        connection.calls.append(descriptor)
        item = connection.responses.popleft() if connection.responses else {}
        if isinstance(item, Exception):
            raise item
        if not isinstance(item, ResponseEnvelope):
            item = envelope(item)
        return projector(item) if projector else item

    connection.request = AsyncMock(side_effect=respond)
    return connection


@pytest.fixture
def fake_connection() -> MagicMock:
    """A fake connection configured for a 3.x server."""
    return build_fake_connection()


@pytest.fixture
def legacy_connection() -> MagicMock:
    """A separate fake connection configured for a 2.x server."""
    return build_fake_connection(c8_major=2)


# ============================================================================
# MOCK TRANSPORT FIXTURES
# ============================================================================


class RecordingHandler:
    """
    httpx.MockTransport handler that records requests.

    ``down`` holds hosts that raise httpx.ConnectError; every other request
    is answered by ``respond`` (a JSON ``{"ok": true}`` by default).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.down: set[str] = set()
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: json_response(
            {"ok": True}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = f"{request.url.scheme}://{request.url.host}:{request.url.port}"
        if host in self.down:
            raise httpx.ConnectError("connection refused", request=request)
        return self.respond(request)

    def bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_connection(handler: RecordingHandler) -> Callable[..., Connection]:
    """Factory for Connections whose traffic goes to ``handler``."""

    def factory(urls: Any = (DC1, DC2), **config_kwargs: Any) -> Connection:
        config = ClientConfig(urls=list(urls), **config_kwargs)
        return Connection(config, transport=httpx.MockTransport(handler))

    return factory


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def cursor_body() -> Dict[str, Any]:
    """First page of a cursor with one more page on the server."""
    return {"result": [1, 2], "hasMore": True, "id": "9001", "count": 4, "error": False}
