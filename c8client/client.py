"""
Client entry point.

C8Client wires configuration, the Connection and collection objects
together.

Usage:
    from c8client import C8Client, ClientConfig

    async with C8Client(ClientConfig(urls="https://dc1.example.com")) as client:
        users = client.collection("users")
        await users.create()
        await users.save({"name": "Ada"})
"""

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .config import ClientConfig
from .database.collection import (BaseCollection, DocumentCollection, EdgeCollection,
                                  construct_collection)
from .database.connection import Connection
from .database.cursor import ArrayCursor
from .database.request import RequestDescriptor
from .observability.logging import get_logger

logger = get_logger(__name__)


class C8Client:
    """
    Async client for one fabric of a C8 deployment.

    Collections handed out by the client share its Connection, and with it
    the host pool and the server version.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        stream_factory: Callable[[Connection, str], Any] | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to ClientConfig() from env)
            client: Existing httpx.AsyncClient to reuse
            transport: httpx transport for the client created here
            stream_factory: Builds stream consumers for ``on_change``

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.connection = Connection(
            config, client=client, transport=transport, stream_factory=stream_factory
        )
        logger.debug(
            f"C8Client created for fabric '{self.connection.fabric}' "
            f"with {len(self.connection.hosts)} host(s)"
        )

    @property
    def fabric(self) -> str:
        return self.connection.fabric

    def use_fabric(self, fabric: str) -> None:
        """Scope subsequent requests, including those of existing collections, to ``fabric``."""
        self.connection.use_fabric(fabric)

    def collection(self, name: str) -> DocumentCollection:
        return DocumentCollection(self.connection, name)

    def edge_collection(self, name: str) -> EdgeCollection:
        return EdgeCollection(self.connection, name)

    async def collections(self, exclude_system: bool = True) -> list[BaseCollection]:
        """Return a collection object for each collection in the fabric."""
        body = await self.connection.request(
            RequestDescriptor(path="/collection", qs={"excludeSystem": exclude_system}),
            lambda res: res.body,
        )
        return [construct_collection(self.connection, data) for data in body.get("result", [])]

    async def query(
        self,
        query: str,
        bind_vars: Mapping[str, Any] | None = None,
        opts: Mapping[str, Any] | None = None,
    ) -> ArrayCursor:
        """
        Run a query and return a cursor over its results.

        Args:
            query: Query string
            bind_vars: Values for the query's bind parameters
            opts: Extra cursor options (batchSize, count, ttl, ...)
        """
        body = {**(opts or {}), "query": query, "bindVars": dict(bind_vars or {})}
        return await self.connection.request(
            RequestDescriptor(method="POST", path="/cursor", body=body),
            lambda res: ArrayCursor(self.connection, res.body, res.host),
        )

    async def close(self) -> None:
        await self.connection.close()

    async def __aenter__(self) -> "C8Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False
