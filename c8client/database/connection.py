"""
Request dispatch over a pool of hosts.

The Connection owns the HTTP client and the host pool of one client
instance. Every collection call ends up in ``Connection.request``, which
builds the URL against the active host, sends the request, fails over to
the next host on network errors and turns error responses into
ServerError.

Usage:
    from c8client.config import ClientConfig
    from c8client.database import Connection, RequestDescriptor

    async with Connection(ClientConfig(urls="https://dc1.example.com")) as conn:
        body = await conn.request(
            RequestDescriptor(path="/collection/users"), lambda res: res.body
        )
"""

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from ..config import ClientConfig
from ..constants import API_PREFIX, CORRELATION_HEADER, FABRIC_PREFIX, VERSION_HEADER
from ..exceptions import ConnectionClosedError, ServerError, TransportError
from ..observability.logging import get_correlation_id, get_logger, log_operation, request_context
from .hosts import Endpoint, HostPool
from .request import RequestDescriptor, ResponseEnvelope, decode_body, encode_body, serialize_query
from .stream import StreamConsumer

logger = get_logger(__name__)

T = TypeVar("T")


def _identity(response: ResponseEnvelope) -> ResponseEnvelope:
    return response


class Connection:
    """
    Dispatches logical requests to one of several hosts.

    Attributes:
        config: The ClientConfig this connection was built from
        c8_major: Major server version; collections consult it to choose
                  between the legacy and the current request shapes
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        stream_factory: Callable[["Connection", str], StreamConsumer] | None = None,
    ):
        """
        Initialize the connection.

        Args:
            config: Client configuration (defaults to ClientConfig() from env)
            client: Existing httpx.AsyncClient to send requests with; it is
                    not closed by ``close()``
            transport: httpx transport for a client created here (tests use
                       httpx.MockTransport)
            stream_factory: Callable ``(connection, collection_name)``
                            returning a stream consumer for change feeds

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or ClientConfig()
        self.config.validate()
        self._hosts = HostPool(self.config.urls)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.timeout_ms / 1000.0, transport=transport
        )
        self._stream_factory = stream_factory
        self._closed = False
        self.fabric = self.config.fabric
        self.c8_major = self.config.c8_major

    @property
    def hosts(self) -> HostPool:
        return self._hosts

    @property
    def closed(self) -> bool:
        return self._closed

    def use_fabric(self, fabric: str) -> None:
        """Scope subsequent requests to ``fabric``."""
        self.fabric = fabric

    def stream(self, collection_name: str) -> StreamConsumer | None:
        """
        Return a stream consumer for ``collection_name``.

        Returns None when no stream factory was configured.
        """
        if self._stream_factory is None:
            return None
        return self._stream_factory(self, collection_name)

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_url(self, host: str, path: str) -> str:
        """Join host, fabric scope, API prefix and ``path``."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{host}{FABRIC_PREFIX}/{quote(self.fabric, safe='')}{API_PREFIX}{path}"

    def _build_headers(
        self, extra: Mapping[str, str], content_headers: Mapping[str, str]
    ) -> dict[str, str]:
        headers = {VERSION_HEADER: str(self.config.c8_version)}
        headers.update(self.config.auth_headers())
        headers.update(self.config.headers)
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[CORRELATION_HEADER] = correlation_id
        headers.update(content_headers)
        headers.update(extra)
        return headers

    def _raise_for_error(self, envelope: ResponseEnvelope, descriptor: RequestDescriptor) -> None:
        body = envelope.body
        context = {"method": descriptor.method, "path": descriptor.path, "host": envelope.host}
        if isinstance(body, dict) and body.get("error") is True and "errorNum" in body:
            raise ServerError(
                body.get("errorMessage") or f"Server error {body['errorNum']}",
                status_code=int(body.get("code") or envelope.status_code),
                error_num=int(body["errorNum"]),
                response=envelope,
                context=context,
            )
        if envelope.status_code >= 400:
            raise ServerError(
                f"HTTP {envelope.status_code} for {descriptor.method} {descriptor.path}",
                status_code=envelope.status_code,
                response=envelope,
                context=context,
            )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def request(
        self,
        descriptor: RequestDescriptor,
        projector: Callable[[ResponseEnvelope], T] | None = None,
    ) -> T:
        """
        Send ``descriptor`` and project the response.

        Network failures rotate to the next host and retry, at most once per
        configured host. A descriptor pinned to a host (``descriptor.host``)
        is attempted on that host only.

        Args:
            descriptor: The request to send
            projector: Maps the ResponseEnvelope to the result; the envelope
                       itself is returned when omitted

        Returns:
            Whatever ``projector`` returns

        Raises:
            ConnectionClosedError: If the connection was closed
            TransportError: If every candidate host failed at network level
            ServerError: If the server answered with an error
        """
        if self._closed:
            raise ConnectionClosedError(
                "Connection is closed",
                context={"method": descriptor.method, "path": descriptor.path},
            )
        projector = projector or _identity

        content, content_headers = encode_body(descriptor)
        headers = self._build_headers(descriptor.headers, content_headers)
        params = serialize_query(descriptor.qs)
        operation = f"{descriptor.method} {descriptor.path}"

        if descriptor.host is not None:
            pinned = self._hosts.find(descriptor.host) or Endpoint(descriptor.host.rstrip("/"))
            endpoints = [pinned]
        else:
            endpoints = self._hosts.candidates()

        tried: list[str] = []
        last_error: Exception | None = None
        with request_context(fabric=self.fabric):
            for attempt, endpoint in enumerate(endpoints, start=1):
                if self._closed:
                    raise ConnectionClosedError(
                        "Connection closed during failover",
                        hosts=tried,
                        context={"method": descriptor.method, "path": descriptor.path},
                    )
                tried.append(endpoint.url)
                start = time.perf_counter()
                try:
                    response = await self._client.request(
                        descriptor.method,
                        self.build_url(endpoint.url, descriptor.path),
                        params=params,
                        content=content,
                        headers=headers,
                    )
                except httpx.TransportError as e:
                    endpoint.mark_failed()
                    last_error = e
                    log_operation(
                        logger,
                        operation,
                        level=logging.WARNING,
                        success=False,
                        duration_ms=(time.perf_counter() - start) * 1000,
                        host=endpoint.url,
                        attempt=attempt,
                        error_type=type(e).__name__,
                    )
                    if descriptor.host is None and len(endpoints) > 1:
                        self._hosts.advance_past(endpoint)
                        if attempt < len(endpoints):
                            logger.warning(
                                f"Failing over from {endpoint.url} to {endpoints[attempt].url}"
                            )
                    continue

                endpoint.mark_alive()
                envelope = ResponseEnvelope(
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    body=decode_body(response.content, response.headers.get("content-type", "")),
                    host=endpoint.url,
                )
                log_operation(
                    logger,
                    operation,
                    level=logging.DEBUG,
                    success=envelope.status_code < 400,
                    duration_ms=(time.perf_counter() - start) * 1000,
                    host=endpoint.url,
                    status_code=envelope.status_code,
                )
                self._raise_for_error(envelope, descriptor)
                return projector(envelope)

            logger.error(f"{operation} failed on every host: {', '.join(tried)}")
        raise TransportError(
            f"Could not reach any host for {operation}",
            hosts=tried,
            context={"error_type": type(last_error).__name__},
        ) from last_error

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the connection; later requests raise ConnectionClosedError."""
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False
