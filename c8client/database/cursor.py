"""
Lazy cursor over paginated query results.

ArrayCursor keeps the current batch in memory and fetches the next one
from the host that created the cursor once the batch is drained. It is
forward-only and single-pass; concurrent consumers of one cursor must
serialize their calls.

Usage:
    cursor = await collection.all()
    async for doc in cursor:
        ...

    # Or drain everything that is left
    docs = await cursor.all()
"""

from collections import deque
from typing import TYPE_CHECKING, Any

from ..exceptions import C8ClientError, ExhaustedCursorError
from ..observability.logging import get_logger
from ..types import CursorBody
from .request import RequestDescriptor

if TYPE_CHECKING:
    from .connection import Connection

logger = get_logger(__name__)


class ArrayCursor:
    """
    Forward-only sequence of query results.

    Attributes:
        count: Total result count when the query asked for it
        extra: Extra statistics reported with the first batch
    """

    def __init__(self, connection: "Connection", body: CursorBody, host: str):
        """
        Create a cursor from the first response of a query.

        Args:
            connection: Connection used for continuation requests
            body: First response body (``result``, ``hasMore``, ``id``)
            host: Host that produced the response; continuations go there
        """
        self._connection = connection
        self._buffer: deque[Any] = deque(body.get("result") or [])
        self._has_more = bool(body.get("hasMore"))
        self._id = body.get("id")
        self._host = host
        self._closed = False
        self.count = body.get("count")
        self.extra = body.get("extra")

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def host(self) -> str:
        return self._host

    def has_next(self) -> bool:
        """True while buffered items remain or the server has more batches."""
        return bool(self._buffer) or self._has_more

    async def _fetch_more(self) -> None:
        body: CursorBody = await self._connection.request(
            RequestDescriptor(method="PUT", path=f"/cursor/{self._id}", host=self._host),
            lambda res: res.body,
        )
        self._buffer.extend(body.get("result") or [])
        self._has_more = bool(body.get("hasMore"))

    async def next(self) -> Any:
        """
        Return the next item, fetching another batch if needed.

        Raises:
            ExhaustedCursorError: If no items remain
        """
        while not self._buffer and self._has_more:
            await self._fetch_more()
        if not self._buffer:
            raise ExhaustedCursorError("Cursor is exhausted", context={"cursor_id": self._id})
        return self._buffer.popleft()

    async def all(self) -> list[Any]:
        """Drain the cursor and return every remaining item in order."""
        items = []
        while self.has_next():
            try:
                items.append(await self.next())
            except ExhaustedCursorError:
                break
        return items

    async def close(self) -> None:
        """
        Release the server-side cursor.

        Safe to call more than once. Failures are logged, not raised.
        """
        if self._closed:
            return
        self._closed = True
        if not self._has_more or self._id is None:
            return
        self._has_more = False
        try:
            await self._connection.request(
                RequestDescriptor(method="DELETE", path=f"/cursor/{self._id}", host=self._host),
                lambda res: None,
            )
        except C8ClientError as e:
            logger.warning(
                f"Failed to close cursor {self._id} on {self._host}: {e}",
                extra={"cursor_id": self._id, "host": self._host},
            )

    def __aiter__(self) -> "ArrayCursor":
        return self

    async def __anext__(self) -> Any:
        try:
            return await self.next()
        except ExhaustedCursorError:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> "ArrayCursor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False
