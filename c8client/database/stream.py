"""
Change-feed stream contract.

Collections delegate change notifications to a stream consumer created
by the connection's ``stream_factory``. The stream subsystem itself lives
outside this package; anything implementing StreamConsumer can be used.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StreamConsumer(Protocol):
    """What a collection needs from the stream subsystem."""

    def consumer(self, subscription: str, callback: Callable[[Any], Any], dc_name: str) -> Any:
        """Subscribe ``callback`` to the stream from data center ``dc_name``."""
        ...

    def close_ws_connections(self) -> None:
        """Close every websocket opened by ``consumer``."""
        ...
