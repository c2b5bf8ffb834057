"""
Host pool for request dispatch.

Holds the ordered candidate endpoints of one connection and the pointer to
the endpoint requests currently go to. Rotation is deterministic
round-robin; nothing here performs network I/O.
"""

import time
from dataclasses import dataclass, field


@dataclass
class Endpoint:
    """A service URL plus its observed reachability."""

    url: str
    alive: bool = True
    last_failure: float | None = field(default=None, compare=False)

    def mark_failed(self) -> None:
        self.alive = False
        self.last_failure = time.monotonic()

    def mark_alive(self) -> None:
        self.alive = True


class HostPool:
    """
    Ordered set of candidate endpoints with an active pointer.

    With a single endpoint ``rotate()`` returns that same endpoint, so
    callers decide how many attempts to make from ``len(pool)`` rather
    than from whether rotation changed anything.

    Example:
        pool = HostPool(["https://dc1.example.com", "https://dc2.example.com"])
        pool.active_host().url  # "https://dc1.example.com"
        pool.rotate().url       # "https://dc2.example.com"
        pool.rotate().url       # "https://dc1.example.com"
    """

    def __init__(self, urls: list[str]):
        if not urls:
            raise ValueError("HostPool requires at least one url")
        self._endpoints = [Endpoint(url.rstrip("/")) for url in urls]
        self._active = 0

    def __len__(self) -> int:
        return len(self._endpoints)

    def active_host(self) -> Endpoint:
        """Return the endpoint new requests are sent to."""
        return self._endpoints[self._active]

    def rotate(self) -> Endpoint:
        """Advance to the next endpoint, wrapping around, and return it."""
        self._active = (self._active + 1) % len(self._endpoints)
        return self._endpoints[self._active]

    def candidates(self) -> list[Endpoint]:
        """Return every endpoint once, starting at the active one."""
        start = self._active
        n = len(self._endpoints)
        return [self._endpoints[(start + i) % n] for i in range(n)]

    def advance_past(self, endpoint: Endpoint) -> Endpoint:
        """
        Rotate away from ``endpoint`` if it is still the active endpoint.

        Concurrent requests failing on the same endpoint advance the
        pointer once between them.
        """
        if self._endpoints[self._active] is endpoint:
            return self.rotate()
        return self.active_host()

    def all(self) -> list[Endpoint]:
        """Return every endpoint in configured order."""
        return list(self._endpoints)

    def find(self, url: str) -> Endpoint | None:
        """Return the endpoint configured for ``url``, if any."""
        url = url.rstrip("/")
        for endpoint in self._endpoints:
            if endpoint.url == url:
                return endpoint
        return None
