"""
Logging utilities for c8client.

Module loggers are ContextualLoggerAdapters: every record they emit
carries the caller's correlation id and the fabric of the request being
dispatched, so log lines from the connection and the cursor can be
joined with server-side logs.

Usage:
    from c8client.observability.logging import get_logger, set_correlation_id

    logger = get_logger(__name__)
    set_correlation_id("checkout-42")  # also sent as x-correlation-id
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

# Correlation ID, forwarded to the server with every request
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "c8_correlation_id", default=None
)

# Fields describing the request in flight (fabric, ...)
_request_fields: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "c8_request_fields", default={}
)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        correlation_id: ID to use; a new UUID is generated when None

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


@contextmanager
def request_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """
    Attach ``fields`` to every record logged inside the block.

    Nested blocks extend the outer fields; leaving a block restores what
    was there before, also when the block raises.
    """
    merged = {**_request_fields.get(), **fields}
    token = _request_fields.set(merged)
    try:
        yield merged
    finally:
        _request_fields.reset(token)


def get_logging_context() -> dict[str, Any]:
    """Return the correlation ID and request fields of the current context."""
    context = dict(_request_fields.get())
    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the logging context to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Return a contextual logger for ``name`` (typically __name__)."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log one HTTP exchange with structured fields.

    Args:
        logger: Logger or adapter to emit on
        operation: Method and path, e.g. "GET /collection/users"
        level: Log level
        success: Whether the exchange succeeded
        duration_ms: Time spent on the exchange
        **context: Additional fields (host, status_code, attempt, ...)
    """
    fields: dict[str, Any] = {"operation": operation, "success": success, **context}
    if duration_ms is not None:
        fields["duration_ms"] = round(duration_ms, 2)

    message = f"{operation} {'ok' if success else 'failed'}"
    if "host" in context:
        message += f" on {context['host']}"
    if duration_ms is not None:
        message += f" ({duration_ms:.2f}ms)"

    logger.log(level, message, extra=fields)
