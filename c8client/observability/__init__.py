"""
Observability components.

Provides structured logging with correlation IDs and request context.
"""

from .logging import (
    ContextualLoggerAdapter,
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_operation,
    request_context,
    set_correlation_id,
)

__all__ = [
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "request_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
]
