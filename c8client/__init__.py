"""
c8client - async Python client for the C8 multi-model database HTTP API.

Typed wrappers for document and edge collections on top of a connection
layer that fails over between data center endpoints.
"""

from .client import C8Client
from .config import ClientConfig, ClientSettings
from .database import (ArrayCursor, BaseCollection, Connection, DocumentCollection,
                       EdgeCollection, HostPool, RequestDescriptor, ResponseEnvelope)
from .exceptions import (C8ClientError, ConfigurationError, ConnectionClosedError,
                         ExhaustedCursorError, InvalidArgumentError, InvalidHandleError,
                         ServerError, TransportError, UnsupportedOperationError, is_c8_error)

__version__ = "0.1.0"

__all__ = [
    # Client
    "C8Client",
    "ClientConfig",
    "ClientSettings",
    # Database
    "Connection",
    "HostPool",
    "RequestDescriptor",
    "ResponseEnvelope",
    "BaseCollection",
    "DocumentCollection",
    "EdgeCollection",
    "ArrayCursor",
    # Errors
    "C8ClientError",
    "ConfigurationError",
    "TransportError",
    "ConnectionClosedError",
    "ServerError",
    "InvalidHandleError",
    "InvalidArgumentError",
    "ExhaustedCursorError",
    "UnsupportedOperationError",
    "is_c8_error",
]
