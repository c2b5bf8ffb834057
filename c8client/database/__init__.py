"""
Database access layer.

Host pool, request dispatch, handle resolution, collections and cursors.
"""

from .collection import BaseCollection, DocumentCollection, EdgeCollection, construct_collection
from .connection import Connection
from .cursor import ArrayCursor
from .handles import resolve_document_handle, resolve_index_handle
from .hosts import Endpoint, HostPool
from .request import RequestDescriptor, ResponseEnvelope
from .stream import StreamConsumer

__all__ = [
    # Dispatch
    "Connection",
    "HostPool",
    "Endpoint",
    "RequestDescriptor",
    "ResponseEnvelope",
    # Collections
    "BaseCollection",
    "DocumentCollection",
    "EdgeCollection",
    "construct_collection",
    "ArrayCursor",
    # Handles
    "resolve_document_handle",
    "resolve_index_handle",
    # Streams
    "StreamConsumer",
]
