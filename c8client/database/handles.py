"""
Document and index handle resolution.

Pure functions that turn the accepted handle shapes into the canonical
``collection/key`` id the server expects.
"""

from collections.abc import Mapping
from typing import Any

from ..exceptions import InvalidHandleError


def resolve_document_handle(handle: Any, id_prefix: str) -> str:
    """
    Resolve a document handle to a fully qualified document id.

    Args:
        handle: A key ("abc"), an id ("users/abc") or a mapping carrying
                ``_id`` and/or ``_key`` (such as a document or save result)
        id_prefix: The collection's id prefix, e.g. "users/"

    Returns:
        The document id

    Raises:
        InvalidHandleError: If the handle is neither a string nor a mapping
                            with a usable ``_id`` or ``_key``

    Example:
        resolve_document_handle("abc", "users/")              # "users/abc"
        resolve_document_handle("people/abc", "users/")       # "people/abc"
        resolve_document_handle({"_key": "abc"}, "users/")    # "users/abc"
    """
    if isinstance(handle, str):
        if "/" in handle:
            return handle
        return id_prefix + handle
    if isinstance(handle, Mapping):
        if handle.get("_id"):
            return handle["_id"]
        if handle.get("_key"):
            return id_prefix + handle["_key"]
    raise InvalidHandleError("Document handle must be a document or string", handle=handle)


def resolve_index_handle(handle: Any, id_prefix: str) -> str:
    """
    Resolve an index handle to a fully qualified index id.

    Strings follow the document rules; mappings must carry ``id``.
    """
    if isinstance(handle, str):
        if "/" in handle:
            return handle
        return id_prefix + handle
    if isinstance(handle, Mapping) and handle.get("id"):
        return handle["id"]
    raise InvalidHandleError("Index handle must be an index or string", handle=handle)
