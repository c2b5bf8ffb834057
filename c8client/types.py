"""
Type definitions for c8client payloads.

TypedDict definitions for the option objects accepted by collection
operations and the result shapes returned by the server.
"""

from typing import Any, Dict, List, Literal, Optional, TypedDict, Union

# ============================================================================
# Handles
# ============================================================================


class DocumentRef(TypedDict, total=False):
    """Structured document reference, usually a document or save result."""

    _key: str
    _id: str


class IndexRef(TypedDict, total=False):
    """Structured index reference, usually an index description."""

    id: str


DocumentHandle = Union[str, DocumentRef, Dict[str, Any]]
IndexHandle = Union[str, IndexRef, Dict[str, Any]]

# ============================================================================
# Options
# ============================================================================


class DocumentSaveOptions(TypedDict, total=False):
    """Query options for document writes."""

    waitForSync: bool
    returnNew: bool
    returnOld: bool
    overwrite: bool
    silent: bool
    keepNull: bool
    mergeObjects: bool
    ignoreRevs: bool
    rev: str


WriteOptions = Union[DocumentSaveOptions, Dict[str, Any], bool, str, None]

ImportType = Optional[Literal["auto", "documents", "array"]]


class ImportOptions(TypedDict, total=False):
    """Query options for the bulk import endpoint."""

    type: ImportType
    fromPrefix: str
    toPrefix: str
    overwrite: bool
    waitForSync: bool
    onDuplicate: Literal["error", "update", "replace", "ignore"]
    complete: bool
    details: bool


# ============================================================================
# Results
# ============================================================================


class ImportResult(TypedDict, total=False):
    """Result of a bulk import."""

    error: bool
    created: int
    errors: int
    empty: int
    updated: int
    ignored: int
    details: List[str]


class ErrorPayload(TypedDict, total=False):
    """Error body sent by the server with a failing status."""

    error: bool
    errorNum: int
    errorMessage: str
    code: int


class CursorBody(TypedDict, total=False):
    """First or continuation page of a query result."""

    result: List[Any]
    hasMore: bool
    id: str
    count: int
    extra: Dict[str, Any]
