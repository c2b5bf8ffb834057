"""
Constants for c8client.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# SERVER ERROR NUMBERS
# ============================================================================

DOCUMENT_NOT_FOUND: Final[int] = 1202
"""Server error number for a missing document."""

COLLECTION_NOT_FOUND: Final[int] = 1203
"""Server error number for a missing collection."""

HTTP_NOT_FOUND: Final[int] = 404

# ============================================================================
# COLLECTION TYPES
# ============================================================================

DOCUMENT_COLLECTION: Final[int] = 2
"""Numeric collection type of document collections."""

EDGE_COLLECTION: Final[int] = 3
"""Numeric collection type of edge collections."""

# ============================================================================
# CONNECTION DEFAULTS
# ============================================================================

DEFAULT_URL: Final[str] = "http://localhost:8529"
"""Host used when neither an argument nor C8_URL is given."""

DEFAULT_FABRIC: Final[str] = "_system"
"""Fabric (database) that requests are scoped to by default."""

DEFAULT_C8_VERSION: Final[int] = 30000
"""Server version assumed when none is configured (3.x dialect)."""

DEFAULT_TIMEOUT_MS: Final[int] = 30000
"""Default per-request timeout in milliseconds."""

MIN_TIMEOUT_MS: Final[int] = 100
"""Smallest timeout accepted by configuration validation."""

VERSION_MAJOR_DIVISOR: Final[int] = 10000
"""``30400 // VERSION_MAJOR_DIVISOR`` gives the major version ``3``."""

CURRENT_DIALECT_MAJOR: Final[int] = 3
"""First major version using unified document paths and if-match headers."""

API_PREFIX: Final[str] = "/_api"
FABRIC_PREFIX: Final[str] = "/_fabric"

# ============================================================================
# WIRE FORMAT
# ============================================================================

QUERY_LIST_SEPARATOR: Final[str] = ","
"""Sequences in query parameters are joined with this separator."""

IMPORT_LINE_TERMINATOR: Final[str] = "\r\n"
"""Line terminator for newline-delimited JSON import payloads."""

VERSION_HEADER: Final[str] = "x-c8-version"
CORRELATION_HEADER: Final[str] = "x-correlation-id"
IF_MATCH_HEADER: Final[str] = "if-match"
