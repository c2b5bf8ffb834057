"""
Argument normalization for collection operations.

Collection methods accept several shorthands (a boolean for ``returnNew``,
a revision string, a bare field name, a count). The helpers here collapse
each shorthand into one canonical options dict before any request is
built. They perform no I/O.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from ..constants import CURRENT_DIALECT_MAJOR, IF_MATCH_HEADER, IMPORT_LINE_TERMINATOR
from ..exceptions import InvalidArgumentError


def normalize_write_options(opts: Any) -> dict[str, Any]:
    """
    Collapse the options accepted by save/replace/update/remove.

    - None -> {}
    - bool -> {"returnNew": bool}
    - str -> {"rev": str}
    - mapping -> shallow copy

    Raises:
        InvalidArgumentError: For any other type
    """
    if opts is None:
        return {}
    if isinstance(opts, bool):
        return {"returnNew": opts}
    if isinstance(opts, str):
        return {"rev": opts}
    if isinstance(opts, Mapping):
        return dict(opts)
    raise InvalidArgumentError(
        f"Options must be a mapping, a bool or a revision string, got {type(opts).__name__}"
    )


def split_revision(opts: Mapping[str, Any], c8_major: int) -> tuple[dict[str, Any], dict[str, str]]:
    """
    Decide where a revision constraint travels.

    From the 3.x dialect on the revision is sent as an ``if-match`` header
    and removed from the query; older servers keep it as a query parameter.

    Returns:
        Tuple of (query options, headers)
    """
    qs = dict(opts)
    headers: dict[str, str] = {}
    if qs.get("rev") and c8_major >= CURRENT_DIALECT_MAJOR:
        headers[IF_MATCH_HEADER] = str(qs.pop("rev"))
    return qs, headers


def normalize_count_options(opts: Any, key: str) -> dict[str, Any]:
    """Turn a bare integer into ``{key: n}``; mappings are copied."""
    if opts is None:
        return {}
    if isinstance(opts, int) and not isinstance(opts, bool):
        return {key: opts}
    if isinstance(opts, Mapping):
        return dict(opts)
    raise InvalidArgumentError(f"Expected an integer or options mapping, got {type(opts).__name__}")


def normalize_fields(fields: str | Iterable[str]) -> list[str]:
    """Turn a single field name into a one element list."""
    if isinstance(fields, str):
        return [fields]
    return list(fields)


def normalize_unique_options(opts: Any) -> dict[str, Any]:
    """Turn a boolean into ``{"unique": bool}``; mappings are copied."""
    if opts is None:
        return {}
    if isinstance(opts, bool):
        return {"unique": opts}
    if isinstance(opts, Mapping):
        return dict(opts)
    raise InvalidArgumentError(f"Expected a bool or options mapping, got {type(opts).__name__}")


def serialize_import_rows(rows: Iterable[Any]) -> str:
    """
    Serialize rows to newline-delimited JSON.

    Each row is encoded on its own line and the output always ends with a
    line terminator.
    """
    return "".join(json.dumps(row) + IMPORT_LINE_TERMINATOR for row in rows)


def import_query(opts: Mapping[str, Any] | None, collection: str) -> dict[str, Any]:
    """
    Build the query for the import endpoint.

    ``type`` defaults to "auto". An explicit ``type=None`` leaves the
    parameter out, which selects tuple-array import.
    """
    qs = dict(opts or {})
    import_type = qs.pop("type", "auto")
    return {"type": import_type, **qs, "collection": collection}


def resolve_edge_save_args(
    data: Mapping[str, Any],
    from_or_opts: Any = None,
    to_handle: Any = None,
    opts: Any = None,
) -> tuple[Any, Any, Any]:
    """
    Disambiguate the two call shapes of ``EdgeCollection.save``.

    ``save(data, from, to, opts=None)`` when ``to_handle`` is given,
    otherwise ``save(data, opts=None)`` with ``_from``/``_to`` already on
    ``data``.

    Returns:
        Tuple of (from handle or None, to handle or None, raw options)

    Raises:
        InvalidArgumentError: If the call matches neither shape
    """
    if to_handle is not None:
        if from_or_opts is None:
            raise InvalidArgumentError("Edge save with a _to handle also needs a _from handle")
        return from_or_opts, to_handle, opts
    if opts is not None:
        raise InvalidArgumentError("Edge save options given without _from and _to handles")
    if isinstance(from_or_opts, str):
        raise InvalidArgumentError(
            "Edge save got a single handle; pass both _from and _to handles or an options mapping"
        )
    return None, None, from_or_opts
