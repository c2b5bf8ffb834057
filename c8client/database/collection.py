"""
Collection API.

BaseCollection implements the operations shared by document and edge
collections: collection management, document CRUD, simple queries, bulk
import and index management. Each method normalizes its arguments, builds
a RequestDescriptor and hands it to the Connection together with a
projector that shapes the response.

Usage:
    users = client.collection("users")
    meta = await users.save({"name": "Ada"})
    doc = await users.document(meta["_key"])
    missing = await users.document("nope", graceful=True)  # None
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..constants import (COLLECTION_NOT_FOUND, CURRENT_DIALECT_MAJOR, DOCUMENT_COLLECTION,
                         DOCUMENT_NOT_FOUND, EDGE_COLLECTION, HTTP_NOT_FOUND)
from ..exceptions import (ConfigurationError, InvalidArgumentError, ServerError,
                          UnsupportedOperationError)
from ..types import DocumentHandle, ImportOptions, ImportResult, IndexHandle, WriteOptions
from .cursor import ArrayCursor
from .handles import resolve_document_handle, resolve_index_handle
from .options import (import_query, normalize_count_options, normalize_fields,
                      normalize_unique_options, normalize_write_options,
                      resolve_edge_save_args, serialize_import_rows, split_revision)
from .request import RequestDescriptor, ResponseEnvelope

if TYPE_CHECKING:
    from .connection import Connection


def _body(res: ResponseEnvelope) -> Any:
    return res.body


def _body_field(name: str) -> Callable[[ResponseEnvelope], Any]:
    def project(res: ResponseEnvelope) -> Any:
        return res.body.get(name) if isinstance(res.body, dict) else None

    return project


class BaseCollection:
    """
    Operations shared by document and edge collections.

    The collection holds a non-owning reference to its Connection. Its
    only mutable identity is the name, changed by ``rename()``.
    """

    type: int = DOCUMENT_COLLECTION

    def __init__(self, connection: Connection, name: str):
        self.name = name
        self._id_prefix = f"{name}/"
        self._connection = connection
        self._stream: Any = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    @property
    def id_prefix(self) -> str:
        return self._id_prefix

    def _cursor(self, res: ResponseEnvelope) -> ArrayCursor:
        return ArrayCursor(self._connection, res.body, res.host)

    def _require_legacy(self, operation: str) -> None:
        if self._connection.c8_major >= CURRENT_DIALECT_MAJOR:
            raise UnsupportedOperationError(operation, self._connection.c8_major)

    # ------------------------------------------------------------------
    # Handles and request helpers
    # ------------------------------------------------------------------

    def _document_handle(self, handle: DocumentHandle) -> str:
        return resolve_document_handle(handle, self._id_prefix)

    def _index_handle(self, handle: IndexHandle) -> str:
        return resolve_index_handle(handle, self._id_prefix)

    def _document_path(self, handle: DocumentHandle) -> str:
        return f"/document/{self._document_handle(handle)}"

    async def _request(
        self,
        path: str,
        method: str = "GET",
        projector: Callable[[ResponseEnvelope], Any] = _body,
        **kwargs: Any,
    ) -> Any:
        return await self._connection.request(
            RequestDescriptor(method=method, path=path, **kwargs), projector
        )

    async def _get(self, path: str, qs: Mapping[str, Any] | None = None) -> Any:
        return await self._request(f"/collection/{self.name}/{path}", qs=qs)

    async def _put(self, path: str, body: Any = None) -> Any:
        return await self._request(f"/collection/{self.name}/{path}", method="PUT", body=body)

    async def _simple(
        self,
        path: str,
        body: Mapping[str, Any],
        projector: Callable[[ResponseEnvelope], Any] = _body,
    ) -> Any:
        return await self._request(
            f"/simple/{path}",
            method="PUT",
            body={**body, "collection": self.name},
            projector=projector,
        )

    # ------------------------------------------------------------------
    # Collection management
    # ------------------------------------------------------------------

    async def get(self) -> dict[str, Any]:
        """Return the collection description."""
        return await self._request(f"/collection/{self.name}")

    async def exists(self) -> bool:
        """Return True if the collection exists, False if the server reports it missing."""
        try:
            await self.get()
        except ServerError as e:
            if e.error_num == COLLECTION_NOT_FOUND:
                return False
            raise
        return True

    async def create(self, properties: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Create the collection on the server.

        Args:
            properties: Extra collection properties (waitForSync, keyOptions, ...)

        Returns:
            The server's description of the new collection
        """
        return await self._request(
            "/collection",
            method="POST",
            body={**(properties or {}), "name": self.name, "type": self.type},
        )

    def _get_stream(self) -> Any:
        if self._stream is None:
            self._stream = self._connection.stream(self.name)
            if self._stream is None:
                raise ConfigurationError(
                    "Change notifications need a stream_factory on the connection",
                    context={"collection": self.name},
                )
        return self._stream

    def on_change(
        self, callback: Callable[[Any], Any], dc_name: str, subscription: str = "subs"
    ) -> None:
        """Subscribe ``callback`` to the collection's change stream in ``dc_name``."""
        self._get_stream().consumer(subscription, callback, dc_name)

    def close_on_change_connection(self) -> None:
        """Close the websocket connections opened by ``on_change``."""
        if self._stream is not None:
            self._stream.close_ws_connections()

    async def properties(self) -> dict[str, Any]:
        return await self._get("properties")

    async def count(self) -> dict[str, Any]:
        return await self._get("count")

    async def figures(self) -> dict[str, Any]:
        return await self._get("figures")

    async def revision(self) -> dict[str, Any]:
        return await self._get("revision")

    async def checksum(self, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self._get("checksum", opts)

    async def load(self, count: bool | None = None) -> dict[str, Any]:
        """Load the collection into memory, optionally returning the document count."""
        return await self._put("load", {"count": count} if isinstance(count, bool) else None)

    async def unload(self) -> dict[str, Any]:
        return await self._put("unload")

    async def set_properties(self, properties: Mapping[str, Any]) -> dict[str, Any]:
        return await self._put("properties", dict(properties))

    async def rename(self, name: str) -> dict[str, Any]:
        """
        Rename the collection.

        The id prefix used for handle resolution follows the new name once
        the server confirms the rename.
        """
        result = await self._request(
            f"/collection/{self.name}/rename", method="PUT", body={"name": name}
        )
        self.name = name
        self._id_prefix = f"{name}/"
        return result

    async def rotate(self) -> dict[str, Any]:
        return await self._put("rotate")

    async def truncate(self) -> dict[str, Any]:
        return await self._put("truncate")

    async def drop(self, opts: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self._request(f"/collection/{self.name}", method="DELETE", qs=opts)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def document_exists(self, handle: DocumentHandle) -> bool:
        """
        Check whether a document exists without fetching it.

        Returns:
            True if it exists, False for a missing document or collection

        Raises:
            ServerError: For any failure other than 404
        """
        path = self._document_path(handle)
        try:
            return await self._request(path, method="HEAD", projector=lambda res: True)
        except ServerError as e:
            if e.status_code == HTTP_NOT_FOUND:
                return False
            raise

    async def document(self, handle: DocumentHandle, graceful: bool = False) -> Any:
        """
        Fetch a document.

        Args:
            handle: Document key, id, or a mapping with ``_id``/``_key``
            graceful: Return None instead of raising when the document is missing

        Returns:
            The document, or None for a missing document when ``graceful``

        Raises:
            InvalidHandleError: If the handle cannot be resolved
            ServerError: If the document is missing (and not graceful) or the
                         request fails
        """
        path = self._document_path(handle)
        try:
            return await self._request(path)
        except ServerError as e:
            if graceful and e.error_num == DOCUMENT_NOT_FOUND:
                return None
            raise

    async def _write(
        self, method: str, handle: DocumentHandle, body: Any, opts: WriteOptions
    ) -> Any:
        path = self._document_path(handle)
        qs, headers = split_revision(normalize_write_options(opts), self._connection.c8_major)
        return await self._request(path, method=method, body=body, qs=qs, headers=headers)

    async def replace(
        self, handle: DocumentHandle, new_value: Any, opts: WriteOptions = None
    ) -> dict[str, Any]:
        """
        Replace a document.

        Args:
            handle: Document to replace
            new_value: The new document body
            opts: Options mapping, a revision string, or a bool for ``returnNew``
        """
        return await self._write("PUT", handle, new_value, opts)

    async def update(
        self, handle: DocumentHandle, new_value: Any, opts: WriteOptions = None
    ) -> dict[str, Any]:
        """
        Patch a document.

        Pass ``{"keepNull": False}`` to drop attributes set to None instead of
        storing them as null.
        """
        return await self._write("PATCH", handle, new_value, opts)

    async def remove(self, handle: DocumentHandle, opts: WriteOptions = None) -> dict[str, Any]:
        return await self._write("DELETE", handle, None, opts)

    async def bulk_update(
        self, new_values: list[Any], opts: Mapping[str, Any] | None = None
    ) -> list[Any]:
        return await self._request(
            f"/document/{self.name}", method="PATCH", body=new_values, qs=opts
        )

    # ------------------------------------------------------------------
    # Simple queries
    # ------------------------------------------------------------------

    async def list(self, type: str = "id") -> list[str]:
        """List the ids, keys or paths of all documents in the collection."""
        if self._connection.c8_major < CURRENT_DIALECT_MAJOR:
            return await self._request(
                "/document",
                qs={"type": type, "collection": self.name},
                projector=_body_field("documents"),
            )
        return await self._simple("all-keys", {"type": type}, _body_field("result"))

    async def all(self, opts: Mapping[str, Any] | None = None) -> ArrayCursor:
        """Return a cursor over every document in the collection."""
        return await self._simple("all", dict(opts or {}), self._cursor)

    async def any(self) -> Any:
        """Return a random document."""
        return await self._simple("any", {}, _body_field("document"))

    async def first(self, opts: int | Mapping[str, Any] | None = None) -> list[Any]:
        """
        Return the first documents in insertion order (2.x servers only).

        Raises:
            UnsupportedOperationError: On 3.x and newer servers
        """
        self._require_legacy("first")
        return await self._simple(
            "first", normalize_count_options(opts, "count"), _body_field("result")
        )

    async def last(self, opts: int | Mapping[str, Any] | None = None) -> list[Any]:
        """
        Return the last documents in insertion order (2.x servers only).

        Raises:
            UnsupportedOperationError: On 3.x and newer servers
        """
        self._require_legacy("last")
        return await self._simple(
            "last", normalize_count_options(opts, "count"), _body_field("result")
        )

    async def by_example(
        self, example: Mapping[str, Any], opts: Mapping[str, Any] | None = None
    ) -> ArrayCursor:
        return await self._simple(
            "by-example", {**(opts or {}), "example": example}, self._cursor
        )

    async def first_example(self, example: Mapping[str, Any]) -> Any:
        return await self._simple("first-example", {"example": example}, _body_field("document"))

    async def remove_by_example(
        self, example: Mapping[str, Any], opts: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._simple("remove-by-example", {**(opts or {}), "example": example})

    async def replace_by_example(
        self,
        example: Mapping[str, Any],
        new_value: Mapping[str, Any],
        opts: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._simple(
            "replace-by-example", {**(opts or {}), "example": example, "newValue": new_value}
        )

    async def update_by_example(
        self,
        example: Mapping[str, Any],
        new_value: Mapping[str, Any],
        opts: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._simple(
            "update-by-example", {**(opts or {}), "example": example, "newValue": new_value}
        )

    async def lookup_by_keys(self, keys: Iterable[str]) -> list[Any]:
        return await self._simple(
            "lookup-by-keys", {"keys": [*keys]}, _body_field("documents")
        )

    async def remove_by_keys(
        self, keys: Iterable[str], options: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"keys": [*keys]}
        if options is not None:
            body["options"] = dict(options)
        return await self._simple("remove-by-keys", body)

    async def fulltext(
        self, attribute: str, query: str, opts: Mapping[str, Any] | None = None
    ) -> ArrayCursor:
        """Run a fulltext query against ``attribute``; ``opts["index"]`` may be any index handle."""
        opts = dict(opts or {})
        if opts.get("index"):
            opts["index"] = self._index_handle(opts["index"])
        return await self._simple(
            "fulltext", {**opts, "attribute": attribute, "query": query}, self._cursor
        )

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------

    async def import_bulk(
        self,
        data: bytes | str | Iterable[Any],
        opts: ImportOptions | None = None,
    ) -> ImportResult:
        """
        Import documents in bulk.

        Args:
            data: Rows (documents, or value lists when ``type`` is None) that
                  are sent as newline-delimited JSON, or a str/bytes payload
                  sent unchanged
            opts: Import options. ``type`` defaults to "auto"; pass
                  ``{"type": None}`` to import tuple arrays whose first row
                  holds the attribute names

        Returns:
            Import counters: created, errors, empty, updated, ignored

        Example:
            await collection.import_bulk(
                [["_key", "fruit"], ["a", "banana"], ["b", "peach"]], {"type": None}
            )
        """
        if isinstance(data, Mapping):
            raise InvalidArgumentError("Import data must be rows, a string or bytes, not a mapping")
        if not isinstance(data, (str, bytes, bytearray)):
            data = serialize_import_rows(data)
        return await self._request(
            "/import",
            method="POST",
            body=data,
            is_binary=True,
            qs=import_query(opts, self.name),
        )

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    async def indexes(self) -> list[dict[str, Any]]:
        return await self._request(
            "/index", qs={"collection": self.name}, projector=_body_field("indexes")
        )

    async def index(self, handle: IndexHandle) -> dict[str, Any]:
        return await self._request(f"/index/{self._index_handle(handle)}")

    async def create_index(self, details: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request(
            "/index", method="POST", body=dict(details), qs={"collection": self.name}
        )

    async def drop_index(self, handle: IndexHandle) -> dict[str, Any]:
        return await self._request(f"/index/{self._index_handle(handle)}", method="DELETE")

    async def create_cap_constraint(
        self, opts: int | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Create a cap constraint (2.x servers only).

        Raises:
            UnsupportedOperationError: On 3.x and newer servers
        """
        self._require_legacy("create_cap_constraint")
        return await self.create_index({**normalize_count_options(opts, "size"), "type": "cap"})

    async def _create_field_index(
        self, index_type: str, fields: str | Iterable[str], opts: Any
    ) -> dict[str, Any]:
        return await self.create_index(
            {
                "unique": False,
                **normalize_unique_options(opts),
                "type": index_type,
                "fields": normalize_fields(fields),
            }
        )

    async def create_hash_index(
        self, fields: str | Iterable[str], opts: bool | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Create a hash index.

        Args:
            fields: One attribute name or a list of them
            opts: Index options, or a bool shorthand for ``unique``
        """
        return await self._create_field_index("hash", fields, opts)

    async def create_skip_list(
        self, fields: str | Iterable[str], opts: bool | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._create_field_index("skiplist", fields, opts)

    async def create_persistent_index(
        self, fields: str | Iterable[str], opts: bool | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._create_field_index("persistent", fields, opts)

    async def create_geo_index(
        self, fields: str | Iterable[str], opts: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self.create_index(
            {**(opts or {}), "fields": normalize_fields(fields), "type": "geo"}
        )

    async def create_fulltext_index(
        self, fields: str | Iterable[str], min_length: int | None = None
    ) -> dict[str, Any]:
        details: dict[str, Any] = {"fields": normalize_fields(fields), "type": "fulltext"}
        if min_length is not None:
            details["minLength"] = min_length
        return await self.create_index(details)


class DocumentCollection(BaseCollection):
    """A collection of plain documents."""

    type = DOCUMENT_COLLECTION

    async def save(self, data: Any, opts: WriteOptions = None) -> dict[str, Any]:
        """
        Insert a document.

        Args:
            data: The document; ``_key`` is used when present
            opts: Options mapping, a bool shorthand for ``returnNew``, or a
                  revision string (sent as ``if-match`` on 3.x servers)

        Returns:
            Document metadata (``_id``, ``_key``, ``_rev``) plus ``new`` when
            requested
        """
        qs, headers = split_revision(normalize_write_options(opts), self._connection.c8_major)
        if self._connection.c8_major < CURRENT_DIALECT_MAJOR:
            return await self._request(
                "/document",
                method="POST",
                body=data,
                qs={**qs, "collection": self.name},
                headers=headers,
            )
        return await self._request(
            f"/document/{self.name}", method="POST", body=data, qs=qs, headers=headers
        )


class EdgeCollection(BaseCollection):
    """A collection of edges linking documents through ``_from`` and ``_to``."""

    type = EDGE_COLLECTION

    def _document_path(self, handle: DocumentHandle) -> str:
        if self._connection.c8_major < CURRENT_DIALECT_MAJOR:
            return f"/edge/{self._document_handle(handle)}"
        return f"/document/{self._document_handle(handle)}"

    async def edge(self, handle: DocumentHandle, graceful: bool = False) -> Any:
        """Fetch an edge; same semantics as ``document()``."""
        return await self.document(handle, graceful)

    async def save(
        self,
        data: Mapping[str, Any],
        from_or_opts: Any = None,
        to: DocumentHandle | None = None,
        opts: WriteOptions = None,
    ) -> dict[str, Any]:
        """
        Insert an edge.

        Two call shapes are accepted::

            await edges.save({"weight": 1}, "people/ada", "people/alan")
            await edges.save({"_from": "people/ada", "_to": "people/alan"}, True)

        When ``to`` is given the second and third arguments are handles and
        are written to ``_from``/``_to``; otherwise the second argument is
        the options.

        Raises:
            InvalidArgumentError: If the arguments match neither call shape
            InvalidHandleError: If a handle cannot be resolved
        """
        from_handle, to_handle, raw_opts = resolve_edge_save_args(data, from_or_opts, to, opts)
        data = dict(data)
        if to_handle is not None:
            data["_from"] = self._document_handle(from_handle)
            data["_to"] = self._document_handle(to_handle)
        qs, headers = split_revision(normalize_write_options(raw_opts), self._connection.c8_major)
        qs["collection"] = self.name
        if self._connection.c8_major < CURRENT_DIALECT_MAJOR:
            qs.update({"from": data.get("_from"), "to": data.get("_to")})
            return await self._request("/edge", method="POST", body=data, qs=qs, headers=headers)
        return await self._request("/document", method="POST", body=data, qs=qs, headers=headers)

    async def _edges(self, vertex: DocumentHandle, direction: str | None) -> list[Any]:
        return await self._request(
            f"/edges/{self.name}",
            qs={"direction": direction, "vertex": self._document_handle(vertex)},
            projector=_body_field("edges"),
        )

    async def edges(self, vertex: DocumentHandle) -> list[Any]:
        return await self._edges(vertex, None)

    async def in_edges(self, vertex: DocumentHandle) -> list[Any]:
        return await self._edges(vertex, "in")

    async def out_edges(self, vertex: DocumentHandle) -> list[Any]:
        return await self._edges(vertex, "out")

    async def traversal(
        self, start_vertex: DocumentHandle, opts: Mapping[str, Any] | None = None
    ) -> Any:
        """Run a server-side traversal over this edge collection."""
        return await self._request(
            "/traversal",
            method="POST",
            body={**(opts or {}), "startVertex": start_vertex, "edgeCollection": self.name},
            projector=_body_field("result"),
        )


def construct_collection(connection: Connection, data: Mapping[str, Any]) -> BaseCollection:
    """Build the collection class matching ``data["type"]``."""
    collection_class = EdgeCollection if data.get("type") == EDGE_COLLECTION else DocumentCollection
    return collection_class(connection, data["name"])
