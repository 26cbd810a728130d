"""Store adapter protocols.

Every adapter module MUST implement these protocols. Repositories and
references only ever talk to a `Store` and the `CollectionHandle`s it
returns, so any object with this shape (including a test double) can be
injected.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from doc_query.core.connection import ConnectionConfig


@runtime_checkable
class CollectionHandle(Protocol):
    """Synchronous operations on one collection of the backing store."""

    def find(
        self,
        query: dict[str, Any],
        fields: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> Iterable[dict[str, Any]]:
        """Return a lazy iterable of raw documents."""
        ...

    def find_one(
        self, query: dict[str, Any], fields: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Return the first matching raw document, or None."""
        ...

    def insert(self, document: dict[str, Any]) -> Any:
        """Insert a new document."""
        ...

    def save(self, document: dict[str, Any]) -> Any:
        """Replace the document with the same `_id`, inserting if absent."""
        ...

    def update(
        self,
        query: dict[str, Any],
        new_document: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> Any:
        """Update matching documents."""
        ...

    def remove(self, query: dict[str, Any], options: dict[str, Any] | None = None) -> Any:
        """Remove matching documents."""
        ...

    def count(self, query: dict[str, Any]) -> int:
        """Count matching documents."""
        ...

    def distinct(self, key: str, query: dict[str, Any] | None = None) -> list[Any]:
        """Distinct values of `key` across matching documents."""
        ...

    def aggregate(self, pipeline: list[dict[str, Any]]) -> Iterable[dict[str, Any]]:
        """Run an aggregation pipeline."""
        ...


@runtime_checkable
class Store(Protocol):
    """A database-level handle: collections plus raw commands."""

    def collection(self, name: str) -> CollectionHandle:
        """Return the handle for collection `name`."""
        ...

    def command(self, options: dict[str, Any]) -> dict[str, Any]:
        """Run a database command and return its reply."""
        ...


@runtime_checkable
class StoreAdapter(Protocol):
    """Driver adapter used by ConnectionManager."""

    def create_client(self, config: ConnectionConfig) -> Any:
        """Create the driver client."""
        ...

    def get_database(self, client: Any, config: ConnectionConfig) -> Any:
        """Select the configured database from a client."""
        ...

    def get_collection(self, database: Any, name: str) -> CollectionHandle:
        """Wrap a driver collection in a CollectionHandle."""
        ...

    def command(self, database: Any, options: dict[str, Any]) -> dict[str, Any]:
        """Run a database command."""
        ...

    def close_client(self, client: Any) -> None:
        """Close the driver client and its pool."""
        ...
