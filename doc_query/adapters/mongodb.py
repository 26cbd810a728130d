"""MongoDB adapter using pymongo."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from doc_query.core.connection import ConnectionConfig
from doc_query.core.exceptions import ConnectionError, StoreOperationError  # noqa: A004

logger = logging.getLogger(__name__)


def _is_operator_document(document: dict[str, Any]) -> bool:
    return any(key.startswith("$") for key in document)


class MongoCollection:
    """CollectionHandle over a pymongo Collection.

    PyMongoError is re-raised as StoreOperationError, including errors that
    surface lazily while a find cursor is being iterated.
    """

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    @property
    def name(self) -> str:
        return str(self._collection.name)

    def _fail(self, operation: str, error: PyMongoError) -> StoreOperationError:
        logger.debug("%s on '%s' failed: %s", operation, self.name, error)
        return StoreOperationError(operation, str(error))

    def _iterate(self, cursor: Any) -> Iterator[dict[str, Any]]:
        try:
            yield from cursor
        except PyMongoError as e:
            raise self._fail("find", e) from e

    def find(
        self,
        query: dict[str, Any],
        fields: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> Iterator[dict[str, Any]]:
        try:
            cursor = self._collection.find(
                query, projection=fields or None, sort=sort, skip=skip, limit=limit
            )
        except PyMongoError as e:
            raise self._fail("find", e) from e
        return self._iterate(cursor)

    def find_one(
        self, query: dict[str, Any], fields: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        try:
            document = self._collection.find_one(query, projection=fields or None)
            return document  # type: ignore[no-any-return]
        except PyMongoError as e:
            raise self._fail("find_one", e) from e

    def insert(self, document: dict[str, Any]) -> Any:
        try:
            return self._collection.insert_one(document).inserted_id
        except PyMongoError as e:
            raise self._fail("insert", e) from e

    def save(self, document: dict[str, Any]) -> Any:
        try:
            return self._collection.replace_one({"_id": document["_id"]}, document, upsert=True)
        except PyMongoError as e:
            raise self._fail("save", e) from e

    def update(
        self,
        query: dict[str, Any],
        new_document: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> Any:
        options = options or {}
        upsert = bool(options.get("upsert", False))
        try:
            if not _is_operator_document(new_document):
                return self._collection.replace_one(query, new_document, upsert=upsert)
            if options.get("multi", False):
                return self._collection.update_many(query, new_document, upsert=upsert)
            return self._collection.update_one(query, new_document, upsert=upsert)
        except PyMongoError as e:
            raise self._fail("update", e) from e

    def remove(self, query: dict[str, Any], options: dict[str, Any] | None = None) -> Any:
        options = options or {}
        try:
            if options.get("justOne", False):
                return self._collection.delete_one(query)
            return self._collection.delete_many(query)
        except PyMongoError as e:
            raise self._fail("remove", e) from e

    def count(self, query: dict[str, Any]) -> int:
        try:
            return int(self._collection.count_documents(query))
        except PyMongoError as e:
            raise self._fail("count", e) from e

    def distinct(self, key: str, query: dict[str, Any] | None = None) -> list[Any]:
        try:
            return self._collection.distinct(key, query)  # type: ignore[no-any-return]
        except PyMongoError as e:
            raise self._fail("distinct", e) from e

    def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        try:
            return list(self._collection.aggregate(pipeline))
        except PyMongoError as e:
            raise self._fail("aggregate", e) from e


class MongoAdapter:
    """Synchronous MongoDB adapter."""

    def create_client(self, config: ConnectionConfig) -> MongoClient[dict[str, Any]]:
        options: dict[str, Any] = {"serverSelectionTimeoutMS": config.timeout_ms}
        if config.app_name is not None:
            options["appname"] = config.app_name
        options.update(config.extra)
        try:
            return MongoClient(config.url, **options)
        except PyMongoError as e:
            raise ConnectionError(f"Cannot connect to {config.url}: {e}") from e

    def get_database(self, client: Any, config: ConnectionConfig) -> Any:
        return client[config.database]

    def get_collection(self, database: Any, name: str) -> MongoCollection:
        return MongoCollection(database[name])

    def command(self, database: Any, options: dict[str, Any]) -> dict[str, Any]:
        try:
            return database.command(options)  # type: ignore[no-any-return]
        except PyMongoError as e:
            raise StoreOperationError("command", str(e)) from e

    def close_client(self, client: Any) -> None:
        client.close()
