"""Repository base class.

A Repository is the per-model gateway to one collection. The store handle
is injected; nothing is looked up from global state, and no per-call
state is kept on the instance, so one repository can serve many
operations.

Failure policy: reads (find, count, distinct, aggregate, map_reduce) log
store errors and report an empty result; `save` raises PersistenceError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from bson import ObjectId
from bson.code import Code

from doc_query.aggregation.builder import AggregationBuilder
from doc_query.core.exceptions import (
    InvalidModelTypeError,
    PersistenceError,
    RepositoryConfigError,
    StoreOperationError,
)
from doc_query.mapping.mapper import ModelMapper
from doc_query.mapping.model import Model, coerce_id
from doc_query.mapping.protocol import Mapper
from doc_query.mapping.reference import ID_KEY
from doc_query.repository.cursor import Cursor

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Model)

SortSpec = Mapping[str, int] | Iterable[tuple[str, int]]


def _sort_pairs(sort: SortSpec | None) -> list[tuple[str, int]] | None:
    if not sort:
        return None
    if isinstance(sort, Mapping):
        return list(sort.items())
    return list(sort)


def _as_code(function: str | Code) -> Code:
    return function if isinstance(function, Code) else Code(function)


class Repository(Generic[M]):
    """Generic store gateway for one model type.

    The model class and collection come from the constructor or from the
    `model_class` / `collection_name` class attributes of a subclass; the
    collection defaults to the model's `__collection__`.

        class UserRepository(Repository[User]):
            model_class = User

    Args:
        store: Store handle (e.g. ConnectionManager) providing
            `collection(name)` and `command(options)`.
        model_class: Model type handled by this repository.
        collection_name: Backing collection.
        mapper: Mapper for raw documents. Defaults to a ModelMapper bound
            to `store`.

    Raises:
        RepositoryConfigError: If no model class or collection is known.
    """

    model_class: ClassVar[type[Model] | None] = None
    collection_name: ClassVar[str | None] = None

    def __init__(
        self,
        store: Any,
        model_class: type[M] | None = None,
        collection_name: str | None = None,
        mapper: Mapper[M] | None = None,
    ) -> None:
        resolved_model = model_class or type(self).model_class
        if resolved_model is None:
            raise RepositoryConfigError(f"{type(self).__name__} has no model class")
        resolved_collection = (
            collection_name or type(self).collection_name or resolved_model.__collection__
        )
        if not resolved_collection:
            raise RepositoryConfigError(
                f"{type(self).__name__} has no collection for {resolved_model.__name__}"
            )

        self.store = store
        self._model_class: type[M] = resolved_model  # type: ignore[assignment]
        self._collection_name: str = resolved_collection
        self.mapper: Mapper[M] = mapper if mapper is not None else ModelMapper(
            self._model_class, store
        )

    @property
    def model(self) -> type[M]:
        return self._model_class

    @property
    def collection(self) -> str:
        return self._collection_name

    def _handle(self) -> Any:
        return self.store.collection(self._collection_name)

    def _read_failed(self, operation: str, error: StoreOperationError) -> None:
        logger.error("%s on '%s' failed: %s", operation, self._collection_name, error)

    # --- Reads ---

    def _find_documents(
        self,
        query: dict[str, Any] | None,
        fields: dict[str, Any] | None,
        sort: SortSpec | None,
        skip: int,
        limit: int,
    ) -> Iterable[dict[str, Any]]:
        try:
            return self._handle().find(  # type: ignore[no-any-return]
                query or {}, fields, sort=_sort_pairs(sort), skip=skip, limit=limit
            )
        except StoreOperationError as e:
            self._read_failed("find", e)
            return ()

    def find(
        self,
        query: dict[str, Any] | None = None,
        fields: dict[str, Any] | None = None,
        *,
        sort: SortSpec | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> Cursor[M]:
        """Query the collection. Models are built only as the cursor is read."""
        documents = self._find_documents(query, fields, sort, skip, limit)
        return Cursor(documents, self.mapper)

    def paginate(
        self,
        query: dict[str, Any] | None = None,
        page: int = 0,
        per_page: int = 20,
        fields: dict[str, Any] | None = None,
        sort: SortSpec | None = None,
    ) -> Cursor[M]:
        """Fetch one page; the cursor knows the total and the next page."""
        total = self.count(query)
        documents = self._find_documents(query, fields, sort, page * per_page, per_page)
        return Cursor(documents, self.mapper, count=total, skip=page, limit=per_page)

    def find_one(
        self,
        query: dict[str, Any] | None = None,
        fields: dict[str, Any] | None = None,
    ) -> M | None:
        """First matching model, or None."""
        try:
            document = self._handle().find_one(query or {}, fields)
        except StoreOperationError as e:
            self._read_failed("find_one", e)
            return None
        if not document:
            return None
        return self.mapper.map_one(document)

    def find_by_id(self, id: Any) -> M | None:  # noqa: A002
        """Model with the given `_id`, or None. Hex strings are accepted."""
        return self.find_one({ID_KEY: coerce_id(id)})

    def count(self, query: dict[str, Any] | None = None) -> int:
        try:
            return int(self._handle().count(query or {}))
        except StoreOperationError as e:
            self._read_failed("count", e)
            return 0

    def distinct(self, key: str, query: dict[str, Any] | None = None) -> list[Any]:
        """Distinct values of `key`; [] when the store returns anything else."""
        try:
            values = self._handle().distinct(key, query or {})
        except StoreOperationError as e:
            self._read_failed("distinct", e)
            return []
        return values if isinstance(values, list) else []

    def aggregate(
        self, pipeline: AggregationBuilder | Iterable[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Run a pipeline and return the raw result documents."""
        if isinstance(pipeline, AggregationBuilder):
            stages = pipeline.get_pipeline()
        else:
            stages = list(pipeline)
        try:
            return list(self._handle().aggregate(stages))
        except StoreOperationError as e:
            self._read_failed("aggregate", e)
            return []

    def map_reduce(
        self,
        map_fn: str | Code,
        reduce_fn: str | Code,
        query: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Run a mapReduce command with inline output.

        `config`, when given, replaces the command name, functions and
        query entirely; only the inline output default is kept.

        Returns:
            The command reply, or None if the command failed.
        """
        options: dict[str, Any] = {
            "mapreduce": self._collection_name,
            "map": _as_code(map_fn),
            "reduce": _as_code(reduce_fn),
            "out": {"inline": 1},
        }
        if query:
            options["query"] = query

        if config:
            out = options["out"]
            options = {**config}
            options.setdefault("out", out)

        try:
            result = self.store.command(options)
        except StoreOperationError as e:
            logger.error("MapReduce error on '%s': %s", self._collection_name, e)
            return None

        if result and result.get("ok"):
            return result  # type: ignore[no-any-return]
        logger.error("MapReduce error on '%s': %s", self._collection_name, result)
        return None

    # --- Writes ---

    def ensure_type(self, model: Any) -> None:
        """Raise InvalidModelTypeError unless `model` is this repository's type."""
        if not isinstance(model, self._model_class):
            raise InvalidModelTypeError(self._model_class, model)

    def save(self, model: M) -> M:
        """Insert a new model or replace a persisted one.

        A model without `_id` gets a fresh ObjectId and is inserted; a model
        with `_id` is written back in full. If the insert fails the new id
        is removed again.

        Raises:
            InvalidModelTypeError: If `model` is not of this repository's type.
            PersistenceError: If the store rejects the write.
        """
        self.ensure_type(model)
        handle = self._handle()

        if model._id is None:
            model._id = ObjectId()
            try:
                handle.insert(model.document())
            except StoreOperationError as e:
                del model._id
                raise PersistenceError(self._collection_name, str(e)) from e
            logger.debug("Inserted %s into '%s'", model._id, self._collection_name)
            return model

        try:
            handle.save(model.document())
        except StoreOperationError as e:
            raise PersistenceError(self._collection_name, str(e)) from e
        logger.debug("Saved %s in '%s'", model._id, self._collection_name)
        return model

    def update(
        self,
        query: dict[str, Any],
        new_document: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> bool:
        """Raw update passthrough. Returns False if the store rejects it."""
        try:
            self._handle().update(query, new_document, options or {})
        except StoreOperationError as e:
            logger.error("update on '%s' failed: %s", self._collection_name, e)
            return False
        return True

    def remove(
        self,
        target: M | dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> bool:
        """Remove one model, or every document matching a query.

        A model that was never persisted removes nothing and returns False.

        Raises:
            InvalidModelTypeError: If a model of another type is passed.
        """
        if isinstance(target, Mapping):
            query = dict(target)
        else:
            self.ensure_type(target)
            if target._id is None:
                return False
            query = {ID_KEY: target._id}

        try:
            self._handle().remove(query, options or {})
        except StoreOperationError as e:
            logger.error("remove on '%s' failed: %s", self._collection_name, e)
            return False
        return True

    def remove_by_id(self, id: Any) -> bool:  # noqa: A002
        return self.remove({ID_KEY: coerce_id(id)})
