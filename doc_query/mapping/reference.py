"""Lazy references between documents.

A Reference points at a persisted model by (model type, collection, _id).
It is resolved on first access and memoized on the instance; there is no
identity map shared between instances, so two references to the same
document each fetch it once.

Copies share the store of the original. Pickled references come back
unbound; pass a store to `resolve()` or rebuild them from a repository.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from doc_query.core.exceptions import (
    ReferenceConstructionError,
    StoreNotBoundError,
    StoreOperationError,
)
from doc_query.mapping.registry import lookup_model

logger = logging.getLogger(__name__)

REF_KEY = "__ref"
MODEL_KEY = "__model"
COLLECTION_KEY = "__collection"
ID_KEY = "_id"


class Reference:
    """Immutable lazy pointer to another model.

    Args:
        model_type: Target model class, or its registered name.
        id: Target `_id`. Must not be None.
        collection: Target collection. Defaults to the model's
            `__collection__`.
        store: Store used by `resolve()` when none is passed explicitly.

    Raises:
        ReferenceConstructionError: If the target has no `_id` or no
            collection.
    """

    __slots__ = ("_model_type", "_collection", "_id", "_store", "_target")

    def __init__(
        self,
        model_type: type | str,
        id: Any,  # noqa: A002
        collection: str | None = None,
        store: Any | None = None,
    ) -> None:
        if isinstance(model_type, str):
            model_type = lookup_model(model_type)
        if id is None:
            raise ReferenceConstructionError(
                f"Cannot create a reference to an unsaved {model_type.__name__}"
            )
        collection = collection or getattr(model_type, "__collection__", None)
        if not collection:
            raise ReferenceConstructionError(
                f"Cannot create a reference to {model_type.__name__}: model has no collection"
            )
        object.__setattr__(self, "_model_type", model_type)
        object.__setattr__(self, "_collection", collection)
        object.__setattr__(self, "_id", id)
        object.__setattr__(self, "_store", store)
        object.__setattr__(self, "_target", None)

    @classmethod
    def from_model(cls, model: Any, store: Any | None = None) -> Reference:
        """Build a reference to a persisted model."""
        model_type = type(model)
        if not getattr(model_type, "__collection__", None):
            raise ReferenceConstructionError(
                f"Cannot create a reference to {model_type.__name__}: model has no collection"
            )
        return cls(model_type, model._id, model_type.__collection__, store)

    @property
    def model_type(self) -> type:
        return self._model_type  # type: ignore[no-any-return]

    @property
    def collection(self) -> str:
        return self._collection  # type: ignore[no-any-return]

    @property
    def is_resolved(self) -> bool:
        """True once a target has been fetched and cached."""
        return self._target is not None

    def resolve(self, store: Any | None = None) -> Any | None:
        """Return the referenced model, fetching it on first call.

        A missing target is logged as a broken reference and yields None;
        it is not cached, so a later call fetches again.

        Raises:
            StoreNotBoundError: If no store was bound or passed.
        """
        if self._target is not None:
            return self._target

        if store is None:
            store = self._store
        if store is None:
            raise StoreNotBoundError(
                f"Reference to {self._collection}:{self._id} has no store to resolve against"
            )

        try:
            document = store.collection(self._collection).find_one({ID_KEY: self._id})
        except StoreOperationError as e:
            logger.error("Reference %s:%s could not be resolved: %s", self._collection, self._id, e)
            return None

        if document is None:
            logger.warning("Broken reference: %s:%s", self._collection, self._id)
            return None

        target = self._model_type.from_document(document, store=store)
        object.__setattr__(self, "_target", target)
        return target

    def document(self) -> dict[str, Any]:
        """Wire form of the reference. Never triggers resolution."""
        return {
            REF_KEY: True,
            ID_KEY: self._id,
            MODEL_KEY: self._model_type.__model_name__,
            COLLECTION_KEY: self._collection,
        }

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        target = self.resolve()
        return getattr(target, name) if target is not None else None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Cannot set attributes on a reference")

    def _clone(self, target: Any) -> Reference:
        clone = Reference.__new__(Reference)
        for name in ("_model_type", "_collection", "_id", "_store"):
            object.__setattr__(clone, name, object.__getattribute__(self, name))
        object.__setattr__(clone, "_target", target)
        return clone

    def __copy__(self) -> Reference:
        return self._clone(self._target)

    def __deepcopy__(self, memo: dict[int, Any]) -> Reference:
        return self._clone(copy.deepcopy(self._target, memo))

    def __getstate__(self) -> dict[str, Any]:
        # Stores hold live connections and are not pickled
        return {
            "_model_type": self._model_type,
            "_collection": self._collection,
            "_id": self._id,
            "_target": self._target,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:
        object.__setattr__(self, "_store", None)
        for name, value in state.items():
            object.__setattr__(self, name, value)

    def _key(self) -> tuple[str, str, Any]:
        return (self._model_type.__model_name__, self._collection, self._id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reference):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Reference({self._model_type.__name__}:{self._collection}:{self._id})"
