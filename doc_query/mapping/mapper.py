"""Raw document to model mapper."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from doc_query.mapping.model import Model

M = TypeVar("M", bound=Model)


class ModelMapper(Generic[M]):
    """Maps raw documents onto a Model class.

    Args:
        model_class: The model to reconstruct.
        store: Bound to every reference found in mapped documents so they
            can resolve lazily.
    """

    def __init__(self, model_class: type[M], store: Any | None = None) -> None:
        self._model_class = model_class
        self._store = store

    @property
    def model_class(self) -> type[M]:
        return self._model_class

    def map_one(self, document: dict[str, Any]) -> M:
        """Map a single raw document to a model instance."""
        return self._model_class.from_document(document, store=self._store)

    def map_many(self, documents: Iterable[dict[str, Any]]) -> list[M]:
        """Map all documents via map_one."""
        return [self.map_one(document) for document in documents]
