"""Lazy, single-pass cursor over query results."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

from doc_query.core.exceptions import StoreOperationError
from doc_query.mapping.protocol import Mapper

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Cursor(Generic[T]):
    """Forward-only sequence of models built one per raw document.

    Documents are mapped only as the cursor is iterated. Once exhausted it
    stays exhausted; re-issue the query to read the results again.

    Args:
        documents: Raw result stream from the store.
        mapper: Turns each raw document into a model.
        count: Total matching documents, or None when the query is not
            paginated.
        skip: Current page index.
        limit: Page size.
    """

    def __init__(
        self,
        documents: Iterable[dict[str, Any]],
        mapper: Mapper[T],
        count: int | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> None:
        self._documents = iter(documents)
        self._mapper = mapper
        self._count = count
        self._skip = skip
        self._limit = limit
        self._next = skip + 1 if count is not None and count > limit else None

    @property
    def count(self) -> int | None:
        return self._count

    @property
    def skip(self) -> int:
        return self._skip

    @property
    def limit(self) -> int:
        return self._limit

    def next_page(self) -> int | None:
        """Index of the following page, or None when everything fits in one."""
        return self._next

    def __iter__(self) -> Cursor[T]:
        return self

    def __next__(self) -> T:
        try:
            document = next(self._documents)
        except StoreOperationError as e:
            logger.error("Cursor aborted: %s", e)
            self._documents = iter(())
            raise StopIteration from e
        return self._mapper.map_one(document)

    def docs(self) -> Iterator[T]:
        """Generator over the remaining models."""
        yield from self

    def to_list(self) -> list[T]:
        """Drain the remaining models into a list."""
        return list(self)
