"""Unit tests for Cursor."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock

import pytest

from doc_query.core.exceptions import StoreOperationError
from doc_query.repository.cursor import Cursor


def _identity_mapper() -> MagicMock:
    mapper = MagicMock()
    mapper.map_one.side_effect = lambda document: document["n"]
    return mapper


def _documents(n: int) -> list[dict[str, Any]]:
    return [{"n": i} for i in range(n)]


class TestNextPage:
    @pytest.mark.parametrize(
        ("count", "skip", "limit", "expected"),
        [
            (50, 0, 20, 1),
            (50, 2, 20, 3),
            (20, 0, 20, None),
            (5, 0, 20, None),
            (0, 0, 20, None),
            (21, 4, 20, 5),
        ],
    )
    def test_next_page(self, count: int, skip: int, limit: int, expected: int | None) -> None:
        cursor = Cursor([], _identity_mapper(), count=count, skip=skip, limit=limit)
        assert cursor.next_page() == expected

    def test_unpaginated_has_no_next_page(self) -> None:
        cursor = Cursor(_documents(3), _identity_mapper())
        assert cursor.count is None
        assert cursor.next_page() is None

    def test_properties(self) -> None:
        cursor = Cursor([], _identity_mapper(), count=7, skip=1, limit=5)
        assert (cursor.count, cursor.skip, cursor.limit) == (7, 1, 5)


class TestIteration:
    def test_maps_each_document(self) -> None:
        assert Cursor(_documents(3), _identity_mapper()).to_list() == [0, 1, 2]

    def test_lazy_mapping(self) -> None:
        mapper = _identity_mapper()
        cursor = Cursor(_documents(3), mapper)
        assert mapper.map_one.call_count == 0
        assert next(cursor) == 0
        assert mapper.map_one.call_count == 1

    def test_lazy_source(self) -> None:
        pulled: list[int] = []

        def source() -> Iterator[dict[str, Any]]:
            for i in range(3):
                pulled.append(i)
                yield {"n": i}

        cursor = Cursor(source(), _identity_mapper())
        assert pulled == []
        next(cursor)
        assert pulled == [0]

    def test_single_pass(self) -> None:
        cursor = Cursor(_documents(2), _identity_mapper())
        assert list(cursor) == [0, 1]
        assert list(cursor) == []

    def test_docs_generator(self) -> None:
        cursor = Cursor(_documents(3), _identity_mapper())
        next(cursor)
        assert list(cursor.docs()) == [1, 2]

    def test_store_error_ends_iteration(self, caplog) -> None:
        def source() -> Iterator[dict[str, Any]]:
            yield {"n": 0}
            raise StoreOperationError("find", "cursor killed")

        cursor = Cursor(source(), _identity_mapper())
        assert cursor.to_list() == [0]
        assert "cursor killed" in caplog.text
        assert list(cursor) == []

    def test_iter_returns_self(self) -> None:
        cursor = Cursor([], _identity_mapper())
        assert iter(cursor) is cursor
