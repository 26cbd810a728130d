"""Shared test fixtures."""

from __future__ import annotations

import copy
from collections import Counter
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class FakeCollection:
    """In-memory CollectionHandle with equality-only queries.

    Every call is counted in `calls` so tests can assert how often the
    store was hit.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.calls: Counter[str] = Counter()
        self.pipelines: list[list[dict[str, Any]]] = []
        self.aggregate_result: list[dict[str, Any]] = []

    def find(
        self,
        query: dict[str, Any],
        fields: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> Iterator[dict[str, Any]]:
        self.calls["find"] += 1

        def generate() -> Iterator[dict[str, Any]]:
            matched = [copy.deepcopy(d) for d in self.documents if _matches(d, query)]
            for key, direction in reversed(sort or []):
                matched.sort(key=lambda d: d.get(key), reverse=direction < 0)
            matched = matched[skip:]
            if limit:
                matched = matched[:limit]
            yield from matched

        return generate()

    def find_one(
        self, query: dict[str, Any], fields: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        self.calls["find_one"] += 1
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def insert(self, document: dict[str, Any]) -> Any:
        self.calls["insert"] += 1
        self.documents.append(copy.deepcopy(document))
        return document["_id"]

    def save(self, document: dict[str, Any]) -> Any:
        self.calls["save"] += 1
        for index, existing in enumerate(self.documents):
            if existing.get("_id") == document["_id"]:
                self.documents[index] = copy.deepcopy(document)
                return document["_id"]
        self.documents.append(copy.deepcopy(document))
        return document["_id"]

    def update(
        self,
        query: dict[str, Any],
        new_document: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> Any:
        self.calls["update"] += 1
        for document in self.documents:
            if _matches(document, query):
                document.update(new_document.get("$set", {}))
        return None

    def remove(self, query: dict[str, Any], options: dict[str, Any] | None = None) -> Any:
        self.calls["remove"] += 1
        self.documents = [d for d in self.documents if not _matches(d, query)]
        return None

    def count(self, query: dict[str, Any]) -> int:
        self.calls["count"] += 1
        return sum(1 for d in self.documents if _matches(d, query))

    def distinct(self, key: str, query: dict[str, Any] | None = None) -> list[Any]:
        self.calls["distinct"] += 1
        values: list[Any] = []
        for document in self.documents:
            if _matches(document, query or {}) and key in document:
                if document[key] not in values:
                    values.append(document[key])
        return values

    def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls["aggregate"] += 1
        self.pipelines.append(pipeline)
        return list(self.aggregate_result)


class FakeStore:
    """In-memory Store: one FakeCollection per name plus recorded commands."""

    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}
        self.commands: list[dict[str, Any]] = []
        self.command_reply: dict[str, Any] = {"ok": 1.0, "results": []}

    def collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def command(self, options: dict[str, Any]) -> dict[str, Any]:
        self.commands.append(options)
        return self.command_reply


@pytest.fixture
def store() -> FakeStore:
    """Empty in-memory store."""
    return FakeStore()


@pytest.fixture
def tmp_functions_dir(tmp_path: Path) -> Path:
    """Temporary directory for JavaScript function files."""
    return tmp_path / "mongo_functions"


@pytest.fixture
def write_js(tmp_functions_dir: Path):
    """Helper to write .js files into the temp directory.

    Usage:
        write_js("reports/daily_sum.js", "function () { emit(this.day, 1); }")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_functions_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write
