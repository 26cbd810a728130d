"""Aggregation pipeline builder.

Provides a fluent builder whose stage list is handed, as is, to the
backing store. Call order is execution order.
"""

from __future__ import annotations

from typing import Any

from doc_query.aggregation import accumulators
from doc_query.aggregation.accumulators import field_path


def aggregation() -> AggregationBuilder:
    """Entry point for the pipeline DSL."""
    return AggregationBuilder()


class AggregationBuilder:
    """Ordered, append-only pipeline stage accumulator.

    `match`, `project`, `group` and `sort` silently drop an empty spec;
    `limit`, `skip` and `unwind` always append.
    """

    sum = staticmethod(accumulators.sum)
    push = staticmethod(accumulators.push)
    add_to_set = staticmethod(accumulators.add_to_set)
    first = staticmethod(accumulators.first)
    last = staticmethod(accumulators.last)
    max = staticmethod(accumulators.max)
    min = staticmethod(accumulators.min)
    avg = staticmethod(accumulators.avg)

    def __init__(self) -> None:
        self._pipeline: list[dict[str, Any]] = []

    def _append_if(self, operator: str, spec: dict[str, Any]) -> AggregationBuilder:
        if spec:
            self._pipeline.append({operator: spec})
        return self

    def match(self, spec: dict[str, Any]) -> AggregationBuilder:
        return self._append_if("$match", spec)

    def project(self, spec: dict[str, Any]) -> AggregationBuilder:
        return self._append_if("$project", spec)

    def group(self, spec: dict[str, Any]) -> AggregationBuilder:
        return self._append_if("$group", spec)

    def sort(self, spec: dict[str, Any]) -> AggregationBuilder:
        return self._append_if("$sort", spec)

    def limit(self, limit: int) -> AggregationBuilder:
        self._pipeline.append({"$limit": limit})
        return self

    def skip(self, skip: int) -> AggregationBuilder:
        self._pipeline.append({"$skip": skip})
        return self

    def unwind(self, field: str) -> AggregationBuilder:
        self._pipeline.append({"$unwind": field_path(field)})
        return self

    def get_pipeline(self) -> list[dict[str, Any]]:
        """The stages in call order (a copy)."""
        return list(self._pipeline)

    def __len__(self) -> int:
        return len(self._pipeline)

    def __repr__(self) -> str:
        return f"AggregationBuilder({self._pipeline!r})"
