"""Aggregation layer - pipeline builder and accumulator expressions."""

from __future__ import annotations

from doc_query.aggregation import accumulators
from doc_query.aggregation.builder import AggregationBuilder, aggregation

__all__ = [
    "AggregationBuilder",
    "aggregation",
    "accumulators",
]
