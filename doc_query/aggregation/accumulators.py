"""Accumulator expressions for `$group` stages.

Each helper returns an expression mapping, not a pipeline stage:

    accumulators.sum("amount")      -> {"$sum": "$amount"}
    accumulators.sum()              -> {"$sum": 1}
    accumulators.push(["a", "b"])   -> {"$push": ["$a", "$b"]}

The names mirror the pipeline operators, so `sum`, `max` and `min` shadow
builtins inside this module; import the module, not the names.
"""

from __future__ import annotations

import re
from typing import Any

FIELD_PREFIX = "$"

_NUMBER = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*")


def field_path(field: str) -> str:
    """Mark `field` as a field path rather than a literal."""
    return field if field.startswith(FIELD_PREFIX) else FIELD_PREFIX + field


def _is_numeric(value: Any) -> bool:
    if isinstance(value, str):
        return _NUMBER.fullmatch(value) is not None
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sum(value: Any = 1) -> dict[str, Any]:  # noqa: A001
    """`$sum` of a numeric literal, or of a field when given a name.

    A numeric string such as `"2"` is a literal and is passed through as is.
    """
    return {"$sum": value if _is_numeric(value) else field_path(value)}


def push(field: str | list[str]) -> dict[str, Any]:
    """`$push` of one field, or of a list of fields."""
    if isinstance(field, list):
        return {"$push": [field_path(f) for f in field]}
    return {"$push": field_path(field)}


def add_to_set(field: str) -> dict[str, Any]:
    return {"$addToSet": field_path(field)}


def first(field: str) -> dict[str, Any]:
    return {"$first": field_path(field)}


def last(field: str) -> dict[str, Any]:
    return {"$last": field_path(field)}


def max(field: str) -> dict[str, Any]:  # noqa: A001
    return {"$max": field_path(field)}


def min(field: str) -> dict[str, Any]:  # noqa: A001
    return {"$min": field_path(field)}


def avg(field: str) -> dict[str, Any]:
    return {"$avg": field_path(field)}
