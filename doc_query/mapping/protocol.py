"""Mapper protocol.

All mappers implement this interface. Repositories call map_one for
single-document reads and cursors call it once per streamed document.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Mapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_one(self, document: dict[str, Any]) -> T_co:
        """Map a single raw document to a target object."""
        ...

    def map_many(self, documents: Iterable[dict[str, Any]]) -> list[T_co]:
        """Map raw documents to a list of target objects."""
        ...
