"""Repository layer - per-model store gateways."""

from __future__ import annotations

from doc_query.repository.base import Repository
from doc_query.repository.cursor import Cursor

__all__ = [
    "Repository",
    "Cursor",
]
