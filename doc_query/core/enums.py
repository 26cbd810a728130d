"""Backend and field-kind enumerations."""

from __future__ import annotations

from enum import Enum


class StoreBackend(Enum):
    """Supported document store backends."""

    MONGODB = "mongodb"


class PrimitiveKind(Enum):
    """Built-in field kinds understood by FieldType."""

    INT = "int"
    STRING = "string"
    BOOL = "bool"
    FLOAT = "float"
    DOUBLE = "double"
    ANY = "any"
