"""Mapping layer - typed models over raw documents."""

from __future__ import annotations

from doc_query.mapping.codec import (
    EmbeddedValue,
    ListValue,
    ReferenceValue,
    ScalarValue,
    classify,
    decode,
    encode,
)
from doc_query.mapping.mapper import ModelMapper
from doc_query.mapping.model import Model
from doc_query.mapping.protocol import Mapper
from doc_query.mapping.reference import Reference
from doc_query.mapping.registry import lookup_model
from doc_query.mapping.types import FieldType, FieldTypeBuilder, field

__all__ = [
    "Model",
    "Reference",
    "FieldType",
    "FieldTypeBuilder",
    "field",
    "Mapper",
    "ModelMapper",
    "lookup_model",
    "classify",
    "decode",
    "encode",
    "ScalarValue",
    "EmbeddedValue",
    "ReferenceValue",
    "ListValue",
]
