"""Wire codec for model field values.

Decoding classifies every raw value exactly once into a tagged union,
then a single dispatch turns it into its Python form:

    ScalarValue     plain value, or enum member for enum-kind fields
    EmbeddedValue   mapping with `__model` (or any mapping in a model-kind
                    field) -> embedded Model
    ReferenceValue  mapping with `__ref` -> unresolved Reference
    ListValue       sequence -> list, each item classified on its own

Encoding is the recursive inverse.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

from doc_query.core.exceptions import ValidationError
from doc_query.mapping.reference import COLLECTION_KEY, ID_KEY, MODEL_KEY, REF_KEY, Reference
from doc_query.mapping.registry import lookup_model
from doc_query.mapping.types import FieldType


@runtime_checkable
class Documentable(Protocol):
    """Anything that serializes itself to a wire document."""

    def document(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ScalarValue:
    value: Any


@dataclass(frozen=True)
class EmbeddedValue:
    model_name: str | None
    document: Mapping[str, Any]


@dataclass(frozen=True)
class ReferenceValue:
    model_name: str | None
    id: Any
    collection: str | None


@dataclass(frozen=True)
class ListValue:
    items: tuple[WireValue, ...]


WireValue = Union[ScalarValue, EmbeddedValue, ReferenceValue, ListValue]


def classify(raw: Any, field_type: FieldType) -> WireValue:
    """Inspect the reserved keys of `raw` once and tag it."""
    if isinstance(raw, Mapping):
        if raw.get(REF_KEY):
            return ReferenceValue(raw.get(MODEL_KEY), raw.get(ID_KEY), raw.get(COLLECTION_KEY))
        if raw.get(MODEL_KEY):
            return EmbeddedValue(raw[MODEL_KEY], raw)
        if field_type.model_class is not None:
            # An untagged mapping in a model field, e.g. the `{}` empty-entity sentinel
            return EmbeddedValue(None, raw)
        return ScalarValue(raw)
    if isinstance(raw, (list, tuple)):
        return ListValue(tuple(classify(item, field_type) for item in raw))
    return ScalarValue(raw)


def _target_class(model_name: str | None, field_type: FieldType) -> type:
    if model_name:
        return lookup_model(model_name)
    model_class = field_type.model_class
    if model_class is None:
        raise ValidationError(f"cannot infer model type for {field_type!r}")
    return model_class


def decode(
    wire: WireValue,
    field_type: FieldType,
    store: Any | None = None,
    field: str | None = None,
) -> Any:
    """Turn a classified wire value into its Python form."""
    if isinstance(wire, ListValue):
        return [decode(item, field_type, store, field) for item in wire.items]

    if isinstance(wire, EmbeddedValue):
        model_class = _target_class(wire.model_name, field_type)
        return model_class.from_document(wire.document, store=store)  # type: ignore[attr-defined]

    if isinstance(wire, ReferenceValue):
        model_class = _target_class(wire.model_name, field_type)
        return Reference(model_class, wire.id, wire.collection, store=store)

    value = wire.value
    enum_class = field_type.enum_class
    if enum_class is not None and value is not None and not isinstance(value, enum_class):
        try:
            return enum_class(value)
        except ValueError as e:
            raise ValidationError(
                f"{value!r} is not a valid {enum_class.__name__}", field
            ) from e
    return value


def encode(value: Any) -> Any:
    """Serialize a field value to its wire form.

    Models and references serialize themselves (references never resolve),
    enum members become their value, sequences and mappings recurse.
    """
    if isinstance(value, Documentable):
        return value.document()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: encode(item) for key, item in value.items()}
    return value
