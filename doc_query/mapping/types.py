"""Field type descriptors.

A model declares its schema as a mapping of field name to a FieldType,
usually written with the fluent `field()` builder:

    {
        "name": field(str),
        "age": field(int).nullable(),
        "tags": field(str).array(),
        "author": field("User"),
    }

FieldType.check is pure validation: it never coerces a value.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bson import ObjectId

from doc_query.core.enums import PrimitiveKind
from doc_query.core.exceptions import SchemaError, ValidationError
from doc_query.mapping.reference import Reference
from doc_query.mapping.registry import lookup_model

_PRIMITIVE_NAMES = frozenset(kind.value for kind in PrimitiveKind)

# Python types accepted as shorthand for primitive kinds
_PYTHON_KINDS: dict[Any, str] = {
    int: PrimitiveKind.INT.value,
    str: PrimitiveKind.STRING.value,
    bool: PrimitiveKind.BOOL.value,
    float: PrimitiveKind.FLOAT.value,
    object: PrimitiveKind.ANY.value,
    Any: PrimitiveKind.ANY.value,
}

_SCALAR_CUSTOM_KINDS = (ObjectId, datetime)


def _matches_primitive(kind: str, value: Any) -> bool:
    if kind == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if kind == "string":
        return isinstance(value, str)
    if kind == "bool":
        return isinstance(value, bool)
    # float and double share Python's float
    return isinstance(value, float)


def _is_model_class(kind: Any) -> bool:
    from doc_query.mapping.model import Model

    return isinstance(kind, type) and issubclass(kind, Model)


def _is_enum_class(kind: Any) -> bool:
    return isinstance(kind, type) and issubclass(kind, enum.Enum)


def normalize_kind(kind: Any) -> str | type:
    """Turn a declared kind into a primitive name, a class, or a model name.

    Raises:
        SchemaError: If the kind is not a supported type.
    """
    if isinstance(kind, PrimitiveKind):
        return kind.value
    if isinstance(kind, str):
        lowered = kind.lower()
        if lowered in _PRIMITIVE_NAMES:
            return lowered
        # Resolved against the model registry on first use
        return kind
    if kind in _PYTHON_KINDS:
        return _PYTHON_KINDS[kind]
    if _is_model_class(kind) or _is_enum_class(kind):
        return kind  # type: ignore[no-any-return]
    if isinstance(kind, type) and issubclass(kind, _SCALAR_CUSTOM_KINDS):
        return kind
    raise SchemaError(
        f"Invalid custom type: {kind!r} must be a Model, an Enum, ObjectId or datetime"
    )


@dataclass(frozen=True)
class FieldType:
    """Declared type of one field: kind, array-ness and nullability."""

    kind: str | type
    is_array: bool = False
    is_nullable: bool = False

    @property
    def is_primitive(self) -> bool:
        return isinstance(self.kind, str) and self.kind in _PRIMITIVE_NAMES

    def resolve_kind(self) -> str | type:
        """The kind with model names replaced by their registered class."""
        if isinstance(self.kind, str) and not self.is_primitive:
            return lookup_model(self.kind)
        return self.kind

    @property
    def model_class(self) -> type | None:
        """The declared model class, or None for non-model kinds."""
        kind = self.resolve_kind()
        return kind if _is_model_class(kind) else None  # type: ignore[return-value]

    @property
    def enum_class(self) -> type[enum.Enum] | None:
        """The declared enum class, or None for non-enum kinds."""
        kind = self.resolve_kind()
        return kind if _is_enum_class(kind) else None  # type: ignore[return-value]

    def check(self, value: Any, field: str | None = None) -> bool:
        """Validate `value` against this type.

        Returns True on success.

        Raises:
            ValidationError: On a type mismatch, a null in a non-nullable
                field, or any array element that fails its element check.
        """
        if value is None:
            if self.is_nullable:
                return True
            raise ValidationError("field is not nullable", field)

        if self.is_array:
            if not isinstance(value, (list, tuple)):
                raise ValidationError("value is not array", field)
            for index, item in enumerate(value):
                self._check_element(item, f"{field}[{index}]" if field else f"[{index}]")
            return True

        self._check_element(value, field)
        return True

    def _check_element(self, value: Any, field: str | None) -> None:
        kind = self.resolve_kind()
        if kind == PrimitiveKind.ANY.value:
            return
        if isinstance(kind, str):
            if not _matches_primitive(kind, value):
                raise ValidationError(f"expected {kind}, got {type(value).__name__}", field)
            return
        if isinstance(value, kind):
            return
        if (
            isinstance(value, Reference)
            and _is_model_class(kind)
            and issubclass(value.model_type, kind)
        ):
            return
        raise ValidationError(f"expected {kind.__name__}, got {type(value).__name__}", field)

    def __repr__(self) -> str:
        kind = self.kind if isinstance(self.kind, str) else self.kind.__name__
        flags = "".join(
            suffix
            for flag, suffix in ((self.is_array, "[]"), (self.is_nullable, "?"))
            if flag
        )
        return f"FieldType({kind}{flags})"


class FieldTypeBuilder:
    """Fluent builder for a FieldType."""

    def __init__(self, kind: Any = PrimitiveKind.ANY.value) -> None:
        self._kind = normalize_kind(kind)
        self._is_array = False
        self._is_nullable = False

    def array(self) -> FieldTypeBuilder:
        """Declare the field as an ordered sequence of `kind`."""
        self._is_array = True
        return self

    def nullable(self) -> FieldTypeBuilder:
        """Allow None as the field's value."""
        self._is_nullable = True
        return self

    def build(self) -> FieldType:
        return FieldType(self._kind, is_array=self._is_array, is_nullable=self._is_nullable)


def field(kind: Any = PrimitiveKind.ANY.value) -> FieldTypeBuilder:
    """Entry point for field declarations.

    Args:
        kind: int, str, bool, float, "double", "any", a Model subclass or
              its name, an Enum subclass, ObjectId or datetime.
    """
    return FieldTypeBuilder(kind)


def compile_field_type(declaration: FieldType | FieldTypeBuilder, name: str) -> FieldType:
    """Compile one `declare_types()` entry into a FieldType."""
    if isinstance(declaration, FieldType):
        return declaration
    if isinstance(declaration, FieldTypeBuilder):
        return declaration.build()
    raise SchemaError(
        f"Field '{name}' must be declared with field(...), got {type(declaration).__name__}"
    )
