"""Model base class.

A model declares its fields once per class through `declare_types()`.
The returned declarations are compiled into a read-only schema the first
time the class is used and cached on the class; every instance validates
assignments against that schema.

    class Post(Model):
        __collection__ = "posts"

        @classmethod
        def declare_types(cls):
            return {
                "title": field(str),
                "tags": field(str).array(),
                "author": field("User"),
                "status": field(Status),
            }
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar

from bson import ObjectId

from doc_query.core.exceptions import SchemaError
from doc_query.mapping.codec import classify, decode, encode
from doc_query.mapping.reference import (
    COLLECTION_KEY,
    ID_KEY,
    MODEL_KEY,
    REF_KEY,
    Reference,
)
from doc_query.mapping.registry import register_model
from doc_query.mapping.types import FieldType, FieldTypeBuilder, compile_field_type

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Model")

_RESERVED_KEYS = frozenset({ID_KEY, MODEL_KEY, REF_KEY, COLLECTION_KEY})

# Names a Reference answers itself instead of proxying to its target
_REFERENCE_NAMES = frozenset(name for name in dir(Reference) if not name.startswith("_"))


def _detach(value: Any) -> Any:
    return list(value) if isinstance(value, list) else value


def coerce_id(raw: Any) -> Any:
    """Convert a 24-hex string id to ObjectId; anything else passes through.

    A document stored with a hex string `_id` therefore loads with an
    ObjectId `_id`, and saving it again upserts under the ObjectId, not
    under the original string.
    """
    if isinstance(raw, str) and ObjectId.is_valid(raw):
        return ObjectId(raw)
    return raw


class Model(ABC):
    """Abstract typed document entity.

    Class attributes:
        __collection__: Backing collection, or None for embed-only models.
        __model_name__: Wire tag written as `__model`. Defaults to the
            class name.
    """

    __collection__: ClassVar[str | None] = None
    __model_name__: ClassVar[str] = "Model"

    __slots__ = ("_values",)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__model_name__" not in cls.__dict__:
            cls.__model_name__ = cls.__name__
        register_model(cls)

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_values", {})
        type(self).schema()
        self.init()
        for name, value in values.items():
            setattr(self, name, value)

    # --- Schema ---

    @classmethod
    @abstractmethod
    def declare_types(cls) -> Mapping[str, FieldType | FieldTypeBuilder]:
        """Return the field declarations of this model.

        Called once per class. `_id` is implicit and must not be declared.
        """

    @classmethod
    def schema(cls) -> Mapping[str, FieldType]:
        """The compiled, read-only schema of this class."""
        cached: Mapping[str, FieldType] | None = cls.__dict__.get("_schema_cache")
        if cached is not None:
            return cached

        fields: dict[str, FieldType] = {ID_KEY: FieldType(ObjectId, is_nullable=True)}
        for name, declaration in cls.declare_types().items():
            cls._validate_field_name(name)
            fields[name] = compile_field_type(declaration, name)

        schema = MappingProxyType(fields)
        cls._schema_cache = schema  # type: ignore[attr-defined]
        logger.debug("Registered schema for %s: %s", cls.__name__, list(fields))
        return schema

    @classmethod
    def _validate_field_name(cls, name: str) -> None:
        if name in _RESERVED_KEYS:
            raise SchemaError(f"Field name '{name}' is reserved")
        if not name or name.startswith("_"):
            raise SchemaError(f"Invalid field name '{name}' in {cls.__name__}")
        if hasattr(cls, name):
            raise SchemaError(
                f"Field '{name}' in {cls.__name__} shadows a Model attribute"
            )
        if name in _REFERENCE_NAMES:
            raise SchemaError(
                f"Field '{name}' in {cls.__name__} shadows a Reference attribute"
            )

    def init(self) -> None:
        """Hook run once per instance, before any value is assigned."""

    # --- Field access ---

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_values":
            raise AttributeError(name)
        if name not in type(self).schema():
            raise SchemaError(
                f"Cannot get field {name} in {type(self).__name__}: field does not exist"
            )
        return _detach(self._values.get(name))

    def __setattr__(self, name: str, value: Any) -> None:
        field_type = type(self).schema().get(name)
        if field_type is None:
            raise SchemaError(
                f"Cannot set field {name} in {type(self).__name__}: field does not exist"
            )
        field_type.check(value, name)
        self._values[name] = list(value) if field_type.is_array and value is not None else value

    def __delattr__(self, name: str) -> None:
        if name not in type(self).schema():
            raise SchemaError(
                f"Cannot unset field {name} in {type(self).__name__}: field does not exist"
            )
        self._values.pop(name, None)

    def values(self) -> dict[str, Any]:
        """Copy of the fields that are currently set."""
        return {name: _detach(value) for name, value in self._values.items()}

    def __getstate__(self) -> dict[str, Any]:
        return self._values

    def __setstate__(self, state: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_values", dict(state))

    @property
    def is_persisted(self) -> bool:
        return self._values.get(ID_KEY) is not None

    # --- Wire format ---

    @classmethod
    def from_document(cls: type[M], document: Mapping[str, Any], store: Any | None = None) -> M:
        """Reconstruct a model from a raw document.

        Keys missing from the schema are ignored; declared fields missing
        from the document stay unset. `store` is bound to every reference
        found along the way.
        """
        instance = cls()
        schema = cls.schema()
        for key, raw in document.items():
            field_type = schema.get(key)
            if field_type is None:
                continue
            if key == ID_KEY:
                raw = coerce_id(raw)
            setattr(instance, key, decode(classify(raw, field_type), field_type, store, key))
        return instance

    def document(self) -> dict[str, Any]:
        """Serialize to a raw document.

        An entity with no values serializes to `{}`; otherwise the document
        carries its `__model` tag so embedded values decode to the same type.
        """
        if not self._values:
            return {}
        document: dict[str, Any] = {MODEL_KEY: type(self).__model_name__}
        for name, value in self._values.items():
            document[name] = encode(value)
        return document

    def reference(self, store: Any | None = None) -> Reference:
        """Build a Reference to this (persisted) model."""
        return Reference.from_model(self, store)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return type(self) is type(other) and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({fields})"
