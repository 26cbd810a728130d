"""DocQuery exception hierarchy.

All exceptions are DocQuery-specific. Raw driver exceptions are never
exposed to callers: adapters wrap them in StoreOperationError.
"""

from __future__ import annotations

from typing import Any


class DocQueryError(Exception):
    """Base exception for all DocQuery errors."""


# --- Mapping ---


class MappingError(DocQueryError):
    """Base for schema, validation and reference errors."""


class ValidationError(MappingError, ValueError):
    """Raised when a value does not satisfy a field's declared type."""

    def __init__(self, detail: str, field: str | None = None) -> None:
        self.field = field
        self.detail = detail
        if field is None:
            super().__init__(f"Type error: {detail}")
        else:
            super().__init__(f"Type error on field '{field}': {detail}")


class SchemaError(MappingError, AttributeError):
    """Raised on access to, or declaration of, an invalid field name."""


class ReferenceConstructionError(MappingError):
    """Raised when a reference is built from an unsaved or collection-less model."""


class UnknownModelError(MappingError):
    """Raised when a `__model` tag names no registered model class."""

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"Unknown model: '{model_name}'")


# --- Repository ---


class RepositoryError(DocQueryError):
    """Base for repository errors."""


class RepositoryConfigError(RepositoryError):
    """Raised when a repository has no model type or collection."""


class InvalidModelTypeError(RepositoryError, TypeError):
    """Raised when a model of the wrong type is handed to a repository."""

    def __init__(self, expected: type, received: Any) -> None:
        self.expected = expected
        self.received = type(received)
        super().__init__(
            f"Invalid object provided, expected {expected.__name__}, "
            f"got {type(received).__name__}"
        )


class PersistenceError(RepositoryError):
    """Raised when a write to the store fails and cannot be recovered."""

    def __init__(self, collection: str, detail: str) -> None:
        self.collection = collection
        super().__init__(f"Write to '{collection}' failed: {detail}")


# --- Adapter ---


class AdapterError(DocQueryError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection and configuration failures."""


class StoreOperationError(AdapterError):
    """Raised when the backing store rejects an operation."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"Store operation '{operation}' failed: {detail}")


class StoreNotBoundError(AdapterError):
    """Raised when a reference must be resolved but no store is available."""


# --- Function registry ---


class RegistryError(DocQueryError):
    """Base for server-side function registry errors."""


class FunctionNotFoundError(RegistryError):
    """Raised when a named function cannot be found in the registry."""

    def __init__(self, function_name: str) -> None:
        self.function_name = function_name
        super().__init__(f"Function not found: '{function_name}'")


class DuplicateFunctionError(RegistryError):
    """Raised when two files resolve to the same function name."""

    def __init__(self, function_name: str, path_a: str, path_b: str) -> None:
        self.function_name = function_name
        super().__init__(f"Duplicate function name '{function_name}': {path_a} and {path_b}")
