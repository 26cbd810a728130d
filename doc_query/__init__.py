"""DocQuery - typed object-document mapping over a document store."""

from __future__ import annotations

from doc_query.aggregation import AggregationBuilder, accumulators, aggregation
from doc_query.core.connection import ConnectionConfig, ConnectionManager
from doc_query.core.enums import PrimitiveKind, StoreBackend
from doc_query.core.exceptions import (
    AdapterError,
    ConnectionError,  # noqa: A004
    DocQueryError,
    DuplicateFunctionError,
    FunctionNotFoundError,
    InvalidModelTypeError,
    MappingError,
    PersistenceError,
    ReferenceConstructionError,
    RegistryError,
    RepositoryConfigError,
    RepositoryError,
    SchemaError,
    StoreNotBoundError,
    StoreOperationError,
    UnknownModelError,
    ValidationError,
)
from doc_query.core.functions import FunctionRegistry
from doc_query.core.settings import Settings, configure_logging
from doc_query.mapping import FieldType, Model, ModelMapper, Reference, field
from doc_query.repository import Cursor, Repository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "Settings",
    "configure_logging",
    # Functions
    "FunctionRegistry",
    # Mapping
    "Model",
    "Reference",
    "FieldType",
    "field",
    "ModelMapper",
    # Repository
    "Repository",
    "Cursor",
    # Aggregation
    "AggregationBuilder",
    "aggregation",
    "accumulators",
    # Enums
    "StoreBackend",
    "PrimitiveKind",
    # Exceptions
    "DocQueryError",
    "MappingError",
    "ValidationError",
    "SchemaError",
    "ReferenceConstructionError",
    "UnknownModelError",
    "RepositoryError",
    "RepositoryConfigError",
    "InvalidModelTypeError",
    "PersistenceError",
    "AdapterError",
    "ConnectionError",
    "StoreOperationError",
    "StoreNotBoundError",
    "RegistryError",
    "FunctionNotFoundError",
    "DuplicateFunctionError",
]
