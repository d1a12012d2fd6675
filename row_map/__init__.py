"""RowMap - metadata-driven entity mapping over parameterized SQL."""

from __future__ import annotations

import logging

from row_map.core.connection import ConnectionConfig
from row_map.core.engine import Engine, QueryResult, StoreClient
from row_map.core.enums import DatabaseBackend, FieldKind
from row_map.core.exceptions import (
    AdapterError,
    ColumnCountMismatchError,
    ConnectionSetupError,
    DecoderStateError,
    DuplicateRegistrationError,
    ExecutionError,
    InvalidPrimaryKeyError,
    MalformedScalarError,
    MappingError,
    NotFoundError,
    ParameterBindingError,
    PoolClosedError,
    PoolError,
    PoolTimeoutError,
    RegistryError,
    RowMapError,
    StoreError,
    StrictModeViolation,
    UnregisteredEntityError,
)
from row_map.core.metadata import ColumnDescriptor, EntityDescriptor, column
from row_map.core.pool import ConnectionPool
from row_map.core.registry import (
    EntityRegistry,
    default_registry,
    entity,
    lookup_entity,
    register_entity,
)
from row_map.mapping.reader import ResultReader
from row_map.mapping.record import from_json, from_record, load_records, to_json, to_record
from row_map.repository.base import Repository
from row_map.sql.builder import Statement, StatementBuilder

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Metadata
    "FieldKind",
    "ColumnDescriptor",
    "EntityDescriptor",
    "column",
    # Registry
    "EntityRegistry",
    "default_registry",
    "register_entity",
    "lookup_entity",
    "entity",
    # Mapping
    "ResultReader",
    "to_record",
    "from_record",
    "to_json",
    "from_json",
    "load_records",
    # Statements
    "StatementBuilder",
    "Statement",
    # Connection
    "ConnectionConfig",
    "ConnectionPool",
    "DatabaseBackend",
    # Engine
    "Engine",
    "QueryResult",
    "StoreClient",
    # Repository
    "Repository",
    # Exceptions
    "RowMapError",
    "RegistryError",
    "UnregisteredEntityError",
    "DuplicateRegistrationError",
    "InvalidPrimaryKeyError",
    "MappingError",
    "ColumnCountMismatchError",
    "MalformedScalarError",
    "StrictModeViolation",
    "DecoderStateError",
    "ExecutionError",
    "NotFoundError",
    "ParameterBindingError",
    "StoreError",
    "AdapterError",
    "ConnectionSetupError",
    "PoolError",
    "PoolTimeoutError",
    "PoolClosedError",
]
