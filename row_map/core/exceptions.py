"""RowMap exception hierarchy.

All exceptions are RowMap-specific. Raw driver exceptions are never
exposed to callers; they are chained onto StoreError.
"""

from __future__ import annotations

from typing import Any


class RowMapError(Exception):
    """Base exception for all RowMap errors."""


def _type_name(entity_type: Any) -> str:
    return getattr(entity_type, "__qualname__", repr(entity_type))


# --- Registry ---


class RegistryError(RowMapError):
    """Base for entity metadata registry errors."""


class UnregisteredEntityError(RegistryError):
    """Raised when an entity type has no registered metadata."""

    def __init__(self, entity_type: Any) -> None:
        self.entity_type = entity_type
        super().__init__(f"Entity type not registered: {_type_name(entity_type)}")


class DuplicateRegistrationError(RegistryError):
    """Raised when an entity type is registered twice."""

    def __init__(self, entity_type: Any) -> None:
        self.entity_type = entity_type
        super().__init__(f"Entity type already registered: {_type_name(entity_type)}")


class InvalidPrimaryKeyError(RegistryError):
    """Raised when the primary key does not name exactly one column."""

    def __init__(self, entity_type: Any, primary_key: str, columns: list[str]) -> None:
        self.entity_type = entity_type
        self.primary_key = primary_key
        super().__init__(
            f"Primary key '{primary_key}' of {_type_name(entity_type)} must match "
            f"exactly one column, got columns {columns}"
        )


# --- Mapping ---


class MappingError(RowMapError):
    """Base for mapping and decoding errors."""


class ColumnCountMismatchError(MappingError):
    """Raised when a result's column count differs from the entity metadata."""

    def __init__(self, entity_type: Any, expected: int, actual: int) -> None:
        self.entity_type = entity_type
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cannot decode {_type_name(entity_type)}: expected {expected} columns, "
            f"result has {actual}"
        )


class MalformedScalarError(MappingError):
    """Raised when a scalar cannot be decoded into its field kind."""

    def __init__(self, kind: Any, value: Any, column: str | None = None) -> None:
        self.kind = kind
        self.value = value
        self.column = column
        where = f" for column '{column}'" if column else ""
        super().__init__(f"Malformed {getattr(kind, 'value', kind)} scalar{where}: {value!r}")


class StrictModeViolation(MappingError):
    """Raised in strict mode when result column names differ from the metadata."""


class DecoderStateError(MappingError):
    """Raised when the result reader is used in the wrong state."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} reader in state '{current_state}'")


# --- Execution ---


class ExecutionError(RowMapError):
    """Base for statement execution errors."""


class NotFoundError(ExecutionError):
    """Raised when a lookup by primary key returns no row."""

    def __init__(self, entity_type: Any, key: Any) -> None:
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{_type_name(entity_type)} with key {key!r} not found")


class ParameterBindingError(ExecutionError):
    """Raised when statement placeholders and parameters disagree."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Parameter binding error for '{sql}': {detail}")


class StoreError(ExecutionError):
    """Opaque failure reported by the data store or its driver."""

    def __init__(self, code: str | None, message: str) -> None:
        self.code = code
        self.message = message
        prefix = f"[{code}] " if code else ""
        super().__init__(f"{prefix}{message}")


# --- Adapter ---


class AdapterError(RowMapError):
    """Base for adapter errors."""


class ConnectionSetupError(AdapterError):
    """Raised when a connection pool cannot open all of its connections."""


class PoolError(AdapterError):
    """Raised on connection pool misuse."""


class PoolTimeoutError(PoolError):
    """Raised when no connection became available within the timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No connection available after {timeout}s")


class PoolClosedError(PoolError):
    """Raised when borrowing from a closed pool."""
