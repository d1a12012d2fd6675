"""Field kind and database backend enumerations."""

from __future__ import annotations

from enum import Enum


class FieldKind(Enum):
    """Native type of a mapped entity field."""

    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    TEXT = "text"
    TIMESTAMP = "timestamp"

    @property
    def is_integer(self) -> bool:
        return self in (FieldKind.INT32, FieldKind.INT64)


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
