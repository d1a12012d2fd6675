"""Connection configuration and adapter loading.

ConnectionConfig is a Pydantic model for type-safe connection config.
Adapters are resolved lazily by driver name so that only the selected
driver's library has to be installed.
"""

from __future__ import annotations

import importlib
from typing import Any

from pydantic import BaseModel, Field

from row_map.core.enums import DatabaseBackend
from row_map.core.exceptions import AdapterError


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = Field(default=5, ge=1)
    # Seconds a borrower waits for a free connection; None waits forever.
    pool_timeout: float | None = 30
    extra: dict[str, Any] = {}

    @property
    def backend(self) -> DatabaseBackend:
        try:
            return DatabaseBackend(self.driver.lower())
        except ValueError:
            raise AdapterError(f"Unsupported database driver: {self.driver}") from None


# Adapter module mapping: backend → (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_map.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_map.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("row_map.adapters.mysql", "MysqlAdapter"),
}


def load_adapter(config: ConnectionConfig) -> Any:
    """Instantiate the adapter for ``config.driver``."""
    module_path, cls_name = _ADAPTER_MAP[config.backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{config.driver}': {e}") from e
