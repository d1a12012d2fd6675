"""Database adapter protocol.

Every adapter module MUST implement this protocol so the engine can treat
all backends identically.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_map.core.connection import ConnectionConfig


@runtime_checkable
class StoreAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'numeric_dollar' ($1), 'qmark' (?) or 'format' (%s)."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open one DB-API connection."""
        ...

    def close(self, connection: Any) -> None:
        """Close one connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...],
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...

    def error_code(self, error: BaseException) -> str | None:
        """Driver-specific error code of ``error``, if any."""
        ...
