"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
import uuid
from typing import Any

from row_map.core.connection import ConnectionConfig

_MEMORY = ":memory:"


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3.

    ``database=":memory:"`` opens one named shared-cache in-memory database
    per adapter, so every pooled connection sees the same tables. The
    database lives as long as one of its connections is open.
    """

    def __init__(self) -> None:
        self._memory_uri = f"file:row_map_{uuid.uuid4().hex}?mode=memory&cache=shared"

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        """Open a connection usable from any thread holding it."""
        if config.database == _MEMORY:
            return sqlite3.connect(
                self._memory_uri, uri=True, check_same_thread=False, **config.extra
            )
        conn = sqlite3.connect(config.database, check_same_thread=False, **config.extra)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def close(self, connection: sqlite3.Connection) -> None:
        connection.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...],
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params)

    def error_code(self, error: BaseException) -> str | None:
        return getattr(error, "sqlite_errorname", None)
