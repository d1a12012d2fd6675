"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_map.core.connection import ConnectionConfig


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python."""

    @property
    def paramstyle(self) -> str:
        return "format"

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            **config.extra,
        )

    def close(self, connection: Any) -> None:
        connection.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...],
    ) -> Any:
        """Execute SQL and return a buffered cursor."""
        cursor = connection.cursor(buffered=True)
        cursor.execute(sql, params or None)
        return cursor

    def error_code(self, error: BaseException) -> str | None:
        errno = getattr(error, "errno", None)
        return str(errno) if errno is not None else None
