"""Statement execution engine.

The Engine is the data-store client: it runs one parameterized statement
per call on one pooled connection, commits, and hands back either the
result rows or the affected-row count. Driver failures surface as
StoreError and are never retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from row_map.core.connection import ConnectionConfig, load_adapter
from row_map.core.exceptions import StoreError
from row_map.core.params import bind_params
from row_map.core.pool import ConnectionPool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Column names and rows returned by a query, in store order."""

    columns: tuple[str, ...]
    rows: list[tuple[Any, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


@runtime_checkable
class StoreClient(Protocol):
    """What the repository needs from a data store."""

    def execute_query(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        """Run a query and return its columns and rows."""
        ...

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """Run a write statement and return the affected row count."""
        ...


def _fetch_result(cursor: Any) -> QueryResult:
    """Convert cursor results to a QueryResult.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return QueryResult(columns=())
    columns = tuple(desc[0] for desc in cursor.description)
    rows = cursor.fetchall()
    if rows and isinstance(rows[0], dict):
        return QueryResult(columns, [tuple(row[c] for c in columns) for row in rows])
    return QueryResult(columns, [tuple(row) for row in rows])


class Engine:
    """Synchronous statement execution engine.

    Args:
        pool: Pool the engine borrows one connection from per call.
        adapter: Backend adapter matching the pool's connections.
    """

    def __init__(self, pool: ConnectionPool, adapter: Any) -> None:
        self._pool = pool
        self._adapter = adapter
        self._paramstyle: str = adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine and its connection pool from a ConnectionConfig.

        Raises:
            ConnectionSetupError: If the pool cannot open its connections.
        """
        adapter = load_adapter(config)
        pool = ConnectionPool(
            lambda: adapter.connect(config),
            config.pool_size,
            close=adapter.close,
            timeout=config.pool_timeout,
        )
        return cls(pool, adapter)

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    @property
    def adapter(self) -> Any:
        return self._adapter

    def execute_query(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        """Run a query and return all of its rows."""
        return self._run(sql, params, _fetch_result)  # type: ignore[no-any-return]

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """Run a write statement. Returns affected row count."""
        return self._run(sql, params, lambda cursor: int(cursor.rowcount))  # type: ignore[no-any-return]

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._pool.close()

    def _run(self, sql: str, params: Sequence[Any] | None, collect: Any) -> Any:
        driver_sql, values = bind_params(sql, params, self._paramstyle)
        logger.debug("Executing %s with %d parameters", sql, len(values))

        with self._pool.connection() as conn:
            try:
                cursor = self._adapter.execute(conn, driver_sql, values)
                result = collect(cursor)
                conn.commit()
            except Exception as e:
                self._rollback(conn)
                code = self._adapter.error_code(e)
                logger.warning("Statement failed (%s): %s", code or type(e).__name__, e)
                raise StoreError(code, str(e)) from e
        return result

    def _rollback(self, conn: Any) -> None:
        try:
            conn.rollback()
        except Exception:
            logger.warning("Rollback failed", exc_info=True)

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
