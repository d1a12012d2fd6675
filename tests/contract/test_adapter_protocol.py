"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import sqlite3

import pytest

from row_map.adapters.protocol import StoreAdapter
from row_map.adapters.sqlite import SqliteAdapter
from row_map.core.connection import ConnectionConfig, load_adapter
from row_map.core.params import bind_params


@pytest.fixture
def memory_config() -> ConnectionConfig:
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


class TestSqliteAdapterProtocol:
    def test_implements_protocol(self) -> None:
        assert isinstance(SqliteAdapter(), StoreAdapter)

    def test_paramstyle(self) -> None:
        assert SqliteAdapter().paramstyle == "qmark"

    def test_loaded_by_driver_name(self, memory_config: ConnectionConfig) -> None:
        assert isinstance(load_adapter(memory_config), SqliteAdapter)

    def test_lifecycle(self, memory_config: ConnectionConfig) -> None:
        adapter = SqliteAdapter()
        conn = adapter.connect(memory_config)

        sql, params = bind_params("SELECT $1 AS val, $2 AS label", [1, "x"], adapter.paramstyle)
        cursor = adapter.execute(conn, sql, params)
        assert [d[0] for d in cursor.description] == ["val", "label"]
        assert cursor.fetchall() == [(1, "x")]

        adapter.close(conn)

    def test_error_code(self, memory_config: ConnectionConfig) -> None:
        adapter = SqliteAdapter()
        conn = adapter.connect(memory_config)
        try:
            with pytest.raises(sqlite3.OperationalError) as exc_info:
                adapter.execute(conn, "SELECT * FROM missing", ())
            assert adapter.error_code(exc_info.value) == "SQLITE_ERROR"
        finally:
            adapter.close(conn)

    def test_error_code_for_foreign_exception(self) -> None:
        assert SqliteAdapter().error_code(ValueError("nope")) is None


class TestOptionalAdapters:
    def test_postgresql_protocol(self) -> None:
        pytest.importorskip("psycopg")
        from row_map.adapters.postgresql import PostgresqlAdapter

        adapter = PostgresqlAdapter()
        assert isinstance(adapter, StoreAdapter)
        assert adapter.paramstyle == "format"

    def test_mysql_protocol(self) -> None:
        pytest.importorskip("mysql.connector")
        from row_map.adapters.mysql import MysqlAdapter

        adapter = MysqlAdapter()
        assert isinstance(adapter, StoreAdapter)
        assert adapter.paramstyle == "format"
