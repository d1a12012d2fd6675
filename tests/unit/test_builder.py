"""Unit tests for StatementBuilder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from row_map.core.enums import FieldKind
from row_map.core.exceptions import MappingError, UnregisteredEntityError
from row_map.core.metadata import column
from row_map.core.params import placeholder_indexes
from row_map.core.registry import EntityRegistry
from row_map.sql.builder import Statement, StatementBuilder


@dataclass
class Trade:
    id: int
    user_id: int
    instrument_id: int
    side: str
    quantity: float
    price: float
    timestamp: datetime


@dataclass
class Tag:
    id: int


TRADE_COLUMNS = [
    column("id", FieldKind.INT32),
    column("userId", FieldKind.INT32, attr="user_id"),
    column("instrumentId", FieldKind.INT32, attr="instrument_id"),
    column("side", FieldKind.TEXT),
    column("quantity", FieldKind.FLOAT),
    column("price", FieldKind.FLOAT),
    column("timestamp", FieldKind.TIMESTAMP),
]


@pytest.fixture
def builder(registry: EntityRegistry) -> StatementBuilder[Trade]:
    registry.register(Trade, "Trade", "id", TRADE_COLUMNS)
    return StatementBuilder(Trade, registry)


@pytest.fixture
def trade() -> Trade:
    return Trade(
        id=1,
        user_id=1,
        instrument_id=1,
        side="BUY",
        quantity=100000.0,
        price=1.085,
        timestamp=datetime(2024, 1, 28, 12, 0, 0, tzinfo=timezone.utc),
    )


class TestSqlText:
    def test_insert(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.build_insert() == (
            "INSERT INTO Trade (id, userId, instrumentId, side, quantity, price, timestamp) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7)"
        )

    def test_update(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.build_update() == (
            "UPDATE Trade SET userId=$1, instrumentId=$2, side=$3, quantity=$4, "
            "price=$5, timestamp=$6 WHERE id=$7"
        )

    def test_delete(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.build_delete() == "DELETE FROM Trade WHERE id=$1"

    def test_select_by_key(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.build_select_by_key() == "SELECT * FROM Trade WHERE id=$1"

    def test_select_all(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.build_select_all() == "SELECT * FROM Trade"

    def test_accepts_descriptor(self, registry: EntityRegistry) -> None:
        descriptor = registry.register(Trade, "trades", "id", TRADE_COLUMNS)
        assert StatementBuilder(descriptor).build_delete() == "DELETE FROM trades WHERE id=$1"

    def test_unregistered_entity(self, registry: EntityRegistry) -> None:
        with pytest.raises(UnregisteredEntityError):
            StatementBuilder(Trade, registry)

    def test_update_without_value_columns(self, registry: EntityRegistry) -> None:
        registry.register(Tag, "tags", "id", [column("id", FieldKind.INT32)])
        with pytest.raises(MappingError, match="no non-key columns"):
            StatementBuilder(Tag, registry).build_update()

    def test_key_not_first_column(self, registry: EntityRegistry) -> None:
        cols = [column("symbol", FieldKind.TEXT, attr="side"), column("id", FieldKind.INT32)]
        registry.register(Trade, "quotes", "id", cols)
        b = StatementBuilder(Trade, registry)
        assert b.build_update() == "UPDATE quotes SET symbol=$1 WHERE id=$2"


class TestParams:
    def test_insert_params(self, builder: StatementBuilder[Trade], trade: Trade) -> None:
        assert builder.insert_params(trade) == [1, 1, 1, "BUY", 100000.0, 1.085, "2024-01-28 12:00:00"]

    def test_update_params_key_last(self, builder: StatementBuilder[Trade], trade: Trade) -> None:
        assert builder.update_params(trade) == [1, 1, "BUY", 100000.0, 1.085, "2024-01-28 12:00:00", 1]

    def test_delete_params(self, builder: StatementBuilder[Trade], trade: Trade) -> None:
        trade.id = 9
        assert builder.delete_params(trade) == [9]

    def test_key_params_encodes(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.key_params("12") == [12]


class TestPlaceholderAgreement:
    @pytest.mark.parametrize("method", ["insert", "update", "delete"])
    def test_placeholder_count_matches_params(
        self, builder: StatementBuilder[Trade], trade: Trade, method: str
    ) -> None:
        statement: Statement = getattr(builder, method)(trade)
        indexes = placeholder_indexes(statement.sql)
        assert sorted(indexes) == list(range(1, len(statement.params) + 1))

    def test_update_where_binds_last_param(
        self, builder: StatementBuilder[Trade], trade: Trade
    ) -> None:
        sql, params = builder.update(trade)
        where_index = placeholder_indexes(sql.split("WHERE", 1)[1])[0]
        assert where_index == len(params)
        assert params[where_index - 1] == trade.id

    def test_select_statements(self, builder: StatementBuilder[Trade]) -> None:
        assert builder.select_by_key(3) == Statement("SELECT * FROM Trade WHERE id=$1", [3])
        assert builder.select_all().params == []
