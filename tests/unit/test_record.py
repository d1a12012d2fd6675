"""Unit tests for the record (JSON) boundary."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from row_map.core.enums import FieldKind
from row_map.core.exceptions import MalformedScalarError, MappingError
from row_map.core.metadata import column
from row_map.core.registry import EntityRegistry
from row_map.mapping.record import from_json, from_record, load_records, to_json, to_record


@dataclass
class Instrument:
    id: int
    symbol: str
    base_currency: str
    quote_currency: str
    tick_size: float


@dataclass
class User:
    id: int
    username: str
    created_at: datetime


@pytest.fixture
def records(registry: EntityRegistry) -> EntityRegistry:
    registry.register(
        Instrument,
        "fxinstruments",
        "id",
        [
            column("id", FieldKind.INT32),
            column("symbol", FieldKind.TEXT),
            column("base_currency", FieldKind.TEXT),
            column("quote_currency", FieldKind.TEXT),
            column("tick_size", FieldKind.FLOAT),
        ],
    )
    registry.register(User, "users", "id")
    return registry


class TestToRecord:
    def test_descriptor_order(self, records: EntityRegistry) -> None:
        eurusd = Instrument(1, "EUR/USD", "EUR", "USD", 0.0001)
        record = to_record(eurusd, records)
        assert list(record) == ["id", "symbol", "base_currency", "quote_currency", "tick_size"]
        assert record["tick_size"] == 0.0001

    def test_timestamp_as_text(self, records: EntityRegistry) -> None:
        user = User(1, "trader1", datetime(2024, 1, 28, 9, 0, 0, 500, tzinfo=timezone.utc))
        assert to_record(user, records)["created_at"] == "2024-01-28 09:00:00"


class TestFromRecord:
    def test_missing_keys_take_zero_value(self, records: EntityRegistry) -> None:
        user = from_record(User, {"id": 3}, records)
        assert user.username == ""
        assert user.created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_unknown_keys_ignored(self, records: EntityRegistry) -> None:
        user = from_record(User, {"id": 3, "username": "x", "role": "admin"}, records)
        assert user.username == "x"

    def test_malformed_value_names_column(self, records: EntityRegistry) -> None:
        with pytest.raises(MalformedScalarError, match="created_at"):
            from_record(User, {"id": 1, "created_at": "yesterday"}, records)


class TestJson:
    def test_round_trip_at_second_granularity(self, records: EntityRegistry) -> None:
        user = User(7, "admin1", datetime(2024, 1, 28, 17, 20, 0, 123456, tzinfo=timezone.utc))
        restored = from_json(User, to_json(user, records), records)
        assert restored.id == 7
        assert restored.username == "admin1"
        assert restored.created_at == user.created_at.replace(microsecond=0)

    def test_entity_round_trip(self, records: EntityRegistry) -> None:
        user = User(7, "admin1", datetime(2024, 1, 28, 12, 0, 0, tzinfo=timezone.utc))
        assert from_record(User, to_record(user, records), records) == user
        assert from_json(User, to_json(user, records), records) == user

    def test_round_trip_converts_to_utc(self, records: EntityRegistry) -> None:
        cet = timezone(timedelta(hours=1))
        user = User(8, "trader1", datetime(2024, 1, 28, 13, 0, 0, tzinfo=cet))
        restored = from_record(User, to_record(user, records), records)
        assert restored == user
        assert restored.created_at.tzinfo is timezone.utc

    def test_naive_timestamp_rejected(self, records: EntityRegistry) -> None:
        user = User(9, "trader2", datetime(2024, 1, 28, 12, 0, 0))
        with pytest.raises(MalformedScalarError):
            to_record(user, records)

    def test_to_json_passes_kwargs(self, records: EntityRegistry) -> None:
        text = to_json(Instrument(2, "GBP/USD", "GBP", "USD", 0.0001), records, indent=2)
        assert "\n" in text
        assert json.loads(text)["symbol"] == "GBP/USD"

    def test_from_json_requires_object(self, records: EntityRegistry) -> None:
        with pytest.raises(MappingError, match="object"):
            from_json(User, "[1, 2]", records)

    def test_load_records_from_fixture(self, records: EntityRegistry, write_fixture) -> None:
        path = write_fixture(
            "instruments.json",
            json.dumps(
                [
                    {"id": 1, "symbol": "EUR/USD", "base_currency": "EUR", "quote_currency": "USD", "tick_size": 0.0001},
                    {"id": 3, "symbol": "USD/JPY", "base_currency": "USD", "quote_currency": "JPY", "tick_size": 0.01},
                ]
            ),
        )
        instruments = load_records(Instrument, path.read_text(encoding="utf-8"), records)
        assert [i.symbol for i in instruments] == ["EUR/USD", "USD/JPY"]
        assert instruments[1].tick_size == 0.01

    def test_load_records_requires_array(self, records: EntityRegistry) -> None:
        with pytest.raises(MappingError, match="array"):
            load_records(Instrument, '{"id": 1}', records)
