"""
Example 01: Entity Mapping

This example registers a Trade entity, builds its CRUD statements and decodes
raw result rows into Trade objects without touching a database.
"""

from row_map import FieldKind, ResultReader, StatementBuilder, column, entity, to_json
from row_map.core.exceptions import ColumnCountMismatchError
from dataclasses import dataclass
from datetime import datetime, timezone


@entity(
    "Trade",
    columns=[
        column("id", FieldKind.INT32),
        column("userId", FieldKind.INT32, attr="user_id"),
        column("instrumentId", FieldKind.INT32, attr="instrument_id"),
        column("side", FieldKind.TEXT),
        column("quantity", FieldKind.FLOAT),
        column("price", FieldKind.FLOAT),
        column("timestamp", FieldKind.TIMESTAMP),
    ],
)
@dataclass
class Trade:
    """A single FX trade"""
    id: int
    user_id: int
    instrument_id: int
    side: str
    quantity: float
    price: float
    timestamp: datetime


def main():
    trade = Trade(
        id=1,
        user_id=1,
        instrument_id=1,
        side="BUY",
        quantity=100000.0,
        price=1.0850,
        timestamp=datetime(2024, 1, 28, 12, 0, 0, tzinfo=timezone.utc),
    )
    statements = StatementBuilder(Trade)

    print("=== Statements ===\n")
    print(f"insert: {statements.build_insert()}")
    print(f"update: {statements.build_update()}")
    print(f"delete: {statements.build_delete()}")
    print(f"select: {statements.build_select_by_key()}\n")

    # Parameters line up with the placeholders; the key is bound last on update
    print(f"update params: {statements.update_params(trade)}\n")

    print("=== Decoding rows ===\n")
    columns = ["id", "userId", "instrumentId", "side", "quantity", "price", "timestamp"]
    rows = [
        ("1", "1", "1", "BUY", "100000", "1.0850", "2024-01-28 10:30:00"),
        ("2", "1", "2", "SELL", "50000", "1.2675", "2024-01-28 11:15:00"),
    ]
    reader = ResultReader(columns, rows)
    for decoded in reader.read_all(Trade):
        print(f"  - {to_json(decoded)}")
    print()

    # A result with the wrong shape is rejected before anything is written
    short = ResultReader(columns[:5], [row[:5] for row in rows])
    short.advance()
    try:
        short.decode_into(trade)
    except ColumnCountMismatchError as e:
        print(f"Rejected: {e}")
        print(f"Trade left as: side={trade.side}, price={trade.price}\n")


if __name__ == "__main__":
    main()
