"""
Example 02: Repository Pattern

This example runs CRUD for users, instruments and trades through pooled
repositories on a SQLite database.
"""

from row_map import (
    ConnectionConfig,
    Engine,
    FieldKind,
    NotFoundError,
    Repository,
    StoreError,
    column,
    entity,
    load_records,
)
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from pydantic import BaseModel
import logging
import tempfile


@entity("users")
class User(BaseModel):
    """Platform user"""
    id: int
    username: str
    email: str
    role: str


@entity("fxinstruments")
@dataclass
class FXInstrument:
    """Tradable currency pair"""
    id: int
    symbol: str
    base_currency: str
    quote_currency: str
    tick_size: float


@entity(
    "trades",
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


class TradeRepository(Repository[Trade]):
    """Repository for Trade entities"""

    def __init__(self, engine: Engine):
        super().__init__(Trade, engine)

    def for_user(self, user_id: int) -> list[Trade]:
        """All trades placed by one user"""
        sql = f"{self.statements.build_select_all()} WHERE userId=$1"
        return self._reader(sql, [user_id]).read_all(Trade)


SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        username TEXT UNIQUE NOT NULL,
        email TEXT UNIQUE NOT NULL,
        role TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE fxinstruments (
        id INTEGER PRIMARY KEY,
        symbol TEXT UNIQUE NOT NULL,
        base_currency TEXT NOT NULL,
        quote_currency TEXT NOT NULL,
        tick_size REAL NOT NULL
    )
    """,
    """
    CREATE TABLE trades (
        id INTEGER PRIMARY KEY,
        userId INTEGER NOT NULL,
        instrumentId INTEGER NOT NULL,
        side TEXT NOT NULL CHECK (side IN ('BUY', 'SELL')),
        quantity REAL NOT NULL,
        price REAL NOT NULL,
        timestamp TEXT NOT NULL
    )
    """,
]

INSTRUMENTS = """[
  {"id": 1, "symbol": "EUR/USD", "base_currency": "EUR", "quote_currency": "USD", "tick_size": 0.0001},
  {"id": 2, "symbol": "GBP/USD", "base_currency": "GBP", "quote_currency": "USD", "tick_size": 0.0001},
  {"id": 3, "symbol": "USD/JPY", "base_currency": "USD", "quote_currency": "JPY", "tick_size": 0.01}
]"""


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")

    db_path = Path(tempfile.mkdtemp()) / "trading.db"
    config = ConnectionConfig(driver="sqlite", database=str(db_path), pool_size=3)

    with Engine.from_config(config) as engine:
        for ddl in SCHEMA:
            engine.execute(ddl)

        users = Repository(User, engine)
        instruments = Repository(FXInstrument, engine)
        trades = TradeRepository(engine)

        print("=== Repository Pattern ===\n")

        print("1. Seed users and instruments:")
        users.insert(User(id=1, username="trader1", email="trader1@example.com", role="trader"))
        users.insert(User(id=2, username="admin1", email="admin1@example.com", role="admin"))
        for instrument in load_records(FXInstrument, INSTRUMENTS):
            instruments.insert(instrument)
        print(f"   {len(users.get_all())} users, {len(instruments.get_all())} instruments\n")

        print("2. Place trades:")
        now = datetime(2024, 1, 28, 12, 0, 0, tzinfo=timezone.utc)
        trades.insert(Trade(1, 1, 1, "BUY", 100000.0, 1.0850, now))
        trades.insert(Trade(2, 1, 3, "SELL", 50000.0, 148.25, now))
        for t in trades.for_user(1):
            print(f"   - #{t.id} {t.side} {t.quantity:g} @ {t.price} ({t.timestamp:%Y-%m-%d %H:%M:%S})")
        print()

        print("3. Update trade #1:")
        trade = trades.get_by_id(1)
        trade.price = 1.0900
        trades.update(trade)
        print(f"   New price: {trades.get_by_id(1).price}\n")

        print("4. Remove trade #2:")
        trades.remove(trades.get_by_id(2))
        try:
            trades.get_by_id(2)
        except NotFoundError as e:
            print(f"   {e}\n")

        print("5. Store errors are reported, not hidden:")
        try:
            trades.insert(Trade(3, 1, 1, "HOLD", 1.0, 1.0, now))
        except StoreError as e:
            print(f"   {e}\n")

        print(f"Pool: {engine.pool.available} of {engine.pool.capacity} connections idle")


if __name__ == "__main__":
    main()
