"""SQLite record store for TradeJournal."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from tradejournal.errors import StorageError
from tradejournal.models import Trade

logger = logging.getLogger(__name__)

TRADE_COLUMNS = [
    "id",
    "asset_type",
    "symbol",
    "direction",
    "status",
    "position_size",
    "entry_price",
    "entry_date",
    "exit_price",
    "exit_date",
    "commission",
    "stop_loss",
    "take_profit",
    "account_size",
    "strategy",
    "emotional_state",
    "market_conditions",
    "rationale",
    "lessons_learned",
    "tags",
    "rating",
    "profit_loss",
    "profit_loss_percent",
    "risk_amount",
    "reward_amount",
    "risk_reward_ratio",
    "risk_percent",
    "created_at",
    "updated_at",
]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class TradeStore:
    """SQLite-backed trade collection.

    The store only loads and saves whole collections; it does not validate
    trades or compute their derived fields.
    """

    REQUIRED_TABLES = ["trades"]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    asset_type TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    direction TEXT NOT NULL,
                    status TEXT NOT NULL,
                    position_size REAL NOT NULL,
                    entry_price REAL NOT NULL,
                    entry_date TEXT NOT NULL,
                    exit_price REAL,
                    exit_date TEXT,
                    commission REAL,
                    stop_loss REAL,
                    take_profit REAL,
                    account_size REAL,
                    strategy TEXT,
                    emotional_state TEXT,
                    market_conditions TEXT,
                    rationale TEXT NOT NULL DEFAULT '',
                    lessons_learned TEXT NOT NULL DEFAULT '',
                    tags TEXT NOT NULL DEFAULT '[]',
                    rating INTEGER,
                    profit_loss REAL NOT NULL DEFAULT 0,
                    profit_loss_percent REAL NOT NULL DEFAULT 0,
                    risk_amount REAL NOT NULL DEFAULT 0,
                    reward_amount REAL NOT NULL DEFAULT 0,
                    risk_reward_ratio REAL NOT NULL DEFAULT 0,
                    risk_percent REAL NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize {self.db_path}: {e}") from e
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    @staticmethod
    def _to_row(trade: Trade) -> tuple:
        return (
            trade.id,
            trade.asset_type.value,
            trade.symbol,
            trade.direction.value,
            trade.status.value,
            trade.position_size,
            trade.entry_price,
            _iso(trade.entry_date),
            trade.exit_price,
            _iso(trade.exit_date),
            trade.commission,
            trade.stop_loss,
            trade.take_profit,
            trade.account_size,
            trade.strategy,
            trade.emotional_state,
            trade.market_conditions,
            trade.rationale,
            trade.lessons_learned,
            json.dumps(trade.tags),
            trade.rating,
            trade.profit_loss,
            trade.profit_loss_percent,
            trade.risk_amount,
            trade.reward_amount,
            trade.risk_reward_ratio,
            trade.risk_percent,
            _iso(trade.created_at),
            _iso(trade.updated_at),
        )

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Trade:
        data = {column: row[column] for column in TRADE_COLUMNS}
        data["tags"] = json.loads(row["tags"] or "[]")
        for column in ("entry_date", "exit_date", "created_at", "updated_at"):
            data[column] = _from_iso(row[column])
        return Trade.model_validate(data)

    def load(self) -> list[Trade]:
        """Load every trade, ordered by entry date.

        Raises:
            StorageError: If the database cannot be read.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(TRADE_COLUMNS)} FROM trades ORDER BY entry_date, id"
            )
            trades = [self._from_row(row) for row in cursor.fetchall()]
            logger.debug("Loaded %d trades from %s", len(trades), self.db_path)
            return trades
        except sqlite3.Error as e:
            raise StorageError(f"Could not load trades: {e}") from e
        finally:
            conn.close()

    def save(self, trades: list[Trade]) -> None:
        """Replace the stored collection with ``trades``.

        The write happens in a single transaction: either every trade is
        stored or the previous collection is left untouched.

        Raises:
            StorageError: If the write fails.
        """
        placeholders = ", ".join("?" for _ in TRADE_COLUMNS)
        conn = self._get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM trades")
                conn.executemany(
                    f"INSERT INTO trades ({', '.join(TRADE_COLUMNS)}) VALUES ({placeholders})",
                    [self._to_row(trade) for trade in trades],
                )
            logger.info("Saved %d trades to %s", len(trades), self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not save trades: {e}") from e
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM trades")
            return cursor.fetchone()["count"]
        finally:
            conn.close()

    def clear(self) -> None:
        """Delete every stored trade."""
        self.save([])
