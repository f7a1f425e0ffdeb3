from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Iterable

from tradelog.models import Trade


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS trades (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            trade_id INTEGER NOT NULL UNIQUE,
            trade_date TEXT NOT NULL,
            trade_time TEXT NOT NULL,
            side TEXT NOT NULL,
            instrument TEXT NOT NULL,
            result TEXT NOT NULL,
            risk_reward REAL NOT NULL,
            profit_loss REAL,
            raw_json TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            schema_version INTEGER NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        INSERT OR IGNORE INTO schema_version (id, schema_version, updated_at)
        VALUES (1, 1, CURRENT_TIMESTAMP)
        """
    )
    conn.commit()


def insert_trade(conn: sqlite3.Connection, trade: Trade) -> None:
    conn.execute(
        """
        INSERT INTO trades (
            trade_id, trade_date, trade_time, side, instrument, result,
            risk_reward, profit_loss, raw_json
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _row(trade),
    )
    conn.commit()


def insert_trades(conn: sqlite3.Connection, trades: Iterable[Trade]) -> int:
    """Insert trades in order, skipping ids that are already stored."""
    rows = [_row(trade) for trade in trades]
    if not rows:
        return 0
    before = conn.total_changes
    conn.executemany(
        """
        INSERT OR IGNORE INTO trades (
            trade_id, trade_date, trade_time, side, instrument, result,
            risk_reward, profit_loss, raw_json
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
    return conn.total_changes - before


def replace_trade(conn: sqlite3.Connection, trade: Trade) -> bool:
    cursor = conn.execute(
        """
        UPDATE trades SET
            trade_date = ?, trade_time = ?, side = ?, instrument = ?, result = ?,
            risk_reward = ?, profit_loss = ?, raw_json = ?
        WHERE trade_id = ?
        """,
        (
            trade.date,
            trade.time,
            trade.side,
            trade.instrument,
            trade.result,
            trade.risk_reward,
            trade.profit_loss,
            json.dumps(trade.to_payload(), sort_keys=True),
            trade.trade_id,
        ),
    )
    conn.commit()
    return cursor.rowcount > 0


def delete_trade(conn: sqlite3.Connection, trade_id: int) -> bool:
    cursor = conn.execute("DELETE FROM trades WHERE trade_id = ?", (trade_id,))
    conn.commit()
    return cursor.rowcount > 0


def _row(trade: Trade) -> tuple:
    return (
        trade.trade_id,
        trade.date,
        trade.time,
        trade.side,
        trade.instrument,
        trade.result,
        trade.risk_reward,
        trade.profit_loss,
        json.dumps(trade.to_payload(), sort_keys=True),
    )
