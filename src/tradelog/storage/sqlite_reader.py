from __future__ import annotations

import sqlite3

from tradelog.models import Trade


def load_trades(conn: sqlite3.Connection) -> list[Trade]:
    rows = conn.execute("SELECT * FROM trades ORDER BY seq").fetchall()
    return [_trade_from_row(row) for row in rows]


def get_trade(conn: sqlite3.Connection, trade_id: int) -> Trade | None:
    row = conn.execute("SELECT * FROM trades WHERE trade_id = ?", (trade_id,)).fetchone()
    if row is None:
        return None
    return _trade_from_row(row)


def trade_ids(conn: sqlite3.Connection) -> list[int]:
    return [row["trade_id"] for row in conn.execute("SELECT trade_id FROM trades ORDER BY seq")]


def _trade_from_row(row: sqlite3.Row) -> Trade:
    return Trade(
        trade_id=row["trade_id"],
        date=row["trade_date"],
        time=row["trade_time"],
        side=row["side"],
        instrument=row["instrument"],
        result=row["result"],
        risk_reward=row["risk_reward"],
        profit_loss=row["profit_loss"],
    )
