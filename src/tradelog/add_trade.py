from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from tradelog.config.app_config import load_app_config
from tradelog.entries import build_trade, next_trade_id
from tradelog.storage.sqlite_reader import get_trade, trade_ids
from tradelog.storage.sqlite_store import connect, init_db, insert_trade, replace_trade


def main(argv: list[str] | None = None) -> int:
    app_config = load_app_config()
    journal = app_config.journal
    parser = argparse.ArgumentParser(description="Add a trade to the journal, or replace an existing one.")
    parser.add_argument("--db", type=Path, default=app_config.app.db_path, help="SQLite DB path.")
    parser.add_argument("--date", required=True, help="Trade date (YYYY-MM-DD).")
    parser.add_argument("--time", required=True, help="Entry time (HH:MM, 24-hour).")
    parser.add_argument("--side", choices=("long", "short"), default="long")
    parser.add_argument("--instrument", default=journal.default_instrument)
    parser.add_argument("--result", choices=("win", "loss"), default="win")
    parser.add_argument("--rr", dest="risk_reward", required=True, help="Realized risk/reward multiple.")
    parser.add_argument("--pnl", dest="profit_loss", required=True, help="Realized profit/loss.")
    parser.add_argument(
        "--replace",
        type=int,
        default=None,
        metavar="TRADE_ID",
        help="Replace the trade with this id instead of adding a new one.",
    )
    parser.add_argument(
        "--policy",
        default=journal.normalization,
        help="Normalization policy (raw or signed).",
    )
    args = parser.parse_args(argv)

    form = {
        "date": args.date,
        "time": args.time,
        "side": args.side,
        "instrument": args.instrument,
        "result": args.result,
        "riskReward": args.risk_reward,
        "profitLoss": args.profit_loss,
    }

    conn = connect(args.db)
    init_db(conn)
    try:
        if args.replace is not None:
            if get_trade(conn, args.replace) is None:
                print(f"Trade {args.replace} not found.", file=sys.stderr)
                return 1
            trade_id = args.replace
        else:
            trade_id = next_trade_id(int(time.time() * 1000), trade_ids(conn))
        try:
            trade = build_trade(
                form,
                trade_id=trade_id,
                policy=args.policy,
                default_instrument=journal.default_instrument,
            )
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            return 2

        if args.replace is not None:
            replace_trade(conn, trade)
            print(f"replaced_trade {trade.trade_id}")
        else:
            insert_trade(conn, trade)
            print(f"added_trade {trade.trade_id}")
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
