from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tradelog.config.app_config import load_app_config
from tradelog.storage.sqlite_store import connect, delete_trade, init_db


def main(argv: list[str] | None = None) -> int:
    app_config = load_app_config()
    parser = argparse.ArgumentParser(description="Delete a trade from the journal.")
    parser.add_argument("trade_id", type=int, help="Id of the trade to delete.")
    parser.add_argument("--db", type=Path, default=app_config.app.db_path, help="SQLite DB path.")
    args = parser.parse_args(argv)

    conn = connect(args.db)
    init_db(conn)
    try:
        if not delete_trade(conn, args.trade_id):
            print(f"Trade {args.trade_id} not found.", file=sys.stderr)
            return 1
    finally:
        conn.close()
    print(f"deleted_trade {args.trade_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
