from __future__ import annotations

import argparse
from pathlib import Path

from tradelog.config.app_config import load_app_config
from tradelog.ingest.journal_file import dump_trades
from tradelog.storage.sqlite_reader import load_trades
from tradelog.storage.sqlite_store import connect, init_db


def main(argv: list[str] | None = None) -> int:
    app_config = load_app_config()
    parser = argparse.ArgumentParser(description="Export the journal to JSON for backup.")
    parser.add_argument("--db", type=Path, default=app_config.app.db_path, help="SQLite DB path.")
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("data/exports/trades.json"),
        help="Output JSON path.",
    )
    args = parser.parse_args(argv)

    conn = connect(args.db)
    init_db(conn)
    try:
        trades = load_trades(conn)
    finally:
        conn.close()

    count = dump_trades(trades, args.out)
    print(f"exported_trades {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
