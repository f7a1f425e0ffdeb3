from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tradelog.config.app_config import load_app_config
from tradelog.ingest.journal_file import load_trades
from tradelog.storage.sqlite_store import connect, init_db, insert_trades


def main(argv: list[str] | None = None) -> int:
    app_config = load_app_config()
    parser = argparse.ArgumentParser(description="Import a saved journal (json/csv/tsv) into SQLite.")
    parser.add_argument("path", type=Path, help="Journal export to import.")
    parser.add_argument("--db", type=Path, default=app_config.app.db_path, help="SQLite DB path.")
    parser.add_argument(
        "--policy",
        default=app_config.journal.normalization,
        help="Normalization policy applied to imported trades (raw or signed).",
    )
    args = parser.parse_args(argv)

    if not args.path.exists():
        print(f"Missing journal file: {args.path}", file=sys.stderr)
        return 1

    result = load_trades(args.path, policy=args.policy)
    if result.skipped:
        print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)

    conn = connect(args.db)
    init_db(conn)
    try:
        inserted = insert_trades(conn, result.trades)
    finally:
        conn.close()

    duplicates = len(result.trades) - inserted
    if duplicates:
        print(f"Ignored {duplicates} trades already present in the journal.", file=sys.stderr)
    print(f"imported_trades {inserted}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
