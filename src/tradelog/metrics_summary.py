from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from tradelog.config.app_config import load_app_config
from tradelog.dates import parse_local_date
from tradelog.ingest.journal_file import load_trades as load_journal_file
from tradelog.metrics.breakdown import BreakdownRow
from tradelog.metrics.dashboard import DashboardState, compute_dashboard
from tradelog.metrics.filters import build_filters
from tradelog.metrics.summary import format_ratio
from tradelog.storage.sqlite_reader import load_trades as load_stored_trades
from tradelog.storage.sqlite_store import connect, init_db


def main(argv: list[str] | None = None) -> int:
    app_config = load_app_config()
    parser = argparse.ArgumentParser(description="Compute journal performance metrics.")
    parser.add_argument("--db", type=Path, default=app_config.app.db_path, help="SQLite DB path.")
    parser.add_argument(
        "--journal",
        type=Path,
        default=None,
        help="Read trades from a journal export (json/csv/tsv) instead of the DB.",
    )
    parser.add_argument("--range", dest="range_name", default=app_config.journal.default_range)
    parser.add_argument("--from", dest="from_value", default=None, help="Custom range start (YYYY-MM-DD).")
    parser.add_argument("--to", dest="to_value", default=None, help="Custom range end (YYYY-MM-DD).")
    parser.add_argument("--time-bucket", default="all")
    parser.add_argument("--weekday", default="all")
    parser.add_argument("--instrument", default="all")
    parser.add_argument("--search", default="")
    parser.add_argument("--today", default=None, help="Override today's date (YYYY-MM-DD).")
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
    args = parser.parse_args(argv)

    today = date.today()
    if args.today:
        parsed_today = parse_local_date(args.today)
        if parsed_today is None:
            print(f"Invalid --today value: {args.today}", file=sys.stderr)
            return 2
        today = parsed_today

    if args.journal is not None:
        result = load_journal_file(args.journal, policy=app_config.journal.normalization)
        if result.skipped:
            print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)
        trades = result.trades
    else:
        conn = connect(args.db)
        init_db(conn)
        try:
            trades = load_stored_trades(conn)
        finally:
            conn.close()

    filters = build_filters(
        range_name=args.range_name,
        from_value=args.from_value,
        to_value=args.to_value,
        time_bucket=args.time_bucket,
        weekday=args.weekday,
        instrument=args.instrument,
        search=args.search,
        default_range=app_config.journal.default_range,
    )
    state = compute_dashboard(trades, filters, today)

    if args.json or (args.out is not None and args.out.suffix.lower() == ".json"):
        text = json.dumps(state.to_payload(), indent=2, sort_keys=True)
    else:
        text = _format_dashboard(state)

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")
    return 0


def _format_dashboard(state: DashboardState) -> str:
    metrics = state.metrics
    date_range = state.date_range
    lines = [
        f"range {_format_day(date_range.start)} {_format_day(date_range.end)}",
        f"total_trades {metrics.total_trades}",
        f"wins {metrics.wins}",
        f"losses {metrics.losses}",
        f"win_rate {metrics.win_rate:.2f}",
        f"profit_factor {format_ratio(metrics.profit_factor)}",
        f"avg_rr {metrics.avg_rr:.2f}",
        f"net_pnl {metrics.net_pnl:.2f}",
    ]
    lines.extend(_format_rows("time_bucket", state.time_buckets))
    lines.extend(_format_rows("weekday", state.weekdays))
    lines.extend(_format_rows("instrument", state.instruments))
    if state.daily_series:
        last = state.daily_series[-1]
        lines.append(f"series_days {len(state.daily_series)}")
        lines.append(f"cumulative_pnl {last.cumulative:.2f}")
    return "\n".join(lines)


def _format_rows(prefix: str, rows: list[BreakdownRow]) -> list[str]:
    return [
        f"{prefix} {row.key} trades={row.trades} win_rate={row.win_rate:.1f} pnl={row.pnl:.2f}"
        for row in rows
    ]


def _format_day(value: date | None) -> str:
    return "na" if value is None else value.isoformat()


if __name__ == "__main__":
    raise SystemExit(main())
