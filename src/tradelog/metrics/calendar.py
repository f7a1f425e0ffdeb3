from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Mapping

from tradelog.dates import format_date_key, month_label, parse_local_date
from tradelog.metrics.ranges import shift_month
from tradelog.models import Trade

WEEK_START_SUNDAY = "sunday"
WEEK_START_MONDAY = "monday"


@dataclass
class CalendarDay:
    wins: int = 0
    losses: int = 0
    net_pnl: float = 0.0
    trades: list[Trade] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "net_pnl": self.net_pnl,
            "trades": [trade.to_payload() for trade in self.trades],
        }


def calendar_index(trades: Iterable[Trade]) -> dict[str, CalendarDay]:
    """Group the full trade history by its literal date key."""
    index: dict[str, CalendarDay] = {}
    for trade in trades:
        if not trade.date:
            continue
        bucket = index.setdefault(trade.date, CalendarDay())
        if trade.is_win:
            bucket.wins += 1
        elif trade.is_loss:
            bucket.losses += 1
        bucket.net_pnl += trade.pnl_value
        bucket.trades.append(trade)
    return index


def day_trades(index: Mapping[str, CalendarDay], day_key: str) -> list[Trade]:
    bucket = index.get(day_key)
    if bucket is None:
        return []
    return list(bucket.trades)


def month_grid(month: date, *, week_start: str = WEEK_START_SUNDAY) -> list[list[date | None]]:
    """Whole weeks covering ``month``; days outside the month are ``None``."""
    month_start = date(month.year, month.month, 1)
    month_end = shift_month(month_start, 1) - timedelta(days=1)
    if week_start == WEEK_START_MONDAY:
        leading = month_start.weekday()
    else:
        leading = (month_start.weekday() + 1) % 7

    cells: list[date | None] = [None] * leading
    cursor = month_start
    while cursor <= month_end:
        cells.append(cursor)
        cursor += timedelta(days=1)
    while len(cells) % 7:
        cells.append(None)
    return [cells[idx : idx + 7] for idx in range(0, len(cells), 7)]


def month_options(trades: Iterable[Trade], today: date) -> list[dict[str, str]]:
    months: set[date] = {date(today.year, today.month, 1)}
    for trade in trades:
        parsed = parse_local_date(trade.date)
        if parsed is None:
            continue
        months.add(date(parsed.year, parsed.month, 1))
    return [
        {"key": month_start.strftime("%Y-%m"), "label": month_label(month_start)}
        for month_start in sorted(months, reverse=True)
    ]


def calendar_month(
    index: Mapping[str, CalendarDay],
    month: date,
    *,
    week_start: str = WEEK_START_SUNDAY,
) -> dict[str, Any]:
    month_start = date(month.year, month.month, 1)
    weeks = []
    for week in month_grid(month_start, week_start=week_start):
        row = []
        for cell in week:
            if cell is None:
                row.append(None)
                continue
            key = format_date_key(cell)
            bucket = index.get(key)
            row.append(
                {
                    "date": key,
                    "day": cell.day,
                    "has_trades": bucket is not None,
                    "wins": bucket.wins if bucket else 0,
                    "losses": bucket.losses if bucket else 0,
                    "net_pnl": bucket.net_pnl if bucket else 0.0,
                }
            )
        weeks.append(row)
    return {
        "month_key": month_start.strftime("%Y-%m"),
        "month_label": month_label(month_start),
        "prev_month": shift_month(month_start, -1).strftime("%Y-%m"),
        "next_month": shift_month(month_start, 1).strftime("%Y-%m"),
        "weeks": weeks,
    }


def parse_month(value: str | None) -> date | None:
    if not value:
        return None
    return parse_local_date(f"{value.strip()}-01")
