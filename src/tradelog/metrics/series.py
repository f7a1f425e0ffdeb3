from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from tradelog.dates import format_date_key, parse_local_date, short_label
from tradelog.models import DateRange, Trade


@dataclass(frozen=True)
class DailyPoint:
    date: str
    label: str
    pnl: float
    cumulative: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "label": self.label,
            "pnl": self.pnl,
            "cumulative": self.cumulative,
        }


def series_bounds(trades: Iterable[Trade], date_range: DateRange, today: date) -> tuple[date, date]:
    """First and last day of the series, both capped at ``today``.

    With no trades in view the series is a single ``today`` entry, whatever
    the range.
    """
    trade_list = list(trades)
    if not trade_list:
        return today, today
    trade_days = [day for day in (parse_local_date(trade.date) for trade in trade_list) if day is not None]
    start = date_range.start or min(trade_days, default=None) or today
    end = date_range.end or max(trade_days, default=None) or today
    start = min(start, today)
    end = min(end, today)
    if end < start:
        end = start
    return start, end


def daily_pnl_series(
    trades: Iterable[Trade],
    date_range: DateRange,
    today: date,
) -> list[DailyPoint]:
    trade_list = list(trades)
    start, end = series_bounds(trade_list, date_range, today)

    buckets: dict[date, float] = defaultdict(float)
    for trade in trade_list:
        day = parse_local_date(trade.date)
        if day is None:
            continue
        buckets[day] += trade.pnl_value

    points: list[DailyPoint] = []
    cumulative = 0.0
    cursor = start
    while cursor <= end:
        pnl = buckets.get(cursor, 0.0)
        cumulative += pnl
        points.append(
            DailyPoint(
                date=format_date_key(cursor),
                label=short_label(cursor),
                pnl=pnl,
                cumulative=cumulative,
            )
        )
        cursor += timedelta(days=1)
    return points
