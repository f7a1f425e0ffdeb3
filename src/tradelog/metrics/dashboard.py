from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from tradelog.metrics.breakdown import (
    BreakdownRow,
    instrument_breakdown,
    time_bucket_breakdown,
    weekday_breakdown,
)
from tradelog.metrics.calendar import CalendarDay, calendar_index
from tradelog.metrics.filters import apply_filters
from tradelog.metrics.ranges import resolve_range
from tradelog.metrics.series import DailyPoint, daily_pnl_series
from tradelog.metrics.summary import MetricsSnapshot, compute_metrics
from tradelog.models import DateRange, FilterConfig, Trade


@dataclass(frozen=True)
class DashboardState:
    date_range: DateRange
    filtered: list[Trade]
    metrics: MetricsSnapshot
    time_buckets: list[BreakdownRow]
    weekdays: list[BreakdownRow]
    instruments: list[BreakdownRow]
    daily_series: list[DailyPoint]
    calendar: dict[str, CalendarDay]

    def to_payload(self) -> dict[str, Any]:
        return {
            "range": self.date_range.to_payload(),
            "metrics": self.metrics.to_payload(),
            "time_buckets": [row.to_payload() for row in self.time_buckets],
            "weekdays": [row.to_payload() for row in self.weekdays],
            "instruments": [row.to_payload() for row in self.instruments],
            "daily_series": [point.to_payload() for point in self.daily_series],
            "calendar": {key: day.to_payload() for key, day in self.calendar.items()},
            "trades": [trade.to_payload() for trade in self.filtered],
        }


def compute_dashboard(trades: Sequence[Trade], filters: FilterConfig, today: date) -> DashboardState:
    """Run the whole analytics pipeline over one snapshot of the journal.

    The calendar and the instrument categories are taken from ``trades`` as a
    whole; everything else is computed over the filtered set.
    """
    trade_list = list(trades)
    date_range = resolve_range(filters.range_spec, today)
    filtered = apply_filters(trade_list, filters, date_range)
    return DashboardState(
        date_range=date_range,
        filtered=filtered,
        metrics=compute_metrics(filtered),
        time_buckets=time_bucket_breakdown(filtered),
        weekdays=weekday_breakdown(filtered),
        instruments=instrument_breakdown(filtered, trade_list),
        daily_series=daily_pnl_series(filtered, date_range, today),
        calendar=calendar_index(trade_list),
    )
