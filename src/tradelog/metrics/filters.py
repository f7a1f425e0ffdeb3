from __future__ import annotations

from datetime import date
from typing import Iterable

from tradelog.dates import (
    TIME_BUCKETS,
    WEEKDAYS,
    classify_time_bucket,
    classify_weekday,
    parse_local_date,
)
from tradelog.metrics.ranges import PRESET_ALL_TIME, normalize_preset, resolve_range
from tradelog.models import ALL, DateRange, FilterConfig, RangeSpec, Trade


def filter_trades(trades: Iterable[Trade], filters: FilterConfig, today: date) -> list[Trade]:
    return apply_filters(trades, filters, resolve_range(filters.range_spec, today))


def apply_filters(
    trades: Iterable[Trade],
    filters: FilterConfig,
    date_range: DateRange,
) -> list[Trade]:
    search_term = (filters.search or "").strip().lower()
    filtered: list[Trade] = []
    for trade in trades:
        if not date_range.contains(parse_local_date(trade.date)):
            continue
        if filters.time_bucket != ALL and classify_time_bucket(trade.time) != filters.time_bucket:
            continue
        if filters.weekday != ALL and classify_weekday(trade.date) != filters.weekday:
            continue
        if filters.instrument != ALL and trade.instrument != filters.instrument:
            continue
        if search_term and search_term not in (trade.instrument or "").lower():
            continue
        filtered.append(trade)
    return filtered


def build_filters(
    *,
    range_name: str | None = None,
    from_value: str | None = None,
    to_value: str | None = None,
    time_bucket: str | None = None,
    weekday: str | None = None,
    instrument: str | None = None,
    search: str | None = None,
    default_range: str = PRESET_ALL_TIME,
) -> FilterConfig:
    """Turn loosely-typed request/CLI parameters into a ``FilterConfig``.

    Unknown bucket, weekday and preset values fall back to "all"/the default
    range; an explicit from/to pair takes precedence over the preset.
    """
    start = parse_local_date(from_value)
    end = parse_local_date(to_value)
    if start is not None or end is not None:
        range_spec = RangeSpec.explicit(start, end)
    else:
        try:
            range_spec = RangeSpec(preset=normalize_preset(range_name or default_range))
        except ValueError:
            range_spec = RangeSpec(preset=default_range)

    bucket = (time_bucket or ALL).strip()
    if bucket not in TIME_BUCKETS:
        bucket = ALL

    day = (weekday or ALL).strip().capitalize()
    if day not in WEEKDAYS:
        day = ALL

    selected_instrument = (instrument or "").strip()
    if not selected_instrument or selected_instrument.lower() == ALL:
        selected_instrument = ALL

    return FilterConfig(
        range_spec=range_spec,
        time_bucket=bucket,
        weekday=day,
        instrument=selected_instrument,
        search=(search or "").strip(),
    )
