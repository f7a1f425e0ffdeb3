from __future__ import annotations

from datetime import date, timedelta

from tradelog.models import DateRange, RangeSpec

PRESET_MONTH_TO_DATE = "month-to-date"
PRESET_LAST_3_MONTHS = "last-3-months"
PRESET_LAST_6_MONTHS = "last-6-months"
PRESET_YEAR_TO_DATE = "year-to-date"
PRESET_ALL_TIME = "all-time"
PRESET_TODAY = "today"
PRESET_THIS_WEEK = "this-week"
PRESET_THIS_MONTH = "this-month"
PRESET_LAST_30_DAYS = "last-30-days"
PRESET_LAST_MONTH = "last-month"
PRESET_THIS_QUARTER = "this-quarter"
PRESET_YTD = "ytd"

_PRESET_LABELS = {
    PRESET_MONTH_TO_DATE: "Month to Date",
    PRESET_LAST_3_MONTHS: "Last 3 Months",
    PRESET_LAST_6_MONTHS: "Last 6 Months",
    PRESET_YEAR_TO_DATE: "Year to Date",
    PRESET_ALL_TIME: "All Time",
    PRESET_TODAY: "Today",
    PRESET_THIS_WEEK: "This Week",
    PRESET_THIS_MONTH: "This Month",
    PRESET_LAST_30_DAYS: "Last 30 Days",
    PRESET_LAST_MONTH: "Last Month",
    PRESET_THIS_QUARTER: "This Quarter",
    PRESET_YTD: "YTD",
}

_PRESET_ALIASES = {
    "mtd": PRESET_MONTH_TO_DATE,
    "3m": PRESET_LAST_3_MONTHS,
    "6m": PRESET_LAST_6_MONTHS,
    "all": PRESET_ALL_TIME,
}

PRESETS = tuple(_PRESET_LABELS)


def normalize_preset(name: str) -> str:
    cleaned = name.strip().lower().replace("_", "-")
    cleaned = _PRESET_ALIASES.get(cleaned, cleaned)
    if cleaned not in _PRESET_LABELS:
        raise ValueError(f"Unknown range preset: {name}")
    return cleaned


def preset_options() -> list[dict[str, str]]:
    return [{"value": key, "label": label} for key, label in _PRESET_LABELS.items()]


def resolve_preset(name: str, today: date, *, closed: bool = False) -> DateRange:
    """Resolve a named preset against ``today``.

    With ``closed`` the calendar presets (this week/month/quarter) run to the
    end of their period instead of stopping at ``today``.
    """
    preset = normalize_preset(name)
    month_start = date(today.year, today.month, 1)

    if preset == PRESET_ALL_TIME:
        return DateRange()
    if preset == PRESET_TODAY:
        return DateRange(today, today)
    if preset == PRESET_MONTH_TO_DATE:
        return DateRange(month_start, today)
    if preset == PRESET_THIS_MONTH:
        end = _month_end(month_start) if closed else today
        return DateRange(month_start, end)
    if preset == PRESET_LAST_3_MONTHS:
        return DateRange(shift_month(month_start, -2), today)
    if preset == PRESET_LAST_6_MONTHS:
        return DateRange(shift_month(month_start, -5), today)
    if preset in (PRESET_YEAR_TO_DATE, PRESET_YTD):
        return DateRange(date(today.year, 1, 1), today)
    if preset == PRESET_THIS_WEEK:
        week_start = today - timedelta(days=today.weekday())
        end = week_start + timedelta(days=6) if closed else today
        return DateRange(week_start, end)
    if preset == PRESET_LAST_30_DAYS:
        return DateRange(today - timedelta(days=29), today)
    if preset == PRESET_LAST_MONTH:
        start = shift_month(month_start, -1)
        return DateRange(start, _month_end(start))
    if preset == PRESET_THIS_QUARTER:
        start = date(today.year, 3 * ((today.month - 1) // 3) + 1, 1)
        end = _month_end(shift_month(start, 2)) if closed else today
        return DateRange(start, end)
    raise ValueError(f"Unhandled range preset: {preset}")


def clamp_range(start: date | None, end: date | None, today: date) -> DateRange:
    if start is not None and start > today:
        start = today
    if end is not None and end > today:
        end = today
    if start is not None and end is not None and start > end:
        start = end
    return DateRange(start, end)


def resolve_range(spec: RangeSpec, today: date) -> DateRange:
    if spec.preset:
        resolved = resolve_preset(spec.preset, today)
        return clamp_range(resolved.start, resolved.end, today)
    end = spec.end
    if spec.start is not None and end is None:
        # A custom range with only a start runs up to today.
        end = today
    return clamp_range(spec.start, end, today)


def shift_month(value: date, delta: int) -> date:
    year = value.year + (value.month - 1 + delta) // 12
    month = (value.month - 1 + delta) % 12 + 1
    return date(year, month, 1)


def _month_end(month_start: date) -> date:
    return shift_month(month_start, 1) - timedelta(days=1)
