from __future__ import annotations

import re
from datetime import date

BUCKET_0930 = "9:30-9:45"
BUCKET_0945 = "9:45-10:00"
BUCKET_1000 = "10:00-10:15"
BUCKET_1015 = "10:15-10:30"
BUCKET_LATE = "10:30+"
UNKNOWN_BUCKET = "unknown"

TIME_BUCKETS = (BUCKET_0930, BUCKET_0945, BUCKET_1000, BUCKET_1015, BUCKET_LATE)

# Lower bounds in minutes since midnight; each bucket ends where the next begins.
_BUCKET_BOUNDS = (
    (570, 585, BUCKET_0930),
    (585, 600, BUCKET_0945),
    (600, 615, BUCKET_1000),
    (615, 630, BUCKET_1015),
)

WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
TRADING_WEEKDAYS = WEEKDAYS[1:6]
UNKNOWN_WEEKDAY = "Unknown"

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})")


def parse_local_date(value: str | date | None) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    parts = str(value).strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def format_date_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def minutes_since_midnight(value: str | None) -> int | None:
    if not value:
        return None
    match = _TIME_RE.match(str(value).strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def classify_time_bucket(value: str | None) -> str:
    """Map an ``HH:MM`` entry time onto one of the fixed session buckets.

    Anything outside the four quarter-hour windows after the open, including
    times before 9:30, falls into the ``10:30+`` catch-all.
    """
    total = minutes_since_midnight(value)
    if total is None:
        return UNKNOWN_BUCKET
    for lower, upper, label in _BUCKET_BOUNDS:
        if lower <= total < upper:
            return label
    return BUCKET_LATE


def classify_weekday(value: str | date | None) -> str:
    parsed = parse_local_date(value)
    if parsed is None:
        return UNKNOWN_WEEKDAY
    # date.weekday() is Monday=0; WEEKDAYS is Sunday-first.
    return WEEKDAYS[(parsed.weekday() + 1) % 7]


def short_label(day: date) -> str:
    return f"{_MONTH_ABBR[day.month - 1]} {day.day}"


def month_label(day: date) -> str:
    return day.strftime("%B %Y")
