from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tradelog.dates import (
    UNKNOWN_BUCKET,
    UNKNOWN_WEEKDAY,
    classify_time_bucket,
    classify_weekday,
    format_date_key,
    minutes_since_midnight,
    parse_local_date,
    short_label,
)


class TestParseLocalDate:
    def test_parses_components_verbatim(self):
        assert parse_local_date("2024-01-02") == date(2024, 1, 2)

    @pytest.mark.parametrize("value", [None, "", "2024-13-01", "2024-02-30", "not-a-date", "2024/01/02"])
    def test_bad_input_returns_none(self, value):
        assert parse_local_date(value) is None

    def test_date_passes_through(self):
        day = date(2024, 5, 6)
        assert parse_local_date(day) is day

    @given(st.dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31)))
    def test_format_is_inverse_of_parse(self, day: date):
        key = format_date_key(day)
        assert len(key) == 10
        assert parse_local_date(key) == day


class TestTimeBuckets:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("09:30", "9:30-9:45"),
            ("09:44", "9:30-9:45"),
            ("09:45", "9:45-10:00"),
            ("9:59", "9:45-10:00"),
            ("10:00", "10:00-10:15"),
            ("10:15", "10:15-10:30"),
            ("10:29", "10:15-10:30"),
            ("10:30", "10:30+"),
            ("15:59", "10:30+"),
        ],
    )
    def test_half_open_boundaries(self, value, expected):
        assert classify_time_bucket(value) == expected

    def test_pre_open_falls_into_catch_all(self):
        assert classify_time_bucket("08:00") == "10:30+"
        assert classify_time_bucket("09:29") == "10:30+"

    @pytest.mark.parametrize("value", [None, "", "abc", "25:00"])
    def test_absent_or_bad_time_is_unknown(self, value):
        assert classify_time_bucket(value) == UNKNOWN_BUCKET

    def test_minutes_since_midnight(self):
        assert minutes_since_midnight("09:30") == 570
        assert minutes_since_midnight("00:00") == 0
        assert minutes_since_midnight("") is None


class TestWeekday:
    def test_known_dates(self):
        assert classify_weekday("2024-01-02") == "Tuesday"
        assert classify_weekday("2024-03-17") == "Sunday"
        assert classify_weekday("2024-03-16") == "Saturday"

    @pytest.mark.parametrize("value", [None, "", "garbage"])
    def test_unknown(self, value):
        assert classify_weekday(value) == UNKNOWN_WEEKDAY


def test_short_label():
    assert short_label(date(2024, 1, 2)) == "Jan 2"
    assert short_label(date(2024, 12, 31)) == "Dec 31"
