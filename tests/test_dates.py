"""Tests for date helpers."""

from datetime import date, datetime, time, timezone

import pytest

from nomad_service.dates import calendar_date, day_month, make_clock, ordinal, short_time


@pytest.mark.parametrize(
    "day, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"),
     (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st")],
)
def test_ordinal(day, expected):
    assert ordinal(day) == expected


def test_day_month():
    assert day_month(date(2026, 3, 5)) == "5th March"
    assert day_month("2026-10-22") == "22nd October"


def test_short_time():
    assert short_time(time(9, 5, 30)) == "09:05"
    assert short_time("14:30:00.000") == "14:30"


def test_calendar_date_naive_is_utc():
    assert calendar_date(datetime(2026, 10, 17, 23, 0)) == date(2026, 10, 17)
    assert calendar_date(None) is None


def test_make_clock_is_aware():
    now = make_clock("UTC")()
    assert now.tzinfo is not None
    assert now.utcoffset() == timezone.utc.utcoffset(now)
