"""Date and time helpers for resolvers and notification messages."""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def make_clock(tz_name: str) -> Clock:
    """Clock returning the current aware time in ``tz_name``."""
    tz = ZoneInfo(tz_name)

    def now() -> datetime:
        return datetime.now(tz)

    return now


def as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def as_time(value: Union[time, str]) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def ordinal(day: int) -> str:
    """1 -> '1st', 12 -> '12th', 22 -> '22nd'."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def day_month(value: Union[date, datetime, str]) -> str:
    """Format as '5th March'."""
    day = as_date(value)
    return f"{ordinal(day.day)} {day.strftime('%B')}"


def short_time(value: Union[time, str]) -> str:
    """Format a start time as 'HH:MM'."""
    return as_time(value).strftime("%H:%M")


def calendar_date(value: Optional[datetime], tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar date of a timestamp in ``tz``. Naive timestamps are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if tz is not None:
        value = value.astimezone(tz)
    return value.date()
