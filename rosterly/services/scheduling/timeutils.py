"""Calendar and wall-clock helpers shared by the scheduling engine."""

import re
from datetime import date, datetime, time, timedelta

from .errors import ScheduleInputError


DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def parse_date(value) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ScheduleInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise ScheduleInputError(f"Invalid date {value!r}: {e}") from e


def parse_time(value) -> time:
    """Parse an HH:MM 24h string (or pass a time through)."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ScheduleInputError(f"Invalid time {value!r}, expected HH:MM")
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except ValueError as e:
        raise ScheduleInputError(f"Invalid time {value!r}: {e}") from e


def format_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def weekday_of(day: date) -> int:
    """Weekday with Sunday = 0 .. Saturday = 6."""
    return (day.weekday() + 1) % 7


def week_dates(week_start: date) -> list[tuple[date, int]]:
    """The 7 calendar dates starting at week_start, each paired with its weekday."""
    days = [week_start + timedelta(days=i) for i in range(7)]
    return [(d, weekday_of(d)) for d in days]


def span_hours(start: time, end: time) -> float:
    """Length of a wall-clock span in hours; an end before the start wraps past midnight."""
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    if minutes < 0:
        minutes += 24 * 60
    return minutes / 60
