"""Parsing of month and day strings into half-open time windows."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.exceptions import InvalidDateFormatError, ValidationError


MONTH_FORMAT = "%Y-%m"
DAY_FORMAT = "%Y-%m-%d"

_MONTH_RE = re.compile(r"[0-9]{4}-[0-9]{2}")
_DAY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class TimeWindow:
    """Instants t with start <= t < end.

    A window reaching past the last representable instant ends at
    datetime.max.
    """

    start: datetime
    end: datetime

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def _strict_parse(value: str, pattern: re.Pattern[str], fmt: str, expected: str) -> datetime:
    # strptime alone accepts single-digit fields such as "2023-1"
    if not isinstance(value, str) or pattern.fullmatch(value) is None:
        raise InvalidDateFormatError(value, expected)
    try:
        return datetime.strptime(value, fmt)
    except ValueError as e:
        raise InvalidDateFormatError(value, expected) from e


def next_month(start: datetime) -> datetime:
    """First instant of the month after start, datetime.max after December 9999."""
    if start.month < 12:
        return start.replace(month=start.month + 1)
    if start.year == datetime.max.year:
        return datetime.max
    return start.replace(year=start.year + 1, month=1)


def _day_after(day: datetime) -> datetime:
    try:
        return day + timedelta(days=1)
    except OverflowError:
        return datetime.max


def parse_month(value: str) -> TimeWindow:
    """Window covering a calendar month given as YYYY-MM."""
    start = _strict_parse(value, _MONTH_RE, MONTH_FORMAT, "YYYY-MM")
    return TimeWindow(start=start, end=next_month(start))


def parse_day(value: str) -> datetime:
    """Midnight at the start of a YYYY-MM-DD day."""
    return _strict_parse(value, _DAY_RE, DAY_FORMAT, "YYYY-MM-DD")


def parse_day_range(start: str, end: str) -> TimeWindow:
    """Window from the start of the first day through the end of the last day."""
    window = TimeWindow(start=parse_day(start), end=_day_after(parse_day(end)))
    if window.end <= window.start:
        raise ValidationError(
            "End date must not be before start date",
            details={"start": start, "end": end},
        )
    return window
