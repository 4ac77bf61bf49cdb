"""Date and time utilities."""

from datetime import datetime, timedelta
from typing import Iterator, Union

from ..errors import ValidationError


def weekday_number(date: datetime) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (date.weekday() + 1) % 7


def start_of_day(date: datetime) -> datetime:
    """Midnight of the calendar day containing date (tzinfo preserved)."""
    return date.replace(hour=0, minute=0, second=0, microsecond=0)


def at_hour(day: datetime, hour: int) -> datetime:
    """The given day at hour:00."""
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


def iter_days(start: datetime, end: datetime) -> Iterator[datetime]:
    """Yield day boundaries from the day containing start while before end."""
    current = start_of_day(start)
    while current < end:
        yield current
        current = start_of_day(current + timedelta(days=1))


def minutes_between(start: datetime, end: datetime) -> float:
    """Signed length of [start, end) in minutes."""
    return (end - start).total_seconds() / 60


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Accept a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only accepts a Z suffix from Python 3.11
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
    raise ValidationError(f"Invalid timestamp: {value!r}")
