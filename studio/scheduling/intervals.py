from dataclasses import dataclass
from datetime import date

from studio.core.config import DATE_REGEX, TIME_REGEX
from studio.core.errors import ValidationError

"""
TIME INTERVALS

Times of day are handled as minutes since midnight. Every interval is
half-open, [start, end), and overlaps() is the only overlap test used
by windows, bookings and slot filtering.
"""

MINUTES_PER_HOUR = 60


def validate_date(value: str) -> str:
    """
    Check a YYYY-MM-DD date string.

    The format is matched strictly and the value must also exist on
    the calendar, so "2025-02-30" is rejected.
    """
    if not isinstance(value, str) or not DATE_REGEX.fullmatch(value):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")

    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")

    return value


def parse_time(value: str) -> int:
    """Convert a zero-padded 24-hour HH:MM string to minutes since midnight."""
    if not isinstance(value, str) or not TIME_REGEX.fullmatch(value):
        raise ValidationError("Invalid time format. Use HH:MM")

    hours, minutes = value.split(":")
    return int(hours) * MINUTES_PER_HOUR + int(minutes)


def format_time(minutes: int) -> str:
    hours, mins = divmod(int(minutes), MINUTES_PER_HOUR)
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True)
class TimeInterval:
    start: int
    end: int

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "TimeInterval":
        start = parse_time(start_time)
        end = parse_time(end_time)

        if start >= end:
            raise ValidationError("End time must be after start time")

        return cls(start, end)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # Touching endpoints are not an overlap
    return a.start < b.end and a.end > b.start
