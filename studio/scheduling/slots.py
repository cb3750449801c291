from dataclasses import dataclass
from typing import Iterable, List, Optional

from studio.core.errors import ValidationError
from studio.scheduling.intervals import (
    MINUTES_PER_HOUR,
    TimeInterval,
    format_time,
)

"""
SLOT GENERATION

Slots always start on a fixed 60 minute step from the window start,
whatever the session length. A 30 minute package therefore only offers
starts at the same marks as a 1 hour package.
"""

SLOT_STEP_MINUTES = 60


@dataclass(frozen=True)
class Slot:
    start_time: str
    end_time: str
    availability_id: Optional[str] = None


def duration_to_minutes(duration_hours: float) -> int:
    if duration_hours is None or duration_hours <= 0:
        raise ValidationError("Duration must be greater than zero")

    return int(round(duration_hours * MINUTES_PER_HOUR))


def generate_slots(window, duration_hours: float) -> List[Slot]:
    """
    Produce every bookable (start, end) pair inside one availability window.

    Parameters
    ----------
    window
        Any object with start_time, end_time and id attributes.
    duration_hours : float
        Session length, fractional values allowed.

    Returns
    -------
    list of Slot
        Ascending by start time, empty when no session fits.
    """
    interval = TimeInterval.from_strings(window.start_time, window.end_time)
    duration = duration_to_minutes(duration_hours)

    if duration > interval.duration_minutes:
        return []

    slots = []
    current = interval.start
    while current + duration <= interval.end:
        slots.append(
            Slot(
                start_time=format_time(current),
                end_time=format_time(current + duration),
                availability_id=window.id,
            )
        )
        current += SLOT_STEP_MINUTES

    return slots


#Slots of several windows, concatenated in window order without deduplication
def generate_slots_for_windows(windows: Iterable, duration_hours: float) -> List[Slot]:
    slots = []
    for window in windows:
        slots.extend(generate_slots(window, duration_hours))
    return slots
