from dataclasses import dataclass, field
from typing import List, Optional

from studio.scheduling.intervals import TimeInterval, overlaps, validate_date
from studio.scheduling.status import BookingStatus

"""
BOOKING CONFLICT CHECKER

Advisory when used to filter displayed slots, authoritative when booking
creation re-runs it. The check and the following insert are separate
statements, so two concurrent requests can both pass.
"""


@dataclass
class AvailabilityCheck:
    available: bool
    conflicts: List = field(default_factory=list)


class ConflictChecker:
    def __init__(self, bookings):
        self.bookings = bookings

    def approved_on(self, date: str) -> List:
        return self.bookings.list_for_date(date, status=BookingStatus.APPROVED.value)

    def is_available(
        self,
        date: str,
        start_time: str,
        end_time: str,
        exclude_id: Optional[str] = None,
    ) -> AvailabilityCheck:
        validate_date(date)
        candidate = TimeInterval.from_strings(start_time, end_time)

        conflicts = find_conflicts(candidate, self.approved_on(date), exclude_id=exclude_id)

        return AvailabilityCheck(available=not conflicts, conflicts=conflicts)


#Every booking overlapping the candidate, not only the first
def find_conflicts(candidate: TimeInterval, bookings, exclude_id: Optional[str] = None) -> List:
    conflicts = []
    for booking in bookings:
        if exclude_id is not None and booking.id == exclude_id:
            continue

        existing = TimeInterval.from_strings(booking.start_time, booking.end_time)
        if overlaps(candidate, existing):
            conflicts.append(booking)

    return conflicts
