from datetime import date as date_type
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from studio.core.errors import ConflictError, NotFoundError, ValidationError
from studio.core.logger import logger
from studio.db.models import Availability
from studio.repositories.base import AvailabilityRepository, BookingRepository
from studio.scheduling.conflicts import ConflictChecker, find_conflicts
from studio.scheduling.intervals import TimeInterval, overlaps, validate_date
from studio.scheduling.slots import Slot, generate_slots_for_windows

OVERLAP_MESSAGE = "Time slot overlaps with existing availability"


def _require_fields(date, start_time, end_time):
    if not date or not start_time or not end_time:
        raise ValidationError("Missing required fields: date, startTime, endTime")


def _validate_window(date: str, start_time: str, end_time: str) -> TimeInterval:
    _require_fields(date, start_time, end_time)
    validate_date(date)
    return TimeInterval.from_strings(start_time, end_time)


class AvailabilityService:
    """
    Admin-managed availability windows.

    The overlap scan covers every window on the date, active or not.
    """

    def __init__(self, windows: AvailabilityRepository, bookings: Optional[BookingRepository] = None):
        self.windows = windows
        self.bookings = bookings

    def list(self) -> List[Availability]:
        return self.windows.list()

    def _find_overlap(self, date: str, candidate: TimeInterval, exclude_id: Optional[str] = None):
        for window in self.windows.list_for_date(date):
            if exclude_id is not None and window.id == exclude_id:
                continue

            existing = TimeInterval.from_strings(window.start_time, window.end_time)
            if overlaps(candidate, existing):
                return window

        return None

    def create(self, date: str, start_time: str, end_time: str) -> Availability:
        candidate = _validate_window(date, start_time, end_time)

        # The scan is best effort here, a storage failure does not block creation
        try:
            clash = self._find_overlap(date, candidate)
        except SQLAlchemyError as e:
            logger.error(f"Error checking overlaps for {date}: {e}")
            self.windows.rollback()
            clash = None

        if clash is not None:
            raise ConflictError(OVERLAP_MESSAGE, conflicts=[clash], status_code=400)

        window = self.windows.add(
            Availability(
                date=date,
                start_time=start_time,
                end_time=end_time,
                is_active=True,
            )
        )
        logger.info(f"Availability {window.id} created for {date} {start_time}-{end_time}")
        return window

    def update(
        self,
        availability_id: str,
        date: str,
        start_time: str,
        end_time: str,
        is_active: Optional[bool] = None,
    ) -> Availability:
        candidate = _validate_window(date, start_time, end_time)

        clash = self._find_overlap(date, candidate, exclude_id=availability_id)
        if clash is not None:
            raise ConflictError(OVERLAP_MESSAGE, conflicts=[clash], status_code=400)

        window = self.windows.get(availability_id)
        if not window:
            raise NotFoundError("Availability slot not found")

        window.date = date
        window.start_time = start_time
        window.end_time = end_time
        window.is_active = True if is_active is None else is_active

        return self.windows.save(window)

    #Hard delete, bookings keep their own copy of the date and times
    def delete(self, availability_id: str) -> str:
        window = self.windows.get(availability_id)
        if not window:
            raise NotFoundError("Availability slot not found")

        self.windows.delete(window)
        logger.info(f"Availability {availability_id} deleted")
        return availability_id

    def open_dates(self, today: Optional[date_type] = None) -> List[str]:
        today_str = (today or date_type.today()).isoformat()

        dates = {
            window.date
            for window in self.windows.list()
            if window.is_active and window.date >= today_str
        }
        return sorted(dates)

    def bookable_slots(self, date: str, duration_hours: float) -> List[Slot]:
        """
        Slots of the active windows on a date, minus those overlapping an
        approved booking.
        """
        validate_date(date)

        windows = [w for w in self.windows.list_for_date(date) if w.is_active]
        slots = generate_slots_for_windows(windows, duration_hours)

        if self.bookings is None:
            return slots

        checker = ConflictChecker(self.bookings)
        approved = checker.approved_on(date)
        if not approved:
            return slots

        return [
            slot
            for slot in slots
            if not find_conflicts(TimeInterval.from_strings(slot.start_time, slot.end_time), approved)
        ]
