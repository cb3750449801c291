from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from studio.core.config import settings
from studio.core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from studio.core.logger import logger
from studio.db.models import Booking
from studio.repositories.base import BookingRepository, PackageRepository
from studio.scheduling.conflicts import AvailabilityCheck, ConflictChecker
from studio.scheduling.intervals import TimeInterval, validate_date
from studio.scheduling.status import (
    INITIAL_STATUS,
    BookingStatus,
    ensure_transition,
    frees_slot,
    occupies_slot,
)

SLOT_TAKEN_MESSAGE = "This time slot is no longer available"


class BookingService:
    """
    Customer booking requests and the admin approval workflow.

    Creation re-runs the conflict check against approved bookings before
    inserting, but the two steps are not atomic. Approval only re-checks
    when the approval guard is enabled.
    """

    def __init__(
        self,
        bookings: BookingRepository,
        packages: PackageRepository,
        notifier=None,
        approval_guard: Optional[bool] = None,
    ):
        self.bookings = bookings
        self.packages = packages
        self.notifier = notifier
        self.checker = ConflictChecker(bookings)
        self.approval_guard = (
            settings.APPROVAL_CONFLICT_GUARD if approval_guard is None else approval_guard
        )

    def list(self, status: Optional[str] = None, date: Optional[str] = None) -> List[Booking]:
        if status is not None:
            status = BookingStatus(status).value
        return self.bookings.list(status=status, date=date)

    def get(self, booking_id: str) -> Booking:
        booking = self.bookings.get(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def check_availability(self, date: str, start_time: str, end_time: str) -> AvailabilityCheck:
        if not date or not start_time or not end_time:
            raise ValidationError("Missing parameters")

        result = self.checker.is_available(date, start_time, end_time)
        logger.debug(
            f"Availability check {date} {start_time}-{end_time}: "
            f"{len(result.conflicts)} conflicts"
        )
        return result

    def create(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        date: str,
        start_time: str,
        end_time: str,
        package_id: str,
        message: Optional[str] = None,
        availability_id: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> Booking:
        if not all(v and str(v).strip() for v in (name, email, phone, date, start_time, end_time, package_id)):
            raise ValidationError("Missing required fields")

        validate_date(date)
        TimeInterval.from_strings(start_time, end_time)

        package = self.packages.get(package_id)
        if not package:
            logger.warning(f"Booking request for unknown package {package_id}")
            raise NotFoundError("Package not found")

        result = self.checker.is_available(date, start_time, end_time)
        if not result.available:
            logger.warning(
                f"Slot conflict for {date} {start_time}-{end_time} with "
                + ", ".join(b.id for b in result.conflicts)
            )
            raise ConflictError(SLOT_TAKEN_MESSAGE, conflicts=result.conflicts)

        try:
            booking = self.bookings.add(
                Booking(
                    name=name.strip(),
                    email=email.strip(),
                    phone=phone.strip(),
                    message=(message or "").strip(),
                    date=date,
                    start_time=start_time,
                    end_time=end_time,
                    package_id=package_id,
                    availability_id=availability_id or None,
                    duration=duration or package.duration,
                    status=INITIAL_STATUS.value,
                    admin_notes=None,
                )
            )
        except SQLAlchemyError as e:
            self.bookings.rollback()
            logger.error(f"Failed to store booking for {date} {start_time}-{end_time}: {e}")
            raise InternalError("Failed to create booking") from e

        logger.info(f"Booking {booking.id} requested for {date} {start_time}-{end_time}")

        if self.notifier is not None:
            self.notifier.booking_requested(booking, package)

        return booking

    def update_status(self, booking_id: str, status, admin_notes: Optional[str] = None) -> Booking:
        booking = self.get(booking_id)
        previous = BookingStatus(booking.status)
        target = ensure_transition(previous, status)

        if self.approval_guard and target == BookingStatus.APPROVED and previous != target:
            result = self.checker.is_available(
                booking.date, booking.start_time, booking.end_time, exclude_id=booking.id
            )
            if not result.available:
                raise ConflictError(SLOT_TAKEN_MESSAGE, conflicts=result.conflicts)

        booking.status = target.value
        if admin_notes is not None:
            booking.admin_notes = admin_notes

        booking = self.bookings.save(booking)

        if previous == target:
            return booking

        if occupies_slot(target):
            logger.info(
                f"Booking {booking.id} approved, {booking.date} "
                f"{booking.start_time}-{booking.end_time} now unavailable"
            )
        elif frees_slot(previous, target):
            logger.info(
                f"Booking {booking.id} {target.value}, {booking.date} "
                f"{booking.start_time}-{booking.end_time} available again"
            )
        else:
            logger.info(f"Booking {booking.id} moved from {previous.value} to {target.value}")

        if self.notifier is not None:
            self.notifier.status_changed(booking, self.packages.get(booking.package_id))

        return booking

    def stats(self) -> Dict:
        bookings = self.bookings.list()

        counts = {status.value: 0 for status in BookingStatus}
        revenue = 0.0
        prices = {}

        for booking in bookings:
            counts[booking.status] += 1

            if occupies_slot(booking.status):
                if booking.package_id not in prices:
                    package = self.packages.get(booking.package_id)
                    prices[booking.package_id] = package.price if package else 0
                revenue += prices[booking.package_id] or 0

        return {"total": len(bookings), **counts, "revenue": revenue}
