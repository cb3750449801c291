from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from studio.core.errors import (
    ConflictError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from studio.db.models import Package
from studio.repositories.memory import InMemoryBookingRepository, InMemoryPackageRepository
from studio.scheduling.conflicts import ConflictChecker
from studio.services.bookings import SLOT_TAKEN_MESSAGE, BookingService


@pytest.fixture
def packages():
    repo = InMemoryPackageRepository()
    repo.add(Package(id="pkg", name="Portrait", price=100.0, duration=2.0))
    return repo


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def service(packages, notifier):
    return BookingService(InMemoryBookingRepository(), packages, notifier=notifier, approval_guard=False)


def request(service, start="10:00", end="11:00", date="2030-06-01", **overrides):
    fields = dict(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
        date=date,
        start_time=start,
        end_time=end,
        package_id="pkg",
    )
    fields.update(overrides)
    return service.create(**fields)


def test_create_stores_pending_booking(service, notifier):
    booking = request(service, name="  Jane Doe  ", message=None)

    assert booking.status == "pending"
    assert booking.name == "Jane Doe"
    assert booking.message == ""
    assert booking.admin_notes is None
    notifier.booking_requested.assert_called_once()


def test_duration_falls_back_to_package(service):
    assert request(service).duration == 2.0
    assert request(service, start="12:00", end="13:30", duration=1.5).duration == 1.5


@pytest.mark.parametrize("field", ["name", "email", "phone", "date", "start_time", "end_time", "package_id"])
def test_create_requires_fields(service, field):
    with pytest.raises(ValidationError) as exc:
        request(service, **{field: "   "})
    assert exc.value.message == "Missing required fields"


def test_create_unknown_package(service):
    with pytest.raises(NotFoundError):
        request(service, package_id="missing")


def test_pending_bookings_do_not_block(service):
    request(service)
    request(service, start="10:30", end="11:30")

    assert len(service.list(status="pending")) == 2


def test_approved_booking_blocks_overlap(service):
    first = request(service)
    service.update_status(first.id, "approved")

    with pytest.raises(ConflictError) as exc:
        request(service, start="10:30", end="11:30")

    assert exc.value.status_code == 409
    assert exc.value.message == SLOT_TAKEN_MESSAGE
    assert [b.id for b in exc.value.conflicts] == [first.id]

    # Touching slots are still bookable
    request(service, start="11:00", end="12:00")


def test_cancel_frees_the_slot(service):
    first = request(service)
    service.update_status(first.id, "approved")
    service.update_status(first.id, "cancelled")

    assert service.check_availability("2030-06-01", "10:00", "11:00").available
    request(service)


def test_reopen_is_not_revalidated(service):
    first = request(service)
    service.update_status(first.id, "approved")
    service.update_status(first.id, "cancelled")

    second = request(service)
    service.update_status(second.id, "approved")

    reopened = service.update_status(first.id, "pending")
    assert reopened.status == "pending"


def test_approval_without_guard_allows_double_booking(service):
    a = request(service)
    b = request(service)

    service.update_status(a.id, "approved")
    service.update_status(b.id, "approved")

    result = service.check_availability("2030-06-01", "10:00", "11:00")
    assert len(result.conflicts) == 2


def test_approval_guard_rejects_overlap(packages):
    service = BookingService(InMemoryBookingRepository(), packages, approval_guard=True)
    a = request(service)
    b = request(service)

    service.update_status(a.id, "approved")
    with pytest.raises(ConflictError):
        service.update_status(b.id, "approved")

    assert service.get(b.id).status == "pending"
    # Re-approving itself is not a conflict
    assert service.update_status(a.id, "approved", admin_notes="confirmed").admin_notes == "confirmed"


def test_illegal_transition(service):
    booking = request(service)

    with pytest.raises(InvalidTransitionError):
        service.update_status(booking.id, "cancelled")

    assert service.get(booking.id).status == "pending"


def test_notes_only_update_does_not_notify(service, notifier):
    booking = request(service)

    updated = service.update_status(booking.id, "pending", admin_notes="called back")

    assert updated.admin_notes == "called back"
    notifier.status_changed.assert_not_called()


def test_status_change_notifies_with_package(service, notifier, packages):
    booking = request(service)
    service.update_status(booking.id, "rejected", admin_notes="fully booked")

    notifier.status_changed.assert_called_once_with(booking, packages.get("pkg"))
    assert booking.admin_notes == "fully booked"


def test_notes_are_kept_when_omitted(service):
    booking = request(service)
    service.update_status(booking.id, "approved", admin_notes="bring ID")
    service.update_status(booking.id, "cancelled")

    assert service.get(booking.id).admin_notes == "bring ID"


def test_check_availability_requires_parameters(service):
    with pytest.raises(ValidationError) as exc:
        service.check_availability("2030-06-01", None, "11:00")
    assert exc.value.message == "Missing parameters"


def test_checker_excludes_booking(service):
    booking = request(service)
    service.update_status(booking.id, "approved")

    checker = ConflictChecker(service.bookings)
    assert not checker.is_available("2030-06-01", "10:00", "11:00").available
    assert checker.is_available("2030-06-01", "10:00", "11:00", exclude_id=booking.id).available


def test_stats(service):
    a = request(service)
    b = request(service, start="12:00", end="13:00")
    request(service, start="14:00", end="15:00")

    service.update_status(a.id, "approved")
    service.update_status(b.id, "rejected")

    assert service.stats() == {
        "total": 3,
        "pending": 1,
        "approved": 1,
        "rejected": 1,
        "cancelled": 0,
        "revenue": 100.0,
    }


def test_storage_failure_on_create(packages, notifier):
    bookings = InMemoryBookingRepository()
    bookings.add = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("locked")))
    bookings.rollback = MagicMock()
    service = BookingService(bookings, packages, notifier=notifier, approval_guard=False)

    with pytest.raises(InternalError) as exc:
        request(service)

    assert exc.value.status_code == 500
    bookings.rollback.assert_called_once()
    notifier.booking_requested.assert_not_called()
