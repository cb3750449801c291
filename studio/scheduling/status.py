import enum

from studio.core.errors import InvalidTransitionError

"""
BOOKING STATUS STATE MACHINE

Only approved bookings occupy a slot, so freeing a slot on cancellation
needs no extra bookkeeping: the conflict checker stops seeing it.
"""


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


INITIAL_STATUS = BookingStatus.PENDING

#Admin-triggered transitions, keyed by current status
TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED},
    BookingStatus.APPROVED: {BookingStatus.CANCELLED},
    BookingStatus.REJECTED: {BookingStatus.PENDING},
    BookingStatus.CANCELLED: {BookingStatus.PENDING},
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    current = BookingStatus(current)
    target = BookingStatus(target)

    # Same status is a notes-only update
    if current == target:
        return True

    return target in TRANSITIONS[current]


def ensure_transition(current, target) -> BookingStatus:
    current = BookingStatus(current)
    target = BookingStatus(target)

    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot change booking status from {current.value} to {target.value}"
        )

    return target


def occupies_slot(status) -> bool:
    return BookingStatus(status) == BookingStatus.APPROVED


#True when the change makes the booking's slot bookable again
def frees_slot(previous, target) -> bool:
    return occupies_slot(previous) and not occupies_slot(target)
