from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

"""
IN-MEMORY REPOSITORIES

Hold transient model instances in dicts. Column defaults are not applied
outside a session, so ids, timestamps and default flags are filled here.
"""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _MemoryRepository:
    defaults: Dict = {}

    def __init__(self):
        self.items: Dict[str, object] = {}

    def get(self, entity_id: str):
        return self.items.get(entity_id)

    def add(self, entity):
        if getattr(entity, "id", None) is None:
            entity.id = str(uuid4())

        now = _now()
        for attr in ("created_at", "updated_at"):
            if hasattr(entity, attr) and getattr(entity, attr) is None:
                setattr(entity, attr, now)

        for attr, value in self.defaults.items():
            if getattr(entity, attr, None) is None:
                setattr(entity, attr, value)

        self.items[entity.id] = entity
        return entity

    def save(self, entity):
        if hasattr(entity, "updated_at"):
            entity.updated_at = _now()
        self.items[entity.id] = entity
        return entity

    def delete(self, entity) -> None:
        self.items.pop(entity.id, None)

    def rollback(self) -> None:
        pass


class InMemoryAvailabilityRepository(_MemoryRepository):
    defaults = {"is_active": True}

    def list(self) -> List:
        return sorted(self.items.values(), key=lambda w: (w.date, w.start_time))

    def list_for_date(self, date: str) -> List:
        return [w for w in self.list() if w.date == date]


class InMemoryBookingRepository(_MemoryRepository):
    defaults = {"status": "pending"}

    def list(self, status: Optional[str] = None, date: Optional[str] = None) -> List:
        bookings = sorted(self.items.values(), key=lambda b: b.created_at)

        if status is not None:
            bookings = [b for b in bookings if b.status == status]

        if date is not None:
            bookings = [b for b in bookings if b.date == date]

        return bookings

    def list_for_date(self, date: str, status: Optional[str] = None) -> List:
        bookings = [b for b in self.items.values() if b.date == date]

        if status is not None:
            bookings = [b for b in bookings if b.status == status]

        return sorted(bookings, key=lambda b: b.start_time)


class InMemoryPackageRepository(_MemoryRepository):
    defaults = {"is_active": True}

    def list(self, active_only: bool = False) -> List:
        packages = sorted(self.items.values(), key=lambda p: p.created_at)

        if active_only:
            packages = [p for p in packages if p.is_active]

        return packages


class InMemoryNotificationRepository(_MemoryRepository):
    def list_for_booking(self, booking_id: str) -> List:
        return [n for n in self.items.values() if n.booking_id == booking_id]
