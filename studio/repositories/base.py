from typing import List, Optional, Protocol

"""
STORAGE PORTS

Services only talk to these interfaces. The SQLAlchemy implementations
back the API, the in-memory ones back unit tests; both must behave the
same way.
"""


class AvailabilityRepository(Protocol):
    #All windows ordered by date, then start time
    def list(self) -> List: ...

    def list_for_date(self, date: str) -> List: ...

    def get(self, availability_id: str) -> Optional[object]: ...

    def add(self, window) -> object: ...

    def save(self, window) -> object: ...

    def delete(self, window) -> None: ...

    def rollback(self) -> None: ...


class BookingRepository(Protocol):
    #All bookings ordered by creation time
    def list(self, status: Optional[str] = None, date: Optional[str] = None) -> List: ...

    def list_for_date(self, date: str, status: Optional[str] = None) -> List: ...

    def get(self, booking_id: str) -> Optional[object]: ...

    def add(self, booking) -> object: ...

    def save(self, booking) -> object: ...

    def rollback(self) -> None: ...


class PackageRepository(Protocol):
    def list(self, active_only: bool = False) -> List: ...

    def get(self, package_id: str) -> Optional[object]: ...

    def add(self, package) -> object: ...

    def save(self, package) -> object: ...

    def delete(self, package) -> None: ...


class NotificationRepository(Protocol):
    def add(self, notification) -> object: ...

    def list_for_booking(self, booking_id: str) -> List: ...

    def rollback(self) -> None: ...