from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from studio.schemas.base import CamelModel
from studio.scheduling.status import BookingStatus

"""
BOOKINGS ROUTE SCHEMA
"""


#Payload used by the public booking form
class BookingCreate(CamelModel):
    name: str
    email: EmailStr
    phone: str
    message: Optional[str] = None
    date: str
    start_time: str
    end_time: str
    package_id: str
    availability_id: Optional[str] = None
    duration: Optional[float] = Field(default=None, gt=0)


#Response model representing a booking returned to the dashboard
class BookingOut(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    message: Optional[str] = None
    date: str
    start_time: str
    end_time: str
    package_id: str
    availability_id: Optional[str] = None
    duration: float
    status: BookingStatus
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BookingCreated(CamelModel):
    success: bool
    message: str
    booking: BookingOut


#Payload used by admins to move a booking through its lifecycle
class BookingStatusUpdate(CamelModel):
    status: BookingStatus
    admin_notes: Optional[str] = None


class BookingStatusUpdated(CamelModel):
    success: bool
    booking: BookingOut


class ConflictingBooking(CamelModel):
    id: str
    start_time: str
    end_time: str
    customer_name: str


class AvailabilityCheckOut(CamelModel):
    available: bool
    conflicts: int
    conflicting_bookings: List[ConflictingBooking]


#Dashboard counters, revenue sums approved bookings only
class BookingStats(CamelModel):
    total: int
    pending: int
    approved: int
    rejected: int
    cancelled: int
    revenue: float
