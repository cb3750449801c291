from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from studio.db.session import get_db
from studio.db.models import Admin
from studio.api.deps import get_current_admin, get_booking_service
from studio.core.config import RATE_LIMITS
from studio.core.security import rate_limit, make_key
from studio.scheduling.status import BookingStatus
from studio.schemas.bookings import (
    AvailabilityCheckOut,
    BookingCreate,
    BookingCreated,
    BookingOut,
    BookingStats,
    BookingStatusUpdate,
    BookingStatusUpdated,
)
from studio.services.bookings import BookingService
from studio.services.audit import log_action

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"],
)


"""
BOOKING ROUTES => REQUESTS & APPROVALS

Customers submit requests and check slots without auth,
admins list bookings and move them through their lifecycle.
"""


#Public booking request, always created as pending
@router.post("", response_model=BookingCreated, status_code=201)
def create_booking(
    payload: BookingCreate,
    request: Request,
    service: BookingService = Depends(get_booking_service),
):
    limit, window = RATE_LIMITS["booking"]
    if not rate_limit(make_key(request, "booking"), limit, window):
        raise HTTPException(status_code=429, detail="Too many booking attempts")

    booking = service.create(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message,
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        package_id=payload.package_id,
        availability_id=payload.availability_id,
        duration=payload.duration,
    )

    return {
        "success": True,
        "message": "Booking request submitted successfully! You will receive a confirmation email shortly.",
        "booking": booking,
    }


#Check a candidate slot against approved bookings
@router.get("/check-availability", response_model=AvailabilityCheckOut)
def check_availability(
    request: Request,
    date: Optional[str] = Query(None),
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    service: BookingService = Depends(get_booking_service),
):
    limit, window = RATE_LIMITS["check_availability"]
    if not rate_limit(make_key(request, "check_availability"), limit, window):
        raise HTTPException(status_code=429, detail="Too many requests")

    result = service.check_availability(date, start_time, end_time)

    return {
        "available": result.available,
        "conflicts": len(result.conflicts),
        "conflicting_bookings": [
            {
                "id": b.id,
                "start_time": b.start_time,
                "end_time": b.end_time,
                "customer_name": b.name,
            }
            for b in result.conflicts
        ],
    }


# =========================
# 🔒 ADMIN
# =========================
@router.get("", response_model=List[BookingOut])
def list_bookings(
    status: Optional[BookingStatus] = Query(None),
    date: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service),
    admin: Admin = Depends(get_current_admin),
):
    return service.list(status=status, date=date)


@router.get("/stats", response_model=BookingStats)
def booking_stats(
    service: BookingService = Depends(get_booking_service),
    admin: Admin = Depends(get_current_admin),
):
    return service.stats()


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    admin: Admin = Depends(get_current_admin),
):
    return service.get(booking_id)


#Approve, reject, cancel or reopen a booking, optionally with a note
@router.patch("/{booking_id}", response_model=BookingStatusUpdated)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    booking = service.update_status(booking_id, payload.status, payload.admin_notes)

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="booking.status_updated",
        details=f"booking_id={booking.id},status={booking.status}",
    )

    return {"success": True, "booking": booking}
