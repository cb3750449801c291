from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from studio.db.session import get_db
from studio.db.models import Admin
from studio.api.deps import get_current_admin, get_availability_service, get_package_service
from studio.core.errors import ValidationError
from studio.schemas.availability import (
    AvailabilityCreate,
    AvailabilityDeleted,
    AvailabilityOut,
    AvailabilityUpdate,
    SlotOut,
)
from studio.services.availability import AvailabilityService
from studio.services.packages import PackageService
from studio.services.audit import log_action

router = APIRouter(
    prefix="/availability",
    tags=["Availability"],
)


"""
AVAILABILITY ROUTES => OPEN WINDOWS & BOOKABLE SLOTS

Reads are public so the booking page can offer slots,
writes are admin-only and audited.
"""


#List every window ordered by date
@router.get("", response_model=List[AvailabilityOut])
def list_availability(
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.list()


#Dates from today onward that have at least one active window
@router.get("/dates", response_model=List[str])
def list_open_dates(
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.open_dates()


#Bookable slots on a date for a package (or an explicit duration in hours)
@router.get("/slots", response_model=List[SlotOut])
def list_slots(
    date: str = Query(...),
    package_id: Optional[str] = Query(None, alias="packageId"),
    duration: Optional[float] = Query(None, gt=0),
    service: AvailabilityService = Depends(get_availability_service),
    packages: PackageService = Depends(get_package_service),
):
    if package_id:
        duration = packages.get(package_id).duration

    if duration is None:
        raise ValidationError("Missing parameters: packageId or duration")

    return service.bookable_slots(date, duration)


@router.post("", response_model=AvailabilityOut)
def create_availability(
    payload: AvailabilityCreate,
    service: AvailabilityService = Depends(get_availability_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    window = service.create(payload.date, payload.start_time, payload.end_time)

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="availability.created",
        details=f"availability_id={window.id},date={window.date}",
    )

    return window


@router.put("/{availability_id}", response_model=AvailabilityOut)
def update_availability(
    availability_id: str,
    payload: AvailabilityUpdate,
    service: AvailabilityService = Depends(get_availability_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    window = service.update(
        availability_id,
        payload.date,
        payload.start_time,
        payload.end_time,
        is_active=payload.is_active,
    )

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="availability.updated",
        details=f"availability_id={window.id},is_active={window.is_active}",
    )

    return window


@router.delete("/{availability_id}", response_model=AvailabilityDeleted)
def delete_availability(
    availability_id: str,
    service: AvailabilityService = Depends(get_availability_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    service.delete(availability_id)

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="availability.deleted",
        details=f"availability_id={availability_id}",
    )

    return {"id": availability_id, "message": "Availability slot deleted successfully"}
