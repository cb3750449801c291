from datetime import datetime
from typing import Optional

from studio.schemas.base import CamelModel

"""
AVAILABILITY ROUTE SCHEMA

Window fields are optional on input so the service can answer with its
own "Missing required fields" message.
"""


#Payload used by admins to open a new availability window
class AvailabilityCreate(CamelModel):
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


#Payload used to edit or deactivate an existing window
class AvailabilityUpdate(AvailabilityCreate):
    is_active: Optional[bool] = None


class AvailabilityOut(CamelModel):
    id: str
    date: str
    start_time: str
    end_time: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AvailabilityDeleted(CamelModel):
    id: str
    message: str


#Bookable start/end pair offered on the booking page
class SlotOut(CamelModel):
    start_time: str
    end_time: str
    availability_id: Optional[str] = None
