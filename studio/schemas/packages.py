from datetime import datetime
from typing import Optional

from pydantic import Field

from studio.schemas.base import CamelModel

"""
PACKAGES ROUTE SCHEMA
"""


#Payload used by admins to create a package
class PackageCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    image: Optional[str] = None
    price: float = Field(ge=0)
    duration: float = Field(gt=0)
    is_active: bool = True


#Full replacement of a package, isActive is left unchanged when omitted
class PackageUpdate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    image: Optional[str] = None
    price: float = Field(ge=0)
    duration: float = Field(gt=0)
    is_active: Optional[bool] = None


class PackageOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: float
    duration: float
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PackageImageOut(CamelModel):
    url: str
