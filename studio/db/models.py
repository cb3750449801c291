from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Enum,
    Float,
    Numeric,
    Index,
    CheckConstraint,
    Text,
)
from sqlalchemy.sql import func

from studio.db.base import Base


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =========================================================
# SHARED ENUMS (centralised to avoid duplication issues):
# =========================================================


#Lifecycle state for bookings, see scheduling/status.py for the transitions
BookingStatusEnum = Enum(
    "pending", "approved", "rejected", "cancelled", name="booking_status_enum"
)


#Outcome of a single email attempt
EmailStatusEnum = Enum("sent", "failed", name="email_status_enum")


#Actor type used in audit logging
ActorTypeEnum = Enum("system", "admin", name="actor_type_enum")


# =========================================================
# PACKAGES (bookable studio sessions):
# =========================================================


class Package(Base):
    __tablename__ = "packages"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    #Public URL of the package image, owned by the storage collaborator
    image = Column(String, nullable=True)

    #Pricing and session length in hours
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    duration = Column(Float, nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_package_price_positive"),
        CheckConstraint("duration > 0", name="ck_package_duration_positive"),
    )


# =========================================================
# AVAILABILITY (admin-defined open windows):
# =========================================================


class Availability(Base):
    __tablename__ = "availability"

    id = Column(String(36), primary_key=True, default=_new_id)

    #Calendar date and window bounds as YYYY-MM-DD / HH:MM strings
    date = Column(String(10), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_availability_time_valid"),
    )


# =========================================================
# BOOKINGS (customer requests):
# =========================================================


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_new_id)

    #Customer contact details
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    message = Column(Text, nullable=True)

    #Requested slot, denormalized from the window it was carved from
    date = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    duration = Column(Float, nullable=False)

    #Plain references, a deleted window or package leaves them dangling
    package_id = Column(String(36), nullable=False, index=True)
    availability_id = Column(String(36), nullable=True)

    status = Column(BookingStatusEnum, nullable=False, default="pending")
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_booking_date_status", "date", "status"),
        CheckConstraint("end_time > start_time", name="ck_booking_time_valid"),
    )


# =========================================================
# EMAIL NOTIFICATIONS (delivery audit trail):
# =========================================================


class EmailNotification(Base):
    __tablename__ = "email_notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    booking_id = Column(String(36), nullable=False, index=True)
    type = Column(String, nullable=False)
    recipient = Column(String, nullable=False)
    status = Column(EmailStatusEnum, nullable=False)

    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


# =========================================================
# ADMINS (dashboard users):
# =========================================================


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)


# =========================================================
# AUDIT LOGS (immutable admin trail):
# =========================================================


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    actor_type = Column(ActorTypeEnum, nullable=False)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(String, nullable=False)
    details = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
