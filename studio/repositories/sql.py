from typing import List, Optional

from sqlalchemy.orm import Session

from studio.db.models import Availability, Booking, EmailNotification, Package


class _SqlRepository:
    model = None

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: str):
        return self.db.get(self.model, entity_id)

    def add(self, entity):
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def save(self, entity):
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        self.db.delete(entity)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


class SqlAvailabilityRepository(_SqlRepository):
    model = Availability

    def list(self) -> List[Availability]:
        return (
            self.db.query(Availability)
            .order_by(Availability.date.asc(), Availability.start_time.asc())
            .all()
        )

    def list_for_date(self, date: str) -> List[Availability]:
        return (
            self.db.query(Availability)
            .filter(Availability.date == date)
            .order_by(Availability.start_time.asc())
            .all()
        )


class SqlBookingRepository(_SqlRepository):
    model = Booking

    def list(self, status: Optional[str] = None, date: Optional[str] = None) -> List[Booking]:
        query = self.db.query(Booking)

        if status is not None:
            query = query.filter(Booking.status == status)

        if date is not None:
            query = query.filter(Booking.date == date)

        return query.order_by(Booking.created_at.asc()).all()

    def list_for_date(self, date: str, status: Optional[str] = None) -> List[Booking]:
        query = self.db.query(Booking).filter(Booking.date == date)

        if status is not None:
            query = query.filter(Booking.status == status)

        return query.order_by(Booking.start_time.asc()).all()


class SqlPackageRepository(_SqlRepository):
    model = Package

    def list(self, active_only: bool = False) -> List[Package]:
        query = self.db.query(Package)

        if active_only:
            query = query.filter(Package.is_active.is_(True))

        return query.order_by(Package.created_at.asc()).all()


class SqlNotificationRepository(_SqlRepository):
    model = EmailNotification

    def list_for_booking(self, booking_id: str) -> List[EmailNotification]:
        return (
            self.db.query(EmailNotification)
            .filter(EmailNotification.booking_id == booking_id)
            .order_by(EmailNotification.created_at.asc())
            .all()
        )
