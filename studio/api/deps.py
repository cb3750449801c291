from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from studio.db.session import get_db
from studio.db.models import Admin
from studio.core.security import decode_access_token
from studio.repositories.sql import (
    SqlAvailabilityRepository,
    SqlBookingRepository,
    SqlNotificationRepository,
    SqlPackageRepository,
)
from studio.services.availability import AvailabilityService
from studio.services.bookings import BookingService
from studio.services.email import BookingNotifier
from studio.services.packages import PackageService

bearer_scheme = HTTPBearer(auto_error=False)


# =========================
# 🔒 Admin auth
# =========================
def get_current_admin(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Admin:
    if creds is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(creds.credentials)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    if payload.get("type") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")

    try:
        admin_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    admin = db.get(Admin, admin_id)
    if not admin:
        raise HTTPException(status_code=401, detail="Admin not found")

    return admin


# =========================
# 🧱 Services bound to the request session
# =========================
def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(
        SqlAvailabilityRepository(db),
        bookings=SqlBookingRepository(db),
    )


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(
        SqlBookingRepository(db),
        SqlPackageRepository(db),
        notifier=BookingNotifier(SqlNotificationRepository(db)),
    )


def get_package_service(db: Session = Depends(get_db)) -> PackageService:
    return PackageService(SqlPackageRepository(db))
