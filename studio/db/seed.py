from sqlalchemy.orm import Session

from studio.db.models import Admin
from studio.core.config import settings
from studio.core.security import hash_password
from studio.core.logger import logger


#Create the first dashboard admin from configuration if none exists
def seed_admin(db: Session):
    existing = db.query(Admin).first()
    if existing:
        return

    admin = Admin(
        email=settings.ADMIN_EMAIL.strip().lower(),
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
    )

    db.add(admin)
    db.commit()

    logger.info(f"Seeded admin account {admin.email}")
