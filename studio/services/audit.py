from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio.db.models import AuditLog
from studio.core.logger import logger


#Persist a single audit log entry without interrupting the main request flow
def log_action(
    db: Session,
    actor_type: str,
    actor_id: int | None,
    action: str,
    details: str | None = None,
):
    try:
        log = AuditLog(
            actor_type=actor_type,
            actor_id=actor_id,
            action=action,
            details=details,
        )
        db.add(log)
        db.commit()

    except SQLAlchemyError as e:
        #Never allow audit logging failures to break application logic
        db.rollback()
        logger.warning(f"Audit log write failed for {action}: {e}")
