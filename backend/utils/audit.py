# backend/utils/audit.py
import logging

from sqlalchemy.orm import Session

from models.log import Log

logger = logging.getLogger("apd.audit")


# Persists one audit entry and mirrors it to the application log.
# Called after the business change has been committed.
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()

    level = logging.INFO if status == "SUCCESS" else logging.WARNING
    logger.log(level, "%s %s %s user=%s ip=%s", action, resource, status, user_id, ip)
