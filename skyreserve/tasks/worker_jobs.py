import logging
from datetime import datetime
from sqlalchemy.orm import Session
from skyreserve.core.errors import PersistenceError, SchemaDriftError
from skyreserve.db.session import SessionLocal
from skyreserve.services.cancellation_service import reconcile_pending

logger = logging.getLogger(__name__)


def check_cancellations(now: datetime | None = None, session_factory=None) -> dict:
    """Finalize due pending cancellations. Never raises; run by the scheduler thread and Celery beat."""
    db: Session = (session_factory or SessionLocal)()
    try:
        try:
            updated = reconcile_pending(db, now)
        except SchemaDriftError as e:
            # DB not migrated yet; don't crash the worker.
            logger.warning("Skipping cancellation check, schema out of date: %s", e)
            return {"skipped": True, "reason": "schema_drift"}
        except PersistenceError:
            logger.exception("Cancellation check failed")
            return {"skipped": True, "reason": "store_error"}
        return {"updated": updated}
    finally:
        db.close()
