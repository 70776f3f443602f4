import logging
from datetime import timedelta

from sortex.core.config import get_settings
from sortex.db.session import SessionLocal
from sortex.services.orphans import sweep_orphaned_objects
from sortex.services.storage import get_object_store
from sortex.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="sortex.workers.tasks.sweep_orphaned_objects_job")
def sweep_orphaned_objects_job() -> int:
    settings = get_settings()
    db = SessionLocal()
    try:
        deleted = sweep_orphaned_objects(db, get_object_store(), timedelta(minutes=settings.orphan_grace_minutes))
    except Exception:
        logger.exception("orphan_sweep_failed")
        raise
    finally:
        db.close()
    return deleted
