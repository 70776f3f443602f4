import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from sortex.models.upload import Upload
from sortex.services.storage import ObjectStore

logger = logging.getLogger(__name__)


def sweep_orphaned_objects(db: Session, storage: ObjectStore, grace: timedelta) -> int:
    """Delete stored objects older than ``grace`` that no upload row points at."""
    cutoff = datetime.now(timezone.utc) - grace
    candidates = [obj for obj in storage.list_objects() if obj.modified_at < cutoff]
    if not candidates:
        return 0

    keys = [obj.key for obj in candidates]
    referenced = set(db.scalars(select(Upload.storage_key).where(Upload.storage_key.in_(keys))).all())
    deleted = 0
    for key in keys:
        if key in referenced:
            continue
        storage.delete(key)
        deleted += 1
    if deleted:
        logger.info("orphaned_objects_deleted", extra={"count": deleted})
    return deleted
