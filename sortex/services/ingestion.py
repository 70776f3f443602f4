import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sortex.core.errors import LedgerWriteFailure, StorageFailure
from sortex.core.security import Identity
from sortex.models.upload import Upload
from sortex.services import ledger
from sortex.services.points import normalize_category, points_for
from sortex.services.storage import IncomingFile, ObjectStore, build_object_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SubmissionResult:
    upload: Upload
    points_earned: int
    new_points: int
    duplicate: bool = False


def submit_upload(
    db: Session,
    storage: ObjectStore,
    identity: Identity,
    incoming: IncomingFile,
    declared_category: str | None = None,
    submission_key: str | None = None,
) -> SubmissionResult:
    """Store the photo, record the upload and credit its points.

    The upload row and the balance increment share one transaction. If that
    transaction fails the stored object is removed again, so a failed
    submission leaves neither history nor balance changed.
    """
    user_id = ledger.ensure_user(db, identity).id

    if submission_key:
        existing = ledger.find_submission(db, user_id, submission_key)
        if existing is not None:
            return _duplicate_result(db, existing)

    category = normalize_category(declared_category)
    points_earned = points_for(category)
    key = build_object_key(user_id, incoming.file_name)

    try:
        file_url = storage.put(key, incoming.data, incoming.content_type)
    except StorageFailure:
        logger.exception("upload_storage_failed", extra={"user_id": user_id, "storage_key": key})
        raise
    except (OSError, ValueError) as exc:
        logger.exception("upload_storage_failed", extra={"user_id": user_id, "storage_key": key})
        raise StorageFailure(str(exc)) from exc
    logger.info("upload_stored", extra={"user_id": user_id, "storage_key": key, "file_size": incoming.size})

    upload = Upload(
        user_id=user_id,
        file_name=incoming.file_name,
        file_url=file_url,
        file_type=incoming.content_type,
        file_size=incoming.size,
        recycling_type=category,
        points_earned=points_earned,
        storage_key=key,
        submission_key=submission_key or None,
    )
    try:
        db.add(upload)
        db.flush()
        ledger.credit_points(db, user_id, points_earned)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        _discard_object(storage, key)
        if submission_key:
            winner = ledger.find_submission(db, user_id, submission_key)
            if winner is not None:
                return _duplicate_result(db, winner)
        logger.exception("upload_ledger_write_failed", extra={"user_id": user_id, "storage_key": key})
        raise LedgerWriteFailure(str(exc)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        _discard_object(storage, key)
        logger.exception("upload_ledger_write_failed", extra={"user_id": user_id, "storage_key": key})
        raise LedgerWriteFailure(str(exc)) from exc

    new_points = ledger.user_points(db, user_id)
    logger.info(
        "upload_credited",
        extra={"user_id": user_id, "upload_id": upload.id, "points_earned": points_earned, "balance": new_points},
    )
    return SubmissionResult(upload=upload, points_earned=points_earned, new_points=new_points)


def _duplicate_result(db: Session, upload: Upload) -> SubmissionResult:
    logger.info("upload_duplicate_submission", extra={"user_id": upload.user_id, "upload_id": upload.id})
    return SubmissionResult(
        upload=upload,
        points_earned=upload.points_earned,
        new_points=ledger.user_points(db, upload.user_id),
        duplicate=True,
    )


def _discard_object(storage: ObjectStore, key: str) -> None:
    # Left-behind objects are picked up by the orphan sweep.
    try:
        storage.delete(key)
    except (OSError, ValueError):
        logger.warning("upload_object_cleanup_failed", extra={"storage_key": key})
