"""User balances and upload history in the ledger store."""

import logging

from sqlalchemy import func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sortex.core.security import Identity
from sortex.models.upload import Upload
from sortex.models.user import User

_UPSERT_DIALECTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}

logger = logging.getLogger(__name__)


def ensure_user(db: Session, identity: Identity) -> User:
    """Create the caller's row if it is missing and return it.

    Uses INSERT ... ON CONFLICT DO NOTHING so concurrent first requests from
    the same identity end up with a single row and no duplicate-key error.
    """
    values = {"id": identity.user_id, "email": identity.email or "", "name": identity.name, "points": 0}
    dialect_insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    created = False
    if dialect_insert is not None:
        result = db.execute(dialect_insert(User).values(**values).on_conflict_do_nothing(index_elements=[User.id]))
        created = result.rowcount == 1
    else:
        savepoint = db.begin_nested()
        try:
            db.execute(insert(User).values(**values))
            savepoint.commit()
            created = True
        except IntegrityError:
            savepoint.rollback()
    db.commit()
    if created:
        logger.info("user_created", extra={"user_id": identity.user_id, "email": values["email"]})
    return db.scalars(select(User).where(User.id == identity.user_id).execution_options(populate_existing=True)).one()


def credit_points(db: Session, user_id: str, amount: int) -> None:
    """Add ``amount`` to the balance in place. Does not commit."""
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(points=User.points + amount)
        .execution_options(synchronize_session=False)
    )


def user_points(db: Session, user_id: str) -> int:
    points = db.scalar(select(User.points).where(User.id == user_id))
    return int(points or 0)


def count_uploads(db: Session, user_id: str) -> int:
    return int(db.scalar(select(func.count(Upload.id)).where(Upload.user_id == user_id)) or 0)


def list_uploads(db: Session, user_id: str, limit: int | None = None) -> list[Upload]:
    query = (
        select(Upload)
        .where(Upload.user_id == user_id)
        .order_by(Upload.uploaded_at.desc(), Upload.id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return list(db.scalars(query).all())


def find_submission(db: Session, user_id: str, submission_key: str) -> Upload | None:
    return db.scalar(select(Upload).where(Upload.user_id == user_id, Upload.submission_key == submission_key))
