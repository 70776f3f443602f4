from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import func, select

from sortex.db.session import SessionLocal
from sortex.models.user import User
from sortex.services import ledger


def test_ensure_user_creates_with_zero_points(db, make_identity):
    user = ledger.ensure_user(db, make_identity("new_user", name="New"))
    assert user.points == 0
    assert user.email == "new_user@example.com"
    assert user.name == "New"


def test_ensure_user_is_idempotent(db, make_identity):
    identity = make_identity("repeat")
    ledger.ensure_user(db, identity)
    ledger.credit_points(db, "repeat", 25)
    db.commit()

    again = ledger.ensure_user(db, identity)
    assert again.points == 25
    assert db.scalar(select(func.count(User.id)).where(User.id == "repeat")) == 1


def test_concurrent_bootstrap_creates_one_row(db, make_identity):
    identity = make_identity("racer")

    def bootstrap(_):
        session = SessionLocal()
        try:
            return ledger.ensure_user(session, identity).points
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(bootstrap, range(12)))

    assert results == [0] * 12
    assert db.scalar(select(func.count(User.id)).where(User.id == "racer")) == 1


def test_credit_points_adds_in_place(db, make_identity):
    ledger.ensure_user(db, make_identity("saver"))
    ledger.credit_points(db, "saver", 30)
    ledger.credit_points(db, "saver", 20)
    db.commit()
    assert ledger.user_points(db, "saver") == 50


def test_user_points_for_unknown_user_is_zero(db):
    assert ledger.user_points(db, "ghost") == 0
