from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from sortex.models.upload import Upload
from sortex.models.user import User


@dataclass(slots=True)
class LeaderboardEntry:
    id: str
    name: str | None
    points: int
    rank: int
    position: int
    recycled: int
    is_current_user: bool


def rank_of(db: Session, user_id: str) -> int:
    """1 + the number of users with strictly more points. Tied users share a rank."""
    points = db.scalar(select(User.points).where(User.id == user_id)) or 0
    ahead = db.scalar(select(func.count(User.id)).where(User.points > points)) or 0
    return int(ahead) + 1


def leaderboard(db: Session, limit: int = 50, current_user_id: str | None = None) -> list[LeaderboardEntry]:
    upload_counts = (
        select(Upload.user_id, func.count(Upload.id).label("recycled"))
        .group_by(Upload.user_id)
        .subquery()
    )
    rows = db.execute(
        select(User.id, User.name, User.points, func.coalesce(upload_counts.c.recycled, 0))
        .outerjoin(upload_counts, upload_counts.c.user_id == User.id)
        .order_by(User.points.desc(), User.created_at.asc(), User.id.asc())
        .limit(limit)
    ).all()

    entries: list[LeaderboardEntry] = []
    rank = 0
    previous_points: int | None = None
    for position, (user_id, name, points, recycled) in enumerate(rows, start=1):
        # Everyone with more points sorts earlier, so the first position of a
        # points value is that value's dominance rank.
        if points != previous_points:
            rank = position
            previous_points = points
        entries.append(
            LeaderboardEntry(
                id=user_id,
                name=name,
                points=int(points),
                rank=rank,
                position=position,
                recycled=int(recycled),
                is_current_user=current_user_id is not None and user_id == current_user_id,
            )
        )
    return entries
