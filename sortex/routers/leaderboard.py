from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sortex.core.config import get_settings
from sortex.core.security import Identity
from sortex.db.session import get_db
from sortex.routers.deps import get_optional_identity
from sortex.schemas.leaderboard import LeaderboardEntryRead, LeaderboardRead
from sortex.services.ranking import leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardRead)
def get_leaderboard(
    limit: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
) -> LeaderboardRead:
    entries = leaderboard(
        db,
        limit=limit or get_settings().leaderboard_limit,
        current_user_id=identity.user_id if identity else None,
    )
    return LeaderboardRead(leaderboard=[LeaderboardEntryRead.model_validate(entry) for entry in entries])
