from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sortex.core.config import get_settings
from sortex.core.security import Identity
from sortex.db.session import get_db
from sortex.routers.deps import get_current_identity
from sortex.schemas.dashboard import DashboardRead
from sortex.schemas.upload import UploadSummary
from sortex.services import ledger
from sortex.services.ranking import rank_of

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardRead)
def get_dashboard(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)) -> DashboardRead:
    user = ledger.ensure_user(db, identity)
    recent = ledger.list_uploads(db, user.id, limit=get_settings().recent_uploads_limit)
    return DashboardRead(
        points=user.points,
        rank=rank_of(db, user.id),
        total_items=ledger.count_uploads(db, user.id),
        recent_uploads=[UploadSummary.model_validate(row) for row in recent],
    )
