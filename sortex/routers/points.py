from fastapi import APIRouter

from sortex.schemas.points import PointsTableRead
from sortex.services.points import points_table

router = APIRouter(prefix="/points", tags=["points"])


@router.get("", response_model=PointsTableRead)
def get_points_table() -> PointsTableRead:
    return PointsTableRead.model_validate(points_table())
