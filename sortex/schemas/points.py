from sortex.schemas.common import CamelModel


class PointsTableRead(CamelModel):
    categories: dict[str, int]
    default_points: int
