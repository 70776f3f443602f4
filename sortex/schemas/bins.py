from sortex.schemas.common import CamelModel


class BinRead(CamelModel):
    id: str
    name: str
    lat: float
    lng: float
    type: str
    address: str
    description: str
    hours: str
    distance_km: float


class BinListResponse(CamelModel):
    bins: list[BinRead]
    count: int
