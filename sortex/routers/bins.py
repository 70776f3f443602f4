from fastapi import APIRouter, Depends, HTTPException, Query, status

from sortex.core.config import get_settings
from sortex.core.errors import BinSourceFailure
from sortex.schemas.bins import BinListResponse, BinRead
from sortex.services.bins import BinSource, get_bin_source
from sortex.services.proximity import BIN_TYPES, Coordinate, nearby

router = APIRouter(prefix="/recycling-bins", tags=["recycling-bins"])


@router.get("", response_model=BinListResponse)
def list_recycling_bins(
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    radius: int | None = Query(default=None, gt=0, le=50_000),
    type: str = Query(default="all"),
    source: BinSource = Depends(get_bin_source),
) -> BinListResponse:
    settings = get_settings()
    type_filter = type.strip().lower()
    if type_filter != "all" and type_filter not in BIN_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_bin_type")

    origin = Coordinate(
        lat=settings.default_map_lat if lat is None else lat,
        lng=settings.default_map_lng if lng is None else lng,
    )
    radius_m = radius or settings.default_map_radius_m
    try:
        candidates = source.fetch(origin, radius_m)
    except BinSourceFailure as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc

    results = nearby(origin, candidates, radius_meters=radius_m, type_filter=type_filter)
    bins = [
        BinRead(
            id=item.bin.id,
            name=item.bin.name,
            lat=item.bin.lat,
            lng=item.bin.lng,
            type=item.bin.type,
            address=item.bin.address,
            description=item.bin.description,
            hours=item.bin.hours,
            distance_km=round(item.distance_km, 3),
        )
        for item in results
    ]
    return BinListResponse(bins=bins, count=len(bins))
