import math
from collections.abc import Iterable
from dataclasses import dataclass

from sortex.services.points import RECYCLING_CATEGORIES

EARTH_RADIUS_KM = 6371.0

MIXED = "mixed"
BIN_TYPES = (*RECYCLING_CATEGORIES, MIXED)


@dataclass(slots=True, frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(slots=True)
class Bin:
    id: str
    name: str
    lat: float
    lng: float
    type: str = MIXED
    address: str = "Unknown address"
    description: str = ""
    hours: str = "24/7"


@dataclass(slots=True)
class NearbyBin:
    bin: Bin
    distance_km: float


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def matches_type(bin_: Bin, type_filter: str | None) -> bool:
    if not type_filter or type_filter == "all":
        return True
    return bin_.type == type_filter


def nearby(
    origin: Coordinate,
    bins: Iterable[Bin],
    radius_meters: float | None = None,
    type_filter: str | None = None,
) -> list[NearbyBin]:
    """Bins of the requested type within ``radius_meters`` of ``origin``, closest first.

    ``sorted`` is stable, so bins at equal distance keep their input order.
    """
    results: list[NearbyBin] = []
    for bin_ in bins:
        if not matches_type(bin_, type_filter):
            continue
        distance = haversine_km(origin.lat, origin.lng, bin_.lat, bin_.lng)
        if radius_meters is not None and distance * 1000 > radius_meters:
            continue
        results.append(NearbyBin(bin=bin_, distance_km=distance))
    return sorted(results, key=lambda item: item.distance_km)
