"""Where recycling bin locations come from."""

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Protocol

import httpx

from sortex.core.config import get_settings
from sortex.core.errors import BinSourceFailure
from sortex.services.proximity import MIXED, Bin, Coordinate

logger = logging.getLogger(__name__)

# OSM recycling:<material> tags mapped onto our categories.
MATERIAL_CATEGORIES = {
    "plastic": "plastic",
    "plastic_bottles": "plastic",
    "plastic_packaging": "plastic",
    "glass": "glass",
    "glass_bottles": "glass",
    "paper": "paper",
    "cardboard": "paper",
    "paper_packaging": "paper",
    "metal": "metal",
    "cans": "metal",
    "scrap_metal": "metal",
    "electronics": "ewaste",
    "small_appliances": "ewaste",
    "batteries": "ewaste",
    "textile": "textile",
    "clothes": "textile",
    "shoes": "textile",
}

STATIC_BINS = [
    Bin(
        id="static-1",
        name="NDK Recycling Point",
        lat=42.685167,
        lng=23.318889,
        type="glass",
        address="bul. Bulgaria 1",
        description="glass, glass_bottles",
        hours="24/7",
    ),
    Bin(
        id="static-2",
        name="Vitosha Blvd Containers",
        lat=42.691944,
        lng=23.320556,
        type="plastic",
        address="bul. Vitosha 18",
        description="plastic, plastic_bottles, cans",
        hours="24/7",
    ),
    Bin(
        id="static-3",
        name="Sofia University Paper Bank",
        lat=42.693611,
        lng=23.334722,
        type="paper",
        address="bul. Tsar Osvoboditel 15",
        description="paper, cardboard",
        hours="Mo-Fr 08:00-20:00",
    ),
    Bin(
        id="static-4",
        name="Serdika E-Waste Drop-off",
        lat=42.697222,
        lng=23.321389,
        type="ewaste",
        address="pl. Nezavisimost 1",
        description="electronics, batteries",
        hours="Mo-Sa 09:00-18:00",
    ),
    Bin(
        id="static-5",
        name="Zhenski Pazar Textile Bank",
        lat=42.702500,
        lng=23.316111,
        type="textile",
        address="ul. Stefan Stambolov 2",
        description="clothes, shoes",
        hours="24/7",
    ),
    Bin(
        id="static-6",
        name="Lavov Most Metal Collection",
        lat=42.705278,
        lng=23.324167,
        type="metal",
        address="bul. Knyaginya Maria Luiza 60",
        description="scrap_metal, cans",
        hours="Mo-Fr 07:00-19:00",
    ),
]


class BinSource(Protocol):
    def fetch(self, origin: Coordinate, radius_meters: int) -> list[Bin]: ...


class StaticBinSource:
    def __init__(self, bins: Sequence[Bin] = tuple(STATIC_BINS)) -> None:
        self.bins = list(bins)

    def fetch(self, origin: Coordinate, radius_meters: int) -> list[Bin]:
        return list(self.bins)


class OverpassBinSource:
    def __init__(self, url: str, timeout: float = 25.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client

    def build_query(self, origin: Coordinate, radius_meters: int) -> str:
        return (
            f"[out:json][timeout:{int(self.timeout)}];"
            f'(node["amenity"="recycling"](around:{int(radius_meters)},{origin.lat},{origin.lng}););'
            "out body;"
        )

    def fetch(self, origin: Coordinate, radius_meters: int) -> list[Bin]:
        query = self.build_query(origin, radius_meters)
        try:
            if self._client is not None:
                response = self._client.post(self.url, data={"data": query}, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, data={"data": query})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("bin_source_failed", extra={"source": "overpass", "error": str(exc)})
            raise BinSourceFailure(str(exc)) from exc
        return parse_overpass_elements(payload.get("elements", []))


def parse_overpass_elements(elements: list[dict]) -> list[Bin]:
    bins: list[Bin] = []
    for index, element in enumerate(elements):
        if element.get("lat") is None or element.get("lon") is None:
            continue
        tags = element.get("tags") or {}
        materials = [
            key.removeprefix("recycling:")
            for key, value in tags.items()
            if key.startswith("recycling:") and value == "yes"
        ]
        street = tags.get("addr:street")
        bins.append(
            Bin(
                id=str(element.get("id", index)),
                name=tags.get("name") or f"Recycling Point #{index + 1}",
                lat=float(element["lat"]),
                lng=float(element["lon"]),
                type=main_category(materials),
                address=f"{street} {tags.get('addr:housenumber', '')}".strip() if street else "Unknown address",
                description=", ".join(materials),
                hours=tags.get("opening_hours") or "24/7",
            )
        )
    return bins


def main_category(materials: list[str]) -> str:
    for material in materials:
        category = MATERIAL_CATEGORIES.get(material)
        if category:
            return category
    return MIXED


@lru_cache(maxsize=1)
def get_bin_source() -> BinSource:
    settings = get_settings()
    if settings.bin_source == "static":
        return StaticBinSource()
    return OverpassBinSource(settings.overpass_url, timeout=settings.overpass_timeout_seconds)
