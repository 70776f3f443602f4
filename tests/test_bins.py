import httpx
import pytest

from sortex.core.errors import BinSourceFailure
from sortex.services.bins import OverpassBinSource, StaticBinSource, main_category, parse_overpass_elements
from sortex.services.proximity import Coordinate

OVERPASS_PAYLOAD = {
    "elements": [
        {
            "type": "node",
            "id": 111,
            "lat": 42.6981,
            "lon": 23.3201,
            "tags": {
                "amenity": "recycling",
                "name": "Corner Bank",
                "recycling:glass_bottles": "yes",
                "recycling:paper": "yes",
                "addr:street": "Rakovski",
                "addr:housenumber": "96",
                "opening_hours": "Mo-Fr 08:00-18:00",
            },
        },
        {
            "type": "node",
            "id": 222,
            "lat": 42.7001,
            "lon": 23.3222,
            "tags": {"amenity": "recycling", "recycling:organic": "yes", "recycling:glass": "no"},
        },
        {
            "type": "node",
            "id": 333,
            "lat": 42.6900,
            "lon": 23.3100,
            "tags": {"amenity": "recycling", "recycling:electronics": "yes", "addr:street": "Vitosha"},
        },
    ]
}


def test_parse_overpass_elements_maps_tags():
    bins = parse_overpass_elements(OVERPASS_PAYLOAD["elements"])
    assert [b.id for b in bins] == ["111", "222", "333"]

    corner, unnamed, electronics = bins
    assert corner.name == "Corner Bank"
    assert corner.type == "glass"
    assert corner.address == "Rakovski 96"
    assert corner.description == "glass_bottles, paper"
    assert corner.hours == "Mo-Fr 08:00-18:00"
    assert (corner.lat, corner.lng) == (42.6981, 23.3201)

    assert unnamed.name == "Recycling Point #2"
    assert unnamed.type == "mixed"
    assert unnamed.address == "Unknown address"
    assert unnamed.description == "organic"
    assert unnamed.hours == "24/7"

    assert electronics.type == "ewaste"
    assert electronics.address == "Vitosha"


@pytest.mark.parametrize(
    ("materials", "expected"),
    [
        (["clothes"], "textile"),
        (["cans", "plastic"], "metal"),
        (["organic", "cardboard"], "paper"),
        ([], "mixed"),
        (["green_waste"], "mixed"),
    ],
)
def test_main_category_takes_first_known_material(materials, expected):
    assert main_category(materials) == expected


def test_overpass_source_posts_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content.decode()
        return httpx.Response(200, json=OVERPASS_PAYLOAD)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    source = OverpassBinSource("https://overpass.test/api/interpreter", client=client)
    bins = source.fetch(Coordinate(42.698334, 23.319941), 2000)

    assert len(bins) == 3
    assert "around%3A2000%2C42.698334%2C23.319941" in seen["body"]


def test_overpass_source_wraps_upstream_errors():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(504, text="Gateway Timeout")))
    source = OverpassBinSource("https://overpass.test/api/interpreter", client=client)
    with pytest.raises(BinSourceFailure) as excinfo:
        source.fetch(Coordinate(42.0, 23.0), 1000)
    assert excinfo.value.code == "bin_source_unavailable"


def test_overpass_failure_surfaces_as_bad_gateway(client):
    from sortex.services.bins import get_bin_source

    failing = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    client.app.dependency_overrides[get_bin_source] = lambda: OverpassBinSource("https://overpass.test", client=failing)
    response = client.get("/recycling-bins")
    assert response.status_code == 502
    assert response.json() == {"detail": "bin_source_unavailable"}


def test_static_source_returns_copies():
    source = StaticBinSource()
    first = source.fetch(Coordinate(0, 0), 100)
    first.clear()
    assert source.fetch(Coordinate(0, 0), 100)
