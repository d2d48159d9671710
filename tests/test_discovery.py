import json
from pathlib import Path

import httpx

from src.florist_planner.models.domain import GeoPoint
from src.florist_planner.persistence.store import FloristStore
from src.florist_planner.services.florists.discovery import discover_florists, write_florists_file
from src.florist_planner.services.maps.gateway import MapsGateway
from src.florist_planner.services.maps.google_client import GoogleMapsClient
from src.florist_planner.services.seed import SAMPLE_ROUTE_NAME, seed_store

FARM = GeoPoint(45.4426, -122.2536)


def _offline_gateway() -> MapsGateway:
    def factory() -> GoogleMapsClient:
        raise ValueError("Google Maps API key is not configured.")

    return MapsGateway(client_factory=factory, origin=FARM)


def _live_gateway(details_status: int = 200) -> MapsGateway:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/geocode/json"):
            return httpx.Response(
                200,
                json={"status": "OK", "results": [{"geometry": {"location": {"lat": 45.4426, "lng": -122.2536}}}]},
            )
        if path.endswith("/place/textsearch/json"):
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "results": [
                        {
                            "name": "Real Blooms",
                            "formatted_address": "1 Real St, Sandy, OR",
                            "place_id": "real_1",
                            "geometry": {"location": {"lat": 45.40, "lng": -122.26}},
                        }
                    ],
                },
            )
        if details_status != 200:
            return httpx.Response(details_status)
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "result": {
                    "place_id": "real_1",
                    "formatted_phone_number": "(503) 555-0000",
                    "opening_hours": {"weekday_text": ["Monday: 8:00 AM – 4:00 PM"]},
                },
            },
        )

    transport = httpx.MockTransport(handler)
    return MapsGateway(
        client_factory=lambda: GoogleMapsClient(api_key="test-key", transport=transport),
        origin=FARM,
    )


def test_offline_discovery_returns_tagged_sample_dataset() -> None:
    result = discover_florists(_offline_gateway(), query="florist", max_workers=2)

    assert result.source == "fallback"
    assert not result.authoritative
    assert [r.name for r in result.records] == [
        "Sandy Floral Boutique",
        "Portland Petals",
        "Gresham Flower Shop",
    ]
    assert result.details_fetched == 3
    assert result.records[0].business_hours.saturday == "10:00 AM – 4:00 PM"
    assert result.center == FARM
    assert result.warnings


def test_live_discovery_merges_live_details() -> None:
    result = discover_florists(_live_gateway(), query="florist")

    assert result.source == "live"
    assert result.warnings == []
    record = result.records[0]
    assert record.name == "Real Blooms"
    assert record.phone_number == "(503) 555-0000"
    assert record.business_hours.monday == "8:00 AM – 4:00 PM"


def test_live_discovery_discards_fallback_details() -> None:
    result = discover_florists(_live_gateway(details_status=500), query="florist")

    assert result.source == "live"
    assert result.details_fetched == 0
    assert result.records[0].business_hours is None
    assert result.records[0].phone_number is None


def test_write_florists_file(tmp_path: Path) -> None:
    result = discover_florists(_offline_gateway(), query="florist")
    path = write_florists_file(result.records, tmp_path / "florists.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert [item["name"] for item in payload] == [r.name for r in result.records]
    assert payload[0]["placeId"] == "ChIJN1t_tDeuEmsRUsoyG83frY4_1"


def test_seed_store_creates_territories_and_sample_route(tmp_path: Path) -> None:
    store = FloristStore(path=tmp_path / "store.json")
    records = discover_florists(_offline_gateway(), query="florist").records

    summary = seed_store(store, records, FARM)

    assert summary.created == 3
    territories = {t.name: t for t in store.list_territories()}
    assert set(territories) == {"Portland Metro", "Sandy Area"}
    assert len(store.florist_ids_for(territories["Portland Metro"].id)) == 3
    assert len(store.florist_ids_for(territories["Sandy Area"].id)) == 2
    routes = store.list_routes()
    assert [r.name for r in routes] == [SAMPLE_ROUTE_NAME]
    assert [s.stop_order for s in store.stops_for(routes[0].id)] == [1, 2, 3]

    seed_store(store, records, FARM)
    assert len(store.list_florists()) == 3
    assert len(store.list_routes()) == 1
