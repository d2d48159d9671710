from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from src.florist_planner.models.domain import FloristRecord, GeoPoint, PricingItem
from src.florist_planner.persistence.store import FloristStore
from src.florist_planner.services.florists import service as florist_service
from src.florist_planner.services.maps.gateway import MapsGateway
from src.florist_planner.services.maps.google_client import GoogleMapsClient
from src.florist_planner.services.territories.service import create_territory

FARM = GeoPoint(45.4426, -122.2536)


def _store(tmp_path: Path) -> FloristStore:
    return FloristStore(path=tmp_path / "store.json")


def _live_gateway(lat: float, lng: float) -> MapsGateway:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "formatted_address": request.url.params["address"],
                        "geometry": {"location": {"lat": lat, "lng": lng}},
                    }
                ],
            },
        )

    transport = httpx.MockTransport(handler)
    return MapsGateway(
        client_factory=lambda: GoogleMapsClient(api_key="test-key", transport=transport),
        origin=FARM,
    )


def _offline_gateway() -> MapsGateway:
    def factory() -> GoogleMapsClient:
        raise ValueError("Google Maps API key is not configured.")

    return MapsGateway(client_factory=factory, origin=FARM)


def _with_territories(store: FloristStore) -> tuple[str, str]:
    metro = create_territory(store, name="Portland Metro", max_distance_miles=30.0)
    sandy = create_territory(store, name="Sandy Area", max_distance_miles=10.0)
    return metro.id, sandy.id


def test_create_geocodes_and_assigns_territories(tmp_path: Path) -> None:
    store = _store(tmp_path)
    metro, sandy = _with_territories(store)

    creation = florist_service.create_florist(
        store,
        _live_gateway(45.3975, -122.2611),
        name="Sandy Floral Boutique",
        address="123 Main St, Sandy, OR 97055",
        pricing_items=[PricingItem("Roses", "$8-$15")],
    )

    record = creation.record
    assert creation.geocode_source == "live"
    assert record.location == GeoPoint(45.3975, -122.2611)
    assert record.distance_miles == pytest.approx(3.14, abs=0.05)
    assert store.territory_ids_for(record.id) == {metro, sandy}
    assert store.get_florist(record.id).pricing_items[0].item_name == "Roses"


def test_create_with_fallback_geocode_stores_no_coordinates(tmp_path: Path) -> None:
    store = _store(tmp_path)
    _with_territories(store)

    creation = florist_service.create_florist(
        store, _offline_gateway(), name="Portland Petals", address="456 Flower Ave, Portland, OR"
    )

    assert creation.geocode_source == "fallback"
    assert creation.record.location is None
    assert creation.record.distance_miles is None
    assert store.territory_ids_for(creation.record.id) == set()


def test_create_with_explicit_location_skips_geocoding(tmp_path: Path) -> None:
    store = _store(tmp_path)

    creation = florist_service.create_florist(
        store,
        _offline_gateway(),
        name="Portland Petals",
        address="456 Flower Ave",
        location=GeoPoint(45.5152, -122.6784),
    )

    assert creation.geocode_source is None
    assert creation.record.distance_miles == pytest.approx(21.2, abs=0.2)


def test_create_requires_name_and_address(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(ValueError):
        florist_service.create_florist(store, _offline_gateway(), name=" ", address="x")
    with pytest.raises(ValueError):
        florist_service.create_florist(store, _offline_gateway(), name="x", address="")
    assert store.list_florists() == []


def test_location_change_recomputes_distance_and_territories(tmp_path: Path) -> None:
    store = _store(tmp_path)
    metro, sandy = _with_territories(store)
    record = florist_service.create_florist(
        store, _offline_gateway(), name="Mover", address="1 Road", location=GeoPoint(45.3975, -122.2611)
    ).record

    moved = florist_service.set_location(store, record.id, GeoPoint(45.5152, -122.6784), FARM)

    assert moved.distance_miles == pytest.approx(21.2, abs=0.2)
    assert store.territory_ids_for(record.id) == {metro}

    cleared = florist_service.set_location(store, record.id, None, FARM)
    assert cleared.distance_miles is None
    assert store.territory_ids_for(record.id) == set()


def test_address_update_regeocodes(tmp_path: Path) -> None:
    store = _store(tmp_path)
    record = florist_service.create_florist(
        store, _offline_gateway(), name="Mover", address="1 Road", location=GeoPoint(45.3975, -122.2611)
    ).record

    change = florist_service.update_florist(
        store,
        _live_gateway(45.5152, -122.6784),
        record.id,
        {"address": "456 Flower Ave, Portland, OR", "rating": 4.5},
    )
    updated = change.record

    assert change.geocode_source == "live"
    assert updated.address == "456 Flower Ave, Portland, OR"
    assert updated.rating == 4.5
    assert updated.location == GeoPoint(45.5152, -122.6784)
    assert store.get_florist(record.id).distance_miles == pytest.approx(21.2, abs=0.2)


def test_address_update_without_geocoding_clears_location(tmp_path: Path) -> None:
    store = _store(tmp_path)
    metro, sandy = _with_territories(store)
    record = florist_service.create_florist(
        store, _offline_gateway(), name="Mover", address="1 Road", location=GeoPoint(45.3975, -122.2611)
    ).record
    assert store.territory_ids_for(record.id) == {metro, sandy}

    change = florist_service.update_florist(store, _offline_gateway(), record.id, {"address": "2 Elsewhere Rd"})

    assert change.geocode_source == "fallback"
    assert change.record.location is None
    assert change.record.distance_miles is None
    assert store.territory_ids_for(record.id) == set()


def test_update_without_address_change_skips_geocoding(tmp_path: Path) -> None:
    store = _store(tmp_path)
    record = florist_service.create_florist(
        store, _offline_gateway(), name="Keeper", address="1 Road", location=GeoPoint(45.3975, -122.2611)
    ).record

    change = florist_service.update_florist(store, _offline_gateway(), record.id, {"rating": 4.0})

    assert change.geocode_source is None
    assert change.record.location == GeoPoint(45.3975, -122.2611)


def test_update_rejects_unknown_fields(tmp_path: Path) -> None:
    store = _store(tmp_path)
    record = florist_service.create_florist(store, _offline_gateway(), name="A", address="B").record

    with pytest.raises(ValueError):
        florist_service.update_florist(store, _offline_gateway(), record.id, {"distance_miles": 1.0})


def test_notes_replace_and_append(tmp_path: Path) -> None:
    store = _store(tmp_path)
    record = florist_service.create_florist(store, _offline_gateway(), name="A", address="B").record

    florist_service.update_notes(store, record.id, "Called owner")
    at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    updated = florist_service.append_note(store, record.id, "Sent samples", at=at)

    assert updated.notes == "Called owner\n\n2024-05-01T12:00:00+00:00: Sent samples"
    assert florist_service.update_notes(store, record.id, "  ").notes is None


def test_list_filters_and_sorting(tmp_path: Path) -> None:
    store = _store(tmp_path)
    metro, sandy = _with_territories(store)
    gateway = _offline_gateway()
    near = florist_service.create_florist(
        store, gateway, name="Sandy Floral", address="Sandy", location=GeoPoint(45.3975, -122.2611)
    ).record
    far = florist_service.create_florist(
        store, gateway, name="Portland Petals", address="Portland", location=GeoPoint(45.5152, -122.6784)
    ).record
    unknown = florist_service.create_florist(store, gateway, name="Anon Blooms", address="Somewhere").record
    florist_service.update_notes(store, unknown.id, "likes peonies")

    by_distance = florist_service.list_florists(store, sort="distance")
    assert [r.id for r in by_distance] == [near.id, far.id, unknown.id]

    descending = florist_service.list_florists(store, sort="distance", order="desc")
    assert [r.id for r in descending] == [far.id, near.id, unknown.id]

    within = florist_service.list_florists(store, max_distance=10)
    assert [r.id for r in within] == [near.id]

    assert [r.id for r in florist_service.list_florists(store, search="PEONIES")] == [unknown.id]
    assert [r.id for r in florist_service.list_florists(store, territory_id=sandy)] == [near.id]

    with pytest.raises(ValueError):
        florist_service.list_florists(store, sort="colour")
    with pytest.raises(LookupError):
        florist_service.list_florists(store, territory_id="missing")


def test_import_upserts_by_place_id(tmp_path: Path) -> None:
    store = _store(tmp_path)
    _with_territories(store)
    existing = florist_service.create_florist(
        store,
        _offline_gateway(),
        name="Sandy Floral",
        address="Sandy",
        place_id="place_1",
        location=GeoPoint(45.3975, -122.2611),
        notes="keep me",
    ).record

    incoming = [
        FloristRecord(id="new-a", name="Sandy Floral Boutique", address="123 Main St", place_id="place_1",
                      location=GeoPoint(45.3975, -122.2611), distance_miles=3.14, rating=4.7),
        FloristRecord(id="new-b", name="Gresham Flower Shop", address="789 Bloom St", place_id="place_3",
                      location=GeoPoint(45.5023, -122.4306), distance_miles=9.52),
    ]
    summary = florist_service.import_florists(store, incoming, origin=FARM)

    assert (summary.created, summary.updated, summary.total) == (1, 1, 2)
    merged = store.get_florist(existing.id)
    assert merged.name == "Sandy Floral Boutique"
    assert merged.notes == "keep me"
    assert merged.created_at == existing.created_at
    assert len(store.list_florists()) == 2
    assert len(store.territory_ids_for("new-b")) == 2


def test_stats(tmp_path: Path) -> None:
    store = _store(tmp_path)
    _with_territories(store)
    gateway = _offline_gateway()
    florist_service.create_florist(
        store, gateway, name="Near", address="a", location=GeoPoint(45.3975, -122.2611), rating=4.0
    )
    florist_service.create_florist(
        store, gateway, name="Far", address="b", location=GeoPoint(45.5152, -122.6784), rating=5.0
    )
    florist_service.create_florist(store, gateway, name="Unknown", address="c")

    stats = florist_service.compute_florist_stats(store)

    assert stats["totalFlorists"] == 3
    assert stats["withCoordinates"] == 2
    assert stats["within10Miles"] == 1
    assert stats["within30Miles"] == 2
    assert stats["averageRating"] == 4.5
    assert [t["florists"] for t in stats["territories"]] == [2, 1]
    assert [t["name"] for t in stats["topRated"]] == ["Far", "Near"]
