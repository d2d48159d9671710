from pathlib import Path

import pytest

from src.florist_planner.models.domain import FloristRecord, GeoPoint
from src.florist_planner.persistence.store import FloristStore
from src.florist_planner.services.geospatial import distance_miles
from src.florist_planner.services.routes import service as route_service

FARM = GeoPoint(45.4426, -122.2536)
SANDY = GeoPoint(45.3975, -122.2611)
GRESHAM = GeoPoint(45.5023, -122.4306)
PORTLAND = GeoPoint(45.5152, -122.6784)


def _store(tmp_path: Path) -> FloristStore:
    store = FloristStore(path=tmp_path / "store.json")
    for fid, point in (("portland", PORTLAND), ("sandy", SANDY), ("gresham", GRESHAM)):
        store.put_florist(FloristRecord(id=fid, name=fid.title(), address=f"{fid} address", location=point))
    store.put_florist(FloristRecord(id="unlocated", name="Unlocated", address="somewhere"))
    return store


def _order(store: FloristStore, route_id: str) -> list[str]:
    stops = store.stops_for(route_id)
    assert route_service.validate_stop_order(stops)
    return [stop.florist_id for stop in stops]


def test_create_route_with_initial_stops(tmp_path: Path) -> None:
    store = _store(tmp_path)

    route = route_service.create_route(store, name="East Side", florist_ids=["portland", "sandy"])

    assert _order(store, route.id) == ["portland", "sandy"]
    assert [s.stop_order for s in store.stops_for(route.id)] == [1, 2]


def test_create_route_rejects_unknown_or_duplicate_florists(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(LookupError):
        route_service.create_route(store, name="Bad", florist_ids=["ghost"])
    with pytest.raises(ValueError):
        route_service.create_route(store, name="Dup", florist_ids=["sandy", "sandy"])
    with pytest.raises(ValueError):
        route_service.create_route(store, name=" ")
    assert store.list_routes() == []


def test_add_and_remove_stops_keep_orders_contiguous(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(store, name="Loop", florist_ids=["portland"])

    route_service.add_stop(store, route.id, "sandy")
    route_service.add_stop(store, route.id, "gresham", position=1)
    assert _order(store, route.id) == ["gresham", "portland", "sandy"]

    route_service.remove_stop(store, route.id, "portland")
    assert _order(store, route.id) == ["gresham", "sandy"]
    assert [s.stop_order for s in store.stops_for(route.id)] == [1, 2]


def test_add_stop_validation(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(store, name="Loop", florist_ids=["portland"])

    with pytest.raises(ValueError):
        route_service.add_stop(store, route.id, "portland")
    with pytest.raises(ValueError):
        route_service.add_stop(store, route.id, "sandy", position=5)
    with pytest.raises(LookupError):
        route_service.add_stop(store, route.id, "ghost")
    with pytest.raises(LookupError):
        route_service.add_stop(store, "missing-route", "sandy")
    with pytest.raises(LookupError):
        route_service.remove_stop(store, route.id, "sandy")
    assert _order(store, route.id) == ["portland"]


def test_reorder_requires_permutation(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(store, name="Loop", florist_ids=["portland", "sandy", "gresham"])

    route_service.reorder_stops(store, route.id, ["sandy", "gresham", "portland"])
    assert _order(store, route.id) == ["sandy", "gresham", "portland"]

    with pytest.raises(ValueError):
        route_service.reorder_stops(store, route.id, ["sandy", "gresham"])
    with pytest.raises(ValueError):
        route_service.reorder_stops(store, route.id, ["sandy", "gresham", "unlocated"])


def test_optimize_visits_nearest_first_and_unlocated_last(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(
        store, name="Loop", florist_ids=["unlocated", "portland", "gresham", "sandy"]
    )

    route_service.optimize_route(store, route.id, FARM)

    assert _order(store, route.id) == ["sandy", "gresham", "portland", "unlocated"]


def test_summary_totals_round_trip_from_origin(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(store, name="Loop", florist_ids=["sandy", "unlocated", "gresham"])

    summary = route_service.summarize_route(store, route.id, FARM)

    expected = distance_miles(FARM, SANDY) + distance_miles(SANDY, GRESHAM) + distance_miles(GRESHAM, FARM)
    assert summary.total_miles == pytest.approx(expected)
    assert summary.unlocated_stops == 1
    assert [s.leg_miles is None for s in summary.stops] == [False, True, False]


def test_empty_route_has_zero_distance(tmp_path: Path) -> None:
    store = _store(tmp_path)
    route = route_service.create_route(store, name="Empty")

    assert route_service.summarize_route(store, route.id, FARM).total_miles == 0.0


def test_nearest_neighbour_order() -> None:
    points = {"far": PORTLAND, "near": SANDY, "mid": GRESHAM}

    assert route_service.nearest_neighbour_order(FARM, points) == ["near", "mid", "far"]
    assert route_service.nearest_neighbour_order(FARM, {}) == []
