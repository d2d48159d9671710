import math

import pytest

from src.florist_planner.models.domain import GeoPoint
from src.florist_planner.services.geospatial import (
    distance_from_reference,
    distance_miles,
    haversine_km,
    haversine_meters,
)

FARM = GeoPoint(45.4426, -122.2536)
SANDY_FLORAL = GeoPoint(45.3975, -122.2611)
PORTLAND_PETALS = GeoPoint(45.5152, -122.6784)


def test_distance_to_self_is_zero() -> None:
    assert distance_miles(FARM, FARM) == 0.0


def test_distance_is_symmetric() -> None:
    assert distance_miles(FARM, PORTLAND_PETALS) == pytest.approx(distance_miles(PORTLAND_PETALS, FARM))


def test_sandy_florist_distance_from_farm() -> None:
    # The sample data's literal 5.2 miles is not what the formula gives.
    assert distance_miles(FARM, SANDY_FLORAL) == pytest.approx(3.14, abs=0.05)


def test_portland_florist_distance_from_farm() -> None:
    assert distance_miles(FARM, PORTLAND_PETALS) == pytest.approx(21.2, abs=0.2)


def test_one_degree_of_latitude() -> None:
    meters = haversine_meters(0.0, 0.0, 1.0, 0.0)
    assert meters == pytest.approx(6_371_000 * math.pi / 180, rel=1e-9)
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(meters / 1000)


def test_antipodal_points() -> None:
    assert haversine_meters(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * 6_371_000)


def test_distance_from_reference_without_location() -> None:
    assert distance_from_reference(None, FARM) is None


@pytest.mark.parametrize(
    "lat, lng",
    [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (float("nan"), 0.0), (0.0, float("inf"))],
)
def test_geopoint_rejects_invalid_coordinates(lat: float, lng: float) -> None:
    with pytest.raises(ValueError):
        GeoPoint.validated(lat, lng)
