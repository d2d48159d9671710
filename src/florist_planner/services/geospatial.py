"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional

from ..config import METERS_PER_MILE, settings
from ..models.domain import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_meters(lat1, lon1, lat2, lon2) / 1000.0


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in miles."""

    return haversine_meters(a.latitude, a.longitude, b.latitude, b.longitude) / METERS_PER_MILE


def distance_from_reference(point: Optional[GeoPoint], origin: GeoPoint) -> Optional[float]:
    """Distance in miles from ``origin`` to ``point``; ``None`` when the point is unknown."""

    if point is None:
        return None
    return distance_miles(origin, point)


def reference_point_from_settings() -> GeoPoint:
    return GeoPoint.validated(settings.reference_latitude, settings.reference_longitude)
