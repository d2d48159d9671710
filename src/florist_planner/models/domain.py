"""Domain models for florists, territories and delivery routes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float

    @classmethod
    def validated(cls, latitude: float, longitude: float) -> "GeoPoint":
        """Build a point, rejecting non-finite or out-of-range coordinates."""

        lat, lng = float(latitude), float(longitude)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Coordinates must be finite, got ({latitude}, {longitude}).")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude {lat} is outside [-90, 90].")
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"Longitude {lng} is outside [-180, 180].")
        return cls(lat, lng)


@dataclass(slots=True)
class WeeklyHours:
    """Free-text opening hours keyed by weekday."""

    monday: Optional[str] = None
    tuesday: Optional[str] = None
    wednesday: Optional[str] = None
    thursday: Optional[str] = None
    friday: Optional[str] = None
    saturday: Optional[str] = None
    sunday: Optional[str] = None

    def as_dict(self) -> dict[str, Optional[str]]:
        return {day: getattr(self, day) for day in WEEKDAYS}

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(slots=True)
class PricingItem:
    item_name: str
    price_range: str


@dataclass(slots=True)
class FloristRecord:
    """A cataloged florist business with location and commercial metadata."""

    id: str
    name: str
    address: str
    phone_number: Optional[str] = None
    website: Optional[str] = None
    place_id: Optional[str] = None
    location: Optional[GeoPoint] = None
    distance_miles: Optional[float] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    business_hours: Optional[WeeklyHours] = None
    pricing_items: list[PricingItem] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class Territory:
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    max_distance_miles: Optional[float] = None


@dataclass(frozen=True, slots=True)
class FloristTerritory:
    id: str
    florist_id: str
    territory_id: str


@dataclass(slots=True)
class Route:
    id: str
    name: str
    description: Optional[str] = None


@dataclass(slots=True)
class RouteStop:
    id: str
    route_id: str
    florist_id: str
    stop_order: int
