"""Boundary between the Google Maps wire format and florist records.

Every operation validates its input first (``ValueError`` propagates to the
caller), then calls the provider. Provider failures of any kind are replaced
by the sample dataset in :mod:`.fallback`, and the result is tagged so callers
can tell authoritative data from sample data.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Literal, Optional, TypeVar

import httpx

from ...config import settings
from ...models.domain import WEEKDAYS, GeoPoint, WeeklyHours
from ..geospatial import distance_from_reference, reference_point_from_settings
from .fallback import fallback_geocode, fallback_place_details, fallback_search
from .google_client import GoogleMapsClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

Source = Literal["live", "fallback"]

PROVIDER_FAILURES = (ValueError, KeyError, TypeError, ConnectionError, httpx.HTTPError)


@dataclass(slots=True)
class GatewayResult(Generic[T]):
    source: Source
    status: str
    data: T
    error: Optional[str] = None

    @property
    def authoritative(self) -> bool:
        return self.source == "live"

    @property
    def found(self) -> bool:
        return self.status == "OK"


@dataclass(slots=True)
class GeocodeMatch:
    formatted_address: str
    location: GeoPoint
    place_id: Optional[str]


@dataclass(slots=True)
class PlaceCandidate:
    """A search hit normalized to florist fields."""

    name: str
    address: Optional[str]
    place_id: Optional[str]
    location: GeoPoint
    distance_miles: float
    phone_number: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None


@dataclass(slots=True)
class PlaceDetails:
    place_id: str
    name: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    location: Optional[GeoPoint] = None
    business_hours: WeeklyHours = field(default_factory=WeeklyHours)


def parse_weekday_text(lines: Optional[list[str]]) -> WeeklyHours:
    """Parse provider "Day: hours" lines into a :class:`WeeklyHours`.

    Unrecognized day names are skipped; a repeated day overwrites the earlier value.
    """

    hours = WeeklyHours()
    for text in lines or []:
        if not isinstance(text, str):
            continue
        day, sep, value = text.partition(": ")
        if not sep or not day or not value:
            continue
        day_lower = day.lower()
        day_key = next((name for name in WEEKDAYS if name in day_lower), None)
        if day_key is None:
            continue
        setattr(hours, day_key, value)
    return hours


def _location_of(place: dict) -> GeoPoint:
    location = place["geometry"]["location"]
    return GeoPoint.validated(location["lat"], location["lng"])


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _safe_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _safe_int(value: Any) -> Optional[int]:
    number = _safe_float(value)
    return int(number) if number is not None else None


def normalize_place(place: dict, origin: GeoPoint) -> PlaceCandidate:
    """Map one provider search result onto florist fields.

    Distance is always computed locally from ``origin``.
    """

    location = _location_of(place)
    return PlaceCandidate(
        name=str(place["name"]).strip(),
        address=_strip_or_none(place.get("formatted_address") or place.get("vicinity")),
        place_id=_strip_or_none(place.get("place_id")),
        location=location,
        distance_miles=distance_from_reference(location, origin),
        phone_number=_strip_or_none(place.get("formatted_phone_number")),
        website=_strip_or_none(place.get("website")),
        rating=_safe_float(place.get("rating")),
        review_count=_safe_int(place.get("user_ratings_total")),
    )


def _normalize_geocode(data: dict) -> Optional[GeocodeMatch]:
    results = data.get("results") or []
    if not isinstance(results, list):
        raise ValueError("Geocode response 'results' is not a list.")
    if not results:
        return None
    best = results[0]
    if not isinstance(best, dict):
        raise ValueError("Geocode result is not an object.")
    return GeocodeMatch(
        formatted_address=str(best.get("formatted_address") or ""),
        location=_location_of(best),
        place_id=_strip_or_none(best.get("place_id")),
    )


def _normalize_search(data: dict, origin: GeoPoint) -> list[PlaceCandidate]:
    results = data.get("results")
    if results is None:
        results = []
    if not isinstance(results, list):
        raise ValueError("Search response 'results' is not a list.")
    candidates: list[PlaceCandidate] = []
    for raw in results:
        if not isinstance(raw, dict) or not raw.get("name"):
            continue
        try:
            candidates.append(normalize_place(raw, origin))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping search result %r without usable coordinates: %s", raw.get("name"), exc)
    return candidates


def _normalize_details(data: dict, place_id: str) -> Optional[PlaceDetails]:
    result = data.get("result")
    if not result:
        return None
    if not isinstance(result, dict):
        raise ValueError("Place details 'result' is not an object.")
    opening_hours = result.get("opening_hours") or {}
    if not isinstance(opening_hours, dict):
        raise ValueError("Place details 'opening_hours' is not an object.")
    try:
        location: Optional[GeoPoint] = _location_of(result)
    except (KeyError, TypeError, ValueError):
        location = None
    return PlaceDetails(
        place_id=_strip_or_none(result.get("place_id")) or place_id,
        name=_strip_or_none(result.get("name")),
        address=_strip_or_none(result.get("formatted_address")),
        phone_number=_strip_or_none(result.get("formatted_phone_number")),
        website=_strip_or_none(result.get("website")),
        rating=_safe_float(result.get("rating")),
        review_count=_safe_int(result.get("user_ratings_total")),
        location=location,
        business_hours=parse_weekday_text(opening_hours.get("weekday_text")),
    )


class MapsGateway:
    """Geocode, search and place-details lookups with a tagged fallback."""

    def __init__(
        self,
        client_factory: Callable[[], GoogleMapsClient] | None = None,
        origin: GeoPoint | None = None,
    ) -> None:
        self._client_factory = client_factory or GoogleMapsClient
        self.origin = origin or reference_point_from_settings()

    def _call(
        self,
        operation: str,
        live: Callable[[GoogleMapsClient], dict],
        normalize: Callable[[dict], T],
        fallback: Callable[[], dict],
    ) -> GatewayResult[T]:
        try:
            client = self._client_factory()
            raw = live(client)
            data = normalize(raw)
            return GatewayResult(source="live", status=str(raw.get("status")), data=data)
        except PROVIDER_FAILURES as exc:
            logger.warning("Google Maps %s failed, serving fallback data: %s", operation, exc)
            raw = fallback()
            return GatewayResult(
                source="fallback",
                status=str(raw.get("status")),
                data=normalize(raw),
                error=str(exc),
            )

    def geocode(self, address: str) -> GatewayResult[Optional[GeocodeMatch]]:
        if not address or not address.strip():
            raise ValueError("Address is required.")
        address = address.strip()
        return self._call(
            "geocode",
            lambda client: client.geocode(address),
            _normalize_geocode,
            lambda: fallback_geocode(address),
        )

    def search_places(
        self,
        query: str,
        location: GeoPoint | None = None,
        radius_meters: float | None = None,
    ) -> GatewayResult[list[PlaceCandidate]]:
        if not query or not query.strip():
            raise ValueError("Query is required.")
        query = query.strip()
        center = location or self.origin
        center = GeoPoint.validated(center.latitude, center.longitude)
        radius = settings.default_search_radius_meters if radius_meters is None else float(radius_meters)
        if not math.isfinite(radius) or radius <= 0:
            raise ValueError("Search radius must be a positive number of meters.")
        return self._call(
            "search",
            lambda client: client.text_search(query, center.latitude, center.longitude, radius),
            lambda raw: _normalize_search(raw, self.origin),
            lambda: fallback_search(query),
        )

    def place_details(self, place_id: str) -> GatewayResult[Optional[PlaceDetails]]:
        if not place_id or not place_id.strip():
            raise ValueError("Place identifier is required.")
        place_id = place_id.strip()
        return self._call(
            "place details",
            lambda client: client.place_details(place_id),
            lambda raw: _normalize_details(raw, place_id),
            lambda: fallback_place_details(place_id),
        )


def get_gateway() -> MapsGateway:
    return MapsGateway()
