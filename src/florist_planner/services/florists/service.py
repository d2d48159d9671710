"""Florist catalog operations: create, update, filter, notes, import and stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from ...data.florists_repository import new_id, utcnow
from ...models.domain import FloristRecord, GeoPoint, PricingItem, WeeklyHours
from ...persistence.store import FloristStore
from ..geospatial import distance_from_reference
from ..maps.gateway import MapsGateway
from ..territories.service import reassign_florist

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "name": lambda r: r.name.lower(),
    "distance": lambda r: r.distance_miles,
    "distanceMiles": lambda r: r.distance_miles,
    "rating": lambda r: r.rating,
    "reviewCount": lambda r: r.review_count,
    "createdAt": lambda r: r.created_at,
    "updatedAt": lambda r: r.updated_at,
}

EDITABLE_FIELDS = {
    "name",
    "address",
    "phone_number",
    "website",
    "place_id",
    "rating",
    "review_count",
    "business_hours",
    "pricing_items",
    "notes",
}


@dataclass(slots=True)
class FloristChange:
    """A stored florist plus the geocode outcome when its address was looked up."""

    record: FloristRecord
    geocode_source: Optional[str] = None
    geocode_status: Optional[str] = None


@dataclass(slots=True)
class ImportSummary:
    created: int
    updated: int
    total: int
    mirrored: int = 0


def _required(value: Optional[str], label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{label} is required.")
    return text


def _geocode_location(gateway: MapsGateway, address: str) -> tuple[Optional[GeoPoint], str, str]:
    """Location for ``address``; sample fallback coordinates are never stored."""

    result = gateway.geocode(address)
    if not result.authoritative:
        logger.warning("Geocoding unavailable for %r, storing florist without coordinates", address)
        return None, result.source, result.status
    if result.data is None:
        logger.info("No geocode match for %r (%s)", address, result.status)
        return None, result.source, result.status
    return result.data.location, result.source, result.status


def create_florist(
    store: FloristStore,
    gateway: MapsGateway,
    *,
    name: str,
    address: str,
    phone_number: Optional[str] = None,
    website: Optional[str] = None,
    place_id: Optional[str] = None,
    location: Optional[GeoPoint] = None,
    rating: Optional[float] = None,
    review_count: Optional[int] = None,
    business_hours: Optional[WeeklyHours] = None,
    pricing_items: Sequence[PricingItem] = (),
    notes: Optional[str] = None,
) -> FloristChange:
    """Store a new florist, geocoding its address when no location is given."""

    name = _required(name, "Name")
    address = _required(address, "Address")

    geocode_source = geocode_status = None
    if location is None:
        location, geocode_source, geocode_status = _geocode_location(gateway, address)

    now = utcnow()
    record = FloristRecord(
        id=new_id(),
        name=name,
        address=address,
        phone_number=phone_number,
        website=website,
        place_id=place_id,
        location=location,
        distance_miles=distance_from_reference(location, gateway.origin),
        rating=rating,
        review_count=review_count,
        business_hours=business_hours,
        pricing_items=list(pricing_items),
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    store.put_florist(record)
    reassign_florist(store, record.id)
    logger.info("Created florist %s (%s)", record.name, record.id)
    return FloristChange(record=record, geocode_source=geocode_source, geocode_status=geocode_status)


def set_location(
    store: FloristStore, florist_id: str, location: Optional[GeoPoint], origin: GeoPoint
) -> FloristRecord:
    """Move a florist, recompute its distance and re-run threshold assignment."""

    record = store.get_florist(florist_id)
    updated = replace(
        record,
        location=location,
        distance_miles=distance_from_reference(location, origin),
        updated_at=utcnow(),
    )
    store.put_florist(updated)
    reassign_florist(store, florist_id)
    return updated


def update_florist(
    store: FloristStore,
    gateway: MapsGateway,
    florist_id: str,
    changes: dict[str, Any],
    *,
    location: Optional[GeoPoint] = None,
    clear_location: bool = False,
) -> FloristChange:
    """Apply a partial update.

    A changed address is re-geocoded unless an explicit ``location`` is given.
    When the lookup finds nothing usable the florist loses its coordinates, and
    the returned geocode source and status say so.
    """

    changes = dict(changes)
    record = store.get_florist(florist_id)
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown florist fields: {', '.join(sorted(unknown))}")
    for key in ("name", "address"):
        if key in changes:
            changes[key] = _required(changes[key], key.capitalize())

    updated = replace(record, **changes, updated_at=utcnow())
    geocode_source = geocode_status = None
    new_location = record.location
    if clear_location:
        new_location = None
    elif location is not None:
        new_location = location
    elif "address" in changes and changes["address"] != record.address:
        new_location, geocode_source, geocode_status = _geocode_location(gateway, changes["address"])

    store.put_florist(updated)
    if new_location != record.location:
        updated = set_location(store, florist_id, new_location, gateway.origin)
    return FloristChange(record=updated, geocode_source=geocode_source, geocode_status=geocode_status)


def update_notes(store: FloristStore, florist_id: str, notes: Optional[str]) -> FloristRecord:
    record = store.get_florist(florist_id)
    updated = replace(record, notes=(notes or "").strip() or None, updated_at=utcnow())
    return store.put_florist(updated)


def append_note(
    store: FloristStore, florist_id: str, text: str, at: Optional[datetime] = None
) -> FloristRecord:
    """Append ``"<ISO timestamp>: text"`` to the florist's notes on a new paragraph."""

    text = _required(text, "Note")
    record = store.get_florist(florist_id)
    entry = f"{(at or utcnow()).isoformat()}: {text}"
    notes = f"{record.notes}\n\n{entry}" if record.notes else entry
    updated = replace(record, notes=notes, updated_at=utcnow())
    return store.put_florist(updated)


def delete_florist(store: FloristStore, florist_id: str) -> None:
    store.delete_florist(florist_id)
    logger.info("Deleted florist %s", florist_id)


def list_florists(
    store: FloristStore,
    *,
    sort: str = "name",
    order: str = "asc",
    max_distance: Optional[float] = None,
    search: Optional[str] = None,
    territory_id: Optional[str] = None,
) -> list[FloristRecord]:
    """Filter and sort florists. Records missing the sort value come last."""

    if sort not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field '{sort}'.")
    if order not in ("asc", "desc"):
        raise ValueError("Order must be 'asc' or 'desc'.")

    records = store.list_florists()
    if max_distance is not None:
        records = [r for r in records if r.distance_miles is not None and r.distance_miles <= max_distance]
    if search:
        needle = search.strip().lower()
        records = [
            r
            for r in records
            if needle in r.name.lower()
            or needle in r.address.lower()
            or (r.notes is not None and needle in r.notes.lower())
        ]
    if territory_id:
        store.get_territory(territory_id)
        members = store.florist_ids_for(territory_id)
        records = [r for r in records if r.id in members]

    key = SORT_FIELDS[sort]
    present = [r for r in records if key(r) is not None]
    missing = [r for r in records if key(r) is None]
    present.sort(key=key, reverse=order == "desc")
    return present + missing


def compute_florist_stats(store: FloristStore, top_n: int = 5) -> dict:
    florists = store.list_florists()
    distances = [r.distance_miles for r in florists if r.distance_miles is not None]
    ratings = [r.rating for r in florists if r.rating is not None]

    territories = []
    for territory in store.list_territories():
        territories.append(
            {
                "id": territory.id,
                "name": territory.name,
                "color": territory.color,
                "florists": len(store.florist_ids_for(territory.id)),
            }
        )

    top_rated = sorted(
        (r for r in florists if r.rating is not None),
        key=lambda r: (-r.rating, -(r.review_count or 0), r.name.lower()),
    )[:top_n]

    return {
        "totalFlorists": len(florists),
        "withCoordinates": len(distances),
        "averageDistanceMiles": round(sum(distances) / len(distances), 2) if distances else None,
        "averageRating": round(sum(ratings) / len(ratings), 2) if ratings else None,
        "within10Miles": sum(1 for d in distances if d <= 10),
        "within30Miles": sum(1 for d in distances if d <= 30),
        "territories": territories,
        "routes": len(store.list_routes()),
        "topRated": [{"id": r.id, "name": r.name, "rating": r.rating} for r in top_rated],
    }


def import_florists(store: FloristStore, records: Iterable[FloristRecord], origin: GeoPoint) -> ImportSummary:
    """Upsert records by id, then by place id, preserving existing notes and creation time.

    Distances are recomputed from ``origin``.
    """

    created = updated = 0
    now = utcnow()
    imported_ids: list[str] = []
    for record in records:
        record = replace(record, distance_miles=distance_from_reference(record.location, origin))
        existing = None
        if record.id in store.florists:
            existing = store.florists[record.id]
        elif record.place_id:
            existing = store.find_by_place_id(record.place_id)

        if existing is not None:
            record = replace(
                record,
                id=existing.id,
                notes=record.notes or existing.notes,
                pricing_items=record.pricing_items or existing.pricing_items,
                created_at=existing.created_at or now,
                updated_at=now,
            )
            updated += 1
        else:
            record = replace(record, created_at=record.created_at or now, updated_at=now)
            created += 1
        store.put_florist(record)
        imported_ids.append(record.id)

    for florist_id in imported_ids:
        reassign_florist(store, florist_id)

    logger.info("Imported %s florists (%s new, %s updated)", len(imported_ids), created, updated)
    return ImportSummary(created=created, updated=updated, total=len(imported_ids))


def territory_names_by_florist(store: FloristStore) -> dict[str, list[str]]:
    names = {t.id: t.name for t in store.list_territories()}
    return {
        florist.id: sorted(names[tid] for tid in store.territory_ids_for(florist.id) if tid in names)
        for florist in store.list_florists()
    }
