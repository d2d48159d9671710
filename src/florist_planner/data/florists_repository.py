"""Conversion between florist records and the interchange formats.

The JSON interchange file is an ordered list of objects using the camelCase
field names of ``florists.json`` (coordinates flattened to ``latitude``/
``longitude``). CSV and Excel sheets are accepted for import with
loosely matched column headers.
"""

from __future__ import annotations

import csv
import io
import json
import uuid
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from openpyxl import load_workbook

from ..models.domain import WEEKDAYS, FloristRecord, GeoPoint, PricingItem, WeeklyHours
from ..services.geospatial import distance_from_reference

COLUMN_ALIASES: dict[str, list[str]] = {
    "id": ["id", "florist_id", "floristid"],
    "name": ["name", "florist_name", "business_name", "business", "shop"],
    "address": ["address", "formatted_address", "street_address", "location"],
    "phoneNumber": ["phonenumber", "phone_number", "phone", "telephone", "formatted_phone_number"],
    "website": ["website", "url", "web", "site"],
    "placeId": ["placeid", "place_id", "google_place_id"],
    "latitude": ["latitude", "lat", "y"],
    "longitude": ["longitude", "lon", "lng", "long", "x"],
    "rating": ["rating", "stars"],
    "reviewCount": ["reviewcount", "review_count", "reviews", "user_ratings_total"],
    "notes": ["notes", "note", "comments"],
}


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    return int(number) if number is not None else None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def hours_from_dict(payload: Optional[dict]) -> Optional[WeeklyHours]:
    if not payload:
        return None
    hours = WeeklyHours(**{day: _clean(payload.get(day)) for day in WEEKDAYS})
    return None if hours.is_empty() else hours


def florist_to_dict(record: FloristRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "address": record.address,
        "phoneNumber": record.phone_number,
        "website": record.website,
        "placeId": record.place_id,
        "latitude": record.location.latitude if record.location else None,
        "longitude": record.location.longitude if record.location else None,
        "distanceMiles": record.distance_miles,
        "rating": record.rating,
        "reviewCount": record.review_count,
        "businessHours": record.business_hours.as_dict() if record.business_hours else None,
        "pricingItems": [
            {"itemName": item.item_name, "priceRange": item.price_range} for item in record.pricing_items
        ],
        "notes": record.notes,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    }


def florist_from_dict(payload: dict[str, Any], *, origin: GeoPoint) -> FloristRecord:
    """Build a record from an interchange object.

    Any ``distanceMiles`` in the payload is ignored and recomputed from ``origin``.
    """

    name = _clean(payload.get("name"))
    address = _clean(payload.get("address"))
    if not name or not address:
        raise ValueError("Florist records require a name and an address.")

    lat = _coerce_float(payload.get("latitude"))
    lng = _coerce_float(payload.get("longitude"))
    location = GeoPoint.validated(lat, lng) if lat is not None and lng is not None else None

    pricing_items = [
        PricingItem(item_name=str(item["itemName"]).strip(), price_range=str(item["priceRange"]).strip())
        for item in payload.get("pricingItems") or []
        if item.get("itemName") and item.get("priceRange")
    ]

    return FloristRecord(
        id=_clean(payload.get("id")) or new_id(),
        name=name,
        address=address,
        phone_number=_clean(payload.get("phoneNumber")),
        website=_clean(payload.get("website")),
        place_id=_clean(payload.get("placeId")),
        location=location,
        distance_miles=distance_from_reference(location, origin),
        rating=_coerce_float(payload.get("rating")),
        review_count=_coerce_int(payload.get("reviewCount")),
        business_hours=hours_from_dict(payload.get("businessHours")),
        pricing_items=pricing_items,
        notes=_clean(payload.get("notes")),
        created_at=_parse_datetime(payload.get("createdAt")),
        updated_at=_parse_datetime(payload.get("updatedAt")),
    )


def export_florists(records: Iterable[FloristRecord]) -> list[dict[str, Any]]:
    return [florist_to_dict(record) for record in records]


def _normalize_header(header: str) -> str:
    return header.lower().strip().replace(" ", "_").replace("-", "_")


def _map_row(row: dict[str, Any]) -> dict[str, Any]:
    normalized = {_normalize_header(str(key)): value for key, value in row.items() if key is not None}
    mapped: dict[str, Any] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized and normalized[alias] not in (None, ""):
                mapped[field_name] = normalized[alias]
                break
    hours = {day: normalized.get(day) for day in WEEKDAYS if normalized.get(day)}
    if hours:
        mapped["businessHours"] = hours
    return mapped


def parse_tabular_rows(rows: Iterable[dict[str, Any]], *, origin: GeoPoint) -> list[FloristRecord]:
    records: list[FloristRecord] = []
    for index, row in enumerate(rows, start=1):
        mapped = _map_row(row)
        if not mapped:
            continue
        try:
            records.append(florist_from_dict(mapped, origin=origin))
        except ValueError as exc:
            raise ValueError(f"Row {index}: {exc}") from exc
    return records


def parse_florist_payload(contents: bytes, suffix: str, *, origin: GeoPoint) -> list[FloristRecord]:
    """Parse an uploaded ``.json``, ``.csv`` or ``.xlsx`` file into records, preserving order."""

    suffix = suffix.lower()
    if suffix == ".json":
        payload = json.loads(contents.decode("utf-8-sig"))
        if isinstance(payload, dict) and "florists" in payload:
            payload = payload["florists"]
        if not isinstance(payload, list):
            raise ValueError("Florist JSON must be a list of florist objects.")
        records = []
        for index, item in enumerate(payload, start=1):
            if not isinstance(item, dict):
                raise ValueError(f"Entry {index} is not an object.")
            try:
                records.append(florist_from_dict(item, origin=origin))
            except ValueError as exc:
                raise ValueError(f"Entry {index}: {exc}") from exc
        return records
    if suffix == ".csv":
        reader = csv.DictReader(contents.decode("utf-8-sig").splitlines())
        if not reader.fieldnames:
            raise ValueError("CSV file is missing a header row.")
        return parse_tabular_rows(reader, origin=origin)
    if suffix == ".xlsx":
        workbook = load_workbook(filename=BytesIO(contents), read_only=True, data_only=True)
        worksheet = workbook.active
        rows = worksheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError("Workbook is empty.")
        headers = [str(cell) if cell is not None else "" for cell in header]
        dict_rows = (
            {headers[i]: cell for i, cell in enumerate(values) if i < len(headers)}
            for values in rows
        )
        return parse_tabular_rows(dict_rows, origin=origin)
    raise ValueError(f"Unsupported florist file type '{suffix}'. Use .json, .csv or .xlsx.")


def load_florists_file(path: Path, *, origin: GeoPoint) -> list[FloristRecord]:
    if not path.exists():
        raise FileNotFoundError(f"Florist file not found: {path}")
    return parse_florist_payload(path.read_bytes(), path.suffix, origin=origin)


def florists_to_csv(records: Sequence[FloristRecord], territory_names: dict[str, list[str]] | None = None) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "id",
        "name",
        "address",
        "phoneNumber",
        "website",
        "placeId",
        "latitude",
        "longitude",
        "distanceMiles",
        "rating",
        "reviewCount",
        "territories",
        *WEEKDAYS,
        "notes",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for record in records:
        row = florist_to_dict(record)
        hours = row.pop("businessHours") or {}
        for key in ("pricingItems", "createdAt", "updatedAt"):
            row.pop(key)
        if row["distanceMiles"] is not None:
            row["distanceMiles"] = round(row["distanceMiles"], 2)
        row["territories"] = "; ".join((territory_names or {}).get(record.id, []))
        writer.writerow({**row, **{day: hours.get(day) or "" for day in WEEKDAYS}})
    return buffer.getvalue()
