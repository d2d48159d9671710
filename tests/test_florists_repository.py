import json
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook

from src.florist_planner.data.florists_repository import (
    export_florists,
    florists_to_csv,
    load_florists_file,
    parse_florist_payload,
)
from src.florist_planner.models.domain import GeoPoint

FARM = GeoPoint(45.4426, -122.2536)

SAMPLE = [
    {
        "name": "Sandy Floral Boutique",
        "address": "123 Main St, Sandy, OR 97055",
        "phoneNumber": "(503) 555-1234",
        "placeId": "ChIJN1t_tDeuEmsRUsoyG83frY4_1",
        "latitude": 45.3975,
        "longitude": -122.2611,
        "distanceMiles": 5.2,
        "rating": 4.7,
        "reviewCount": 32,
        "businessHours": {"monday": "9:00 AM - 5:00 PM", "sunday": "Closed"},
        "pricingItems": [
            {"itemName": "Roses", "priceRange": "$8-$15"},
            {"itemName": "Bouquets", "priceRange": "$25-$75"},
        ],
    },
    {
        "name": "Portland Petals",
        "address": "456 Flower Ave, Portland, OR 97201",
        "latitude": 45.5152,
        "longitude": -122.6784,
    },
    {
        "name": "No Coordinates Florist",
        "address": "1 Unknown Rd",
    },
]


def _parse_json(payload) -> list:
    return parse_florist_payload(json.dumps(payload).encode("utf-8"), ".json", origin=FARM)


def test_json_import_preserves_order_and_fields() -> None:
    records = _parse_json(SAMPLE)

    assert [r.name for r in records] == [item["name"] for item in SAMPLE]
    first = records[0]
    assert first.location == GeoPoint(45.3975, -122.2611)
    assert first.review_count == 32
    assert first.business_hours.sunday == "Closed"
    assert [(p.item_name, p.price_range) for p in first.pricing_items] == [
        ("Roses", "$8-$15"),
        ("Bouquets", "$25-$75"),
    ]
    assert records[2].location is None
    assert records[2].distance_miles is None


def test_json_import_ignores_stored_distance() -> None:
    records = _parse_json(SAMPLE)

    assert records[0].distance_miles == pytest.approx(3.14, abs=0.05)


def test_export_then_import_keeps_order_and_ids() -> None:
    records = _parse_json(SAMPLE)
    exported = export_florists(records)

    again = _parse_json({"florists": exported})

    assert [r.id for r in again] == [r.id for r in records]
    assert exported[0]["pricingItems"][1] == {"itemName": "Bouquets", "priceRange": "$25-$75"}
    assert exported[1]["latitude"] == 45.5152


def test_load_florists_file(tmp_path: Path) -> None:
    path = tmp_path / "florists.json"
    path.write_text(json.dumps(SAMPLE), encoding="utf-8")

    records = load_florists_file(path, origin=FARM)

    assert [r.name for r in records] == [item["name"] for item in SAMPLE]
    with pytest.raises(FileNotFoundError):
        load_florists_file(tmp_path / "missing.json", origin=FARM)


def test_json_import_requires_name_and_address() -> None:
    with pytest.raises(ValueError, match="Entry 2"):
        _parse_json([SAMPLE[0], {"name": "Missing address"}])


def test_json_import_rejects_invalid_coordinates() -> None:
    with pytest.raises(ValueError):
        _parse_json([{"name": "Bad", "address": "x", "latitude": 123.0, "longitude": 0.0}])


def test_csv_import_matches_loose_headers() -> None:
    contents = (
        "Business Name,Street Address,Phone,Lat,Lng,Monday\n"
        "Gresham Flower Shop,\"789 Bloom St, Gresham, OR 97030\",(503) 555-9012,45.5023,-122.4306,9-5\n"
    ).encode("utf-8")

    records = parse_florist_payload(contents, ".csv", origin=FARM)

    assert len(records) == 1
    assert records[0].name == "Gresham Flower Shop"
    assert records[0].phone_number == "(503) 555-9012"
    assert records[0].business_hours.monday == "9-5"
    assert records[0].distance_miles == pytest.approx(9.5, abs=0.1)


def test_xlsx_import() -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["name", "address", "latitude", "longitude", "rating"])
    sheet.append(["Portland Petals", "456 Flower Ave", 45.5152, -122.6784, 4.5])
    sheet.append(["Sandy Floral Boutique", "123 Main St", 45.3975, -122.2611, 4.7])
    buffer = BytesIO()
    workbook.save(buffer)

    records = parse_florist_payload(buffer.getvalue(), ".xlsx", origin=FARM)

    assert [r.name for r in records] == ["Portland Petals", "Sandy Floral Boutique"]
    assert records[1].rating == 4.7


def test_unsupported_file_type() -> None:
    with pytest.raises(ValueError):
        parse_florist_payload(b"", ".txt", origin=FARM)


def test_csv_export_includes_territories() -> None:
    records = _parse_json(SAMPLE)
    content = florists_to_csv(records, {records[0].id: ["Portland Metro", "Sandy Area"]})

    lines = content.splitlines()
    assert lines[0].startswith("id,name,address,phoneNumber")
    assert "Portland Metro; Sandy Area" in lines[1]
    assert len(lines) == 4
