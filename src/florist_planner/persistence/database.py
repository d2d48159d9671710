"""Mirror of the florist store into Supabase tables.

The JSON store stays authoritative. When Supabase is configured, imports and
explicit sync requests upsert every table; failures are logged and reported
in the returned counts but never raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..db.supabase import get_supabase_client
from ..data.florists_repository import florist_to_dict
from ..models.domain import FloristRecord
from .store import FloristStore

BATCH_SIZE = 100

logger = logging.getLogger(__name__)


def _florist_row(record: FloristRecord) -> dict[str, Any]:
    payload = florist_to_dict(record)
    return {
        "id": payload["id"],
        "name": payload["name"],
        "address": payload["address"],
        "phone_number": payload["phoneNumber"],
        "website": payload["website"],
        "place_id": payload["placeId"],
        "latitude": payload["latitude"],
        "longitude": payload["longitude"],
        "distance_miles": payload["distanceMiles"],
        "rating": payload["rating"],
        "review_count": payload["reviewCount"],
        "business_hours": payload["businessHours"],
        "pricing_items": payload["pricingItems"],
        "notes": payload["notes"],
        "updated_at": payload["updatedAt"],
    }


def _upsert_rows(table: str, rows: Sequence[dict[str, Any]]) -> int:
    supabase = get_supabase_client()
    if not supabase or not rows:
        return 0

    saved = 0
    for i in range(0, len(rows), BATCH_SIZE):
        batch = list(rows[i:i + BATCH_SIZE])
        try:
            supabase.table(table).upsert(batch, on_conflict="id").execute()
            saved += len(batch)
        except Exception as e:
            logger.warning(f"Failed to upsert batch {i // BATCH_SIZE + 1} into '{table}': {e}")
    return saved


def _replace_rows(table: str, key: str, keys: Sequence[str], rows: Sequence[dict[str, Any]]) -> int:
    """Delete every row whose ``key`` is in ``keys``, then insert ``rows``.

    Join rows get fresh ids on every local rewrite.
    """
    supabase = get_supabase_client()
    if not supabase:
        return 0
    try:
        for i in range(0, len(keys), BATCH_SIZE):
            supabase.table(table).delete().in_(key, list(keys[i:i + BATCH_SIZE])).execute()
    except Exception as e:
        logger.warning(f"Failed to clear '{table}' before sync: {e}")
        return 0
    return _upsert_rows(table, rows)


def sync_store_to_database(store: FloristStore) -> dict[str, int]:
    """Upsert every table of the store. Parents are written before join rows."""
    if not get_supabase_client():
        return {}

    with store.lock:
        territories = [
            {
                "id": t.id,
                "name": t.name,
                "description": t.description,
                "color": t.color,
                "max_distance_miles": t.max_distance_miles,
            }
            for t in store.list_territories()
        ]
        florists = [_florist_row(record) for record in store.list_florists()]
        memberships = [
            {"id": m.id, "florist_id": m.florist_id, "territory_id": m.territory_id}
            for m in store.memberships.values()
        ]
        routes = [{"id": r.id, "name": r.name, "description": r.description} for r in store.list_routes()]
        stops = [
            {"id": s.id, "route_id": s.route_id, "florist_id": s.florist_id, "stop_order": s.stop_order}
            for s in store.stops.values()
        ]

    counts = {
        "territories": _upsert_rows("territories", territories),
        "florists": _upsert_rows("florists", florists),
        "florist_territories": _replace_rows(
            "florist_territories", "florist_id", [row["id"] for row in florists], memberships
        ),
        "routes": _upsert_rows("routes", routes),
        "route_stops": _replace_rows("route_stops", "route_id", [row["id"] for row in routes], stops),
    }
    logger.info(f"Synced store to database: {counts}")
    return counts


def check_database() -> dict[str, Any]:
    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set FLORIST_SUPABASE_URL and FLORIST_SUPABASE_KEY.",
        }
    try:
        response = supabase.table("florists").select("id", count="exact").limit(1).execute()
    except Exception as exc:
        return {"configured": True, "connected": False, "error": str(exc)}
    count = getattr(response, "count", None)
    return {"configured": True, "connected": True, "florists_count": count}
