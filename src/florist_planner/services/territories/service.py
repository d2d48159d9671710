"""Territory management and threshold-driven assignment over the store."""

from __future__ import annotations

import logging
import math
from typing import Optional

from ...config import settings
from ...data.florists_repository import new_id
from ...models.domain import Territory
from ...persistence.store import FloristStore
from ..export.geojson import generate_territory_color
from .assigner import ReassignmentPlan, assign_territories, plan_reassignment, thresholds_from_territories

logger = logging.getLogger(__name__)


def create_territory(
    store: FloristStore,
    *,
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
    max_distance_miles: Optional[float] = None,
    assign: bool = True,
) -> Territory:
    name = (name or "").strip()
    if not name:
        raise ValueError("Name is required.")
    if max_distance_miles is not None and (not math.isfinite(max_distance_miles) or max_distance_miles < 0):
        raise ValueError("max_distance_miles must be a non-negative number.")
    if any(t.name.lower() == name.lower() for t in store.list_territories()):
        raise ValueError(f"Territory '{name}' already exists.")

    territory = Territory(
        id=new_id(),
        name=name,
        description=(description or "").strip() or None,
        color=color or generate_territory_color(len(store.list_territories())),
        max_distance_miles=max_distance_miles,
    )
    store.put_territory(territory)
    logger.info("Created territory %s (%s miles)", territory.name, max_distance_miles)
    if assign and max_distance_miles is not None:
        reassign_all(store)
    return territory


def ensure_default_territories(store: FloristStore) -> list[Territory]:
    """Seed the configured distance territories into an empty store."""

    if store.list_territories():
        return []
    created = [
        create_territory(store, name=name, max_distance_miles=miles, assign=False)
        for name, miles in settings.default_territories
    ]
    if created:
        reassign_all(store)
    return created


def reassign_florist(store: FloristStore, florist_id: str) -> ReassignmentPlan:
    """Bring one florist's threshold memberships in line with its distance.

    Running it again with an unchanged distance is a no-op.
    """

    florist = store.get_florist(florist_id)
    thresholds = thresholds_from_territories(store.list_territories())
    desired = assign_territories(florist.distance_miles, thresholds)
    plan = plan_reassignment(
        current=store.territory_ids_for(florist_id),
        desired=desired,
        managed={threshold.territory_id for threshold in thresholds},
    )
    if not plan.is_noop:
        store.apply_memberships(florist_id, plan.to_add, plan.to_remove)
    return plan


def reassign_all(store: FloristStore) -> dict[str, list[str]]:
    assignments: dict[str, list[str]] = {}
    for florist in store.list_florists():
        reassign_florist(store, florist.id)
        assignments[florist.id] = sorted(store.territory_ids_for(florist.id))
    logger.info("Re-ran territory assignment for %s florists", len(assignments))
    return assignments


def assign_florist(store: FloristStore, florist_id: str, territory_id: str) -> None:
    store.get_territory(territory_id)
    store.apply_memberships(florist_id, to_add={territory_id}, to_remove=set())


def unassign_florist(store: FloristStore, florist_id: str, territory_id: str) -> None:
    store.get_territory(territory_id)
    if territory_id not in store.territory_ids_for(florist_id):
        raise LookupError(f"Florist '{florist_id}' is not assigned to territory '{territory_id}'.")
    store.apply_memberships(florist_id, to_add=set(), to_remove={territory_id})


def territory_summaries(store: FloristStore) -> list[dict]:
    summaries = []
    for territory in store.list_territories():
        summaries.append(
            {
                "id": territory.id,
                "name": territory.name,
                "description": territory.description,
                "color": territory.color,
                "max_distance_miles": territory.max_distance_miles,
                "florist_ids": sorted(store.florist_ids_for(territory.id)),
            }
        )
    return summaries
