"""Delivery route planning over stored florists."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ...data.florists_repository import new_id
from ...models.domain import GeoPoint, Route, RouteStop
from ...persistence.store import FloristStore
from ..geospatial import distance_miles

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StopSummary:
    stop_order: int
    florist_id: str
    name: str
    address: str
    location: Optional[GeoPoint]
    leg_miles: Optional[float]


@dataclass(slots=True)
class RouteSummary:
    route: Route
    stops: list[StopSummary] = field(default_factory=list)
    total_miles: float = 0.0
    unlocated_stops: int = 0


def validate_stop_order(stops: Iterable[RouteStop]) -> bool:
    """True when the stop orders are exactly ``1..N``."""

    orders = sorted(stop.stop_order for stop in stops)
    return orders == list(range(1, len(orders) + 1))


def create_route(
    store: FloristStore,
    *,
    name: str,
    description: Optional[str] = None,
    florist_ids: Sequence[str] = (),
) -> Route:
    name = (name or "").strip()
    if not name:
        raise ValueError("Name is required.")
    missing = [fid for fid in florist_ids if fid not in store.florists]
    if missing:
        raise LookupError(f"Florist not found: {', '.join(missing)}")
    if len(set(florist_ids)) != len(florist_ids):
        raise ValueError("A florist can appear only once per route.")

    route = Route(id=new_id(), name=name, description=(description or "").strip() or None)
    with store.lock:
        store.put_route(route)
        if florist_ids:
            store.replace_stops(route.id, list(florist_ids))
    logger.info("Created route %s with %s stops", route.name, len(florist_ids))
    return route


def _florist_order(store: FloristStore, route_id: str) -> list[str]:
    store.get_route(route_id)
    return [stop.florist_id for stop in store.stops_for(route_id)]


def add_stop(
    store: FloristStore, route_id: str, florist_id: str, position: Optional[int] = None
) -> list[RouteStop]:
    """Insert a florist at 1-based ``position`` (appended when omitted)."""

    with store.lock:
        order = _florist_order(store, route_id)
        store.get_florist(florist_id)
        if florist_id in order:
            raise ValueError("Florist is already on this route.")
        if position is None:
            order.append(florist_id)
        else:
            if position < 1 or position > len(order) + 1:
                raise ValueError(f"Position must be between 1 and {len(order) + 1}.")
            order.insert(position - 1, florist_id)
        return store.replace_stops(route_id, order)


def remove_stop(store: FloristStore, route_id: str, florist_id: str) -> list[RouteStop]:
    with store.lock:
        order = _florist_order(store, route_id)
        if florist_id not in order:
            raise LookupError(f"Florist '{florist_id}' is not on route '{route_id}'.")
        order.remove(florist_id)
        return store.replace_stops(route_id, order)


def reorder_stops(store: FloristStore, route_id: str, florist_ids: Sequence[str]) -> list[RouteStop]:
    """Set a new stop order; ``florist_ids`` must be a permutation of the current stops."""

    with store.lock:
        current = _florist_order(store, route_id)
        if len(florist_ids) != len(current) or set(florist_ids) != set(current):
            raise ValueError("New order must list exactly the florists already on the route.")
        return store.replace_stops(route_id, list(florist_ids))


def nearest_neighbour_order(origin: GeoPoint, points: dict[str, GeoPoint]) -> list[str]:
    """Greedy visiting order from ``origin``; ties resolve in input order."""

    remaining = dict(points)
    current = origin
    ordered: list[str] = []
    while remaining:
        next_id = min(remaining, key=lambda key: distance_miles(current, remaining[key]))
        ordered.append(next_id)
        current = remaining.pop(next_id)
    return ordered


def optimize_route(store: FloristStore, route_id: str, origin: GeoPoint) -> list[RouteStop]:
    """Resequence stops by nearest neighbour; florists without coordinates go last."""

    with store.lock:
        current = _florist_order(store, route_id)
        located = {
            fid: store.florists[fid].location for fid in current if store.florists[fid].location is not None
        }
        unlocated = [fid for fid in current if fid not in located]
        ordered = nearest_neighbour_order(origin, located) + unlocated
        stops = store.replace_stops(route_id, ordered)
    logger.info("Optimized route %s (%s stops)", route_id, len(stops))
    return stops


def summarize_route(store: FloristStore, route_id: str, origin: GeoPoint) -> RouteSummary:
    """Stops with leg distances; the total runs origin -> stops -> origin over located stops."""

    route = store.get_route(route_id)
    summary = RouteSummary(route=route)
    previous = origin
    for stop in store.stops_for(route_id):
        florist = store.get_florist(stop.florist_id)
        leg = None
        if florist.location is not None:
            leg = distance_miles(previous, florist.location)
            summary.total_miles += leg
            previous = florist.location
        else:
            summary.unlocated_stops += 1
        summary.stops.append(
            StopSummary(
                stop_order=stop.stop_order,
                florist_id=florist.id,
                name=florist.name,
                address=florist.address,
                location=florist.location,
                leg_miles=leg,
            )
        )
    if previous is not origin:
        summary.total_miles += distance_miles(previous, origin)
    return summary


def delete_route(store: FloristStore, route_id: str) -> None:
    store.delete_route(route_id)
    logger.info("Deleted route %s", route_id)
