"""JSON-file backed store for florists, territories and routes."""

from __future__ import annotations

import functools
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Optional

from ..config import settings
from ..data.florists_repository import florist_from_dict, florist_to_dict, new_id
from ..models.domain import FloristRecord, FloristTerritory, Route, RouteStop, Territory
from ..services.geospatial import reference_point_from_settings
from .filesystem import FileStorage

logger = logging.getLogger(__name__)


class FloristStore:
    """In-memory tables persisted to a single JSON document on every write.

    Join rows (``FloristTerritory`` and ``RouteStop``) carry their own ids.
    Stops are kept with ``stop_order`` exactly ``1..N`` per route.
    """

    def __init__(self, path: Path | None = None, storage: FileStorage | None = None) -> None:
        self.path = (path or settings.store_file).resolve()
        self.storage = storage or FileStorage(root=self.path.parent)
        self._lock = threading.RLock()
        self.florists: dict[str, FloristRecord] = {}
        self.territories: dict[str, Territory] = {}
        self.memberships: dict[str, FloristTerritory] = {}
        self.routes: dict[str, Route] = {}
        self.stops: dict[str, RouteStop] = {}
        self._load()

    # -- persistence -----------------------------------------------------

    def _load(self) -> None:
        document = self.storage.read_json(self.path, default=None)
        if not document:
            return
        origin = reference_point_from_settings()
        for payload in document.get("florists", []):
            record = florist_from_dict(payload, origin=origin)
            self.florists[record.id] = record
        for payload in document.get("territories", []):
            territory = Territory(**payload)
            self.territories[territory.id] = territory
        for payload in document.get("florist_territories", []):
            membership = FloristTerritory(**payload)
            self.memberships[membership.id] = membership
        for payload in document.get("routes", []):
            route = Route(**payload)
            self.routes[route.id] = route
        for payload in document.get("route_stops", []):
            stop = RouteStop(**payload)
            self.stops[stop.id] = stop
        logger.info(
            "Loaded store %s: %s florists, %s territories, %s routes",
            self.path,
            len(self.florists),
            len(self.territories),
            len(self.routes),
        )

    def _document(self) -> dict[str, Any]:
        return {
            "florists": [florist_to_dict(record) for record in self.florists.values()],
            "territories": [
                {
                    "id": t.id,
                    "name": t.name,
                    "description": t.description,
                    "color": t.color,
                    "max_distance_miles": t.max_distance_miles,
                }
                for t in self.territories.values()
            ],
            "florist_territories": [
                {"id": m.id, "florist_id": m.florist_id, "territory_id": m.territory_id}
                for m in self.memberships.values()
            ],
            "routes": [
                {"id": r.id, "name": r.name, "description": r.description} for r in self.routes.values()
            ],
            "route_stops": [
                {"id": s.id, "route_id": s.route_id, "florist_id": s.florist_id, "stop_order": s.stop_order}
                for s in self.stops.values()
            ],
        }

    def save(self) -> None:
        with self._lock:
            self.storage.write_json(self.path, self._document())

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # -- florists --------------------------------------------------------

    def list_florists(self) -> list[FloristRecord]:
        with self._lock:
            return list(self.florists.values())

    def get_florist(self, florist_id: str) -> FloristRecord:
        with self._lock:
            record = self.florists.get(florist_id)
        if record is None:
            raise LookupError(f"Florist '{florist_id}' not found.")
        return record

    def find_by_place_id(self, place_id: str) -> Optional[FloristRecord]:
        with self._lock:
            return next((r for r in self.florists.values() if r.place_id == place_id), None)

    def put_florist(self, record: FloristRecord) -> FloristRecord:
        with self._lock:
            self.florists[record.id] = record
            self.save()
        return record

    def delete_florist(self, florist_id: str) -> None:
        """Remove a florist together with its memberships and route stops."""

        with self._lock:
            if florist_id not in self.florists:
                raise LookupError(f"Florist '{florist_id}' not found.")
            del self.florists[florist_id]
            for membership_id in [m.id for m in self.memberships.values() if m.florist_id == florist_id]:
                del self.memberships[membership_id]
            affected_routes = {s.route_id for s in self.stops.values() if s.florist_id == florist_id}
            for route_id in affected_routes:
                remaining = [s.florist_id for s in self.stops_for(route_id) if s.florist_id != florist_id]
                self._write_stops(route_id, remaining)
            self.save()

    # -- territories -----------------------------------------------------

    def list_territories(self) -> list[Territory]:
        with self._lock:
            return list(self.territories.values())

    def get_territory(self, territory_id: str) -> Territory:
        with self._lock:
            territory = self.territories.get(territory_id)
        if territory is None:
            raise LookupError(f"Territory '{territory_id}' not found.")
        return territory

    def put_territory(self, territory: Territory) -> Territory:
        with self._lock:
            self.territories[territory.id] = territory
            self.save()
        return territory

    def delete_territory(self, territory_id: str) -> None:
        with self._lock:
            if territory_id not in self.territories:
                raise LookupError(f"Territory '{territory_id}' not found.")
            del self.territories[territory_id]
            for membership_id in [m.id for m in self.memberships.values() if m.territory_id == territory_id]:
                del self.memberships[membership_id]
            self.save()

    def territory_ids_for(self, florist_id: str) -> set[str]:
        with self._lock:
            return {m.territory_id for m in self.memberships.values() if m.florist_id == florist_id}

    def florist_ids_for(self, territory_id: str) -> set[str]:
        with self._lock:
            return {m.florist_id for m in self.memberships.values() if m.territory_id == territory_id}

    def apply_memberships(self, florist_id: str, to_add: Iterable[str], to_remove: Iterable[str]) -> None:
        """Add and remove memberships for one florist; referenced rows must exist."""

        to_add, to_remove = set(to_add), set(to_remove)
        with self._lock:
            if florist_id not in self.florists:
                raise LookupError(f"Florist '{florist_id}' not found.")
            missing = sorted(tid for tid in to_add if tid not in self.territories)
            if missing:
                raise LookupError(f"Territory not found: {', '.join(missing)}")
            existing = self.territory_ids_for(florist_id)
            for territory_id in to_add - existing:
                membership = FloristTerritory(id=new_id(), florist_id=florist_id, territory_id=territory_id)
                self.memberships[membership.id] = membership
            for membership_id in [
                m.id
                for m in self.memberships.values()
                if m.florist_id == florist_id and m.territory_id in to_remove
            ]:
                del self.memberships[membership_id]
            self.save()

    # -- routes ----------------------------------------------------------

    def list_routes(self) -> list[Route]:
        with self._lock:
            return list(self.routes.values())

    def get_route(self, route_id: str) -> Route:
        with self._lock:
            route = self.routes.get(route_id)
        if route is None:
            raise LookupError(f"Route '{route_id}' not found.")
        return route

    def put_route(self, route: Route) -> Route:
        with self._lock:
            self.routes[route.id] = route
            self.save()
        return route

    def delete_route(self, route_id: str) -> None:
        with self._lock:
            if route_id not in self.routes:
                raise LookupError(f"Route '{route_id}' not found.")
            del self.routes[route_id]
            for stop_id in [s.id for s in self.stops.values() if s.route_id == route_id]:
                del self.stops[stop_id]
            self.save()

    def stops_for(self, route_id: str) -> list[RouteStop]:
        with self._lock:
            return sorted(
                (s for s in self.stops.values() if s.route_id == route_id),
                key=lambda stop: stop.stop_order,
            )

    def _write_stops(self, route_id: str, florist_ids: list[str]) -> list[RouteStop]:
        for stop_id in [s.id for s in self.stops.values() if s.route_id == route_id]:
            del self.stops[stop_id]
        stops = [
            RouteStop(id=new_id(), route_id=route_id, florist_id=florist_id, stop_order=index)
            for index, florist_id in enumerate(florist_ids, start=1)
        ]
        for stop in stops:
            self.stops[stop.id] = stop
        return stops

    def replace_stops(self, route_id: str, florist_ids: list[str]) -> list[RouteStop]:
        """Rewrite a route's stops in the given order, numbered from 1."""

        with self._lock:
            if route_id not in self.routes:
                raise LookupError(f"Route '{route_id}' not found.")
            missing = [fid for fid in florist_ids if fid not in self.florists]
            if missing:
                raise LookupError(f"Florist not found: {', '.join(missing)}")
            if len(set(florist_ids)) != len(florist_ids):
                raise ValueError("A florist can appear only once per route.")
            stops = self._write_stops(route_id, list(florist_ids))
            self.save()
            return stops


@functools.lru_cache(maxsize=1)
def get_store() -> FloristStore:
    return FloristStore()
