"""GeoJSON export of florists, territories and routes for the map view."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from shapely.geometry import MultiPoint, mapping

from ...models.domain import GeoPoint
from ...persistence.store import FloristStore

DEFAULT_MARKER_COLOR = "#757575"


def generate_territory_color(index: int) -> str:
    """Generate distinct colors for territories."""
    colors = [
        "#4CAF50", "#2196F3", "#FF9800", "#9C27B0", "#E91E63",
        "#00BCD4", "#795548", "#CDDC39", "#3F51B5", "#FF5722",
        "#009688", "#FFC107", "#673AB7", "#8BC34A", "#F44336",
    ]
    return colors[index % len(colors)]


def _lon_lat(point: GeoPoint) -> List[float]:
    # GeoJSON uses lon,lat order (x,y)
    return [point.longitude, point.latitude]


def territory_outline(points: List[GeoPoint]) -> Optional[Dict[str, Any]]:
    """Convex hull of member locations; ``None`` when fewer than three distinct points."""

    unique = {(p.longitude, p.latitude) for p in points}
    if len(unique) < 3:
        return None
    hull = MultiPoint(sorted(unique)).convex_hull
    if hull.geom_type != "Polygon":
        return None
    return mapping(hull)


def build_map_geojson(store: FloristStore, origin: GeoPoint, *, include_outlines: bool = True) -> Dict[str, Any]:
    """Assemble a FeatureCollection with the farm, florist markers, territory outlines and routes."""

    features: List[Dict[str, Any]] = [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": _lon_lat(origin)},
            "properties": {"kind": "origin"},
        }
    ]

    territories = store.list_territories()
    colors = {t.id: t.color or generate_territory_color(idx) for idx, t in enumerate(territories)}
    order = {t.id: idx for idx, t in enumerate(territories)}

    for florist in store.list_florists():
        if florist.location is None:
            continue
        territory_ids = sorted(store.territory_ids_for(florist.id), key=lambda tid: order.get(tid, len(order)))
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": _lon_lat(florist.location)},
                "properties": {
                    "kind": "florist",
                    "id": florist.id,
                    "name": florist.name,
                    "address": florist.address,
                    "distanceMiles": florist.distance_miles,
                    "rating": florist.rating,
                    "territoryIds": territory_ids,
                    "color": colors[territory_ids[0]] if territory_ids else DEFAULT_MARKER_COLOR,
                },
            }
        )

    if include_outlines:
        for territory in territories:
            points = [
                florist.location
                for florist in (store.florists.get(fid) for fid in store.florist_ids_for(territory.id))
                if florist is not None and florist.location is not None
            ]
            geometry = territory_outline(points)
            if geometry is None:
                continue
            features.append(
                {
                    "type": "Feature",
                    "geometry": geometry,
                    "properties": {
                        "kind": "territory",
                        "id": territory.id,
                        "name": territory.name,
                        "color": colors[territory.id],
                        "florists": len(points),
                    },
                }
            )

    for idx, route in enumerate(store.list_routes()):
        coordinates = [_lon_lat(origin)]
        for stop in store.stops_for(route.id):
            florist = store.florists.get(stop.florist_id)
            if florist is not None and florist.location is not None:
                coordinates.append(_lon_lat(florist.location))
        if len(coordinates) < 2:
            continue
        coordinates.append(_lon_lat(origin))
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": coordinates},
                "properties": {
                    "kind": "route",
                    "id": route.id,
                    "name": route.name,
                    "color": generate_territory_color(idx + len(territories)),
                    "stops": len(coordinates) - 2,
                },
            }
        )

    return {"type": "FeatureCollection", "features": features}
