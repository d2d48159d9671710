"""Export services."""

from .geojson import build_map_geojson, generate_territory_color

__all__ = [
    "build_map_geojson",
    "generate_territory_color",
]
