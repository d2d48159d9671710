"""Route group exports."""

from . import florists, health, map_view, maps, routes, territories

__all__ = ["florists", "health", "map_view", "maps", "routes", "territories"]
