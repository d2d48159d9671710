"""Map data endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from ...persistence.store import get_store
from ...services.export.geojson import build_map_geojson
from ...services.geospatial import reference_point_from_settings
from ..errors import service_errors

router = APIRouter(prefix="/map", tags=["map"])


@router.get("/geojson", status_code=status.HTTP_200_OK)
def map_geojson(
    outlines: bool = Query(default=True, description="Include territory hull polygons"),
) -> dict:
    with service_errors("build map data"):
        return build_map_geojson(get_store(), reference_point_from_settings(), include_outlines=outlines)
