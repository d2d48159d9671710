"""Google Maps proxy endpoints with tagged sample fallback."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.maps import GatewayResponse, GeocodeRequest, PlaceDetailsRequest, SearchPlacesRequest
from ...services.maps.gateway import get_gateway
from ..errors import service_errors

router = APIRouter(prefix="/maps", tags=["maps"])


@router.post("/geocode", response_model=GatewayResponse, status_code=status.HTTP_200_OK)
def geocode(payload: GeocodeRequest) -> GatewayResponse:
    with service_errors("geocode address"):
        return GatewayResponse.from_result(get_gateway().geocode(payload.address))


@router.post("/search-places", response_model=GatewayResponse, status_code=status.HTTP_200_OK)
def search_places(payload: SearchPlacesRequest) -> GatewayResponse:
    with service_errors("search places"):
        location = payload.location.to_point() if payload.location else None
        result = get_gateway().search_places(payload.query, location=location, radius_meters=payload.radius)
        return GatewayResponse.from_result(result)


@router.post("/place-details", response_model=GatewayResponse, status_code=status.HTTP_200_OK)
def place_details(payload: PlaceDetailsRequest) -> GatewayResponse:
    with service_errors("fetch place details"):
        return GatewayResponse.from_result(get_gateway().place_details(payload.place_id))
