"""Google Maps proxy schemas."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..services.maps.gateway import GatewayResult
from .florists import LatLngModel


class GeocodeRequest(BaseModel):
    address: str


class SearchPlacesRequest(BaseModel):
    query: str
    location: Optional[LatLngModel] = None
    radius: Optional[float] = Field(default=None, description="Search radius in meters.")


class PlaceDetailsRequest(BaseModel):
    place_id: str


class GatewayResponse(BaseModel):
    source: str
    status: str
    authoritative: bool
    error: Optional[str] = None
    data: Any = None

    @classmethod
    def from_result(cls, result: GatewayResult) -> "GatewayResponse":
        data = result.data
        if isinstance(data, list):
            data = [asdict(item) for item in data]
        elif is_dataclass(data):
            data = asdict(data)
        return cls(
            source=result.source,
            status=result.status,
            authoritative=result.authoritative,
            error=result.error,
            data=data,
        )
