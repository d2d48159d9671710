"""Delivery route schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..services.routes.service import RouteSummary


class RouteCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    florist_ids: List[str] = Field(default_factory=list, description="Initial stops in visiting order.")


class AddStopRequest(BaseModel):
    florist_id: str
    position: Optional[int] = Field(default=None, ge=1, description="1-based position; appended when omitted.")


class ReorderStopsRequest(BaseModel):
    florist_ids: List[str]


class RouteStopModel(BaseModel):
    stop_order: int
    florist_id: str
    name: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    leg_miles: Optional[float] = None


class RouteModel(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    total_miles: float
    unlocated_stops: int
    stops: List[RouteStopModel]

    @classmethod
    def from_summary(cls, summary: RouteSummary) -> "RouteModel":
        return cls(
            id=summary.route.id,
            name=summary.route.name,
            description=summary.route.description,
            total_miles=round(summary.total_miles, 2),
            unlocated_stops=summary.unlocated_stops,
            stops=[
                RouteStopModel(
                    stop_order=stop.stop_order,
                    florist_id=stop.florist_id,
                    name=stop.name,
                    address=stop.address,
                    latitude=stop.location.latitude if stop.location else None,
                    longitude=stop.location.longitude if stop.location else None,
                    leg_miles=round(stop.leg_miles, 2) if stop.leg_miles is not None else None,
                )
                for stop in summary.stops
            ],
        )
