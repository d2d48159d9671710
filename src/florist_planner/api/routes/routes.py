"""Delivery route endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from ...persistence.store import get_store
from ...schemas.routes import AddStopRequest, ReorderStopsRequest, RouteCreateRequest, RouteModel
from ...services.geospatial import reference_point_from_settings
from ...services.routes.service import (
    add_stop,
    create_route,
    delete_route,
    optimize_route,
    remove_stop,
    reorder_stops,
    summarize_route,
)
from ..errors import service_errors

router = APIRouter(prefix="/routes", tags=["routes"])


def _route_model(route_id: str) -> RouteModel:
    return RouteModel.from_summary(summarize_route(get_store(), route_id, reference_point_from_settings()))


@router.get("", response_model=List[RouteModel], status_code=status.HTTP_200_OK)
def list_routes() -> List[RouteModel]:
    with service_errors("list routes"):
        return [_route_model(route.id) for route in get_store().list_routes()]


@router.post("", response_model=RouteModel, status_code=status.HTTP_201_CREATED)
def add_route(payload: RouteCreateRequest) -> RouteModel:
    with service_errors("create route"):
        route = create_route(
            get_store(),
            name=payload.name,
            description=payload.description,
            florist_ids=payload.florist_ids,
        )
        return _route_model(route.id)


@router.get("/{route_id}", response_model=RouteModel, status_code=status.HTTP_200_OK)
def get_route(route_id: str) -> RouteModel:
    with service_errors("load route"):
        return _route_model(route_id)


@router.delete("/{route_id}", status_code=status.HTTP_200_OK)
def remove_route(route_id: str) -> dict:
    with service_errors("delete route"):
        delete_route(get_store(), route_id)
        return {"success": True, "message": f"Route {route_id} deleted"}


@router.post("/{route_id}/stops", response_model=RouteModel, status_code=status.HTTP_200_OK)
def add_route_stop(route_id: str, payload: AddStopRequest) -> RouteModel:
    with service_errors("add route stop"):
        add_stop(get_store(), route_id, payload.florist_id, position=payload.position)
        return _route_model(route_id)


@router.delete("/{route_id}/stops/{florist_id}", response_model=RouteModel, status_code=status.HTTP_200_OK)
def remove_route_stop(route_id: str, florist_id: str) -> RouteModel:
    with service_errors("remove route stop"):
        remove_stop(get_store(), route_id, florist_id)
        return _route_model(route_id)


@router.put("/{route_id}/stops/order", response_model=RouteModel, status_code=status.HTTP_200_OK)
def reorder_route_stops(route_id: str, payload: ReorderStopsRequest) -> RouteModel:
    with service_errors("reorder route stops"):
        reorder_stops(get_store(), route_id, payload.florist_ids)
        return _route_model(route_id)


@router.post("/{route_id}/optimize", response_model=RouteModel, status_code=status.HTTP_200_OK)
def optimize(route_id: str) -> RouteModel:
    """Resequence stops nearest-first starting from the farm."""
    with service_errors("optimize route"):
        optimize_route(get_store(), route_id, reference_point_from_settings())
        return _route_model(route_id)
