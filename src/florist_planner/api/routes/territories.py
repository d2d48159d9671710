"""Territory endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from ...persistence.store import get_store
from ...schemas.territories import AssignmentResponse, TerritoryCreateRequest, TerritoryModel
from ...services.territories.service import create_territory, reassign_all, territory_summaries
from ..errors import service_errors

router = APIRouter(prefix="/territories", tags=["territories"])


@router.get("", response_model=List[TerritoryModel], status_code=status.HTTP_200_OK)
def list_territories() -> List[TerritoryModel]:
    with service_errors("list territories"):
        return [TerritoryModel(**entry) for entry in territory_summaries(get_store())]


@router.post("", response_model=TerritoryModel, status_code=status.HTTP_201_CREATED)
def add_territory(payload: TerritoryCreateRequest) -> TerritoryModel:
    with service_errors("create territory"):
        store = get_store()
        territory = create_territory(
            store,
            name=payload.name,
            description=payload.description,
            color=payload.color,
            max_distance_miles=payload.max_distance_miles,
        )
        return TerritoryModel(
            id=territory.id,
            name=territory.name,
            description=territory.description,
            color=territory.color,
            max_distance_miles=territory.max_distance_miles,
            florist_ids=sorted(store.florist_ids_for(territory.id)),
        )


@router.post("/assign", response_model=AssignmentResponse, status_code=status.HTTP_200_OK)
def assign_all() -> AssignmentResponse:
    """Re-run distance threshold assignment for every florist."""
    with service_errors("assign territories"):
        assignments = reassign_all(get_store())
        return AssignmentResponse(florists=len(assignments), assignments=assignments)


@router.get("/{territory_id}", response_model=TerritoryModel, status_code=status.HTTP_200_OK)
def get_territory(territory_id: str) -> TerritoryModel:
    with service_errors("load territory"):
        store = get_store()
        territory = store.get_territory(territory_id)
        return TerritoryModel(
            id=territory.id,
            name=territory.name,
            description=territory.description,
            color=territory.color,
            max_distance_miles=territory.max_distance_miles,
            florist_ids=sorted(store.florist_ids_for(territory.id)),
        )


@router.delete("/{territory_id}", status_code=status.HTTP_200_OK)
def delete_territory(territory_id: str) -> dict:
    with service_errors("delete territory"):
        get_store().delete_territory(territory_id)
        return {"success": True, "message": f"Territory {territory_id} deleted"}
