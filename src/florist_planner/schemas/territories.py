"""Territory API schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TerritoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    max_distance_miles: Optional[float] = Field(
        default=None,
        ge=0,
        description="Distance threshold from the farm; omit for a manual-only territory.",
    )


class TerritoryModel(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    max_distance_miles: Optional[float] = None
    florist_ids: List[str] = []


class AssignmentResponse(BaseModel):
    florists: int
    assignments: Dict[str, List[str]]
