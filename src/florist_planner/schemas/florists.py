"""Florist catalog API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..data.florists_repository import florist_to_dict
from ..models.domain import FloristRecord, GeoPoint, PricingItem, WeeklyHours


class LatLngModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint.validated(self.lat, self.lng)


class BusinessHoursModel(BaseModel):
    monday: Optional[str] = None
    tuesday: Optional[str] = None
    wednesday: Optional[str] = None
    thursday: Optional[str] = None
    friday: Optional[str] = None
    saturday: Optional[str] = None
    sunday: Optional[str] = None

    def to_hours(self) -> Optional[WeeklyHours]:
        hours = WeeklyHours(**self.model_dump())
        return None if hours.is_empty() else hours


class PricingItemModel(BaseModel):
    itemName: str = Field(..., min_length=1)
    priceRange: str = Field(..., min_length=1)


class FloristModel(BaseModel):
    id: str
    name: str
    address: str
    phoneNumber: Optional[str] = None
    website: Optional[str] = None
    placeId: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distanceMiles: Optional[float] = None
    rating: Optional[float] = None
    reviewCount: Optional[int] = None
    businessHours: Optional[BusinessHoursModel] = None
    pricingItems: List[PricingItemModel] = []
    notes: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    territoryIds: List[str] = []

    @classmethod
    def from_record(cls, record: FloristRecord, territory_ids: Optional[set[str]] = None) -> "FloristModel":
        return cls(**florist_to_dict(record), territoryIds=sorted(territory_ids or ()))


class FloristCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    phoneNumber: Optional[str] = None
    website: Optional[str] = None
    placeId: Optional[str] = None
    location: Optional[LatLngModel] = Field(
        default=None,
        description="Known coordinates; when omitted the address is geocoded.",
    )
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    reviewCount: Optional[int] = Field(default=None, ge=0)
    businessHours: Optional[BusinessHoursModel] = None
    pricingItems: List[PricingItemModel] = []
    notes: Optional[str] = None

    @field_validator("name", "address")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    def pricing(self) -> list[PricingItem]:
        return [PricingItem(item_name=item.itemName, price_range=item.priceRange) for item in self.pricingItems]


class FloristUpdateRequest(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phoneNumber: Optional[str] = None
    website: Optional[str] = None
    placeId: Optional[str] = None
    location: Optional[LatLngModel] = None
    clearLocation: bool = False
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    reviewCount: Optional[int] = Field(default=None, ge=0)
    businessHours: Optional[BusinessHoursModel] = None
    pricingItems: Optional[List[PricingItemModel]] = None
    notes: Optional[str] = None

    def changes(self) -> dict:
        """Record field changes for the fields the client actually sent."""

        sent = self.model_fields_set
        mapping = {
            "name": "name",
            "address": "address",
            "phoneNumber": "phone_number",
            "website": "website",
            "placeId": "place_id",
            "rating": "rating",
            "reviewCount": "review_count",
            "notes": "notes",
        }
        changes = {target: getattr(self, source) for source, target in mapping.items() if source in sent}
        if "businessHours" in sent:
            changes["business_hours"] = self.businessHours.to_hours() if self.businessHours else None
        if "pricingItems" in sent:
            changes["pricing_items"] = [
                PricingItem(item_name=item.itemName, price_range=item.priceRange)
                for item in self.pricingItems or []
            ]
        return changes


class FloristChangeResponse(BaseModel):
    florist: FloristModel
    geocodeSource: Optional[str] = None
    geocodeStatus: Optional[str] = None


class NotesUpdateRequest(BaseModel):
    notes: Optional[str] = None


class NoteAppendRequest(BaseModel):
    text: str = Field(..., min_length=1)


class ImportResponse(BaseModel):
    created: int
    updated: int
    total: int
    mirrored: int = 0


class DiscoveryRequest(BaseModel):
    query: Optional[str] = None
    radiusMeters: Optional[float] = Field(default=None, gt=0)
    farmAddress: Optional[str] = None
    importResults: bool = True
    writeFile: bool = False


class DiscoveryResponse(BaseModel):
    source: str
    authoritative: bool
    searchStatus: str
    center: LatLngModel
    found: int
    detailsFetched: int
    warnings: List[str] = []
    florists: List[FloristModel] = []
    imported: Optional[ImportResponse] = None


class TerritoryCountModel(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    florists: int


class TopRatedModel(BaseModel):
    id: str
    name: str
    rating: float


class FloristStatsResponse(BaseModel):
    totalFlorists: int
    withCoordinates: int
    averageDistanceMiles: Optional[float] = None
    averageRating: Optional[float] = None
    within10Miles: int
    within30Miles: int
    territories: List[TerritoryCountModel]
    routes: int
    topRated: List[TopRatedModel]
