"""Florist catalog endpoints."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from ...data.florists_repository import export_florists, florists_to_csv, parse_florist_payload
from ...persistence.database import sync_store_to_database
from ...persistence.store import get_store
from ...schemas.florists import (
    DiscoveryRequest,
    DiscoveryResponse,
    FloristChangeResponse,
    FloristCreateRequest,
    FloristModel,
    FloristStatsResponse,
    FloristUpdateRequest,
    ImportResponse,
    LatLngModel,
    NoteAppendRequest,
    NotesUpdateRequest,
)
from ...services.florists.discovery import discover_florists, write_florists_file
from ...services.florists.service import (
    SORT_FIELDS,
    append_note,
    compute_florist_stats,
    create_florist,
    delete_florist,
    import_florists,
    list_florists,
    territory_names_by_florist,
    update_florist,
    update_notes,
)
from ...services.geospatial import reference_point_from_settings
from ...services.maps.gateway import get_gateway
from ...services.territories.service import assign_florist, unassign_florist
from ..errors import service_errors

router = APIRouter(prefix="/florists", tags=["florists"])


def _model(florist_id: str) -> FloristModel:
    store = get_store()
    return FloristModel.from_record(store.get_florist(florist_id), store.territory_ids_for(florist_id))


@router.get("", response_model=List[FloristModel], status_code=status.HTTP_200_OK)
def get_florists(
    sort: str = Query(default="name", description=f"One of: {', '.join(SORT_FIELDS)}"),
    order: Literal["asc", "desc"] = Query(default="asc"),
    distance: float | None = Query(default=None, ge=0, description="Maximum distance from the farm in miles"),
    search: str | None = Query(default=None, description="Matches name, address or notes"),
    territory_id: str | None = Query(default=None),
) -> List[FloristModel]:
    with service_errors("list florists"):
        store = get_store()
        records = list_florists(
            store,
            sort=sort,
            order=order,
            max_distance=distance,
            search=search,
            territory_id=territory_id,
        )
        return [FloristModel.from_record(r, store.territory_ids_for(r.id)) for r in records]


@router.post("", response_model=FloristChangeResponse, status_code=status.HTTP_201_CREATED)
def add_florist(payload: FloristCreateRequest) -> FloristChangeResponse:
    with service_errors("create florist"):
        creation = create_florist(
            get_store(),
            get_gateway(),
            name=payload.name,
            address=payload.address,
            phone_number=payload.phoneNumber,
            website=payload.website,
            place_id=payload.placeId,
            location=payload.location.to_point() if payload.location else None,
            rating=payload.rating,
            review_count=payload.reviewCount,
            business_hours=payload.businessHours.to_hours() if payload.businessHours else None,
            pricing_items=payload.pricing(),
            notes=payload.notes,
        )
        return FloristChangeResponse(
            florist=_model(creation.record.id),
            geocodeSource=creation.geocode_source,
            geocodeStatus=creation.geocode_status,
        )


@router.get("/stats", response_model=FloristStatsResponse, status_code=status.HTTP_200_OK)
def get_florist_stats() -> FloristStatsResponse:
    with service_errors("compute florist stats"):
        return FloristStatsResponse(**compute_florist_stats(get_store()))


@router.get("/export", status_code=status.HTTP_200_OK)
def export_catalog(format: Literal["json", "csv"] = Query(default="json")):
    """Export every florist as the JSON interchange list or as CSV."""
    with service_errors("export florists"):
        store = get_store()
        records = store.list_florists()
        if format == "csv":
            content = florists_to_csv(records, territory_names_by_florist(store))
            return Response(
                content=content,
                media_type="text/csv",
                headers={"Content-Disposition": 'attachment; filename="florists.csv"'},
            )
        return export_florists(records)


@router.post("/import", response_model=ImportResponse, status_code=status.HTTP_201_CREATED)
async def import_catalog(file: UploadFile = File(...)) -> ImportResponse:
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in {".json", ".csv", ".xlsx"}:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only .json, .csv and .xlsx files are supported.",
        )

    contents = await file.read()
    with service_errors("import florists"):
        store = get_store()
        origin = reference_point_from_settings()
        records = parse_florist_payload(contents, suffix, origin=origin)
        summary = import_florists(store, records, origin=origin)
        summary.mirrored = sync_store_to_database(store).get("florists", 0)
        return ImportResponse(
            created=summary.created,
            updated=summary.updated,
            total=summary.total,
            mirrored=summary.mirrored,
        )


@router.post("/discover", response_model=DiscoveryResponse, status_code=status.HTTP_200_OK)
def discover(payload: DiscoveryRequest) -> DiscoveryResponse:
    """Search Google Maps for florists around the farm and optionally import them."""
    with service_errors("discover florists"):
        result = discover_florists(
            get_gateway(),
            query=payload.query,
            radius_meters=payload.radiusMeters,
            farm_address=payload.farmAddress,
        )
        warnings = list(result.warnings)
        persist = result.authoritative and bool(result.records)
        if not result.authoritative and (payload.writeFile or payload.importResults):
            warnings.append("Sample results were not written or imported.")
        if payload.writeFile and persist:
            write_florists_file(result.records)

        imported = None
        if payload.importResults and persist:
            store = get_store()
            summary = import_florists(store, result.records, origin=reference_point_from_settings())
            summary.mirrored = sync_store_to_database(store).get("florists", 0)
            imported = ImportResponse(
                created=summary.created,
                updated=summary.updated,
                total=summary.total,
                mirrored=summary.mirrored,
            )

        return DiscoveryResponse(
            source=result.source,
            authoritative=result.authoritative,
            searchStatus=result.search_status,
            center=LatLngModel(lat=result.center.latitude, lng=result.center.longitude),
            found=len(result.records),
            detailsFetched=result.details_fetched,
            warnings=warnings,
            florists=[FloristModel.from_record(record) for record in result.records],
            imported=imported,
        )


@router.get("/{florist_id}", response_model=FloristModel, status_code=status.HTTP_200_OK)
def get_florist(florist_id: str) -> FloristModel:
    with service_errors("load florist"):
        return _model(florist_id)


@router.patch("/{florist_id}", response_model=FloristChangeResponse, status_code=status.HTTP_200_OK)
def patch_florist(florist_id: str, payload: FloristUpdateRequest) -> FloristChangeResponse:
    with service_errors("update florist"):
        change = update_florist(
            get_store(),
            get_gateway(),
            florist_id,
            payload.changes(),
            location=payload.location.to_point() if payload.location else None,
            clear_location=payload.clearLocation,
        )
        return FloristChangeResponse(
            florist=_model(florist_id),
            geocodeSource=change.geocode_source,
            geocodeStatus=change.geocode_status,
        )


@router.delete("/{florist_id}", status_code=status.HTTP_200_OK)
def remove_florist(florist_id: str) -> dict:
    with service_errors("delete florist"):
        delete_florist(get_store(), florist_id)
        return {"success": True, "message": f"Florist {florist_id} deleted"}


@router.put("/{florist_id}/notes", response_model=FloristModel, status_code=status.HTTP_200_OK)
def put_notes(florist_id: str, payload: NotesUpdateRequest) -> FloristModel:
    with service_errors("update notes"):
        update_notes(get_store(), florist_id, payload.notes)
        return _model(florist_id)


@router.post("/{florist_id}/notes", response_model=FloristModel, status_code=status.HTTP_200_OK)
def post_note(florist_id: str, payload: NoteAppendRequest) -> FloristModel:
    with service_errors("append note"):
        append_note(get_store(), florist_id, payload.text)
        return _model(florist_id)


@router.post("/{florist_id}/territories/{territory_id}", response_model=FloristModel, status_code=status.HTTP_200_OK)
def add_to_territory(florist_id: str, territory_id: str) -> FloristModel:
    with service_errors("assign territory"):
        assign_florist(get_store(), florist_id, territory_id)
        return _model(florist_id)


@router.delete("/{florist_id}/territories/{territory_id}", response_model=FloristModel, status_code=status.HTTP_200_OK)
def remove_from_territory(florist_id: str, territory_id: str) -> FloristModel:
    with service_errors("unassign territory"):
        unassign_florist(get_store(), florist_id, territory_id)
        return _model(florist_id)
