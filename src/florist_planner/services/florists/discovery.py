"""Bulk discovery of florists around the farm through the maps gateway."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ...config import settings
from ...data.florists_repository import export_florists, new_id, utcnow
from ...models.domain import FloristRecord, GeoPoint
from ...persistence.filesystem import FileStorage
from ..maps.gateway import GatewayResult, MapsGateway, PlaceCandidate, PlaceDetails

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiscoveryResult:
    records: list[FloristRecord]
    source: str
    center: GeoPoint
    search_status: str
    details_fetched: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def authoritative(self) -> bool:
        return self.source == "live"


def _record_from_candidate(candidate: PlaceCandidate, details: Optional[PlaceDetails]) -> FloristRecord:
    now = utcnow()
    hours = None
    if details is not None and not details.business_hours.is_empty():
        hours = details.business_hours
    return FloristRecord(
        id=new_id(),
        name=candidate.name,
        address=candidate.address or (details.address if details else None) or candidate.name,
        phone_number=candidate.phone_number or (details.phone_number if details else None),
        website=candidate.website or (details.website if details else None),
        place_id=candidate.place_id,
        location=candidate.location,
        distance_miles=candidate.distance_miles,
        rating=candidate.rating,
        review_count=candidate.review_count,
        business_hours=hours,
        created_at=now,
        updated_at=now,
    )


def _search_center(gateway: MapsGateway, farm_address: str, warnings: list[str]) -> GeoPoint:
    result = gateway.geocode(farm_address)
    if result.authoritative and result.data is not None:
        return result.data.location
    warnings.append("Farm address could not be geocoded; searching around the configured reference point.")
    return gateway.origin


def discover_florists(
    gateway: MapsGateway,
    *,
    query: Optional[str] = None,
    radius_meters: Optional[float] = None,
    farm_address: Optional[str] = None,
    max_workers: Optional[int] = None,
) -> DiscoveryResult:
    """Search for florists around the farm and enrich each hit with place details.

    Details are only merged when they come from the same source as the search,
    so sample hours never end up on live records.
    """

    warnings: list[str] = []
    center = _search_center(gateway, farm_address or settings.farm_address, warnings)
    search = gateway.search_places(
        query or settings.default_search_query,
        location=center,
        radius_meters=radius_meters,
    )
    if not search.authoritative:
        warnings.append("Google Maps unavailable; returning the sample florist dataset.")

    candidates = search.data
    with_place_id = [c for c in candidates if c.place_id]
    details_by_place: dict[str, PlaceDetails] = {}
    if with_place_id:
        workers = max_workers or settings.max_parallel_detail_requests
        with ThreadPoolExecutor(max_workers=min(workers, len(with_place_id))) as pool:
            results: list[GatewayResult[Optional[PlaceDetails]]] = list(
                pool.map(lambda c: gateway.place_details(c.place_id), with_place_id)
            )
        for candidate, details in zip(with_place_id, results):
            if details.data is None:
                continue
            if details.source != search.source:
                logger.warning("Discarding %s place details for %s", details.source, candidate.name)
                continue
            details_by_place[candidate.place_id] = details.data

    records = [_record_from_candidate(c, details_by_place.get(c.place_id or "")) for c in candidates]
    logger.info(
        "Discovered %s florists (%s source, %s with details)",
        len(records),
        search.source,
        len(details_by_place),
    )
    return DiscoveryResult(
        records=records,
        source=search.source,
        center=center,
        search_status=search.status,
        details_fetched=len(details_by_place),
        warnings=warnings,
    )


def write_florists_file(records: list[FloristRecord], path: Optional[Path] = None) -> Path:
    """Write the JSON interchange file (an ordered list of florist objects)."""

    target = path or settings.florists_file
    FileStorage(root=target.parent).write_json(target, export_florists(records))
    logger.info("Wrote %s florists to %s", len(records), target)
    return target
