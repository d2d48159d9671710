"""Seed an empty store with territories, florists and a sample route."""

from __future__ import annotations

import logging
from typing import Sequence

from ..models.domain import FloristRecord, GeoPoint
from ..persistence.store import FloristStore
from .florists.service import ImportSummary, import_florists
from .routes.service import create_route
from .territories.service import ensure_default_territories

logger = logging.getLogger(__name__)

SAMPLE_ROUTE_NAME = "Portland East Side"
SAMPLE_ROUTE_DESCRIPTION = "Route covering east Portland and Gresham"
SAMPLE_ROUTE_STOPS = 3


def seed_store(store: FloristStore, records: Sequence[FloristRecord], origin: GeoPoint) -> ImportSummary:
    ensure_default_territories(store)
    summary = import_florists(store, records, origin=origin)
    if not store.list_routes() and records:
        florist_ids = [florist.id for florist in store.list_florists()[:SAMPLE_ROUTE_STOPS]]
        create_route(
            store,
            name=SAMPLE_ROUTE_NAME,
            description=SAMPLE_ROUTE_DESCRIPTION,
            florist_ids=florist_ids,
        )
    logger.info("Seeded store with %s florists", summary.total)
    return summary
