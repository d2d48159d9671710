#!/usr/bin/env python3
"""Discover florists around the farm and write the interchange file.

Usage:
    python fetch_florists.py [--query florist] [--radius-miles 50] [--seed]
    python fetch_florists.py --from-file data/florists.json --seed

With ``--seed`` the results are also imported into the local store together
with the default territories and a sample route. ``--from-file`` skips the
search and seeds from an existing interchange file.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from florist_planner.config import METERS_PER_MILE, settings
from florist_planner.data.florists_repository import load_florists_file
from florist_planner.persistence.database import sync_store_to_database
from florist_planner.persistence.store import get_store
from florist_planner.services.geospatial import reference_point_from_settings
from florist_planner.services.florists.discovery import discover_florists, write_florists_file
from florist_planner.services.maps.gateway import MapsGateway
from florist_planner.services.seed import seed_store


def _discover(args: argparse.Namespace):
    print("=" * 60)
    print(f"Searching for '{args.query}' within {args.radius_miles:g} miles of {settings.farm_address}")
    print("=" * 60)

    result = discover_florists(
        MapsGateway(),
        query=args.query,
        radius_meters=args.radius_miles * METERS_PER_MILE,
    )
    for warning in result.warnings:
        print(f"[WARN] {warning}")

    for record in result.records:
        distance = f"{record.distance_miles:.1f} mi" if record.distance_miles is not None else "unknown"
        print(f"  {record.name:<40} {distance}")

    print()
    if not result.authoritative:
        print("[WARN] Google Maps was unavailable; sample results were not saved or imported.")
        return None

    path = write_florists_file(result.records, args.output)
    print(f"[OK] Saved {len(result.records)} florists to {path}")
    return result.records


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--query", default=settings.default_search_query)
    parser.add_argument("--radius-miles", type=float, default=settings.default_search_radius_meters / METERS_PER_MILE)
    parser.add_argument("--output", type=Path, default=settings.florists_file)
    parser.add_argument("--from-file", type=Path, help="Seed from an existing interchange file instead of searching")
    parser.add_argument("--seed", action="store_true", help="Import the results into the local store")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.from_file:
        try:
            records = load_florists_file(args.from_file, origin=reference_point_from_settings())
        except (FileNotFoundError, ValueError) as exc:
            print(f"[ERROR] {exc}")
            return 1
        print(f"[OK] Loaded {len(records)} florists from {args.from_file}")
    else:
        records = _discover(args)
        if records is None:
            return 1

    if args.seed:
        store = get_store()
        summary = seed_store(store, records, reference_point_from_settings())
        counts = sync_store_to_database(store)
        print(f"[OK] Imported {summary.created} new and {summary.updated} updated florists into {store.path}")
        if counts:
            print(f"[OK] Mirrored to Supabase: {counts}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
