#!/usr/bin/env python3
"""Helper script to check and create the .env file for Google Maps and Supabase."""

from pathlib import Path
import os
import sys

TEMPLATE = """# Google Maps Platform (Geocoding + Places). Without a key the API serves sample data.
FLORIST_GOOGLE_MAPS_API_KEY=your-google-maps-key-here

# Supabase mirror (optional)
# FLORIST_SUPABASE_URL=https://your-project-id.supabase.co
# FLORIST_SUPABASE_KEY=your-service-role-key-here

# API Configuration
FLORIST_API_PREFIX=/api
# FLORIST_FRONTEND_ALLOWED_ORIGINS=["http://localhost:3000","http://127.0.0.1:3000"]

# Data Paths
FLORIST_DATA_ROOT=./data
FLORIST_STORE_FILE=./data/store.json
FLORIST_FLORISTS_FILE=./data/florists.json

# Farm reference point
# FLORIST_REFERENCE_LATITUDE=45.4426
# FLORIST_REFERENCE_LONGITUDE=-122.2536
# FLORIST_DEFAULT_TERRITORIES={"Portland Metro": 30, "Sandy Area": 10}
"""

SECRET_KEYS = ("FLORIST_GOOGLE_MAPS_API_KEY", "FLORIST_SUPABASE_KEY")


def _mask(line: str) -> str:
    name, sep, value = line.partition("=")
    value = value.strip()
    if sep and name.strip() in SECRET_KEYS and len(value) > 12:
        return f"{name}={value[:6]}...{value[-4:]}"
    return line


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Florist Planner Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and add your Google Maps key, then run this script again.")
        return 1

    print(f"Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    for key in ("FLORIST_GOOGLE_MAPS_API_KEY", "FLORIST_SUPABASE_URL", "FLORIST_SUPABASE_KEY"):
        state = "set in environment" if os.getenv(key) else "not in environment"
        print(f"{key}: {state}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from florist_planner.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    print(f"Reference point: {settings.reference_latitude}, {settings.reference_longitude}")
    print(f"Default territories: {settings.default_territories}")
    print(f"Google Maps configured: {bool(settings.google_maps_api_key)}")
    print(f"Supabase configured: {bool(settings.supabase_url and settings.supabase_key)}")
    if not settings.google_maps_api_key:
        print()
        print("Without FLORIST_GOOGLE_MAPS_API_KEY every lookup returns the sample dataset.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
