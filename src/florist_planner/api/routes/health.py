"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_maps_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.maps.google_client import check_health as maps_health_check
    return maps_health_check


@router.get("/health/maps", status_code=status.HTTP_200_OK)
def health_maps() -> dict:
    """Check that the Google Maps key can geocode the farm address."""
    if not settings.google_maps_api_key:
        return {
            "service": "google_maps",
            "healthy": False,
            "configured": False,
            "message": "Google Maps API key not configured; sample data will be served.",
        }
    try:
        maps_health_check = _get_maps_health_check()
        return {"service": "google_maps", "healthy": maps_health_check(), "configured": True}
    except Exception as e:
        return {"service": "google_maps", "healthy": False, "configured": True, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def health_database() -> dict:
    """Check the optional Supabase mirror."""
    from ...persistence.database import check_database

    return check_database()
