"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

METERS_PER_MILE = 1609.34


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FLORIST_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Florist Territory Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for the florist store and exports.")
    florists_file: Path = Field(
        default=Path("data/florists.json"),
        description="Florist interchange file written by the discovery job.",
    )
    store_file: Path = Field(
        default=Path("data/store.json"),
        description="Backing file for florists, territories and routes.",
    )

    farm_name: str = "Last Straw Farms"
    farm_address: str = "14385 SE Lusted Rd, Sandy, OR 97055"
    reference_latitude: float = Field(default=45.4426, ge=-90.0, le=90.0)
    reference_longitude: float = Field(default=-122.2536, ge=-180.0, le=180.0)

    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps Platform key used for geocoding and Places lookups.",
    )
    google_maps_base_url: str = Field(default="https://maps.googleapis.com/maps/api")
    google_maps_timeout_seconds: float = Field(default=10.0, gt=0.0)
    google_maps_max_retries: int = Field(default=0, ge=0)
    google_maps_backoff_seconds: float = Field(default=1.0, ge=0.0)

    default_search_query: str = "florist"
    default_search_radius_meters: float = Field(default=50 * METERS_PER_MILE, gt=0.0)
    max_parallel_detail_requests: int = Field(default=5, ge=1)

    default_territories: tuple[tuple[str, float], ...] = Field(
        default=(("Portland Metro", 30.0), ("Sandy Area", 10.0)),
        description="Territories (name, max distance in miles) created when seeding an empty store.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase mirror
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "florists_file", "store_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("default_territories", mode="before")
    @classmethod
    def _parse_territories_from_env(cls, value: Any) -> tuple[tuple[str, float], ...]:
        """Accept a mapping ({"Metro": 30}), name/miles pairs or a "Metro:30,Local:10" string."""
        if isinstance(value, dict):
            return tuple((str(name), float(miles)) for name, miles in value.items())
        if isinstance(value, (list, tuple)):
            return tuple((str(name), float(miles)) for name, miles in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, dict):
                    return tuple((str(name), float(miles)) for name, miles in parsed.items())
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            pairs: list[tuple[str, float]] = []
            for item in value.split(","):
                if ":" not in item:
                    continue
                name, miles = item.rsplit(":", 1)
                pairs.append((name.strip(), float(miles)))
            return tuple(pairs)
        return tuple()


settings = Settings()
