"""HTTP client for the Google Maps Geocoding and Places web services."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ...config import settings

# Statuses that describe a well-formed answer; anything else is a provider failure.
SUCCESS_STATUSES = frozenset({"OK", "ZERO_RESULTS", "NOT_FOUND"})

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = (base_url or settings.google_maps_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.google_maps_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.google_maps_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.google_maps_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # One client per call keeps the thread-pooled detail fetches independent.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
        )

    def _get_json(self, path: str, params: dict[str, Any]) -> dict:
        url = f"{self.base_url}/{path}"
        query = {**params, "key": self.api_key}

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    logger.debug("Google Maps request %s (attempt %s)", path, attempt + 1)
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    try:
                        data = response.json()
                    except ValueError as exc:
                        raise ValueError(f"Google Maps returned a non-JSON body for {path}.") from exc
                    if not isinstance(data, dict):
                        raise ValueError(f"Google Maps returned an unexpected payload for {path}.")
                    status = data.get("status")
                    if status not in SUCCESS_STATUSES:
                        message = data.get("error_message") or "no error message"
                        raise ValueError(f"Google Maps API error: {status} ({message})")
                    return data
                except (httpx.TimeoutException, httpx.ConnectError, httpx.NetworkError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to reach Google Maps at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug("Google Maps network error, retrying in %.1fs: %s", wait_time, exc)
                    time.sleep(wait_time)
                except httpx.HTTPStatusError:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()

    def geocode(self, address: str) -> dict:
        return self._get_json("geocode/json", {"address": address})

    def text_search(self, query: str, latitude: float, longitude: float, radius_meters: float) -> dict:
        params = {
            "query": query,
            "location": f"{latitude},{longitude}",
            "radius": int(round(radius_meters)),
        }
        return self._get_json("place/textsearch/json", params)

    def place_details(self, place_id: str) -> dict:
        params = {
            "place_id": place_id,
            "fields": (
                "name,formatted_address,formatted_phone_number,website,place_id,"
                "geometry,rating,user_ratings_total,opening_hours"
            ),
        }
        return self._get_json("place/details/json", params)


def check_health(api_key: str | None = None) -> bool:
    """Probe the geocoding endpoint with the farm address."""

    try:
        client = GoogleMapsClient(api_key=api_key)
        data = client.geocode(settings.farm_address)
    except (ValueError, ConnectionError, httpx.HTTPError) as exc:
        logger.info("Google Maps health check failed: %s", exc)
        return False
    return data.get("status") == "OK"
