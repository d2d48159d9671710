"""Sample provider payloads served when Google Maps is unavailable.

Responses are shaped exactly like the live API so they flow through the same
normalization code; the gateway tags them ``source="fallback"``.
"""

from __future__ import annotations

from copy import deepcopy

FARM_GEOCODE_RESULT = {
    "formatted_address": "14385 SE Lusted Rd, Sandy, OR 97055, USA",
    "geometry": {"location": {"lat": 45.4426, "lng": -122.2536}},
    "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
}

DEFAULT_GEOCODE_LOCATION = {"lat": 45.5152, "lng": -122.6784}

SAMPLE_PLACES: tuple[dict, ...] = (
    {
        "name": "Sandy Floral Boutique",
        "formatted_address": "123 Main St, Sandy, OR 97055",
        "formatted_phone_number": "(503) 555-1234",
        "website": "https://example.com/sandy-floral",
        "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4_1",
        "geometry": {"location": {"lat": 45.3975, "lng": -122.2611}},
        "rating": 4.7,
        "user_ratings_total": 32,
        "vicinity": "Sandy, OR",
        "opening_hours": {
            "weekday_text": [
                "Monday: 9:00 AM – 5:00 PM",
                "Tuesday: 9:00 AM – 5:00 PM",
                "Wednesday: 9:00 AM – 5:00 PM",
                "Thursday: 9:00 AM – 5:00 PM",
                "Friday: 9:00 AM – 6:00 PM",
                "Saturday: 10:00 AM – 4:00 PM",
                "Sunday: Closed",
            ]
        },
    },
    {
        "name": "Portland Petals",
        "formatted_address": "456 Flower Ave, Portland, OR 97201",
        "formatted_phone_number": "(503) 555-5678",
        "website": "https://example.com/portland-petals",
        "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4_2",
        "geometry": {"location": {"lat": 45.5152, "lng": -122.6784}},
        "rating": 4.5,
        "user_ratings_total": 87,
        "vicinity": "Portland, OR",
        "opening_hours": {
            "weekday_text": [
                "Monday: 8:00 AM – 6:00 PM",
                "Tuesday: 8:00 AM – 6:00 PM",
                "Wednesday: 8:00 AM – 6:00 PM",
                "Thursday: 8:00 AM – 6:00 PM",
                "Friday: 8:00 AM – 7:00 PM",
                "Saturday: 9:00 AM – 5:00 PM",
                "Sunday: 10:00 AM – 3:00 PM",
            ]
        },
    },
    {
        "name": "Gresham Flower Shop",
        "formatted_address": "789 Bloom St, Gresham, OR 97030",
        "formatted_phone_number": "(503) 555-9012",
        "website": "https://example.com/gresham-flowers",
        "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4_3",
        "geometry": {"location": {"lat": 45.5023, "lng": -122.4306}},
        "rating": 4.2,
        "user_ratings_total": 45,
        "vicinity": "Gresham, OR",
        "opening_hours": {
            "weekday_text": [
                "Monday: 9:00 AM – 5:30 PM",
                "Tuesday: 9:00 AM – 5:30 PM",
                "Wednesday: 9:00 AM – 5:30 PM",
                "Thursday: 9:00 AM – 5:30 PM",
                "Friday: 9:00 AM – 6:00 PM",
                "Saturday: 9:00 AM – 4:00 PM",
                "Sunday: Closed",
            ]
        },
    },
)


def fallback_geocode(address: str) -> dict:
    if "Sandy" in address or "97055" in address:
        return {"results": [deepcopy(FARM_GEOCODE_RESULT)], "status": "OK"}
    return {
        "results": [
            {
                "formatted_address": address,
                "geometry": {"location": dict(DEFAULT_GEOCODE_LOCATION)},
                "place_id": FARM_GEOCODE_RESULT["place_id"],
            }
        ],
        "status": "OK",
    }


def fallback_search(query: str) -> dict:
    if "florist" not in query.lower():
        return {"results": [], "status": "ZERO_RESULTS"}
    results = []
    for place in SAMPLE_PLACES:
        # Text search does not carry opening hours.
        summary = {key: deepcopy(value) for key, value in place.items() if key != "opening_hours"}
        results.append(summary)
    return {"results": results, "status": "OK"}


def fallback_place_details(place_id: str) -> dict:
    if place_id.endswith("_1"):
        place = SAMPLE_PLACES[0]
    elif place_id.endswith("_2"):
        place = SAMPLE_PLACES[1]
    else:
        place = SAMPLE_PLACES[2]
    return {"result": deepcopy(place), "status": "OK"}
