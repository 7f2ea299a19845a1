"""Nominatim (OpenStreetMap) client: fetches candidate places around a point."""

import logging
import math
import traceback

import httpx

from app.core.config import settings
from app.schemas.places import PlaceResult

logger = logging.getLogger(__name__)


class PlacesProviderError(Exception):
    """Upstream places provider failed or returned an unusable payload."""


class PlacesTimeoutError(PlacesProviderError):
    """Upstream places provider did not answer within the request timeout."""


def _request_headers() -> dict:
    return {
        "User-Agent": settings.nominatim_user_agent,
        "Accept": "application/json",
        "Accept-Language": "en",
    }


def _build_search_params(lat: float, lng: float, place_type: str) -> dict:
    """Nominatim search params for an amenity inside a box of search_radius_deg around (lat, lng)."""
    radius = settings.search_radius_deg
    lat_min, lat_max = lat - radius, lat + radius
    lng_min, lng_max = lng - radius, lng + radius
    return {
        "format": "json",
        "amenity": place_type,
        "bounded": 1,
        # viewbox is left,top,right,bottom
        "viewbox": f"{lng_min},{lat_max},{lng_max},{lat_min}",
        "limit": settings.search_limit,
        "addressdetails": 1,
        "extratags": 1,
    }


async def _call_nominatim_api(url: str, params: dict) -> list:
    """
    Call the Nominatim search API with logging.

    Returns the parsed JSON list on success.
    Raises PlacesTimeoutError on timeout, PlacesProviderError on any other failure.
    """
    safe_url = str(httpx.URL(url, params=params))
    logger.info(f"Calling Nominatim API: {safe_url}")

    try:
        async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as client:
            response = await client.get(url, params=params, headers=_request_headers())
    except httpx.TimeoutException as e:
        logger.error(f"Nominatim timeout: url={safe_url}\nTraceback:\n{traceback.format_exc()}")
        raise PlacesTimeoutError("Nominatim API request timed out") from e
    except httpx.RequestError as e:
        logger.error(f"Nominatim request error: url={safe_url}, error={e}\nTraceback:\n{traceback.format_exc()}")
        raise PlacesProviderError(f"Nominatim request failed: {e}") from e

    response_text = response.text
    truncated_body = response_text[:500] if response_text else "(empty)"
    logger.info(f"Nominatim response: status={response.status_code}, body_preview={truncated_body}")

    if response.status_code != 200:
        raise PlacesProviderError(
            f"Nominatim API error: {response.status_code} {response.reason_phrase}"
        )

    try:
        data = response.json()
    except ValueError as e:
        raise PlacesProviderError(f"Nominatim returned invalid JSON: {truncated_body}") from e
    if not isinstance(data, list):
        raise PlacesProviderError(f"Nominatim returned unexpected payload: {truncated_body}")
    return data


def _parse_coordinate(value) -> float | None:
    """Parse a Nominatim coordinate string; None when missing, unparsable or non-finite."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _extract_name(place: dict, place_type: str, index: int) -> str:
    """Best-effort display name: name, first part of display_name, extratags name, then "<Type> <n>"."""
    extratags = place.get("extratags") or {}
    display_name = place.get("display_name") or ""
    return (
        place.get("name")
        or display_name.split(",")[0]
        or extratags.get("name")
        or f"{place_type[:1].upper()}{place_type[1:]} {index + 1}"
    )


def _extract_address(place: dict) -> str | None:
    """Short street address from address components; falls back to display_name."""
    address = place.get("address") or {}
    parts = []
    if address.get("house_number"):
        parts.append(address["house_number"])
    if address.get("road"):
        parts.append(address["road"])
    locality = address.get("city") or address.get("town") or address.get("village")
    if locality:
        parts.append(locality)
    return " ".join(parts) if parts else place.get("display_name")


def _normalize_nominatim_place(place: dict, place_type: str, index: int) -> PlaceResult | None:
    """Normalize a Nominatim search result to our schema. Returns None if it has no usable coordinates."""
    lat = _parse_coordinate(place.get("lat"))
    lng = _parse_coordinate(place.get("lon"))
    if lat is None or lng is None:
        return None

    extratags = place.get("extratags") or {}
    place_id = place.get("place_id", index)
    return PlaceResult(
        id=place_id,
        name=_extract_name(place, place_type, index),
        lat=lat,
        lng=lng,
        address=_extract_address(place),
        phone=extratags.get("phone"),
        website=extratags.get("website"),
        opening_hours=extratags.get("opening_hours"),
        cuisine=extratags.get("cuisine"),
        image=settings.placeholder_image_url.format(place_id=place_id),
        is_closed=False,
    )


async def fetch_nearby_places(lat: float, lng: float, place_type: str) -> list[PlaceResult]:
    """
    Fetch places of the given amenity type around (lat, lng) from Nominatim.

    Results without valid coordinates are dropped. Derived distance fields are left empty.
    """
    logger.info(f"Fetching {place_type} places from Nominatim around {lat}, {lng}")
    data = await _call_nominatim_api(
        settings.nominatim_search_url,
        _build_search_params(lat, lng, place_type),
    )

    places = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            continue
        place = _normalize_nominatim_place(raw, place_type, index)
        if place is not None:
            places.append(place)
    return places
