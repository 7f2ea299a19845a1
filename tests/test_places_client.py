"""Tests for the Nominatim places client: request params, normalization and error mapping."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from app.core.config import settings
from app.services.places_client import (
    PlacesProviderError,
    PlacesTimeoutError,
    _build_search_params,
    _call_nominatim_api,
    _normalize_nominatim_place,
    fetch_nearby_places,
)


def _nominatim_place(place_id=1001, lat="40.7130", lon="-74.0050", **extra) -> dict:
    """Minimal Nominatim search result for testing."""
    out = {
        "place_id": place_id,
        "lat": lat,
        "lon": lon,
        "display_name": "Joe's Coffee, 12, Main Street, New York, USA",
        "address": {"house_number": "12", "road": "Main Street", "city": "New York"},
        "extratags": {"phone": "+1 212 555 0100", "website": "https://joes.example", "cuisine": "coffee_shop"},
    }
    out.update(extra)
    return out


def test_build_search_params_uses_bounding_box():
    params = _build_search_params(40.0, -74.0, "cafe")
    radius = settings.search_radius_deg

    assert params["format"] == "json"
    assert params["amenity"] == "cafe"
    assert params["bounded"] == 1
    assert params["limit"] == settings.search_limit
    assert params["addressdetails"] == 1
    assert params["extratags"] == 1
    assert params["viewbox"] == f"{-74.0 - radius},{40.0 + radius},{-74.0 + radius},{40.0 - radius}"


def test_normalize_place_maps_fields():
    place = _normalize_nominatim_place(_nominatim_place(), "cafe", 0)

    assert place.id == 1001
    assert place.name == "Joe's Coffee"
    assert place.lat == pytest.approx(40.7130)
    assert place.lng == pytest.approx(-74.0050)
    assert place.address == "12 Main Street New York"
    assert place.phone == "+1 212 555 0100"
    assert place.website == "https://joes.example"
    assert place.cuisine == "coffee_shop"
    assert place.image == "https://picsum.photos/300/200?random=1001"
    assert place.is_closed is False
    assert place.rating is None
    assert place.distance_km is None


def test_normalize_place_prefers_explicit_name():
    place = _normalize_nominatim_place(_nominatim_place(name="Blue Bottle"), "cafe", 0)
    assert place.name == "Blue Bottle"


def test_normalize_place_falls_back_to_type_and_index():
    raw = _nominatim_place(display_name="", extratags={})
    place = _normalize_nominatim_place(raw, "cafe", 2)
    assert place.name == "Cafe 3"


def test_normalize_place_uses_extratags_name_when_display_name_missing():
    raw = _nominatim_place(extratags={"name": "Tagged Name"})
    raw.pop("display_name")
    place = _normalize_nominatim_place(raw, "cafe", 0)
    assert place.name == "Tagged Name"


def test_normalize_place_address_uses_town_or_village():
    raw = _nominatim_place(address={"road": "Church Lane", "village": "Little Snoring"})
    assert _normalize_nominatim_place(raw, "pub", 0).address == "Church Lane Little Snoring"


def test_normalize_place_address_falls_back_to_display_name():
    raw = _nominatim_place(address={})
    assert _normalize_nominatim_place(raw, "cafe", 0).address == raw["display_name"]


@pytest.mark.parametrize("lat,lon", [(None, "1.0"), ("abc", "1.0"), ("1.0", "nan"), ("1.0", None)])
def test_normalize_place_drops_unusable_coordinates(lat, lon):
    assert _normalize_nominatim_place(_nominatim_place(lat=lat, lon=lon), "cafe", 0) is None


def test_normalize_place_keeps_zero_coordinates():
    place = _normalize_nominatim_place(_nominatim_place(lat="0", lon="0"), "cafe", 0)
    assert place is not None
    assert (place.lat, place.lng) == (0.0, 0.0)


@pytest.mark.asyncio
async def test_fetch_nearby_places_filters_invalid_items():
    payload = [
        _nominatim_place(place_id=1),
        _nominatim_place(place_id=2, lat="not-a-number"),
        "garbage",
        _nominatim_place(place_id=3),
    ]
    with patch(
        "app.services.places_client._call_nominatim_api",
        new_callable=AsyncMock,
        return_value=payload,
    ) as mock_api:
        places = await fetch_nearby_places(40.7128, -74.0060, "cafe")

    assert [p.id for p in places] == [1, 3]
    mock_api.assert_called_once()
    url, params = mock_api.call_args[0]
    assert url == settings.nominatim_search_url
    assert params["amenity"] == "cafe"


def _mock_transport(handler):
    """Patch httpx.AsyncClient so requests go through the given handler."""
    real_client = httpx.AsyncClient

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    return patch("app.services.places_client.httpx.AsyncClient", side_effect=factory)


@pytest.mark.asyncio
async def test_call_nominatim_api_sends_identifying_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers.get("user-agent")
        seen["accept_language"] = request.headers.get("accept-language")
        seen["amenity"] = request.url.params.get("amenity")
        return httpx.Response(200, json=[_nominatim_place()])

    with _mock_transport(handler):
        data = await _call_nominatim_api(settings.nominatim_search_url, {"amenity": "cafe"})

    assert data == [_nominatim_place()]
    assert seen == {
        "user_agent": settings.nominatim_user_agent,
        "accept_language": "en",
        "amenity": "cafe",
    }


@pytest.mark.asyncio
async def test_call_nominatim_api_raises_on_http_error():
    with _mock_transport(lambda request: httpx.Response(503, text="busy")):
        with pytest.raises(PlacesProviderError) as exc_info:
            await _call_nominatim_api(settings.nominatim_search_url, {})
    assert "503" in str(exc_info.value)
    assert not isinstance(exc_info.value, PlacesTimeoutError)


@pytest.mark.asyncio
async def test_call_nominatim_api_raises_on_unexpected_payload():
    with _mock_transport(lambda request: httpx.Response(200, json={"error": "nope"})):
        with pytest.raises(PlacesProviderError):
            await _call_nominatim_api(settings.nominatim_search_url, {})


@pytest.mark.asyncio
async def test_call_nominatim_api_raises_timeout_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with _mock_transport(handler):
        with pytest.raises(PlacesTimeoutError):
            await _call_nominatim_api(settings.nominatim_search_url, {})


@pytest.mark.asyncio
async def test_call_nominatim_api_raises_on_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _mock_transport(handler):
        with pytest.raises(PlacesProviderError):
            await _call_nominatim_api(settings.nominatim_search_url, {})
