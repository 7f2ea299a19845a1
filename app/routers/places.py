"""Nearby places endpoint."""

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException

from app.core.config import settings
from app.schemas.places import NearbyPlacesRequest, NearbyPlacesResponse, PlaceResult
from app.services.mock_places import generate_mock_places
from app.services.place_metrics import rank_places
from app.services.places_client import (
    PlacesProviderError,
    PlacesTimeoutError,
    fetch_nearby_places,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["places"])

PlacesSource = Callable[[float, float, str], Awaitable[list[PlaceResult]]]


async def _mock_source(lat: float, lng: float, place_type: str) -> list[PlaceResult]:
    return generate_mock_places(lat, lng, place_type)


def get_places_source() -> PlacesSource:
    """Pick the candidate source from settings.places_source ("nominatim" or "mock")."""
    if settings.places_source == "mock":
        return _mock_source
    return fetch_nearby_places


def _error_detail(error: str, message: str, exc: Exception) -> dict:
    """Error body for upstream failures; the underlying error text replaces message in debug mode."""
    return {"error": error, "message": str(exc) if settings.debug else message}


@router.post("/nearby-places", response_model=NearbyPlacesResponse)
async def nearby_places(
    body: NearbyPlacesRequest,
    source: PlacesSource = Depends(get_places_source),
) -> NearbyPlacesResponse:
    """
    Return places of the requested type around (lat, lng), nearest first.

    Each result carries distance, distanceKm, travelTime and travelTimeMinutes.
    Those fields are null for a place whose distance could not be computed;
    such places are listed after all others.
    """
    mode = body.travel_mode or settings.default_travel_mode
    logger.info(f"Nearby search: type={body.type}, location={body.lat},{body.lng}, mode={mode}")

    try:
        candidates = await source(body.lat, body.lng, body.type)
    except PlacesTimeoutError as e:
        raise HTTPException(
            status_code=504,
            detail=_error_detail("places_timeout", "Places provider request timed out", e),
        )
    except PlacesProviderError as e:
        logger.error(f"Places provider failed: {e}")
        raise HTTPException(
            status_code=502,
            detail=_error_detail("places_provider_error", "Failed to fetch places from provider", e),
        )

    results = rank_places(candidates, body.lat, body.lng, mode)
    logger.info(f"Found {len(results)} {body.type} places")
    return NearbyPlacesResponse(results=results)
