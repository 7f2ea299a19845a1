"""Attach distance and travel-time fields to candidate places and order them by distance."""

import logging
import math

from app.core.geo import (
    format_distance,
    format_travel_time,
    haversine_distance_km,
    sort_by_distance,
    travel_time_minutes,
)
from app.schemas.places import PlaceResult

logger = logging.getLogger(__name__)

_EMPTY_METRICS = {
    "distance": None,
    "distance_km": None,
    "travel_time": None,
    "travel_time_minutes": None,
}


def with_metrics(place: PlaceResult, origin_lat: float, origin_lng: float, mode: str | None) -> PlaceResult:
    """
    Return a copy of place with the four derived fields filled in.

    If the metrics cannot be computed for this place (bad coordinates, non-finite
    result) the fields are set to None instead; the place is never dropped.
    """
    try:
        distance_km = haversine_distance_km(origin_lat, origin_lng, place.lat, place.lng)
        if not math.isfinite(distance_km):
            raise ValueError(f"non-finite distance {distance_km}")
        minutes = travel_time_minutes(distance_km, mode)
        metrics = {
            "distance": format_distance(distance_km),
            "distance_km": distance_km,
            "travel_time": format_travel_time(minutes),
            "travel_time_minutes": minutes,
        }
    except (TypeError, ArithmeticError, ValueError) as e:
        logger.warning(f"Could not compute distance for place {place.id}: {e}")
        metrics = _EMPTY_METRICS

    return place.model_copy(update=metrics)


def rank_places(
    places: list[PlaceResult],
    origin_lat: float,
    origin_lng: float,
    mode: str | None,
) -> list[PlaceResult]:
    """Attach metrics to every place, then sort nearest first (places without a distance last)."""
    augmented = [with_metrics(place, origin_lat, origin_lng, mode) for place in places]
    return sort_by_distance(augmented)
