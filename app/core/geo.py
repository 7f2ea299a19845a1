"""Geo utilities: distance (Haversine), travel time estimates and display formatting."""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from operator import attrgetter
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, TypeVar

EARTH_RADIUS_KM = 6371.0

T = TypeVar("T")


class TravelMode(str, Enum):
    WALKING = "walking"
    CYCLING = "cycling"
    DRIVING = "driving"


# Average speeds in km/h
TRAVEL_SPEEDS: Mapping[str, float] = MappingProxyType({
    TravelMode.WALKING.value: 5,
    TravelMode.CYCLING.value: 15,
    TravelMode.DRIVING.value: 40,
})


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute great-circle distance between two (lat, lon) points in kilometers.
    Uses the Haversine formula.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    """Render a distance as meters below 1 km ("450 m"), else km with one decimal ("2.6 km")."""
    if distance_km < 1:
        return f"{_round_half_up(distance_km * 1000)} m"
    km = Decimal(distance_km).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{km} km"


def travel_time_minutes(distance_km: float, mode: Optional[str] = TravelMode.WALKING) -> float:
    """Estimated travel time in minutes. Unknown or missing modes use the walking speed."""
    if isinstance(mode, TravelMode):
        mode = mode.value
    speed = TRAVEL_SPEEDS.get(mode, TRAVEL_SPEEDS[TravelMode.WALKING.value])
    return distance_km / speed * 60


def format_travel_time(minutes: float) -> str:
    """
    Render a duration for display.

    Under a minute reads "Less than 1 min", under an hour "N mins", and longer
    durations "H hour[s]" with an optional " M mins". The leftover minutes are
    rounded after the hours are split off, so 119.6 renders as "1 hour 60 mins".
    """
    if minutes < 1:
        return "Less than 1 min"
    if minutes < 60:
        return f"{_round_half_up(minutes)} mins"

    hours = math.floor(minutes / 60)
    remaining = _round_half_up(minutes % 60)
    if remaining == 0:
        return "1 hour" if hours == 1 else f"{hours} hours"
    return f"{hours} hour{'s' if hours > 1 else ''} {remaining} mins"


def sort_by_distance(
    results: Iterable[T],
    key: Callable[[T], Optional[float]] = attrgetter("distance_km"),
) -> list[T]:
    """Sort ascending by distance; entries without a distance go last, in input order."""
    def sort_key(item: T) -> tuple[bool, float]:
        distance = key(item)
        return (distance is None, 0.0 if distance is None else distance)

    return sorted(results, key=sort_key)
