"""Schemas for the nearby places endpoint."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Coordinate bounds for validation (same behavior for any location worldwide)
LAT_MIN, LAT_MAX = -90.0, 90.0
LNG_MIN, LNG_MAX = -180.0, 180.0


class NearbyPlacesRequest(BaseModel):
    """Body for POST /api/nearby-places."""
    lat: float = Field(..., ge=LAT_MIN, le=LAT_MAX, allow_inf_nan=False, description="Latitude (-90 to 90)")
    lng: float = Field(..., ge=LNG_MIN, le=LNG_MAX, allow_inf_nan=False, description="Longitude (-180 to 180)")
    type: str = Field(..., min_length=1, description="Place category, e.g. cafe or restaurant")
    # Optional; the configured default applies when omitted, unknown modes fall back to walking
    travel_mode: Optional[str] = Field(default=None, alias="travelMode")

    model_config = ConfigDict(populate_by_name=True)


class PlaceResult(BaseModel):
    """
    A candidate place plus the derived distance/travel-time fields.

    The derived fields are null when they could not be computed for this place.
    They serialize in camelCase (distanceKm, travelTime, travelTimeMinutes).
    """
    id: Union[int, str]
    name: str
    lat: float
    lng: float
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    opening_hours: Optional[str] = None
    cuisine: Optional[str] = None
    image: Optional[str] = None
    is_closed: bool = False
    # Derived fields
    distance: Optional[str] = None
    distance_km: Optional[float] = Field(default=None, alias="distanceKm")
    travel_time: Optional[str] = Field(default=None, alias="travelTime")
    travel_time_minutes: Optional[float] = Field(default=None, alias="travelTimeMinutes")

    model_config = ConfigDict(populate_by_name=True)


class NearbyPlacesResponse(BaseModel):
    """Response for the nearby places endpoint."""
    results: list[PlaceResult]
