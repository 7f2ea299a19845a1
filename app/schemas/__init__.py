from app.schemas.places import NearbyPlacesRequest, NearbyPlacesResponse, PlaceResult

__all__ = [
    "NearbyPlacesRequest",
    "NearbyPlacesResponse",
    "PlaceResult",
]
