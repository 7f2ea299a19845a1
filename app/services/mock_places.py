"""Synthetic places source for local development and demos (PLACES_SOURCE=mock)."""

import logging
import random

from app.core.config import settings
from app.schemas.places import PlaceResult

logger = logging.getLogger(__name__)

MOCK_STREETS = ["Main St", "Oak Ave", "Market St", "Park Rd", "River Ln", "Station Rd", "High St"]
MOCK_PHONE_PREFIX = "+1-555-01"


def generate_mock_places(lat: float, lng: float, place_type: str, count: int | None = None) -> list[PlaceResult]:
    """
    Generate plausible places scattered inside the search box around (lat, lng).

    Output is deterministic for a given origin and type so repeated requests agree.
    """
    count = settings.mock_place_count if count is None else count
    radius = settings.search_radius_deg
    rng = random.Random(f"{lat:.5f},{lng:.5f},{place_type}")
    label = f"{place_type[:1].upper()}{place_type[1:]}"

    places = []
    for index in range(count):
        place_id = f"mock-{place_type}-{index + 1}"
        places.append(PlaceResult(
            id=place_id,
            name=f"{label} {index + 1}",
            lat=lat + rng.uniform(-radius, radius),
            lng=lng + rng.uniform(-radius, radius),
            address=f"{rng.randint(1, 999)} {rng.choice(MOCK_STREETS)}",
            phone=f"{MOCK_PHONE_PREFIX}{rng.randint(0, 99):02d}",
            rating=round(rng.uniform(3.0, 5.0), 1),
            review_count=rng.randint(10, 209),
            image=settings.placeholder_image_url.format(place_id=place_id),
            is_closed=False,
        ))
    logger.info(f"Generated {len(places)} mock {place_type} places around {lat}, {lng}")
    return places
