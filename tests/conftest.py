import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.places import get_places_source
from app.schemas.places import PlaceResult


def make_place(place_id, lat: float, lng: float, name: str = "Test Place") -> PlaceResult:
    """Minimal candidate place as produced by a places source."""
    return PlaceResult(id=place_id, name=name, lat=lat, lng=lng, address="1 Test St")


@pytest.fixture(scope="function")
def client():
    """Create a test client."""
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def places_source():
    """
    Override the places source with a fake one.

    Set `source.places` to the list to return, or `source.error` to an exception to raise.
    The fake records each (lat, lng, type) call in `source.calls`.
    """
    class FakeSource:
        def __init__(self):
            self.places: list[PlaceResult] = []
            self.error: Exception | None = None
            self.calls: list[tuple] = []

        async def __call__(self, lat, lng, place_type):
            self.calls.append((lat, lng, place_type))
            if self.error is not None:
                raise self.error
            return self.places

    source = FakeSource()
    app.dependency_overrides[get_places_source] = lambda: source
    yield source
    app.dependency_overrides.pop(get_places_source, None)
