from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Nearby Places API"
    api_prefix: str = "/api"

    # Debug flag; when on, upstream error messages are echoed in 5xx responses
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = "INFO"
    # Port used when running the app module directly
    port: int = 5000

    # Origins allowed by CORS; "*" allows any
    cors_origins: list[str] = ["*"]

    # Where candidate places come from: "nominatim" (live OSM data) or "mock" (synthetic)
    places_source: str = "nominatim"

    # Nominatim configuration
    # NOMINATIM_USER_AGENT: Nominatim's usage policy requires an identifying User-Agent
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "NearbyPlacesApp/1.0 (contact@example.com)"
    request_timeout_seconds: float = 10.0

    # Half-width of the search box in degrees (0.03 is roughly 3 km)
    search_radius_deg: float = 0.03
    search_limit: int = 20
    # Number of places produced by the synthetic source
    mock_place_count: int = 12

    # Travel mode used when the request does not name one
    default_travel_mode: str = "walking"

    # Placeholder image per place; formatted with the place id
    placeholder_image_url: str = "https://picsum.photos/300/200?random={place_id}"

    @property
    def nominatim_search_url(self) -> str:
        """Derive the search endpoint from the Nominatim base URL."""
        return f"{self.nominatim_base_url.rstrip('/')}/search"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid"
    )


settings = Settings()
