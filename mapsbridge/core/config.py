"""Application configuration."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "Maps Bridge"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Radar (lightweight reverse/forward geocoder)
    RADAR_API_ENABLED: bool = False
    RADAR_API_KEY: str | None = None
    RADAR_API_BASE_URL: str = "https://api.radar.io/v1"
    RADAR_TIMEOUT: float = Field(default=3.0, ge=1.0, le=5.0)

    # Google (geocoding + places)
    GOOGLE_API_ENABLED: bool = True
    GOOGLE_API_KEY: str | None = None
    GOOGLE_PLACES_BASE_URL: str = "https://maps.googleapis.com/maps/api/place"
    GOOGLE_TIMEOUT: float = Field(default=2.0, ge=1.0, le=5.0)

    # Page fetching for content extractors
    FETCH_TIMEOUT: float = Field(default=5.0, ge=1.0, le=5.0)
    FETCH_USER_AGENT: str = (
        "Mozilla/5.0 (compatible; mapsbridge/0.1; +https://github.com/mapsbridge)"
    )

    # Geocoding result cache
    REDIS_URL: str | None = None
    GEOCODING_CACHE_TTL: int = Field(
        default=2592000, gt=0
    )  # 30 days default TTL for cached geocoding results

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:8000",
                "http://localhost:3000",
            ]
        return self

    @model_validator(mode="after")
    def disable_cache_for_testing(self) -> "Settings":
        """Never talk to a shared Redis from the test suite."""
        import os

        if os.getenv("TESTING") == "true" and not os.getenv("TEST_REDIS_URL"):
            self.REDIS_URL = None
        elif os.getenv("TESTING") == "true":
            self.REDIS_URL = os.getenv("TEST_REDIS_URL")
        return self


# Create settings instance
settings = Settings()
