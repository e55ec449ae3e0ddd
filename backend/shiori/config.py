"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/shiori.db"

    # Itinerary defaults
    default_currency: str = "JPY"

    # Display
    display_timezone: str = "Asia/Tokyo"
    display_locale: str = "ja"

    # Geocoding providers
    gsi_geocoder_url: str = "https://msearch.gsi.go.jp/address-search/AddressSearch"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "Shiori Travel Planner App"
    geocode_language: str = "ja"

    # Routing provider (OpenRouteService)
    ors_api_key: str = ""
    ors_base_url: str = "https://api.openrouteservice.org/v2/directions"

    # Nominatim usage policy: at most one request per second
    geocode_min_interval_seconds: float = 1.0

    # Timeouts (seconds)
    http_timeout_seconds: float = 4.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
