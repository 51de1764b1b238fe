"""
==============================================================================
Settings
==============================================================================

Every knob is an environment variable (or a line in .env) named after the
field in upper case, e.g. DATABASE_URL, FAR_STORE_WARNING_KM.

External Services:
-----------------
- GEOCODING_API_KEY: key for geocode.maps.co (geocoding is disabled without it)
- OVERPASS_URL: OpenStreetMap Overpass interpreter endpoint (no key needed)

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


# Module logger
logger = logging.getLogger(__name__)

APP_ENVS = {"development", "staging", "production"}


class Settings(BaseSettings):
    """
    Runtime configuration.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        database_url: SQLAlchemy database connection string
        geocoding_api_key: API key for the geocoding provider
        overpass_url: Overpass API interpreter endpoint
        overpass_delay_seconds: Politeness delay before each Overpass query
        far_store_warning_km: Distance beyond which a resolved store is suspicious
        seed_sample_data: Insert demo stores/drinks into an empty database
        drinks_file: Optional JSON file ingested into the catalog at startup
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Energy Drink Finder API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server bind address")

    port: int = Field(default=8000, ge=1, le=65535, description="Server port number")

    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/drinkfinder.db",
        description="SQLAlchemy database connection string"
    )

    seed_sample_data: bool = Field(
        default=True,
        description="Insert sample stores, drinks and inventory into an empty database"
    )

    drinks_file: str = Field(
        default="data/drinks.json",
        description="JSON list of {brand, flavor, upc} ingested at startup if present"
    )

    # =========================================================================
    # OUTBOUND HTTP SETTINGS
    # =========================================================================
    geocoding_api_key: Optional[str] = Field(
        default=None,
        description="geocode.maps.co API key"
    )

    geocoding_base_url: str = Field(
        default="https://geocode.maps.co/search",
        description="Geocoding search endpoint"
    )

    geocode_batch_delay_seconds: float = Field(
        default=0.6,
        ge=0,
        description="Delay between consecutive geocoding requests in batch mode"
    )

    overpass_url: str = Field(
        default="https://overpass-api.de/api/interpreter",
        description="Overpass API interpreter endpoint"
    )

    overpass_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Fixed delay before each Overpass request"
    )

    http_user_agent: str = Field(
        default="EnergyDrinkFinder/1.0",
        description="User-Agent header sent to third-party APIs"
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for outbound HTTP requests"
    )

    # =========================================================================
    # SEARCH SETTINGS
    # =========================================================================
    far_store_warning_km: float = Field(
        default=1.0,
        gt=0,
        description="Nearest-store distance that triggers a scan warning"
    )

    default_search_radius_km: float = Field(
        default=10.0,
        gt=0,
        le=500,
        description="Default radius for nearby and search queries"
    )

    default_nearby_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default number of stores returned by nearby queries"
    )

    autocomplete_limit: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum autocomplete suggestions"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def known_env(cls, value: str) -> str:
        env = value.lower().strip()
        if env not in APP_ENVS:
            logger.warning(f"⚠️ APP_ENV={value!r} is not one of {sorted(APP_ENVS)}; using development")
            return "development"
        return env

    @field_validator("geocoding_api_key")
    @classmethod
    def blank_key_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================
    @property
    def drinks_path(self) -> Path:
        return Path(self.drinks_file)

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS_ORIGINS as a list; anything but a JSON array means ["*"]."""
        try:
            origins = json.loads(self.cors_origins)
        except json.JSONDecodeError:
            logger.warning(f"⚠️ CORS_ORIGINS is not valid JSON ({self.cors_origins!r}), allowing all origins")
            return ["*"]
        return origins if isinstance(origins, list) else ["*"]

    @property
    def sqlite_file(self) -> Optional[Path]:
        """Database file for file-backed SQLite URLs, else None."""
        if not self.database_url.startswith("sqlite"):
            return None
        database = make_url(self.database_url).database
        if not database or database == ":memory:":
            return None
        return Path(database)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings; creates the SQLite directory on first load."""
    settings = Settings()

    db_file = settings.sqlite_file
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(
        f"Settings loaded: env={settings.app_env} debug={settings.debug} "
        f"geocoding={'on' if settings.geocoding_api_key else 'off'}"
    )
    return settings
