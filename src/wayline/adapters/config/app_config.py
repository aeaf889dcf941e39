"""12-factor configuration adapter using environment variables."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Storage configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection string"
    )
    mongodb_database: str = Field(default="wayline", description="MongoDB database name")
    providers_file: str = Field(
        default="available_providers.json",
        description="Path to the provider registry (JSON or TOML)",
    )

    # Locale
    timezone: str = Field(
        default="Europe/Madrid",
        description="Timezone of GTFS clock times (IANA timezone name)",
    )

    # Upstream departures (TransitLand REST API)
    transitland_api_key: str = Field(default="", description="TransitLand API key")
    transitland_base_url: str = Field(
        default="https://transit.land/api/v2/rest",
        description="Base URL of the TransitLand REST API",
    )
    upstream_timeout_seconds: float = Field(
        default=10.0, description="Timeout for a single upstream departure request in seconds"
    )

    # Departure cache
    departure_window_limit: int = Field(
        default=30, description="Departures requested by the first upstream call"
    )
    departure_broadened_window_limit: int = Field(
        default=60,
        description="Departures requested when the first call returns too few upcoming",
    )
    departure_bucket_size: int = Field(
        default=5, description="Size of the past, upcoming and later departure buckets"
    )
    departure_cache_ttl_seconds: int = Field(
        default=2 * 60 * 60, description="Lifetime of a cached departure set in seconds"
    )
    cache_sweep_interval_seconds: int = Field(
        default=10 * 60, description="Interval between expired cache entry sweeps in seconds"
    )

    # Place queries
    places_page_size: int = Field(
        default=30, description="Maximum number of stops read from the geo store per query"
    )
    default_radius_meters: int = Field(
        default=1000, description="Radius used when a place query omits it"
    )
    max_radius_meters: int = Field(default=5000, description="Largest accepted query radius")

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone name, got {v!r}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator(
        "departure_window_limit",
        "departure_broadened_window_limit",
        "departure_bucket_size",
        "departure_cache_ttl_seconds",
        "cache_sweep_interval_seconds",
        "places_page_size",
        "default_radius_meters",
        "max_radius_meters",
        "rate_limit_per_minute",
        "upstream_timeout_seconds",
    )
    @classmethod
    def validate_positive(cls, v: int | float) -> int | float:
        """Validate limits and intervals are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @model_validator(mode="after")
    def validate_windows(self) -> "AppConfig":
        """Validate the broadened window is larger than the first one."""
        if self.departure_broadened_window_limit <= self.departure_window_limit:
            raise ValueError(
                "departure_broadened_window_limit must be larger than departure_window_limit"
            )
        if self.default_radius_meters > self.max_radius_meters:
            raise ValueError("default_radius_meters must not exceed max_radius_meters")
        return self
