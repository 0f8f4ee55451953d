"""Application configuration using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults but can be overridden via environment variables.
    The OpenWeather API key is the only value without a usable default; geocoding
    requests fail with an invalid-request error until it is set.

    Example:
        >>> settings = Settings()
        >>> settings.SEARCH_DEBOUNCE_MS
        300
        >>> settings.FORECAST_DAYS
        5
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Upstream API Configuration
    UPSTREAM_TIMEOUT: float = Field(
        default=5.0,
        description="Timeout for upstream API requests in seconds (httpx default)",
        ge=0.1,
        le=60.0,
    )
    GEOCODING_BASE_URL: str = Field(
        default="https://api.openweathermap.org",
        description="Base URL for the OpenWeather geocoding API",
    )
    FORECAST_BASE_URL: str = Field(
        default="https://api.met.no",
        description="Base URL for the MET Norway locationforecast API",
    )
    OPENWEATHER_API_KEY: str | None = Field(
        default=None,
        description="API key for OpenWeather geocoding (required for location search)",
    )
    FORECAST_USER_AGENT: str = Field(
        default="WeatherApp/1.0 your@email.com",
        description="Identifying User-Agent required by the MET Norway terms of service",
        min_length=1,
    )

    # Search Configuration
    SEARCH_DEBOUNCE_MS: int = Field(
        default=300,
        description="Quiet period after the last keystroke before a search is issued",
        ge=0,
        le=10000,
    )
    SEARCH_RESULT_LIMIT: int = Field(
        default=5,
        description="Maximum number of candidate locations requested from geocoding",
        ge=1,
        le=5,
    )

    # Forecast Configuration
    FORECAST_DAYS: int = Field(
        default=5,
        description="Maximum number of forecast entries kept after normalization",
        ge=1,
        le=5,
    )
    FALLBACK_SYMBOL_CODE: str = Field(
        default="cloud.sun.fill",
        description="Symbol used when an entry has no next-hour summary",
        min_length=1,
    )
    FORECAST_LABEL_FROM_TIMESTAMP: bool = Field(
        default=False,
        description="Label days from each entry's own timestamp instead of today + index",
    )

    # Server Configuration
    PORT: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Args:
            v: The log level string to validate

        Returns:
            The uppercase log level string

        Raises:
            ValueError: If the log level is invalid

        Example:
            >>> Settings(LOG_LEVEL="info").LOG_LEVEL
            'INFO'
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("GEOCODING_BASE_URL", "FORECAST_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that a base URL is properly formatted.

        Args:
            v: The URL string to validate

        Returns:
            The URL string without trailing slash

        Raises:
            ValueError: If the URL is invalid

        Example:
            >>> Settings(FORECAST_BASE_URL="https://api.example.com/").FORECAST_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("OPENWEATHER_API_KEY")
    @classmethod
    def empty_key_is_unset(cls, v: str | None) -> str | None:
        """Treat a blank API key the same as a missing one."""
        if v is not None and not v.strip():
            return None
        return v


# Global settings instance
settings = Settings()
