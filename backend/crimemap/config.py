"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Case-management database (read only)
    database_url: str = "postgresql+asyncpg://localhost:5432/crimemap"

    # Grid prediction scoring service
    prediction_service_url: str | None = None
    prediction_api_key: str | None = None
    prediction_timeout_seconds: float = 30.0
    prediction_max_retries: int = 3

    # Gemini safety analysis
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash-lite"
    analysis_cache_ttl_seconds: int = 30 * 60
    analysis_cache_max_entries: int = 1000

    # Muntinlupa City grid coverage (~110m cells)
    grid_lat_min: float = 14.370
    grid_lat_max: float = 14.430
    grid_lng_min: float = 121.030
    grid_lng_max: float = 121.065
    grid_size: float = 0.001

    # Wall-clock defaults for heatmap queries
    timezone: str = "Asia/Manila"

    # API settings
    api_v1_prefix: str = "/api/v1"
    cors_origins: list[str] = ["*"]  # Restrict in production
    rate_limit_per_minute: int = 60
    analysis_rate_limit_per_minute: int = 10

    # Environment
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
