"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Recipe source
    recipe_source: Literal["memory", "database", "sheet"] = "memory"
    recipes_file: str = ""  # JSON corpus loaded by the in-memory repository

    # Database
    database_url: str = "postgresql+asyncpg://localhost/mealmatch"

    # Published spreadsheet (CSV export)
    recipes_csv_url: str = ""
    http_timeout: float = 30.0  # request timeout in seconds
    http_max_retries: int = 3

    # Search
    search_result_limit: int = 8
    featured_count: int = 4
    suggestion_limit: int = 5
    suggestion_min_score: float = 70.0  # rapidfuzz score, 0-100

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
