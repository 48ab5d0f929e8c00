"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./pancakes.db")

    # Logging
    log_level: str = Field(default="INFO")

    # Recommendation engine
    recommendation_jitter: bool = Field(default=True)  # +-5% on unlearned defaults
    exploration_noise: bool = Field(default=True)
    random_seed: int | None = Field(default=None)

    # History listing
    history_page_size: int = Field(default=20)

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has durable settings."""
        if self.environment == "production":
            if self.database_url.startswith("sqlite") and ":memory:" in self.database_url:
                raise ValueError("DATABASE_URL must not be an in-memory database in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
