"""Hack or Snooze client configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from hackorsnooze.domain.favorites import FavoriteSync


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"

    # API Gateway
    api_base_url: str = "https://hack-or-snooze-v3.herokuapp.com"
    request_timeout_seconds: int = 30

    # Favorites: rollback | optimistic | pessimistic
    favorite_sync: FavoriteSync = FavoriteSync.ROLLBACK

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
