"""
Configuration and settings for the pre-launch signup service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Optional SQL database; any SQLAlchemy URL works.
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="PRELAUNCH_USE_IN_MEMORY_BACKENDS"
    )

    # Year announced in the signup confirmation message.
    launch_year: int = Field(default=2025, validation_alias="PRELAUNCH_LAUNCH_YEAR")

    log_level: str = Field(default="INFO", validation_alias="PRELAUNCH_LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
