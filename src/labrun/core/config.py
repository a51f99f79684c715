"""Centralized application settings using pydantic-settings.

All environment variable reads are consolidated here. Import `get_settings`
from this module rather than reading os.environ directly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All env vars are prefixed with LABRUN_ (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_prefix="LABRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_version: str = "0.1.0"

    # Database
    database_url: str = "sqlite+aiosqlite:///./lab.db"
    # Demo convenience: create tables and seed instruments on startup
    init_data: bool = True

    # Sample batch schema
    samples_schema_path: Optional[Path] = None
    max_samples: Optional[int] = Field(default=None, ge=1)

    # Logging
    log_format: str = "console"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()
