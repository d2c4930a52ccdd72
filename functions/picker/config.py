"""
Configuration and settings for the picker backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    # Admin login
    admin_password: Optional[str] = Field(default=None)
    # Credentials older than this are rejected. None keeps them valid forever.
    token_ttl_seconds: Optional[int] = Field(default=None, ge=1)

    # GitHub repository holding the data file
    github_token: Optional[str] = Field(default=None)
    github_repo: Optional[str] = Field(default=None)
    github_branch: str = Field(default="main")
    github_api_url: str = Field(default="https://api.github.com")
    data_file_path: str = Field(default="restaurants.json")
    request_timeout: float = Field(default=30.0)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "use_in_memory_backends", "PICKER_USE_IN_MEMORY_BACKENDS"
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
