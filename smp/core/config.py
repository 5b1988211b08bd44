"""
Library configuration.

Centralized configuration management with environment variables
(prefixed with ``SMP_``) and an optional ``.env`` file.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings"""

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: Literal["json", "text"] = "text"
    LOG_FILE: Optional[str] = None

    # Resolution
    MAX_CONCURRENT_LOOKUPS: Optional[int] = Field(default=None, gt=0)

    # Cache-only compute
    CACHE_FALLBACK: float = 0.0

    model_config = SettingsConfigDict(
        env_prefix="SMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
