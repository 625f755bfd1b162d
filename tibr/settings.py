"""
Environment settings for tibr.

Values that should not live in a checked-in .tibrrc (database URL, API keys)
are read from the process environment or a local .env file.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings from environment."""

    # Fallback for databaseUrl in .tibrrc
    database_url: Optional[str] = None

    # Entity inference
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
