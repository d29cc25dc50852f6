"""
Configuration settings for comicshelf using Pydantic Settings.

This module centralizes configuration for the catalog client, the local store
and the cache-aside layer, loading values from environment variables or a
local .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any


class ComicShelfSettings(BaseSettings):
    """
    Settings for the catalog client, the local store and the caches.

    Uses Pydantic Settings to load and validate configuration from
    environment variables with proper type checking and defaults.
    """

    # ComicVine API configuration
    comicvine_api_key: Optional[str] = Field(
        default=None,
        alias="COMICVINE_API_KEY",
        description="ComicVine API key (required for any remote call)"
    )
    comicvine_base_url: str = Field(
        default="https://comicvine.gamespot.com/api",
        alias="COMICVINE_BASE_URL",
        description="ComicVine API base URL"
    )
    comicvine_user_agent: str = Field(
        default="comicshelf/1.0",
        alias="COMICVINE_USER_AGENT",
        description="User agent sent with every ComicVine request"
    )
    comicvine_timeout: float = Field(
        default=20.0,
        gt=0,
        alias="COMICVINE_TIMEOUT",
        description="Network timeout for ComicVine requests in seconds"
    )

    # Local store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/comicshelf.db",
        alias="COMICSHELF_DATABASE_URL",
        description="SQLAlchemy async URL of the local store"
    )

    # Cache-aside configuration
    cache_ttl: int = Field(
        default=3600,  # 1 hour
        gt=0,
        alias="COMICSHELF_CACHE_TTL",
        description="Lifetime of cached query results in seconds"
    )

    # Batch fetching / rate limiting
    batch_size: int = Field(
        default=5,
        ge=1,
        alias="COMICSHELF_BATCH_SIZE",
        description="Maximum concurrent issue requests per batch"
    )
    batch_delay: float = Field(
        default=0.2,
        ge=0,
        alias="COMICSHELF_BATCH_DELAY",
        description="Pause between issue batches in seconds"
    )
    page_size: int = Field(
        default=20,
        ge=1,
        alias="COMICSHELF_PAGE_SIZE",
        description="Default page size for listings and searches"
    )

    log_config: Optional[str] = Field(
        default=None,
        alias="COMICSHELF_LOG_CONFIG",
        description="Path to a YAML logging configuration"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore",  # Allow extra fields from .env but ignore them
        "populate_by_name": True,
    }

    def validate_comicvine_config(self) -> bool:
        """Check that an API key is available for remote calls."""
        return bool(self.comicvine_api_key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, with the API key redacted."""
        data = self.model_dump()
        if data.get("comicvine_api_key"):
            data["comicvine_api_key"] = "[REDACTED]"
        return data


# Global settings instance
_settings: Optional[ComicShelfSettings] = None


def get_settings() -> ComicShelfSettings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Validated ComicShelfSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ComicShelfSettings()
    return _settings


def reset_settings() -> None:
    """Reset global settings (useful for testing)."""
    global _settings
    _settings = None
