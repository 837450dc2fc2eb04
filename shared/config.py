"""
Shared configuration management for the Pulse news cache.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CACHE_DIRNAME = "PulseNewsCache"


def default_cache_root() -> Path:
    """Return the per-user purgeable cache area (XDG style)."""
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache)
    return Path.home() / ".cache"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PULSE_",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class NewsCacheSettings(BaseConfig):
    """Settings for the tiered news cache."""

    # Memory tier
    memory_count_limit: int = Field(default=100, ge=1)
    memory_cost_limit_bytes: int = Field(default=50 * 1024 * 1024, ge=1)

    # Disk tier
    disk_cache_enabled: bool = Field(default=True)
    cache_dir: Optional[Path] = Field(default=None)
    disk_ttl_seconds: int = Field(default=24 * 60 * 60, ge=0)

    # Observability
    enable_metrics: bool = Field(default=False)

    def resolved_cache_dir(self) -> Path:
        """Directory the disk tier writes to."""
        if self.cache_dir is not None:
            return Path(self.cache_dir)
        return default_cache_root() / DEFAULT_CACHE_DIRNAME


@lru_cache()
def get_settings() -> NewsCacheSettings:
    """Get the process-wide news cache settings."""
    return NewsCacheSettings()
