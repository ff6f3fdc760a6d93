"""Configuration settings for weak-cache."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CLEANUP_INTERVAL = 60.0


class WeakCacheSettings(BaseSettings):
    """Cache defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WEAK_CACHE_",
        extra="ignore",
        env_parse_none_str="none",
    )

    # Sweeper
    cleanup_interval: float | None = Field(
        default=DEFAULT_CLEANUP_INTERVAL,
        description="Seconds between cleanup sweeps ('none' disables the sweeper)",
    )

    # Retention
    primitives_always_hard: bool = Field(
        default=False,
        description="Hold primitive values with a strong reference unless put() says otherwise",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    @field_validator("cleanup_interval")
    @classmethod
    def check_cleanup_interval(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("cleanup_interval must be positive")
        return value


@lru_cache(maxsize=1)
def get_settings() -> WeakCacheSettings:
    """Return cached settings instance."""

    return WeakCacheSettings()
