"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with an OPSMAP_* environment variable or .env entry
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults work out of the box: a local SQLite file next to the working directory
    - A plain sqlite:/// URL is upgraded to the async aiosqlite driver
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="OPSMAP_", case_sensitive=False, extra="ignore",
    )

    # Persistence
    database_url: str = "sqlite+aiosqlite:///ops_map.db"
    storage_key: str = "opsMapStateV1"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_sqlite_driver(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v

    # Controller
    save_debounce_ms: int = 220
    watch_interval_seconds: float = 2.0

    # Layout
    layout_strategy: str = "ring"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
