"""Configuration management using Pydantic BaseSettings.

Loads configuration from environment variables (prefixed ``CRATE_QUERY_``)
with defaults that point at the public crates.io sparse index.

Usage:
    from crate_query_common.config import get_settings

    settings = get_settings()
    print(settings.index_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Override via:
    - Environment variables (e.g., CRATE_QUERY_INDEX_URL=...)
    - .env file in working directory

    Attributes:
        index_url: Base URL of the sparse HTTP index
        index_dir: Local index checkout; when set, shards are read from disk
        max_concurrency: Upper bound on shards fetched at the same time
        timeout_seconds: HTTP request timeout
        user_agent: User-Agent header sent to the index
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json or console)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRATE_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Index
    index_url: str = Field(
        default="https://index.crates.io",
        description="Sparse index base URL",
    )
    index_dir: Optional[str] = Field(
        default=None,
        description="Local index directory (overrides index_url)",
    )

    # Fetching
    max_concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum concurrent shard fetches",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds",
    )
    user_agent: str = Field(
        default="crate-query/1.0.0",
        description="User-Agent header for index requests",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: str = Field(
        default="console",
        description="Log format: json or console",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"json", "console"}
        lower = v.lower()
        if lower not in valid_formats:
            raise ValueError(f"log_format must be one of {valid_formats}")
        return lower


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    Call get_settings.cache_clear() to reload.
    """
    return Settings()
