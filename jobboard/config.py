"""Runtime configuration for the job board.

Every setting can be overridden through a `JOBBOARD_`-prefixed environment
variable or a `.env` file in the working directory, e.g.
`JOBBOARD_USAJOBS_API_KEY=...`.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Credentials, cache TTLs and network limits for the job sources."""

    model_config = SettingsConfigDict(
        env_prefix="JOBBOARD_",
        env_file=".env",
        extra="ignore",
    )

    # === Credentials ===
    usajobs_api_key: str = Field(default="", description="USAJOBS Authorization-Key header value")
    usajobs_user_agent: str = Field(
        default="remotework.blog",
        description="USAJOBS asks for an app name or contact email as User-Agent",
    )
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    adzuna_country: str = Field(default="us", min_length=2, max_length=2)

    user_agent: str = Field(default="RemoteWorkBlog/1.0", description="User-Agent sent to the public feeds")

    # === Cache TTLs (seconds) ===
    usajobs_cache_ttl_s: float = Field(default=30 * 60, gt=0)
    jobicy_cache_ttl_s: float = Field(default=60 * 60, gt=0)
    joinrise_cache_ttl_s: float = Field(default=30 * 60, gt=0)
    adzuna_cache_ttl_s: float = Field(default=30 * 60, gt=0)

    # === Network ===
    http_timeout_s: float = Field(default=8.0, gt=0, le=120)
    source_timeout_s: float = Field(default=10.0, gt=0, le=300)
    max_retries: int = Field(default=1, ge=0, le=5, description="Retries on HTTP 429")
    retry_backoff_s: float = Field(default=1.0, ge=0)

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
