"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
Every tunable is read through this module; never call ``os.getenv``
directly elsewhere in the codebase.

Usage::

    from wayback_trends.config.settings import get_settings

    settings = get_settings()
    timeout = settings.http_timeout
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wayback_trends.cdx.config import WB_CDX_BASE_URL


class Settings(BaseSettings):
    """Runtime configuration backed by ``WAYBACK_TRENDS_*`` environment variables and an optional .env file.

    Every field has a default, so the tool runs without any configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="WAYBACK_TRENDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # CDX API access
    # ------------------------------------------------------------------

    cdx_base_url: str = WB_CDX_BASE_URL
    """Endpoint of the Wayback Machine CDX API.

    Overridable so tests or a mirror can be pointed at a different host.
    """

    http_timeout: float = Field(default=60.0, gt=0)
    """Total per-request timeout in seconds.

    Large ``matchType=domain`` queries can take tens of seconds to stream.
    """

    user_agent: str = "WaybackTrends/1.0 (+research use)"
    """User-Agent header sent with every CDX request."""

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    default_sites: list[str] = Field(default_factory=list)
    """Domains analysed when the CLI is invoked without explicit domains.

    Supplied as a JSON list, e.g.
    ``WAYBACK_TRENDS_DEFAULT_SITES='["example.com", "example.org"]'``.
    """

    output_dir: str = "."
    """Directory that relative chart and export paths are resolved against."""

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide :class:`Settings` instance.

    The result is cached; call ``get_settings.cache_clear()`` after changing
    the environment (tests do this).
    """
    return Settings()
