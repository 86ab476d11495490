"""Shared pytest fixtures for Wayback Trends tests.

Fixture summary
---------------
cdx_table         Parsed CDX fixture (header + 7 rows, 5 with status 200).
cdx_body          The same fixture as raw response text.
settings          Fresh :class:`Settings` with test defaults.
make_row          Factory for a single raw CDX data row.

No test touches the network; HTTP is mocked with respx.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from wayback_trends.config.settings import Settings, get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "wayback"


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the developer's environment and .env file."""
    for var in (
        "WAYBACK_TRENDS_CDX_BASE_URL",
        "WAYBACK_TRENDS_HTTP_TIMEOUT",
        "WAYBACK_TRENDS_USER_AGENT",
        "WAYBACK_TRENDS_LOG_LEVEL",
        "WAYBACK_TRENDS_DEFAULT_SITES",
        "WAYBACK_TRENDS_OUTPUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cdx_body() -> str:
    return (FIXTURES_DIR / "cdx_response.json").read_text(encoding="utf-8")


@pytest.fixture
def cdx_table(cdx_body: str) -> list[list[str]]:
    return json.loads(cdx_body)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, http_timeout=5.0)


@pytest.fixture
def make_row() -> Callable[..., list[str]]:
    """Return a factory building one raw CDX data row."""

    def _make_row(
        timestamp: str = "20160101000000",
        statuscode: str = "200",
        urlkey: str = "a)/",
        original: str = "http://a/",
        mimetype: str = "text/html",
        digest: str = "d1",
        length: str = "100",
    ) -> list[str]:
        return [urlkey, timestamp, original, mimetype, statuscode, digest, length]

    return _make_row
