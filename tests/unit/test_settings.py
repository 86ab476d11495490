"""Tests for environment-backed settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wayback_trends.cdx.config import WB_CDX_BASE_URL
from wayback_trends.config.settings import Settings, get_settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.cdx_base_url == WB_CDX_BASE_URL
    assert settings.http_timeout == 60.0
    assert settings.log_level == "INFO"
    assert settings.default_sites == []
    assert settings.output_dir == "."


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAYBACK_TRENDS_HTTP_TIMEOUT", "12.5")
    monkeypatch.setenv("WAYBACK_TRENDS_DEFAULT_SITES", '["example.com", "example.org"]')

    settings = Settings(_env_file=None)

    assert settings.http_timeout == 12.5
    assert settings.default_sites == ["example.com", "example.org"]


def test_log_level_is_uppercased(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAYBACK_TRENDS_LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, http_timeout=0)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
