"""Tests for the Wayback Machine CDX fetcher.

Covers:
- fetch_site() sends the fixed CDX query parameters
- fetch_site() returns the parsed 2D array unchanged
- Empty body → []
- Non-200 status → FetchError carrying the domain
- Network error → FetchError with the httpx exception as cause
- Malformed JSON / non-array bodies → FetchError
- Domain validation (empty, URL with scheme, path)
- health_check() returns ok / degraded / down without raising

These tests run without a network connection.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from wayback_trends.cdx.config import WB_CDX_BASE_URL
from wayback_trends.cdx.fetcher import fetch_site, health_check
from wayback_trends.config.settings import Settings
from wayback_trends.core.exceptions import FetchError


class TestFetchSite:
    @respx.mock
    def test_sends_fixed_query_parameters(self, cdx_body: str, settings: Settings) -> None:
        """fetch_site() queries url, matchType=domain, output=json, collapse=digest."""
        route = respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=cdx_body))

        fetch_site("example.com", settings=settings)

        assert route.called
        params = route.calls.last.request.url.params
        assert params["url"] == "example.com"
        assert params["matchType"] == "domain"
        assert params["output"] == "json"
        assert params["collapse"] == "digest"

    @respx.mock
    def test_returns_parsed_table(
        self, cdx_body: str, cdx_table: list[list[str]], settings: Settings
    ) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=cdx_body))

        result = fetch_site("example.com", settings=settings)

        assert result == cdx_table
        assert result[0][0] == "urlkey"

    @respx.mock
    def test_sends_user_agent(self, cdx_body: str, settings: Settings) -> None:
        route = respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=cdx_body))

        fetch_site("example.com", settings=settings)

        assert route.calls.last.request.headers["User-Agent"] == settings.user_agent

    @respx.mock
    def test_uses_injected_client_and_leaves_it_open(self, cdx_body: str, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=cdx_body))

        with httpx.Client() as client:
            fetch_site("example.com", client=client, settings=settings)
            assert not client.is_closed

    @respx.mock
    def test_honours_configured_base_url(self, cdx_body: str) -> None:
        mirror = "https://cdx.mirror.test/cdx/search/cdx"
        route = respx.get(mirror).mock(return_value=httpx.Response(200, text=cdx_body))

        fetch_site("example.com", settings=Settings(_env_file=None, cdx_base_url=mirror))

        assert route.called

    @respx.mock
    def test_empty_body_returns_empty_list(self, settings: Settings) -> None:
        """The CDX API answers a domain without captures with an empty body."""
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=""))

        assert fetch_site("never-archived.test", settings=settings) == []

    @respx.mock
    def test_empty_json_array_returns_empty_list(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, json=[]))

        assert fetch_site("never-archived.test", settings=settings) == []

    @pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
    @respx.mock
    def test_non_200_raises_fetch_error(self, status: int, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(status))

        with pytest.raises(FetchError) as excinfo:
            fetch_site("example.com", settings=settings)

        assert excinfo.value.domain == "example.com"
        assert str(status) in str(excinfo.value.cause)

    @respx.mock
    def test_network_error_raises_fetch_error_with_cause(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(FetchError) as excinfo:
            fetch_site("example.com", settings=settings)

        assert excinfo.value.domain == "example.com"
        assert isinstance(excinfo.value.cause, httpx.ConnectError)
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_timeout_raises_fetch_error(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(FetchError):
            fetch_site("example.com", settings=settings)

    @respx.mock
    def test_malformed_json_raises_fetch_error(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(
            return_value=httpx.Response(200, text='[["urlkey", "timestamp"')
        )

        with pytest.raises(FetchError) as excinfo:
            fetch_site("example.com", settings=settings)

        assert "JSON" in str(excinfo.value)

    @pytest.mark.parametrize("payload", [{"urlkey": "x"}, ["urlkey", "timestamp"], [["urlkey"], "x"]])
    @respx.mock
    def test_non_table_json_raises_fetch_error(self, payload: object, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, json=payload))

        with pytest.raises(FetchError):
            fetch_site("example.com", settings=settings)

    @pytest.mark.parametrize("domain", ["", "   ", "https://example.com", "example.com/path"])
    def test_invalid_domain_raises_value_error(self, domain: str, settings: Settings) -> None:
        with pytest.raises(ValueError):
            fetch_site(domain, settings=settings)

    @respx.mock
    def test_domain_whitespace_is_stripped(self, cdx_body: str, settings: Settings) -> None:
        route = respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=cdx_body))

        fetch_site("  example.com \n", settings=settings)

        assert route.calls.last.request.url.params["url"] == "example.com"


class TestHealthCheck:
    @respx.mock
    def test_ok_when_cdx_returns_captures(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(
            return_value=httpx.Response(
                200, json=[["urlkey", "timestamp"], ["com,example)/", "20200101000000"]]
            )
        )

        result = health_check(settings=settings)

        assert result["status"] == "ok"
        assert result["captures_returned"] == 1
        assert "checked_at" in result
        assert result["endpoint"] == WB_CDX_BASE_URL

    @respx.mock
    def test_ok_on_empty_body(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text=""))

        result = health_check(settings=settings)

        assert result["status"] == "ok"
        assert result["captures_returned"] == 0

    @respx.mock
    def test_down_on_http_503(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(503))

        result = health_check(settings=settings)

        assert result["status"] == "down"
        assert "503" in result["detail"]

    @respx.mock
    def test_degraded_on_http_4xx(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(403))

        result = health_check(settings=settings)

        assert result["status"] == "degraded"

    @respx.mock
    def test_down_on_connection_error(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(side_effect=httpx.ConnectError("unreachable"))

        result = health_check(settings=settings)

        assert result["status"] == "down"
        assert "Connection error" in result["detail"]

    @respx.mock
    def test_degraded_on_invalid_json(self, settings: Settings) -> None:
        respx.get(WB_CDX_BASE_URL).mock(return_value=httpx.Response(200, text="<html>"))

        result = health_check(settings=settings)

        assert result["status"] == "degraded"
