"""Wayback Machine CDX API fetching.

Provides:
- :func:`fetch_site`: fetch the full capture listing of one domain.
- :func:`health_check`: probe CDX API connectivity without raising.
- :func:`validate_domain`: reject anything but a bare hostname.

Each call performs exactly one synchronous GET.  There is no pagination, no
retry and no caching: the CDX server returns the complete result set for a
``collapse=digest`` query of moderate size in a single response.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import httpx

from wayback_trends.cdx.config import WB_HEALTH_PROBE_DOMAIN, WB_OK_STATUS, WB_OUTPUT, build_query_params
from wayback_trends.config.settings import Settings, get_settings
from wayback_trends.core.exceptions import FetchError

logger = logging.getLogger(__name__)

RawTable = list[list[Any]]
"""Parsed CDX JSON body: header row first, then one row per capture."""


def fetch_site(
    domain: str,
    *,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
) -> RawTable:
    """Fetch every digest-collapsed capture of *domain* and its subdomains.

    Args:
        domain: Bare hostname (e.g. ``"example.com"``), not a URL.
        client: Optional injected :class:`httpx.Client`.  It is used as-is
            and left open; when omitted a short-lived client is created.
        settings: Optional settings override; defaults to :func:`get_settings`.

    Returns:
        The parsed JSON array.  The first row is the CDX header; the rest are
        raw capture rows.  An empty body (no captures) yields ``[]``.

    Raises:
        ValueError: If *domain* is empty or not a bare hostname.
        FetchError: On network errors, non-200 responses, or a body that is
            not a JSON array of arrays.
    """
    domain = validate_domain(domain)
    settings = settings or get_settings()
    params = build_query_params(domain)

    logger.debug("wayback: GET %s params=%s", settings.cdx_base_url, params)

    with _client_scope(client, settings) as http:
        try:
            response = http.get(settings.cdx_base_url, params=params)
        except httpx.RequestError as exc:
            raise FetchError(domain, exc) from exc

    if response.status_code != 200:
        raise FetchError(domain, f"HTTP {response.status_code} from CDX API")

    if not response.text.strip():
        logger.info("wayback: no captures for %s", domain)
        return []

    try:
        data = response.json()
    except ValueError as exc:
        raise FetchError(domain, f"invalid JSON body: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
        raise FetchError(domain, "response body is not a JSON array of arrays")

    logger.info("wayback: %d capture rows for %s", max(0, len(data) - 1), domain)
    return data


def health_check(
    *,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Verify CDX API connectivity with a minimal one-row query.

    Never raises; failures are reported in the returned dict.

    Returns:
        Dict with ``status`` (``"ok"`` | ``"degraded"`` | ``"down"``),
        ``endpoint``, ``checked_at``, and either ``captures_returned`` or
        ``detail``.
    """
    settings = settings or get_settings()
    base: dict[str, Any] = {
        "endpoint": settings.cdx_base_url,
        "checked_at": datetime.now(timezone.utc).isoformat(),
    }
    params = {
        "url": WB_HEALTH_PROBE_DOMAIN,
        "output": WB_OUTPUT,
        "limit": "1",
        "filter": f"statuscode:{WB_OK_STATUS}",
    }

    try:
        with _client_scope(client, settings) as http:
            response = http.get(settings.cdx_base_url, params=params)
            response.raise_for_status()
        data = response.json() if response.text.strip() else []
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        return {
            **base,
            "status": "down" if status_code >= 500 else "degraded",
            "detail": f"HTTP {status_code} from Wayback Machine CDX API",
        }
    except httpx.RequestError as exc:
        return {**base, "status": "down", "detail": f"Connection error: {exc}"}
    except ValueError as exc:
        return {**base, "status": "degraded", "detail": f"Invalid JSON body: {exc}"}

    captures = max(0, len(data) - 1) if isinstance(data, list) else 0
    return {**base, "status": "ok", "captures_returned": captures}


def validate_domain(domain: str) -> str:
    """Return *domain* stripped of surrounding whitespace, or raise ``ValueError``."""
    cleaned = (domain or "").strip()
    if not cleaned:
        raise ValueError("domain must be a non-empty hostname")
    if "://" in cleaned or "/" in cleaned:
        raise ValueError(f"domain must be a bare hostname, not a URL: {domain!r}")
    return cleaned


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def _client_scope(client: httpx.Client | None, settings: Settings) -> Iterator[httpx.Client]:
    """Yield the injected client untouched, or a fresh one closed on exit."""
    if client is not None:
        yield client
        return
    with httpx.Client(
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    ) as own:
        yield own
