"""Constants for the Wayback Machine CDX API.

Defines the endpoint, the fixed query parameters sent with every capture
query, and the header row the JSON output is expected to start with.

The CDX API is free and unauthenticated.  With ``output=json`` the body is a
2D array: the first row holds field names, each later row one capture.

Reference: https://github.com/internetarchive/wayback/tree/master/wayback-cdx-server
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# API constants
# ---------------------------------------------------------------------------

WB_CDX_BASE_URL: str = "https://web.archive.org/cdx/search/cdx"
"""Base URL for the Wayback Machine CDX API."""

WB_PLAYBACK_URL_TEMPLATE: str = "https://web.archive.org/web/{timestamp}id_/{url}"
"""URL pattern for retrieving raw archived page content.

The ``id_`` suffix requests raw content without the Wayback Machine toolbar.
"""

WB_MATCH_TYPE: str = "domain"
"""``matchType`` for capture queries: the host and all of its subdomains."""

WB_OUTPUT: str = "json"
"""Output format for CDX responses (2D JSON array, header row first)."""

WB_COLLAPSE: str = "digest"
"""Collapse consecutive captures that share a content digest.

Turns the capture index into a list of content *changes*, which is what
page-change activity is measured in.
"""

WB_HEADER: tuple[str, ...] = (
    "urlkey",
    "timestamp",
    "original",
    "mimetype",
    "statuscode",
    "digest",
    "length",
)
"""Field names of the CDX JSON header row, in order."""

WB_OK_STATUS: str = "200"
"""Status code string of captures kept for analysis."""

WB_HEALTH_PROBE_DOMAIN: str = "example.com"
"""Domain queried by the connectivity probe."""


def build_query_params(domain: str) -> dict[str, str]:
    """Return the CDX query parameters for a full-domain capture listing.

    Args:
        domain: Bare hostname, e.g. ``"example.com"``.

    Returns:
        Mapping of query-string parameters, in the order they are sent.
    """
    return {
        "url": domain,
        "matchType": WB_MATCH_TYPE,
        "output": WB_OUTPUT,
        "collapse": WB_COLLAPSE,
    }
