"""Multi-site fetch and normalization.

:func:`run_analysis` walks the tracked domains one after another, fetching and
normalizing each.  Errors stay attributable to their domain: with
``fail_fast=True`` the first one propagates; otherwise it is logged, recorded
in :attr:`AnalysisResult.failures`, and the remaining domains are processed.
A failing site never contributes rows.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import httpx
import structlog

from wayback_trends.analysis.normalizer import CaptureRecord, normalize
from wayback_trends.cdx.fetcher import fetch_site, validate_domain
from wayback_trends.config.settings import Settings
from wayback_trends.core.exceptions import WaybackTrendsError

logger = structlog.get_logger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of a multi-site run.

    Attributes:
        records: Concatenated capture records of every site that succeeded.
        failures: Domain to the error that excluded it.
        sites: Domain to site label, for every domain attempted.
    """

    records: list[CaptureRecord] = field(default_factory=list)
    failures: dict[str, WaybackTrendsError] = field(default_factory=dict)
    sites: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[str]:
        """Domains that were fetched and normalized without error."""
        return [domain for domain in self.sites if domain not in self.failures]


def run_analysis(
    domains: Sequence[str],
    *,
    labels: Mapping[str, str] | None = None,
    fail_fast: bool = False,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
) -> AnalysisResult:
    """Fetch and normalize each domain in order.

    Args:
        domains: Bare hostnames to analyse.
        labels: Optional domain to site label mapping; unmapped domains are
            labelled with the domain itself.
        fail_fast: Re-raise the first error instead of skipping the domain.
        client: Optional shared :class:`httpx.Client` for every fetch.
        settings: Optional settings override passed to the fetcher.

    Returns:
        :class:`AnalysisResult` with the records of every successful site.

    Raises:
        ValueError: If any domain is not a bare hostname.  Raised before
            the first request is sent.
        WaybackTrendsError: Only when *fail_fast* is set.
    """
    labels = labels or {}
    result = AnalysisResult()
    cleaned = [validate_domain(domain) for domain in domains]

    for domain in cleaned:
        site_label = labels.get(domain, domain)
        result.sites[domain] = site_label
        log = logger.bind(domain=domain, site=site_label)
        try:
            raw_table = fetch_site(domain, client=client, settings=settings)
            records = normalize(raw_table, site_label, domain=domain)
        except WaybackTrendsError as exc:
            if fail_fast:
                log.error("site failed, aborting run", error=str(exc))
                raise
            log.warning("site failed, skipping", error=str(exc), error_type=type(exc).__name__)
            result.failures[domain] = exc
            continue

        result.records.extend(records)
        log.info("site normalized", records=len(records))

    logger.info(
        "analysis run complete",
        sites=len(result.sites),
        failed=len(result.failures),
        records=len(result.records),
    )
    return result
