"""Wayback Trends: page-change activity of tracked websites over time.

Queries the Internet Archive Wayback Machine CDX API for each tracked domain,
normalizes the capture index into typed records, counts captures per site in
yearly or monthly buckets, and renders the counts as time-series charts.

Typical use::

    from wayback_trends import aggregate, fetch_site, normalize, render

    raw = fetch_site("example.com")
    records = normalize(raw, "example")
    buckets = aggregate(records, "year")
    render(buckets, "line", output_path="example.png")
"""

from __future__ import annotations

from wayback_trends.analysis.aggregate import Bucket, Granularity, aggregate, buckets_to_frame
from wayback_trends.analysis.normalizer import CaptureRecord, normalize, normalize_many
from wayback_trends.analysis.render import RenderMode, render
from wayback_trends.cdx.fetcher import fetch_site, health_check
from wayback_trends.core.exceptions import (
    DateParseError,
    FetchError,
    MalformedRecordError,
    RecordError,
    WaybackTrendsError,
)
from wayback_trends.pipeline import AnalysisResult, run_analysis

__version__ = "0.1.0"

__all__ = [
    # fetch
    "fetch_site",
    "health_check",
    # normalize
    "CaptureRecord",
    "normalize",
    "normalize_many",
    # aggregate
    "Bucket",
    "Granularity",
    "aggregate",
    "buckets_to_frame",
    # render
    "RenderMode",
    "render",
    # orchestration
    "AnalysisResult",
    "run_analysis",
    # errors
    "WaybackTrendsError",
    "FetchError",
    "RecordError",
    "MalformedRecordError",
    "DateParseError",
]
