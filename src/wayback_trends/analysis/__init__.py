"""Analysis modules: normalization, aggregation, rendering, and export."""

from __future__ import annotations

from wayback_trends.analysis.aggregate import (
    Bucket,
    Granularity,
    aggregate,
    buckets_to_frame,
    truncate_date,
)
from wayback_trends.analysis.export import (
    export_buckets_csv,
    export_records_csv,
    export_records_ndjson,
)
from wayback_trends.analysis.normalizer import (
    CaptureRecord,
    normalize,
    normalize_many,
    parse_capture_date,
)
from wayback_trends.analysis.render import RenderMode, render

__all__ = [
    # normalizer
    "CaptureRecord",
    "normalize",
    "normalize_many",
    "parse_capture_date",
    # aggregate
    "Bucket",
    "Granularity",
    "aggregate",
    "buckets_to_frame",
    "truncate_date",
    # render
    "RenderMode",
    "render",
    # export
    "export_records_csv",
    "export_records_ndjson",
    "export_buckets_csv",
]
