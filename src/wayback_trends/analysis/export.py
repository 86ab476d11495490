"""Export of capture records and bucket tallies.

Writes normalized capture records to CSV or NDJSON and the pivoted bucket
table to CSV.  Every function returns raw UTF-8 bytes; the CLI writes them to
disk, tests inspect them in memory.

CSV files start with a UTF-8 BOM so spreadsheet applications detect the
encoding of non-ASCII URLs without charset configuration.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from datetime import date
from typing import Any

import structlog

from wayback_trends.analysis.aggregate import Bucket, buckets_to_frame
from wayback_trends.analysis.normalizer import CaptureRecord

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Column definitions
# ---------------------------------------------------------------------------

#: Ordered columns written by the record exporters.
_RECORD_COLUMNS: list[str] = [
    "site",
    "date",
    "timestamp",
    "urlkey",
    "original",
    "mimetype",
    "statuscode",
    "digest",
    "length",
    "wayback_url",
]


def _safe_str(value: Any) -> str:  # noqa: ANN401
    """Coerce a record value to a string for a CSV cell; ``None`` becomes empty."""
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _record_row(record: CaptureRecord) -> dict[str, Any]:
    row = record.as_dict()
    row["wayback_url"] = record.wayback_url
    return row


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def export_records_csv(records: Iterable[CaptureRecord]) -> bytes:
    """Export capture records as a UTF-8 CSV file, one row per record.

    Columns follow ``_RECORD_COLUMNS``.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\r\n")
    writer.writerow(_RECORD_COLUMNS)

    count = 0
    for record in records:
        row = _record_row(record)
        writer.writerow([_safe_str(row.get(col)) for col in _RECORD_COLUMNS])
        count += 1

    logger.debug("exported records", format="csv", rows=count)
    return "\ufeff".encode("utf-8") + buf.getvalue().encode("utf-8")


def export_records_ndjson(records: Iterable[CaptureRecord]) -> bytes:
    """Export capture records as newline-delimited JSON.

    Each line is a complete JSON object with the keys of ``_RECORD_COLUMNS``;
    ``date`` is an ISO 8601 string and ``length`` an integer or ``null``.
    """
    lines = []
    for record in records:
        row = _record_row(record)
        lines.append(
            json.dumps({col: row.get(col) for col in _RECORD_COLUMNS}, ensure_ascii=False)
        )
    logger.debug("exported records", format="ndjson", rows=len(lines))
    return "\n".join(lines).encode("utf-8")


def export_buckets_csv(buckets: Iterable[Bucket]) -> bytes:
    """Export bucket counts as a wide CSV table.

    The first column is ``period`` (``YYYY-MM-DD``), followed by one column
    per site holding capture counts, ``0`` where a site had none.
    """
    wide = buckets_to_frame(buckets)
    wide.index = wide.index.strftime("%Y-%m-%d")
    wide.index.name = "period"
    wide.columns.name = None

    buf = io.StringIO()
    wide.to_csv(buf, lineterminator="\r\n")
    return "\ufeff".encode("utf-8") + buf.getvalue().encode("utf-8")
