"""Normalization of raw CDX tables into typed capture records.

The CDX JSON output is a 2D array of strings.  :func:`normalize` checks its
header row, maps each data row positionally onto :class:`CaptureRecord`,
keeps only ``200`` captures, tags every record with the caller's site label,
and derives a calendar date from the capture timestamp.

Design notes
------------
- Validation is strict: a header that differs from the expected field names,
  or any data row without exactly seven fields, aborts the whole batch.
- Arity is checked on every row before any row is filtered by status.
  Timestamps are parsed only for rows that survive the filter.
- Nothing is returned for a batch that fails; records are collected in a
  local list and handed back only once every row has been processed.
- ``date`` ignores the time of day and performs no timezone adjustment.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any

import structlog

from wayback_trends.cdx.config import WB_HEADER, WB_OK_STATUS, WB_PLAYBACK_URL_TEMPLATE
from wayback_trends.core.exceptions import DateParseError, MalformedRecordError

logger = structlog.get_logger(__name__)

_FIELD_COUNT = len(WB_HEADER)


@dataclass(frozen=True)
class CaptureRecord:
    """One archived snapshot of a tracked site, as kept for analysis.

    Attributes:
        urlkey: SURT-canonicalized URL key.
        timestamp: 14-digit ``YYYYMMDDHHMMSS`` capture time, verbatim.
        original: URL as originally captured.
        mimetype: Content type reported at capture.
        statuscode: HTTP status string; always ``"200"`` after normalization.
        digest: Content hash of the captured payload.
        length: Captured payload size, or ``None`` when the CDX reports ``-``.
        site: Label of the tracked site this capture belongs to.
        date: Calendar date of the capture.
    """

    urlkey: str
    timestamp: str
    original: str
    mimetype: str
    statuscode: str
    digest: str
    length: int | None
    site: str
    date: date

    @property
    def wayback_url(self) -> str:
        """Playback URL of the raw archived content."""
        return WB_PLAYBACK_URL_TEMPLATE.format(timestamp=self.timestamp, url=self.original)

    def as_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict with ``date`` as an ISO string."""
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(
    raw_table: Sequence[Sequence[Any]],
    site_label: str,
    *,
    domain: str | None = None,
) -> list[CaptureRecord]:
    """Normalize one site's raw CDX table.

    Args:
        raw_table: Parsed CDX JSON body (header row first).
        site_label: Label attached to every surviving record.
        domain: Domain used to attribute errors; defaults to *site_label*.

    Returns:
        One :class:`CaptureRecord` per data row whose status is ``"200"``, in
        input order.  A table that is empty or holds only the header yields
        ``[]``.

    Raises:
        MalformedRecordError: If the header row is not the expected CDX
            header, or a data row does not have exactly seven string fields.
            ``row_index`` is the row's position in *raw_table*.
        DateParseError: If a kept row's timestamp does not start with a valid
            ``YYYYMMDD`` date.
    """
    source = domain or site_label
    if not raw_table:
        return []

    _check_header(raw_table[0], source)
    for row_index in range(1, len(raw_table)):
        _check_row(raw_table[row_index], row_index, source)

    records: list[CaptureRecord] = []
    dropped = 0
    for row in raw_table[1:]:
        urlkey, timestamp, original, mimetype, statuscode, digest, length = row
        if statuscode != WB_OK_STATUS:
            dropped += 1
            continue

        records.append(
            CaptureRecord(
                urlkey=urlkey,
                timestamp=timestamp,
                original=original,
                mimetype=mimetype,
                statuscode=statuscode,
                digest=digest,
                length=_parse_length(length),
                site=site_label,
                date=parse_capture_date(timestamp, domain=source),
            )
        )

    logger.debug(
        "normalized cdx table",
        site=site_label,
        rows=len(raw_table) - 1,
        kept=len(records),
        dropped_status=dropped,
    )
    return records


def normalize_many(tables: Mapping[str, Sequence[Sequence[Any]]]) -> list[CaptureRecord]:
    """Normalize several sites independently and concatenate the results.

    Args:
        tables: Mapping of site label to that site's raw CDX table.

    Returns:
        All records, site by site in mapping order.  Rows are never
        de-duplicated across sites; identical captures reported for two sites
        are both kept and told apart by ``site``.

    Raises:
        RecordError: The first normalization error encountered.
    """
    combined: list[CaptureRecord] = []
    for site_label, raw_table in tables.items():
        combined.extend(normalize(raw_table, site_label))
    return combined


def parse_capture_date(timestamp: str, *, domain: str | None = None) -> date:
    """Return the calendar date encoded in the first 8 digits of a CDX timestamp.

    Args:
        timestamp: Raw CDX ``timestamp`` value, e.g. ``"20160315120000"``.
        domain: Domain used to attribute a parse failure.

    Raises:
        DateParseError: If the leading characters are not a valid ``YYYYMMDD``.
    """
    prefix = timestamp[:8]
    if len(prefix) != 8 or not prefix.isdigit():
        raise DateParseError(domain, timestamp)
    try:
        return datetime.strptime(prefix, "%Y%m%d").date()
    except ValueError as exc:
        raise DateParseError(domain, timestamp) from exc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_header(header: Any, domain: str) -> None:
    if not isinstance(header, (list, tuple)) or tuple(header) != WB_HEADER:
        raise MalformedRecordError(
            domain,
            0,
            detail=f"expected header {list(WB_HEADER)}, got {header!r}",
        )


def _check_row(row: Any, row_index: int, domain: str) -> None:
    if not isinstance(row, (list, tuple)):
        raise MalformedRecordError(domain, row_index, detail="row is not an array")
    if len(row) != _FIELD_COUNT:
        raise MalformedRecordError(
            domain,
            row_index,
            detail=f"expected {_FIELD_COUNT} fields, got {len(row)}",
        )
    if not all(isinstance(value, str) for value in row):
        raise MalformedRecordError(domain, row_index, detail="non-string field")


def _parse_length(value: str) -> int | None:
    """Widen the CDX ``length`` string to ``int``; ``"-"`` and blanks become ``None``."""
    value = value.strip()
    return int(value) if value.isdecimal() else None
