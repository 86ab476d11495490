"""Application-wide exception hierarchy for Wayback Trends.

All custom exceptions subclass ``WaybackTrendsError`` and carry the domain
they concern, so a multi-site run can attribute every failure to its site.

Hierarchy::

    WaybackTrendsError
    ├── FetchError               (domain, cause)
    └── RecordError              (domain)
        ├── MalformedRecordError (domain, row_index)
        └── DateParseError       (domain, raw_timestamp)
"""

from __future__ import annotations


class WaybackTrendsError(Exception):
    """Base class for all Wayback Trends exceptions.

    Args:
        message: Human-readable description of the failure.
        domain: Domain (or site label) the failure belongs to.
    """

    def __init__(self, message: str, domain: str | None = None) -> None:
        super().__init__(message)
        self.domain = domain


# ---------------------------------------------------------------------------
# Fetch exceptions
# ---------------------------------------------------------------------------


class FetchError(WaybackTrendsError):
    """Raised when the CDX query for a domain cannot be completed.

    Covers network errors, non-200 HTTP responses, and bodies that are not a
    JSON array of arrays.  Never retried.

    Args:
        domain: Domain whose capture listing was requested.
        cause: The underlying exception or a short description of the problem.
    """

    def __init__(self, domain: str, cause: BaseException | str) -> None:
        super().__init__(f"CDX fetch failed for '{domain}': {cause}", domain=domain)
        self.cause = cause


# ---------------------------------------------------------------------------
# Normalization exceptions
# ---------------------------------------------------------------------------


class RecordError(WaybackTrendsError):
    """Base class for errors raised while normalizing a raw CDX table.

    Any ``RecordError`` aborts normalization of the whole site batch.
    """


class MalformedRecordError(RecordError):
    """Raised when a raw CDX row does not match the expected schema.

    A data row with other than seven fields, or a header row whose names
    differ from the expected header, is malformed.

    Args:
        domain: Domain the raw table was fetched for.
        row_index: Index of the offending row in the raw table (the header
            row is index 0).
        detail: Optional description of what was wrong with the row.
    """

    def __init__(self, domain: str | None, row_index: int, detail: str | None = None) -> None:
        msg = f"Malformed CDX row {row_index}"
        if domain:
            msg += f" for '{domain}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg, domain=domain)
        self.row_index = row_index


class DateParseError(RecordError):
    """Raised when a capture timestamp does not start with a valid calendar date.

    Args:
        domain: Domain the raw table was fetched for.
        raw_timestamp: The ``timestamp`` field exactly as received.
    """

    def __init__(self, domain: str | None, raw_timestamp: str) -> None:
        msg = f"Invalid CDX timestamp {raw_timestamp!r}"
        if domain:
            msg += f" for '{domain}'"
        super().__init__(msg, domain=domain)
        self.raw_timestamp = raw_timestamp
