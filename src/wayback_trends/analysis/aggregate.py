"""Time-bucketed capture counts per site.

:func:`aggregate` truncates each record's date to the first day of its year
or month and tallies records per (bucket, site).  Only observed combinations
are returned; a site with no captures in a bucket simply has no row for it.
:func:`buckets_to_frame` pivots the tally into the wide table the renderer and
the CSV export consume.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

import pandas as pd
import structlog

from wayback_trends.analysis.normalizer import CaptureRecord

logger = structlog.get_logger(__name__)


class Granularity(str, Enum):
    """Size of the time bucket captures are counted in.

    Attributes:
        YEAR: Buckets start on January 1st.
        MONTH: Buckets start on the first day of the month.
    """

    YEAR = "year"
    MONTH = "month"


@dataclass(frozen=True)
class Bucket:
    """Number of captures of one site within one time bucket.

    Attributes:
        period: First day of the bucket.
        site: Site label the captures belong to.
        count: Number of captures dated within the bucket.
    """

    period: date
    site: str
    count: int


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def truncate_date(value: date, granularity: Granularity | str) -> date:
    """Return the first day of the year or month containing *value*.

    Raises:
        ValueError: If *granularity* is not ``"year"`` or ``"month"``.
    """
    granularity = _coerce_granularity(granularity)
    if granularity is Granularity.YEAR:
        return date(value.year, 1, 1)
    return date(value.year, value.month, 1)


def aggregate(
    records: Iterable[CaptureRecord],
    granularity: Granularity | str,
    since: date | str | None = None,
) -> list[Bucket]:
    """Count captures per (time bucket, site).

    Args:
        records: Normalized capture records, from any number of sites.
        granularity: ``"year"`` or ``"month"``.
        since: Optional inclusive lower bound; records dated earlier are
            discarded before counting.  Accepts a ``date`` or an ISO
            ``YYYY-MM-DD`` string.

    Returns:
        One :class:`Bucket` per observed (period, site) pair, sorted by period
        then site.  The counts sum to the number of records on or after
        *since*.

    Raises:
        ValueError: If *granularity* is unknown or *since* is not a valid date.
    """
    granularity = _coerce_granularity(granularity)
    lower_bound = _coerce_since(since)

    tally: Counter[tuple[date, str]] = Counter()
    skipped = 0
    for record in records:
        if lower_bound is not None and record.date < lower_bound:
            skipped += 1
            continue
        tally[(truncate_date(record.date, granularity), record.site)] += 1

    buckets = [
        Bucket(period=period, site=site, count=count)
        for (period, site), count in sorted(tally.items())
    ]
    logger.debug(
        "aggregated captures",
        granularity=granularity.value,
        since=lower_bound.isoformat() if lower_bound else None,
        buckets=len(buckets),
        skipped_before_since=skipped,
    )
    return buckets


def buckets_to_frame(buckets: Iterable[Bucket]) -> pd.DataFrame:
    """Pivot buckets into a wide table.

    Returns:
        DataFrame indexed by ``period`` (datetime64), one integer column per
        site, ``0`` where a site has no captures in a period, rows sorted by
        period and columns by site.  Empty input gives an empty frame.
    """
    df = pd.DataFrame(
        [(b.period, b.site, b.count) for b in buckets],
        columns=["period", "site", "count"],
    )
    if df.empty:
        empty = pd.DataFrame(index=pd.DatetimeIndex([], name="period"))
        empty.columns.name = "site"
        return empty

    df["period"] = pd.to_datetime(df["period"])
    wide = df.pivot_table(
        index="period", columns="site", values="count", aggfunc="sum", fill_value=0
    )
    return wide.sort_index().sort_index(axis=1).astype(int)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _coerce_granularity(value: Granularity | str) -> Granularity:
    try:
        return Granularity(value)
    except ValueError:
        raise ValueError(
            f"Invalid granularity {value!r}. "
            f"Must be one of: {[g.value for g in Granularity]}"
        ) from None


def _coerce_since(value: date | str | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid since date {value!r}; expected YYYY-MM-DD") from None
