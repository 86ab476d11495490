"""Charts of capture counts over time.

Two chart kinds are supported:

- ``line``: one line per site, capture count against bucket start.
- ``stacked_bar``: one bar per bucket, stacked by site.

Figures are built with :class:`matplotlib.figure.Figure` directly, never through
pyplot, so importing this module leaves the caller's backend and the pyplot
figure registry untouched.  The figure is returned for further tweaking and
is optionally written to disk.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from pathlib import Path

import matplotlib.dates as mdates
import pandas as pd
import structlog
from matplotlib.figure import Figure

from wayback_trends.analysis.aggregate import Bucket, Granularity, buckets_to_frame

logger = structlog.get_logger(__name__)


class RenderMode(str, Enum):
    """Chart kind produced by :func:`render`."""

    LINE = "line"
    STACKED_BAR = "stacked_bar"


def render(
    buckets: Iterable[Bucket],
    mode: RenderMode | str = RenderMode.LINE,
    *,
    output_path: str | Path | None = None,
    title: str | None = None,
    granularity: Granularity | str | None = None,
) -> Figure:
    """Render aggregated capture counts.

    Args:
        buckets: Output of :func:`~wayback_trends.analysis.aggregate.aggregate`.
        mode: ``"line"`` or ``"stacked_bar"``.
        output_path: If given, the figure is saved there; the format follows
            the file suffix (``.png``, ``.svg``, ``.pdf``).
        title: Chart title; a default naming the mode is used otherwise.
        granularity: Granularity the buckets were aggregated at.  Selects the
            period label format (``2016`` or ``2016-03``); inferred from the
            periods when omitted.

    Returns:
        A standalone matplotlib :class:`~matplotlib.figure.Figure`, not
        registered with pyplot.

    Raises:
        ValueError: If *mode* or *granularity* is not a known value.
    """
    try:
        mode = RenderMode(mode)
    except ValueError:
        raise ValueError(
            f"Invalid render mode {mode!r}. Must be one of: {[m.value for m in RenderMode]}"
        ) from None

    wide = buckets_to_frame(buckets)
    label_format = period_format(wide.index, granularity)

    fig = Figure(figsize=(12, 6))
    ax = fig.subplots()

    if not wide.empty:
        if mode is RenderMode.LINE:
            for site in wide.columns:
                ax.plot(wide.index, wide[site], marker="o", linewidth=1.5, label=site)
            ax.xaxis.set_major_formatter(mdates.DateFormatter(label_format))
        else:
            labels = [period.strftime(label_format) for period in wide.index]
            bottom = [0] * len(wide.index)
            for site in wide.columns:
                values = wide[site].tolist()
                ax.bar(labels, values, bottom=bottom, label=site)
                bottom = [b + v for b, v in zip(bottom, values)]
        ax.legend(title="Site", bbox_to_anchor=(1.02, 1), loc="upper left")

    ax.set_title(title or _default_title(mode), fontsize=14, fontweight="bold")
    ax.set_xlabel("Period")
    ax.set_ylabel("Captures (content changes)")
    ax.grid(True, alpha=0.3)
    fig.autofmt_xdate(rotation=45)
    fig.tight_layout()

    if output_path is not None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=150, bbox_inches="tight")
        logger.info("chart saved", path=str(path), mode=mode.value, sites=len(wide.columns))

    return fig


def period_format(
    periods: pd.DatetimeIndex, granularity: Granularity | str | None = None
) -> str:
    """Return the strftime format used to label *periods*.

    ``"%Y"`` for yearly buckets, ``"%Y-%m"`` otherwise.  Without an explicit
    *granularity*, periods that all fall on January 1st are taken as yearly.
    """
    if granularity is not None:
        try:
            granularity = Granularity(granularity)
        except ValueError:
            raise ValueError(
                f"Invalid granularity {granularity!r}. "
                f"Must be one of: {[g.value for g in Granularity]}"
            ) from None
        return "%Y" if granularity is Granularity.YEAR else "%Y-%m"
    if len(periods) and ((periods.month == 1) & (periods.day == 1)).all():
        return "%Y"
    return "%Y-%m"


def _default_title(mode: RenderMode) -> str:
    if mode is RenderMode.LINE:
        return "Wayback Machine captures over time by site"
    return "Wayback Machine captures per period, stacked by site"
