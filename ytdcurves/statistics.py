"""
Cross-year statistics for YTD Curves.

Purpose
-------
Combines several years of cumulative income into one centre line with a
dispersion band (line charts), or into per-period centre values with error
bars (bar charts).

Key components
--------------
- combine:
    Aligns every year onto a common day axis (all 365 days, or the days of
    the quarter/month being viewed), filling each year's missing days from
    that same year's neighbouring readings, then computes per-day mean,
    median and population standard deviation across years.

- CombinedStats:
    Parallel ``mean`` / ``upper_bound`` / ``lower_bound`` series on the day
    axis. ``upper = mean + z * sigma`` and ``lower = max(0, mean - z * sigma)``
    with z = 1.96 for the 95% CI or 1 for a plain standard deviation.

- combine_period_totals:
    Rolls each year up into quarters, months or a yearly total and reports
    a centre value and error per period.

Notes
-----
In median mode the centre line is the per-day median, but the band is still
built around the mean. This is the behaviour charts have always shown and
is kept for compatibility; a median-absolute-deviation band would be the
statistically consistent alternative.

Example
-------
>>> from ytdcurves.statistics import combine, Dispersion
>>> stats = combine([year_2022, year_2023, year_2024], dispersion=Dispersion.CI)
>>> len(stats.mean)
365
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .aggregation import Granularity, rollup
from .constants import CI_Z_SCORE, MONTH_LABELS, QUARTER_LABELS, STD_Z_SCORE
from .series import Series, SeriesPoint, all_days_of_year, interpolate_on_days
from .types import CombinedStatsDict, PeriodStatisticDict

__all__ = [
    "CenterStatistic",
    "Dispersion",
    "CombinedStats",
    "PeriodStatistic",
    "z_score",
    "interpolate_year",
    "summarize",
    "combine",
    "combine_period_totals",
]


class CenterStatistic(str, Enum):
    """Centre line of a cross-year combination."""

    MEAN = "mean"
    MEDIAN = "median"


class Dispersion(str, Enum):
    """Band around the centre line."""

    STD = "std"
    CI = "ci"


def z_score(dispersion: Dispersion | str) -> float:
    """Band multiplier: 1.96 for the 95% CI, 1 for one standard deviation."""
    if Dispersion(dispersion) is Dispersion.CI:
        return CI_Z_SCORE
    return STD_Z_SCORE


@dataclass(frozen=True)
class CombinedStats:
    """
    Day-aligned centre line and band across years.

    Attributes
    ----------
    mean : Series
        Centre line (the mean, or the median in median mode).
    upper_bound : Series
        ``mean + z * sigma`` per day.
    lower_bound : Series
        ``max(0, mean - z * sigma)`` per day.
    """

    mean: Series = field(default_factory=list)
    upper_bound: Series = field(default_factory=list)
    lower_bound: Series = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.mean)

    @property
    def is_empty(self) -> bool:
        return len(self.mean) == 0

    @property
    def days(self) -> List[str]:
        return [p.display_key for p in self.mean]

    def to_frame(self) -> pd.DataFrame:
        """Columns ``center``, ``upper``, ``lower`` indexed by display key."""
        return pd.DataFrame(
            {
                "center": [p.value for p in self.mean],
                "upper": [p.value for p in self.upper_bound],
                "lower": [p.value for p in self.lower_bound],
            },
            index=pd.Index(self.days, name="day"),
        )

    def to_dict(self) -> CombinedStatsDict:
        return {
            "days": self.days,
            "center": [float(p.value) for p in self.mean],
            "upper": [float(p.value) for p in self.upper_bound],
            "lower": [float(p.value) for p in self.lower_bound],
        }


@dataclass(frozen=True)
class PeriodStatistic:
    """Centre and error bar of one period across years."""

    period_label: str
    center: float
    error: float
    values: Tuple[float, ...] = ()

    def to_dict(self) -> PeriodStatisticDict:
        return {
            "period": self.period_label,
            "center": float(self.center),
            "error": float(self.error),
            "values": [float(v) for v in self.values],
        }


# ---------------------------------------------------------------------------
# Day-level combination
# ---------------------------------------------------------------------------

def interpolate_year(series: Sequence[SeriesPoint], days: Sequence[str]) -> np.ndarray:
    """One year's value on every axis day, gaps filled from that year only."""
    return interpolate_on_days(series, days)


def _as_series(days: Sequence[str], values: np.ndarray) -> Series:
    return [SeriesPoint(day, day, float(v)) for day, v in zip(days, values)]


def combine(
    year_series: Sequence[Sequence[SeriesPoint]],
    allowed_days: Optional[Sequence[str]] = None,
    *,
    center: CenterStatistic | str = CenterStatistic.MEAN,
    dispersion: Dispersion | str = Dispersion.CI,
) -> CombinedStats:
    """
    Combine several years into a centre line and band on a common day axis.

    Parameters
    ----------
    year_series : sequence of Series
        One cumulative series per year, each possibly covering a different
        subset of days. Empty series are ignored.
    allowed_days : sequence of str, optional
        Restricted axis (e.g. ``days_for_quarter(3)``); defaults to all 365
        days. An empty sequence also means the full year.
    center : CenterStatistic or str, default MEAN
        Centre statistic of the ``mean`` output series.
    dispersion : Dispersion or str, default CI
        ``"ci"`` for z = 1.96, ``"std"`` for z = 1.

    Returns
    -------
    CombinedStats
        One point per axis day in each of the three series. No usable year
        gives empty stats; a single year gives sigma = 0.

    Notes
    -----
    Standard deviation is the population form (divides by the number of
    years). The band is built around the mean in both centre modes.
    """
    center = CenterStatistic(center)
    years = [s for s in year_series if len(s) > 0]
    if not years:
        return CombinedStats()

    days = list(allowed_days) if allowed_days else all_days_of_year()
    matrix = np.vstack([interpolate_year(s, days) for s in years])

    mean = matrix.mean(axis=0)
    sigma = matrix.std(axis=0)
    band = z_score(dispersion) * sigma
    centre = np.median(matrix, axis=0) if center is CenterStatistic.MEDIAN else mean

    return CombinedStats(
        mean=_as_series(days, centre),
        upper_bound=_as_series(days, mean + band),
        lower_bound=_as_series(days, np.maximum(0.0, mean - band)),
    )


# ---------------------------------------------------------------------------
# Period-level combination
# ---------------------------------------------------------------------------

def summarize(values: Sequence[float], center: CenterStatistic | str = CenterStatistic.MEAN) -> Tuple[float, float]:
    """
    Centre value and population standard deviation of *values*.

    The standard deviation is always taken around the mean. Empty input
    gives ``(0.0, 0.0)``.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0, 0.0
    sigma = float(arr.std())
    if CenterStatistic(center) is CenterStatistic.MEDIAN:
        return float(np.median(arr)), sigma
    return float(arr.mean()), sigma


def combine_period_totals(
    year_series: Sequence[Sequence[SeriesPoint]],
    granularity: Granularity | str,
    *,
    center: CenterStatistic | str = CenterStatistic.MEAN,
    dispersion: Dispersion | str = Dispersion.STD,
    label: str = "Historical Mean",
) -> List[PeriodStatistic]:
    """
    Per-period centre and error bar across years.

    Parameters
    ----------
    year_series : sequence of Series
        Cumulative series per year; empty years are ignored.
    granularity : Granularity or str
        - ``"quarter"``: Q1..Q4 always present (0 / 0 without data)
        - ``"month"``: months observed in any year, calendar order
        - ``"year"``: one statistic over the years' final totals, named *label*
    center : CenterStatistic or str, default MEAN
    dispersion : Dispersion or str, default STD
        Error is ``z * sigma``.
    label : str
        Period label of the yearly statistic.
    """
    granularity = Granularity(granularity)
    z = z_score(dispersion)
    years = [s for s in year_series if len(s) > 0]

    if granularity is Granularity.YEAR:
        finals = [float(s[-1].value) for s in years]
        centre, sigma = summarize(finals, center)
        return [PeriodStatistic(label, centre, z * sigma, tuple(finals))]

    per_period: Dict[str, List[float]] = {}
    for series in years:
        for total in rollup(series, granularity):
            per_period.setdefault(total.period_label, []).append(total.income)

    order = QUARTER_LABELS if granularity is Granularity.QUARTER else MONTH_LABELS
    stats = []
    for period in order:
        values = per_period.get(period)
        if values is None and granularity is Granularity.MONTH:
            continue
        values = values or []
        centre, sigma = summarize(values, center)
        stats.append(PeriodStatistic(period, centre, z * sigma, tuple(values)))
    return stats
