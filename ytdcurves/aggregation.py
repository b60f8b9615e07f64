"""
Period aggregation for YTD Curves.

Purpose
-------
Converts cumulative income series into incremental period totals (year,
quarter, month) for bar charts, and re-bases cumulative series to the start
of a quarter or month for period line charts.

Key components
--------------
- Granularity:
    ``YEAR``, ``QUARTER`` (Q1 = Jan-Mar, ..., Q4 = Oct-Dec) and ``MONTH``.

- rollup:
    Per bucket, the largest cumulative value observed in it; the bucket's
    income is that maximum minus the running maximum of earlier buckets.
    Buckets without data inherit the running total (income 0), so the
    totals always add up to the series' final cumulative value.

- Period boundaries:
    ``period_start_value`` / ``period_end_value`` / ``period_income`` read the
    cumulative value at the edges of one quarter or month;
    ``to_period_series`` shifts a series so that period starts at $0.

Notes
-----
A year whose actual data stops mid-year can be rolled up together with its
projection by passing ``projection.splice_projection(actual, projected)``;
the aggregator treats the spliced series like any other.

Example
-------
>>> from ytdcurves.aggregation import rollup, Granularity
>>> [(t.period_label, t.income) for t in rollup(year_2024, Granularity.QUARTER)]
[('Q1', 100.0), ('Q2', 150.0), ('Q3', 150.0), ('Q4', 600.0)]
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .constants import MONTH_LABELS, MONTHS_PER_QUARTER, QUARTER_LABELS
from .exceptions import TimeIndexError
from .series import SeriesPoint, Series
from .types import PeriodTotalDict

__all__ = [
    "Granularity",
    "PeriodTotal",
    "rollup",
    "period_delta",
    "period_months",
    "period_start_value",
    "period_end_value",
    "period_income",
    "to_period_series",
    "yearly_totals",
    "year_label",
]


class Granularity(str, Enum):
    """Period size for rollups and period views."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"


@dataclass(frozen=True)
class PeriodTotal:
    """Incremental (non-cumulative) income earned within one period."""

    period_label: str
    income: float

    def to_dict(self) -> PeriodTotalDict:
        return {"period": self.period_label, "income": float(self.income)}


# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------

def _reading(point: SeriesPoint) -> float:
    # Unreadable values count as 0, like an empty day.
    value = float(point.value)
    return 0.0 if math.isnan(value) else value


def _bucket_maxima(series: Sequence[SeriesPoint], key: Callable[[SeriesPoint], int]) -> Dict[int, float]:
    maxima: Dict[int, float] = {}
    for point in series:
        bucket = key(point)
        maxima[bucket] = max(maxima.get(bucket, 0.0), _reading(point))
    return maxima


def year_label(series: Sequence[SeriesPoint], default: str = "Total") -> str:
    """Four-digit year of the series' last date key, or *default*."""
    if not series:
        return default
    head = series[-1].date_key[:4]
    return head if head.isdigit() else default


def rollup(
    series: Sequence[SeriesPoint],
    granularity: Granularity | str,
    *,
    label: Optional[str] = None,
) -> List[PeriodTotal]:
    """
    Split a cumulative series into incremental period totals.

    Parameters
    ----------
    series : sequence of SeriesPoint
        Chronological cumulative series.
    granularity : Granularity or str
        ``"year"``, ``"quarter"`` or ``"month"``.
    label : str, optional
        Label of the single yearly total (defaults to the series' year).

    Returns
    -------
    list of PeriodTotal
        - year: one entry
        - quarter: always Q1..Q4
        - month: the observed months, in calendar order

    Examples
    --------
    >>> totals = rollup(series, "month")
    >>> sum(t.income for t in totals) == series[-1].value
    True
    """
    granularity = Granularity(granularity)

    if granularity is Granularity.YEAR:
        peak = max((_reading(p) for p in series), default=0.0)
        return [PeriodTotal(label or year_label(series), max(peak, 0.0))]

    totals: List[PeriodTotal] = []
    prior = 0.0
    if granularity is Granularity.QUARTER:
        maxima = _bucket_maxima(series, lambda p: p.quarter)
        for quarter, quarter_label in enumerate(QUARTER_LABELS, start=1):
            cumulative = maxima.get(quarter, prior)
            totals.append(PeriodTotal(quarter_label, cumulative - prior))
            prior = cumulative
        return totals

    maxima = _bucket_maxima(series, lambda p: p.month)
    for month in sorted(maxima):
        cumulative = maxima[month]
        totals.append(PeriodTotal(MONTH_LABELS[month - 1], cumulative - prior))
        prior = cumulative
    return totals


def period_delta(start_cumulative: float, end_cumulative: float) -> float:
    """Income earned between two cumulative readings."""
    return float(end_cumulative) - float(start_cumulative)


def yearly_totals(labelled: Mapping[str, Sequence[SeriesPoint]]) -> List[PeriodTotal]:
    """Final cumulative value of each labelled year (0 for an empty year)."""
    totals = []
    for label, series in labelled.items():
        final = _reading(series[-1]) if len(series) > 0 else 0.0
        totals.append(PeriodTotal(label, final))
    return totals


# ---------------------------------------------------------------------------
# Period boundaries
# ---------------------------------------------------------------------------

def period_months(timeframe: Granularity | str, period: int) -> Tuple[int, int]:
    """First and last month (inclusive) of a quarter or month period."""
    timeframe = Granularity(timeframe)
    if timeframe is Granularity.QUARTER:
        if not (1 <= period <= 4):
            raise TimeIndexError(f"quarter must be in 1..4, got {period}")
        first = (period - 1) * MONTHS_PER_QUARTER + 1
        return first, first + MONTHS_PER_QUARTER - 1
    if timeframe is Granularity.MONTH:
        if not (1 <= period <= 12):
            raise TimeIndexError(f"month must be in 1..12, got {period}")
        return period, period
    raise TimeIndexError("period boundaries only exist for 'quarter' and 'month'.")


def period_start_value(series: Sequence[SeriesPoint], timeframe: Granularity | str, period: int) -> float:
    """Largest cumulative value before the period starts (0 without earlier data)."""
    first, _ = period_months(timeframe, period)
    before = [p.value for p in series if p.month < first]
    return float(max(before)) if before else 0.0


def period_end_value(
    series: Sequence[SeriesPoint],
    timeframe: Granularity | str,
    period: int,
) -> Optional[float]:
    """Largest cumulative value inside the period, or None without data."""
    first, last = period_months(timeframe, period)
    inside = [p.value for p in series if first <= p.month <= last]
    return float(max(inside)) if inside else None


def period_income(
    series: Sequence[SeriesPoint],
    timeframe: Granularity | str,
    period: int,
) -> Optional[float]:
    """Income earned within the period, or None without data in it."""
    end = period_end_value(series, timeframe, period)
    if end is None:
        return None
    return period_delta(period_start_value(series, timeframe, period), end)


def to_period_series(
    series: Sequence[SeriesPoint],
    timeframe: Granularity | str,
    period: Optional[int] = None,
) -> Series:
    """
    Re-base a cumulative series so the selected period starts at $0.

    Every value becomes ``max(0, value - period_start_value)``. Year views,
    or a quarter/month view without a period number, return the series
    unchanged.
    """
    timeframe = Granularity(timeframe)
    if not series or timeframe is Granularity.YEAR or period is None:
        return list(series)
    start = period_start_value(series, timeframe, period)
    return [p.with_value(max(0.0, p.value - start)) for p in series]
