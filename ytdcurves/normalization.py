"""
Normalization for YTD Curves.

Purpose
-------
Rescales dollar amounts to percentages of a reference total. This is the
last step before chart data leaves the engine, so it must never produce NaN
or infinity: a zero or negative reference means "percentage mode does not
apply" and the values pass through unchanged (or, for period views without
any income, become zeros).

Key components
--------------
- normalize / normalize_with_error:
    ``value / denominator * 100``; an error bar is always scaled with the
    denominator of the centre value it belongs to, so ``center ± error``
    stays a valid proportion.

- normalize_series:
    Timeframe-aware percentage curve: year views are a percentage of the
    year total (or a projected total); quarter/month views show the share of
    the period's income earned so far, starting at 0%.

- normalize_period_totals / normalize_period_statistics:
    Bar data as a percentage of the sum over all periods.

Example
-------
>>> from ytdcurves.normalization import normalize
>>> normalize([50.0], 200.0)
array([25.])
>>> normalize([50.0], 0.0)
array([50.])
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .aggregation import Granularity, PeriodTotal, period_end_value, period_start_value
from .series import SeriesPoint, Series, values_of, with_values
from .statistics import PeriodStatistic
from .utils import ArrayLike, as_float_array

__all__ = [
    "normalize",
    "normalize_with_error",
    "normalize_series",
    "normalize_period_totals",
    "normalize_period_statistics",
]


def _usable(denominator: float) -> bool:
    return bool(np.isfinite(denominator)) and denominator > 0


def normalize(values: ArrayLike, denominator: float) -> np.ndarray:
    """
    Express *values* as percentages of *denominator*.

    Parameters
    ----------
    values : array-like
        Dollar amounts.
    denominator : float
        Reference total (100%).

    Returns
    -------
    np.ndarray
        ``values / denominator * 100``, or the values unchanged when the
        denominator is zero, negative or not finite.
    """
    arr = as_float_array(values, name="values")
    if not _usable(denominator):
        return arr
    return arr / float(denominator) * 100.0


def normalize_with_error(
    center: ArrayLike,
    error: ArrayLike,
    denominator: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Normalize centre values and their error bars with one shared denominator."""
    return normalize(center, denominator), normalize(error, denominator)


def normalize_series(
    series: Sequence[SeriesPoint],
    timeframe: Granularity | str = Granularity.YEAR,
    period: Optional[int] = None,
    reference_total: Optional[float] = None,
) -> Series:
    """
    Percentage curve of a cumulative series for the viewed timeframe.

    Parameters
    ----------
    series : sequence of SeriesPoint
        Cumulative series (already filtered to the period for period views,
        or the full year; earlier points only set the period's start value).
    timeframe : Granularity or str, default "year"
    period : int, optional
        Quarter (1..4) or month (1..12) for period views. Without it the
        year rule applies.
    reference_total : float, optional
        100% reference. Year view: defaults to the series' final value
        (1 if that is 0). Period view: defaults to the income actually
        earned in the period; 0 also falls back to that.

    Returns
    -------
    Series
        - year: ``value / reference * 100``; a non-positive reference
          leaves the values unchanged
        - quarter/month: ``max(0, (value - period_start) / reference * 100)``;
          no data in the period, or a non-positive reference, gives zeros
    """
    if not series:
        return []
    timeframe = Granularity(timeframe)

    if timeframe is Granularity.YEAR or period is None:
        if reference_total is None:
            final = float(series[-1].value)
            reference_total = final if np.isfinite(final) and final != 0 else 1.0
        return with_values(series, normalize(values_of(series), reference_total))

    zeros = [p.with_value(0.0) for p in series]
    end = period_end_value(series, timeframe, period)
    if end is None:
        return zeros

    start = period_start_value(series, timeframe, period)
    reference = reference_total or (end - start)
    if not _usable(reference):
        return zeros

    scaled = (values_of(series) - start) / reference * 100.0
    return with_values(series, np.maximum(0.0, scaled))


def normalize_period_totals(totals: Sequence[PeriodTotal]) -> List[PeriodTotal]:
    """Each period's income as a percentage of the sum over all periods."""
    incomes = np.array([t.income for t in totals], dtype=float)
    scaled = normalize(incomes, float(incomes.sum()))
    return [PeriodTotal(t.period_label, float(v)) for t, v in zip(totals, scaled)]


def normalize_period_statistics(
    stats: Sequence[PeriodStatistic],
    denominator: Optional[float] = None,
) -> List[PeriodStatistic]:
    """
    Centre values and error bars as percentages of one denominator.

    The denominator defaults to the sum of centre values. Errors and the
    underlying per-year values always share the centre's denominator; an
    unusable denominator (<= 0 or not finite) returns the statistics as-is.
    """
    if denominator is None:
        denominator = float(np.array([s.center for s in stats], dtype=float).sum())
    denominator = float(denominator)
    if not _usable(denominator):
        return list(stats)
    return [
        PeriodStatistic(
            s.period_label,
            s.center / denominator * 100.0,
            s.error / denominator * 100.0,
            tuple(v / denominator * 100.0 for v in s.values),
        )
        for s in stats
    ]
