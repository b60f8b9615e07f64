"""
Series model for YTD Curves.

Purpose
-------
Defines the value type that flows through every stage of the engine: a
cumulative income reading for one calendar day. A *series* is a plain
``list`` of ``SeriesPoint`` in chronological order, one point per day present
in the source. Historical years cover all 365 non-leap days; the current
year is partial.

Key components
--------------
- SeriesPoint:
    Frozen record ``(date_key, display_key, value)``. ``display_key`` is the
    ``MM-DD`` string used to overlay different years on one axis.

- Day axes:
    ``all_days_of_year``, ``days_for_quarter`` and ``days_for_month`` build
    the non-leap calendar axes used by alignment and cross-year statistics.

- Filters and alignment:
    Period filters, chronological sorting, and ``align_to_days`` which fills
    missing days of a single series by neighbour interpolation.

- Construction:
    ``build_cumulative_series`` turns daily amounts into a cumulative series,
    folding Feb 29 into Feb 28; ``to_frame``/``from_frame`` convert to and
    from pandas.

Design principles
-----------------
- Points are immutable; every transform returns a new list and never
  touches its input (the historical dataset is shared and read-only).
- Display keys are strings, not dates, so different years line up on the
  same axis without a reference year.

Example
-------
>>> from ytdcurves.series import build_cumulative_series, filter_by_quarter
>>> s = build_cumulative_series(["2024-01-01", "2024-01-02"], [100.0, 50.0])
>>> [p.value for p in s]
[100.0, 150.0]
>>> filter_by_quarter(s, 2)
[]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .constants import DAYS_IN_MONTH, MONTH_LABELS, MONTHS_PER_QUARTER
from .exceptions import SeriesFormatError, TimeIndexError, ValidationError

__all__ = [
    "SeriesPoint",
    "Series",
    # Keys
    "display_key_for",
    "month_of",
    "quarter_of",
    "month_label",
    # Day axes
    "all_days_of_year",
    "days_for_quarter",
    "days_for_month",
    # Filters / ordering
    "sort_chronologically",
    "filter_by_quarter",
    "filter_by_month",
    "filter_by_days",
    "fold_leap_day",
    # Alignment
    "interpolate_on_days",
    "align_to_days",
    # Values
    "values_of",
    "with_values",
    # Construction
    "build_cumulative_series",
    "to_frame",
    "from_frame",
]


@dataclass(frozen=True)
class SeriesPoint:
    """
    One day's cumulative income.

    Parameters
    ----------
    date_key : str
        Source date key, usually ISO ``YYYY-MM-DD``. Aggregated series (e.g.
        combined statistics) reuse the display key here.
    display_key : str
        ``MM-DD`` key shared by all years.
    value : float
        Income earned from Jan 1 through this day.
    """

    date_key: str
    display_key: str
    value: float

    @property
    def month(self) -> int:
        return month_of(self.display_key)

    @property
    def quarter(self) -> int:
        return quarter_of(self.display_key)

    def with_value(self, value: float) -> SeriesPoint:
        """Return a copy carrying *value*."""
        return replace(self, value=float(value))


Series = List[SeriesPoint]


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

def _check_month(month: int) -> int:
    if not (1 <= int(month) <= 12):
        raise TimeIndexError(f"month must be in 1..12, got {month}")
    return int(month)


def _check_quarter(quarter: int) -> int:
    if not (1 <= int(quarter) <= 4):
        raise TimeIndexError(f"quarter must be in 1..4, got {quarter}")
    return int(quarter)


def display_key_for(month: int, day: int) -> str:
    """Build the ``MM-DD`` display key for a calendar day."""
    return f"{int(month):02d}-{int(day):02d}"


def month_of(display_key: str) -> int:
    """Month number (1..12) encoded in an ``MM-DD`` display key."""
    head = display_key.split("-")[0]
    try:
        month = int(head)
    except ValueError:
        raise TimeIndexError(f"display key must look like 'MM-DD', got {display_key!r}") from None
    return _check_month(month)


def quarter_of(display_key: str) -> int:
    """Quarter number (1..4) of an ``MM-DD`` display key."""
    return (month_of(display_key) - 1) // MONTHS_PER_QUARTER + 1


def month_label(display_key: str) -> str:
    """Short month name ("Jan".."Dec") for a display key.

    Unrecognised keys fall back to their raw month component.
    """
    head = display_key[:2]
    try:
        month = int(head)
    except ValueError:
        return head
    if 1 <= month <= 12:
        return MONTH_LABELS[month - 1]
    return head


# ---------------------------------------------------------------------------
# Day axes
# ---------------------------------------------------------------------------

@lru_cache(maxsize=None)
def _days_for_months(first: int, last: int) -> Tuple[str, ...]:
    return tuple(
        display_key_for(month, day)
        for month in range(first, last + 1)
        for day in range(1, DAYS_IN_MONTH[month - 1] + 1)
    )


def all_days_of_year() -> List[str]:
    """All 365 display keys of a non-leap year, Jan 1 to Dec 31."""
    return list(_days_for_months(1, 12))


def days_for_quarter(quarter: int) -> List[str]:
    """Display keys of every day in *quarter* (1..4)."""
    quarter = _check_quarter(quarter)
    first = (quarter - 1) * MONTHS_PER_QUARTER + 1
    return list(_days_for_months(first, first + MONTHS_PER_QUARTER - 1))


def days_for_month(month: int) -> List[str]:
    """Display keys of every day in *month* (1..12)."""
    month = _check_month(month)
    return list(_days_for_months(month, month))


# ---------------------------------------------------------------------------
# Filters / ordering
# ---------------------------------------------------------------------------

def sort_chronologically(series: Iterable[SeriesPoint]) -> Series:
    """Return the points ordered by date key (stable for equal keys)."""
    return sorted(series, key=lambda p: p.date_key)


def filter_by_quarter(series: Sequence[SeriesPoint], quarter: int) -> Series:
    """Points whose display key falls in *quarter*."""
    quarter = _check_quarter(quarter)
    return [p for p in series if p.quarter == quarter]


def filter_by_month(series: Sequence[SeriesPoint], month: int) -> Series:
    """Points whose display key falls in *month*."""
    month = _check_month(month)
    return [p for p in series if p.month == month]


def filter_by_days(series: Sequence[SeriesPoint], days: Iterable[str]) -> Series:
    """Points whose display key is in *days*."""
    allowed = set(days)
    return [p for p in series if p.display_key in allowed]


def fold_leap_day(series: Iterable[SeriesPoint]) -> Series:
    """
    Drop ``02-29`` points of a cumulative series, keeping their reading.

    The Feb 29 cumulative value moves onto the Feb 28 point of the same
    year; without one, a Feb 28 point is created. The result is
    chronological and lines up with the 365-day axis.

    Examples
    --------
    >>> s = fold_leap_day([
    ...     SeriesPoint("2024-02-28", "02-28", 10.0),
    ...     SeriesPoint("2024-02-29", "02-29", 15.0),
    ... ])
    >>> [(p.display_key, p.value) for p in s]
    [('02-28', 15.0)]
    """
    points: Series = []
    for point in sort_chronologically(series):
        if point.display_key != "02-29":
            points.append(point)
            continue
        year = point.date_key[:-5]
        if points and points[-1].display_key == "02-28" and points[-1].date_key[:-5] == year:
            points[-1] = points[-1].with_value(point.value)
        else:
            points.append(SeriesPoint(f"{year}02-28", "02-28", point.value))
    return points


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------

def interpolate_on_days(series: Sequence[SeriesPoint], days: Sequence[str]) -> np.ndarray:
    """
    Value of one series on every day of an axis, filling gaps from neighbours.

    For a day the series does not contain, the nearest earlier known value
    on the axis (default 0) and the nearest later known value (default the
    series' last value) are looked up. Equal neighbours give that value;
    otherwise their plain average is used. Days past the last known value
    therefore repeat it.

    Parameters
    ----------
    series : sequence of SeriesPoint
        One year's points. Only this series is consulted.
    days : sequence of str
        Display keys of the axis, in chronological order.

    Returns
    -------
    np.ndarray
        One value per axis day.
    """
    days = list(days)
    if not days:
        return np.zeros(0, dtype=float)

    known: dict = {}
    for point in series:
        known.setdefault(point.display_key, float(point.value))
    last_value = float(series[-1].value) if len(series) > 0 else 0.0

    aligned = pd.Series([known.get(day, np.nan) for day in days], index=days, dtype=float)
    before = aligned.shift(1).ffill().fillna(0.0)
    after = aligned.shift(-1).bfill().fillna(last_value)
    filled = before.where(before == after, (before + after) / 2.0)
    return aligned.fillna(filled).to_numpy(dtype=float)


def align_to_days(series: Sequence[SeriesPoint], days: Optional[Sequence[str]] = None) -> Series:
    """
    Lay a series onto a complete day axis (default: the whole year).

    Existing points are kept as they are; missing days get a synthetic point
    keyed by the display key with an interpolated value (see
    ``interpolate_on_days``).
    """
    axis = list(days) if days is not None else all_days_of_year()
    existing = {}
    for point in series:
        existing.setdefault(point.display_key, point)
    filled = interpolate_on_days(series, axis)
    return [
        existing[day] if day in existing else SeriesPoint(day, day, float(value))
        for day, value in zip(axis, filled)
    ]


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def values_of(series: Sequence[SeriesPoint]) -> np.ndarray:
    """Cumulative values of a series as a float array."""
    return np.array([p.value for p in series], dtype=float)


def with_values(series: Sequence[SeriesPoint], values: Sequence[float] | np.ndarray) -> Series:
    """Copy of *series* carrying *values*, keeping every key."""
    values = np.asarray(values, dtype=float)
    if values.shape != (len(series),):
        raise ValidationError(
            f"values must have shape ({len(series)},), got {values.shape}."
        )
    return [p.with_value(v) for p, v in zip(series, values)]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def build_cumulative_series(
    dates: Iterable,
    daily_amounts: Iterable[float],
) -> Series:
    """
    Build a cumulative series from daily income amounts.

    Rows are sorted by date first. Missing amounts count as 0. Income booked
    on Feb 29 is added to the Feb 28 point (and, through the running total,
    to every later day) and no ``02-29`` point is emitted, so leap years
    line up with the 365-day axis.

    Parameters
    ----------
    dates : iterable
        Anything ``pandas.to_datetime`` accepts (ISO strings, dates).
    daily_amounts : iterable of float
        Income earned on each date.

    Returns
    -------
    Series
        Chronological cumulative series.

    Examples
    --------
    >>> s = build_cumulative_series(
    ...     ["2024-02-28", "2024-02-29", "2024-03-01"], [10.0, 5.0, 1.0]
    ... )
    >>> [(p.display_key, p.value) for p in s]
    [('02-28', 15.0), ('03-01', 16.0)]
    """
    stamps = pd.to_datetime(pd.Series(list(dates)))
    amounts = np.nan_to_num(np.asarray(list(daily_amounts), dtype=float), nan=0.0)
    if len(stamps) != len(amounts):
        raise ValidationError(
            f"dates and daily_amounts must have the same length "
            f"({len(stamps)} != {len(amounts)})."
        )

    order = np.argsort(stamps.to_numpy(), kind="stable")
    points: Series = []
    cumulative = 0.0
    for i in order:
        stamp = stamps.iloc[i]
        cumulative += float(amounts[i])
        if stamp.month == 2 and stamp.day == 29:
            if points and points[-1].display_key == "02-28":
                points[-1] = points[-1].with_value(cumulative)
            continue
        points.append(
            SeriesPoint(
                stamp.strftime("%Y-%m-%d"),
                display_key_for(stamp.month, stamp.day),
                cumulative,
            )
        )
    return points


def to_frame(series: Sequence[SeriesPoint]) -> pd.DataFrame:
    """Series as a DataFrame with columns ``date_key``, ``display_key``, ``value``."""
    return pd.DataFrame(
        {
            "date_key": [p.date_key for p in series],
            "display_key": [p.display_key for p in series],
            "value": [float(p.value) for p in series],
        },
        columns=["date_key", "display_key", "value"],
    )


def from_frame(frame: pd.DataFrame) -> Series:
    """Inverse of ``to_frame``; ``display_key`` defaults to the date's ``MM-DD``."""
    if "date_key" not in frame.columns or "value" not in frame.columns:
        raise SeriesFormatError(
            f"frame needs 'date_key' and 'value' columns, got {list(frame.columns)}."
        )
    if "display_key" in frame.columns:
        display = frame["display_key"].astype(str)
    else:
        display = frame["date_key"].astype(str).str[-5:]
    return sort_chronologically(
        SeriesPoint(str(d), str(k), float(v))
        for d, k, v in zip(frame["date_key"].astype(str), display, frame["value"])
    )
