"""
Type definitions for YTD Curves.

Purpose
-------
Provides TypedDict definitions for the plain-dictionary shapes that cross
the library boundary: series records as stored by the historical-data
exporters, and the JSON shapes of rollups and combined statistics written
by the serialization layer and consumed by chart builders.

Usage
-----
>>> from ytdcurves.types import SeriesRecordDict
>>>
>>> record: SeriesRecordDict = {
...     "date": "2024-03-15",
...     "monthDay": "03-15",
...     "cumulativeIncome": 812_450.0,
... }

Type Definitions
----------------
SeriesRecordDict
    One cumulative-income point: {"date", "monthDay", "cumulativeIncome"}

PeriodTotalDict
    Incremental income of one period: {"period", "income"}

PeriodStatisticDict
    Cross-year statistic of one period: {"period", "center", "error"}

CombinedStatsDict
    Parallel day-aligned arrays: {"days", "center", "upper", "lower"}
"""

from typing import List

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "SeriesRecordDict",
    "PeriodTotalDict",
    "PeriodStatisticDict",
    "CombinedStatsDict",
]


class SeriesRecordDict(TypedDict):
    """
    One day of a cumulative income series in exporter format.

    Key names follow the JSON files produced by the accounting export
    (camelCase), not Python naming.

    Attributes
    ----------
    date : str
        Source date key, usually ISO ``YYYY-MM-DD``.
    monthDay : str
        Display key ``MM-DD`` used to overlay different years.
    cumulativeIncome : float
        Income earned from Jan 1 through this day.
    """

    date: str
    monthDay: str
    cumulativeIncome: float


class PeriodTotalDict(TypedDict):
    """Incremental (non-cumulative) income of one period."""

    period: str
    income: float


class PeriodStatisticDict(TypedDict):
    """
    Cross-year statistic of one period, as drawn by bar charts.

    Attributes
    ----------
    period : str
        "Q1".."Q4", "Jan".."Dec" or a year label.
    center : float
        Mean or median of the per-year period totals.
    error : float
        Half-width of the error bar (sigma or 1.96 * sigma).
    values : list of float, optional
        The per-year totals the statistic was computed from.
    """

    period: str
    center: float
    error: float
    values: NotRequired[List[float]]


class CombinedStatsDict(TypedDict):
    """Day-aligned centre line and band of a cross-year combination."""

    days: List[str]
    center: List[float]
    upper: List[float]
    lower: List[float]
