"""
Chart data pipeline for YTD Curves.

Purpose
-------
Runs the engine in its fixed order for one chart refresh and hands plain
data to a chart builder:

    smooth -> aggregate (period re-base / rollup) -> combine across years -> normalize

The pipeline owns no state; every call takes the raw series and a
``ChartRequest`` and returns new objects. Chart-specific concerns (trace
styling, colours, hover text) stay with the caller.

Key components
--------------
- build_line_chart:
    Per-year curves of the historical years (smoothed, re-based to the
    viewed period, filtered to its days), an optional combined centre line
    with band, the current year as recorded and its projected tail.

- build_bar_chart:
    Per-year period totals, the current year's totals (including the
    projection when a projected total is given), and combined period
    statistics with error bars.

Example
-------
>>> from ytdcurves.config import ChartRequest, StatisticsConfig
>>> from ytdcurves.pipeline import build_line_chart
>>> request = ChartRequest(statistics=StatisticsConfig(center="mean", dispersion="ci"))
>>> chart = build_line_chart(actual_2025, {"2023": y2023, "2024": y2024}, request)
>>> len(chart.combined.mean)
365
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from .aggregation import (
    Granularity,
    PeriodTotal,
    period_income,
    rollup,
    to_period_series,
    yearly_totals,
)
from .config import ChartRequest, ViewConfig
from .normalization import (
    normalize,
    normalize_period_statistics,
    normalize_period_totals,
    normalize_series,
)
from .projection import project_remaining_year, splice_projection
from .series import (
    SeriesPoint,
    Series,
    days_for_month,
    days_for_quarter,
    filter_by_days,
    sort_chronologically,
    values_of,
    with_values,
)
from .smoothing import smooth
from .statistics import CombinedStats, PeriodStatistic, combine, combine_period_totals
from .utils import safe_divide

__all__ = [
    "LineChartData",
    "BarChartData",
    "view_days",
    "build_line_chart",
    "build_bar_chart",
]


@dataclass(frozen=True)
class LineChartData:
    """
    Everything a line chart draws for one refresh.

    Attributes
    ----------
    current : Series
        Current year as recorded, re-based or normalized for the view.
    projected : Series
        Projected tail (starts at the last actual point); empty without a
        projected total or outside the viewed period.
    historical : dict of str -> Series
        Processed historical years keyed by label.
    combined : CombinedStats, optional
        Cross-year centre line and band; None when statistics are off.
    center_label, band_label : str, optional
        Legend labels ("Mean"/"Median", "95% CI"/"Std Dev").
    normalized : bool
        Whether values are percentages.
    """

    current: Series
    projected: Series
    historical: Dict[str, Series]
    combined: Optional[CombinedStats] = None
    center_label: Optional[str] = None
    band_label: Optional[str] = None
    normalized: bool = False

    @property
    def show_band(self) -> bool:
        return self.combined is not None and self.band_label is not None


@dataclass(frozen=True)
class BarChartData:
    """
    Everything a bar chart draws for one refresh.

    Attributes
    ----------
    individual : dict of str -> list of PeriodTotal
        Period totals per historical year.
    current : list of PeriodTotal
        Current-year period totals.
    combined : list of PeriodStatistic
        Cross-year statistics per period (empty when statistics are off).
    normalized : bool
        Whether values are percentages.
    """

    individual: Dict[str, List[PeriodTotal]]
    current: List[PeriodTotal]
    combined: List[PeriodStatistic] = field(default_factory=list)
    normalized: bool = False


_CENTER_LABELS = {"mean": "Mean", "median": "Median"}
_BAND_LABELS = {"ci": "95% CI", "std": "Std Dev"}


def view_days(view: ViewConfig) -> Optional[List[str]]:
    """Day axis of a view: None for the full year, else the period's days."""
    if view.timeframe == "quarter":
        return days_for_quarter(view.quarter)
    if view.timeframe == "month":
        return days_for_month(view.month)
    return None


def _restrict(series: Sequence[SeriesPoint], days: Optional[List[str]]) -> Series:
    return list(series) if days is None else filter_by_days(series, days)


def _combined_reference(center: Sequence[SeriesPoint], view: ViewConfig) -> float:
    if not center:
        return 0.0
    if view.period is None:
        return float(center[-1].value)
    return float(max(values_of(center)))


def _normalize_combined(stats: CombinedStats, view: ViewConfig) -> CombinedStats:
    # The band shares the centre line's denominator.
    denominator = _combined_reference(stats.mean, view)
    return CombinedStats(
        mean=with_values(stats.mean, normalize(values_of(stats.mean), denominator)),
        upper_bound=with_values(stats.upper_bound, normalize(values_of(stats.upper_bound), denominator)),
        lower_bound=with_values(stats.lower_bound, normalize(values_of(stats.lower_bound), denominator)),
    )


def _current_with_projection(current: Sequence[SeriesPoint], request: ChartRequest):
    actual = sort_chronologically(current)
    if request.projected_total is None or not actual:
        return actual, []
    projected = project_remaining_year(actual, request.projected_total)
    return actual, projected


def build_line_chart(
    current: Sequence[SeriesPoint],
    historical: Mapping[str, Sequence[SeriesPoint]],
    request: ChartRequest,
) -> LineChartData:
    """
    Line chart data for the current year against historical years.

    Parameters
    ----------
    current : Series
        Actual current-year series (partial year).
    historical : mapping of str -> Series
        Complete historical years keyed by label (e.g. "2023").
    request : ChartRequest
        Smoothing, view, statistics, percentage mode and projection.

    Returns
    -------
    LineChartData

    Notes
    -----
    - Historical years are smoothed over the whole year before the view is
      applied, so period views show the same curve as the year view.
    - The current year is not smoothed.
    - In percentage mode each historical year is a percentage of its own
      total (year view) or period income (period views); the combined line
      and band are scaled by the centre line's own total.
    """
    view = request.view
    timeframe = Granularity(view.timeframe)
    period = view.period
    days = view_days(view)
    smoothing = request.smoothing

    # Historical years: smooth -> re-base -> restrict
    rebased: Dict[str, Series] = {}
    for label, series in historical.items():
        smoothed = smooth(
            sort_chronologically(series),
            smoothing.strength,
            smoothing.method,
            base_range=smoothing.base_range,
        )
        rebased[label] = _restrict(to_period_series(smoothed, timeframe, period), days)

    # Combine
    combined = None
    stats_config = request.statistics
    if stats_config.enabled:
        combined = combine(
            list(rebased.values()),
            days,
            center=stats_config.center,
            dispersion=stats_config.dispersion or "std",
        )
        if request.normalized:
            combined = _normalize_combined(combined, view)

    # Normalize
    if request.normalized:
        historical_out = {
            label: normalize_series(series, timeframe, period)
            for label, series in rebased.items()
        }
    else:
        historical_out = rebased

    # Current year and projection
    actual, projected = _current_with_projection(current, request)
    spliced = splice_projection(actual, projected) if projected else actual

    if request.normalized:
        reference = request.reference_total
        if reference is None and request.projected_total is not None:
            if period is None:
                reference = request.projected_total
            else:
                reference = period_income(spliced, timeframe, period)
        processed = normalize_series(spliced, timeframe, period, reference)
    else:
        processed = to_period_series(spliced, timeframe, period)

    n_actual = len(actual)
    current_out = _restrict(processed[:n_actual], days)
    projected_out = _restrict(processed[n_actual - 1:], days) if projected else []

    return LineChartData(
        current=current_out,
        projected=projected_out,
        historical=historical_out,
        combined=combined,
        center_label=_CENTER_LABELS.get(stats_config.center) if combined is not None else None,
        band_label=_BAND_LABELS.get(stats_config.dispersion) if combined is not None else None,
        normalized=request.normalized,
    )


def build_bar_chart(
    current: Sequence[SeriesPoint],
    historical: Mapping[str, Sequence[SeriesPoint]],
    request: ChartRequest,
    *,
    current_label: Optional[str] = None,
) -> BarChartData:
    """
    Bar chart data: period totals per year plus combined statistics.

    Bars use the raw (unsmoothed) series. The current year is rolled up
    together with its projection when ``request.projected_total`` is set.

    Percentage mode:
    - year view: every total, and the combined error, as a percentage of
      the combined centre (or, without statistics, of the mean of all
      yearly totals)
    - quarter/month view: each year's periods as a percentage of that
      year's total; combined centres and errors as a percentage of the sum
      of centres
    """
    timeframe = Granularity(request.view.timeframe)
    stats_config = request.statistics
    actual, projected = _current_with_projection(current, request)
    spliced = splice_projection(actual, projected) if projected else actual
    ordered = {label: sort_chronologically(series) for label, series in historical.items()}

    combined: List[PeriodStatistic] = []
    if stats_config.enabled:
        combined = combine_period_totals(
            list(ordered.values()),
            timeframe,
            center=stats_config.center,
            dispersion=stats_config.dispersion or "std",
        )
        if stats_config.dispersion is None:
            combined = [PeriodStatistic(s.period_label, s.center, 0.0, s.values) for s in combined]

    if timeframe is Granularity.YEAR:
        individual = {t.period_label: [t] for t in yearly_totals(ordered)}
        current_totals = rollup(spliced, Granularity.YEAR, label=current_label)
        if request.normalized:
            if combined:
                denominator = combined[0].center
            else:
                incomes = [t.income for totals in individual.values() for t in totals]
                incomes += [t.income for t in current_totals]
                denominator = safe_divide(sum(incomes), len(incomes))
            individual = {
                label: [PeriodTotal(t.period_label, float(normalize([t.income], denominator)[0])) for t in totals]
                for label, totals in individual.items()
            }
            current_totals = [
                PeriodTotal(t.period_label, float(normalize([t.income], denominator)[0]))
                for t in current_totals
            ]
            combined = normalize_period_statistics(combined, denominator=denominator)
        return BarChartData(individual, current_totals, combined, request.normalized)

    individual = {label: rollup(series, timeframe) for label, series in ordered.items()}
    current_totals = rollup(spliced, timeframe)
    if request.normalized:
        individual = {label: normalize_period_totals(totals) for label, totals in individual.items()}
        current_totals = normalize_period_totals(current_totals)
        combined = normalize_period_statistics(combined)
    return BarChartData(individual, current_totals, combined, request.normalized)
