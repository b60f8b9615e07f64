"""
Projected income for YTD Curves.

Purpose
-------
Extends a partial current-year series to Dec 31 so charts can show where
the year is heading, and composes actual history with that projection so
full-year rollups do not under-count quarters that have no actual data yet.

Key components
--------------
- project_remaining_year:
    Straight line from the last actual reading to a projected annual total,
    one point per remaining non-leap day.

- splice_projection:
    Actual history followed by the projected points after the last actual
    day. The result switches provenance mid-stream; the aggregator and the
    statistics functions treat it like any other cumulative series.

Example
-------
>>> from ytdcurves.projection import project_remaining_year, splice_projection
>>> tail = project_remaining_year(actual_2025, projected_total=2_400_000)
>>> tail[0] == actual_2025[-1]
True
>>> full_year = splice_projection(actual_2025, tail)
"""

from __future__ import annotations

from typing import Optional, Sequence

from .series import SeriesPoint, Series, all_days_of_year

__all__ = [
    "project_remaining_year",
    "splice_projection",
]


def project_remaining_year(
    actual: Sequence[SeriesPoint],
    projected_total: float,
    *,
    year: Optional[int | str] = None,
) -> Series:
    """
    Linear projection from the last actual point to *projected_total* on Dec 31.

    Parameters
    ----------
    actual : sequence of SeriesPoint
        Chronological actual series of the current year.
    projected_total : float
        Expected cumulative income on Dec 31.
    year : int or str, optional
        Year used in the projected points' date keys. Defaults to the year
        of the last actual date key.

    Returns
    -------
    Series
        The last actual point (the connection point) followed by one point
        per remaining day, each adding ``(projected_total - last) / days``.
        An empty actual series gives an empty list; a series already at
        Dec 31 (or with an unknown last day) gives just the connection point.
    """
    if not actual:
        return []
    last = actual[-1]
    if year is None:
        year = last.date_key[:4]

    days = all_days_of_year()
    if last.display_key not in days:
        return [last]
    remaining = days[days.index(last.display_key) + 1:]
    if not remaining:
        return [last]

    increment = (float(projected_total) - float(last.value)) / len(remaining)
    projected: Series = [last]
    cumulative = float(last.value)
    for day in remaining:
        cumulative += increment
        projected.append(SeriesPoint(f"{year}-{day}", day, cumulative))
    return projected


def splice_projection(
    actual: Sequence[SeriesPoint],
    projected: Sequence[SeriesPoint],
) -> Series:
    """
    Actual history plus the projected points strictly after its last day.

    Without actual data the projection is returned as-is.
    """
    if not actual:
        return list(projected)
    cutoff = actual[-1].display_key
    return list(actual) + [p for p in projected if p.display_key > cutoff]
