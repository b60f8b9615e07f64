"""
Global constants for YTD Curves.

Purpose
-------
Centralizes calendar tables, statistical constants and default values used
throughout the ytdcurves codebase. Using constants instead of hardcoded
values keeps the smoothing, aggregation and plotting modules consistent.

Usage
-----
>>> from ytdcurves.constants import DAYS_PER_YEAR, CI_Z_SCORE
>>>
>>> upper = mean + CI_Z_SCORE * sigma

Categories
----------
- Calendar: non-leap month lengths, month and quarter labels
- Smoothing: B-spline degree, strength bounds, scaling ranges
- Statistics: z-scores for std-dev and 95% CI bands
- Plotting: Figure sizes, transparency values, line widths
"""

from typing import Tuple

__all__ = [
    # Calendar
    "DAYS_IN_MONTH",
    "DAYS_PER_YEAR",
    "MONTH_LABELS",
    "QUARTER_LABELS",
    "MONTHS_PER_QUARTER",
    # Smoothing
    "BSPLINE_DEGREE",
    "MIN_STRENGTH",
    "MAX_STRENGTH",
    "DEFAULT_BASE_RANGE",
    "ENDPOINT_EPSILON",
    "DEFAULT_TRAILING_WINDOW",
    # Statistics
    "CI_Z_SCORE",
    "STD_Z_SCORE",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_ALPHA_BANDS",
    "DEFAULT_LINEWIDTH",
    "DEFAULT_LINEWIDTH_THICK",
]


# =============================================================================
# Calendar
# =============================================================================

DAYS_IN_MONTH: Tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
"""Month lengths of the non-leap calendar used for every day axis.

Feb 29 never appears on an axis; its income is folded into Feb 28.
"""

DAYS_PER_YEAR: int = 365
"""Length of the full-year day axis."""

MONTH_LABELS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
"""Period labels for monthly rollups, in calendar order."""

QUARTER_LABELS: Tuple[str, ...] = ("Q1", "Q2", "Q3", "Q4")
"""Period labels for quarterly rollups."""

MONTHS_PER_QUARTER: int = 3


# =============================================================================
# Smoothing
# =============================================================================

BSPLINE_DEGREE: int = 1
"""Degree of the clamped B-spline used by the default smoothing method."""

MIN_STRENGTH: int = 0
"""Smoothing strength that leaves a series untouched."""

MAX_STRENGTH: int = 10
"""Strongest UI-facing smoothing strength."""

DEFAULT_BASE_RANGE: float = 30.0
"""Base effective range for the improved rolling average.

Scaled by 365 / n so shorter series get proportionally stronger smoothing.
"""

ENDPOINT_EPSILON: float = 1e-10
"""Offset that keeps t = 1 inside the half-open degree-0 basis support."""

DEFAULT_TRAILING_WINDOW: int = 7
"""Window of the trailing moving average (one week of daily points)."""


# =============================================================================
# Statistics
# =============================================================================

CI_Z_SCORE: float = 1.96
"""z multiplier for the 95% confidence-interval band."""

STD_Z_SCORE: float = 1.0
"""z multiplier for a plain one-standard-deviation band."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (14, 8)
"""Default figure size (width, height) in inches for standard plots."""

DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
"""Figure size for wide aspect ratio plots (bar charts)."""

DEFAULT_ALPHA_BANDS: float = 0.2
"""Default alpha for confidence band fills."""

DEFAULT_LINEWIDTH: float = 1.0
"""Default line width for historical year lines."""

DEFAULT_LINEWIDTH_THICK: float = 2.0
"""Line width for emphasized lines (current year, combined centre)."""
