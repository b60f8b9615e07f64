"""
Smoothing engine for YTD Curves.

Purpose
-------
Turns a raw cumulative income series into a display curve of the same
length. Three interchangeable algorithms share one strength scale (integer
0..10, 0 = untouched, 10 = strongest) and all keep the first and last value
of the series, so a smoothed year still starts at its Jan 1 reading and ends
at its year-to-date total.

Key components
--------------
- B-spline (default):
    Clamped degree-1 B-spline over a subsampled set of control points.
    Strength controls how many control points survive: strength 0 keeps all
    ``n`` samples, strength 10 keeps ``max(degree + 4, n / 15)``. The curve
    is evaluated back at every original x, so output length equals input
    length. Basis functions follow the Cox–de Boor recursion, evaluated
    bottom-up as a triangular table for all samples at once.

- Rolling average:
    Symmetric window of ``floor(strength / 10 * n / 2)`` samples; series
    endpoints weigh 2x and window edges 1.5x.

- Improved rolling average:
    Gaussian-weighted window that shrinks near the series boundary and damps
    the fixed endpoints' pull on their neighbours. It expects an *effective*
    strength, produced from the UI strength by ``effective_strength`` so
    shorter datasets get proportionally stronger smoothing.

Design principles
-----------------
- Never raises on malformed-but-parseable numbers. Too little data returns
  the input unchanged; parallel arrays of different lengths emit a
  ``DataQualityWarning`` and return ``y`` unchanged.
- Pure functions on NumPy arrays; the Series-level ``smooth`` only maps
  values back onto the original points.

Example
-------
>>> import numpy as np
>>> from ytdcurves.smoothing import apply_smoothing, SmoothingMethod
>>> x = np.arange(11)
>>> y = [10, 12, 15, 18, 22, 25, 28, 30, 32, 33, 35]
>>> out = apply_smoothing(x, y, 10, SmoothingMethod.B_SPLINE)
>>> round(out[0], 2), round(out[-1], 2)
(10.0, 35.0)
"""

from __future__ import annotations

import math
import warnings
from enum import Enum
from typing import Sequence

import numpy as np

from .constants import (
    BSPLINE_DEGREE,
    DAYS_PER_YEAR,
    DEFAULT_BASE_RANGE,
    DEFAULT_TRAILING_WINDOW,
    ENDPOINT_EPSILON,
    MAX_STRENGTH,
)
from .exceptions import DataQualityWarning
from .series import SeriesPoint, Series, values_of, with_values
from .utils import ArrayLike, as_float_array, round_half_up

__all__ = [
    "SmoothingMethod",
    "smooth",
    "apply_smoothing",
    "effective_strength",
    "control_point_count",
    "clamped_knot_vector",
    "bspline_basis",
    "bspline_smooth",
    "rolling_average_smooth",
    "improved_rolling_average_smooth",
    "trailing_average",
]

MIN_SMOOTHABLE_POINTS = 3


class SmoothingMethod(str, Enum):
    """Smoothing algorithm selector."""

    B_SPLINE = "b_spline"
    ROLLING_AVERAGE = "rolling_average"
    IMPROVED_ROLLING_AVERAGE = "improved_rolling_average"


# ---------------------------------------------------------------------------
# Strength scaling
# ---------------------------------------------------------------------------

def effective_strength(
    strength: float,
    dataset_size: int,
    base_range: float = DEFAULT_BASE_RANGE,
) -> float:
    """
    Rescale a UI strength for the improved rolling average.

    ``strength / 100 * base_range * (365 / dataset_size)``: a full year with
    the default range maps strength 10 to 3.0, while a 30-day month maps it
    to ~36.5.

    Parameters
    ----------
    strength : float
        UI-facing strength (0..10).
    dataset_size : int
        Number of points in the series to be smoothed.
    base_range : float, default 30.0
        Maximum effective strength for a full 365-day series.

    Returns
    -------
    float
        Effective strength; 0 for an empty dataset.
    """
    if dataset_size <= 0:
        return 0.0
    return (float(strength) / 100.0) * float(base_range) * (DAYS_PER_YEAR / float(dataset_size))


def control_point_count(n: int, strength: float, degree: int = BSPLINE_DEGREE) -> int:
    """
    Number of B-spline control points used for *n* samples at *strength*.

    ``min = max(degree + 4, n / 15)``, ``max = n``; each strength step removes
    a tenth of ``max - min`` (floored). The result never increases with
    strength and never drops below ``min``.

    Very short series (``n < degree + 4``) get ``degree + 4`` control points,
    some of them repeated samples.
    """
    min_points = max(degree + 4, n / 15.0)
    max_points = n
    reduction = math.floor((float(strength) / MAX_STRENGTH) * (max_points - min_points))
    return int(math.ceil(max(min_points, max_points - reduction)))


# ---------------------------------------------------------------------------
# B-spline
# ---------------------------------------------------------------------------

def clamped_knot_vector(num_points: int, degree: int = BSPLINE_DEGREE) -> np.ndarray:
    """
    Clamped knot vector on [0, 1] for *num_points* control points.

    The first and last knots repeat ``degree + 1`` times so the curve starts
    at the first control point and ends at the last; ``num_points - 1 -
    degree`` interior knots are spaced uniformly in between.
    """
    interior = max(num_points - 1 - degree, 0)
    inner = np.arange(1, interior + 1, dtype=float) / (interior + 1)
    return np.concatenate([np.zeros(degree + 1), inner, np.ones(degree + 1)])


def bspline_basis(t: ArrayLike, degree: int, knots: ArrayLike) -> np.ndarray:
    """
    Evaluate every B-spline basis function at every parameter in *t*.

    Cox–de Boor recursion computed bottom-up: the degree-0 row is the
    indicator of ``[knots[i], knots[i+1])``; each higher degree blends two
    neighbouring lower-degree functions weighted by the normalized distance
    into the knot span. Terms over zero-width spans are dropped.

    Parameters
    ----------
    t : array-like, shape (m,)
        Parameters in [0, 1).
    degree : int
        Spline degree.
    knots : array-like, shape (k,)
        Non-decreasing knot vector.

    Returns
    -------
    np.ndarray, shape (m, k - degree - 1)
        ``N[j, i]`` is basis function ``i`` of the given degree at ``t[j]``.
    """
    t = np.asarray(t, dtype=float)[:, None]
    knots = np.asarray(knots, dtype=float)

    N = ((knots[:-1] <= t) & (t < knots[1:])).astype(float)
    for p in range(1, degree + 1):
        count = N.shape[1] - 1
        left = knots[:count]
        left_top = knots[p:p + count]
        right_low = knots[1:1 + count]
        right = knots[p + 1:p + 1 + count]

        span_left = left_top - left
        span_right = right - right_low
        w_left = np.divide(
            t - left, span_left,
            out=np.zeros((t.shape[0], count)), where=span_left > 0,
        )
        w_right = np.divide(
            right - t, span_right,
            out=np.zeros((t.shape[0], count)), where=span_right > 0,
        )
        N = w_left * N[:, :-1] + w_right * N[:, 1:]
    return N


def bspline_smooth(
    x: ArrayLike,
    y: ArrayLike,
    strength: float,
    degree: int = BSPLINE_DEGREE,
) -> np.ndarray:
    """
    Smooth *y* with a clamped B-spline over subsampled control points.

    Control points are picked by uniform index subsampling
    (``step = (n - 1) / (count - 1)``, ties rounded up), the curve is
    evaluated at ``x / max(x)`` (with 1.0 nudged to ``1 - 1e-10``), and the
    y-coordinate of the curve at each original sample is returned.

    Parameters
    ----------
    x, y : array-like
        Sample positions (non-negative, typically ``0..n-1``) and values.
    strength : float
        Smoothing strength 0..10.
    degree : int, default 1
        Spline degree.

    Returns
    -------
    np.ndarray
        Smoothed values, same length as *y*. Fewer than ``degree + 1``
        samples, or a non-positive x range, returns *y* unchanged.
    """
    x = as_float_array(x, name="x")
    y = as_float_array(y, name="y")
    n = y.shape[0]
    if n < degree + 1:
        return y.copy()

    max_x = float(np.max(x))
    if not max_x > 0:
        warnings.warn(
            f"B-spline smoothing needs a positive x range (max x = {max_x}); "
            f"returning values unchanged.",
            DataQualityWarning,
            stacklevel=2,
        )
        return y.copy()

    count = control_point_count(n, strength, degree)
    if count == n:
        control_y = y
    else:
        step = (n - 1) / (count - 1)
        control_y = y[round_half_up(np.arange(count) * step)]

    knots = clamped_knot_vector(count, degree)
    t = np.clip(x / max_x, 0.0, 1.0)
    t[t == 1.0] = 1.0 - ENDPOINT_EPSILON

    return bspline_basis(t, degree, knots) @ control_y


# ---------------------------------------------------------------------------
# Rolling averages
# ---------------------------------------------------------------------------

def rolling_average_smooth(y: ArrayLike, strength: float) -> np.ndarray:
    """
    Symmetric weighted rolling average with fixed endpoints.

    Window ``max(1, min(n - 1, floor(strength / 10 * n / 2)))``. Inside the
    window, the series' own endpoints weigh 2 and the window's edge samples
    weigh 1.5; everything else weighs 1.
    """
    y = as_float_array(y, name="y")
    n = y.shape[0]
    if strength <= 0 or n < MIN_SMOOTHABLE_POINTS:
        return y.copy()

    window = max(1, min(n - 1, math.floor((strength / MAX_STRENGTH) * (n / 2))))
    half = window // 2
    out = y.copy()

    for i in range(1, n - 1):
        start = max(0, i - half)
        end = min(n - 1, i + half)
        idx = np.arange(start, end + 1)
        weights = np.ones(idx.shape[0])
        weights[(idx == start) | (idx == end)] = 1.5
        weights[(idx == 0) | (idx == n - 1)] = 2.0
        out[i] = float(np.dot(y[idx], weights) / weights.sum())
    return out


def improved_rolling_average_smooth(y: ArrayLike, effective: float) -> np.ndarray:
    """
    Adaptive Gaussian rolling average with boundary taper.

    Parameters
    ----------
    y : array-like
        Values to smooth.
    effective : float
        Effective strength, already rescaled for dataset size (see
        ``effective_strength``).

    Notes
    -----
    - Base window ``max(3, min(n - 1, floor(effective / 12 * n / 2)))``.
    - Per point, the window shrinks towards 20% of the base as the point
      approaches either end: ``adaptive = min(dist / (n / 4), 1)``,
      ``window = max(3, floor(base * (0.2 + 0.8 * adaptive)))``.
    - Weights: Gaussian with ``sigma = half_window * 10``, times 2 at the
      centre and 1.5 at distance 1.
    - Index 0 contributes with factor ``max(0.1, 1 - i / 3 * 0.8)`` while
      ``i <= 3``; index n-1 symmetrically while ``i >= n - 4``.
    - Endpoints are copied verbatim.
    """
    y = as_float_array(y, name="y")
    n = y.shape[0]
    if effective <= 0 or n < MIN_SMOOTHABLE_POINTS:
        return y.copy()

    base_window = max(3, min(n - 1, math.floor((effective / 12.0) * (n / 2))))
    out = y.copy()

    for i in range(1, n - 1):
        edge_distance = min(i, n - 1 - i)
        adaptive = min(edge_distance / (n / 4), 1.0)
        window = max(3, math.floor(base_window * (0.2 + 0.8 * adaptive)))
        half = window // 2
        start = max(0, i - half)
        end = min(n - 1, i + half)

        idx = np.arange(start, end + 1)
        offset = np.abs(idx - i).astype(float)
        sigma = half * 10.0
        weights = np.exp(-(offset ** 2) / (2.0 * sigma * sigma))
        weights[offset == 1] *= 1.5
        weights[offset == 0] *= 2.0

        if i <= 3:
            weights[idx == 0] *= max(0.1, 1.0 - (i / 3.0) * 0.8)
        if i >= n - 4:
            weights[idx == n - 1] *= max(0.1, 1.0 - ((n - 1 - i) / 3.0) * 0.8)

        out[i] = float(np.dot(y[idx], weights) / weights.sum())
    return out


def trailing_average(
    series: Sequence[SeriesPoint],
    window: int = DEFAULT_TRAILING_WINDOW,
) -> Series:
    """
    Trailing moving average of a series' values.

    The first ``window - 1`` points average the prefix available so far.
    Series shorter than *window* are returned unchanged.
    """
    if window <= 1 or len(series) < window:
        return list(series)
    y = values_of(series)
    csum = np.cumsum(y)
    out = np.empty_like(y)
    out[:window] = csum[:window] / np.arange(1, window + 1)
    out[window:] = (csum[window:] - csum[:-window]) / window
    return with_values(series, out)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def apply_smoothing(
    x: ArrayLike,
    y: ArrayLike,
    strength: float,
    method: SmoothingMethod | str = SmoothingMethod.B_SPLINE,
    *,
    base_range: float = DEFAULT_BASE_RANGE,
) -> np.ndarray:
    """
    Smooth parallel x/y arrays with the selected method.

    Parameters
    ----------
    x : array-like
        Sample positions (only used by the B-spline method).
    y : array-like
        Values to smooth.
    strength : float
        UI-facing strength 0..10. The improved rolling average receives
        ``effective_strength(strength, len(y), base_range)``.
    method : SmoothingMethod or str, default B_SPLINE
        Algorithm to use. Unknown names raise ``ValueError``.
    base_range : float, default 30.0
        Scaling range for the improved rolling average.

    Returns
    -------
    np.ndarray
        Smoothed values. ``strength <= 0`` or fewer than 3 values returns a
        copy of *y*; mismatched lengths warn and return *y* unchanged.
    """
    method = SmoothingMethod(method)
    y_arr = as_float_array(y, name="y")
    if strength <= 0 or y_arr.shape[0] < MIN_SMOOTHABLE_POINTS:
        return y_arr

    x_arr = as_float_array(x, name="x")
    if x_arr.shape[0] != y_arr.shape[0]:
        warnings.warn(
            f"Smoothing skipped: x and y must have the same length "
            f"({x_arr.shape[0]} != {y_arr.shape[0]}).",
            DataQualityWarning,
            stacklevel=2,
        )
        return y_arr

    if method is SmoothingMethod.ROLLING_AVERAGE:
        return rolling_average_smooth(y_arr, strength)
    if method is SmoothingMethod.IMPROVED_ROLLING_AVERAGE:
        n = y_arr.shape[0]
        return improved_rolling_average_smooth(y_arr, effective_strength(strength, n, base_range))
    return bspline_smooth(x_arr, y_arr, strength, BSPLINE_DEGREE)


def smooth(
    series: Sequence[SeriesPoint],
    strength: float,
    method: SmoothingMethod | str = SmoothingMethod.B_SPLINE,
    *,
    base_range: float = DEFAULT_BASE_RANGE,
) -> Series:
    """
    Smooth a series, keeping every date and display key.

    Sample positions are the point indices ``0..n-1``. ``strength <= 0`` or
    fewer than 3 points returns an equal copy of the input list.

    Examples
    --------
    >>> smoothed = smooth(year_2024, 6)
    >>> len(smoothed) == len(year_2024)
    True
    """
    if strength <= 0 or len(series) < MIN_SMOOTHABLE_POINTS:
        return list(series)
    y = values_of(series)
    x = np.arange(y.shape[0], dtype=float)
    return with_values(series, apply_smoothing(x, y, strength, method, base_range=base_range))
