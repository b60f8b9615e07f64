"""General utilities for YTD Curves

Contents
--------
- Array helpers (as_float_array, round_half_up)
- Numeric guards (safe_divide)
- Matplotlib formatters (thousands_formatter, percent_formatter, format_currency)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from .exceptions import ValidationError

__all__ = [
    # Arrays
    "ArrayLike",
    "as_float_array",
    "round_half_up",
    # Guards
    "safe_divide",
    # Matplotlib formatters
    "thousands_formatter",
    "percent_formatter",
    "format_currency",
]


# ---------------------------------------------------------------------------
# Array helpers
# ---------------------------------------------------------------------------
ArrayLike = Sequence[float] | np.ndarray | pd.Series


def as_float_array(a: ArrayLike, *, name: str = "array") -> np.ndarray:
    """Convert input to a 1-D float NumPy array (copy), rejecting other shapes.

    Non-finite values are kept: the engine degrades on bad numbers instead
    of raising.
    """
    arr = np.array(a, dtype=float)
    if arr.ndim != 1:
        raise ValidationError(f"{name} must be 1-D, got shape {arr.shape}.")
    return arr


def round_half_up(values: np.ndarray | float) -> np.ndarray:
    """Round to the nearest integer with ties going up (2.5 -> 3).

    ``np.round`` rounds half to even, which would pick different control
    points for evenly spaced subsampling steps such as 2.5 or 7.5.
    """
    return np.floor(np.asarray(values, dtype=float) + 0.5).astype(int)


# ---------------------------------------------------------------------------
# Numeric guards
# ---------------------------------------------------------------------------

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Return numerator / denominator, or *default* when the denominator is zero."""
    if denominator == 0:
        return float(default)
    return float(numerator) / float(denominator)


# ---------------------------------------------------------------------------
# Matplotlib formatters
# ---------------------------------------------------------------------------

def thousands_formatter(x, pos):
    """
    Format axis values as thousands of dollars for matplotlib FuncFormatter.

    - 250_000 → "$250K"
    - 1_250_000 → "$1,250K"
    - 0 → "$0"

    Parameters
    ----------
    x : float
        Value to format (in dollars).
    pos : int
        Tick position (unused, required by FuncFormatter signature).

    Examples
    --------
    >>> from matplotlib.ticker import FuncFormatter
    >>> ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    """
    if x == 0:
        return '$0'
    return f'${x / 1e3:,.0f}K'


def percent_formatter(x, pos):
    """Format normalized axis values (already in percent) as "42%"."""
    return f'{x:.0f}%'


def format_currency(value, decimals=0, symbol='$'):
    """
    Format dollar amounts for text annotations and labels.

    Parameters
    ----------
    value : float
        Amount in dollars.
    decimals : int, default 0
        Number of decimal places to display.
    symbol : str, default '$'
        Currency symbol prefix.

    Returns
    -------
    str
        Formatted currency string with thousands separators.

    Examples
    --------
    >>> format_currency(1234567)
    '$1,234,567'
    >>> format_currency(-1500.5, decimals=2)
    '-$1,500.50'
    """
    sign = '-' if value < 0 else ''
    return f'{sign}{symbol}{abs(value):,.{decimals}f}'
