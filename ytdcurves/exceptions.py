"""
Custom exceptions and warnings for YTD Curves.

Purpose
-------
Provides a unified exception hierarchy for the few places where ytdcurves
does raise. The numeric engine itself never raises for malformed but
parseable data: it degrades to a structurally valid result and reports the
degradation through ``DataQualityWarning`` instead. Exceptions are reserved
for programmer errors (bad period numbers, inconsistent configuration) and
unreadable input files.

Exception Hierarchy
-------------------
YTDCurvesError (base)
├── ConfigurationError - Invalid configuration or parameter combination
├── ValidationError - Programmer-facing input errors
│   └── TimeIndexError - Quarter/month/day-key errors
└── SeriesFormatError - Unreadable series or result file content

DataQualityWarning (UserWarning)
    Degraded-but-handled numeric input (shape mismatch, empty ranges)

Usage
-----
>>> from ytdcurves.exceptions import TimeIndexError, DataQualityWarning
>>>
>>> raise TimeIndexError("quarter must be in 1..4, got 5")
>>>
>>> import warnings
>>> with warnings.catch_warnings():
...     warnings.simplefilter("error", DataQualityWarning)
...     apply_smoothing(x, y, 5)  # escalate diagnostics in strict contexts
"""

__all__ = [
    "YTDCurvesError",
    "ConfigurationError",
    "ValidationError",
    "TimeIndexError",
    "SeriesFormatError",
    "DataQualityWarning",
]


class YTDCurvesError(Exception):
    """
    Base exception for all ytdcurves errors.

    Examples
    --------
    >>> try:
    ...     series = load_series(path)
    ... except YTDCurvesError as e:
    ...     logger.error(f"Could not load series: {e}")
    """
    pass


class ConfigurationError(YTDCurvesError):
    """
    Invalid configuration or parameters.

    Raised when a chart request cannot be executed as configured, such as:
    - A quarter view without a quarter number
    - A projected total requested without a current-year series

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "timeframe 'quarter' requires a quarter number (1..4)."
    ... )
    """
    pass


class ValidationError(YTDCurvesError):
    """
    Programmer-facing input errors.

    Raised for arguments that are structurally wrong rather than merely
    degenerate, such as multi-dimensional arrays passed where a series is
    expected.
    """
    pass


class TimeIndexError(ValidationError):
    """
    Quarter, month or day-key errors.

    Raised when:
    - A quarter is outside 1..4
    - A month is outside 1..12
    - A display key is not of the form ``MM-DD``

    Examples
    --------
    >>> raise TimeIndexError(f"month must be in 1..12, got {month}")
    """
    pass


class SeriesFormatError(YTDCurvesError):
    """
    Unreadable series or result file content.

    Raised by the serialization layer when a JSON/CSV file lacks the
    expected fields or columns.
    """
    pass


class DataQualityWarning(UserWarning):
    """
    Degraded-but-handled numeric input.

    Emitted when the engine substitutes a safe default instead of raising,
    e.g. parallel x/y arrays of different lengths passed to smoothing.
    The CLI routes these warnings into ``logging``.
    """
    pass
