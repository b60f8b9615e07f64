"""
Serialization module for YTD Curves.

Purpose
-------
Reads and writes cumulative income series and computed chart results.

Supports:
- Series as JSON records in the dashboard shape
  ``{"date": "2024-03-15", "monthDay": "03-15", "cumulativeIncome": 1234.5}``
- Series as CSV with a ``date`` column and either ``cumulative_income`` or
  ``daily_income`` (daily amounts are accumulated)
- Feb 29 readings folded into Feb 28 on every load path
- Chart results (combined statistics, period totals) as JSON with a schema
  version

Design Principles
-----------------
- Human-readable: JSON/CSV formats for easy inspection
- Strict on content: malformed files raise ``SeriesFormatError`` with the
  offending path
- Backward compatible: result files carry ``schema_version``; a mismatch
  on load is a warning, not an error

Example
-------
>>> from pathlib import Path
>>> from ytdcurves.serialization import load_series, save_series
>>> series = load_series(Path("income_2024.csv"))
>>> save_series(series, Path("income_2024.json"))
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import pandas as pd

from .exceptions import DataQualityWarning, SeriesFormatError
from .series import SeriesPoint, Series, build_cumulative_series, fold_leap_day
from .types import SeriesRecordDict

__all__ = [
    "SCHEMA_VERSION",
    "series_to_records",
    "series_from_records",
    "load_series",
    "save_series",
    "load_year_series",
    "save_result",
    "load_result",
]

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def series_to_records(series: Sequence[SeriesPoint]) -> List[SeriesRecordDict]:
    """Series as a list of ``{"date", "monthDay", "cumulativeIncome"}`` dicts."""
    return [
        {"date": p.date_key, "monthDay": p.display_key, "cumulativeIncome": float(p.value)}
        for p in series
    ]


def series_from_records(records: Iterable[Mapping[str, Any]]) -> Series:
    """
    Build a series from dashboard records.

    Parameters
    ----------
    records : iterable of mapping
        Each needs ``date`` and ``cumulativeIncome``; ``monthDay`` defaults
        to the last five characters of the date.

    Returns
    -------
    Series
        Chronologically sorted, with a Feb 29 reading folded into Feb 28.

    Raises
    ------
    SeriesFormatError
        If a record misses a field or carries a non-numeric income.
    """
    points = []
    for i, record in enumerate(records):
        try:
            date_key = str(record["date"])
            value = float(record["cumulativeIncome"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SeriesFormatError(f"record {i} is not a valid series record: {exc}") from exc
        display_key = str(record.get("monthDay") or date_key[-5:])
        points.append(SeriesPoint(date_key, display_key, value))
    return fold_leap_day(points)


# ---------------------------------------------------------------------------
# Series Files
# ---------------------------------------------------------------------------

def _series_from_csv(path: Path) -> Series:
    frame = pd.read_csv(path)
    if "date" not in frame.columns:
        raise SeriesFormatError(f"{path}: CSV needs a 'date' column, got {list(frame.columns)}.")

    if "cumulative_income" in frame.columns:
        # Blank readings are gaps, filled later by per-year interpolation
        readings = frame.dropna(subset=["cumulative_income"])
        dates = pd.to_datetime(readings["date"])
        ordered = readings.assign(_stamp=dates).sort_values("_stamp", kind="stable")
        return fold_leap_day(
            SeriesPoint(stamp.strftime("%Y-%m-%d"), stamp.strftime("%m-%d"), float(value))
            for stamp, value in zip(ordered["_stamp"], ordered["cumulative_income"])
        )
    if "daily_income" in frame.columns:
        return build_cumulative_series(frame["date"], frame["daily_income"])

    raise SeriesFormatError(
        f"{path}: CSV needs a 'cumulative_income' or 'daily_income' column."
    )


def load_series(path: PathLike) -> Series:
    """
    Load one year's cumulative series from a ``.json`` or ``.csv`` file.

    Parameters
    ----------
    path : str or Path
        JSON file holding a list of records (or ``{"series": [...]}``), or a
        CSV file as described in the module docstring.

    Returns
    -------
    Series

    Raises
    ------
    SeriesFormatError
        Unsupported extension or unreadable content.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        try:
            return _series_from_csv(path)
        except (ValueError, pd.errors.ParserError) as exc:
            raise SeriesFormatError(f"{path}: {exc}") from exc

    if suffix == ".json":
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise SeriesFormatError(f"{path}: invalid JSON ({exc})") from exc
        if isinstance(data, dict):
            data = data.get("series")
        if not isinstance(data, list):
            raise SeriesFormatError(f"{path}: expected a list of series records.")
        return series_from_records(data)

    raise SeriesFormatError(f"{path}: unsupported series format '{suffix}' (use .json or .csv).")


def save_series(series: Sequence[SeriesPoint], path: PathLike) -> None:
    """
    Save a series as JSON records (``.json``) or as a ``cumulative_income`` CSV.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".csv":
        frame = pd.DataFrame(
            {
                "date": [p.date_key for p in series],
                "cumulative_income": [float(p.value) for p in series],
            }
        )
        frame.to_csv(path, index=False)
        return

    with open(path, "w") as f:
        json.dump(series_to_records(series), f, indent=2)


def load_year_series(paths: Iterable[PathLike]) -> Dict[str, Series]:
    """
    Load several year files keyed by label.

    The label is the four-digit year of the first date in the file, or the
    file stem when the dates carry no year. A label already taken by an
    earlier file falls back to the file stem (then ``stem-2``, ``stem-3``,
    ...) with a ``DataQualityWarning``, so no file is dropped.
    """
    labelled: Dict[str, Series] = {}
    for path in paths:
        path = Path(path)
        series = load_series(path)
        head = series[0].date_key[:4] if series else ""
        label = head if head.isdigit() else path.stem
        if label in labelled:
            fallback = path.stem
            suffix = 2
            while fallback in labelled:
                fallback = f"{path.stem}-{suffix}"
                suffix += 1
            warnings.warn(
                f"{path}: label '{label}' is already used by another file; "
                f"loading it as '{fallback}'.",
                DataQualityWarning,
            )
            label = fallback
        labelled[label] = series
    return labelled


# ---------------------------------------------------------------------------
# Result Files
# ---------------------------------------------------------------------------

def save_result(result: Mapping[str, Any], path: PathLike, kind: str = "result") -> None:
    """
    Save a computed result (already converted to plain dicts/lists) to JSON.

    Parameters
    ----------
    result : mapping
        JSON-compatible payload, e.g. ``CombinedStats.to_dict()``.
    path : str or Path
        Output file path.
    kind : str
        Free-form tag stored with the payload ("combined", "rollup", ...).
    """
    path = Path(path)
    config = {
        "schema_version": SCHEMA_VERSION,
        "kind": kind,
        "data": dict(result),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config, f, indent=2)


def load_result(path: PathLike) -> Dict[str, Any]:
    """
    Load a result file written by ``save_result``.

    Returns
    -------
    dict
        ``{"schema_version", "kind", "data"}``.

    Raises
    ------
    SeriesFormatError
        If the file is not a result file.
    """
    path = Path(path)
    with open(path, "r") as f:
        config = json.load(f)

    if not isinstance(config, dict) or "data" not in config:
        raise SeriesFormatError(f"{path}: not a result file (missing 'data').")

    # Check schema version
    schema_version = config.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Result schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )
    return config
