"""
Pytest configuration and fixtures for the YTD Curves test suite.

Fixtures build small, hand-checkable series as well as full 365-day years
so the engine can be exercised on realistic and on degenerate input.
"""

from typing import Dict, List

import numpy as np
import pytest

from ytdcurves.series import SeriesPoint, Series, all_days_of_year


def make_year(year: int, daily: float, *, growth: float = 0.0, skip=()) -> Series:
    """Full non-leap year of cumulative income, optionally skipping days."""
    points = []
    cumulative = 0.0
    for i, day in enumerate(all_days_of_year()):
        cumulative += daily * (1.0 + growth * i / 365.0)
        if day in skip:
            continue
        points.append(SeriesPoint(f"{year}-{day}", day, cumulative))
    return points


def make_series(values, *, year: int = 2024, days: List[str] = None) -> Series:
    """Series over the first len(values) days of the year (or *days*)."""
    days = days or all_days_of_year()[:len(values)]
    return [SeriesPoint(f"{year}-{d}", d, float(v)) for d, v in zip(days, values)]


@pytest.fixture
def series_factory():
    """``make_series`` for tests that build their own values."""
    return make_series


@pytest.fixture
def year_factory():
    """``make_year`` for tests that build their own years."""
    return make_year


# ---------------------------------------------------------------------------
# Small Series Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def eleven_values() -> List[float]:
    """Monotone 11-sample series used for the B-spline scenario."""
    return [10, 12, 15, 18, 22, 25, 28, 30, 32, 33, 35]


@pytest.fixture
def eleven_point_series(eleven_values) -> Series:
    """The 11 values on Jan 1..Jan 11."""
    return make_series(eleven_values)


@pytest.fixture
def quarter_end_series() -> Series:
    """One reading at the end of each quarter: 100, 250, 400, 1000."""
    return make_series(
        [100, 250, 400, 1000],
        days=["03-31", "06-30", "09-30", "12-31"],
    )


# ---------------------------------------------------------------------------
# Full-Year Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def full_year() -> Series:
    """2024 with 1,000/day: cumulative 1,000 .. 365,000."""
    return make_year(2024, 1_000.0)


@pytest.fixture
def historical_years() -> Dict[str, Series]:
    """Three complete years with different daily income."""
    return {
        "2022": make_year(2022, 900.0),
        "2023": make_year(2023, 1_000.0, growth=0.1),
        "2024": make_year(2024, 1_100.0),
    }


@pytest.fixture
def year_missing_march_15() -> Series:
    """2023 at 1,000/day without a 03-15 reading."""
    return make_year(2023, 1_000.0, skip={"03-15"})


@pytest.fixture
def current_year() -> Series:
    """2025 actuals through Jun 30 at 1,200/day."""
    days = all_days_of_year()
    end = days.index("06-30") + 1
    return [SeriesPoint(f"2025-{d}", d, 1_200.0 * (i + 1)) for i, d in enumerate(days[:end])]


@pytest.fixture
def noisy_values() -> np.ndarray:
    """Cumulative 365-day series with lumpy daily income."""
    rng = np.random.default_rng(42)
    return np.cumsum(rng.uniform(0, 2_000, size=365))
