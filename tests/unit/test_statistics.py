"""
Unit tests for statistics.py module.

Tests cross-year combination on day axes and per-period statistics.
"""

import numpy as np
import pandas as pd
import pytest

from ytdcurves.series import all_days_of_year, days_for_quarter, values_of
from ytdcurves.statistics import (
    CenterStatistic,
    CombinedStats,
    Dispersion,
    PeriodStatistic,
    combine,
    combine_period_totals,
    summarize,
    z_score,
)


class TestZScore:
    """Tests for band multipliers."""

    def test_values(self):
        """Test CI and std multipliers."""
        assert z_score(Dispersion.CI) == 1.96
        assert z_score("std") == 1.0

    def test_unknown(self):
        """Test unknown dispersion names raise ValueError."""
        with pytest.raises(ValueError):
            z_score("iqr")


# ============================================================================
# DAY-LEVEL COMBINATION
# ============================================================================

class TestCombine:
    """Tests for combine()."""

    def test_full_year_axis(self, historical_years):
        """Test 365 points in all three series."""
        stats = combine(list(historical_years.values()))
        assert len(stats.mean) == 365
        assert len(stats.upper_bound) == 365
        assert len(stats.lower_bound) == 365
        assert stats.days == all_days_of_year()

    def test_restricted_axis(self, historical_years):
        """Test the axis follows the allowed days."""
        q3 = days_for_quarter(3)
        stats = combine(list(historical_years.values()), q3)
        assert stats.days == q3
        assert len(stats) == 92

    def test_mean_and_band(self, year_factory):
        """Test per-day mean and population std around it."""
        a = year_factory(2022, 100.0)
        b = year_factory(2023, 300.0)
        stats = combine([a, b], dispersion="std")
        # Day 1: values 100 and 300 -> mean 200, sigma 100
        assert stats.mean[0].value == pytest.approx(200.0)
        assert stats.upper_bound[0].value == pytest.approx(300.0)
        assert stats.lower_bound[0].value == pytest.approx(100.0)

    def test_ci_ordering(self, historical_years):
        """Test lower <= mean <= upper and lower >= 0 on every day."""
        stats = combine(list(historical_years.values()), dispersion=Dispersion.CI)
        mean = values_of(stats.mean)
        upper = values_of(stats.upper_bound)
        lower = values_of(stats.lower_bound)
        assert np.all(lower <= mean + 1e-9)
        assert np.all(mean <= upper + 1e-9)
        assert np.all(lower >= 0.0)

    def test_lower_bound_clamped(self, year_factory):
        """Test a wide band never goes below zero."""
        stats = combine([year_factory(2022, 1.0), year_factory(2023, 100.0)], dispersion="ci")
        assert min(values_of(stats.lower_bound)) == 0.0

    def test_single_year_has_no_spread(self, full_year):
        """Test sigma is 0 with one year."""
        stats = combine([full_year])
        np.testing.assert_allclose(values_of(stats.upper_bound), values_of(stats.mean))
        np.testing.assert_allclose(values_of(stats.mean), values_of(full_year))

    def test_missing_day_interpolated_per_year(self, year_factory, year_missing_march_15):
        """Test a gap is filled from that year's own neighbours."""
        other = year_factory(2022, 5_000.0)
        stats = combine([other, year_missing_march_15], dispersion="std")
        i = all_days_of_year().index("03-15")
        # 2022 has 74 * 5,000; 2023 interpolates to 74,000
        expected_mean = (74 * 5_000.0 + 74_000.0) / 2
        assert stats.mean[i].value == pytest.approx(expected_mean)

    def test_no_years(self):
        """Test empty input gives empty stats."""
        stats = combine([])
        assert stats.is_empty
        assert stats == CombinedStats()

    def test_empty_years_ignored(self, full_year):
        """Test empty series do not drag the mean to zero."""
        stats = combine([full_year, []])
        np.testing.assert_allclose(values_of(stats.mean), values_of(full_year))

    def test_median_center_keeps_mean_band(self, year_factory):
        """Test median mode: centre is the median, band is around the mean."""
        years = [year_factory(2020, 100.0), year_factory(2021, 200.0), year_factory(2022, 600.0)]
        stats = combine(years, center=CenterStatistic.MEDIAN, dispersion="std")
        day1 = np.array([100.0, 200.0, 600.0])
        assert stats.mean[0].value == pytest.approx(200.0)
        assert stats.upper_bound[0].value == pytest.approx(day1.mean() + day1.std())

    def test_to_frame_and_dict(self, historical_years):
        """Test tabular and JSON forms."""
        stats = combine(list(historical_years.values()), days_for_quarter(1))
        frame = stats.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["center", "upper", "lower"]
        assert frame.index.name == "day"
        data = stats.to_dict()
        assert len(data["days"]) == len(data["center"]) == 90


# ============================================================================
# PERIOD-LEVEL COMBINATION
# ============================================================================

class TestSummarize:
    """Tests for summarize()."""

    def test_mean(self):
        """Test mean and population std."""
        assert summarize([1.0, 3.0]) == (2.0, 1.0)

    def test_median_std_around_mean(self):
        """Test median centre with std around the mean."""
        centre, sigma = summarize([1.0, 2.0, 9.0], "median")
        assert centre == 2.0
        assert sigma == pytest.approx(np.std([1.0, 2.0, 9.0]))

    def test_empty(self):
        """Test empty input."""
        assert summarize([]) == (0.0, 0.0)


class TestCombinePeriodTotals:
    """Tests for combine_period_totals()."""

    def test_quarters(self, historical_years):
        """Test four quarters with mean and error."""
        stats = combine_period_totals(list(historical_years.values()), "quarter", dispersion="std")
        assert [s.period_label for s in stats] == ["Q1", "Q2", "Q3", "Q4"]
        assert all(len(s.values) == 3 for s in stats)
        q1 = np.array(stats[0].values)
        assert stats[0].center == pytest.approx(q1.mean())
        assert stats[0].error == pytest.approx(q1.std())

    def test_ci_error(self, historical_years):
        """Test 95% CI errors are 1.96 sigma."""
        std = combine_period_totals(list(historical_years.values()), "quarter", dispersion="std")
        ci = combine_period_totals(list(historical_years.values()), "quarter", dispersion="ci")
        assert ci[2].error == pytest.approx(1.96 * std[2].error)

    def test_months_only_observed(self, series_factory):
        """Test months without data in any year are skipped."""
        a = series_factory([10, 20], days=["01-05", "02-05"])
        b = series_factory([30], days=["01-05"], year=2023)
        stats = combine_period_totals([a, b], "month")
        assert [s.period_label for s in stats] == ["Jan", "Feb"]
        assert stats[0].center == pytest.approx(20.0)
        assert stats[1].values == (10.0,)

    def test_year(self, historical_years):
        """Test one statistic over final totals."""
        stats = combine_period_totals(list(historical_years.values()), "year", label="Hist")
        assert len(stats) == 1
        assert stats[0].period_label == "Hist"
        finals = [s[-1].value for s in historical_years.values()]
        assert stats[0].center == pytest.approx(np.mean(finals))

    def test_no_years(self):
        """Test quarters still appear with zeros."""
        stats = combine_period_totals([], "quarter")
        assert [(s.center, s.error) for s in stats] == [(0.0, 0.0)] * 4

    def test_to_dict(self):
        """Test JSON form."""
        stat = PeriodStatistic("Q1", 10.0, 2.0, (8.0, 12.0))
        assert stat.to_dict() == {"period": "Q1", "center": 10.0, "error": 2.0, "values": [8.0, 12.0]}
