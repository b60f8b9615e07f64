"""
Unit tests for aggregation.py module.

Tests period rollups, period boundaries and period re-basing.
"""

import pytest

from ytdcurves.aggregation import (
    Granularity,
    PeriodTotal,
    period_delta,
    period_end_value,
    period_income,
    period_months,
    period_start_value,
    rollup,
    to_period_series,
    year_label,
    yearly_totals,
)
from ytdcurves.exceptions import TimeIndexError
from ytdcurves.series import values_of


# ============================================================================
# ROLLUPS
# ============================================================================

class TestQuarterRollup:
    """Tests for quarterly rollups."""

    def test_quarter_end_scenario(self, quarter_end_series):
        """Test [100, 250, 400, 1000] -> [100, 150, 150, 600]."""
        totals = rollup(quarter_end_series, Granularity.QUARTER)
        assert [t.period_label for t in totals] == ["Q1", "Q2", "Q3", "Q4"]
        assert [t.income for t in totals] == [100.0, 150.0, 150.0, 600.0]

    def test_totals_sum_to_final_value(self, full_year):
        """Test quarter incomes add up to the year total."""
        totals = rollup(full_year, "quarter")
        assert sum(t.income for t in totals) == pytest.approx(full_year[-1].value)

    def test_missing_quarters_are_zero(self, series_factory):
        """Test a half year still reports Q3/Q4 with zero income."""
        s = series_factory([100, 300], days=["02-01", "05-01"])
        totals = rollup(s, "quarter")
        assert [t.income for t in totals] == [100.0, 200.0, 0.0, 0.0]

    def test_gap_quarter_inherits_running_total(self, series_factory):
        """Test an empty Q2 does not reset the running maximum."""
        s = series_factory([100, 400], days=["01-15", "08-01"])
        totals = rollup(s, "quarter")
        assert [t.income for t in totals] == [100.0, 0.0, 300.0, 0.0]

    def test_empty_series(self):
        """Test empty input still gives four zero quarters."""
        assert [t.income for t in rollup([], "quarter")] == [0.0] * 4


class TestMonthRollup:
    """Tests for monthly rollups."""

    def test_full_year_months(self, full_year):
        """Test twelve months with each month's day count in income."""
        totals = rollup(full_year, Granularity.MONTH)
        assert [t.period_label for t in totals][:3] == ["Jan", "Feb", "Mar"]
        assert len(totals) == 12
        assert totals[1].income == pytest.approx(28_000.0)

    def test_only_observed_months(self, series_factory):
        """Test months without data are omitted."""
        s = series_factory([10, 30], days=["01-10", "03-10"])
        totals = rollup(s, "month")
        assert [(t.period_label, t.income) for t in totals] == [("Jan", 10.0), ("Mar", 20.0)]

    def test_nan_reading_counts_as_zero(self, series_factory):
        """Test an unreadable value does not poison the bucket."""
        s = series_factory([10.0, float("nan"), 30.0], days=["01-01", "01-02", "02-01"])
        totals = rollup(s, "month")
        assert [t.income for t in totals] == [10.0, 20.0]


class TestYearRollup:
    """Tests for yearly rollups and labels."""

    def test_year_total(self, full_year):
        """Test one entry labelled by the year."""
        totals = rollup(full_year, "year")
        assert totals == [PeriodTotal("2024", 365_000.0)]

    def test_custom_label(self, full_year):
        """Test explicit label."""
        assert rollup(full_year, "year", label="Current")[0].period_label == "Current"

    def test_year_label_fallback(self, series_factory):
        """Test the year comes from the date key; empty input uses the default."""
        s = series_factory([1.0], days=["01-01"])
        assert year_label(s) == "2024"
        assert year_label([]) == "Total"

    def test_yearly_totals(self, historical_years):
        """Test final values per labelled year."""
        totals = yearly_totals(historical_years)
        assert [t.period_label for t in totals] == ["2022", "2023", "2024"]
        assert totals[0].income == pytest.approx(900.0 * 365)

    def test_yearly_totals_empty_year(self):
        """Test an empty year totals 0."""
        assert yearly_totals({"2020": []}) == [PeriodTotal("2020", 0.0)]

    def test_to_dict(self):
        """Test JSON-ready form."""
        assert PeriodTotal("Q1", 5.0).to_dict() == {"period": "Q1", "income": 5.0}


# ============================================================================
# PERIOD BOUNDARIES
# ============================================================================

class TestPeriodBoundaries:
    """Tests for start/end/income of quarters and months."""

    def test_period_months(self):
        """Test month ranges of quarters and months."""
        assert period_months("quarter", 3) == (7, 9)
        assert period_months("month", 11) == (11, 11)

    def test_period_months_invalid(self):
        """Test invalid periods raise TimeIndexError."""
        with pytest.raises(TimeIndexError):
            period_months("quarter", 0)
        with pytest.raises(TimeIndexError):
            period_months("month", 13)
        with pytest.raises(TimeIndexError):
            period_months("year", 1)

    def test_start_end_income(self, full_year):
        """Test Q2 of a 1,000/day year."""
        start = period_start_value(full_year, "quarter", 2)
        end = period_end_value(full_year, "quarter", 2)
        assert start == pytest.approx(90_000.0)
        assert end == pytest.approx(181_000.0)
        assert period_income(full_year, "quarter", 2) == pytest.approx(91_000.0)

    def test_first_period_starts_at_zero(self, full_year):
        """Test Q1 has no earlier data."""
        assert period_start_value(full_year, "quarter", 1) == 0.0

    def test_no_data_in_period(self, current_year):
        """Test a future quarter has no end value."""
        assert period_end_value(current_year, "quarter", 4) is None
        assert period_income(current_year, "quarter", 4) is None

    def test_period_delta(self):
        """Test income between two readings."""
        assert period_delta(100, 250) == 150.0


class TestPeriodSeries:
    """Tests for re-basing to the start of a period."""

    def test_rebase_quarter(self, full_year):
        """Test Q2 starts at 1,000 (first day's income) after re-basing."""
        rebased = to_period_series(full_year, "quarter", 2)
        by_day = {p.display_key: p.value for p in rebased}
        assert by_day["04-01"] == pytest.approx(1_000.0)
        assert by_day["06-30"] == pytest.approx(91_000.0)

    def test_earlier_days_clamp_to_zero(self, full_year):
        """Test pre-period values never go negative."""
        rebased = to_period_series(full_year, "month", 6)
        assert min(values_of(rebased)) == 0.0

    def test_year_view_passthrough(self, full_year):
        """Test year views return the series unchanged."""
        assert to_period_series(full_year, "year") == full_year
        assert to_period_series(full_year, "quarter", None) == full_year
