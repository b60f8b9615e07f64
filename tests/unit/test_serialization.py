"""
Unit tests for serialization.py module.

Tests series records, JSON/CSV series files and result files.
"""

import json

import pandas as pd
import pytest

from ytdcurves.exceptions import DataQualityWarning, SeriesFormatError
from ytdcurves.serialization import (
    SCHEMA_VERSION,
    load_result,
    load_series,
    load_year_series,
    save_result,
    save_series,
    series_from_records,
    series_to_records,
)
from ytdcurves.statistics import combine


class TestRecords:
    """Tests for dashboard record conversion."""

    def test_to_records(self, series_factory):
        """Test record field names."""
        records = series_to_records(series_factory([1.5]))
        assert records == [{"date": "2024-01-01", "monthDay": "01-01", "cumulativeIncome": 1.5}]

    def test_from_records_sorts(self):
        """Test records come back in date order."""
        records = [
            {"date": "2024-01-02", "monthDay": "01-02", "cumulativeIncome": 20},
            {"date": "2024-01-01", "monthDay": "01-01", "cumulativeIncome": 10},
        ]
        series = series_from_records(records)
        assert [p.value for p in series] == [10.0, 20.0]

    def test_from_records_default_month_day(self):
        """Test monthDay defaults to the date's MM-DD."""
        series = series_from_records([{"date": "2024-07-04", "cumulativeIncome": 1}])
        assert series[0].display_key == "07-04"

    @pytest.mark.parametrize("record", [
        {"monthDay": "01-01", "cumulativeIncome": 1},
        {"date": "2024-01-01"},
        {"date": "2024-01-01", "cumulativeIncome": "lots"},
    ])
    def test_bad_records(self, record):
        """Test malformed records raise SeriesFormatError."""
        with pytest.raises(SeriesFormatError):
            series_from_records([record])


class TestSeriesFiles:
    """Tests for load_series / save_series."""

    def test_json_roundtrip(self, tmp_path, eleven_point_series):
        """Test JSON save and load."""
        path = tmp_path / "series.json"
        save_series(eleven_point_series, path)
        assert load_series(path) == eleven_point_series

    def test_json_wrapped(self, tmp_path):
        """Test {"series": [...]} files are accepted."""
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"series": [{"date": "2024-01-01", "cumulativeIncome": 5}]}))
        assert load_series(path)[0].value == 5.0

    def test_csv_roundtrip(self, tmp_path, eleven_point_series):
        """Test CSV save and load."""
        path = tmp_path / "out" / "series.csv"
        save_series(eleven_point_series, path)
        assert load_series(path) == eleven_point_series

    def test_csv_daily_income(self, tmp_path):
        """Test daily amounts are accumulated."""
        path = tmp_path / "daily.csv"
        pd.DataFrame({
            "date": ["2024-01-01", "2024-01-02", "2024-01-03"],
            "daily_income": [100.0, 0.0, 50.0],
        }).to_csv(path, index=False)
        assert [p.value for p in load_series(path)] == [100.0, 100.0, 150.0]

    def test_csv_missing_columns(self, tmp_path):
        """Test CSV without income columns."""
        path = tmp_path / "bad.csv"
        pd.DataFrame({"date": ["2024-01-01"], "amount": [1.0]}).to_csv(path, index=False)
        with pytest.raises(SeriesFormatError):
            load_series(path)

    def test_invalid_json(self, tmp_path):
        """Test broken JSON."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SeriesFormatError):
            load_series(path)

    def test_unsupported_extension(self, tmp_path):
        """Test unknown file types."""
        path = tmp_path / "series.xlsx"
        path.write_text("")
        with pytest.raises(SeriesFormatError):
            load_series(path)

    def test_load_year_series_labels(self, tmp_path, historical_years):
        """Test labels come from the dates."""
        paths = []
        for label, series in historical_years.items():
            path = tmp_path / f"income_{label}.json"
            save_series(series, path)
            paths.append(path)
        loaded = load_year_series(paths)
        assert list(loaded) == ["2022", "2023", "2024"]
        assert len(loaded["2023"]) == 365

    def test_load_year_series_same_year(self, tmp_path, series_factory):
        """Test two files of one year are both kept, the second under its stem."""
        paths = []
        for name, value in (("clinic_a", 50.0), ("clinic_b", 99.0)):
            path = tmp_path / f"{name}.csv"
            save_series(series_factory([value], year=2024), path)
            paths.append(path)
        with pytest.warns(DataQualityWarning, match="clinic_b"):
            loaded = load_year_series(paths)
        assert list(loaded) == ["2024", "clinic_b"]
        assert loaded["clinic_b"][0].value == 99.0

    def test_csv_cumulative_leap_day(self, tmp_path):
        """Test a Feb 29 reading is folded into Feb 28."""
        path = tmp_path / "leap.csv"
        pd.DataFrame({
            "date": ["2024-02-28", "2024-02-29", "2024-03-01"],
            "cumulative_income": [10.0, 15.0, 16.0],
        }).to_csv(path, index=False)
        s = load_series(path)
        assert [(p.display_key, p.value) for p in s] == [("02-28", 15.0), ("03-01", 16.0)]

    def test_json_leap_day(self, tmp_path):
        """Test JSON records ending on Feb 29 end on Feb 28."""
        path = tmp_path / "leap.json"
        path.write_text(json.dumps([
            {"date": "2024-02-28", "monthDay": "02-28", "cumulativeIncome": 10.0},
            {"date": "2024-02-29", "monthDay": "02-29", "cumulativeIncome": 15.0},
        ]))
        s = load_series(path)
        assert [(p.date_key, p.value) for p in s] == [("2024-02-28", 15.0)]

    def test_csv_blank_reading_is_gap(self, tmp_path):
        """Test a blank cumulative cell is dropped, not read as $0."""
        path = tmp_path / "gaps.csv"
        pd.DataFrame({
            "date": ["2024-01-01", "2024-01-02", "2024-01-03"],
            "cumulative_income": [100.0, None, 300.0],
        }).to_csv(path, index=False)
        s = load_series(path)
        assert [(p.display_key, p.value) for p in s] == [("01-01", 100.0), ("01-03", 300.0)]


class TestResultFiles:
    """Tests for save_result / load_result."""

    def test_roundtrip(self, tmp_path, historical_years):
        """Test combined stats saved with a schema version."""
        stats = combine(list(historical_years.values()))
        path = tmp_path / "combined.json"
        save_result(stats.to_dict(), path, kind="combined")

        loaded = load_result(path)
        assert loaded["schema_version"] == SCHEMA_VERSION
        assert loaded["kind"] == "combined"
        assert len(loaded["data"]["center"]) == 365

    def test_schema_mismatch_warns(self, tmp_path):
        """Test older files load with a warning."""
        path = tmp_path / "old.json"
        path.write_text(json.dumps({"schema_version": "0.0.1", "data": {}}))
        with pytest.warns(UserWarning, match="schema version"):
            load_result(path)

    def test_not_a_result_file(self, tmp_path):
        """Test files without data are rejected."""
        path = tmp_path / "other.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(SeriesFormatError):
            load_result(path)
