"""
Unit tests for config.py Pydantic models.

Tests validation, defaults, and serialization of configuration classes.
"""

import pytest

from ytdcurves.config import (
    AppSettings,
    ChartRequest,
    SmoothingConfig,
    StatisticsConfig,
    ViewConfig,
)
from ytdcurves.smoothing import SmoothingMethod


class TestSmoothingConfig:
    """Tests for SmoothingConfig validation."""

    def test_defaults(self):
        """Test default values."""
        config = SmoothingConfig()

        assert config.strength == 0
        assert config.method is SmoothingMethod.B_SPLINE
        assert config.base_range == 30.0

    def test_method_from_string(self):
        """Test method names coerce to the enum."""
        config = SmoothingConfig(method="improved_rolling_average")
        assert config.method is SmoothingMethod.IMPROVED_ROLLING_AVERAGE

    @pytest.mark.parametrize("strength", [-1, 11])
    def test_strength_range(self, strength):
        """Test strength outside 0..10 is rejected."""
        with pytest.raises(ValueError):
            SmoothingConfig(strength=strength)

    def test_unknown_method(self):
        """Test unknown methods are rejected."""
        with pytest.raises(ValueError):
            SmoothingConfig(method="lowess")

    def test_extra_fields_forbidden(self):
        """Test typos in field names fail loudly."""
        with pytest.raises(ValueError):
            SmoothingConfig(strenght=5)

    def test_immutable(self):
        """Test that config is frozen (immutable)."""
        config = SmoothingConfig()

        with pytest.raises(Exception):  # Pydantic raises ValidationError
            config.strength = 5


class TestViewConfig:
    """Tests for ViewConfig validation."""

    def test_year_default(self):
        """Test year view has no period."""
        view = ViewConfig()
        assert view.timeframe == "year"
        assert view.period is None

    def test_quarter_requires_quarter(self):
        """Test quarter views need a quarter number."""
        with pytest.raises(ValueError, match="requires quarter"):
            ViewConfig(timeframe="quarter")

    def test_month_requires_month(self):
        """Test month views need a month number."""
        with pytest.raises(ValueError, match="requires month"):
            ViewConfig(timeframe="month")

    def test_period_property(self):
        """Test period resolves to the relevant number."""
        assert ViewConfig(timeframe="quarter", quarter=3).period == 3
        assert ViewConfig(timeframe="month", month=11, quarter=1).period == 11

    def test_ranges(self):
        """Test quarter/month bounds."""
        with pytest.raises(ValueError):
            ViewConfig(timeframe="quarter", quarter=5)
        with pytest.raises(ValueError):
            ViewConfig(timeframe="month", month=0)


class TestStatisticsConfig:
    """Tests for StatisticsConfig."""

    def test_disabled_by_default(self):
        """Test no centre means statistics are off."""
        assert not StatisticsConfig().enabled

    def test_enabled(self):
        """Test a centre statistic enables the combination."""
        assert StatisticsConfig(center="median", dispersion="ci").enabled

    def test_invalid_choice(self):
        """Test unknown statistics are rejected."""
        with pytest.raises(ValueError):
            StatisticsConfig(center="mode")


class TestChartRequest:
    """Tests for ChartRequest."""

    def test_defaults(self):
        """Test nested defaults."""
        request = ChartRequest()
        assert request.smoothing == SmoothingConfig()
        assert request.view == ViewConfig()
        assert request.normalized is False
        assert request.projected_total is None

    def test_serialization(self):
        """Test JSON roundtrip."""
        request = ChartRequest(
            smoothing=SmoothingConfig(strength=6, method="rolling_average"),
            view=ViewConfig(timeframe="quarter", quarter=2),
            statistics=StatisticsConfig(center="mean", dispersion="std"),
            normalized=True,
            projected_total=2_400_000,
        )
        restored = ChartRequest.model_validate_json(request.model_dump_json())
        assert restored == request

    def test_negative_projection_rejected(self):
        """Test projected totals must be non-negative."""
        with pytest.raises(ValueError):
            ChartRequest(projected_total=-1.0)

    def test_reference_total_positive(self):
        """Test reference totals must be positive."""
        with pytest.raises(ValueError):
            ChartRequest(reference_total=0.0)


class TestAppSettings:
    """Tests for AppSettings with environment variables."""

    def test_defaults(self, monkeypatch):
        """Test default application settings."""
        for name in ("YTDCURVES_DEBUG", "YTDCURVES_LOG_LEVEL", "YTDCURVES_DEFAULT_STRENGTH"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings()

        assert settings.debug is False
        assert settings.log_level == "WARNING"
        assert settings.default_strength == 5
        assert settings.effective_log_level == "WARNING"

    def test_environment(self, monkeypatch):
        """Test YTDCURVES_ variables are read."""
        monkeypatch.setenv("YTDCURVES_LOG_LEVEL", "INFO")
        monkeypatch.setenv("YTDCURVES_DEFAULT_STRENGTH", "8")
        settings = AppSettings()

        assert settings.log_level == "INFO"
        assert settings.default_strength == 8

    def test_debug_forces_debug_level(self):
        """Test debug mode overrides the log level."""
        settings = AppSettings(debug=True, log_level="ERROR")
        assert settings.effective_log_level == "DEBUG"
