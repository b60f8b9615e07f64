"""
Configuration management module for YTD Curves.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. A ``ChartRequest`` carries every
reactive input of a chart refresh (smoothing strength and method, viewed
timeframe, combined statistics, percentage mode, projected total) as one
explicit value instead of module-level state.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for saved views
- Environment-aware: ``AppSettings`` reads ``YTDCURVES_*`` variables and .env

Example
-------
>>> from ytdcurves.config import ChartRequest, ViewConfig, SmoothingConfig
>>> request = ChartRequest(
...     smoothing=SmoothingConfig(strength=6),
...     view=ViewConfig(timeframe="quarter", quarter=3),
...     normalized=True,
... )
>>> request.view.period
3
>>> restored = ChartRequest.model_validate_json(request.model_dump_json())
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_BASE_RANGE, MAX_STRENGTH, MIN_STRENGTH
from .exceptions import ConfigurationError
from .smoothing import SmoothingMethod

__all__ = [
    "SmoothingConfig",
    "ViewConfig",
    "StatisticsConfig",
    "ChartRequest",
    "build_chart_request",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Smoothing Configuration
# ---------------------------------------------------------------------------

class SmoothingConfig(BaseModel):
    """
    Configuration for curve smoothing.

    Attributes
    ----------
    strength : int
        UI-facing strength, 0 (off) to 10 (strongest).
    method : SmoothingMethod
        "b_spline", "rolling_average" or "improved_rolling_average".
    base_range : float
        Effective range of the improved rolling average for a full year.

    Examples
    --------
    >>> SmoothingConfig(strength=4, method="rolling_average").method
    <SmoothingMethod.ROLLING_AVERAGE: 'rolling_average'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strength: int = Field(
        default=0,
        ge=MIN_STRENGTH,
        le=MAX_STRENGTH,
        description="Smoothing strength (0 = off)"
    )
    method: SmoothingMethod = Field(
        default=SmoothingMethod.B_SPLINE,
        description="Smoothing algorithm"
    )
    base_range: float = Field(
        default=DEFAULT_BASE_RANGE,
        gt=0,
        description="Improved rolling average range for 365 points"
    )


# ---------------------------------------------------------------------------
# View Configuration
# ---------------------------------------------------------------------------

class ViewConfig(BaseModel):
    """
    Timeframe being charted.

    Attributes
    ----------
    timeframe : str
        "year", "quarter" or "month".
    quarter : int, optional
        Quarter number (1-4); required for quarter views.
    month : int, optional
        Month number (1-12); required for month views.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeframe: Literal["year", "quarter", "month"] = Field(
        default="year",
        description="Viewed timeframe"
    )
    quarter: Optional[int] = Field(
        default=None,
        ge=1,
        le=4,
        description="Quarter for quarter views"
    )
    month: Optional[int] = Field(
        default=None,
        ge=1,
        le=12,
        description="Month for month views"
    )

    @model_validator(mode="after")
    def validate_period(self):
        """Quarter/month views need their period number."""
        if self.timeframe == "quarter" and self.quarter is None:
            raise ValueError("timeframe 'quarter' requires quarter (1-4)")
        if self.timeframe == "month" and self.month is None:
            raise ValueError("timeframe 'month' requires month (1-12)")
        return self

    @property
    def period(self) -> Optional[int]:
        """Quarter or month number of the view (None for year views)."""
        if self.timeframe == "quarter":
            return self.quarter
        if self.timeframe == "month":
            return self.month
        return None


# ---------------------------------------------------------------------------
# Statistics Configuration
# ---------------------------------------------------------------------------

class StatisticsConfig(BaseModel):
    """
    Cross-year statistics shown with the historical years.

    Attributes
    ----------
    center : str, optional
        "mean" or "median"; None hides the combined line.
    dispersion : str, optional
        "std" or "ci" (95%); None hides the band / error bars.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    center: Optional[Literal["mean", "median"]] = Field(
        default=None,
        description="Centre statistic"
    )
    dispersion: Optional[Literal["std", "ci"]] = Field(
        default=None,
        description="Band statistic"
    )

    @property
    def enabled(self) -> bool:
        return self.center is not None


# ---------------------------------------------------------------------------
# Chart Request
# ---------------------------------------------------------------------------

class ChartRequest(BaseModel):
    """
    Every input of one chart refresh.

    Attributes
    ----------
    smoothing : SmoothingConfig
    view : ViewConfig
    statistics : StatisticsConfig
    normalized : bool
        Percentage mode.
    projected_total : float, optional
        Projected Dec 31 income of the current year; enables the projected
        tail and full-year rollups of the current year.
    reference_total : float, optional
        Explicit 100% reference for the current year in percentage mode.
        Overrides the projection-derived reference.

    Examples
    --------
    >>> ChartRequest(statistics=StatisticsConfig(center="median", dispersion="ci"))
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    smoothing: SmoothingConfig = Field(
        default_factory=SmoothingConfig,
        description="Smoothing parameters"
    )
    view: ViewConfig = Field(
        default_factory=ViewConfig,
        description="Viewed timeframe"
    )
    statistics: StatisticsConfig = Field(
        default_factory=StatisticsConfig,
        description="Combined statistics"
    )
    normalized: bool = Field(
        default=False,
        description="Show percentages instead of dollars"
    )
    projected_total: Optional[float] = Field(
        default=None,
        ge=0,
        description="Projected Dec 31 cumulative income"
    )
    reference_total: Optional[float] = Field(
        default=None,
        gt=0,
        description="Explicit 100% reference for the current year"
    )


def build_chart_request(
    *,
    strength: int = 0,
    method: SmoothingMethod | str = SmoothingMethod.B_SPLINE,
    timeframe: str = "year",
    period: Optional[int] = None,
    center: Optional[str] = None,
    dispersion: Optional[str] = None,
    normalized: bool = False,
    projected_total: Optional[float] = None,
    reference_total: Optional[float] = None,
) -> ChartRequest:
    """
    Build a ChartRequest from flat options (CLI flags, query parameters).

    ``period`` is the quarter or month number, depending on ``timeframe``.

    Raises
    ------
    ConfigurationError
        If the options do not form a valid request.

    Examples
    --------
    >>> build_chart_request(timeframe="month", period=2).view.month
    2
    """
    try:
        return ChartRequest.model_validate({
            "smoothing": {"strength": strength, "method": method},
            "view": {
                "timeframe": timeframe,
                "quarter": period if timeframe == "quarter" else None,
                "month": period if timeframe == "month" else None,
            },
            "statistics": {"center": center, "dispersion": dispersion},
            "normalized": normalized,
            "projected_total": projected_total,
            "reference_total": reference_total,
        })
    except PydanticValidationError as exc:
        raise ConfigurationError(f"invalid chart options: {exc}") from exc


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with YTDCURVES_ (e.g., YTDCURVES_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    default_strength : int
        Smoothing strength used by the CLI when none is given
    default_method : SmoothingMethod
        Smoothing method used by the CLI when none is given

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="YTDCURVES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    default_strength: int = Field(
        default=5,
        ge=MIN_STRENGTH,
        le=MAX_STRENGTH,
        description="Default smoothing strength for the CLI"
    )
    default_method: SmoothingMethod = Field(
        default=SmoothingMethod.B_SPLINE,
        description="Default smoothing method for the CLI"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level
