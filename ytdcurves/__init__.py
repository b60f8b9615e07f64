"""
YTD Curves — Year-to-date income smoothing and cross-year statistics

Turns daily cumulative income of a medical practice into chart-ready
curves and period totals, and compares the current year against prior
years.

Modules
-------
- series        : SeriesPoint, day axes, filters, per-year interpolation
- smoothing     : B-spline and rolling-average smoothing with one strength scale
- aggregation   : Year/quarter/month rollups and period re-basing
- statistics    : Cross-year mean/median with std / 95% CI bands
- normalization : Percentage views with guarded denominators
- projection    : Linear projection of the current year to Dec 31
- pipeline      : smooth -> aggregate -> combine -> normalize for one chart
- serialization : JSON/CSV series files and result files
- plotting      : matplotlib previews
- config        : Pydantic request models and environment settings

"""

from .series import SeriesPoint, Series, build_cumulative_series
from .smoothing import SmoothingMethod, apply_smoothing, smooth
from .aggregation import Granularity, PeriodTotal, rollup
from .statistics import CombinedStats, PeriodStatistic, combine, combine_period_totals
from .normalization import normalize, normalize_series
from .config import ChartRequest
from .pipeline import build_bar_chart, build_line_chart
from .exceptions import YTDCurvesError, DataQualityWarning
from . import utils

__version__ = "0.1.0"
