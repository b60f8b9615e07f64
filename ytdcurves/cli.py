"""
Command-Line Interface for YTD Curves.

Purpose
-------
Runs the smoothing, rollup and cross-year statistics engine on series files
without writing Python code.

Commands
--------
- smooth: Smooth one cumulative series
- rollup: Split a series into year/quarter/month totals
- combine: Cross-year centre line and band for several years
- plot: Render a line or bar chart preview to an image file
- info: Display package and dependency versions

Example Usage
-------------
    # Smooth a year with the B-spline at strength 6
    $ ytdcurves smooth income_2024.csv --strength 6 -o smoothed.json

    # Quarterly totals as percentages
    $ ytdcurves rollup income_2024.csv --by quarter --normalized

    # 95% CI band across three years, third quarter only
    $ ytdcurves combine 2022.csv 2023.csv 2024.csv --dispersion ci --quarter 3

    # Line chart of 2025 against history with a projection
    $ ytdcurves plot 2025.json 2022.csv 2023.csv 2024.csv --center mean \\
        --dispersion ci --projected-total 2400000 -o chart.png

Environment
-----------
``YTDCURVES_LOG_LEVEL`` / ``YTDCURVES_DEBUG`` control logging; data quality
warnings raised by the engine are routed to the log.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from .exceptions import YTDCurvesError
from .utils import format_currency

logger = logging.getLogger(__name__)


# Lazy imports for performance
def _import_rich():
    """Lazy import Rich for better startup time."""
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    return Console(), Table, Panel


def _get_console():
    """Get Rich console."""
    console, *_ = _import_rich()
    return console


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


# Version
__version__ = "0.1.0"


@click.group()
@click.version_option(version=__version__, prog_name="ytdcurves")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    YTD Curves - Year-to-date income smoothing and cross-year statistics.

    Compares a practice's cumulative income this year against prior years:
    smoothed curves, quarter/month totals, mean/median bands.

    Use 'ytdcurves COMMAND --help' for command-specific help.
    """
    from .config import AppSettings

    settings = AppSettings()
    _configure_logging(settings.effective_log_level)

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings
    ctx.obj["console"] = _get_console()


# ---------------------------------------------------------------------------
# smooth
# ---------------------------------------------------------------------------

@main.command()
@click.argument("series_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strength", "-s",
    type=click.IntRange(0, 10),
    default=None,
    help="Smoothing strength 0-10 (default: YTDCURVES_DEFAULT_STRENGTH or 5)"
)
@click.option(
    "--method", "-m",
    type=click.Choice(["b_spline", "rolling_average", "improved_rolling_average"]),
    default=None,
    help="Smoothing method (default: YTDCURVES_DEFAULT_METHOD or b_spline)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the smoothed series (.json or .csv)"
)
@click.pass_context
def smooth(
    ctx: click.Context,
    series_file: Path,
    strength: Optional[int],
    method: Optional[str],
    output: Optional[Path],
) -> None:
    """
    Smooth one cumulative income series.

    Example:
        ytdcurves smooth income_2024.csv -s 8 -m improved_rolling_average
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)
    settings = ctx.obj["settings"]

    from .serialization import load_series, save_series
    from .smoothing import SmoothingMethod, smooth as smooth_series

    strength = settings.default_strength if strength is None else strength
    method = SmoothingMethod(method or settings.default_method)

    try:
        series = load_series(series_file)
    except YTDCurvesError as e:
        _fail(f"loading {series_file}: {e}")

    logger.info("Smoothing %d points (strength=%d, method=%s)", len(series), strength, method.value)
    smoothed = smooth_series(series, strength, method)

    if output:
        save_series(smoothed, output)

    if quiet:
        return

    if console:
        _, Table, _ = _import_rich()
        table = Table(title=f"Smoothed {series_file.name}", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_row("Points", f"{len(smoothed)}")
        table.add_row("Strength", f"{strength}")
        table.add_row("Method", method.value)
        if smoothed:
            table.add_row("First", format_currency(smoothed[0].value))
            table.add_row("Last", format_currency(smoothed[-1].value))
        console.print(table)
    if output:
        click.echo(f"Smoothed series saved to {output}")


# ---------------------------------------------------------------------------
# rollup
# ---------------------------------------------------------------------------

@main.command()
@click.argument("series_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--by", "granularity",
    type=click.Choice(["year", "quarter", "month"]),
    default="quarter",
    help="Period size (default: quarter)"
)
@click.option("--normalized", is_flag=True, help="Show periods as percentages of the total")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the totals to a result file (JSON)"
)
@click.pass_context
def rollup(
    ctx: click.Context,
    series_file: Path,
    granularity: str,
    normalized: bool,
    output: Optional[Path],
) -> None:
    """
    Split a cumulative series into period totals.

    Example:
        ytdcurves rollup income_2024.csv --by month
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .aggregation import rollup as rollup_series
    from .normalization import normalize_period_totals
    from .serialization import load_series, save_result

    try:
        series = load_series(series_file)
    except YTDCurvesError as e:
        _fail(f"loading {series_file}: {e}")

    totals = rollup_series(series, granularity)
    if normalized:
        totals = normalize_period_totals(totals)

    if output:
        save_result({"totals": [t.to_dict() for t in totals]}, output, kind="rollup")

    if quiet:
        return

    if console:
        _, Table, _ = _import_rich()
        table = Table(title=f"{granularity.title()} totals: {series_file.name}", show_header=True)
        table.add_column("Period", style="cyan")
        table.add_column("Income", style="green", justify="right")
        for t in totals:
            table.add_row(t.period_label, f"{t.income:.1f}%" if normalized else format_currency(t.income))
        console.print(table)
    if output:
        click.echo(f"Totals saved to {output}")


# ---------------------------------------------------------------------------
# combine
# ---------------------------------------------------------------------------

@main.command()
@click.argument("series_files", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--center",
    type=click.Choice(["mean", "median"]),
    default="mean",
    help="Centre statistic (default: mean)"
)
@click.option(
    "--dispersion",
    type=click.Choice(["std", "ci"]),
    default="ci",
    help="Band: one standard deviation or 95% CI (default: ci)"
)
@click.option("--quarter", type=click.IntRange(1, 4), default=None, help="Restrict the axis to a quarter")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Restrict the axis to a month")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the combined statistics to a result file (JSON)"
)
@click.pass_context
def combine(
    ctx: click.Context,
    series_files: Tuple[Path, ...],
    center: str,
    dispersion: str,
    quarter: Optional[int],
    month: Optional[int],
    output: Optional[Path],
) -> None:
    """
    Combine several years into a centre line with a band.

    Example:
        ytdcurves combine 2022.csv 2023.csv 2024.csv --center median -o band.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .serialization import load_year_series, save_result
    from .series import days_for_month, days_for_quarter
    from .statistics import combine as combine_years

    if quarter is not None and month is not None:
        _fail("use either --quarter or --month, not both")

    try:
        years = load_year_series(series_files)
    except YTDCurvesError as e:
        _fail(str(e))

    days = None
    if quarter is not None:
        days = days_for_quarter(quarter)
    elif month is not None:
        days = days_for_month(month)

    stats = combine_years(list(years.values()), days, center=center, dispersion=dispersion)

    if output:
        payload = dict(stats.to_dict())
        payload["years"] = list(years)
        payload["center_statistic"] = center
        payload["dispersion"] = dispersion
        save_result(payload, output, kind="combined")

    if quiet:
        return

    if console and not stats.is_empty:
        _, Table, _ = _import_rich()
        table = Table(title=f"Combined {', '.join(years)}", show_header=True)
        table.add_column("Day", style="cyan")
        table.add_column(center.title(), style="green", justify="right")
        table.add_column("Lower", justify="right")
        table.add_column("Upper", justify="right")
        # Roughly monthly rows plus the last day
        step = max(1, len(stats) // 12)
        for i in sorted(set(range(0, len(stats), step)) | {len(stats) - 1}):
            table.add_row(
                stats.mean[i].display_key,
                format_currency(stats.mean[i].value),
                format_currency(stats.lower_bound[i].value),
                format_currency(stats.upper_bound[i].value),
            )
        console.print(table)
    elif stats.is_empty:
        click.echo("No data to combine")
    if output:
        click.echo(f"Combined statistics saved to {output}")


# ---------------------------------------------------------------------------
# plot
# ---------------------------------------------------------------------------

@main.command()
@click.argument("current_file", type=click.Path(exists=True, path_type=Path))
@click.argument("historical_files", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--chart",
    type=click.Choice(["line", "bar"]),
    default="line",
    help="Chart type (default: line)"
)
@click.option("--strength", "-s", type=click.IntRange(0, 10), default=None, help="Smoothing strength 0-10")
@click.option(
    "--method", "-m",
    type=click.Choice(["b_spline", "rolling_average", "improved_rolling_average"]),
    default=None,
    help="Smoothing method"
)
@click.option(
    "--timeframe",
    type=click.Choice(["year", "quarter", "month"]),
    default="year",
    help="Viewed timeframe (default: year)"
)
@click.option("--period", type=int, default=None, help="Quarter (1-4) or month (1-12) of the view")
@click.option("--center", type=click.Choice(["mean", "median"]), default=None, help="Combined centre line")
@click.option("--dispersion", type=click.Choice(["std", "ci"]), default=None, help="Combined band")
@click.option("--normalized", is_flag=True, help="Plot percentages instead of dollars")
@click.option("--projected-total", type=float, default=None, help="Projected Dec 31 income of the current year")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Image file to write (e.g. chart.png)"
)
@click.pass_context
def plot(
    ctx: click.Context,
    current_file: Path,
    historical_files: Tuple[Path, ...],
    chart: str,
    strength: Optional[int],
    method: Optional[str],
    timeframe: str,
    period: Optional[int],
    center: Optional[str],
    dispersion: Optional[str],
    normalized: bool,
    projected_total: Optional[float],
    output: Path,
) -> None:
    """
    Render the current year against historical years.

    Example:
        ytdcurves plot 2025.json 2023.csv 2024.csv --timeframe quarter --period 2 -o q2.png
    """
    quiet = ctx.obj.get("quiet", False)
    settings = ctx.obj["settings"]

    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from .config import build_chart_request
    from .pipeline import build_bar_chart, build_line_chart
    from .plotting import plot_bar_chart, plot_line_chart
    from .serialization import load_series, load_year_series

    try:
        request = build_chart_request(
            strength=settings.default_strength if strength is None else strength,
            method=method or settings.default_method,
            timeframe=timeframe,
            period=period,
            center=center,
            dispersion=dispersion,
            normalized=normalized,
            projected_total=projected_total,
        )
    except YTDCurvesError as e:
        _fail(str(e))

    try:
        current = load_series(current_file)
        historical = load_year_series(historical_files)
    except YTDCurvesError as e:
        _fail(str(e))

    if chart == "line":
        data = build_line_chart(current, historical, request)
        fig, _ = plot_line_chart(data, save_path=str(output), return_fig_ax=True)
    else:
        data = build_bar_chart(current, historical, request)
        fig, _ = plot_bar_chart(data, save_path=str(output), return_fig_ax=True)
    plt.close(fig)

    if not quiet:
        click.echo(f"Chart saved to {output}")


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display system and package information.

    Shows version numbers, installed dependencies, and
    active settings.
    """
    console = ctx.obj.get("console")
    settings = ctx.obj["settings"]

    import importlib.metadata

    info_lines = [
        f"YTD Curves Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
        f"Log level: {settings.effective_log_level}",
    ]

    # Check dependencies
    dependencies = ["numpy", "pandas", "matplotlib", "pydantic", "pydantic-settings", "click", "rich"]
    for name in dependencies:
        try:
            version = importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            version = "not installed"
        info_lines.append(f"{name}: {version}")

    if console:
        _, _, Panel = _import_rich()
        console.print(Panel("\n".join(info_lines), title="System Information"))
    else:
        for line in info_lines:
            click.echo(line)


if __name__ == "__main__":
    main()
