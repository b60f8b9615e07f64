"""
Plotting utilities for YTD Curves.

Purpose
-------
Quick matplotlib previews of pipeline output, for notebooks and the
``ytdcurves plot`` command. Production dashboards draw the same
``LineChartData`` / ``BarChartData`` with their own chart library; nothing
here feeds back into the engine.

Key components
--------------
- plot_line_chart:
    Historical years as thin lines, the current year as a thick line, the
    projected tail dashed, and the combined centre line with its band
    shaded via ``fill_between``.

- plot_bar_chart:
    Grouped bars per period (one group member per year) with the combined
    statistic drawn as a bar with error bars.

Both functions follow the same conventions: draw on ``ax`` when given,
otherwise create a figure; ``save_path`` writes a PNG; ``return_fig_ax``
returns ``(fig, ax)`` for further customization.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .constants import (
    DEFAULT_ALPHA_BANDS,
    DEFAULT_FIGSIZE,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH,
    DEFAULT_LINEWIDTH_THICK,
)
from .pipeline import BarChartData, LineChartData
from .series import SeriesPoint
from .utils import percent_formatter, thousands_formatter

__all__ = ["plot_line_chart", "plot_bar_chart"]


def _tick_positions(keys: Sequence[str], max_ticks: int = 12) -> list:
    if not keys:
        return []
    step = max(1, len(keys) // max_ticks)
    return list(range(0, len(keys), step))


def _value_formatter(normalized: bool):
    from matplotlib.ticker import FuncFormatter

    return FuncFormatter(percent_formatter if normalized else thousands_formatter)


def plot_line_chart(
    data: LineChartData,
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    legend: bool = True,
    grid: bool = True,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Draw a line chart of cumulative income against day of year.

    Parameters
    ----------
    data : LineChartData
        Output of ``pipeline.build_line_chart``.
    ax : matplotlib.axes.Axes, optional
        Axes to draw on; a new figure is created when omitted.
    figsize : tuple, default (14, 8)
    title : str, optional
        Defaults to "Year-to-Date Income" (with "(%)" in percentage mode).
    legend, grid : bool, default True
    save_path : str, optional
        Write the figure to this path.
    return_fig_ax : bool, default False
        If True, returns (fig, ax).

    Returns
    -------
    None or tuple
    """
    import matplotlib.pyplot as plt

    fig = None
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    # Shared x axis: union of all display keys, in calendar order
    keys = set()
    for series in data.historical.values():
        keys.update(p.display_key for p in series)
    keys.update(p.display_key for p in data.current)
    keys.update(p.display_key for p in data.projected)
    if data.combined is not None:
        keys.update(data.combined.days)
    axis = sorted(keys)
    position = {key: i for i, key in enumerate(axis)}

    def _xy(series: Sequence[SeriesPoint]):
        return (
            [position[p.display_key] for p in series],
            [p.value for p in series],
        )

    if not axis:
        ax.set_axis_off()
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
        if save_path:
            fig.savefig(save_path, bbox_inches="tight", dpi=150)
        if return_fig_ax:
            return fig, ax
        return None

    colors = plt.cm.tab10(np.linspace(0, 1, 10))
    for i, (label, series) in enumerate(data.historical.items()):
        x, y = _xy(series)
        ax.plot(x, y, label=label, color=colors[i % 10], linewidth=DEFAULT_LINEWIDTH, alpha=0.7)

    if data.combined is not None and not data.combined.is_empty:
        x, center = _xy(data.combined.mean)
        if data.show_band:
            _, upper = _xy(data.combined.upper_bound)
            _, lower = _xy(data.combined.lower_bound)
            ax.fill_between(
                x, lower, upper,
                color="gray", alpha=DEFAULT_ALPHA_BANDS, label=data.band_label,
            )
        ax.plot(
            x, center, color="black", linestyle="--",
            linewidth=DEFAULT_LINEWIDTH_THICK, label=data.center_label,
        )

    if data.current:
        x, y = _xy(data.current)
        ax.plot(x, y, color="tab:red", linewidth=DEFAULT_LINEWIDTH_THICK, label="Current year")
    if data.projected:
        x, y = _xy(data.projected)
        ax.plot(x, y, color="tab:red", linestyle=":", linewidth=DEFAULT_LINEWIDTH_THICK, label="Projected")

    ticks = _tick_positions(axis)
    ax.set_xticks(ticks)
    ax.set_xticklabels([axis[i] for i in ticks], rotation=45)
    ax.yaxis.set_major_formatter(_value_formatter(data.normalized))
    ax.set_xlabel("Day of year", fontsize=11)
    ax.set_ylabel("Cumulative income (%)" if data.normalized else "Cumulative income", fontsize=11)
    ax.set_title(
        title or ("Year-to-Date Income (%)" if data.normalized else "Year-to-Date Income"),
        fontsize=12, fontweight="bold",
    )
    if legend:
        ax.legend(loc="best", fontsize=10)
    if grid:
        ax.grid(True, alpha=0.3)

    if fig is not None:
        fig.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=150)

    if return_fig_ax:
        return fig, ax
    return None


def plot_bar_chart(
    data: BarChartData,
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = None,
    current_label: str = "Current year",
    legend: bool = True,
    grid: bool = True,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Draw grouped period bars with the combined statistic and its error bars.

    Parameters
    ----------
    data : BarChartData
        Output of ``pipeline.build_bar_chart``.
    current_label : str
        Legend entry of the current year.

    Other parameters are as in ``plot_line_chart``.

    Notes
    -----
    In the year view every year is its own period; the combined statistic
    is drawn as one extra bar.
    """
    import matplotlib.pyplot as plt

    fig = None
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    groups = dict(data.individual)
    if data.current:
        groups[current_label] = data.current

    # Period order: first appearance across groups, then the combined labels
    periods = []
    for totals in groups.values():
        for t in totals:
            if t.period_label not in periods:
                periods.append(t.period_label)
    for s in data.combined:
        if s.period_label not in periods:
            periods.append(s.period_label)

    if not periods:
        ax.set_axis_off()
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
        if save_path:
            fig.savefig(save_path, bbox_inches="tight", dpi=150)
        if return_fig_ax:
            return fig, ax
        return None

    n_bars = len(groups) + (1 if data.combined else 0)
    width = 0.8 / max(n_bars, 1)
    base = np.arange(len(periods))
    colors = plt.cm.tab10(np.linspace(0, 1, 10))

    for i, (label, totals) in enumerate(groups.items()):
        lookup = {t.period_label: t.income for t in totals}
        heights = [lookup.get(p, 0.0) for p in periods]
        ax.bar(base + i * width, heights, width, label=label, color=colors[i % 10])

    if data.combined:
        lookup = {s.period_label: s for s in data.combined}
        heights = [lookup[p].center if p in lookup else 0.0 for p in periods]
        errors = [lookup[p].error if p in lookup else 0.0 for p in periods]
        ax.bar(
            base + len(groups) * width, heights, width,
            yerr=errors, capsize=4, color="gray", alpha=0.8, label="Combined",
        )

    ax.set_xticks(base + width * (n_bars - 1) / 2)
    ax.set_xticklabels(periods)
    ax.yaxis.set_major_formatter(_value_formatter(data.normalized))
    ax.set_ylabel("Income (%)" if data.normalized else "Income", fontsize=11)
    ax.set_title(title or "Income by Period", fontsize=12, fontweight="bold")
    if legend:
        ax.legend(loc="best", fontsize=10)
    if grid:
        ax.grid(True, alpha=0.3, axis="y")

    if fig is not None:
        fig.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=150)

    if return_fig_ax:
        return fig, ax
    return None
