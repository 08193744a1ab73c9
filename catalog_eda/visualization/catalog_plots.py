# -*- coding: utf-8 -*-
"""
catalog_plots.py
================

Purpose
-------
Chart renderers for the catalog report. Each one is wrapped by
`plot_dual_theme`, so a single call writes <save_path>_light.png and
<save_path>_dark.png and returns the written paths.

Which chart for which result
----------------------------
- categorical counts           -> bar chart with count labels
- counts as a share of a whole -> donut with percentage labels
- top-n category x type shares -> 100% stacked horizontal bars, % per segment
- grouped means / counts by year -> line chart, evenly spaced integer ticks

Renderers only read their inputs; any reshaping happens on local copies.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.ticker import MaxNLocator

from catalog_eda.utils.theme_manager import plot_dual_theme


def _smart_palette(palette: Optional[list], n: int) -> Optional[list]:
    if palette is None:
        return None
    return sns.color_palette("rocket", n_colors=n) if n > len(palette) else list(palette[:n])


@plot_dual_theme(section='catalog')
def plot_count_bars(data: pd.Series, title: str, value_label: str = "Count",
                    horizontal: bool = False, ax=None, palette=None, **kwargs):
    """Bar chart of category counts with the count printed on every bar."""
    frame = pd.DataFrame({"Category": data.index.astype(str), value_label: data.to_numpy()})
    active = _smart_palette(palette, len(frame))
    if horizontal:
        sns.barplot(x=value_label, y="Category", hue="Category", data=frame,
                    palette=active, legend=False, ax=ax, orient="h")
        ax.set_xlabel(value_label); ax.set_ylabel(None)
        ax.margins(x=0.08)
    else:
        sns.barplot(x="Category", y=value_label, hue="Category", data=frame,
                    palette=active, legend=False, ax=ax)
        ax.set_xlabel(data.index.name or None); ax.set_ylabel(value_label)
        ax.margins(y=0.08)
    for bars in ax.containers:
        ax.bar_label(bars, fmt="{:,.0f}", padding=3, fontsize=10)
    ax.set_title(title)


@plot_dual_theme(section='catalog')
def plot_share_donut(counts: pd.Series, percentages: pd.Series, title: str,
                     ax=None, palette=None, **kwargs):
    """Donut chart; wedge labels are the rounded percentages, centre is the total."""
    active = _smart_palette(palette, len(counts))
    labels = iter(f"{p:.1f}%" for p in percentages.reindex(counts.index).to_numpy())
    wedges, _, autotexts = ax.pie(
        counts.to_numpy(),
        autopct=lambda _pct: next(labels),
        pctdistance=0.78,
        startangle=90,
        counterclock=False,
        colors=active,
        wedgeprops=dict(width=0.42, linewidth=2, edgecolor=ax.get_facecolor()),
    )
    for t in autotexts:
        t.set_fontsize(12); t.set_fontweight("bold")
    ax.text(0, 0, f"{int(counts.sum()):,}\ntitles", ha="center", va="center", fontsize=13)
    ax.legend(wedges, counts.index.astype(str), title=counts.index.name,
              loc="center left", bbox_to_anchor=(1.0, 0.5), frameon=False)
    ax.set_aspect("equal")
    ax.set_title(title)


@plot_dual_theme(section='catalog')
def plot_type_share_stack(share: pd.DataFrame, title: str, ax=None, palette=None, **kwargs):
    """100%-stacked horizontal bars (one per category), % label per segment."""
    active = _smart_palette(palette, share.shape[1])
    share.plot(kind="barh", stacked=True, ax=ax, color=active, width=0.8, legend=True)
    ax.invert_yaxis()
    ax.set_xlim(0, 100)
    ax.set_xlabel("Share of titles (%)")
    ax.set_ylabel(share.index.name.capitalize() if share.index.name else None)
    ax.set_title(title)
    ax.legend(title="Type", loc="lower center", bbox_to_anchor=(0.5, 1.02),
              ncol=max(share.shape[1], 1), frameon=False)
    for bars in ax.containers:
        ax.bar_label(bars, fmt=lambda v: f"{v:.1f}%" if v > 0 else "", label_type="center", fontsize=9)


@plot_dual_theme(section='duration')
def plot_yearly_line(data, title: str, ylabel: str, ax=None, palette=None, **kwargs):
    """
    Line chart over years; `data` is a Series (one line) or a DataFrame (one
    line per column). The peak of every line is annotated with its value.
    """
    frame = data.to_frame() if isinstance(data, pd.Series) else data
    active = _smart_palette(palette, frame.shape[1])
    for color, col in zip(active, frame.columns):
        sub = frame[col].dropna()
        if sub.empty:
            continue
        years = sub.index.astype(int)
        ax.plot(years, sub.to_numpy(), marker="o", markersize=3, linewidth=2, color=color, label=str(col))
        peak = int(np.argmax(sub.to_numpy()))
        ax.annotate(f"{sub.iloc[peak]:,.1f}", xy=(years[peak], sub.iloc[peak]),
                    xytext=(0, 8), textcoords="offset points", ha="center", fontsize=9, color=color)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=10, integer=True))
    ax.set_xlabel(frame.index.name.replace("_", " ").capitalize() if frame.index.name else "Year")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if frame.shape[1] > 1:
        ax.legend(title=frame.columns.name, frameon=False)
