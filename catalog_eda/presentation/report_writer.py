# -*- coding: utf-8 -*-
"""
report_writer.py
================

Purpose
-------
Assemble the final Markdown document: prose commentary interleaved with the
figures (light theme embedded, dark theme linked) and the ranked tables.
Numbers quoted in the prose are read from the aggregation results, never
recomputed here, so the text and the charts always agree.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

import pandas as pd

from catalog_eda.utils.academic_tables import dataframe_to_markdown

if TYPE_CHECKING:
    from catalog_eda.analysis.catalog_report import ReportTables


def _figure(figures: Dict[str, List[Path]], key: str, caption: str, doc_dir: Path) -> List[str]:
    """Markdown lines embedding the light render of figure `key` (if it was written)."""
    paths = figures.get(key) or []
    light = next((p for p in paths if str(p).endswith("_light.png")), None)
    if light is None:
        return [f"_Figure '{caption}' was not rendered._", ""]
    lines = [f"![{caption}]({Path(os.path.relpath(light, doc_dir)).as_posix()})"]
    dark = next((p for p in paths if str(p).endswith("_dark.png")), None)
    if dark is not None:
        lines.append(f"*{caption}* ([dark version]({Path(os.path.relpath(dark, doc_dir)).as_posix()}))")
    return lines + [""]


def _first(series: pd.Series, default="N/A"):
    return (series.index[0], series.iloc[0]) if not series.empty else (default, 0)


def _duration_trend(means: Optional[pd.Series], unit: str) -> str:
    if means is None or means.empty:
        return "no numeric durations were available"
    first_year, last_year = int(means.index[0]), int(means.index[-1])
    return (f"the mean goes from {means.iloc[0]:.1f} {unit} ({first_year}) to "
            f"{means.iloc[-1]:.1f} {unit} ({last_year}), peaking at {means.max():.1f} {unit} "
            f"in {int(means.idxmax())}")


def build_report_markdown(tables: "ReportTables", figures: Dict[str, List[Path]], doc_dir: Path) -> str:
    """Return the full report text for `tables` and the rendered `figures`."""
    n = tables.total_titles
    type_n = tables.type_counts
    type_p = tables.type_percentages
    movies_n, shows_n = int(type_n.get("Movie", 0)), int(type_n.get("TV Show", 0))
    movies_p, shows_p = float(type_p.get("Movie", 0.0)), float(type_p.get("TV Show", 0.0))

    worst = tables.missingness.sort_values("Missing %", ascending=False, kind="stable").head(1)
    worst_field = worst.iloc[0]["Field"] if not worst.empty else "N/A"
    worst_pct = float(worst.iloc[0]["Missing %"]) if not worst.empty else 0.0

    top_country = tables.country_table.iloc[0] if not tables.country_table.empty else None
    unknown_n = int(tables.country_counts.get(tables.unknown_label, 0))
    share = tables.country_type_share
    tv_heavy = share["TV Show"].idxmax() if not share.empty else "N/A"
    tv_heavy_p = float(share["TV Show"].max()) if not share.empty else 0.0

    top_genre, top_genre_n = _first(tables.genre_counts)
    top_rating, top_rating_n = _first(tables.rating_counts)
    added_total = tables.added_per_year.sum(axis=1)
    peak_added_year = int(added_total.idxmax()) if not added_total.empty else None

    movie_means = tables.duration_by_year.get("Movie")
    show_means = tables.duration_by_year.get("TV Show")
    one_season, _ = _first(tables.season_counts.sort_values(ascending=False, kind="stable"))

    md = [
        "# Streaming Catalog: Exploratory Report",
        "",
        f"**Catalog size:** {n:,} titles. Country and genre totals below can exceed this number "
        "because a title produced in several countries, or listed under several genres, is counted once per value.",
        "",
        "## 1. Data quality",
        "",
        f"The most incomplete field is `{worst_field}` ({worst_pct:.1f}% empty). Empty countries are kept as "
        f"an explicit \"{tables.unknown_label}\" category rather than dropped; entries without a numeric duration stay "
        "in every count and are only left out of duration averages.",
        "",
        dataframe_to_markdown(tables.missingness),
        "",
        "## 2. Movies vs TV shows",
        "",
        f"The catalog holds {movies_n:,} movies ({movies_p:.1f}%) and {shows_n:,} TV shows ({shows_p:.1f}%); "
        f"{'movies' if movies_n >= shows_n else 'TV shows'} make up the larger part.",
        "",
        *_figure(figures, "type_counts", "Titles by content type", doc_dir),
        *_figure(figures, "type_share", "Share of the catalog by content type", doc_dir),
        "## 3. Where the content comes from",
        "",
    ]
    if top_country is not None:
        md.append(
            f"{top_country['Country']} leads with {int(top_country['Count']):,} titles "
            f"({float(top_country['Percentage']):.1f}% of all title-country pairs). "
            f"{unknown_n:,} titles have no recorded country. Among the top countries, {tv_heavy} has the most "
            f"series-oriented mix, with {tv_heavy_p:.1f}% TV shows."
        )
    md += [
        "",
        f"**Top {len(tables.country_table)} countries by combined count**",
        "",
        dataframe_to_markdown(tables.country_table),
        "",
        *_figure(figures, "country_type_share", "Movie / TV show split in the top countries", doc_dir),
        "## 4. Genres",
        "",
        f"The most common genre label is \"{top_genre}\" ({int(top_genre_n):,} titles).",
        "",
        *_figure(figures, "genres", "Most frequent genres", doc_dir),
        "## 5. Audience ratings",
        "",
        f"The most frequent rating is {top_rating} ({int(top_rating_n):,} titles).",
        "",
        *_figure(figures, "ratings", "Titles by audience rating", doc_dir),
        "## 6. Catalog growth",
        "",
        (f"Additions peak in {peak_added_year} with {int(added_total.max()):,} new titles."
         if peak_added_year is not None else "No parsable addition dates were found."),
        "",
        *_figure(figures, "added_per_year", "Titles added per year", doc_dir),
        "## 7. Duration",
        "",
        "Movie length is recorded in minutes and TV show length in seasons. The two are reported "
        "separately and never averaged together.",
        "",
        f"For movies, {_duration_trend(movie_means, 'min')}.",
        "",
        *_figure(figures, "movie_duration", "Mean movie duration by release year", doc_dir),
        f"For TV shows, {_duration_trend(show_means, 'seasons')}. The most common length is {one_season} season(s).",
        "",
        *_figure(figures, "show_duration", "Mean TV show seasons by release year", doc_dir),
        *_figure(figures, "seasons", "TV shows by number of seasons", doc_dir),
        f"**Top {tables.longest_n} longest entries by type**",
        "",
        dataframe_to_markdown(tables.longest),
        "",
        "## 8. Limitations and recommendation notes",
        "",
        "- Season count is a weak proxy for how long a show takes to watch: a single long season and "
        "several short ones look the same here. Episode counts or runtimes would be needed for a like-for-like comparison.",
        "- Country and genre breakdowns count title-value pairs; shares are of pairs, not of titles.",
        "- Percentages are rounded to one decimal place and not rebalanced, so columns may sum to 100 +/- 0.1 per row.",
        "- For recommendations, the country, genre and rating profiles above are natural content features: "
        "a content-based recommender could match titles sharing genres and production countries, while the "
        "movie/show split and duration suggest separate candidate pools for short and long viewing sessions. "
        "No recommender is built in this report.",
        "",
    ]
    return "\n".join(md)


def write_report(tables: "ReportTables", figures: Dict[str, List[Path]], path: Path) -> Path:
    """Write the Markdown report to `path` and return it."""
    t0 = time.perf_counter()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_report_markdown(tables, figures, path.parent), encoding="utf-8")
    print(f"✓ Narrative saved: {path}")
    print(f"[TIME] report_writer.write_report: {time.perf_counter() - t0:.2f}s")
    return path
