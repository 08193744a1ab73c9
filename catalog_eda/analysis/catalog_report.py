# -*- coding: utf-8 -*-
"""
catalog_report.py
=================

Purpose
-------
End-to-end catalog report: load the CSV export, normalize it, compute every
aggregation once, render the charts and write the narrative document plus
CSV/LaTeX table artefacts.

What it does
------------
- Data quality: missingness per field
- Content type split (bar with counts + donut with shares)
- Countries: top-15 ranked table (combined count) + Movie/TV 100% stacked bars
- Genres (listed_in expansion) and audience ratings
- Titles added per year by type
- Mean duration per release year, one line chart per type (minutes vs seasons)
- Season distribution and top-5 longest entries per type

Important notes
---------------
- Country/genre totals can exceed N: a title is counted once per value.
- Type-only counts always run on the unexpanded table.
- Percentages use 1 decimal place and are not re-normalised.

CLI
---
# Full run (configured catalog path, artefacts under outputs/)
python -m catalog_eda.analysis.catalog_report

# Explicit input/output
catalog-report --input data/netflix_titles.csv --output build/report

# Self-check (random sample; writes *_selfcheck artefacts only)
catalog-report --selfcheck --sample 1500
"""

from __future__ import annotations

import sys
import time
import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from catalog_eda.utils.theme_manager import CONFIG
from catalog_eda.utils.academic_tables import dataframe_to_latex_table
from catalog_eda.data_processing.catalog_loader import CatalogFormatError, load_catalog
from catalog_eda.data_processing.normalization import (
    CONTENT_TYPES,
    UNKNOWN,
    expand_countries,
    expand_genres,
    normalize_catalog,
)
from catalog_eda.analysis.aggregations import (
    count_by,
    grouped_mean,
    longest_entries,
    missingness_summary,
    percentage_of_total,
    ranked_table,
    top_n,
    type_share_by_category,
    yearly_counts_by_type,
)
from catalog_eda.visualization.catalog_plots import (
    plot_count_bars,
    plot_share_donut,
    plot_type_share_stack,
    plot_yearly_line,
)
from catalog_eda.presentation.report_writer import write_report

OUTPUT_KINDS = ("data", "figures", "tables", "narratives")


# --- 1) Small helpers ---------------------------------------------------------
def _timer(msg: str) -> float:
    """Start a perf counter and print a standardized header."""
    t0 = time.perf_counter(); print(msg); return t0

def _finish(label: str, t0: float) -> None:
    """Print a standardized [TIME] line with elapsed seconds."""
    print(f"[TIME] {label}: {time.perf_counter() - t0:.2f}s")

def _catalog_settings() -> dict:
    settings = {
        "drop_column_prefix": "Unnamed",
        "unknown_sentinel": UNKNOWN,
        "list_separator": ",",
        "top_n_countries": 15,
        "top_n_genres": 10,
        "top_n_longest": 5,
    }
    settings.update((CONFIG or {}).get("catalog") or {})
    return settings

def _output_dirs(output_root: Optional[Path]) -> Dict[str, Path]:
    """Artefact directories: configured paths, or <output_root>/<kind>."""
    if output_root is not None:
        return {k: Path(output_root) / k for k in OUTPUT_KINDS}
    if CONFIG is None:
        raise RuntimeError("No configuration loaded and no output directory given.")
    return {k: Path(CONFIG["paths"][k]) for k in OUTPUT_KINDS}


# --- 2) Aggregation stage -----------------------------------------------------
@dataclass
class ReportTables:
    """Every aggregation the report shows, computed once per run."""
    total_titles: int
    unknown_label: str
    missingness: pd.DataFrame
    type_counts: pd.Series
    type_percentages: pd.Series
    country_counts: pd.Series
    country_table: pd.DataFrame
    country_type_share: pd.DataFrame
    genre_counts: pd.Series
    rating_counts: pd.Series
    added_per_year: pd.DataFrame
    duration_by_year: Dict[str, pd.Series] = field(default_factory=dict)
    season_counts: pd.Series = field(default_factory=lambda: pd.Series(dtype="int64"))
    longest: pd.DataFrame = field(default_factory=pd.DataFrame)
    longest_n: int = 5


def build_report_tables(raw: pd.DataFrame, settings: Optional[dict] = None) -> ReportTables:
    """
    Normalize the loaded catalog and compute every report aggregation.

    Parameters
    ----------
    raw : pd.DataFrame
        Output of `load_catalog` (string columns, one row per entry).
    settings : dict, optional
        Overrides for the `catalog` config section; missing keys fall back
        to the loaded config and then to the built-in defaults.
    """
    t0 = _timer("Computing report aggregations...")
    s = {**_catalog_settings(), **(settings or {})}
    sentinel, sep = s["unknown_sentinel"], s["list_separator"]

    missingness = missingness_summary(raw)
    catalog = normalize_catalog(raw, sentinel=sentinel)

    type_counts = count_by(catalog, "type", sort=True)
    type_counts = type_counts[type_counts.index.isin(CONTENT_TYPES)]

    countries = expand_countries(catalog, sentinel=sentinel, sep=sep)
    country_counts = count_by(countries, "country", sort=True)
    country_table = ranked_table(country_counts, int(s["top_n_countries"]), "Country")
    country_share = type_share_by_category(countries, "country", country_table["Country"])

    genres = expand_genres(catalog, sep=sep)
    genre_counts = top_n(count_by(genres, "genre"), int(s["top_n_genres"]))

    duration_by_year = {}
    for ctype in CONTENT_TYPES:
        means = grouped_mean(catalog[catalog["type"] == ctype], "release_year", "duration_value")
        duration_by_year[ctype] = means.round(1)

    shows = catalog[(catalog["type"] == "TV Show") & catalog["duration_value"].notna()]
    seasons = count_by(shows.assign(seasons=shows["duration_value"].astype(int)), "seasons").sort_index()

    tables = ReportTables(
        total_titles=len(catalog),
        unknown_label=sentinel,
        missingness=missingness,
        type_counts=type_counts,
        type_percentages=percentage_of_total(type_counts),
        country_counts=country_counts,
        country_table=country_table,
        country_type_share=country_share,
        genre_counts=genre_counts,
        rating_counts=count_by(catalog[catalog["rating"].str.strip() != ""], "rating", sort=True),
        added_per_year=yearly_counts_by_type(catalog, "year_added"),
        duration_by_year=duration_by_year,
        season_counts=seasons,
        longest=longest_entries(catalog, int(s["top_n_longest"])),
        longest_n=int(s["top_n_longest"]),
    )
    _finish("report.build_report_tables", t0)
    return tables


# --- 3) Rendering stage -------------------------------------------------------
def render_figures(tables: ReportTables, figures_dir: Path, suffix: str = "") -> Dict[str, List[Path]]:
    """Render every chart; returns figure key -> written files."""
    t0 = _timer("\nGenerating visualizations...")
    figures_dir.mkdir(parents=True, exist_ok=True)

    def stem(name: str) -> str:
        return str(figures_dir / f"{name}{suffix}")

    figures: Dict[str, List[Path]] = {}
    if not tables.type_counts.empty:
        figures["type_counts"] = plot_count_bars(
            tables.type_counts, title="Titles by Content Type",
            save_path=stem("catalog_type_counts_bar"), figsize=(7, 6))
        figures["type_share"] = plot_share_donut(
            tables.type_counts, tables.type_percentages, title="Share of Catalog by Content Type",
            save_path=stem("catalog_type_share_donut"), figsize=(8, 6))
    if not tables.country_type_share.empty:
        figures["country_type_share"] = plot_type_share_stack(
            tables.country_type_share,
            title=f"Movie vs TV Show Split in the Top {len(tables.country_type_share)} Countries",
            save_path=stem("catalog_country_type_stack"), figsize=(10, 8))
    if not tables.genre_counts.empty:
        figures["genres"] = plot_count_bars(
            tables.genre_counts, title=f"Top {len(tables.genre_counts)} Genres", horizontal=True,
            save_path=stem("catalog_genres_bar"), figsize=(10, 7))
    if not tables.rating_counts.empty:
        figures["ratings"] = plot_count_bars(
            tables.rating_counts, title="Titles by Audience Rating",
            save_path=stem("catalog_ratings_bar"), figsize=(11, 6))
    if not tables.added_per_year.empty:
        figures["added_per_year"] = plot_yearly_line(
            tables.added_per_year, title="Titles Added per Year", ylabel="Titles added",
            save_path=stem("catalog_added_per_year_line"), figsize=(10, 6))
    movie_means = tables.duration_by_year.get("Movie")
    if movie_means is not None and not movie_means.empty:
        figures["movie_duration"] = plot_yearly_line(
            movie_means, title="Mean Movie Duration by Release Year", ylabel="Mean duration (min)",
            save_path=stem("catalog_movie_duration_line"), figsize=(10, 6))
    show_means = tables.duration_by_year.get("TV Show")
    if show_means is not None and not show_means.empty:
        figures["show_duration"] = plot_yearly_line(
            show_means, title="Mean TV Show Length by Release Year", ylabel="Mean length (seasons)",
            save_path=stem("catalog_show_seasons_line"), figsize=(10, 6))
    if not tables.season_counts.empty:
        figures["seasons"] = plot_count_bars(
            tables.season_counts, title="TV Shows by Number of Seasons", value_label="TV shows",
            save_path=stem("catalog_seasons_bar"), figsize=(10, 6))
    _finish("report.render_figures", t0)
    return figures


def save_table_artefacts(tables: ReportTables, data_dir: Path, tables_dir: Path, suffix: str = "") -> None:
    """CSV copies of every aggregation plus LaTeX versions of the ranked tables."""
    t0 = _timer("\nSaving data artefacts...")
    data_dir.mkdir(parents=True, exist_ok=True)

    def save_df(df_: pd.DataFrame, name: str, index: bool = False):
        path = data_dir / f"{name}{suffix}.csv"
        df_.to_csv(path, index=index)
        print(f"✓ Artefact saved: {path}")

    save_df(tables.missingness, "catalog_missingness")
    save_df(pd.DataFrame({"count": tables.type_counts, "percentage": tables.type_percentages}),
            "catalog_type_counts", index=True)
    save_df(tables.country_table, "catalog_top_countries")
    save_df(tables.country_type_share, "catalog_country_type_share", index=True)
    save_df(tables.genre_counts.to_frame(), "catalog_top_genres", index=True)
    save_df(tables.rating_counts.to_frame(), "catalog_ratings", index=True)
    save_df(tables.added_per_year, "catalog_added_per_year", index=True)
    save_df(pd.DataFrame(tables.duration_by_year), "catalog_mean_duration_by_year", index=True)
    save_df(tables.longest, "catalog_longest_entries")

    if not tables.country_table.empty:
        dataframe_to_latex_table(
            tables.country_table.set_index("Position"),
            str(tables_dir / f"catalog_top_countries{suffix}.tex"),
            caption=f"Top {len(tables.country_table)} Countries by Combined Title Count.",
            label="tab:top-countries",
            note="Multi-country titles count once per country; percentages are of all title-country pairs.",
        )
    if not tables.longest.empty:
        dataframe_to_latex_table(
            tables.longest.set_index(["Type", "Position"]),
            str(tables_dir / f"catalog_longest_entries{suffix}.tex"),
            caption=f"Top {tables.longest_n} Longest Entries by Type.",
            label="tab:longest-entries",
            note="Movies in minutes, TV shows in seasons; the two are not comparable.",
        )
    _finish("report.save_table_artefacts", t0)


# --- 4) Pipeline --------------------------------------------------------------
def run_report(
    input_path: Optional[Path] = None,
    output_root: Optional[Path] = None,
    selfcheck: bool = False,
    sample: Optional[int] = None,
) -> Path:
    """
    Run Loader -> Normalizer -> Aggregator -> Reporter once.

    Returns the path of the Markdown report. Load errors propagate.
    """
    t_all = time.perf_counter()
    settings = _catalog_settings()
    if input_path is None:
        if CONFIG is None:
            raise RuntimeError("No configuration loaded and no input path given.")
        input_path = Path(CONFIG["paths"]["catalog"])
    dirs = _output_dirs(output_root)

    raw = load_catalog(input_path, drop_prefix=settings["drop_column_prefix"])
    suffix = ""
    if selfcheck:
        seed = int(((CONFIG or {}).get("reproducibility") or {}).get("seed", 95))
        n = min(sample or len(raw), len(raw))
        raw = raw.sample(n=n, random_state=seed, replace=False).reset_index(drop=True)
        print(f"[SELF-CHECK] Random sample drawn: {len(raw):,} rows (seed={seed}).")
        suffix = "_selfcheck"
    print(f"\n[STATS] Total titles considered: {len(raw):,}")

    tables = build_report_tables(raw, settings)

    print("\n=== SUMMARY ===")
    print(tables.type_counts.to_string())
    print(f"\nTop {min(5, len(tables.country_table))} countries:")
    print(tables.country_table.head(5).to_string(index=False))

    save_table_artefacts(tables, dirs["data"], dirs["tables"], suffix)
    figures = render_figures(tables, dirs["figures"], suffix)
    report = write_report(tables, figures, dirs["narratives"] / f"catalog_report{suffix}.md")

    _finish("report.total", t_all)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit status."""
    p = argparse.ArgumentParser(description="Render the streaming catalog EDA report.")
    p.add_argument("--input", type=Path, default=None, help="Catalog CSV (default: paths.catalog in settings.yaml).")
    p.add_argument("--output", type=Path, default=None, help="Artefact root (default: configured output paths).")
    p.add_argument("--selfcheck", action="store_true", help="Random sample; writes *_selfcheck artefacts.")
    p.add_argument("--sample", type=int, default=None, help="Sample size for self-check (default: all rows).")
    args = p.parse_args(argv)

    print("--- Starting Catalog Report ---")
    try:
        report = run_report(args.input, args.output, selfcheck=args.selfcheck, sample=args.sample)
    except (FileNotFoundError, CatalogFormatError) as e:
        print(f"✗ ERROR: {e}", file=sys.stderr)
        return 1
    print(f"\n--- Catalog Report Completed: {report} ---")
    return 0


if __name__ == '__main__':
    sys.exit(main())
