# -*- coding: utf-8 -*-
"""
normalization.py
================

Purpose
-------
Column cleanup between the loader and the aggregations. Every function here is
total (defined for every row) and returns a new DataFrame/Series; inputs are
never modified.

What it does
------------
- Missing/empty country -> "Unknown" sentinel (a category, not an elision).
- Multi-valued fields (country, listed_in) -> one row per value, keeping
  `show_id` as back-reference to the original entry.
- Raw duration ("90 min", "3 Seasons") -> leading integer + explicit unit.
  Movies are measured in minutes, shows in seasons; the two are never on the
  same scale, so the unit travels with the value.
- release_year / date_added -> numeric year / datetime.

Important notes
---------------
- Expanded tables over-count entries by design; use `deduplicate_expanded`
  (or the unexpanded table) for type-only counts.
"""

from __future__ import annotations

import time
from typing import Dict, Optional

import pandas as pd

CONTENT_TYPES = ("Movie", "TV Show")
DURATION_UNITS: Dict[str, str] = {"Movie": "min", "TV Show": "seasons"}
UNKNOWN = "Unknown"


def _is_blank(series: pd.Series) -> pd.Series:
    return series.isna() | series.astype(str).str.strip().eq("")


def fill_unknown_country(df: pd.DataFrame, sentinel: str = UNKNOWN) -> pd.DataFrame:
    """Replace empty/missing `country` with the sentinel category."""
    out = df.copy()
    out["country"] = out["country"].where(~_is_blank(out["country"]), sentinel)
    return out


def explode_multi_value(
    df: pd.DataFrame,
    column: str,
    sep: str = ",",
    sentinel: Optional[str] = None,
    target: Optional[str] = None,
) -> pd.DataFrame:
    """
    One row per value of a delimited multi-valued column.

    Parameters
    ----------
    df : pd.DataFrame
        Input table; left untouched.
    column : str
        Column holding "a, b, c" style lists.
    sep : str, default ","
        Delimiter; tokens are stripped and empty tokens dropped, so both
        "US, UK" and a trailing "US," split cleanly.
    sentinel : str, optional
        Value kept for rows with no tokens. Without it those rows keep "".
    target : str, optional
        Column receiving the single value. Defaults to `column` (replaced in
        place); a different name keeps the original list column alongside.

    Returns
    -------
    pd.DataFrame
        A row with k values yields k rows, each a full copy of the original
        row plus one value. Index is reset.
    """
    target = target or column
    fallback = sentinel if sentinel is not None else ""
    out = df.copy()
    tokens = (out[column].fillna("").astype(str).str.split(sep)
              .map(lambda parts: [p.strip() for p in parts if p.strip()] or [fallback]))
    out[target] = tokens
    return out.explode(target, ignore_index=True)


def expand_countries(df: pd.DataFrame, sentinel: str = UNKNOWN, sep: str = ",") -> pd.DataFrame:
    """Sentinel-fill then explode `country` (one row per production country)."""
    return explode_multi_value(fill_unknown_country(df, sentinel), "country", sep=sep, sentinel=sentinel)


def expand_genres(df: pd.DataFrame, sep: str = ",") -> pd.DataFrame:
    """Explode `listed_in` into a `genre` column; entries without genres are dropped."""
    out = explode_multi_value(df, "listed_in", sep=sep, target="genre")
    return out[out["genre"] != ""].reset_index(drop=True)


def deduplicate_expanded(df: pd.DataFrame, key: str = "show_id") -> pd.DataFrame:
    """Collapse expanded rows back to one row per original entry."""
    return df.drop_duplicates(subset=key, keep="first").reset_index(drop=True)


def parse_duration(series: pd.Series) -> pd.Series:
    """
    Leading run of digits of each raw duration, as float.

    "90 min" -> 90.0, "3 Seasons" -> 3.0, "" / "n/a" / missing -> NaN.
    """
    digits = series.astype("string").str.strip().str.extract(r"^(\d+)", expand=False)
    return pd.to_numeric(digits, errors="coerce").astype(float)


def duration_unit(type_series: pd.Series) -> pd.Series:
    """Unit implied by content type: 'min' for movies, 'seasons' for shows."""
    return type_series.map(DURATION_UNITS)


def parse_release_year(series: pd.Series) -> pd.Series:
    """Integer year (nullable Int64); non-numeric or fractional values -> <NA>."""
    numeric = pd.to_numeric(series, errors="coerce")
    numeric = numeric.where(numeric == numeric.round())
    return numeric.astype("Int64")


def parse_date_added(series: pd.Series) -> pd.Series:
    """'September 25, 2021' (stray spaces allowed) -> datetime; else NaT."""
    return pd.to_datetime(series.astype("string").str.strip(), format="%B %d, %Y", errors="coerce")


def normalize_catalog(df: pd.DataFrame, sentinel: str = UNKNOWN) -> pd.DataFrame:
    """
    Apply every per-row cleanup and derive the numeric fields.

    Adds `duration_value`, `duration_unit` and `year_added`; replaces
    `release_year` and `date_added` by their parsed forms; fills `country`.
    The raw `duration` string is kept.
    """
    t0 = time.perf_counter()
    out = fill_unknown_country(df, sentinel)
    out["duration_value"] = parse_duration(out["duration"])
    out["duration_unit"] = duration_unit(out["type"])
    out["release_year"] = parse_release_year(out["release_year"])
    out["date_added"] = parse_date_added(out["date_added"])
    out["year_added"] = out["date_added"].dt.year.astype("Int64")

    unexpected = int((~out["type"].isin(CONTENT_TYPES)).sum())
    if unexpected:
        print(f"[WARN] {unexpected:,} rows have a content type outside {CONTENT_TYPES}.")
    missing_duration = int(out["duration_value"].isna().sum())
    if missing_duration:
        print(f"[INFO] {missing_duration:,} rows without a numeric duration (excluded from duration means).")
    print(f"[TIME] normalization.normalize_catalog: {time.perf_counter() - t0:.2f}s")
    return out
