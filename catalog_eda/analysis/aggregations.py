# -*- coding: utf-8 -*-
"""
aggregations.py
===============

Purpose
-------
Pure group-by queries over the normalized catalog. Nothing here mutates its
input or caches results; every call recomputes from the table it is given.

Core queries
------------
- count_by            value -> occurrences (first-appearance order by default)
- percentage_of_total value -> round(100 * count / total, 1)
- top_n               n largest counts, ties kept in count_by order
- grouped_mean        mean of the present values of a numeric field per group

Report-level helpers build on those: ranked tables, country x type shares,
longest entries per type, yearly counts and missingness.

Important notes
---------------
- Percentages use 1 decimal place and are not re-normalised, so a complete
  partition can sum to 100 +/- 0.1 per category.
- Missing numeric values are excluded from both numerator and denominator of
  means; they are never treated as zero.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Union

import numpy as np
import pandas as pd

from catalog_eda.data_processing.normalization import CONTENT_TYPES, DURATION_UNITS


def count_by(df: pd.DataFrame, column: str, sort: bool = False) -> pd.Series:
    """
    Occurrences of each distinct value of `column`.

    Missing values are not counted. Without `sort` the order is that of first
    appearance; with `sort` counts are descending and ties keep that order.
    """
    counts = df.groupby(column, sort=False, dropna=True).size().rename("count")
    counts.index.name = column
    if sort:
        counts = counts.sort_values(ascending=False, kind="stable")
    return counts


def percentage_of_total(counts: pd.Series) -> pd.Series:
    """Share of each value in the total, rounded to 1 decimal place."""
    total = counts.sum()
    if counts.empty or total == 0:
        return pd.Series(dtype=float, index=counts.index, name="percentage")
    return (100.0 * counts / total).round(1).rename("percentage")


def top_n(counts: pd.Series, n: int) -> pd.Series:
    """The `n` highest counts, descending; ties keep their original order."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return counts.sort_values(ascending=False, kind="stable").head(n)


def grouped_mean(
    df: pd.DataFrame,
    group_key: Union[str, Sequence[str]],
    numeric_field: str,
) -> pd.Series:
    """
    Arithmetic mean of `numeric_field` within each group of `group_key`.

    Rows whose value is missing (or non-numeric) are dropped before grouping,
    so they count in neither the sum nor the row count. Groups left with no
    value do not appear. Result is sorted by group key.
    """
    keys: List[str] = [group_key] if isinstance(group_key, str) else list(group_key)
    values = pd.to_numeric(df[numeric_field], errors="coerce")
    frame = df[keys].assign(_value=values).dropna(subset=["_value"])
    means = frame.groupby(keys, sort=True, dropna=True)["_value"].mean()
    return means.rename(numeric_field)


def ranked_table(counts: pd.Series, n: int, label: str) -> pd.DataFrame:
    """
    Top-n rows as Position | <label> | Count | Percentage.

    Percentage is the share of the full total, not of the top-n slice.
    """
    pct = percentage_of_total(counts)
    top = top_n(counts, n)
    out = pd.DataFrame({
        label: top.index.astype(str),
        "Count": top.to_numpy(dtype=int),
        "Percentage": pct.reindex(top.index).to_numpy(dtype=float),
    })
    out.insert(0, "Position", np.arange(1, len(out) + 1))
    return out


def type_share_by_category(
    expanded: pd.DataFrame,
    column: str,
    categories: Iterable,
) -> pd.DataFrame:
    """
    Percentage of Movie vs TV Show rows within each category.

    Rows are categories (in the order given), columns the content types; each
    row sums to 100 up to rounding.
    """
    order = list(categories)
    sub = expanded[expanded[column].isin(order) & expanded["type"].isin(CONTENT_TYPES)]
    ct = pd.crosstab(sub[column], sub["type"]) if not sub.empty else pd.DataFrame()
    ct = ct.reindex(index=order, columns=list(CONTENT_TYPES), fill_value=0)
    totals = ct.sum(axis=1).replace(0, np.nan)
    share = ct.div(totals, axis=0).mul(100).round(1).fillna(0.0)
    share.index.name = column
    share.columns.name = "type"
    return share


def yearly_counts_by_type(df: pd.DataFrame, year_column: str) -> pd.DataFrame:
    """Entries per year (rows) and content type (columns); missing years dropped."""
    sub = df[df[year_column].notna() & df["type"].isin(CONTENT_TYPES)]
    if sub.empty:
        return pd.DataFrame(columns=list(CONTENT_TYPES), dtype="int64")
    ct = pd.crosstab(sub[year_column].astype(int), sub["type"])
    ct = ct.reindex(columns=list(CONTENT_TYPES), fill_value=0).sort_index()
    ct.index.name = year_column
    return ct


def longest_entries(df: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    """
    The `n` longest entries per content type.

    Movies rank by minutes and shows by seasons; the unit is written next to
    the value. Entries without a numeric duration are skipped.
    """
    rows = []
    for ctype in CONTENT_TYPES:
        sub = df[(df["type"] == ctype) & df["duration_value"].notna()]
        top = sub.sort_values("duration_value", ascending=False, kind="stable").head(n)
        for pos, (_, r) in enumerate(top.iterrows(), start=1):
            year = r["release_year"]
            rows.append({
                "Type": ctype,
                "Position": pos,
                "Title": r["title"],
                "Duration": f"{int(r['duration_value'])} {DURATION_UNITS[ctype]}",
                "Release Year": str(int(year)) if pd.notna(year) else "-",
            })
    return pd.DataFrame(rows, columns=["Type", "Position", "Title", "Duration", "Release Year"])


def missingness_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Missing count and percentage per column; blank strings count as missing."""
    n = max(len(df), 1)
    rows = []
    for col in df.columns:
        s = df[col]
        if s.dtype == object or pd.api.types.is_string_dtype(s):
            mask = s.isna() | s.astype(str).str.strip().eq("")
        else:
            mask = s.isna()
        missing = int(mask.sum())
        rows.append({"Field": col, "Missing": missing, "Missing %": round(100.0 * missing / n, 1)})
    return pd.DataFrame(rows, columns=["Field", "Missing", "Missing %"])
