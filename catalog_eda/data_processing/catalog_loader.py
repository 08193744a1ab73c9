# -*- coding: utf-8 -*-
"""
catalog_loader.py
=================

Purpose
-------
Read the flat catalog export (UTF-8 CSV with a header row) into a DataFrame
holding exactly the twelve documented columns, as strings.

Notes
-----
- Columns whose name starts with the artifact prefix (default "Unnamed", the
  name pandas gives a written-out index) are dropped before anything else.
- Empty fields stay empty strings here; the normalizer decides what they mean.
- A missing file or a file that cannot be parsed is fatal: the exception
  propagates to the caller and nothing is partially loaded.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import List, Union

import pandas as pd

CATALOG_COLUMNS: List[str] = [
    "show_id", "type", "title", "director", "cast", "country",
    "date_added", "release_year", "rating", "duration", "listed_in", "description",
]


class CatalogFormatError(ValueError):
    """The catalog file exists but is not a readable catalog export."""


def drop_artifact_columns(df: pd.DataFrame, prefix: str = "Unnamed") -> pd.DataFrame:
    """Return a copy of `df` without columns whose name starts with `prefix`."""
    spurious = [c for c in df.columns if str(c).startswith(prefix)]
    if spurious:
        print(f"[INFO] Dropping export artifact columns: {spurious}")
    return df.drop(columns=spurious)


def load_catalog(path: Union[str, Path], drop_prefix: str = "Unnamed") -> pd.DataFrame:
    """
    Load the catalog CSV.

    Parameters
    ----------
    path : str | Path
        Location of the comma-delimited export.
    drop_prefix : str, default "Unnamed"
        Column-name prefix marking artifact columns from malformed exports.

    Returns
    -------
    pd.DataFrame
        Columns exactly `CATALOG_COLUMNS`, in that order, all dtype object.

    Raises
    ------
    FileNotFoundError
        If `path` does not point to a file.
    CatalogFormatError
        If the file cannot be decoded/parsed or lacks documented columns.
    """
    t0 = time.perf_counter()
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    print(f"[READ] CSV: {path}")
    try:
        raw = pd.read_csv(path, dtype=str, encoding="utf-8", keep_default_na=False)
    except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CatalogFormatError(f"Could not read catalog file {path}: {e}") from e

    df = drop_artifact_columns(raw, drop_prefix)
    missing = [c for c in CATALOG_COLUMNS if c not in df.columns]
    if missing:
        raise CatalogFormatError(f"Catalog file {path} is missing columns: {missing}")

    extra = [c for c in df.columns if c not in CATALOG_COLUMNS]
    if extra:
        print(f"[INFO] Ignoring undocumented columns: {extra}")

    out = df[CATALOG_COLUMNS].copy()
    print(f"[TIME] loader.load_catalog: {time.perf_counter() - t0:.2f}s ({len(out):,} rows)")
    return out
