# -*- coding: utf-8 -*-
"""
academic_tables.py

Purpose
-------
Export report tables in the two formats the catalog report ships: Markdown
(embedded in the narrative document) and standalone LaTeX table files, so
the same ranked tables can be dropped into a written paper.

Creates
-------
- One .tex file (complete \\begin{table} ... \\end{table}) per LaTeX call,
  under `paths.tables`.
"""

import os
import time

import pandas as pd


def dataframe_to_markdown(df: pd.DataFrame, precision: int = 1) -> str:
    """
    Render a DataFrame as a GitHub-flavoured Markdown table (no index).

    Floats are shown with `precision` decimals; missing values as '-'.
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeError("Input 'df' must be a pandas DataFrame.")
    if df.empty:
        return "_No rows._"
    return df.to_markdown(index=False, floatfmt=f".{precision}f", missingval="-")


def dataframe_to_latex_table(
    df: pd.DataFrame,
    save_path: str,
    caption: str,
    label: str,
    note: str = None,
    precision: int = 1
) -> str:
    """
    Convert a pandas DataFrame into a complete LaTeX table file.

    Parameters
    ----------
    df : pd.DataFrame
        Table to export; its index is written as the first column.
    save_path : str
        Full path for the .tex file.
    caption : str
        Caption to display above the table.
    label : str
        LaTeX label for cross-referencing, e.g. 'tab:top-countries'.
    note : Optional[str], default None
        Optional note placed under the table.
    precision : int, default 1
        Decimal places for floating-point numbers.

    Returns
    -------
    str
        The path written.

    Raises
    ------
    TypeError
        If `df` is not a pandas DataFrame.
    OSError
        If the file cannot be written.
    """
    t0 = time.perf_counter()
    if not isinstance(df, pd.DataFrame):
        raise TypeError("Input 'df' must be a pandas DataFrame.")

    print(f"Generating LaTeX table for: {label}...")

    latex_string = df.to_latex(
        index=True,
        header=True,
        float_format=f"%.{precision}f",
        column_format="l" * (df.index.nlevels + len(df.columns)),
        escape=True,
        na_rep='-'
    )

    latex_full = [
        "\\begin{table}[htbp]",
        "\\centering",
        f"\\caption{{{caption}}}",
        f"\\label{{{label}}}",
        latex_string,
    ]
    if note:
        latex_full.append("\\begin{tablenotes}[flushleft]")
        latex_full.append(f"\\item \\small{{{note}}}")
        latex_full.append("\\end{tablenotes}")
    latex_full.append("\\end{table}")

    output_dir = os.path.dirname(save_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(save_path, 'w', encoding='utf-8') as f:
        f.write("\n".join(latex_full))

    print(f"✓ Artefact saved: {os.path.abspath(save_path)}")
    print(f"[TIME] academic_tables.dataframe_to_latex_table: {time.perf_counter() - t0:.2f}s")
    return save_path
