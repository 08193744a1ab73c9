# -*- coding: utf-8 -*-
"""
theme_manager.py

Purpose
-------
Load the YAML settings shared by every stage of the catalog report and provide
a decorator that renders a matplotlib chart in both light and dark themes with
the configured palettes, DPI and file naming.

Creates
-------
- Figures saved as <save_path>_light.png and <save_path>_dark.png (and PDFs
  if `viz.save_pdf` is enabled).

Performance
-----------
Prints elapsed times for config loading and for each themed render.
"""

import os
import functools
import time
from pathlib import Path
from typing import List, Optional

import yaml
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "settings.yaml"
THEMES = ("light", "dark")


# --- 1. Configuration Loading ---

def _resolve_paths(value, root: str):
    """
    Recursively expand ${project.root} placeholders inside a parsed config.

    Parameters
    ----------
    value : Any
        A nested value (str/dict/list/other) from the config.
    root : str
        Absolute project root substituted for the placeholder.
    """
    if isinstance(value, str) and "${project.root}" in value:
        return value.replace("${project.root}", root)
    if isinstance(value, dict):
        return {k: _resolve_paths(v, root) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_paths(v, root) for v in value]
    return value


def load_config(config_path: Optional[Path] = None) -> Optional[dict]:
    """
    Load the master YAML config and resolve ${project.root} placeholders.

    Parameters
    ----------
    config_path : Path, optional
        Explicit settings file. Defaults to $CATALOG_EDA_CONFIG, then
        `config/settings.yaml` under the repository root.

    Returns
    -------
    dict | None
        Resolved configuration dict, or None if load/parse fails.

    Notes
    -----
    An empty `project.root` resolves to the directory above `config/`.
    """
    t0 = time.perf_counter()
    if config_path is None:
        config_path = Path(os.environ.get("CATALOG_EDA_CONFIG", str(DEFAULT_CONFIG_PATH)))
    config_path = Path(config_path).resolve()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"ERROR: Failed to load or parse configuration file: {e}")
        return None

    project = config.setdefault('project', {})
    if not project.get('root'):
        project['root'] = str(config_path.parent.parent)
    resolved = _resolve_paths(config, project['root'])
    dt = time.perf_counter() - t0
    print(f"[TIME] theme_manager.load_config: {dt:.2f}s")
    return resolved


CONFIG = load_config()


# --- 2. Core Plotting Wrapper ---

def _apply_theme(theme: str) -> None:
    """Switch the global rcParams to the configured light or dark theme."""
    theme_config = CONFIG['viz']['themes'][theme]
    plt.style.use('seaborn-v0_8-whitegrid' if theme == 'light' else 'seaborn-v0_8-darkgrid')
    plt.rcParams.update({
        'figure.facecolor': theme_config['facecolor'],
        'axes.facecolor': theme_config['facecolor'],
        'axes.labelcolor': theme_config['textcolor'],
        'axes.edgecolor': theme_config['gridcolor'],
        'xtick.color': theme_config['textcolor'],
        'ytick.color': theme_config['textcolor'],
        'text.color': theme_config['textcolor'],
        'grid.color': theme_config['gridcolor'],
        'legend.facecolor': theme_config['facecolor'],
        'legend.edgecolor': theme_config['gridcolor'],
    })


def plot_dual_theme(section: str):
    """
    Decorator factory to render a plotting function in both light and dark themes.

    Parameters
    ----------
    section : str
        Palette section to use from settings.yaml (e.g., 'catalog', 'duration').

    Returns
    -------
    Callable
        A decorator for functions shaped like
        `func(*args, ax=None, palette=None, **kwargs)`; callers must pass
        `save_path` (path stem, no extension). The wrapped function returns
        the list of files written.

    Notes
    -----
    - A failure inside one theme is reported and that theme is skipped.
    - Requires CONFIG loaded successfully.
    """
    def decorator(plot_func):
        @functools.wraps(plot_func)
        def wrapper(*args, **kwargs) -> List[Path]:
            if CONFIG is None:
                print("Aborting plot generation due to missing configuration.")
                return []

            save_path_base = kwargs.get("save_path")
            if not save_path_base:
                raise ValueError("Plotting function must be called with 'save_path'.")

            figsize = kwargs.get("figsize", (10, 6))
            Path(save_path_base).parent.mkdir(parents=True, exist_ok=True)
            viz = CONFIG['viz']
            written: List[Path] = []

            t_all = time.perf_counter()
            for theme in THEMES:
                t0 = time.perf_counter()
                _apply_theme(theme)
                fig, ax = plt.subplots(figsize=figsize)
                palette = viz['palettes']['sections'][section][theme]

                try:
                    plot_func(*args, ax=ax, palette=palette, **kwargs)
                except Exception as e:
                    print(f"ERROR executing plotting function '{plot_func.__name__}' ({theme}): {e}")
                    plt.close(fig)
                    continue

                ax.title.set_color(viz['themes'][theme]['textcolor'])
                fig.tight_layout()

                if viz.get('save_png', True):
                    png = Path(f"{save_path_base}_{theme}.png")
                    fig.savefig(png, dpi=viz['dpi'], bbox_inches='tight')
                    written.append(png)
                    print(f"✓ Artefact saved: {png.resolve()}")

                if viz.get('save_pdf', False):
                    pdf = Path(f"{save_path_base}_{theme}.pdf")
                    fig.savefig(pdf, bbox_inches='tight')
                    written.append(pdf)
                    print(f"✓ Artefact saved: {pdf.resolve()}")

                plt.close(fig)
                print(f"[TIME] plot_dual_theme[{theme}] {plot_func.__name__}: {time.perf_counter() - t0:.2f}s")

            print(f"[TIME] plot_dual_theme[total] {plot_func.__name__}: {time.perf_counter() - t_all:.2f}s")
            return written
        return wrapper
    return decorator
