"""
Unit tests for the chart renderers and table exports.
Tests that every renderer writes both themes, labels its values and leaves its input untouched.
"""
import pytest
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
import sys
sys.path.append(str(Path(__file__).resolve().parents[3]))

from catalog_eda.utils.theme_manager import CONFIG, load_config
from catalog_eda.utils.academic_tables import dataframe_to_latex_table, dataframe_to_markdown
from catalog_eda.visualization.catalog_plots import (
    plot_count_bars,
    plot_share_donut,
    plot_type_share_stack,
    plot_yearly_line,
)


def _labels(ax):
    return [t.get_text() for t in ax.texts if t.get_text()]


def _assert_both_themes(paths, stem: Path):
    names = sorted(Path(p).name for p in paths)
    assert names == [f"{stem.name}_dark.png", f"{stem.name}_light.png"], f"Unexpected artefacts: {names}"
    assert all(Path(p).stat().st_size > 0 for p in paths)


class TestThemeManager:
    """Test suite for config loading"""

    def test_config_loaded_with_resolved_paths(self):
        assert CONFIG is not None, "settings.yaml should load from the repository"
        assert "${project.root}" not in CONFIG["paths"]["figures"]
        assert CONFIG["catalog"]["unknown_sentinel"] == "Unknown"

    def test_missing_config_returns_none(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") is None

    def test_explicit_root(self, tmp_path):
        cfg = tmp_path / "settings.yaml"
        cfg.write_text("project:\n  root: /srv/report\npaths:\n  data: \"${project.root}/data\"\n", encoding="utf-8")
        assert load_config(cfg)["paths"]["data"] == "/srv/report/data"


class TestRenderers:
    """Test suite for chart rendering"""

    @pytest.fixture
    def type_counts(self):
        return pd.Series({"Movie": 4, "TV Show": 2}, name="count").rename_axis("type")

    def test_count_bars(self, tmp_path, type_counts):
        before = type_counts.copy()
        stem = tmp_path / "bars"
        paths = plot_count_bars(type_counts, title="Titles by Content Type", save_path=str(stem))
        _assert_both_themes(paths, stem)
        pd.testing.assert_series_equal(type_counts, before)

    def test_horizontal_count_bars(self, tmp_path):
        genres = pd.Series({"Dramas": 3, "Comedies": 2, "Docuseries": 1}, name="count").rename_axis("genre")
        stem = tmp_path / "genres"
        _assert_both_themes(plot_count_bars(genres, title="Genres", horizontal=True, save_path=str(stem)), stem)

    def test_donut(self, tmp_path, type_counts):
        pct = pd.Series({"Movie": 66.7, "TV Show": 33.3})
        before = type_counts.copy()
        stem = tmp_path / "donut"
        _assert_both_themes(plot_share_donut(type_counts, pct, title="Share", save_path=str(stem)), stem)
        pd.testing.assert_series_equal(type_counts, before)

    def test_stacked_share(self, tmp_path):
        share = pd.DataFrame({"Movie": [66.7, 50.0], "TV Show": [33.3, 50.0]},
                             index=pd.Index(["United States", "India"], name="country"))
        before = share.copy()
        stem = tmp_path / "stack"
        _assert_both_themes(plot_type_share_stack(share, title="Split", save_path=str(stem)), stem)
        pd.testing.assert_frame_equal(share, before)

    def test_yearly_line_series_and_frame(self, tmp_path):
        means = pd.Series([100.0, 95.5, 98.0], index=pd.Index([2019, 2020, 2021], name="release_year"),
                          name="duration_value")
        stem = tmp_path / "line"
        _assert_both_themes(plot_yearly_line(means, title="Mean", ylabel="min", save_path=str(stem)), stem)

        yearly = pd.DataFrame({"Movie": [1, 3], "TV Show": [2, 0]},
                              index=pd.Index([2020, 2021], name="year_added"))
        yearly.columns.name = "type"
        stem = tmp_path / "added"
        _assert_both_themes(plot_yearly_line(yearly, title="Added", ylabel="Titles", save_path=str(stem)), stem)

    def test_save_path_required(self, type_counts):
        with pytest.raises(ValueError):
            plot_count_bars(type_counts, title="No path")


class TestRendererLabels:
    """Test suite for the numbers printed on each chart"""

    @pytest.fixture
    def ax(self):
        fig, ax = plt.subplots()
        yield ax
        plt.close(fig)

    @pytest.fixture
    def type_counts(self):
        return pd.Series({"Movie": 4, "TV Show": 2}, name="count").rename_axis("type")

    def test_bar_count_labels(self, ax, type_counts):
        plot_count_bars.__wrapped__(type_counts, title="Types", ax=ax)
        assert _labels(ax) == ["4", "2"], "Every bar carries its count"

    def test_bar_labels_use_thousands_separator(self, ax):
        counts = pd.Series({"Dramas": 2650, "Comedies": 1674}, name="count").rename_axis("genre")
        plot_count_bars.__wrapped__(counts, title="Genres", horizontal=True, ax=ax)
        assert _labels(ax) == ["2,650", "1,674"]

    def test_donut_percentage_labels(self, ax, type_counts):
        pct = pd.Series({"Movie": 66.7, "TV Show": 33.3})
        plot_share_donut.__wrapped__(type_counts, pct, title="Share", ax=ax)
        labels = _labels(ax)
        assert labels[:2] == ["66.7%", "33.3%"]
        assert "6\ntitles" in labels, "Total is printed in the centre"

    def test_donut_aligns_percentages_by_label(self, ax, type_counts):
        pct = pd.Series({"TV Show": 33.3, "Movie": 66.7})
        plot_share_donut.__wrapped__(type_counts, pct, title="Share", ax=ax)
        assert _labels(ax)[:2] == ["66.7%", "33.3%"], "Wedge labels follow the counts order"

    def test_stack_segment_labels(self, ax):
        share = pd.DataFrame({"Movie": [66.7, 98.0, 100.0], "TV Show": [33.3, 2.0, 0.0]},
                             index=pd.Index(["United States", "Egypt", "Nigeria"], name="country"))
        plot_type_share_stack.__wrapped__(share, title="Split", ax=ax)
        assert _labels(ax) == ["66.7%", "98.0%", "100.0%", "33.3%", "2.0%"], \
            "Every visible segment is labelled, however narrow"


class TestTableExports:
    """Test suite for Markdown/LaTeX table export"""

    @pytest.fixture
    def table(self):
        return pd.DataFrame({"Position": [1, 2], "Country": ["United States", "India"],
                             "Count": [3, 2], "Percentage": [37.5, 25.0]})

    def test_markdown(self, table):
        md = dataframe_to_markdown(table)
        assert "Position" in md and "United States" in md and "37.5" in md
        assert md.splitlines()[1].startswith("|"), "Pipe table expected"

    def test_markdown_empty_and_type_error(self):
        assert dataframe_to_markdown(pd.DataFrame()) == "_No rows._"
        with pytest.raises(TypeError):
            dataframe_to_markdown([1, 2])

    def test_latex(self, tmp_path, table):
        path = tmp_path / "tables" / "top.tex"
        dataframe_to_latex_table(table.set_index("Position"), str(path), "Top countries.", "tab:top", note="Pairs.")
        text = path.read_text(encoding="utf-8")
        assert text.startswith("\\begin{table}") and text.rstrip().endswith("\\end{table}")
        assert "\\label{tab:top}" in text and "United States" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
