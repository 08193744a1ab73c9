"""
Unit tests for the aggregation queries.
Tests counting, percentage rounding, top-n ordering and grouped means.
"""
import pytest
import numpy as np
import pandas as pd
from pathlib import Path
import sys
sys.path.append(str(Path(__file__).resolve().parents[3]))

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
from catalog_eda.data_processing.normalization import expand_countries, normalize_catalog
from catalog_eda.tests.test_helpers import get_test_seed, random_catalog, sample_catalog


class TestCountBy:
    """Test suite for count_by"""

    def test_sum_equals_non_missing_rows(self):
        df = pd.DataFrame({"rating": ["R", None, "PG", "R", np.nan, "PG-13"]})
        counts = count_by(df, "rating")
        assert counts.sum() == df["rating"].notna().sum(), "Missing values must not be counted"

    def test_first_appearance_order(self):
        df = pd.DataFrame({"c": ["b", "a", "b", "c", "a"]})
        assert list(count_by(df, "c").index) == ["b", "a", "c"]

    def test_sorted_ties_keep_first_appearance(self):
        df = pd.DataFrame({"c": ["x", "y", "z", "y", "z", "w", "w", "w"]})
        counts = count_by(df, "c", sort=True)
        assert list(counts.index) == ["w", "y", "z", "x"]
        assert list(counts.to_numpy()) == [3, 2, 2, 1]

    def test_idempotent(self):
        df = sample_catalog()
        pd.testing.assert_series_equal(count_by(df, "type"), count_by(df, "type"))


class TestPercentages:
    """Test suite for percentage_of_total"""

    def test_rounding_to_one_decimal(self):
        pct = percentage_of_total(pd.Series({"a": 1, "b": 2}))
        assert pct["a"] == 33.3 and pct["b"] == 66.7

    def test_bounds_and_tolerance(self):
        df = random_catalog(500, get_test_seed("percentage_bounds"))
        counts = count_by(expand_countries(df), "country")
        pct = percentage_of_total(counts)
        assert ((pct >= 0) & (pct <= 100)).all(), "Each percentage must lie in [0, 100]"
        assert abs(pct.sum() - 100) <= 0.1 * len(pct) + 1e-9, "Rounding drift beyond tolerance"

    def test_residue_not_corrected(self):
        pct = percentage_of_total(pd.Series({"a": 1, "b": 1, "c": 1}))
        assert pct.tolist() == [33.3, 33.3, 33.3]

    def test_empty(self):
        assert percentage_of_total(pd.Series(dtype="int64")).empty


class TestTopN:
    """Test suite for top_n"""

    @pytest.fixture
    def counts(self):
        return pd.Series({"a": 2, "b": 5, "c": 2, "d": 7, "e": 1})

    def test_at_most_n(self, counts):
        assert len(top_n(counts, 3)) == 3
        assert len(top_n(counts, 10)) == len(counts)
        assert top_n(counts, 0).empty

    def test_descending_with_stable_ties(self, counts):
        top = top_n(counts, 4)
        assert list(top.index) == ["d", "b", "a", "c"]
        assert (np.diff(top.to_numpy()) <= 0).all(), "Lower count ranked above higher count"

    def test_negative_n_rejected(self, counts):
        with pytest.raises(ValueError):
            top_n(counts, -1)


class TestGroupedMean:
    """Test suite for grouped_mean"""

    def test_worked_example_excludes_missing(self):
        df = pd.DataFrame({"g": ["x", "x", "x"], "v": [90.0, 3.0, np.nan]})
        assert grouped_mean(df, "g", "v")["x"] == pytest.approx(46.5), "Must divide by present values (2), not 3"

    def test_per_group_and_all_missing_group(self):
        df = pd.DataFrame({"g": ["a", "a", "b", "c"], "v": [1.0, 3.0, 10.0, np.nan]})
        means = grouped_mean(df, "g", "v")
        assert means.to_dict() == {"a": 2.0, "b": 10.0}

    def test_multi_key(self):
        df = normalize_catalog(sample_catalog())
        means = grouped_mean(df, ["type", "release_year"], "duration_value")
        assert means[("Movie", 2020)] == pytest.approx(105.0)
        assert means[("TV Show", 2019)] == pytest.approx(3.0)
        assert ("Movie", 2019) not in means.index, "s5 has no duration; its group has no present value"

    def test_matches_manual_mean(self):
        df = normalize_catalog(random_catalog(300, get_test_seed("grouped_mean_manual")))
        movies = df[df["type"] == "Movie"]
        means = grouped_mean(movies, "release_year", "duration_value")
        for year, value in means.items():
            present = movies.loc[movies["release_year"] == year, "duration_value"].dropna()
            assert value == pytest.approx(present.sum() / len(present))


class TestReportQueries:
    """Test suite for the report-level helpers"""

    @pytest.fixture
    def catalog(self):
        return normalize_catalog(sample_catalog())

    def test_ranked_table(self, catalog):
        counts = count_by(expand_countries(catalog), "country", sort=True)
        table = ranked_table(counts, 3, "Country")
        assert list(table.columns) == ["Position", "Country", "Count", "Percentage"]
        assert table["Position"].tolist() == [1, 2, 3]
        assert table["Country"].tolist() == ["United States", "United Kingdom", "India"]
        assert table["Count"].tolist() == [3, 2, 2]
        assert table["Percentage"].tolist() == [37.5, 25.0, 25.0], "Share of all pairs, not of the top slice"

    def test_type_share_rows_sum_to_100(self, catalog):
        expanded = expand_countries(catalog)
        share = type_share_by_category(expanded, "country", ["United States", "India"])
        assert list(share.index) == ["United States", "India"]
        assert list(share.columns) == ["Movie", "TV Show"]
        assert share.loc["United States", "Movie"] == pytest.approx(66.7)
        assert share.loc["India", "TV Show"] == pytest.approx(50.0)
        assert (share.sum(axis=1) - 100).abs().max() <= 0.1

    def test_longest_entries(self, catalog):
        longest = longest_entries(catalog, n=2)
        movies = longest[longest["Type"] == "Movie"]
        assert movies["Title"].tolist() == ["Beta", "Zeta"]
        assert movies["Duration"].tolist() == ["120 min", "95 min"]
        shows = longest[longest["Type"] == "TV Show"]
        assert shows["Duration"].tolist() == ["3 seasons", "1 seasons"]
        assert shows["Position"].tolist() == [1, 2]

    def test_yearly_counts(self, catalog):
        yearly = yearly_counts_by_type(catalog, "year_added")
        assert yearly.loc[2021, "Movie"] == 3
        assert yearly.loc[2019, "TV Show"] == 1
        assert int(yearly.to_numpy().sum()) == 5, "Entries without a parsable date are left out"

    def test_missingness(self):
        miss = missingness_summary(sample_catalog()).set_index("Field")
        assert miss.loc["country", "Missing"] == 1
        assert miss.loc["director", "Missing"] == 3
        assert miss.loc["director", "Missing %"] == 50.0
        assert miss.loc["title", "Missing"] == 0

    def test_queries_do_not_mutate(self, catalog):
        before = catalog.copy()
        count_by(catalog, "type")
        grouped_mean(catalog, "release_year", "duration_value")
        longest_entries(catalog)
        pd.testing.assert_frame_equal(catalog, before)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
