"""
Unit tests for the function-writing helpers.
"""

import logging

import pytest

import numpy as np
import pandas as pd

from coursekit.errors import InsufficientDataError, LengthMismatchError
from coursekit.function_style import (
    both_na,
    col_mean,
    col_median,
    col_sd,
    col_summary,
    naming_issues,
    replace_missings,
    rescale01,
)
from coursekit.stats_helpers import mean_ci


class TestRescale01:
    """Test rescale01 edge cases."""

    def test_simple_range(self):
        assert np.allclose(rescale01([1, 2, 3]), [0.0, 0.5, 1.0])

    def test_missing_and_infinite(self):
        result = rescale01([1, 2, 3, np.nan, 10, np.inf, -np.inf])
        expected = [0.0, 1 / 9, 2 / 9, np.nan, 1.0, 1.0, 0.0]
        assert np.allclose(result, expected, equal_nan=True)

    def test_constant_input(self):
        result = rescale01([5.0, 5.0, np.nan])
        assert np.allclose(result, [0.0, 0.0, np.nan], equal_nan=True)

    def test_all_missing(self):
        assert np.isnan(rescale01([np.nan, np.nan])).all()

    def test_bounds(self, rng):
        result = rescale01(rng.normal(size=100))
        assert result.min() == 0.0
        assert result.max() == 1.0


class TestBothNa:
    """Test both_na."""

    def test_counts_shared_missing(self):
        x = [np.nan, np.nan, 1, 2, np.nan]
        y = [np.nan, 3, np.nan, 4, np.nan]
        assert both_na(x, y) == 2

    def test_none_counts_as_missing(self):
        assert both_na([None, "a"], [None, None]) == 1

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError, match="same length"):
            both_na([1, 2, 3], [1, 2])

    def test_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            both_na([1], [])


class TestReplaceMissings:
    """Test replace_missings."""

    def test_replaces_and_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="coursekit.function_style"):
            result = replace_missings([1.0, np.nan, 3.0], 0.0)
        assert result.tolist() == [1.0, 0.0, 3.0]
        assert "1 missing value(s)" in caplog.text

    def test_nothing_to_replace(self, caplog):
        with caplog.at_level(logging.INFO, logger="coursekit.function_style"):
            result = replace_missings([1.0, 2.0], 0.0)
        assert result.tolist() == [1.0, 2.0]
        assert caplog.text == ""


class TestColSummary:
    """Test col_summary and the functions it replaces."""

    def test_skips_non_numeric(self, mtcars):
        result = col_summary(mtcars, np.median)
        assert "model" not in result.index
        assert result["mpg"] == pytest.approx(mtcars["mpg"].median())

    def test_always_float(self):
        df = pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6]})
        result = col_summary(df, lambda s: int(s.sum()))
        assert result.dtype == float
        assert result.tolist() == [6.0, 15.0]

    def test_copy_paste_versions_agree(self, mtcars):
        numeric = mtcars.select_dtypes("number")
        pd.testing.assert_series_equal(col_mean(mtcars), numeric.mean(), check_names=False)
        pd.testing.assert_series_equal(col_median(mtcars), numeric.median(), check_names=False)
        pd.testing.assert_series_equal(col_sd(mtcars), numeric.std(), check_names=False)


class TestNamingIssues:
    """Test the naming checker."""

    def test_good_function_name(self):
        assert naming_issues("compute_mean") == []

    def test_camel_case_noun(self):
        issues = naming_issues("Summary")
        assert any("snake_case" in i for i in issues)
        assert any("verb" in i for i in issues)

    def test_shadows_builtin(self):
        assert any("built-in" in i for i in naming_issues("list", kind="variable"))

    def test_single_letter_variable(self):
        assert any("single-letter" in i for i in naming_issues("x", kind="variable"))

    def test_keyword_is_invalid(self):
        assert naming_issues("class") == ["'class' is not a valid Python identifier"]


class TestMeanCi:
    """Test the t-based confidence interval."""

    def test_symmetric_interval(self):
        lo, hi = mean_ci([1, 2, 3, 4, 5])
        assert (lo + hi) / 2 == pytest.approx(3.0)
        # t(0.975, 4) * sd / sqrt(n)
        assert hi - 3.0 == pytest.approx(2.7764451 * np.sqrt(2.5) / np.sqrt(5), rel=1e-6)

    def test_wider_at_higher_level(self):
        lo95, hi95 = mean_ci([1, 2, 3, 4, 5], level=0.95)
        lo99, hi99 = mean_ci([1, 2, 3, 4, 5], level=0.99)
        assert hi99 - lo99 > hi95 - lo95

    def test_missing_values_dropped(self):
        assert mean_ci([1, 2, np.nan, 3]) == pytest.approx(mean_ci([1, 2, 3]))

    def test_too_few_values(self):
        with pytest.raises(InsufficientDataError):
            mean_ci([1.0, np.nan])
