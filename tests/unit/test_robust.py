"""
Unit tests for the robust-function helpers.
"""

import pytest

import numpy as np
import pandas as pd

from coursekit.errors import CourseError, InputTypeError
from coursekit.robust import (
    batch_run,
    big_x,
    check_numeric,
    format_mean,
    format_mean_global,
    stop_if_not,
    type_stable_quantiles,
    unstable_quantiles,
)


class TestFailFast:
    """Test stop_if_not and check_numeric."""

    def test_stop_if_not_passes(self):
        stop_if_not(True, "never raised")

    def test_stop_if_not_default_error(self):
        with pytest.raises(CourseError, match="boom"):
            stop_if_not(False, "boom")

    def test_stop_if_not_custom_error(self):
        with pytest.raises(KeyError):
            stop_if_not(False, "missing", KeyError)

    @pytest.mark.parametrize("value", [3, 2.5, np.float64(1.0), np.array([1, 2]), pd.Series([1.5])])
    def test_numeric_accepted(self, value):
        assert check_numeric(value) is value

    @pytest.mark.parametrize("value", [True, np.bool_(False), "ten", [1, 2], pd.Series(["a"])])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InputTypeError):
            check_numeric(value)

    def test_message_names_argument(self):
        with pytest.raises(InputTypeError, match="`threshold` must be numeric, not bool"):
            check_numeric(True, name="threshold")


class TestShadowing:
    """Test the column-shadowing example."""

    def test_query_bare_name_uses_column(self):
        df = pd.DataFrame({"x": [1, 2, 3, 4, 5], "threshold": [5] * 5})
        threshold = 2  # noqa: F841
        assert df.query("x > threshold").empty

    def test_big_x_uses_argument(self):
        df = pd.DataFrame({"x": [1, 2, 3, 4, 5], "threshold": [5] * 5})
        assert big_x(df, 2)["x"].tolist() == [3, 4, 5]

    def test_big_x_requires_x(self):
        with pytest.raises(InputTypeError, match="column called `x`"):
            big_x(pd.DataFrame({"y": [1]}), 0)

    def test_big_x_checks_threshold(self):
        with pytest.raises(InputTypeError):
            big_x(pd.DataFrame({"x": [1]}), "0")


class TestQuantiles:
    """Test type-unstable and type-stable quantiles."""

    def test_unstable_changes_type(self, mtcars):
        frame = mtcars[["mpg", "hp"]]
        assert isinstance(unstable_quantiles(frame, 0.5), pd.Series)
        assert isinstance(unstable_quantiles(frame, [0.05, 0.95]), pd.DataFrame)
        assert unstable_quantiles(mtcars[["model"]], [0.05, 0.95]) == []

    @pytest.mark.parametrize("probs", [0.5, [0.5], [0.05, 0.95]])
    def test_stable_always_frame(self, mtcars, probs):
        result = type_stable_quantiles(mtcars[["mpg", "hp"]], probs)
        assert isinstance(result, pd.DataFrame)
        assert list(result.index) == ["mpg", "hp"]
        assert result.shape == (2, len(np.atleast_1d(probs)))

    def test_stable_labels_and_values(self, mtcars):
        result = type_stable_quantiles(mtcars[["mpg"]], [0.05, 0.95])
        assert list(result.columns) == ["5%", "95%"]
        assert result.loc["mpg", "95%"] == pytest.approx(mtcars["mpg"].quantile(0.95))

    def test_stable_labels_keep_small_probabilities_apart(self, mtcars):
        result = type_stable_quantiles(mtcars[["mpg"]], [0.001, 0.004, 0.5])
        assert list(result.columns) == ["0.1%", "0.4%", "50%"]
        assert result.columns.is_unique

    def test_stable_rejects_repeated_probabilities(self, mtcars):
        with pytest.raises(ValueError, match="distinct"):
            type_stable_quantiles(mtcars[["mpg"]], [0.5, 0.5])

    def test_stable_empty_input(self, mtcars):
        result = type_stable_quantiles(mtcars[["model"]], [0.05, 0.95])
        assert isinstance(result, pd.DataFrame)
        assert result.empty
        assert list(result.columns) == ["5%", "95%"]


class TestHiddenArguments:
    """Test the global-option example."""

    def test_global_option_changes_result(self):
        values = [1.0, 2.0, 4.0]
        with pd.option_context("display.precision", 1):
            short = format_mean_global(values)
        with pd.option_context("display.precision", 4):
            long = format_mean_global(values)
        assert short == "2.3"
        assert long == "2.3333"

    def test_explicit_digits(self):
        with pd.option_context("display.precision", 6):
            assert format_mean([1.0, 2.0, 4.0]) == "2.33"
        assert format_mean([1.0, 2.0], digits=0) == "2"


class TestBatchRun:
    """Test batch_run."""

    def test_failures_collected(self):
        def mean_numeric(v):
            check_numeric(v)
            return float(np.mean(v))

        successes, failures = batch_run({"a": np.array([1, 2]), "b": "x", "c": True}, mean_numeric)
        assert successes == {"a": 1.5}
        assert set(failures) == {"b", "c"}
        assert all(isinstance(e, InputTypeError) for e in failures.values())

    def test_list_inputs_use_positions(self):
        successes, failures = batch_run([1, 0, 2], lambda v: 1 / v)
        assert successes == {0: 1.0, 2: 0.5}
        assert isinstance(failures[1], ZeroDivisionError)
