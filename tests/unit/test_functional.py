"""
Unit tests for the map family and the safely / possibly / quietly adverbs.
"""

import math
import operator
import warnings

import pytest

import numpy as np
import pandas as pd

from coursekit.errors import InputTypeError, LengthMismatchError
from coursekit.functional import (
    Result,
    accumulate,
    compact,
    compose,
    discard,
    keep,
    map2,
    map_chr,
    map_dbl,
    map_df,
    map_int,
    map_lgl,
    map_list,
    pmap,
    possibly,
    quietly,
    reduce,
    safely,
    transpose,
    walk,
)


class TestMapFamily:
    """Test the typed maps."""

    def test_map_list(self):
        assert map_list([1, 2, 3], lambda v, k: v * k, 10) == [10, 20, 30]

    def test_map_dbl_list_gives_float_array(self):
        result = map_dbl([1, 2, 3], lambda v: v / 2)
        assert isinstance(result, np.ndarray)
        assert result.dtype == float
        assert result.tolist() == [0.5, 1.0, 1.5]

    def test_map_dbl_keeps_names(self):
        result = map_dbl({"a": [1, 2], "b": [3, 5]}, np.mean)
        assert isinstance(result, pd.Series)
        assert result.to_dict() == {"a": 1.5, "b": 4.0}

    def test_map_dbl_over_columns(self, mtcars):
        result = map_dbl(mtcars[["mpg", "wt"]], lambda s: s.mean())
        assert list(result.index) == ["mpg", "wt"]
        assert result["mpg"] == pytest.approx(mtcars["mpg"].mean())

    def test_map_dbl_rejects_strings(self):
        with pytest.raises(InputTypeError, match="result 2 must be a single number"):
            map_dbl([1, 2], lambda v: 1.0 if v == 1 else "two")

    def test_map_dbl_rejects_vectors(self):
        with pytest.raises(InputTypeError, match="'a'"):
            map_dbl({"a": [1, 2]}, lambda v: np.array(v))

    def test_map_int(self):
        assert map_int([1.0, 2.0], lambda v: v * 2).tolist() == [2, 4]
        with pytest.raises(InputTypeError):
            map_int([1.5], lambda v: v)

    def test_map_chr(self):
        assert list(map_chr(["a", "b"], str.upper)) == ["A", "B"]
        with pytest.raises(InputTypeError):
            map_chr([1], lambda v: v)

    def test_map_lgl(self):
        assert map_lgl([1, 2, 3], lambda v: v > 1).tolist() == [False, True, True]
        with pytest.raises(InputTypeError):
            map_lgl([1], lambda v: 1)

    def test_map_df_with_id(self):
        groups = {"x": [1, 2, 3], "y": [10, 20]}
        result = map_df(groups, lambda v: {"n": len(v), "total": sum(v)}, id_col="group")
        assert list(result.columns) == ["group", "n", "total"]
        assert result["group"].tolist() == ["x", "y"]
        assert result["total"].tolist() == [6, 30]

    def test_map_df_rejects_scalars(self):
        with pytest.raises(InputTypeError):
            map_df([1, 2], lambda v: v)

    def test_map_df_empty(self):
        assert map_df([], lambda v: {"v": v}).empty


class TestParallelMaps:
    """Test map2 and pmap."""

    def test_map2(self):
        assert map2([1, 2], [10, 20], operator.add) == [11, 22]

    def test_map2_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            map2([1, 2], [1], operator.add)

    def test_pmap_dict_uses_names(self):
        result = pmap({"n": [1, 2], "mean": [0, 5]}, lambda n, mean: n * 10 + mean)
        assert result == [10, 25]

    def test_pmap_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            pmap([[1, 2], [1, 2, 3]], operator.add)


class TestAdverbs:
    """Test safely, possibly, quietly and transpose."""

    def test_safely_success(self):
        assert safely(math.log)(1.0) == Result(0.0, None)

    def test_safely_failure(self):
        res = safely(math.log)(-1.0)
        assert res.result is None
        assert isinstance(res.error, ValueError)

    def test_safely_otherwise(self):
        assert safely(int, otherwise=-1)("x").result == -1

    def test_safely_keeps_name(self):
        assert safely(math.log).__name__ == "log"

    def test_possibly(self):
        parse = possibly(int, otherwise=None)
        assert [parse(v) for v in ["1", "x", "3"]] == [1, None, 3]

    def test_quietly_captures(self):
        def noisy(v):
            print("working")
            warnings.warn("careful")
            return v * 2

        captured = quietly(noisy)(3)
        assert captured.result == 6
        assert captured.output == "working\n"
        assert captured.warnings == ["careful"]
        assert captured.messages == ""

    def test_transpose(self):
        results = [safely(math.log)(v) for v in [1.0, -1.0, math.e]]
        flipped = transpose(results)
        assert flipped["result"][0] == 0.0
        assert flipped["result"][1] is None
        assert flipped["result"][2] == pytest.approx(1.0)
        assert [e is None for e in flipped["error"]] == [True, False, True]


class TestReducers:
    """Test keep / discard / compact / reduce / accumulate / walk / compose."""

    def test_keep_discard(self):
        values = [1, 2, 3, 4]
        assert keep(values, lambda v: v % 2) == [1, 3]
        assert discard(values, lambda v: v % 2) == [2, 4]

    def test_compact(self):
        assert compact([1, None, [], "a", "", 0]) == [1, "a", 0]

    def test_reduce(self):
        assert reduce([1, 2, 3, 4], operator.add) == 10
        assert reduce([1, 2, 3, 4], operator.add, init=10) == 20

    def test_accumulate(self):
        assert accumulate([1, 2, 3], operator.add) == [1, 3, 6]
        assert accumulate([1, 2, 3], operator.add, init=0) == [0, 1, 3, 6]

    def test_reduce_matches_last_accumulate(self):
        values = [3, 1, 4, 1, 5]
        assert reduce(values, max) == accumulate(values, max)[-1]

    def test_walk_returns_input(self):
        seen = []
        values = [1, 2]
        assert walk(values, seen.append) is values
        assert seen == [1, 2]

    def test_compose_right_to_left(self):
        assert compose(str, abs)(-3) == "3"
        assert compose(lambda v: v + 1, lambda v: v * 2)(5) == 11

    def test_compose_needs_functions(self):
        with pytest.raises(ValueError):
            compose()
