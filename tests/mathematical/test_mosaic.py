"""
Mathematical property tests for mosaic geometry and the chi-squared test.
"""

import pytest

import numpy as np
import pandas as pd
from scipy import stats

from coursekit.data_loader import simulate_chis
from coursekit.mosaic import bin_numeric, chi_square, contingency_table, mosaic_data


@pytest.fixture
def two_by_two():
    """A: 20 u / 10 v, B: 20 u / 50 v."""
    return pd.DataFrame({
        "x": ["A"] * 30 + ["B"] * 70,
        "fill": ["u"] * 20 + ["v"] * 10 + ["u"] * 20 + ["v"] * 50,
    })


class TestMosaicGeometry:
    """Test rectangle coordinates."""

    def test_column_widths_follow_margin(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        a = rects[rects["x"] == "A"].iloc[0]
        b = rects[rects["x"] == "B"].iloc[0]
        assert (a["xmin"], a["xmax"]) == pytest.approx((0.0, 30.0))
        assert (b["xmin"], b["xmax"]) == pytest.approx((30.0, 100.0))

    def test_heights_within_column(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        au = rects[(rects["x"] == "A") & (rects["fill"] == "u")].iloc[0]
        assert (au["ymin"], au["ymax"]) == pytest.approx((0.0, 200 / 3))
        heights = (rects["ymax"] - rects["ymin"]).groupby(rects["x"]).sum()
        assert heights.tolist() == pytest.approx([100.0, 100.0])

    def test_area_is_cell_share(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        area = (rects["xmax"] - rects["xmin"]) * (rects["ymax"] - rects["ymin"]) / 100
        assert area.tolist() == pytest.approx(rects["count"].tolist())

    def test_expected_and_residual(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        au = rects[(rects["x"] == "A") & (rects["fill"] == "u")].iloc[0]
        assert au["expected"] == pytest.approx(12.0)
        assert au["residual"] == pytest.approx(8 / np.sqrt(12))

    def test_text_positions_centered(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        assert np.allclose(rects["xtext"], (rects["xmin"] + rects["xmax"]) / 2)
        assert np.allclose(rects["ytext"], (rects["ymin"] + rects["ymax"]) / 2)


class TestChiSquare:
    """Test the independence test and its link to the residuals."""

    def test_statistic_is_sum_of_squared_residuals(self, two_by_two):
        rects = mosaic_data(two_by_two, "x", "fill")
        result = chi_square(two_by_two, "x", "fill")
        assert result["chi2"] == pytest.approx((rects["residual"] ** 2).sum())
        assert result["dof"] == 1

    def test_matches_scipy(self, two_by_two):
        table = np.array([[20, 10], [20, 50]])
        stat, p, _, _ = stats.chi2_contingency(table, correction=False)
        result = chi_square(two_by_two, "x", "fill")
        assert result["chi2"] == pytest.approx(stat)
        assert result["p_value"] == pytest.approx(p)

    def test_empty_levels_dropped(self, two_by_two):
        df = two_by_two.assign(fill=pd.Categorical(two_by_two["fill"], categories=["u", "v", "w"]))
        assert "w" in contingency_table(df, "x", "fill").columns
        assert chi_square(df, "x", "fill")["dof"] == 1

    def test_simulated_survey_dependence(self):
        chis = simulate_chis(n=5000)
        chis["age_group"] = bin_numeric(chis["age"], bins=[18, 30, 45, 60, 86],
                                        labels=["18-29", "30-44", "45-59", "60+"])
        result = chi_square(chis, "age_group", "bmi_category")
        assert result["dof"] == 9
        assert result["p_value"] < 0.01


class TestBinning:
    """Test numeric binning."""

    def test_left_closed(self):
        binned = bin_numeric(pd.Series([18, 29, 30, 85]), bins=[18, 30, 86], labels=["young", "old"])
        assert binned.tolist() == ["young", "young", "old", "old"]
        assert binned.cat.ordered
