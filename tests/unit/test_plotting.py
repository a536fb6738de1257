"""
Unit tests for the shared Plotly chart builders.
"""

import pytest

import numpy as np
import pandas as pd

from coursekit.bagplot import compute_bagplot
from coursekit.constants import MTCARS_LABELS
from coursekit.mosaic import mosaic_data
from coursekit.plotting import (
    apply_common_layout,
    bagplot_chart,
    bar_chart,
    density_chart,
    dynamite_chart,
    facet_line_chart,
    histogram_chart,
    line_chart,
    mosaic_chart,
    ternary_chart,
)
from coursekit.reshape import tidy_temps
from coursekit.data_loader import simulate_atlanta_temps, simulate_chis
from coursekit.stats_helpers import group_densities, mean_sd_summary
from coursekit.ternary import simulate_soil


class TestBarChart:
    """Test bar positions."""

    def test_stack_counts(self, mtcars):
        fig = bar_chart(mtcars, "cyl_f", "am_f", position="stack")
        assert fig.layout.barmode == "relative"
        assert sum(sum(t.y) for t in fig.data) == 32

    def test_dodge(self, mtcars):
        assert bar_chart(mtcars, "cyl_f", "am_f", position="dodge").layout.barmode == "group"

    def test_fill_proportions(self, mtcars):
        fig = bar_chart(mtcars, "cyl_f", "am_f", position="fill")
        totals = {}
        for trace in fig.data:
            for x, y in zip(trace.x, trace.y):
                totals[x] = totals.get(x, 0) + y
        assert totals == pytest.approx({"4": 1.0, "6": 1.0, "8": 1.0})

    def test_bad_position(self, mtcars):
        with pytest.raises(ValueError, match="position"):
            bar_chart(mtcars, "cyl_f", "am_f", position="jitter")


class TestCharts:
    """Smoke-level checks on the remaining builders."""

    def test_common_layout(self, mtcars):
        fig = dynamite_chart(mean_sd_summary(mtcars, "cyl_f", "mpg"), "cyl_f", title="t")
        assert fig.layout.title.text == "t"
        assert fig.layout.height == 450
        assert apply_common_layout(fig, height=300).layout.height == 300

    def test_dynamite_error_bars(self, mtcars):
        summary = mean_sd_summary(mtcars, "cyl_f", "mpg")
        fig = dynamite_chart(summary, "cyl_f")
        assert np.allclose(fig.data[0].error_y.array, summary["sd"])

    def test_density_one_trace_per_group(self, mtcars):
        dens = group_densities(mtcars, "mpg", "cyl_f")
        fig = density_chart(dens, "mpg", "cyl_f", stacked=True)
        assert [t.name for t in fig.data] == ["4", "6", "8"]
        assert fig.data[0].stackgroup == "densities"

    def test_mosaic_one_rectangle_per_cell(self):
        chis = simulate_chis(n=500)
        rects = mosaic_data(chis, "race", "bmi_category")
        fig = mosaic_chart(rects, "race", "bmi_category")
        # plus the invisible colour-bar carrier
        assert len(fig.data) == len(rects) + 1

    def test_bagplot_layers(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        names = [t.name for t in bagplot_chart(bag, show_hull=True).data]
        assert names == ["Hull", "Loop", "Bag", "Data", "Outliers", "Depth median"]

    def test_ternary(self):
        fig = ternary_chart(simulate_soil(n=60), "Sand", "Silt", "Clay", color="region")
        assert {t.type for t in fig.data} == {"scatterternary"}

    def test_facets(self):
        tidy = tidy_temps(simulate_atlanta_temps(first_year=1996, last_year=2003))
        fig = facet_line_chart(tidy, "DAY", "TEMP", "YEAR", ncols=4)
        labels = {a.text for a in fig.layout.annotations}
        assert labels == {str(y) for y in range(1996, 2004)}
        assert fig.layout.height == 360

    def test_histogram_overlay(self, mtcars):
        fig = histogram_chart(mtcars, "mpg", color="cyl_f", nbins=10)
        assert len(fig.data) == 3
        assert fig.layout.barmode == "overlay"
        assert fig.layout.xaxis.title.text == MTCARS_LABELS["mpg"]

    def test_line_one_trace_per_colour(self):
        df = pd.DataFrame({"step": [1, 2, 3, 1, 2, 3], "value": [1, 3, 6, 1, 2, 3],
                           "function": ["sum"] * 3 + ["max"] * 3})
        fig = line_chart(df, "step", "value", color="function", height=300)
        assert [t.name for t in fig.data] == ["sum", "max"]
        assert fig.layout.height == 300
