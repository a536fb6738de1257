"""
Unit tests for figure inspection and post-hoc editing helpers.
"""

import pytest

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from coursekit.figure_internals import (
    add_panel_label,
    data_ranges,
    figure_outline,
    restyle_traces,
    trace_summary,
    viewport_domains,
)


@pytest.fixture
def two_trace_figure():
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=[1, 2, 3], y=[4, 5, 6], name="a"))
    fig.add_trace(go.Bar(x=["p", "q"], y=[10, 20], name="b"))
    return fig


class TestInspection:
    """Test outline, trace and range summaries."""

    def test_outline_skips_template(self, mtcars):
        fig = px.scatter(mtcars, x="wt", y="mpg")
        paths = figure_outline(fig)["path"].tolist()
        assert "layout.xaxis.title.text" in paths
        assert not any(p.startswith("layout.template") for p in paths)

    def test_trace_summary(self, two_trace_figure):
        summary = trace_summary(two_trace_figure)
        assert summary["type"].tolist() == ["scatter", "bar"]
        assert summary["n_points"].tolist() == [3, 2]
        assert summary["visible"].tolist() == [True, True]

    def test_data_ranges(self, two_trace_figure):
        ranges = data_ranges(two_trace_figure)
        assert ranges.loc[0, ["x_min", "x_max", "y_min", "y_max"]].tolist() == [1, 3, 4, 6]
        # categorical x has no numeric range
        assert np.isnan(ranges.loc[1, "x_min"])
        assert ranges.loc[1, "y_max"] == 20


class TestEditing:
    """Test restyling and annotations on built figures."""

    def test_restyle_by_name(self, two_trace_figure):
        changed = restyle_traces(two_trace_figure, dict(name="a"), marker_color="red")
        assert changed == 1
        assert two_trace_figure.data[0].marker.color == "red"

    def test_restyle_all(self, two_trace_figure):
        assert restyle_traces(two_trace_figure, opacity=0.5) == 2

    def test_panel_label(self, two_trace_figure):
        add_panel_label(two_trace_figure, "A", size=18, color="grey")
        ann = two_trace_figure.layout.annotations[0]
        assert ann.text == "A"
        assert ann.xref == "paper"
        assert ann.font.size == 18


class TestViewports:
    """Test panel domains."""

    def test_two_by_two(self):
        cells = viewport_domains(2, 2, spacing=0.1)
        assert len(cells) == 4
        first = cells.iloc[0]
        assert (first["x0"], first["x1"], first["y0"], first["y1"]) == pytest.approx((0.0, 0.45, 0.55, 1.0))
        last = cells.iloc[-1]
        assert (last["x1"], last["y0"]) == pytest.approx((1.0, 0.0))

    def test_invalid_grid(self):
        with pytest.raises(ValueError):
            viewport_domains(0, 2)
