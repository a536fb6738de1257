"""
Unit tests for graph construction, layouts and network figures.
"""

import pytest

import networkx as nx

from coursekit.data_loader import office_edges
from coursekit.networks import (
    BUILTIN_GRAPHS,
    LAYOUTS,
    edge_table,
    graph_from_edges,
    layout,
    network_figure,
    node_table,
)


@pytest.fixture
def office():
    return graph_from_edges(office_edges(), attrs="relation")


class TestGraphs:
    """Test graph construction."""

    def test_office_graph(self, office):
        assert office.number_of_nodes() == 14
        assert office.number_of_edges() == 20
        assert office.edges["Ada", "Brook"]["relation"] == "mentor"

    def test_builtin_graphs(self):
        florentine = BUILTIN_GRAPHS["Florentine families"]()
        karate = BUILTIN_GRAPHS["Karate club"]()
        assert florentine.number_of_nodes() == 15
        assert karate.number_of_nodes() == 34


class TestLayouts:
    """Test node placement."""

    @pytest.mark.parametrize("method", LAYOUTS)
    def test_every_node_placed(self, office, method):
        pos = layout(office, method)
        assert set(pos) == set(office.nodes())

    def test_spring_is_seeded(self, office):
        a = layout(office, "spring", seed=7)
        b = layout(office, "spring", seed=7)
        assert all((a[n] == b[n]).all() for n in office.nodes())

    def test_unknown_layout(self, office):
        with pytest.raises(ValueError, match="unknown layout"):
            layout(office, "hairball")


class TestTables:
    """Test the node and edge tables behind the figure."""

    def test_edge_table(self, office):
        pos = layout(office, "circular")
        edges = edge_table(office, pos)
        assert len(edges) == 20
        assert {"source", "target", "x", "y", "xend", "yend", "relation"} <= set(edges.columns)
        row = edges.iloc[0]
        assert (row["x"], row["y"]) == tuple(pos[row["source"]])

    def test_node_table(self, office):
        nodes = node_table(office, layout(office, "circular"))
        assert len(nodes) == 14
        assert nodes["degree"].sum() == 2 * office.number_of_edges()
        assert nodes["betweenness"].between(0, 1).all()

    def test_empty_graph_edges(self):
        graph = nx.Graph()
        graph.add_node("solo")
        edges = edge_table(graph, {"solo": (0.0, 0.0)})
        assert edges.empty
        assert list(edges.columns) == ["source", "target", "x", "y", "xend", "yend"]


class TestFigure:
    """Test the Plotly rendering."""

    def test_plain_edges(self, office):
        fig = network_figure(office, layout(office, "circular"))
        # one edge trace plus one node trace
        assert len(fig.data) == 2
        assert fig.data[-1].mode == "markers+text"

    def test_edges_coloured_by_relation(self, office):
        fig = network_figure(office, layout(office, "circular"), edge_color_by="relation")
        assert len(fig.data) == 4
        assert {t.name for t in fig.data[:-1]} == {"mentor", "peer", "romance"}

    def test_colour_by_betweenness(self, office):
        fig = network_figure(office, layout(office, "circular"), color_by="betweenness")
        assert fig.data[-1].marker.colorbar.title.text == "Betweenness"
