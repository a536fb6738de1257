"""Network plots: build a graph, lay it out, flatten it into node and edge tables."""
import networkx as nx
import numpy as np
import pandas as pd
import plotly.graph_objects as go

LAYOUTS = ("spring", "circular", "kamada_kawai", "shell")

BUILTIN_GRAPHS = {
    "Florentine families": nx.florentine_families_graph,
    "Karate club": nx.karate_club_graph,
}


def graph_from_edges(edges, source="source", target="target", attrs=None):
    """Undirected graph from an edge-list DataFrame, keeping attrs as edge attributes."""
    return nx.from_pandas_edgelist(edges, source=source, target=target, edge_attr=attrs)


def layout(graph, method="spring", seed=42):
    """Node positions for one of the supported layout algorithms."""
    if method == "spring":
        return nx.spring_layout(graph, seed=seed)
    if method == "circular":
        return nx.circular_layout(graph)
    if method == "kamada_kawai":
        return nx.kamada_kawai_layout(graph)
    if method == "shell":
        return nx.shell_layout(graph)
    raise ValueError(f"unknown layout {method!r}; choose one of {LAYOUTS}")


def edge_table(graph, pos):
    """One row per edge with start and end coordinates (x, y, xend, yend) plus attributes."""
    rows = []
    for u, v, data in graph.edges(data=True):
        rows.append({
            "source": u, "target": v,
            "x": pos[u][0], "y": pos[u][1],
            "xend": pos[v][0], "yend": pos[v][1],
            **data,
        })
    return pd.DataFrame(rows, columns=None if rows else ["source", "target", "x", "y", "xend", "yend"])


def node_table(graph, pos):
    """One row per node with coordinates, degree and betweenness centrality."""
    betweenness = nx.betweenness_centrality(graph)
    return pd.DataFrame([
        {
            "node": n,
            "x": pos[n][0],
            "y": pos[n][1],
            "degree": graph.degree(n),
            "betweenness": betweenness[n],
        }
        for n in graph.nodes()
    ])


def network_figure(graph, pos, color_by="degree", edge_color_by=None, title=None, height=550):
    """Plotly figure of the network: grey edges, labelled nodes coloured by a metric."""
    edges = edge_table(graph, pos)
    nodes = node_table(graph, pos)
    fig = go.Figure()

    groups = [(None, edges)] if edge_color_by is None or edge_color_by not in edges else edges.groupby(edge_color_by)
    for name, sub in groups:
        xs = np.column_stack([sub["x"], sub["xend"], np.full(len(sub), np.nan)]).ravel()
        ys = np.column_stack([sub["y"], sub["yend"], np.full(len(sub), np.nan)]).ravel()
        fig.add_trace(go.Scatter(
            x=xs, y=ys, mode="lines", hoverinfo="skip",
            line=dict(width=1.2, color="#AAAAAA" if name is None else None),
            name=str(name) if name is not None else "edges",
            showlegend=name is not None,
        ))

    fig.add_trace(go.Scatter(
        x=nodes["x"], y=nodes["y"], mode="markers+text",
        text=nodes["node"].astype(str), textposition="top center",
        marker=dict(size=10 + 4 * nodes["degree"], color=nodes[color_by],
                    colorscale="Viridis", showscale=True,
                    colorbar=dict(title=color_by.title()), line=dict(width=1, color="white")),
        customdata=nodes[["degree", "betweenness"]],
        hovertemplate="%{text}<br>degree %{customdata[0]}<br>betweenness %{customdata[1]:.3f}<extra></extra>",
        showlegend=False,
    ))
    fig.update_layout(
        template="plotly_white", height=height, title=title, title_x=0.5,
        xaxis=dict(visible=False), yaxis=dict(visible=False, scaleanchor="x"),
        margin=dict(t=60, b=20, l=20, r=20),
    )
    return fig
