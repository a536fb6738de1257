"""Chapter 5: Network Plots -- Edge lists, layouts, centrality."""
import streamlit as st

from coursekit.data_loader import office_edges
from coursekit.networks import (
    BUILTIN_GRAPHS, LAYOUTS, edge_table, graph_from_edges, layout, network_figure, node_table,
)
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(5)
st.markdown(
    "A network has no natural x or y. Nodes and edges are just a list of who is connected "
    "to whom; the coordinates on the page are **invented by a layout algorithm**. That makes "
    "network plots uniquely easy to over-read: two nodes close together on screen may have "
    "nothing to do with each other."
)

# ── Data ─────────────────────────────────────────────────────────────────────
source = st.sidebar.selectbox("Network", ["Office relationships"] + list(BUILTIN_GRAPHS), key="net_source")
if source == "Office relationships":
    edges_df = office_edges()
    graph = graph_from_edges(edges_df, attrs=["relation"])
else:
    edges_df = None
    graph = BUILTIN_GRAPHS[source]()

# ── 5.1 From edge list to graph ──────────────────────────────────────────────
st.header("5.1  Edges In, Graph Out")

concept_box(
    "Edge Lists",
    "The rawest form of a network is a two-column table: source and target. Extra columns "
    "become edge attributes (here: the kind of relationship). Nodes are whatever appears in "
    "either column."
)

col1, col2, col3 = st.columns(3)
col1.metric("Nodes", graph.number_of_nodes())
col2.metric("Edges", graph.number_of_edges())
col3.metric("Density", f"{2 * graph.number_of_edges() / max(1, graph.number_of_nodes() * (graph.number_of_nodes() - 1)):.3f}")

if edges_df is not None:
    st.dataframe(edges_df.head(10), use_container_width=True)

# ── 5.2 Layouts ──────────────────────────────────────────────────────────────
st.header("5.2  Same Network, Different Pictures")

col_a, col_b, col_c = st.columns(3)
with col_a:
    method = st.selectbox("Layout", LAYOUTS, key="net_layout")
with col_b:
    color_by = st.selectbox("Colour nodes by", ["degree", "betweenness"], key="net_color")
with col_c:
    seed = st.number_input("Layout seed", value=42, step=1, key="net_seed")

pos = layout(graph, method=method, seed=int(seed))
fig = network_figure(graph, pos, color_by=color_by,
                     edge_color_by="relation" if edges_df is not None else None,
                     title=f"{source} ({method} layout)")
st.plotly_chart(fig, use_container_width=True)

insight_box(
    "Change the seed of the spring layout. The picture rotates, flips and shuffles, but the "
    "degree and betweenness of every node stay exactly the same. Read the numbers, not the distances."
)

# ── 5.3 Tables behind the plot ───────────────────────────────────────────────
st.header("5.3  The Tables Behind the Plot")

st.markdown(
    "To draw a network with an ordinary plotting library, the graph is flattened into two "
    "tables: one row per edge with its start and end coordinates, and one row per node."
)

nodes = node_table(graph, pos).sort_values("betweenness", ascending=False)
col_d, col_e = st.columns(2)
with col_d:
    st.caption("Nodes")
    st.dataframe(nodes.round(3), use_container_width=True)
with col_e:
    st.caption("Edges")
    st.dataframe(edge_table(graph, pos).round(3), use_container_width=True)

warning_box(
    "Betweenness is the share of shortest paths passing through a node. A node can have "
    "few connections and still be the only bridge between two groups."
)

code_example(
    """import networkx as nx

g = nx.from_pandas_edgelist(edges, source="source", target="target", edge_attr=["relation"])
pos = nx.spring_layout(g, seed=42)
betweenness = nx.betweenness_centrality(g)
"""
)
r_original(
    """library(geomnet)
mmnet <- merge(madmen$edges, madmen$vertices,
               by.x = "Name1", by.y = "label", all = TRUE)
ggplot(data = mmnet, aes(from_id = Name1, to_id = Name2)) +
  geom_net(aes(colour = Gender), layout.alg = "kamadakawai",
           size = 2, labelon = TRUE, vjust = -0.6, ecolour = "grey60",
           directed = FALSE, fontsize = 3, ealpha = 0.5) +
  theme_net()
"""
)

st.divider()
quiz(
    "Two nodes are drawn right next to each other in a spring layout. What can you conclude?",
    ["They are directly connected", "They have the same degree",
     "Nothing for certain; positions come from the layout algorithm", "They are in different communities"],
    correct_idx=2,
    explanation="Force-directed layouts tend to place connected nodes near each other, but proximity is not evidence.",
    key="ch5_quiz1",
)

st.divider()
takeaways([
    "A network is an edge list; node positions are made up by the layout.",
    "Different layouts emphasise different structure; none is the true picture.",
    "Centrality measures give layout-independent facts about each node.",
])

st.divider()
navigation(5)
