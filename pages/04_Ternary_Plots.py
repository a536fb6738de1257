"""Chapter 4: Ternary Plots -- Three-part compositions on a triangle."""
import streamlit as st
import numpy as np
import plotly.graph_objects as go

from coursekit.constants import SOIL_PARTS
from coursekit.plotting import ternary_chart, apply_common_layout
from coursekit.ternary import (
    close_composition, composition_density, simulate_soil, ternary_to_cartesian,
)
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(4)
st.markdown(
    "Soil is sand, silt and clay. Knowing two of the percentages tells you the third, so "
    "the data live on a two-dimensional surface even though there are three columns. A "
    "ternary plot draws that surface as a triangle: each corner is 100% of one component "
    "and every point inside is a **mixture**."
)

# ── Data ─────────────────────────────────────────────────────────────────────
n_samples = st.sidebar.slider("Soil samples", 50, 1000, 300, step=50, key="tern_n")
seed = st.sidebar.number_input("Seed", value=42, step=1, key="tern_seed")
soil = simulate_soil(n=n_samples, seed=int(seed))

# ── 4.1 Closure ──────────────────────────────────────────────────────────────
st.header("4.1  Closing a Composition")

formula_box(
    "Closure",
    r"\mathcal{C}(x_1, x_2, x_3) = \left(\frac{x_1}{\sum x_i}, \frac{x_2}{\sum x_i}, \frac{x_3}{\sum x_i}\right)",
    "Rounded lab percentages rarely add to exactly 100. Closing rescales each row to sum to 1.",
)

closed = close_composition(soil, SOIL_PARTS)
col1, col2 = st.columns(2)
col1.dataframe(soil.head(8), use_container_width=True)
col2.dataframe(closed.head(8).round(3), use_container_width=True)

# ── 4.2 Ternary scatter ──────────────────────────────────────────────────────
st.header("4.2  The Triangle")

concept_box(
    "Reading a Ternary Plot",
    "Pick a corner, say Sand. Lines parallel to the opposite edge are lines of constant sand "
    "content: 0% on that edge, 100% at the corner. A point's three coordinates are read off "
    "three such line families, and they always add to 100%."
)

color_by = st.radio("Colour by", ["region", "density"], horizontal=True, key="tern_color")
if color_by == "density":
    closed["density"] = composition_density(closed, SOIL_PARTS)
    fig = ternary_chart(closed, a="Sand", b="Silt", c="Clay", color="density", continuous=True,
                        title="Soil compositions coloured by kernel density")
else:
    fig = ternary_chart(closed, a="Sand", b="Silt", c="Clay", color="region",
                        title="Soil compositions by region")
st.plotly_chart(fig, use_container_width=True)

insight_box(
    "The density view finds the same three clusters the region labels give you, without "
    "being told about them. The kernel is estimated in triangle coordinates, so closeness "
    "on the page is closeness in composition."
)

# ── 4.3 Under the hood ───────────────────────────────────────────────────────
st.header("4.3  Under the Hood: Triangle Coordinates")

formula_box(
    "From (a, b, c) to the plane",
    r"x = \tfrac{1}{2}(2c + a), \qquad y = \tfrac{\sqrt{3}}{2}\, a",
    "With a at the top vertex, b at bottom-left and c at bottom-right.",
)

x, y = ternary_to_cartesian(closed["Sand"], closed["Silt"], closed["Clay"])
fig_xy = go.Figure()
fig_xy.add_trace(go.Scatter(x=[0, 1, 0.5, 0], y=[0, 0, np.sqrt(3) / 2, 0], mode="lines",
                            line=dict(color="black"), name="Triangle"))
fig_xy.add_trace(go.Scatter(x=x, y=y, mode="markers", marker=dict(size=5, opacity=0.6, color="#457B9D"),
                            name="Samples"))
fig_xy.update_layout(yaxis=dict(scaleanchor="x"), xaxis_title="x", yaxis_title="y")
apply_common_layout(fig_xy, title="The same points, plain x / y", height=450)
st.plotly_chart(fig_xy, use_container_width=True)

warning_box(
    "Do not compute ordinary correlations between parts of a composition. Because they sum "
    "to a constant, more sand forces less of something else, and negative correlation appears "
    "whether or not there is any real relationship."
)

code_example(
    """import plotly.express as px

px.scatter_ternary(soil, a="Sand", b="Silt", c="Clay", color="region")
"""
)
r_original(
    """library(ggtern)
ggtern(africa, aes(x = Sand, y = Silt, z = Clay)) +
  geom_point(shape = 16, alpha = 0.2)
ggtern(africa, aes(x = Sand, y = Silt, z = Clay)) +
  stat_density_tern(geom = "polygon", aes(fill = ..level.., alpha = ..level..)) +
  guides(fill = FALSE)
"""
)

st.divider()
quiz(
    "A point sits exactly on the edge opposite the Clay corner. What is its clay content?",
    ["0%", "33%", "50%", "100%"],
    correct_idx=0,
    explanation="Each edge is where the opposite component is absent.",
    key="ch4_quiz1",
)

st.divider()
takeaways([
    "Compositions carry one fewer degree of freedom than they have columns.",
    "Close (rescale) compositions before plotting or modelling them.",
    "Ternary plots are 2-D scatter plots in disguise; densities can be estimated in those coordinates.",
])

st.divider()
navigation(4)
