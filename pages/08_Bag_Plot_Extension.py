"""Chapter 8: Bag Plot Extension -- Halfspace depth and the hull / bag / loop layers."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.express as px

from coursekit.bagplot import compute_bagplot, halfspace_depth, stat_bag, stat_hull, stat_loop, stat_outliers
from coursekit.data_loader import load_iris, load_mtcars
from coursekit.constants import IRIS_FEATURES, IRIS_LABELS, MTCARS_LABELS
from coursekit.errors import InsufficientDataError
from coursekit.plotting import bagplot_chart, apply_common_layout
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(8)
st.markdown(
    "The box plot has no obvious two-dimensional version: there is no single way to sort "
    "points in the plane. The bag plot solves this with **depth** -- how buried a point is "
    "inside the cloud. The deepest point plays the median, the deepest half of the data forms "
    "the bag, and inflating the bag gives a fence for outliers. In the course, each of those "
    "pieces became its own custom statistical layer; here each is a function returning a table."
)

# ── Data ─────────────────────────────────────────────────────────────────────
source = st.sidebar.radio("Data", ["mtcars", "iris"], key="bag_source")
if source == "mtcars":
    df = load_mtcars()
    options = ["wt", "mpg", "hp", "disp", "qsec"]
    labels = MTCARS_LABELS
    default_x, default_y = "wt", "mpg"
else:
    df = load_iris()
    options = IRIS_FEATURES
    labels = IRIS_LABELS
    default_x, default_y = "sepal_length", "sepal_width"

col_a, col_b, col_c = st.columns(3)
with col_a:
    x_var = st.selectbox("x", options, index=options.index(default_x),
                         format_func=lambda c: labels.get(c, c), key="bag_x")
with col_b:
    y_var = st.selectbox("y", options, index=options.index(default_y),
                         format_func=lambda c: labels.get(c, c), key="bag_y")
with col_c:
    factor = st.slider("Fence factor", 1.5, 4.0, 3.0, step=0.5, key="bag_factor")

points = df[[x_var, y_var]].dropna()

# ── 8.1 Depth ────────────────────────────────────────────────────────────────
st.header("8.1  Halfspace Depth")

formula_box(
    "Tukey depth",
    r"D(p) = \min_{\lVert u \rVert = 1} \#\{\, x_i : u^\top (x_i - p) \ge 0 \,\}",
    "Draw every line through p. The depth is the smallest number of points on one side. "
    "Points on the edge of the cloud have depth 1; the centre is as deep as it gets.",
)

depth = halfspace_depth(points)
fig_depth = px.scatter(points.assign(depth=depth), x=x_var, y=y_var, color="depth",
                       color_continuous_scale="Viridis", labels=labels)
apply_common_layout(fig_depth, title="Every point coloured by its depth", height=430)
st.plotly_chart(fig_depth, use_container_width=True)

# ── 8.2 The bag plot ─────────────────────────────────────────────────────────
st.header("8.2  Hull, Bag, Loop")

concept_box(
    "Four Layers",
    "- <b>hull</b>: the convex hull of all the data.<br>"
    "- <b>bag</b>: the region holding the deepest 50% of points, interpolated between two "
    "depth contours.<br>"
    "- <b>fence</b> (not drawn): the bag blown up by the fence factor around the depth median.<br>"
    "- <b>loop</b>: the convex hull of every point inside the fence.<br>"
    "- <b>outliers</b>: the points outside the fence."
)

show_hull = st.checkbox("Show the convex hull", value=False, key="bag_hull")
try:
    bag = compute_bagplot(points, factor=factor)
except InsufficientDataError as exc:
    st.error(str(exc))
    st.stop()

st.plotly_chart(
    bagplot_chart(bag, labels=(x_var, y_var), show_hull=show_hull,
                  title=f"Bag plot of {labels.get(y_var, y_var)} vs {labels.get(x_var, x_var)}"),
    use_container_width=True,
)

inside_bag = bag.inside(bag.data).mean()
col1, col2, col3 = st.columns(3)
col1.metric("Points", len(bag.data))
col2.metric("Share inside bag", f"{inside_bag:.0%}")
col3.metric("Outliers", bag.n_outliers)

insight_box(
    "Try mtcars with hp against wt. The Maserati Bora sits far above the cloud and is flagged; "
    "lower the fence factor and the heavy Lincoln and Cadillac join it."
)

# ── 8.3 Layer tables ─────────────────────────────────────────────────────────
st.header("8.3  One Table per Layer")

st.markdown(
    "Each layer is computed by a small function that takes the raw (x, y) data and returns "
    "the coordinates to draw. This is the shape a custom statistical layer has in the "
    "grammar of graphics: data in, data out, drawing left to the geometry."
)

layer = st.radio("Layer", ["hull", "bag", "loop", "outliers"], horizontal=True, key="bag_layer")
layer_fn = {"hull": stat_hull, "bag": stat_bag, "loop": stat_loop, "outliers": stat_outliers}[layer]
layer_df = layer_fn(points) if layer == "hull" else layer_fn(points, factor=factor)
st.dataframe(pd.DataFrame(layer_df).round(3), use_container_width=True)
st.caption(f"Depth median: ({bag.center[0]:.3f}, {bag.center[1]:.3f}); maximum depth {int(np.max(bag.depth))}.")

warning_box(
    "Depth is computed over a finite set of directions, so it is an approximation. With a "
    "few hundred directions the error is far below what you could see on the plot."
)

code_example(
    """from coursekit.bagplot import compute_bagplot

bag = compute_bagplot(mtcars[["wt", "mpg"]], factor=3)
bag.center, bag.bag, bag.loop, bag.outliers
"""
)
r_original(
    """library(aplpack)
StatBag <- ggproto("Statbag", Stat,
  compute_group = function(data, scales, prop = 0.5) {
    bag <- compute.bagplot(x = data$x, y = data$y)
    data.frame(bag$hull.bag)
  },
  required_aes = c("x", "y"))
stat_bag <- function(mapping = NULL, data = NULL, geom = "polygon",
                     position = "identity", na.rm = FALSE, show.legend = NA,
                     inherit.aes = TRUE, loop = FALSE, ...) {
  layer(stat = StatBag, data = data, mapping = mapping, geom = geom,
        position = position, show.legend = show.legend, inherit.aes = inherit.aes,
        params = list(na.rm = na.rm, loop = loop, ...))
}
ggplot(test_data, aes(x = x, y = y)) +
  stat_bag(prop = 1, fill = "#2B5CA3") +
  stat_bag(prop = 0.5, fill = "#66BBEE") +
  geom_point()
"""
)

st.divider()
quiz(
    "What is the depth of a point on the convex hull of the data?",
    ["0", "1", "n / 2", "It depends on the fence factor"],
    correct_idx=1,
    explanation="Some line through a hull vertex has no other data point on its outer side, so only the point itself counts.",
    key="ch8_quiz1",
)

st.divider()
takeaways([
    "Halfspace depth ranks points from the outside in; the deepest point is the 2-D median.",
    "The bag holds the deepest half; the fence is the bag inflated around the median.",
    "Each bag plot layer is a pure data -> coordinates function, which is exactly what a custom stat is.",
])

st.divider()
navigation(8)
