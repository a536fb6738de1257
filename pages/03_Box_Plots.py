"""Chapter 3: Box Plots -- Binning a continuous x, variable width boxes, Tukey fences."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from coursekit.data_loader import load_diamonds, simulate_diamonds
from coursekit.errors import DatasetUnavailableError
from coursekit.plotting import box_chart, apply_common_layout
from coursekit.stats_helpers import descriptive_stats
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, dataset_notice, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(3)
st.markdown(
    "Box plots compress a distribution into five numbers and a handful of dots. With a "
    "categorical x that is straightforward. With a *continuous* x -- carat, say -- you first "
    "have to cut it into groups, and **how you cut it** decides what the plot can show."
)

# ── Load data ────────────────────────────────────────────────────────────────
try:
    diamonds = load_diamonds()
except DatasetUnavailableError as exc:
    dataset_notice(exc)
    diamonds = simulate_diamonds()

# ── 3.1 Fences ───────────────────────────────────────────────────────────────
st.header("3.1  Whiskers and Fences")

formula_box(
    "Tukey's fences",
    r"[\,Q_1 - 1.5\,\mathrm{IQR},\; Q_3 + 1.5\,\mathrm{IQR}\,]",
    "Whiskers reach the most extreme observation inside the fences; anything outside is drawn as a point.",
)

stats_price = descriptive_stats(diamonds["price"])
col1, col2, col3, col4 = st.columns(4)
col1.metric("Median price", f"${stats_price['median']:,.0f}")
col2.metric("IQR", f"${stats_price['iqr']:,.0f}")
col3.metric("Upper fence", f"${stats_price['q75'] + 1.5 * stats_price['iqr']:,.0f}")
col4.metric("Skewness", f"{stats_price['skewness']:.2f}")

# ── 3.2 Cutting a continuous x ───────────────────────────────────────────────
st.header("3.2  Cutting Carat into Groups")

concept_box(
    "Three Ways to Cut",
    "- <b>cut_interval</b>: n groups of equal <i>range</i>. Group sizes can be wildly unequal.<br>"
    "- <b>cut_number</b>: n groups with (roughly) equal <i>counts</i>. Ranges differ.<br>"
    "- <b>cut_width</b>: groups of a fixed width, as many as needed."
)

col_a, col_b, col_c = st.columns(3)
with col_a:
    method = st.radio("Method", ["cut_interval", "cut_number", "cut_width"], key="box_method")
with col_b:
    n_groups = st.slider("Groups (interval / number)", 3, 12, 6, key="box_n")
with col_c:
    width = st.slider("Width (carat)", 0.1, 1.0, 0.25, step=0.05, key="box_width")

carat = diamonds["carat"]
if method == "cut_interval":
    groups = pd.cut(carat, bins=n_groups)
elif method == "cut_number":
    groups = pd.qcut(carat, q=n_groups, duplicates="drop")
else:
    edges = np.arange(np.floor(carat.min() / width) * width, carat.max() + width, width)
    groups = pd.cut(carat, bins=edges, include_lowest=True)

binned = diamonds.assign(carat_group=groups.astype(str))
order = [str(c) for c in groups.cat.categories]
sizes = binned["carat_group"].value_counts().reindex(order).fillna(0)

varwidth = st.checkbox("Box width proportional to √n (varwidth)", value=True, key="box_varwidth")
fig = go.Figure()
max_sqrt = np.sqrt(sizes.max()) if sizes.max() > 0 else 1
for label in order:
    sub = binned.loc[binned["carat_group"] == label, "price"]
    if sub.empty:
        continue
    fig.add_trace(go.Box(
        y=sub, name=label, marker_color="#457B9D", boxpoints="outliers",
        width=0.8 * np.sqrt(len(sub)) / max_sqrt if varwidth else 0.6,
        showlegend=False,
    ))
fig.update_layout(xaxis_title="Carat group", yaxis_title="Price (USD)", yaxis_type="log")
apply_common_layout(fig, title=f"Price by carat ({method})", height=500)
st.plotly_chart(fig, use_container_width=True)

st.dataframe(sizes.rename("n").to_frame().T, use_container_width=True)

insight_box(
    "With cut_interval most diamonds land in the first two groups and the top groups hold a "
    "handful of stones, so their boxes are computed from very little. varwidth makes that "
    "imbalance visible; cut_number removes it."
)

# ── 3.3 Categorical x ────────────────────────────────────────────────────────
st.header("3.3  Price by Cut")

st.plotly_chart(
    box_chart(diamonds, x="cut", y="price", color="cut", title="Price by cut quality"),
    use_container_width=True,
)

warning_box(
    "Better cuts do not look more expensive here, because cut is confounded with size: "
    "the largest stones are more often cut for weight than for brilliance. A box plot "
    "of one variable against another cannot adjust for a third."
)

code_example(
    """import pandas as pd
import plotly.express as px

diamonds["carat_group"] = pd.qcut(diamonds["carat"], q=6).astype(str)   # cut_number
px.box(diamonds, x="carat_group", y="price", log_y=True)
"""
)
r_original(
    """ggplot(diamonds, aes(carat, price)) +
  geom_boxplot(aes(group = cut_width(carat, 0.25)), varwidth = TRUE)
ggplot(diamonds, aes(carat, price)) +
  geom_boxplot(aes(group = cut_number(carat, 10)))
"""
)

st.divider()
quiz(
    "Which cut gives every box (roughly) the same number of diamonds?",
    ["cut_interval", "cut_number", "cut_width"],
    correct_idx=1,
    explanation="cut_number splits at quantiles, so each group holds about n / k observations.",
    key="ch3_quiz1",
)

st.divider()
takeaways([
    "A box plot of a continuous x needs a grouping, and the grouping is an analytic choice.",
    "Equal-range groups can be nearly empty; varwidth exposes this.",
    "Equal-count groups give every box the same statistical footing.",
])

st.divider()
navigation(3)
