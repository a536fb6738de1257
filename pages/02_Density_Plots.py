"""Chapter 2: Density Plots -- Bandwidth, multiple groups, weighted densities, violins."""
import streamlit as st
import numpy as np
import plotly.express as px
import plotly.graph_objects as go
from scipy import stats as sp_stats

from coursekit.data_loader import load_iris, load_mtcars
from coursekit.plotting import density_chart, apply_common_layout
from coursekit.constants import IRIS_FEATURES, IRIS_LABELS, SPECIES_COLORS, CYL_COLORS
from coursekit.stats_helpers import group_densities, ks_test
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(2)
st.markdown(
    "A density plot is a histogram that forgot about bins. Instead of counting points in "
    "buckets, it drops a little bell curve on every observation and adds them up. The result "
    "is smooth, easy to overlay, and -- because it depends on a **bandwidth** you choose -- "
    "just as capable of misleading you as a badly binned histogram."
)

# ── Load data ────────────────────────────────────────────────────────────────
iris = load_iris()
mtcars = load_mtcars()

# ── 2.1 One density ──────────────────────────────────────────────────────────
st.header("2.1  Kernel Density Estimation")

formula_box(
    "Gaussian KDE",
    r"\hat f_h(x) = \frac{1}{n h} \sum_{i=1}^{n} \phi\!\left(\frac{x - x_i}{h}\right)",
    "φ is the standard normal density and h the bandwidth. Small h: a wiggly curve that "
    "chases every point. Large h: one smooth hill that can hide two real modes.",
)

col_a, col_b = st.columns(2)
with col_a:
    feature = st.selectbox("Measurement", IRIS_FEATURES,
                           format_func=lambda c: IRIS_LABELS[c], key="dens_feat")
with col_b:
    bw_mult = st.slider("Bandwidth multiplier (× Scott's rule)", 0.1, 3.0, 1.0, step=0.1, key="dens_bw")

values = iris[feature].to_numpy()
base_kde = sp_stats.gaussian_kde(values)
kde = sp_stats.gaussian_kde(values, bw_method=base_kde.factor * bw_mult)
grid = np.linspace(values.min() - 1, values.max() + 1, 400)

fig = go.Figure()
fig.add_trace(go.Histogram(x=values, histnorm="probability density", nbinsx=30,
                           marker_color="#A8DADC", opacity=0.6, name="Histogram"))
fig.add_trace(go.Scatter(x=grid, y=kde(grid), mode="lines", line=dict(color="#1D3557", width=2),
                         name=f"KDE (h = {kde.factor * values.std(ddof=1):.3f})"))
fig.add_trace(go.Scatter(x=values, y=np.zeros_like(values), mode="markers",
                         marker=dict(symbol="line-ns-open", size=10, color="#1D3557"), name="Rug"))
fig.update_layout(xaxis_title=IRIS_LABELS[feature], yaxis_title="Density")
apply_common_layout(fig, title=f"Density of {IRIS_LABELS[feature]}", height=450)
st.plotly_chart(fig, use_container_width=True)

insight_box(
    "Petal length is the classic case: at the default bandwidth you see two humps (setosa "
    "versus the rest). Push the multiplier past 2 and the gap melts into a single lump."
)

# ── 2.2 Several groups ───────────────────────────────────────────────────────
st.header("2.2  One Curve per Group")

weighted = st.toggle("Weight each curve by its group's share of the data", value=False, key="dens_weighted")
stacked = st.toggle("Stack the curves", value=False, key="dens_stacked")

dens = group_densities(iris, feature, "species", bw=base_kde.factor * bw_mult, weighted=weighted)
st.plotly_chart(
    density_chart(dens, feature, "species", stacked=stacked, color_map=SPECIES_COLORS,
                  title=f"{IRIS_LABELS[feature]} by species"),
    use_container_width=True,
)

concept_box(
    "Why Weighting Matters",
    "Each unweighted curve integrates to 1, whatever its group size. That is fine when the "
    "groups are comparable in size, and misleading when they are not. In mtcars there are "
    "14 eight-cylinder cars and 7 six-cylinder cars; unweighted, both curves get the same "
    "area. Weighted by group share, the curves add up to the density of all cars together, "
    "which is what stacking implicitly promises."
)

mt_dens = group_densities(mtcars, "mpg", "cyl_f", weighted=True)
mt_dens_raw = group_densities(mtcars, "mpg", "cyl_f", weighted=False)
col_c, col_d = st.columns(2)
with col_c:
    st.plotly_chart(density_chart(mt_dens_raw, "mpg", "cyl_f", color_map=CYL_COLORS,
                                  title="mtcars mpg -- unweighted", height=380),
                    use_container_width=True)
with col_d:
    st.plotly_chart(density_chart(mt_dens, "mpg", "cyl_f", stacked=True, color_map=CYL_COLORS,
                                  title="mtcars mpg -- weighted & stacked", height=380),
                    use_container_width=True)

warning_box(
    "Stacking unweighted densities gives a total area equal to the number of groups, not 1. "
    "The top edge of that stack is not a density of anything."
)

# ── 2.3 Violins ──────────────────────────────────────────────────────────────
st.header("2.3  Violin Plots")

st.markdown(
    "A violin is a density plot turned on its side and mirrored, one per group. "
    "It keeps the shape information a box plot throws away."
)

fig_v = px.violin(iris, x="species", y=feature, color="species", box=True, points="all",
                  color_discrete_map=SPECIES_COLORS, labels=IRIS_LABELS)
apply_common_layout(fig_v, title=f"{IRIS_LABELS[feature]}: violins", height=480)
st.plotly_chart(fig_v, use_container_width=True)

st.markdown("Two violins look different, but are the distributions really different?")
col_k1, col_k2 = st.columns(2)
with col_k1:
    sp_a = st.selectbox("Species A", list(iris["species"].cat.categories), index=1, key="ks_a")
with col_k2:
    sp_b = st.selectbox("Species B", list(iris["species"].cat.categories), index=2, key="ks_b")
ks = ks_test(iris.loc[iris["species"] == sp_a, feature], iris.loc[iris["species"] == sp_b, feature])
st.metric(f"Two-sample KS test: {sp_a} vs {sp_b}", f"D = {ks['ks_stat']:.3f}",
          f"p = {ks['p_value']:.2g}", delta_color="off")
insight_box(
    "The KS statistic is the largest vertical gap between the two empirical CDFs. It compares "
    "whole shapes, the same thing the violins show, rather than just the means."
)

# ── Code ─────────────────────────────────────────────────────────────────────
code_example(
    """from scipy import stats
import numpy as np

kde = stats.gaussian_kde(iris["petal_length"])
grid = np.linspace(0, 8, 400)
density = kde(grid)

# weighted: scale each group's curve by its share of rows
for name, g in mtcars.groupby("cyl"):
    curve = stats.gaussian_kde(g["mpg"])(grid) * len(g) / len(mtcars)
"""
)
r_original(
    """ggplot(iris, aes(x = Petal.Length)) +
  geom_density(bw = "nrd0", adjust = 1) + geom_rug()

mtcars$count <- 1
ggplot(mtcars, aes(x = mpg, fill = factor(cyl))) +
  geom_density(aes(weight = count / sum(count)), position = "stack", alpha = 0.6)
"""
)

st.divider()
quiz(
    "Doubling the bandwidth of a KDE will typically...",
    ["Reveal more modes", "Make the curve smoother and flatten narrow peaks",
     "Change the total area under the curve", "Have no visible effect"],
    correct_idx=1,
    explanation="A wider kernel averages over more neighbours; peaks spread out but the area stays 1.",
    key="ch2_quiz1",
)

st.divider()
takeaways([
    "A KDE is a sum of kernels; the bandwidth is the choice that matters.",
    "Unweighted group densities each have area 1; weight them by group share before stacking.",
    "Violins show distribution shape per group; add the box for the summary numbers.",
])

st.divider()
navigation(2)
