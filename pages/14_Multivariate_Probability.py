"""Chapter 14: Multivariate Probability -- Summaries, MVN/MVT, normality checks, PCA and MDS."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from scipy.spatial.distance import pdist, squareform

from coursekit.data_loader import load_iris, load_mtcars
from coursekit.constants import IRIS_FEATURES, IRIS_LABELS, SPECIES_COLORS
from coursekit.errors import InsufficientDataError
from coursekit.multivariate import (
    chi2_qq, classical_mds, conditional_mvn, group_summary, mahalanobis_distances,
    mardia_test, mvn_density, pca_summary, sample_mvn, sample_mvt,
)
from coursekit.plotting import apply_common_layout, heatmap_chart, scatter_chart
from coursekit.stats_helpers import correlation_matrix
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(14)
st.markdown(
    "One variable has a mean and a variance. Several variables have a mean **vector** and a "
    "covariance **matrix**, and almost everything in this chapter is about reading, sampling "
    "from or decomposing that matrix. The iris measurements are the running example."
)

iris = load_iris()

# ── 14.1 Summaries ───────────────────────────────────────────────────────────
st.header("14.1  Summarising Several Variables")

summary = group_summary(iris, "species")
st.dataframe(
    summary.pivot(index="variable", columns="species", values="mean").round(2),
    use_container_width=True,
)
species = st.selectbox("Correlation matrix for", ["all"] + list(iris["species"].cat.categories), key="mv_species")
subset = iris if species == "all" else iris[iris["species"] == species]
st.plotly_chart(
    heatmap_chart(correlation_matrix(subset[IRIS_FEATURES]).round(2), zmid=0,
                  title=f"Correlations ({species})", height=420),
    use_container_width=True,
)

insight_box(
    "Petal length and petal width correlate at about 0.96 over all flowers, but far less within "
    "each species. Pooling groups with different means manufactures correlation."
)

# ── 14.2 Multivariate normal ─────────────────────────────────────────────────
st.header("14.2  Sampling the Multivariate Normal and t")

formula_box(
    "Bivariate normal",
    r"f(\mathbf{x}) = \frac{1}{2\pi\sqrt{|\Sigma|}}"
    r"\exp\!\left(-\tfrac12 (\mathbf{x}-\boldsymbol\mu)^\top \Sigma^{-1} (\mathbf{x}-\boldsymbol\mu)\right)",
    "The exponent is minus half the squared Mahalanobis distance: density contours are ellipses.",
)

col_a, col_b, col_c = st.columns(3)
with col_a:
    rho = st.slider("Correlation ρ", -0.95, 0.95, 0.6, step=0.05, key="mv_rho")
with col_b:
    n = st.slider("Samples", 100, 2000, 500, step=100, key="mv_n")
with col_c:
    dof = st.slider("t degrees of freedom", 1, 30, 3, key="mv_df")

mu = [0.0, 0.0]
sigma = np.array([[1.0, rho], [rho, 1.0]])
draws = pd.concat([
    pd.DataFrame(sample_mvn(mu, sigma, n), columns=["x1", "x2"]).assign(family="normal"),
    pd.DataFrame(sample_mvt(mu, sigma, dof, n), columns=["x1", "x2"]).assign(family=f"t (df={dof})"),
])
grid = np.linspace(-4, 4, 81)
gx, gy = np.meshgrid(grid, grid)
dens = mvn_density(np.column_stack([gx.ravel(), gy.ravel()]), mu, sigma).reshape(gx.shape)

fig = px.scatter(draws, x="x1", y="x2", color="family", opacity=0.5)
fig.add_trace(go.Contour(x=grid, y=grid, z=dens, showscale=False, contours_coloring="lines",
                         line=dict(width=1), colorscale="Greys", name="normal density"))
fig.update_xaxes(range=[-6, 6])
fig.update_yaxes(range=[-6, 6], scaleanchor="x")
apply_common_layout(fig, title="Same covariance shape, different tails", height=520)
st.plotly_chart(fig, use_container_width=True)

st.subheader("Conditioning")
given = st.slider("Observed x2", -3.0, 3.0, 1.0, step=0.25, key="mv_given")
cond_mean, cond_cov = conditional_mvn(mu, sigma, given_idx=[1], given_values=[given])
st.markdown(
    f"x1 | x2 = {given:.2f} ~ Normal(mean = **{cond_mean[0]:.3f}**, variance = **{cond_cov[0, 0]:.3f}**). "
    "The mean moves by ρ·x2; the variance shrinks to 1 − ρ² whatever x2 is."
)

# ── 14.3 Normality ───────────────────────────────────────────────────────────
st.header("14.3  Is It Multivariate Normal?")

concept_box(
    "Two Checks",
    "- <b>Chi-squared Q-Q plot</b>: for normal data the squared Mahalanobis distances follow a "
    "chi-squared distribution with p degrees of freedom.<br>"
    "- <b>Mardia's test</b>: multivariate skewness (should be near 0) and kurtosis (near p(p+2))."
)

qq_species = st.selectbox("Species", list(iris["species"].cat.categories), key="mv_qq_species")
X = iris.loc[iris["species"] == qq_species, IRIS_FEATURES]
qq = chi2_qq(X)
fig_qq = scatter_chart(qq, x="theoretical", y="observed",
                       labels={"theoretical": "χ²(4) quantile", "observed": "Squared Mahalanobis distance"},
                       title=f"Chi-squared Q-Q plot, {qq_species}", height=420)
lim = float(max(qq["theoretical"].max(), qq["observed"].max()))
fig_qq.add_trace(go.Scatter(x=[0, lim], y=[0, lim], mode="lines",
                            line=dict(color="grey", dash="dash"), showlegend=False))
st.plotly_chart(fig_qq, use_container_width=True)

try:
    mardia = mardia_test(X)
    col1, col2 = st.columns(2)
    col1.metric("Skewness p-value", f"{mardia['skew_p_value']:.3f}")
    col2.metric("Kurtosis p-value", f"{mardia['kurt_p_value']:.3f}")
except InsufficientDataError as exc:
    st.error(str(exc))

d2 = mahalanobis_distances(X)
st.caption(f"Most unusual {qq_species} flower: row {X.index[int(np.argmax(d2))]} "
           f"with squared distance {d2.max():.1f}.")

# ── 14.4 PCA and MDS ─────────────────────────────────────────────────────────
st.header("14.4  Reducing Dimension")

scale = st.checkbox("Standardise variables first", value=True, key="mv_scale")
pca = pca_summary(iris[IRIS_FEATURES], scale=scale)
col_l, col_r = st.columns([1, 2])
with col_l:
    st.dataframe(pd.DataFrame({"explained": pca["explained"], "cumulative": pca["cumulative"]}).round(3),
                 use_container_width=True)
    st.dataframe(pca["loadings"].rename(index=IRIS_LABELS).round(3), use_container_width=True)
with col_r:
    scores = pca["scores"].assign(species=iris["species"].astype(str))
    st.plotly_chart(
        scatter_chart(scores, x="PC1", y="PC2", color="species", color_map=SPECIES_COLORS,
                      title="Iris on the first two components", height=420),
        use_container_width=True,
    )

warning_box(
    "Without standardising, petal length (range about 6 cm) dominates sepal width (about 2 cm) "
    "just because of its units. Untick the box and watch PC1's loadings."
)

st.subheader("Classical MDS of mtcars")
mtcars = load_mtcars()
num = mtcars[["mpg", "disp", "hp", "drat", "wt", "qsec"]]
D = squareform(pdist((num - num.mean()) / num.std()))
coords = pd.DataFrame(classical_mds(D, k=2), columns=["dim1", "dim2"]).assign(
    model=mtcars["model"], cyl=mtcars["cyl_f"].astype(str))
fig_mds = px.scatter(coords, x="dim1", y="dim2", color="cyl", text="model")
fig_mds.update_traces(textposition="top center", textfont_size=9)
apply_common_layout(fig_mds, title="Cars placed so that distances match their differences", height=520)
st.plotly_chart(fig_mds, use_container_width=True)

code_example(
    """group_summary(iris, "species")
draws = sample_mvn([0, 0], [[1, 0.6], [0.6, 1]], n=500)
qq = chi2_qq(iris.loc[iris.species == "setosa", IRIS_FEATURES])
mardia_test(X)
pca = pca_summary(iris[IRIS_FEATURES], scale=True)
coords = classical_mds(squareform(pdist(scaled)), k=2)
"""
)
r_original(
    """aggregate(. ~ Species, iris, mean)
corrplot(cor(iris[, 1:4]), method = "ellipse")
mvn_samples <- rmvnorm(n = 100, mean = mu.sim, sigma = sigma.sim)
mvt_samples <- rmvt(n = 100, delta = mu.sim, sigma = sigma.sim, df = 4)
mvn(iris[iris$Species == "setosa", 1:4], mvnTest = "mardia", multivariatePlot = "qq")
iris_pca <- princomp(iris[, 1:4], cor = TRUE)
cmdscale(dist(scale(mtcars)), k = 2)
"""
)

st.divider()
quiz(
    "For four-dimensional normal data, squared Mahalanobis distances follow...",
    ["A normal distribution", "A chi-squared distribution with 4 degrees of freedom",
     "A t distribution with 4 degrees of freedom", "A uniform distribution"],
    correct_idx=1,
    explanation="A sum of four squared independent standard normals after whitening: χ²(4).",
    key="ch14_quiz1",
)

st.divider()
takeaways([
    "Mean vector and covariance matrix summarise the joint distribution's location and shape.",
    "The multivariate t shares the normal's ellipses but has heavier tails.",
    "Check multivariate normality with a chi-squared Q-Q plot and Mardia's test.",
    "Standardise before PCA when variables have different units.",
    "MDS turns a distance matrix back into a picture.",
])

st.divider()
navigation(14)
