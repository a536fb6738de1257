"""Chapter 7: Mosaic Plots -- Marimekko charts of a contingency table, coloured by residuals."""
import streamlit as st

from coursekit.data_loader import simulate_chis
from coursekit.constants import BMI_COLORS, BMI_ORDER, CHIS_RACES
from coursekit.mosaic import bin_numeric, chi_square, mosaic_data
from coursekit.plotting import bar_chart, mosaic_chart
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(7)
st.markdown(
    "A filled bar chart shows proportions within each bar but pretends every bar is equally "
    "important. A mosaic (or Marimekko) chart fixes that by making the **width** of each "
    "column proportional to its share of the data. Colour the tiles by how far each cell is "
    "from what independence would predict, and you have a chi-squared test you can see."
)

# ── Data ─────────────────────────────────────────────────────────────────────
st.sidebar.header("Survey sample")
n = st.sidebar.slider("Respondents", 1000, 20000, 10000, step=1000, key="mos_n")
races = st.sidebar.multiselect("Race", CHIS_RACES, default=CHIS_RACES, key="mos_race")
chis = simulate_chis(n=n)
chis = chis[chis["race"].isin(races)].copy()

st.caption(
    "The survey extract used in the course is not redistributable, so this chapter uses a "
    "seeded simulation with the same variables: age, BMI category, race and sex."
)

# ── 7.1 From filled bars to mosaic ───────────────────────────────────────────
st.header("7.1  Filled Bars Are Not Enough")

bin_width = st.slider("Age group width (years)", 5, 20, 10, step=5, key="mos_width")
edges = list(range(18, 86 + bin_width, bin_width))
chis["age_group"] = bin_numeric(chis["age"], bins=edges,
                                labels=[f"{lo}-{hi - 1}" for lo, hi in zip(edges[:-1], edges[1:])])

st.plotly_chart(
    bar_chart(chis, x="age_group", fill="bmi_category", position="fill", color_map=BMI_COLORS,
              title="BMI category by age group (position = fill)"),
    use_container_width=True,
)

# ── 7.2 Mosaic ───────────────────────────────────────────────────────────────
st.header("7.2  The Mosaic")

formula_box(
    "Pearson residual of a cell",
    r"r_{ij} = \frac{O_{ij} - E_{ij}}{\sqrt{E_{ij}}}, \qquad E_{ij} = \frac{n_{i\cdot}\, n_{\cdot j}}{n}",
    "Blue tiles hold more respondents than independence predicts, red tiles fewer. "
    "Squared residuals add up to the chi-squared statistic.",
)

rects = mosaic_data(chis, "age_group", "bmi_category")
st.plotly_chart(
    mosaic_chart(rects, "age_group", "bmi_category", title="Age group × BMI category"),
    use_container_width=True,
)

test = chi_square(chis, "age_group", "bmi_category")
col1, col2, col3 = st.columns(3)
col1.metric("χ²", f"{test['chi2']:.1f}")
col2.metric("Degrees of freedom", test["dof"])
col3.metric("p-value", f"{test['p_value']:.2e}")

with st.expander("Rectangle data"):
    st.dataframe(rects.round(2), use_container_width=True)

insight_box(
    "The narrow columns on the right are the oldest respondents: there are few of them, so "
    "even a striking difference in proportion there contributes little to the test. Width is "
    "the sample size made visible."
)

warning_box(
    "Residual colour depends on n. With 20,000 respondents almost every deviation is "
    "'significant'; ask whether the proportions differ by an amount that matters."
)

# ── 7.3 Another pair ─────────────────────────────────────────────────────────
st.header("7.3  Race × BMI")

rects_race = mosaic_data(chis, "race", "bmi_category")
st.plotly_chart(mosaic_chart(rects_race, "race", "bmi_category", title="Race × BMI category"),
                use_container_width=True)

code_example(
    """from scipy.stats import chi2_contingency
import pandas as pd

table = pd.crosstab(df["age_group"], df["bmi_category"])
width = table.sum(axis=1) / table.to_numpy().sum() * 100
xmax = width.cumsum(); xmin = xmax - width
heights = table.div(table.sum(axis=1), axis=0) * 100
ymax = heights.cumsum(axis=1); ymin = ymax - heights
chi2, p, dof, expected = chi2_contingency(table, correction=False)
residuals = (table - expected) / expected ** 0.5
"""
)
r_original(
    """mosaicGG <- function(data, X, FILL) {
  DF <- as.data.frame.matrix(table(data[[X]], data[[FILL]]))
  DF$groupSum <- rowSums(DF)
  DF$xmax <- cumsum(DF$groupSum)
  DF$xmin <- DF$xmax - DF$groupSum
  DF$X <- row.names(DF)
  DF$groupSum <- NULL
  DF_melted <- melt(DF, id = c("X", "xmin", "xmax"), variable.name = "FILL")
  DF_melted <- DF_melted %>% group_by(X) %>%
    mutate(ymax = cumsum(value / sum(value)), ymin = ymax - value / sum(value))
  results <- chisq.test(table(data[[FILL]], data[[X]]))
  resid <- melt(results$residuals)
  ...
  ggplot(DF_all, aes(ymin = ymin, ymax = ymax, xmin = xmin, xmax = xmax, fill = residual)) +
    geom_rect(col = "white") + scale_fill_gradient2()
}
"""
)

st.divider()
quiz(
    "In a mosaic plot, what does the width of a column represent?",
    ["The chi-squared residual", "The share of all observations in that x category",
     "The proportion of the fill level", "Nothing; widths are equal"],
    correct_idx=1,
    explanation="Widths encode the x margin; heights encode the conditional proportions.",
    key="ch7_quiz1",
)

st.divider()
takeaways([
    "Mosaic widths are the x margin; heights are proportions within each column.",
    "Colouring by Pearson residuals shows which cells drive the chi-squared statistic.",
    f"Ordered categories ({', '.join(BMI_ORDER)}) keep the tiles in a meaningful order.",
])

st.divider()
navigation(7)
