"""Chapter 11: Writing Functions -- When to write one, naming, arguments, refactoring."""
import streamlit as st
import numpy as np
import pandas as pd

from coursekit.data_loader import load_mtcars
from coursekit.errors import LengthMismatchError
from coursekit.function_style import (
    both_na, col_mean, col_median, col_sd, col_summary, naming_issues, replace_missings, rescale01,
)
from coursekit.plotting import histogram_chart
from coursekit.stats_helpers import bootstrap_ci, mean_ci
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(11)
st.markdown(
    "The rule of thumb from the course: once you have copied and pasted a block of code "
    "**twice**, it is time to write a function. This chapter starts with a one-liner that "
    "gets copied everywhere, turns it into a function, and then looks at what makes a "
    "function pleasant to call: its name, its arguments and what it does at the edges."
)

mtcars = load_mtcars()

# ── 11.1 rescale01 ───────────────────────────────────────────────────────────
st.header("11.1  From Snippet to Function")

formula_box(
    "Rescale to [0, 1]",
    r"\frac{x - \min(x)}{\max(x) - \min(x)}",
    "Written out four times for four columns, a typo in one copy is just a matter of time.",
)

col_a, col_b = st.columns(2)
with col_a:
    raw = st.text_input("Values (comma separated; try inf, nan)", "1, 2, 3, nan, 10, inf", key="fn_values")
with col_b:
    finite = st.checkbox("Map ±inf to 0/1 (finite = True)", value=True, key="fn_finite")

try:
    x = np.array([float(v) for v in raw.split(",") if v.strip()])
    result = rescale01(x, finite=finite)
    st.dataframe(pd.DataFrame({"x": x, "rescale01(x)": result}).T, use_container_width=True)
except ValueError:
    st.error("Could not parse the values as numbers.")

st.dataframe(
    mtcars[["mpg", "hp", "wt"]].apply(rescale01).head(6).round(3),
    use_container_width=True,
)

scaled = mtcars[["mpg", "hp", "wt"]].apply(rescale01).melt(var_name="column", value_name="scaled")
st.plotly_chart(
    histogram_chart(scaled, "scaled", color="column", nbins=20,
                    title="Three columns on one [0, 1] scale", height=380),
    use_container_width=True,
)

insight_box(
    "The edge cases did the design work: missing values stay missing, infinities are pinned "
    "to the ends, and a constant column (no range) rescales to zeros instead of dividing by zero."
)

# ── 11.2 Arguments ───────────────────────────────────────────────────────────
st.header("11.2  Arguments: Data First, Details Later")

concept_box(
    "Two Kinds of Argument",
    "<b>Data arguments</b> say what to compute on and come first. <b>Detail arguments</b> "
    "control how, come last and usually have defaults. mean_ci(x, level=0.95) reads correctly "
    "both as mean_ci(x) and as mean_ci(x, level=0.99)."
)

level = st.slider("Confidence level", 0.80, 0.99, 0.95, step=0.01, key="fn_level")
lo, hi = mean_ci(mtcars["mpg"], level=level)
b_lo, b_hi, _ = bootstrap_ci(mtcars["mpg"].to_numpy(), n_boot=2000, ci=level * 100)
col_ci1, col_ci2 = st.columns(2)
with col_ci1:
    st.metric(f"{level:.0%} CI for mean mpg (t)", f"{lo:.2f} to {hi:.2f}")
with col_ci2:
    st.metric(f"{level:.0%} CI for mean mpg (bootstrap)", f"{b_lo:.2f} to {b_hi:.2f}")
st.caption("Same data argument, same detail argument; only the method behind the interface changes.")

# ── 11.3 both_na ─────────────────────────────────────────────────────────────
st.header("11.3  Checking Inputs: both_na")

col_c, col_d = st.columns(2)
with col_c:
    x_txt = st.text_input("x", "nan, nan, 1, 2, nan", key="fn_x")
with col_d:
    y_txt = st.text_input("y", "nan, 3, nan, 4, nan", key="fn_y")

x_vals = [float(v) for v in x_txt.split(",") if v.strip()]
y_vals = [float(v) for v in y_txt.split(",") if v.strip()]
try:
    st.metric("Positions where both are missing", both_na(x_vals, y_vals))
except LengthMismatchError as exc:
    st.error(str(exc))

warning_box(
    "Without the length check, NumPy would either broadcast or fail with a message about shapes "
    "that says nothing about x and y. Fail early, in your own words."
)

replaced = replace_missings(mtcars["mpg"].where(mtcars["mpg"] > 15), replacement=15.0)
st.caption(f"replace_missings filled {int((mtcars['mpg'] <= 15).sum())} values in a masked mpg column; "
           f"the new minimum is {replaced.min():.1f}.")

# ── 11.4 Refactoring ─────────────────────────────────────────────────────────
st.header("11.4  Functions as Arguments: col_summary")

st.markdown(
    "`col_median`, `col_mean` and `col_sd` are the same loop with one word changed. Pass that "
    "word -- the function -- as an argument and three functions become one."
)

stat_name = st.selectbox("Summary function", ["median", "mean", "std", "min", "max"], key="fn_stat")
st.dataframe(col_summary(mtcars, getattr(pd.Series, stat_name)).round(3).to_frame(stat_name).T,
             use_container_width=True)
st.dataframe(
    pd.DataFrame({"median": col_median(mtcars), "mean": col_mean(mtcars), "sd": col_sd(mtcars)}).T.round(2),
    use_container_width=True,
)

# ── 11.5 Names ───────────────────────────────────────────────────────────────
st.header("11.5  Naming Things")

name = st.text_input("Proposed function name", "Summary", key="fn_name")
issues = naming_issues(name, kind="function")
if issues:
    for issue in issues:
        st.markdown(f"- {issue}")
else:
    st.success(f"`{name}` reads well.")

code_example(
    """def rescale01(x, finite=True):
    x = np.asarray(x, dtype=float)
    mask = np.isfinite(x)
    lo, hi = x[mask].min(), x[mask].max()
    out = (x - lo) / (hi - lo)
    out[x == np.inf], out[x == -np.inf] = 1, 0
    return out

def col_summary(df, fun):
    return pd.Series({col: float(fun(df[col])) for col in df.select_dtypes("number")})
"""
)
r_original(
    """rescale01 <- function(x) {
  rng <- range(x, na.rm = TRUE, finite = TRUE)
  (x - rng[1]) / (rng[2] - rng[1])
}
both_na <- function(x, y) {
  if (length(x) != length(y)) {
    stop("x and y must have the same length", call. = FALSE)
  }
  sum(is.na(x) & is.na(y))
}
col_summary <- function(df, fun) {
  output <- vector("numeric", length(df))
  for (i in seq_along(df)) output[[i]] <- fun(df[[i]])
  output
}
"""
)

st.divider()
quiz(
    "Which argument order follows the convention?",
    ["mean_ci(level, x)", "mean_ci(x, level=0.95)", "mean_ci(level=0.95, data=x)", "mean_ci()"],
    correct_idx=1,
    explanation="Data first, details with defaults after.",
    key="ch11_quiz1",
)

st.divider()
takeaways([
    "Write a function after the second copy-paste.",
    "Decide edge-case behaviour deliberately: missing, infinite, constant input.",
    "Check inputs and fail with a message that names the arguments.",
    "Passing functions as arguments removes whole families of near-duplicate functions.",
])

st.divider()
navigation(11)
