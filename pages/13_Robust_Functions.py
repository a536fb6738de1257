"""Chapter 13: Robust Functions -- Fail fast, stay type-stable, no hidden arguments."""
import streamlit as st
import numpy as np
import pandas as pd

from coursekit.data_loader import load_mtcars
from coursekit.errors import CourseError, InputTypeError
from coursekit.robust import (
    batch_run, big_x, check_numeric, format_mean, format_mean_global,
    type_stable_quantiles, unstable_quantiles,
)
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(13)
st.markdown(
    "A function used interactively can afford to guess. A function called from other code "
    "cannot: it should stop loudly when the input is wrong, return the same type every time, "
    "and give the same answer for the same arguments. Each section breaks one of those rules "
    "on purpose and then repairs it."
)

mtcars = load_mtcars()

# ── 13.1 Fail fast ───────────────────────────────────────────────────────────
st.header("13.1  Stop Early, Stop Clearly")

concept_box(
    "Three Classic Surprises",
    "- <b>Type-unstable</b> functions return a different kind of object depending on the input.<br>"
    "- <b>Non-standard evaluation</b> lets a column name silently shadow a variable.<br>"
    "- <b>Hidden arguments</b> read global options, so the same call gives different answers."
)

raw = st.selectbox("Value passed to check_numeric",
                   ["3.5", "[1, 2, 3]", "'ten'", "True"], key="rob_value")
candidate = {"3.5": 3.5, "[1, 2, 3]": np.array([1, 2, 3]), "'ten'": "ten", "True": True}[raw]
try:
    check_numeric(candidate, name="x")
    st.success(f"{raw} passes")
except InputTypeError as exc:
    st.error(f"InputTypeError: {exc}")

warning_box(
    "True passes most 'is it a number?' checks in Python because bool subclasses int. "
    "Saying no explicitly is the only way to catch it."
)

# ── 13.2 Type stability ──────────────────────────────────────────────────────
st.header("13.2  Type-Unstable Quantiles")

probs_txt = st.text_input("Probabilities (comma separated)", "0.05, 0.95", key="rob_probs")
try:
    probs = [float(p) for p in probs_txt.split(",") if p.strip()]
except ValueError:
    st.error("Probabilities must be numbers.")
    st.stop()
probs = list(dict.fromkeys(probs))
if not probs or not all(0 <= p <= 1 for p in probs):
    st.error("Enter one or more probabilities between 0 and 1.")
    st.stop()
probs = probs[0] if len(probs) == 1 else probs
use_empty = st.checkbox("Pass a frame with no numeric columns", value=False, key="rob_empty")
frame = mtcars[["model"]] if use_empty else mtcars[["mpg", "hp", "wt"]]

col_a, col_b = st.columns(2)
with col_a:
    st.caption("unstable_quantiles (sapply style)")
    unstable = unstable_quantiles(frame, probs)
    st.code(f"type: {type(unstable).__name__}")
    st.write(unstable)
with col_b:
    st.caption("type_stable_quantiles")
    stable = type_stable_quantiles(frame, probs)
    st.code(f"type: {type(stable).__name__}, shape {stable.shape}")
    st.dataframe(stable, use_container_width=True)

insight_box(
    "Switch between one and two probabilities, then tick the empty frame. The unstable version "
    "returns a Series, a DataFrame or an empty list; the stable one is always a DataFrame."
)

# ── 13.3 Non-standard evaluation ─────────────────────────────────────────────
st.header("13.3  When a Column Shadows a Variable")

df = pd.DataFrame({"x": [1, 2, 3, 4, 5], "threshold": [5, 5, 5, 5, 5]})
st.dataframe(df.T, use_container_width=True)
threshold = st.slider("threshold argument", 0, 5, 2, key="rob_threshold")
col_c, col_d = st.columns(2)
col_c.caption('df.query("x > threshold")')
col_c.dataframe(df.query("x > threshold"), use_container_width=True)
col_d.caption(f"big_x(df, {threshold})")
col_d.dataframe(big_x(df, threshold), use_container_width=True)

# ── 13.4 Hidden arguments ────────────────────────────────────────────────────
st.header("13.4  Hidden Arguments")

precision = st.slider("pd display.precision (a global option)", 0, 8, 6, key="rob_precision")
with pd.option_context("display.precision", precision):
    hidden = format_mean_global(mtcars["mpg"])
st.markdown(f"format_mean_global(mpg) = `{hidden}`  \nformat_mean(mpg, digits=2) = `{format_mean(mtcars['mpg'])}`")

# ── 13.5 Batches ─────────────────────────────────────────────────────────────
st.header("13.5  One Bad Input Should Not Stop the Batch")

batch = {"mpg": mtcars["mpg"], "hp": mtcars["hp"], "model": mtcars["model"], "flag": True}


def mean_numeric(x):
    check_numeric(x)
    return float(np.mean(x))


successes, failures = batch_run(batch, mean_numeric)
st.markdown(f"**Succeeded:** {', '.join(f'{k} = {v:.2f}' for k, v in successes.items())}")
st.markdown(f"**Failed:** {', '.join(f'{k} ({type(e).__name__})' for k, e in failures.items())}")
st.caption(f"Every failure is a {CourseError.__name__}, so callers can catch the whole family at once.")

code_example(
    """def check_numeric(x, name="x"):
    if isinstance(x, bool):
        raise InputTypeError(f"`{name}` must be numeric, not bool")
    ...

def big_x(df, threshold):
    return df.query("x > @threshold")   # @ pins the local variable

def type_stable_quantiles(df, probs):
    probs = list(np.atleast_1d(probs))
    ...                                  # always a DataFrame
"""
)
r_original(
    """stopifnot(is.numeric(x))
if (!is.character(x)) {
  stop("`x` should be a character vector", call. = FALSE)
}
df <- data.frame(x = 1:5, threshold = 5)
big_x <- function(df, threshold) {
  if (!"x" %in% names(df)) stop("df must contain variable called x", call. = FALSE)
  if ("threshold" %in% names(df)) stop("df must not contain variable called threshold", call. = FALSE)
  subset(df, x > threshold)
}
col_classes <- function(df) map_chr(df, ~ class(.x)[1])
options(digits = 8)
"""
)

st.divider()
quiz(
    "df has columns x and threshold. What does df.query('x > threshold') compare against?",
    ["The threshold argument", "The threshold column", "Raises an error", "Whichever is larger"],
    correct_idx=1,
    explanation="Bare names in query resolve to columns first; use @threshold for the variable.",
    key="ch13_quiz1",
)

st.divider()
takeaways([
    "Check inputs at the top and raise errors that name the argument.",
    "Return the same type every time; empty input should give an empty result of that type.",
    "Make every input an argument; global options are hidden arguments.",
    "Wrap batch work so one bad input is reported, not fatal.",
])

st.divider()
navigation(13)
