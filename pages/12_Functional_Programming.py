"""Chapter 12: Functional Programming -- The map family, adverbs and reduce."""
import math
import operator

import streamlit as st
import pandas as pd

from coursekit.data_loader import load_mtcars
from coursekit.errors import InputTypeError
from coursekit.plotting import line_chart
from coursekit.functional import (
    accumulate, compact, compose, discard, keep, map_chr, map_dbl, map_df, map_lgl,
    possibly, quietly, reduce, safely, transpose, walk,
)
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(12)
st.markdown(
    "A for loop says *how* to iterate; a map says *what* to do to each element. The map "
    "family adds one more promise: the **type** of the output. `map_dbl` returns numbers or "
    "fails, immediately, at the element that broke the promise. Add a few adverbs that change "
    "how a function fails and you can process messy inputs without a wall of try/except."
)

mtcars = load_mtcars()
numeric = mtcars.select_dtypes("number")

# ── 12.1 map family ──────────────────────────────────────────────────────────
st.header("12.1  The Map Family")

concept_box(
    "One Function per Output Type",
    "- <b>map_list</b>: anything, as a list.<br>"
    "- <b>map_dbl / map_int</b>: one number per element.<br>"
    "- <b>map_chr</b>: one string per element.<br>"
    "- <b>map_lgl</b>: one boolean per element.<br>"
    "- <b>map_df</b>: a row (or rows) per element, bound into a DataFrame."
)

st.dataframe(pd.DataFrame({
    "mean (map_dbl)": map_dbl(numeric, lambda s: s.mean()),
    "type (map_chr)": map_chr(numeric, lambda s: str(s.dtype)),
    "has_zero (map_lgl)": map_lgl(numeric, lambda s: bool((s == 0).any())),
}).round(3), use_container_width=True)

st.subheader("One model per group with map_df")
by_cyl = {str(k): g for k, g in mtcars.groupby("cyl")}
fits = map_df(by_cyl, lambda g: {
    "n": len(g),
    "slope_mpg_per_wt": pd.Series(g["mpg"]).cov(g["wt"]) / g["wt"].var(),
    "r": g["mpg"].corr(g["wt"]),
}, id_col="cyl")
st.dataframe(fits.round(3), use_container_width=True)

st.subheader("When the promise breaks")
try:
    map_dbl(numeric.iloc[:, :3], lambda s: s.describe())
except InputTypeError as exc:
    st.code(f"InputTypeError: {exc}")

# ── 12.2 Adverbs ─────────────────────────────────────────────────────────────
st.header("12.2  safely, possibly, quietly")

inputs = st.text_input("Inputs to log() (comma separated)", "10, 1, 0, -1, a", key="fp_inputs")
values = [v.strip() for v in inputs.split(",") if v.strip()]


def log_of(text):
    return math.log(float(text))


results = [safely(log_of)(v) for v in values]
col_a, col_b = st.columns(2)
with col_a:
    st.caption("safely: list of (result, error)")
    st.dataframe(pd.DataFrame({
        "input": values,
        "result": [r.result for r in results],
        "error": [repr(r.error) if r.error else "" for r in results],
    }), use_container_width=True)
with col_b:
    st.caption("transpose: (result list, error list)")
    flipped = transpose(results)
    ok = [v for v, e in zip(values, flipped["error"]) if e is None]
    st.markdown(f"Succeeded: `{ok}`")
    st.markdown(f"Failed: `{[v for v in values if v not in ok]}`")
    st.caption("possibly: a default instead of an error")
    st.markdown(f"`{[possibly(log_of, otherwise=float('nan'))(v) for v in values]}`")

noisy = quietly(lambda s: print(f"summarising {len(s)} values") or s.mean())
captured = noisy(mtcars["mpg"])
st.caption(f"quietly captured output {captured.output.strip()!r} and returned {captured.result:.2f}")

printed = quietly(walk)(["mpg", "hp", "wt"], lambda col: print(f"{col}: {mtcars[col].median():.1f}"))
st.caption(f"walk returns its input {printed.result!r} and is only run for the side effect: "
           f"{printed.output.strip().splitlines()}")

insight_box(
    "safely never raises, so a batch of 10,000 inputs finishes even if 3 are broken. transpose "
    "then turns 'a list of pairs' into 'a pair of lists', ready for keep / discard."
)

# ── 12.3 reduce ──────────────────────────────────────────────────────────────
st.header("12.3  Reduce and Accumulate")

numbers = [3, 1, 4, 1, 5, 9, 2, 6]
st.markdown(f"Numbers: `{numbers}`")
st.markdown(f"reduce(+) = `{reduce(numbers, operator.add)}`; running totals: `{accumulate(numbers, operator.add)}`")
st.markdown(f"running max: `{accumulate(numbers, max)}`")

steps = pd.DataFrame({
    "step": list(range(1, len(numbers) + 1)) * 2,
    "value": accumulate(numbers, operator.add) + accumulate(numbers, max),
    "function": ["running total"] * len(numbers) + ["running max"] * len(numbers),
})
st.plotly_chart(line_chart(steps, "step", "value", color="function",
                           title="accumulate keeps every intermediate result", height=350),
                use_container_width=True)
st.markdown(f"keep(odd): `{keep(numbers, lambda n: n % 2)}`, discard(odd): `{discard(numbers, lambda n: n % 2)}`")
st.markdown(f"compact([1, None, [], 'a', '']): `{compact([1, None, [], 'a', ''])}`")

round_log = compose(lambda v: round(v, 3), math.log)
st.markdown(f"compose(round, log)(20) = `{round_log(20)}`")

warning_box(
    "A bare `except Exception` inside your own code hides bugs. safely and possibly are the "
    "exception: they make the capture explicit, and the errors are still there to inspect."
)

code_example(
    """means = map_dbl(df, lambda col: col.mean())
safe_log = safely(math.log)
results = [safe_log(x) for x in [10, 0, -1]]
flipped = transpose(results)            # {"result": [...], "error": [...]}
accumulate([1, 2, 3], operator.add)     # [1, 3, 6]
"""
)
r_original(
    """map_dbl(mtcars, mean)
mtcars %>% split(.$cyl) %>% map(~ lm(mpg ~ wt, data = .)) %>%
  map(summary) %>% map_dbl("r.squared")
safe_log <- safely(log)
list(10, "a", 5) %>% map(safe_log) %>% transpose()
possible_log <- possibly(log, otherwise = NA)
accumulate(1:5, `+`)
"""
)

st.divider()
quiz(
    "What does map_dbl do when the function returns a string for one element?",
    ["Returns NaN for that element", "Converts the string to a number",
     "Raises an error naming the element", "Skips the element"],
    correct_idx=2,
    explanation="Typed maps fail fast instead of silently returning a different type.",
    key="ch12_quiz1",
)

st.divider()
takeaways([
    "Typed maps promise an output type and fail at the first element that breaks it.",
    "safely / possibly / quietly change how a function fails, not what it computes.",
    "transpose turns a list of results into results and errors you can filter separately.",
    "reduce collapses a list; accumulate shows every step.",
])

st.divider()
navigation(12)
