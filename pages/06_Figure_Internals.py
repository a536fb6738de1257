"""Chapter 6: Figure Internals -- What a built figure is made of, and editing it afterwards."""
import streamlit as st
import plotly.express as px

from coursekit.data_loader import load_mtcars
from coursekit.constants import CYL_COLORS
from coursekit.figure_internals import (
    add_panel_label, data_ranges, figure_outline, restyle_traces, trace_summary, viewport_domains,
)
from coursekit.plotting import apply_common_layout, multi_subplot
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(6)
st.markdown(
    "Every high-level plotting call eventually produces a plain data structure: a list of "
    "drawable pieces and a description of where they go. Knowing that structure lets you do "
    "the last 5% of customisation that no high-level argument exposes -- by **editing the "
    "built figure directly**."
)

mtcars = load_mtcars()

# ── 6.1 Build ────────────────────────────────────────────────────────────────
st.header("6.1  A Figure Is a Tree")

concept_box(
    "Traces and Layout",
    "A Plotly figure has two parts. <b>data</b>: a list of traces, each holding its own x/y "
    "values and styling. <b>layout</b>: everything that is not data -- axes, titles, legend, "
    "annotations, shapes. It is the same split as grid's grobs (things to draw) and viewports "
    "(regions to draw them in)."
)

fig = px.scatter(mtcars, x="wt", y="mpg", color="cyl_f", color_discrete_map=CYL_COLORS,
                 labels={"wt": "Weight (1000 lbs)", "mpg": "Miles / gallon", "cyl_f": "Cylinders"})
apply_common_layout(fig, title="mtcars: weight vs mileage", height=420)

col_a, col_b = st.columns([3, 2])
with col_a:
    st.plotly_chart(fig, use_container_width=True)
with col_b:
    st.caption("Traces")
    st.dataframe(trace_summary(fig), use_container_width=True)
    st.caption("Ranges the axes are trained on")
    st.dataframe(data_ranges(fig).round(2), use_container_width=True)

with st.expander("Layout tree"):
    st.dataframe(figure_outline(fig), use_container_width=True)

# ── 6.2 Edit after building ──────────────────────────────────────────────────
st.header("6.2  Editing a Built Figure")

st.markdown(
    "Select traces by property and change them in place. Here the 8-cylinder trace is "
    "restyled after the figure already exists, and a label is dropped into paper coordinates."
)

col_c, col_d = st.columns(2)
with col_c:
    target = st.selectbox("Trace to highlight", ["4", "6", "8"], index=2, key="fi_target")
with col_d:
    size = st.slider("Marker size", 4, 20, 12, key="fi_size")

edited = px.scatter(mtcars, x="wt", y="mpg", color="cyl_f", color_discrete_map=CYL_COLORS)
n_changed = restyle_traces(edited, selector=dict(name=target),
                           marker=dict(size=size, symbol="diamond", line=dict(width=1, color="black")))
restyle_traces(edited, selector=lambda t: t.name != target, opacity=0.3)
add_panel_label(edited, f"cyl = {target} highlighted", size=13, color="#1D3557")
apply_common_layout(edited, title="Post-hoc edits", height=420)
st.plotly_chart(edited, use_container_width=True)
st.caption(f"{n_changed} trace(s) matched the selector.")

insight_box(
    "Nothing was re-plotted. The data, the scales and the legend were computed once; the "
    "edits only touched the properties of objects that were already there."
)

# ── 6.3 Viewports ────────────────────────────────────────────────────────────
st.header("6.3  Viewports: Dividing the Page")

col_e, col_f, col_g = st.columns(3)
with col_e:
    rows = st.slider("Rows", 1, 3, 2, key="fi_rows")
with col_f:
    cols = st.slider("Columns", 1, 3, 2, key="fi_cols")
with col_g:
    spacing = st.slider("Spacing", 0.0, 0.2, 0.08, step=0.02, key="fi_spacing")

domains = viewport_domains(rows, cols, spacing)
st.dataframe(domains, use_container_width=True)

panels = multi_subplot(rows, cols, subplot_titles=[f"({r.row}, {r.col})" for r in domains.itertuples()])
measures = ["mpg", "hp", "wt", "qsec", "disp", "drat", "carb", "gear", "am"]
for i, cell in enumerate(domains.itertuples()):
    panels.add_scatter(x=mtcars["wt"], y=mtcars[measures[i]], mode="markers",
                       marker=dict(size=4, color="#457B9D"), showlegend=False,
                       row=cell.row, col=cell.col)
apply_common_layout(panels, title="One viewport per panel", height=250 * rows)
st.plotly_chart(panels, use_container_width=True)

warning_box(
    "Editing the built object ties your code to the library's internal structure. Use it for "
    "final polish, and prefer high-level arguments whenever one exists."
)

code_example(
    """fig = px.scatter(mtcars, x="wt", y="mpg", color="cyl")
fig.data                                   # the traces
fig.layout                                 # everything else
fig.update_traces(marker_size=12, selector=dict(name="8"))
fig.add_annotation(text="note", x=0.01, y=0.99, xref="paper", yref="paper")
"""
)
r_original(
    """p <- ggplot(mtcars, aes(wt, mpg, col = factor(cyl))) + geom_point()
gtab <- ggplotGrob(p)
gtab$grobs                   # the pieces
g <- ggplot_build(p)
g$data[[1]]                  # computed layer data
library(grid)
grid.newpage()
pushViewport(viewport(layout = grid.layout(2, 2)))
print(p, vp = viewport(layout.pos.row = 1, layout.pos.col = 1))
grid.text("note", x = unit(0.01, "npc"), y = unit(0.99, "npc"), just = c("left", "top"))
"""
)

st.divider()
quiz(
    "Which part of a Plotly figure holds the axis titles?",
    ["fig.data", "fig.layout", "the first trace", "fig.frames"],
    correct_idx=1,
    explanation="Everything that is not a trace lives in the layout.",
    key="ch6_quiz1",
)

st.divider()
takeaways([
    "A figure is a data structure: a list of traces plus a layout.",
    "Selectors let you edit built traces without recomputing anything.",
    "Viewports are rectangles of the page in 0..1 coordinates; subplots are arranged the same way.",
])

st.divider()
navigation(6)
