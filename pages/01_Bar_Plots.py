"""Chapter 1: Bar Plots -- Positions (stack, fill, dodge) and dynamite plots."""
import streamlit as st
import plotly.express as px

from coursekit.data_loader import load_mtcars, sidebar_filters
from coursekit.plotting import bar_chart, dynamite_chart, apply_common_layout
from coursekit.constants import AM_COLORS, CYL_COLORS, MTCARS_LABELS
from coursekit.stats_helpers import mean_sd_summary, perform_anova, perform_ttest, proportion_table
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(1)
st.markdown(
    "A bar plot looks like the simplest chart there is: count things, draw rectangles. "
    "But as soon as a second categorical variable shows up you have to decide how the "
    "bars share space -- piled on top of each other, squeezed to the same height, or "
    "parked side by side. Each choice answers a **different question**, and picking the "
    "wrong one is the most common way a bar chart ends up lying by accident."
)

# ── Load data ────────────────────────────────────────────────────────────────
df = load_mtcars()
fdf = sidebar_filters(df, "am_f", "Transmission")

# ── 1.1 Positions ────────────────────────────────────────────────────────────
st.header("1.1  Three Ways to Share an Axis")

concept_box(
    "Stack, Fill, Dodge",
    "- <b>stack</b>: bars for each group are piled up. Total height = total count. Good for "
    "totals, bad for comparing the groups that are not on the bottom.<br>"
    "- <b>fill</b>: like stack, but every bar is stretched to 100%. Total counts vanish; "
    "proportions within each bar become comparable.<br>"
    "- <b>dodge</b>: groups stand next to each other on a common baseline. Best for comparing "
    "the same group across categories."
)

col_a, col_b = st.columns(2)
with col_a:
    x_var = st.selectbox("x (counted)", ["cyl_f", "gear_f", "vs_f"],
                         format_func=lambda c: MTCARS_LABELS.get(c, c), key="bar_x")
with col_b:
    position = st.radio("Position", ["stack", "fill", "dodge"], horizontal=True, key="bar_pos")

fig = bar_chart(fdf, x=x_var, fill="am_f", position=position, color_map=AM_COLORS,
                title=f"{MTCARS_LABELS.get(x_var, x_var)} by transmission ({position})")
st.plotly_chart(fig, use_container_width=True)

props = proportion_table(fdf, x_var, "am_f")
with st.expander("Counts behind the bars"):
    st.dataframe(props, use_container_width=True)

insight_box(
    "Switch between stack and fill with x = Cylinders. Stacked, the 8-cylinder bar is the "
    "tallest, so it is easy to miss that it is almost all automatics. Filled, the story "
    "jumps out: manual gearboxes dominate the small 4-cylinder cars."
)

# ── 1.2 Overlapping bars ─────────────────────────────────────────────────────
st.header("1.2  Overlapping Bars")

st.markdown(
    "Between dodge and stack sits a compromise: bars that are *partly* dodged and drawn "
    "with transparency so the overlap stays visible. Plotly calls the offset `offsetgroup` "
    "and the width `width`; the course used `position_dodge(width = 0.2)`."
)

overlap = st.slider("Dodge width", 0.0, 0.8, 0.2, step=0.05, key="bar_overlap")
counts = fdf.groupby([x_var, "am_f"], observed=True).size().rename("count").reset_index()
fig_o = px.bar(counts, x=counts[x_var].astype(str), y="count", color="am_f",
               color_discrete_map=AM_COLORS, barmode="overlay", opacity=0.6,
               labels={"x": MTCARS_LABELS.get(x_var, x_var), "am_f": "Transmission"})
for i, trace in enumerate(fig_o.data):
    trace.offset = -0.4 + i * overlap
    trace.width = 0.4 + (0.4 - overlap)
apply_common_layout(fig_o, title="Partially dodged bars", height=420)
st.plotly_chart(fig_o, use_container_width=True)

# ── 1.3 Dynamite plots ───────────────────────────────────────────────────────
st.header("1.3  Dynamite Plots (and Why People Dislike Them)")

concept_box(
    "Mean ± SD as a Bar",
    "A dynamite plot draws the group mean as a bar and one standard deviation as an error "
    "bar. The bar implies the data start at zero and fill the rectangle, which is rarely true "
    "for a continuous measure. It hides the sample size and the shape of the distribution."
)

col_c, col_d = st.columns(2)
with col_c:
    value = st.selectbox("Measure", ["mpg", "hp", "wt", "qsec"],
                         format_func=lambda c: MTCARS_LABELS.get(c, c), key="dyn_value")
with col_d:
    mult = st.slider("Error bar: mean ± k·sd", 0.5, 3.0, 1.0, step=0.5, key="dyn_mult")

summary = mean_sd_summary(fdf, "cyl_f", value, mult=mult)
col_e, col_f = st.columns(2)
with col_e:
    st.plotly_chart(dynamite_chart(summary, "cyl_f", title="Dynamite plot"), use_container_width=True)
with col_f:
    fig_pts = px.strip(fdf, x="cyl_f", y=value, color="cyl_f", color_discrete_map=CYL_COLORS,
                       labels={"cyl_f": "Cylinders", value: MTCARS_LABELS.get(value, value)})
    fig_pts.add_scatter(x=summary["cyl_f"].astype(str), y=summary["mean"], mode="markers",
                        marker=dict(symbol="line-ew-open", size=30, color="black"), name="mean")
    apply_common_layout(fig_pts, title="The points it hides", height=450)
    st.plotly_chart(fig_pts, use_container_width=True)

st.dataframe(summary.round(2), use_container_width=True)

groups = [g[value].to_numpy() for _, g in fdf.groupby("cyl_f", observed=True) if len(g) > 1]
auto = df.loc[df["am_f"] == "automatic", value]
manual = df.loc[df["am_f"] == "manual", value]
col_g, col_h = st.columns(2)
with col_g:
    if len(groups) >= 2:
        anova = perform_anova(*groups)
        st.metric("One-way ANOVA across cylinders", f"F = {anova['f_stat']:.2f}",
                  f"p = {anova['p_value']:.2g}", delta_color="off")
    else:
        st.info("The current filter leaves fewer than two cylinder groups to compare.")
with col_h:
    tt = perform_ttest(auto, manual)
    st.metric("Welch t-test: automatic vs manual", f"t = {tt['t_stat']:.2f}",
              f"Cohen's d = {tt['cohens_d']:.2f}", delta_color="off")

insight_box(
    "The bars carry no more information than these two numbers: a mean and a spread per group. "
    "A test statistic summarises the same comparison honestly, with the sample size built in."
)

warning_box(
    "With n = 7 cars in the 6-cylinder group, the mean ± sd bar suggests a precision that "
    "simply is not there. Whenever n is small, plot the points."
)

# ── Code ─────────────────────────────────────────────────────────────────────
code_example(
    """import plotly.express as px

counts = mtcars.groupby(["cyl", "am"]).size().rename("count").reset_index()
px.bar(counts, x="cyl", y="count", color="am", barmode="relative")   # stack
px.bar(counts, x="cyl", y="count", color="am", barmode="group")      # dodge

counts["prop"] = counts["count"] / counts.groupby("cyl")["count"].transform("sum")
px.bar(counts, x="cyl", y="prop", color="am")                        # fill
"""
)
r_original(
    """cyl.am <- ggplot(mtcars, aes(x = factor(cyl), fill = factor(am)))
cyl.am + geom_bar()
cyl.am + geom_bar(position = "fill")
cyl.am + geom_bar(position = "dodge")
cyl.am + geom_bar(position = position_dodge(width = 0.2), alpha = 0.6)

ggplot(mtcars, aes(x = cyl, y = wt)) +
  stat_summary(fun.y = mean, geom = "bar", fill = "skyblue") +
  stat_summary(fun.data = mean_sdl, fun.args = list(mult = 1),
               geom = "errorbar", width = 0.1)
"""
)

# ── Quiz ─────────────────────────────────────────────────────────────────────
st.divider()
quiz(
    "You want to compare the *share* of manual cars across cylinder counts. Which position?",
    ["stack", "fill", "dodge", "identity"],
    correct_idx=1,
    explanation="fill normalises every bar to 100%, so the manual share is read against a common scale.",
    key="ch1_quiz1",
)

st.divider()
takeaways([
    "Stacked bars show totals; only the bottom segment has a common baseline.",
    "Filled bars show proportions and throw the totals away.",
    "Dodged bars put every group on the same baseline for direct comparison.",
    "Dynamite plots hide n and distribution shape; show the points when n is small.",
])

st.divider()
navigation(1)
