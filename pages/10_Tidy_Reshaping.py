"""Chapter 10: Tidy Reshaping -- Gather/spread step by step, faceted Atlanta temperatures."""
import streamlit as st

from coursekit.data_loader import load_atlanta_temps, simulate_atlanta_temps
from coursekit.errors import DatasetUnavailableError
from coursekit.plotting import facet_line_chart
from coursekit.reshape import gather, gather_steps, spread, spread_steps, tidy_temps, toy_scores
from coursekit.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, r_original, dataset_notice, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(10)
st.markdown(
    "Half of plotting is getting the data into the right shape. Plotting libraries want "
    "**tidy** data -- one row per observation, one column per variable -- while spreadsheets "
    "love wide tables with a column per year. This chapter walks through the two reshaping "
    "moves one cell at a time, then uses them on twenty summers of Atlanta temperatures."
)

# ── 10.1 Tidy data ───────────────────────────────────────────────────────────
st.header("10.1  Wide and Long")

concept_box(
    "Gather and Spread",
    "- <b>gather</b> (melt, pivot_longer): takes several columns that are really values of one "
    "variable and stacks them into a key column and a value column.<br>"
    "- <b>spread</b> (pivot, pivot_wider): the inverse. One key column becomes many columns."
)

wide = toy_scores(wide=True)
long = toy_scores(wide=False)
col1, col2 = st.columns(2)
col1.caption("Wide")
col1.dataframe(wide, use_container_width=True)
col2.caption("Long")
col2.dataframe(long, use_container_width=True)

# ── 10.2 Step by step ────────────────────────────────────────────────────────
st.header("10.2  One Cell at a Time")

direction = st.radio("Animate", ["gather (wide -> long)", "spread (long -> wide)"],
                     horizontal=True, key="tidy_direction")
if direction.startswith("gather"):
    steps = gather_steps(wide, "Subject", "Score", ["English", "Maths"])
    source_df = wide
else:
    steps = spread_steps(long, "Subject", "Score")
    source_df = long

step_no = st.slider("Step", 1, len(steps), 1, key="tidy_step")
step = steps[step_no - 1]
st.markdown(f"**Step {step.step}/{len(steps)}:** {step.description}")

row_idx, col_name = step.source_cell
col_a, col_b = st.columns(2)
with col_a:
    st.caption("Source (highlighted cell is moving)")
    st.dataframe(
        source_df.style.apply(
            lambda s: ["background-color: #F4A261" if (s.name == col_name and i == row_idx) else ""
                       for i in s.index],
            axis=0,
        ),
        use_container_width=True,
    )
with col_b:
    st.caption("Result so far")
    st.dataframe(step.result, use_container_width=True)

insight_box(
    "Gather walks down each gathered column in turn, which is why the long table lists every "
    "student's English score before any Maths score."
)

# ── 10.3 Atlanta ─────────────────────────────────────────────────────────────
st.header("10.3  Twenty Summers in Atlanta")

try:
    atl_wide = load_atlanta_temps()
except DatasetUnavailableError as exc:
    dataset_notice(exc)
    atl_wide = simulate_atlanta_temps()

with st.expander("Wide table as read from temps.txt"):
    st.dataframe(atl_wide.head(10), use_container_width=True)

atl = tidy_temps(atl_wide)
ncols = st.slider("Panels per row", 2, 6, 4, key="tidy_ncols")
fig = facet_line_chart(atl, x="DAY", y="TEMP", facet="YEAR", ncols=ncols,
                       title="Daily high (°F), July to October")
fig.update_xaxes(tickformat="%b")
st.plotly_chart(fig, use_container_width=True)

warning_box(
    "Parsing '1-Jul' as a date needs a year. Every row gets the same made-up year so the "
    "panels share an x axis; the real year lives in the YEAR column, not in the date."
)

with st.expander("Round trip: spread the tidy table back out"):
    st.dataframe(spread(atl.assign(DAY=atl["DAY"].dt.strftime("%d-%b")), "YEAR", "TEMP").head(10),
                 use_container_width=True)

code_example(
    """tidy = pd.melt(wide, id_vars=["DAY"], var_name="YEAR", value_name="TEMP")
tidy["DAY"] = pd.to_datetime(tidy["DAY"] + "-2001", format="%d-%b-%Y")
px.line(tidy, x="DAY", y="TEMP", facet_col="YEAR", facet_col_wrap=4)
"""
)
r_original(
    """tempdata <- read.table("temps.txt", header = T)
colnames(tempdata) <- str_replace(colnames(tempdata), "X", "")
tidy_temp_atlanta <- gather(tempdata, YEAR, TEMP, -DAY)
tidy_temp_atlanta$DAY <- as.Date(tidy_temp_atlanta$DAY, format = "%d-%b")
ggplot(tidy_temp_atlanta, aes(DAY, TEMP, group = 1)) +
  geom_line(colour = "blue") +
  facet_wrap(~YEAR, ncol = 4)

gather_anim(key = "Subject", value = "Score", col = c("English", "Maths"), data = datoy_wide)
spread_anim(key = "Subject", value = "Score", data = datoy_long)
"""
)

st.divider()
quiz(
    "A table has columns DAY, 1996, 1997, ..., 2015. Which operation makes it tidy?",
    ["spread by DAY", "gather the year columns into YEAR / TEMP",
     "transpose it", "nothing; it is already tidy"],
    correct_idx=1,
    explanation="The year columns are values of a single variable (year); gathering them restores one row per observation.",
    key="ch10_quiz1",
)

st.divider()
takeaways([
    "Tidy: one row per observation, one column per variable.",
    "gather stacks value columns into key/value pairs; spread undoes it.",
    "spread fails loudly when two rows share the same identifiers and key.",
])

st.divider()
navigation(10)
