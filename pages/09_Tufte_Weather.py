"""Chapter 9: Tufte Weather -- A year of temperatures against decades of records."""
import streamlit as st

from coursekit.data_loader import (
    load_temperature_history, read_dayton_temperatures, simulate_temperature_history,
)
from coursekit.constants import CITIES, T_CRITICAL_TUFTE
from coursekit.errors import DatasetUnavailableError, InsufficientDataError
from coursekit.weather_records import (
    add_day_of_year, past_summary, present_records, present_year_options, record_counts,
    split_past_present, tufte_chart,
)
from coursekit.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, r_original, dataset_notice, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(9)
st.markdown(
    "Edward Tufte's New York weather chart packs a year of daily temperatures, the normal "
    "range and the all-time records into one dense, quiet graphic. Rebuilding it is a tour of "
    "the whole workflow: reshape, summarise by day of year, compare one year against the "
    "rest, and then **layer** five simple geometries until the story appears."
)

# ── Data ─────────────────────────────────────────────────────────────────────
source = st.sidebar.radio("Temperature data", ["Fetched history", "Dayton archive upload", "Simulated"],
                          key="tufte_source")
city = st.sidebar.selectbox("City (fetched data)", list(CITIES), key="tufte_city")

if source == "Fetched history":
    try:
        temps = load_temperature_history(city)
    except DatasetUnavailableError as exc:
        dataset_notice(exc)
        temps = simulate_temperature_history()
        city = "Simulated city"
elif source == "Dayton archive upload":
    uploaded = st.sidebar.file_uploader("Daily archive (month day year temp)", type=["txt", "csv"],
                                        key="tufte_upload")
    if uploaded is None:
        st.info("Upload a file in the Dayton archive layout, e.g. NYNEWYOR.txt.")
        st.stop()
    temps = read_dayton_temperatures(uploaded)
    city = uploaded.name.rsplit(".", 1)[0]
else:
    temps = simulate_temperature_history()
    city = "Simulated city"

temps = add_day_of_year(temps)
classic_t = st.sidebar.checkbox(f"Use the classic t = {T_CRITICAL_TUFTE}", value=False, key="tufte_t")
# a t quantile needs two past years; the fixed classic value only needs one
year_choices = present_year_options(temps, min_past_years=1 if classic_t else 2)
if not year_choices:
    st.error("The data need more years to compare a present year against.")
    st.stop()
present_year = st.sidebar.selectbox("Present year", year_choices, key="tufte_year")

# ── 9.1 Split ────────────────────────────────────────────────────────────────
st.header("9.1  Past and Present")

try:
    past, present = split_past_present(temps, present_year=present_year)
except InsufficientDataError as exc:
    st.error(f"{exc}. Pick a later present year.")
    st.stop()

col1, col2, col3 = st.columns(3)
col1.metric("Past years", past["year"].nunique())
col2.metric("Past observations", f"{len(past):,}")
col3.metric("Present-year days", len(present))

# ── 9.2 Summarise ────────────────────────────────────────────────────────────
st.header("9.2  Records and Normal Range per Day")

formula_box(
    "Normal range",
    r"\bar{T}_d \pm t_{0.975,\,k-1}\,\frac{s_d}{\sqrt{n_d}}",
    "For every day of the year d: the mean over the past years, plus and minus a t-based "
    "margin. The record range is simply the min and max for that day.",
)

try:
    summary = past_summary(past, t_crit=T_CRITICAL_TUFTE if classic_t else None)
except InsufficientDataError as exc:
    st.error(f"{exc}. Tick the classic t option or pick a later present year.")
    st.stop()
with st.expander("Per-day summary"):
    st.dataframe(summary.round(2), use_container_width=True)

# ── 9.3 Records ──────────────────────────────────────────────────────────────
st.header("9.3  The Chart")

highs, lows = present_records(present, summary)
counts = record_counts(highs, lows, present)
title = (f"{city}'s weather in {present_year}: {counts['record_highs']} record highs, "
         f"{counts['record_lows']} record lows")
st.plotly_chart(tufte_chart(summary, present, highs, lows, title=title), use_container_width=True)

concept_box(
    "Five Layers",
    "1. Wheat bars from record low to record high for every day.<br>"
    "2. Darker bars for the normal range around the daily mean.<br>"
    "3. A thin dark line for the present year.<br>"
    "4. Red points where the present year beat the record high.<br>"
    "5. Blue points where it beat the record low.<br>"
    "Month dividers and a pale background do the rest. No layer is complicated; the effect comes "
    "from stacking them carefully."
)

insight_box(
    "Records get harder to break as the past grows: with 20 past years each day has 20 chances "
    "to have set the bar. Choose an early present year and count how many records fall."
)

warning_box(
    "The 'normal range' band is a confidence interval for the mean temperature on that day, not "
    "the range where most days fall. Most days sit outside it, and that is expected."
)

code_example(
    """past, present = split_past_present(temps, present_year=2014)
summary = (past.groupby("day_of_year")["temperature"]
               .agg(upper="max", lower="min", avg="mean", sd="std", n="count"))
summary["se"] = summary["sd"] / summary["n"] ** 0.5
summary["avg_upper"] = summary["avg"] + 2.101 * summary["se"]
summary["avg_lower"] = summary["avg"] - 2.101 * summary["se"]
"""
)
r_original(
    """Past <- Temp %>% group_by(year, month) %>% arrange(day) %>% ungroup() %>%
  group_by(year) %>% mutate(newDay = seq(1, length(day))) %>% ungroup() %>%
  filter(Temp != -99 & year != 2014) %>% group_by(newDay) %>%
  mutate(upper = max(Temp), lower = min(Temp), avg = mean(Temp), se = sd(Temp)/sqrt(length(Temp))) %>%
  mutate(avg_upper = avg + (2.101 * se), avg_lower = avg - (2.101 * se)) %>% ungroup()

p <- ggplot(Past, aes(newDay, Temp)) +
  theme(plot.background = element_blank(), panel.grid.minor = element_blank(),
        panel.grid.major = element_blank(), panel.border = element_blank(),
        panel.background = element_blank(), axis.ticks = element_blank()) +
  geom_linerange(Past, mapping = aes(x = newDay, ymin = lower, ymax = upper), colour = "wheat2", alpha = .1)
p <- p + geom_linerange(Past, mapping = aes(x = newDay, ymin = avg_lower, ymax = avg_upper), colour = "wheat4")
p <- p + geom_line(Present, mapping = aes(x = newDay, y = Temp, group = 1)) +
  geom_vline(xintercept = 0, colour = "wheat4", linetype = 1, size = 1)
p <- p + geom_point(data = PresentHighs, aes(x = newDay, y = Temp), colour = "firebrick3") +
  geom_point(data = PresentLows, aes(x = newDay, y = Temp), colour = "blue3")
"""
)

st.divider()
quiz(
    "A present-year day is marked as a record high when...",
    ["It exceeds the upper end of the normal range",
     "It exceeds the highest temperature for that day in all past years",
     "It is the hottest day of the present year",
     "It is above the long-term average"],
    correct_idx=1,
    explanation="Records are compared day by day against the past maximum for the same day of year.",
    key="ch9_quiz1",
)

st.divider()
takeaways([
    "Align years on day-of-year (dropping Feb 29) before summarising.",
    "Record range = daily min/max over the past; normal range = mean ± t·se.",
    "A rich chart is usually many simple layers stacked in the right order.",
])

st.divider()
navigation(9)
