"""Course Notebooks: main entry point."""
import streamlit as st

from coursekit.constants import CHAPTERS, COURSE_TITLES
from coursekit.logging_config import setup_logging

setup_logging()

st.set_page_config(
    page_title="Course Notebooks: Visualization, Functions & Multivariate Stats",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("Course Notebooks")
st.subheader("Worked exercises on visualization, function writing and multivariate probability")

st.markdown("""
These chapters started life as notebooks written while working through courses on
plotting with the grammar of graphics, writing functions, functional programming and
introductory multivariate statistics. Each notebook is rebuilt here as one interactive
chapter: the prose explains the idea, the widgets let you poke at it, and a collapsible
panel shows the original R next to the Python that replaces it.

### How to Use This App

1. **Pick a chapter** from the sidebar. Chapters are independent; read them in any order.
2. **Change the inputs** (sliders, dropdowns, toggles) and watch the chart or result update.
3. **Compare the code**: every chapter ends with the Python that produced the chart and the R it came from.
4. **Check yourself** with the short quiz at the bottom of each chapter.

### Data

Small classic datasets (mtcars, iris, diamonds), a simulated health-survey extract,
simulated soil compositions, a few small networks and daily temperature records. Data
that has to be downloaded is cached under `data/`; set `COURSEKIT_OFFLINE=1` to never
touch the network, in which case chapters fall back to seeded simulations.

### Chapters
""")

by_course = {}
for number, (title, course, _) in CHAPTERS.items():
    by_course.setdefault(course, []).append(f"Ch {number}: {title}")

for course, chapters in by_course.items():
    st.markdown(f"**{COURSE_TITLES[course]}** -- {', '.join(chapters)}")

st.divider()

st.subheader("Dataset Preview: mtcars")
from coursekit.data_loader import load_mtcars
df = load_mtcars()
st.dataframe(df.head(10), use_container_width=True)

col1, col2, col3 = st.columns(3)
col1.metric("Chapters", len(CHAPTERS))
col2.metric("Courses", len(COURSE_TITLES))
col3.metric("mtcars rows", len(df))
