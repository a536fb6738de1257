"""Shared UI components: chapter header, concept boxes, quizzes, navigation."""
import streamlit as st

from coursekit.constants import CHAPTERS, COURSE_TITLES


def chapter_header(number, title=None, course=None):
    """Render a chapter header with the course it belongs to."""
    default_title, default_course, _ = CHAPTERS.get(number, (None, None, None))
    course = course or default_course
    if course:
        st.caption(COURSE_TITLES.get(course, course))
    st.title(f"Chapter {number}: {title or default_title}")
    st.divider()


def concept_box(title, content):
    """Render a highlighted concept/theory box."""
    st.markdown(f"""
<div style="background-color: #F1FAEE; padding: 18px; border-radius: 8px; border-left: 5px solid #457B9D; margin: 10px 0;">
<h4 style="color: #1D3557; margin-top: 0;">{title}</h4>
<p style="color: #1D3557;">{content}</p>
</div>
""", unsafe_allow_html=True)


def formula_box(title, formula, explanation=""):
    """Render a formula with explanation."""
    st.markdown(f"**{title}**")
    st.latex(formula)
    if explanation:
        st.caption(explanation)


def insight_box(text):
    """Render a key insight callout."""
    st.info(f"**Key Insight:** {text}")


def warning_box(text):
    """Render a common-mistake callout."""
    st.warning(f"**Common Mistake:** {text}")


def code_example(code, language="python", label="Show Python"):
    """Render a collapsible code example."""
    with st.expander(label):
        st.code(code, language=language)


def r_original(code):
    """The R code from the course notebook this section re-creates."""
    code_example(code, language="r", label="Show the original R")


def dataset_notice(error):
    """Explain that a dataset is missing and a simulated stand-in is shown instead."""
    st.warning(f"{error} Showing a seeded simulated stand-in instead.")


def quiz(question, options, correct_idx, explanation="", key="quiz"):
    """Render a multiple-choice question. Returns True/False once answered, else None."""
    st.subheader("Check Yourself")
    answer = st.radio(question, options, key=key, index=None)
    if answer is None:
        return None
    correct = options.index(answer) == correct_idx
    if correct:
        st.success("Correct!")
    else:
        st.error(f"Not quite. The answer is: **{options[correct_idx]}**")
    if explanation:
        st.caption(explanation)
    return correct


def takeaways(points):
    """Render key takeaways as a list."""
    st.subheader("Key Takeaways")
    for p in points:
        st.markdown(f"- {p}")


def navigation(number):
    """Render previous/next chapter links from the chapter catalog."""
    col1, _, col3 = st.columns([1, 2, 1])
    prev_ch, next_ch = CHAPTERS.get(number - 1), CHAPTERS.get(number + 1)
    with col1:
        if prev_ch:
            st.page_link(f"pages/{prev_ch[2]}", label=f"← Ch {number - 1}: {prev_ch[0]}")
    with col3:
        if next_ch:
            st.page_link(f"pages/{next_ch[2]}", label=f"Ch {number + 1}: {next_ch[0]} →")
