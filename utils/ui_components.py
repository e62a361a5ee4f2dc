"""Shared UI components: concept boxes, quizzes, navigation, chapter headers."""
import streamlit as st
from statsmodels.tools.sm_exceptions import PerfectSeparationError

from utils.constants import PART_TITLES
from utils.errors import InvalidArgument

UNFITTABLE_MESSAGE = (
    "The model separates this survey perfectly, so it cannot be fit. "
    "Try more sites per survey, a smaller basis or a stronger penalty."
)


def chapter_header(number, title, part=None):
    """Render a chapter header with its part label."""
    if part:
        st.caption(f"Part {part}: {PART_TITLES.get(part, '')}")
    st.title(f"Chapter {number}: {title}")
    st.divider()


def concept_box(title, content):
    """Render a highlighted concept box."""
    st.markdown(f"""
<div style="background-color: #EEF6F3; padding: 20px; border-radius: 10px; border-left: 5px solid #2A9D8F; margin: 10px 0;">
<h4 style="color: #2A9D8F; margin-top: 0;">{title}</h4>
<p style="color: #1D3D36;">{content}</p>
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


def code_example(code, language="python"):
    """Render a collapsible code example."""
    with st.expander("Show Code"):
        st.code(code, language=language)


def quiz(question, options, correct_idx, explanation="", key="quiz"):
    """Render a multiple-choice question. Returns True/False once answered, else None."""
    st.subheader("Quick Quiz")
    answer = st.radio(question, options, key=key, index=None)
    if answer is None:
        return None
    correct = options.index(answer) == correct_idx
    if correct:
        st.success("Correct!")
    else:
        st.error(f"Not quite. The correct answer is: **{options[correct_idx]}**")
    if explanation:
        st.caption(explanation)
    return correct


def takeaways(points):
    """Render key takeaways as a list."""
    st.subheader("Key Takeaways")
    for p in points:
        st.markdown(f"- {p}")


def navigation(prev_label=None, next_label=None, prev_page=None, next_page=None):
    """Render prev/next page links."""
    col1, _, col3 = st.columns([1, 2, 1])
    with col1:
        if prev_label:
            st.page_link(prev_page if prev_page == "app.py" else f"pages/{prev_page}",
                         label=f"← {prev_label}")
    with col3:
        if next_label:
            st.page_link(f"pages/{next_page}", label=f"{next_label} →")


def run_or_stop(func, *args, **kwargs):
    """Call a helper; on bad parameters or an unfittable survey show the error and stop the page."""
    try:
        return func(*args, **kwargs)
    except InvalidArgument as exc:
        st.error(str(exc))
        st.stop()
    except PerfectSeparationError:
        st.error(UNFITTABLE_MESSAGE)
        st.stop()


def run_or_warn(func, *args, **kwargs):
    """Like run_or_stop, but warn and return None so the rest of the page still renders."""
    try:
        return func(*args, **kwargs)
    except InvalidArgument as exc:
        st.warning(str(exc))
    except PerfectSeparationError:
        st.warning(UNFITTABLE_MESSAGE)
    return None
