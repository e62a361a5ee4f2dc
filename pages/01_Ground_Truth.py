"""Chapter 1: The Ground Truth -- A species whose niche we know exactly."""
import streamlit as st
import numpy as np
import plotly.graph_objects as go

from utils.ground_truth import true_linear_predictor, true_probability, truth_curve
from utils.plotting import apply_common_layout, truth_and_fits_figure
from utils.constants import AXIS_LABELS, DOMAIN_LO, DOMAIN_HI, MODEL_COLORS, TRUTH_COLOR
from utils.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(1, "The Ground Truth", part="I")
st.markdown(
    "Every model in this tutorial is trying to recover one curve: the probability that our "
    "invented species is present at a site, as a function of one environmental gradient. "
    "Before fitting anything, let us look at that curve properly, because its quirks are "
    "exactly what will separate the models that cope from the ones that do not."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Formula
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. Building the Curve")

formula_box(
    "True Occurrence Probability",
    r"\underbrace{f(x)}_{\text{P(presence)}} = \underbrace{T_2}_{\text{t CDF, 2 df}}\!\left("
    r"\underbrace{\tfrac{x}{2}}_{\text{trend}} + \underbrace{\sin^2 x}_{\text{bump}}"
    r" - \underbrace{\tfrac{x^2}{5}}_{\text{niche edge}} + \underbrace{0.5\,\mathrm{sign}(x)}_{\text{step}}\right)",
    "The bracket is the linear predictor: a gentle upward trend, a wiggle from sin², a "
    "quadratic that pulls both ends down, and a jump of 1 at x = 0. The Student-t CDF squashes "
    "it into (0, 1), with heavier tails than the logistic link a GLM would assume.",
)

concept_box(
    "Why Not Just a Logistic Curve?",
    "If the truth were a logistic function of a polynomial, a logistic GLM with the right "
    "polynomial would be <i>exactly</i> right and this would be a very short tutorial. Real "
    "niches are not that polite. The sin² bump, the step at zero and the t link are all "
    "things no standard model has been told about. Each model has to approximate them, and how "
    "it approximates them is the whole story."
)

grid_df = truth_curve()
eta = true_linear_predictor(grid_df["x"].to_numpy())

fig_eta = go.Figure()
fig_eta.add_trace(go.Scatter(x=grid_df["x"], y=eta, mode="lines", name="Linear predictor",
                             line=dict(color=MODEL_COLORS["glm"], width=3)))
fig_eta.add_hline(y=0, line_dash="dot", line_color="gray")
apply_common_layout(fig_eta, title="Before the link: the linear predictor", height=380)
fig_eta.update_layout(xaxis_title=AXIS_LABELS["x"], yaxis_title="η(x)")
st.plotly_chart(fig_eta, use_container_width=True)

st.plotly_chart(
    truth_and_fits_figure(grid_df, title="After the link: the occurrence probability f(x)", height=420),
    use_container_width=True,
)

insight_box(
    "The species peaks a little to the right of zero, has a shoulder on the left from the "
    "sin² bump, and never quite reaches probability 1 even at its optimum. At the edges of the "
    "gradient it fades out slowly rather than vanishing, courtesy of the heavy t tails."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Probe a Point
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Probe a Site")

x0 = st.slider("Gradient value x₀", float(DOMAIN_LO), float(DOMAIN_HI), 0.0, 0.1, key="gt_x0")
col1, col2 = st.columns(2)
col1.metric("Linear predictor η(x₀)", f"{true_linear_predictor(x0):.3f}")
col2.metric("P(presence at x₀)", f"{true_probability(x0):.3f}")

st.markdown(
    f"If you surveyed 100 sites that all sat at x = {x0:.1f}, you would expect to see the "
    f"species at about **{100 * true_probability(x0):.0f}** of them. Not exactly that many: "
    "each site is its own coin flip. That randomness is the noise every model in this "
    "tutorial has to see through."
)

# Zoom on the step
st.subheader("The Step at Zero")
zoom = np.linspace(-0.5, 0.5, 201)
fig_zoom = go.Figure()
fig_zoom.add_trace(go.Scatter(x=zoom, y=true_probability(zoom), mode="lines", name="f(x)",
                              line=dict(color=TRUTH_COLOR, width=3)))
apply_common_layout(fig_zoom, title="Zoomed in around x = 0", height=350)
fig_zoom.update_layout(xaxis_title=AXIS_LABELS["x"], yaxis_title=AXIS_LABELS["p"])
st.plotly_chart(fig_zoom, use_container_width=True)

warning_box(
    "It is tempting to read a sharp change in a fitted curve as a real ecological threshold. "
    "Here there <i>is</i> one, at x = 0, and it is small: 0.33 just left of zero versus 0.67 "
    "just right of it. Whether a model can find it with 200 coin flips is a different question."
)

code_example("""
import numpy as np
from scipy import stats

def true_probability(x):
    eta = x / 2 + np.sin(x) ** 2 - x ** 2 / 5 + np.where(x > 0, 0.5, -0.5)
    return stats.t.cdf(eta, df=2)

true_probability(0.0)   # 0.3333...
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "Why is f(x) guaranteed to stay between 0 and 1 for every x?",
    [
        "Because the gradient only runs from -6 to 6",
        "Because it is a cumulative distribution function evaluated at some number",
        "Because sin² is bounded",
        "It is not guaranteed",
    ],
    correct_idx=1,
    explanation="Whatever the linear predictor does, a CDF maps the whole real line into [0, 1]. "
    "The domain bounds only decide where we sample, not what f can return.",
    key="q_truth_1",
)

takeaways([
    "We know the true occurrence curve exactly, so every fitted model can be graded against it.",
    "The truth has features no standard model assumes: a bump, a step at zero, and a heavy-tailed link.",
    "f(x) is a probability, not an outcome: a site at the species' optimum can still come up empty.",
])

navigation(prev_label="Welcome", prev_page="app.py",
           next_label="Ch 2: Sampling", next_page="02_Sampling.py")
