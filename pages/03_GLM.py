"""Chapter 3: GLMs -- Polynomial logistic regression and the degree knob."""
import streamlit as st
import pandas as pd

from utils.data_loader import load_demo_data, sidebar_controls
from utils.ground_truth import truth_curve
from utils.ml_helpers import compare_flexibility
from utils.stats_helpers import curve_error
from utils.plotting import truth_and_fits_figure
from utils.constants import GLM_DEGREES
from utils.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, run_or_stop,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(3, "Generalized Linear Models", part="II")
st.markdown(
    "The GLM is the workhorse of species distribution modelling, and for good reason: it is "
    "fast, it is interpretable, and when you get the functional form roughly right it is hard "
    "to beat. The catch is that phrase, *roughly right*. You have to choose the form yourself, "
    "and for a single gradient that usually means choosing a polynomial degree."
)

seed, n_small, n_sets = sidebar_controls()
small_sets, combined = load_demo_data(seed, n_small, n_sets)
truth = truth_curve()


@st.cache_data(show_spinner="Fitting GLMs...")
def glm_curves(seed, n_small, n_sets, degree):
    small, pooled = load_demo_data(seed, n_small, n_sets)
    return compare_flexibility("glm", small, pooled, truth["x"].to_numpy(), degree=degree)


# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Model
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. A Polynomial on the Logit Scale")

formula_box(
    "Polynomial Logistic GLM",
    r"\underbrace{\log\frac{p(x)}{1 - p(x)}}_{\text{log-odds of presence}} = "
    r"\underbrace{\beta_0 + \beta_1 x + \beta_2 x^2 + \dots + \beta_d x^d}_{\text{degree-}d\text{ polynomial}}",
    "The model is fit by maximum likelihood with a Bernoulli (binomial) family. "
    "The degree d fixes how many bends the curve is allowed: d - 1 at most.",
)

concept_box(
    "What the Degree Buys You",
    "<b>d = 1</b>: a plain sigmoid. It can only go up or only go down, so a hump-shaped "
    "niche is beyond it.<br>"
    "<b>d = 2</b>: the classic ecologist's Gaussian-ish response, one peak.<br>"
    "<b>d = 3 to 5</b>: enough to bend around a shoulder.<br>"
    "<b>d = 9 and up</b>: enough to bend around individual coin flips."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Interactive Fit
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Slide the Degree")

degree = st.select_slider("Polynomial degree", options=list(range(1, 13)), value=GLM_DEGREES[1],
                          key="glm_degree")
curves = run_or_stop(glm_curves, seed, n_small, n_sets, degree)

show_points = st.checkbox("Show the pooled observations", value=False, key="glm_points")
st.plotly_chart(
    truth_and_fits_figure(truth, curves, observations=combined if show_points else None,
                          title=f"Degree-{degree} GLM fits: {n_sets} small surveys and the pooled survey"),
    use_container_width=True,
)

rows = []
for label, curve in curves.items():
    err = curve_error(curve["p"], truth["p"])
    rows.append({"Fit": label, "MAE vs truth": round(err["mae"], 4), "Max |error|": round(err["max_abs"], 4)})
st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

insight_box(
    "At degree 1 every survey agrees, and every survey is wrong in the same way: a line on "
    "the logit scale cannot fold back down. Push past degree 8 or so and the small-survey "
    "curves start to fan out wildly near the ends of the gradient, where a polynomial has "
    "the most freedom and the data have the least say. The pooled fit, with five times the "
    "data, tolerates high degrees much better."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Degree Sweep
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Three Degrees Side by Side")

cols = st.columns(len(GLM_DEGREES))
for col, d in zip(cols, GLM_DEGREES):
    with col:
        st.plotly_chart(
            truth_and_fits_figure(truth, run_or_stop(glm_curves, seed, n_small, n_sets, d),
                                  title=f"Degree {d}", height=380),
            use_container_width=True,
        )

warning_box(
    "A high-degree polynomial does not 'fail to converge' or throw an error when it overfits. "
    "It returns a perfectly confident curve that dives to 0 or shoots to 1 wherever a few "
    "unlucky coin flips lined up. The software will not warn you; only the truth, or a "
    "held-out survey, will."
)

code_example("""
import numpy as np
import statsmodels.api as sm

# Legendre basis on x scaled to [-1, 1] keeps high degrees well-conditioned
z = x / 6
X = np.polynomial.legendre.legvander(z, degree)
result = sm.GLM(y, X, family=sm.families.Binomial()).fit()
p_grid = result.predict(np.polynomial.legendre.legvander(grid / 6, degree))
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "Where do high-degree polynomial GLMs tend to go most wrong?",
    [
        "In the middle of the gradient, where data are densest",
        "Near the ends of the gradient, where a polynomial is least constrained",
        "Exactly at the step at x = 0",
        "Nowhere, as long as the model converges",
    ],
    correct_idx=1,
    explanation="Polynomials are global: every coefficient affects the whole curve, and at the "
    "edges there are neighbours on only one side to hold it down. This is the same edge "
    "blow-up you see in ordinary polynomial regression.",
    key="q_glm_1",
)

takeaways([
    "A GLM's flexibility is fixed up front by the degree you choose.",
    "Too low: all surveys agree on the wrong shape (high bias).",
    "Too high: each survey gets its own wild shape (high variance), worst at the gradient ends.",
    "More data shifts the sweet spot toward higher degrees, but never removes it.",
])

navigation(prev_label="Ch 2: Sampling", prev_page="02_Sampling.py",
           next_label="Ch 4: GAMs", next_page="04_GAM.py")
