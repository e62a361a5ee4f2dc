"""Chapter 2: Presence/Absence Sampling -- What a survey actually sees."""
import streamlit as st
import numpy as np
import pandas as pd

from utils.data_loader import load_demo_data, sample_observations, sidebar_controls
from utils.ground_truth import truth_curve
from utils.stats_helpers import binned_frequency
from utils.plotting import observations_figure
from utils.constants import DOMAIN_LO, DOMAIN_HI
from utils.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, run_or_stop,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(2, "Presence/Absence Sampling", part="I")
st.markdown(
    "In Chapter 1 we saw the curve. Nobody in the field ever sees the curve. What a survey "
    "returns is a list of sites and, for each, a 1 or a 0. This chapter is about how much, "
    "and how little, those zeros and ones tell you."
)

seed, n_small, n_sets = sidebar_controls()
truth = truth_curve()

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Sampling Recipe
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. The Recipe")

concept_box(
    "One Coin Flip per Site",
    "1. Pick a site: draw x uniformly between -6 and 6.<br>"
    "2. Look up the true probability f(x).<br>"
    "3. Flip a coin that lands 'present' with probability f(x).<br><br>"
    "That is the entire data-generating process. Two sites at the same x still get their "
    "own, independent flips, so they can disagree."
)

formula_box(
    "Bernoulli Observation Model",
    r"\underbrace{x_i}_{\text{site}} \sim \mathrm{Uniform}(-6, 6), \qquad "
    r"\underbrace{y_i}_{\text{present?}} \mid x_i \sim \mathrm{Bernoulli}\big(f(x_i)\big)",
    "Each y_i is 0 or 1. The only information about f(x) in a single y_i is one bit, which is "
    "why you need a lot of them.",
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Interactive Survey
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Run a Survey")

col_n, col_b = st.columns(2)
with col_n:
    n_sites = st.select_slider("Number of sites", options=[50, 100, 200, 500, 1000, 5000, 20000],
                               value=200, key="samp_n")
with col_b:
    n_bins = st.slider("Bins for the empirical frequency", 4, 30, 12, 1, key="samp_bins")

survey = run_or_stop(sample_observations, n_sites, DOMAIN_LO, DOMAIN_HI,
                     rng=np.random.RandomState(seed))
binned = binned_frequency(survey, n_bins=n_bins)

st.plotly_chart(
    observations_figure(survey, truth, binned=binned,
                        title=f"{n_sites} simulated sites vs the true curve"),
    use_container_width=True,
)

col1, col2, col3 = st.columns(3)
col1.metric("Sites", f"{len(survey):,}")
col2.metric("Presences", int(survey["y"].sum()))
col3.metric("Prevalence", f"{survey['y'].mean():.1%}")

insight_box(
    "With 200 sites and 12 bins, each bin holds roughly 17 coin flips and its standard error "
    "is often ±0.1 or worse. Slide up to 20,000 sites and the red dots snap onto the dashed "
    "truth. That is the law of large numbers doing its job, and it is also a preview of the "
    "central tension: small surveys simply do not contain enough bits to pin down a wiggly curve."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Replicate Surveys
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Same Species, Different Surveys")

st.markdown(
    "The later chapters do not fit just one survey. They fit several independent small "
    "surveys from the same species, plus all of them pooled. Here they are:"
)

small_sets, combined = load_demo_data(seed, n_small, n_sets)
summary = pd.DataFrame({
    "Survey": [f"Survey {i}" for i in range(1, len(small_sets) + 1)] + ["Combined"],
    "Sites": [len(s) for s in small_sets] + [len(combined)],
    "Presences": [int(s["y"].sum()) for s in small_sets] + [int(combined["y"].sum())],
    "Prevalence": [round(s["y"].mean(), 3) for s in small_sets] + [round(combined["y"].mean(), 3)],
})
st.dataframe(summary, use_container_width=True, hide_index=True)

warning_box(
    "Pooling the surveys does not deduplicate anything. If two surveys happened to visit the "
    "same x, both rows stay, each with its own independent outcome. That is correct: they are "
    "two visits, not one."
)

code_example("""
import numpy as np
import pandas as pd
from scipy import stats

rng = np.random.RandomState(42)
x = rng.uniform(-6, 6, size=200)
p = stats.t.cdf(x / 2 + np.sin(x) ** 2 - x ** 2 / 5 + np.where(x > 0, 0.5, -0.5), df=2)
y = rng.binomial(1, p)
survey = pd.DataFrame({"x": x, "y": y})

# Pool several surveys, keeping their order
combined = pd.concat([survey_a, survey_b], ignore_index=True)
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "A site at x = 0.3 has true probability of about 0.73. You visit it once and record an absence. What does that tell you?",
    [
        "The model for f(x) must be wrong near 0.3",
        "Almost nothing: absences happen about one time in four there",
        "The species has gone locally extinct",
        "The site should be removed as an outlier",
    ],
    correct_idx=1,
    explanation="One Bernoulli draw carries one bit. An absence where presence is likely is "
    "perfectly ordinary noise, and a flexible model that bends toward it is overfitting.",
    key="q_sampling_1",
)

takeaways([
    "Each site contributes one independent coin flip with success probability f(x).",
    "Binned presence frequencies are noisy estimates of f(x); the noise shrinks only as sites accumulate.",
    "Independent small surveys of the same species differ, sometimes a lot.",
    "Pooling surveys is plain concatenation: order kept, nothing merged.",
])

navigation(prev_label="Ch 1: Ground Truth", prev_page="01_Ground_Truth.py",
           next_label="Ch 3: GLMs", next_page="03_GLM.py")
