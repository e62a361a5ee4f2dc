"""Model Flexibility for Presence/Absence Data — Main Entry Point."""
import streamlit as st

from utils.data_loader import load_demo_data, sidebar_controls
from utils.ground_truth import true_probability

st.set_page_config(
    page_title="Model Flexibility for Presence/Absence Data",
    page_icon="🦋",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("How Flexible Should a Species Distribution Model Be?")
st.subheader("GLMs, GAMs and boosted trees fit to noisy presence/absence data, with the answer key in hand")

st.markdown("""
Here is the awkward thing about species distribution modelling: in the field you never get to see
the curve you are trying to estimate. You walk transects, you record "seen" or "not seen", and then
you hand a column of zeros and ones to a model and trust whatever shape comes back. Was that bump at
the warm end real? Is the drop-off at high elevation the species, or the noise? You cannot check.

So in this tutorial we cheat. We **invent the species**. We write down its true probability of
occurrence along an environmental gradient, simulate surveys from it, and then fit increasingly
flexible models to those surveys. Because we know the truth, we can see exactly when a model is
learning the niche and when it is learning the coin flips.

### The Simulated Surveys

Each survey visits sites spread uniformly along a single gradient *x* between -6 and 6 (think of it
as standardised temperature, or moisture). At every site the species is present with probability
*f(x)* and absent otherwise. One Bernoulli coin flip per site, nothing more.

We draw several **small surveys** of 200 sites each, and we also pool them into one **combined
survey**. Small surveys show how much a fitted curve wobbles from one dataset to the next; the
combined survey shows what more data buys you.

### Course Outline
""")

parts = {
    "Part I: The Data-Generating Process (Ch 1-2)": "The true occurrence curve, Bernoulli sampling",
    "Part II: Model Classes (Ch 3-5)": "Polynomial GLMs, penalized GAMs, boosted regression trees",
    "Part III: Comparison (Ch 6)": "All three side by side, bias², variance and held-out scores",
}

for part, desc in parts.items():
    st.markdown(f"**{part}** -- {desc}")

st.divider()
st.markdown("**Pick a chapter from the sidebar. The sidebar also lets you re-roll the surveys.**")

# Show dataset preview
st.subheader("Survey Preview")
seed, n_small, n_sets = sidebar_controls()
small_sets, combined = load_demo_data(seed, n_small, n_sets)
preview = small_sets[0].head(20).assign(true_p=lambda d: true_probability(d["x"]))
st.dataframe(preview, use_container_width=True)

col1, col2, col3, col4 = st.columns(4)
col1.metric("Small Surveys", len(small_sets))
col2.metric("Sites per Survey", n_small)
col3.metric("Combined Sites", f"{len(combined):,}")
col4.metric("Prevalence", f"{combined['y'].mean():.1%}")
