"""Chapter 5: Boosted Regression Trees -- Trees, depth, shrinkage and a staircase of a curve."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from utils.data_loader import load_demo_data, sidebar_controls
from utils.ground_truth import truth_curve
from utils.ml_helpers import compare_flexibility, fit_brt
from utils.stats_helpers import curve_error
from utils.plotting import apply_common_layout, truth_and_fits_figure
from utils.constants import (
    BRT_DEFAULT_SUBSAMPLE, BRT_PRESETS, LARGE_FIT_COLOR, SMALL_FIT_COLORS,
)
from utils.ui_components import (
    chapter_header, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, run_or_stop,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(5, "Boosted Regression Trees", part="II")
st.markdown(
    "Boosted regression trees (BRTs) come at the problem from the opposite direction to GLMs. "
    "There is no formula at all. The model starts with a flat guess, fits a tiny decision "
    "tree to whatever it got wrong, adds a shrunken copy of that tree, and repeats, hundreds "
    "or thousands of times. Each tree is a step function, so the final curve is a staircase; "
    "with enough small steps the staircase can look smooth, or it can look like a bar code."
)

seed, n_small, n_sets = sidebar_controls()
truth = truth_curve()


@st.cache_data(show_spinner="Boosting trees...")
def brt_curves(seed, n_small, n_sets, n_trees, max_depth, learning_rate, subsample):
    small, pooled = load_demo_data(seed, n_small, n_sets)
    return compare_flexibility("brt", small, pooled, truth["x"].to_numpy(), n_trees=n_trees,
                               max_depth=max_depth, learning_rate=learning_rate,
                               subsample=subsample)


@st.cache_data(show_spinner="Tracking training and truth error...")
def staged_errors(seed, n_small, n_sets, n_trees, max_depth, learning_rate, subsample):
    small, _ = load_demo_data(seed, n_small, n_sets)
    model = fit_brt(small[0], n_trees, max_depth, learning_rate, subsample=subsample)
    grid = truth["x"].to_numpy()[:, None]
    x_train = small[0][["x"]].to_numpy()
    y_train = small[0]["y"].to_numpy()
    train_dev, truth_mae = [], []
    for p_train, p_grid in zip(model.model_.staged_predict_proba(x_train),
                               model.model_.staged_predict_proba(grid)):
        p1 = np.clip(p_train[:, 1], 1e-12, 1 - 1e-12)
        train_dev.append(-np.mean(y_train * np.log(p1) + (1 - y_train) * np.log(1 - p1)))
        truth_mae.append(curve_error(p_grid[:, 1], truth["p"])["mae"])
    return pd.DataFrame({"trees": np.arange(1, len(train_dev) + 1),
                         "train_deviance": train_dev, "truth_mae": truth_mae})


# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- How Boosting Builds a Curve
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. Many Small Corrections")

formula_box(
    "Gradient Boosting Update (Bernoulli Deviance)",
    r"\underbrace{F_m(x)}_{\text{log-odds after } m \text{ trees}} = \underbrace{F_{m-1}(x)}_{\text{previous}} + "
    r"\underbrace{\eta}_{\text{shrinkage}} \cdot \underbrace{h_m(x)}_{\text{tree fit to residuals}}, \qquad "
    r"p(x) = \frac{1}{1 + e^{-F_M(x)}}",
    "Each h_m is a small tree fit to the gradient of the Bernoulli deviance, which for 0/1 "
    "data is simply y - p. Three knobs matter: the number of trees M, the tree depth, and the "
    "shrinkage (learning rate) η.",
)

st.markdown("""
| Knob | Small value | Large value |
|---|---|---|
| Number of trees | Under-fit, curve stays near the prevalence | More steps, eventually fits noise |
| Tree depth | Depth 1 = stumps, one split per tree | Deep trees carve up the gradient fast |
| Learning rate | Cautious, needs many trees | Each tree lands hard, overfits quickly |
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Interactive Fit
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Build Your Own Ensemble")

preset = st.radio("Start from a preset", list(BRT_PRESETS), horizontal=True, index=1,
                  key="brt_preset")
defaults = BRT_PRESETS[preset]
c1, c2, c3, c4 = st.columns(4)
with c1:
    n_trees = st.select_slider("Number of trees", options=[10, 50, 100, 300, 1000, 2000],
                               value=defaults["n_trees"], key=f"brt_trees_{preset}")
with c2:
    max_depth = st.slider("Tree depth", 1, 6, defaults["max_depth"], 1, key=f"brt_depth_{preset}")
with c3:
    learning_rate = st.select_slider("Learning rate", options=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
                                     value=defaults["learning_rate"], key=f"brt_lr_{preset}")
with c4:
    subsample = st.slider("Bag fraction", 0.3, 1.0, BRT_DEFAULT_SUBSAMPLE, 0.05, key="brt_bag")

curves = run_or_stop(brt_curves, seed, n_small, n_sets, n_trees, max_depth, learning_rate, subsample)
st.plotly_chart(
    truth_and_fits_figure(truth, curves,
                          title=f"BRT: {n_trees} trees, depth {max_depth}, learning rate {learning_rate}"),
    use_container_width=True,
)

rows = []
for label, curve in curves.items():
    err = curve_error(curve["p"], truth["p"])
    rows.append({"Fit": label, "MAE vs truth": round(err["mae"], 4), "Max |error|": round(err["max_abs"], 4)})
st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

insight_box(
    "Try the 'wiggly' preset. The small-survey curves become jagged staircases that jump "
    "between near-0 and near-1 over tiny stretches of gradient: each jump is a handful of "
    "sites whose coin flips happened to agree. The step at x = 0, on the other hand, is "
    "exactly the kind of feature trees find easily, which smooth models tend to blur."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Training Fit vs Truth
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Watching Overfitting Happen, Tree by Tree")

st.markdown(
    "Boosting gives us a rare treat: we can replay the ensemble one tree at a time. Below, "
    "for the first small survey, the training deviance (how well the model fits the coin "
    "flips it saw) and the error against the true curve (how well it fits the species)."
)

stages = run_or_stop(staged_errors, seed, n_small, n_sets, n_trees, max_depth, learning_rate,
                     subsample)
fig_stage = go.Figure()
fig_stage.add_trace(go.Scatter(x=stages["trees"], y=stages["train_deviance"], mode="lines",
                               name="Training deviance", line=dict(color=SMALL_FIT_COLORS[0])))
fig_stage.add_trace(go.Scatter(x=stages["trees"], y=stages["truth_mae"], mode="lines",
                               name="MAE vs truth", line=dict(color=LARGE_FIT_COLOR), yaxis="y2"))
apply_common_layout(fig_stage, title="Training fit keeps improving; fit to the truth does not", height=420)
fig_stage.update_layout(
    xaxis_title="Number of trees",
    yaxis=dict(title="Training deviance"),
    yaxis2=dict(title="MAE vs truth", overlaying="y", side="right"),
)
st.plotly_chart(fig_stage, use_container_width=True)

best = stages.loc[stages["truth_mae"].idxmin()]
st.markdown(
    f"The error against the truth bottoms out at **{int(best['trees'])} trees** "
    f"(MAE {best['truth_mae']:.3f}). Past that point each new tree still lowers the training "
    "deviance, but it is now memorising coin flips."
)

warning_box(
    "In real data there is no truth curve to watch, which is why BRT workflows pick the "
    "number of trees by cross-validation or a held-out set. Reporting the training deviance "
    "as evidence of a good model is the classic mistake."
)

code_example("""
from sklearn.ensemble import GradientBoostingClassifier

brt = GradientBoostingClassifier(
    n_estimators=300, max_depth=2, learning_rate=0.01, subsample=0.75, random_state=42,
)
brt.fit(x.reshape(-1, 1), y)             # log-loss == Bernoulli deviance
p_grid = brt.predict_proba(grid.reshape(-1, 1))[:, 1]
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "Why does a BRT's fitted curve look like a staircase on a single gradient?",
    [
        "Because the learning rate is too small",
        "Because every tree is a piecewise-constant function of x, and a sum of step functions is a step function",
        "Because the Bernoulli deviance is discontinuous",
        "Because the data are binary",
    ],
    correct_idx=1,
    explanation="Each tree splits x into intervals with a constant value on each. Adding them "
    "up, however many, still gives a step function; small learning rates just make the steps "
    "smaller and more numerous.",
    key="q_brt_1",
)

takeaways([
    "BRTs assume no functional form; the curve is a sum of many small shrunken trees.",
    "Flexibility grows with the number of trees, their depth and the learning rate together.",
    "Training deviance always improves with more trees; error against the truth turns around.",
    "Trees capture sharp steps well and smooth curves poorly; GLMs and GAMs are the reverse.",
])

navigation(prev_label="Ch 4: GAMs", prev_page="04_GAM.py",
           next_label="Ch 6: Comparison", next_page="06_Model_Comparison.py")
