"""Chapter 4: GAMs -- Penalized splines, degrees of freedom and the smoothing penalty."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from utils.data_loader import load_demo_data, sidebar_controls
from utils.ground_truth import truth_curve
from utils.ml_helpers import compare_flexibility
from utils.stats_helpers import curve_error
from utils.plotting import apply_common_layout, truth_and_fits_figure
from utils.constants import AXIS_LABELS, GAM_DEFAULT_ALPHA, GAM_DFS, MODEL_COLORS
from utils.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, run_or_stop, run_or_warn,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(4, "Generalized Additive Models", part="II")
st.markdown(
    "The GLM chapter ended with an uncomfortable choice: pick a low degree and miss the shape, "
    "or pick a high degree and let the ends go haywire. GAMs sidestep the choice of *form*. "
    "Instead of one global polynomial, a GAM builds the curve from many small local pieces "
    "(splines) and then charges a penalty for wiggliness. You still choose how flexible it "
    "may be, but the flexibility is spread evenly along the gradient instead of piling up at "
    "the edges."
)

seed, n_small, n_sets = sidebar_controls()
truth = truth_curve()


@st.cache_data(show_spinner="Fitting GAMs...")
def gam_curves(seed, n_small, n_sets, df, alpha):
    small, pooled = load_demo_data(seed, n_small, n_sets)
    return compare_flexibility("gam", small, pooled, truth["x"].to_numpy(), df=df, alpha=alpha)


# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Model
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. Splines with a Roughness Bill")

formula_box(
    "Penalized Logistic GAM",
    r"\underbrace{\log\frac{p(x)}{1 - p(x)}}_{\text{log-odds}} = \beta_0 + "
    r"\underbrace{\sum_{k=1}^{K} \gamma_k B_k(x)}_{\text{spline smooth } s(x)}, \qquad "
    r"\text{maximize } \ell(\gamma) - \underbrace{\alpha \int s''(x)^2\,dx}_{\text{wiggliness penalty}}",
    "B_k are cubic B-spline basis functions; K (the 'df' slider) sets how many there are. "
    "The penalty weight α decides how much curvature the fit may spend.",
)

concept_box(
    "Two Knobs, One Idea",
    "<b>df</b> is the budget: the maximum number of basis functions, and so the maximum "
    "complexity. <b>α</b> is the tax: with α large the fit is pushed toward a straight line "
    "on the logit scale no matter how big the budget; with α near zero it spends the whole "
    "budget. Ecologists often set a modest df (say 4) and let the penalty do the rest."
)

# Basis functions illustration
st.subheader("What the Basis Looks Like")
grid = truth["x"].to_numpy()
n_basis = st.slider("Number of basis functions to draw", 4, 20, 8, 1, key="gam_basis")
knots = np.linspace(grid.min(), grid.max(), n_basis - 2)
fig_basis = go.Figure()
for k in knots:
    bump = np.clip(1 - np.abs(grid - k) / (knots[1] - knots[0]) / 2, 0, None) ** 3
    fig_basis.add_trace(go.Scatter(x=grid, y=bump, mode="lines", showlegend=False,
                                   line=dict(color=MODEL_COLORS["gam"], width=1.5)))
apply_common_layout(fig_basis, title="Local bumps: each one only affects its own stretch of the gradient",
                    height=320)
fig_basis.update_layout(xaxis_title=AXIS_LABELS["x"], yaxis_title="basis value")
st.plotly_chart(fig_basis, use_container_width=True)
st.caption("Schematic only: the fitted model uses proper cubic B-splines, but the point is the same.")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Interactive Fit
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Turn the Knobs")

col_df, col_alpha = st.columns(2)
with col_df:
    df_k = st.slider("Spline df (basis size)", 4, 30, GAM_DFS[1], 1, key="gam_df")
with col_alpha:
    alpha = st.select_slider("Penalty α", options=[0.0, 0.01, 0.1, 1.0, 10.0, 100.0, 1000.0],
                             value=GAM_DEFAULT_ALPHA, key="gam_alpha")

curves = run_or_stop(gam_curves, seed, n_small, n_sets, df_k, alpha)
st.plotly_chart(
    truth_and_fits_figure(truth, curves,
                          title=f"GAM fits with df = {df_k}, α = {alpha}"),
    use_container_width=True,
)

rows = []
for label, curve in curves.items():
    err = curve_error(curve["p"], truth["p"])
    rows.append({"Fit": label, "MAE vs truth": round(err["mae"], 4), "RMSE vs truth": round(err["rmse"], 4)})
st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

insight_box(
    "Set α to 0 and df to 25: the small-survey curves turn into seismographs, because with "
    "no penalty a spline is just a very flexible GLM. Now raise α to 10 without touching df. "
    "The wiggles melt away even though the basis is as large as before. That is the point "
    "of penalization: you can afford a generous basis because the penalty, not the basis "
    "size, is what stops the overfitting."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- df Sweep
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Basis Size Sweep (No Penalty)")

cols = st.columns(len(GAM_DFS))
for col, d in zip(cols, GAM_DFS):
    with col:
        sweep = run_or_warn(gam_curves, seed, n_small, n_sets, d, 0.0)
        if sweep is not None:
            st.plotly_chart(truth_and_fits_figure(truth, sweep, title=f"df = {d}, α = 0", height=380),
                            use_container_width=True)

warning_box(
    "'The GAM picked the shape, so it must be right' is a trap. A GAM is only as humble as "
    "its penalty. With a large df and a weak penalty it will chase noise as eagerly as any "
    "high-degree polynomial, just more evenly."
)

code_example("""
import numpy as np
import statsmodels.api as sm
from statsmodels.gam.api import BSplines, GLMGam

smoother = BSplines(x[:, None], df=[8], degree=[3],
                    knot_kwds=[{"lower_bound": -6, "upper_bound": 6}])
gam = GLMGam(y, exog=np.ones((len(y), 1)), smoother=smoother,
             alpha=1.0, family=sm.families.Binomial())
result = gam.fit()
p_grid = result.predict(exog=np.ones((len(grid), 1)), exog_smooth=grid[:, None])
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "You fit a GAM with df = 25 and it looks wildly overfit. Which change most directly addresses that while keeping a flexible basis?",
    [
        "Lower the df to 3",
        "Increase the penalty α",
        "Switch to a degree-9 polynomial GLM",
        "Remove the absences from the data",
    ],
    correct_idx=1,
    explanation="The penalty charges for curvature, so raising α smooths the fit without "
    "shrinking the basis. Lowering df also works but throws away the flexibility you may "
    "actually need for the bump and the step.",
    key="q_gam_1",
)

takeaways([
    "A GAM builds the response from local spline pieces, so flexibility is spread along the gradient rather than concentrated at the ends.",
    "df sets the maximum complexity; the penalty α decides how much of it is used.",
    "With no penalty, a big spline basis overfits small surveys just like a high-degree GLM.",
    "A generous basis plus a sensible penalty is the usual recipe.",
])

navigation(prev_label="Ch 3: GLMs", prev_page="03_GLM.py",
           next_label="Ch 5: Boosted Trees", next_page="05_Boosted_Trees.py")
