"""Chapter 6: Model Comparison -- GLM vs GAM vs BRT, bias, variance and held-out scores."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.express as px

from utils.data_loader import load_demo_data, sample_observations, sidebar_controls
from utils.ground_truth import true_probability, truth_curve
from utils.ml_helpers import classification_scores, fit_curves, predict_curve, train_model
from utils.stats_helpers import bias_variance_summary, bias_variance_table, curve_error
from utils.plotting import apply_common_layout, bias_variance_figure, truth_and_fits_figure
from utils.constants import (
    BRT_PRESETS, GAM_ALPHAS, GAM_DFS, GLM_DEGREES, HOLDOUT_SIZE, MODEL_COLORS,
    MODEL_KINDS, MODEL_LABELS,
)
from utils.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, run_or_stop,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(6, "Model Comparison", part="III")
st.markdown(
    "We have now met three model classes, each with its own flexibility knob. Time to put "
    "them in the same room. For each class we pick a setting, fit it to every small survey "
    "and to the pooled survey, and grade the results three ways: against the truth curve, "
    "by how much the fits disagree with each other, and on a fresh held-out survey."
)

seed, n_small, n_sets = sidebar_controls()
small_sets, combined = load_demo_data(seed, n_small, n_sets)
truth = truth_curve()
grid = truth["x"].to_numpy()

FLEX_LEVELS = ["simple", "moderate", "wiggly"]
flex = st.radio("Flexibility level for all three models", FLEX_LEVELS, index=1, horizontal=True,
                key="cmp_flex")
level = FLEX_LEVELS.index(flex)
MODEL_PARAMS = {
    "glm": {"degree": GLM_DEGREES[level]},
    "gam": {"df": GAM_DFS[level], "alpha": GAM_ALPHAS[level]},
    "brt": dict(BRT_PRESETS[flex]),
}

with st.expander("Settings used at this level"):
    st.json({MODEL_LABELS[k]: v for k, v in MODEL_PARAMS.items()})


@st.cache_data(show_spinner="Fitting every model to every survey...")
def replicate_curves(seed, n_small, n_sets, kind, params_items):
    small, _ = load_demo_data(seed, n_small, n_sets)
    return fit_curves(kind, small, grid, **dict(params_items))


# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- Pooled Fits Side by Side
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. One Survey's Worth of Data vs Five")

cols = st.columns(len(MODEL_KINDS))
for col, kind in zip(cols, MODEL_KINDS):
    params = MODEL_PARAMS[kind]
    small_fit = run_or_stop(train_model, kind, small_sets[0], **params)
    pooled_fit = run_or_stop(train_model, kind, combined, **params)
    fits = {
        "Survey 1": predict_curve(small_fit, grid),
        "All surveys combined": predict_curve(pooled_fit, grid),
    }
    with col:
        st.plotly_chart(truth_and_fits_figure(truth, fits, title=MODEL_LABELS[kind], height=400),
                        use_container_width=True)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Bias and Variance Across Replicates
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Bias² and Variance Across Replicate Surveys")

formula_box(
    "Pointwise Decomposition",
    r"\underbrace{\mathbb{E}\big[(\hat p(x) - f(x))^2\big]}_{\text{expected error at } x} = "
    r"\underbrace{\big(\bar p(x) - f(x)\big)^2}_{\text{bias}^2} + "
    r"\underbrace{\mathrm{Var}\big[\hat p(x)\big]}_{\text{variance}}",
    "p̄(x) is the average of the fitted curves across replicate surveys. Because we know f(x), "
    "both terms can be computed directly rather than estimated.",
)

if n_sets < 2:
    st.warning("Variance needs at least two small surveys. Raise 'Number of small surveys' in the sidebar.")
    st.stop()

summary_rows = []
tables = {}
for kind in MODEL_KINDS:
    curves = run_or_stop(replicate_curves, seed, n_small, n_sets, kind,
                         tuple(sorted(MODEL_PARAMS[kind].items())))
    tables[kind] = bias_variance_table(grid, curves, truth["p"])
    summary_rows.append({"Model": MODEL_LABELS[kind], **bias_variance_summary(tables[kind])})

summary_df = pd.DataFrame(summary_rows)
fig_bv = px.bar(
    summary_df.melt(id_vars="Model", value_vars=["bias2", "variance"],
                    var_name="Component", value_name="Mean over gradient"),
    x="Model", y="Mean over gradient", color="Component", barmode="stack",
)
apply_common_layout(fig_bv, title=f"Bias² + variance at the '{flex}' level", height=420)
st.plotly_chart(fig_bv, use_container_width=True)
st.dataframe(summary_df.round(5), use_container_width=True, hide_index=True)

kind_detail = st.selectbox("Show the pointwise decomposition for", MODEL_KINDS,
                           format_func=MODEL_LABELS.get, key="cmp_detail")
st.plotly_chart(bias_variance_figure(tables[kind_detail], title=MODEL_LABELS[kind_detail]),
                use_container_width=True)

insight_box(
    "Switch between 'simple' and 'wiggly'. At the simple level the bars are mostly bias: the "
    "models agree with each other and are wrong together. At the wiggly level the bias nearly "
    "vanishes and variance takes over: on average the fits are right, but any single one is "
    "unreliable. The moderate level is where the total is usually smallest, and which model "
    "class wins there depends as much on the truth's shape as on the algorithm."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Held-out Survey
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Scoring on a Fresh Survey")

concept_box(
    "What You Would Do Without the Truth",
    "In the field, the closest thing to the truth curve is a new, independent survey. We "
    f"simulate one with {HOLDOUT_SIZE:,} sites and score the pooled fits on it. The true "
    "curve gets scored too: that row is the best any model could possibly do, because the "
    "remaining error is pure coin-flip noise."
)

holdout = run_or_stop(sample_observations, HOLDOUT_SIZE, rng=np.random.RandomState(seed + 1))
score_rows = [{"Model": "Ground truth f(x)",
               **classification_scores(holdout["y"], true_probability(holdout["x"].to_numpy()))}]
for kind in MODEL_KINDS:
    model = run_or_stop(train_model, kind, combined, **MODEL_PARAMS[kind])
    p_hat = model.predict_proba(holdout["x"].to_numpy())
    err = curve_error(model.predict_proba(grid), truth["p"])
    score_rows.append({"Model": MODEL_LABELS[kind], **classification_scores(holdout["y"], p_hat),
                       "mae_vs_truth": err["mae"]})
scores_df = pd.DataFrame(score_rows)
st.dataframe(scores_df.round(4), use_container_width=True, hide_index=True)

fig_scores = px.bar(scores_df, x="Model", y="log_loss", color="Model",
                    color_discrete_map={MODEL_LABELS[k]: MODEL_COLORS[k] for k in MODEL_KINDS})
apply_common_layout(fig_scores, title="Held-out log-loss (lower is better)", height=380)
st.plotly_chart(fig_scores, use_container_width=True)

warning_box(
    "Look at how small the gaps in held-out log-loss are compared to the gaps in MAE against "
    "the truth. Binary outcomes are so noisy that a clearly wrong curve can score almost as "
    "well as the right one. Small differences in AUC or deviance between candidate models "
    "should not be over-interpreted."
)

code_example("""
from utils.data_loader import sample_replicates, concatenate_observations
from utils.ml_helpers import fit_curves
from utils.stats_helpers import bias_variance_table, bias_variance_summary

surveys = sample_replicates(5, 200)
curves = fit_curves("gam", surveys, grid, df=8, alpha=1.0)
table = bias_variance_table(grid, curves, truth_p)
bias_variance_summary(table)     # {'bias2': ..., 'variance': ..., 'total': ...}
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Quiz & Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

quiz(
    "Across replicate surveys, a model's fits agree closely with each other but all miss the bump near x = -1.5. What dominates its error?",
    ["Variance", "Bias", "Irreducible noise", "Data leakage"],
    correct_idx=1,
    explanation="Agreement between replicates means low variance; a shared, systematic miss is "
    "bias. More flexibility (or a better-chosen form) is the fix, not more regularization.",
    key="q_cmp_1",
)

takeaways([
    "Every model class can be made too stiff or too wiggly; the class matters less than the setting.",
    "Bias shows up as replicate fits that agree and are wrong; variance as fits that disagree.",
    "Pooling surveys cuts variance, which is why the pooled fit tolerates more flexibility.",
    "Held-out scores on binary data separate models only weakly; judge shapes with ecological sense too.",
])

navigation(prev_label="Ch 5: Boosted Trees", prev_page="05_Boosted_Trees.py")
