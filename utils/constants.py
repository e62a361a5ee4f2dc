"""Shared constants: domain, sampling defaults, model presets, colors, labels."""

# Environmental gradient the simulated sites are drawn from
DOMAIN_LO = -6.0
DOMAIN_HI = 6.0

T_DF = 2  # degrees of freedom of the Student-t link in the ground truth

DEFAULT_SEED = 42
SMALL_SAMPLE_SIZE = 200
N_SMALL_SETS = 5
GRID_POINTS = 400
HOLDOUT_SIZE = 2000

MODEL_KINDS = ["glm", "gam", "brt"]

MODEL_LABELS = {
    "glm": "GLM (polynomial)",
    "gam": "GAM (penalized spline)",
    "brt": "Boosted Regression Trees",
}

# Flexibility presets: simple, moderate, wiggly
GLM_DEGREES = [1, 3, 9]
GAM_DFS = [4, 8, 20]
GAM_DEFAULT_ALPHA = 1.0
GAM_ALPHAS = [GAM_DEFAULT_ALPHA, GAM_DEFAULT_ALPHA, 0.0]
BRT_PRESETS = {
    "simple": {"n_trees": 50, "max_depth": 1, "learning_rate": 0.05},
    "moderate": {"n_trees": 300, "max_depth": 2, "learning_rate": 0.01},
    "wiggly": {"n_trees": 2000, "max_depth": 5, "learning_rate": 0.1},
}
BRT_DEFAULT_SUBSAMPLE = 0.75

TRUTH_COLOR = "#1B1B1B"
LARGE_FIT_COLOR = "#E63946"
SMALL_FIT_COLORS = ["#2A9D8F", "#264653", "#F4A261", "#7209B7", "#FB8500",
                    "#457B9D", "#6A994E", "#BC4749"]
OBSERVATION_COLOR = "#8D99AE"

MODEL_COLORS = {
    "glm": "#2E86C1",
    "gam": "#2A9D8F",
    "brt": "#F4A261",
}

AXIS_LABELS = {
    "x": "Environmental gradient (x)",
    "y": "Observed presence (0/1)",
    "p": "P(presence)",
}

PART_TITLES = {
    "I": "The Data-Generating Process",
    "II": "Model Classes",
    "III": "Comparison",
}
