"""Model fitting wrappers: GLM, GAM and boosted trees on presence/absence data."""
import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm
import streamlit as st
from statsmodels.gam.api import BSplines, GLMGam
from sklearn.ensemble import GradientBoostingClassifier
from sklearn.metrics import brier_score_loss, log_loss, roc_auc_score

from utils.constants import (
    BRT_DEFAULT_SUBSAMPLE, DEFAULT_SEED, DOMAIN_LO, DOMAIN_HI, GAM_DEFAULT_ALPHA,
)
from utils.errors import InvalidArgument

logger = logging.getLogger(__name__)


def _check_training_data(obs):
    if len(obs) == 0:
        raise InvalidArgument("cannot fit a model to an empty observation set")
    classes = np.unique(obs["y"])
    if len(classes) < 2:
        raise InvalidArgument(
            f"need both presences and absences to fit, got only y={classes[0]}"
        )


def _check_positive_int(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")


class GLMPredictor:
    """Logistic GLM on a Legendre polynomial basis of the scaled gradient.

    Legendre columns are orthogonal on [-1, 1], so high degrees stay
    numerically tame (the same role R's ``poly()`` plays).
    """

    def __init__(self, degree, lo=DOMAIN_LO, hi=DOMAIN_HI):
        _check_positive_int("degree", degree)
        self.degree = degree
        self.lo, self.hi = lo, hi
        self.result_ = None

    def _design(self, x):
        z = (2 * np.asarray(x, dtype=float) - (self.lo + self.hi)) / (self.hi - self.lo)
        return np.polynomial.legendre.legvander(z, self.degree)

    def fit(self, obs):
        _check_training_data(obs)
        model = sm.GLM(obs["y"].to_numpy(), self._design(obs["x"]), family=sm.families.Binomial())
        self.result_ = model.fit()
        return self

    def predict_proba(self, x):
        return np.asarray(self.result_.predict(self._design(np.atleast_1d(x))))


class GAMPredictor:
    """Penalized B-spline logistic GAM (statsmodels ``GLMGam``).

    ``df`` is the number of spline basis functions; ``alpha`` weights the
    second-derivative roughness penalty. Boundary knots are pinned to the
    sampling domain and prediction inputs are clipped to it.
    """

    def __init__(self, df, alpha=GAM_DEFAULT_ALPHA, degree=3, lo=DOMAIN_LO, hi=DOMAIN_HI):
        _check_positive_int("df", df)
        if df <= degree:
            raise InvalidArgument(f"spline df must exceed the spline degree ({degree}), got {df}")
        if alpha < 0:
            raise InvalidArgument(f"penalty alpha must be non-negative, got {alpha}")
        self.df = df
        self.alpha = alpha
        self.degree = degree
        self.lo, self.hi = lo, hi
        self.result_ = None

    def fit(self, obs):
        _check_training_data(obs)
        x = obs["x"].to_numpy()[:, None]
        smoother = BSplines(
            x, df=[self.df], degree=[self.degree],
            knot_kwds=[{"lower_bound": self.lo, "upper_bound": self.hi}],
        )
        model = GLMGam(
            obs["y"].to_numpy(), exog=np.ones((len(obs), 1)), smoother=smoother,
            alpha=self.alpha, family=sm.families.Binomial(),
        )
        self.result_ = model.fit()
        return self

    def predict_proba(self, x):
        x = np.clip(np.atleast_1d(np.asarray(x, dtype=float)), self.lo, self.hi)
        p = self.result_.predict(exog=np.ones((len(x), 1)), exog_smooth=x[:, None])
        return np.asarray(p)


class BRTPredictor:
    """Boosted regression trees with Bernoulli deviance (log-loss)."""

    def __init__(self, n_trees, max_depth, learning_rate, subsample=BRT_DEFAULT_SUBSAMPLE,
                 seed=DEFAULT_SEED):
        _check_positive_int("n_trees", n_trees)
        _check_positive_int("max_depth", max_depth)
        if not 0 < learning_rate <= 1:
            raise InvalidArgument(f"learning_rate must be in (0, 1], got {learning_rate}")
        if not 0 < subsample <= 1:
            raise InvalidArgument(f"subsample must be in (0, 1], got {subsample}")
        self.model_ = GradientBoostingClassifier(
            n_estimators=n_trees, max_depth=max_depth, learning_rate=learning_rate,
            subsample=subsample, random_state=seed,
        )

    def fit(self, obs):
        _check_training_data(obs)
        self.model_.fit(obs[["x"]].to_numpy(), obs["y"].to_numpy())
        return self

    def predict_proba(self, x):
        x = np.atleast_1d(np.asarray(x, dtype=float))[:, None]
        return self.model_.predict_proba(x)[:, 1]


def fit_glm(obs, degree):
    """Fit a polynomial logistic GLM of the given degree."""
    return GLMPredictor(degree).fit(obs)


def fit_gam(obs, df, alpha=GAM_DEFAULT_ALPHA, degree=3):
    """Fit a penalized spline logistic GAM."""
    return GAMPredictor(df, alpha=alpha, degree=degree).fit(obs)


def fit_brt(obs, n_trees, max_depth, learning_rate, subsample=BRT_DEFAULT_SUBSAMPLE,
            seed=DEFAULT_SEED):
    """Fit boosted regression trees."""
    return BRTPredictor(n_trees, max_depth, learning_rate, subsample=subsample,
                        seed=seed).fit(obs)


MODEL_FITTERS = {
    "glm": fit_glm,
    "gam": fit_gam,
    "brt": fit_brt,
}


def fit_model(kind, obs, **params):
    """Fit a model class by name ("glm", "gam" or "brt")."""
    try:
        fitter = MODEL_FITTERS[kind]
    except KeyError:
        raise InvalidArgument(
            f"unknown model kind {kind!r}, expected one of {sorted(MODEL_FITTERS)}"
        ) from None
    logger.debug("Fitting %s to %d observations with %s", kind, len(obs), params)
    return fitter(obs, **params)


@st.cache_resource
def train_model(kind, obs, **params):
    """Fit and cache a model."""
    return fit_model(kind, obs, **params)


def predict_curve(model, grid):
    """Predicted probability over a grid of x values."""
    grid = np.asarray(grid, dtype=float)
    return pd.DataFrame({"x": grid, "p": model.predict_proba(grid)})


def fit_curves(kind, obs_sets, grid, **params):
    """Fit one model per observation set; rows of the result are curves."""
    return np.vstack([
        fit_model(kind, obs, **params).predict_proba(grid) for obs in obs_sets
    ])


def compare_flexibility(kind, small_sets, combined, grid, **params):
    """Curves for every small survey plus the pooled survey.

    Returns a dict of label -> curve DataFrame; the pooled fit is keyed
    "All surveys combined" and comes last.
    """
    curves = {}
    for i, obs in enumerate(small_sets, start=1):
        curves[f"Survey {i} (n={len(obs)})"] = predict_curve(fit_model(kind, obs, **params), grid)
    curves["All surveys combined"] = predict_curve(fit_model(kind, combined, **params), grid)
    return curves


def classification_scores(y_true, p_hat):
    """Held-out scores for predicted presence probabilities."""
    p_hat = np.clip(np.asarray(p_hat, dtype=float), 1e-12, 1 - 1e-12)
    return {
        "log_loss": log_loss(y_true, p_hat, labels=[0, 1]),
        "brier": brier_score_loss(y_true, p_hat),
        "auc": roc_auc_score(y_true, p_hat),
    }
