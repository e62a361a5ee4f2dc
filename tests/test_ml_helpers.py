"""Tests for the GLM, GAM and boosted-tree wrappers."""

import numpy as np
import pandas as pd
import pytest
from utils.data_loader import sample_observations
from utils.errors import InvalidArgument
from utils.ground_truth import true_probability
from utils.ml_helpers import (
    classification_scores,
    compare_flexibility,
    fit_brt,
    fit_curves,
    fit_gam,
    fit_glm,
    fit_model,
    predict_curve,
)


def _training_log_loss(model, obs):
    p = np.clip(model.predict_proba(obs["x"].to_numpy()), 1e-12, 1 - 1e-12)
    y = obs["y"].to_numpy()
    return -np.mean(y * np.log(p) + (1 - y) * np.log(1 - p))


class TestGLM:
    """Tests for the polynomial logistic GLM."""

    def test_predictions_are_probabilities(self, survey, grid):
        p = fit_glm(survey, degree=3).predict_proba(grid)
        assert p.shape == grid.shape
        assert np.all((p >= 0) & (p <= 1))

    def test_degree_one_is_monotone(self, survey, grid):
        """A linear logit can only rise or only fall."""
        diffs = np.diff(fit_glm(survey, degree=1).predict_proba(grid))
        assert np.all(diffs >= 0) or np.all(diffs <= 0)

    def test_moderate_degree_tracks_truth_with_lots_of_data(self, grid):
        big = sample_observations(5000, rng=np.random.RandomState(3))
        p = fit_glm(big, degree=4).predict_proba(grid)
        assert np.mean(np.abs(p - true_probability(grid))) < 0.1

    def test_higher_degree_fits_training_data_better(self, survey):
        low = _training_log_loss(fit_glm(survey, degree=1), survey)
        high = _training_log_loss(fit_glm(survey, degree=6), survey)
        assert high < low

    def test_rejects_zero_degree(self, survey):
        with pytest.raises(InvalidArgument):
            fit_glm(survey, degree=0)


class TestGAM:
    """Tests for the penalized spline GAM."""

    def test_predictions_are_probabilities(self, survey, grid):
        p = fit_gam(survey, df=8, alpha=1.0).predict_proba(grid)
        assert p.shape == grid.shape
        assert np.all((p >= 0) & (p <= 1))

    def test_inputs_outside_domain_are_clipped(self, survey):
        model = fit_gam(survey, df=6)
        np.testing.assert_allclose(model.predict_proba([-10.0, 10.0]),
                                   model.predict_proba([-6.0, 6.0]))

    def test_tracks_truth_with_lots_of_data(self, grid):
        big = sample_observations(5000, rng=np.random.RandomState(3))
        p = fit_gam(big, df=10, alpha=1.0).predict_proba(grid)
        assert np.mean(np.abs(p - true_probability(grid))) < 0.1

    def test_rejects_df_not_above_degree(self, survey):
        with pytest.raises(InvalidArgument):
            fit_gam(survey, df=3, degree=3)

    def test_rejects_negative_penalty(self, survey):
        with pytest.raises(InvalidArgument):
            fit_gam(survey, df=6, alpha=-1.0)


class TestBRT:
    """Tests for boosted regression trees."""

    def test_predictions_are_probabilities(self, survey, grid):
        p = fit_brt(survey, n_trees=50, max_depth=2, learning_rate=0.1).predict_proba(grid)
        assert p.shape == grid.shape
        assert np.all((p >= 0) & (p <= 1))

    def test_more_trees_fit_training_data_better(self, survey):
        few = fit_brt(survey, n_trees=10, max_depth=3, learning_rate=0.1, subsample=1.0)
        many = fit_brt(survey, n_trees=500, max_depth=3, learning_rate=0.1, subsample=1.0)
        assert _training_log_loss(many, survey) < _training_log_loss(few, survey)

    def test_reproducible_with_seed(self, survey, grid):
        a = fit_brt(survey, n_trees=30, max_depth=2, learning_rate=0.1, seed=1)
        b = fit_brt(survey, n_trees=30, max_depth=2, learning_rate=0.1, seed=1)
        np.testing.assert_array_equal(a.predict_proba(grid), b.predict_proba(grid))

    @pytest.mark.parametrize("kwargs", [
        {"n_trees": 0, "max_depth": 2, "learning_rate": 0.1},
        {"n_trees": 10, "max_depth": 0, "learning_rate": 0.1},
        {"n_trees": 10, "max_depth": 2, "learning_rate": 0.0},
        {"n_trees": 10, "max_depth": 2, "learning_rate": 0.1, "subsample": 1.5},
    ])
    def test_rejects_bad_settings(self, survey, kwargs):
        with pytest.raises(InvalidArgument):
            fit_brt(survey, **kwargs)


class TestFitModel:
    """Tests for dispatch and the demonstration helpers."""

    @pytest.mark.parametrize("kind, params", [
        ("glm", {"degree": 2}),
        ("gam", {"df": 6, "alpha": 1.0}),
        ("brt", {"n_trees": 20, "max_depth": 1, "learning_rate": 0.1}),
    ])
    def test_dispatch(self, kind, params, survey, grid):
        p = fit_model(kind, survey, **params).predict_proba(grid)
        assert np.all((p >= 0) & (p <= 1))

    def test_unknown_kind(self, survey):
        with pytest.raises(InvalidArgument):
            fit_model("random_forest", survey)

    @pytest.mark.parametrize("kind, params", [
        ("glm", {"degree": 2}),
        ("gam", {"df": 6}),
        ("brt", {"n_trees": 5, "max_depth": 1, "learning_rate": 0.1}),
    ])
    def test_single_class_rejected(self, kind, params):
        obs = pd.DataFrame({"x": np.linspace(-6, 6, 50), "y": np.zeros(50, dtype=int)})
        with pytest.raises(InvalidArgument):
            fit_model(kind, obs, **params)

    def test_predict_curve_frame(self, survey, grid):
        curve = predict_curve(fit_glm(survey, degree=2), grid)
        assert list(curve.columns) == ["x", "p"]
        np.testing.assert_array_equal(curve["x"], grid)

    def test_fit_curves_shape(self, small_surveys, grid):
        sets, _ = small_surveys
        curves = fit_curves("glm", sets, grid, degree=2)
        assert curves.shape == (len(sets), len(grid))

    def test_compare_flexibility_labels(self, small_surveys, grid):
        sets, combined = small_surveys
        curves = compare_flexibility("glm", sets, combined, grid, degree=2)
        labels = list(curves)
        assert len(labels) == len(sets) + 1
        assert labels[-1] == "All surveys combined"
        assert labels[0] == "Survey 1 (n=200)"


class TestClassificationScores:
    """Tests for held-out scoring."""

    def test_truth_beats_coin_flip(self, rng):
        holdout = sample_observations(3000, rng=rng)
        y = holdout["y"]
        truth_scores = classification_scores(y, true_probability(holdout["x"].to_numpy()))
        flat_scores = classification_scores(y, np.full(len(y), 0.5))
        assert truth_scores["log_loss"] < flat_scores["log_loss"]
        assert truth_scores["brier"] < flat_scores["brier"]
        assert truth_scores["auc"] > 0.6

    def test_perfect_ranking(self):
        scores = classification_scores([0, 0, 1, 1], [0.1, 0.2, 0.8, 0.9])
        assert scores["auc"] == 1.0

    def test_extreme_probabilities_stay_finite(self):
        scores = classification_scores([0, 1], [1.0, 0.0])
        assert np.isfinite(scores["log_loss"])
