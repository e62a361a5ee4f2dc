"""Tests for the true occurrence-probability curve."""

import numpy as np
import pytest
from utils.ground_truth import true_linear_predictor, true_probability, truth_curve


def t2_cdf(t):
    """Closed-form CDF of Student's t with two degrees of freedom."""
    return 0.5 + t / (2 * np.sqrt(2 + t ** 2))


class TestTrueProbability:
    """Tests for f(x)."""

    def test_bounded_on_wide_range(self):
        """f(x) stays in [0, 1] for 10,000 random x in [-1000, 1000]."""
        x = np.random.RandomState(0).uniform(-1000, 1000, size=10_000)
        p = true_probability(x)
        assert np.all(p >= 0.0)
        assert np.all(p <= 1.0)

    def test_deterministic(self):
        """Repeated calls give bit-identical results."""
        x = np.linspace(-6, 6, 101)
        np.testing.assert_array_equal(true_probability(x), true_probability(x))
        assert true_probability(2.5) == true_probability(2.5)

    def test_value_at_zero(self):
        """f(0) = T2(-0.5) = 1/3."""
        np.testing.assert_allclose(true_probability(0.0), 1.0 / 3.0, rtol=1e-10)

    def test_value_at_six(self):
        """f(6) matches the closed-form t CDF at 3 + sin(6)^2 - 7.2 + 0.5."""
        eta = 3 + np.sin(6.0) ** 2 - 7.2 + 0.5
        np.testing.assert_allclose(true_probability(6.0), t2_cdf(eta), rtol=1e-10)
        assert true_probability(6.0) == pytest.approx(0.0343, abs=1e-3)

    def test_matches_closed_form_everywhere(self):
        """SciPy's t CDF agrees with the df=2 closed form along the domain."""
        x = np.linspace(-6, 6, 241)
        np.testing.assert_allclose(true_probability(x), t2_cdf(true_linear_predictor(x)),
                                   rtol=1e-10)

    def test_scalar_in_scalar_out(self):
        """Scalar input gives a plain float."""
        assert isinstance(true_probability(1.0), float)
        assert isinstance(true_linear_predictor(1.0), float)

    def test_preserves_shape(self):
        """Array output matches the input shape."""
        x = np.zeros((3, 4))
        assert true_probability(x).shape == (3, 4)

    def test_non_monotonic(self):
        """The curve rises to an interior peak and falls again."""
        p = true_probability(np.linspace(-6, 6, 401))
        peak = np.argmax(p)
        assert 0 < peak < len(p) - 1
        assert p[peak] > p[0] and p[peak] > p[-1]


class TestLinearPredictor:
    """Tests for the pre-link argument."""

    def test_step_of_one_at_zero(self):
        """The sign term contributes a jump of exactly 1 across x = 0."""
        jump = true_linear_predictor(1e-12) - true_linear_predictor(-1e-12)
        assert jump == pytest.approx(1.0, abs=1e-9)

    def test_zero_takes_left_branch(self):
        """At x = 0 the step term is -0.5."""
        assert true_linear_predictor(0.0) == -0.5


class TestTruthCurve:
    """Tests for the dense truth grid."""

    def test_columns_and_length(self):
        curve = truth_curve(n_points=50)
        assert list(curve.columns) == ["x", "p"]
        assert len(curve) == 50

    def test_spans_domain(self):
        curve = truth_curve(-2.0, 3.0, 11)
        assert curve["x"].iloc[0] == -2.0
        assert curve["x"].iloc[-1] == 3.0
        np.testing.assert_allclose(curve["p"], true_probability(curve["x"].to_numpy()))
