"""Tests for simulated surveys, concatenation and the shared random source."""

import numpy as np
import pandas as pd
import pytest
from utils.data_loader import (
    concatenate_observations,
    draw_presence,
    get_random_state,
    load_demo_data,
    sample_observations,
    sample_replicates,
    seed_random_source,
)
from utils.errors import InvalidArgument
from utils.ground_truth import true_probability


class TestSampleObservations:
    """Tests for the sampling procedure."""

    def test_sample_count(self, rng):
        """n=200 gives exactly 200 rows."""
        obs = sample_observations(200, rng=rng)
        assert len(obs) == 200
        assert list(obs.columns) == ["x", "y"]

    def test_x_within_domain(self, rng):
        """All x values lie in [-6, 6] by default."""
        obs = sample_observations(200, rng=rng)
        assert obs["x"].min() >= -6.0
        assert obs["x"].max() <= 6.0

    def test_y_binary(self, rng):
        """All outcomes are 0 or 1."""
        obs = sample_observations(200, rng=rng)
        assert set(obs["y"].unique()) <= {0, 1}

    def test_custom_domain(self, rng):
        """x respects a non-default domain."""
        obs = sample_observations(500, lo=1.0, hi=2.0, rng=rng)
        assert obs["x"].between(1.0, 2.0).all()

    def test_accepts_numpy_integer(self, rng):
        obs = sample_observations(np.int64(25), rng=rng)
        assert len(obs) == 25

    def test_prevalence_tracks_truth(self, rng):
        """Overall prevalence of a large survey matches the mean of f over draws."""
        obs = sample_observations(50_000, rng=rng)
        expected = true_probability(obs["x"].to_numpy()).mean()
        assert obs["y"].mean() == pytest.approx(expected, abs=0.01)

    @pytest.mark.parametrize("n", [0, -5])
    def test_rejects_non_positive_count(self, n):
        with pytest.raises(InvalidArgument):
            sample_observations(n)

    def test_rejects_fractional_count(self):
        with pytest.raises(InvalidArgument):
            sample_observations(2.5)

    def test_rejects_empty_domain(self):
        """lo == hi is an empty domain."""
        with pytest.raises(InvalidArgument):
            sample_observations(10, lo=1.0, hi=1.0)

    def test_rejects_inverted_domain(self):
        with pytest.raises(InvalidArgument):
            sample_observations(10, lo=3.0, hi=-3.0)

    def test_rejects_infinite_bound(self):
        with pytest.raises(InvalidArgument):
            sample_observations(10, lo=-np.inf, hi=0.0)

    def test_invalid_argument_is_value_error(self):
        """Callers catching ValueError also see sampling errors."""
        with pytest.raises(ValueError):
            sample_observations(0)

    def test_rejection_consumes_no_entropy(self, rng):
        """A rejected call leaves the random source untouched."""
        before = rng.get_state()
        with pytest.raises(InvalidArgument):
            sample_observations(0, rng=rng)
        after = rng.get_state()
        np.testing.assert_array_equal(before[1], after[1])
        assert before[2] == after[2]


class TestDrawPresence:
    """Tests for the Bernoulli outcome draw."""

    def test_converges_to_truth_at_fixed_point(self, rng):
        """1,000,000 draws at x0 average to f(x0) within 0.01."""
        x0 = 1.0
        y = draw_presence(np.full(1_000_000, x0), rng=rng)
        assert abs(y.mean() - true_probability(x0)) < 0.01

    def test_coinciding_x_get_independent_draws(self, rng):
        """Sites at the same x do not share an outcome."""
        y = draw_presence(np.zeros(1000), rng=rng)
        assert 0 < y.sum() < 1000

    def test_length_matches_input(self, rng):
        assert len(draw_presence([0.0, 1.0, 2.0], rng=rng)) == 3


class TestConcatenation:
    """Tests for pooling observation sets."""

    def test_order_preserved(self, rng):
        """A then B gives A's rows first and B's rows last, both in original order."""
        a = sample_observations(200, rng=rng)
        b = sample_observations(200, rng=rng)
        combined = concatenate_observations(a, b)
        assert len(combined) == 400
        pd.testing.assert_frame_equal(combined.iloc[:200], a)
        pd.testing.assert_frame_equal(combined.iloc[200:].reset_index(drop=True), b)

    def test_no_deduplication(self, rng):
        """Concatenating a set with itself keeps every row."""
        a = sample_observations(50, rng=rng)
        assert len(concatenate_observations(a, a)) == 100

    def test_reindexed(self, rng):
        a = sample_observations(10, rng=rng)
        b = sample_observations(10, rng=rng)
        assert list(concatenate_observations(a, b).index) == list(range(20))

    def test_inputs_not_mutated(self, rng):
        a = sample_observations(10, rng=rng)
        snapshot = a.copy()
        concatenate_observations(a, a)
        pd.testing.assert_frame_equal(a, snapshot)

    def test_rejects_no_sets(self):
        with pytest.raises(InvalidArgument):
            concatenate_observations()


class TestSharedRandomSource:
    """Tests for seeding and reproducibility."""

    def test_same_seed_same_output(self):
        seed_random_source(7)
        first = sample_observations(100)
        seed_random_source(7)
        second = sample_observations(100)
        pd.testing.assert_frame_equal(first, second)

    def test_successive_calls_differ(self):
        seed_random_source(7)
        first = sample_observations(100)
        second = sample_observations(100)
        assert not first["x"].equals(second["x"])

    def test_reseed_keeps_same_object(self):
        source = get_random_state()
        seed_random_source(3)
        assert get_random_state() is source


class TestReplicates:
    """Tests for replicate surveys and the chapter data helper."""

    def test_replicate_count_and_size(self, rng):
        sets = sample_replicates(4, 30, rng=rng)
        assert len(sets) == 4
        assert all(len(s) == 30 for s in sets)

    def test_replicates_independent(self, rng):
        first, second = sample_replicates(2, 30, rng=rng)
        assert not first["x"].equals(second["x"])

    def test_rejects_zero_sets(self):
        with pytest.raises(InvalidArgument):
            sample_replicates(0, 30)

    def test_demo_data_shapes(self):
        small, combined = load_demo_data(seed=11, n_small=40, n_sets=3)
        assert len(small) == 3
        assert len(combined) == 120
        pd.testing.assert_frame_equal(combined.iloc[:40], small[0])

    def test_demo_data_leaves_shared_source_alone(self):
        seed_random_source(5)
        expected = sample_observations(20)
        seed_random_source(5)
        load_demo_data(seed=13, n_small=25, n_sets=2)
        pd.testing.assert_frame_equal(sample_observations(20), expected)
