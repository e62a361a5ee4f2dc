"""Simulated presence/absence surveys and the shared random source."""
import logging

import numpy as np
import pandas as pd
import streamlit as st

from utils.constants import (
    DEFAULT_SEED, DOMAIN_LO, DOMAIN_HI, SMALL_SAMPLE_SIZE, N_SMALL_SETS,
)
from utils.errors import InvalidArgument
from utils.ground_truth import true_probability

logger = logging.getLogger(__name__)

# Process-wide random source, read-mutated by every draw
_random_state = np.random.RandomState(DEFAULT_SEED)


def get_random_state():
    """Return the shared random source."""
    return _random_state


def seed_random_source(seed):
    """Re-seed the shared random source in place."""
    _random_state.seed(seed)


def _check_sample_args(n, lo, hi):
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
        raise InvalidArgument(f"sample count must be a positive integer, got {n!r}")
    if not (np.isfinite(lo) and np.isfinite(hi)):
        raise InvalidArgument(f"domain bounds must be finite, got [{lo}, {hi}]")
    if lo >= hi:
        raise InvalidArgument(f"empty or inverted domain [{lo}, {hi}]")


def draw_presence(x, rng=None):
    """One independent Bernoulli(f(x)) draw per entry of x."""
    rng = rng if rng is not None else _random_state
    p = np.atleast_1d(true_probability(np.asarray(x, dtype=float)))
    return rng.binomial(1, p).astype(int)


def sample_observations(n, lo=DOMAIN_LO, hi=DOMAIN_HI, rng=None):
    """Simulate n site visits along the gradient.

    x is drawn uniformly from [lo, hi], then presence is drawn with
    probability f(x). Rows come back in draw order.
    """
    _check_sample_args(n, lo, hi)
    rng = rng if rng is not None else _random_state
    x = rng.uniform(lo, hi, size=int(n))
    y = draw_presence(x, rng=rng)
    logger.debug("Sampled %d observations on [%s, %s], prevalence %.3f", n, lo, hi, y.mean())
    return pd.DataFrame({"x": x, "y": y})


def concatenate_observations(*obs_sets):
    """Stack observation sets in the order given, re-indexed from 0."""
    if not obs_sets:
        raise InvalidArgument("need at least one observation set to concatenate")
    return pd.concat(obs_sets, ignore_index=True)


def sample_replicates(n_sets, n, lo=DOMAIN_LO, hi=DOMAIN_HI, rng=None):
    """Draw n_sets independent observation sets one after another."""
    if isinstance(n_sets, bool) or not isinstance(n_sets, (int, np.integer)) or n_sets <= 0:
        raise InvalidArgument(f"number of sets must be a positive integer, got {n_sets!r}")
    return [sample_observations(n, lo, hi, rng=rng) for _ in range(n_sets)]


@st.cache_data
def load_demo_data(seed=DEFAULT_SEED, n_small=SMALL_SAMPLE_SIZE, n_sets=N_SMALL_SETS):
    """Small replicate surveys plus their concatenation, for the chapters."""
    rng = np.random.RandomState(seed)
    small_sets = sample_replicates(n_sets, n_small, rng=rng)
    combined = concatenate_observations(*small_sets)
    return small_sets, combined


def sidebar_controls():
    """Render sidebar survey controls; return (seed, n_small, n_sets)."""
    st.sidebar.header("Simulated Survey")
    seed = st.sidebar.number_input("Random seed", min_value=0, value=DEFAULT_SEED,
                                   step=1, key="survey_seed")
    n_small = st.sidebar.slider("Sites per small survey", 20, 1000, SMALL_SAMPLE_SIZE,
                                10, key="survey_n")
    n_sets = st.sidebar.slider("Number of small surveys", 1, 8, N_SMALL_SETS,
                               1, key="survey_sets")
    return int(seed), int(n_small), int(n_sets)
