"""Shared fixtures for the model-flexibility tutorial test suite."""

import sys
import os
import pytest
import numpy as np

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture
def rng():
    """A private random source so tests do not disturb the shared one."""
    return np.random.RandomState(12345)


@pytest.fixture
def survey(rng):
    """A moderately sized simulated survey over the default domain."""
    from utils.data_loader import sample_observations
    return sample_observations(600, rng=rng)


@pytest.fixture
def small_surveys():
    """Three independent small surveys and their concatenation."""
    from utils.data_loader import concatenate_observations, sample_replicates
    sets = sample_replicates(3, 200, rng=np.random.RandomState(7))
    return sets, concatenate_observations(*sets)


@pytest.fixture
def grid():
    """A coarse evaluation grid over the domain."""
    return np.linspace(-6.0, 6.0, 61)
