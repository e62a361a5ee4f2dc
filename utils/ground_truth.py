"""The known occurrence-probability curve every chapter compares against.

The species' true probability of presence along the gradient is

    f(x) = T2( x/2 + sin(x)^2 - x^2/5 + (0.5 if x > 0 else -0.5) )

where T2 is the cumulative distribution function of Student's t with two
degrees of freedom. The argument of T2 (the "linear predictor") carries a
unit step at x = 0, so the curve has a kink there, and the quadratic term
makes it rise and then fall again: a unimodal niche with a bump on its
flank. Heavy t tails keep the probability away from hard 0 and 1 for a
long way, which is what makes the data noisy.
"""
import numpy as np
import pandas as pd
from scipy import stats

from utils.constants import DOMAIN_LO, DOMAIN_HI, GRID_POINTS, T_DF


def true_linear_predictor(x):
    """Argument of the t CDF; scalar in, float out, array in, array out."""
    x_arr = np.asarray(x, dtype=float)
    eta = x_arr / 2 + np.sin(x_arr) ** 2 - x_arr ** 2 / 5 + np.where(x_arr > 0, 0.5, -0.5)
    if eta.ndim == 0:
        return float(eta)
    return eta


def true_probability(x):
    """Occurrence probability f(x) in [0, 1]."""
    p = stats.t.cdf(true_linear_predictor(x), df=T_DF)
    if np.ndim(p) == 0:
        return float(p)
    return p


def truth_curve(lo=DOMAIN_LO, hi=DOMAIN_HI, n_points=GRID_POINTS):
    """Dense grid over [lo, hi] with the true probability at each point."""
    grid = np.linspace(lo, hi, n_points)
    return pd.DataFrame({"x": grid, "p": true_probability(grid)})
