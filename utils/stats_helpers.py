"""Comparing fitted curves to the truth: curve error, binned frequencies, bias/variance."""
import numpy as np
import pandas as pd

from utils.constants import DOMAIN_LO, DOMAIN_HI


def curve_error(p_hat, p_true):
    """Distance between a fitted probability curve and the true one."""
    diff = np.asarray(p_hat, dtype=float) - np.asarray(p_true, dtype=float)
    return {
        "mae": float(np.mean(np.abs(diff))),
        "rmse": float(np.sqrt(np.mean(diff ** 2))),
        "max_abs": float(np.max(np.abs(diff))),
    }


def binned_frequency(obs, n_bins=12, lo=DOMAIN_LO, hi=DOMAIN_HI):
    """Empirical presence rate per equal-width bin of x, with binomial standard error."""
    edges = np.linspace(lo, hi, n_bins + 1)
    bins = pd.cut(obs["x"], edges, include_lowest=True)
    grouped = obs.groupby(bins, observed=False)["y"].agg(["mean", "count"])
    grouped["x_mid"] = (edges[:-1] + edges[1:]) / 2
    grouped["se"] = np.sqrt(grouped["mean"] * (1 - grouped["mean"]) / grouped["count"])
    grouped = grouped.rename(columns={"mean": "frequency"}).reset_index(drop=True)
    return grouped[["x_mid", "frequency", "count", "se"]]


def bias_variance_table(grid, curves, p_true):
    """Pointwise bias^2 and variance of replicate fits.

    ``curves`` has one row per replicate fit and one column per grid point.
    """
    curves = np.atleast_2d(np.asarray(curves, dtype=float))
    p_true = np.asarray(p_true, dtype=float)
    mean_curve = curves.mean(axis=0)
    return pd.DataFrame({
        "x": np.asarray(grid, dtype=float),
        "truth": p_true,
        "mean_fit": mean_curve,
        "bias2": (mean_curve - p_true) ** 2,
        "variance": curves.var(axis=0),
    })


def bias_variance_summary(table):
    """Average the pointwise decomposition over the grid."""
    bias2 = float(table["bias2"].mean())
    variance = float(table["variance"].mean())
    return {"bias2": bias2, "variance": variance, "total": bias2 + variance}
