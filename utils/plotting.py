"""Shared Plotly plotting helpers."""
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from utils.constants import (
    AXIS_LABELS, LARGE_FIT_COLOR, OBSERVATION_COLOR, SMALL_FIT_COLORS, TRUTH_COLOR,
)


def apply_common_layout(fig, title=None, height=500):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template="plotly_white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
    )
    return fig


def _truth_trace(truth, name="Ground truth"):
    return go.Scatter(x=truth["x"], y=truth["p"], mode="lines", name=name,
                      line=dict(color=TRUTH_COLOR, width=4, dash="dash"))


def _observation_trace(obs, name="Observations", opacity=0.35):
    return go.Scatter(x=obs["x"], y=obs["y"], mode="markers", name=name,
                      opacity=opacity, marker=dict(color=OBSERVATION_COLOR, size=5,
                                                   symbol="line-ns-open"))


def truth_and_fits_figure(truth, fits=None, observations=None, title=None, height=500):
    """Ground truth, fitted curves and raw 0/1 observations on one panel.

    ``fits`` maps a label to a curve DataFrame (columns ``x``, ``p``); the
    label "All surveys combined" is drawn thick in its own color.
    """
    fig = go.Figure()
    if observations is not None:
        fig.add_trace(_observation_trace(observations))
    for i, (label, curve) in enumerate((fits or {}).items()):
        if label == "All surveys combined":
            line = dict(color=LARGE_FIT_COLOR, width=4)
        else:
            line = dict(color=SMALL_FIT_COLORS[i % len(SMALL_FIT_COLORS)], width=1.5)
        fig.add_trace(go.Scatter(x=curve["x"], y=curve["p"], mode="lines", name=label, line=line))
    fig.add_trace(_truth_trace(truth))
    apply_common_layout(fig, title, height)
    fig.update_layout(xaxis_title=AXIS_LABELS["x"], yaxis_title=AXIS_LABELS["p"],
                      yaxis=dict(range=[-0.05, 1.05]))
    return fig


def observations_figure(obs, truth, binned=None, title=None, height=450):
    """Raw presences/absences, binned presence frequency and the truth."""
    fig = go.Figure()
    fig.add_trace(_observation_trace(obs))
    if binned is not None:
        fig.add_trace(go.Scatter(
            x=binned["x_mid"], y=binned["frequency"], mode="markers", name="Binned frequency",
            error_y=dict(type="data", array=binned["se"], visible=True),
            marker=dict(color=LARGE_FIT_COLOR, size=9),
        ))
    fig.add_trace(_truth_trace(truth))
    apply_common_layout(fig, title, height)
    fig.update_layout(xaxis_title=AXIS_LABELS["x"], yaxis_title=AXIS_LABELS["p"])
    return fig


def bias_variance_figure(table, title=None, height=450):
    """Pointwise bias^2 and variance along the gradient (two stacked panels)."""
    fig = make_subplots(rows=2, cols=1, shared_xaxes=True,
                        subplot_titles=["Bias²", "Variance"])
    fig.add_trace(go.Scatter(x=table["x"], y=table["bias2"], mode="lines", name="Bias²",
                             line=dict(color=LARGE_FIT_COLOR)), row=1, col=1)
    fig.add_trace(go.Scatter(x=table["x"], y=table["variance"], mode="lines", name="Variance",
                             line=dict(color=SMALL_FIT_COLORS[0])), row=2, col=1)
    fig.update_xaxes(title_text=AXIS_LABELS["x"], row=2, col=1)
    return apply_common_layout(fig, title, height)
