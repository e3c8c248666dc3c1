# src/dynstream/plot/_primitives.py
from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
import matplotlib.pyplot as plt

from dynstream.analysis.diagram import DiagramResult
from dynstream.analysis.lyapunov import LiapunovCurve
from dynstream.analysis.trajectory import Trajectory, projections as _projections

__all__ = ["diagram", "curve", "phase", "projections"]

# One color per overlaid line, in order.
_LINE_COLORS = ("tab:green", "tab:red", "tab:blue", "tab:orange")


def _get_ax(ax=None) -> plt.Axes:
    if ax is not None:
        return ax
    _fig, created_ax = plt.subplots(layout="constrained")
    return created_ax


def _decorate(ax: plt.Axes, *, title: str | None, xlabel: str | None, ylabel: str | None, grid: bool) -> None:
    if title:
        ax.set_title(title)
    if xlabel:
        ax.set_xlabel(xlabel)
    if ylabel:
        ax.set_ylabel(ylabel)
    if grid:
        ax.grid(True, alpha=0.4)


def diagram(
    result: DiagramResult,
    *,
    ax=None,
    color: str = "#800000",
    size: float = 0.25,
    title: str | None = "Feigenbaum Diagram",
    xlabel: str = "r",
    ylabel: str = "x",
    grid: bool = True,
) -> plt.Axes:
    """Scatter the finite (r, x) points of a diagram sample."""
    ax = _get_ax(ax)
    pts = result.finite()
    ax.scatter(pts[:, 0], pts[:, 1], s=size, c=color, marker="o", linewidths=0)
    _decorate(ax, title=title, xlabel=xlabel, ylabel=ylabel, grid=grid)
    return ax


def curve(
    result: LiapunovCurve,
    *,
    ax=None,
    color: str = "tab:blue",
    title: str | None = "Liapunov Exponent",
    xlabel: str = "r",
    ylabel: str = "λ",
    zero_line: bool = True,
    grid: bool = True,
) -> plt.Axes:
    """Line plot of exponent vs r; -inf samples are left out."""
    ax = _get_ax(ax)
    lam = np.where(np.isfinite(result.exponent), result.exponent, np.nan)
    ax.plot(result.r, lam, color=color, linewidth=0.8)
    if zero_line:
        ax.axhline(0.0, color="black", linewidth=0.6, linestyle="--")
    _decorate(ax, title=title, xlabel=xlabel, ylabel=ylabel, grid=grid)
    return ax


def phase(
    trajectories: Sequence[Trajectory] | Trajectory,
    *,
    x: str = "x",
    y: str = "y",
    labels: Sequence[str] | None = None,
    ax=None,
    title: str | None = None,
    xlabel: str | None = None,
    ylabel: str | None = None,
    grid: bool = False,
) -> plt.Axes:
    """Overlay one or more trajectories in the (x, y) plane."""
    ax = _get_ax(ax)
    if isinstance(trajectories, Trajectory):
        trajectories = [trajectories]
    for k, traj in enumerate(trajectories):
        label = labels[k] if labels is not None else None
        ax.plot(traj[x], traj[y], color=_LINE_COLORS[k % len(_LINE_COLORS)], linewidth=0.6, label=label)
    if labels is not None:
        ax.legend()
    _decorate(ax, title=title, xlabel=xlabel or x, ylabel=ylabel or y, grid=grid)
    return ax


def projections(
    traj: Trajectory,
    *,
    ax=None,
    title: str | None = None,
    grid: bool = False,
) -> plt.Axes:
    """Overlay every coordinate-pair projection of ``traj`` on one axes."""
    ax = _get_ax(ax)
    pairs: Mapping[tuple[str, str], np.ndarray] = _projections(traj)
    for k, ((u, v), pts) in enumerate(pairs.items()):
        ax.plot(
            pts[:, 0], pts[:, 1],
            color=_LINE_COLORS[k % len(_LINE_COLORS)],
            linewidth=0.6,
            label=f"{u.upper()}(t) vs {v.upper()}(t)",
        )
    ax.legend()
    _decorate(ax, title=title, xlabel=None, ylabel=None, grid=grid)
    return ax
