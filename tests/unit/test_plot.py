# tests/unit/test_plot.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np

from dynstream import plot
from dynstream.analysis import DiagramResult, LiapunovCurve, Trajectory


def test_diagram_skips_nan_slots(tmp_path):
    pts = np.array([[2.0, 0.5], [np.nan, np.nan], [3.2, 0.8]])
    ax = plot.diagram(DiagramResult(points=pts, shape=(3, 1), transient=300))
    try:
        offsets = ax.collections[0].get_offsets()
        assert len(offsets) == 2
        out = plot.savefig(ax, tmp_path / "diagram")
    finally:
        plt.close(ax.figure)
    assert out == tmp_path / "diagram.pdf"
    assert out.exists()


def test_curve_masks_minus_infinity():
    curve = LiapunovCurve(r=np.array([1.9, 2.0, 2.1]), exponent=np.array([-0.1, -np.inf, -0.1]), n=10, transient=1)
    ax = plot.curve(curve)
    try:
        y = ax.lines[0].get_ydata()
        assert np.isnan(y[1])
        assert ax.get_xlabel() == "r"
    finally:
        plt.close(ax.figure)


def test_projections_draws_every_pair(tmp_path):
    data = np.column_stack((np.linspace(0, 1, 10), np.linspace(1, 2, 10), np.linspace(2, 3, 10)))
    traj = Trajectory(("x", "y", "z"), data, 10)
    ax = plot.projections(traj, title="Rossler")
    try:
        assert len(ax.lines) == 3
        labels = [line.get_label() for line in ax.lines]
        assert labels == ["X(t) vs Y(t)", "X(t) vs Z(t)", "Y(t) vs Z(t)"]
        out = plot.savefig(ax, tmp_path / "rossler.png")
    finally:
        plt.close(ax.figure)
    assert out.suffix == ".png"
    assert out.exists()


def test_phase_overlays_with_legend():
    a = Trajectory(("x", "y"), np.zeros((5, 2)), 5)
    b = Trajectory(("x", "y"), np.ones((5, 2)), 5)
    ax = plot.phase([a, b], labels=["F=0.24", "F=0.35"])
    try:
        assert len(ax.lines) == 2
        assert ax.get_legend() is not None
    finally:
        plt.close(ax.figure)
