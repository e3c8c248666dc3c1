# tests/integration/test_logistic_properties.py
"""
End-to-end checks over a shared logistic grid:
  1. fixed-point convergence at r=2 for every x0 column
  2. the two-cycle at r=3.2
  3. diagram slots and Liapunov signs read from the same grid
"""
from __future__ import annotations

import numpy as np
import pytest

from dynstream import logistic_grid
from dynstream.analysis import classify, diagram, discard, logistic_attractor, lyapunov


@pytest.fixture()
def grid():
    g = logistic_grid((1.9, 3.3), (0.05, 0.95), 0.1, 0.1)
    yield g
    g.close()


def test_r2_converges_for_every_initial_condition(grid):
    col_count = grid.n_cols
    for j in range(col_count):
        seq = grid.at(2.0, grid.x0_axis.value(j))
        discard(seq, 300)
        assert abs(seq.next().value - 0.5) < 1e-3


def test_r32_oscillates_between_cycle_values(grid):
    targets = logistic_attractor(3.2)
    seq = grid.at(3.2, 0.35)
    discard(seq, 30)
    samples = classify(seq, targets, 10)
    assert all(s.difference < 1e-3 for s in samples)
    assert {s.target for s in samples} == set(targets)


def test_diagram_and_liapunov_on_one_grid(grid):
    # Diagram first; the Liapunov scan then continues column 0 and closes it.
    res = diagram.sample(grid, 300)
    assert res.points.shape == (len(grid), 2)
    assert np.isfinite(res.points).all()
    rows = np.repeat(grid.r_axis.values, grid.n_cols)
    np.testing.assert_allclose(res.r, rows)
    curve = lyapunov.curve_on_grid(grid, 0, 500, transient=300)
    # r = 3.0 itself sits on the 1 -> 2 doubling where the estimate is marginal.
    away = np.abs(curve.r - 3.0) > 0.05
    assert (curve.exponent[away] < 0).all()
    assert all(seq.closed for seq in grid.column(0))
