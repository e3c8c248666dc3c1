# tests/unit/test_lyapunov.py
from __future__ import annotations

import math

import numpy as np
import pytest

from dynstream.analysis import lyapunov
from dynstream.kernels import LogisticMap, Rossler
from dynstream.runtime.grid import Axis, ParameterGrid
from dynstream.runtime.sequence import create_sequence


def _exponent(r, x0=0.3, n=2000, transient=300):
    with create_sequence(LogisticMap(r), (x0,)) as seq:
        return lyapunov.exponent(seq, r, n, transient=transient)


@pytest.mark.parametrize("r", [0.5, 1.5, 2.5, 2.9, 3.2, 3.5, 3.835])
def test_negative_in_stable_regimes(r):
    assert _exponent(r) < 0.0


@pytest.mark.parametrize("r", [3.7, 3.9])
def test_positive_in_chaotic_regimes(r):
    assert _exponent(r) > 0.0


def test_fully_chaotic_map_approaches_log_two():
    assert _exponent(4.0, x0=0.123, n=20000) == pytest.approx(math.log(2.0), abs=0.05)


def test_superstable_fixed_point_gives_minus_infinity():
    assert _exponent(2.0) == -math.inf


def test_default_transient_drops_a_single_state():
    with create_sequence(LogisticMap(2.5), (0.3,)) as seq:
        lyapunov.exponent(seq, 2.5, 10)
        assert seq.consumed == 11


def test_rejects_non_positive_n():
    with create_sequence(LogisticMap(2.5), (0.3,)) as seq:
        with pytest.raises(ValueError):
            lyapunov.exponent(seq, 2.5, 0)


def test_ended_sequence_yields_nan():
    with create_sequence(Rossler(), (1e308, 1e308, 1e308)) as seq:
        assert math.isnan(lyapunov.exponent(seq, 1.0, 10, transient=5))


def test_curve_crosses_zero_near_onset_of_chaos():
    r_axis = Axis.from_range("r", 3.5, 3.65, 0.01)
    with ParameterGrid.from_axes(r_axis, Axis.single("x0", 0.3), LogisticMap) as grid:
        curve = lyapunov.curve_on_grid(grid, 0, 3000, transient=300)
    assert curve.exponent.shape == (15,)
    assert curve.exponent[0] < 0.0
    crossings = curve.zero_crossings()
    assert crossings.size >= 1
    assert 3.55 <= crossings[0] <= 3.62
    pts = curve.points()
    assert pts.shape == (15, 2)
    np.testing.assert_allclose(pts[:, 0], r_axis.values)


def test_curve_stops_each_producer_once_read():
    r_axis = Axis.from_range("r", 3.0, 3.3, 0.001)
    with ParameterGrid.from_axes(r_axis, Axis.single("x0", 0.3), LogisticMap) as grid:
        curve = lyapunov.curve_on_grid(grid, 0, 50, transient=10)
        assert curve.exponent.shape == (300,)
        assert not any(seq.alive for seq in grid.column(0))
        assert all(seq.closed for seq in grid.column(0))
