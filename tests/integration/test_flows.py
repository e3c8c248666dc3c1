# tests/integration/test_flows.py
from __future__ import annotations

import numpy as np

from dynstream.analysis import projections, record, record_pair
from dynstream.kernels import Duffing, Rossler
from dynstream.runtime.sequence import create_sequence


def test_rossler_baseline_through_the_queue():
    with create_sequence(Rossler(0.2, 0.2, 5.7), (-1.0, 0.0, 0.0)) as seq:
        traj = record(seq, 100_000, Rossler.coords)
        assert not seq.ended
    assert len(traj) == 100_000
    assert not traj.ended
    assert np.isfinite(traj.data).all()
    pairs = projections(traj)
    assert set(pairs) == {("x", "y"), ("x", "z"), ("y", "z")}
    assert pairs[("x", "z")].shape == (100_000, 2)


def test_rossler_divergence_ends_the_trajectory():
    with create_sequence(Rossler(), (1e308, 1e308, 1e308)) as seq:
        traj = record(seq, 1000, Rossler.coords)
    assert traj.ended
    assert len(traj) == 1


def test_duffing_forcings_read_in_lockstep():
    with create_sequence(Duffing(0.24), (0.0, 0.0)) as low, create_sequence(Duffing(0.35), (0.0, 0.0)) as high:
        a, b = record_pair(low, high, 5000, Duffing.coords)
    assert len(a) == len(b) == 5000
    np.testing.assert_array_equal(a.data[0], b.data[0])
    assert not np.allclose(a["y"][-100:], b["y"][-100:])
