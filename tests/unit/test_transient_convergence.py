# tests/unit/test_transient_convergence.py
from __future__ import annotations

import pytest

from dynstream.analysis import (
    classify,
    discard,
    first_converged,
    logistic_attractor,
    nearest_target,
    take,
)
from dynstream.kernels import LogisticMap, Rossler
from dynstream.runtime.sequence import create_sequence


def test_discard_consumes_exactly_n():
    with create_sequence(LogisticMap(3.3), (0.4,)) as seq:
        assert discard(seq, 300) is seq
        assert seq.consumed == 300
        assert seq.next().index == 300


def test_discard_rejects_negative():
    with create_sequence(LogisticMap(3.3), (0.4,)) as seq:
        with pytest.raises(ValueError):
            discard(seq, -1)


def test_discard_stops_at_terminal_state():
    with create_sequence(Rossler(), (1e308, 1e308, 1e308)) as seq:
        discard(seq, 300)
        assert seq.ended
        assert seq.consumed < 300


def test_take_returns_fewer_states_when_sequence_ends():
    with create_sequence(Rossler(), (1e308, 1e308, 1e308)) as seq:
        states = take(seq, 100)
    assert 0 < len(states) < 100
    assert not any(s.terminal for s in states)


@pytest.mark.parametrize("x0", [0.05, 0.3, 0.7, 0.95])
def test_fixed_point_convergence_at_r2(x0):
    with create_sequence(LogisticMap(2.0), (x0,)) as seq:
        discard(seq, 300)
        assert abs(seq.next().value - 0.5) < 1e-3


def test_attractor_closed_forms():
    assert logistic_attractor(0.5) == (0.0,)
    assert logistic_attractor(2.0) == (0.5,)
    lo, hi = logistic_attractor(3.2)
    assert lo == pytest.approx(0.51304, abs=1e-5)
    assert hi == pytest.approx(0.79946, abs=1e-5)
    assert logistic_attractor(3.7) is None


def test_two_cycle_at_r32():
    targets = logistic_attractor(3.2)
    with create_sequence(LogisticMap(3.2), (0.3,)) as seq:
        discard(seq, 30)
        samples = classify(seq, targets, 20)
    assert len(samples) == 20
    assert all(s.difference < 1e-3 for s in samples)
    # Consecutive samples alternate between the two cycle values.
    for a, b in zip(samples, samples[1:]):
        assert a.target != b.target
    assert [s.iteration for s in samples] == list(range(30, 50))


def test_nearest_target_prefers_smaller_difference():
    assert nearest_target(0.55, (0.51304, 0.79946)) == 0.51304
    assert nearest_target(0.7, (0.51304, 0.79946)) == 0.79946
    with pytest.raises(ValueError):
        nearest_target(0.5, ())


def test_classify_without_targets_reports_raw_values():
    with create_sequence(LogisticMap(3.9), (0.3,)) as seq:
        samples = classify(seq, None, 3)
    assert [s.iteration for s in samples] == [0, 1, 2]
    assert samples[0].value == 0.3
    assert all(s.target is None and s.difference is None for s in samples)
    assert "target" not in samples[0].format()


def test_first_converged_at_r2():
    with create_sequence(LogisticMap(2.0), (0.3,)) as seq:
        hit = first_converged(seq, (0.5,), tol=1e-3, max_steps=300)
    assert hit is not None
    assert hit.iteration < 10
    assert hit.difference < 1e-3


def test_first_converged_gives_up():
    with create_sequence(LogisticMap(3.9), (0.3,)) as seq:
        assert first_converged(seq, (2.0,), max_steps=50) is None
