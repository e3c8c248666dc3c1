# tests/unit/test_kernels.py
from __future__ import annotations

import itertools
import math

import pytest

from dynstream.errors import OutOfDomainError
from dynstream.kernels import Duffing, LogisticMap, Rossler, State, get_kernel, registry


def _take(it, n):
    return list(itertools.islice(it, n))


def test_logistic_first_state_is_initial_condition():
    states = _take(LogisticMap(3.2).iterate((0.3,)), 3)
    assert [s.index for s in states] == [0, 1, 2]
    assert states[0].value == 0.3
    assert states[1].value == 3.2 * 0.3 * (1 - 0.3)
    assert states[2].value == 3.2 * states[1].value * (1 - states[1].value)
    assert not any(s.terminal for s in states)


def test_logistic_is_reproducible():
    a = [s.value for s in _take(LogisticMap(3.9).iterate((0.123,)), 500)]
    b = [s.value for s in _take(LogisticMap(3.9).iterate((0.123,)), 500)]
    assert a == b


def test_logistic_derivative():
    k = LogisticMap(3.0)
    assert k.derivative(0.0) == 3.0
    assert k.derivative(0.5) == 0.0
    assert k.derivative(1.0) == -3.0


@pytest.mark.parametrize("r", [-0.1, 4.01, math.nan])
def test_logistic_rejects_r_out_of_domain(r):
    with pytest.raises(OutOfDomainError):
        LogisticMap(r)


def test_logistic_rejects_x0_out_of_domain():
    with pytest.raises(OutOfDomainError, match="x0"):
        LogisticMap(2.0).start((1.5,))


def test_duffing_hides_its_clock():
    states = _take(Duffing(0.24, dt=1e-3).iterate((0.0, 0.0)), 3)
    assert len(states[0]) == 2
    assert states[1].values == (0.0, 1e-3 * 0.24)
    x, y = states[1].values
    expected_y = 1e-3 * (0.24 * math.cos(1e-3) - 0.5 * y + x - x ** 3) + y
    assert states[2].values == pytest.approx((1e-3 * y + x, expected_y), rel=1e-15)


def test_duffing_rejects_non_positive_dt():
    with pytest.raises(OutOfDomainError):
        Duffing(0.24, dt=0.0)


def test_rossler_baseline_stays_finite():
    it = Rossler(0.2, 0.2, 5.7).iterate((-1.0, 0.0, 0.0))
    last = None
    for state in itertools.islice(it, 100_000):
        assert not state.terminal
        last = state
    assert last.index == 99_999
    assert all(math.isfinite(v) for v in last.values)


def test_rossler_emits_single_terminal_state_on_overflow():
    states = list(itertools.islice(Rossler().iterate((1e308, 1e308, 1e308)), 50))
    assert states[-1].terminal
    assert sum(s.terminal for s in states) == 1
    assert len(states) < 50


def test_nan_initial_condition_terminates_immediately():
    states = list(Rossler().iterate((math.nan, 0.0, 0.0)))
    assert len(states) == 1
    assert states[0].terminal
    assert states[0].index == 0


def test_wrong_initial_dimension():
    with pytest.raises(ValueError, match="expects 3"):
        Rossler().start((1.0, 2.0))


def test_registry_lookup():
    assert {"logistic", "duffing", "rossler"} <= set(registry())
    k = get_kernel("logistic", r=2.0)
    assert isinstance(k, LogisticMap) and k.r == 2.0
    with pytest.raises(KeyError, match="Unknown kernel"):
        get_kernel("lorenz")


def test_state_accessors():
    s = State((1.0, 2.0, 3.0), 7)
    assert s.value == 1.0
    assert s[2] == 3.0
    assert len(s) == 3
    assert not s.terminal
