# src/dynstream/analysis/convergence.py
"""Convergence of a post-transient sequence towards known attractor values."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence as SequenceT

from dynstream.runtime.sequence import Sequence

__all__ = [
    "ConvergenceSample",
    "logistic_attractor",
    "nearest_target",
    "classify",
    "first_converged",
]


@dataclass(frozen=True)
class ConvergenceSample:
    """One observation; ``target``/``difference`` are None when no attractor is known."""
    iteration: int
    value: float
    target: float | None = None
    difference: float | None = None

    def format(self) -> str:
        if self.target is None:
            return f"n={self.iteration} Xn={self.value:.6f}"
        return (
            f"n={self.iteration} Xn={self.value:.6f} target={self.target:.5f} "
            f"|Xn-target|={self.difference:.3e}"
        )


def logistic_attractor(r: float) -> tuple[float, ...] | None:
    """Closed-form attracting fixed point / 2-cycle of the logistic map, if one exists.

    Returns None beyond the 2 -> 4 doubling at r = 1 + sqrt(6).
    """
    if r <= 1.0:
        return (0.0,)
    if r <= 3.0:
        return (1.0 - 1.0 / r,)
    if r < 1.0 + math.sqrt(6.0):
        root = math.sqrt((r - 3.0) * (r + 1.0))
        return ((r + 1.0 - root) / (2.0 * r), (r + 1.0 + root) / (2.0 * r))
    return None


def nearest_target(value: float, targets: Iterable[float]) -> float:
    """Candidate with the smallest |value - target|; first one wins ties."""
    best = None
    best_diff = math.inf
    for t in targets:
        d = abs(value - t)
        if d < best_diff:
            best, best_diff = t, d
    if best is None:
        raise ValueError("targets must not be empty")
    return best


def classify(
    seq: Sequence,
    targets: SequenceT[float] | None,
    count: int = 1,
    *,
    timeout: float | None = None,
) -> list[ConvergenceSample]:
    """Read ``count`` states and compare each against the closest target.

    ``targets=None`` records raw values only. Stops early if the sequence ends.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if targets is not None and len(targets) == 0:
        raise ValueError("targets must not be empty")
    out: list[ConvergenceSample] = []
    for _ in range(count):
        state = seq.next(timeout)
        if state.terminal:
            break
        x = state.value
        if targets is None:
            out.append(ConvergenceSample(state.index, x))
        else:
            t = nearest_target(x, targets)
            out.append(ConvergenceSample(state.index, x, t, abs(x - t)))
    return out


def first_converged(
    seq: Sequence,
    targets: SequenceT[float],
    *,
    tol: float = 1e-3,
    max_steps: int = 1000,
    timeout: float | None = None,
) -> ConvergenceSample | None:
    """First sample within ``tol`` of a target, or None after ``max_steps`` reads."""
    for _ in range(max_steps):
        samples = classify(seq, targets, 1, timeout=timeout)
        if not samples:
            return None
        if samples[0].difference < tol:
            return samples[0]
    return None
