# src/dynstream/analysis/lyapunov.py
"""Liapunov exponent of the logistic map along an r sweep."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence as SequenceT

import numpy as np

from dynstream.analysis.transient import discard, take
from dynstream.runtime.grid import ParameterGrid
from dynstream.runtime.sequence import Sequence

__all__ = ["LiapunovCurve", "exponent", "curve", "curve_on_grid"]

logger = logging.getLogger(__name__)


@dataclass
class LiapunovCurve:
    r: np.ndarray  # (M,)
    exponent: np.ndarray  # (M,)
    n: int
    transient: int

    def zero_crossings(self) -> np.ndarray:
        """r values where the exponent turns from non-positive to positive."""
        lam = self.exponent
        ok = np.isfinite(lam[:-1]) & np.isfinite(lam[1:])
        mask = ok & (lam[:-1] <= 0.0) & (lam[1:] > 0.0)
        return self.r[1:][mask]

    def points(self) -> np.ndarray:
        """``(M, 2)`` array of (r, exponent) for line plots."""
        return np.column_stack((self.r, self.exponent))


def exponent(
    seq: Sequence,
    r: float,
    n: int,
    *,
    transient: int = 1,
    timeout: float | None = None,
) -> float:
    """Mean of ``log|r - 2*r*x_i|`` over ``n`` states after ``transient`` drops.

    A superstable orbit (derivative exactly zero) yields ``-inf``; a sequence
    that ends before any sample yields NaN.
    """
    if n <= 0:
        raise ValueError("n must be positive")
    discard(seq, transient, timeout=timeout)
    if seq.ended:
        return float("nan")
    xs = np.array([s.value for s in take(seq, n, timeout=timeout)], dtype=float)
    if xs.size == 0:
        return float("nan")
    with np.errstate(divide="ignore"):
        logs = np.log(np.abs(r - 2.0 * r * xs))
    return float(np.sum(logs) / xs.size)


def curve(
    sequences: SequenceT[Sequence],
    r_values: SequenceT[float],
    n: int,
    *,
    transient: int = 1,
    timeout: float | None = None,
) -> LiapunovCurve:
    """Exponent per r value; each sequence is closed once its exponent is read."""
    if len(sequences) != len(r_values):
        raise ValueError(f"{len(sequences)} sequences but {len(r_values)} r values")
    r_arr = np.asarray(r_values, dtype=float)
    lam = np.empty(r_arr.shape, dtype=float)
    for k, (seq, r) in enumerate(zip(sequences, r_arr)):
        try:
            lam[k] = exponent(seq, float(r), n, transient=transient, timeout=timeout)
        finally:
            seq.close()
    out = LiapunovCurve(r=r_arr, exponent=lam, n=int(n), transient=int(transient))
    crossings = out.zero_crossings()
    if crossings.size:
        logger.info("Liapunov exponent first turns positive at r=%.3f", crossings[0])
    return out


def curve_on_grid(grid: ParameterGrid, x0_index: int, n: int, **kwargs) -> LiapunovCurve:
    """One exponent per r row of ``grid`` at column ``x0_index``."""
    return curve(grid.column(x0_index), grid.r_axis.values, n, **kwargs)
