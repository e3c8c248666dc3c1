# src/dynstream/analysis/divergence.py
"""Sensitive dependence: neighbouring initial conditions read in lockstep."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from dynstream.runtime.grid import ParameterGrid
from dynstream.runtime.sequence import Sequence

__all__ = ["DivergenceSample", "compare", "compare_neighbours", "lockstep"]


@dataclass(frozen=True)
class DivergenceSample:
    iteration: int
    a: float
    b: float
    difference: float

    def format(self) -> str:
        return f"n={self.iteration} Xn={self.a:.6f} Xn'={self.b:.6f} |Xn-Xn'|={self.difference:.3e}"


def lockstep(*seqs: Sequence, n: int, timeout: float | None = None) -> list[np.ndarray]:
    """Read ``n`` states from every sequence, one round at a time.

    Each round issues every read before anything is compared. Reading stops
    for all sequences at the first round in which any of them ends, so the
    returned ``(k, dim)`` arrays always have equal length.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    rows: list[list[tuple[float, ...]]] = [[] for _ in seqs]
    for _ in range(n):
        states = [s.next(timeout) for s in seqs]
        if any(st.terminal for st in states):
            break
        for buf, st in zip(rows, states):
            buf.append(st.values)
    return [np.array(buf, dtype=float) if buf else np.empty((0, 0), dtype=float) for buf in rows]


def compare(
    a: Sequence,
    b: Sequence,
    count: int,
    *,
    coord: int = 0,
    timeout: float | None = None,
) -> list[DivergenceSample]:
    """Per-iteration ``(Xn, Xn', |Xn - Xn'|)`` for two sequences."""
    if count < 0:
        raise ValueError("count must be non-negative")
    out: list[DivergenceSample] = []
    for _ in range(count):
        sa = a.next(timeout)
        sb = b.next(timeout)
        if sa.terminal or sb.terminal:
            break
        xa, xb = sa[coord], sb[coord]
        out.append(DivergenceSample(sa.index, xa, xb, abs(xa - xb)))
    return out


def compare_neighbours(
    grid: ParameterGrid, r: float, x0: float, count: int, **kwargs
) -> list[DivergenceSample]:
    """Compare the cell at (r, x0) with the next cell along the x0 axis."""
    row = grid.r_axis.index(r)
    col = grid.x0_axis.index(x0)
    return compare(grid.cell(row, col), grid.cell(row, col + 1), count, **kwargs)
