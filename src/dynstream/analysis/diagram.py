# src/dynstream/analysis/diagram.py
"""Bifurcation (Feigenbaum) diagram sampling over a full parameter grid."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field

import numpy as np

from dynstream.analysis.transient import DEFAULT_TRANSIENT, discard
from dynstream.runtime.grid import ParameterGrid

__all__ = ["DiagramResult", "sample"]

logger = logging.getLogger(__name__)


@dataclass
class DiagramResult:
    """Row-major point set; slot ``row*n_cols + col`` belongs to cell (row, col).

    Cells whose sequence ended before the sample keep NaN in their slot.
    """
    points: np.ndarray  # (n_rows*n_cols, 2)
    shape: tuple[int, int]
    transient: int
    meta: dict = field(default_factory=dict)

    @property
    def r(self) -> np.ndarray:
        return self.points[:, 0]

    @property
    def x(self) -> np.ndarray:
        return self.points[:, 1]

    def finite(self) -> np.ndarray:
        mask = np.isfinite(self.points).all(axis=1)
        return self.points[mask]


def sample(
    grid: ParameterGrid,
    transient: int = DEFAULT_TRANSIENT,
    *,
    release: bool = False,
    timeout: float | None = None,
) -> DiagramResult:
    """Drop ``transient`` states in every cell and record the next one as ``(r, x)``.

    With ``release`` each cell's producer is closed as soon as its sample is
    taken.
    """
    n_rows, n_cols = grid.shape
    points = np.full((n_rows * n_cols, 2), np.nan, dtype=float)
    diverged = 0
    for i, j, seq in grid.cells():
        slot = grid.flat_index(i, j)
        discard(seq, transient, timeout=timeout)
        state = None if seq.ended else seq.next(timeout)
        if release:
            seq.close()
        if state is None or state.terminal:
            diverged += 1
            continue
        points[slot, 0] = grid.r_axis.value(i)
        points[slot, 1] = state.value

    if diverged:
        warnings.warn(
            f"{diverged} of {len(grid)} diagram cells ended before their sample; left as NaN.",
            stacklevel=2,
        )
    logger.info("sampled %d diagram points after %d transient steps", len(grid) - diverged, transient)
    return DiagramResult(
        points=points,
        shape=(n_rows, n_cols),
        transient=int(transient),
        meta={"diverged": diverged},
    )
