# src/dynstream/analysis/bifurcation.py
"""
Period-doubling detection along the r axis.

For each r cell (the first is a baseline and is skipped) the detector drops
``transient`` states and then reads four consecutive states
``c3, c2, c1, curr``. The newest state is compared with the states one, two
and three steps back; a lag that no longer matches within ``eps`` means the
asymptotic cycle has outgrown the current period.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence as SequenceT

import numpy as np

from dynstream.analysis.transient import discard
from dynstream.runtime.grid import ParameterGrid
from dynstream.runtime.sequence import Sequence

__all__ = ["Period", "BifurcationResult", "detect", "detect_on_grid"]

logger = logging.getLogger(__name__)

DEFAULT_TRANSIENT = 297
DEFAULT_EPS = 1e-4


class Period(IntEnum):
    PERIOD_1 = 1
    PERIOD_2 = 2
    PERIOD_4 = 4
    PERIOD_8 = 8  # terminal: scanning stops


@dataclass
class BifurcationResult:
    points: dict[str, float] = field(default_factory=dict)  # "1->2", "2->4", "4->8"
    period: Period = Period.PERIOD_1
    scanned: int = 0
    skipped: list[float] = field(default_factory=list)  # r values whose sequence ended early

    def get(self, transition: str) -> float | None:
        return self.points.get(transition)


def _window(seq: Sequence, transient: int, timeout: float | None) -> np.ndarray | None:
    discard(seq, transient, timeout=timeout)
    if seq.ended:
        return None
    out = np.empty(4, dtype=float)
    for k in range(4):
        state = seq.next(timeout)
        if state.terminal:
            return None
        out[k] = state.value
    return out


def detect(
    sequences: SequenceT[Sequence],
    r_values: SequenceT[float],
    *,
    transient: int = DEFAULT_TRANSIENT,
    eps: float = DEFAULT_EPS,
    timeout: float | None = None,
) -> BifurcationResult:
    """Scan ``sequences`` (ordered by increasing r) for the 1->2, 2->4, 4->8 doublings.

    Every cell is closed as soon as its window has been read; the baseline
    cell is closed unread.
    """
    if len(sequences) != len(r_values):
        raise ValueError(f"{len(sequences)} sequences but {len(r_values)} r values")
    res = BifurcationResult()
    if sequences:
        sequences[0].close()

    for seq, r in zip(sequences[1:], r_values[1:]):
        res.scanned += 1
        try:
            window = _window(seq, transient, timeout)
        finally:
            seq.close()
        if window is None:
            res.skipped.append(float(r))
            continue
        c3, c2, c1, curr = window
        lag1 = abs(curr - c1) > eps
        lag2 = abs(curr - c2) > eps
        lag3 = abs(curr - c3) > eps

        if res.period is Period.PERIOD_1 and lag1:
            nxt = Period.PERIOD_2
        elif res.period is Period.PERIOD_2 and lag1 and lag2:
            nxt = Period.PERIOD_4
        elif res.period is Period.PERIOD_4 and lag1 and lag2 and lag3:
            nxt = Period.PERIOD_8
        else:
            continue
        label = f"{int(res.period)}->{int(nxt)}"
        res.points[label] = float(r)
        res.period = nxt
        logger.info("bifurcation %s at r=%.3f", label, r)
        if res.period is Period.PERIOD_8:
            break
    return res


def detect_on_grid(grid: ParameterGrid, x0_index: int, **kwargs) -> BifurcationResult:
    """Run :func:`detect` down the r axis of ``grid`` at column ``x0_index``."""
    return detect(grid.column(x0_index), grid.r_axis.values, **kwargs)
