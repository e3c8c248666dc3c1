# src/dynstream/analysis/trajectory.py
"""Finite trajectories of continuous flows (Duffing, Rössler)."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Sequence as SequenceT

import numpy as np

from dynstream.analysis.divergence import lockstep
from dynstream.analysis.transient import take
from dynstream.runtime.sequence import Sequence

__all__ = ["Trajectory", "record", "record_pair", "projections"]


@dataclass
class Trajectory:
    """Recorded states of one sequence; ``ended`` is True if it diverged early."""
    names: tuple[str, ...]
    data: np.ndarray  # (k, len(names))
    requested: int
    label: str = ""

    @property
    def ended(self) -> bool:
        return self.data.shape[0] < self.requested

    def __getitem__(self, name: str) -> np.ndarray:
        try:
            col = self.names.index(name)
        except ValueError:
            raise KeyError(f"Unknown variable {name!r}; available: {self.names}") from None
        return self.data[:, col]

    def __len__(self) -> int:
        return int(self.data.shape[0])


def record(
    seq: Sequence,
    n: int,
    names: SequenceT[str],
    *,
    timeout: float | None = None,
) -> Trajectory:
    """Read up to ``n`` states, stopping at the terminal state."""
    states = take(seq, n, timeout=timeout)
    data = np.array([s.values for s in states], dtype=float).reshape(len(states), len(names))
    return Trajectory(tuple(names), data, int(n), seq.label)


def record_pair(
    a: Sequence,
    b: Sequence,
    n: int,
    names: SequenceT[str],
    *,
    timeout: float | None = None,
) -> tuple[Trajectory, Trajectory]:
    """Record two sequences in lockstep; both stop when either one ends."""
    da, db = lockstep(a, b, n=n, timeout=timeout)
    names = tuple(names)
    return (
        Trajectory(names, da.reshape(len(da), len(names)), int(n), a.label),
        Trajectory(names, db.reshape(len(db), len(names)), int(n), b.label),
    )


def projections(traj: Trajectory) -> dict[tuple[str, str], np.ndarray]:
    """Every coordinate pair of ``traj`` as ``(k, 2)`` arrays, e.g. (x, y), (x, z), (y, z)."""
    out: dict[tuple[str, str], np.ndarray] = {}
    for u, v in itertools.combinations(traj.names, 2):
        out[(u, v)] = np.column_stack((traj[u], traj[v]))
    return out
