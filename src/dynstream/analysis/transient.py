# src/dynstream/analysis/transient.py
from __future__ import annotations

import logging

from dynstream.kernels import State
from dynstream.runtime.sequence import Sequence

__all__ = ["DEFAULT_TRANSIENT", "discard", "take"]

logger = logging.getLogger(__name__)

DEFAULT_TRANSIENT = 300


def discard(seq: Sequence, n: int = DEFAULT_TRANSIENT, *, timeout: float | None = None) -> Sequence:
    """Read and drop exactly ``n`` states from the front of ``seq``.

    Stops early if the terminal state turns up; the sequence is then ended
    and further reads raise ``SequenceExhausted``.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    for _ in range(n):
        if seq.next(timeout).terminal:
            logger.debug("%s ended while discarding transient", seq.label)
            break
    return seq


def take(seq: Sequence, n: int, *, timeout: float | None = None) -> list[State]:
    """Read up to ``n`` finite states; fewer are returned if the sequence ends."""
    if n < 0:
        raise ValueError("n must be non-negative")
    out: list[State] = []
    while len(out) < n:
        state = seq.next(timeout)
        if state.terminal:
            break
        out.append(state)
    return out
