# src/dynstream/__init__.py
from __future__ import annotations

from dynstream.errors import (
    DynstreamError, ConfigError, OutOfDomainError, GridIndexError,
    SequenceError, SequenceExhausted, SequenceClosed, SequenceStalled,
)
from dynstream.kernels import State, RecurrenceKernel, LogisticMap, Duffing, Rossler, get_kernel
from dynstream.runtime import QUEUE_CAPACITY, Sequence, create_sequence, Axis, ParameterGrid
from dynstream.config import ExplorerConfig, load_config


__all__ = [
    # Core entry points
    "create_sequence", "ParameterGrid", "Axis", "Sequence", "QUEUE_CAPACITY",
    "logistic_grid",
    # Kernels
    "State", "RecurrenceKernel", "LogisticMap", "Duffing", "Rossler", "get_kernel",
    # Config
    "ExplorerConfig", "load_config",
    # Errors
    "DynstreamError", "ConfigError", "OutOfDomainError", "GridIndexError",
    "SequenceError", "SequenceExhausted", "SequenceClosed", "SequenceStalled",
]


def logistic_grid(
    r_range=(0.0, 4.0),
    x0_range=(0.0, 1.0),
    r_step=0.001,
    x0_step=0.01,
    *,
    eager=True,
) -> ParameterGrid:
    """Build a logistic-map grid in one call.

    This is a convenience wrapper around :meth:`ParameterGrid.build` with
    :class:`LogisticMap` as the kernel factory. The defaults cover the full
    diagram: r in [0, 4) at 0.001 and x0 in [0, 1) at 0.01.

    Parameters:
        r_range: Half-open ``(start, stop)`` of the r axis.
        x0_range: Half-open ``(start, stop)`` of the x0 axis.
        r_step: Spacing of the r axis.
        x0_step: Spacing of the x0 axis.
        eager: Start every producer now (default) or on first read.

    Returns:
        A :class:`ParameterGrid`; close it (or use it as a context manager)
        to stop its producers.

    Example:
        Liapunov curve along one x0 column::

            from dynstream import logistic_grid
            from dynstream.analysis import lyapunov

            with logistic_grid((2.5, 4.0), (0.3, 0.31)) as grid:
                curve = lyapunov.curve_on_grid(grid, 0, n=2000, transient=300)
    """
    return ParameterGrid.build(r_range, x0_range, r_step, x0_step, LogisticMap, eager=eager)
