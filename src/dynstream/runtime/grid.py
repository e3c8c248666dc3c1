# src/dynstream/runtime/grid.py
"""
Parameter grid: one Sequence per (r, x0) cell.

Axis values are always derived as ``start + i*step`` from an integer index
and looked up again with ``round((value - start) / step)``; no axis is ever
walked by repeated floating addition.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence as SequenceT

import numpy as np

from dynstream.errors import GridIndexError, OutOfDomainError
from dynstream.kernels import RecurrenceKernel
from dynstream.runtime.sequence import QUEUE_CAPACITY, Sequence, create_sequence

__all__ = ["Axis", "ParameterGrid"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Axis:
    """A discretized parameter axis: values ``start + i*step`` for ``0 <= i < length``."""
    name: str
    start: float
    step: float
    length: int

    def __post_init__(self):
        if not (math.isfinite(self.step) and self.step > 0.0):
            raise OutOfDomainError(f"{self.name}_step", self.step, "finite step > 0")
        if self.length <= 0:
            raise OutOfDomainError(f"{self.name} axis", self.length, "at least one grid point")

    @classmethod
    def from_range(cls, name: str, start: float, stop: float, step: float) -> "Axis":
        """Half-open axis covering ``[start, stop)``."""
        if not (math.isfinite(step) and step > 0.0):
            raise OutOfDomainError(f"{name}_step", step, "finite step > 0")
        span = (stop - start) / step
        nearest = round(span)
        # (4.0 - 0.0) / 0.001 is not exactly 4000; snap near-integers.
        if abs(span - nearest) <= 1e-9 * max(1.0, abs(span)):
            length = int(nearest)
        else:
            length = int(math.ceil(span))
        return cls(name, float(start), float(step), length)

    @classmethod
    def single(cls, name: str, value: float) -> "Axis":
        return cls(name, float(value), 1.0, 1)

    @property
    def stop(self) -> float:
        return self.value(self.length)

    @property
    def values(self) -> np.ndarray:
        return self.start + self.step * np.arange(self.length, dtype=float)

    def value(self, i: int) -> float:
        return self.start + i * self.step

    def index(self, value: float) -> int:
        """Resolve ``value`` to its grid index; raises if outside the axis."""
        if not math.isfinite(value):
            raise GridIndexError(self.name, value, -1, self.length)
        i = int(round((value - self.start) / self.step))
        if i < 0 or i >= self.length:
            raise GridIndexError(self.name, value, i, self.length)
        return i

    def __len__(self) -> int:
        return self.length


class ParameterGrid:
    """Two-dimensional, read-only collection of Sequences.

    Rows run along the r axis and columns along the x0 axis. The grid owns
    its Sequences and closes all of them on ``close``.
    """

    def __init__(self, r_axis: Axis, x0_axis: Axis, cells: list[list[Sequence]]):
        if len(cells) != r_axis.length:
            raise ValueError(f"grid has {len(cells)} rows, {r_axis.name} axis declares {r_axis.length}")
        for i, row in enumerate(cells):
            if len(row) != x0_axis.length:
                raise ValueError(
                    f"row {i} has {len(row)} columns, {x0_axis.name} axis declares {x0_axis.length}"
                )
        self.r_axis = r_axis
        self.x0_axis = x0_axis
        self._cells = cells
        self._closed = False

    @classmethod
    def build(
        cls,
        r_range: tuple[float, float],
        x0_range: tuple[float, float],
        r_step: float,
        x0_step: float,
        kernel_factory: Callable[[float], RecurrenceKernel],
        *,
        initial: Callable[[float], SequenceT[float]] | None = None,
        capacity: int = QUEUE_CAPACITY,
        eager: bool = True,
    ) -> "ParameterGrid":
        """Build one Sequence per cell of ``[r0, r1) x [x00, x01)``.

        With ``eager`` every producer starts immediately; otherwise a producer
        starts on the first read of its cell, which keeps the thread count
        bounded for grids that are consumed cell by cell.
        """
        r_axis = Axis.from_range("r", r_range[0], r_range[1], r_step)
        x0_axis = Axis.from_range("x0", x0_range[0], x0_range[1], x0_step)
        return cls.from_axes(
            r_axis, x0_axis, kernel_factory, initial=initial, capacity=capacity, eager=eager
        )

    @classmethod
    def from_axes(
        cls,
        r_axis: Axis,
        x0_axis: Axis,
        kernel_factory: Callable[[float], RecurrenceKernel],
        *,
        initial: Callable[[float], SequenceT[float]] | None = None,
        capacity: int = QUEUE_CAPACITY,
        eager: bool = True,
    ) -> "ParameterGrid":
        if initial is None:
            initial = _scalar_initial
        t0 = time.perf_counter()

        # Every kernel and initial condition is validated before any thread starts.
        cells: list[list[Sequence]] = []
        for i in range(r_axis.length):
            r = r_axis.value(i)
            kernel = kernel_factory(r)
            row = []
            for j in range(x0_axis.length):
                x0 = x0_axis.value(j)
                row.append(
                    create_sequence(
                        kernel, initial(x0), label=f"r={r:g},x0={x0:g}", capacity=capacity, start=False
                    )
                )
            cells.append(row)

        grid = cls(r_axis, x0_axis, cells)
        if eager:
            for _, _, seq in grid.cells():
                seq.start()
        logger.info(
            "built %dx%d grid (%d producers) in %.3fs",
            r_axis.length, x0_axis.length, len(grid), time.perf_counter() - t0,
        )
        return grid

    @property
    def shape(self) -> tuple[int, int]:
        return (self.r_axis.length, self.x0_axis.length)

    @property
    def n_rows(self) -> int:
        return self.r_axis.length

    @property
    def n_cols(self) -> int:
        return self.x0_axis.length

    def __len__(self) -> int:
        return self.n_rows * self.n_cols

    def flat_index(self, row: int, col: int) -> int:
        """Row-major slot of (row, col); a bijection onto ``[0, len(grid))``."""
        self._check(row, col)
        return row * self.n_cols + col

    def cell(self, row: int, col: int) -> Sequence:
        self._check(row, col)
        return self._cells[row][col]

    def at(self, r: float, x0: float) -> Sequence:
        """Sequence for the grid point nearest to (r, x0)."""
        return self._cells[self.r_axis.index(r)][self.x0_axis.index(x0)]

    def row(self, row: int) -> list[Sequence]:
        self._check(row, 0)
        return list(self._cells[row])

    def column(self, col: int) -> list[Sequence]:
        self._check(0, col)
        return [r[col] for r in self._cells]

    def cells(self) -> Iterator[tuple[int, int, Sequence]]:
        for i, row in enumerate(self._cells):
            for j, seq in enumerate(row):
                yield i, j, seq

    def _check(self, row: int, col: int) -> None:
        if not 0 <= row < self.n_rows:
            raise GridIndexError(f"{self.r_axis.name} row", row, row, self.n_rows)
        if not 0 <= col < self.n_cols:
            raise GridIndexError(f"{self.x0_axis.name} column", col, col, self.n_cols)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Cancel every producer owned by the grid."""
        if self._closed:
            return
        self._closed = True
        for _, _, seq in self.cells():
            seq.cancel()
        for _, _, seq in self.cells():
            seq.close()
        logger.debug("closed grid of %d sequences", len(self))

    def __enter__(self) -> "ParameterGrid":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ParameterGrid({self.r_axis.name}: {self.n_rows} x {self.x0_axis.name}: {self.n_cols}, "
            f"closed={self._closed})"
        )


def _scalar_initial(x0: float) -> tuple[float]:
    return (x0,)
