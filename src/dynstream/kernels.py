# src/dynstream/kernels.py
"""
Recurrence kernels: pure one-step update rules for the explored systems.

A kernel never holds mutable state. ``iterate`` turns a kernel and an initial
condition into a lazy, unbounded generator of :class:`State` objects; the
first state yielded is the initial condition itself. Iteration stops after
yielding a single terminal state once any coordinate becomes NaN/Inf.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from dynstream.errors import OutOfDomainError

__all__ = [
    "State",
    "RecurrenceKernel",
    "LogisticMap",
    "Duffing",
    "Rossler",
    "register",
    "get_kernel",
    "registry",
]


@dataclass(frozen=True)
class State:
    """One element of a sequence.

    ``terminal`` marks the state at which the recurrence left the finite
    numbers; its ``values`` hold the offending coordinates.
    """
    values: tuple[float, ...]
    index: int
    terminal: bool = False

    @property
    def value(self) -> float:
        """First coordinate (the only one for 1-D maps)."""
        return self.values[0]

    def __getitem__(self, i: int) -> float:
        return self.values[i]

    def __len__(self) -> int:
        return len(self.values)


def _allfinite(values: Sequence[float]) -> bool:
    for v in values:
        if not math.isfinite(v):
            return False
    return True


class RecurrenceKernel:
    """Base class for one-step update rules.

    Subclasses implement ``step`` over an internal tuple. ``start`` builds the
    internal tuple from the exposed initial condition and ``observe`` maps it
    back to the exposed coordinates, which lets a kernel carry hidden state
    (e.g. the Duffing clock).
    """

    name: str = ""
    coords: tuple[str, ...] = ()

    def start(self, initial: Sequence[float]) -> tuple[float, ...]:
        y = tuple(float(v) for v in initial)
        if len(y) != len(self.coords):
            raise ValueError(
                f"{self.name} expects {len(self.coords)} initial coordinate(s) "
                f"{self.coords}, got {len(y)}"
            )
        return y

    def step(self, y: tuple[float, ...]) -> tuple[float, ...]:
        raise NotImplementedError

    def observe(self, y: tuple[float, ...]) -> tuple[float, ...]:
        return y

    def iterate(self, initial: Sequence[float]) -> Iterator[State]:
        y = self.start(initial)
        i = 0
        while True:
            obs = self.observe(y)
            if not _allfinite(obs):
                yield State(obs, i, terminal=True)
                return
            yield State(obs, i)
            try:
                y = self.step(y)
            except ArithmeticError:
                yield State(tuple(math.nan for _ in obs), i + 1, terminal=True)
                return
            i += 1


@dataclass(frozen=True)
class LogisticMap(RecurrenceKernel):
    """x' = r*x*(1-x)"""
    r: float

    name = "logistic"
    coords = ("x",)

    def __post_init__(self):
        if not 0.0 <= self.r <= 4.0:
            raise OutOfDomainError("r", self.r, "0 <= r <= 4")

    def start(self, initial: Sequence[float]) -> tuple[float, ...]:
        y = super().start(initial)
        if not 0.0 <= y[0] <= 1.0:
            raise OutOfDomainError("x0", y[0], "0 <= x0 <= 1")
        return y

    def step(self, y):
        x = y[0]
        return (self.r * x * (1 - x),)

    def derivative(self, x: float) -> float:
        """Slope of the map at ``x``: r - 2*r*x."""
        return self.r - 2 * self.r * x


@dataclass(frozen=True)
class Duffing(RecurrenceKernel):
    """Forced Duffing oscillator, explicit Euler with time carried as hidden state.

        x' = dt*y + x
        y' = dt*(F*cos(t) - 0.5*y + x - x^3) + y
        t' = t + dt
    """
    F: float
    dt: float = 1e-3

    name = "duffing"
    coords = ("x", "y")

    def __post_init__(self):
        if not self.dt > 0.0:
            raise OutOfDomainError("dt", self.dt, "dt > 0")

    def start(self, initial):
        return super().start(initial) + (0.0,)

    def step(self, y):
        x, v, t = y
        dt = self.dt
        return (
            dt * v + x,
            dt * (self.F * math.cos(t) - 0.5 * v + x - x * x * x) + v,
            t + dt,
        )

    def observe(self, y):
        return y[:2]


@dataclass(frozen=True)
class Rossler(RecurrenceKernel):
    """Rössler flow, explicit Euler with step ``h``.

        x' = x - (y+z)*h
        y' = y + (x + a*y)*h
        z' = z + (b + z*(x-c))*h
    """
    a: float = 0.2
    b: float = 0.2
    c: float = 5.7
    h: float = 1e-3

    name = "rossler"
    coords = ("x", "y", "z")

    def __post_init__(self):
        if not self.h > 0.0:
            raise OutOfDomainError("h", self.h, "h > 0")

    def step(self, y):
        x, v, z = y
        h = self.h
        return (
            x - (v + z) * h,
            v + (x + self.a * v) * h,
            z + (self.b + z * (x - self.c)) * h,
        )


_registry: dict[str, Callable[..., RecurrenceKernel]] = {}


def register(name: str, factory: Callable[..., RecurrenceKernel]) -> None:
    """Register a kernel factory under ``name``."""
    if name in _registry and _registry[name] is not factory:
        raise ValueError(f"Kernel {name!r} is already registered")
    _registry[name] = factory


def get_kernel(name: str, **params) -> RecurrenceKernel:
    """Instantiate the kernel registered as ``name`` with ``params``."""
    try:
        factory = _registry[name]
    except KeyError:
        raise KeyError(f"Unknown kernel {name!r}; available: {sorted(_registry)}") from None
    return factory(**params)


def registry() -> dict[str, Callable[..., RecurrenceKernel]]:
    return dict(_registry)


for _cls in (LogisticMap, Duffing, Rossler):
    register(_cls.name, _cls)
