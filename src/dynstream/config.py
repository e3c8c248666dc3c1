# src/dynstream/config.py
"""
Run configuration.

A config file is TOML with optional ``[logistic]``, ``[duffing]`` and
``[rossler]`` tables whose keys mirror the dataclass fields below. Unknown
tables or keys are rejected.
"""

from __future__ import annotations

import dataclasses
import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from dynstream.errors import ConfigError, OutOfDomainError

__all__ = [
    "LogisticConfig",
    "DuffingConfig",
    "RosslerConfig",
    "ExplorerConfig",
    "load_config",
    "config_from_mapping",
]


def _require_range(name: str, value: float, lo: float, hi: float) -> None:
    if not (math.isfinite(value) and lo <= value <= hi):
        raise OutOfDomainError(name, value, f"{lo:g} <= {name} <= {hi:g}")


def _require_positive(name: str, value: float) -> None:
    if not (math.isfinite(value) and value > 0):
        raise OutOfDomainError(name, value, f"{name} > 0")


def _require_count(name: str, value: int, minimum: int = 0) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise OutOfDomainError(name, value, f"integer >= {minimum}")


@dataclass(frozen=True)
class LogisticConfig:
    r: float = 3.2
    x0: float = 0.3
    r_start: float = 0.0
    r_stop: float = 4.0
    r_step: float = 0.001
    x0_start: float = 0.0
    x0_stop: float = 1.0
    x0_step: float = 0.01
    transient: int = 300
    n: int = 1000
    x0_index: int = 30

    def validate(self) -> None:
        _require_range("r", self.r, 0.0, 4.0)
        _require_range("x0", self.x0, 0.0, 1.0)
        _require_range("r_start", self.r_start, 0.0, 4.0)
        _require_range("r_stop", self.r_stop, 0.0, 4.0 + self.r_step)
        _require_range("x0_start", self.x0_start, 0.0, 1.0)
        _require_range("x0_stop", self.x0_stop, 0.0, 1.0 + self.x0_step)
        _require_positive("r_step", self.r_step)
        _require_positive("x0_step", self.x0_step)
        if self.r_stop <= self.r_start:
            raise OutOfDomainError("r_stop", self.r_stop, f"r_stop > r_start={self.r_start:g}")
        if self.x0_stop <= self.x0_start:
            raise OutOfDomainError("x0_stop", self.x0_stop, f"x0_stop > x0_start={self.x0_start:g}")
        _require_count("transient", self.transient)
        _require_count("n", self.n, 1)
        _require_count("x0_index", self.x0_index)


@dataclass(frozen=True)
class DuffingConfig:
    F: float = 0.24
    x0: float = 0.0
    y0: float = 0.0
    t: int = 100  # seconds
    steps_per_second: int = 1000
    compare_F: tuple[float, float] = (0.24, 0.35)

    @property
    def dt(self) -> float:
        return 1.0 / self.steps_per_second

    @property
    def nsteps(self) -> int:
        return self.t * self.steps_per_second

    def validate(self) -> None:
        for name in ("F", "x0", "y0"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise OutOfDomainError(name, value, "a finite number")
        _require_count("t", self.t, 1)
        _require_count("steps_per_second", self.steps_per_second, 1)
        if len(self.compare_F) != 2 or not all(math.isfinite(f) for f in self.compare_F):
            raise OutOfDomainError("compare_F", self.compare_F, "two finite forcing values")


@dataclass(frozen=True)
class RosslerConfig:
    a: float = 0.2
    b: float = 0.2
    c: float = 5.7
    x0: float = -1.0
    y0: float = 0.0
    z0: float = 0.0
    t: int = 100000  # steps of h = 1/1000

    def validate(self) -> None:
        for name in ("a", "b", "c", "x0", "y0", "z0"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise OutOfDomainError(name, value, "a finite number")
        _require_count("t", self.t, 1)


@dataclass(frozen=True)
class ExplorerConfig:
    logistic: LogisticConfig = field(default_factory=LogisticConfig)
    duffing: DuffingConfig = field(default_factory=DuffingConfig)
    rossler: RosslerConfig = field(default_factory=RosslerConfig)

    def validate(self) -> "ExplorerConfig":
        self.logistic.validate()
        self.duffing.validate()
        self.rossler.validate()
        return self

    def replace(self, section: str, **changes: Any) -> "ExplorerConfig":
        """Copy with ``changes`` applied to one section; None values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self
        sub = dataclasses.replace(getattr(self, section), **changes)
        return dataclasses.replace(self, **{section: sub})


_SECTIONS = {
    "logistic": LogisticConfig,
    "duffing": DuffingConfig,
    "rossler": RosslerConfig,
}


def _coerce(section: str, cls, table: Mapping[str, Any]):
    if not isinstance(table, Mapping):
        raise ConfigError(f"[{section}] must be a table")
    fields = {f.name: f for f in dataclasses.fields(cls)}
    unknown = sorted(set(table) - set(fields))
    if unknown:
        raise ConfigError(f"Unknown key(s) in [{section}]: {', '.join(unknown)}")
    kwargs: Dict[str, Any] = {}
    for key, value in table.items():
        default = getattr(cls(), key)
        if isinstance(default, tuple):
            if not isinstance(value, (list, tuple)):
                raise ConfigError(f"[{section}].{key} must be an array")
            kwargs[key] = tuple(float(v) for v in value)
        elif isinstance(default, int):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"[{section}].{key} must be an integer")
            kwargs[key] = value
        else:
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigError(f"[{section}].{key} must be a number")
            kwargs[key] = float(value)
    return cls(**kwargs)


def config_from_mapping(doc: Mapping[str, Any]) -> ExplorerConfig:
    """Build and validate an :class:`ExplorerConfig` from parsed TOML."""
    unknown = sorted(set(doc) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown table(s): {', '.join(unknown)}")
    parts = {name: _coerce(name, cls, doc[name]) for name, cls in _SECTIONS.items() if name in doc}
    return ExplorerConfig(**parts).validate()


def load_config(path: str | Path) -> ExplorerConfig:
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            doc = tomllib.load(fh)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    return config_from_mapping(doc)
