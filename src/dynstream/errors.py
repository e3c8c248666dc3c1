# src/dynstream/errors.py
from __future__ import annotations

__all__ = [
    "DynstreamError",
    "ConfigError",
    "OutOfDomainError",
    "GridIndexError",
    "SequenceError",
    "SequenceExhausted",
    "SequenceClosed",
    "SequenceStalled",
]


class DynstreamError(Exception):
    """Base error for the dynstream package."""


class ConfigError(DynstreamError):
    """Raised when a configuration file or mapping is malformed."""
    def __init__(self, message: str):
        super().__init__(message)


class OutOfDomainError(ConfigError):
    """Raised when a parameter lies outside its valid range.

    Always raised before any sequence is created.
    """
    def __init__(self, name: str, value, valid: str):
        self.name = name
        self.value = value
        self.valid = valid
        super().__init__(f"Parameter {name}={value!r} is out of domain (expected {valid})")


class GridIndexError(DynstreamError, IndexError):
    """Raised when a grid lookup resolves outside the constructed extent."""
    def __init__(self, axis: str, value: float, index: int, length: int):
        self.axis = axis
        self.value = value
        self.index = index
        self.length = length
        msg = f"{axis}={value!r} resolves to index {index}, outside [0, {length})"
        super().__init__(msg)


class SequenceError(DynstreamError):
    """Base error for reads that cannot yield another state."""


class SequenceExhausted(SequenceError):
    """Raised when reading past the terminal state of a sequence."""
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Sequence {label} has ended; no further states")


class SequenceClosed(SequenceError):
    """Raised when reading from a sequence after it was cancelled."""
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Sequence {label} is closed")


class SequenceStalled(SequenceError):
    """Raised when a bounded read waits longer than its timeout."""
    def __init__(self, label: str, timeout: float):
        self.label = label
        self.timeout = timeout
        super().__init__(f"Sequence {label} produced nothing within {timeout:g}s")
