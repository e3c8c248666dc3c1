# src/dynstream/plot/__init__.py
"""Matplotlib renderers for precomputed point sets."""
from __future__ import annotations

from ._primitives import diagram, curve, phase, projections
from . import _export as export
from ._export import savefig

__all__ = ["diagram", "curve", "phase", "projections", "export", "savefig"]
