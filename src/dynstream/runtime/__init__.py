"""Concurrent sequence runtime: producers, bounded queues and parameter grids."""

from dynstream.runtime.sequence import QUEUE_CAPACITY, Sequence, create_sequence
from dynstream.runtime.grid import Axis, ParameterGrid

__all__ = ["QUEUE_CAPACITY", "Sequence", "create_sequence", "Axis", "ParameterGrid"]
