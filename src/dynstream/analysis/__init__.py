"""Analysis consumers that draw from sequences (transient, convergence, bifurcation, ...)."""

from dynstream.analysis.transient import DEFAULT_TRANSIENT, discard, take
from dynstream.analysis.convergence import (
    ConvergenceSample,
    classify,
    first_converged,
    logistic_attractor,
    nearest_target,
)
from dynstream.analysis.bifurcation import BifurcationResult, Period
from dynstream.analysis.lyapunov import LiapunovCurve
from dynstream.analysis.divergence import DivergenceSample, compare, compare_neighbours, lockstep
from dynstream.analysis.diagram import DiagramResult
from dynstream.analysis.trajectory import Trajectory, projections, record, record_pair
from dynstream.analysis import bifurcation, diagram, lyapunov

__all__ = [
    "DEFAULT_TRANSIENT",
    "discard",
    "take",
    "ConvergenceSample",
    "classify",
    "first_converged",
    "logistic_attractor",
    "nearest_target",
    "BifurcationResult",
    "Period",
    "bifurcation",
    "LiapunovCurve",
    "lyapunov",
    "DivergenceSample",
    "compare",
    "compare_neighbours",
    "lockstep",
    "DiagramResult",
    "diagram",
    "Trajectory",
    "projections",
    "record",
    "record_pair",
]
