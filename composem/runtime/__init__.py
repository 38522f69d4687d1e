"""
Runtime package: the semantics cache, the local recompute engine and the
global fixed-point solver.
"""

from .config import DEFAULT_MAX_ITERATIONS, PropagationStrategy, ReactiveBasis, SolverConfig
from .cache import SemanticsCache
from .engine import SemanticsEngine, apply_actions, transition_contribution
from .solver import FixedPointSolver, SemanticsMap, compute_all_state_semantics

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "PropagationStrategy",
    "ReactiveBasis",
    "SolverConfig",
    "SemanticsCache",
    "SemanticsEngine",
    "apply_actions",
    "transition_contribution",
    "FixedPointSolver",
    "SemanticsMap",
    "compute_all_state_semantics",
]
