"""composem: behavioral semantics for state machines composed over an assembly

This package computes, for every state and transition of a composed state
machine, the set of joint configurations of the assembly's component
machines consistent with reaching that state or firing that transition.

Responsibilities:
    - Lattice of semantics values and the proposition model
    - Assembly of component machines
    - Exit-zone derivation for autonomous component transitions
    - Local single-pass propagation for incremental refresh
    - Global fixed-point solving over cyclic machines

Logging:
    - Module level loggers under the ``composem`` namespace
    - No handlers are configured by the library
"""

from typing import Optional

from composem.core import (
    Action,
    Assembly,
    BasicStateProposition,
    ComponentMachine,
    ComponentTransition,
    ExitZone,
    Semantics,
    SemanticMachine,
    SemanticState,
    SemanticTransition,
    TrueProposition,
)
from composem.runtime import PropagationStrategy, ReactiveBasis, SemanticsMap, SolverConfig

__version__ = "0.1.0"


def recalculate_semantics(
    machine: SemanticMachine, strategy: PropagationStrategy = PropagationStrategy.LOCAL
) -> None:
    """Refresh a machine's cached semantics in place."""
    machine.recalculate_semantics(strategy)


def compute_all_state_semantics(machine: SemanticMachine, config: Optional[SolverConfig] = None) -> SemanticsMap:
    """Solve a machine to a fixed point without modifying it."""
    return machine.compute_all_state_semantics(config)


__all__ = [
    "Action",
    "Assembly",
    "BasicStateProposition",
    "ComponentMachine",
    "ComponentTransition",
    "ExitZone",
    "Semantics",
    "SemanticMachine",
    "SemanticState",
    "SemanticTransition",
    "TrueProposition",
    "PropagationStrategy",
    "ReactiveBasis",
    "SemanticsMap",
    "SolverConfig",
    "recalculate_semantics",
    "compute_all_state_semantics",
]
