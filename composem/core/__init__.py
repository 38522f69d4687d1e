"""
Core package: the lattice of semantics values, propositions, the assembly of
component machines, exit zones and the composed machine's entities.
"""

# Import order matters to avoid circular dependencies
from .errors import AssemblyError, SemanticsError, ValidationError
from .semantics import Configuration, Semantics, configuration_state, make_configuration
from .assembly import DEFAULT_ASSEMBLY_ID, Action, Assembly, ComponentMachine, ComponentTransition
from .propositions import (
    AndProposition,
    BasicStateProposition,
    FalseProposition,
    NotProposition,
    OrProposition,
    Proposition,
    TrueProposition,
)
from .exit_zones import ExitZone, compute_reactive_semantics, exit_zone_sources
from .states import PSEUDO_STATE_NAME, SemanticState
from .transitions import SemanticTransition
from .machine import SemanticMachine

__all__ = [
    # Errors
    "SemanticsError",
    "ValidationError",
    "AssemblyError",
    # Lattice
    "Configuration",
    "Semantics",
    "configuration_state",
    "make_configuration",
    # Assembly
    "DEFAULT_ASSEMBLY_ID",
    "Action",
    "Assembly",
    "ComponentMachine",
    "ComponentTransition",
    # Propositions
    "Proposition",
    "BasicStateProposition",
    "TrueProposition",
    "FalseProposition",
    "AndProposition",
    "OrProposition",
    "NotProposition",
    # Exit zones
    "ExitZone",
    "compute_reactive_semantics",
    "exit_zone_sources",
    # Composed machine
    "PSEUDO_STATE_NAME",
    "SemanticState",
    "SemanticTransition",
    "SemanticMachine",
]
