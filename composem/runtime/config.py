# composem/runtime/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass
from enum import Enum, auto

DEFAULT_MAX_ITERATIONS = 1000


class ReactiveBasis(Enum):
    """
    Selects the value transformed by the exit zones of a reactive transition.
    """

    STATE_SEMANTICS = auto()  # The source state's own semantics
    EXIT_ZONE_SOURCES = auto()  # Union of the exit zones' source propositions


class PropagationStrategy(Enum):
    """Defines how a machine refreshes its cached semantics."""

    LOCAL = auto()  # One synchronous pass over the current caches
    FIXED_POINT = auto()  # Full solve, then written back into the caches


@dataclass(frozen=True)
class SolverConfig:
    """Settings of the fixed-point solver."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    reactive_basis: ReactiveBasis = ReactiveBasis.STATE_SEMANTICS

    def __post_init__(self) -> None:
        if not isinstance(self.max_iterations, int) or self.max_iterations < 1:
            raise ValueError("max_iterations must be a positive integer")
        if not isinstance(self.reactive_basis, ReactiveBasis):
            raise ValueError("reactive_basis must be a ReactiveBasis enum value")
