# composem/runtime/solver.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Global fixed-point solver.

Starting from bottom everywhere (the pseudostate excepted, which holds the
assembly's initial semantics), every round recomputes each state's semantics
from the working values of its incoming transitions' sources and joins it
onto the working map in place. Values only grow. The solver stops after a
round that changes nothing, or after ``SolverConfig.max_iterations`` rounds.
The configuration universe is finite, so the solver converges once the cap
exceeds the number of configurations times the number of states; a run cut
short by the cap is logged and the best-effort map is returned.

The solver never reads or writes the machine's cache.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from composem.core.exit_zones import ExitZone, compute_reactive_semantics
from composem.core.semantics import Semantics
from composem.core.states import SemanticState
from composem.core.transitions import SemanticTransition
from composem.runtime.config import SolverConfig
from composem.runtime.engine import transition_contribution

if TYPE_CHECKING:
    from composem.core.machine import SemanticMachine

logger = logging.getLogger(__name__)


class SemanticsMap(Mapping[SemanticState, Semantics]):
    """
    Read-only result of a fixed-point computation, mapping every state of the
    machine to its semantics.
    """

    def __init__(self, values: Dict[SemanticState, Semantics], iterations: int, converged: bool) -> None:
        self._values = dict(values)
        self._iterations = iterations
        self._converged = converged

    @property
    def iterations(self) -> int:
        """Number of rounds run, including the final confirming round."""
        return self._iterations

    @property
    def converged(self) -> bool:
        """False if the iteration cap stopped the solver first."""
        return self._converged

    def __getitem__(self, state: SemanticState) -> Semantics:
        return self._values[state]

    def __iter__(self) -> Iterator[SemanticState]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        body = ", ".join(f"{s.name}: {len(v)}" for s, v in self._values.items())
        return f"SemanticsMap({{{body}}}, iterations={self._iterations}, converged={self._converged})"


class FixedPointSolver:
    """
    Computes converged semantics for every state of a machine.
    """

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        """
        :param config: Solver settings; defaults to SolverConfig().
        """
        self._config = config or SolverConfig()

    @property
    def config(self) -> SolverConfig:
        return self._config

    def solve(self, machine: "SemanticMachine") -> SemanticsMap:
        """
        Run rounds until no state's semantics changes or the cap is hit.

        :param machine: The machine to analyse; it is not modified.
        :return: The state to semantics map.
        """
        assembly = machine.assembly
        max_iterations = self._config.max_iterations
        logger.info("Starting fixed-point semantics computation for machine '%s'", machine.name)

        bottom = Semantics.bottom(assembly.assembly_id)
        working: Dict[SemanticState, Semantics] = {}
        for state in machine.states:
            if state.is_pseudo_state:
                working[state] = assembly.calculate_initial_state_semantics()
            else:
                working[state] = bottom

        zone_memo: Dict[SemanticState, Tuple[Semantics, FrozenSet[ExitZone]]] = {}

        def zones_of(state: SemanticState) -> FrozenSet[ExitZone]:
            value = working[state]
            memo = zone_memo.get(state)
            if memo is None or memo[0] != value:
                memo = (value, compute_reactive_semantics(value, assembly))
                zone_memo[state] = memo
            return memo[1]

        changed = True
        iterations = 0
        while changed and iterations < max_iterations:
            changed = False
            for state in machine.states:
                if state.is_pseudo_state:
                    continue
                candidate = bottom
                for transition in machine.incoming_transitions(state):
                    if not isinstance(transition, SemanticTransition):
                        continue
                    source = transition.source
                    if source not in working:
                        continue
                    candidate = candidate | transition_contribution(
                        transition,
                        working[source],
                        zones_of(source),
                        assembly,
                        self._config.reactive_basis,
                    )
                # Accumulate: exit zones are not monotone in their base, so a
                # recomputed candidate may shrink. Values only grow.
                grown = working[state] | candidate
                if grown != working[state]:
                    working[state] = grown
                    changed = True
            iterations += 1

        converged = not changed
        if not converged:
            logger.warning(
                "Fixed-point solver reached iteration cap (%d iterations) for machine '%s'. "
                "Results may not have fully converged.",
                max_iterations,
                machine.name,
            )
        logger.info(
            "Completed semantics computation in %d iterations for machine '%s'", iterations, machine.name
        )
        return SemanticsMap(working, iterations, converged)


def compute_all_state_semantics(
    machine: "SemanticMachine", config: Optional[SolverConfig] = None
) -> SemanticsMap:
    """Solve a machine with the given config, or the machine's own."""
    return FixedPointSolver(config or machine.config).solve(machine)
