# composem/runtime/engine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Local recompute engine.

Computes a transition's semantics from its source's current semantics, a
state's semantics from its incoming transitions, and refreshes a whole
machine in one synchronous pass. The pass reads whatever the cache holds for
each source, so on a machine whose states depend on each other through a
cycle its result may be one step stale until a full fixed-point solve.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, FrozenSet, Iterable, Mapping

from composem.core.assembly import Action, Assembly
from composem.core.exit_zones import ExitZone, compute_reactive_semantics, exit_zone_sources
from composem.core.propositions import BasicStateProposition
from composem.core.semantics import Semantics
from composem.core.states import SemanticState
from composem.core.transitions import SemanticTransition
from composem.runtime.cache import SemanticsCache
from composem.runtime.config import ReactiveBasis

if TYPE_CHECKING:
    from composem.core.machine import SemanticMachine

logger = logging.getLogger(__name__)


def apply_actions(semantics: Semantics, actions: Iterable[Action], assembly: Assembly) -> Semantics:
    """Fold the actions over a semantics value, in order."""
    for action in actions:
        semantics = semantics.transform_by_machine_event(action.machine_id, action.event, assembly)
    return semantics


def transition_contribution(
    transition: SemanticTransition,
    source_semantics: Semantics,
    source_zones: FrozenSet[ExitZone],
    assembly: Assembly,
    reactive_basis: ReactiveBasis = ReactiveBasis.STATE_SEMANTICS,
) -> Semantics:
    """
    Semantics reached by firing a transition from the given source values.

    Triggerable transitions, and every transition leaving the pseudostate,
    restrict the source semantics by the guard. Reactive transitions sum the
    images of the source semantics under each exit zone of the source whose
    target proposition equals the guard. The actions are applied last.

    :param transition: The transition to evaluate.
    :param source_semantics: Current semantics of the transition's source.
    :param source_zones: Exit zones derived from ``source_semantics``.
    :param assembly: The assembly of the machine.
    :param reactive_basis: Value transformed by the exit zones of a reactive transition.
    :return: The transition's semantics.
    """
    if not transition.is_reactive:
        pre = source_semantics & transition.guard.to_semantics(assembly)
    else:
        pre = Semantics.bottom(assembly.assembly_id)
        guard = transition.guard
        if not isinstance(guard, BasicStateProposition):
            logger.debug("Reactive transition %s has a non basic guard %s; skipped", transition.name, guard)
        else:
            if reactive_basis is ReactiveBasis.EXIT_ZONE_SOURCES:
                base = exit_zone_sources(source_zones, assembly)
            else:
                base = source_semantics
            for zone in source_zones:
                if zone.target == guard:
                    pre = pre | base.transform_by_machine_transition(zone.machine_id, zone.transition, assembly)

    return apply_actions(pre, transition.actions, assembly)


class SemanticsEngine:
    """
    Recomputes the semantics cached for a machine's states and transitions
    from the current cached values of their neighbours.
    """

    def __init__(self, machine: "SemanticMachine", cache: SemanticsCache) -> None:
        """
        :param machine: The machine whose structure is read.
        :param cache: The store receiving the recomputed values.
        """
        self._machine = machine
        self._cache = cache

    @property
    def assembly(self) -> Assembly:
        return self._machine.assembly

    def compute_reactive_semantics(self, base: Semantics) -> FrozenSet[ExitZone]:
        return compute_reactive_semantics(base, self.assembly)

    def compute_transition_semantics(self, transition: SemanticTransition) -> Semantics:
        """
        Compute a transition's semantics from its source's cached values.
        Does not store the result.
        """
        source = transition.source
        return transition_contribution(
            transition,
            self._cache.state_semantics(source),
            self._cache.reactive_semantics(source),
            self.assembly,
            self._machine.config.reactive_basis,
        )

    def compute_state_semantics(self, state: SemanticState) -> Semantics:
        """
        Join the semantics of every incoming transition of a state, each
        recomputed from its source's cached values. The exit zones derived
        from the result are stored as the state's reactive semantics.

        The pseudostate has no incoming transitions; it is refreshed from
        the assembly's initial semantics instead.

        :param state: A state of the machine.
        :return: The state's new semantics; the caller stores it.
        """
        if state.is_pseudo_state:
            return self.refresh_pseudo_state()
        joined = Semantics.bottom(self.assembly.assembly_id)
        for transition in self._machine.incoming_transitions(state):
            if not isinstance(transition, SemanticTransition):
                logger.debug("Skipping %r incoming to %s: not a semantic transition", transition, state.name)
                continue
            joined = joined | self.compute_transition_semantics(transition)

        self._cache.set_reactive_semantics(state, self.compute_reactive_semantics(joined))
        return joined

    def refresh_pseudo_state(self) -> Semantics:
        """Seed the pseudostate from the assembly's initial configuration."""
        pseudo = self._machine.pseudo_state
        initial = self.assembly.calculate_initial_state_semantics()
        self._cache.set_state_semantics(pseudo, initial)
        self._cache.set_reactive_semantics(pseudo, self.compute_reactive_semantics(initial))
        return initial

    def refresh_transitions(self) -> None:
        for transition in self._machine.transitions:
            if not isinstance(transition, SemanticTransition):
                continue
            self._cache.set_transition_semantics(transition, self.compute_transition_semantics(transition))

    def recalculate(self) -> None:
        """
        One synchronous propagation pass: pseudostate, then every other state
        in machine order, then every transition.
        """
        self.refresh_pseudo_state()
        for state in self._machine.states:
            if state.is_pseudo_state:
                continue
            self._cache.set_state_semantics(state, self.compute_state_semantics(state))
        self.refresh_transitions()
        logger.debug("Local semantics pass completed for machine '%s'", self._machine.name)

    def apply(self, semantics: Mapping[SemanticState, Semantics]) -> None:
        """
        Store externally computed state semantics, derive every state's exit
        zones from them, then recompute every transition. States missing from
        the mapping are stored as bottom. The pseudostate always takes the
        assembly's initial semantics.
        """
        self.refresh_pseudo_state()
        bottom = Semantics.bottom(self.assembly.assembly_id)
        for state in self._machine.states:
            if state.is_pseudo_state:
                continue
            value = semantics.get(state, bottom)
            self._cache.set_state_semantics(state, value)
            self._cache.set_reactive_semantics(state, self.compute_reactive_semantics(value))
        self.refresh_transitions()
