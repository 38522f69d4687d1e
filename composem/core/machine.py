# composem/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from composem.core.assembly import Assembly
from composem.core.errors import ValidationError
from composem.core.exit_zones import ExitZone
from composem.core.propositions import (
    AndProposition,
    BasicStateProposition,
    NotProposition,
    OrProposition,
    Proposition,
)
from composem.core.semantics import Semantics
from composem.core.states import PSEUDO_STATE_NAME, SemanticState
from composem.core.transitions import SemanticTransition
from composem.runtime.cache import SemanticsCache
from composem.runtime.config import PropagationStrategy, SolverConfig
from composem.runtime.engine import SemanticsEngine
from composem.runtime.solver import FixedPointSolver, SemanticsMap

logger = logging.getLogger(__name__)


class SemanticMachine:
    """
    A state machine composed over an assembly of component machines.

    The machine owns its structure (states, transitions, the incoming
    transition index) and a SemanticsCache holding the semantics computed for
    every state and transition. The pseudostate is created here and is always
    the first state.
    """

    def __init__(self, name: str, assembly: Optional[Assembly] = None, config: Optional[SolverConfig] = None):
        """
        :param name: Name of the machine.
        :param assembly: Assembly of component machines; defaults to an empty one.
        :param config: Solver settings used by the machine's entry points.
        """
        if not name or not isinstance(name, str):
            raise ValidationError("Machine name must be a non-empty string")
        self._name = name
        self._assembly = assembly if assembly is not None else Assembly()
        self._config = config or SolverConfig()

        self._pseudo_state = SemanticState(PSEUDO_STATE_NAME, is_pseudo_state=True)
        self._states: List[SemanticState] = [self._pseudo_state]
        self._transitions: List[Any] = []
        self._incoming: Dict[SemanticState, List[Any]] = {self._pseudo_state: []}
        self._outgoing: Dict[SemanticState, List[Any]] = {self._pseudo_state: []}

        self._cache = SemanticsCache(self._assembly.assembly_id)
        self._engine = SemanticsEngine(self, self._cache)

    @property
    def name(self) -> str:
        return self._name

    @property
    def assembly(self) -> Assembly:
        return self._assembly

    @assembly.setter
    def assembly(self, assembly: Assembly) -> None:
        """Replace the assembly. Cached semantics belong to the old one and are dropped."""
        self._assembly = assembly
        self._cache = SemanticsCache(assembly.assembly_id)
        self._engine = SemanticsEngine(self, self._cache)

    @property
    def config(self) -> SolverConfig:
        return self._config

    @config.setter
    def config(self, config: SolverConfig) -> None:
        self._config = config

    @property
    def cache(self) -> SemanticsCache:
        return self._cache

    @property
    def engine(self) -> SemanticsEngine:
        return self._engine

    @property
    def pseudo_state(self) -> SemanticState:
        return self._pseudo_state

    @property
    def states(self) -> List[SemanticState]:
        """All states, pseudostate first, in insertion order."""
        return list(self._states)

    @property
    def transitions(self) -> List[Any]:
        return list(self._transitions)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def get_state(self, name: str) -> Optional[SemanticState]:
        for state in self._states:
            if state.name == name:
                return state
        return None

    def add_state(self, state: Union[SemanticState, str]) -> SemanticState:
        """
        Add a state, given as an entity or a name.

        :raises ValidationError: If the name is taken or the state is a pseudostate.
        """
        if isinstance(state, str):
            state = SemanticState(state)
        if not isinstance(state, SemanticState):
            raise ValidationError(f"Expected a SemanticState, got {type(state).__name__}")
        if state.is_pseudo_state:
            raise ValidationError("A machine has exactly one pseudostate, created with the machine")
        if self.get_state(state.name) is not None:
            raise ValidationError(f"State '{state.name}' already exists in machine '{self._name}'")

        self._states.append(state)
        self._incoming[state] = []
        self._outgoing[state] = []
        return state

    def add_transition(self, transition: Any) -> Any:
        """
        Add a transition between two states of this machine.

        Any object exposing ``source`` and ``target`` states is accepted, so
        editor-level links can share the transition list. Only
        SemanticTransition instances take part in semantics computation.

        :raises ValidationError: If an endpoint is not in the machine or the
            target is the pseudostate.
        """
        source = getattr(transition, "source", None)
        target = getattr(transition, "target", None)
        if source not in self._incoming:
            raise ValidationError(f"Source state {getattr(source, 'name', source)} not in machine '{self._name}'")
        if target not in self._incoming:
            raise ValidationError(f"Target state {getattr(target, 'name', target)} not in machine '{self._name}'")
        if target is self._pseudo_state:
            raise ValidationError("The pseudostate cannot have incoming transitions")

        self._transitions.append(transition)
        self._incoming[target].append(transition)
        self._outgoing[source].append(transition)
        return transition

    def connect(self, source: SemanticState, target: SemanticState, **kwargs: Any) -> SemanticTransition:
        """Create and add a SemanticTransition; kwargs are passed to its constructor."""
        return self.add_transition(SemanticTransition(source, target, **kwargs))

    def remove_transition(self, transition: Any) -> None:
        """
        :raises ValidationError: If the transition is not in the machine.
        """
        if transition not in self._transitions:
            raise ValidationError(f"Transition {transition!r} not in machine '{self._name}'")
        self._transitions.remove(transition)
        self._incoming[transition.target].remove(transition)
        self._outgoing[transition.source].remove(transition)
        self._cache.forget(transition)

    def remove_state(self, state: SemanticState) -> None:
        """
        Remove a state together with every transition touching it.

        :raises ValidationError: If the state is the pseudostate or not in the machine.
        """
        if state is self._pseudo_state:
            raise ValidationError("The pseudostate cannot be removed")
        if state not in self._incoming:
            raise ValidationError(f"State {state.name} not in machine '{self._name}'")
        for transition in self._incoming[state] + self._outgoing[state]:
            if transition in self._transitions:
                self.remove_transition(transition)
        self._states.remove(state)
        del self._incoming[state]
        del self._outgoing[state]
        self._cache.forget(state)

    def incoming_transitions(self, state: SemanticState) -> List[Any]:
        return list(self._incoming.get(state, []))

    def outgoing_transitions(self, state: SemanticState) -> List[Any]:
        return list(self._outgoing.get(state, []))

    # ------------------------------------------------------------------
    # Semantics
    # ------------------------------------------------------------------

    def recalculate_semantics(self, strategy: PropagationStrategy = PropagationStrategy.LOCAL) -> None:
        """
        Refresh the cached semantics of every state and transition.

        LOCAL runs one synchronous pass from the current caches. FIXED_POINT
        solves the machine from scratch and writes the converged values back.
        """
        logger.debug("Recalculating semantics of machine '%s' (%s)", self._name, strategy.name)
        if strategy is PropagationStrategy.FIXED_POINT:
            self.apply_semantics(self.compute_all_state_semantics())
        else:
            self._engine.recalculate()

    def compute_all_state_semantics(self, config: Optional[SolverConfig] = None) -> SemanticsMap:
        """
        Solve the machine without touching its cache.

        :param config: Overrides the machine's solver settings.
        """
        return FixedPointSolver(config or self._config).solve(self)

    def apply_semantics(self, semantics: Mapping[SemanticState, Semantics]) -> None:
        """
        Store the given state semantics and recompute exit zones and transitions.

        States missing from the mapping are stored as bottom, which marks them
        unreachable. The pseudostate keeps the assembly's initial semantics
        whatever the mapping holds.
        """
        self._engine.apply(semantics)

    def compute_transition_semantics(self, transition: SemanticTransition) -> Semantics:
        return self._engine.compute_transition_semantics(transition)

    def compute_state_semantics(self, state: SemanticState) -> Semantics:
        return self._engine.compute_state_semantics(state)

    def compute_reactive_semantics(self, base: Semantics) -> FrozenSet[ExitZone]:
        return self._engine.compute_reactive_semantics(base)

    def state_semantics(self, state: SemanticState) -> Semantics:
        return self._cache.state_semantics(state)

    def reactive_semantics(self, state: SemanticState) -> FrozenSet[ExitZone]:
        return self._cache.reactive_semantics(state)

    def transition_semantics(self, transition: SemanticTransition) -> Semantics:
        return self._cache.transition_semantics(transition)

    def unreachable_states(self) -> List[SemanticState]:
        """Non-pseudo states whose cached semantics is empty."""
        return [s for s in self._states if not s.is_pseudo_state and self.state_semantics(s).is_empty()]

    def dead_transitions(self) -> List[SemanticTransition]:
        """Transitions whose cached semantics is empty: they can never fire."""
        return [
            t
            for t in self._transitions
            if isinstance(t, SemanticTransition) and self.transition_semantics(t).is_empty()
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> List[str]:
        """
        Report structural problems that make semantics degenerate. Nothing
        here prevents computation.
        """
        errors = []
        machines = self._assembly.get_component_machines()

        for state in self._states:
            if not state.is_pseudo_state and not self._incoming[state]:
                errors.append(f"State '{state.name}' has no incoming transitions")

        for transition in self._transitions:
            if not isinstance(transition, SemanticTransition):
                continue
            if transition.is_reactive and not isinstance(transition.guard, BasicStateProposition):
                errors.append(f"Reactive transition '{transition.name}' needs a basic state proposition guard")
            for prop in _basic_propositions(transition.guard):
                machine = machines.get(prop.machine_id)
                if machine is None:
                    errors.append(
                        f"Guard of transition '{transition.name}' names unknown machine '{prop.machine_id}'"
                    )
                elif prop.state not in machine.states:
                    errors.append(
                        f"Guard of transition '{transition.name}' names unknown state "
                        f"'{prop.state}' of machine '{prop.machine_id}'"
                    )
            for action in transition.actions:
                if action.machine_id not in machines:
                    errors.append(
                        f"Action of transition '{transition.name}' targets unknown machine '{action.machine_id}'"
                    )
        return errors

    def __repr__(self) -> str:
        return f"SemanticMachine({self._name!r}, states={len(self._states)}, transitions={len(self._transitions)})"


def _basic_propositions(proposition: Proposition) -> List[BasicStateProposition]:
    """Basic state propositions mentioned anywhere in a proposition."""
    pending = [proposition]
    found = []
    while pending:
        current = pending.pop()
        if isinstance(current, BasicStateProposition):
            found.append(current)
        elif isinstance(current, (AndProposition, OrProposition)):
            pending.extend([current.left, current.right])
        elif isinstance(current, NotProposition):
            pending.append(current.operand)
    return found
