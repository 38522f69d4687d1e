# composem/core/assembly.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from composem.core.errors import AssemblyError
from composem.core.semantics import Semantics, make_configuration

DEFAULT_ASSEMBLY_ID = "Assembly"


@dataclass(frozen=True)
class ComponentTransition:
    """
    A transition inside a component machine. Autonomous transitions fire
    spontaneously and carry no event; the others are fired by an event.
    """

    source: str
    target: str
    event: Optional[str] = None
    autonomous: bool = False

    def __post_init__(self) -> None:
        if self.autonomous and self.event is not None:
            raise AssemblyError(f"Autonomous transition {self.source}->{self.target} cannot have an event")
        if not self.autonomous and not self.event:
            raise AssemblyError(f"Transition {self.source}->{self.target} needs an event or must be autonomous")

    def __str__(self) -> str:
        label = "auto" if self.autonomous else self.event
        return f"{self.source} -[{label}]-> {self.target}"


@dataclass(frozen=True)
class Action:
    """Sends an event to a component machine when a composed transition fires."""

    machine_id: str
    event: str


class ComponentMachine:
    """
    A flat component state machine of an assembly: a set of named states,
    an initial state and its transitions.
    """

    def __init__(
        self,
        machine_id: str,
        states: Iterable[str],
        initial_state: Optional[str] = None,
        transitions: Optional[Iterable[ComponentTransition]] = None,
    ) -> None:
        """
        :param machine_id: Id of the machine, unique within its assembly.
        :param states: Names of the machine's states.
        :param initial_state: Initial state name. None leaves the machine's
            initial state unconstrained: it may start in any of its states.
        :param transitions: Transitions between the machine's states.
        :raises AssemblyError: If the machine is malformed.
        """
        if not machine_id or not isinstance(machine_id, str):
            raise AssemblyError("Component machine id must be a non-empty string")

        self._machine_id = machine_id
        self._states: Tuple[str, ...] = tuple(states)
        if not self._states:
            raise AssemblyError(f"Component machine '{machine_id}' has no states")
        if len(set(self._states)) != len(self._states):
            raise AssemblyError(f"Component machine '{machine_id}' has duplicate state names")

        self._initial_state = initial_state
        if initial_state is not None and initial_state not in self._states:
            raise AssemblyError(f"Initial state '{self._initial_state}' is not a state of '{machine_id}'")

        self._transitions: List[ComponentTransition] = []
        for transition in transitions or []:
            self.add_transition(transition)

    @property
    def machine_id(self) -> str:
        return self._machine_id

    @property
    def states(self) -> Tuple[str, ...]:
        return self._states

    @property
    def initial_state(self) -> Optional[str]:
        return self._initial_state

    def initial_states(self) -> Tuple[str, ...]:
        """States the machine may start in."""
        if self._initial_state is None:
            return self._states
        return (self._initial_state,)

    @property
    def transitions(self) -> List[ComponentTransition]:
        return list(self._transitions)

    def add_transition(self, transition: ComponentTransition) -> None:
        """
        Add a transition between two states of this machine.

        :raises AssemblyError: If an endpoint is not a state of this machine.
        """
        for endpoint in (transition.source, transition.target):
            if endpoint not in self._states:
                raise AssemblyError(f"State '{endpoint}' is not a state of '{self._machine_id}'")
        self._transitions.append(transition)

    def autonomous_transitions(self) -> List[ComponentTransition]:
        return [t for t in self._transitions if t.autonomous]

    def transitions_for_event(self, state: Optional[str], event: str) -> List[ComponentTransition]:
        """Return the transitions fired by an event from the given state."""
        return [t for t in self._transitions if not t.autonomous and t.source == state and t.event == event]

    def __repr__(self) -> str:
        return f"ComponentMachine({self._machine_id!r}, states={list(self._states)!r})"


class Assembly:
    """
    Registry of the component machines whose joint configurations are the
    universe of every semantics value computed for a composed machine.
    """

    def __init__(self, assembly_id: str = DEFAULT_ASSEMBLY_ID, machines: Optional[Iterable[ComponentMachine]] = None):
        if not assembly_id or not isinstance(assembly_id, str):
            raise AssemblyError("Assembly id must be a non-empty string")
        self._assembly_id = assembly_id
        self._machines: Dict[str, ComponentMachine] = {}
        self._universe: Optional[Semantics] = None
        self._basic_cache: Dict[Tuple[str, str], Semantics] = {}
        for machine in machines or []:
            self.add_component_machine(machine)

    @property
    def assembly_id(self) -> str:
        return self._assembly_id

    def get_assembly_id(self) -> str:
        return self._assembly_id

    def add_component_machine(self, machine: ComponentMachine) -> None:
        """
        Register a component machine.

        :raises AssemblyError: If a machine with the same id is registered.
        """
        if machine.machine_id in self._machines:
            raise AssemblyError(f"Component machine '{machine.machine_id}' is already registered")
        self._machines[machine.machine_id] = machine
        # The universe depends on the set of machines only.
        self._universe = None
        self._basic_cache.clear()

    def get_component_machines(self) -> Dict[str, ComponentMachine]:
        return dict(self._machines)

    def get_component_machine(self, machine_id: str) -> Optional[ComponentMachine]:
        return self._machines.get(machine_id)

    def _product(self, choices: Dict[str, Tuple[str, ...]]) -> Semantics:
        ids = list(choices)
        combinations = itertools.product(*(choices[mid] for mid in ids))
        return Semantics(
            self._assembly_id,
            frozenset(make_configuration(zip(ids, combination)) for combination in combinations),
        )

    def universe(self) -> Semantics:
        """All joint configurations of the registered component machines."""
        if self._universe is None:
            self._universe = self._product({mid: m.states for mid, m in self._machines.items()})
        return self._universe

    def states_where(self, machine_id: str, state: str) -> Semantics:
        """Configurations of the universe in which a machine holds a state."""
        key = (machine_id, state)
        cached = self._basic_cache.get(key)
        if cached is None:
            pair = (machine_id, state)
            cached = Semantics(
                self._assembly_id,
                frozenset(c for c in self.universe().configurations if pair in c),
            )
            self._basic_cache[key] = cached
        return cached

    def calculate_initial_state_semantics(self) -> Semantics:
        """
        Configurations in which every machine is in one of its initial states.
        A single configuration when every machine declares its initial state.
        """
        return self._product({mid: m.initial_states() for mid, m in self._machines.items()})

    def __repr__(self) -> str:
        return f"Assembly({self._assembly_id!r}, machines={list(self._machines)!r})"
