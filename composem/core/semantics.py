# composem/core/semantics.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Lattice of semantics values.

A semantics value is a set of configurations of an assembly, where a
configuration assigns one state to every component machine. Values are
immutable; every operation returns a new value. Values are tagged with the
id of the assembly they were computed for, and mixing values of two
assemblies is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple, Union

from composem.core.errors import SemanticsError

if TYPE_CHECKING:
    from composem.core.assembly import Assembly, ComponentTransition

# Sorted (machine_id, state_name) pairs, one per component machine.
Configuration = Tuple[Tuple[str, str], ...]


def make_configuration(assignment: Union[Mapping[str, str], Iterable[Tuple[str, str]]]) -> Configuration:
    """
    Build a configuration from a machine-id to state-name assignment.

    :param assignment: Mapping or iterable of (machine_id, state_name) pairs.
    :return: The canonical, hashable configuration.
    """
    items = assignment.items() if isinstance(assignment, Mapping) else assignment
    return tuple(sorted(items))


def configuration_state(configuration: Configuration, machine_id: str) -> Optional[str]:
    """Return the state a component machine holds in a configuration, or None."""
    for mid, state in configuration:
        if mid == machine_id:
            return state
    return None


def _reassign(configuration: Configuration, machine_id: str, state: str) -> Configuration:
    return tuple((mid, state if mid == machine_id else current) for mid, current in configuration)


@dataclass(frozen=True)
class Semantics:
    """
    An immutable set of configurations of one assembly.

    Equality is value equality over the assembly id and the configuration set.
    """

    assembly_id: str
    configurations: FrozenSet[Configuration] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.configurations, frozenset):
            object.__setattr__(self, "configurations", frozenset(self.configurations))

    @classmethod
    def bottom(cls, assembly_id: str) -> "Semantics":
        """
        The empty semantics, tagged with the assembly id so that joining
        onto it is always well-defined.
        """
        return cls(assembly_id, frozenset())

    @classmethod
    def of(
        cls,
        assembly_id: str,
        configurations: Iterable[Union[Configuration, Mapping[str, str]]],
    ) -> "Semantics":
        """
        Build a semantics value from configurations or plain assignments.

        :param assembly_id: Id of the assembly the configurations belong to.
        :param configurations: Configurations, or machine-id to state mappings.
        """
        return cls(assembly_id, frozenset(make_configuration(c) for c in configurations))

    def _check_compatible(self, other: "Semantics") -> None:
        if other.assembly_id != self.assembly_id:
            raise SemanticsError(
                f"Cannot combine semantics of assembly '{self.assembly_id}' "
                f"with semantics of assembly '{other.assembly_id}'"
            )

    def _check_assembly(self, assembly: "Assembly") -> None:
        if assembly.assembly_id != self.assembly_id:
            raise SemanticsError(
                f"Semantics of assembly '{self.assembly_id}' cannot be transformed "
                f"within assembly '{assembly.assembly_id}'"
            )

    def __and__(self, other: "Semantics") -> "Semantics":
        """Meet: configurations present in both values."""
        if not isinstance(other, Semantics):
            return NotImplemented
        self._check_compatible(other)
        return Semantics(self.assembly_id, self.configurations & other.configurations)

    def __or__(self, other: "Semantics") -> "Semantics":
        """Join: configurations present in either value."""
        if not isinstance(other, Semantics):
            return NotImplemented
        self._check_compatible(other)
        return Semantics(self.assembly_id, self.configurations | other.configurations)

    def __sub__(self, other: "Semantics") -> "Semantics":
        if not isinstance(other, Semantics):
            return NotImplemented
        self._check_compatible(other)
        return Semantics(self.assembly_id, self.configurations - other.configurations)

    def __le__(self, other: "Semantics") -> bool:
        """Lattice order: every configuration of self is in other."""
        if not isinstance(other, Semantics):
            return NotImplemented
        self._check_compatible(other)
        return self.configurations <= other.configurations

    def __len__(self) -> int:
        return len(self.configurations)

    def __iter__(self) -> Iterator[Configuration]:
        return iter(sorted(self.configurations))

    def __contains__(self, configuration: object) -> bool:
        if isinstance(configuration, Mapping):
            configuration = make_configuration(configuration)
        return configuration in self.configurations

    def is_empty(self) -> bool:
        """Return True if no configuration is left."""
        return not self.configurations

    def transform_by_machine_transition(
        self,
        machine_id: str,
        transition: "ComponentTransition",
        assembly: "Assembly",
    ) -> "Semantics":
        """
        Advance this value across an internal transition of a component machine.

        Configurations in which the machine is in the transition's source are
        moved to its target. The others cannot take the transition and are
        dropped.

        :param machine_id: Id of the component machine owning the transition.
        :param transition: The component transition to fire.
        :param assembly: The assembly the value belongs to.
        :return: The image of this value under the transition.
        """
        self._check_assembly(assembly)
        moved = frozenset(
            _reassign(c, machine_id, transition.target)
            for c in self.configurations
            if configuration_state(c, machine_id) == transition.source
        )
        return Semantics(self.assembly_id, moved)

    def transform_by_machine_event(self, machine_id: str, event: str, assembly: "Assembly") -> "Semantics":
        """
        Advance this value by sending an event to a component machine.

        Every transition of the machine triggered by the event from its
        current state yields a successor configuration. A configuration
        whose machine state does not handle the event is kept unchanged.

        :param machine_id: Id of the component machine receiving the event.
        :param event: The event name.
        :param assembly: The assembly the value belongs to.
        :return: The successor configurations.
        """
        self._check_assembly(assembly)
        machine = assembly.get_component_machine(machine_id)
        if machine is None:
            return self

        successors = set()
        for configuration in self.configurations:
            current = configuration_state(configuration, machine_id)
            fired = machine.transitions_for_event(current, event)
            if not fired:
                successors.add(configuration)
                continue
            for tr in fired:
                successors.add(_reassign(configuration, machine_id, tr.target))
        return Semantics(self.assembly_id, frozenset(successors))

    def describe(self) -> str:
        """Human readable rendering, one configuration per line."""
        if self.is_empty():
            return "<empty>"
        return "\n".join(", ".join(f"{mid}={state}" for mid, state in c) for c in self)
