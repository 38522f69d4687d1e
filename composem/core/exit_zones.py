# composem/core/exit_zones.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Exit zones: witnesses that an autonomous transition of a component machine
is guaranteed to move the composed system out of a semantics region.

Given a base region ``B`` and an autonomous transition ``s -> s'`` of machine
``M``, an exit zone is emitted when some configuration of ``B`` has ``M`` in
``s`` while none has ``M`` in ``s'``. Reactive transitions of the composed
machine are guarded by the target proposition of such a zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Iterable

from composem.core.assembly import ComponentTransition
from composem.core.propositions import BasicStateProposition
from composem.core.semantics import Semantics

if TYPE_CHECKING:
    from composem.core.assembly import Assembly


@dataclass(frozen=True)
class ExitZone:
    """
    Immutable exit-zone record. Equality and hashing cover all four fields so
    zones of distinct machines never collide in a set.
    """

    machine_id: str
    transition: ComponentTransition
    source: BasicStateProposition
    target: BasicStateProposition

    def __str__(self) -> str:
        return f"{self.machine_id}: {self.source} -> {self.target}"


def compute_reactive_semantics(base: Semantics, assembly: "Assembly") -> FrozenSet[ExitZone]:
    """
    Derive the exit zones of every autonomous transition, across every
    component machine of the assembly, that is guaranteed to leave ``base``.

    :param base: The semantics region, usually a state's own semantics.
    :param assembly: The assembly holding the component machines.
    :return: The set of exit zones.
    """
    zones = set()
    for machine_id, machine in assembly.get_component_machines().items():
        for transition in machine.autonomous_transitions():
            source = BasicStateProposition(machine_id, transition.source)
            if (source.to_semantics(assembly) & base).is_empty():
                continue
            target = BasicStateProposition(machine_id, transition.target)
            if (target.to_semantics(assembly) & base).is_empty():
                zones.add(ExitZone(machine_id, transition, source, target))
    return frozenset(zones)


def exit_zone_sources(zones: Iterable[ExitZone], assembly: "Assembly") -> Semantics:
    """Join of the lifted source propositions of the given exit zones."""
    result = Semantics.bottom(assembly.assembly_id)
    for zone in zones:
        result = result | zone.source.to_semantics(assembly)
    return result
