# composem/runtime/cache.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

from composem.core.exit_zones import ExitZone
from composem.core.semantics import Semantics
from composem.core.states import SemanticState
from composem.core.transitions import SemanticTransition


@dataclass
class _StateRecord:
    """Internal record of the cached semantics of one state."""

    state_semantics: Semantics
    reactive_semantics: FrozenSet[ExitZone] = field(default_factory=frozenset)


class SemanticsCache:
    """
    Mutable store of the semantics cached for the states and transitions of
    one machine, keyed by entity identity. Entities without an entry read as
    bottom (and an empty exit-zone set).
    """

    def __init__(self, assembly_id: str) -> None:
        self._assembly_id = assembly_id
        self._states: Dict[SemanticState, _StateRecord] = {}
        self._transitions: Dict[SemanticTransition, Semantics] = {}

    @property
    def assembly_id(self) -> str:
        return self._assembly_id

    def _bottom(self) -> Semantics:
        return Semantics.bottom(self._assembly_id)

    def state_semantics(self, state: SemanticState) -> Semantics:
        record = self._states.get(state)
        return record.state_semantics if record else self._bottom()

    def reactive_semantics(self, state: SemanticState) -> FrozenSet[ExitZone]:
        record = self._states.get(state)
        return record.reactive_semantics if record else frozenset()

    def transition_semantics(self, transition: SemanticTransition) -> Semantics:
        return self._transitions.get(transition, self._bottom())

    def set_state_semantics(self, state: SemanticState, semantics: Semantics) -> None:
        record = self._states.get(state)
        if record is None:
            self._states[state] = _StateRecord(state_semantics=semantics)
        else:
            record.state_semantics = semantics

    def set_reactive_semantics(self, state: SemanticState, zones: Iterable[ExitZone]) -> None:
        record = self._states.setdefault(state, _StateRecord(state_semantics=self._bottom()))
        record.reactive_semantics = frozenset(zones)

    def set_transition_semantics(self, transition: SemanticTransition, semantics: Semantics) -> None:
        self._transitions[transition] = semantics

    def has_state(self, state: SemanticState) -> bool:
        return state in self._states

    def forget(self, entity: object) -> None:
        """Drop any entry held for a state or transition."""
        self._states.pop(entity, None)
        self._transitions.pop(entity, None)

    def clear(self) -> None:
        self._states.clear()
        self._transitions.clear()

    def snapshot(self, states: Optional[Iterable[SemanticState]] = None) -> Dict[SemanticState, Semantics]:
        """
        Copy of the cached state semantics.

        :param states: Restrict the snapshot to these states; unknown ones read as bottom.
        """
        if states is None:
            return {s: r.state_semantics for s, r in self._states.items()}
        return {s: self.state_semantics(s) for s in states}
