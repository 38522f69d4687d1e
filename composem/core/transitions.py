# composem/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Iterable, List, Optional

from composem.core.assembly import Action
from composem.core.base import EntityBase
from composem.core.propositions import Proposition, TrueProposition
from composem.core.states import SemanticState


class SemanticTransition(EntityBase):
    """
    A transition of the composed machine. A triggerable transition fires on
    an external trigger when its guard holds. A non-triggerable (reactive)
    transition fires when an autonomous component transition realises its
    guard, which must then be a BasicStateProposition. The actions are sent
    to component machines, in order, once the transition has fired.
    """

    def __init__(
        self,
        source: SemanticState,
        target: SemanticState,
        guard: Optional[Proposition] = None,
        triggerable: bool = True,
        actions: Optional[Iterable[Action]] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        :param source: The origin state.
        :param target: The destination state.
        :param guard: Guard proposition; defaults to always true.
        :param triggerable: False for reactive transitions.
        :param actions: Actions applied in list order.
        :param name: Optional label; defaults to "source->target".
        """
        super().__init__(name=name or f"{source.name}->{target.name}")
        self._source = source
        self._target = target
        self._guard = guard if guard is not None else TrueProposition()
        self._triggerable = triggerable
        self._actions = list(actions) if actions else []

    @property
    def source(self) -> SemanticState:
        return self._source

    @property
    def target(self) -> SemanticState:
        return self._target

    @property
    def guard(self) -> Proposition:
        return self._guard

    @property
    def triggerable(self) -> bool:
        return self._triggerable

    @property
    def actions(self) -> List[Action]:
        """The actions in firing order."""
        return list(self._actions)

    @property
    def is_reactive(self) -> bool:
        """True if the transition is driven by exit zones of its source."""
        return not self._triggerable and not self._source.is_pseudo_state

    def __repr__(self) -> str:
        kind = "triggerable" if self._triggerable else "reactive"
        return f"SemanticTransition({self.name!r}, {kind}, guard={self._guard})"
