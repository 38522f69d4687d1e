# composem/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from composem.core.base import EntityBase

PSEUDO_STATE_NAME = "PseudoState"


class SemanticState(EntityBase):
    """
    A state of the composed machine.

    This version does NOT store its semantics or its incoming transitions.
    Cached semantics live in the machine's SemanticsCache, and the machine
    indexes incoming transitions.
    """

    def __init__(self, name: str, is_pseudo_state: bool = False) -> None:
        """
        :param name: Name identifying this state within its machine.
        :param is_pseudo_state: True only for the machine's initial pseudostate.
        """
        if not name or not isinstance(name, str):
            raise ValueError("State name must be a non-empty string")
        super().__init__(name=name)
        self._is_pseudo_state = is_pseudo_state

    @property
    def is_pseudo_state(self) -> bool:
        return self._is_pseudo_state

    def __repr__(self) -> str:
        kind = "PseudoState" if self._is_pseudo_state else "State"
        return f"{kind}({self.name!r})"
