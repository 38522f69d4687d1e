# composem/core/propositions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from composem.core.semantics import Semantics

if TYPE_CHECKING:
    from composem.core.assembly import Assembly


class Proposition(ABC):
    """
    A predicate over the configurations of an assembly. Used as the guard of
    a composed transition and lifted to a semantics value for evaluation.
    """

    @abstractmethod
    def to_semantics(self, assembly: "Assembly") -> Semantics:
        """
        Lift the proposition to the set of configurations satisfying it.

        :param assembly: The assembly providing the configuration universe.
        """

    def __and__(self, other: "Proposition") -> "Proposition":
        return AndProposition(self, other)

    def __or__(self, other: "Proposition") -> "Proposition":
        return OrProposition(self, other)

    def __invert__(self) -> "Proposition":
        return NotProposition(self)


@dataclass(frozen=True)
class BasicStateProposition(Proposition):
    """Component machine ``machine_id`` is in state ``state``."""

    machine_id: str
    state: str

    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return assembly.states_where(self.machine_id, self.state)

    def __str__(self) -> str:
        return f"{self.machine_id}.{self.state}"


@dataclass(frozen=True)
class TrueProposition(Proposition):
    """Always true: lifts to the whole universe."""

    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return assembly.universe()

    def __str__(self) -> str:
        return "true"


@dataclass(frozen=True)
class FalseProposition(Proposition):
    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return Semantics.bottom(assembly.assembly_id)

    def __str__(self) -> str:
        return "false"


@dataclass(frozen=True)
class AndProposition(Proposition):
    left: Proposition
    right: Proposition

    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return self.left.to_semantics(assembly) & self.right.to_semantics(assembly)

    def __str__(self) -> str:
        return f"({self.left} & {self.right})"


@dataclass(frozen=True)
class OrProposition(Proposition):
    left: Proposition
    right: Proposition

    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return self.left.to_semantics(assembly) | self.right.to_semantics(assembly)

    def __str__(self) -> str:
        return f"({self.left} | {self.right})"


@dataclass(frozen=True)
class NotProposition(Proposition):
    """Complement of the operand with respect to the assembly universe."""

    operand: Proposition

    def to_semantics(self, assembly: "Assembly") -> Semantics:
        return assembly.universe() - self.operand.to_semantics(assembly)

    def __str__(self) -> str:
        return f"!{self.operand}"
