# composem/core/base.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass


@dataclass(eq=False)
class EntityBase:
    """Base class for the mutable entities of a composed machine"""

    name: str

    def __hash__(self) -> int:
        """Make entities hashable based on their name and memory address."""
        return hash((self.name, id(self)))

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they are the same object."""
        if not isinstance(other, EntityBase):
            return NotImplemented
        return id(self) == id(other)
