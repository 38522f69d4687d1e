# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from composem.core.assembly import Assembly, ComponentMachine, ComponentTransition
from composem.core.machine import SemanticMachine
from composem.core.semantics import Semantics


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def machine_a():
    """Component A in {a0, a1}: a0 -> a1 autonomously, a1 -> a0 on 'reset'."""
    return ComponentMachine(
        "A",
        ["a0", "a1"],
        initial_state="a0",
        transitions=[
            ComponentTransition("a0", "a1", autonomous=True),
            ComponentTransition("a1", "a0", event="reset"),
        ],
    )


@pytest.fixture
def machine_b():
    """Component B in {b0, b1}: 'toggle' flips between the two states."""
    return ComponentMachine(
        "B",
        ["b0", "b1"],
        initial_state="b0",
        transitions=[
            ComponentTransition("b0", "b1", event="toggle"),
            ComponentTransition("b1", "b0", event="toggle"),
        ],
    )


@pytest.fixture
def assembly(machine_a, machine_b):
    """Two component machines; initial configuration A=a0, B=b0."""
    return Assembly("TestAssembly", [machine_a, machine_b])


@pytest.fixture
def sem(assembly):
    """Shorthand building semantics of the test assembly from (a, b) pairs."""

    def _sem(*pairs):
        return Semantics.of(assembly.assembly_id, [{"A": a, "B": b} for a, b in pairs])

    return _sem


@pytest.fixture
def machine(assembly):
    """An empty composed machine over the test assembly."""
    return SemanticMachine("TestMachine", assembly)
