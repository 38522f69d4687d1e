# tests/unit/runtime/test_cache.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from composem.core.assembly import ComponentTransition
from composem.core.exit_zones import ExitZone
from composem.core.propositions import BasicStateProposition
from composem.core.semantics import Semantics
from composem.core.states import SemanticState
from composem.core.transitions import SemanticTransition
from composem.runtime.cache import SemanticsCache


def test_missing_entries_read_as_bottom():
    cache = SemanticsCache("TestAssembly")
    state = SemanticState("S")
    transition = SemanticTransition(state, state)
    assert cache.state_semantics(state) == Semantics.bottom("TestAssembly")
    assert cache.reactive_semantics(state) == frozenset()
    assert cache.transition_semantics(transition) == Semantics.bottom("TestAssembly")
    assert not cache.has_state(state)


def test_store_and_forget(sem):
    cache = SemanticsCache("TestAssembly")
    state = SemanticState("S")
    transition = SemanticTransition(state, state)
    zone = ExitZone(
        "A",
        ComponentTransition("a0", "a1", autonomous=True),
        BasicStateProposition("A", "a0"),
        BasicStateProposition("A", "a1"),
    )

    cache.set_state_semantics(state, sem(("a0", "b0")))
    cache.set_reactive_semantics(state, [zone])
    cache.set_transition_semantics(transition, sem(("a1", "b1")))

    assert cache.state_semantics(state) == sem(("a0", "b0"))
    assert cache.reactive_semantics(state) == frozenset([zone])
    assert cache.transition_semantics(transition) == sem(("a1", "b1"))
    assert cache.snapshot() == {state: sem(("a0", "b0"))}

    cache.forget(state)
    cache.forget(transition)
    assert not cache.has_state(state)
    assert cache.transition_semantics(transition).is_empty()


def test_reactive_semantics_before_state_semantics_keeps_bottom():
    cache = SemanticsCache("TestAssembly")
    state = SemanticState("S")
    cache.set_reactive_semantics(state, [])
    assert cache.has_state(state)
    assert cache.state_semantics(state).is_empty()


def test_entities_with_equal_names_are_cached_separately(sem):
    cache = SemanticsCache("TestAssembly")
    first, second = SemanticState("Same"), SemanticState("Same")
    cache.set_state_semantics(first, sem(("a0", "b0")))
    assert cache.state_semantics(second).is_empty()


def test_snapshot_restricted_to_states(sem):
    cache = SemanticsCache("TestAssembly")
    known, unknown = SemanticState("Known"), SemanticState("Unknown")
    cache.set_state_semantics(known, sem(("a1", "b0")))
    assert cache.snapshot([known, unknown]) == {
        known: sem(("a1", "b0")),
        unknown: Semantics.bottom("TestAssembly"),
    }
    cache.clear()
    assert cache.snapshot() == {}
