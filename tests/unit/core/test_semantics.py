# tests/unit/core/test_semantics.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest
from hypothesis import given
from hypothesis import strategies as st

from composem.core.assembly import Assembly, ComponentMachine, ComponentTransition
from composem.core.errors import SemanticsError
from composem.core.semantics import Semantics, configuration_state, make_configuration

ALL_PAIRS = [("a0", "b0"), ("a0", "b1"), ("a1", "b0"), ("a1", "b1")]


def _semantics(pairs):
    return Semantics.of("TestAssembly", [{"A": a, "B": b} for a, b in pairs])


pair_sets = st.sets(st.sampled_from(ALL_PAIRS))


def test_make_configuration_is_sorted_by_machine_id():
    assert make_configuration({"B": "b0", "A": "a1"}) == (("A", "a1"), ("B", "b0"))
    assert make_configuration([("B", "b0"), ("A", "a1")]) == (("A", "a1"), ("B", "b0"))


def test_configuration_state():
    config = make_configuration({"A": "a1", "B": "b0"})
    assert configuration_state(config, "A") == "a1"
    assert configuration_state(config, "C") is None


def test_bottom_is_empty_and_tagged():
    bottom = Semantics.bottom("TestAssembly")
    assert bottom.is_empty()
    assert bottom.assembly_id == "TestAssembly"
    assert len(bottom) == 0
    assert bottom != Semantics.bottom("Other")


def test_meet_and_join(sem):
    left = sem(("a0", "b0"), ("a0", "b1"))
    right = sem(("a0", "b1"), ("a1", "b1"))
    assert left & right == sem(("a0", "b1"))
    assert left | right == sem(("a0", "b0"), ("a0", "b1"), ("a1", "b1"))
    assert left - right == sem(("a0", "b0"))


def test_join_onto_bottom_is_safe(sem):
    value = sem(("a1", "b1"))
    assert Semantics.bottom("TestAssembly") | value == value


def test_mixing_assemblies_raises(sem):
    with pytest.raises(SemanticsError):
        sem(("a0", "b0")) | Semantics.bottom("Other")


def test_combining_with_non_semantics_raises(sem):
    with pytest.raises(TypeError):
        sem(("a0", "b0")) & "not semantics"
    with pytest.raises(TypeError):
        sem(("a0", "b0")) | None
    with pytest.raises(TypeError):
        sem(("a0", "b0")) <= "not semantics"


def test_operators_defer_to_the_other_operand(sem):
    class Everything:
        def __rand__(self, other):
            return other

        def __ror__(self, other):
            return self

    value = sem(("a0", "b0"))
    everything = Everything()
    assert (value & everything) is value
    assert (value | everything) is everything


def test_contains_accepts_mappings(sem):
    value = sem(("a0", "b1"))
    assert {"A": "a0", "B": "b1"} in value
    assert {"B": "b1", "A": "a0"} in value
    assert {"A": "a1", "B": "b1"} not in value


def test_iteration_is_sorted(sem):
    value = sem(("a1", "b1"), ("a0", "b0"))
    assert list(value) == [(("A", "a0"), ("B", "b0")), (("A", "a1"), ("B", "b1"))]


def test_transform_by_machine_transition_moves_and_drops(assembly, sem):
    value = sem(("a0", "b0"), ("a0", "b1"), ("a1", "b1"))
    step = ComponentTransition("a0", "a1", autonomous=True)
    assert value.transform_by_machine_transition("A", step, assembly) == sem(("a1", "b0"), ("a1", "b1"))


def test_transform_by_machine_transition_rejects_other_assembly(sem):
    other = Assembly("Other", [ComponentMachine("A", ["a0", "a1"])])
    step = ComponentTransition("a0", "a1", autonomous=True)
    with pytest.raises(SemanticsError):
        sem(("a0", "b0")).transform_by_machine_transition("A", step, other)


def test_transform_by_machine_event_fires_handled_events(assembly, sem):
    value = sem(("a0", "b0"), ("a1", "b1"))
    assert value.transform_by_machine_event("B", "toggle", assembly) == sem(("a0", "b1"), ("a1", "b0"))


def test_transform_by_machine_event_keeps_unhandled_configurations(assembly, sem):
    value = sem(("a0", "b0"), ("a1", "b0"))
    # Only a1 handles 'reset'.
    assert value.transform_by_machine_event("A", "reset", assembly) == sem(("a0", "b0"))


def test_transform_by_unknown_machine_is_identity(assembly, sem):
    value = sem(("a0", "b0"))
    assert value.transform_by_machine_event("Z", "toggle", assembly) == value


def test_transform_by_event_with_nondeterministic_branches():
    machine = ComponentMachine(
        "C",
        ["c0", "c1", "c2"],
        initial_state="c0",
        transitions=[
            ComponentTransition("c0", "c1", event="go"),
            ComponentTransition("c0", "c2", event="go"),
        ],
    )
    assembly = Assembly("Branching", [machine])
    start = assembly.calculate_initial_state_semantics()
    result = start.transform_by_machine_event("C", "go", assembly)
    assert result == Semantics.of("Branching", [{"C": "c1"}, {"C": "c2"}])


def test_describe(sem):
    assert Semantics.bottom("TestAssembly").describe() == "<empty>"
    assert sem(("a0", "b1")).describe() == "A=a0, B=b1"


@pytest.mark.property
@given(pair_sets, pair_sets)
def test_join_is_least_upper_bound(left_pairs, right_pairs):
    left, right = _semantics(left_pairs), _semantics(right_pairs)
    joined = left | right
    assert left <= joined and right <= joined
    assert joined == right | left
    assert joined | joined == joined


@pytest.mark.property
@given(pair_sets, pair_sets)
def test_meet_is_greatest_lower_bound(left_pairs, right_pairs):
    left, right = _semantics(left_pairs), _semantics(right_pairs)
    met = left & right
    assert met <= left and met <= right
    assert met.is_empty() == (not (set(left_pairs) & set(right_pairs)))
