# tests/unit/runtime/test_config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from composem.runtime.config import DEFAULT_MAX_ITERATIONS, ReactiveBasis, SolverConfig


def test_defaults():
    config = SolverConfig()
    assert config.max_iterations == DEFAULT_MAX_ITERATIONS == 1000
    assert config.reactive_basis is ReactiveBasis.STATE_SEMANTICS


@pytest.mark.parametrize("bad", [0, -3, 2.5, "10"])
def test_max_iterations_must_be_positive_integer(bad):
    with pytest.raises(ValueError):
        SolverConfig(max_iterations=bad)


def test_reactive_basis_must_be_enum():
    with pytest.raises(ValueError):
        SolverConfig(reactive_basis="state")


def test_config_is_frozen():
    config = SolverConfig()
    with pytest.raises(AttributeError):
        config.max_iterations = 5
