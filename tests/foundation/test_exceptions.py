"""Tests for the moeadra exception hierarchy."""

from __future__ import annotations

import pytest

from moeadra.foundation.exceptions import (
    BoundsError,
    CollaboratorContractError,
    ConfigurationError,
    DegenerateStateError,
    InvalidStrategyError,
    MissingConfigError,
    MOEADError,
    OptimizationError,
    ProblemDimensionError,
    ProblemError,
)


class TestMOEADError:
    def test_basic_error(self):
        err = MOEADError("Something went wrong")
        assert "Something went wrong" in str(err)
        assert err.message == "Something went wrong"
        assert err.suggestion is None
        assert err.details == {}

    def test_error_with_suggestion(self):
        err = MOEADError("Something went wrong", suggestion="Try this instead")
        assert "Suggestion: Try this instead" in str(err)


class TestConfigurationErrors:
    def test_invalid_strategy_lists_alternatives(self):
        err = InvalidStrategyError("aggregation", "nope", ["wt", "pbi"])
        assert isinstance(err, ConfigurationError)
        assert "nope" in str(err)
        assert "pbi, wt" in str(err)
        assert err.details["available"] == ["pbi", "wt"]

    def test_missing_config_names_component(self):
        err = MissingConfigError("H", "decomposition")
        assert "'H'" in err.message
        assert "decomposition" in err.suggestion


class TestRuntimeErrors:
    def test_contract_error_prefixes_component(self):
        err = CollaboratorContractError("evaluator", "bad shape", shape=(3, 1))
        assert isinstance(err, OptimizationError)
        assert str(err).startswith("evaluator: bad shape")
        assert err.details["shape"] == (3, 1)

    def test_degenerate_state_records_iteration(self):
        err = DegenerateStateError("empty", iteration=7)
        assert err.details["iteration"] == 7


@pytest.mark.parametrize("cls", [BoundsError, ProblemDimensionError])
def test_problem_errors_share_base(cls):
    err = cls("bad")
    assert isinstance(err, ProblemError)
    assert isinstance(err, MOEADError)
