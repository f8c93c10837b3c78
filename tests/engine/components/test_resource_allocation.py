import numpy as np
import pytest

from moeadra.engine.algorithm.components.resource_allocation import (
    LagWindow,
    PriorityInputs,
    boundary_indices,
    init_priority_state,
    needs_update,
    select_active,
    update_priorities,
    validate_allocation_params,
)
from moeadra.engine.algorithm.components.weight_vectors import generate_weights
from moeadra.foundation.exceptions import ConfigurationError, InvalidStrategyError

W = generate_weights("sld", {"H": 9}, 2)


def _inputs(bigZ, delayed_bigZ, X=None, delayed_X=None, T=1, iteration=2):
    N = bigZ.shape[1]
    X = np.zeros((N, 2)) if X is None else X
    delayed_X = X if delayed_X is None else delayed_X
    Y = np.zeros((N, 2))
    return PriorityInputs(
        iteration=iteration,
        bigZ=bigZ,
        delayed_bigZ=delayed_bigZ,
        neighborhood_size=T,
        Y=Y,
        delayed_Y=Y,
        W=np.full((N, 2), 0.5),
        X=X,
        delayed_X=delayed_X,
        rng=np.random.default_rng(0),
    )


class TestLagWindow:
    def test_exchange_returns_snapshot_from_dt_iterations_ago(self):
        window = LagWindow(2)
        a, b, c = np.zeros((2, 3)), np.ones((2, 3)), np.full((2, 3), 2.0)

        assert window.exchange(a) is a
        assert window.filled == 1
        assert window.exchange(b) is b
        np.testing.assert_array_equal(window.exchange(c), a)
        np.testing.assert_array_equal(window.peek(), b)
        assert window.filled == 2

    def test_stored_snapshot_is_a_copy(self):
        window = LagWindow(1)
        a = np.zeros((1, 2))
        window.exchange(a)
        a[0, 0] = 5.0
        np.testing.assert_array_equal(window.peek(), np.zeros((1, 2)))

    def test_depth_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            LagWindow(0)


def test_boundary_indices_are_extreme_subproblems():
    np.testing.assert_array_equal(boundary_indices(W), [0, 9])


def test_init_priority_state_uses_dt():
    state = init_priority_state(W, {"dt": 5})
    np.testing.assert_array_equal(state.priorities, np.ones(10))
    assert state.window.depth == 5
    assert init_priority_state(W, {}).window.depth == 2


class TestSelection:
    def test_none_activates_everyone(self):
        alloc = select_active("none", {}, np.zeros(10), boundary_indices(W), np.random.default_rng(0))
        np.testing.assert_array_equal(alloc.active, np.arange(10))
        assert alloc.usage.all()

    def test_priority_zero_keeps_only_boundary(self):
        alloc = select_active("dra", {"selection": "priority"}, np.zeros(10), np.array([0, 9]), np.random.default_rng(0))
        np.testing.assert_array_equal(alloc.active, [0, 9])

    def test_priority_one_selects_all(self):
        alloc = select_active("norm", {}, np.ones(10), np.array([0, 9]), np.random.default_rng(0))
        assert alloc.usage.all()

    def test_top_picks_highest(self):
        priorities = np.array([0.0, 0.9, 0.1, 0.8, 0.2, 0.0, 0.0, 0.0, 0.0, 0.0])
        alloc = select_active("ri", {"selection": "top", "n": 4}, priorities, np.array([0, 9]), np.random.default_rng(0))
        np.testing.assert_array_equal(alloc.active, [0, 1, 3, 9])

    def test_tournament_count_and_boundary(self):
        rng = np.random.default_rng(1)
        priorities = rng.random(10)
        alloc = select_active("dra", {"selection": "tournament", "n": 5, "tour": 3}, priorities, np.array([0, 9]), rng)
        assert alloc.active.size == 5
        assert {0, 9} <= set(alloc.active.tolist())
        assert np.all(np.diff(alloc.active) > 0)

    def test_default_n_is_a_fifth(self):
        alloc = select_active("dra", {"selection": "top"}, np.ones(10), np.array([0]), np.random.default_rng(0))
        assert alloc.active.size == 2


def test_needs_update_schedule():
    assert not needs_update("none", 1)
    assert not needs_update("none", 5)
    assert needs_update("random", 1)
    assert not needs_update("dra", 1)
    assert needs_update("dra", 2)
    assert needs_update("NORM", 3)


class TestUpdateRules:
    def test_dra_utility(self):
        delayed = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
        current = np.array([[0.0, 0.0, 0.0], [0.5, 0.9995, 1.0]])
        new = update_priorities("dra", np.array([1.0, 0.5, 1.0]), _inputs(current, delayed))
        np.testing.assert_allclose(new, [1.0, 0.4875, 0.95])

    def test_norm_scales_by_largest_move(self):
        X = np.array([[0.0, 0.0], [3.0, 0.0], [0.0, 4.0]])
        zeros = np.zeros((2, 3))
        new = update_priorities("norm", np.ones(3), _inputs(zeros, zeros, X=X, delayed_X=np.zeros((3, 2))))
        np.testing.assert_allclose(new, [0.0, 0.75, 1.0])

    def test_norm_without_movement_keeps_priorities(self):
        zeros = np.zeros((2, 3))
        previous = np.array([0.2, 0.4, 0.6])
        np.testing.assert_array_equal(update_priorities("norm", previous, _inputs(zeros, zeros)), previous)

    def test_relative_improvement(self):
        delayed = np.array([[0.0, 0.0, 0.0], [2.0, 4.0, 1.0]])
        current = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 2.0]])
        new = update_priorities("ri", np.ones(3), _inputs(current, delayed))
        np.testing.assert_allclose(new, [0.5 / 0.75, 1.0, 0.0])

    def test_random_draws_from_rng(self):
        zeros = np.zeros((2, 4))
        new = update_priorities("random", np.ones(4), _inputs(zeros, zeros))
        assert new.shape == (4,)
        assert np.all((new >= 0.0) & (new < 1.0))

    def test_none_is_identity(self):
        zeros = np.zeros((2, 3))
        previous = np.array([0.1, 0.2, 0.3])
        np.testing.assert_array_equal(update_priorities("none", previous, _inputs(zeros, zeros)), previous)


@pytest.mark.parametrize(
    "name, params, error",
    [
        ("dra", {"selection": "roulette"}, InvalidStrategyError),
        ("dra", {"dt": 0}, ConfigurationError),
        ("dra", {"n": 0}, ConfigurationError),
        ("dra", {"tour": 0}, ConfigurationError),
        ("norm", {"alpha": 1}, ConfigurationError),
        ("gra", {}, InvalidStrategyError),
    ],
)
def test_validate_allocation_params(name, params, error):
    with pytest.raises(error):
        validate_allocation_params(name, params)
