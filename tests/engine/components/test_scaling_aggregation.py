import numpy as np
import pytest

from moeadra.engine.algorithm.components.aggregation import (
    build_aggregator,
    pbi,
    scalarize,
    tchebycheff,
    weighted_sum,
)
from moeadra.engine.algorithm.components.scaling import estimate_bounds, scale_objectives
from moeadra.foundation.constraints import build_constraint_info
from moeadra.foundation.exceptions import ConfigurationError, InvalidStrategyError


Y = np.array([[1.0, 5.0], [3.0, 2.0]])
Y_PREV = np.array([[0.0, 9.0], [4.0, 4.0]])


def test_estimate_bounds_over_both_populations():
    ideal, nadir = estimate_bounds(Y, Y_PREV)
    np.testing.assert_array_equal(ideal, [0.0, 2.0])
    np.testing.assert_array_equal(nadir, [4.0, 9.0])


def test_estimate_bounds_skips_infeasible_rows():
    V = build_constraint_info(np.array([[-1.0], [-1.0]]))
    V_prev = build_constraint_info(np.array([[1.0], [-1.0]]))
    ideal, nadir = estimate_bounds(Y, Y_PREV, V, V_prev)
    np.testing.assert_array_equal(ideal, [1.0, 2.0])
    np.testing.assert_array_equal(nadir, [4.0, 5.0])


def test_estimate_bounds_all_infeasible_uses_everything():
    V = build_constraint_info(np.ones((2, 1)))
    ideal, nadir = estimate_bounds(Y, Y_PREV, V, V)
    np.testing.assert_array_equal(ideal, [0.0, 2.0])
    np.testing.assert_array_equal(nadir, [4.0, 9.0])


def test_scaling_none_returns_copies():
    scaled = scale_objectives("none", Y, Y_PREV)
    np.testing.assert_array_equal(scaled.Y, Y)
    assert scaled.Y is not Y
    np.testing.assert_array_equal(scaled.ideal, [0.0, 2.0])


def test_scaling_simple_maps_to_unit_box():
    scaled = scale_objectives("simple", Y, Y_PREV)
    both = np.vstack([scaled.Y, scaled.Y_prev])
    np.testing.assert_allclose(both.min(axis=0), 0.0)
    np.testing.assert_allclose(both.max(axis=0), 1.0)
    np.testing.assert_array_equal(scaled.ideal, [0.0, 0.0])


def test_scaling_unknown_name():
    with pytest.raises(InvalidStrategyError):
        scale_objectives("zscore", Y, Y_PREV)


def test_aggregation_values():
    f = np.array([[2.0, 1.0]])
    z = np.zeros(2)
    assert tchebycheff(f, np.array([[0.5, 0.5]]), z, z)[0] == pytest.approx(1.0)
    assert weighted_sum(f, np.array([[0.5, 0.5]]), z, z)[0] == pytest.approx(1.5)
    assert pbi(f, np.array([[1.0, 0.0]]), z, z)[0] == pytest.approx(2.0 + 5.0 * 1.0)
    assert pbi(f, np.array([[1.0, 0.0]]), z, z, theta=1.0)[0] == pytest.approx(3.0)


def test_build_aggregator_binds_params():
    agg = build_aggregator("pbi", {"theta": 1.0})
    z = np.zeros(2)
    assert agg(np.array([[2.0, 1.0]]), np.array([[1.0, 0.0]]), z, z)[0] == pytest.approx(3.0)
    with pytest.raises(ConfigurationError):
        build_aggregator("wt", {"theta": 1.0})


@pytest.mark.parametrize("name", ["wt", "awt", "ws", "mwt", "pbi", "ipbi"])
def test_scalarize_layout(name):
    rng = np.random.default_rng(0)
    N, T = 6, 3
    W = rng.dirichlet(np.ones(2), size=N)
    B = np.array([[i, (i + 1) % N, (i + 2) % N] for i in range(N)])
    Ycur = rng.random((N, 2))
    Yprev = rng.random((N, 2))
    ideal = np.minimum(Ycur.min(axis=0), Yprev.min(axis=0))
    nadir = np.maximum(Ycur.max(axis=0), Yprev.max(axis=0))
    agg = build_aggregator(name, {})

    bigZ = scalarize(agg, Ycur, Yprev, W, B, ideal, nadir)

    assert bigZ.shape == (T + 1, N)
    for i in range(N):
        np.testing.assert_allclose(bigZ[T, i], agg(Yprev[i : i + 1], W[i : i + 1], ideal, nadir)[0])
        for j in range(T):
            np.testing.assert_allclose(bigZ[j, i], agg(Ycur[B[i, j]][None, :], W[i : i + 1], ideal, nadir)[0])
