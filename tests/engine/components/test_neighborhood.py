import numpy as np
import pytest

from moeadra.engine.algorithm.components.neighborhood import (
    build_neighborhood,
    compute_neighbors,
    mating_probabilities,
)
from moeadra.engine.algorithm.components.weight_vectors import generate_weights
from moeadra.foundation.exceptions import ConfigurationError


@pytest.fixture
def weights():
    return generate_weights("sld", {"H": 9}, 2)


def test_neighbors_start_with_self(weights):
    B = compute_neighbors(weights, 3)
    assert B.shape == (10, 3)
    np.testing.assert_array_equal(B[:, 0], np.arange(10))
    assert set(B[0].tolist()) == {0, 1, 2}
    assert set(B[5].tolist()) == {4, 5, 6}


def test_duplicate_rows_keep_self_first():
    source = np.array([[0.0, 1.0], [0.0, 1.0], [1.0, 0.0]])
    B = compute_neighbors(source, 2)
    np.testing.assert_array_equal(B, [[0, 1], [1, 0], [2, 0]])


@pytest.mark.parametrize("delta_p", [1.0, 0.9, 0.0])
def test_mating_probabilities(weights, delta_p):
    B = compute_neighbors(weights, 4)
    P = mating_probabilities(B, delta_p)
    assert P.shape == (10, 10)
    np.testing.assert_allclose(P.sum(axis=1), 1.0)
    np.testing.assert_allclose(P[0, B[0]], delta_p / 4)
    outside = np.setdiff1d(np.arange(10), B[0])
    np.testing.assert_allclose(P[0, outside], (1.0 - delta_p) / 6)


def test_lambda_ignores_population(weights):
    rng = np.random.default_rng(0)
    params = {"T": 3, "delta_p": 1.0}
    a = build_neighborhood("lambda", params, weights, rng.random((10, 4)))
    b = build_neighborhood("lambda", params, weights, rng.random((10, 4)))
    np.testing.assert_array_equal(a.B, b.B)
    assert a.T == 3


def test_x_uses_population(weights):
    X = np.linspace(0.0, 1.0, 10)[::-1].reshape(-1, 1)
    hood = build_neighborhood("x", {"T": 2}, weights, X)
    np.testing.assert_array_equal(hood.B[:, 0], np.arange(10))
    # row 9 has the smallest coordinate, its nearest neighbor is row 8
    assert hood.B[9, 1] == 8


def test_size_override_and_limits(weights):
    hood = build_neighborhood("lambda", {"T": 5}, weights, weights, T=1)
    np.testing.assert_array_equal(hood.B, np.arange(10).reshape(-1, 1))
    with pytest.raises(ConfigurationError):
        build_neighborhood("lambda", {"T": 10}, weights, weights)
