import numpy as np
import pytest

from moeadra.engine.algorithm.components.weight_vectors import count_lattice_points, generate_weights
from moeadra.foundation.exceptions import (
    ConfigurationError,
    InvalidStrategyError,
    MissingConfigError,
    ProblemDimensionError,
)


@pytest.mark.parametrize("n_obj, H", [(2, 4), (2, 99), (3, 12), (4, 3)])
def test_sld_counts_and_simplex(n_obj, H):
    W = generate_weights("sld", {"H": H}, n_obj)
    assert W.shape == (count_lattice_points(n_obj, H), n_obj)
    np.testing.assert_allclose(W.sum(axis=1), 1.0)
    assert np.all(W >= 0.0)
    # every entry is a multiple of 1/H
    np.testing.assert_allclose(W * H, np.round(W * H), atol=1e-9)


def test_sld_two_objectives_layout():
    W = generate_weights("sld", {"H": 4}, 2)
    np.testing.assert_allclose(W[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])


def test_sld_requires_H():
    with pytest.raises(MissingConfigError):
        generate_weights("sld", {}, 2)


def test_msld_stacks_shrunken_layers():
    W = generate_weights("msld", {"H": [2, 1], "tau": [1.0, 0.5]}, 3)
    assert W.shape == (6 + 3, 3)
    inner = W[6:]
    np.testing.assert_allclose(inner.max(axis=1), 0.5 + 0.5 / 3)
    np.testing.assert_allclose(W.sum(axis=1), 1.0)


def test_msld_needs_matching_tau():
    with pytest.raises(ConfigurationError):
        generate_weights("msld", {"H": [2, 1], "tau": [1.0]}, 3)


def test_loaded_inline_and_from_file(tmp_path):
    W = np.array([[1.0, 0.0], [0.5, 0.5], [0.0, 1.0]])
    np.testing.assert_array_equal(generate_weights("loaded", {"W": W}, 2), W)

    path = tmp_path / "weights.csv"
    np.savetxt(path, W, delimiter=",")
    np.testing.assert_allclose(generate_weights("loaded", {"path": str(path)}, 2), W)


def test_loaded_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        generate_weights("loaded", {"path": str(tmp_path / "absent.csv")}, 2)


def test_loaded_weights_are_checked():
    with pytest.raises(ProblemDimensionError):
        generate_weights("loaded", {"W": [[0.5, 0.25, 0.25]]}, 2)
    with pytest.raises(ConfigurationError):
        generate_weights("loaded", {"W": [[0.5, 0.6]]}, 2)


def test_unknown_decomposition():
    with pytest.raises(InvalidStrategyError):
        generate_weights("uniform_design", {}, 2)
