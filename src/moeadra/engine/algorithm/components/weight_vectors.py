"""
Weight vector (decomposition) strategies.

Each strategy maps ``(n_obj, **params)`` to an ``(N, n_obj)`` matrix whose
rows are non-negative and sum to one.
"""

import os
from math import comb
from typing import Optional, Sequence

import numpy as np

from moeadra.foundation.exceptions import ConfigurationError, MissingConfigError, ProblemDimensionError
from moeadra.foundation.registry import Registry

decomposition_registry: Registry = Registry("decomposition")


def generate_weights(name: str, params: dict, n_obj: int) -> np.ndarray:
    """Dispatch to the registered decomposition strategy ``name``."""
    strategy = decomposition_registry.get(name)
    weights = strategy(n_obj, **params)
    _assert_valid_weights(weights, n_obj)
    return weights


@decomposition_registry.register("sld", aliases=("simplex_lattice",))
def simplex_lattice_design(n_obj: int, H: Optional[int] = None) -> np.ndarray:
    """All ``C(H + m - 1, m - 1)`` vectors with entries ``k / H``."""
    if H is None:
        raise MissingConfigError("H", "decomposition")
    if int(H) < 1:
        raise ConfigurationError(f"Decomposition parameter H must be >= 1, got {H}.")
    return _simplex_lattice(n_obj, int(H))


@decomposition_registry.register("msld")
def multiple_simplex_lattice_design(
    n_obj: int,
    H: Optional[Sequence[int]] = None,
    tau: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """Union of SLD layers, layer ``k`` shrunk towards the centroid by ``tau[k]``."""
    if H is None:
        raise MissingConfigError("H", "decomposition")
    if tau is None:
        raise MissingConfigError("tau", "decomposition")
    H = list(H)
    tau = list(tau)
    if len(H) != len(tau):
        raise ConfigurationError("Decomposition 'msld' needs one tau value per H value.")
    layers = []
    for h, t in zip(H, tau):
        if not 0.0 < float(t) <= 1.0:
            raise ConfigurationError(f"msld tau values must lie in (0, 1], got {t}.")
        base = _simplex_lattice(n_obj, int(h))
        layers.append(float(t) * base + (1.0 - float(t)) / n_obj)
    return np.vstack(layers)


@decomposition_registry.register("loaded")
def loaded_weights(n_obj: int, W: Optional[np.ndarray] = None, path: Optional[str] = None) -> np.ndarray:
    """Caller-supplied weights, either inline (``W``) or from a CSV file (``path``)."""
    if W is None and path is None:
        raise MissingConfigError("W", "decomposition")
    if W is None:
        if not os.path.exists(path):
            raise ConfigurationError(f"Weight file '{path}' does not exist.")
        W = _load_weights(path)
    return np.atleast_2d(np.asarray(W, dtype=float)).copy()


def _load_weights(path: str) -> np.ndarray:
    arr = np.loadtxt(path, delimiter=",")
    return np.atleast_2d(arr).astype(float, copy=False)


def _assert_valid_weights(weights: np.ndarray, n_obj: int) -> None:
    if weights.ndim != 2:
        raise ConfigurationError("Weight matrix must be 2D.")
    if weights.shape[1] != n_obj:
        raise ProblemDimensionError(
            f"Expected weight vectors with {n_obj} columns, got {weights.shape[1]}.",
            n_obj=n_obj,
        )
    if np.any(weights < 0.0):
        raise ConfigurationError("Weight vectors must be non-negative.")
    rows_sum = weights.sum(axis=1)
    # Allow very small numerical drift
    if np.any(np.abs(rows_sum - 1.0) > 1e-6):
        raise ConfigurationError("Each weight vector must sum to 1.")


def count_lattice_points(n_obj: int, divisions: int) -> int:
    if divisions < 1:
        raise ValueError("divisions must be >= 1")
    return comb(divisions + n_obj - 1, n_obj - 1)


def _simplex_lattice(n_obj: int, divisions: int) -> np.ndarray:
    coords = []

    def rec(remaining: int, depth: int, current: list[int]) -> None:
        if depth == n_obj - 1:
            current.append(remaining)
            coords.append(tuple(current))
            current.pop()
            return
        for value in range(remaining + 1):
            current.append(value)
            rec(remaining - value, depth + 1, current)
            current.pop()

    rec(divisions, 0, [])
    arr = np.asarray(coords, dtype=float)
    arr /= divisions
    # Numerical guard to keep rows summing to exactly 1
    arr = np.clip(arr, 0.0, 1.0)
    arr /= arr.sum(axis=1, keepdims=True)
    return arr


__all__ = [
    "decomposition_registry",
    "generate_weights",
    "simplex_lattice_design",
    "multiple_simplex_lattice_design",
    "loaded_weights",
    "count_lattice_points",
]
