"""
Scalar aggregation functions and neighborhood scalarization.

Every aggregation function has the signature
``(fvals, weights, ideal, nadir, **params) -> values`` and reduces the last
axis; smaller is better.
"""

from __future__ import annotations

import inspect
from typing import Callable

import numpy as np

from moeadra.foundation.exceptions import CollaboratorContractError, ConfigurationError
from moeadra.foundation.registry import Registry

aggregation_registry: Registry = Registry("aggregation")

Aggregator = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray], np.ndarray]


def _unit(weights: np.ndarray) -> np.ndarray:
    norm_w = np.linalg.norm(weights, axis=-1, keepdims=True)
    norm_w = np.where(norm_w > 0, norm_w, 1.0)
    return weights / norm_w


@aggregation_registry.register("wt", aliases=("tchebycheff",))
def tchebycheff(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray) -> np.ndarray:
    """Weighted Tchebycheff aggregation: max(w * |f - z*|)."""
    diff = np.abs(fvals - ideal)
    return np.max(weights * diff, axis=-1)


@aggregation_registry.register("awt")
def adjusted_tchebycheff(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray) -> np.ndarray:
    """Adjusted Tchebycheff: Tchebycheff with inverted weights renormalized to sum 1."""
    inverted = 1.0 / (weights + 1e-16)
    inverted = inverted / np.sum(inverted, axis=-1, keepdims=True)
    diff = np.abs(fvals - ideal)
    return np.max(inverted * diff, axis=-1)


@aggregation_registry.register("ws", aliases=("weighted_sum",))
def weighted_sum(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray) -> np.ndarray:
    """Weighted sum aggregation: sum(w * (f - z*))."""
    return np.sum(weights * (fvals - ideal), axis=-1)


@aggregation_registry.register("mwt", aliases=("modified_tchebycheff",))
def modified_tchebycheff(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray, rho: float = 0.001
) -> np.ndarray:
    """Modified Tchebycheff: max component plus weighted L1 term."""
    weighted = weights * np.abs(fvals - ideal)
    return np.max(weighted, axis=-1) + rho * np.sum(weighted, axis=-1)


@aggregation_registry.register("pbi")
def pbi(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray, theta: float = 5.0) -> np.ndarray:
    """Penalty boundary intersection: ``d1 + theta * d2`` measured from the ideal point.

    Parameters
    ----------
    fvals : np.ndarray
        Objective values.
    weights : np.ndarray
        Weight vectors.
    ideal : np.ndarray
        Ideal point.
    nadir : np.ndarray
        Unused.
    theta : float
        Penalty parameter (default 5.0).
    """
    diff = fvals - ideal
    w_unit = _unit(weights)
    d1 = np.abs(np.sum(diff * w_unit, axis=-1))
    d2 = np.linalg.norm(diff - d1[..., None] * w_unit, axis=-1)
    return d1 + theta * d2


@aggregation_registry.register("ipbi")
def inverted_pbi(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray, theta: float = 5.0
) -> np.ndarray:
    """Inverted PBI: ``theta * d2 - d1`` measured from the nadir point."""
    diff = nadir - fvals
    w_unit = _unit(weights)
    d1 = np.sum(diff * w_unit, axis=-1)
    d2 = np.linalg.norm(diff - d1[..., None] * w_unit, axis=-1)
    return theta * d2 - d1


def build_aggregator(name: str, params: dict) -> Aggregator:
    """Bind ``params`` to the registered aggregation function ``name``."""
    func = aggregation_registry.get(name)
    params = dict(params)
    allowed = set(list(inspect.signature(func).parameters)[4:])
    unknown = set(params) - allowed
    if unknown:
        raise ConfigurationError(
            f"Unknown parameters {sorted(unknown)} for aggregation '{name}'.",
            suggestion=f"Accepted parameters: {sorted(allowed) or 'none'}",
        )

    def aggregate(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray) -> np.ndarray:
        return func(fvals, weights, ideal, nadir, **params)

    return aggregate


def scalarize(
    aggregate: Aggregator,
    Y: np.ndarray,
    Y_prev: np.ndarray,
    W: np.ndarray,
    B: np.ndarray,
    ideal: np.ndarray,
    nadir: np.ndarray,
) -> np.ndarray:
    """
    Build the (T+1) x N scalarization matrix.

    Column ``i`` holds the values of the neighbors' candidates ``Y[B[i, j]]``
    (rows 0..T-1) and of the incumbent ``Y_prev[i]`` (row T), all under the
    weight vector ``W[i]``.
    """
    N, T = B.shape
    candidates = np.concatenate([Y[B], Y_prev[:, None, :]], axis=1)
    values = aggregate(candidates, W[:, None, :], ideal, nadir)
    bigZ = np.asarray(values, dtype=float).T
    if bigZ.shape != (T + 1, N):
        raise CollaboratorContractError(
            "aggregation", f"scalarization matrix has shape {bigZ.shape}, expected {(T + 1, N)}"
        )
    return bigZ


__all__ = [
    "aggregation_registry",
    "tchebycheff",
    "adjusted_tchebycheff",
    "weighted_sum",
    "modified_tchebycheff",
    "pbi",
    "inverted_pbi",
    "build_aggregator",
    "scalarize",
]
