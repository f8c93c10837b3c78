"""
Neighborhood construction.

A neighborhood strategy names the similarity source: ``lambda`` uses the
weight vectors (static for a run), ``x`` the current incumbents (rebuilt
every time it is called).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from moeadra.foundation.exceptions import ConfigurationError
from moeadra.foundation.registry import Registry

neighborhood_registry: Registry = Registry("neighborhood")
neighborhood_registry.register("lambda", "weights", aliases=("weights", "w"))
neighborhood_registry.register("x", "population", aliases=("population",))


@dataclass(frozen=True)
class Neighborhood:
    """Neighbor table ``B`` (N, T) with each row starting at itself, and mating matrix ``P`` (N, N)."""

    B: np.ndarray
    P: np.ndarray

    @property
    def T(self) -> int:
        return int(self.B.shape[1])


def compute_neighbors(source: np.ndarray, neighbor_size: int) -> np.ndarray:
    """Compute neighborhood indices based on Euclidean distances between rows of ``source``.

    Parameters
    ----------
    source : np.ndarray
        Similarity source, shape (N, k); weight vectors or incumbents.
    neighbor_size : int
        Neighborhood size (T parameter).

    Returns
    -------
    np.ndarray
        Neighborhood indices, shape (N, neighbor_size); column 0 is the row itself.
    """
    dist = np.linalg.norm(source[:, None, :] - source[None, :, :], axis=2)
    # Duplicated rows must not displace the subproblem from its own first slot.
    np.fill_diagonal(dist, -1.0)
    order = np.argsort(dist, axis=1, kind="stable")
    return order[:, :neighbor_size]


def mating_probabilities(B: np.ndarray, delta_p: float) -> np.ndarray:
    """``delta_p / T`` on each neighborhood, ``(1 - delta_p) / (N - T)`` elsewhere."""
    N, T = B.shape
    outside = (1.0 - delta_p) / (N - T) if N > T else 0.0
    P = np.full((N, N), outside, dtype=float)
    rows = np.repeat(np.arange(N), T)
    P[rows, B.ravel()] = delta_p / T
    return P


def build_neighborhood(
    name: str,
    params: dict,
    W: np.ndarray,
    X: np.ndarray,
    *,
    T: int | None = None,
) -> Neighborhood:
    """
    Build ``(B, P)`` from the configured similarity source.

    ``T`` overrides the configured neighborhood size for a single call
    (used by the reduced-pressure ranking rebuild).
    """
    source = neighborhood_registry.get(name)
    size = int(params["T"] if T is None else T)
    N = W.shape[0]
    if not 1 <= size < N:
        raise ConfigurationError(
            f"Neighborhood size T must satisfy 1 <= T < N (T={size}, N={N}).",
            suggestion="Reduce T or use a finer decomposition",
        )
    matrix = W if source == "weights" else X
    B = compute_neighbors(matrix, size)
    return Neighborhood(B=B, P=mating_probabilities(B, float(params.get("delta_p", 1.0))))


__all__ = ["Neighborhood", "neighborhood_registry", "compute_neighbors", "mating_probabilities", "build_neighborhood"]
