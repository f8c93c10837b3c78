"""
Neighborhood ranking with constraint handling.

Ranking turns the (T+1) x N scalarization matrix into an N x (T+1) matrix of
candidate positions, best first. Positions 0..T-1 point at the neighbors'
candidates ``B[i, j]`` and position T at the incumbent of subproblem ``i``.
"""

from __future__ import annotations

import numpy as np

from moeadra.engine.algorithm.components.utils import stable_argsort_rows
from moeadra.foundation.constraints.utils import ConstraintInfo, violation_of
from moeadra.foundation.exceptions import ConfigurationError
from moeadra.foundation.registry import Registry

constraint_registry: Registry = Registry("constraint")


def candidate_violations(B: np.ndarray, V: ConstraintInfo | None, V_prev: ConstraintInfo | None) -> np.ndarray:
    """N x (T+1) total violation of each ranked candidate."""
    N = B.shape[0]
    v = violation_of(V, N)
    v_prev = violation_of(V_prev, N)
    return np.concatenate([v[B], v_prev[:, None]], axis=1)


@constraint_registry.register("none")
def rank_by_fitness(fitness: np.ndarray, violation: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Constraints ignored."""
    return np.argsort(fitness, axis=1, kind="stable")


@constraint_registry.register("penalty")
def rank_by_penalty(
    fitness: np.ndarray, violation: np.ndarray, rng: np.random.Generator, beta: float = 1.0
) -> np.ndarray:
    """Static penalty: ``fitness + beta * violation``."""
    return np.argsort(fitness + beta * violation, axis=1, kind="stable")


@constraint_registry.register("vbr")
def rank_violation_based(
    fitness: np.ndarray,
    violation: np.ndarray,
    rng: np.random.Generator,
    type: str = "ts",
    pf: float = 0.4,
    threshold: float = 0.0,
) -> np.ndarray:
    """
    Violation-based ranking.

    ``ts`` (tournament selection rules): feasible candidates first, by fitness;
    infeasible ones after, by violation, then fitness. ``vt`` applies the same
    rules after zeroing violations at or below ``threshold``. ``sr`` is
    stochastic ranking with comparison probability ``pf``.
    """
    kind = str(type).lower()
    if kind == "ts":
        return _rank_feasibility_first(fitness, violation)
    if kind == "vt":
        return _rank_feasibility_first(fitness, np.where(violation <= threshold, 0.0, violation))
    if kind == "sr":
        return _stochastic_ranking(fitness, violation, pf, rng)
    raise ConfigurationError(f"Unknown violation-based ranking type '{type}'.", suggestion="Use 'ts', 'sr' or 'vt'")


def _rank_feasibility_first(fitness: np.ndarray, violation: np.ndarray) -> np.ndarray:
    infeasible = (violation > 0).astype(float)
    return stable_argsort_rows((fitness, violation, infeasible))


def _stochastic_ranking(fitness: np.ndarray, violation: np.ndarray, pf: float, rng: np.random.Generator) -> np.ndarray:
    """Runarsson & Yao bubble-sort ranking, one row per neighborhood."""
    N, K = fitness.shape
    order = np.tile(np.arange(K), (N, 1))
    for i in range(N):
        row = order[i]
        f = fitness[i]
        v = violation[i]
        for _ in range(K):
            swapped = False
            for j in range(K - 1):
                a, b = row[j], row[j + 1]
                both_feasible = v[a] == 0 and v[b] == 0
                if both_feasible or rng.random() < pf:
                    worse = f[a] > f[b]
                else:
                    worse = v[a] > v[b]
                if worse:
                    row[j], row[j + 1] = b, a
                    swapped = True
            if not swapped:
                break
    return order


def validate_constraint_params(name: str, params: dict) -> None:
    """Fail fast on unknown constraint handling parameters or types."""
    key = constraint_registry.canonical(name)
    allowed = {"none": set(), "penalty": {"beta"}, "vbr": {"type", "pf", "threshold"}}[key]
    unknown = set(params) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown parameters {sorted(unknown)} for constraint handling '{name}'.")
    if key == "vbr" and str(params.get("type", "ts")).lower() not in {"ts", "sr", "vt"}:
        raise ConfigurationError(f"Unknown violation-based ranking type '{params['type']}'.")
    if key == "vbr" and not 0.0 <= float(params.get("pf", 0.4)) <= 1.0:
        raise ConfigurationError("vbr: pf must lie in [0, 1].")


def rank_neighborhoods(
    name: str,
    params: dict,
    bigZ: np.ndarray,
    B: np.ndarray,
    V: ConstraintInfo | None,
    V_prev: ConstraintInfo | None,
    rng: np.random.Generator,
) -> np.ndarray:
    """Order each neighborhood's T+1 candidates; returns an N x (T+1) position matrix."""
    rank = constraint_registry.get(name)
    fitness = bigZ.T
    violation = candidate_violations(B, V, V_prev)
    return np.asarray(rank(fitness, violation, rng, **params), dtype=int)


__all__ = [
    "constraint_registry",
    "candidate_violations",
    "rank_by_fitness",
    "rank_by_penalty",
    "rank_violation_based",
    "validate_constraint_params",
    "rank_neighborhoods",
]
