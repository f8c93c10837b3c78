"""
Population update (replacement) policies.

Only active subproblems can change; every other row keeps its incumbent.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from moeadra.foundation.constraints.utils import ConstraintInfo
from moeadra.foundation.exceptions import ConfigurationError
from moeadra.foundation.registry import Registry

update_registry: Registry = Registry("update")


@dataclass
class UpdateResult:
    X: np.ndarray
    Y: np.ndarray
    V: ConstraintInfo | None
    replaced: np.ndarray


@update_registry.register("standard")
def choose_standard(order: np.ndarray, B: np.ndarray, active: np.ndarray) -> np.ndarray:
    """Each active subproblem takes its best ranked candidate; -1 means keep the incumbent."""
    N, T = B.shape
    choice = np.full(N, -1, dtype=int)
    best = order[active, 0]
    takes = best < T
    choice[active[takes]] = B[active[takes], best[takes]]
    return choice


@update_registry.register("restricted", aliases=("nr",))
def choose_restricted(order: np.ndarray, B: np.ndarray, active: np.ndarray, nr: int = 2) -> np.ndarray:
    """
    Like ``standard`` but each candidate may be taken by at most ``nr``
    subproblems; later subproblems fall through to their next ranked candidate.
    """
    N, T = B.shape
    choice = np.full(N, -1, dtype=int)
    used = np.zeros(N, dtype=int)
    for i in np.sort(active):
        for pos in order[i]:
            if pos == T:
                break
            candidate = B[i, pos]
            if used[candidate] < nr:
                used[candidate] += 1
                choice[i] = candidate
                break
    return choice


def validate_update_params(name: str, params: dict) -> None:
    key = update_registry.canonical(name)
    allowed = {"standard": set(), "restricted": {"nr"}}[key]
    unknown = set(params) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown parameters {sorted(unknown)} for update '{name}'.")
    if key == "restricted" and int(params.get("nr", 2)) < 1:
        raise ConfigurationError("restricted update: nr must be >= 1.")


def update_population(
    name: str,
    params: dict,
    order: np.ndarray,
    B: np.ndarray,
    active: np.ndarray,
    X_work: np.ndarray,
    Y_work: np.ndarray,
    V_work: ConstraintInfo | None,
    X_prev: np.ndarray,
    Y_prev: np.ndarray,
    V_prev: ConstraintInfo | None,
) -> UpdateResult:
    """
    Apply the replacement policy.

    ``X_work``/``Y_work``/``V_work`` hold this iteration's candidates (the
    offspring at active rows); ``*_prev`` hold the incumbents.
    """
    choose = update_registry.get(name)
    choice = choose(order, B, active, **params)
    replaced = choice >= 0
    X = X_prev.copy()
    Y = Y_prev.copy()
    src = choice[replaced]
    X[replaced] = X_work[src]
    Y[replaced] = Y_work[src]
    V = None
    if V_prev is not None and V_work is not None:
        idx = np.flatnonzero(replaced)
        V = V_prev.scatter(idx, V_work.take(src)) if idx.size else V_prev.copy()
    return UpdateResult(X=X, Y=Y, V=V, replaced=replaced)


__all__ = ["UpdateResult", "update_registry", "choose_standard", "choose_restricted", "validate_update_params", "update_population"]
