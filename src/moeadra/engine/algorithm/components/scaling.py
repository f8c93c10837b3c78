"""
Objective scaling.

Ideal and nadir estimates are taken over the feasible rows of the current
and the previous populations; all rows are used when none is feasible.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from moeadra.foundation.constraints.utils import ConstraintInfo
from moeadra.foundation.registry import Registry

scaling_registry: Registry = Registry("scaling")
scaling_registry.register("none", "none")
scaling_registry.register("simple", "simple", aliases=("linear",))

SCALING_GUARD = 1e-16


@dataclass(frozen=True)
class ScaledObjectives:
    """Normalized current (``Y``) and previous (``Y_prev``) objectives plus the bounds used."""

    Y: np.ndarray
    Y_prev: np.ndarray
    ideal: np.ndarray
    nadir: np.ndarray


def estimate_bounds(
    Y: np.ndarray,
    Y_prev: np.ndarray,
    V: ConstraintInfo | None = None,
    V_prev: ConstraintInfo | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Column-wise min/max of the feasible rows of ``[Y; Y_prev]``."""
    stacked = np.vstack([Y, Y_prev])
    if V is None or V_prev is None:
        pool = stacked
    else:
        feasible = np.concatenate([V.feasible, V_prev.feasible])
        pool = stacked[feasible] if np.any(feasible) else stacked
    return pool.min(axis=0), pool.max(axis=0)


def scale_objectives(
    name: str,
    Y: np.ndarray,
    Y_prev: np.ndarray,
    V: ConstraintInfo | None = None,
    V_prev: ConstraintInfo | None = None,
) -> ScaledObjectives:
    """
    Normalize ``Y`` and ``Y_prev`` with the configured policy.

    ``none`` returns the objectives unchanged; ``simple`` maps them to
    ``(y - ideal) / (nadir - ideal + 1e-16)``. The reported ideal point is
    the one aggregation functions measure distances from.
    """
    policy = scaling_registry.get(name)
    ideal, nadir = estimate_bounds(Y, Y_prev, V, V_prev)
    if policy == "none":
        return ScaledObjectives(Y=Y.copy(), Y_prev=Y_prev.copy(), ideal=ideal, nadir=nadir)
    span = nadir - ideal + SCALING_GUARD
    return ScaledObjectives(
        Y=(Y - ideal) / span,
        Y_prev=(Y_prev - ideal) / span,
        ideal=np.zeros_like(ideal),
        nadir=(nadir - ideal) / span,
    )


__all__ = ["ScaledObjectives", "scaling_registry", "estimate_bounds", "scale_objectives", "SCALING_GUARD"]
