"""Shape and bound checks shared by the real-coded kernels.

The kernels work in the normalized search space, so bounds are usually the
unit box; they are still passed explicitly so the kernels can be reused.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

ArrayLike = np.ndarray


def _ensure_bounds(lower: ArrayLike, upper: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    lo = np.asarray(lower, dtype=float)
    hi = np.asarray(upper, dtype=float)
    if lo.ndim != 1 or lo.shape != hi.shape:
        raise ValueError(f"Bounds must be two 1-D arrays of equal length, got {lo.shape} and {hi.shape}.")
    if np.any(lo > hi):
        raise ValueError("Every lower bound must not exceed its upper bound.")
    return lo, hi


def _check_nvars(n_vars: int, bounds: np.ndarray) -> None:
    if bounds.shape[0] != n_vars:
        raise ValueError(f"Operator bounds cover {bounds.shape[0]} variables, candidates have {n_vars}.")


class RealOperator:
    """Base for real-coded kernels: coerces inputs to float arrays of the expected rank."""

    @staticmethod
    def _as_matings(
        parents: ArrayLike,
        *,
        expected_parents: int = 2,
        copy: bool = False,
        name: str = "parents",
    ) -> np.ndarray:
        arr = np.asarray(parents, dtype=float)
        if arr.ndim != 3 or arr.shape[1] != expected_parents:
            raise ValueError(f"{name}: expected (n_matings, {expected_parents}, n_var), got {arr.shape}.")
        return arr.copy() if copy else arr

    @staticmethod
    def _as_population(values: ArrayLike, *, name: str, copy: bool = True) -> np.ndarray:
        arr = np.asarray(values, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"{name}: expected (n_rows, n_var), got {arr.shape}.")
        return arr.copy() if copy else arr

    @staticmethod
    def _check_bounds_match(matrix: np.ndarray, bounds: np.ndarray) -> None:
        _check_nvars(matrix.shape[-1], bounds)


__all__ = ["ArrayLike", "RealOperator"]
