"""Bound repair for normalized decision vectors."""

from __future__ import annotations

import numpy as np


def truncate(X: np.ndarray, lower: float | np.ndarray = 0.0, upper: float | np.ndarray = 1.0) -> np.ndarray:
    """Clip every coordinate into ``[lower, upper]``."""
    return np.clip(X, lower, upper)


def reflect(X: np.ndarray, lower: float | np.ndarray = 0.0, upper: float | np.ndarray = 1.0) -> np.ndarray:
    """Mirror out-of-range coordinates back across the violated bound.

    Coordinates further away than one box width are folded repeatedly.
    """
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    span = np.broadcast_to(upper - lower, X.shape)
    safe = np.where(span > 0, span, 1.0)
    shifted = (X - lower) / safe
    period = np.mod(shifted, 2.0)
    folded = np.where(period > 1.0, 2.0 - period, period)
    out = lower + folded * span
    return np.where(span > 0, out, np.broadcast_to(lower, X.shape))


__all__ = ["truncate", "reflect"]
