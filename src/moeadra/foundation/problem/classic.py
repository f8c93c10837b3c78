"""
Small classic test problems: SRN (constrained) and the sphere/Rastrigin pair.
"""

from __future__ import annotations

import numpy as np

from moeadra.foundation.problem.base import Problem


class SRNProblem(Problem):
    """Srinivas & Deb (1994): two objectives, two inequality constraints."""

    n_constraints = 2

    def __init__(self) -> None:
        self.n_var = 2
        self.n_obj = 2
        self.xl = -20.0
        self.xu = 20.0

    def objectives(self, X: np.ndarray) -> np.ndarray:
        x1, x2 = X[:, 0], X[:, 1]
        f1 = 2.0 + (x1 - 2.0) ** 2 + (x2 - 1.0) ** 2
        f2 = 9.0 * x1 - (x2 - 1.0) ** 2
        return np.column_stack([f1, f2])

    def constraints(self, X: np.ndarray) -> np.ndarray:
        x1, x2 = X[:, 0], X[:, 1]
        g1 = x1**2 + x2**2 - 225.0
        g2 = x1 - 3.0 * x2 + 10.0
        return np.column_stack([g1, g2])


class SphereRastriginProblem(Problem):
    """
    Bi-objective sphere versus shifted Rastrigin.

    f1 is the sphere centred at the origin, f2 the Rastrigin function
    centred at ``shift``; the two minima conflict whenever ``shift != 0``.
    """

    def __init__(self, n_var: int = 30, lower: float = -1.0, upper: float = 1.0, shift: float = 0.5) -> None:
        self.n_var = n_var
        self.n_obj = 2
        self.xl = lower
        self.xu = upper
        self.shift = float(shift)

    def objectives(self, X: np.ndarray) -> np.ndarray:
        f1 = np.sum(X**2, axis=1)
        Z = X - self.shift
        f2 = 10.0 * X.shape[1] + np.sum(Z**2 - 10.0 * np.cos(2.0 * np.pi * Z), axis=1)
        return np.column_stack([f1, f2])


__all__ = ["SRNProblem", "SphereRastriginProblem"]
