"""
Base class for class-based optimization problems.
"""

from __future__ import annotations

import numpy as np


class Problem:
    """Base class for class-based optimization problems.

    Subclass this when your problem needs state set up in ``__init__``.

    **Required:** set ``n_var``, ``n_obj``, ``xl``, ``xu`` in ``__init__``.
    **Optional:** override ``n_constraints`` / ``n_eq_constraints`` as
    class-level attributes and implement ``constraints`` / ``equalities``.

    Example::

        import numpy as np
        from moeadra import MOEAD, MOEADConfig, Problem

        class MyProblem(Problem):
            n_constraints = 1

            def __init__(self):
                self.n_var = 3
                self.n_obj = 2
                self.xl = np.zeros(3)
                self.xu = np.ones(3)

            def objectives(self, X):
                f1 = np.sum(X ** 2, axis=1)
                f2 = np.sum((X - 1) ** 2, axis=1)
                return np.column_stack([f1, f2])

            def constraints(self, X):
                # Sign convention: g(x) <= 0 means feasible.
                return (np.sum(X, axis=1) - 2.0).reshape(-1, 1)

        result = MOEAD(MOEADConfig.preset("original").fixed()).run(MyProblem(), seed=1)
    """

    n_constraints: int = 0
    """Number of inequality constraints ``g(x) <= 0``."""

    n_eq_constraints: int = 0
    """Number of equality constraints ``h(x) = 0``."""

    @property
    def n_constr(self) -> int:
        """Alias for :attr:`n_constraints`, used by evaluation backends."""
        return self.n_constraints

    @property
    def n_eq_constr(self) -> int:
        """Alias for :attr:`n_eq_constraints`, used by evaluation backends."""
        return self.n_eq_constraints

    def objectives(self, X: np.ndarray) -> np.ndarray:
        """Compute objective values (to minimize) for a batch ``X`` of shape ``(N, n_var)``."""
        raise NotImplementedError(f"{type(self).__name__} must implement objectives(self, X).")

    def constraints(self, X: np.ndarray) -> np.ndarray | None:
        """Inequality constraint values of shape ``(N, n_constraints)``; ``g <= 0`` is feasible."""
        return None

    def equalities(self, X: np.ndarray) -> np.ndarray | None:
        """Equality constraint values of shape ``(N, n_eq_constraints)``; ``h == 0`` is feasible."""
        return None

    def evaluate(self, X: np.ndarray, out: dict[str, np.ndarray]) -> None:
        """Framework evaluation entry point.  Override :meth:`objectives`
        (and optionally :meth:`constraints` / :meth:`equalities`) instead of this method."""
        X = np.asarray(X, dtype=float)

        F_computed = np.asarray(self.objectives(X), dtype=float)
        if F_computed.ndim == 1:
            F_computed = F_computed.reshape(-1, self.n_obj)
        _write(out, "F", F_computed)

        if self.n_constraints > 0:
            G_computed = self.constraints(X)
            if G_computed is not None:
                G_computed = np.asarray(G_computed, dtype=float).reshape(X.shape[0], self.n_constraints)
                _write(out, "G", G_computed)

        if self.n_eq_constraints > 0:
            H_computed = self.equalities(X)
            if H_computed is not None:
                H_computed = np.asarray(H_computed, dtype=float).reshape(X.shape[0], self.n_eq_constraints)
                _write(out, "H", H_computed)


def _write(out: dict[str, np.ndarray], key: str, value: np.ndarray) -> None:
    buf = out.get(key)
    if buf is not None and buf.shape == value.shape:
        buf[:] = value
    else:
        out[key] = value


__all__ = ["Problem"]
