from __future__ import annotations

import numpy as np


def evaluate_population_with_constraints(
    problem, X: np.ndarray
) -> tuple[np.ndarray, np.ndarray | None, np.ndarray | None]:
    """
    Evaluate population and return objectives plus inequality (G) and equality (H) values if the problem has them.
    """
    out = {"F": np.empty((X.shape[0], problem.n_obj))}
    n_constr = getattr(problem, "n_constr", 0)
    if n_constr and n_constr > 0:
        out["G"] = np.empty((X.shape[0], n_constr))
    n_eq = getattr(problem, "n_eq_constr", 0)
    if n_eq and n_eq > 0:
        out["H"] = np.empty((X.shape[0], n_eq))
    problem.evaluate(X, out)
    return out["F"], out.get("G"), out.get("H")


__all__ = ["evaluate_population_with_constraints"]
