"""
Evaluation of normalized populations.

The orchestrator keeps decision variables in [0, 1]; this module maps them
back into the problem bounds, runs the evaluation backend and checks the
shape of what comes back.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from moeadra.foundation.constraints.utils import ConstraintInfo, build_constraint_info
from moeadra.foundation.eval import EvaluationBackend
from moeadra.foundation.eval.backends import SerialEvalBackend
from moeadra.foundation.exceptions import BoundsError, CollaboratorContractError, EvaluationError, MOEADError

_logger = logging.getLogger(__name__)


def resolve_bounds(problem: Any) -> tuple[np.ndarray, np.ndarray]:
    """
    Return ``(xl, xu)`` as float arrays of length ``n_var``.

    Scalar bounds are broadcast. Raises BoundsError when lengths are wrong,
    values are not finite or ``xl > xu`` anywhere.
    """
    n_var = int(problem.n_var)
    try:
        xl = np.broadcast_to(np.asarray(problem.xl, dtype=float), (n_var,)).copy()
        xu = np.broadcast_to(np.asarray(problem.xu, dtype=float), (n_var,)).copy()
    except ValueError as exc:
        raise BoundsError(f"Bounds must be scalars or arrays of length n_var={n_var}.") from exc
    if not (np.all(np.isfinite(xl)) and np.all(np.isfinite(xu))):
        raise BoundsError("Bounds must be finite.")
    if np.any(xl > xu):
        bad = np.flatnonzero(xl > xu).tolist()
        raise BoundsError(f"Lower bound exceeds upper bound for variables {bad}.")
    return xl, xu


def denormalize_population(X: np.ndarray, xl: np.ndarray, xu: np.ndarray) -> np.ndarray:
    """Map rows from [0, 1] into ``[xl, xu]``."""
    return xl + X * (xu - xl)


def evaluate_population(
    X: np.ndarray,
    problem: Any,
    xl: np.ndarray,
    xu: np.ndarray,
    *,
    nfe: int,
    backend: EvaluationBackend | None = None,
    epsilon: float = 0.0,
) -> tuple[np.ndarray, ConstraintInfo | None, int]:
    """
    Evaluate a normalized population.

    Parameters
    ----------
    X : np.ndarray
        Normalized decision vectors, shape (n, n_var).
    problem : Any
        Problem exposing ``n_var``, ``n_obj`` and ``evaluate(X, out)``.
    xl, xu : np.ndarray
        Problem bounds used to denormalize ``X``.
    nfe : int
        Evaluations performed so far.
    backend : EvaluationBackend, optional
        Defaults to serial in-process evaluation.
    epsilon : float
        Tolerance for equality constraints.

    Returns
    -------
    tuple
        ``(Y, V, nfe + n)``.

    Raises
    ------
    EvaluationError
        When the problem or backend fails; the original exception is chained.
    CollaboratorContractError
        When the returned matrices have the wrong shape.
    """
    backend = backend or SerialEvalBackend()
    n = X.shape[0]
    try:
        result = backend.evaluate(denormalize_population(X, xl, xu), problem)
    except MOEADError:
        raise
    except Exception as exc:
        raise EvaluationError(f"Evaluating {n} solutions failed: {exc!r}") from exc

    F = np.asarray(result.F, dtype=float)
    if F.ndim == 1:
        F = F.reshape(-1, int(problem.n_obj))
    if F.shape != (n, int(problem.n_obj)):
        raise CollaboratorContractError(
            "evaluator",
            f"objective matrix has shape {F.shape}, expected {(n, int(problem.n_obj))}",
            shape=F.shape,
        )
    if not np.all(np.isfinite(F)):
        raise CollaboratorContractError("evaluator", "objective values must be finite")

    G = _checked_block(result.G, n, getattr(problem, "n_constr", 0), "inequality constraint")
    H = _checked_block(result.H, n, getattr(problem, "n_eq_constr", 0), "equality constraint")
    V = build_constraint_info(G, H, epsilon=epsilon)
    _logger.debug("Evaluated %d solutions (nfe=%d).", n, nfe + n)
    return F, V, nfe + n


def _checked_block(block: np.ndarray | None, n: int, width: int, label: str) -> np.ndarray | None:
    if block is None:
        if width:
            raise CollaboratorContractError("evaluator", f"{label} values missing for a problem declaring {width}")
        return None
    block = np.asarray(block, dtype=float)
    if block.ndim == 1:
        block = block.reshape(n, -1)
    if block.shape != (n, width):
        raise CollaboratorContractError("evaluator", f"{label} matrix has shape {block.shape}, expected {(n, width)}")
    return block


__all__ = ["evaluate_population", "resolve_bounds", "denormalize_population"]
