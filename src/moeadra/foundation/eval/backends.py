from __future__ import annotations

import math
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, Optional

import numpy as np

from moeadra.foundation.eval.population import evaluate_population_with_constraints
from moeadra.foundation.registry import Registry
from . import EvaluationBackend, EvaluationResult


def _eval_chunk(problem, X_chunk: np.ndarray) -> tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
    """Worker helper to evaluate a chunk; kept at module level for pickling."""
    return evaluate_population_with_constraints(problem, X_chunk)


def _stitch(parts: list[tuple[int, Optional[np.ndarray]]], n: int) -> Optional[np.ndarray]:
    ordered = sorted(parts, key=lambda p: p[0])
    if any(part is None for _, part in ordered):
        return None
    out = np.empty((n, ordered[0][1].shape[1]), dtype=float)
    for start, part in ordered:
        out[start : start + part.shape[0]] = part
    return out


class SerialEvalBackend(EvaluationBackend):
    """Synchronous in-process evaluation (default)."""

    def evaluate(self, X: np.ndarray, problem) -> EvaluationResult:
        F, G, H = evaluate_population_with_constraints(problem, X)
        return EvaluationResult(F=F, G=G, H=H)


class MultiprocessingEvalBackend(EvaluationBackend):
    """
    Parallel evaluation using multiprocessing.

    Notes:
        - Requires the problem instance to be picklable.
        - Rows are re-assembled in their original order, so results match serial evaluation.
        - Best suited for expensive evaluations; overhead dominates for tiny problems.
    """

    def __init__(self, n_workers: Optional[int] = None, chunk_size: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)
        self.chunk_size = chunk_size

    def evaluate(self, X: np.ndarray, problem) -> EvaluationResult:
        if self.n_workers <= 1 or X.shape[0] <= 1:
            return SerialEvalBackend().evaluate(X, problem)

        n = X.shape[0]
        if self.chunk_size is not None and self.chunk_size > 0:
            chunk_size = self.chunk_size
        else:
            chunk_size = max(1, math.ceil(n / self.n_workers))
        slices = [(i, min(i + chunk_size, n)) for i in range(0, n, chunk_size)]

        F_parts: list[tuple[int, np.ndarray]] = []
        G_parts: list[tuple[int, Optional[np.ndarray]]] = []
        H_parts: list[tuple[int, Optional[np.ndarray]]] = []

        with ProcessPoolExecutor(max_workers=self.n_workers) as ex:
            future_map = {ex.submit(_eval_chunk, problem, X[start:end]): (start, end) for start, end in slices}
            for fut in as_completed(future_map):
                start, _ = future_map[fut]
                F_chunk, G_chunk, H_chunk = fut.result()
                F_parts.append((start, F_chunk))
                G_parts.append((start, G_chunk))
                H_parts.append((start, H_chunk))

        F = _stitch(F_parts, n)
        return EvaluationResult(F=F, G=_stitch(G_parts, n), H=_stitch(H_parts, n))


eval_backend_registry: Registry[Callable[..., EvaluationBackend]] = Registry("evaluation backend")
eval_backend_registry.register("serial", lambda **_: SerialEvalBackend())
eval_backend_registry.register("multiprocessing", MultiprocessingEvalBackend, aliases=("processes",))


def resolve_eval_backend(name: str, *, n_workers: Optional[int] = None, chunk_size: Optional[int] = None) -> EvaluationBackend:
    """Build the backend registered under ``name``; unknown names raise InvalidStrategyError."""
    factory = eval_backend_registry.get(name or "serial")
    return factory(n_workers=n_workers, chunk_size=chunk_size)


__all__ = ["SerialEvalBackend", "MultiprocessingEvalBackend", "eval_backend_registry", "resolve_eval_backend"]
