from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from moeadra.foundation.constraints.utils import ConstraintInfo
from moeadra.foundation.exceptions import ConfigurationError
from moeadra.foundation.metrics.pareto import crowding_distance, nondominated_mask


@dataclass
class ArchiveContents:
    """Snapshot of the archive members (normalized X)."""

    X: np.ndarray
    Y: np.ndarray
    V: ConstraintInfo | None

    def __len__(self) -> int:
        return int(self.Y.shape[0])


def _unique_rows_with_tolerance(values: np.ndarray, tol: float) -> np.ndarray:
    n = int(values.shape[0])
    if n <= 1:
        return np.arange(n, dtype=int)
    if tol == 0.0:
        _, unique_idx = np.unique(values, axis=0, return_index=True)
        unique_idx.sort()
        return np.asarray(unique_idx, dtype=int)

    keep = np.ones(n, dtype=bool)
    for i in range(n):
        if not keep[i]:
            continue
        diff = np.abs(values[i + 1 :] - values[i])
        if diff.size == 0:
            continue
        dup_mask = np.all(diff <= tol, axis=1)
        if dup_mask.any():
            keep[i + 1 :][dup_mask] = False
    return np.flatnonzero(keep)


def _take(contents: ArchiveContents, idx: np.ndarray) -> ArchiveContents:
    return ArchiveContents(
        X=contents.X[idx],
        Y=contents.Y[idx],
        V=contents.V.take(idx) if contents.V is not None else None,
    )


class CrowdingDistanceArchive:
    """
    Bounded archive of feasible nondominated solutions with iterative
    crowding-distance truncation.

    Update is batch-based: merge existing + incoming, feasibility filter,
    non-dominated extraction, deduplication, then (if needed) truncation.
    The archive never keeps an infeasible member.
    """

    def __init__(self, capacity: int, n_var: int, n_obj: int, *, objective_tolerance: float = 1e-10) -> None:
        self.capacity = int(capacity)
        if self.capacity <= 0:
            raise ConfigurationError(f"Archive size must be positive, got {capacity}.")
        if objective_tolerance < 0.0:
            raise ConfigurationError("objective_tolerance must be >= 0.")
        self._objective_tolerance = float(objective_tolerance)
        self._contents = ArchiveContents(X=np.empty((0, int(n_var))), Y=np.empty((0, int(n_obj))), V=None)

    def __len__(self) -> int:
        return len(self._contents)

    def contents(self) -> ArchiveContents:
        c = self._contents
        return ArchiveContents(X=c.X.copy(), Y=c.Y.copy(), V=c.V.copy() if c.V is not None else None)

    def update(self, X: np.ndarray, Y: np.ndarray, V: ConstraintInfo | None = None) -> ArchiveContents:
        if X.shape[0] != Y.shape[0]:
            raise ValueError("X and Y must have the same number of rows.")
        pool = self._merge(ArchiveContents(X=np.asarray(X, dtype=float), Y=np.asarray(Y, dtype=float), V=V))

        if pool.V is not None:
            pool = _take(pool, np.flatnonzero(pool.V.feasible))
        if len(pool) == 0:
            self._contents = pool
            return self.contents()

        pool = _take(pool, np.flatnonzero(nondominated_mask(pool.Y)))
        pool = _take(pool, _unique_rows_with_tolerance(pool.Y, self._objective_tolerance))

        if len(pool) > self.capacity:
            pool = _take(pool, self._select_subset(pool.Y, self.capacity))

        self._contents = pool
        return self.contents()

    def _merge(self, incoming: ArchiveContents) -> ArchiveContents:
        current = self._contents
        if len(current) == 0:
            return incoming
        V = None
        if current.V is not None and incoming.V is not None:
            V = ConstraintInfo.concatenate([current.V, incoming.V])
        return ArchiveContents(X=np.vstack([current.X, incoming.X]), Y=np.vstack([current.Y, incoming.Y]), V=V)

    @staticmethod
    def _select_subset(F: np.ndarray, target_size: int) -> np.ndarray:
        keep = np.arange(F.shape[0], dtype=int)
        while keep.size > target_size:
            crowd = crowding_distance(F[keep])
            worst_local = int(np.argmin(crowd))
            keep = np.delete(keep, worst_local)
        return keep


def setup_archive(config: dict | None, n_var: int, n_obj: int) -> CrowdingDistanceArchive | None:
    """Build the archive described by ``config`` (``{"size": int}``), or None when disabled."""
    if not config:
        return None
    if "size" not in config:
        raise ConfigurationError("Archive configuration needs a 'size' entry.")
    return CrowdingDistanceArchive(int(config["size"]), n_var, n_obj)


__all__ = ["ArchiveContents", "CrowdingDistanceArchive", "setup_archive"]
