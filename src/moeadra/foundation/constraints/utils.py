"""
Utility helpers for constraint handling.

Constraint information travels with the population as a ``ConstraintInfo``
value so it can follow X/Y through active-subset gather and scatter.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class ConstraintInfo:
    """
    Per-row constraint information.

    Attributes
    ----------
    C : np.ndarray
        Raw constraint values, inequalities first then equalities, shape (N, n_constr).
    Vmatrix : np.ndarray
        Per-constraint violation, ``max(g, 0)`` and ``max(|h| - epsilon, 0)``.
    v : np.ndarray
        Total violation per row, shape (N,).
    """

    C: np.ndarray
    Vmatrix: np.ndarray
    v: np.ndarray

    def __len__(self) -> int:
        return int(self.v.shape[0])

    @property
    def feasible(self) -> np.ndarray:
        return self.v <= 0.0

    def take(self, idx: np.ndarray) -> "ConstraintInfo":
        """Return a new ConstraintInfo restricted to rows ``idx``."""
        return ConstraintInfo(C=self.C[idx].copy(), Vmatrix=self.Vmatrix[idx].copy(), v=self.v[idx].copy())

    def scatter(self, idx: np.ndarray, other: "ConstraintInfo") -> "ConstraintInfo":
        """Return a copy with rows ``idx`` replaced by the rows of ``other``."""
        C = self.C.copy()
        Vmatrix = self.Vmatrix.copy()
        v = self.v.copy()
        C[idx] = other.C
        Vmatrix[idx] = other.Vmatrix
        v[idx] = other.v
        return ConstraintInfo(C=C, Vmatrix=Vmatrix, v=v)

    def copy(self) -> "ConstraintInfo":
        return ConstraintInfo(C=self.C.copy(), Vmatrix=self.Vmatrix.copy(), v=self.v.copy())

    @classmethod
    def concatenate(cls, parts: list["ConstraintInfo"]) -> "ConstraintInfo":
        return cls(
            C=np.vstack([p.C for p in parts]),
            Vmatrix=np.vstack([p.Vmatrix for p in parts]),
            v=np.concatenate([p.v for p in parts]),
        )


def build_constraint_info(
    G: np.ndarray | None,
    H: np.ndarray | None = None,
    *,
    epsilon: float = 0.0,
) -> ConstraintInfo | None:
    """
    Build a ConstraintInfo from inequality values ``G`` and equality values ``H``.

    Returns None when the problem has neither.
    """
    if G is None and H is None:
        return None
    blocks_c = []
    blocks_v = []
    if G is not None:
        G = np.asarray(G, dtype=float)
        blocks_c.append(G)
        blocks_v.append(np.maximum(G, 0.0))
    if H is not None:
        H = np.asarray(H, dtype=float)
        blocks_c.append(H)
        blocks_v.append(np.maximum(np.abs(H) - float(epsilon), 0.0))
    C = np.hstack(blocks_c)
    Vmatrix = np.hstack(blocks_v)
    return ConstraintInfo(C=C, Vmatrix=Vmatrix, v=np.sum(Vmatrix, axis=1))


def violation_of(info: ConstraintInfo | None, n: int) -> np.ndarray:
    """Total violation vector, zeros when ``info`` is None."""
    if info is None:
        return np.zeros(n, dtype=float)
    return info.v


__all__ = ["ConstraintInfo", "build_constraint_info", "violation_of"]
