from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np


@dataclass(frozen=True)
class VariationContext:
    """
    Read-only inputs shared by every step of the variation stack.

    Attributes
    ----------
    population : np.ndarray
        Full incumbent population (N, D), the mating pool.
    active : np.ndarray
        Indices of the subproblems producing offspring this iteration.
    B : np.ndarray
        Neighbor table restricted to the active rows (n_active, T).
    P : np.ndarray
        Mating probabilities restricted to the active rows (n_active, N).
    rng : np.random.Generator
        The run's random stream.
    iteration : int
        Current iteration (1-based).
    """

    population: np.ndarray
    active: np.ndarray
    B: np.ndarray
    P: np.ndarray
    rng: np.random.Generator
    iteration: int

    @property
    def incumbents(self) -> np.ndarray:
        return self.population[self.active]


@runtime_checkable
class VariationStep(Protocol):
    """
    Protocol for one operator of the variation stack.

    A step receives the current working offspring (n_active, D) and returns
    new offspring plus the number of function evaluations it spent.
    """

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]: ...


__all__ = ["VariationContext", "VariationStep"]
