"""Real-coded recombination operators."""

from __future__ import annotations

import numpy as np

from .utils import ArrayLike, RealOperator, _ensure_bounds


class SBXCrossover(RealOperator):
    """Simulated Binary Crossover (SBX) operator."""

    def __init__(
        self,
        prob_crossover: float = 1.0,
        eta: float = 20.0,
        *,
        lower: ArrayLike,
        upper: ArrayLike,
    ) -> None:
        self.prob = float(prob_crossover)
        self.eta = float(eta)
        self.lower, self.upper = _ensure_bounds(lower, upper)

    def __call__(self, parents: ArrayLike, rng: np.random.Generator) -> ArrayLike:
        parents_arr = self._as_matings(parents, copy=False, name="parents")
        offspring = parents_arr.copy()
        n_pairs, _, _ = offspring.shape
        if n_pairs == 0:
            return offspring
        self._check_bounds_match(offspring[:, 0, :], self.lower)

        apply_mask = rng.random(n_pairs) <= self.prob
        if not np.any(apply_mask):
            return offspring

        active = offspring[apply_mask]
        parent1 = active[:, 0, :].copy()
        parent2 = active[:, 1, :].copy()
        eps = 1.0e-14

        y1 = np.minimum(parent1, parent2)
        y2 = np.maximum(parent1, parent2)
        diff = y2 - y1
        if not np.any(diff > eps):
            return offspring

        xl = self.lower.reshape(1, -1)
        xu = self.upper.reshape(1, -1)
        rand = rng.random(parent1.shape)
        betaq = np.empty_like(parent1)
        inv_eta = 1.0 / (self.eta + 1.0)

        beta = np.maximum(1.0 + (2.0 * (y1 - xl) / diff.clip(min=eps)), eps)
        alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
        term = rand <= (1.0 / alpha)
        betaq[term] = np.power(rand[term] * alpha[term], inv_eta)
        betaq[~term] = np.power(1.0 / (2.0 - rand[~term] * alpha[~term]), inv_eta)
        c1 = 0.5 * ((y1 + y2) - betaq * diff)

        beta = np.maximum(1.0 + (2.0 * (xu - y2) / diff.clip(min=eps)), eps)
        alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
        term = rand <= (1.0 / alpha)
        betaq[term] = np.power(rand[term] * alpha[term], inv_eta)
        betaq[~term] = np.power(1.0 / (2.0 - rand[~term] * alpha[~term]), inv_eta)
        c2 = 0.5 * ((y1 + y2) + betaq * diff)

        # Identical coordinates are inherited unchanged.
        same = diff <= eps
        c1 = np.where(same, parent1, np.clip(c1, self.lower, self.upper))
        c2 = np.where(same, parent2, np.clip(c2, self.lower, self.upper))
        swap = rng.random(parent1.shape) <= 0.5
        active[:, 0, :] = np.where(swap, c2, c1)
        active[:, 1, :] = np.where(swap, c1, c2)
        offspring[apply_mask] = active
        return offspring


class BinomialRecombination(RealOperator):
    """
    Binomial (DE-style) recombination between a mutant and its incumbent.

    Each coordinate comes from the mutant with probability ``rho``; one
    randomly chosen coordinate per row always does.
    """

    def __init__(self, rho: float = 0.5) -> None:
        if not 0.0 <= rho <= 1.0:
            raise ValueError("rho must lie in [0, 1].")
        self.rho = float(rho)

    def __call__(self, mutants: ArrayLike, incumbents: ArrayLike, rng: np.random.Generator) -> np.ndarray:
        V = self._as_population(mutants, name="mutants", copy=False)
        X = self._as_population(incumbents, name="incumbents", copy=False)
        if V.shape != X.shape:
            raise ValueError("mutants and incumbents must have the same shape.")
        n, d = V.shape
        if n == 0:
            return V.copy()
        take = rng.random((n, d)) <= self.rho
        forced = rng.integers(0, d, size=n)
        take[np.arange(n), forced] = True
        return np.where(take, V, X)


__all__ = ["SBXCrossover", "BinomialRecombination"]
