"""
Variation steps wrapping the real-coded operator kernels.

All steps work in the normalized decision space [0, 1]^D.
"""

from __future__ import annotations

import numpy as np

from moeadra.engine.algorithm.components.utils import resolve_prob_expression
from moeadra.engine.algorithm.components.variation.protocol import VariationContext
from moeadra.foundation.exceptions import ConfigurationError
from moeadra.foundation.registry import Registry
from moeadra.operators.real import (
    BinomialRecombination,
    DifferentialMutation,
    PolynomialMutation,
    SBXCrossover,
    reflect,
    truncate,
)

variation_registry: Registry = Registry("variation")


def draw_mates(P_row: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``k`` distinct population indices with probabilities ``P_row``.

    Falls back to drawing with replacement when fewer than ``k`` indices
    have positive probability.
    """
    p = P_row / P_row.sum()
    replace = np.count_nonzero(p) < k
    return rng.choice(p.shape[0], size=k, replace=replace, p=p)


@variation_registry.register("sbx")
class SBXStep:
    """SBX between two mates drawn from each active row of ``P``; the first child is kept."""

    def __init__(self, n_var: int, eta: float = 20.0, pc: float = 1.0) -> None:
        if not 0.0 <= float(pc) <= 1.0:
            raise ConfigurationError(f"sbx: pc must lie in [0, 1], got {pc}.")
        self.operator = SBXCrossover(pc, eta, lower=np.zeros(n_var), upper=np.ones(n_var))

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        n_active = X.shape[0]
        mates = np.vstack([draw_mates(ctx.P[k], 2, ctx.rng) for k in range(n_active)])
        parents = ctx.population[mates]
        children = self.operator(parents, ctx.rng)
        return children[:, 0, :], 0


@variation_registry.register("polymut", aliases=("polynomial", "pm"))
class PolynomialMutationStep:
    """Polynomial mutation with per-variable probability ``pm``."""

    def __init__(self, n_var: int, eta: float = 20.0, pm: float | str = "1/n") -> None:
        prob = resolve_prob_expression(pm, n_var, default=1.0 / n_var)
        self.operator = PolynomialMutation(prob, eta, lower=np.zeros(n_var), upper=np.ones(n_var))

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        return self.operator(X, ctx.rng), 0


@variation_registry.register("diffmut", aliases=("de",))
class DifferentialMutationStep:
    """
    Differential mutation ``x_b + phi * (x_r2 - x_r3)``.

    With basis ``rand`` the three vectors are distinct draws from the row of
    ``P``; with basis ``mean`` the basis is the neighborhood mean.
    """

    def __init__(self, n_var: int, basis: str = "rand", phi: float | None = None) -> None:
        basis = str(basis).lower()
        if basis not in {"rand", "mean"}:
            raise ConfigurationError(f"diffmut: basis must be 'rand' or 'mean', got '{basis}'.")
        self.basis = basis
        self.operator = DifferentialMutation(phi)

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        n_active = X.shape[0]
        draws = np.vstack([draw_mates(ctx.P[k], 3, ctx.rng) for k in range(n_active)])
        pool = ctx.population
        if self.basis == "mean":
            basis = pool[ctx.B].mean(axis=1)
        else:
            basis = pool[draws[:, 0]]
        return self.operator(basis, pool[draws[:, 1]], pool[draws[:, 2]], ctx.rng), 0


@variation_registry.register("binrec", aliases=("binomial",))
class BinomialRecombinationStep:
    """Binomial recombination of the working offspring with the active incumbents."""

    def __init__(self, n_var: int, rho: float = 0.5) -> None:
        try:
            self.operator = BinomialRecombination(rho)
        except ValueError as exc:
            raise ConfigurationError(f"binrec: {exc}") from exc

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        return self.operator(X, ctx.incumbents, ctx.rng), 0


@variation_registry.register("truncate", aliases=("clip",))
class TruncateRepair:
    def __init__(self, n_var: int) -> None:
        self.n_var = n_var

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        return truncate(X), 0


@variation_registry.register("reflect")
class ReflectRepair:
    def __init__(self, n_var: int) -> None:
        self.n_var = n_var

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        return reflect(X), 0


@variation_registry.register("none", aliases=("identity",))
class IdentityStep:
    def __init__(self, n_var: int) -> None:
        self.n_var = n_var

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        return X.copy(), 0


__all__ = [
    "variation_registry",
    "draw_mates",
    "SBXStep",
    "PolynomialMutationStep",
    "DifferentialMutationStep",
    "BinomialRecombinationStep",
    "TruncateRepair",
    "ReflectRepair",
    "IdentityStep",
]
