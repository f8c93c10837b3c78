"""Real-coded mutation operators."""

from __future__ import annotations

import numpy as np

from .utils import ArrayLike, RealOperator, _ensure_bounds


class PolynomialMutation(RealOperator):
    """Standard polynomial mutation (Deb & Goyal)."""

    def __init__(
        self,
        prob_mutation: float,
        eta: float = 20.0,
        *,
        lower: ArrayLike,
        upper: ArrayLike,
    ) -> None:
        self.prob = float(prob_mutation)
        self.eta = float(eta)
        self.lower, self.upper = _ensure_bounds(lower, upper)
        self.span = self.upper - self.lower
        self._span_safe = np.where(self.span == 0.0, 1.0, self.span)

    def __call__(self, offspring: ArrayLike, rng: np.random.Generator) -> ArrayLike:
        X = self._as_population(offspring, name="offspring", copy=True)
        n_ind, n_var = X.shape
        if n_ind == 0:
            return X
        self._check_bounds_match(X, self.lower)
        mask = rng.random((n_ind, n_var)) <= self.prob
        rows, cols = np.nonzero(mask)
        if rows.size == 0:
            return X

        yl = self.lower
        yu = self.upper
        values = X[rows, cols].copy()
        span_vals = self.span[cols]
        span_safe = self._span_safe[cols]
        delta1 = (values - yl[cols]) / span_safe
        delta2 = (yu[cols] - values) / span_safe
        rnd = rng.random(rows.size)
        mut_pow = 1.0 / (self.eta + 1.0)
        deltaq = np.zeros(rows.size, dtype=float)

        idx_lower = rnd <= 0.5
        idx_upper = ~idx_lower
        if np.any(idx_lower):
            xy = 1.0 - delta1[idx_lower]
            val = 2.0 * rnd[idx_lower] + (1.0 - 2.0 * rnd[idx_lower]) * np.power(xy, self.eta + 1.0)
            deltaq[idx_lower] = np.power(val, mut_pow) - 1.0
        if np.any(idx_upper):
            xy = 1.0 - delta2[idx_upper]
            val = 2.0 * (1.0 - rnd[idx_upper]) + 2.0 * (rnd[idx_upper] - 0.5) * np.power(xy, self.eta + 1.0)
            deltaq[idx_upper] = 1.0 - np.power(val, mut_pow)

        values = np.clip(values + deltaq * span_vals, yl[cols], yu[cols])
        X[rows, cols] = values
        return X


class DifferentialMutation(RealOperator):
    """
    Differential mutation ``x_b + phi * (x_r2 - x_r3)``.

    The caller supplies the basis vectors and the two difference vectors;
    ``phi`` is drawn uniformly from [0, 1] per row when not fixed.
    """

    def __init__(self, phi: float | None = None) -> None:
        self.phi = None if phi is None else float(phi)

    def __call__(
        self,
        basis: ArrayLike,
        r2: ArrayLike,
        r3: ArrayLike,
        rng: np.random.Generator,
    ) -> np.ndarray:
        Xb = self._as_population(basis, name="basis", copy=False)
        X2 = self._as_population(r2, name="r2", copy=False)
        X3 = self._as_population(r3, name="r3", copy=False)
        if self.phi is None:
            phi = rng.random((Xb.shape[0], 1))
        else:
            phi = self.phi
        return Xb + phi * (X2 - X3)


__all__ = ["PolynomialMutation", "DifferentialMutation"]
