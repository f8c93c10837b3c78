"""Small helpers shared by the MOEA/D components."""

from __future__ import annotations

import numpy as np


def resolve_prob_expression(
    value: str | float | None,
    n_var: int,
    default: float = 0.1,
) -> float:
    """
    Turn a per-variable probability setting into a float in [0, 1].

    ``None`` gives ``default``; strings of the form ``"k/n"`` (``"1/n"``, ``"2/n"``,
    ``"/n"``) are divided by ``n_var``; anything else is parsed as a number.
    Out-of-range results are clipped.

    Examples
    --------
    >>> resolve_prob_expression("2/n", 10)
    0.2
    """
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        if text.endswith("/n"):
            head = text[:-2].strip()
            prob = (float(head) if head else 1.0) / n_var
        else:
            prob = float(text)
    else:
        prob = float(value)
    return min(1.0, max(0.0, prob))


def stable_argsort_rows(keys: tuple[np.ndarray, ...]) -> np.ndarray:
    """
    Row-wise lexicographic argsort.

    ``keys`` are (N, K) arrays ordered from least to most significant, as in
    ``np.lexsort``; ties keep their original column order.
    """
    n_rows = keys[0].shape[0]
    return np.vstack([np.lexsort(tuple(k[i] for k in keys)) for i in range(n_rows)])


__all__ = ["resolve_prob_expression", "stable_argsort_rows"]
