"""
VariationStack: an ordered sequence of variation steps.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np

from moeadra.engine.algorithm.components.variation.protocol import VariationContext, VariationStep
from moeadra.engine.algorithm.components.variation.steps import variation_registry
from moeadra.foundation.exceptions import CollaboratorContractError, ConfigurationError

_logger = logging.getLogger(__name__)


class VariationStack:
    """
    Applies each step in order to the active incumbents and sums the
    evaluations the steps report.
    """

    def __init__(self, steps: Sequence[tuple[str, VariationStep]]) -> None:
        self.steps = list(steps)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.steps]

    def __call__(self, X: np.ndarray, ctx: VariationContext) -> tuple[np.ndarray, int]:
        offspring = np.array(X, dtype=float, copy=True)
        expected = offspring.shape
        n_evals = 0
        for name, step in self.steps:
            result, used = step(offspring, ctx)
            result = np.asarray(result, dtype=float)
            if result.shape != expected:
                raise CollaboratorContractError(
                    f"variation step '{name}'",
                    f"returned offspring of shape {result.shape}, expected {expected}",
                )
            offspring = result
            n_evals += int(used)
        return offspring, n_evals


def build_variation_stack(config: Sequence[tuple[str, dict[str, Any]]], n_var: int) -> VariationStack:
    """Instantiate the configured steps for a problem with ``n_var`` variables."""
    steps: list[tuple[str, VariationStep]] = []
    for name, params in config:
        factory = variation_registry.get(name)
        try:
            step = factory(n_var, **dict(params))
        except TypeError as exc:
            raise ConfigurationError(
                f"Invalid parameters for variation step '{name}': {exc}",
                suggestion="Check the parameter names accepted by this operator",
            ) from exc
        steps.append((variation_registry.canonical(name), step))
    _logger.debug("Variation stack: %s", " -> ".join(name for name, _ in steps))
    return VariationStack(steps)


__all__ = ["VariationStack", "build_variation_stack"]
