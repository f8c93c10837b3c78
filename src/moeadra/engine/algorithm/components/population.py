from __future__ import annotations

import numpy as np

from moeadra.foundation.registry import Registry
from moeadra.operators.real import LatinHypercubeInitializer, UniformInitializer

initializer_registry: Registry = Registry("initializer")
initializer_registry.register("random", UniformInitializer, aliases=("uniform",))
initializer_registry.register("lhs", LatinHypercubeInitializer, aliases=("latin_hypercube",))


def initialize_population(name: str, pop_size: int, n_var: int, rng: np.random.Generator) -> np.ndarray:
    """Sample ``pop_size`` normalized decision vectors in [0, 1]^n_var."""
    if pop_size <= 0:
        raise ValueError("pop_size must be positive.")
    factory = initializer_registry.get(name)
    return factory(pop_size, np.zeros(n_var), np.ones(n_var), rng)()


__all__ = ["initializer_registry", "initialize_population"]
