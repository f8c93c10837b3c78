"""
Real-coded operator kernels working on NumPy arrays.
"""

from .crossover import BinomialRecombination, SBXCrossover
from .initialize import LatinHypercubeInitializer, UniformInitializer
from .mutation import DifferentialMutation, PolynomialMutation
from .repair import reflect, truncate

__all__ = [
    "SBXCrossover",
    "BinomialRecombination",
    "PolynomialMutation",
    "DifferentialMutation",
    "LatinHypercubeInitializer",
    "UniformInitializer",
    "truncate",
    "reflect",
]
