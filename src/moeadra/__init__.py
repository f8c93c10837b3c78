"""
moeadra: MOEA/D with pluggable components and resource allocation.

Quick start::

    from moeadra import MOEAD, MOEADConfig, make_problem

    cfg = MOEADConfig.preset("moead.dra").decomposition("sld", H=99).stop(maxeval=30000).fixed()
    result = MOEAD(cfg).run(make_problem("zdt1"), seed=1)
    result.summary()
"""

from moeadra.engine.algorithm.moead import MOEAD, IterationRecord, RunContext
from moeadra.engine.config import MOEADConfig, MOEADConfigData, available_presets, load_run_spec
from moeadra.experiment.optimization_result import ArchiveResult, MOEADResult
from moeadra.foundation.exceptions import (
    BoundsError,
    CollaboratorContractError,
    ConfigurationError,
    DegenerateStateError,
    InvalidStrategyError,
    MissingConfigError,
    MOEADError,
    OptimizationError,
    ProblemDimensionError,
    ProblemError,
)
from moeadra.foundation.logging import configure_moeadra_logging
from moeadra.foundation.problem import Problem, available_problem_names, make_problem

__version__ = "0.1.0"

__all__ = [
    "MOEAD",
    "MOEADConfig",
    "MOEADConfigData",
    "MOEADResult",
    "ArchiveResult",
    "IterationRecord",
    "RunContext",
    "available_presets",
    "load_run_spec",
    "Problem",
    "make_problem",
    "available_problem_names",
    "configure_moeadra_logging",
    "MOEADError",
    "ConfigurationError",
    "InvalidStrategyError",
    "MissingConfigError",
    "ProblemError",
    "BoundsError",
    "ProblemDimensionError",
    "OptimizationError",
    "CollaboratorContractError",
    "DegenerateStateError",
]
