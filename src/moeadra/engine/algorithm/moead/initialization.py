"""
Setup for a MOEA/D run: weights, initial population, first evaluation and
the resource-allocation, archive and variation collaborators.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import numpy as np

from moeadra.engine.algorithm.components.aggregation import build_aggregator
from moeadra.engine.algorithm.components.archive import setup_archive
from moeadra.engine.algorithm.components.population import initialize_population
from moeadra.engine.algorithm.components.resource_allocation import init_priority_state
from moeadra.engine.algorithm.components.variation import build_variation_stack
from moeadra.engine.algorithm.components.weight_vectors import generate_weights
from moeadra.foundation.eval.backends import SerialEvalBackend
from moeadra.foundation.eval.evaluator import evaluate_population, resolve_bounds
from moeadra.foundation.exceptions import ConfigurationError, ProblemDimensionError

from .state import MOEADState

if TYPE_CHECKING:
    from moeadra.engine.config import MOEADConfigData
    from moeadra.foundation.eval import EvaluationBackend

_logger = logging.getLogger(__name__)


def resolve_seed(seed: int | None) -> int:
    """Return ``seed``, or fresh OS entropy when it is None."""
    if seed is None:
        return int(np.random.SeedSequence().entropy)
    seed = int(seed)
    if seed < 0:
        raise ConfigurationError(f"Seed must be a non-negative integer, got {seed}.")
    return seed


def initialize_moead_run(
    config: "MOEADConfigData",
    problem: Any,
    seed: int | None = None,
    eval_backend: "EvaluationBackend | None" = None,
) -> MOEADState:
    """Initialize all components for a MOEA/D run.

    Parameters
    ----------
    config : MOEADConfigData
        Validated configuration.
    problem : Any
        Problem exposing ``n_var``, ``n_obj``, ``xl``, ``xu`` and ``evaluate``.
    seed : int | None
        Random seed; drawn from OS entropy when None.
    eval_backend : EvaluationBackend | None
        Optional evaluation backend (serial by default).

    Returns
    -------
    MOEADState
        State after the initial population has been evaluated.
    """
    start = time.perf_counter()
    seed = resolve_seed(seed)
    rng = np.random.default_rng(seed)
    eval_backend = eval_backend or SerialEvalBackend()

    xl, xu = resolve_bounds(problem)
    n_var = int(problem.n_var)
    n_obj = int(problem.n_obj)
    if n_obj < 2:
        raise ProblemDimensionError(f"MOEA/D needs at least two objectives, got n_obj={n_obj}.", n_obj=n_obj)

    name, params = config.decomposition
    W = generate_weights(name, params, n_obj)
    N = W.shape[0]
    T = config.neighborhood_size
    if not 1 <= T < N:
        raise ConfigurationError(
            f"Neighborhood size T must satisfy 1 <= T < N (T={T}, N={N}).",
            suggestion="Reduce T or use a finer decomposition",
        )

    X = initialize_population(config.initializer[0], N, n_var, rng)
    Y, V, nfe = evaluate_population(X, problem, xl, xu, nfe=0, backend=eval_backend, epsilon=config.epsilon)

    priority = init_priority_state(W, config.resource_allocation[1])
    archive = setup_archive(config.archive, n_var, n_obj)

    state = MOEADState(
        problem=problem,
        xl=xl,
        xu=xu,
        W=W,
        X=X,
        Y=Y,
        V=V,
        rng=rng,
        seed=seed,
        nfe=nfe,
        priority=priority,
        variation=build_variation_stack(config.variation, n_var),
        aggregate=build_aggregator(*config.aggregation),
        eval_backend=eval_backend,
        archive=archive,
        start_time=start,
    )
    _logger.info(
        "MOEA/D setup: N=%d subproblems, T=%d, n_var=%d, n_obj=%d, seed=%d",
        N,
        T,
        n_var,
        n_obj,
        seed,
    )
    return state


__all__ = ["initialize_moead_run", "resolve_seed"]
