"""
MOEA/D iteration orchestrator.

This module contains the MOEAD class with the iteration loop.
- Setup logic: initialization.py
- Run state: state.py
- Strategies: moeadra.engine.algorithm.components

Every iteration runs the same fixed sequence: select active subproblems,
build neighborhoods, vary, rebuild neighborhoods, evaluate, scale,
scalarize, rank, update, refresh priorities, bookkeep and check the stop
criteria. Only the orchestrator mutates the run state.

References:
    Q. Zhang and H. Li, "MOEA/D: A Multiobjective Evolutionary Algorithm Based on
    Decomposition," IEEE Trans. Evolutionary Computation, vol. 11, no. 6, 2007.

    Q. Zhang, W. Liu and H. Li, "The performance of a new version of MOEA/D on
    CEC09 unconstrained MOP test instances," IEEE CEC, 2009.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np

from moeadra.engine.algorithm.components.aggregation import scalarize
from moeadra.engine.algorithm.components.neighborhood import build_neighborhood
from moeadra.engine.algorithm.components.progress import report_progress
from moeadra.engine.algorithm.components.ranking import rank_neighborhoods
from moeadra.engine.algorithm.components.resource_allocation import (
    PriorityInputs,
    needs_update,
    select_active,
    update_priorities,
)
from moeadra.engine.algorithm.components.scaling import estimate_bounds, scale_objectives
from moeadra.engine.algorithm.components.termination import check_stop_criteria
from moeadra.engine.algorithm.components.update import update_population
from moeadra.engine.algorithm.components.variation import VariationContext
from moeadra.engine.config import MOEADConfig, MOEADConfigData
from moeadra.experiment.optimization_result import ArchiveResult, MOEADResult, build_trace
from moeadra.foundation.constraints.utils import ConstraintInfo
from moeadra.foundation.eval.evaluator import denormalize_population, evaluate_population
from moeadra.foundation.exceptions import CollaboratorContractError, DegenerateStateError

from .initialization import initialize_moead_run
from .state import IterationRecord, MOEADState

if TYPE_CHECKING:
    from moeadra.foundation.eval import EvaluationBackend

_logger = logging.getLogger(__name__)


class MOEAD:
    """
    Multi-Objective Evolutionary Algorithm based on Decomposition with
    optional resource allocation.

    Parameters
    ----------
    config : MOEADConfigData | MOEADConfig | Mapping | None
        Validated configuration, a builder (fixed on construction) or a plain
        mapping (see :meth:`MOEADConfig.from_dict`). ``None`` uses the
        library defaults.

    Examples
    --------
    >>> from moeadra import MOEAD, MOEADConfig, make_problem
    >>> cfg = MOEADConfig.preset("moead.de").decomposition("sld", H=49).stop(maxiter=50).fixed()
    >>> result = MOEAD(cfg).run(make_problem("zdt1"), seed=42)

    Stepping through a run:
    >>> algo = MOEAD(cfg).setup(make_problem("zdt1"), seed=42)
    >>> while not algo.finished:
    ...     record = algo.step()
    >>> result = algo.result()
    """

    def __init__(self, config: MOEADConfigData | MOEADConfig | Mapping[str, Any] | None = None) -> None:
        if config is None:
            config = MOEADConfig.default()
        elif isinstance(config, MOEADConfig):
            config = config.fixed()
        elif isinstance(config, Mapping):
            config = MOEADConfig.from_dict(config)
        self.cfg: MOEADConfigData = config
        self._st: MOEADState | None = None

    @property
    def state(self) -> MOEADState | None:
        return self._st

    @property
    def finished(self) -> bool:
        return self._st is not None and self._st.stopped

    def run(
        self,
        problem: Any,
        seed: int | None = None,
        eval_backend: "EvaluationBackend | None" = None,
    ) -> MOEADResult:
        """
        Run MOEA/D until a stop criterion fires.

        Parameters
        ----------
        problem : Any
            The optimization problem to solve.
        seed : int | None
            Random seed for reproducibility; drawn from OS entropy when None.
        eval_backend : EvaluationBackend | None
            Optional evaluation backend for parallel evaluation.

        Returns
        -------
        MOEADResult
            Final population, archive, counters and trace.
        """
        self.setup(problem, seed, eval_backend)
        while not self.finished:
            self.step()
        return self.result()

    def setup(
        self,
        problem: Any,
        seed: int | None = None,
        eval_backend: "EvaluationBackend | None" = None,
    ) -> "MOEAD":
        """Initialize a fresh run state (weights, population, first evaluation)."""
        self._st = initialize_moead_run(self.cfg, problem, seed, eval_backend)
        return self

    def step(self) -> IterationRecord:
        """
        Perform one full iteration.

        Raises
        ------
        RuntimeError
            If called before ``setup`` or after the run finished.
        """
        st = self._st
        if st is None:
            raise RuntimeError("step() called before setup().")
        if st.stopped:
            raise RuntimeError("step() called after the run finished.")

        cfg = self.cfg
        st.iteration += 1
        it = st.iteration
        T = cfg.neighborhood_size
        nb_name, nb_params = cfg.neighborhood
        ra_name, ra_params = cfg.resource_allocation

        # select
        allocation = select_active(ra_name, ra_params, st.priority.priorities, st.priority.boundary, st.rng)
        active = allocation.active
        if active.size == 0:
            raise DegenerateStateError("Resource allocation selected no subproblem.", iteration=it)
        st.priority.usage_history.append(allocation.usage.copy())

        X_prev, Y_prev, V_prev = st.X, st.Y, st.V

        # neighborhoods for mating
        hood = build_neighborhood(nb_name, nb_params, st.W, X_prev)

        # vary the active incumbents; inactive rows keep theirs
        ctx = VariationContext(
            population=X_prev,
            active=active,
            B=hood.B[active],
            P=hood.P[active],
            rng=st.rng,
            iteration=it,
        )
        offspring, var_evals = st.variation(X_prev[active], ctx)
        st.nfe += int(var_evals)
        X_work = X_prev.copy()
        X_work[active] = offspring

        # neighborhoods reflecting the offspring
        hood = build_neighborhood(nb_name, nb_params, st.W, X_work)

        nfe_before = st.nfe
        Y_new, V_new, st.nfe = evaluate_population(
            offspring, st.problem, st.xl, st.xu, nfe=st.nfe, backend=st.eval_backend, epsilon=cfg.epsilon
        )
        Y_work = Y_prev.copy()
        Y_work[active] = Y_new
        V_work = _scatter_constraints(V_prev, active, V_new)

        scaled = scale_objectives(cfg.scaling[0], Y_work, Y_prev, V_work, V_prev)
        bigZ = scalarize(st.aggregate, scaled.Y, scaled.Y_prev, st.W, hood.B, scaled.ideal, scaled.nadir)

        rank_B, rank_Z = hood.B, bigZ
        if cfg.reduced_pressure:
            rank_B = build_neighborhood(nb_name, nb_params, st.W, X_work, T=1).B
            rank_Z = scalarize(st.aggregate, scaled.Y, scaled.Y_prev, st.W, rank_B, scaled.ideal, scaled.nadir)
        order = rank_neighborhoods(*cfg.constraint, rank_Z, rank_B, V_work, V_prev, st.rng)
        expected = (st.N, rank_B.shape[1] + 1)
        if order.shape != expected:
            raise CollaboratorContractError("ranking", f"order matrix has shape {order.shape}, expected {expected}")

        updated = update_population(
            *cfg.update, order, rank_B, active, X_work, Y_work, V_work, X_prev, Y_prev, V_prev
        )
        st.X, st.Y, st.V = updated.X, updated.Y, updated.V
        if st.archive is not None:
            st.archive.update(st.X, st.Y, st.V)

        self._update_priorities(it, bigZ, T)

        st.trace.append((it, st.Y.copy()))
        now = time.perf_counter()
        st.iteration_times.append(now - st.start_time - st.elapsed)
        report_progress(st.iteration_times, *cfg.show)
        if cfg.debug_snapshot_dir:
            self._write_snapshot(Path(cfg.debug_snapshot_dir), it, bigZ, hood.B, active)

        st.stopped = check_stop_criteria(cfg.stop_criteria, st.context(T))
        if st.stopped:
            _logger.info("MOEA/D finished after %d iterations (nfe=%d).", it, st.nfe)
        else:
            _logger.debug(
                "Iteration %d: %d active, %d replaced, nfe=%d", it, active.size, int(updated.replaced.sum()), st.nfe
            )

        return IterationRecord(
            iteration=it,
            active=active,
            usage=allocation.usage,
            B=hood.B,
            rank_B=rank_B,
            bigZ=bigZ,
            n_evaluated=int(var_evals) + (st.nfe - nfe_before),
            nfe=st.nfe,
            elapsed=st.elapsed,
            stop=st.stopped,
        )

    def _update_priorities(self, iteration: int, bigZ: np.ndarray, T: int) -> None:
        st = self._st
        assert st is not None
        ra_name = self.cfg.resource_allocation[0]
        priority = st.priority

        delayed_bigZ = priority.window.exchange(bigZ)
        delayed_X = priority.delayed_X if priority.delayed_X is not None else st.X
        delayed_Y = priority.delayed_Y if priority.delayed_Y is not None else st.Y
        if needs_update(ra_name, iteration):
            inputs = PriorityInputs(
                iteration=iteration,
                bigZ=bigZ,
                delayed_bigZ=delayed_bigZ,
                neighborhood_size=T,
                Y=st.Y,
                delayed_Y=delayed_Y,
                W=st.W,
                X=st.X,
                delayed_X=delayed_X,
                rng=st.rng,
            )
            priority.priorities = update_priorities(ra_name, priority.priorities, inputs)
        priority.delayed_X = st.X.copy()
        priority.delayed_Y = st.Y.copy()

    def _write_snapshot(self, directory: Path, iteration: int, bigZ: np.ndarray, B: np.ndarray, active: np.ndarray) -> None:
        st = self._st
        assert st is not None
        directory.mkdir(parents=True, exist_ok=True)
        np.savez(
            directory / f"iter_{iteration:05d}.npz",
            X=st.X,
            Y=st.Y,
            bigZ=bigZ,
            B=B,
            active=active,
            priorities=st.priority.priorities,
        )

    def result(self) -> MOEADResult:
        """Assemble the result from the current state (denormalized X, labeled frames)."""
        st = self._st
        if st is None:
            raise RuntimeError("result() called before setup().")
        if not st.stopped:
            _logger.warning("Building a result before any stop criterion fired (iteration %d).", st.iteration)

        feasible = st.V.feasible if st.V is not None else np.ones(st.N, dtype=bool)
        if not np.any(feasible):
            _logger.warning("No feasible solution in the final population; ideal/nadir use all rows.")
            feasible = np.ones(st.N, dtype=bool)
        ideal, nadir = estimate_bounds(st.Y[feasible], st.Y[feasible])

        archive = None
        if st.archive is not None:
            contents = st.archive.contents()
            archive = ArchiveResult(
                X=denormalize_population(contents.X, st.xl, st.xu),
                Y=contents.Y,
                V=contents.V,
                W=st.W.copy(),
            )

        usage = (
            np.vstack(st.priority.usage_history)
            if st.priority.usage_history
            else np.zeros((0, st.N), dtype=bool)
        )
        return MOEADResult(
            X=denormalize_population(st.X, st.xl, st.xu),
            Y=st.Y.copy(),
            V=st.V.copy() if st.V is not None else None,
            W=st.W.copy(),
            archive=archive,
            ideal=ideal,
            nadir=nadir,
            nfe=int(st.nfe),
            n_iter=int(st.iteration),
            time=time.perf_counter() - st.start_time,
            seed=int(st.seed),
            input_config=self.cfg.to_dict(),
            trace=build_trace(st.trace, st.Y.shape[1]),
            iteration_times=np.asarray(st.iteration_times, dtype=float),
            usage=usage,
            meta={"problem": type(st.problem).__name__},
        )


def _scatter_constraints(
    V_prev: ConstraintInfo | None, active: np.ndarray, V_new: ConstraintInfo | None
) -> ConstraintInfo | None:
    if V_prev is None and V_new is None:
        return None
    if V_prev is None or V_new is None:
        raise CollaboratorContractError("evaluator", "constraint information appeared or vanished between evaluations")
    return V_prev.scatter(active, V_new)


__all__ = ["MOEAD"]
