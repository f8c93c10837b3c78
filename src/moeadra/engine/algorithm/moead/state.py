"""
MOEA/D run state.

``MOEADState`` holds every mutable quantity of a run and is owned by the
orchestrator. Collaborators never see it; the ones that need counters get a
frozen ``RunContext`` built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from moeadra.foundation.constraints.utils import ConstraintInfo

if TYPE_CHECKING:
    from moeadra.engine.algorithm.components.archive import CrowdingDistanceArchive
    from moeadra.engine.algorithm.components.aggregation import Aggregator
    from moeadra.engine.algorithm.components.resource_allocation import PriorityState
    from moeadra.engine.algorithm.components.variation import VariationStack
    from moeadra.foundation.eval import EvaluationBackend


@dataclass(frozen=True)
class RunContext:
    """Read-only view of the run counters handed to stop criteria and reporting."""

    version = 1

    iteration: int
    nfe: int
    elapsed: float
    iteration_times: tuple[float, ...]
    N: int
    T: int


@dataclass
class MOEADState:
    """
    Mutable state container for a MOEA/D run.

    Attributes
    ----------
    problem : Any
        The problem being solved.
    xl, xu : np.ndarray
        Problem bounds; the population itself lives in [0, 1]^D.
    W : np.ndarray
        Weight vectors, shape (N, n_obj). Row ``i`` is subproblem ``i``.
    X : np.ndarray
        Normalized incumbents, shape (N, n_var).
    Y : np.ndarray
        Incumbent objectives, shape (N, n_obj).
    V : ConstraintInfo | None
        Incumbent constraint information (None when unconstrained).
    rng : np.random.Generator
        Single random stream for the whole run.
    seed : int
        Seed the stream was created from.
    nfe : int
        Evaluations performed so far, initial population included.
    iteration : int
        Completed iterations.
    iteration_times : list[float]
        Wall-clock seconds spent in each completed iteration.
    priority : PriorityState
        Resource allocation priorities, lag window and delayed snapshots.
    archive : CrowdingDistanceArchive | None
        Optional bounded archive.
    """

    problem: Any
    xl: np.ndarray
    xu: np.ndarray
    W: np.ndarray
    X: np.ndarray
    Y: np.ndarray
    V: ConstraintInfo | None
    rng: np.random.Generator
    seed: int
    nfe: int
    priority: "PriorityState"
    variation: "VariationStack"
    aggregate: "Aggregator"
    eval_backend: "EvaluationBackend"
    archive: "CrowdingDistanceArchive | None" = None
    iteration: int = 0
    start_time: float = 0.0
    iteration_times: list[float] = field(default_factory=list)
    trace: list[tuple[int, np.ndarray]] = field(default_factory=list)
    stopped: bool = False

    @property
    def N(self) -> int:
        return int(self.W.shape[0])

    @property
    def elapsed(self) -> float:
        return float(sum(self.iteration_times))

    def context(self, T: int) -> RunContext:
        return RunContext(
            iteration=self.iteration,
            nfe=self.nfe,
            elapsed=self.elapsed,
            iteration_times=tuple(self.iteration_times),
            N=self.N,
            T=int(T),
        )


@dataclass(frozen=True)
class IterationRecord:
    """
    What one call to :meth:`MOEAD.step` did.

    ``B`` is the neighbor table the scalarization matrix ``bigZ`` was built
    from (the pass-2 table). ``rank_B`` is the table ranking and update used;
    it equals ``B`` unless reduced pressure is on, in which case it holds
    only each subproblem itself.
    """

    iteration: int
    active: np.ndarray
    usage: np.ndarray
    B: np.ndarray
    rank_B: np.ndarray
    bigZ: np.ndarray
    n_evaluated: int
    nfe: int
    elapsed: float
    stop: bool


__all__ = ["RunContext", "MOEADState", "IterationRecord"]
