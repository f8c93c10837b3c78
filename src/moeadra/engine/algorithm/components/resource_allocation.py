"""
Resource allocation: which subproblems receive variation and evaluation.

Policies are stateless functions. The run state (priorities, the lag
window and the delayed X/Y snapshots) lives in the orchestrator's
``PriorityState`` and is passed in explicitly.

Update rules
------------
``none``    every subproblem is active; priorities never change.
``random``  uniform random priorities, refreshed from the first iteration.
``norm``    distance travelled by each incumbent against the delayed X.
``ri``      relative improvement of the incumbent fitness against the
            delayed scalarization matrix.
``dra``     utility of Zhang, Liu & Li (2009), MOEA/D-DRA.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
import numpy as np

from moeadra.foundation.exceptions import CollaboratorContractError, ConfigurationError
from moeadra.foundation.registry import Registry

_logger = logging.getLogger(__name__)

allocation_registry: Registry = Registry("resource allocation")
selection_registry: Registry = Registry("selection")

# Rules that may run on the very first iteration.
NO_WARMUP = frozenset({"random"})

DRA_THRESHOLD = 0.001
_ZERO_GUARD = 1e-16


@dataclass(frozen=True)
class Allocation:
    """Active subproblem indices (sorted) and the N-long usage mask they came from."""

    active: np.ndarray
    usage: np.ndarray


@dataclass(frozen=True)
class PriorityInputs:
    """Everything an update rule may read, current and delayed."""

    iteration: int
    bigZ: np.ndarray
    delayed_bigZ: np.ndarray
    neighborhood_size: int
    Y: np.ndarray
    delayed_Y: np.ndarray
    W: np.ndarray
    X: np.ndarray
    delayed_X: np.ndarray
    rng: np.random.Generator


class LagWindow:
    """
    Fixed-depth ring buffer of scalarization matrices.

    ``exchange`` returns the snapshot stored ``depth`` pushes ago (or the
    incoming one while that slot is still empty) and stores the incoming
    matrix in its place.
    """

    def __init__(self, depth: int) -> None:
        if int(depth) < 1:
            raise ConfigurationError(f"Lag window depth dt must be >= 1, got {depth}.")
        self.depth = int(depth)
        self.head = 0
        self._slots: list[np.ndarray | None] = [None] * self.depth

    def peek(self) -> np.ndarray | None:
        return self._slots[self.head]

    def exchange(self, bigZ: np.ndarray) -> np.ndarray:
        stored = self._slots[self.head]
        delayed = bigZ if stored is None else stored
        self._slots[self.head] = bigZ.copy()
        self.head = (self.head + 1) % self.depth
        return delayed

    @property
    def filled(self) -> int:
        return sum(slot is not None for slot in self._slots)


@dataclass
class PriorityState:
    """Per-subproblem priorities plus the history the update rules compare against."""

    priorities: np.ndarray
    boundary: np.ndarray
    window: LagWindow
    delayed_X: np.ndarray | None = None
    delayed_Y: np.ndarray | None = None
    usage_history: list[np.ndarray] = field(default_factory=list)


def boundary_indices(W: np.ndarray) -> np.ndarray:
    """Index of the largest weight in each objective column (the extreme subproblems)."""
    return np.unique(np.argmax(W, axis=0))


def init_priority_state(W: np.ndarray, params: dict) -> PriorityState:
    N = W.shape[0]
    return PriorityState(
        priorities=np.ones(N, dtype=float),
        boundary=boundary_indices(W),
        window=LagWindow(params.get("dt", 2)),
    )


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


@selection_registry.register("all")
def select_all(priorities: np.ndarray, boundary: np.ndarray, rng: np.random.Generator, **_) -> np.ndarray:
    return np.ones(priorities.shape[0], dtype=bool)


@selection_registry.register("priority")
def select_by_priority(priorities: np.ndarray, boundary: np.ndarray, rng: np.random.Generator, **_) -> np.ndarray:
    """Subproblem ``i`` is selected when a uniform draw falls below its priority."""
    mask = rng.random(priorities.shape[0]) < priorities
    mask[boundary] = True
    return mask


@selection_registry.register("top")
def select_top(
    priorities: np.ndarray, boundary: np.ndarray, rng: np.random.Generator, n: int | None = None, **_
) -> np.ndarray:
    """The ``n`` highest priorities, boundary subproblems included on top."""
    N = priorities.shape[0]
    n = _resolve_n(n, N)
    mask = np.zeros(N, dtype=bool)
    mask[boundary] = True
    order = np.argsort(-priorities, kind="stable")
    for i in order:
        if mask.sum() >= n:
            break
        mask[i] = True
    return mask


@selection_registry.register("tournament")
def select_tournament(
    priorities: np.ndarray,
    boundary: np.ndarray,
    rng: np.random.Generator,
    n: int | None = None,
    tour: int = 10,
    **_,
) -> np.ndarray:
    """DRA tournament selection: boundary subproblems, then the best of ``tour`` random candidates until ``n``."""
    N = priorities.shape[0]
    n = _resolve_n(n, N)
    mask = np.zeros(N, dtype=bool)
    mask[boundary] = True
    candidates = [i for i in range(N) if not mask[i]]
    selected = int(mask.sum())
    while selected < n and candidates:
        best = int(rng.integers(len(candidates)))
        for _ in range(1, tour):
            challenger = int(rng.integers(len(candidates)))
            if priorities[candidates[challenger]] > priorities[candidates[best]]:
                best = challenger
        mask[candidates.pop(best)] = True
        selected += 1
    return mask


def _resolve_n(n: int | None, N: int) -> int:
    if n is None:
        return max(1, N // 5)
    return min(int(n), N)


def select_active(
    name: str,
    params: dict,
    priorities: np.ndarray,
    boundary: np.ndarray,
    rng: np.random.Generator,
) -> Allocation:
    """Pick this iteration's active subproblems."""
    if allocation_registry.canonical(name) == "none":
        usage = select_all(priorities, boundary, rng)
    else:
        selection = selection_registry.get(params.get("selection", "priority"))
        usage = selection(priorities, boundary, rng, n=params.get("n"), tour=params.get("tour", 10))
    return Allocation(active=np.flatnonzero(usage), usage=usage)


# ---------------------------------------------------------------------------
# Priority update rules
# ---------------------------------------------------------------------------

@allocation_registry.register("none")
def update_none(priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    return priorities


@allocation_registry.register("random")
def update_random(priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    return inputs.rng.random(priorities.shape[0])


@allocation_registry.register("norm")
def update_norm(priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    """Distance each incumbent moved since the delayed snapshot, scaled by the largest move."""
    dist = np.linalg.norm(inputs.X - inputs.delayed_X, axis=1)
    return _scaled_or_previous(dist, priorities)


@allocation_registry.register("ri")
def update_relative_improvement(priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    """Relative improvement of the incumbent fitness row, scaled by the largest improvement."""
    improvement = np.maximum(_relative_improvement(inputs), 0.0)
    return _scaled_or_previous(improvement, priorities)


@allocation_registry.register("dra")
def update_dra(priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    """
    MOEA/D-DRA utility.

    Utility is reset to 1 when the relative improvement exceeds 0.001 and
    otherwise scaled by ``0.95 + 0.05 * delta / 0.001``, capped at 1.
    """
    delta = _relative_improvement(inputs)
    decayed = np.minimum((0.95 + 0.05 * delta / DRA_THRESHOLD) * priorities, 1.0)
    return np.where(delta > DRA_THRESHOLD, 1.0, decayed)


def _relative_improvement(inputs: PriorityInputs) -> np.ndarray:
    T = inputs.neighborhood_size
    old = inputs.delayed_bigZ[T]
    new = inputs.bigZ[T]
    denom = np.where(np.abs(old) > _ZERO_GUARD, old, _ZERO_GUARD)
    return (old - new) / denom


def _scaled_or_previous(values: np.ndarray, priorities: np.ndarray) -> np.ndarray:
    top = float(np.max(values)) if values.size else 0.0
    if top <= 0.0:
        _logger.debug("No progress signal for resource allocation; priorities unchanged.")
        return priorities
    return values / top


def needs_update(name: str, iteration: int) -> bool:
    """Update rules run from iteration 2, or from iteration 1 when they need no warm-up."""
    key = allocation_registry.canonical(name)
    if key == "none":
        return False
    return iteration > 1 or key in NO_WARMUP


def update_priorities(name: str, priorities: np.ndarray, inputs: PriorityInputs) -> np.ndarray:
    rule = allocation_registry.get(name)
    new = np.asarray(rule(priorities, inputs), dtype=float)
    if new.shape != priorities.shape:
        raise CollaboratorContractError("resource allocation", f"rule '{name}' returned priorities of shape {new.shape}")
    return new


def validate_allocation_params(name: str, params: dict) -> None:
    key = allocation_registry.canonical(name)
    allowed = {"selection", "n", "dt", "tour"}
    unknown = set(params) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown parameters {sorted(unknown)} for resource allocation '{name}'.")
    if key != "none":
        selection_registry.canonical(params.get("selection", "priority"))
    if int(params.get("dt", 2)) < 1:
        raise ConfigurationError("Resource allocation dt must be >= 1.")
    if params.get("n") is not None and int(params["n"]) < 1:
        raise ConfigurationError("Resource allocation n must be >= 1.")
    if int(params.get("tour", 10)) < 1:
        raise ConfigurationError("Resource allocation tour must be >= 1.")


__all__ = [
    "Allocation",
    "PriorityInputs",
    "PriorityState",
    "LagWindow",
    "allocation_registry",
    "selection_registry",
    "boundary_indices",
    "init_priority_state",
    "select_active",
    "needs_update",
    "update_priorities",
    "validate_allocation_params",
]
