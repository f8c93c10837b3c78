from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Sequence, overload

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from moeadra.foundation.constraints.utils import ConstraintInfo
from moeadra.foundation.metrics.pareto import pareto_filter


def _logger() -> logging.Logger:
    return logging.getLogger("moeadra.experiment.result")


def objective_labels(n_obj: int) -> list[str]:
    return [f"f{i + 1}" for i in range(int(n_obj))]


def variable_labels(n_var: int) -> list[str]:
    return [f"x{i + 1}" for i in range(int(n_var))]


def build_trace(trace: Sequence[tuple[int, np.ndarray]], n_obj: int) -> pd.DataFrame:
    """Stack per-iteration objective matrices into one frame tagged by ``stage``."""
    columns = objective_labels(n_obj)
    if not trace:
        return pd.DataFrame(columns=[*columns, "stage"])
    frames = []
    for stage, Y in trace:
        frame = pd.DataFrame(np.asarray(Y, dtype=float), columns=columns)
        frame["stage"] = int(stage)
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


@dataclass
class ArchiveResult:
    """Archive members in the problem's own bounds (``X``) with labels taken from ``W``."""

    X: NDArray[Any]
    Y: NDArray[Any]
    V: ConstraintInfo | None
    W: NDArray[Any]

    def __len__(self) -> int:
        return int(self.Y.shape[0])

    def to_dataframe(self) -> pd.DataFrame:
        return _labeled_frame(self.X, self.Y)


@dataclass
class MOEADResult:
    """
    Final state of a MOEA/D run.

    Attributes:
        X: Decision variables in problem bounds (N, n_var); row ``i`` solves subproblem ``i``
        Y: Objective values (N, n_obj)
        V: Constraint information, None for unconstrained problems
        W: Weight vectors (N, n_obj)
        archive: Archive contents, None when archiving is disabled
        ideal, nadir: Column-wise min/max of the feasible rows of ``Y``
        nfe: Function evaluations spent, initial population included
        n_iter: Iterations performed
        time: Wall-clock seconds, setup included
        seed: Seed of the run's random stream
        input_config: The resolved configuration
        trace: Objective values of every iteration, column ``stage`` holds the iteration
        iteration_times: Seconds spent per iteration
        usage: Boolean (n_iter, N) matrix of the subproblems active in each iteration

    Examples:
        >>> result = MOEAD(cfg).run(problem, seed=42)
        >>> result.summary()
        >>> df = result.to_dataframe()
        >>> result.save("results/run1")
    """

    X: NDArray[Any]
    Y: NDArray[Any]
    V: ConstraintInfo | None
    W: NDArray[Any]
    archive: ArchiveResult | None
    ideal: NDArray[Any]
    nadir: NDArray[Any]
    nfe: int
    n_iter: int
    time: float
    seed: int
    input_config: dict[str, Any]
    trace: pd.DataFrame
    iteration_times: NDArray[Any]
    usage: NDArray[Any]
    meta: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return int(self.Y.shape[0])

    def __repr__(self) -> str:
        return f"MOEADResult({len(self)} subproblems, {self.n_objectives} objectives, {self.n_iter} iterations)"

    @property
    def n_objectives(self) -> int:
        return int(self.Y.shape[1])

    @property
    def objective_labels(self) -> list[str]:
        return objective_labels(self.n_objectives)

    def summary_text(self) -> str:
        """Return a human-readable summary string (no logging side effects)."""
        problem = self.meta.get("problem")
        lines = [
            "=== MOEA/D Result ===",
            *([f"Problem: {problem}"] if problem else []),
            f"Seed: {self.seed}",
            f"Subproblems: {len(self)}",
            f"Objectives: {self.n_objectives}",
            f"Iterations: {self.n_iter}",
            f"Evaluations: {self.nfe}",
            f"Time: {self.time:.3f}s",
        ]
        if self.V is not None:
            lines.append(f"Feasible: {int(np.count_nonzero(self.V.feasible))}/{len(self)}")
        if self.archive is not None:
            lines.append(f"Archive: {len(self.archive)} solutions")
        lines.append("Objective ranges (ideal / nadir):")
        for label, lo, hi in zip(self.objective_labels, self.ideal, self.nadir):
            lines.append(f"  {label}: [{lo:.6f}, {hi:.6f}]")
        return "\n".join(lines)

    def summary(self) -> None:
        """Log a summary of the run."""
        for line in self.summary_text().splitlines():
            _logger().info("%s", line)

    @overload
    def front(self, *, return_indices: Literal[False] = False) -> np.ndarray: ...

    @overload
    def front(self, *, return_indices: Literal[True]) -> tuple[np.ndarray, np.ndarray]: ...

    def front(self, *, return_indices: bool = False) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
        """
        Nondominated rows of ``Y`` among the feasible ones (all rows if none is feasible).

        Args:
            return_indices: When True, also return the row indices in Y.
        """
        idx = np.arange(len(self))
        if self.V is not None and np.any(self.V.feasible):
            idx = np.flatnonzero(self.V.feasible)
        F, local = pareto_filter(self.Y[idx], return_indices=True)
        if return_indices:
            return F, idx[local]
        return F

    def to_dataframe(self) -> pd.DataFrame:
        """Objectives (f1, f2, ...) followed by decision variables (x1, x2, ...), one row per subproblem."""
        return _labeled_frame(self.X, self.Y)

    def weights_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.W, columns=self.objective_labels)

    def save(self, path: str | Path) -> Path:
        """
        Save results to a directory: CSV files for Y, X, W, the trace and the
        archive, plus metadata.json.

        Args:
            path: Directory path to save results
        """
        out_dir = Path(path)
        out_dir.mkdir(parents=True, exist_ok=True)

        self.to_dataframe().to_csv(out_dir / "population.csv", index=False)
        self.weights_frame().to_csv(out_dir / "weights.csv", index=False)
        self.trace.to_csv(out_dir / "trace.csv", index=False)
        if self.archive is not None:
            self.archive.to_dataframe().to_csv(out_dir / "archive.csv", index=False)

        metadata = {
            "seed": int(self.seed),
            "nfe": int(self.nfe),
            "n_iter": int(self.n_iter),
            "time": float(self.time),
            "ideal": np.asarray(self.ideal).tolist(),
            "nadir": np.asarray(self.nadir).tolist(),
            "iteration_times": np.asarray(self.iteration_times).tolist(),
            "input_config": self.input_config,
            **self.meta,
        }
        with open(out_dir / "metadata.json", "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, default=_jsonable)

        _logger().info("Results saved to %s", out_dir)
        return out_dir


def _labeled_frame(X: np.ndarray, Y: np.ndarray) -> pd.DataFrame:
    data = pd.DataFrame(Y, columns=objective_labels(Y.shape[1]))
    variables = pd.DataFrame(X, columns=variable_labels(X.shape[1]))
    return pd.concat([data, variables], axis=1)


def _jsonable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return str(value)


__all__ = ["MOEADResult", "ArchiveResult", "build_trace", "objective_labels", "variable_labels"]
