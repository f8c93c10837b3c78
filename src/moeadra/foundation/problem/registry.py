"""
Problem registry: specs and factories for the bundled benchmark problems.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from moeadra.foundation.exceptions import InvalidStrategyError, ProblemDimensionError
from moeadra.foundation.problem.classic import SphereRastriginProblem, SRNProblem
from moeadra.foundation.problem.dtlz import DTLZ2Problem
from moeadra.foundation.problem.zdt import ZDT1Problem

ProblemFactory = Callable[[int, int], object]


@dataclass(frozen=True)
class ProblemSpec:
    """Metadata and factory for a benchmark problem."""

    key: str
    label: str
    default_n_var: int
    default_n_obj: int
    allow_n_obj_override: bool
    factory: ProblemFactory
    fixed_n_var: bool = False
    description: str = ""

    def resolve_dimensions(self, *, n_var: int | None, n_obj: int | None) -> tuple[int, int]:
        """
        Apply default dimensions and enforce override rules.
        """
        if self.allow_n_obj_override:
            actual_n_obj = n_obj if n_obj is not None else self.default_n_obj
        else:
            actual_n_obj = self.default_n_obj
            if n_obj is not None and n_obj != actual_n_obj:
                raise ProblemDimensionError(
                    f"Problem '{self.label}' has a fixed number of objectives ({self.default_n_obj}).",
                    n_obj=n_obj,
                )
        if self.fixed_n_var and n_var is not None and n_var != self.default_n_var:
            raise ProblemDimensionError(
                f"Problem '{self.label}' has a fixed number of variables ({self.default_n_var}).",
                n_var=n_var,
            )
        actual_n_var = self.default_n_var if n_var is None else n_var
        if actual_n_var <= 0 or actual_n_obj <= 1:
            raise ProblemDimensionError("n_var must be positive and n_obj at least 2.", n_var=actual_n_var, n_obj=actual_n_obj)
        return actual_n_var, actual_n_obj


PROBLEM_SPECS: dict[str, ProblemSpec] = {
    "zdt1": ProblemSpec(
        key="zdt1",
        label="ZDT1",
        default_n_var=30,
        default_n_obj=2,
        allow_n_obj_override=False,
        description="Classic bi-objective benchmark with a convex Pareto front.",
        factory=lambda n_var, _n_obj: ZDT1Problem(n_var=n_var),
    ),
    "dtlz2": ProblemSpec(
        key="dtlz2",
        label="DTLZ2",
        default_n_var=12,
        default_n_obj=3,
        allow_n_obj_override=True,
        description="Scalable benchmark with a spherical Pareto front.",
        factory=lambda n_var, n_obj: DTLZ2Problem(n_var=n_var, n_obj=n_obj),
    ),
    "srn": ProblemSpec(
        key="srn",
        label="SRN",
        default_n_var=2,
        default_n_obj=2,
        allow_n_obj_override=False,
        fixed_n_var=True,
        description="Constrained bi-objective problem of Srinivas and Deb.",
        factory=lambda _n_var, _n_obj: SRNProblem(),
    ),
    "sphere_rastrigin": ProblemSpec(
        key="sphere_rastrigin",
        label="SphereRastrigin",
        default_n_var=30,
        default_n_obj=2,
        allow_n_obj_override=False,
        description="Sphere versus shifted Rastrigin on [-1, 1].",
        factory=lambda n_var, _n_obj: SphereRastriginProblem(n_var=n_var),
    ),
}


def available_problem_names() -> tuple[str, ...]:
    return tuple(PROBLEM_SPECS.keys())


def make_problem(name: str, *, n_var: int | None = None, n_obj: int | None = None, **_: Any) -> object:
    """Instantiate a registered benchmark problem by name."""
    key = str(name).strip().lower()
    spec = PROBLEM_SPECS.get(key)
    if spec is None:
        raise InvalidStrategyError("problem", name, available_problem_names())
    actual_n_var, actual_n_obj = spec.resolve_dimensions(n_var=n_var, n_obj=n_obj)
    return spec.factory(actual_n_var, actual_n_obj)


__all__ = ["ProblemSpec", "PROBLEM_SPECS", "available_problem_names", "make_problem"]
