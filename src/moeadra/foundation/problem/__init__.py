from .base import Problem
from .classic import SphereRastriginProblem, SRNProblem
from .dtlz import DTLZ2Problem
from .registry import PROBLEM_SPECS, ProblemSpec, available_problem_names, make_problem
from .zdt import ZDT1Problem

__all__ = [
    "Problem",
    "ZDT1Problem",
    "DTLZ2Problem",
    "SRNProblem",
    "SphereRastriginProblem",
    "ProblemSpec",
    "PROBLEM_SPECS",
    "available_problem_names",
    "make_problem",
]
