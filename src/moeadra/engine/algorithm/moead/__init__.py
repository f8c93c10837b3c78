"""
MOEA/D orchestrator package:
- `moead.py`: the MOEAD class (run/setup/step/result)
- `initialization.py`: weights, initial population and collaborator setup
- `state.py`: MOEADState, RunContext and IterationRecord

References:
    Q. Zhang and H. Li, "MOEA/D: A Multiobjective Evolutionary Algorithm Based on
    Decomposition," IEEE Trans. Evolutionary Computation, vol. 11, no. 6, 2007.
"""

from .initialization import initialize_moead_run, resolve_seed
from .moead import MOEAD
from .state import IterationRecord, MOEADState, RunContext

__all__ = [
    "MOEAD",
    "initialize_moead_run",
    "resolve_seed",
    "MOEADState",
    "RunContext",
    "IterationRecord",
]
