"""
Stop criteria.

Every configured predicate is evaluated each iteration; the run stops when
at least one of them fires.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from moeadra.foundation.exceptions import ConfigurationError, MissingConfigError
from moeadra.foundation.registry import Registry

if TYPE_CHECKING:
    from moeadra.engine.algorithm.moead.state import RunContext

_logger = logging.getLogger(__name__)

stop_registry: Registry = Registry("stop criterion")


@stop_registry.register("maxiter")
def max_iterations(ctx: "RunContext", maxiter: int) -> bool:
    return ctx.iteration >= maxiter


@stop_registry.register("maxeval")
def max_evaluations(ctx: "RunContext", maxeval: int) -> bool:
    return ctx.nfe >= maxeval


@stop_registry.register("maxtime")
def max_time(ctx: "RunContext", maxtime: float) -> bool:
    return ctx.elapsed >= maxtime


def validate_stop_criteria(criteria: Sequence[tuple[str, dict[str, Any]]]) -> None:
    """Check names and limits of the configured stop criteria."""
    if not criteria:
        raise MissingConfigError("stop_criteria")
    for name, params in criteria:
        key = stop_registry.canonical(name)
        if set(params) != {key}:
            raise ConfigurationError(
                f"Stop criterion '{name}' takes exactly one parameter, '{key}'.",
                suggestion=f'Use ("{key}", {{"{key}": <limit>}})',
            )
        if float(params[key]) <= 0:
            raise ConfigurationError(f"Stop criterion '{name}' needs a positive limit, got {params[key]}.")


def check_stop_criteria(criteria: Sequence[tuple[str, dict[str, Any]]], ctx: "RunContext") -> bool:
    """Evaluate all predicates (no short-circuit) and OR the results."""
    flags = [bool(stop_registry.get(name)(ctx, **params)) for name, params in criteria]
    fired = [name for (name, _), flag in zip(criteria, flags) if flag]
    if fired:
        _logger.debug("Stop criteria met at iteration %d: %s", ctx.iteration, ", ".join(fired))
    return any(flags)


__all__ = ["stop_registry", "max_iterations", "max_evaluations", "max_time", "validate_stop_criteria", "check_stop_criteria"]
