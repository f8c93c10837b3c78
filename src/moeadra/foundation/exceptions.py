"""
moeadra exception hierarchy.

All library errors inherit from MOEADError, which carries an optional
suggestion and a details mapping for programmatic inspection.

Example:
    try:
        result = MOEAD(config).run(problem, seed=42)
    except MOEADError as e:
        log.error("Run failed: %s", e.message)
        log.error("Suggestion: %s", e.suggestion)
"""

from __future__ import annotations

from typing import Any, Iterable


class MOEADError(Exception):
    """
    Base exception for all moeadra errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MOEADError):
    """Raised when configuration is invalid or incomplete."""

    pass


class InvalidStrategyError(ConfigurationError):
    """Raised when a component names a strategy that is not registered."""

    def __init__(self, component: str, name: str, available: Iterable[str] | None = None) -> None:
        available = sorted(available or [])
        message = f"Unknown {component} strategy '{name}'."
        suggestion = f"Available {component} strategies: {', '.join(available)}" if available else None
        super().__init__(message, suggestion, {"component": component, "name": name, "available": available})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, component: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if component:
            suggestion += f" for the {component} component"
        super().__init__(message, suggestion, {"field": field, "component": component})


# =============================================================================
# Problem Errors
# =============================================================================


class ProblemError(MOEADError):
    """Base class for problem-related errors."""

    pass


class ProblemDimensionError(ProblemError):
    """Raised when problem dimensions are invalid or inconsistent with the weights."""

    def __init__(
        self,
        message: str,
        n_var: int | None = None,
        n_obj: int | None = None,
    ) -> None:
        suggestion = "Check problem dimensions: n_var (variables), n_obj (objectives)"
        super().__init__(message, suggestion, {"n_var": n_var, "n_obj": n_obj})


class BoundsError(ProblemError):
    """Raised when bounds are invalid or inconsistent."""

    def __init__(self, message: str) -> None:
        suggestion = "Ensure xl <= xu for all variables and bounds have length n_var"
        super().__init__(message, suggestion)


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(MOEADError):
    """Raised when optimization fails during execution."""

    pass


class CollaboratorContractError(OptimizationError):
    """Raised when a collaborator returns data of the wrong shape or kind."""

    def __init__(self, component: str, message: str, **details: Any) -> None:
        suggestion = f"Check the {component} implementation against its documented contract"
        super().__init__(f"{component}: {message}", suggestion, {"component": component, **details})


class DegenerateStateError(OptimizationError):
    """Raised when the run reaches a state the configured collaborators cannot handle."""

    def __init__(self, message: str, iteration: int | None = None) -> None:
        suggestion = "This usually indicates a misconfigured strategy; review the run configuration"
        super().__init__(message, suggestion, {"iteration": iteration})


class EvaluationError(OptimizationError):
    """Raised when objective evaluation fails."""

    def __init__(self, message: str, solution: Any = None) -> None:
        suggestion = "Check your problem's evaluate() function for errors"
        super().__init__(message, suggestion, {"solution": solution})


__all__ = [
    "MOEADError",
    "ConfigurationError",
    "InvalidStrategyError",
    "MissingConfigError",
    "ProblemError",
    "ProblemDimensionError",
    "BoundsError",
    "OptimizationError",
    "CollaboratorContractError",
    "DegenerateStateError",
    "EvaluationError",
]
