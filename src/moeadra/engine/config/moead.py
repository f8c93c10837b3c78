"""MOEA/D configuration."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from moeadra.engine.algorithm.components.aggregation import aggregation_registry, build_aggregator
from moeadra.engine.algorithm.components.neighborhood import neighborhood_registry
from moeadra.engine.algorithm.components.population import initializer_registry
from moeadra.engine.algorithm.components.progress import validate_show
from moeadra.engine.algorithm.components.ranking import constraint_registry, validate_constraint_params
from moeadra.engine.algorithm.components.resource_allocation import allocation_registry, validate_allocation_params
from moeadra.engine.algorithm.components.scaling import scaling_registry
from moeadra.engine.algorithm.components.termination import stop_registry, validate_stop_criteria
from moeadra.engine.algorithm.components.update import update_registry, validate_update_params
from moeadra.engine.algorithm.components.variation import build_variation_stack, variation_registry
from moeadra.engine.algorithm.components.weight_vectors import decomposition_registry
from moeadra.foundation.exceptions import ConfigurationError, MissingConfigError

from .base import _SerializableConfig, parse_component
from .presets import DEFAULTS, get_preset

_logger = logging.getLogger(__name__)

Component = Tuple[str, Dict[str, Any]]

_NEIGHBORHOOD_PARAMS = {"T", "delta_p"}


@dataclass(frozen=True)
class MOEADConfigData(_SerializableConfig):
    decomposition: Component
    neighborhood: Component
    aggregation: Component
    variation: Tuple[Component, ...]
    update: Component
    archive: Optional[Dict[str, Any]]
    constraint: Component
    scaling: Component
    stop_criteria: Tuple[Component, ...]
    resource_allocation: Component
    initializer: Component = ("random", {})
    show: Tuple[str, int] = ("none", 1)
    reduced_pressure: bool = False
    epsilon: float = 0.0
    debug_snapshot_dir: Optional[str] = None

    @property
    def neighborhood_size(self) -> int:
        return int(self.neighborhood[1]["T"])


class MOEADConfig:
    """
    Declarative configuration holder for MOEA/D settings.

    Fields left unset fall back to the selected preset, then to the library
    defaults (see :func:`resolve_config`).

    Examples:
        # Fluent builder
        cfg = (
            MOEADConfig()
            .decomposition("sld", H=49)
            .neighborhood("lambda", T=10, delta_p=0.9)
            .stop_criteria(("maxiter", {"maxiter": 50}))
            .fixed()
        )

        # Preset with overrides
        cfg = MOEADConfig.preset("moead.dra", archive={"size": 100}).fixed()

        # From dictionary (e.g. a loaded YAML run file)
        cfg = MOEADConfig.from_dict({"preset": "original", "aggregation": "pbi"})
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}
        self._preset: Optional[str] = None

    @classmethod
    def default(cls) -> MOEADConfigData:
        """The library defaults, validated."""
        return cls().fixed()

    @classmethod
    def preset(cls, name: str, **overrides: Any) -> "MOEADConfig":
        """Start a builder from the named preset; ``overrides`` are applied on top."""
        get_preset(name)
        builder = cls()
        builder._preset = name
        builder._apply(overrides)
        return builder

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> MOEADConfigData:
        """Create configuration from a dictionary; an optional ``preset`` key selects the base layer."""
        config = dict(config)
        preset = config.pop("preset", None)
        builder = cls.preset(preset) if preset else cls()
        builder._apply(config)
        return builder.fixed()

    def _apply(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            setter = _SETTERS.get(key)
            if setter is None:
                raise ConfigurationError(
                    f"Unknown MOEA/D configuration field '{key}'.",
                    suggestion=f"Valid fields: {', '.join(sorted(_SETTERS))}",
                )
            setter(self, value)

    def decomposition(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["decomposition"] = (method, kwargs)
        return self

    def neighborhood(self, method: str = "lambda", **kwargs) -> "MOEADConfig":
        self._cfg["neighborhood"] = (method, kwargs)
        return self

    def aggregation(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["aggregation"] = (method, kwargs)
        return self

    def variation(self, *steps: Any) -> "MOEADConfig":
        """Ordered variation steps, each ``"name"`` or ``("name", {params})``."""
        self._cfg["variation"] = tuple(parse_component(step, "variation") for step in steps)
        return self

    def update(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["update"] = (method, kwargs)
        return self

    def archive(self, size: Optional[int]) -> "MOEADConfig":
        self._cfg["archive"] = None if size is None else {"size": size}
        return self

    def constraint(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["constraint"] = (method, kwargs)
        return self

    def scaling(self, method: str) -> "MOEADConfig":
        self._cfg["scaling"] = (method, {})
        return self

    def stop_criteria(self, *criteria: Any) -> "MOEADConfig":
        self._cfg["stop_criteria"] = tuple(parse_component(item, "stop_criteria") for item in criteria)
        return self

    def stop(self, **limits: float) -> "MOEADConfig":
        """Shorthand: ``stop(maxiter=50, maxtime=10)``."""
        return self.stop_criteria(*((name, {name: limit}) for name, limit in limits.items()))

    def resource_allocation(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["resource_allocation"] = (method, kwargs)
        return self

    def initializer(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["initializer"] = (method, kwargs)
        return self

    def show(self, mode: str, period: int = 1) -> "MOEADConfig":
        self._cfg["show"] = (mode, period)
        return self

    def reduced_pressure(self, enabled: bool = True) -> "MOEADConfig":
        self._cfg["reduced_pressure"] = bool(enabled)
        return self

    def epsilon(self, value: float) -> "MOEADConfig":
        self._cfg["epsilon"] = float(value)
        return self

    def debug_snapshot_dir(self, path: Optional[str]) -> "MOEADConfig":
        self._cfg["debug_snapshot_dir"] = None if path is None else str(path)
        return self

    def fixed(self) -> MOEADConfigData:
        merged = resolve_config(self._cfg, self._preset)
        return _validate(merged)


def _set_component(field: str):
    def setter(builder: MOEADConfig, value: Any) -> None:
        builder._cfg[field] = parse_component(value, field)

    return setter


def _set_sequence(field: str):
    def setter(builder: MOEADConfig, value: Any) -> None:
        builder._cfg[field] = _parse_sequence(value, field)

    return setter


def _parse_sequence(value: Any, field: str) -> Tuple[Component, ...]:
    if isinstance(value, Mapping) and "name" not in value:
        # {"maxiter": 50, "maxtime": 10} style stop criteria
        return tuple((str(name), {str(name): limit}) for name, limit in value.items())
    if isinstance(value, (str, Mapping)):
        return (parse_component(value, field),)
    return tuple(parse_component(item, field) for item in value)


def _set_show(builder: MOEADConfig, value: Any) -> None:
    if isinstance(value, str):
        builder.show(value)
    elif isinstance(value, Mapping):
        builder.show(value.get("mode", "none"), value.get("period", 1))
    else:
        builder.show(*value)


def _set_archive(builder: MOEADConfig, value: Any) -> None:
    builder._cfg["archive"] = dict(value) if isinstance(value, Mapping) else value


_SETTERS = {
    "decomposition": _set_component("decomposition"),
    "neighborhood": _set_component("neighborhood"),
    "aggregation": _set_component("aggregation"),
    "variation": _set_sequence("variation"),
    "update": _set_component("update"),
    "archive": _set_archive,
    "constraint": _set_component("constraint"),
    "scaling": _set_component("scaling"),
    "stop_criteria": _set_sequence("stop_criteria"),
    "resource_allocation": _set_component("resource_allocation"),
    "initializer": _set_component("initializer"),
    "show": _set_show,
    "reduced_pressure": lambda b, v: b.reduced_pressure(v),
    "epsilon": lambda b, v: b.epsilon(v),
    "debug_snapshot_dir": lambda b, v: b.debug_snapshot_dir(v),
}


def resolve_config(user: Mapping[str, Any], preset: Optional[str] = None) -> Dict[str, Any]:
    """
    Layer the configuration: library defaults, then ``preset``, then ``user``.

    Each layer replaces whole fields; parameters of a component are not
    merged across layers.
    """
    merged = copy.deepcopy(DEFAULTS)
    if preset:
        merged.update(get_preset(preset))
    merged.update(copy.deepcopy(dict(user)))
    _logger.debug("Resolved MOEA/D configuration (preset=%s, user fields=%s)", preset, sorted(user))
    return merged


def _component(cfg: Mapping[str, Any], field: str) -> Component:
    name, params = parse_component(cfg[field], field)
    return name, dict(params)


def _validate(cfg: Mapping[str, Any]) -> MOEADConfigData:
    """Resolve every strategy name against its registry and sanity-check parameters."""
    name, params = _component(cfg, "decomposition")
    decomposition = (decomposition_registry.canonical(name), params)

    name, params = _component(cfg, "neighborhood")
    neighborhood = (neighborhood_registry.canonical(name), params)
    _check_neighborhood(params)

    name, params = _component(cfg, "aggregation")
    build_aggregator(name, params)
    aggregation = (aggregation_registry.canonical(name), params)

    variation = tuple(_component({"v": step}, "v") for step in cfg["variation"])
    if not variation:
        raise MissingConfigError("variation", "MOEA/D")
    # parameters are checked against the operator constructors; bounds come later
    build_variation_stack(variation, n_var=1)
    variation = tuple((variation_registry.canonical(n), p) for n, p in variation)

    name, params = _component(cfg, "update")
    validate_update_params(name, params)
    update = (update_registry.canonical(name), params)

    name, params = _component(cfg, "constraint")
    validate_constraint_params(name, params)
    constraint = (constraint_registry.canonical(name), params)

    name, params = _component(cfg, "scaling")
    if params:
        raise ConfigurationError(f"Scaling '{name}' takes no parameters.")
    scaling = (scaling_registry.canonical(name), params)

    stop_criteria = tuple(_component({"s": item}, "s") for item in cfg["stop_criteria"])
    validate_stop_criteria(stop_criteria)
    stop_criteria = tuple((stop_registry.canonical(n), p) for n, p in stop_criteria)

    name, params = _component(cfg, "resource_allocation")
    validate_allocation_params(name, params)
    resource_allocation = (allocation_registry.canonical(name), params)

    name, params = _component(cfg, "initializer")
    if params:
        raise ConfigurationError(f"Initializer '{name}' takes no parameters, got {sorted(params)}.")
    initializer = (initializer_registry.canonical(name), params)

    mode, period = cfg["show"]
    validate_show(mode, period)

    epsilon = float(cfg["epsilon"])
    if epsilon < 0:
        raise ConfigurationError(f"Constraint epsilon must be non-negative, got {epsilon}.")

    return MOEADConfigData(
        decomposition=decomposition,
        neighborhood=neighborhood,
        aggregation=aggregation,
        variation=variation,
        update=update,
        archive=_check_archive(cfg["archive"]),
        constraint=constraint,
        scaling=scaling,
        stop_criteria=stop_criteria,
        resource_allocation=resource_allocation,
        initializer=initializer,
        show=(str(mode).lower(), int(period)),
        reduced_pressure=bool(cfg["reduced_pressure"]),
        epsilon=epsilon,
        debug_snapshot_dir=cfg["debug_snapshot_dir"],
    )


def _check_neighborhood(params: Dict[str, Any]) -> None:
    unknown = set(params) - _NEIGHBORHOOD_PARAMS
    if unknown:
        raise ConfigurationError(f"Unknown neighborhood parameters {sorted(unknown)}.")
    if "T" not in params:
        raise MissingConfigError("T", "neighborhood")
    T = params["T"]
    if isinstance(T, bool) or int(T) != T or int(T) < 1:
        raise ConfigurationError(f"Neighborhood size T must be a positive integer, got {T!r}.")
    params["T"] = int(T)
    delta_p = float(params.setdefault("delta_p", 1.0))
    if not 0.0 <= delta_p <= 1.0:
        raise ConfigurationError(f"delta_p must lie in [0, 1], got {delta_p}.")


def _check_archive(archive: Any) -> Optional[Dict[str, Any]]:
    if archive is None:
        return None
    size = archive.get("size") if isinstance(archive, Mapping) else archive
    if size is None:
        raise MissingConfigError("size", "archive")
    if isinstance(size, bool) or int(size) != size or int(size) < 1:
        raise ConfigurationError(f"Archive size must be a positive integer, got {size!r}.")
    return {"size": int(size)}


def component_names(data: MOEADConfigData) -> Dict[str, Sequence[str] | str]:
    """Canonical strategy names, for logging and result metadata."""
    return {
        "decomposition": data.decomposition[0],
        "neighborhood": data.neighborhood[0],
        "aggregation": data.aggregation[0],
        "variation": [name for name, _ in data.variation],
        "update": data.update[0],
        "constraint": data.constraint[0],
        "scaling": data.scaling[0],
        "resource_allocation": data.resource_allocation[0],
    }


__all__ = ["MOEADConfig", "MOEADConfigData", "resolve_config", "component_names"]
