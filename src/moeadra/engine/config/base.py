"""Base utilities for algorithm configuration."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict

import numpy as np

from moeadra.foundation.exceptions import ConfigurationError


def _jsonable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, default=_jsonable)


def parse_component(value: Any, field: str) -> tuple[str, Dict[str, Any]]:
    """
    Normalize a component setting into a ``(name, params)`` pair.

    Accepts ``"name"``, ``("name", {...})`` / ``["name", {...}]`` and
    ``{"name": "...", **params}``.
    """
    if isinstance(value, str):
        return value, {}
    if isinstance(value, (tuple, list)) and len(value) == 2 and isinstance(value[0], str) and isinstance(value[1], (dict, type(None))):
        return value[0], dict(value[1] or {})
    if isinstance(value, (tuple, list)) and len(value) == 1 and isinstance(value[0], str):
        return value[0], {}
    if isinstance(value, dict):
        params = dict(value)
        name = params.pop("name", None)
        if name is None:
            raise ConfigurationError(f"'{field}' mapping needs a 'name' entry.")
        return str(name), params
    raise ConfigurationError(
        f"Cannot interpret '{field}' setting {value!r}.",
        suggestion='Use "name", ("name", {params}) or {"name": ..., **params}',
    )
