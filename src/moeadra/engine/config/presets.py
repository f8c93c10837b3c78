"""
Library defaults and named presets.

A preset only lists the fields it changes; anything it leaves out falls
back to the library defaults.
"""

from __future__ import annotations

import copy
from typing import Any, Dict

from moeadra.foundation.exceptions import InvalidStrategyError

DEFAULTS: Dict[str, Any] = {
    "decomposition": ("sld", {"H": 99}),
    "neighborhood": ("lambda", {"T": 20, "delta_p": 1.0}),
    "aggregation": ("wt", {}),
    "variation": (
        ("sbx", {"eta": 20, "pc": 1.0}),
        ("polymut", {"eta": 20, "pm": "1/n"}),
        ("truncate", {}),
    ),
    "update": ("standard", {}),
    "archive": None,
    "constraint": ("none", {}),
    "scaling": ("none", {}),
    "stop_criteria": (("maxiter", {"maxiter": 200}),),
    "resource_allocation": ("none", {}),
    "initializer": ("random", {}),
    "show": ("none", 1),
    "reduced_pressure": False,
    "epsilon": 0.0,
    "debug_snapshot_dir": None,
}

_DE_VARIATION = (
    ("diffmut", {"basis": "rand", "phi": None}),
    ("binrec", {"rho": 0.5}),
    ("polymut", {"eta": 20, "pm": "1/n"}),
    ("truncate", {}),
)

PRESETS: Dict[str, Dict[str, Any]] = {
    # Zhang & Li (2007)
    "original": {
        "decomposition": ("sld", {"H": 99}),
        "neighborhood": ("lambda", {"T": 20, "delta_p": 1.0}),
        "aggregation": ("wt", {}),
        "variation": DEFAULTS["variation"],
        "update": ("standard", {}),
        "scaling": ("none", {}),
    },
    "original2": {
        "decomposition": ("sld", {"H": 99}),
        "neighborhood": ("lambda", {"T": 20, "delta_p": 0.9}),
        "aggregation": ("wt", {}),
        "variation": DEFAULTS["variation"],
        "update": ("standard", {}),
        "scaling": ("none", {}),
    },
    # Li & Zhang (2009)
    "moead.de": {
        "decomposition": ("sld", {"H": 99}),
        "neighborhood": ("lambda", {"T": 20, "delta_p": 0.9}),
        "aggregation": ("wt", {}),
        "variation": _DE_VARIATION,
        "update": ("restricted", {"nr": 2}),
        "scaling": ("none", {}),
    },
    # Zhang, Liu & Li (2009)
    "moead.dra": {
        "decomposition": ("sld", {"H": 99}),
        "neighborhood": ("lambda", {"T": 20, "delta_p": 0.9}),
        "aggregation": ("wt", {}),
        "variation": _DE_VARIATION,
        "update": ("restricted", {"nr": 2}),
        "scaling": ("none", {}),
        "resource_allocation": ("dra", {"selection": "tournament", "dt": 2, "tour": 10}),
    },
}


def available_presets() -> list[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> Dict[str, Any]:
    """Return a deep copy of the preset ``name``."""
    key = str(name).strip().lower()
    if key not in PRESETS:
        raise InvalidStrategyError("preset", name, PRESETS)
    return copy.deepcopy(PRESETS[key])


__all__ = ["DEFAULTS", "PRESETS", "available_presets", "get_preset"]
