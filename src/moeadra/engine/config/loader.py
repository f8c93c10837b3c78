"""
Config loading utilities shared by the CLI and programmatic entrypoints.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from moeadra.foundation.exceptions import ConfigurationError


def load_run_spec(path: str | Path) -> Dict[str, Any]:
    """
    Load a YAML or JSON run specification.

    The top level must be a mapping; typical keys are ``problem``,
    ``preset``, ``seed`` and the MOEA/D component settings.
    """
    spec_path = Path(path).expanduser().resolve()
    if not spec_path.exists():
        raise FileNotFoundError(f"Config file '{spec_path}' does not exist.")
    suffix = spec_path.suffix.lower()
    with spec_path.open("r", encoding="utf-8") as fh:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(fh) or {}
        else:
            data = json.load(fh)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Run specification '{spec_path}' must contain a mapping at the top level.")
    return data


__all__ = ["load_run_spec"]
