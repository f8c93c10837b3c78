from .loader import load_run_spec
from .moead import MOEADConfig, MOEADConfigData, component_names, resolve_config
from .presets import DEFAULTS, PRESETS, available_presets, get_preset

__all__ = [
    "MOEADConfig",
    "MOEADConfigData",
    "resolve_config",
    "component_names",
    "load_run_spec",
    "DEFAULTS",
    "PRESETS",
    "available_presets",
    "get_preset",
]
