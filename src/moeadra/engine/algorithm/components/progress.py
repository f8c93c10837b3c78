"""
Progress echoing through the ``moeadra`` logger.
"""

from __future__ import annotations

import logging
from typing import Sequence

from moeadra.foundation.exceptions import ConfigurationError

_logger = logging.getLogger(__name__)

SHOW_MODES = ("none", "numbers", "dots")


def validate_show(mode: str, period: int) -> None:
    if str(mode).lower() not in SHOW_MODES:
        raise ConfigurationError(f"Unknown show mode '{mode}'.", suggestion=f"Use one of {', '.join(SHOW_MODES)}")
    if int(period) < 1:
        raise ConfigurationError(f"Show period must be a positive integer, got {period}.")


def report_progress(iteration_times: Sequence[float], mode: str, period: int) -> None:
    """Echo the iteration counter or a progress mark every ``period`` iterations."""
    mode = str(mode).lower()
    iteration = len(iteration_times)
    if mode == "none" or iteration == 0 or iteration % period != 0:
        return
    if mode == "numbers":
        _logger.info("Iteration: %d", iteration)
    else:
        _logger.info(".")


__all__ = ["SHOW_MODES", "validate_show", "report_progress"]
