from __future__ import annotations

import logging


def configure_moeadra_logging(*, level: int = logging.INFO, fmt: str = "%(message)s") -> None:
    """
    Configure a minimal console logger for moeadra.

    Notes:
        - Opt-in only; library modules never call logging.basicConfig().
        - The handler is only attached if neither the root logger nor the "moeadra" logger has handlers.
    """
    root = logging.getLogger()
    package_logger = logging.getLogger("moeadra")

    if root.handlers or package_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


__all__ = ["configure_moeadra_logging"]
