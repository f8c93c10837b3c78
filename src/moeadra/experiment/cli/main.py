from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from typing import Any

from moeadra.engine.algorithm.moead import MOEAD
from moeadra.engine.config import MOEADConfig, PRESETS, available_presets, load_run_spec
from moeadra.foundation.eval.backends import resolve_eval_backend
from moeadra.foundation.exceptions import MOEADError, MissingConfigError
from moeadra.foundation.problem import available_problem_names, make_problem

_logger = logging.getLogger("moeadra.cli")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _configure_cli_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="moeadra", description="MOEA/D with resource allocation.")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run MOEA/D from a YAML/JSON run file")
    run.add_argument("--config", required=True, help="Path to the run file (YAML or JSON).")
    run.add_argument("--seed", type=int, default=None, help="Random seed (overrides the run file).")
    run.add_argument("--output", default=None, help="Directory to save results into.")
    run.add_argument("--log-level", default="INFO", choices=_LOG_LEVELS, type=str.upper)

    sub.add_parser("presets", help="List the available configuration presets")
    sub.add_parser("problems", help="List the bundled benchmark problems")
    return parser


def _build_problem(setting: Any) -> Any:
    if isinstance(setting, str):
        return make_problem(setting)
    if isinstance(setting, dict) and "name" in setting:
        params = dict(setting)
        return make_problem(params.pop("name"), **params)
    raise MissingConfigError("problem", "run file")


def run_from_file(path: str, *, seed: int | None = None, output: str | None = None):
    """Load a run file, build the problem and configuration, run and optionally save."""
    spec = load_run_spec(path)
    if "problem" not in spec:
        raise MissingConfigError("problem", "run file")
    problem = _build_problem(spec.pop("problem"))
    file_seed = spec.pop("seed", None)
    backend_name = spec.pop("eval_backend", None)
    n_workers = spec.pop("n_workers", None)

    config = MOEADConfig.from_dict(spec)
    backend = resolve_eval_backend(backend_name, n_workers=n_workers) if backend_name else None
    try:
        result = MOEAD(config).run(problem, seed=seed if seed is not None else file_seed, eval_backend=backend)
    finally:
        if backend is not None:
            backend.close()
    result.summary()
    if output:
        result.save(output)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "presets":
        for name in available_presets():
            allocation = PRESETS[name].get("resource_allocation", ("none", {}))[0]
            print(f"  {name:12s} resource allocation: {allocation}")
        return 0
    if args.command == "problems":
        for name in available_problem_names():
            print(f"  {name}")
        return 0

    _configure_cli_logging(getattr(logging, args.log_level))
    try:
        run_from_file(args.config, seed=args.seed, output=args.output)
    except (MOEADError, FileNotFoundError) as exc:
        _logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
