import json

import pytest

from moeadra.experiment.cli.main import build_parser, main, run_from_file
from moeadra.foundation.exceptions import InvalidStrategyError, MissingConfigError

pytestmark = pytest.mark.cli


def _write_run_file(path, **extra):
    lines = [
        "problem:",
        "  name: zdt1",
        "  n_var: 5",
        "preset: original",
        "decomposition:",
        "  name: sld",
        "  H: 9",
        "neighborhood: [lambda, {T: 3}]",
        "stop_criteria:",
        "  maxiter: 3",
        "seed: 7",
    ]
    lines.extend(f"{key}: {value}" for key, value in extra.items())
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_parser_requires_config():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run"])


def test_presets_listing(capsys):
    assert main(["presets"]) == 0
    out = capsys.readouterr().out
    assert "moead.dra" in out
    assert "dra" in out.splitlines()[1]


def test_problems_listing(capsys):
    assert main(["problems"]) == 0
    out = capsys.readouterr().out
    assert "sphere_rastrigin" in out


def test_run_from_file(tmp_path):
    spec = _write_run_file(tmp_path / "run.yaml")
    result = run_from_file(str(spec), output=str(tmp_path / "out"))

    assert result.seed == 7
    assert result.n_iter == 3
    assert result.X.shape == (10, 5)
    metadata = json.loads((tmp_path / "out" / "metadata.json").read_text(encoding="utf-8"))
    assert metadata["seed"] == 7


def test_command_line_seed_overrides_file(tmp_path):
    spec = _write_run_file(tmp_path / "run.yaml")
    assert run_from_file(str(spec), seed=99).seed == 99


def test_run_with_multiprocessing_backend(tmp_path):
    spec = _write_run_file(tmp_path / "run.yaml", eval_backend="multiprocessing", n_workers=2)
    result = run_from_file(str(spec))
    assert result.n_iter == 3


def test_unknown_backend_in_run_file_is_rejected(tmp_path):
    spec = _write_run_file(tmp_path / "run.yaml", eval_backend="multiprocesing")
    with pytest.raises(InvalidStrategyError, match="multiprocesing"):
        run_from_file(str(spec))
    assert main(["run", "--config", str(spec)]) == 2


def test_run_requires_problem(tmp_path):
    spec = tmp_path / "run.yaml"
    spec.write_text("preset: original\n", encoding="utf-8")
    with pytest.raises(MissingConfigError):
        run_from_file(str(spec))


def test_main_run_success(tmp_path):
    spec = _write_run_file(tmp_path / "run.yaml")
    assert main(["run", "--config", str(spec), "--log-level", "warning"]) == 0


def test_main_reports_configuration_errors(tmp_path, caplog):
    spec = tmp_path / "bad.yaml"
    spec.write_text("problem: zdt1\naggregation: hv\n", encoding="utf-8")
    assert main(["run", "--config", str(spec)]) == 2
    assert "hv" in caplog.text


def test_main_missing_file(tmp_path):
    assert main(["run", "--config", str(tmp_path / "absent.yaml")]) == 2
