from __future__ import annotations

from pathlib import Path

import pytest
from evonet import cli
from evonet.errors import InvalidTopologyError


def test_cli_help() -> None:
    parser = cli.build_parser()
    help_text = parser.format_help()
    assert "train" in help_text
    assert "tasks" in help_text


def _write_evolution_config(
    path: Path, *, fitness_threshold: float, layer_shape: str = "[2, 1]"
) -> None:
    path.write_text(
        "task: linear\n"
        f"layer_shape: {layer_shape}\n"
        "population_size: 4\n"
        "keep_top_percent: 0.5\n"
        "mutate_percent: 0.0\n"
        "breed_percent: 0.5\n"
        "max_generations: 2\n"
        f"fitness_threshold: {fitness_threshold}\n"
        "seed: 3\n",
        encoding="utf-8",
    )


def _write_run_config(path: Path) -> None:
    path.write_text(
        """
evolution_config: evolution.yml
output_dir: runs
workers: 1
""",
        encoding="utf-8",
    )


def test_cli_train_dry_run(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_evolution_config(tmp_path / "evolution.yml", fitness_threshold=0.0)
    run_yaml = tmp_path / "run.yml"
    _write_run_config(run_yaml)

    code = cli.main(["train", "--config", str(run_yaml), "--dry-run"])

    assert code == 0
    output = capsys.readouterr().out
    assert "configuration validated" in output
    assert "keep=2 mutate=0 breed=2 random=0" in output
    assert not (tmp_path / "runs").exists()


def test_cli_train_dry_run_rejects_task_input_mismatch(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_evolution_config(
        tmp_path / "evolution.yml", fitness_threshold=0.0, layer_shape="[3, 1]"
    )
    run_yaml = tmp_path / "run.yml"
    _write_run_config(run_yaml)

    with pytest.raises(InvalidTopologyError):
        cli.main(["train", "--config", str(run_yaml), "--dry-run"])

    assert "configuration validated" not in capsys.readouterr().out
    assert not (tmp_path / "runs").exists()


def test_cli_train_executes(tmp_path: Path) -> None:
    _write_evolution_config(tmp_path / "evolution.yml", fitness_threshold=1.0)
    run_yaml = tmp_path / "run.yml"
    _write_run_config(run_yaml)

    code = cli.main(["train", "--config", str(run_yaml)])

    assert code == 0
    run_dirs = list((tmp_path / "runs").iterdir())
    assert len(run_dirs) == 1
    assert (run_dirs[0] / "metrics.csv").exists()


def test_cli_tasks_lists_builtin_tasks(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["tasks"]) == 0
    output = capsys.readouterr().out
    assert "xor: 2 inputs" in output
    assert "linear: 2 inputs" in output
