"""Command-line interface for evolution runs."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import EvolutionConfig, RunConfig, load_evolution_config, load_run_config
from .population import plan_generation
from .tasks import TASKS
from .training import run_training


def _load_bundle(config_path: Path) -> tuple[RunConfig, EvolutionConfig]:
    run_config = load_run_config(config_path)
    evolution_config = load_evolution_config(run_config.evolution_config)
    return run_config, evolution_config


def _cmd_train(args: argparse.Namespace) -> int:
    run_config, evolution_config = _load_bundle(Path(args.config))

    if args.dry_run:
        plan = plan_generation(
            evolution_config.population_size,
            evolution_config.keep_top_percent,
            evolution_config.mutate_percent,
            evolution_config.breed_percent,
        )
        print("[train] configuration validated")
        print(f"  evolution_config: {run_config.evolution_config}")
        print(f"  task: {evolution_config.task}")
        print(f"  layer_shape: {list(evolution_config.layer_shape)}")
        print(f"  population_size: {evolution_config.population_size}")
        print(
            f"  plan: keep={plan.keep} mutate={plan.mutate} "
            f"breed={plan.breed} random={plan.random}"
        )
        print(f"  workers: {run_config.workers}")
        return 0

    result = run_training(run_config, evolution_config)
    status = "solved" if result.solved else "stopped"
    print(
        f"[train] {status} after {result.generations} generations "
        f"(best fitness {result.best_fitness:.4f})"
    )
    return 0


def _cmd_tasks(args: argparse.Namespace) -> int:
    for name in sorted(TASKS):
        print(f"{name}: {TASKS[name].input_size} inputs")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evonet",
        description="Evolve feed-forward networks with a genetic algorithm",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser(
        "train",
        help="Run an evolution using a YAML configuration bundle",
    )
    train.add_argument(
        "--config",
        required=True,
        help="Path to run configuration YAML",
    )
    train.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration without evolving",
    )
    train.set_defaults(func=_cmd_train)

    tasks = subparsers.add_parser("tasks", help="List the built-in fitness tasks")
    tasks.set_defaults(func=_cmd_tasks)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    result = args.func(args)
    return int(result)


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
