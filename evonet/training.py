"""Evolution loop driving a population against a built-in fitness task."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from random import Random
from time import perf_counter

import yaml

from .config import EvolutionConfig, RunConfig
from .evaluator import EvaluationConfig, ParallelEvaluator, SyncEvaluator
from .metrics import MetricsRow, MetricsWriter
from .reporters import EventLogger
from .rng import PythonRandom
from .tasks import Task, get_task


@dataclass(frozen=True, slots=True)
class RunArtifacts:
    """Resolved file locations used for a training run."""

    root: Path
    metrics: Path
    events: Path
    config: Path


@dataclass(frozen=True, slots=True)
class TrainingResult:
    """Outcome of a finished run."""

    run_dir: Path
    generations: int
    best_fitness: float
    best_vector: tuple[float, ...]
    solved: bool


def _allocate_run_dir(output_root: Path) -> Path:
    output_root.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    candidate = output_root / timestamp
    suffix = 1
    while candidate.exists():
        candidate = output_root / f"{timestamp}_{suffix:02d}"
        suffix += 1
    candidate.mkdir(parents=True, exist_ok=False)
    return candidate


def _build_artifacts(run_dir: Path) -> RunArtifacts:
    return RunArtifacts(
        root=run_dir,
        metrics=run_dir / "metrics.csv",
        events=run_dir / "events.log",
        config=run_dir / "config.yml",
    )


def _write_config_snapshot(
    artifacts: RunArtifacts,
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
) -> None:
    evolution = asdict(evolution_config)
    evolution["layer_shape"] = list(evolution_config.layer_shape)
    snapshot = {
        "run": {
            "evolution_config": str(run_config.evolution_config),
            "output_dir": str(run_config.output_dir),
            "workers": run_config.workers,
            "timeout_s": run_config.timeout_s,
        },
        "evolution": evolution,
    }
    with artifacts.config.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(snapshot, handle, sort_keys=True)


def _create_evaluator(
    run_config: RunConfig,
    task: Task,
    evaluation_config: EvaluationConfig,
) -> SyncEvaluator | ParallelEvaluator:
    if run_config.workers > 1:
        return ParallelEvaluator(
            task,
            workers=run_config.workers,
            timeout_s=run_config.timeout_s,
            config=evaluation_config,
        )
    return SyncEvaluator(task, config=evaluation_config)


def run_training(
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
) -> TrainingResult:
    task = get_task(evolution_config.task)

    seed_rng = Random(evolution_config.seed)
    population = evolution_config.build_population(
        PythonRandom(Random(seed_rng.getrandbits(32)))
    )
    evaluation_rng = Random(seed_rng.getrandbits(32))
    evaluator = _create_evaluator(
        run_config, task, evolution_config.evaluation_config()
    )

    artifacts = _build_artifacts(_allocate_run_dir(run_config.output_dir))
    _write_config_snapshot(artifacts, run_config, evolution_config)
    print(f"[train] run directory: {artifacts.root}")

    best_fitness = float("-inf")
    best_vector: tuple[float, ...] = ()
    generations = 0
    solved = False

    with MetricsWriter(artifacts.metrics) as metrics_writer, EventLogger(
        artifacts.events
    ) as logger:
        logger.log(f"Training started at {artifacts.root}")
        logger.log_setup(
            evolution_config.task, population.layer_shape, population.plan
        )

        while population.generation < evolution_config.max_generations:
            generation = population.generation

            start_time = perf_counter()
            evaluator(population.networks, evaluation_rng)
            eval_time = perf_counter() - start_time
            generations += 1

            champion = population.best()
            if champion.fitness > best_fitness:
                best_fitness = champion.fitness
                best_vector = tuple(champion.flatten())
                logger.log_champion(generation, best_fitness)

            row = MetricsRow.from_fitnesses(
                generation,
                [network.fitness for network in population.networks],
                eval_time_s=eval_time,
            )
            metrics_writer.append(row)
            logger.log_generation(row)
            print(f"Generation {generation}: best fitness {row.best_fitness:.4f}")

            if row.best_fitness >= evolution_config.fitness_threshold:
                solved = True
                logger.log("Fitness threshold reached; stopping.")
                print("Fitness threshold reached, stopping training.")
                break

            population.generate_next_generation()

        logger.log(f"Training finished after {generations} generations.")

    return TrainingResult(
        run_dir=artifacts.root,
        generations=generations,
        best_fitness=best_fitness,
        best_vector=best_vector,
        solved=solved,
    )


__all__ = ["RunArtifacts", "TrainingResult", "run_training"]
