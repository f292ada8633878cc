"""Configuration loading utilities for evolution runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidTopologyError
from .evaluator import EvaluationConfig
from .network import validate_layer_shape
from .population import (
    DEFAULT_BREED_PERCENT,
    DEFAULT_KEEP_TOP_PERCENT,
    DEFAULT_MUTATE_PERCENT,
    PopulationManager,
    plan_generation,
    validate_population_size,
)
from .rng import RandomSource
from .tasks import get_task


@dataclass(slots=True)
class EvolutionConfig:
    layer_shape: tuple[int, ...]
    population_size: int
    max_generations: int
    fitness_threshold: float
    keep_top_percent: float = DEFAULT_KEEP_TOP_PERCENT
    mutate_percent: float = DEFAULT_MUTATE_PERCENT
    breed_percent: float = DEFAULT_BREED_PERCENT
    task: str = "xor"
    episodes_per_network: int = 1
    seed: int | None = None

    def __post_init__(self) -> None:
        self.layer_shape = validate_layer_shape(self.layer_shape)
        validate_population_size(self.population_size)
        plan_generation(
            self.population_size,
            self.keep_top_percent,
            self.mutate_percent,
            self.breed_percent,
        )
        task = get_task(self.task)
        if task.input_size != self.layer_shape[0]:
            msg = (
                f"Task '{self.task}' expects {task.input_size} inputs but "
                f"layer_shape starts with {self.layer_shape[0]} neurons."
            )
            raise InvalidTopologyError(msg)
        if self.max_generations <= 0:
            msg = "max_generations must be positive."
            raise ValueError(msg)

    def evaluation_config(self) -> EvaluationConfig:
        return EvaluationConfig(
            episodes_per_network=self.episodes_per_network,
            seed=self.seed,
        )

    def build_population(self, rng: RandomSource) -> PopulationManager:
        return PopulationManager(
            self.layer_shape,
            self.population_size,
            keep_top_percent=self.keep_top_percent,
            mutate_percent=self.mutate_percent,
            breed_percent=self.breed_percent,
            rng=rng,
        )


@dataclass(slots=True)
class RunConfig:
    evolution_config: Path
    output_dir: Path = Path("runs")
    workers: int = 1
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        if self.workers <= 0:
            msg = "workers must be positive."
            raise ValueError(msg)

    def resolve(self, base_path: Path) -> RunConfig:
        return RunConfig(
            evolution_config=(base_path / self.evolution_config).resolve(),
            output_dir=(base_path / self.output_dir).resolve(),
            workers=self.workers,
            timeout_s=self.timeout_s,
        )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    return data


def load_evolution_config(path: Path) -> EvolutionConfig:
    data = _load_yaml(path)
    raw_shape = data.get("layer_shape", data.get("layers"))
    if raw_shape is None:
        msg = f"{path} must specify 'layer_shape'."
        raise ValueError(msg)
    return EvolutionConfig(
        layer_shape=tuple(int(size) for size in raw_shape),
        population_size=int(data.get("population_size", data.get("pop_size", 20))),
        max_generations=int(data.get("max_generations", 50)),
        fitness_threshold=float(data.get("fitness_threshold", 0.0)),
        keep_top_percent=float(
            data.get("keep_top_percent", DEFAULT_KEEP_TOP_PERCENT)
        ),
        mutate_percent=float(data.get("mutate_percent", DEFAULT_MUTATE_PERCENT)),
        breed_percent=float(data.get("breed_percent", DEFAULT_BREED_PERCENT)),
        task=str(data.get("task", "xor")),
        episodes_per_network=int(data.get("episodes_per_network", 1)),
        seed=(int(data["seed"]) if data.get("seed") is not None else None),
    )


def load_run_config(path: Path) -> RunConfig:
    data = _load_yaml(path)
    evolution_path = data.get("evolution_config")
    if evolution_path is None:
        msg = "run.yml must specify an 'evolution_config' path"
        raise ValueError(msg)
    run = RunConfig(
        evolution_config=Path(evolution_path),
        output_dir=Path(data.get("output_dir", "runs")),
        workers=int(data.get("workers", 1)),
        timeout_s=(
            float(data["timeout_s"])
            if data.get("timeout_s") is not None
            else None
        ),
    )
    return run.resolve(path.parent)


__all__ = [
    "EvolutionConfig",
    "RunConfig",
    "load_evolution_config",
    "load_run_config",
]
