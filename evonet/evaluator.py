"""Evaluators that score every network of a generation with a fitness task."""

from __future__ import annotations

import multiprocessing
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from random import Random
from typing import Any

from .network import NeuralNet
from .tasks import Task


@dataclass(frozen=True, slots=True)
class EvaluationConfig:
    """Configuration shared by evaluators."""

    episodes_per_network: int = 1
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.episodes_per_network <= 0:
            msg = "episodes_per_network must be positive."
            raise ValueError(msg)


@dataclass(slots=True)
class EvaluationStats:
    """Counters from the most recent evaluation pass."""

    networks: int = 0
    episodes: int = 0

    def accumulate(self, *, networks: int, episodes: int) -> None:
        self.networks += networks
        self.episodes += episodes


def _episode_seeds(base_seed: int, index: int, episodes: int) -> list[int]:
    start = base_seed + index * episodes
    return [start + offset for offset in range(episodes)]


def _score_network(network: NeuralNet, task: Task, seeds: Iterable[int]) -> float:
    scores = [float(task(network, Random(seed))) for seed in seeds]
    return sum(scores) / len(scores)


class SyncEvaluator:
    """Single-process evaluator that scores networks in population order."""

    def __init__(self, task: Task, *, config: EvaluationConfig | None = None) -> None:
        self.task = task
        self.config = config or EvaluationConfig()
        self.last_stats = EvaluationStats()

    def __call__(self, networks: Sequence[NeuralNet], rng: Random) -> list[float]:
        """Add each network's average episode score to its fitness.

        Returns:
            The scores in the same order as ``networks``.
        """
        base_seed = (
            self.config.seed if self.config.seed is not None else rng.getrandbits(32)
        )
        episodes = self.config.episodes_per_network
        stats = EvaluationStats()
        scores: list[float] = []
        for index, network in enumerate(networks):
            score = _score_network(
                network,
                self.task,
                _episode_seeds(base_seed, index, episodes),
            )
            network.add_fitness(score)
            scores.append(score)
            stats.accumulate(networks=1, episodes=episodes)

        self.last_stats = stats
        return scores


def _worker_loop(
    worker_id: int,
    task: Task,
    config: EvaluationConfig,
    base_seed: int,
    task_queue: multiprocessing.queues.Queue[Any],
    result_queue: multiprocessing.queues.Queue[Any],
) -> None:
    episodes = config.episodes_per_network
    try:
        while True:
            item = task_queue.get()
            if item is None:
                break
            index, network = item
            score = _score_network(
                network,
                task,
                _episode_seeds(base_seed, index, episodes),
            )
            result_queue.put((index, score))
    except Exception:  # pragma: no cover - propagated to parent
        result_queue.put(("__error__", worker_id))
        raise


class ParallelEvaluator:
    """Multiprocessing evaluator; fitness is applied back in the calling process."""

    def __init__(
        self,
        task: Task,
        *,
        workers: int,
        timeout_s: float | None = None,
        config: EvaluationConfig | None = None,
    ) -> None:
        if workers <= 0:
            msg = "workers must be positive."
            raise ValueError(msg)
        if timeout_s is not None and timeout_s <= 0.0:
            msg = "timeout_s must be positive when provided."
            raise ValueError(msg)

        self.task = task
        self.workers = workers
        self.timeout_s = timeout_s
        self.config = config or EvaluationConfig()
        self.last_stats = EvaluationStats()

    def __call__(self, networks: Sequence[NeuralNet], rng: Random) -> list[float]:
        if not networks:
            self.last_stats = EvaluationStats()
            return []

        base_seed = (
            self.config.seed if self.config.seed is not None else rng.getrandbits(32)
        )

        ctx = multiprocessing.get_context("spawn")
        task_queue: multiprocessing.queues.Queue[Any] = ctx.Queue()
        result_queue: multiprocessing.queues.Queue[Any] = ctx.Queue()

        processes = [
            ctx.Process(
                target=_worker_loop,
                args=(
                    worker_id,
                    self.task,
                    self.config,
                    base_seed,
                    task_queue,
                    result_queue,
                ),
            )
            for worker_id in range(self.workers)
        ]

        for proc in processes:
            proc.start()

        success = False
        try:
            for index, network in enumerate(networks):
                task_queue.put((index, network))

            for _ in processes:
                task_queue.put(None)

            scores: dict[int, float] = {}
            while len(scores) < len(networks):
                if self.timeout_s is None:
                    index, score = result_queue.get()
                else:
                    index, score = result_queue.get(timeout=self.timeout_s)
                if index == "__error__":
                    raise RuntimeError(f"Worker {score} failed during evaluation.")
                scores[index] = score

            ordered = [scores[index] for index in range(len(networks))]
            for network, score in zip(networks, ordered, strict=True):
                network.add_fitness(score)

            success = True
            self.last_stats = EvaluationStats(
                networks=len(networks),
                episodes=len(networks) * self.config.episodes_per_network,
            )
            return ordered
        finally:
            for proc in processes:
                if not success and proc.is_alive():
                    proc.terminate()
                proc.join()
                if success and proc.exitcode not in (0, None):
                    raise RuntimeError(
                        f"Worker process exited with code {proc.exitcode}"
                    )


__all__ = [
    "EvaluationConfig",
    "EvaluationStats",
    "ParallelEvaluator",
    "SyncEvaluator",
]
