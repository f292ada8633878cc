"""Built-in fitness tasks that score networks against target functions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from random import Random

from .network import NeuralNet

Task = Callable[[NeuralNet, Random], float]


def _negative_mse(
    network: NeuralNet,
    samples: Sequence[tuple[Sequence[float], float]],
) -> float:
    error = 0.0
    for inputs, target in samples:
        output = network.evaluate(inputs)[0]
        error += (output - target) ** 2
    return -error / len(samples)


@dataclass(frozen=True, slots=True)
class TruthTableTask:
    """Score a network by how closely its first output reproduces a truth table."""

    rows: tuple[tuple[tuple[float, ...], float], ...]

    def __post_init__(self) -> None:
        if not self.rows:
            msg = "A truth table needs at least one row."
            raise ValueError(msg)
        widths = {len(inputs) for inputs, _target in self.rows}
        if len(widths) != 1:
            msg = "All truth table rows must have the same number of inputs."
            raise ValueError(msg)

    @property
    def input_size(self) -> int:
        return len(self.rows[0][0])

    def __call__(self, network: NeuralNet, rng: Random) -> float:
        rows = list(self.rows)
        rng.shuffle(rows)
        return _negative_mse(network, rows)


@dataclass(frozen=True, slots=True)
class LinearTargetTask:
    """Score a network against ``sum(c_i * x_i)`` on randomly sampled inputs."""

    coefficients: tuple[float, ...]
    samples: int = 16
    low: float = -1.0
    high: float = 1.0

    def __post_init__(self) -> None:
        if not self.coefficients:
            msg = "coefficients must not be empty."
            raise ValueError(msg)
        if self.samples <= 0:
            msg = "samples must be positive."
            raise ValueError(msg)
        if self.low >= self.high:
            msg = "low must be smaller than high."
            raise ValueError(msg)

    @property
    def input_size(self) -> int:
        return len(self.coefficients)

    def __call__(self, network: NeuralNet, rng: Random) -> float:
        dataset: list[tuple[list[float], float]] = []
        for _ in range(self.samples):
            inputs = [rng.uniform(self.low, self.high) for _ in self.coefficients]
            target = sum(
                weight * value
                for weight, value in zip(self.coefficients, inputs, strict=True)
            )
            dataset.append((inputs, target))
        return _negative_mse(network, dataset)


TASKS: dict[str, TruthTableTask | LinearTargetTask] = {
    "xor": TruthTableTask(
        rows=(
            ((0.0, 0.0), 0.0),
            ((0.0, 1.0), 1.0),
            ((1.0, 0.0), 1.0),
            ((1.0, 1.0), 0.0),
        )
    ),
    "and": TruthTableTask(
        rows=(
            ((0.0, 0.0), 0.0),
            ((0.0, 1.0), 0.0),
            ((1.0, 0.0), 0.0),
            ((1.0, 1.0), 1.0),
        )
    ),
    "linear": LinearTargetTask(coefficients=(0.5, -0.25)),
}


def get_task(name: str) -> TruthTableTask | LinearTargetTask:
    try:
        return TASKS[name.strip().lower()]
    except KeyError as error:
        valid = ", ".join(sorted(TASKS))
        msg = f"Unknown task {name!r}. Expected one of: {valid}"
        raise KeyError(msg) from error


__all__ = ["LinearTargetTask", "TASKS", "Task", "TruthTableTask", "get_task"]
