"""Generation management: keep, mutate, breed and refill a population of networks."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from random import Random

from .errors import (
    EmptyElitePoolError,
    InvalidPercentageError,
    InvalidPopulationSizeError,
)
from .network import NeuralNet, fitness_key, validate_layer_shape
from .rng import RandomSource, ensure_source

DEFAULT_KEEP_TOP_PERCENT = 0.1
DEFAULT_MUTATE_PERCENT = 0.1
DEFAULT_BREED_PERCENT = 0.2

_ROUNDING_TOLERANCE = 1e-9


def validate_population_size(population_size: int) -> int:
    if isinstance(population_size, bool) or not isinstance(population_size, int):
        msg = f"population_size must be an integer, got {population_size!r}."
        raise InvalidPopulationSizeError(msg)
    if population_size <= 0:
        msg = "population_size must be positive."
        raise InvalidPopulationSizeError(msg)
    if population_size % 2:
        msg = f"population_size must be even, got {population_size}."
        raise InvalidPopulationSizeError(msg)
    return population_size


def _share(population_size: int, percent: float) -> int:
    # Tolerance keeps products such as 100 * 0.29 from rounding down a whole network.
    return math.floor(population_size * percent + _ROUNDING_TOLERANCE)


@dataclass(frozen=True, slots=True)
class GenerationPlan:
    """Number of networks produced by each step of a generation transition."""

    keep: int
    mutate: int
    breed: int
    random: int

    @property
    def total(self) -> int:
        return self.keep + self.mutate + self.breed + self.random


def plan_generation(
    population_size: int,
    keep_top_percent: float,
    mutate_percent: float,
    breed_percent: float,
) -> GenerationPlan:
    """Validate the percentages and split ``population_size`` between the steps.

    Counts are floor-rounded; the random fill absorbs the rounding loss and any
    unallocated share.
    """
    percentages = (
        ("keep_top_percent", keep_top_percent),
        ("mutate_percent", mutate_percent),
        ("breed_percent", breed_percent),
    )
    for label, value in percentages:
        if not 0.0 <= value <= 1.0:
            msg = f"{label} must be in [0, 1], got {value}."
            raise InvalidPercentageError(msg)
    total = keep_top_percent + mutate_percent + breed_percent
    if total > 1.0 and not math.isclose(total, 1.0):
        msg = f"The percentages must not sum to more than 1, got {total}."
        raise InvalidPercentageError(msg)

    keep = _share(population_size, keep_top_percent)
    mutate = _share(population_size, mutate_percent)
    breed = _share(population_size, breed_percent)
    if keep == 0 and (mutate or breed):
        msg = (
            f"keep_top_percent={keep_top_percent} keeps no networks out of "
            f"{population_size}, but mutation or breeding needs at least one."
        )
        raise EmptyElitePoolError(msg)

    return GenerationPlan(
        keep=keep,
        mutate=mutate,
        breed=breed,
        random=population_size - keep - mutate - breed,
    )


def crossover(first: NeuralNet, second: NeuralNet, rng: RandomSource) -> None:
    """Swap one contiguous slice of the flattened vectors between two networks.

    Both networks are modified in place. A start index ``s`` is drawn from
    ``[0, L)`` and an end index ``e`` from ``[s, L)``; positions in ``[s, e)``
    are exchanged.
    """
    first_vector = first.flatten()
    second_vector = second.flatten()
    length = len(first_vector)
    if len(second_vector) != length:
        msg = (
            "Cannot cross networks with different topologies "
            f"({length} != {len(second_vector)} parameters)."
        )
        raise ValueError(msg)

    start = rng.uniform_int(0, length)
    stop = rng.uniform_int(start, length)

    first_child = (
        first_vector[:start] + second_vector[start:stop] + first_vector[stop:]
    )
    second_child = (
        second_vector[:start] + first_vector[start:stop] + second_vector[stop:]
    )

    first.restore(first_child)
    second.restore(second_child)


class PopulationManager:
    """Owns one generation of networks and produces the next one on demand."""

    def __init__(
        self,
        layer_shape: Sequence[int],
        population_size: int,
        *,
        keep_top_percent: float = DEFAULT_KEEP_TOP_PERCENT,
        mutate_percent: float = DEFAULT_MUTATE_PERCENT,
        breed_percent: float = DEFAULT_BREED_PERCENT,
        rng: RandomSource | Random | None = None,
    ) -> None:
        self.layer_shape = validate_layer_shape(layer_shape)
        self.population_size = validate_population_size(population_size)
        self.rng = ensure_source(rng)
        self.generation = 0
        self.set_percentages(keep_top_percent, mutate_percent, breed_percent)
        self._networks: list[NeuralNet] = [
            self._random_network() for _ in range(self.population_size)
        ]

    @property
    def networks(self) -> tuple[NeuralNet, ...]:
        return tuple(self._networks)

    @property
    def plan(self) -> GenerationPlan:
        return self._plan

    def __len__(self) -> int:
        return len(self._networks)

    def set_percentages(
        self,
        keep_top_percent: float,
        mutate_percent: float,
        breed_percent: float,
    ) -> None:
        """Configure how the next generations are split.

        Any share left unallocated is filled with fresh random networks.
        """
        self._plan = plan_generation(
            self.population_size,
            keep_top_percent,
            mutate_percent,
            breed_percent,
        )
        self.keep_top_percent = keep_top_percent
        self.mutate_percent = mutate_percent
        self.breed_percent = breed_percent

    def best(self) -> NeuralNet:
        """Return the highest-fitness network, the earliest one on ties."""
        return max(self._networks, key=fitness_key)

    def generate_next_generation(self) -> None:
        ranked = sorted(self._networks, key=fitness_key)
        ranked.reverse()

        next_generation = self._keep_top(ranked)
        self._add_mutated(ranked, next_generation)
        self._add_bred(next_generation)
        self._add_random(next_generation)

        for network in next_generation:
            network.set_fitness(0.0)

        self._networks = next_generation
        self.generation += 1

    def _keep_top(self, ranked: Sequence[NeuralNet]) -> list[NeuralNet]:
        return [network.copy() for network in ranked[: self._plan.keep]]

    def _add_mutated(
        self,
        ranked: Sequence[NeuralNet],
        next_generation: list[NeuralNet],
    ) -> None:
        if not self._plan.mutate:
            return
        elite_count = self._elite_count(next_generation)
        start = len(next_generation)
        for index in range(start, start + self._plan.mutate):
            offspring = ranked[index % elite_count].copy()
            next_generation.append(offspring.single_value_mutation(self.rng))

    def _add_bred(self, next_generation: list[NeuralNet]) -> None:
        # Crossover modifies the kept networks themselves before they are copied.
        if not self._plan.breed:
            return
        elite_count = self._elite_count(next_generation)
        remaining = self._plan.breed
        breeding_index = 0
        while remaining > 0:
            partner_index = self.rng.uniform_int(0, elite_count)
            parent = next_generation[breeding_index % elite_count]
            partner = next_generation[partner_index]
            crossover(parent, partner, self.rng)

            next_generation.append(parent.copy())
            remaining -= 1
            if remaining > 0:
                next_generation.append(partner.copy())
                remaining -= 1
            breeding_index += 1

    def _add_random(self, next_generation: list[NeuralNet]) -> None:
        while len(next_generation) < self.population_size:
            next_generation.append(self._random_network())

    def _elite_count(self, next_generation: Sequence[NeuralNet]) -> int:
        elite_count = self._plan.keep
        if elite_count <= 0 or len(next_generation) < elite_count:
            msg = "Mutation and breeding require at least one kept network."
            raise EmptyElitePoolError(msg)
        return elite_count

    def _random_network(self) -> NeuralNet:
        return NeuralNet.random(self.layer_shape, self.rng)


__all__ = [
    "DEFAULT_BREED_PERCENT",
    "DEFAULT_KEEP_TOP_PERCENT",
    "DEFAULT_MUTATE_PERCENT",
    "GenerationPlan",
    "PopulationManager",
    "crossover",
    "plan_generation",
    "validate_population_size",
]
