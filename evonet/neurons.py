"""Neuron-level primitives (synapses, neurons and layers) for feed-forward networks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .rng import RandomSource

WEIGHT_INIT_RANGE: tuple[float, float] = (-0.5, 0.5)


@dataclass(slots=True, eq=False)
class Synapse:
    """Weighted connection reading the value of an upstream neuron."""

    source: Neuron = field(repr=False)
    weight: float


@dataclass(slots=True, eq=False)
class Neuron:
    """Neuron holding a scalar value and its ordered incoming synapses."""

    value: float = 0.0
    synapses: list[Synapse] = field(default_factory=list)

    @classmethod
    def rewired(cls, source: Neuron, previous_layer: Layer) -> Neuron:
        """Copy ``source`` and wire its weights positionally to ``previous_layer``."""
        synapses = [
            Synapse(upstream, synapse.weight)
            for upstream, synapse in zip(
                previous_layer.neurons, source.synapses, strict=True
            )
        ]
        return cls(value=source.value, synapses=synapses)

    def calculate_value(self) -> float:
        total = 0.0
        for synapse in self.synapses:
            total += synapse.weight * synapse.source.value
        self.value = total
        return total

    def initialize_weights(
        self,
        previous_neurons: Sequence[Neuron],
        rng: RandomSource,
    ) -> None:
        """Append one randomly weighted synapse per upstream neuron."""
        low, high = WEIGHT_INIT_RANGE
        for upstream in previous_neurons:
            self.synapses.append(Synapse(upstream, rng.uniform_float(low, high)))

    def single_value_mutation(self, rng: RandomSource) -> None:
        """Scale one randomly chosen weight up by at most 50% or down toward zero.

        The synapse list is replaced rather than edited so that no synapse object
        is ever modified in place.
        """
        if not self.synapses:
            return
        target = rng.uniform_int(0, len(self.synapses))
        mutated: list[Synapse] = []
        for index, synapse in enumerate(self.synapses):
            weight = synapse.weight
            if index == target:
                if rng.uniform_int(0, 2) == 1:
                    weight *= rng.uniform_float(1.0, 1.5)
                else:
                    weight *= rng.uniform_float(0.0, 0.5)
            mutated.append(Synapse(synapse.source, weight))
        self.synapses = mutated

    def full_mutation(self, rng: RandomSource) -> None:
        """Independently mutate every weight using one roll in ``[0, 100)`` each.

        Rolls up to 2 flip the sign, up to 4 draw a fresh weight, up to 6 scale
        by ``[1, 2]``, up to 8 scale by ``[0, 1]``; anything higher keeps the
        weight.
        """
        mutated: list[Synapse] = []
        for synapse in self.synapses:
            weight = synapse.weight
            roll = rng.uniform_float(0.0, 100.0)
            if roll <= 2.0:
                weight = -weight
            elif roll <= 4.0:
                weight = rng.uniform_float(*WEIGHT_INIT_RANGE)
            elif roll <= 6.0:
                weight *= rng.uniform_float(1.0, 2.0)
            elif roll <= 8.0:
                weight *= rng.uniform_float(0.0, 1.0)
            mutated.append(Synapse(synapse.source, weight))
        self.synapses = mutated


@dataclass(slots=True, eq=False)
class Layer:
    """Ordered neurons; position determines wiring to the next layer."""

    neurons: list[Neuron] = field(default_factory=list)

    @classmethod
    def empty(cls, size: int) -> Layer:
        """Create ``size`` zero-valued neurons without synapses."""
        return cls([Neuron() for _ in range(size)])

    @classmethod
    def from_values(cls, neurons: Sequence[Neuron]) -> Layer:
        """Copy neuron values only; synapses are not carried over."""
        return cls([Neuron(value=neuron.value) for neuron in neurons])

    @classmethod
    def copy_wired(cls, neurons: Sequence[Neuron], previous_layer: Layer) -> Layer:
        """Copy neurons and their weights, wired against ``previous_layer``."""
        return cls([Neuron.rewired(neuron, previous_layer) for neuron in neurons])

    def wire(self, previous_layer: Layer, rng: RandomSource) -> None:
        for neuron in self.neurons:
            neuron.initialize_weights(previous_layer.neurons, rng)

    def values(self) -> list[float]:
        return [neuron.value for neuron in self.neurons]

    def __len__(self) -> int:
        return len(self.neurons)


__all__ = ["Layer", "Neuron", "Synapse", "WEIGHT_INIT_RANGE"]
