"""Fully-connected feed-forward networks evolved by weight mutation and crossover."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .errors import InvalidInputError, InvalidTopologyError, LengthMismatchError
from .neurons import Layer, Synapse
from .rng import RandomSource


def validate_layer_shape(layer_shape: Sequence[int]) -> tuple[int, ...]:
    """Return the shape as a tuple, rejecting empty shapes and zero-sized layers."""
    shape = tuple(layer_shape)
    if not shape:
        msg = "layer_shape must contain at least one layer."
        raise InvalidTopologyError(msg)
    for size in shape:
        if isinstance(size, bool) or not isinstance(size, int):
            msg = f"Layer sizes must be integers, got {size!r}."
            raise InvalidTopologyError(msg)
        if size <= 0:
            msg = f"Layer sizes must be positive, got {shape}."
            raise InvalidTopologyError(msg)
    return shape


def expected_synapse_count(layer_shape: Sequence[int]) -> int:
    """Number of synapses in a fully-connected network of the given shape."""
    return sum(
        size * previous for previous, size in zip(layer_shape, layer_shape[1:])
    )


@dataclass(slots=True, eq=False)
class NeuralNet:
    """Stateful feed-forward network with an externally assigned fitness."""

    layers: list[Layer]
    _fitness: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.layers:
            msg = "A network requires at least one layer."
            raise InvalidTopologyError(msg)
        for neuron in self.layers[0].neurons:
            if neuron.synapses:
                msg = "Input layer neurons must not have synapses."
                raise InvalidTopologyError(msg)
        for previous, layer in zip(self.layers, self.layers[1:]):
            for neuron in layer.neurons:
                if len(neuron.synapses) != len(previous.neurons):
                    msg = (
                        f"Neuron has {len(neuron.synapses)} synapses but the "
                        f"previous layer has {len(previous.neurons)} neurons."
                    )
                    raise InvalidTopologyError(msg)

    @classmethod
    def random(cls, layer_shape: Sequence[int], rng: RandomSource) -> NeuralNet:
        """Build a network of the given shape with weights in ``[-0.5, 0.5]``."""
        shape = validate_layer_shape(layer_shape)
        layers = [Layer.empty(size) for size in shape]
        for previous, layer in zip(layers, layers[1:]):
            layer.wire(previous, rng)
        return cls(layers)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(len(layer.neurons) for layer in self.layers)

    @property
    def fitness(self) -> float:
        return self._fitness

    def add_fitness(self, delta: float) -> None:
        self._fitness += delta

    def set_fitness(self, value: float) -> None:
        self._fitness = value

    def copy(self) -> NeuralNet:
        """Return a deep copy wired against its own freshly built layers.

        Only values and weights are copied; the copy starts with zero fitness
        and shares no neurons or synapses with the original.
        """
        layers = [Layer.from_values(self.layers[0].neurons)]
        for layer in self.layers[1:]:
            layers.append(Layer.copy_wired(layer.neurons, layers[-1]))
        return NeuralNet(layers)

    def evaluate(self, inputs: Sequence[float]) -> list[float]:
        """Run a forward pass and return the output layer values.

        Values of every non-input neuron are overwritten in place.
        """
        input_layer = self.layers[0]
        if len(inputs) != len(input_layer.neurons):
            msg = (
                f"Expected {len(input_layer.neurons)} inputs "
                f"but received {len(inputs)}."
            )
            raise InvalidInputError(msg)

        for neuron, value in zip(input_layer.neurons, inputs, strict=True):
            neuron.value = float(value)

        for layer in self.layers[1:]:
            for neuron in layer.neurons:
                neuron.calculate_value()

        return self.layers[-1].values()

    def full_mutation(self, rng: RandomSource) -> NeuralNet:
        for layer in self.layers:
            for neuron in layer.neurons:
                neuron.full_mutation(rng)
        return self

    def single_value_mutation(self, rng: RandomSource) -> NeuralNet:
        """Mutate one weight of one random neuron in one random layer.

        Input neurons carry no synapses, so picking one leaves the network
        unchanged.
        """
        layer = self.layers[rng.uniform_int(0, len(self.layers))]
        neuron = layer.neurons[rng.uniform_int(0, len(layer.neurons))]
        neuron.single_value_mutation(rng)
        return self

    def synapse_count(self) -> int:
        return sum(
            len(neuron.synapses) for layer in self.layers for neuron in layer.neurons
        )

    def parameter_count(self) -> int:
        """Length of the flattened vector: one value per neuron plus every weight."""
        return sum(len(layer.neurons) for layer in self.layers) + self.synapse_count()

    def flatten(self) -> list[float]:
        """Return neuron values and weights in layer, neuron, synapse order."""
        vector: list[float] = []
        for layer in self.layers:
            for neuron in layer.neurons:
                vector.append(neuron.value)
                for synapse in neuron.synapses:
                    vector.append(synapse.weight)
        return vector

    def restore(self, vector: Sequence[float]) -> None:
        """Load a vector produced by ``flatten`` back into this network."""
        expected = self.parameter_count()
        if len(vector) != expected:
            msg = f"Expected a vector of length {expected}, got {len(vector)}."
            raise LengthMismatchError(msg)

        position = 0
        for layer in self.layers:
            for neuron in layer.neurons:
                neuron.value = float(vector[position])
                position += 1
                restored: list[Synapse] = []
                for synapse in neuron.synapses:
                    restored.append(Synapse(synapse.source, float(vector[position])))
                    position += 1
                neuron.synapses = restored


def fitness_key(network: NeuralNet) -> float:
    """Sort key ordering networks by ascending fitness."""
    return network.fitness


__all__ = [
    "NeuralNet",
    "expected_synapse_count",
    "fitness_key",
    "validate_layer_shape",
]
