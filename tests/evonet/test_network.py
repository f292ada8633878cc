from __future__ import annotations

import pytest
from evonet.errors import InvalidInputError, InvalidTopologyError, LengthMismatchError
from evonet.network import (
    NeuralNet,
    expected_synapse_count,
    fitness_key,
    validate_layer_shape,
)
from evonet.neurons import Layer, Neuron, Synapse
from evonet.rng import PythonRandom


class ScriptedRandom:
    def __init__(
        self,
        floats: tuple[float, ...] = (),
        ints: tuple[int, ...] = (),
    ) -> None:
        self.floats = list(floats)
        self.ints = list(ints)

    def uniform_float(self, lo: float, hi: float) -> float:
        return self.floats.pop(0)

    def uniform_int(self, lo: int, hi: int) -> int:
        return self.ints.pop(0)


def _two_input_network(first: float, second: float) -> NeuralNet:
    inputs = Layer.empty(2)
    output = Neuron(
        synapses=[
            Synapse(inputs.neurons[0], first),
            Synapse(inputs.neurons[1], second),
        ]
    )
    return NeuralNet([inputs, Layer([output])])


@pytest.mark.parametrize(
    "shape",
    [(4,), (2, 1), (2, 3, 1), (3, 5, 2, 1), (1, 1, 1, 1)],
)
def test_random_network_synapse_count_matches_topology(shape: tuple[int, ...]) -> None:
    network = NeuralNet.random(shape, PythonRandom.seeded(0))

    assert network.shape == shape
    assert network.synapse_count() == expected_synapse_count(shape)
    assert network.parameter_count() == sum(shape) + expected_synapse_count(shape)


def test_random_network_weights_in_initial_range() -> None:
    network = NeuralNet.random((3, 4, 2), PythonRandom.seeded(1))
    weights = [
        synapse.weight
        for layer in network.layers
        for neuron in layer.neurons
        for synapse in neuron.synapses
    ]
    assert weights
    assert all(-0.5 <= weight <= 0.5 for weight in weights)


@pytest.mark.parametrize("shape", [(), (2, 0, 1), (0,), (2, -1)])
def test_invalid_layer_shape_rejected(shape: tuple[int, ...]) -> None:
    with pytest.raises(InvalidTopologyError):
        NeuralNet.random(shape, PythonRandom.seeded(0))


def test_validate_layer_shape_returns_tuple() -> None:
    assert validate_layer_shape([3, 2]) == (3, 2)


def test_network_requires_consistent_wiring() -> None:
    with pytest.raises(InvalidTopologyError):
        NeuralNet([])
    with pytest.raises(InvalidTopologyError):
        NeuralNet([Layer.empty(2), Layer.empty(1)])


def test_evaluate_weighted_sum_without_hidden_layer() -> None:
    network = _two_input_network(0.5, -0.5)
    assert network.evaluate([1.0, 2.0]) == pytest.approx([-0.5])


def test_evaluate_propagates_through_hidden_layer() -> None:
    inputs = Layer.empty(1)
    hidden = Layer(
        [
            Neuron(synapses=[Synapse(inputs.neurons[0], 2.0)]),
            Neuron(synapses=[Synapse(inputs.neurons[0], -1.0)]),
        ]
    )
    output = Layer(
        [
            Neuron(
                synapses=[
                    Synapse(hidden.neurons[0], 0.5),
                    Synapse(hidden.neurons[1], 3.0),
                ]
            )
        ]
    )
    network = NeuralNet([inputs, hidden, output])

    assert network.evaluate([2.0]) == pytest.approx([0.5 * 4.0 + 3.0 * -2.0])
    assert hidden.values() == pytest.approx([4.0, -2.0])


def test_single_layer_network_echoes_inputs() -> None:
    network = NeuralNet.random((3,), PythonRandom.seeded(0))
    assert network.evaluate([1.0, 2.0, 3.0]) == [1.0, 2.0, 3.0]


def test_evaluate_rejects_wrong_input_length_without_side_effects() -> None:
    network = NeuralNet.random((2, 3, 1), PythonRandom.seeded(4))
    network.evaluate([0.3, 0.6])
    before = network.flatten()

    with pytest.raises(InvalidInputError):
        network.evaluate([1.0, 2.0, 3.0])

    assert network.flatten() == before


def test_flatten_order_is_values_then_weights_per_neuron() -> None:
    network = _two_input_network(0.25, 0.75)
    network.evaluate([1.0, 2.0])

    assert network.flatten() == pytest.approx([1.0, 2.0, 1.75, 0.25, 0.75])


def test_flatten_restore_round_trip_preserves_behaviour() -> None:
    rng = PythonRandom.seeded(11)
    network = NeuralNet.random((3, 4, 2), rng)
    other = NeuralNet.random((3, 4, 2), rng)
    inputs = [0.1, -0.7, 0.4]
    expected = network.evaluate(inputs)

    other.restore(network.flatten())

    assert other.flatten() == network.flatten()
    assert other.evaluate(inputs) == pytest.approx(expected)


def test_restore_rejects_wrong_length() -> None:
    network = NeuralNet.random((2, 2, 1), PythonRandom.seeded(0))
    vector = network.flatten()

    with pytest.raises(LengthMismatchError):
        network.restore(vector[:-1])
    with pytest.raises(LengthMismatchError):
        network.restore([*vector, 0.0])


def test_restore_writes_weights() -> None:
    network = _two_input_network(0.0, 0.0)
    network.restore([0.0, 0.0, 0.0, 3.0, -1.0])
    assert network.evaluate([1.0, 1.0]) == pytest.approx([2.0])


def test_copy_is_independent() -> None:
    rng = PythonRandom.seeded(5)
    original = NeuralNet.random((2, 3, 1), rng)
    original.set_fitness(9.0)
    inputs = [0.5, -0.25]
    baseline = original.evaluate(inputs)

    clone = original.copy()

    assert clone.fitness == 0.0
    assert clone.evaluate(inputs) == pytest.approx(baseline)

    for layer in clone.layers:
        for neuron in layer.neurons:
            neuron.synapses = [
                Synapse(synapse.source, synapse.weight * 10.0)
                for synapse in neuron.synapses
            ]
    clone.full_mutation(rng)

    assert original.evaluate(inputs) == pytest.approx(baseline)


def test_copy_wires_against_its_own_layers() -> None:
    original = NeuralNet.random((2, 2, 1), PythonRandom.seeded(2))
    clone = original.copy()

    for previous, layer in zip(clone.layers, clone.layers[1:]):
        for neuron in layer.neurons:
            assert [synapse.source for synapse in neuron.synapses] == previous.neurons
    original_neurons = {
        id(neuron) for layer in original.layers for neuron in layer.neurons
    }
    assert all(
        id(neuron) not in original_neurons
        for layer in clone.layers
        for neuron in layer.neurons
    )


def test_fitness_accumulates_and_overwrites() -> None:
    network = NeuralNet.random((1, 1), PythonRandom.seeded(0))
    assert network.fitness == 0.0

    network.add_fitness(1.5)
    network.add_fitness(-0.5)
    assert network.fitness == pytest.approx(1.0)

    network.set_fitness(-4.0)
    assert network.fitness == -4.0


def test_fitness_key_sorts_ascending() -> None:
    rng = PythonRandom.seeded(0)
    networks = [NeuralNet.random((1, 1), rng) for _ in range(3)]
    for network, value in zip(networks, (2.0, -1.0, 0.5)):
        network.set_fitness(value)

    ordered = sorted(networks, key=fitness_key)

    assert [network.fitness for network in ordered] == [-1.0, 0.5, 2.0]


def test_single_value_mutation_targets_chosen_neuron() -> None:
    network = _two_input_network(1.0, 1.0)
    rng = ScriptedRandom(floats=(1.2,), ints=(1, 0, 1, 1))

    result = network.single_value_mutation(rng)

    assert result is network
    weights = [synapse.weight for synapse in network.layers[1].neurons[0].synapses]
    assert weights == pytest.approx([1.0, 1.2])


def test_single_value_mutation_on_input_layer_changes_nothing() -> None:
    network = _two_input_network(0.3, 0.4)
    before = network.flatten()

    network.single_value_mutation(ScriptedRandom(ints=(0, 1)))

    assert network.flatten() == before


def test_full_mutation_preserves_topology() -> None:
    network = NeuralNet.random((3, 4, 2), PythonRandom.seeded(3))
    length = len(network.flatten())

    result = network.full_mutation(PythonRandom.seeded(9))

    assert result is network
    assert len(network.flatten()) == length
    assert network.synapse_count() == expected_synapse_count((3, 4, 2))
