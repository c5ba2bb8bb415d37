"""
Tests for the immutable network topology.
"""

import pytest

from nn_playground.network import HIDDEN, INPUT, OUTPUT, Layer, NetworkTopology


@pytest.fixture
def topology():
    """Input(2) -> Hidden(4, relu) -> Output(1, sigmoid)."""
    return NetworkTopology.default()


class TestLayer:
    """Layer construction rules."""

    def test_input_layer_has_no_activation(self):
        with pytest.raises(ValueError):
            Layer(INPUT, 2, 'relu')

    def test_hidden_layer_needs_known_activation(self):
        with pytest.raises(ValueError):
            Layer(HIDDEN, 4, 'softmax')

    def test_zero_neurons_rejected(self):
        with pytest.raises(ValueError):
            Layer(HIDDEN, 0, 'relu')


class TestDefaultTopology:
    """The starting network."""

    def test_structure(self, topology):
        assert len(topology) == 3
        assert topology.neuron_counts == (2, 4, 1)
        assert [layer.kind for layer in topology.layers] == [INPUT, HIDDEN, OUTPUT]
        assert topology[1].activation == 'relu'
        assert topology[2].activation == 'sigmoid'

    def test_invalid_structures_rejected(self):
        with pytest.raises(ValueError):
            NetworkTopology(layers=(Layer(INPUT, 2),))
        with pytest.raises(ValueError):
            NetworkTopology(layers=(Layer(HIDDEN, 2, 'relu'), Layer(OUTPUT, 1, 'sigmoid')))


class TestAddHiddenLayer:
    """Adding layers."""

    def test_inserted_before_output(self, topology):
        """New layer sits second to last; output stays last."""
        updated = topology.add_hidden_layer(6, 'tanh')
        assert len(updated) == 4
        assert updated[2] == Layer(HIDDEN, 6, 'tanh')
        assert updated[-1].kind == OUTPUT

    def test_defaults(self, topology):
        updated = topology.add_hidden_layer()
        assert updated[2] == Layer(HIDDEN, 4, 'relu')

    def test_original_unchanged(self, topology):
        topology.add_hidden_layer()
        assert len(topology) == 3


class TestRemoveLayer:
    """Removing layers."""

    def test_remove_input_is_noop(self, topology):
        assert topology.remove_layer(0) is topology

    def test_remove_output_is_noop(self, topology):
        assert topology.remove_layer(topology.last_index) is topology

    def test_remove_middle_preserves_order(self):
        """Removing hidden layer 2 of [in, h1, h2, h3, out] keeps the rest in order."""
        topo = NetworkTopology(layers=(
            Layer(INPUT, 2),
            Layer(HIDDEN, 3, 'relu'),
            Layer(HIDDEN, 5, 'tanh'),
            Layer(HIDDEN, 7, 'sigmoid'),
            Layer(OUTPUT, 1, 'sigmoid'),
        ))
        updated = topo.remove_layer(2)
        assert updated.neuron_counts == (2, 3, 7, 1)
        assert [layer.activation for layer in updated.layers] == [None, 'relu', 'sigmoid', 'sigmoid']

    def test_remove_only_hidden_layer(self, topology):
        updated = topology.remove_layer(1)
        assert updated.neuron_counts == (2, 1)

    def test_out_of_range_index(self, topology):
        with pytest.raises(IndexError):
            topology.remove_layer(5)


class TestUpdateLayer:
    """Editing layer fields."""

    def test_update_width_and_activation(self, topology):
        updated = topology.update_layer(1, neuron_count=8, activation='tanh')
        assert updated[1] == Layer(HIDDEN, 8, 'tanh')

    def test_only_named_fields_change(self, topology):
        updated = topology.update_layer(1, activation='sigmoid')
        assert updated[1].neuron_count == 4

    def test_width_clamped_high(self, topology):
        assert topology.update_layer(1, neuron_count=50)[1].neuron_count == 20

    def test_width_clamped_low(self, topology):
        assert topology.update_layer(1, neuron_count=0)[1].neuron_count == 1

    def test_custom_bounds(self, topology):
        assert topology.update_layer(1, neuron_count=12, max_neurons=10)[1].neuron_count == 10

    def test_unknown_activation_rejected(self, topology):
        with pytest.raises(ValueError):
            topology.update_layer(1, activation='gelu')

    def test_input_activation_rejected(self, topology):
        with pytest.raises(ValueError):
            topology.update_layer(0, activation='relu')

    def test_boundary_width_rejected(self, topology):
        with pytest.raises(ValueError):
            topology.update_layer(topology.last_index, neuron_count=3)

    def test_output_activation_allowed(self, topology):
        assert topology.update_layer(2, activation='linear')[2].activation == 'linear'

    def test_no_changes_returns_same(self, topology):
        assert topology.update_layer(1) is topology


class TestBoundaryWidths:
    """Matching input and output widths to a dataset."""

    def test_sine_widths(self, topology):
        updated = topology.with_boundary_widths(1, 1)
        assert updated.neuron_counts == (1, 4, 1)

    def test_unchanged_returns_same(self, topology):
        assert topology.with_boundary_widths(2, 1) is topology


class TestLayerInfo:
    """Summary dicts for the visualizer."""

    def test_names(self, topology):
        info = topology.add_hidden_layer().layer_info()
        assert [i['name'] for i in info] == ['Input', 'Hidden 1', 'Hidden 2', 'Output']
        assert info[1] == {'name': 'Hidden 1', 'type': HIDDEN, 'neurons': 4, 'activation': 'relu'}
