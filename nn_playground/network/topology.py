"""
Network Topology
================

Immutable description of a feed-forward network's layer structure.

A topology is an ordered tuple of layers whose first entry is always the
input layer and whose last entry is always the output layer. Every edit
returns a new NetworkTopology; the original snapshot is never modified.

Example:
    >>> topo = NetworkTopology.default()
    >>> topo = topo.add_hidden_layer()
    >>> topo = topo.update_layer(2, neuron_count=8, activation='tanh')
    >>> topo.neuron_counts
    (2, 4, 8, 1)
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from nn_playground.utils.logger import get_logger

_logger = get_logger(__name__)

INPUT = 'input'
HIDDEN = 'hidden'
OUTPUT = 'output'
LAYER_KINDS = (INPUT, HIDDEN, OUTPUT)

ACTIVATIONS = ('relu', 'sigmoid', 'tanh', 'linear')

DEFAULT_HIDDEN_NEURONS = 4
DEFAULT_HIDDEN_ACTIVATION = 'relu'
MIN_NEURONS = 1
MAX_NEURONS = 20


@dataclass(frozen=True)
class Layer:
    """A single layer: its role, width and (for non-input layers) activation."""
    kind: str
    neuron_count: int
    activation: Optional[str] = None

    def __post_init__(self):
        if self.kind not in LAYER_KINDS:
            raise ValueError(f"Unknown layer kind '{self.kind}'")
        if self.neuron_count < 1:
            raise ValueError(f"Layer must have at least one neuron, got {self.neuron_count}")
        if self.kind == INPUT:
            if self.activation is not None:
                raise ValueError("Input layer has no activation")
        elif self.activation not in ACTIVATIONS:
            raise ValueError(f"Unknown activation '{self.activation}'")

    @property
    def title(self) -> str:
        """Display title, e.g. 'Hidden Layer'."""
        return f"{self.kind.capitalize()} Layer"


@dataclass(frozen=True)
class NetworkTopology:
    """Ordered layers, input first and output last."""
    layers: Tuple[Layer, ...]

    def __post_init__(self):
        if len(self.layers) < 2:
            raise ValueError("A network needs at least an input and an output layer")
        if self.layers[0].kind != INPUT:
            raise ValueError("First layer must be the input layer")
        if self.layers[-1].kind != OUTPUT:
            raise ValueError("Last layer must be the output layer")
        if any(layer.kind != HIDDEN for layer in self.layers[1:-1]):
            raise ValueError("Only hidden layers may sit between input and output")

    @classmethod
    def default(cls) -> 'NetworkTopology':
        """2 inputs, one hidden ReLU layer of 4, a single sigmoid output."""
        return cls(layers=(
            Layer(INPUT, 2),
            Layer(HIDDEN, DEFAULT_HIDDEN_NEURONS, DEFAULT_HIDDEN_ACTIVATION),
            Layer(OUTPUT, 1, 'sigmoid'),
        ))

    def __len__(self) -> int:
        return len(self.layers)

    def __getitem__(self, index: int) -> Layer:
        return self.layers[index]

    @property
    def last_index(self) -> int:
        return len(self.layers) - 1

    @property
    def neuron_counts(self) -> Tuple[int, ...]:
        return tuple(layer.neuron_count for layer in self.layers)

    @property
    def max_neurons(self) -> int:
        return max(self.neuron_counts)

    def is_protected(self, index: int) -> bool:
        """Input and output layers cannot be removed."""
        return index in (0, self.last_index)

    def add_hidden_layer(
        self,
        neuron_count: int = DEFAULT_HIDDEN_NEURONS,
        activation: str = DEFAULT_HIDDEN_ACTIVATION,
    ) -> 'NetworkTopology':
        """Insert a new hidden layer directly before the output layer."""
        new_layer = Layer(HIDDEN, neuron_count, activation)
        layers = self.layers[:-1] + (new_layer, self.layers[-1])
        return NetworkTopology(layers=layers)

    def remove_layer(self, index: int) -> 'NetworkTopology':
        """
        Remove the layer at `index`.

        Removing the input or output layer is silently ignored and returns
        this same snapshot.
        """
        self._check_index(index)
        if self.is_protected(index):
            _logger.debug(f"Ignoring removal of protected layer {index}")
            return self
        layers = self.layers[:index] + self.layers[index + 1:]
        return NetworkTopology(layers=layers)

    def update_layer(
        self,
        index: int,
        neuron_count: Optional[int] = None,
        activation: Optional[str] = None,
        min_neurons: int = MIN_NEURONS,
        max_neurons: int = MAX_NEURONS,
    ) -> 'NetworkTopology':
        """
        Merge new field values into the layer at `index`.

        Hidden layer widths are clamped to [min_neurons, max_neurons].
        Input and output widths follow the dataset and cannot be edited here.

        Raises:
            IndexError: If index is out of range
            ValueError: For an unknown activation, an activation on the
                input layer, or a width change on a boundary layer
        """
        self._check_index(index)
        layer = self.layers[index]
        changes: Dict[str, Any] = {}

        if neuron_count is not None:
            if layer.kind != HIDDEN:
                raise ValueError(f"{layer.title} width is set by the dataset")
            clamped = max(min_neurons, min(max_neurons, int(neuron_count)))
            if clamped != neuron_count:
                _logger.debug(f"Clamped layer {index} width {neuron_count} -> {clamped}")
            changes['neuron_count'] = clamped

        if activation is not None:
            if layer.kind == INPUT:
                raise ValueError("Input layer has no activation")
            if activation not in ACTIVATIONS:
                raise ValueError(f"Unknown activation '{activation}'")
            changes['activation'] = activation

        if not changes:
            return self

        layers = list(self.layers)
        layers[index] = replace(layer, **changes)
        return NetworkTopology(layers=tuple(layers))

    def with_boundary_widths(self, input_width: int, output_width: int) -> 'NetworkTopology':
        """Match the input and output layer widths to a dataset's vector widths."""
        first, last = self.layers[0], self.layers[-1]
        if first.neuron_count == input_width and last.neuron_count == output_width:
            return self
        layers = (
            (replace(first, neuron_count=input_width),)
            + self.layers[1:-1]
            + (replace(last, neuron_count=output_width),)
        )
        return NetworkTopology(layers=layers)

    def layer_info(self) -> List[Dict[str, Any]]:
        """Per-layer summary dicts consumed by the visualizer."""
        info = []
        hidden_number = 0
        for layer in self.layers:
            if layer.kind == HIDDEN:
                hidden_number += 1
                name = f"Hidden {hidden_number}"
            else:
                name = layer.kind.capitalize()
            info.append({
                'name': name,
                'type': layer.kind,
                'neurons': layer.neuron_count,
                'activation': layer.activation,
            })
        return info

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.layers):
            raise IndexError(f"Layer index {index} out of range (0-{self.last_index})")
