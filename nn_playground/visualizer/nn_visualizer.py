"""
Neural Network Visualizer
=========================

Draws the designed network as a layered diagram.

Features:
    - Layers split evenly across the available width
    - Neurons centred vertically within each layer's column
    - Full bipartite connections between consecutive layers
    - Neuron fill colour keyed by layer kind (input / hidden / output)
    - Layer titles with the activation of each hidden layer
    - Optional highlight of the layer selected in the designer

Layout is computed by plain methods (calculate_layer_positions,
calculate_connections) so it can be checked without a display.
"""

import pygame
import pygame.gfxdraw
from typing import Any, Dict, List, Optional, Tuple

from config import Config
from nn_playground.network import NetworkTopology


class NeuralNetVisualizer:
    """
    Topology diagram renderer.

    Example:
        >>> visualizer = NeuralNetVisualizer(config, x=20, y=60, width=960, height=420)
        >>> visualizer.render(screen, session.topology, selected_layer=1)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        x: int = 0,
        y: int = 0,
        width: int = 600,
        height: int = 400
    ):
        """
        Initialize the visualizer.

        Args:
            config: Configuration object
            x: X position of visualization area
            y: Y position of visualization area
            width: Width of visualization area
            height: Height of visualization area
        """
        self.config = config or Config()
        self.x = x
        self.y = y
        self.width = width
        self.height = height

        self.neuron_radius = self.config.VIS_NEURON_RADIUS
        self.neuron_spacing = self.config.VIS_NEURON_SPACING
        self.header_height = self.config.VIS_HEADER_HEIGHT

        self.bg_color = self.config.COLOR_PANEL
        self.text_color = self.config.COLOR_TEXT
        self.dim_text_color = (180, 180, 190)
        self.connection_color = (255, 255, 255, 51)
        self.outline_color = (200, 200, 210)
        self.highlight_color = (250, 204, 21)

        pygame.font.init()
        self.font_small = pygame.font.Font(None, 20)
        self.font_medium = pygame.font.Font(None, 24)

        # Cached layer positions
        self._cached_positions: Optional[List[Dict[str, Any]]] = None
        self._cached_key: Optional[Tuple] = None

    def set_bounds(self, x: int, y: int, width: int, height: int) -> None:
        """Move or resize the drawing area."""
        self.x, self.y, self.width, self.height = x, y, width, height
        self._cached_key = None

    def preferred_height(self, topology: NetworkTopology) -> int:
        """Height that fits the widest layer without squeezing neurons."""
        return max(self.config.VIS_MIN_HEIGHT, topology.max_neurons * self.neuron_spacing + 80)

    def calculate_layer_positions(self, topology: NetworkTopology) -> List[Dict[str, Any]]:
        """
        Calculate the position of each layer and its neurons.

        Layer i of N sits at x + (i + 1) * width / (N + 1). Neurons are
        spaced evenly (at most VIS_NEURON_SPACING apart) and centred in the
        area below the header.
        """
        layer_info = topology.layer_info()
        num_layers = len(layer_info)
        layer_spacing = self.width / (num_layers + 1)

        network_top = self.y + self.header_height
        available_height = self.height - self.header_height

        positions = []
        for i, info in enumerate(layer_info):
            layer_x = self.x + (i + 1) * layer_spacing
            num_neurons = info['neurons']

            neuron_spacing = min(self.neuron_spacing, available_height / max(num_neurons, 1))
            total_height = num_neurons * neuron_spacing
            start_y = network_top + (available_height - total_height) / 2

            neuron_positions = [
                (layer_x, start_y + j * neuron_spacing + neuron_spacing / 2)
                for j in range(num_neurons)
            ]

            positions.append({
                'x': layer_x,
                'neurons': num_neurons,
                'positions': neuron_positions,
                'type': info['type'],
                'name': info['name'],
                'activation': info['activation'],
            })

        return positions

    @staticmethod
    def calculate_connections(
        layer_positions: List[Dict[str, Any]]
    ) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
        """Every neuron of each layer connected to every neuron of the next."""
        connections = []
        for from_layer, to_layer in zip(layer_positions, layer_positions[1:]):
            for start in from_layer['positions']:
                for end in to_layer['positions']:
                    connections.append((start, end))
        return connections

    def layer_color(self, kind: str) -> Tuple[int, int, int]:
        return self.config.COLOR_LAYER.get(kind, self.config.COLOR_LAYER['hidden'])

    @staticmethod
    def layer_label(layer_pos: Dict[str, Any]) -> str:
        """'Input Layer', 'Hidden Layer (relu)', 'Output Layer'."""
        label = f"{layer_pos['type'].capitalize()} Layer"
        if layer_pos['type'] == 'hidden':
            label += f" ({layer_pos['activation']})"
        return label

    def render(
        self,
        screen: pygame.Surface,
        topology: NetworkTopology,
        selected_layer: Optional[int] = None
    ) -> None:
        """
        Render the network diagram.

        Args:
            screen: Pygame surface to draw on
            topology: Network to draw
            selected_layer: Index of the layer to highlight (if any)
        """
        key = (topology, self.x, self.y, self.width, self.height)
        if self._cached_key != key:
            self._cached_positions = self.calculate_layer_positions(topology)
            self._cached_key = key
        layer_positions = self._cached_positions
        if layer_positions is None:
            return

        self._draw_background(screen)
        if selected_layer is not None and 0 <= selected_layer < len(layer_positions):
            self._draw_selection(screen, layer_positions[selected_layer])
        self._draw_connections(screen, layer_positions)
        self._draw_neurons(screen, layer_positions)
        self._draw_layer_labels(screen, layer_positions)

    def _draw_background(self, screen: pygame.Surface) -> None:
        panel_rect = pygame.Rect(self.x, self.y, self.width, self.height)
        pygame.draw.rect(screen, self.bg_color, panel_rect, border_radius=8)
        pygame.draw.rect(screen, self.config.COLOR_BORDER, panel_rect, 1, border_radius=8)

    def _draw_selection(self, screen: pygame.Surface, layer_pos: Dict[str, Any]) -> None:
        column_width = max(2 * self.neuron_radius + 24, int(self.width / (len(self._cached_positions) + 1) * 0.6))
        rect = pygame.Rect(0, self.y + 6, column_width, self.height - 12)
        rect.centerx = int(layer_pos['x'])
        pygame.draw.rect(screen, self.highlight_color, rect, 2, border_radius=6)

    def _draw_connections(self, screen: pygame.Surface, layer_positions: List[Dict[str, Any]]) -> None:
        """Draw translucent straight edges on an overlay surface."""
        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        for start, end in self.calculate_connections(layer_positions):
            pygame.draw.line(
                overlay, self.connection_color,
                (start[0] - self.x, start[1] - self.y),
                (end[0] - self.x, end[1] - self.y),
                1
            )
        screen.blit(overlay, (self.x, self.y))

    def _draw_neurons(self, screen: pygame.Surface, layer_positions: List[Dict[str, Any]]) -> None:
        for layer_pos in layer_positions:
            color = self.layer_color(layer_pos['type'])
            for pos in layer_pos['positions']:
                center = (int(pos[0]), int(pos[1]))
                self._draw_aa_circle(screen, color, center, self.neuron_radius)
                self._draw_aa_circle(screen, self.outline_color, center, self.neuron_radius, border=1)

    def _draw_layer_labels(self, screen: pygame.Surface, layer_positions: List[Dict[str, Any]]) -> None:
        label_y = self.y + 12
        for layer_pos in layer_positions:
            text = self.font_medium.render(self.layer_label(layer_pos), True, self.text_color)
            text_rect = text.get_rect(centerx=int(layer_pos['x']), top=label_y)
            screen.blit(text, text_rect)

            count_text = self.font_small.render(f"{layer_pos['neurons']} neurons", True, self.dim_text_color)
            count_rect = count_text.get_rect(centerx=int(layer_pos['x']), bottom=self.y + self.height - 8)
            screen.blit(count_text, count_rect)

    def _draw_aa_circle(
        self,
        screen: pygame.Surface,
        color: Tuple[int, int, int],
        pos: Tuple[int, int],
        radius: int,
        border: int = 0
    ) -> None:
        """Draw an anti-aliased circle using pygame.gfxdraw."""
        x, y = int(pos[0]), int(pos[1])
        r = max(1, int(radius))

        if border == 0:
            pygame.gfxdraw.aacircle(screen, x, y, r, color)
            pygame.gfxdraw.filled_circle(screen, x, y, r, color)
        else:
            pygame.gfxdraw.aacircle(screen, x, y, r, color)
