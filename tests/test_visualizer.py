"""
Tests for the visualizer module.

Tests cover:
- NeuralNetVisualizer layer layout and connections
- DataPlot bounds, coordinate mapping and boundary grid
- Dashboard chart point mapping
- HUD progress bar
- Render smoke tests on an offscreen surface
"""

import math
import os

import numpy as np
import pytest

# Set SDL_VIDEODRIVER before importing pygame to avoid display errors in CI
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

import pygame
pygame.init()

from nn_playground.data import generate
from nn_playground.network import NetworkTopology
from nn_playground.training import PredictionResult, TrainingConfig, TrainingRun, predict, summarize
from nn_playground.visualizer import Dashboard, DataPlot, NeuralNetVisualizer, TrainingHUD
from nn_playground.visualizer.dashboard import chart_points
from nn_playground.visualizer.data_plot import (
    DataBounds,
    boundary_class,
    compute_bounds,
    decision_grid,
    to_canvas,
    to_input,
)
from nn_playground.visualizer.hud import progress_fill_width


@pytest.fixture
def surface():
    return pygame.Surface((1000, 700))


@pytest.fixture
def visualizer(config):
    """400 wide, 440 tall, so 400 px below the 40 px header."""
    return NeuralNetVisualizer(config, x=0, y=0, width=400, height=440)


class TestLayerLayout:
    """NeuralNetVisualizer geometry."""

    def test_layers_split_width(self, visualizer):
        """Layer i of N sits at (i + 1) * width / (N + 1)."""
        positions = visualizer.calculate_layer_positions(NetworkTopology.default())
        assert [p['x'] for p in positions] == pytest.approx([100, 200, 300])

    def test_neurons_centred(self, visualizer):
        positions = visualizer.calculate_layer_positions(NetworkTopology.default())
        hidden = positions[1]['positions']
        ys = [y for _, y in hidden]
        assert ys == pytest.approx([180, 220, 260, 300])
        assert np.mean(ys) == pytest.approx(40 + 400 / 2)

    def test_spacing_shrinks_for_wide_layers(self, visualizer):
        topology = NetworkTopology.default().update_layer(1, neuron_count=20)
        hidden = visualizer.calculate_layer_positions(topology)[1]['positions']
        assert hidden[1][1] - hidden[0][1] == pytest.approx(20)

    def test_connection_count(self, visualizer):
        """Full bipartite connections: 2*4 + 4*1."""
        positions = visualizer.calculate_layer_positions(NetworkTopology.default())
        assert len(NeuralNetVisualizer.calculate_connections(positions)) == 12

    def test_connection_count_deeper(self, visualizer):
        topology = NetworkTopology.default().add_hidden_layer(3)
        positions = visualizer.calculate_layer_positions(topology)
        assert len(NeuralNetVisualizer.calculate_connections(positions)) == 2 * 4 + 4 * 3 + 3 * 1

    def test_preferred_height(self, visualizer):
        assert visualizer.preferred_height(NetworkTopology.default()) == 400
        wide = NetworkTopology.default().update_layer(1, neuron_count=20)
        assert visualizer.preferred_height(wide) == 20 * 40 + 80

    def test_layer_labels(self, visualizer):
        positions = visualizer.calculate_layer_positions(NetworkTopology.default())
        assert [NeuralNetVisualizer.layer_label(p) for p in positions] == [
            'Input Layer', 'Hidden Layer (relu)', 'Output Layer'
        ]

    def test_layer_colors(self, visualizer, config):
        assert visualizer.layer_color('input') == config.COLOR_LAYER['input']
        assert visualizer.layer_color('output') == config.COLOR_LAYER['output']


class TestDataBounds:
    """Padded plot bounds."""

    def test_xor_bounds_padded(self):
        bounds = compute_bounds(generate('xor'))
        assert bounds.min_x == pytest.approx(-0.1)
        assert bounds.max_x == pytest.approx(1.1)
        assert bounds.min_y == pytest.approx(-0.1)
        assert bounds.max_y == pytest.approx(1.1)

    def test_sine_bounds(self):
        """x from the input unpadded, y from the output padded."""
        bounds = compute_bounds(generate('sine'))
        assert bounds.min_x == pytest.approx(0.0)
        assert bounds.max_x == pytest.approx(99 / 100 * 2 * math.pi)
        assert bounds.min_y == pytest.approx(-1.2)
        assert bounds.max_y == pytest.approx(1.2)

    def test_mapping_round_trip(self):
        bounds = DataBounds(-1.0, 1.0, -1.0, 1.0)
        px, py = to_canvas(0.5, -0.5, bounds, 200, 100)
        assert (px, py) == pytest.approx((150, 25))
        assert to_input(px, py, bounds, 200, 100) == pytest.approx((0.5, -0.5))

    def test_flip_y(self):
        bounds = DataBounds(0.0, 1.0, 0.0, 1.0)
        assert to_canvas(0.0, 1.0, bounds, 100, 100, flip_y=True) == pytest.approx((0, 0))


class TestDecisionGrid:
    """Heuristic boundary grid."""

    def test_circle_rule(self):
        assert boundary_class(0.0, 0.0, 'circle') == 1
        assert boundary_class(0.9, 0.0, 'circle') == 0

    def test_xor_rule(self):
        assert boundary_class(0.8, 0.2, 'xor') == 1
        assert boundary_class(0.2, 0.8, 'xor') == 1
        assert boundary_class(0.2, 0.2, 'xor') == 0
        assert boundary_class(0.8, 0.8, 'xor') == 0

    def test_grid_size(self):
        bounds = compute_bounds(generate('xor'))
        assert len(decision_grid(bounds, 300, 200, 'xor')) == 2500

    def test_cells_sampled_at_corner(self):
        bounds = compute_bounds(generate('xor'))
        cells = decision_grid(bounds, 100, 100, 'xor', resolution=4)
        by_corner = {(c.x, c.y): c.predicted_class for c in cells}
        # (75, 0) maps to input (0.8, -0.1)
        assert by_corner[(75, 0)] == 1
        # (0, 0) maps to input (-0.1, -0.1)
        assert by_corner[(0, 0)] == 0


class TestChartPoints:
    """Dashboard polyline mapping."""

    def test_mapping(self):
        points = chart_points([0.0, 1.0, 0.5], left=10, top=20, width=100, height=50)
        assert [x for x, _ in points] == pytest.approx([10, 60, 110])
        assert [y for _, y in points] == pytest.approx([70, 20, 45])

    def test_short_series(self):
        assert chart_points([0.5], 0, 0, 100, 100) == []
        assert chart_points([], 0, 0, 100, 100) == []

    def test_dashboard_points(self, config):
        dashboard = Dashboard(config, x=0, y=0, width=260, height=160)
        dashboard.update(TrainingRun(epoch_count=10, current_epoch=3,
                                     loss_series=(0.9, 0.7, 0.5), accuracy_series=(0.1, 0.3, 0.5)))
        rect = dashboard.chart_rect
        loss = dashboard.loss_points()
        assert len(loss) == 3
        assert loss[0] == pytest.approx((rect.left, rect.top + 0.1 * rect.height))
        assert dashboard.accuracy_points()[-1][0] == pytest.approx(rect.left + rect.width)

    def test_dashboard_reset_clears_cards(self, config):
        dashboard = Dashboard(config)
        dashboard.update(TrainingRun(epoch_count=10, current_epoch=1, loss_series=(0.9,), accuracy_series=(0.1,)))
        dashboard.update(TrainingRun(epoch_count=10))
        assert dashboard.loss_points() == []
        assert len(dashboard.cards['loss'].history) == 0


class TestHud:
    """Progress bar arithmetic."""

    def test_fill_width(self):
        assert progress_fill_width(5, 10, 200) == 100
        assert progress_fill_width(0, 10, 200) == 0
        assert progress_fill_width(10, 10, 200) == 200


class TestRenderSmoke:
    """Renderers draw onto an offscreen surface without error."""

    def test_network_render(self, surface, visualizer):
        visualizer.render(surface, NetworkTopology.default().add_hidden_layer(), selected_layer=1)

    @pytest.mark.parametrize("name", ['xor', 'circle', 'sine'])
    def test_data_plot_training(self, surface, config, rng, name):
        plot = DataPlot(config, x=300, y=60, width=300, height=200, rng=rng)
        dataset = generate(name, rng)
        plot.render_training(surface, dataset, 0.0)
        plot.render_training(surface, dataset, 0.5)

    @pytest.mark.parametrize("name", ['xor', 'circle', 'sine'])
    def test_data_plot_predictions(self, surface, config, rng, name):
        plot = DataPlot(config, x=300, y=60, width=300, height=200, rng=rng)
        dataset = generate(name, rng)
        run = TrainingRun(epoch_count=10, current_epoch=10)
        plot.render_predictions(surface, dataset, predict(dataset, run, rng))
        plot.render_predictions(surface, dataset, [])

    def test_dashboard_and_hud(self, surface, config):
        run = TrainingRun(epoch_count=10, current_epoch=2, loss_series=(0.9, 0.8), accuracy_series=(0.2, 0.3))
        dashboard = Dashboard(config, x=300, y=300, width=400, height=200)
        dashboard.render(surface)
        dashboard.update(run)
        dashboard.render(surface)

        hud = TrainingHUD(config)
        bottom = hud.render(surface, (16, 60), 260, run, TrainingConfig())
        assert bottom > 60
        hud.render_prediction_summary(surface, (16, bottom), 260, None)
        results = [PredictionResult((0.0, 0.0), 0.0, 0.1)]
        hud.render_prediction_summary(surface, (16, bottom), 260, summarize(results))
