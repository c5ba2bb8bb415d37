"""
Visualizer Module
=================

Pygame renderers for the playground.

Classes:
    NeuralNetVisualizer - Layered topology diagram (Design tab)
    DataPlot            - Dataset, boundary and prediction canvas
    Dashboard           - Loss / accuracy chart (Train tab)
    TrainingHUD         - Hyperparameters, run state and epoch progress
"""

from .nn_visualizer import NeuralNetVisualizer
from .data_plot import DataPlot
from .dashboard import Dashboard
from .hud import TrainingHUD

__all__ = ['NeuralNetVisualizer', 'DataPlot', 'Dashboard', 'TrainingHUD']
