"""
Configuration file for the Neural Network Playground
====================================================

Window layout, training defaults, simulator timing and visualization
options are centralized here. Modify these values to change how the
playground looks and how the simulated training behaves.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.TICK_INTERVAL_MS)
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, Optional


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Window Settings - Pygame window and panel layout
    2. Network Defaults - Layer limits for the designer
    3. Training - Default hyperparameters and their allowed ranges
    4. Simulator - Tick timing and noise amplitudes
    5. Visualization - Colors and spacing
    6. System - Logging and seeding
    """

    # =========================================================================
    # WINDOW SETTINGS
    # =========================================================================

    SCREEN_WIDTH: int = 1000
    SCREEN_HEIGHT: int = 700
    FPS: int = 60

    # Height of the tab bar across the top of the window
    TAB_BAR_HEIGHT: int = 44

    # Width of the left-hand settings / HUD column on the Train tab
    SIDEBAR_WIDTH: int = 260

    # =========================================================================
    # NETWORK DEFAULTS
    # =========================================================================

    # Neuron count for newly added hidden layers
    DEFAULT_HIDDEN_NEURONS: int = 4
    DEFAULT_HIDDEN_ACTIVATION: str = 'relu'

    # Bounds enforced when editing a hidden layer's width
    MIN_LAYER_NEURONS: int = 1
    MAX_LAYER_NEURONS: int = 20

    # =========================================================================
    # TRAINING DEFAULTS
    # =========================================================================

    # Dataset shown on launch: 'xor', 'circle', 'sine'
    DATASET: str = 'xor'

    # Hyperparameters are displayed only; the simulator does not optimize
    LEARNING_RATE: float = 0.03
    EPOCHS: int = 100
    BATCH_SIZE: int = 32

    # Step sizes used by the keyboard controls
    LEARNING_RATE_STEP: float = 0.001
    EPOCHS_STEP: int = 10
    BATCH_SIZE_STEP: int = 1

    # =========================================================================
    # SIMULATOR SETTINGS
    # =========================================================================

    # Milliseconds between simulated epochs
    TICK_INTERVAL_MS: int = 100

    # Loss / accuracy noise is drawn from U(0, METRIC_NOISE)
    METRIC_NOISE: float = 0.1
    LOSS_FLOOR: float = 0.1
    ACCURACY_CEILING: float = 0.98

    # Predictions jitter the true value by U(-PREDICTION_NOISE, PREDICTION_NOISE)
    PREDICTION_NOISE: float = 0.15

    # Fraction of epochs after which the dataset view shows a boundary/curve
    BOUNDARY_PROGRESS_THRESHOLD: float = 0.1

    # =========================================================================
    # VISUALIZATION SETTINGS
    # =========================================================================

    COLOR_BACKGROUND: Tuple[int, int, int] = (17, 24, 39)
    COLOR_PANEL: Tuple[int, int, int] = (31, 41, 55)
    COLOR_BORDER: Tuple[int, int, int] = (55, 65, 81)
    COLOR_TEXT: Tuple[int, int, int] = (255, 255, 255)
    COLOR_TEXT_DIM: Tuple[int, int, int] = (156, 163, 175)

    # Neuron fill per layer kind
    COLOR_LAYER: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: {
        'input': (59, 130, 246),    # Blue
        'hidden': (139, 92, 246),   # Violet
        'output': (16, 185, 129),   # Green
    })

    # Class colors for data points and the boundary grid
    COLOR_CLASS_POSITIVE: Tuple[int, int, int] = (59, 130, 246)
    COLOR_CLASS_NEGATIVE: Tuple[int, int, int] = (239, 68, 68)
    COLOR_CORRECT: Tuple[int, int, int] = (16, 185, 129)
    COLOR_INCORRECT: Tuple[int, int, int] = (239, 68, 68)
    COLOR_OUTLINE_NEGATIVE: Tuple[int, int, int] = (249, 115, 22)

    # Alpha of boundary grid cells (0-255)
    BOUNDARY_ALPHA: int = 26
    BOUNDARY_RESOLUTION: int = 50

    # Chart colors
    COLOR_LOSS: Tuple[int, int, int] = (239, 68, 68)
    COLOR_ACCURACY: Tuple[int, int, int] = (16, 185, 129)

    # Neural network visualizer
    VIS_NEURON_RADIUS: int = 12
    VIS_NEURON_SPACING: int = 40
    VIS_MIN_HEIGHT: int = 400
    VIS_HEADER_HEIGHT: int = 40

    # Padding (fraction of observed range) applied around plotted data
    PLOT_PADDING: float = 0.1
    CHART_PADDING: int = 30

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    LOG_DIR: str = 'logs'
    LOG_LEVEL: str = 'INFO'
    LOG_TO_FILE: bool = True

    # Random seed for reproducible datasets and noise (None for random)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation and derived calculations."""
        assert self.SCREEN_WIDTH > 0 and self.SCREEN_HEIGHT > 0, "Screen size must be positive"
        assert self.TICK_INTERVAL_MS > 0, "Tick interval must be positive"
        assert 0 < self.MIN_LAYER_NEURONS <= self.MAX_LAYER_NEURONS, "Invalid layer neuron bounds"
        assert self.MIN_LAYER_NEURONS <= self.DEFAULT_HIDDEN_NEURONS <= self.MAX_LAYER_NEURONS, \
            "Default hidden width must be within layer bounds"
        assert 0 <= self.PREDICTION_NOISE <= 1, "Prediction noise must be in [0, 1]"
        assert self.METRIC_NOISE >= 0, "Metric noise must be non-negative"
        assert 0 < self.BOUNDARY_RESOLUTION, "Boundary resolution must be positive"
        assert self.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR'), "Unknown log level"

    def training_config(self):
        """Build the initial TrainingConfig from the defaults above."""
        from nn_playground.training.simulator import TrainingConfig
        return TrainingConfig(
            learning_rate=self.LEARNING_RATE,
            epoch_count=self.EPOCHS,
            batch_size=self.BATCH_SIZE,
            dataset_id=self.DATASET,
        )


# Global config instance for easy importing
config = Config()
