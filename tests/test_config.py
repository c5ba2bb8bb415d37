"""
Tests for Config validation.

These tests verify that invalid configurations are caught early
rather than causing confusing errors once the window is open.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from nn_playground.training import TrainingConfig


class TestConfigValidation:
    """Test Config.__post_init__ validation."""

    def test_valid_config_passes(self):
        """Default config should validate without errors."""
        cfg = Config()
        assert cfg is not None

    def test_invalid_tick_interval_zero(self):
        """TICK_INTERVAL_MS=0 should fail validation."""
        cfg = Config()
        cfg.TICK_INTERVAL_MS = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_screen_size(self):
        """Non-positive screen dimensions should fail validation."""
        cfg = Config()
        cfg.SCREEN_WIDTH = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_neuron_bounds_inverted(self):
        """MIN_LAYER_NEURONS > MAX_LAYER_NEURONS should fail validation."""
        cfg = Config()
        cfg.MIN_LAYER_NEURONS = 10
        cfg.MAX_LAYER_NEURONS = 5
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_default_width_outside_bounds(self):
        """DEFAULT_HIDDEN_NEURONS above the maximum should fail validation."""
        cfg = Config()
        cfg.DEFAULT_HIDDEN_NEURONS = 50
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_prediction_noise(self):
        """PREDICTION_NOISE > 1 should fail validation."""
        cfg = Config()
        cfg.PREDICTION_NOISE = 1.5
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_metric_noise_negative(self):
        """Negative METRIC_NOISE should fail validation."""
        cfg = Config()
        cfg.METRIC_NOISE = -0.1
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_log_level(self):
        """Unknown LOG_LEVEL should fail validation."""
        cfg = Config()
        cfg.LOG_LEVEL = 'VERBOSE'
        with pytest.raises(AssertionError):
            cfg.__post_init__()


class TestTrainingConfigDefaults:
    """Test the TrainingConfig built from Config."""

    def test_defaults_match_playground(self):
        """Defaults: lr 0.03, 100 epochs, batch 32, xor."""
        tc = Config().training_config()
        assert tc == TrainingConfig(learning_rate=0.03, epoch_count=100, batch_size=32, dataset_id='xor')

    def test_overrides_flow_through(self):
        """Changed Config fields should appear in the TrainingConfig."""
        cfg = Config()
        cfg.EPOCHS = 20
        cfg.DATASET = 'sine'
        tc = cfg.training_config()
        assert tc.epoch_count == 20
        assert tc.dataset_id == 'sine'

    def test_out_of_range_epochs_rejected(self):
        """Epochs outside [10, 500] should raise ValueError."""
        cfg = Config()
        cfg.EPOCHS = 5
        with pytest.raises(ValueError):
            cfg.training_config()

    @pytest.mark.parametrize("field,value", [
        ('learning_rate', 0.0),
        ('learning_rate', 0.5),
        ('epoch_count', 501),
        ('batch_size', 0),
        ('batch_size', 129),
    ])
    def test_training_config_ranges(self, field, value):
        """Each hyperparameter is range checked."""
        with pytest.raises(ValueError):
            TrainingConfig().replace(**{field: value})

    def test_range_edges_accepted(self):
        """Range endpoints are inclusive."""
        tc = TrainingConfig(learning_rate=0.001, epoch_count=500, batch_size=1)
        assert tc.replace(learning_rate=0.1, epoch_count=10, batch_size=128).batch_size == 128
