"""
Tests for PlaygroundSession, the owner of all playground state.
"""

import numpy as np
import pytest

from nn_playground.session import PlaygroundSession
from nn_playground.training import ManualScheduler, PredictionUnavailableError, TrainingState


@pytest.fixture
def session(config):
    config.EPOCHS = 10
    return PlaygroundSession(config, scheduler=ManualScheduler(), rng=np.random.default_rng(0))


@pytest.fixture
def changes(session):
    """Names passed to on_change, in order."""
    seen = []
    session.on_change(seen.append)
    return seen


class TestInitialState:
    """Fresh session."""

    def test_defaults(self, session):
        assert session.dataset.name == 'xor'
        assert session.topology.neuron_counts == (2, 4, 1)
        assert session.run.current_epoch == 0
        assert session.predictions == ()

    def test_unknown_dataset_config_falls_back(self, config):
        config.DATASET = 'spiral'
        session = PlaygroundSession(config)
        assert session.dataset.name == 'xor'
        assert session.training_config.dataset_id == 'xor'


class TestTopologyOperations:
    """Layer edits go through the session."""

    def test_add_and_notify(self, session, changes):
        session.add_hidden_layer()
        assert session.topology.neuron_counts == (2, 4, 4, 1)
        assert changes == ['topology']

    def test_remove_protected_does_not_notify(self, session, changes):
        session.remove_layer(0)
        assert changes == []
        assert len(session.topology) == 3

    def test_remove_hidden(self, session):
        session.remove_layer(1)
        assert session.topology.neuron_counts == (2, 1)

    def test_update_uses_config_bounds(self, session):
        session.config.MAX_LAYER_NEURONS = 8
        session.update_layer(1, neuron_count=12)
        assert session.topology[1].neuron_count == 8

    def test_update_rejects_bad_activation(self, session):
        with pytest.raises(ValueError):
            session.update_layer(1, activation='swish')


class TestDatasetOperations:
    """Switching datasets."""

    def test_set_dataset_syncs_widths(self, session):
        session.set_dataset('sine')
        assert session.dataset.name == 'sine'
        assert session.training_config.dataset_id == 'sine'
        assert session.topology.neuron_counts == (1, 4, 1)

    def test_set_dataset_clears_predictions(self, session):
        session.start_training()
        session.scheduler.advance(100)
        session.run_predictions()
        session.set_dataset('circle')
        assert session.predictions == ()

    def test_cycle(self, session):
        assert session.cycle_dataset().name == 'circle'
        assert session.cycle_dataset().name == 'sine'
        assert session.cycle_dataset().name == 'xor'

    def test_update_training_config_dataset(self, session):
        session.update_training_config(dataset_id='circle', epoch_count=20)
        assert session.dataset.name == 'circle'
        assert session.training_config.epoch_count == 20
        assert session.run.epoch_count == 20

    def test_invalid_config_rejected(self, session):
        with pytest.raises(ValueError):
            session.update_training_config(batch_size=500)
        assert session.training_config.batch_size == 32


class TestStepping:
    """Keyboard-style hyperparameter steps."""

    def test_learning_rate_steps(self, session):
        session.step_learning_rate(1)
        assert session.training_config.learning_rate == pytest.approx(0.031)

    def test_learning_rate_clamped(self, session):
        session.update_training_config(learning_rate=0.1)
        session.step_learning_rate(1)
        assert session.training_config.learning_rate == pytest.approx(0.1)

    def test_epoch_steps_clamped(self, session):
        session.step_epochs(-1)
        assert session.training_config.epoch_count == 10

    def test_batch_steps(self, session):
        session.step_batch_size(-1)
        assert session.training_config.batch_size == 31


class TestTraining:
    """Training and prediction flow."""

    def test_predict_before_training_rejected(self, session):
        assert not session.can_predict()
        with pytest.raises(PredictionUnavailableError):
            session.run_predictions()

    def test_toggle(self, session):
        session.toggle_training()
        assert session.run.state == TrainingState.RUNNING
        session.toggle_training()
        assert session.run.state == TrainingState.IDLE

    def test_full_run_and_predict(self, session, changes):
        session.start_training()
        session.scheduler.run_until_idle()
        assert session.run.state == TrainingState.COMPLETED
        results = session.run_predictions()
        assert len(results) == 4
        assert session.prediction_summary.count == 4
        assert changes.count('training') == 11
        assert changes[-1] == 'predictions'

    def test_reset_clears_predictions(self, session):
        session.start_training()
        session.scheduler.advance(200)
        session.run_predictions()
        session.reset_training()
        assert session.predictions == ()
        assert session.run.current_epoch == 0
        assert not session.can_predict()
