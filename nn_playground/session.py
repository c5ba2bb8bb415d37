"""
Playground Session
==================

Owns every piece of playground state and is the only place it changes:

    topology     - NetworkTopology snapshot being designed
    dataset      - Active synthetic Dataset
    config       - Current TrainingConfig
    run          - Current TrainingRun (owned by the ProgressSimulator)
    predictions  - Last set of simulated PredictionResults

Each operation swaps in a new immutable snapshot and then notifies
observers with the name of what changed ('topology', 'dataset', 'config',
'training' or 'predictions'). Renderers read the snapshots and never
mutate them.

Usage:
    >>> session = PlaygroundSession(Config(), scheduler=ManualScheduler())
    >>> session.set_dataset('circle')
    >>> session.start_training()
    >>> session.scheduler.run_until_idle()
    >>> session.run_predictions()
"""

from typing import Callable, List, Optional, Tuple

import numpy as np

from config import Config
from nn_playground.data import Dataset, generate, next_dataset
from nn_playground.network import NetworkTopology
from nn_playground.training import (
    ManualScheduler,
    PredictionResult,
    PredictionSummary,
    ProgressSimulator,
    TickScheduler,
    TrainingConfig,
    TrainingRun,
    can_predict,
    predict,
    summarize,
)
from nn_playground.training.simulator import BATCH_SIZE_RANGE, EPOCH_RANGE, LEARNING_RATE_RANGE
from nn_playground.utils.logger import get_logger, log_session_event

_logger = get_logger(__name__)


class PlaygroundSession:
    """
    Explicit owner of topology, dataset, training and prediction state.

    Example:
        >>> session = PlaygroundSession()
        >>> session.add_hidden_layer()
        >>> len(session.topology)
        4
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        scheduler: Optional[TickScheduler] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the session.

        Args:
            config: Configuration object
            scheduler: Tick source for the simulator (ManualScheduler if None)
            rng: Random generator shared by datasets, metrics and predictions
        """
        self.config = config or Config()
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.SEED)

        self._training_config = self.config.training_config()
        self._dataset = generate(self._training_config.dataset_id, self.rng)
        if self._dataset.name != self._training_config.dataset_id:
            self._training_config = self._training_config.replace(dataset_id=self._dataset.name)
        self._topology = NetworkTopology.default().with_boundary_widths(
            self._dataset.input_width, self._dataset.output_width
        )
        self._predictions: Tuple[PredictionResult, ...] = ()
        self._callbacks: List[Callable[[str], None]] = []

        self.simulator = ProgressSimulator(
            self.scheduler,
            self._training_config,
            interval_ms=self.config.TICK_INTERVAL_MS,
            rng=self.rng,
            metric_noise=self.config.METRIC_NOISE,
            loss_floor=self.config.LOSS_FLOOR,
            accuracy_ceiling=self.config.ACCURACY_CEILING,
        )
        self.simulator.on_update(lambda run: self._notify('training'))

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    @property
    def topology(self) -> NetworkTopology:
        return self._topology

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def training_config(self) -> TrainingConfig:
        return self._training_config

    @property
    def run(self) -> TrainingRun:
        return self.simulator.run

    @property
    def predictions(self) -> Tuple[PredictionResult, ...]:
        return self._predictions

    @property
    def prediction_summary(self) -> PredictionSummary:
        return summarize(self._predictions)

    def on_change(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with the name of each changed part."""
        self._callbacks.append(callback)

    # =========================================================================
    # TOPOLOGY
    # =========================================================================

    def add_hidden_layer(self) -> NetworkTopology:
        """Add a default hidden layer just before the output layer."""
        self._topology = self._topology.add_hidden_layer(
            self.config.DEFAULT_HIDDEN_NEURONS,
            self.config.DEFAULT_HIDDEN_ACTIVATION,
        )
        log_session_event('add_layer', layers=len(self._topology))
        self._notify('topology')
        return self._topology

    def remove_layer(self, index: int) -> NetworkTopology:
        """Remove a hidden layer; input and output removals are ignored."""
        updated = self._topology.remove_layer(index)
        if updated is not self._topology:
            self._topology = updated
            log_session_event('remove_layer', index=index, layers=len(updated))
            self._notify('topology')
        return self._topology

    def update_layer(
        self,
        index: int,
        neuron_count: Optional[int] = None,
        activation: Optional[str] = None,
    ) -> NetworkTopology:
        """Change a layer's width and/or activation (see NetworkTopology.update_layer)."""
        updated = self._topology.update_layer(
            index,
            neuron_count=neuron_count,
            activation=activation,
            min_neurons=self.config.MIN_LAYER_NEURONS,
            max_neurons=self.config.MAX_LAYER_NEURONS,
        )
        if updated is not self._topology:
            self._topology = updated
            layer = updated[index]
            log_session_event('update_layer', index=index,
                              neurons=layer.neuron_count, activation=layer.activation)
            self._notify('topology')
        return self._topology

    # =========================================================================
    # DATASET & HYPERPARAMETERS
    # =========================================================================

    def set_dataset(self, dataset_id: str) -> Dataset:
        """
        Regenerate the dataset, replacing the old one entirely.

        Boundary layer widths follow the new dataset and any stored
        predictions are discarded since they describe the old samples.
        """
        self._dataset = generate(dataset_id, self.rng)
        self._training_config = self._training_config.replace(dataset_id=self._dataset.name)
        self.simulator.set_config(self._training_config)
        self._topology = self._topology.with_boundary_widths(
            self._dataset.input_width, self._dataset.output_width
        )
        self._predictions = ()
        log_session_event('dataset', dataset=self._dataset.name, samples=len(self._dataset))
        self._notify('dataset')
        self._notify('topology')
        return self._dataset

    def cycle_dataset(self) -> Dataset:
        """Switch to the next registered dataset."""
        return self.set_dataset(next_dataset(self._dataset.name))

    def update_training_config(self, **changes) -> TrainingConfig:
        """
        Change hyperparameters.

        Raises:
            ValueError: If a value falls outside its allowed range
        """
        dataset_id = changes.pop('dataset_id', None)
        if changes:
            self._training_config = self._training_config.replace(**changes)
            self.simulator.set_config(self._training_config)
            log_session_event('config', **changes)
            self._notify('config')
        if dataset_id is not None and dataset_id != self._dataset.name:
            self.set_dataset(dataset_id)
        return self._training_config

    def step_learning_rate(self, direction: int) -> TrainingConfig:
        """Nudge the learning rate by one step, staying within range."""
        lr = self._training_config.learning_rate + direction * self.config.LEARNING_RATE_STEP
        lr = round(min(max(lr, LEARNING_RATE_RANGE[0]), LEARNING_RATE_RANGE[1]), 3)
        return self.update_training_config(learning_rate=lr)

    def step_epochs(self, direction: int) -> TrainingConfig:
        """Nudge the epoch count by one step, staying within range."""
        epochs = self._training_config.epoch_count + direction * self.config.EPOCHS_STEP
        epochs = min(max(epochs, EPOCH_RANGE[0]), EPOCH_RANGE[1])
        return self.update_training_config(epoch_count=epochs)

    def step_batch_size(self, direction: int) -> TrainingConfig:
        """Nudge the batch size by one step, staying within range."""
        batch = self._training_config.batch_size + direction * self.config.BATCH_SIZE_STEP
        batch = min(max(batch, BATCH_SIZE_RANGE[0]), BATCH_SIZE_RANGE[1])
        return self.update_training_config(batch_size=batch)

    # =========================================================================
    # TRAINING
    # =========================================================================

    def start_training(self) -> TrainingRun:
        log_session_event('start', dataset=self._dataset.name,
                          epochs=self._training_config.epoch_count)
        return self.simulator.start()

    def stop_training(self) -> TrainingRun:
        return self.simulator.stop()

    def toggle_training(self) -> TrainingRun:
        """Start when not running, stop when running."""
        if self.simulator.is_running:
            return self.stop_training()
        return self.start_training()

    def reset_training(self) -> TrainingRun:
        """Clear the run and any stored predictions."""
        run = self.simulator.reset()
        self._predictions = ()
        self._notify('predictions')
        return run

    # =========================================================================
    # PREDICTIONS
    # =========================================================================

    def can_predict(self) -> bool:
        return can_predict(self.simulator.run)

    def run_predictions(self) -> Tuple[PredictionResult, ...]:
        """
        Replace the stored predictions with a fresh simulated set.

        Raises:
            PredictionUnavailableError: Before the first training tick
        """
        results = predict(self._dataset, self.simulator.run, self.rng, self.config.PREDICTION_NOISE)
        self._predictions = tuple(results)
        summary = self.prediction_summary
        log_session_event('predict', count=summary.count,
                          accuracy=f"{summary.accuracy:.3f}", mean_error=f"{summary.mean_error:.4f}")
        self._notify('predictions')
        return self._predictions

    def _notify(self, what: str) -> None:
        for callback in self._callbacks:
            callback(what)
