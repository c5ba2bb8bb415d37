"""
Progress Simulator
==================

Simulates a training run without any real optimization.

A repeating tick advances the epoch counter and appends one loss and one
accuracy value per epoch. Both follow the progress fraction with a little
uniform noise:

    loss     = max(0.1,  1 - epoch/E + U(0, 0.1))
    accuracy = min(0.98, epoch/E     + U(0, 0.1))

State machine:

    idle ──start──▶ running ──(epoch reaches E)──▶ completed
      ▲               │  ▲                              │
      └─────stop──────┘  └────────────start─────────────┘
    reset: any state ──▶ idle (epoch 0, empty series)

At most one tick task is live per simulator; start() always cancels the
previous task before scheduling a new one.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from nn_playground.training.scheduler import RepeatingTask, TickScheduler
from nn_playground.utils.logger import get_logger, log_training_metrics

_logger = get_logger(__name__)

LEARNING_RATE_RANGE = (0.001, 0.1)
EPOCH_RANGE = (10, 500)
BATCH_SIZE_RANGE = (1, 128)


@dataclass(frozen=True)
class TrainingConfig:
    """User-selected hyperparameters. Only epoch_count affects the simulation."""
    learning_rate: float = 0.03
    epoch_count: int = 100
    batch_size: int = 32
    dataset_id: str = 'xor'

    def __post_init__(self):
        lr_min, lr_max = LEARNING_RATE_RANGE
        if not lr_min <= self.learning_rate <= lr_max:
            raise ValueError(f"learning_rate must be in [{lr_min}, {lr_max}], got {self.learning_rate}")
        ep_min, ep_max = EPOCH_RANGE
        if not ep_min <= self.epoch_count <= ep_max:
            raise ValueError(f"epoch_count must be in [{ep_min}, {ep_max}], got {self.epoch_count}")
        bs_min, bs_max = BATCH_SIZE_RANGE
        if not bs_min <= self.batch_size <= bs_max:
            raise ValueError(f"batch_size must be in [{bs_min}, {bs_max}], got {self.batch_size}")

    def replace(self, **changes) -> 'TrainingConfig':
        """Return a validated copy with some fields changed."""
        return replace(self, **changes)


class TrainingState(Enum):
    """Lifecycle of a simulated run."""
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'


@dataclass(frozen=True)
class TrainingRun:
    """Snapshot of a run's progress and metric history."""
    epoch_count: int
    current_epoch: int = 0
    loss_series: Tuple[float, ...] = ()
    accuracy_series: Tuple[float, ...] = ()
    state: TrainingState = TrainingState.IDLE

    @property
    def running(self) -> bool:
        return self.state == TrainingState.RUNNING

    @property
    def progress(self) -> float:
        """Fraction of epochs completed, in [0, 1]."""
        if self.epoch_count <= 0:
            return 0.0
        return min(1.0, self.current_epoch / self.epoch_count)

    @property
    def latest_loss(self) -> Optional[float]:
        return self.loss_series[-1] if self.loss_series else None

    @property
    def latest_accuracy(self) -> Optional[float]:
        return self.accuracy_series[-1] if self.accuracy_series else None


class ProgressSimulator:
    """
    Timer-driven fake training loop.

    Example:
        >>> scheduler = ManualScheduler()
        >>> sim = ProgressSimulator(scheduler, TrainingConfig(epoch_count=10))
        >>> sim.start()
        >>> scheduler.run_until_idle()
        >>> sim.run.state
        <TrainingState.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        config: Optional[TrainingConfig] = None,
        interval_ms: int = 100,
        rng: Optional[np.random.Generator] = None,
        metric_noise: float = 0.1,
        loss_floor: float = 0.1,
        accuracy_ceiling: float = 0.98,
    ):
        """
        Initialize the simulator.

        Args:
            scheduler: Source of repeating ticks
            config: Hyperparameters; epoch_count is read on each start()
            interval_ms: Milliseconds between ticks
            rng: Random generator for metric noise
            metric_noise: Upper bound of the uniform noise added per value
            loss_floor: Minimum reported loss
            accuracy_ceiling: Maximum reported accuracy
        """
        self.scheduler = scheduler
        self.config = config or TrainingConfig()
        self.interval_ms = interval_ms
        self.rng = rng if rng is not None else np.random.default_rng()
        self.metric_noise = metric_noise
        self.loss_floor = loss_floor
        self.accuracy_ceiling = accuracy_ceiling

        self._run = TrainingRun(epoch_count=self.config.epoch_count)
        self._task: Optional[RepeatingTask] = None
        self._callbacks: List[Callable[[TrainingRun], None]] = []

    @property
    def run(self) -> TrainingRun:
        return self._run

    @property
    def state(self) -> TrainingState:
        return self._run.state

    @property
    def is_running(self) -> bool:
        return self._run.running

    @property
    def task(self) -> Optional[RepeatingTask]:
        """The live tick task, if any."""
        return self._task

    def on_update(self, callback: Callable[[TrainingRun], None]) -> None:
        """Register a callback invoked with every new run snapshot."""
        self._callbacks.append(callback)

    def set_config(self, config: TrainingConfig) -> None:
        """
        Use new hyperparameters from the next start().

        A run in progress keeps the epoch count it started with.
        """
        self.config = config
        if self._run.state == TrainingState.IDLE and self._run.current_epoch == 0:
            self._set_run(replace(self._run, epoch_count=config.epoch_count))

    def start(self) -> TrainingRun:
        """Begin a fresh run from epoch 0."""
        self._cancel_task()
        self._set_run(TrainingRun(
            epoch_count=self.config.epoch_count,
            state=TrainingState.RUNNING,
        ), notify=False)
        self._task = self.scheduler.schedule_repeating(self.interval_ms, self.tick)
        _logger.info(f"Training started ({self.config.epoch_count} epochs, every {self.interval_ms}ms)")
        self._notify()
        return self._run

    def stop(self) -> TrainingRun:
        """Pause a running run, keeping its epoch and series."""
        if self._run.state != TrainingState.RUNNING:
            return self._run
        self._cancel_task()
        self._set_run(replace(self._run, state=TrainingState.IDLE))
        _logger.info(f"Training stopped at epoch {self._run.current_epoch}/{self._run.epoch_count}")
        return self._run

    def reset(self) -> TrainingRun:
        """Return to idle with epoch 0 and empty series."""
        self._cancel_task()
        self._set_run(TrainingRun(epoch_count=self.config.epoch_count))
        _logger.info("Training reset")
        return self._run

    def tick(self) -> TrainingRun:
        """Advance one simulated epoch. Ignored unless running."""
        run = self._run
        if run.state != TrainingState.RUNNING:
            return run

        epoch = run.current_epoch + 1
        fraction = epoch / run.epoch_count
        loss = max(self.loss_floor, 1 - fraction + self.rng.uniform(0, self.metric_noise))
        accuracy = min(self.accuracy_ceiling, fraction + self.rng.uniform(0, self.metric_noise))

        state = TrainingState.RUNNING
        if epoch >= run.epoch_count:
            self._cancel_task()
            state = TrainingState.COMPLETED

        self._run = replace(
            run,
            current_epoch=epoch,
            loss_series=run.loss_series + (float(loss),),
            accuracy_series=run.accuracy_series + (float(accuracy),),
            state=state,
        )
        _logger.debug(f"Tick {epoch}/{run.epoch_count}: loss={loss:.4f} acc={accuracy:.4f}")

        if state == TrainingState.COMPLETED:
            log_training_metrics(epoch, run.epoch_count, loss, accuracy, state.value)

        self._notify()
        return self._run

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _set_run(self, run: TrainingRun, notify: bool = True) -> None:
        self._run = run
        if notify:
            self._notify()

    def _notify(self) -> None:
        for callback in self._callbacks:
            callback(self._run)
