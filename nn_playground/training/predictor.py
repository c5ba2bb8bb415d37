"""
Prediction Simulator
====================

Produces "predictions" by jittering each sample's true output:

    predicted = clip(actual + U(-0.15, 0.15), 0, 1)

No model is evaluated. Predictions are only available once the current
run has completed at least one epoch.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from nn_playground.data import Dataset
from nn_playground.training.simulator import TrainingRun
from nn_playground.utils.logger import get_logger

_logger = get_logger(__name__)

PREDICTION_NOISE = 0.15
CLASS_THRESHOLD = 0.5


class PredictionUnavailableError(RuntimeError):
    """Raised when predictions are requested before any training tick."""


@dataclass(frozen=True)
class PredictionResult:
    """Simulated prediction for one sample."""
    input: Tuple[float, ...]
    actual: float
    predicted: float

    @property
    def correct(self) -> bool:
        """Both values on the same side of the 0.5 class threshold."""
        return (self.predicted > CLASS_THRESHOLD) == (self.actual > CLASS_THRESHOLD)

    @property
    def error(self) -> float:
        return abs(self.predicted - self.actual)


@dataclass(frozen=True)
class PredictionSummary:
    """Aggregate figures shown under the prediction plot."""
    count: int
    accuracy: float
    mean_error: float


def can_predict(run: TrainingRun) -> bool:
    """Predictions need at least one completed epoch."""
    return run.current_epoch > 0


def predict(
    dataset: Dataset,
    run: TrainingRun,
    rng: Optional[np.random.Generator] = None,
    noise: float = PREDICTION_NOISE,
) -> List[PredictionResult]:
    """
    Simulate predictions for every sample, in dataset order.

    Args:
        dataset: Samples to "predict"
        run: Current training run (gates availability)
        rng: Random generator for the jitter
        noise: Half-width of the uniform jitter

    Raises:
        PredictionUnavailableError: If run.current_epoch is 0
    """
    if not can_predict(run):
        raise PredictionUnavailableError("Cannot run predictions before training has started")

    rng = rng if rng is not None else np.random.default_rng()
    results = []
    for sample in dataset.samples:
        actual = float(sample.output[0])
        jitter = rng.uniform(-noise, noise)
        predicted = float(np.clip(actual + jitter, 0.0, 1.0))
        results.append(PredictionResult(input=sample.input, actual=actual, predicted=predicted))

    _logger.debug(f"Simulated {len(results)} predictions on '{dataset.name}' at epoch {run.current_epoch}")
    return results


def summarize(results: Sequence[PredictionResult]) -> PredictionSummary:
    """Threshold accuracy and mean absolute error over a prediction set."""
    if not results:
        return PredictionSummary(count=0, accuracy=0.0, mean_error=0.0)
    correct = sum(1 for r in results if r.correct)
    mean_error = float(np.mean([r.error for r in results]))
    return PredictionSummary(count=len(results), accuracy=correct / len(results), mean_error=mean_error)
