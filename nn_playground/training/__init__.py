"""
Training Module
===============

Simulated training and prediction.

Classes:
    TickScheduler        - Interface for cancellable repeating tasks
    ManualScheduler      - Virtual-clock scheduler for headless runs and tests
    PygameTimerScheduler - pygame.time.set_timer backed scheduler
    TrainingConfig       - Validated hyperparameters
    TrainingRun          - Immutable run snapshot
    ProgressSimulator    - Tick-driven loss/accuracy generator
    PredictionResult     - One simulated prediction
"""

from .scheduler import RepeatingTask, TickScheduler, ManualScheduler, PygameTimerScheduler
from .simulator import TrainingConfig, TrainingRun, TrainingState, ProgressSimulator
from .predictor import (
    PredictionResult,
    PredictionSummary,
    PredictionUnavailableError,
    can_predict,
    predict,
    summarize,
)

__all__ = [
    'RepeatingTask',
    'TickScheduler',
    'ManualScheduler',
    'PygameTimerScheduler',
    'TrainingConfig',
    'TrainingRun',
    'TrainingState',
    'ProgressSimulator',
    'PredictionResult',
    'PredictionSummary',
    'PredictionUnavailableError',
    'can_predict',
    'predict',
    'summarize',
]
