"""
Logging for the playground.

Every module logs through get_logger(__name__), which places it under the
'playground' namespace. main.py calls setup_logging() once with the
level and file settings from Config; until then records simply propagate
to whatever handlers the host (e.g. pytest) has installed.
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class LogLevel(Enum):
    """Levels accepted by Config.LOG_LEVEL and --log-level."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


ROOT_LOGGER_NAME = 'playground'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

_initialized = False


class ColoredFormatter(logging.Formatter):
    """Console formatter that tints the level name when writing to a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
    }
    RESET = '\033[0m'

    def __init__(self, stream=sys.stdout):
        super().__init__(LOG_FORMAT)
        self.use_colors = stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.use_colors or color is None:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    console_output: bool = True,
    file_output: bool = True,
) -> Optional[Path]:
    """
    Attach console and file handlers to the 'playground' logger.

    Calling it again is a no-op.

    Args:
        log_dir: Directory for the playground_YYYYMMDD_HHMMSS.log file
        level: Minimum level shown on the console
        console_output: Whether to log to stdout
        file_output: Whether to log (everything, DEBUG and up) to a file

    Returns:
        Path of the log file, or None when file output is off
    """
    global _initialized

    if _initialized:
        return None

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if file_output else level.value)
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(ColoredFormatter(sys.stdout))
        root_logger.addHandler(console_handler)

    log_path = None
    if file_output:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / f"playground_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)

    _initialized = True
    root_logger.info(f"Logging initialized (level={level.name}, file={log_path})")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, e.g. 'nn_playground.session' -> 'playground.session'.
    """
    if name.startswith('nn_playground.'):
        name = name[len('nn_playground.'):]
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def log_training_metrics(
    epoch: int,
    epoch_count: int,
    loss: Optional[float] = None,
    accuracy: Optional[float] = None,
    state: Optional[str] = None,
) -> None:
    """
    Log simulated training metrics in a consistent format.

    Args:
        epoch: Current epoch number
        epoch_count: Total epochs in the run
        loss: Latest simulated loss (if any)
        accuracy: Latest simulated accuracy (if any)
        state: Run state name (if relevant)
    """
    metrics = [f"epoch={epoch}/{epoch_count}"]
    if loss is not None:
        metrics.append(f"loss={loss:.4f}")
    if accuracy is not None:
        metrics.append(f"acc={accuracy:.4f}")
    if state is not None:
        metrics.append(f"state={state}")

    get_logger('training').info(" | ".join(metrics))


def log_session_event(event: str, **kwargs) -> None:
    """
    Log a user-driven session event (layer edits, dataset changes, ...).

    Args:
        event: Event type ('add_layer', 'dataset', 'predict', ...)
        **kwargs: Additional context (e.g., index, dataset)
    """
    parts = [event.upper()] + [f"{k}={v}" for k, v in kwargs.items()]
    get_logger('session').info(" | ".join(parts))
