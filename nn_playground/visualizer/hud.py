"""
Training HUD (Heads-Up Display)
================================

Settings column on the Train and Predict tabs: epoch counter, progress
bar, hyperparameters, run state and the prediction summary cards.
"""

import pygame
from typing import Optional, Tuple

from config import Config
from nn_playground.data import get_dataset_info
from nn_playground.training import PredictionSummary, TrainingConfig, TrainingRun, TrainingState


def progress_fill_width(current_epoch: int, epoch_count: int, bar_width: int) -> int:
    """Filled width of the progress bar for current_epoch / epoch_count."""
    progress = min(current_epoch / epoch_count, 1.0) if epoch_count > 0 else 0.0
    return int(bar_width * progress)


class TrainingHUD:
    """
    Training status overlay.

    Displays:
    - Dataset name
    - Learning rate, epochs and batch size
    - Run state badge
    - Epoch counter with progress bar
    """

    def __init__(self, config: Config):
        """
        Initialize the HUD.

        Args:
            config: Configuration object
        """
        self.config = config

        pygame.font.init()
        self._font_small = pygame.font.Font(None, 20)
        self._font_medium = pygame.font.Font(None, 24)
        self._font_large = pygame.font.Font(None, 34)

        self.text_color = (220, 220, 220)
        self.text_dim = (150, 150, 150)
        self.accent_color = (52, 152, 219)   # Blue
        self.good_color = (46, 204, 113)     # Green
        self.warn_color = (241, 196, 15)     # Yellow

        self.state_colors = {
            TrainingState.IDLE: self.text_dim,
            TrainingState.RUNNING: self.good_color,
            TrainingState.COMPLETED: self.accent_color,
        }

    def render(
        self,
        surface: pygame.Surface,
        origin: Tuple[int, int],
        width: int,
        run: TrainingRun,
        training_config: TrainingConfig
    ) -> int:
        """
        Render the settings column.

        Args:
            surface: Pygame surface to render onto
            origin: Top-left corner of the column
            width: Column width
            run: Current training run
            training_config: Current hyperparameters

        Returns:
            The y coordinate just below the last element drawn
        """
        x, y = origin
        info = get_dataset_info(training_config.dataset_id)
        dataset_name = info['name'] if info else training_config.dataset_id

        rows = [
            ("Dataset", f"{dataset_name}  [C]"),
            ("Learning rate", f"{training_config.learning_rate:.3f}  [Q/W]"),
            ("Epochs", f"{training_config.epoch_count}  [E/R]"),
            ("Batch size", f"{training_config.batch_size}  [B/N]"),
        ]
        for label, value in rows:
            label_surface = self._font_small.render(label, True, self.text_dim)
            value_surface = self._font_medium.render(value, True, self.text_color)
            surface.blit(label_surface, (x, y))
            surface.blit(value_surface, (x, y + 16))
            y += 44

        y = self._render_state_badge(surface, x, y, run)
        y = self._render_epoch_counter(surface, x, y, width, run)
        return y

    def _render_state_badge(self, surface: pygame.Surface, x: int, y: int, run: TrainingRun) -> int:
        color = self.state_colors[run.state]
        text_surface = self._font_medium.render(f"● {run.state.value.upper()}", True, color)
        surface.blit(text_surface, (x, y))
        hint = "[SPACE] stop" if run.running else "[SPACE] start   [X] reset"
        hint_surface = self._font_small.render(hint, True, self.text_dim)
        surface.blit(hint_surface, (x, y + 22))
        return y + 48

    def _render_epoch_counter(self, surface: pygame.Surface, x: int, y: int,
                              width: int, run: TrainingRun) -> int:
        """Epoch N / E text and the progress bar under it."""
        text = f"Epoch: {run.current_epoch} / {run.epoch_count}"
        text_surface = self._font_medium.render(text, True, self.text_color)
        surface.blit(text_surface, (x, y))

        bar_y = y + 24
        bar_width = max(10, width)
        bar_height = 8
        pygame.draw.rect(surface, (40, 40, 40), (x, bar_y, bar_width, bar_height), border_radius=4)

        fill_width = progress_fill_width(run.current_epoch, run.epoch_count, bar_width)
        if fill_width > 0:
            progress = run.progress
            if progress < 0.3:
                fill_color = self.accent_color
            elif progress < 0.7:
                fill_color = self.warn_color
            else:
                fill_color = self.good_color
            pygame.draw.rect(surface, fill_color, (x, bar_y, fill_width, bar_height), border_radius=4)

        return bar_y + bar_height + 12

    def render_prediction_summary(
        self,
        surface: pygame.Surface,
        origin: Tuple[int, int],
        width: int,
        summary: Optional[PredictionSummary]
    ) -> None:
        """Two cards: threshold accuracy (%) and mean absolute error."""
        if summary is None or summary.count == 0:
            return
        x, y = origin
        card_width = (width - 10) // 2
        cards = [
            ("Prediction Accuracy", f"{summary.accuracy * 100:.1f}%"),
            ("Mean Error", f"{summary.mean_error:.4f}"),
        ]
        for i, (label, value) in enumerate(cards):
            rect = pygame.Rect(x + i * (card_width + 10), y, card_width, 64)
            pygame.draw.rect(surface, self.config.COLOR_PANEL, rect, border_radius=6)
            pygame.draw.rect(surface, self.config.COLOR_BORDER, rect, 1, border_radius=6)
            surface.blit(self._font_small.render(label, True, self.text_dim), (rect.left + 10, rect.top + 8))
            surface.blit(self._font_large.render(value, True, self.text_color), (rect.left + 10, rect.top + 28))
