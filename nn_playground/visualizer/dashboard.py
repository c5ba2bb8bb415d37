"""
Training Dashboard
==================

Loss and accuracy chart for the simulated training run.

Features:
    - Loss (red) and accuracy (green) polylines on a shared [0, 1] axis
    - Epoch index along the horizontal axis
    - Latest values printed above the chart
    - Mini metric cards with trend arrows
"""

import pygame
import numpy as np
from typing import List, Optional, Sequence, Tuple
from collections import deque

from config import Config
from nn_playground.training import TrainingRun


def chart_points(
    series: Sequence[float],
    left: float,
    top: float,
    width: float,
    height: float
) -> List[Tuple[float, float]]:
    """
    Map a [0, 1] series onto a chart area.

    Point i lands at x = left + i / (n - 1) * width and
    y = top + (1 - value) * height. Fewer than two values yield no points.
    """
    n = len(series)
    if n < 2:
        return []
    return [
        (left + (i / (n - 1)) * width, top + (1 - value) * height)
        for i, value in enumerate(series)
    ]


class MetricCard:
    """A small card displaying a single metric with trend."""

    def __init__(self, label: str, color: Tuple[int, int, int]):
        self.label = label
        self.color = color
        self.value = 0.0
        self.history: deque = deque(maxlen=20)

    def update(self, value: float) -> None:
        self.value = value
        self.history.append(value)

    def clear(self) -> None:
        self.value = 0.0
        self.history.clear()

    @property
    def trend(self) -> str:
        if len(self.history) < 2:
            return "→"
        recent_avg = np.mean(list(self.history)[-5:])
        older_avg = np.mean(list(self.history)[:5]) if len(self.history) >= 5 else recent_avg
        if recent_avg > older_avg * 1.05:
            return "↑"
        elif recent_avg < older_avg * 0.95:
            return "↓"
        return "→"


class Dashboard:
    """
    Training metrics chart.

    Example:
        >>> dashboard = Dashboard(config, x=640, y=80, width=340, height=220)
        >>> dashboard.update(session.run)
        >>> dashboard.render(screen)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        x: int = 0,
        y: int = 0,
        width: int = 300,
        height: int = 200
    ):
        """
        Initialize the dashboard.

        Args:
            config: Configuration object
            x: X position
            y: Y position
            width: Dashboard width
            height: Dashboard height
        """
        self.config = config or Config()
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.padding = self.config.CHART_PADDING

        self.bg_color = self.config.COLOR_PANEL
        self.axis_color = (128, 133, 145)
        self.text_color = self.config.COLOR_TEXT
        self.loss_color = self.config.COLOR_LOSS
        self.accuracy_color = self.config.COLOR_ACCURACY

        pygame.font.init()
        self.font_tiny = pygame.font.Font(None, 16)
        self.font_small = pygame.font.Font(None, 20)

        self.cards = {
            'loss': MetricCard("Loss", self.loss_color),
            'accuracy': MetricCard("Accuracy", self.accuracy_color),
        }

        self.loss_series: Tuple[float, ...] = ()
        self.accuracy_series: Tuple[float, ...] = ()

    def set_bounds(self, x: int, y: int, width: int, height: int) -> None:
        self.x, self.y, self.width, self.height = x, y, width, height

    @property
    def chart_rect(self) -> pygame.Rect:
        """Plot area inside the padding."""
        return pygame.Rect(
            self.x + self.padding,
            self.y + self.padding,
            self.width - self.padding * 2,
            self.height - self.padding * 2
        )

    def update(self, run: TrainingRun) -> None:
        """Take the latest series from a run snapshot."""
        grew = len(run.loss_series) > len(self.loss_series)
        self.loss_series = run.loss_series
        self.accuracy_series = run.accuracy_series

        if not run.loss_series:
            for card in self.cards.values():
                card.clear()
        elif grew:
            self.cards['loss'].update(run.loss_series[-1])
            self.cards['accuracy'].update(run.accuracy_series[-1])

    def loss_points(self) -> List[Tuple[float, float]]:
        rect = self.chart_rect
        return chart_points(self.loss_series, rect.left, rect.top, rect.width, rect.height)

    def accuracy_points(self) -> List[Tuple[float, float]]:
        rect = self.chart_rect
        return chart_points(self.accuracy_series, rect.left, rect.top, rect.width, rect.height)

    def render(self, screen: pygame.Surface) -> None:
        """Render the chart."""
        self._draw_background(screen)
        if not self.loss_series:
            text = self.font_small.render("Start training to see metrics", True, self.config.COLOR_TEXT_DIM)
            screen.blit(text, text.get_rect(center=(self.x + self.width // 2, self.y + self.height // 2)))
            return

        self._draw_axes(screen)

        loss_points = self.loss_points()
        if loss_points:
            pygame.draw.lines(screen, self.loss_color, False, loss_points, 2)
            self._draw_legend(screen, "Loss", self.loss_color, 15)

        accuracy_points = self.accuracy_points()
        if accuracy_points:
            pygame.draw.lines(screen, self.accuracy_color, False, accuracy_points, 2)
            self._draw_legend(screen, "Accuracy", self.accuracy_color, 35)

        self._draw_latest_values(screen)

    def _draw_background(self, screen: pygame.Surface) -> None:
        rect = pygame.Rect(self.x, self.y, self.width, self.height)
        pygame.draw.rect(screen, self.bg_color, rect, border_radius=6)
        pygame.draw.rect(screen, self.config.COLOR_BORDER, rect, 1, border_radius=6)

    def _draw_axes(self, screen: pygame.Surface) -> None:
        rect = self.chart_rect
        pygame.draw.line(screen, self.axis_color, rect.topleft, rect.bottomleft, 1)
        pygame.draw.line(screen, self.axis_color, rect.bottomleft, rect.bottomright, 1)

    def _draw_legend(self, screen: pygame.Surface, label: str,
                     color: Tuple[int, int, int], offset: int) -> None:
        card = next(c for c in self.cards.values() if c.label == label)
        text = self.font_tiny.render(f"{label} {card.trend}", True, color)
        screen.blit(text, (self.x + self.width - self.padding - 70, self.y + self.padding + offset - 10))

    def _draw_latest_values(self, screen: pygame.Surface) -> None:
        latest_loss = self.loss_series[-1]
        latest_acc = self.accuracy_series[-1]
        loss_text = self.font_small.render(f"Loss: {latest_loss:.4f}", True, self.text_color)
        acc_text = self.font_small.render(f"Accuracy: {latest_acc:.4f}", True, self.text_color)
        top = self.y + self.padding - 20
        screen.blit(loss_text, (self.x + self.padding, top))
        screen.blit(acc_text, (self.x + self.padding + 120, top))
