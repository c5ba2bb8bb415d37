"""
Data Plot
=========

Renders the active dataset and simulated predictions.

Classification (2D inputs):
    - Points coloured by class (training view) or by correctness
      (prediction view, outlined by actual class)
    - A coarse 50x50 "decision boundary" grid painted underneath

Regression (1D inputs):
    - The true curve as a polyline
    - A noisy predicted curve that tightens as training progresses
      (training view) or actual-to-predicted error bars (prediction view)

The boundary grid is a fixed geometric rule per built-in dataset: the
radius < 0.5 disk for 'circle' and the XOR quadrants for everything else.
It does not come from any model.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame
import pygame.gfxdraw

from config import Config
from nn_playground.data import Dataset
from nn_playground.training import PredictionResult


@dataclass(frozen=True)
class DataBounds:
    """Input-space window mapped onto the canvas."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def range_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def range_y(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class GridCell:
    """One boundary cell in canvas pixels."""
    x: float
    y: float
    width: float
    height: float
    predicted_class: int


def _padded(low: float, high: float, padding: float) -> Tuple[float, float]:
    span = (high - low) or 2
    return low - span * padding, high + span * padding


def compute_bounds(dataset: Dataset, padding: float = 0.1) -> Optional[DataBounds]:
    """
    Observed min/max of the plotted coordinates plus padding.

    For 2D inputs both axes come from the inputs and both are padded. For
    1D inputs x comes from the input (unpadded) and y from the first
    output (padded). A zero range is treated as a range of 2.
    """
    if len(dataset) == 0:
        return None
    inputs = dataset.inputs
    if dataset.input_width >= 2:
        min_x, max_x = _padded(float(inputs[:, 0].min()), float(inputs[:, 0].max()), padding)
        min_y, max_y = _padded(float(inputs[:, 1].min()), float(inputs[:, 1].max()), padding)
    else:
        outputs = dataset.outputs
        min_x, max_x = float(inputs[:, 0].min()), float(inputs[:, 0].max())
        if max_x == min_x:
            min_x, max_x = _padded(min_x, max_x, padding)
        min_y, max_y = _padded(float(outputs[:, 0].min()), float(outputs[:, 0].max()), padding)
    return DataBounds(min_x, max_x, min_y, max_y)


def to_canvas(
    x: float,
    y: float,
    bounds: DataBounds,
    width: float,
    height: float,
    flip_y: bool = False
) -> Tuple[float, float]:
    """Map an input-space point to canvas pixels (relative to the canvas origin)."""
    px = (x - bounds.min_x) / bounds.range_x * width
    py = (y - bounds.min_y) / bounds.range_y * height
    if flip_y:
        py = height - py
    return px, py


def to_input(px: float, py: float, bounds: DataBounds, width: float, height: float) -> Tuple[float, float]:
    """Inverse of to_canvas (unflipped)."""
    return (
        bounds.min_x + (px / width) * bounds.range_x,
        bounds.min_y + (py / height) * bounds.range_y,
    )


def boundary_class(x: float, y: float, dataset_name: str) -> int:
    """Heuristic class for a point: inner disk for 'circle', XOR quadrants otherwise."""
    if dataset_name == 'circle':
        return 1 if math.sqrt(x * x + y * y) < 0.5 else 0
    return 1 if (x > 0.5 and y < 0.5) or (x < 0.5 and y > 0.5) else 0


def decision_grid(
    bounds: DataBounds,
    width: float,
    height: float,
    dataset_name: str,
    resolution: int = 50
) -> List[GridCell]:
    """Sample boundary_class at the top-left corner of each grid cell."""
    step_x = width / resolution
    step_y = height / resolution
    cells = []
    for i in range(resolution):
        for j in range(resolution):
            px, py = i * step_x, j * step_y
            input_x, input_y = to_input(px, py, bounds, width, height)
            cells.append(GridCell(px, py, step_x, step_y, boundary_class(input_x, input_y, dataset_name)))
    return cells


def predicted_curve(
    bounds: DataBounds,
    width: int,
    progress: float,
    rng: np.random.Generator
) -> List[Tuple[int, float]]:
    """
    Fake regression prediction, one value per pixel column.

    value = sin(x) + U(0, 0.2) * (1 - progress) - 0.1
    """
    points = []
    for i in range(width):
        input_x = bounds.min_x + (i / width) * bounds.range_x
        noise = rng.uniform(0, 0.2) * (1 - progress)
        points.append((i, math.sin(input_x) + (noise - 0.1)))
    return points


class DataPlot:
    """
    Dataset and prediction canvas.

    Example:
        >>> plot = DataPlot(config, x=300, y=80, width=320, height=220)
        >>> plot.render_training(screen, session.dataset, session.run.progress)
        >>> plot.render_predictions(screen, session.dataset, session.predictions)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        x: int = 0,
        y: int = 0,
        width: int = 300,
        height: int = 200,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config or Config()
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()

        self.bg_color = self.config.COLOR_PANEL
        self.axis_color = (90, 96, 110)
        self.curve_color = (170, 175, 185)

        pygame.font.init()
        self.font_small = pygame.font.Font(None, 20)

        # Boundary grid surface, rebuilt when the dataset or size changes
        self._grid_surface: Optional[pygame.Surface] = None
        self._grid_key: Optional[Tuple] = None

        # Predicted regression curve, re-sampled once per progress value
        self._curve: List[Tuple[int, float]] = []
        self._curve_key: Optional[Tuple] = None

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def set_bounds(self, x: int, y: int, width: int, height: int) -> None:
        self.x, self.y, self.width, self.height = x, y, width, height
        self._grid_key = None
        self._curve_key = None

    # =========================================================================
    # VIEWS
    # =========================================================================

    def render_training(self, screen: pygame.Surface, dataset: Dataset, progress: float) -> None:
        """
        Dataset view shown while training.

        The boundary (classification) or predicted curve (regression)
        appears once progress passes BOUNDARY_PROGRESS_THRESHOLD.
        """
        self._draw_background(screen)
        bounds = compute_bounds(dataset, self.config.PLOT_PADDING)
        if bounds is None:
            return
        show_fit = progress > self.config.BOUNDARY_PROGRESS_THRESHOLD

        if dataset.is_classification and dataset.input_width == 2:
            if show_fit:
                self._draw_boundary(screen, dataset, bounds)
            for sample in dataset.samples:
                px, py = to_canvas(sample.input[0], sample.input[1], bounds, self.width, self.height)
                color = self._class_color(sample.output[0])
                self._draw_point(screen, px, py, 5, color)

        elif not dataset.is_classification and dataset.input_width == 1:
            self._draw_zero_axis(screen)
            self._draw_true_curve(screen, dataset, bounds, with_points=True)
            if show_fit:
                self._draw_predicted_curve(screen, bounds, progress)

    def render_predictions(
        self,
        screen: pygame.Surface,
        dataset: Dataset,
        predictions: Sequence[PredictionResult]
    ) -> None:
        """Prediction view: correctness-coloured points or error bars."""
        self._draw_background(screen)
        if not predictions:
            text = self.font_small.render(
                "No predictions yet. Train the model first, then run predictions.",
                True, self.config.COLOR_TEXT_DIM
            )
            screen.blit(text, text.get_rect(center=self.rect.center))
            return

        bounds = compute_bounds(dataset, self.config.PLOT_PADDING)
        if bounds is None:
            return

        if dataset.is_classification and dataset.input_width == 2:
            self._draw_boundary(screen, dataset, bounds)
            for pred in predictions:
                px, py = to_canvas(pred.input[0], pred.input[1], bounds, self.width, self.height)
                fill = self.config.COLOR_CORRECT if pred.correct else self.config.COLOR_INCORRECT
                outline = (self.config.COLOR_CLASS_POSITIVE if pred.actual > 0.5
                           else self.config.COLOR_OUTLINE_NEGATIVE)
                self._draw_point(screen, px, py, 6, fill)
                pygame.draw.circle(screen, outline, (int(self.x + px), int(self.y + py)), 7, 2)

        elif not dataset.is_classification and dataset.input_width == 1:
            self._draw_zero_axis(screen)
            self._draw_true_curve(screen, dataset, bounds, with_points=False)
            for pred in predictions:
                px, actual_y = to_canvas(pred.input[0], pred.actual, bounds, self.width, self.height, flip_y=True)
                _, predicted_y = to_canvas(pred.input[0], pred.predicted, bounds, self.width, self.height, flip_y=True)
                pygame.draw.line(screen, (239, 68, 68),
                                 (self.x + px, self.y + actual_y), (self.x + px, self.y + predicted_y), 1)
                self._draw_point(screen, px, actual_y, 4, self.config.COLOR_CLASS_POSITIVE)
                self._draw_point(screen, px, predicted_y, 4, self.config.COLOR_CORRECT)

    # =========================================================================
    # DRAWING HELPERS
    # =========================================================================

    def _draw_background(self, screen: pygame.Surface) -> None:
        pygame.draw.rect(screen, self.bg_color, self.rect, border_radius=6)
        pygame.draw.rect(screen, self.config.COLOR_BORDER, self.rect, 1, border_radius=6)

    def _draw_zero_axis(self, screen: pygame.Surface) -> None:
        mid_y = self.y + self.height // 2
        pygame.draw.line(screen, self.axis_color, (self.x, mid_y), (self.x + self.width, mid_y), 1)

    def _draw_boundary(self, screen: pygame.Surface, dataset: Dataset, bounds: DataBounds) -> None:
        key = (id(dataset), dataset.name, bounds, self.width, self.height)
        if self._grid_key != key:
            self._grid_surface = self._build_grid_surface(dataset.name, bounds)
            self._grid_key = key
        screen.blit(self._grid_surface, (self.x, self.y))

    def _build_grid_surface(self, dataset_name: str, bounds: DataBounds) -> pygame.Surface:
        surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        alpha = self.config.BOUNDARY_ALPHA
        for cell in decision_grid(bounds, self.width, self.height, dataset_name,
                                  self.config.BOUNDARY_RESOLUTION):
            color = self._class_color(cell.predicted_class)
            rect = pygame.Rect(int(cell.x), int(cell.y),
                               math.ceil(cell.width), math.ceil(cell.height))
            surface.fill((*color, alpha), rect)
        return surface

    def _draw_true_curve(self, screen: pygame.Surface, dataset: Dataset,
                         bounds: DataBounds, with_points: bool) -> None:
        points = []
        for sample in dataset.samples:
            px, py = to_canvas(sample.input[0], sample.output[0], bounds, self.width, self.height, flip_y=True)
            points.append((self.x + px, self.y + py))
        if len(points) >= 2:
            pygame.draw.lines(screen, self.curve_color, False, points, 1)
        if with_points:
            for px, py in points:
                pygame.draw.circle(screen, self.config.COLOR_CLASS_POSITIVE, (int(px), int(py)), 3)

    def _draw_predicted_curve(self, screen: pygame.Surface, bounds: DataBounds, progress: float) -> None:
        key = (bounds, self.width, progress)
        if self._curve_key != key:
            self._curve = predicted_curve(bounds, self.width, progress, self.rng)
            self._curve_key = key
        points = []
        for px, value in self._curve:
            _, py = to_canvas(bounds.min_x, value, bounds, self.width, self.height, flip_y=True)
            points.append((self.x + px, self.y + py))
        if len(points) >= 2:
            pygame.draw.lines(screen, self.config.COLOR_CORRECT, False, points, 2)

    def _draw_point(self, screen: pygame.Surface, px: float, py: float,
                    radius: int, color: Tuple[int, int, int]) -> None:
        x, y = int(self.x + px), int(self.y + py)
        pygame.gfxdraw.aacircle(screen, x, y, radius, color)
        pygame.gfxdraw.filled_circle(screen, x, y, radius, color)

    def _class_color(self, value: float) -> Tuple[int, int, int]:
        return self.config.COLOR_CLASS_POSITIVE if value > 0.5 else self.config.COLOR_CLASS_NEGATIVE
