#!/usr/bin/env python3
"""
Neural Network Playground - Main Entry Point
============================================

Design a network, pick a dataset and watch a simulated training run.

Usage:
    # Interactive window (default)
    python main.py

    # Start on a specific dataset with custom hyperparameters
    python main.py --dataset circle --epochs 200 --lr 0.01

    # Headless: train to completion, predict, print a summary
    python main.py --headless --dataset sine --epochs 50 --seed 42

The window has three tabs:
    - Design:  Layer diagram of the network being built
    - Train:   Hyperparameters, dataset plot and loss/accuracy chart
    - Predict: Simulated predictions and their accuracy

Press:
    - 1 / 2 / 3: Switch tab
    - ESC: Quit
    - LEFT / RIGHT: Select layer (Design)
    - A: Add hidden layer, D or DELETE: Remove selected layer (Design)
    - UP / DOWN: More / fewer neurons in the selected layer (Design)
    - TAB: Cycle the selected layer's activation (Design)
    - C: Next dataset
    - SPACE: Start / stop training
    - X: Reset training
    - P: Run predictions
    - Q / W: Learning rate down / up
    - E / R: Epochs down / up
    - B / N: Batch size down / up
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import pygame
import argparse
import sys
import os
import time
from enum import Enum
from typing import Dict, List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from nn_playground.data import list_datasets, get_dataset_info
from nn_playground.network import ACTIVATIONS, HIDDEN, INPUT
from nn_playground.session import PlaygroundSession
from nn_playground.training import ManualScheduler, PygameTimerScheduler, TrainingState
from nn_playground.utils.logger import LogLevel, get_logger, setup_logging
from nn_playground.visualizer import Dashboard, DataPlot, NeuralNetVisualizer, TrainingHUD

logger = get_logger('main')


class Tab(Enum):
    """Top-level views."""
    DESIGN = "Design"
    TRAIN = "Train"
    PREDICT = "Predict"


TAB_KEYS = {
    pygame.K_1: Tab.DESIGN,
    pygame.K_2: Tab.TRAIN,
    pygame.K_3: Tab.PREDICT,
}

TAB_HELP = {
    Tab.DESIGN: "←/→ select  A add  D remove  ↑/↓ neurons  TAB activation  C dataset",
    Tab.TRAIN: "SPACE start/stop  X reset  Q/W lr  E/R epochs  B/N batch  C dataset",
    Tab.PREDICT: "P run predictions  X reset  C dataset",
}


class PlaygroundApp:
    """
    Pygame window around a PlaygroundSession.

    This class manages:
        - Pygame window, tabs and layout
        - Routing timer events to the session's scheduler
        - Keyboard controls
        - On-screen notifications
    """

    def __init__(self, config: Config):
        """
        Initialize the application.

        Args:
            config: Configuration object
        """
        self.config = config

        pygame.init()
        desktop_height = pygame.display.Info().current_h
        self.max_window_height: Optional[int] = desktop_height if desktop_height > 0 else None
        self.window_width = config.SCREEN_WIDTH
        self.window_height = config.SCREEN_HEIGHT
        self.min_window_width = 800
        self.min_window_height = 560
        self.screen = pygame.display.set_mode((self.window_width, self.window_height), pygame.RESIZABLE)
        pygame.display.set_caption("🧠 Neural Network Playground")
        self.clock = pygame.time.Clock()

        self.scheduler = PygameTimerScheduler()
        self.session = PlaygroundSession(config, scheduler=self.scheduler)
        self.session.on_change(self._on_session_change)

        self.visualizer = NeuralNetVisualizer(config)
        self.data_plot = DataPlot(config, rng=self.session.rng)
        self.prediction_plot = DataPlot(config, rng=self.session.rng)
        self.dashboard = Dashboard(config)
        self.hud = TrainingHUD(config)

        self.tab = Tab.DESIGN
        self.selected_layer = 1
        self.running = True

        self._tab_font = pygame.font.Font(None, 28)
        self._help_font = pygame.font.Font(None, 20)
        self._notification_font = pygame.font.Font(None, 26)
        self._notifications: List[Dict] = []

        self._update_layout(self.window_width, self.window_height)
        self._log_startup_info()

    def _log_startup_info(self) -> None:
        tc = self.session.training_config
        logger.info(
            f"Playground ready: dataset={tc.dataset_id} epochs={tc.epoch_count} "
            f"lr={tc.learning_rate} batch={tc.batch_size} layers={self.session.topology.neuron_counts}"
        )

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def _update_layout(self, new_width: int, new_height: int) -> None:
        """Recompute panel rectangles for the current window size."""
        self.window_width = new_width
        self.window_height = new_height

        margin = 16
        top = self.config.TAB_BAR_HEIGHT + margin
        footer = 32
        content_height = new_height - top - footer - margin

        self.design_chrome = top + footer + margin + 40
        preferred = self.visualizer.preferred_height(self.session.topology)
        self.visualizer.set_bounds(margin, top, new_width - margin * 2,
                                   min(content_height - 40, preferred))

        sidebar = self.config.SIDEBAR_WIDTH
        right_x = margin * 2 + sidebar
        right_width = new_width - right_x - margin
        plot_height = (content_height - margin) // 2 + 20
        self.sidebar_origin = (margin, top)
        self.data_plot.set_bounds(right_x, top, right_width, plot_height)
        self.dashboard.set_bounds(right_x, top + plot_height + margin, right_width,
                                  content_height - plot_height - margin)
        self.prediction_plot.set_bounds(right_x, top, right_width, content_height)

    def _fit_design_panel(self) -> None:
        """Grow the window (up to the desktop height) until the widest layer fits."""
        needed = self.visualizer.preferred_height(self.session.topology) + self.design_chrome
        if self.max_window_height is not None:
            needed = min(needed, self.max_window_height)
        if needed > self.window_height:
            self.screen = pygame.display.set_mode((self.window_width, needed), pygame.RESIZABLE)
            logger.debug(f"Window grown to {self.window_width}x{needed} to fit the network")
        self._update_layout(self.window_width, max(needed, self.window_height))

    # =========================================================================
    # SESSION CALLBACKS
    # =========================================================================

    def _on_session_change(self, what: str) -> None:
        if what == 'topology':
            self.selected_layer = min(self.selected_layer, self.session.topology.last_index)
            self._fit_design_panel()
        elif what == 'training':
            self.dashboard.update(self.session.run)
            if self.session.run.state == TrainingState.COMPLETED:
                self._show_notification("Training complete", (100, 255, 100), 2.0)

    # =========================================================================
    # NOTIFICATIONS
    # =========================================================================

    def _show_notification(self, text: str, color: tuple = (100, 200, 255), duration: float = 2.0) -> None:
        """
        Show a notification on screen.

        Args:
            text: Notification text
            color: Text color (RGB tuple)
            duration: How long to show the notification in seconds
        """
        self._notifications.append({
            'text': text,
            'color': color,
            'start_time': time.time(),
            'duration': duration
        })

    def _update_notifications(self) -> None:
        """Remove expired notifications."""
        current_time = time.time()
        self._notifications = [
            n for n in self._notifications
            if current_time - n['start_time'] < n['duration']
        ]

    def _render_notifications(self, surface: pygame.Surface) -> None:
        """Render all active notifications."""
        if not self._notifications:
            return

        current_time = time.time()
        y_offset = self.config.TAB_BAR_HEIGHT + 10

        for notification in self._notifications:
            elapsed = current_time - notification['start_time']
            # Fade out in the last 0.5 seconds
            alpha = 255
            if elapsed > notification['duration'] - 0.5:
                alpha = int(255 * (notification['duration'] - elapsed) / 0.5)
            alpha = max(0, min(255, alpha))

            text_surface = self._notification_font.render(notification['text'], True, notification['color'])

            bg_width = text_surface.get_width() + 20
            bg_height = text_surface.get_height() + 10
            bg_surface = pygame.Surface((bg_width, bg_height), pygame.SRCALPHA)
            pygame.draw.rect(bg_surface, (0, 0, 0, int(alpha * 0.7)), bg_surface.get_rect(), border_radius=5)

            x = (surface.get_width() - bg_width) // 2
            text_surface.set_alpha(alpha)
            surface.blit(bg_surface, (x, y_offset))
            surface.blit(text_surface, (x + 10, y_offset + 5))

            y_offset += bg_height + 5

    # =========================================================================
    # CONTROLS
    # =========================================================================

    def _select_layer(self, delta: int) -> None:
        last = self.session.topology.last_index
        self.selected_layer = max(0, min(last, self.selected_layer + delta))

    def _remove_selected_layer(self) -> None:
        topology = self.session.topology
        if topology.is_protected(self.selected_layer):
            self._show_notification("Input and output layers cannot be removed", (255, 200, 100), 1.5)
            return
        self.session.remove_layer(self.selected_layer)

    def _change_neurons(self, delta: int) -> None:
        layer = self.session.topology[self.selected_layer]
        if layer.kind != HIDDEN:
            self._show_notification(f"{layer.title} width follows the dataset", (255, 200, 100), 1.5)
            return
        self.session.update_layer(self.selected_layer, neuron_count=layer.neuron_count + delta)

    def _cycle_activation(self) -> None:
        layer = self.session.topology[self.selected_layer]
        if layer.kind == INPUT:
            self._show_notification("Input layer has no activation", (255, 200, 100), 1.5)
            return
        next_index = (ACTIVATIONS.index(layer.activation) + 1) % len(ACTIVATIONS)
        self.session.update_layer(self.selected_layer, activation=ACTIVATIONS[next_index])

    def _cycle_dataset(self) -> None:
        dataset = self.session.cycle_dataset()
        info = get_dataset_info(dataset.name)
        self._show_notification(f"Dataset: {info['name'] if info else dataset.name}", (100, 200, 255), 1.5)

    def _run_predictions(self) -> None:
        if not self.session.can_predict():
            self._show_notification("Train the model first", (255, 100, 100), 2.0)
            return
        self.session.run_predictions()
        self.tab = Tab.PREDICT

    def _handle_events(self) -> None:
        """Handle pygame events and keyboard input."""
        for event in pygame.event.get():
            if self.scheduler.handle_event(event):
                continue

            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                new_width = max(event.w, self.min_window_width)
                new_height = max(event.h, self.min_window_height)
                self.screen = pygame.display.set_mode((new_width, new_height), pygame.RESIZABLE)
                self._update_layout(new_width, new_height)

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False

        elif key in TAB_KEYS:
            self.tab = TAB_KEYS[key]

        elif key == pygame.K_c:
            self._cycle_dataset()

        elif key == pygame.K_SPACE:
            self.session.toggle_training()

        elif key == pygame.K_x:
            self.session.reset_training()
            self._show_notification("Training reset", (255, 200, 100), 1.0)

        elif key == pygame.K_p:
            self._run_predictions()

        elif key in (pygame.K_q, pygame.K_w):
            self.session.step_learning_rate(-1 if key == pygame.K_q else 1)

        elif key in (pygame.K_e, pygame.K_r):
            self.session.step_epochs(-1 if key == pygame.K_e else 1)

        elif key in (pygame.K_b, pygame.K_n):
            self.session.step_batch_size(-1 if key == pygame.K_b else 1)

        elif self.tab == Tab.DESIGN:
            if key == pygame.K_LEFT:
                self._select_layer(-1)
            elif key == pygame.K_RIGHT:
                self._select_layer(1)
            elif key == pygame.K_a:
                self.session.add_hidden_layer()
                self.selected_layer = self.session.topology.last_index - 1
            elif key in (pygame.K_d, pygame.K_DELETE):
                self._remove_selected_layer()
            elif key == pygame.K_UP:
                self._change_neurons(1)
            elif key == pygame.K_DOWN:
                self._change_neurons(-1)
            elif key == pygame.K_TAB:
                self._cycle_activation()

    # =========================================================================
    # RENDERING
    # =========================================================================

    def _render_tab_bar(self) -> None:
        bar = pygame.Rect(0, 0, self.window_width, self.config.TAB_BAR_HEIGHT)
        pygame.draw.rect(self.screen, self.config.COLOR_PANEL, bar)
        x = 16
        for number, tab in enumerate(Tab, start=1):
            active = tab == self.tab
            color = self.config.COLOR_TEXT if active else self.config.COLOR_TEXT_DIM
            text = self._tab_font.render(f"{number}  {tab.value}", True, color)
            rect = text.get_rect(left=x, centery=bar.centery)
            self.screen.blit(text, rect)
            if active:
                pygame.draw.line(self.screen, self.config.COLOR_LAYER['input'],
                                 (rect.left, bar.bottom - 3), (rect.right, bar.bottom - 3), 3)
            x = rect.right + 32

    def _render_help(self) -> None:
        text = self._help_font.render(TAB_HELP[self.tab] + "   1/2/3 tabs  ESC quit", True,
                                      self.config.COLOR_TEXT_DIM)
        self.screen.blit(text, (16, self.window_height - 28))

    def _render_design(self) -> None:
        topology = self.session.topology
        self.visualizer.render(self.screen, topology, selected_layer=self.selected_layer)

        layer = topology[self.selected_layer]
        info = topology.layer_info()[self.selected_layer]
        details = f"Selected: {info['name']}  ·  {layer.neuron_count} neurons"
        if layer.activation:
            details += f"  ·  {layer.activation}"
        text = self._help_font.render(details, True, self.config.COLOR_TEXT)
        self.screen.blit(text, (self.visualizer.x, self.visualizer.y + self.visualizer.height + 12))

    def _render_train(self) -> None:
        width = self.config.SIDEBAR_WIDTH
        self.hud.render(self.screen, self.sidebar_origin, width,
                        self.session.run, self.session.training_config)
        self.data_plot.render_training(self.screen, self.session.dataset, self.session.run.progress)
        self.dashboard.render(self.screen)

    def _render_predict(self) -> None:
        width = self.config.SIDEBAR_WIDTH
        bottom = self.hud.render(self.screen, self.sidebar_origin, width,
                                 self.session.run, self.session.training_config)
        self.hud.render_prediction_summary(self.screen, (self.sidebar_origin[0], bottom + 8),
                                           width, self.session.prediction_summary)

        self.prediction_plot.render_predictions(self.screen, self.session.dataset, self.session.predictions)

    def _render_frame(self) -> None:
        self.screen.fill(self.config.COLOR_BACKGROUND)
        self._render_tab_bar()
        if self.tab == Tab.DESIGN:
            self._render_design()
        elif self.tab == Tab.TRAIN:
            self._render_train()
        else:
            self._render_predict()
        self._render_help()
        self._update_notifications()
        self._render_notifications(self.screen)
        pygame.display.flip()

    def run(self) -> None:
        """Main loop: events, timer ticks, rendering."""
        while self.running:
            self._handle_events()
            self._render_frame()
            self.clock.tick(self.config.FPS)

        self.scheduler.cancel_all()
        logger.info("Playground closed")


def run_headless(config: Config) -> PlaygroundSession:
    """Train to completion on a virtual clock, predict and print a summary."""
    session = PlaygroundSession(config, scheduler=ManualScheduler())
    tc = session.training_config
    info = get_dataset_info(session.dataset.name)

    print("\n" + "=" * 60)
    print("🚀 Headless Simulated Training")
    print("=" * 60)
    print(f"   Dataset:        {info['name'] if info else session.dataset.name} ({len(session.dataset)} samples)")
    print(f"   Layers:         {' → '.join(str(n) for n in session.topology.neuron_counts)}")
    print(f"   Epochs:         {tc.epoch_count}")
    print(f"   Learning Rate:  {tc.learning_rate}")
    print(f"   Batch Size:     {tc.batch_size}")
    print("=" * 60 + "\n")

    session.start_training()
    session.scheduler.run_until_idle()
    session.run_predictions()

    run = session.run
    summary = session.prediction_summary
    print("\n" + "=" * 60)
    print("✅ Training Complete!")
    print(f"   Epochs:          {run.current_epoch}/{run.epoch_count}")
    print(f"   Final loss:      {run.latest_loss:.4f}")
    print(f"   Final accuracy:  {run.latest_accuracy:.4f}")
    print(f"   Predictions:     {summary.count}")
    print(f"   Pred. accuracy:  {summary.accuracy * 100:.1f}%")
    print(f"   Mean error:      {summary.mean_error:.4f}")
    print("=" * 60)
    return session


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    available_datasets = list_datasets()

    parser = argparse.ArgumentParser(
        description="Neural Network Playground - design a network and watch simulated training",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
EXAMPLES
========

    python main.py                                  Interactive window
    python main.py --dataset circle --epochs 200    Start on the circle dataset
    python main.py --headless --seed 42             Scripted run, no window

AVAILABLE DATASETS: {', '.join(available_datasets)}
        """
    )

    parser.add_argument(
        '--headless', action='store_true',
        help='Run a full simulated session without a window and print a summary'
    )
    parser.add_argument(
        '--dataset', type=str, default=None,
        choices=available_datasets,
        help='Dataset to start with'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Number of simulated epochs (10-500)'
    )
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Learning rate (0.001-0.1, displayed only)'
    )
    parser.add_argument(
        '--batch-size', type=int, default=None,
        help='Batch size (1-128, displayed only)'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducible datasets and noise'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=[level.name for level in LogLevel],
        help='Console log level (default: from config)'
    )

    return parser.parse_args(argv)


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Copy CLI overrides onto the config."""
    if args.dataset:
        config.DATASET = args.dataset
    if args.epochs is not None:
        config.EPOCHS = args.epochs
    if args.lr is not None:
        config.LEARNING_RATE = args.lr
    if args.batch_size is not None:
        config.BATCH_SIZE = args.batch_size
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level:
        config.LOG_LEVEL = args.log_level
    return config


def print_startup_banner() -> None:
    """Print a welcome banner for the application."""
    print()
    print("=" * 60)
    print("       NEURAL NETWORK PLAYGROUND")
    print("=" * 60)
    print("   Design a network and watch it (pretend to) learn!")
    print()
    print("   Quick Start:")
    print("   - python main.py              # Interactive window")
    print("   - python main.py --headless   # Scripted run, no window")
    print("   - python main.py --help       # See all options")
    print("=" * 60)


def main():
    """Main entry point."""
    if '--help' not in sys.argv and '-h' not in sys.argv:
        print_startup_banner()

    args = parse_args()
    config = apply_args(Config(), args)

    setup_logging(
        log_dir=config.LOG_DIR,
        level=LogLevel[config.LOG_LEVEL],
        file_output=config.LOG_TO_FILE,
    )

    try:
        config.training_config()
    except ValueError as e:
        logger.error(f"Invalid training settings: {e}")
        print(f"❌ {e}")
        sys.exit(2)

    if args.headless:
        run_headless(config)
        return

    app = PlaygroundApp(config)
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n\n⛔ Interrupted by user")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
