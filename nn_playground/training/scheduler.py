"""
Tick Schedulers
===============

Cancellable repeating tasks that drive the progress simulator.

Two implementations share one interface:

    ManualScheduler      - Virtual clock advanced explicitly (headless runs, tests)
    PygameTimerScheduler - Real timers via pygame.time.set_timer, dispatched
                           from the application's event loop

A cancelled task never fires again, even if one of its events is still
waiting in the pygame queue.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import pygame

from nn_playground.utils.logger import get_logger

_logger = get_logger(__name__)


class RepeatingTask:
    """Handle for a callback scheduled at a fixed interval."""

    def __init__(
        self,
        scheduler: 'TickScheduler',
        interval_ms: int,
        callback: Callable[[], None],
        task_id: int,
        event_type: Optional[int] = None
    ):
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self.callback = callback
        self.task_id = task_id
        self.event_type = event_type
        self.fire_count = 0
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop the task. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self.scheduler._release(self)

    def fire(self) -> None:
        if not self._active:
            return
        self.fire_count += 1
        self.callback()

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"RepeatingTask(id={self.task_id}, every={self.interval_ms}ms, {state})"


class TickScheduler(ABC):
    """
    Abstract base class for schedulers.

    Methods:
        schedule_repeating(interval_ms, callback) -> RepeatingTask
            Start calling `callback` every `interval_ms` milliseconds

        active_tasks -> List[RepeatingTask]
            Tasks that have not been cancelled
    """

    @abstractmethod
    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingTask:
        """Start a repeating task and return its handle."""
        pass

    @property
    @abstractmethod
    def active_tasks(self) -> List[RepeatingTask]:
        """Tasks that are still live."""
        pass

    @abstractmethod
    def _release(self, task: RepeatingTask) -> None:
        """Forget a cancelled task."""
        pass

    def cancel_all(self) -> None:
        for task in list(self.active_tasks):
            task.cancel()


class ManualScheduler(TickScheduler):
    """
    Scheduler with a virtual millisecond clock.

    Example:
        >>> scheduler = ManualScheduler()
        >>> task = scheduler.schedule_repeating(100, on_tick)
        >>> scheduler.advance(250)   # on_tick runs twice (t=100, t=200)
    """

    def __init__(self):
        self.now = 0
        self._next_id = 0
        self._tasks: Dict[int, RepeatingTask] = {}
        self._due: Dict[int, int] = {}

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingTask:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        self._next_id += 1
        task = RepeatingTask(self, interval_ms, callback, self._next_id)
        self._tasks[task.task_id] = task
        self._due[task.task_id] = self.now + interval_ms
        return task

    @property
    def active_tasks(self) -> List[RepeatingTask]:
        return list(self._tasks.values())

    def _release(self, task: RepeatingTask) -> None:
        self._tasks.pop(task.task_id, None)
        self._due.pop(task.task_id, None)

    def next_due(self) -> Optional[int]:
        """Virtual time of the next firing, or None when idle."""
        return min(self._due.values()) if self._due else None

    def advance(self, ms: int) -> int:
        """
        Move the clock forward, firing every task that falls due.

        Callbacks run in due-time order and may cancel or schedule tasks.

        Returns:
            Number of callbacks fired
        """
        target = self.now + ms
        fired = 0
        while True:
            due = [(when, tid) for tid, when in self._due.items() if when <= target]
            if not due:
                break
            due_time, task_id = min(due)
            task = self._tasks[task_id]
            self.now = due_time
            self._due[task_id] = due_time + task.interval_ms
            task.fire()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_ms: int = 3_600_000) -> int:
        """Advance one interval at a time until no task is live."""
        fired = 0
        start = self.now
        while self._due and self.now - start < max_ms:
            next_time = self.next_due()
            fired += self.advance(next_time - self.now)
        return fired


class PygameTimerScheduler(TickScheduler):
    """
    Scheduler backed by pygame timers.

    Each live task owns a custom event type; types of cancelled tasks are
    recycled. Every timer event also carries the task_id of the task that
    started it, so an event fetched before a cancel can never reach a task
    started afterwards on the same event type. The application must route
    events through handle_event() from its main loop.
    """

    def __init__(self):
        self._tasks: Dict[int, RepeatingTask] = {}
        self._free_types: List[int] = []
        self._next_id = 0

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingTask:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        event_type = self._free_types.pop() if self._free_types else pygame.event.custom_type()
        self._next_id += 1
        task = RepeatingTask(self, interval_ms, callback, self._next_id, event_type)
        self._tasks[event_type] = task
        pygame.time.set_timer(pygame.event.Event(event_type, task_id=task.task_id), interval_ms)
        _logger.debug(f"Timer started: {task} on event type {event_type}")
        return task

    @property
    def active_tasks(self) -> List[RepeatingTask]:
        return list(self._tasks.values())

    def _release(self, task: RepeatingTask) -> None:
        pygame.time.set_timer(task.event_type, 0)
        # Drop any events this timer already queued
        pygame.event.clear(task.event_type)
        self._tasks.pop(task.event_type, None)
        self._free_types.append(task.event_type)
        _logger.debug(f"Timer stopped: {task}")

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Dispatch a timer event to the task that scheduled it.

        Returns:
            True if the event belonged to a live task
        """
        task = self._tasks.get(event.type)
        if task is None or getattr(event, 'task_id', None) != task.task_id:
            return False
        task.fire()
        return True
