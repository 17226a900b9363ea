"""Deferred task scheduling with cancellable handles."""

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol


class TaskHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, fn: Callable[..., Any], *args: Any) -> TaskHandle: ...


class TimerHandle:
    """Handle for a task running on a ``threading.Timer``."""

    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def join(self, timeout: float | None = None) -> None:
        """Wait for the task to fire (or be cancelled)."""
        self._timer.join(timeout)


class ThreadingScheduler:
    """Run each task on its own daemon timer thread."""

    def call_later(self, delay_s: float, fn: Callable[..., Any], *args: Any) -> TimerHandle:
        timer = threading.Timer(delay_s, fn, args=args)
        timer.daemon = True
        timer.start()
        return TimerHandle(timer)
