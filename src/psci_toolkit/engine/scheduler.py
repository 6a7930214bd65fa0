"""
Module: engine.scheduler

Purpose:
    Periodic timer abstraction used by sessions. A session asks its
    scheduler for a countdown timer and (for reaction) a frame timer, and
    cancels both on every exit path.

Key Classes:
    - Scheduler: Protocol for hosts (Qt, headless, tests)
    - TimerHandle: Protocol for a cancellable periodic timer
    - ManualScheduler: Deterministic virtual clock driven by advance()

Used By:
    - engine.session: Countdown and frame timers
    - qt.scheduler: QTimer-backed implementation
    - cli: Headless simulation
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Invoke ``callback`` every ``interval_ms`` until the handle is cancelled."""
        ...


class _ManualTimer:
    __slots__ = ("interval_ms", "callback", "next_due", "order", "_active")

    def __init__(self, interval_ms: int, callback: Callable[[], None], next_due: int, order: int):
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due = next_due
        self.order = order
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """
    Virtual clock for tests and headless hosts.

    Timers fire only inside ``advance()``, in due-time order (creation
    order breaks ties). Callbacks may cancel timers or create new ones
    while the clock is advancing.

    Example:
        >>> clock = ManualScheduler()
        >>> ticks = []
        >>> handle = clock.call_every(1000, lambda: ticks.append(clock.now_ms))
        >>> clock.advance(3000)
        >>> ticks
        [1000, 2000, 3000]
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._timers: List[_ManualTimer] = []
        self._order = itertools.count()

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive: {interval_ms}")
        timer = _ManualTimer(interval_ms, callback, self.now_ms + interval_ms, next(self._order))
        self._timers.append(timer)
        return timer

    def pending(self) -> int:
        """Number of timers that are still active."""
        self._timers = [t for t in self._timers if t.active]
        return len(self._timers)

    def advance(self, ms: int) -> None:
        """Move the clock forward by ``ms``, firing every timer that falls due."""
        if ms < 0:
            raise ValueError(f"Cannot advance by a negative amount: {ms}")
        target = self.now_ms + ms
        while True:
            due = [t for t in self._timers if t.active and t.next_due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.next_due, t.order))
            self.now_ms = timer.next_due
            timer.next_due += timer.interval_ms
            timer.callback()
        self.now_ms = target
        self.pending()
