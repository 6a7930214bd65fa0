"""QTimer-backed scheduler for sessions hosted in a Qt event loop."""
from __future__ import annotations

from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    """Wraps a repeating QTimer; cancel() stops it and schedules deletion."""

    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler(QObject):
    """Scheduler whose timers run on the Qt event loop.

    Usage:
        scheduler = QtScheduler(parent=window)
        session = create_session(1, "REACTION", scheduler=scheduler)
        session.start()  # frame and countdown timers now tick via QTimer
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._handles: List[QtTimerHandle] = []

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive: {interval_ms}")
        timer = QTimer(self)
        timer.setInterval(int(interval_ms))
        timer.timeout.connect(callback)
        timer.start()
        handle = QtTimerHandle(timer)
        self._handles.append(handle)
        return handle

    def pending(self) -> int:
        """Number of timers still running."""
        self._handles = [h for h in self._handles if h.active]
        return len(self._handles)

    def cancel_all(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles = []
