"""PySide6 adapters: a QTimer scheduler and a session signal bridge."""

from .bridge import SessionBridge
from .scheduler import QtScheduler, QtTimerHandle

__all__ = ["SessionBridge", "QtScheduler", "QtTimerHandle"]
