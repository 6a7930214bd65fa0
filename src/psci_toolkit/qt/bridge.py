"""Qt signal bridge for session events.

Widgets connect to the signals here instead of registering Python
callbacks on the session directly.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal

from psci_toolkit.engine.session import Session, SessionState


class SessionBridge(QObject):
    """Re-emits one session's events as Qt signals.

    Usage:
        bridge = SessionBridge(session, parent=self)
        bridge.finished.connect(self._on_finished)
        bridge.countdownChanged.connect(self.timer_label.setNum)
        session.start()
    """

    finished = Signal(int, int)  # score, stars
    stateChanged = Signal(str)  # SessionState value
    countdownChanged = Signal(int)  # seconds remaining
    scoreChanged = Signal(int)

    def __init__(self, session: Session, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._session = session
        session.add_finish_listener(self._on_finish)
        session.add_state_listener(self._on_state)
        session.add_countdown_listener(self.countdownChanged.emit)
        session.add_score_listener(self.scoreChanged.emit)

    @property
    def session(self) -> Session:
        return self._session

    def _on_finish(self, score: int, stars: int) -> None:
        self.finished.emit(score, stars)

    def _on_state(self, state: SessionState) -> None:
        self.stateChanged.emit(state.value)
