"""
Module: engine.capabilities

Purpose:
    Contracts for the external collaborators the engine talks to. Speech,
    audio, remote storage and AI summaries all live outside the engine and
    are reached only through these Protocols.

Key Classes:
    - CueKind: Audio cue identifiers
    - Narrator: Text-to-speech and cue playback (fire-and-forget)
    - RecordStore: Remote session-result storage (may raise)
    - Summarizer: Report text generation (may be slow or raise)
    - NullNarrator: Silent narrator for headless use

Used By:
    - engine.session: Narration and cues
    - engine.dispatch: Persistence and summaries
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

from psci_toolkit.core.models.results import SessionResult


class CueKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    TAP = "tap"


class Narrator(Protocol):
    def announce(self, text: str) -> None:
        """Speak ``text``. A newer call may interrupt an older one."""
        ...

    def cue(self, kind: CueKind) -> None: ...


class RecordStore(Protocol):
    def record_session(self, result: SessionResult) -> None: ...


class Summarizer(Protocol):
    def summarize(self, history: Sequence[SessionResult]) -> str: ...


class NullNarrator:
    """Narrator that does nothing."""

    def announce(self, text: str) -> None:
        pass

    def cue(self, kind: CueKind) -> None:
        pass
