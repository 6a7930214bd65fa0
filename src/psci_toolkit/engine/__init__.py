"""
Exercise Session Engine

Drives every exercise through Intro -> Playing -> Feedback, generates
content procedurally, scores attempts, runs the reaction simulation and
computes level unlocks from the result history.

Main entry points:
    create_session(level, kind, ...) -> Session
    compute_unlocked_level(history, exercise_id) -> int
    best_score(history, exercise_id, level) -> int | None
"""

from .capabilities import CueKind, Narrator, NullNarrator, RecordStore, Summarizer
from .config import EngineConfig
from .dispatch import BackgroundDispatcher
from .progression import (
    LevelStatus,
    ResultHistory,
    best_result,
    best_score,
    compute_unlocked_level,
    level_statuses,
)
from .reporting import ReportOutcome, history_digest, request_report, summary_lines
from .scheduler import ManualScheduler, Scheduler, TimerHandle
from .scoring import StarTable, stars_for
from .session import (
    ReactionSession,
    Session,
    SessionState,
    TurnBasedSession,
    create_session,
)

__all__ = [
    "CueKind",
    "Narrator",
    "NullNarrator",
    "RecordStore",
    "Summarizer",
    "EngineConfig",
    "BackgroundDispatcher",
    "LevelStatus",
    "ResultHistory",
    "best_result",
    "best_score",
    "compute_unlocked_level",
    "level_statuses",
    "ReportOutcome",
    "history_digest",
    "request_report",
    "summary_lines",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "StarTable",
    "stars_for",
    "ReactionSession",
    "Session",
    "SessionState",
    "TurnBasedSession",
    "create_session",
]
