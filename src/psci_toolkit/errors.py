"""
Module: errors

Purpose:
    Exception hierarchy for the session engine. Everything the engine raises
    on purpose derives from EngineError so callers can catch one base.

Key Classes:
    - GeneratorError: Generator cannot build a valid trial (retried)
    - TrialValidationError: Trial violates its kind's structural rules (retried)
    - ExerciseUnavailable: Retries exhausted; fatal to the current session
    - InvalidAnswer: Answer rejected synchronously; no state change
    - PersistenceFailure: External record store failed
    - SummaryFailure: External summarizer failed or timed out
    - UnsupportedExerciseError: Unknown exercise kind or level

Used By:
    - core.models.trials, engine.*
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine errors."""
    pass


class GeneratorError(EngineError, ValueError):
    """A content generator cannot produce a trial for the given level params."""
    pass


class TrialValidationError(EngineError, ValueError):
    """A generated trial violates the structural rules of its kind."""
    pass


class ExerciseUnavailable(EngineError):
    """Generator retries exhausted; the session cannot continue."""

    def __init__(self, exercise_id: str, attempts: int, cause: BaseException | None = None):
        super().__init__(
            f"Exercise {exercise_id} unavailable after {attempts} generation attempts"
        )
        self.exercise_id = exercise_id
        self.attempts = attempts
        self.cause = cause


class InvalidAnswer(EngineError):
    """Answer submitted with no active trial, after Feedback, or malformed."""
    pass


class PersistenceFailure(EngineError):
    """The external record store rejected a session result."""
    pass


class SummaryFailure(EngineError):
    """The external summarizer failed or did not answer in time."""
    pass


class UnsupportedExerciseError(EngineError, KeyError):
    """Exercise kind or level is not in the catalogue."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unsupported exercise"
