"""
Module: engine.progression

Purpose:
    Level unlocking and best scores, always recomputed from the result
    history. Nothing is cached; every call is a pure read.

Key Functions:
    - compute_unlocked_level(): Highest playable level for an exercise
    - best_score() / best_result(): Best record for an exercise level
    - level_statuses(): Lock state and best score for every defined level

Key Classes:
    - ResultHistory: Append-only history with tuple snapshots
    - LevelStatus: One row of a level-select screen

Used By:
    - cli: ``levels`` command
    - callers choosing which level to offer
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from psci_toolkit.common.exercises import get_exercise_definition
from psci_toolkit.core.models.levels import ExerciseKind
from psci_toolkit.core.models.results import SessionResult

logger = logging.getLogger(__name__)

ExerciseRef = Union[ExerciseKind, str]


def _exercise_id(exercise: ExerciseRef) -> str:
    return exercise.value if isinstance(exercise, ExerciseKind) else str(exercise)


def compute_unlocked_level(
    history: Iterable[SessionResult],
    exercise_id: ExerciseRef,
    max_level: Optional[int] = None,
) -> int:
    """
    Highest level the user may play.

    One more than the highest level completed with at least one star;
    1 when there is no such result.

    Args:
        history: Result history (any order)
        exercise_id: Exercise kind or its id; matched exactly
        max_level: Optional cap, e.g. the number of defined levels

    Example:
        >>> compute_unlocked_level([], "MATH")
        1
    """
    target = _exercise_id(exercise_id)
    completed = [r.level for r in history if r.exercise_id == target and r.stars >= 1]
    unlocked = 1 + max(completed) if completed else 1
    if max_level is not None:
        unlocked = min(unlocked, max_level)
    return unlocked


def best_result(
    history: Iterable[SessionResult],
    exercise_id: ExerciseRef,
    level: int,
) -> Optional[SessionResult]:
    """Highest-scoring result for an exercise level; the earliest wins ties."""
    target = _exercise_id(exercise_id)
    best: Optional[SessionResult] = None
    for result in history:
        if result.exercise_id != target or result.level != level:
            continue
        if best is None or result.score > best.score:
            best = result
    return best


def best_score(
    history: Iterable[SessionResult],
    exercise_id: ExerciseRef,
    level: int,
) -> Optional[int]:
    result = best_result(history, exercise_id, level)
    return result.score if result else None


@dataclass(frozen=True)
class LevelStatus:
    level: int
    unlocked: bool
    best_score: Optional[int]
    best_stars: Optional[int]


def level_statuses(
    history: Sequence[SessionResult],
    exercise: ExerciseRef,
) -> List[LevelStatus]:
    """Lock state and best record for each level the exercise defines."""
    definition = get_exercise_definition(exercise)
    unlocked = compute_unlocked_level(history, definition.kind, definition.max_level)
    statuses = []
    for lvl in definition.levels:
        best = best_result(history, definition.kind, lvl.level)
        statuses.append(
            LevelStatus(
                level=lvl.level,
                unlocked=lvl.level <= unlocked,
                best_score=best.score if best else None,
                best_stars=best.stars if best else None,
            )
        )
    return statuses


class ResultHistory:
    """
    Append-only, thread-safe result history.

    Readers get immutable tuple snapshots, so progression queries never
    see a half-applied append.

    Example:
        >>> history = ResultHistory()
        >>> len(history)
        0
    """

    def __init__(self, results: Iterable[SessionResult] = ()):
        self._results: List[SessionResult] = list(results)
        self._lock = threading.Lock()

    def append(self, result: SessionResult) -> None:
        if not isinstance(result, SessionResult):
            raise TypeError(f"Expected SessionResult, got {type(result).__name__}")
        with self._lock:
            self._results.append(result)
        logger.debug(f"History: appended {result!r}")

    def snapshot(self) -> Tuple[SessionResult, ...]:
        with self._lock:
            return tuple(self._results)

    def for_exercise(self, exercise: ExerciseRef) -> Tuple[SessionResult, ...]:
        target = _exercise_id(exercise)
        return tuple(r for r in self.snapshot() if r.exercise_id == target)

    def __iter__(self) -> Iterator[SessionResult]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
