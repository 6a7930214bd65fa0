"""
Module: engine.rules

Purpose:
    Per-kind turn rules for turn-based sessions. A rule knows how a kind
    terminates, how to parse and score one submitted answer against the
    current trial, and how to compute the final score. Rules are created
    fresh for every session and own that session's tally.

Key Classes:
    - Termination: COUNTDOWN, TRIAL_BUDGET or COMPLETION
    - TurnOutcome: Result of applying one answer
    - TurnRule: Base class; one subclass per turn-based kind

Key Functions:
    - make_rule(): Instantiate the rule for a kind from the fixed table

Dependencies:
    - engine.scoring: Tally and set-completion scores
    - core.models.trials: Trial types

Used By:
    - engine.session.TurnBasedSession
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Set, Type

from psci_toolkit.common.catalog import ColorSwatch
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS, SCORING_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseKind, ExerciseLevel
from psci_toolkit.core.models.trials import (
    ArithmeticTrial,
    InhibitionTrial,
    MemoryTrial,
    PatternTrial,
    RecallTrial,
    SearchTrial,
    SortingTrial,
    Trial,
)
from psci_toolkit.errors import InvalidAnswer, UnsupportedExerciseError

from .capabilities import CueKind
from .scoring import ScoreTally, memory_score, recall_score, sorting_score

logger = logging.getLogger(__name__)


class Termination(str, Enum):
    COUNTDOWN = "countdown"  # Ends when the timer reaches zero
    TRIAL_BUDGET = "trial_budget"  # Ends after a fixed number of trials
    COMPLETION = "completion"  # Ends when the single trial is complete


@dataclass(frozen=True)
class TurnOutcome:
    """
    Result of one submitted answer.

    Attributes:
        correct: Whether the answer scored
        trial_complete: The current trial is finished; request the next one
        session_complete: The exercise is finished regardless of timers
        cue: Audio cue to play, if any
    """

    correct: bool
    trial_complete: bool = True
    session_complete: bool = False
    cue: Optional[CueKind] = None


def _cue(correct: bool) -> CueKind:
    return CueKind.SUCCESS if correct else CueKind.FAILURE


def _as_index(value: Any, size: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAnswer(f"Expected a cell index, got {value!r}")
    if not 0 <= value < size:
        raise InvalidAnswer(f"Index {value} out of range 0-{size - 1}")
    return value


class TurnRule:
    """Base turn rule: per-trial scoring on a countdown."""

    kind: ExerciseKind
    termination: Termination = Termination.COUNTDOWN
    default_duration_s: Optional[int] = None

    def __init__(self) -> None:
        self.tally = ScoreTally()

    def duration_s(self, level: ExerciseLevel) -> Optional[int]:
        if self.termination is not Termination.COUNTDOWN:
            return None
        return int(level.param("duration", self.default_duration_s))

    def trial_budget(self, level: ExerciseLevel) -> Optional[int]:
        return None

    def begin(self, trial: Trial) -> None:
        """Reset per-trial state for a freshly generated trial."""

    def apply(self, trial: Trial, answer: Any) -> TurnOutcome:
        raise NotImplementedError

    @property
    def score(self) -> int:
        return self.tally.final


# ─────────────────────────────────────────────────────────────────────────────
# Per-trial kinds
# ─────────────────────────────────────────────────────────────────────────────

class PatternRule(TurnRule):
    kind = ExerciseKind.PATTERN
    default_duration_s = GENERATION_THRESHOLDS.pattern_duration_s

    def apply(self, trial: PatternTrial, answer: Any) -> TurnOutcome:
        if not isinstance(answer, str) or answer not in trial.options:
            raise InvalidAnswer(f"Not one of the options: {answer!r}")
        correct = trial.is_correct(answer)
        if correct:
            self.tally.reward()
        else:
            self.tally.miss()
        return TurnOutcome(correct, cue=_cue(correct))


class ArithmeticRule(TurnRule):
    kind = ExerciseKind.MATH
    termination = Termination.TRIAL_BUDGET

    def trial_budget(self, level: ExerciseLevel) -> Optional[int]:
        return int(level.param("trials", GENERATION_THRESHOLDS.arithmetic_trials))

    @staticmethod
    def parse(answer: Any) -> int:
        if isinstance(answer, bool):
            raise InvalidAnswer(f"Expected a number, got {answer!r}")
        if isinstance(answer, int):
            return answer
        if isinstance(answer, str) and answer.strip().isdigit():
            return int(answer.strip())
        raise InvalidAnswer(f"Expected a number, got {answer!r}")

    def apply(self, trial: ArithmeticTrial, answer: Any) -> TurnOutcome:
        correct = self.parse(answer) == trial.answer
        if correct:
            self.tally.reward()
        else:
            self.tally.miss()
        return TurnOutcome(correct, cue=_cue(correct))


class SearchRule(TurnRule):
    """Hits score, misses cost points; a fresh grid follows a cleared one."""

    kind = ExerciseKind.SEARCH
    default_duration_s = GENERATION_THRESHOLDS.search_duration_s

    def __init__(self) -> None:
        super().__init__()
        self.found: Set[int] = set()

    def begin(self, trial: Trial) -> None:
        self.found = set()

    def apply(self, trial: SearchTrial, answer: Any) -> TurnOutcome:
        index = _as_index(answer, trial.grid_size)
        if index in self.found:
            return TurnOutcome(False, trial_complete=False)
        if index in trial.target_positions:
            self.found.add(index)
            self.tally.reward()
            complete = self.found == trial.target_positions
            return TurnOutcome(True, trial_complete=complete, cue=CueKind.SUCCESS)
        self.tally.penalize(SCORING_THRESHOLDS.search_miss_penalty)
        return TurnOutcome(False, trial_complete=False, cue=CueKind.FAILURE)


class InhibitionAnswerRule(TurnRule):
    kind = ExerciseKind.COLOR_MATCH
    default_duration_s = GENERATION_THRESHOLDS.inhibition_default_duration_s

    def apply(self, trial: InhibitionTrial, answer: Any) -> TurnOutcome:
        value = answer.value if isinstance(answer, ColorSwatch) else answer
        if value not in {option.value for option in trial.options}:
            raise InvalidAnswer(f"Not one of the colour options: {answer!r}")
        correct = value == trial.target.value
        if correct:
            self.tally.reward()
        else:
            self.tally.miss()
        return TurnOutcome(correct, cue=_cue(correct))


# ─────────────────────────────────────────────────────────────────────────────
# Set-completion kinds
# ─────────────────────────────────────────────────────────────────────────────

class MemoryRule(TurnRule):
    """Each answer reveals two cards; the round ends when all pairs match."""

    kind = ExerciseKind.MEMORY
    termination = Termination.COMPLETION

    def __init__(self) -> None:
        super().__init__()
        self.matched: Set[int] = set()
        self.moves = 0
        self.pair_count = 0

    def begin(self, trial: MemoryTrial) -> None:
        self.matched = set()
        self.moves = 0
        self.pair_count = trial.pair_count

    def apply(self, trial: MemoryTrial, answer: Any) -> TurnOutcome:
        try:
            first, second = answer
        except (TypeError, ValueError):
            raise InvalidAnswer(f"Expected a pair of card indices, got {answer!r}") from None
        first = _as_index(first, len(trial.deck))
        second = _as_index(second, len(trial.deck))
        if first == second:
            raise InvalidAnswer("Cannot reveal the same card twice")
        if first in self.matched or second in self.matched:
            raise InvalidAnswer("Card already matched")

        self.moves += 1
        correct = trial.deck[first] == trial.deck[second]
        if correct:
            self.matched.update((first, second))
        complete = len(self.matched) == len(trial.deck)
        return TurnOutcome(
            correct,
            trial_complete=complete,
            session_complete=complete,
            cue=_cue(correct),
        )

    @property
    def score(self) -> int:
        if self.pair_count and len(self.matched) == 2 * self.pair_count:
            return memory_score(self.moves, self.pair_count)
        return 0


class RecallRule(TurnRule):
    """The whole basket is submitted at once and scored against the list."""

    kind = ExerciseKind.MARKET
    termination = Termination.COMPLETION

    def __init__(self) -> None:
        super().__init__()
        self._score = 0

    def apply(self, trial: RecallTrial, answer: Any) -> TurnOutcome:
        if isinstance(answer, str):
            raise InvalidAnswer("Basket must be a collection of item names, not a string")
        try:
            basket = set(answer)
        except TypeError:
            raise InvalidAnswer(f"Basket must be iterable, got {answer!r}") from None
        unknown = basket - trial.shelf_names
        if unknown:
            raise InvalidAnswer(f"Items not on the shelf: {sorted(unknown)}")

        correct = len(basket & trial.target_names)
        wrong = len(basket - trial.target_names)
        self._score = recall_score(correct, wrong, len(trial.targets))
        logger.debug(f"Basket: {correct} correct, {wrong} wrong -> {self._score}")
        perfect = correct == len(trial.targets) and wrong == 0
        return TurnOutcome(perfect, session_complete=True, cue=_cue(perfect))

    @property
    def score(self) -> int:
        return self._score


class SortingRule(TurnRule):
    """Items are sorted one at a time in queue order."""

    kind = ExerciseKind.SORTING
    termination = Termination.COMPLETION

    def __init__(self) -> None:
        super().__init__()
        self.position = 0
        self.total = 0

    def begin(self, trial: SortingTrial) -> None:
        self.position = 0
        self.total = len(trial.queue)

    def apply(self, trial: SortingTrial, answer: Any) -> TurnOutcome:
        if answer not in ("A", "B"):
            raise InvalidAnswer(f"Sorting answer must be 'A' or 'B', got {answer!r}")
        correct = trial.queue[self.position].category == answer
        if correct:
            self.tally.reward(0)
        else:
            self.tally.miss()
        self.position += 1
        complete = self.position >= len(trial.queue)
        return TurnOutcome(
            correct,
            trial_complete=complete,
            session_complete=complete,
            cue=_cue(correct),
        )

    @property
    def score(self) -> int:
        if not self.total:
            return 0
        return sorting_score(self.tally.correct, self.total)


RULES: Dict[ExerciseKind, Type[TurnRule]] = {
    ExerciseKind.PATTERN: PatternRule,
    ExerciseKind.MATH: ArithmeticRule,
    ExerciseKind.SEARCH: SearchRule,
    ExerciseKind.COLOR_MATCH: InhibitionAnswerRule,
    ExerciseKind.MEMORY: MemoryRule,
    ExerciseKind.MARKET: RecallRule,
    ExerciseKind.SORTING: SortingRule,
}


def make_rule(kind: ExerciseKind) -> TurnRule:
    try:
        return RULES[kind]()
    except KeyError:
        raise UnsupportedExerciseError(f"No turn rule for {kind!r}") from None
