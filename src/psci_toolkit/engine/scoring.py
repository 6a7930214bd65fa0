"""
Module: engine.scoring

Purpose:
    Turns raw trial outcomes into a score in [0, 100] and a 1-3 star
    rating. Per-trial exercises accumulate into a ScoreTally; set-completion
    exercises (memory, recall, sorting) are scored in one go.

Key Functions:
    - clamp_score(): Clamp any raw score into [0, 100]
    - stars_for(): Score -> stars under a StarTable
    - star_table_for(): Star table of an exercise level
    - memory_score(), recall_score(), sorting_score(): Set-completion scores

Key Classes:
    - StarTable: Validated (three, two) thresholds
    - ScoreTally: Running per-trial score, floored at 0

Dependencies:
    - common.thresholds: Increments and penalties
    - common.exercises: Per-kind star thresholds

Used By:
    - engine.rules: Per-kind scoring
    - engine.reaction: Catch rewards and penalties
    - engine.session: Final stars
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from psci_toolkit.common.exercises import get_exercise_definition
from psci_toolkit.common.thresholds import SCORING_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseKind, ExerciseLevel


def clamp_score(raw: float) -> int:
    """Round ``raw`` half-up and clamp it into [0, 100]."""
    rounded = math.floor(raw + 0.5)
    return int(min(SCORING_THRESHOLDS.max_score, max(SCORING_THRESHOLDS.min_score, rounded)))


@dataclass(frozen=True)
class StarTable:
    """
    Score thresholds for 3 and 2 stars. Anything lower earns 1 star.

    Invariants:
        - 0 <= two <= three <= 100
    """

    three: float
    two: float

    def __post_init__(self) -> None:
        if not 0 <= self.two <= self.three <= 100:
            raise ValueError(
                f"Star thresholds must satisfy 0 <= two <= three <= 100: "
                f"three={self.three}, two={self.two}"
            )


def stars_for(score: float, table: StarTable) -> int:
    """
    Map a score to 1-3 stars. There is no 0-star outcome.

    Example:
        >>> stars_for(60, StarTable(80, 60))
        2
    """
    score = clamp_score(score)
    if score >= table.three:
        return 3
    if score >= table.two:
        return 2
    return 1


def star_table_for(kind: ExerciseKind, level: ExerciseLevel) -> StarTable:
    """Star table for a kind; derived from ``target_score`` when the kind has no fixed table."""
    definition = get_exercise_definition(kind)
    if definition.star_thresholds is None:
        target = level.target_score
        return StarTable(three=target, two=target * SCORING_THRESHOLDS.reaction_star_ratio)
    three, two = definition.star_thresholds
    return StarTable(three=three, two=two)


class ScoreTally:
    """Running score for per-trial exercises. Never drops below 0."""

    def __init__(self) -> None:
        self.value = 0
        self.correct = 0
        self.wrong = 0

    def reward(self, points: int = SCORING_THRESHOLDS.per_trial_points) -> int:
        self.value += points
        self.correct += 1
        return self.value

    def penalize(self, points: int) -> int:
        self.value = max(SCORING_THRESHOLDS.min_score, self.value - points)
        self.wrong += 1
        return self.value

    def miss(self) -> None:
        """Count a wrong answer that carries no penalty."""
        self.wrong += 1

    @property
    def final(self) -> int:
        return clamp_score(self.value)


def memory_score(moves: int, pair_count: int) -> int:
    """100 minus a fixed penalty for each move beyond the optimum, floored at 0."""
    extra = max(0, moves - pair_count)
    return clamp_score(100 - SCORING_THRESHOLDS.memory_extra_move_penalty * extra)


def recall_score(correct: int, wrong: int, target_count: int) -> int:
    """
    Shopping recall: each target is worth an even share of 100; each wrong
    item costs half a share.

    Example:
        >>> recall_score(3, 2, 3)
        67
    """
    if target_count <= 0:
        raise ValueError(f"target_count must be positive: {target_count}")
    share = 100 / target_count
    return clamp_score(correct * share - wrong * share * SCORING_THRESHOLDS.recall_wrong_weight)


def sorting_score(correct: int, total: int) -> int:
    if total <= 0:
        raise ValueError(f"total must be positive: {total}")
    return clamp_score(100 * correct / total)
