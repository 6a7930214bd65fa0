"""
Module: trials

Purpose:
    Provides one frozen Trial dataclass per turn-based exercise kind. A
    trial is transient: the active session owns it and discards it once it
    has been scored. Each trial knows how to check its own structural
    invariants via validate().

Key Classes:
    - PatternTrial: Symbol sequence plus three options, one correct
    - ArithmeticTrial: Narrative prompt with an exact integer answer
    - SearchTrial: Shuffled grid of target and distractor glyphs
    - MemoryTrial: Shuffled deck of duplicated symbols
    - RecallTrial: Shopping targets, distractors and the shelf shown
    - SortingTrial: Queue of items, each tagged with its true category
    - InhibitionTrial: Colour word, ink colour and two options

Dependencies:
    - dataclasses (std)
    - common.catalog: CatalogItem, ColorSwatch

Used By:
    - engine.generators: Produce trials
    - engine.rules: Score answers against trials
    - engine.autoplay: Pick answers
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import ClassVar, FrozenSet, Literal, Optional, Tuple, Union

from psci_toolkit.common.catalog import CatalogItem, ColorSwatch
from psci_toolkit.errors import TrialValidationError

from .levels import ExerciseKind


SortBin = Literal["A", "B"]


class PatternFamily(str, Enum):
    ALTERNATING = "alternating"
    GROUPED = "grouped"
    ARITHMETIC = "arithmetic"
    CLOCK = "clock"


class InhibitionRule(str, Enum):
    """Which property of the stimulus the user must answer with."""
    MEANING = "meaning"  # the colour the word names
    INK = "ink"  # the colour the word is printed in


# ─────────────────────────────────────────────────────────────────────────────
# Pattern inference
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PatternTrial:
    """
    Pattern inference question.

    Attributes:
        family: Which pattern family generated the sequence
        sequence: 3-5 display symbols
        options: Exactly three distinct answer options, shuffled
        answer: The correct continuation (appears once in options)
    """

    kind: ClassVar[ExerciseKind] = ExerciseKind.PATTERN

    family: PatternFamily
    sequence: Tuple[str, ...]
    options: Tuple[str, ...]
    answer: str

    def validate(self) -> None:
        if not 3 <= len(self.sequence) <= 5:
            raise TrialValidationError(
                f"Pattern sequence must hold 3-5 symbols, got {len(self.sequence)}"
            )
        if len(self.options) != 3 or len(set(self.options)) != 3:
            raise TrialValidationError(f"Pattern needs 3 distinct options: {self.options}")
        if self.options.count(self.answer) != 1:
            raise TrialValidationError("Pattern options must contain the answer exactly once")

    def is_correct(self, option: str) -> bool:
        return option == self.answer


# ─────────────────────────────────────────────────────────────────────────────
# Arithmetic
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArithmeticTrial:
    """
    Market arithmetic problem.

    ``total`` and ``payment`` are only set for change-due problems, where
    the answer is ``payment - total``.
    """

    kind: ClassVar[ExerciseKind] = ExerciseKind.MATH

    template: str
    prompt: str
    answer: int
    operands: Tuple[int, ...]
    total: Optional[int] = None
    payment: Optional[int] = None

    @property
    def is_change_problem(self) -> bool:
        return self.payment is not None

    def validate(self) -> None:
        if self.answer < 0:
            raise TrialValidationError(f"Arithmetic answer must be non-negative: {self.answer}")
        if self.is_change_problem:
            if self.total is None or self.payment <= self.total:
                raise TrialValidationError(
                    f"Payment must exceed total: paid={self.payment}, total={self.total}"
                )
            if self.answer != self.payment - self.total:
                raise TrialValidationError("Change-due answer must equal payment - total")


# ─────────────────────────────────────────────────────────────────────────────
# Visual search
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SearchTrial:
    """One visual-search grid; ``cells`` is row-major and already shuffled."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.SEARCH

    target: str
    distractor: str
    cells: Tuple[str, ...]

    @property
    def grid_size(self) -> int:
        return len(self.cells)

    @cached_property
    def target_positions(self) -> FrozenSet[int]:
        return frozenset(i for i, c in enumerate(self.cells) if c == self.target)

    @property
    def target_count(self) -> int:
        return len(self.target_positions)

    def validate(self) -> None:
        if self.target == self.distractor:
            raise TrialValidationError("Target and distractor glyphs must differ")
        stray = set(self.cells) - {self.target, self.distractor}
        if stray:
            raise TrialValidationError(f"Unexpected glyphs in grid: {stray}")
        if not 3 <= self.target_count <= 5:
            raise TrialValidationError(f"Grid must hold 3-5 targets, got {self.target_count}")


# ─────────────────────────────────────────────────────────────────────────────
# Memory matching
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MemoryTrial:
    """Shuffled deck; every symbol appears exactly twice."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.MEMORY

    deck: Tuple[str, ...]

    @property
    def pair_count(self) -> int:
        return len(self.deck) // 2

    def validate(self) -> None:
        if not self.deck or len(self.deck) % 2:
            raise TrialValidationError(f"Deck must hold an even, non-zero card count: {len(self.deck)}")
        counts = Counter(self.deck)
        if any(n != 2 for n in counts.values()):
            raise TrialValidationError("Every memory symbol must appear exactly twice")


# ─────────────────────────────────────────────────────────────────────────────
# Shopping recall
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RecallTrial:
    """
    Shopping-list recall round.

    Attributes:
        targets: Items to memorise (the shopping list)
        distractors: Extra items shown on the shelf
        shelf: Shuffled union of targets and distractors
    """

    kind: ClassVar[ExerciseKind] = ExerciseKind.MARKET

    targets: Tuple[CatalogItem, ...]
    distractors: Tuple[CatalogItem, ...]
    shelf: Tuple[CatalogItem, ...]

    @cached_property
    def target_names(self) -> FrozenSet[str]:
        return frozenset(item.name for item in self.targets)

    @cached_property
    def shelf_names(self) -> FrozenSet[str]:
        return frozenset(item.name for item in self.shelf)

    def validate(self) -> None:
        if not self.targets:
            raise TrialValidationError("Recall needs at least one target")
        distractor_names = {item.name for item in self.distractors}
        if len(self.target_names) != len(self.targets) or len(distractor_names) != len(self.distractors):
            raise TrialValidationError("Recall item names must be unique")
        if self.target_names & distractor_names:
            raise TrialValidationError("Targets and distractors must be disjoint by name")
        if self.shelf_names != self.target_names | distractor_names or len(self.shelf) != len(self.shelf_names):
            raise TrialValidationError("Shelf must be exactly targets plus distractors")


# ─────────────────────────────────────────────────────────────────────────────
# Sorting
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SortItem:
    item: CatalogItem
    category: SortBin


@dataclass(frozen=True)
class SortingTrial:
    """Queue of items to sort into category "A" or "B", in display order."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.SORTING

    category_a: str
    category_b: str
    queue: Tuple[SortItem, ...]

    def validate(self) -> None:
        if not self.queue:
            raise TrialValidationError("Sorting queue must not be empty")
        if any(entry.category not in ("A", "B") for entry in self.queue):
            raise TrialValidationError("Sorting categories must be 'A' or 'B'")


# ─────────────────────────────────────────────────────────────────────────────
# Inhibition (Stroop)
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InhibitionTrial:
    """
    Word/ink colour trial.

    ``target`` is the word's colour under MEANING and the ink under INK.
    """

    kind: ClassVar[ExerciseKind] = ExerciseKind.COLOR_MATCH

    rule: InhibitionRule
    word: ColorSwatch
    ink: ColorSwatch
    target: ColorSwatch
    options: Tuple[ColorSwatch, ColorSwatch]

    @property
    def is_congruent(self) -> bool:
        return self.word == self.ink

    def validate(self) -> None:
        expected = self.word if self.rule is InhibitionRule.MEANING else self.ink
        if self.target != expected:
            raise TrialValidationError(f"Target does not follow the {self.rule.value} rule")
        if len(self.options) != 2 or self.options[0] == self.options[1]:
            raise TrialValidationError("Inhibition needs two distinct options")
        if self.target not in self.options:
            raise TrialValidationError("Inhibition options must contain the target")


Trial = Union[
    PatternTrial,
    ArithmeticTrial,
    SearchTrial,
    MemoryTrial,
    RecallTrial,
    SortingTrial,
    InhibitionTrial,
]
