"""
Content Generators

One pure function per turn-based exercise kind, ``(level, rng) -> Trial``.
Generators keep no state; all randomness comes from the ``random.Random``
passed in, so a seeded source reproduces the same trials.

The reaction exercise has no generator: its content is spawned by
engine.reaction tick by tick.
"""

from __future__ import annotations

import random
from typing import Dict, Protocol

from psci_toolkit.core.models.levels import ExerciseKind, ExerciseLevel
from psci_toolkit.core.models.trials import Trial
from psci_toolkit.errors import UnsupportedExerciseError

from .arithmetic import generate_arithmetic
from .inhibition import generate_inhibition
from .memory import generate_memory
from .pattern import generate_pattern
from .recall import generate_recall
from .search import generate_search
from .sorting import generate_sorting


class Generator(Protocol):
    def __call__(self, level: ExerciseLevel, rng: random.Random) -> Trial: ...


GENERATORS: Dict[ExerciseKind, Generator] = {
    ExerciseKind.PATTERN: generate_pattern,
    ExerciseKind.MATH: generate_arithmetic,
    ExerciseKind.SEARCH: generate_search,
    ExerciseKind.MEMORY: generate_memory,
    ExerciseKind.MARKET: generate_recall,
    ExerciseKind.SORTING: generate_sorting,
    ExerciseKind.COLOR_MATCH: generate_inhibition,
}


def get_generator(kind: ExerciseKind) -> Generator:
    """
    Look up the generator for a turn-based kind.

    Raises:
        UnsupportedExerciseError: For REACTION, which has no trials
    """
    try:
        return GENERATORS[kind]
    except KeyError:
        raise UnsupportedExerciseError(f"No trial generator for {kind!r}") from None


__all__ = [
    "Generator",
    "GENERATORS",
    "get_generator",
    "generate_arithmetic",
    "generate_inhibition",
    "generate_memory",
    "generate_pattern",
    "generate_recall",
    "generate_search",
    "generate_sorting",
]
