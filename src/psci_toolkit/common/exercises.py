"""
Module: common.exercises

Purpose:
    Registry of exercise definitions: title, trained ability, the three
    levels with their parameters, the star thresholds and the narration
    read out when a session opens.

Key Functions:
    - get_exercise_definition(): Definition by kind (or its string id)
    - supported_exercises(): All registered kinds, in menu order
    - get_level(): One ExerciseLevel of a kind

Dependencies:
    - psci_toolkit.core.models: ExerciseKind, ExerciseLevel, Difficulty

Used By:
    - psci_toolkit.engine.scoring: Star tables
    - psci_toolkit.engine.session: Intro narration
    - psci_toolkit.engine.progression: Level statuses
    - psci_toolkit.cli: Level listing and simulation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from psci_toolkit.core.models.levels import Difficulty, ExerciseKind, ExerciseLevel
from psci_toolkit.errors import UnsupportedExerciseError

__all__ = [
    "ExerciseDefinition",
    "get_exercise_definition",
    "supported_exercises",
    "get_level",
    "UnsupportedExerciseError",
]


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    Static metadata for one exercise kind.

    Attributes:
        kind: Exercise kind.
        title: Human-readable exercise name.
        ability: Trained cognitive ability, used to group reports.
        levels: The three levels, in order.
        star_thresholds: (three, two) score thresholds, or None when the
            table is derived from each level's target_score.
        intro_text: Narration announced when a session is created.
    """
    kind: ExerciseKind
    title: str
    ability: str
    levels: Tuple[ExerciseLevel, ...]
    star_thresholds: Optional[Tuple[int, int]]
    intro_text: str

    @property
    def exercise_id(self) -> str:
        return self.kind.value

    @property
    def max_level(self) -> int:
        return len(self.levels)


def _ladder(*params: Dict[str, object]) -> Tuple[ExerciseLevel, ...]:
    """Build levels 1-3 from per-level params (empty when none given)."""
    tiers = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)
    if not params:
        params = ({}, {}, {})
    return tuple(
        ExerciseLevel(level=i + 1, difficulty=tiers[i], params=p, target_score=80)
        for i, p in enumerate(params)
    )


_DEFINITIONS: Dict[ExerciseKind, ExerciseDefinition] = {
    ExerciseKind.MARKET: ExerciseDefinition(
        kind=ExerciseKind.MARKET,
        title="Market Shopping",
        ability="Long-term memory",
        levels=_ladder(),
        star_thresholds=(80, 60),
        intro_text="Remember the shopping list, then pick those items from the shelf.",
    ),
    ExerciseKind.MEMORY: ExerciseDefinition(
        kind=ExerciseKind.MEMORY,
        title="Memory Tiles",
        ability="Working memory",
        levels=_ladder({"pair_count": 4}, {"pair_count": 6}, {"pair_count": 8}),
        star_thresholds=(80, 50),
        intro_text="Turn over two tiles at a time and find every matching pair.",
    ),
    ExerciseKind.REACTION: ExerciseDefinition(
        kind=ExerciseKind.REACTION,
        title="Catch the Fruit",
        ability="Processing speed",
        levels=_ladder(
            {"base_speed": 0.2, "spawn_rate": 2000, "duration": 30},
            {"base_speed": 0.4, "spawn_rate": 1500, "duration": 45},
            {"base_speed": 0.6, "spawn_rate": 1000, "duration": 60},
        ),
        star_thresholds=None,
        intro_text="Move the basket to catch the fruit. Avoid the bombs.",
    ),
    ExerciseKind.MATH: ExerciseDefinition(
        kind=ExerciseKind.MATH,
        title="Market Sums",
        ability="Calculation",
        levels=_ladder(),
        star_thresholds=(80, 60),
        intro_text="Work out each shopping sum and enter the answer.",
    ),
    ExerciseKind.SEARCH: ExerciseDefinition(
        kind=ExerciseKind.SEARCH,
        title="Spot the Difference",
        ability="Perception",
        levels=_ladder({"grid_size": 12}, {"grid_size": 20}, {"grid_size": 30}),
        star_thresholds=(80, 40),
        intro_text="Find every copy of the target character in the grid.",
    ),
    ExerciseKind.SORTING: ExerciseDefinition(
        kind=ExerciseKind.SORTING,
        title="Sorting",
        ability="Executive function",
        levels=_ladder(),
        star_thresholds=(80, 60),
        intro_text="Put each item into the category it belongs to.",
    ),
    ExerciseKind.PATTERN: ExerciseDefinition(
        kind=ExerciseKind.PATTERN,
        title="What Comes Next",
        ability="Logical reasoning",
        levels=_ladder(),
        star_thresholds=(80, 50),
        intro_text="Look at the pattern and choose what comes next.",
    ),
    ExerciseKind.COLOR_MATCH: ExerciseDefinition(
        kind=ExerciseKind.COLOR_MATCH,
        title="Colour Words",
        ability="Inhibition",
        levels=_ladder({"duration": 30}, {"duration": 45}, {"duration": 60}),
        star_thresholds=(80, 50),
        intro_text="Choose the colour the rule asks for, not the first one you see.",
    ),
}


def _coerce_kind(kind: Union[ExerciseKind, str, None]) -> ExerciseKind:
    if isinstance(kind, ExerciseKind):
        return kind
    try:
        return ExerciseKind(str(kind).upper())
    except ValueError:
        raise UnsupportedExerciseError(f"Unsupported exercise: {kind!r}") from None


def supported_exercises() -> Iterable[ExerciseKind]:
    """
    Return all registered exercise kinds.

    Example:
        >>> [k.value for k in supported_exercises()][:2]
        ['MARKET', 'MEMORY']
    """
    return list(_DEFINITIONS)


def get_exercise_definition(kind: Union[ExerciseKind, str]) -> ExerciseDefinition:
    """
    Get an exercise definition by kind.

    Args:
        kind: ExerciseKind or its string id (case-insensitive), e.g. "math".

    Raises:
        UnsupportedExerciseError: If the kind is not registered.

    Example:
        >>> get_exercise_definition("math").title
        'Market Sums'
    """
    resolved = _coerce_kind(kind)
    try:
        return _DEFINITIONS[resolved]
    except KeyError:
        raise UnsupportedExerciseError(f"Unsupported exercise: {kind!r}") from None


def get_level(kind: Union[ExerciseKind, str], level: int) -> ExerciseLevel:
    """
    Get one level of an exercise.

    Raises:
        UnsupportedExerciseError: If the kind or level number is unknown.
    """
    definition = get_exercise_definition(kind)
    for candidate in definition.levels:
        if candidate.level == level:
            return candidate
    raise UnsupportedExerciseError(
        f"Exercise {definition.exercise_id} has no level {level!r}"
    )
