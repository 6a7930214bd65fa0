"""
Module: levels

Purpose:
    Provides ExerciseKind, Difficulty and the ExerciseLevel dataclass - the
    immutable configuration a caller selects before a session starts.

Key Classes:
    - ExerciseKind: Closed set of exercise kinds (one per generator/rule set)
    - Difficulty: Three-step difficulty ladder
    - ExerciseLevel: Level number, difficulty, parameters and target score

Dependencies:
    - dataclasses (std)
    - enum (std)
    - types.MappingProxyType (std)

Used By:
    - common.exercises: Level tables per exercise
    - engine.generators: Generator input
    - engine.session: Session configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ExerciseKind(str, Enum):
    """Exercise kinds. The value doubles as the exercise id in history."""
    MARKET = "MARKET"
    MEMORY = "MEMORY"
    REACTION = "REACTION"
    MATH = "MATH"
    SEARCH = "SEARCH"
    SORTING = "SORTING"
    PATTERN = "PATTERN"
    COLOR_MATCH = "COLOR_MATCH"

    @property
    def exercise_id(self) -> str:
        return self.value


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def rank(self) -> int:
        """0 for easy, 1 for medium, 2 for hard."""
        return list(Difficulty).index(self)


@dataclass(frozen=True)
class ExerciseLevel:
    """
    Immutable level configuration.

    Attributes:
        level: Level number, 1-3
        difficulty: Difficulty tier for this level
        params: Exercise-specific parameters (grid size, durations, speeds)
        target_score: Score needed for three stars where the exercise
            derives its star table from the level

    Invariants:
        - 1 <= level <= 3
        - 0 < target_score <= 100
        - params is read-only after construction

    Example:
        >>> lvl = ExerciseLevel(1, Difficulty.EASY, {"grid_size": 12})
        >>> lvl.param("grid_size", 20)
        12
    """

    level: int
    difficulty: Difficulty
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)
    target_score: int = 80

    def __post_init__(self) -> None:
        """Validate level and freeze params."""
        if not 1 <= self.level <= 3:
            raise ValueError(f"level must be between 1 and 3: {self.level}")
        if not 0 < self.target_score <= 100:
            raise ValueError(f"target_score must be in (0, 100]: {self.target_score}")
        if not isinstance(self.difficulty, Difficulty):
            object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, name: str, default: Any = None) -> Any:
        """Look up a parameter, falling back to ``default`` when absent."""
        return self.params.get(name, default)

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "difficulty": self.difficulty.value,
            "params": dict(self.params),
            "target_score": self.target_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ExerciseLevel:
        return cls(
            level=data["level"],
            difficulty=Difficulty(data["difficulty"]),
            params=data.get("params", {}),
            target_score=data.get("target_score", 80),
        )
