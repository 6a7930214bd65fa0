"""Common tables and definitions shared across the toolkit."""

from __future__ import annotations

from .exercises import (
    ExerciseDefinition,
    get_exercise_definition,
    supported_exercises,
    get_level,
    UnsupportedExerciseError,
)

__all__ = [
    # exercises
    "ExerciseDefinition",
    "get_exercise_definition",
    "supported_exercises",
    "get_level",
    "UnsupportedExerciseError",
    # module references
    "catalog",
    "thresholds",
]
