"""
Core Models Package

Validated data models shared by the engine.

Configuration (ExerciseLevel) and outcomes (SessionResult) are frozen
dataclasses, so they can be handed to background threads and used as dict
keys. Trials are frozen as well; the session discards each one once it is
scored. The reaction exercise is the exception: FallingObject and Catcher
change every tick and are owned by the simulation.
"""

from .levels import Difficulty, ExerciseKind, ExerciseLevel
from .results import SessionResult, utcnow
from .trials import (
    ArithmeticTrial,
    InhibitionRule,
    InhibitionTrial,
    MemoryTrial,
    PatternFamily,
    PatternTrial,
    RecallTrial,
    SearchTrial,
    SortingTrial,
    SortItem,
    Trial,
)
from .falling import Catcher, FallingObject, ObjectKind

__all__ = [
    "Difficulty",
    "ExerciseKind",
    "ExerciseLevel",
    "SessionResult",
    "utcnow",
    "ArithmeticTrial",
    "InhibitionRule",
    "InhibitionTrial",
    "MemoryTrial",
    "PatternFamily",
    "PatternTrial",
    "RecallTrial",
    "SearchTrial",
    "SortingTrial",
    "SortItem",
    "Trial",
    "Catcher",
    "FallingObject",
    "ObjectKind",
]
