"""
PSCI Toolkit Core Package

Shared data models, schemas and serialization helpers. Nothing in here
knows about sessions or timers; the engine package builds on these types.

1. **Immutable configuration and results**
   - ExerciseLevel and SessionResult are frozen and validated on construction.

2. **Self-validating trials**
   - Every trial carries validate(); generators never hand out unchecked content.

3. **Schema-checked history**
   - Stored results pass through core.schemas before they become models.
"""

from .models import ExerciseKind, ExerciseLevel, Difficulty, SessionResult

__all__ = [
    "ExerciseKind",
    "ExerciseLevel",
    "Difficulty",
    "SessionResult",
]
