"""
Module: results

Purpose:
    Provides the SessionResult dataclass - the single record produced when a
    session reaches Feedback. Results are appended to a caller-owned
    history and never mutated afterwards.

Key Functions:
    - SessionResult.game_id: "<exercise_id>-<level>" composite key
    - SessionResult.to_dict() / SessionResult.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - datetime (std)

Used By:
    - engine.session: Created on completion
    - engine.progression: Unlock and best-score queries
    - engine.reporting: Digest and summary lines
    - core.utils.serialization: JSON history files
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC now (seconds precision)."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True, slots=True)
class SessionResult:
    """
    Outcome of one completed session (immutable).

    Attributes:
        exercise_id: Exercise kind value, e.g. "MATH"
        level: Level number played
        score: Final clamped score, 0-100
        stars: Star rating, 0-3 (sessions always award at least 1)
        timestamp: Completion time (timezone-aware)

    Invariants:
        - 0 <= score <= 100
        - 0 <= stars <= 3
        - level >= 1

    Example:
        >>> r = SessionResult("MATH", 1, 60, 2, utcnow())
        >>> r.game_id
        'MATH-1'
    """

    exercise_id: str
    level: int
    score: int
    stars: int
    timestamp: datetime

    def __post_init__(self) -> None:
        """Validate result on construction."""
        if not self.exercise_id:
            raise ValueError("exercise_id must not be empty")
        if self.level < 1:
            raise ValueError(f"level must be >= 1: {self.level}")
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be within 0-100: {self.score}")
        if not 0 <= self.stars <= 3:
            raise ValueError(f"stars must be within 0-3: {self.stars}")

    @property
    def game_id(self) -> str:
        return f"{self.exercise_id}-{self.level}"

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON storage.

        Returns:
            Dict with the timestamp as an ISO 8601 string
        """
        return {
            "exercise_id": self.exercise_id,
            "level": self.level,
            "score": self.score,
            "stars": self.stars,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionResult:
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            exercise_id=data["exercise_id"],
            level=int(data["level"]),
            score=int(data["score"]),
            stars=int(data["stars"]),
            timestamp=timestamp,
        )

    def __repr__(self) -> str:
        return f"SessionResult({self.game_id!r}, score={self.score}, stars={self.stars})"
