"""
Module: falling

Purpose:
    Mutable state for the reaction exercise: the falling objects and the
    catcher. Unlike the other models these change every tick, so they are
    plain (non-frozen) dataclasses owned by ReactionSimulation.

Key Classes:
    - ObjectKind: Reward or Hazard
    - FallingObject: One live object in the play field
    - Catcher: The pointer-driven catching bar

Used By:
    - engine.reaction: Spawn, advance, collide, despawn
    - engine.autoplay: Steering the catcher
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from psci_toolkit.common.thresholds import REACTION_THRESHOLDS


class ObjectKind(str, Enum):
    REWARD = "reward"
    HAZARD = "hazard"


@dataclass
class FallingObject:
    """
    A falling object in percent-of-field coordinates.

    Attributes:
        id: Monotonic id within one simulation
        lateral_position: Horizontal position, 0-100
        vertical_position: Distance fallen, 0 at the top, 100 at the bottom
        kind: Reward or Hazard
        fall_speed: Vertical units advanced per tick
    """

    id: int
    lateral_position: float
    vertical_position: float
    kind: ObjectKind
    fall_speed: float

    @property
    def is_hazard(self) -> bool:
        return self.kind is ObjectKind.HAZARD

    def advance(self) -> None:
        self.vertical_position += self.fall_speed


@dataclass
class Catcher:
    """Catching bar; ``move_to`` clamps into the allowed range."""

    lateral_position: float = REACTION_THRESHOLDS.catcher_start

    def move_to(self, x: float) -> float:
        low = REACTION_THRESHOLDS.catcher_min
        high = REACTION_THRESHOLDS.catcher_max
        self.lateral_position = min(high, max(low, float(x)))
        return self.lateral_position
