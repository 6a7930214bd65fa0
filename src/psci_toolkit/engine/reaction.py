"""
Module: engine.reaction

Purpose:
    Falling-object simulation for the reaction exercise. Each tick runs
    spawn, advance, collision and despawn to completion and reports what
    was caught. The simulation has no timers of its own; the session
    drives tick() from its frame timer.

Key Classes:
    - ReactionParams: Level parameters (speed, spawn rate, duration)
    - CatchEvent: One object caught during a tick
    - ReactionSimulation: Live objects, catcher and running tally

Dependencies:
    - core.models.falling: FallingObject, Catcher
    - common.thresholds: Geometry and probabilities

Used By:
    - engine.session.ReactionSession
    - engine.autoplay: Reads live objects to steer the catcher
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from psci_toolkit.common.thresholds import REACTION_THRESHOLDS
from psci_toolkit.core.models.falling import Catcher, FallingObject, ObjectKind
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.errors import GeneratorError

from .capabilities import CueKind
from .scoring import ScoreTally

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReactionParams:
    """
    Reaction level parameters.

    Attributes:
        base_speed: Minimum fall speed, vertical units per tick
        spawn_rate_ms: Minimum time between spawns
        duration_s: Session length
    """

    base_speed: float
    spawn_rate_ms: float
    duration_s: int

    def __post_init__(self) -> None:
        if self.base_speed <= 0:
            raise GeneratorError(f"base_speed must be positive: {self.base_speed}")
        if self.spawn_rate_ms <= 0:
            raise GeneratorError(f"spawn_rate must be positive: {self.spawn_rate_ms}")
        if self.duration_s <= 0:
            raise GeneratorError(f"duration must be positive: {self.duration_s}")

    @classmethod
    def from_level(cls, level: ExerciseLevel) -> ReactionParams:
        t = REACTION_THRESHOLDS
        try:
            base_speed = float(level.param("base_speed", t.default_base_speed))
            spawn_rate_ms = float(level.param("spawn_rate", t.default_spawn_rate_ms))
            duration_s = int(level.param("duration", t.default_duration_s))
        except (TypeError, ValueError) as e:
            raise GeneratorError(f"Invalid reaction params: {e}") from e
        return cls(base_speed=base_speed, spawn_rate_ms=spawn_rate_ms, duration_s=duration_s)


@dataclass(frozen=True)
class CatchEvent:
    object_id: int
    kind: ObjectKind
    cue: CueKind
    score_after: int


class ReactionSimulation:
    """
    Spawner, mover and collision detector for one reaction session.

    Example:
        >>> sim = ReactionSimulation(ReactionParams(0.3, 1500, 45), random.Random(1))
        >>> sim.tick(16)
        []
        >>> len(sim.objects)
        1
    """

    def __init__(self, params: ReactionParams, rng: random.Random):
        self.params = params
        self.rng = rng
        self.objects: List[FallingObject] = []
        self.catcher = Catcher()
        self.tally = ScoreTally()
        self._next_id = 0
        self._since_spawn_ms: Optional[float] = None
        self.spawned = 0
        self.missed = 0

    @property
    def score(self) -> int:
        return self.tally.final

    def pointer_move(self, x: float) -> float:
        return self.catcher.move_to(x)

    def spawn(self) -> FallingObject:
        t = REACTION_THRESHOLDS
        kind = ObjectKind.HAZARD if self.rng.random() < t.hazard_probability else ObjectKind.REWARD
        obj = FallingObject(
            id=self._next_id,
            lateral_position=self.rng.uniform(t.spawn_lateral_min, t.spawn_lateral_max),
            vertical_position=t.spawn_vertical,
            kind=kind,
            fall_speed=self.params.base_speed + self.rng.uniform(0, t.speed_jitter),
        )
        self._next_id += 1
        self.spawned += 1
        self.objects.append(obj)
        return obj

    def is_catchable(self, obj: FallingObject) -> bool:
        t = REACTION_THRESHOLDS
        in_band = t.capture_band_top <= obj.vertical_position <= t.capture_band_bottom
        near = abs(obj.lateral_position - self.catcher.lateral_position) <= t.capture_radius
        return in_band and near

    def tick(self, delta_ms: float) -> List[CatchEvent]:
        """
        Advance the field by one frame.

        Args:
            delta_ms: Time since the previous tick (drives spawning only;
                fall speed is per tick)

        Returns:
            Objects caught during this tick, in id order
        """
        t = REACTION_THRESHOLDS

        if self._since_spawn_ms is None:
            self.spawn()
            self._since_spawn_ms = 0.0
        else:
            self._since_spawn_ms += delta_ms
            if self._since_spawn_ms > self.params.spawn_rate_ms:
                self.spawn()
                self._since_spawn_ms = 0.0

        events: List[CatchEvent] = []
        survivors: List[FallingObject] = []
        for obj in self.objects:
            obj.advance()
            if self.is_catchable(obj):
                if obj.is_hazard:
                    self.tally.penalize(t.hazard_penalty)
                    cue = CueKind.FAILURE
                else:
                    self.tally.reward(t.reward_points)
                    cue = CueKind.SUCCESS
                events.append(CatchEvent(obj.id, obj.kind, cue, self.tally.value))
                continue
            if obj.vertical_position >= t.field_bottom:
                self.missed += 1
                continue
            survivors.append(obj)
        self.objects = survivors

        if events:
            logger.debug(f"Caught {[e.object_id for e in events]}, score {self.tally.value}")
        return events
