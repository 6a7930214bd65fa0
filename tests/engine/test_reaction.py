"""
Tests for the falling-object reaction simulation.

Objects are injected at known positions so collisions are deterministic;
a huge spawn rate keeps the spawner out of the way after the first tick.
"""

import random

import pytest

from psci_toolkit.core.models.falling import Catcher, FallingObject, ObjectKind
from psci_toolkit.core.models.levels import Difficulty, ExerciseLevel
from psci_toolkit.engine.capabilities import CueKind
from psci_toolkit.engine.reaction import ReactionParams, ReactionSimulation
from psci_toolkit.errors import GeneratorError


def _quiet_simulation(seed=1):
    """Simulation whose only spawn happens on the first tick, which is then cleared."""
    sim = ReactionSimulation(ReactionParams(0.3, 1e9, 45), random.Random(seed))
    sim.tick(16)
    sim.objects.clear()
    return sim


def _drop(sim, obj_id, x, y, kind=ObjectKind.REWARD, speed=0.5):
    obj = FallingObject(id=obj_id, lateral_position=x, vertical_position=y, kind=kind, fall_speed=speed)
    sim.objects.append(obj)
    return obj


class TestReactionParams:
    def test_from_level_when_catalogue_level_then_converted(self):
        level = ExerciseLevel(2, Difficulty.MEDIUM, params={"base_speed": 0.4, "spawn_rate": 1500, "duration": 45})

        params = ReactionParams.from_level(level)

        assert params == ReactionParams(0.4, 1500.0, 45)

    def test_from_level_when_params_missing_then_defaults(self):
        params = ReactionParams.from_level(ExerciseLevel(1, Difficulty.EASY))

        assert params.duration_s == 45

    @pytest.mark.parametrize("params", [
        {"base_speed": "fast"},
        {"base_speed": 0},
        {"spawn_rate": -5},
        {"duration": None},
    ])
    def test_from_level_when_invalid_then_generator_error(self, params):
        with pytest.raises(GeneratorError):
            ReactionParams.from_level(ExerciseLevel(1, Difficulty.EASY, params=params))


class TestCatcher:
    @pytest.mark.parametrize("x,expected", [(-20, 10), (0, 10), (42.5, 42.5), (150, 90)])
    def test_move_to_when_out_of_range_then_clamped(self, x, expected):
        assert Catcher().move_to(x) == expected


class TestSpawning:
    def test_tick_when_first_then_spawns_immediately(self):
        sim = ReactionSimulation(ReactionParams(0.2, 2000, 30), random.Random(3))

        sim.tick(16)

        assert sim.spawned == 1
        assert len(sim.objects) == 1

    def test_tick_when_spawn_rate_exceeded_then_spawns_again(self):
        sim = ReactionSimulation(ReactionParams(0.2, 1000, 30), random.Random(3))
        sim.tick(0)

        sim.tick(500)
        sim.tick(500)
        assert sim.spawned == 1

        sim.tick(500)
        assert sim.spawned == 2

    def test_spawn_when_many_then_within_field_and_speed_bounds(self):
        sim = ReactionSimulation(ReactionParams(0.4, 1000, 30), random.Random(11))

        objects = [sim.spawn() for _ in range(300)]

        assert all(10 <= o.lateral_position <= 90 for o in objects)
        assert all(0.4 <= o.fall_speed <= 0.6 + 1e-9 for o in objects)
        assert all(o.vertical_position == 0 for o in objects)
        assert {o.kind for o in objects} == set(ObjectKind)
        assert len({o.id for o in objects}) == 300

    def test_spawn_when_many_then_about_thirty_percent_hazards(self):
        sim = ReactionSimulation(ReactionParams(0.4, 1000, 30), random.Random(2024))

        hazards = sum(1 for _ in range(1000) if sim.spawn().is_hazard)

        assert hazards / 1000 == pytest.approx(0.3, abs=0.05)


class TestCollisions:
    def test_tick_when_reward_enters_band_under_catcher_then_caught(self):
        sim = _quiet_simulation()
        _drop(sim, 100, x=50, y=84.9)

        events = sim.tick(16)

        assert [e.object_id for e in events] == [100]
        assert events[0].cue is CueKind.SUCCESS
        assert sim.score == 10
        assert sim.objects == []

    def test_tick_when_hazard_caught_then_penalty_floored(self):
        sim = _quiet_simulation()
        _drop(sim, 100, x=50, y=84.9, kind=ObjectKind.HAZARD)

        events = sim.tick(16)

        assert events[0].cue is CueKind.FAILURE
        assert sim.score == 0

    def test_tick_when_on_band_edge_and_radius_edge_then_caught(self):
        sim = _quiet_simulation()
        _drop(sim, 100, x=65, y=84.5)

        events = sim.tick(16)

        assert len(events) == 1

    def test_tick_when_far_from_catcher_then_falls_through_and_missed(self):
        sim = _quiet_simulation()
        sim.pointer_move(90)
        _drop(sim, 100, x=10, y=99.8)

        events = sim.tick(16)

        assert events == []
        assert sim.missed == 1
        assert sim.objects == []

    def test_tick_when_above_band_then_keeps_falling(self):
        sim = _quiet_simulation()
        obj = _drop(sim, 100, x=50, y=40)

        sim.tick(16)

        assert sim.objects == [obj]
        assert obj.vertical_position == pytest.approx(40.5)

    def test_tick_when_several_caught_then_events_in_id_order(self):
        sim = _quiet_simulation()
        for obj_id in (5, 6, 7):
            _drop(sim, obj_id, x=50, y=84.9)

        events = sim.tick(16)

        assert [e.object_id for e in events] == [5, 6, 7]
        assert [e.score_after for e in events] == [10, 20, 30]
