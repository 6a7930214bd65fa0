"""
Integration tests for the session lifecycle: Intro -> Playing -> Feedback.

All timers run on a ManualScheduler, so countdowns finish only when the
test advances the clock.
"""

import random

import pytest

from psci_toolkit.core.models.falling import FallingObject, ObjectKind
from psci_toolkit.core.models.levels import Difficulty, ExerciseKind, ExerciseLevel
from psci_toolkit.core.models.trials import ArithmeticTrial
from psci_toolkit.engine.capabilities import CueKind
from psci_toolkit.engine.config import EngineConfig
from psci_toolkit.engine.session import ReactionSession, SessionState, TurnBasedSession, create_session
from psci_toolkit.errors import EngineError, ExerciseUnavailable, GeneratorError, InvalidAnswer


class ExplodingNarrator:
    def announce(self, text):
        raise RuntimeError("speech engine offline")

    def cue(self, kind):
        raise RuntimeError("audio offline")


def _finish_recorder(session):
    calls = []
    session.add_finish_listener(lambda score, stars: calls.append((score, stars)))
    return calls


class TestCreateSession:
    def test_create_when_turn_based_then_intro_and_announced(self, rng, scheduler, narrator):
        session = create_session(1, "PATTERN", rng=rng, scheduler=scheduler, narrator=narrator)

        assert isinstance(session, TurnBasedSession)
        assert session.state is SessionState.INTRO
        assert narrator.announcements == [
            "What Comes Next, level 1. Look at the pattern and choose what comes next."
        ]

    def test_create_when_reaction_then_reaction_session(self, rng, scheduler):
        session = create_session(2, ExerciseKind.REACTION, rng=rng, scheduler=scheduler)

        assert isinstance(session, ReactionSession)
        assert session.level.param("duration") == 45

    def test_start_when_called_twice_then_raises(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)
        session.start()

        with pytest.raises(EngineError):
            session.start()


class TestArithmeticSession:
    def test_play_when_all_ten_correct_then_100_and_three_stars(self, rng, scheduler, narrator):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler, narrator=narrator)
        finished = _finish_recorder(session)
        session.start()

        for _ in range(10):
            session.submit(session.trial.answer)

        assert session.state is SessionState.FEEDBACK
        assert finished == [(100, 3)]
        assert session.result.exercise_id == "MATH"
        assert session.result.score == 100
        assert narrator.announcements[-1] == "Well done. You scored 100 points and earned 3 stars."

    def test_play_when_six_of_ten_correct_then_60_and_two_stars(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()

        for i in range(10):
            answer = session.trial.answer if i < 6 else session.trial.answer + 1
            session.submit(answer)

        assert finished == [(60, 2)]
        assert session.trials_completed == 10

    def test_play_when_all_wrong_then_zero_and_one_star(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()

        for _ in range(10):
            session.submit(session.trial.answer + 1)

        assert finished == [(0, 1)]

    def test_submit_when_feedback_then_invalid_answer(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()
        for _ in range(10):
            session.submit(session.trial.answer)

        with pytest.raises(InvalidAnswer):
            session.submit(5)
        assert len(finished) == 1

    def test_submit_when_intro_then_invalid_answer(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)

        with pytest.raises(InvalidAnswer):
            session.submit(5)
        assert session.state is SessionState.INTRO

    def test_submit_when_malformed_then_state_unchanged(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler)
        session.start()
        trial = session.trial

        with pytest.raises(InvalidAnswer):
            session.submit("lots")

        assert session.trial is trial
        assert session.trials_completed == 0


class TestCountdownSession:
    def test_countdown_when_expires_then_feedback_once(self, rng, scheduler):
        session = create_session(1, "PATTERN", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        ticks = []
        session.add_countdown_listener(ticks.append)
        session.start()

        for _ in range(3):
            session.submit(session.trial.answer)
        scheduler.advance(60_000)
        scheduler.advance(10_000)

        assert session.state is SessionState.FEEDBACK
        assert finished == [(30, 1)]
        assert ticks[0] == 60 and ticks[-1] == 0
        assert scheduler.pending() == 0

    def test_countdown_when_search_grid_cleared_then_new_grid_keeps_score(self, rng, scheduler):
        session = create_session(1, "SEARCH", rng=rng, scheduler=scheduler)
        session.start()
        first = session.trial

        for index in sorted(first.target_positions):
            session.submit(index)

        assert session.trial is not first
        assert session.score == 10 * first.target_count
        assert session.state is SessionState.PLAYING

    def test_cancel_when_playing_then_no_finish_and_no_timers(self, rng, scheduler):
        session = create_session(1, "COLOR_MATCH", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()

        session.cancel()
        scheduler.advance(120_000)

        assert session.state is SessionState.CANCELLED
        assert finished == []
        assert scheduler.pending() == 0
        with pytest.raises(InvalidAnswer):
            session.submit("red")


class TestCompletionSessions:
    def test_memory_when_solved_optimally_then_100(self, rng, scheduler):
        session = create_session(1, "MEMORY", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()
        deck = session.trial.deck

        for symbol in sorted(set(deck)):
            first = deck.index(symbol)
            second = deck.index(symbol, first + 1)
            session.submit((first, second))

        assert finished == [(100, 3)]

    def test_market_when_basket_matches_then_100(self, rng, scheduler):
        session = create_session(1, "MARKET", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()

        session.submit([item.name for item in session.trial.targets])

        assert finished == [(100, 3)]

    def test_sorting_when_every_item_sorted_then_100(self, rng, scheduler):
        session = create_session(2, "SORTING", rng=rng, scheduler=scheduler)
        finished = _finish_recorder(session)
        session.start()
        queue = session.trial.queue

        for entry in queue:
            session.submit(entry.category)

        assert finished == [(100, 3)]


class TestGeneratorFailure:
    def test_start_when_generator_always_fails_then_exercise_unavailable(self, rng, scheduler):
        calls = []

        def broken(level, rng):
            calls.append(level)
            raise GeneratorError("no content")

        session = create_session(1, "PATTERN", rng=rng, scheduler=scheduler, generator=broken)
        finished = _finish_recorder(session)

        with pytest.raises(ExerciseUnavailable) as exc_info:
            session.start()

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.cause, GeneratorError)
        assert len(calls) == 3
        assert session.state is SessionState.FAILED
        assert scheduler.pending() == 0
        assert finished == []

    def test_start_when_generator_returns_wrong_kind_then_unavailable(self, rng, scheduler):
        def wrong_kind(level, rng):
            return ArithmeticTrial("easy_fruit", "1 + 1?", 2, (1, 1))

        session = create_session(1, "PATTERN", rng=rng, scheduler=scheduler, generator=wrong_kind)

        with pytest.raises(ExerciseUnavailable):
            session.start()

    def test_start_when_generator_recovers_then_plays(self, rng, scheduler):
        attempts = []

        def flaky(level, rng):
            attempts.append(1)
            if len(attempts) < 3:
                raise GeneratorError("not yet")
            return ArithmeticTrial("easy_fruit", "1 + 1?", 2, (1, 1))

        session = create_session(1, "MATH", rng=rng, scheduler=scheduler, generator=flaky)
        session.start()

        assert session.state is SessionState.PLAYING
        assert session.trial.answer == 2

    def test_start_when_retries_configured_then_respected(self, rng, scheduler):
        calls = []

        def broken(level, rng):
            calls.append(level)
            raise GeneratorError("no content")

        session = create_session(
            1, "MATH", rng=rng, scheduler=scheduler, generator=broken,
            config=EngineConfig(generator_retries=5),
        )

        with pytest.raises(ExerciseUnavailable):
            session.start()
        assert len(calls) == 5


class TestReactionSession:
    CONFIG = EngineConfig(frame_interval_ms=60_000)

    def _drop_rewards(self, session, count):
        for i in range(count):
            session.simulation.objects.append(
                FallingObject(id=1000 + i, lateral_position=50, vertical_position=84.9,
                              kind=ObjectKind.REWARD, fall_speed=0.5)
            )

    def test_play_when_eight_rewards_caught_then_80_and_three_stars(self, rng, scheduler, narrator):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler, narrator=narrator,
                                 config=self.CONFIG)
        finished = _finish_recorder(session)
        session.start()

        self._drop_rewards(session, 8)
        events = session.tick(16)
        scheduler.advance(30_000)

        assert len(events) == 8
        assert narrator.cues.count(CueKind.SUCCESS) == 8
        assert session.state is SessionState.FEEDBACK
        assert finished == [(80, 3)]
        assert scheduler.pending() == 0

    def test_play_when_half_target_then_one_star(self, rng, scheduler):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler, config=self.CONFIG)
        finished = _finish_recorder(session)
        session.start()

        self._drop_rewards(session, 4)
        session.tick(16)
        scheduler.advance(30_000)

        assert finished == [(40, 1)]

    def test_start_when_playing_then_countdown_and_frame_timers(self, rng, scheduler):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler)

        session.start()

        assert scheduler.pending() == 2
        scheduler.advance(160)
        assert session.simulation.spawned == 1

    def test_submit_when_reaction_then_invalid_answer(self, rng, scheduler):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler)
        session.start()

        with pytest.raises(InvalidAnswer):
            session.submit(1)

    def test_tick_when_cancelled_then_no_op(self, rng, scheduler):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler, config=self.CONFIG)
        session.start()
        self._drop_rewards(session, 1)

        session.cancel()

        assert session.tick(16) == []
        assert session.pointer_move(20) is None
        assert session.score == 0
        assert scheduler.pending() == 0

    def test_pointer_move_when_playing_then_catcher_clamped(self, rng, scheduler):
        session = create_session(1, "REACTION", rng=rng, scheduler=scheduler)
        session.start()

        assert session.pointer_move(3) == 10

    def test_start_when_params_invalid_then_unavailable(self, scheduler):
        level = ExerciseLevel(1, Difficulty.EASY, params={"base_speed": -1})
        session = create_session(level, "REACTION", rng=random.Random(1), scheduler=scheduler)

        with pytest.raises(ExerciseUnavailable):
            session.start()
        assert session.state is SessionState.FAILED
        assert scheduler.pending() == 0


class TestSideEffects:
    def test_narrator_when_raising_then_session_still_completes(self, rng, scheduler):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler, narrator=ExplodingNarrator())
        finished = _finish_recorder(session)
        session.start()

        for _ in range(10):
            session.submit(session.trial.answer)

        assert finished == [(100, 3)]

    def test_listener_when_raising_then_others_still_notified(self, rng, scheduler):
        session = create_session(1, "MARKET", rng=rng, scheduler=scheduler)

        def bad_listener(score, stars):
            raise RuntimeError("ui gone")

        session.add_finish_listener(bad_listener)
        finished = _finish_recorder(session)
        session.start()
        session.submit([item.name for item in session.trial.targets])

        assert finished == [(100, 3)]

    def test_state_listener_when_played_then_sees_transitions(self, rng, scheduler):
        session = create_session(1, "MARKET", rng=rng, scheduler=scheduler)
        states = []
        session.add_state_listener(states.append)

        session.start()
        session.submit([])

        assert states == [SessionState.PLAYING, SessionState.FEEDBACK]
        assert session.result.score == 0
        assert session.result.stars == 1

    def test_cues_when_answering_then_success_and_failure(self, rng, scheduler, narrator):
        session = create_session(1, "MATH", rng=rng, scheduler=scheduler, narrator=narrator)
        session.start()

        session.submit(session.trial.answer)
        session.submit(session.trial.answer + 1)

        assert narrator.cues == [CueKind.SUCCESS, CueKind.FAILURE]
