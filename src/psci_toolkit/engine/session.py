"""
Module: engine.session

Purpose:
    The session state machine. Every exercise kind runs through the same
    Intro -> Playing -> Feedback lifecycle; a session owns its trial (or
    the reaction simulation), its timers and its running score, and emits
    exactly one finish(score, stars) event.

Key Classes:
    - SessionState: INTRO, PLAYING, FEEDBACK plus CANCELLED and FAILED
    - Session: Shared lifecycle, listeners, narration and timers
    - TurnBasedSession: Trial loop driven by submit()
    - ReactionSession: Frame-driven simulation driven by tick()

Key Functions:
    - create_session(): Factory; announces the intro narration

Dependencies:
    - engine.generators, engine.rules: Trial content and scoring
    - engine.reaction: Falling-object simulation
    - engine.scheduler: Countdown and frame timers

Used By:
    - cli: Headless simulation
    - qt.bridge: Signal forwarding
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Callable, List, NoReturn, Optional, Union

from psci_toolkit.common.exercises import get_exercise_definition, get_level
from psci_toolkit.core.models.levels import ExerciseKind, ExerciseLevel
from psci_toolkit.core.models.results import SessionResult, utcnow
from psci_toolkit.core.models.trials import Trial
from psci_toolkit.errors import (
    EngineError,
    ExerciseUnavailable,
    GeneratorError,
    InvalidAnswer,
    TrialValidationError,
)

from .capabilities import CueKind, Narrator, NullNarrator
from .config import DEFAULT_CONFIG, EngineConfig
from .generators import Generator, get_generator
from .reaction import CatchEvent, ReactionParams, ReactionSimulation
from .rules import Termination, TurnOutcome, TurnRule, make_rule
from .scheduler import ManualScheduler, Scheduler, TimerHandle
from .scoring import StarTable, star_table_for, stars_for

logger = logging.getLogger(__name__)

FinishListener = Callable[[int, int], None]


class SessionState(str, Enum):
    INTRO = "intro"
    PLAYING = "playing"
    FEEDBACK = "feedback"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.FEEDBACK, SessionState.CANCELLED, SessionState.FAILED)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


class Session:
    """
    Base session: lifecycle, listeners, timers and narration.

    Subclasses implement ``_begin_play()`` and expose their own input
    methods. The base class rejects every input.
    """

    def __init__(
        self,
        kind: ExerciseKind,
        level: ExerciseLevel,
        *,
        rng: random.Random,
        scheduler: Scheduler,
        narrator: Narrator,
        config: EngineConfig = DEFAULT_CONFIG,
    ):
        self.kind = kind
        self.level = level
        self.rng = rng
        self.scheduler = scheduler
        self.narrator = narrator
        self.config = config
        self.star_table: StarTable = star_table_for(kind, level)

        self.state = SessionState.INTRO
        self.remaining_s: Optional[int] = None
        self.stars: Optional[int] = None
        self.result: Optional[SessionResult] = None

        self._timers: List[TimerHandle] = []
        self._finish_listeners: List[FinishListener] = []
        self._state_listeners: List[Callable[[SessionState], None]] = []
        self._countdown_listeners: List[Callable[[int], None]] = []
        self._score_listeners: List[Callable[[int], None]] = []
        self._last_score = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.kind.value}-{self.level.level}, "
            f"state={self.state.value}, score={self.score})"
        )

    # ─────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────

    def add_finish_listener(self, callback: FinishListener) -> None:
        self._finish_listeners.append(callback)

    def add_state_listener(self, callback: Callable[[SessionState], None]) -> None:
        self._state_listeners.append(callback)

    def add_countdown_listener(self, callback: Callable[[int], None]) -> None:
        self._countdown_listeners.append(callback)

    def add_score_listener(self, callback: Callable[[int], None]) -> None:
        self._score_listeners.append(callback)

    def _emit(self, listeners: List[Callable[..., None]], *args: Any) -> None:
        for callback in list(listeners):
            try:
                callback(*args)
            except Exception as e:
                logger.warning(f"Session listener {callback!r} failed: {e}", exc_info=True)

    # ─────────────────────────────────────────────────────────────────────
    # Side effects
    # ─────────────────────────────────────────────────────────────────────

    def announce(self, text: str) -> None:
        """Best-effort narration: one attempt, failures logged."""
        try:
            self.narrator.announce(text)
        except Exception as e:
            logger.warning(f"Narration failed: {e}")

    def _cue(self, kind: Optional[CueKind]) -> None:
        if kind is None:
            return
        try:
            self.narrator.cue(kind)
        except Exception as e:
            logger.warning(f"Audio cue {kind.value} failed: {e}")

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    @property
    def score(self) -> int:
        raise NotImplementedError

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.PLAYING

    def _set_state(self, state: SessionState) -> None:
        logger.info(f"{self.kind.value}-{self.level.level}: {self.state.value} -> {state.value}")
        self.state = state
        self._emit(self._state_listeners, state)

    def _notify_score(self) -> None:
        score = self.score
        if score != self._last_score:
            self._last_score = score
            self._emit(self._score_listeners, score)

    def _start_countdown(self, duration_s: int) -> None:
        self.remaining_s = duration_s
        self._emit(self._countdown_listeners, duration_s)
        self._timers.append(
            self.scheduler.call_every(self.config.countdown_interval_ms, self._on_countdown)
        )

    def _on_countdown(self) -> None:
        if self.state is not SessionState.PLAYING or self.remaining_s is None:
            return
        self.remaining_s = max(0, self.remaining_s - 1)
        self._emit(self._countdown_listeners, self.remaining_s)
        if self.remaining_s == 0:
            self._finish()

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Leave Intro and begin play.

        Raises:
            EngineError: If the session is not in Intro
            ExerciseUnavailable: If no valid content could be produced
        """
        if self.state is not SessionState.INTRO:
            raise EngineError(f"Cannot start a session in state {self.state.value}")
        self._last_score = 0
        self._set_state(SessionState.PLAYING)
        self._begin_play()

    def _begin_play(self) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        """Abandon the session (back navigation). No finish event is emitted."""
        if self.state.is_terminal:
            return
        self._cancel_timers()
        self._set_state(SessionState.CANCELLED)

    def _fail(self, error: ExerciseUnavailable) -> NoReturn:
        logger.error(str(error))
        self._cancel_timers()
        self._set_state(SessionState.FAILED)
        raise error

    def _finish(self) -> None:
        if self.state is not SessionState.PLAYING:
            return
        self._cancel_timers()
        score = self.score
        stars = stars_for(score, self.star_table)
        self.stars = stars
        self.result = SessionResult(
            exercise_id=self.kind.exercise_id,
            level=self.level.level,
            score=score,
            stars=stars,
            timestamp=utcnow(),
        )
        self._set_state(SessionState.FEEDBACK)
        self.announce(
            f"Well done. You scored {_plural(score, 'point')} "
            f"and earned {_plural(stars, 'star')}."
        )
        self._emit(self._finish_listeners, score, stars)

    # ─────────────────────────────────────────────────────────────────────
    # Input (rejected unless a subclass supports it)
    # ─────────────────────────────────────────────────────────────────────

    def submit(self, answer: Any) -> TurnOutcome:
        raise InvalidAnswer(f"{self.kind.value} does not accept submitted answers")

    def tick(self, delta_ms: float) -> List[CatchEvent]:
        return []

    def pointer_move(self, x: float) -> Optional[float]:
        return None


class TurnBasedSession(Session):
    """
    Session for every kind except REACTION.

    The current trial comes from the kind's generator; answers are scored
    by the kind's TurnRule. Termination is a countdown, a trial budget or
    completion of the single trial, as the rule defines.
    """

    def __init__(
        self,
        kind: ExerciseKind,
        level: ExerciseLevel,
        *,
        generator: Optional[Generator] = None,
        **kwargs: Any,
    ):
        super().__init__(kind, level, **kwargs)
        self.generator = generator or get_generator(kind)
        self.rule: TurnRule = make_rule(kind)
        self.trial: Optional[Trial] = None
        self.trials_completed = 0
        self.trial_budget = self.rule.trial_budget(level)

    @property
    def score(self) -> int:
        return self.rule.score

    def _begin_play(self) -> None:
        self.trials_completed = 0
        if self.rule.termination is Termination.COUNTDOWN:
            self._start_countdown(self.rule.duration_s(self.level))
        self._next_trial()

    def _next_trial(self) -> None:
        self.trial = None
        retries = self.config.generator_retries
        last_error: Optional[BaseException] = None
        for attempt in range(1, retries + 1):
            try:
                trial = self.generator(self.level, self.rng)
                if getattr(trial, "kind", None) is not self.kind:
                    raise TrialValidationError(
                        f"Generator returned {type(trial).__name__} for {self.kind.value}"
                    )
                trial.validate()
            except Exception as e:
                last_error = e
                logger.warning(f"{self.kind.value} generation attempt {attempt}/{retries} failed: {e}")
                continue
            self.trial = trial
            self.rule.begin(trial)
            return
        self._fail(ExerciseUnavailable(self.kind.exercise_id, retries, last_error))

    def submit(self, answer: Any) -> TurnOutcome:
        """
        Score one answer against the current trial.

        Raises:
            InvalidAnswer: No active trial, session over, or malformed answer
            ExerciseUnavailable: The next trial could not be generated
        """
        if self.state is not SessionState.PLAYING or self.trial is None:
            raise InvalidAnswer(f"No active trial (state {self.state.value})")

        outcome = self.rule.apply(self.trial, answer)
        self._cue(outcome.cue)
        self._notify_score()

        if outcome.trial_complete:
            self.trials_completed += 1
            budget_spent = (
                self.trial_budget is not None and self.trials_completed >= self.trial_budget
            )
            if outcome.session_complete or budget_spent:
                self._finish()
            else:
                self._next_trial()
        return outcome


class ReactionSession(Session):
    """Catch-the-falling-object session: frame timer plus countdown."""

    def __init__(self, kind: ExerciseKind, level: ExerciseLevel, **kwargs: Any):
        super().__init__(kind, level, **kwargs)
        self.simulation: Optional[ReactionSimulation] = None

    @property
    def score(self) -> int:
        return self.simulation.score if self.simulation else 0

    def _begin_play(self) -> None:
        try:
            params = ReactionParams.from_level(self.level)
        except GeneratorError as e:
            self._fail(ExerciseUnavailable(self.kind.exercise_id, 1, e))
        self.simulation = ReactionSimulation(params, self.rng)
        self._start_countdown(params.duration_s)
        frame_ms = self.config.frame_interval_ms
        self._timers.append(self.scheduler.call_every(frame_ms, lambda: self.tick(frame_ms)))

    def tick(self, delta_ms: float) -> List[CatchEvent]:
        """Run one frame. Does nothing unless the session is playing."""
        if self.state is not SessionState.PLAYING or self.simulation is None:
            return []
        events = self.simulation.tick(delta_ms)
        for event in events:
            self._cue(event.cue)
        if events:
            self._notify_score()
        return events

    def pointer_move(self, x: float) -> Optional[float]:
        if self.state is not SessionState.PLAYING or self.simulation is None:
            return None
        return self.simulation.pointer_move(x)


def create_session(
    level: Union[ExerciseLevel, int],
    kind: Union[ExerciseKind, str],
    *,
    rng: Optional[random.Random] = None,
    scheduler: Optional[Scheduler] = None,
    narrator: Optional[Narrator] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    generator: Optional[Generator] = None,
) -> Session:
    """
    Create a session in Intro and announce its introduction.

    Args:
        level: ExerciseLevel, or a level number looked up in the catalogue
        kind: ExerciseKind or its string id
        rng: Random source for all content (a fresh one if omitted)
        scheduler: Timer source (a ManualScheduler if omitted)
        narrator: Speech and cue sink (silent if omitted)
        config: Engine configuration
        generator: Override the kind's content generator

    Raises:
        UnsupportedExerciseError: Unknown kind or level number

    Example:
        >>> session = create_session(1, "MATH", rng=random.Random(7))
        >>> session.state
        <SessionState.INTRO: 'intro'>
    """
    definition = get_exercise_definition(kind)
    if not isinstance(level, ExerciseLevel):
        level = get_level(definition.kind, level)

    options = dict(
        rng=rng or random.Random(),
        scheduler=scheduler or ManualScheduler(),
        narrator=narrator or NullNarrator(),
        config=config,
    )
    if definition.kind is ExerciseKind.REACTION:
        session: Session = ReactionSession(definition.kind, level, **options)
    else:
        session = TurnBasedSession(definition.kind, level, generator=generator, **options)

    logger.info(f"Created {definition.exercise_id} level {level.level} ({level.difficulty.value})")
    session.announce(f"{definition.title}, level {level.level}. {definition.intro_text}")
    return session
