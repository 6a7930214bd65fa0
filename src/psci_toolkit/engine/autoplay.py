"""
Module: engine.autoplay

Purpose:
    Scripted player used by the CLI simulator and end-to-end tests. For
    each turn-based trial it produces either the correct answer or a
    deliberately wrong one, with probability ``accuracy`` of being
    correct. In reaction sessions it steers the catcher towards rewards.

Key Classes:
    - AutoPlayer: Answer picker and catcher steering
    - AutoPlayReport: Summary of a completed headless run

Key Functions:
    - play_headless(): Drive a session on a ManualScheduler to completion
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional

from psci_toolkit.core.models.results import SessionResult
from psci_toolkit.core.models.trials import (
    ArithmeticTrial,
    InhibitionTrial,
    MemoryTrial,
    PatternTrial,
    RecallTrial,
    SearchTrial,
    SortingTrial,
    Trial,
)

from .reaction import ReactionSimulation
from .rules import MemoryRule, SearchRule, SortingRule, TurnRule
from .scheduler import ManualScheduler
from .session import ReactionSession, Session, SessionState, TurnBasedSession

logger = logging.getLogger(__name__)


class AutoPlayer:
    """
    Picks answers for trials.

    Attributes:
        rng: Random source deciding right or wrong
        accuracy: Probability of answering correctly, 0-1
    """

    def __init__(self, rng: random.Random, accuracy: float = 1.0):
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"accuracy must be within 0-1: {accuracy}")
        self.rng = rng
        self.accuracy = accuracy

    def _right(self) -> bool:
        return self.rng.random() < self.accuracy

    def answer(self, trial: Trial, rule: Optional[TurnRule] = None) -> Any:
        """Answer for the current state of ``trial``; ``rule`` supplies progress."""
        right = self._right()

        if isinstance(trial, PatternTrial):
            if right:
                return trial.answer
            return self.rng.choice([o for o in trial.options if o != trial.answer])

        if isinstance(trial, ArithmeticTrial):
            return trial.answer if right else trial.answer + self.rng.randint(1, 3)

        if isinstance(trial, InhibitionTrial):
            if right:
                return trial.target.value
            return next(o.value for o in trial.options if o != trial.target)

        if isinstance(trial, SearchTrial):
            found = rule.found if isinstance(rule, SearchRule) else set()
            if right:
                remaining = sorted(trial.target_positions - found)
                return remaining[0]
            misses = [i for i in range(trial.grid_size) if i not in trial.target_positions]
            return self.rng.choice(misses)

        if isinstance(trial, MemoryTrial):
            matched = rule.matched if isinstance(rule, MemoryRule) else set()
            return self._memory_pair(trial, matched, right)

        if isinstance(trial, RecallTrial):
            basket = [item.name for item in trial.targets]
            if not right:
                basket.remove(self.rng.choice(basket))
                basket.append(self.rng.choice(trial.distractors).name)
            return basket

        if isinstance(trial, SortingTrial):
            position = rule.position if isinstance(rule, SortingRule) else 0
            truth = trial.queue[position].category
            if right:
                return truth
            return "B" if truth == "A" else "A"

        raise TypeError(f"Cannot answer trial of type {type(trial).__name__}")

    def _memory_pair(self, trial: MemoryTrial, matched: set, right: bool) -> tuple:
        open_cards = [i for i in range(len(trial.deck)) if i not in matched]
        first = open_cards[0]
        partner = next(i for i in open_cards[1:] if trial.deck[i] == trial.deck[first])
        if right:
            return first, partner
        wrong = [i for i in open_cards[1:] if trial.deck[i] != trial.deck[first]]
        if not wrong:
            return first, partner
        return first, self.rng.choice(wrong)

    def steer(self, simulation: ReactionSimulation) -> Optional[float]:
        """Move the catcher under the lowest reward (away from hazards when wrong)."""
        rewards = [o for o in simulation.objects if not o.is_hazard]
        if not rewards:
            return None
        lowest = max(rewards, key=lambda o: o.vertical_position)
        if self._right():
            return simulation.pointer_move(lowest.lateral_position)
        return simulation.pointer_move(100 - lowest.lateral_position)


@dataclass(frozen=True)
class AutoPlayReport:
    state: SessionState
    result: Optional[SessionResult]
    answers: int


def play_headless(
    session: Session,
    scheduler: ManualScheduler,
    player: AutoPlayer,
    *,
    answer_interval_ms: int = 1000,
    max_steps: int = 10_000,
) -> AutoPlayReport:
    """
    Start ``session`` and play it to a terminal state.

    Turn-based sessions get one answer every ``answer_interval_ms`` of
    virtual time; reaction sessions are steered on every frame.
    """
    session.start()
    answers = 0
    steps = 0
    while session.state is SessionState.PLAYING and steps < max_steps:
        steps += 1
        if isinstance(session, TurnBasedSession) and session.trial is not None:
            session.submit(player.answer(session.trial, session.rule))
            answers += 1
            if session.state is SessionState.PLAYING:
                scheduler.advance(answer_interval_ms)
        elif isinstance(session, ReactionSession) and session.simulation is not None:
            if player.steer(session.simulation) is not None:
                answers += 1
            scheduler.advance(session.config.frame_interval_ms)
        else:
            scheduler.advance(answer_interval_ms)

    if session.state is SessionState.PLAYING:
        logger.warning(f"Headless play stopped after {max_steps} steps")
    return AutoPlayReport(state=session.state, result=session.result, answers=answers)
