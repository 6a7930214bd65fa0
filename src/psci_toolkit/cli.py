"""
Module: cli

Purpose:
    Command-line entry point (``psci-toolkit``). Lists exercises and their
    unlock state, plays headless sessions with the scripted player and
    prints history reports.

Commands:
    levels   [--history FILE]
    simulate KIND LEVEL [--seed N] [--accuracy P] [--history FILE]
    report   --history FILE [--prompt]
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from psci_toolkit import __version__
from psci_toolkit.common.exercises import get_exercise_definition, supported_exercises
from psci_toolkit.core.models.results import SessionResult
from psci_toolkit.core.schemas.validator import ValidationError
from psci_toolkit.core.utils.serialization import load_history_json, save_history_json
from psci_toolkit.engine.autoplay import AutoPlayer, play_headless
from psci_toolkit.engine.capabilities import CueKind
from psci_toolkit.engine.config import EngineConfig
from psci_toolkit.engine.dispatch import BackgroundDispatcher
from psci_toolkit.engine.progression import ResultHistory, compute_unlocked_level, level_statuses
from psci_toolkit.engine.reporting import history_digest, report_prompt, summary_lines
from psci_toolkit.engine.scheduler import ManualScheduler
from psci_toolkit.engine.session import SessionState, create_session
from psci_toolkit.errors import EngineError

logger = logging.getLogger(__name__)


class LoggingNarrator:
    """Narrator that writes announcements and cues to the log."""

    def announce(self, text: str) -> None:
        logger.info(f"[narration] {text}")

    def cue(self, kind: CueKind) -> None:
        logger.debug(f"[cue] {kind.value}")


class HistoryFileStore:
    """Record store that appends each result to a history JSON file."""

    def __init__(self, path: Path, history: ResultHistory):
        self.path = path
        self.history = history

    def record_session(self, result: SessionResult) -> None:
        self.history.append(result)
        save_history_json(self.history.snapshot(), self.path)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_history(path: Optional[Path]) -> List[SessionResult]:
    if path is None:
        return []
    return load_history_json(path, strict=True)


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_levels(args: argparse.Namespace) -> int:
    history = _load_history(args.history)
    for kind in supported_exercises():
        definition = get_exercise_definition(kind)
        unlocked = compute_unlocked_level(history, kind, definition.max_level)
        print(f"{definition.exercise_id:<12} {definition.title} ({definition.ability}), unlocked: {unlocked}")
        for status in level_statuses(history, kind):
            lock = "open" if status.unlocked else "locked"
            best = "-" if status.best_score is None else f"{status.best_score} ({status.best_stars} stars)"
            print(f"    level {status.level}: {lock:<6} best {best}")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    config = EngineConfig.from_file(args.config) if args.config else EngineConfig()
    scheduler = ManualScheduler()
    rng = random.Random(args.seed)
    session = create_session(
        args.level,
        args.kind,
        rng=rng,
        scheduler=scheduler,
        narrator=LoggingNarrator(),
        config=config,
    )
    player = AutoPlayer(random.Random(args.seed), accuracy=args.accuracy)
    report = play_headless(session, scheduler, player)

    if report.state is not SessionState.FEEDBACK or report.result is None:
        print(f"Session ended in state {report.state.value}", file=sys.stderr)
        return 1

    result = report.result
    print(f"{result.game_id}: {result.score} points, {result.stars} stars ({report.answers} moves)")

    if args.history:
        history = ResultHistory(_load_history(args.history))
        store = HistoryFileStore(args.history, history)
        with BackgroundDispatcher.from_config(config) as dispatcher:
            dispatcher.record(store, result).result()
        print(f"Appended to {args.history} ({len(history)} results)")
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    history = _load_history(args.history)
    if args.prompt:
        print(report_prompt(history))
        return 0

    digest = history_digest(history)
    print(f"Sessions: {digest.total_sessions}")
    print(f"Total score: {digest.total_score}")
    last = digest.last_played.isoformat() if digest.last_played else "never"
    print(f"Last played: {last}")
    if digest.ability_averages:
        print("Average score by ability:")
        for ability, average in digest.ability_averages.items():
            print(f"    {ability}: {average}")
    lines = summary_lines(history)
    if lines:
        print("Recent sessions:")
        print("\n".join(lines))
    return 0


# ─────────────────────────────────────────────────────────────────────────────
# Parser
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psci-toolkit",
        description="Cognitive training exercise engine",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    levels = sub.add_parser("levels", help="List exercises with unlock state and best scores")
    levels.add_argument("--history", type=Path, help="History JSON file")
    levels.set_defaults(func=cmd_levels)

    simulate = sub.add_parser("simulate", help="Play a headless session with a scripted player")
    simulate.add_argument("kind", help="Exercise id, e.g. MATH")
    simulate.add_argument("level", type=int, help="Level number (1-3)")
    simulate.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate.add_argument("--accuracy", type=float, default=1.0, help="Chance of a correct answer (0-1)")
    simulate.add_argument("--history", type=Path, help="Append the result to this history file")
    simulate.add_argument("--config", type=Path, help="Engine config JSON file")
    simulate.set_defaults(func=cmd_simulate)

    report = sub.add_parser("report", help="Print the history digest")
    report.add_argument("--history", type=Path, required=True, help="History JSON file")
    report.add_argument("--prompt", action="store_true", help="Print the summarizer prompt instead")
    report.set_defaults(func=cmd_report)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.func(args)
    except (EngineError, ValidationError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
