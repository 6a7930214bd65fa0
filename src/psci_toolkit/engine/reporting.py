"""
Module: engine.reporting

Purpose:
    Progress reports built from the result history: display lines for the
    summarizer prompt, a numeric digest for dashboards and the report
    request itself, which degrades to a fixed message when the summarizer
    is unavailable.

Key Functions:
    - summary_line(), summary_lines(): Newest-first display lines
    - report_prompt(): Prompt text handed to a summarizer
    - history_digest(): Totals, recent results and per-ability averages
    - request_report(): Summarizer call with timeout and fallback

Key Classes:
    - HistoryDigest: Dashboard numbers
    - ReportOutcome: Report text plus availability flag

Used By:
    - cli: ``report`` command
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from psci_toolkit.common.exercises import get_exercise_definition
from psci_toolkit.core.models.results import SessionResult
from psci_toolkit.errors import SummaryFailure, UnsupportedExerciseError

from .capabilities import Summarizer
from .config import DEFAULT_CONFIG, EngineConfig
from .dispatch import BackgroundDispatcher

logger = logging.getLogger(__name__)

DIGEST_RECENT_COUNT = 8

NO_HISTORY_TEXT = (
    "There are not enough training records yet. Play a few exercises "
    "and a progress report will be generated for you."
)
REPORT_UNAVAILABLE_TEXT = "The progress report is unavailable right now. Please try again later."


def _describe(exercise_id: str) -> Tuple[str, Optional[str]]:
    """Title and ability for an exercise id; unknown ids are shown raw."""
    try:
        definition = get_exercise_definition(exercise_id)
    except UnsupportedExerciseError:
        return exercise_id, None
    return definition.title, definition.ability


def summary_line(result: SessionResult) -> str:
    """
    One display line for a result.

    Example:
        "- Market Sums (Calculation) level 1: 60 points (2 stars) 2026-03-01"
    """
    title, ability = _describe(result.exercise_id)
    name = f"{title} ({ability})" if ability else title
    return (
        f"- {name} level {result.level}: {result.score} points "
        f"({result.stars} stars) {result.timestamp.date().isoformat()}"
    )


def summary_lines(history: Sequence[SessionResult], limit: int = 15) -> List[str]:
    """Display lines for the newest ``limit`` results, newest first."""
    recent = list(reversed(list(history)))[:limit]
    return [summary_line(r) for r in recent]


def report_prompt(history: Sequence[SessionResult], limit: int = 15) -> str:
    """Prompt text for a summarizer, asking for a short three-part report."""
    lines = "\n".join(summary_lines(history, limit))
    return (
        "You are a cognitive rehabilitation therapist. Based on the recent "
        "training records below, write a short, professional and encouraging "
        "progress report in plain text.\n\n"
        f"Recent training records:\n{lines}\n\n"
        "Include three sections separated by a blank line:\n"
        "[Progress]\n"
        "[Cognitive strengths and weaknesses]\n"
        "[Next steps]"
    )


@dataclass(frozen=True)
class HistoryDigest:
    total_sessions: int
    total_score: int
    last_played: Optional[datetime]
    recent: Tuple[SessionResult, ...] = ()
    ability_averages: Dict[str, float] = field(default_factory=dict)


def history_digest(history: Sequence[SessionResult]) -> HistoryDigest:
    """Dashboard numbers; ``recent`` holds the newest results first."""
    results = list(history)
    if not results:
        return HistoryDigest(total_sessions=0, total_score=0, last_played=None)

    by_ability: Dict[str, List[int]] = defaultdict(list)
    for r in results:
        _, ability = _describe(r.exercise_id)
        by_ability[ability or r.exercise_id].append(r.score)

    return HistoryDigest(
        total_sessions=len(results),
        total_score=sum(r.score for r in results),
        last_played=max(r.timestamp for r in results),
        recent=tuple(reversed(results))[:DIGEST_RECENT_COUNT],
        ability_averages={
            name: round(sum(scores) / len(scores), 1)
            for name, scores in sorted(by_ability.items())
        },
    )


@dataclass(frozen=True)
class ReportOutcome:
    text: str
    available: bool
    error: Optional[str] = None


def request_report(
    dispatcher: BackgroundDispatcher,
    summarizer: Summarizer,
    history: Sequence[SessionResult],
    config: EngineConfig = DEFAULT_CONFIG,
) -> ReportOutcome:
    """
    Ask the summarizer for a progress report.

    An empty history returns NO_HISTORY_TEXT without calling the
    summarizer. A failure or timeout returns REPORT_UNAVAILABLE_TEXT with
    ``available=False``; it is never retried automatically.
    """
    results = tuple(history)
    if not results:
        return ReportOutcome(text=NO_HISTORY_TEXT, available=True)

    recent = results[-config.report_history_limit:]
    try:
        text = dispatcher.summarize(summarizer, recent, timeout=config.summary_timeout_s)
    except SummaryFailure as e:
        logger.warning(f"Report unavailable: {e}")
        return ReportOutcome(text=REPORT_UNAVAILABLE_TEXT, available=False, error=str(e))
    return ReportOutcome(text=text, available=True)
