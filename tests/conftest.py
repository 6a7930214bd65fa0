import os
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to sys.path so we can import psci_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from psci_toolkit.core.models.results import SessionResult  # noqa: E402
from psci_toolkit.engine.scheduler import ManualScheduler  # noqa: E402


class RecordingNarrator:
    """Narrator double that remembers every announcement and cue."""

    def __init__(self):
        self.announcements = []
        self.cues = []

    def announce(self, text):
        self.announcements.append(text)

    def cue(self, kind):
        self.cues.append(kind)


# Common test fixtures
@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def narrator():
    return RecordingNarrator()


@pytest.fixture
def make_result():
    """Factory for SessionResult records with increasing timestamps."""
    base = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(exercise_id="MATH", level=1, score=80, stars=3):
        counter["n"] += 1
        return SessionResult(
            exercise_id=exercise_id,
            level=level,
            score=score,
            stars=stars,
            timestamp=base + timedelta(minutes=counter["n"]),
        )

    return _make
