"""Shopping-list recall generator."""

from __future__ import annotations

import random

from psci_toolkit.common.catalog import MARKET_ITEMS
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import RecallTrial
from psci_toolkit.errors import GeneratorError


def generate_recall(level: ExerciseLevel, rng: random.Random) -> RecallTrial:
    """
    Pick targets and distractors from the market catalogue.

    The target count follows the difficulty tier (3/5/7) unless the level
    overrides it with ``target_count``. Both lists are drawn in one sample,
    so they never share an item.
    """
    gen = GENERATION_THRESHOLDS
    target_count = level.param("target_count", gen.recall_target_counts[level.difficulty.rank])
    distractor_count = level.param("distractor_count", gen.recall_distractor_count)
    if target_count < 1 or distractor_count < 0:
        raise GeneratorError(
            f"Invalid recall counts: targets={target_count}, distractors={distractor_count}"
        )
    if target_count + distractor_count > len(MARKET_ITEMS):
        raise GeneratorError(
            f"Catalogue has {len(MARKET_ITEMS)} items, "
            f"cannot draw {target_count + distractor_count}"
        )

    picks = rng.sample(MARKET_ITEMS, target_count + distractor_count)
    shelf = list(picks)
    rng.shuffle(shelf)
    return RecallTrial(
        targets=tuple(picks[:target_count]),
        distractors=tuple(picks[target_count:]),
        shelf=tuple(shelf),
    )
