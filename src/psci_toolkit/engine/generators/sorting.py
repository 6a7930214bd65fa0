"""Two-bin sorting generator."""

from __future__ import annotations

import logging
import random

from psci_toolkit.common.catalog import SORTING_SETS
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import SortingTrial, SortItem

logger = logging.getLogger(__name__)


def generate_sorting(level: ExerciseLevel, rng: random.Random) -> SortingTrial:
    """Queue every item of the level's category pair twice, fully shuffled."""
    sorting_set = SORTING_SETS.get(level.level)
    if sorting_set is None:
        logger.debug(f"No sorting set for level {level.level}, using level 1")
        sorting_set = SORTING_SETS[1]

    queue = [SortItem(item, "A") for item in sorting_set.items_a]
    queue += [SortItem(item, "B") for item in sorting_set.items_b]
    queue = queue * GENERATION_THRESHOLDS.sorting_repeats
    rng.shuffle(queue)
    return SortingTrial(
        category_a=sorting_set.category_a,
        category_b=sorting_set.category_b,
        queue=tuple(queue),
    )
