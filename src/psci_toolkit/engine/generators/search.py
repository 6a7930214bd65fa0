"""Visual search generator: one confusable glyph pair shuffled into a grid."""

from __future__ import annotations

import random

from psci_toolkit.common.catalog import GLYPH_PAIRS
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import SearchTrial
from psci_toolkit.errors import GeneratorError


def generate_search(level: ExerciseLevel, rng: random.Random) -> SearchTrial:
    """
    Build a grid of ``grid_size`` cells holding 3-5 targets.

    Raises:
        GeneratorError: If grid_size is not an int or cannot hold the largest
            target count
    """
    gen = GENERATION_THRESHOLDS
    grid_size = level.param("grid_size", gen.search_default_grid)
    if not isinstance(grid_size, int) or isinstance(grid_size, bool):
        raise GeneratorError(f"grid_size must be an integer: {grid_size!r}")
    if grid_size < gen.search_max_targets:
        raise GeneratorError(
            f"grid_size {grid_size} cannot hold {gen.search_max_targets} targets"
        )

    target, distractor = rng.choice(GLYPH_PAIRS)
    target_count = rng.randint(gen.search_min_targets, gen.search_max_targets)
    cells = [target] * target_count + [distractor] * (grid_size - target_count)
    rng.shuffle(cells)
    return SearchTrial(target=target, distractor=distractor, cells=tuple(cells))
