"""Memory matching generator: ``pair_count`` distinct tiles, each twice."""

from __future__ import annotations

import random

from psci_toolkit.common.catalog import MEMORY_TILES
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import MemoryTrial
from psci_toolkit.errors import GeneratorError


def generate_memory(level: ExerciseLevel, rng: random.Random) -> MemoryTrial:
    pair_count = level.param("pair_count", GENERATION_THRESHOLDS.memory_default_pairs)
    if not isinstance(pair_count, int) or not 1 <= pair_count <= len(MEMORY_TILES):
        raise GeneratorError(
            f"pair_count must be between 1 and {len(MEMORY_TILES)}: {pair_count!r}"
        )
    symbols = rng.sample(MEMORY_TILES, pair_count)
    deck = symbols * 2
    rng.shuffle(deck)
    return MemoryTrial(deck=tuple(deck))
