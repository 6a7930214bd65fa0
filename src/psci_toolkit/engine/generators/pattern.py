"""
Pattern inference generator.

Four families are drawn uniformly. Every trial has three distinct options;
the decoys always come from the same family as the answer.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, Tuple

from psci_toolkit.common.catalog import ALTERNATING_SETS, CLOCK_FACES, GROUPED_SETS
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import PatternFamily, PatternTrial


def _other_symbol(sets: Tuple[Tuple[str, str], ...], used: Tuple[str, str], rng: random.Random) -> str:
    """Pick a symbol from a different set of the same family."""
    others = [s for s in sets if s != used]
    return rng.choice(rng.choice(others))


def _alternating(rng: random.Random) -> PatternTrial:
    pair = rng.choice(ALTERNATING_SETS)
    a, b = pair
    options = [b, a, _other_symbol(ALTERNATING_SETS, pair, rng)]
    rng.shuffle(options)
    return PatternTrial(PatternFamily.ALTERNATING, (a, b, a, b, a), tuple(options), b)


def _grouped(rng: random.Random) -> PatternTrial:
    pair = rng.choice(GROUPED_SETS)
    a, b = pair
    options = [a, b, _other_symbol(GROUPED_SETS, pair, rng)]
    rng.shuffle(options)
    return PatternTrial(PatternFamily.GROUPED, (a, a, b, b, a), tuple(options), a)


def _arithmetic(rng: random.Random) -> PatternTrial:
    gen = GENERATION_THRESHOLDS
    start = rng.randint(gen.pattern_start_min, gen.pattern_start_max)
    step = rng.choice(gen.pattern_steps)
    terms = [start + i * step for i in range(4)]
    answer = start + 4 * step
    options = [str(answer), str(answer + step), str(answer - step)]
    rng.shuffle(options)
    return PatternTrial(
        PatternFamily.ARITHMETIC,
        tuple(str(t) for t in terms),
        tuple(options),
        str(answer),
    )


def _clock(rng: random.Random) -> PatternTrial:
    start = rng.randint(1, 8)
    sequence = tuple(CLOCK_FACES[start - 1:start + 2])
    answer = CLOCK_FACES[start + 2]
    options = [
        answer,
        CLOCK_FACES[(start + 3) % len(CLOCK_FACES)],
        CLOCK_FACES[(start - 2) % len(CLOCK_FACES)],
    ]
    rng.shuffle(options)
    return PatternTrial(PatternFamily.CLOCK, sequence, tuple(options), answer)


_FAMILIES: Dict[PatternFamily, Callable[[random.Random], PatternTrial]] = {
    PatternFamily.ALTERNATING: _alternating,
    PatternFamily.GROUPED: _grouped,
    PatternFamily.ARITHMETIC: _arithmetic,
    PatternFamily.CLOCK: _clock,
}


def generate_pattern(level: ExerciseLevel, rng: random.Random) -> PatternTrial:
    family = rng.choice(list(_FAMILIES))
    return _FAMILIES[family](rng)
