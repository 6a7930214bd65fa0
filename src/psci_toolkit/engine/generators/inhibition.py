"""
Word/ink colour (Stroop) generator.

Level 1 asks for the colour the word names and prints it in that colour.
From level 2 the ink usually differs from the word and the user must
answer with the ink.
"""

from __future__ import annotations

import random

from psci_toolkit.common.catalog import COLORS
from psci_toolkit.common.thresholds import GENERATION_THRESHOLDS
from psci_toolkit.core.models.levels import ExerciseLevel
from psci_toolkit.core.models.trials import InhibitionRule, InhibitionTrial


def generate_inhibition(level: ExerciseLevel, rng: random.Random) -> InhibitionTrial:
    word = rng.choice(COLORS)
    ink = word
    if level.level >= 2:
        rule = InhibitionRule.INK
        if rng.random() < GENERATION_THRESHOLDS.inhibition_mismatch_probability:
            ink = rng.choice([c for c in COLORS if c != word])
        target = ink
    else:
        rule = InhibitionRule.MEANING
        target = word

    distractor = rng.choice([c for c in COLORS if c != target])
    options = [target, distractor]
    rng.shuffle(options)
    return InhibitionTrial(
        rule=rule,
        word=word,
        ink=ink,
        target=target,
        options=(options[0], options[1]),
    )
