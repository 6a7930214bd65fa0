"""
Market arithmetic generator.

Each difficulty tier has a small set of narrative templates. A template
draws bounded operands and returns the prompt with its exact answer.
Change-due problems always pay more than the total, and subtraction
operands are ordered so the result is never negative.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List

from psci_toolkit.core.models.levels import Difficulty, ExerciseLevel
from psci_toolkit.core.models.trials import ArithmeticTrial
from psci_toolkit.errors import GeneratorError

logger = logging.getLogger(__name__)

Template = Callable[[random.Random], ArithmeticTrial]


def _change_due(template: str, total: int, payment: int) -> ArithmeticTrial:
    return ArithmeticTrial(
        template=template,
        prompt=f"Your shopping comes to ${total}. You hand over ${payment}. How much change do you get?",
        answer=payment - total,
        operands=(payment, total),
        total=total,
        payment=payment,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Easy
# ─────────────────────────────────────────────────────────────────────────────

def _easy_fruit(rng: random.Random) -> ArithmeticTrial:
    a, b = rng.randint(1, 5), rng.randint(1, 5)
    return ArithmeticTrial(
        template="easy_fruit",
        prompt=f"You buy {a} apples and {b} pears. How many pieces of fruit is that?",
        answer=a + b,
        operands=(a, b),
    )


def _easy_eggs(rng: random.Random) -> ArithmeticTrial:
    a, b = rng.randint(1, 5), rng.randint(1, 5)
    return ArithmeticTrial(
        template="easy_eggs",
        prompt=f"There are {a} eggs in the basket and you put in {b} more. How many eggs are there now?",
        answer=a + b,
        operands=(a, b),
    )


def _easy_change(rng: random.Random) -> ArithmeticTrial:
    total = rng.randint(3, 10)
    return _change_due("easy_change", total, total + rng.randint(1, 3))


# ─────────────────────────────────────────────────────────────────────────────
# Medium
# ─────────────────────────────────────────────────────────────────────────────

def _medium_unit_price(rng: random.Random) -> ArithmeticTrial:
    price, kg = rng.randint(3, 7), rng.randint(2, 4)
    return ArithmeticTrial(
        template="medium_unit_price",
        prompt=f"Cabbage costs ${price} per kilo. How much do {kg} kilos cost?",
        answer=price * kg,
        operands=(price, kg),
    )


def _medium_subtract(rng: random.Random) -> ArithmeticTrial:
    a, b = rng.randint(5, 14), rng.randint(3, 10)
    big, small = max(a, b), min(a, b)
    return ArithmeticTrial(
        template="medium_subtract",
        prompt=f"You had ${big} and spent ${small} on vegetables. How much money is left?",
        answer=big - small,
        operands=(big, small),
    )


def _medium_change(rng: random.Random) -> ArithmeticTrial:
    total = rng.randint(10, 29)
    return _change_due("medium_change", total, total + rng.randint(1, 10))


def _medium_add(rng: random.Random) -> ArithmeticTrial:
    a, b = rng.randint(2, 9), rng.randint(2, 9)
    return ArithmeticTrial(
        template="medium_add",
        prompt=f"Milk costs ${a} and bread costs ${b}. How much for both?",
        answer=a + b,
        operands=(a, b),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Hard
# ─────────────────────────────────────────────────────────────────────────────

def _hard_unit_price(rng: random.Random) -> ArithmeticTrial:
    price, kg = rng.randint(4, 9), rng.randint(2, 5)
    return ArithmeticTrial(
        template="hard_unit_price",
        prompt=f"Pork costs ${price} per kilo. How much do {kg} kilos cost?",
        answer=price * kg,
        operands=(price, kg),
    )


def _hard_three_term(rng: random.Random) -> ArithmeticTrial:
    a, b, c = rng.randint(10, 24), rng.randint(5, 12), rng.randint(2, 6)
    return ArithmeticTrial(
        template="hard_three_term",
        prompt=(
            f"Fish costs ${a} and shrimp costs ${b}. You have a ${c} coupon. "
            f"How much do you pay?"
        ),
        answer=a + b - c,
        operands=(a, b, c),
    )


def _hard_multi_buy(rng: random.Random) -> ArithmeticTrial:
    each, count = rng.randint(3, 7), rng.randint(3, 5)
    return ArithmeticTrial(
        template="hard_multi_buy",
        prompt=f"Each bottle of soy sauce costs ${each}. How much do {count} bottles cost?",
        answer=each * count,
        operands=(each, count),
    )


def _hard_change(rng: random.Random) -> ArithmeticTrial:
    total = rng.randint(20, 49)
    # Pay with the next round ten above the total
    return _change_due("hard_change", total, (total // 10 + 1) * 10)


def _hard_three_items(rng: random.Random) -> ArithmeticTrial:
    a, b, c = rng.randint(5, 16), rng.randint(5, 14), rng.randint(3, 10)
    return ArithmeticTrial(
        template="hard_three_items",
        prompt=f"You buy rice for ${a}, oil for ${b} and salt for ${c}. What is the total?",
        answer=a + b + c,
        operands=(a, b, c),
    )


TEMPLATES: Dict[Difficulty, List[Template]] = {
    Difficulty.EASY: [_easy_fruit, _easy_eggs, _easy_change],
    Difficulty.MEDIUM: [_medium_unit_price, _medium_subtract, _medium_change, _medium_add],
    Difficulty.HARD: [
        _hard_unit_price,
        _hard_three_term,
        _hard_multi_buy,
        _hard_change,
        _hard_three_items,
    ],
}


def generate_arithmetic(level: ExerciseLevel, rng: random.Random) -> ArithmeticTrial:
    templates = TEMPLATES.get(level.difficulty)
    if not templates:
        raise GeneratorError(f"No arithmetic templates for difficulty {level.difficulty!r}")
    template = rng.choice(templates)
    trial = template(rng)
    logger.debug(f"Arithmetic {trial.template}: {trial.operands} -> {trial.answer}")
    return trial
