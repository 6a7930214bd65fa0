"""
Module: common.catalog

Purpose:
    Static content tables the generators draw from: pattern symbol sets,
    clock faces, confusable glyph pairs, memory tiles, the market item
    catalogue, sorting category sets and Stroop colours.

Key Classes:
    - CatalogItem: Named item with a display symbol
    - SortingSet: Two named categories with five items each
    - ColorSwatch: Colour value with its display label

Dependencies:
    - dataclasses (std)

Used By:
    - engine.generators: All content generators
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class CatalogItem:
    """A catalogue entry: unique name plus the symbol shown to the user."""
    name: str
    symbol: str


@dataclass(frozen=True)
class SortingSet:
    """Two categories ("A" and "B") with their member items."""
    category_a: str
    category_b: str
    items_a: Tuple[CatalogItem, ...]
    items_b: Tuple[CatalogItem, ...]


@dataclass(frozen=True)
class ColorSwatch:
    """A Stroop colour. ``value`` is the canonical answer key."""
    value: str
    label: str


# ─────────────────────────────────────────────────────────────────────────────
# Pattern inference
# ─────────────────────────────────────────────────────────────────────────────

ALTERNATING_SETS: Tuple[Tuple[str, str], ...] = (
    ("🔴", "🔵"),
    ("🐶", "🐱"),
    ("☀️", "🌙"),
    ("⬆️", "⬇️"),
    ("🅰️", "🅱️"),
)

GROUPED_SETS: Tuple[Tuple[str, str], ...] = (
    ("🍎", "🍐"),
    ("🚗", "🚕"),
    ("◼️", "◻️"),
)

CLOCK_FACES: Tuple[str, ...] = (
    "🕐", "🕑", "🕒", "🕓", "🕔", "🕕",
    "🕖", "🕗", "🕘", "🕙", "🕚", "🕛",
)


# ─────────────────────────────────────────────────────────────────────────────
# Visual search
# ─────────────────────────────────────────────────────────────────────────────

# (target, distractor) pairs that differ by a single stroke
GLYPH_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("土", "士"),
    ("人", "入"),
    ("日", "曰"),
    ("未", "末"),
    ("大", "太"),
    ("甲", "由"),
    ("贝", "见"),
    ("右", "石"),
)


# ─────────────────────────────────────────────────────────────────────────────
# Memory matching
# ─────────────────────────────────────────────────────────────────────────────

MEMORY_TILES: Tuple[str, ...] = (
    "🀄", "🃏", "🀐", "🀙", "🀘", "🀅",
    "🀇", "🀆", "🀀", "🀁", "🀂", "🀃",
)


# ─────────────────────────────────────────────────────────────────────────────
# Shopping recall
# ─────────────────────────────────────────────────────────────────────────────

MARKET_ITEMS: Tuple[CatalogItem, ...] = (
    CatalogItem("apple", "🍎"), CatalogItem("banana", "🍌"), CatalogItem("grapes", "🍇"),
    CatalogItem("watermelon", "🍉"), CatalogItem("orange", "🍊"), CatalogItem("strawberry", "🍓"),
    CatalogItem("cabbage", "🥬"), CatalogItem("carrot", "🥕"), CatalogItem("potato", "🥔"),
    CatalogItem("tomato", "🍅"), CatalogItem("corn", "🌽"), CatalogItem("broccoli", "🥦"),
    CatalogItem("fish", "🐟"), CatalogItem("drumstick", "🍗"), CatalogItem("egg", "🥚"),
    CatalogItem("milk", "🥛"), CatalogItem("bread", "🍞"), CatalogItem("noodles", "🍜"),
    CatalogItem("rice", "🍚"), CatalogItem("cake", "🍰"), CatalogItem("cookie", "🍪"),
    CatalogItem("candy", "🍬"), CatalogItem("soy sauce", "🍾"), CatalogItem("ice cream", "🍦"),
)


# ─────────────────────────────────────────────────────────────────────────────
# Sorting
# ─────────────────────────────────────────────────────────────────────────────

SORTING_SETS: Dict[int, SortingSet] = {
    1: SortingSet(
        category_a="fruit",
        category_b="animals",
        items_a=(
            CatalogItem("apple", "🍎"), CatalogItem("banana", "🍌"), CatalogItem("grapes", "🍇"),
            CatalogItem("orange", "🍊"), CatalogItem("peach", "🍑"),
        ),
        items_b=(
            CatalogItem("puppy", "🐶"), CatalogItem("kitten", "🐱"), CatalogItem("tiger", "🐯"),
            CatalogItem("cow", "🐮"), CatalogItem("pig", "🐷"),
        ),
    ),
    2: SortingSet(
        category_a="appliances",
        category_b="clothing",
        items_a=(
            CatalogItem("phone", "📱"), CatalogItem("laptop", "💻"), CatalogItem("television", "📺"),
            CatalogItem("camera", "📷"), CatalogItem("alarm clock", "⏰"),
        ),
        items_b=(
            CatalogItem("t-shirt", "👕"), CatalogItem("trousers", "👖"), CatalogItem("dress", "👗"),
            CatalogItem("coat", "🧥"), CatalogItem("socks", "🧦"),
        ),
    ),
    3: SortingSet(
        category_a="in the sky",
        category_b="in the water",
        items_a=(
            CatalogItem("sun", "☀️"), CatalogItem("cloud", "☁️"), CatalogItem("eagle", "🦅"),
            CatalogItem("aeroplane", "✈️"), CatalogItem("moon", "🌙"),
        ),
        items_b=(
            CatalogItem("fish", "🐟"), CatalogItem("crab", "🦀"), CatalogItem("octopus", "🐙"),
            CatalogItem("whale", "🐋"), CatalogItem("turtle", "🐢"),
        ),
    ),
}


# ─────────────────────────────────────────────────────────────────────────────
# Inhibition (Stroop)
# ─────────────────────────────────────────────────────────────────────────────

COLORS: Tuple[ColorSwatch, ...] = (
    ColorSwatch("red", "Red"),
    ColorSwatch("blue", "Blue"),
    ColorSwatch("green", "Green"),
    ColorSwatch("yellow", "Yellow"),
    ColorSwatch("black", "Black"),
)
