"""Centralized threshold and magic number configuration.

This module contains the scoring increments, penalties, simulation geometry
and generation bounds used throughout the engine. Having these in one
place makes tuning easier and keeps per-exercise constants out of the
session code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringThresholds:
    """Increments and penalties for per-trial and set-completion scoring."""

    min_score: int = 0
    max_score: int = 100

    per_trial_points: int = 10  # Pattern, arithmetic, search hit, inhibition
    search_miss_penalty: int = 2  # Wrong tile in visual search (floored at 0)
    memory_extra_move_penalty: int = 10  # Per move beyond pair_count
    recall_wrong_weight: float = 0.5  # Wrong basket item costs half a target share

    reaction_star_ratio: float = 0.6  # Two-star threshold as fraction of target_score


@dataclass(frozen=True)
class ReactionThresholds:
    """Geometry and tuning for the falling-object simulation (percent units)."""

    field_bottom: float = 100.0  # Objects at or past this are missed
    spawn_vertical: float = 0.0
    spawn_lateral_min: float = 10.0
    spawn_lateral_max: float = 90.0

    capture_band_top: float = 85.0
    capture_band_bottom: float = 95.0
    capture_radius: float = 15.0

    catcher_min: float = 10.0
    catcher_max: float = 90.0
    catcher_start: float = 50.0

    hazard_probability: float = 0.3
    speed_jitter: float = 0.2  # Added uniformly on top of base_speed

    reward_points: int = 10
    hazard_penalty: int = 10

    default_base_speed: float = 0.3
    default_spawn_rate_ms: float = 1500.0
    default_duration_s: int = 45


@dataclass(frozen=True)
class GenerationThresholds:
    """Bounds and defaults for procedural content generation."""

    # Pattern inference
    pattern_option_count: int = 3
    pattern_min_symbols: int = 3
    pattern_max_symbols: int = 5
    pattern_steps: tuple[int, ...] = (1, 2, 5, 10)
    pattern_start_min: int = 1
    pattern_start_max: int = 10
    pattern_duration_s: int = 60

    # Arithmetic
    arithmetic_trials: int = 10

    # Visual search
    search_min_targets: int = 3
    search_max_targets: int = 5
    search_default_grid: int = 12
    search_duration_s: int = 30

    # Memory matching
    memory_default_pairs: int = 4

    # Recall / shopping list (easy, medium, hard)
    recall_target_counts: tuple[int, int, int] = (3, 5, 7)
    recall_distractor_count: int = 8

    # Sorting
    sorting_repeats: int = 2  # Each category item appears this many times

    # Inhibition
    inhibition_mismatch_probability: float = 0.7
    inhibition_default_duration_s: int = 45


# Global instances for easy import
SCORING_THRESHOLDS = ScoringThresholds()
REACTION_THRESHOLDS = ReactionThresholds()
GENERATION_THRESHOLDS = GenerationThresholds()
