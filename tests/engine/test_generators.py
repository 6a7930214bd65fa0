"""
Tests for the per-kind content generators.

Every generated trial must pass its own validate(); a seeded source must
reproduce the same trial.
"""

import random
from collections import Counter

import pytest

from psci_toolkit.common.catalog import COLORS, MEMORY_TILES, SORTING_SETS
from psci_toolkit.common.exercises import get_level
from psci_toolkit.core.models.levels import Difficulty, ExerciseKind, ExerciseLevel
from psci_toolkit.core.models.trials import InhibitionRule, PatternFamily
from psci_toolkit.engine.generators import (
    GENERATORS,
    generate_arithmetic,
    generate_inhibition,
    generate_memory,
    generate_pattern,
    generate_recall,
    generate_search,
    generate_sorting,
    get_generator,
)
from psci_toolkit.engine.generators import sorting as sorting_module
from psci_toolkit.errors import GeneratorError, UnsupportedExerciseError


SEEDS = range(40)


class TestGeneratorTable:
    @pytest.mark.parametrize("kind", sorted(GENERATORS, key=lambda k: k.value))
    @pytest.mark.parametrize("level_number", [1, 2, 3])
    def test_generate_when_any_level_then_trial_is_valid(self, kind, level_number):
        level = get_level(kind, level_number)
        generator = get_generator(kind)

        for seed in SEEDS:
            trial = generator(level, random.Random(seed))
            assert trial.kind is kind
            trial.validate()

    @pytest.mark.parametrize("kind", sorted(GENERATORS, key=lambda k: k.value))
    def test_generate_when_same_seed_then_same_trial(self, kind):
        level = get_level(kind, 2)
        generator = get_generator(kind)

        assert generator(level, random.Random(99)) == generator(level, random.Random(99))

    def test_get_generator_when_reaction_then_raises(self):
        with pytest.raises(UnsupportedExerciseError):
            get_generator(ExerciseKind.REACTION)


class TestPatternGenerator:
    def test_generate_when_many_seeds_then_all_families_appear(self):
        level = get_level("PATTERN", 1)

        families = {generate_pattern(level, random.Random(s)).family for s in range(200)}

        assert families == set(PatternFamily)

    def test_generate_when_arithmetic_family_then_answer_continues_sequence(self):
        level = get_level("PATTERN", 1)
        for seed in range(200):
            trial = generate_pattern(level, random.Random(seed))
            if trial.family is not PatternFamily.ARITHMETIC:
                continue
            terms = [int(t) for t in trial.sequence]
            step = terms[1] - terms[0]
            assert int(trial.answer) == terms[-1] + step


class TestArithmeticGenerator:
    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_generate_when_change_problem_then_payment_exceeds_total(self, difficulty):
        level = ExerciseLevel(1, difficulty)
        for seed in range(200):
            trial = generate_arithmetic(level, random.Random(seed))
            assert trial.answer >= 0
            if trial.is_change_problem:
                assert trial.payment > trial.total
                assert trial.answer == trial.payment - trial.total

    def test_generate_when_hard_change_then_pays_next_ten(self):
        level = ExerciseLevel(3, Difficulty.HARD)
        for seed in range(200):
            trial = generate_arithmetic(level, random.Random(seed))
            if trial.template == "hard_change":
                assert trial.payment % 10 == 0
                assert 0 < trial.payment - trial.total <= 10

    def test_generate_when_easy_then_templates_from_easy_tier(self):
        level = ExerciseLevel(1, Difficulty.EASY)

        templates = {generate_arithmetic(level, random.Random(s)).template for s in range(100)}

        assert templates <= {"easy_fruit", "easy_eggs", "easy_change"}


class TestSearchGenerator:
    @pytest.mark.parametrize("grid_size", [12, 20, 30])
    def test_generate_when_grid_size_then_cells_match(self, grid_size):
        level = ExerciseLevel(1, Difficulty.EASY, params={"grid_size": grid_size})

        trial = generate_search(level, random.Random(3))

        assert trial.grid_size == grid_size
        assert 3 <= trial.target_count <= 5

    @pytest.mark.parametrize("grid_size", [4, "12", 12.0])
    def test_generate_when_grid_size_invalid_then_raises(self, grid_size):
        level = ExerciseLevel(1, Difficulty.EASY, params={"grid_size": grid_size})

        with pytest.raises(GeneratorError):
            generate_search(level, random.Random(3))


class TestMemoryGenerator:
    def test_generate_when_pair_count_then_each_symbol_twice(self):
        level = ExerciseLevel(2, Difficulty.MEDIUM, params={"pair_count": 6})

        trial = generate_memory(level, random.Random(5))

        counts = Counter(trial.deck)
        assert len(counts) == 6
        assert set(counts.values()) == {2}
        assert set(counts) <= set(MEMORY_TILES)

    @pytest.mark.parametrize("pair_count", [0, len(MEMORY_TILES) + 1])
    def test_generate_when_pair_count_out_of_range_then_raises(self, pair_count):
        level = ExerciseLevel(1, Difficulty.EASY, params={"pair_count": pair_count})

        with pytest.raises(GeneratorError):
            generate_memory(level, random.Random(5))


class TestRecallGenerator:
    @pytest.mark.parametrize("level_number,expected", [(1, 3), (2, 5), (3, 7)])
    def test_generate_when_level_then_target_count_follows_tier(self, level_number, expected):
        trial = generate_recall(get_level("MARKET", level_number), random.Random(8))

        assert len(trial.targets) == expected
        assert len(trial.distractors) == 8
        assert not trial.target_names & {d.name for d in trial.distractors}

    def test_generate_when_too_many_items_then_raises(self):
        level = ExerciseLevel(1, Difficulty.EASY, params={"target_count": 20, "distractor_count": 20})

        with pytest.raises(GeneratorError):
            generate_recall(level, random.Random(8))


class TestSortingGenerator:
    def test_generate_when_level_1_then_every_item_twice(self):
        trial = generate_sorting(get_level("SORTING", 1), random.Random(4))

        sorting_set = SORTING_SETS[1]
        assert trial.category_a == sorting_set.category_a
        assert len(trial.queue) == 2 * (len(sorting_set.items_a) + len(sorting_set.items_b))
        counts = Counter(entry.item.name for entry in trial.queue)
        assert set(counts.values()) == {2}

    def test_generate_when_level_has_no_set_then_falls_back_to_first_set(self, monkeypatch):
        monkeypatch.setattr(sorting_module, "SORTING_SETS", {1: SORTING_SETS[1]})

        trial = generate_sorting(get_level("SORTING", 3), random.Random(4))

        assert trial.category_a == SORTING_SETS[1].category_a


class TestInhibitionGenerator:
    def test_generate_when_level_1_then_meaning_rule_and_congruent(self):
        level = get_level("COLOR_MATCH", 1)
        for seed in SEEDS:
            trial = generate_inhibition(level, random.Random(seed))
            assert trial.rule is InhibitionRule.MEANING
            assert trial.is_congruent
            assert trial.target == trial.word

    def test_generate_when_level_2_then_ink_rule_mostly_incongruent(self):
        level = get_level("COLOR_MATCH", 2)

        trials = [generate_inhibition(level, random.Random(s)) for s in range(200)]

        assert all(t.rule is InhibitionRule.INK and t.target == t.ink for t in trials)
        incongruent = sum(1 for t in trials if not t.is_congruent)
        assert 100 < incongruent < 180

    def test_generate_when_many_ink_trials_then_about_seventy_percent_mismatched(self):
        level = get_level("COLOR_MATCH", 3)
        rng = random.Random(2024)

        trials = [generate_inhibition(level, rng) for _ in range(1000)]

        incongruent = sum(1 for t in trials if not t.is_congruent)
        assert incongruent / 1000 == pytest.approx(0.7, abs=0.05)

    def test_generate_when_any_then_options_are_palette_colours(self):
        trial = generate_inhibition(get_level("COLOR_MATCH", 3), random.Random(1))

        assert set(trial.options) <= set(COLORS)
