"""
Unit Tests for the scoring module.
"""

import pytest

from psci_toolkit.common.exercises import get_level
from psci_toolkit.core.models.levels import Difficulty, ExerciseKind, ExerciseLevel
from psci_toolkit.engine.scoring import (
    ScoreTally,
    StarTable,
    clamp_score,
    memory_score,
    recall_score,
    sorting_score,
    star_table_for,
    stars_for,
)


class TestStars:
    @pytest.mark.parametrize("score,expected", [
        (0, 1), (59, 1), (60, 2), (79, 2), (80, 3), (100, 3),
    ])
    def test_stars_for_when_math_table_then_expected(self, score, expected):
        assert stars_for(score, StarTable(80, 60)) == expected

    def test_stars_for_when_score_rises_then_never_decreases(self):
        for table in (StarTable(80, 50), StarTable(80, 40), StarTable(80, 48), StarTable(0, 0)):
            stars = [stars_for(s, table) for s in range(0, 101)]
            assert stars == sorted(stars)
            assert set(stars) <= {1, 2, 3}

    @pytest.mark.parametrize("three,two", [(50, 80), (110, 50), (80, -1)])
    def test_star_table_when_out_of_order_then_raises(self, three, two):
        with pytest.raises(ValueError):
            StarTable(three, two)

    def test_star_table_when_reaction_then_derived_from_target(self):
        level = ExerciseLevel(1, Difficulty.EASY, target_score=50)

        table = star_table_for(ExerciseKind.REACTION, level)

        assert table.three == 50
        assert table.two == pytest.approx(30)

    def test_star_table_when_search_then_fixed(self):
        table = star_table_for(ExerciseKind.SEARCH, get_level("SEARCH", 1))

        assert (table.three, table.two) == (80, 40)


class TestScoreTally:
    def test_penalize_when_below_zero_then_floored(self):
        tally = ScoreTally()
        tally.reward()

        tally.penalize(2)
        tally.penalize(10)

        assert tally.value == 0
        assert tally.wrong == 2

    def test_final_when_over_100_then_clamped(self):
        tally = ScoreTally()
        for _ in range(12):
            tally.reward()

        assert tally.value == 120
        assert tally.final == 100


class TestSetCompletion:
    def test_memory_when_optimal_then_100(self):
        assert memory_score(4, 4) == 100

    @pytest.mark.parametrize("moves,expected", [(5, 90), (8, 60), (14, 0), (30, 0)])
    def test_memory_when_extra_moves_then_10_each_floored(self, moves, expected):
        assert memory_score(moves, 4) == expected

    def test_recall_when_all_right_then_100(self):
        assert recall_score(3, 0, 3) == 100

    def test_recall_when_two_wrong_then_67(self):
        assert recall_score(3, 2, 3) == 67

    def test_recall_when_all_wrong_then_clamped_to_zero(self):
        assert recall_score(0, 8, 3) == 0

    def test_sorting_when_no_errors_then_100(self):
        assert sorting_score(20, 20) == 100

    def test_sorting_when_any_error_then_strictly_lower(self):
        assert sorting_score(19, 20) == 95
        assert sorting_score(19, 20) < sorting_score(20, 20)

    def test_clamp_when_half_then_rounds_up(self):
        assert clamp_score(66.5) == 67
        assert clamp_score(-3) == 0
        assert clamp_score(250) == 100
