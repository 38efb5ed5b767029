import pytest

from core.leveling import LEVELS, completions_to_next_level, current_level, level_progress


def test_zero_completions_is_lowest_tier():
    level = current_level(0)
    assert level.number == 1
    assert level.title == "Beginner"
    assert level_progress(0) == 0.0


def test_top_tier_reached_at_threshold():
    top = LEVELS[-1]
    assert current_level(top.required_completions).title == "Legend"
    assert current_level(5000) == top
    assert level_progress(5000) == 1.0
    assert completions_to_next_level(5000) == 0


def test_progress_interpolates_between_thresholds():
    assert current_level(20).title == "Apprentice"
    assert level_progress(20) == pytest.approx(0.5)
    assert completions_to_next_level(20) == 10


def test_threshold_boundaries():
    assert current_level(9).number == 1
    assert current_level(10).number == 2
    assert current_level(149).number == 4
    assert current_level(150).number == 5


def test_table_is_ordered():
    thresholds = [level.required_completions for level in LEVELS]
    assert thresholds == sorted(thresholds)
    assert [level.number for level in LEVELS] == list(range(1, 9))
