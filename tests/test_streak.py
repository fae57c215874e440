# tests/test_streak.py
from datetime import date, timedelta

from math_calendar.streak import compute_achievements, compute_streak, completion_percent


def test_streak_counts_back_from_today():
    progress = {(3, 8): True, (3, 9): True, (3, 10): True}
    assert compute_streak(progress, date(2026, 3, 10)) == 3


def test_streak_unfinished_today_does_not_break_run():
    progress = {(3, 8): True, (3, 9): True}
    assert compute_streak(progress, date(2026, 3, 10)) == 2


def test_streak_stops_at_first_gap():
    progress = {(3, 5): True, (3, 6): True, (3, 8): True, (3, 9): True, (3, 10): True}
    assert compute_streak(progress, date(2026, 3, 10)) == 3


def test_streak_zero_when_yesterday_missed():
    progress = {(3, 8): True}
    assert compute_streak(progress, date(2026, 3, 10)) == 0


def test_streak_crosses_year_boundary():
    progress = {(12, 30): True, (12, 31): True, (1, 1): True}
    assert compute_streak(progress, date(2026, 1, 1)) == 3


def test_streak_capped_at_max_days():
    start = date(2025, 1, 1)
    progress = {((start + timedelta(days=i)).month, (start + timedelta(days=i)).day): True
                for i in range(365)}
    assert compute_streak(progress, date(2025, 12, 31)) == 365
    assert compute_streak(progress, date(2025, 12, 31), max_days=30) == 30


def test_first_badge_at_ten():
    assert compute_achievements(9, {}) == []
    assert compute_achievements(10, {}) == [10]


def test_achievement_not_repeated():
    assert compute_achievements(11, {10: True}) == []


def test_jump_unlocks_only_missing_thresholds():
    assert compute_achievements(26, {10: True}) == [25]


def test_multiple_thresholds_ascending():
    assert compute_achievements(50, {}) == [10, 25, 50]
    assert compute_achievements(365, {10: True, 25: True}) == [50, 100, 200, 365]


def test_completion_percent():
    assert completion_percent(0, 0) == 0
    assert completion_percent(0, 365) == 0
    assert completion_percent(1, 8) == 13
    assert completion_percent(2, 365) == 1
    assert completion_percent(365, 365) == 100
