"""Tests for the pure habit streak engine."""

from datetime import datetime, timedelta

import pytest

from core.exceptions import ValidationError
from core.habits import aggregate_stats, complete_habit, completion_history, weekly_completions
from models.habit import HabitStats

from tests.conftest import NOW, TODAY


def habit(streak=0, last=None, **extra):
    return {"id": "h1", "streak_count": streak, "last_completed_at": last, **extra}


class TestCompleteHabit:
    """Tests for complete_habit()."""

    def test_yesterday_extends_streak(self):
        update = complete_habit(habit(5, NOW - timedelta(days=1)), NOW)
        assert update.new_streak == 6
        assert update.extended
        assert not update.already_completed

    def test_same_day_keeps_streak(self):
        update = complete_habit(habit(5, NOW - timedelta(hours=3)), NOW)
        assert update.new_streak == 5
        assert update.already_completed

    def test_gap_resets_to_one(self):
        assert complete_habit(habit(3, NOW - timedelta(days=3)), NOW).new_streak == 1

    def test_never_completed_starts_at_one(self):
        assert complete_habit(habit(), NOW).new_streak == 1

    def test_day_boundary_is_utc(self):
        late = datetime(2026, 10, 16, 23, 59, tzinfo=NOW.tzinfo)
        early = datetime(2026, 10, 17, 0, 1, tzinfo=NOW.tzinfo)
        assert complete_habit(habit(2, late), early).new_streak == 3

    def test_naive_last_completed_is_read_as_utc(self):
        last = (NOW - timedelta(days=1)).replace(tzinfo=None)
        assert complete_habit(habit(1, last), NOW).new_streak == 2

    def test_accepts_objects(self):
        class Row:
            streak_count = 4
            last_completed_at = NOW - timedelta(days=1)

        assert complete_habit(Row(), NOW).new_streak == 5


class TestCompletionHistory:
    """Tests for completion_history()."""

    def test_window_is_today_first(self):
        completions = {TODAY, TODAY - timedelta(days=2)}
        assert completion_history("h", 7, completions, TODAY) == [
            True, False, True, False, False, False, False
        ]

    def test_length_matches_days(self):
        assert len(completion_history("h", 30, [], TODAY)) == 30

    def test_datetimes_are_truncated_to_day(self):
        completions = [NOW, NOW - timedelta(days=1, hours=11)]
        assert completion_history("h", 3, completions, TODAY) == [True, True, False]

    def test_completions_outside_window_are_ignored(self):
        assert completion_history("h", 2, [TODAY - timedelta(days=5)], TODAY) == [False, False]

    @pytest.mark.parametrize("days", [0, -1, True, 2.5, "7"])
    def test_invalid_days(self, days):
        with pytest.raises(ValidationError) as exc_info:
            completion_history("h", days, [], TODAY)
        assert exc_info.value.field == "days"

    def test_weekly_window(self):
        assert weekly_completions("h", [TODAY], TODAY) == [True] + [False] * 6


class TestAggregateStats:
    """Tests for aggregate_stats()."""

    def test_empty(self):
        stats = aggregate_stats([], TODAY)
        assert stats == HabitStats(0, 0, 0, 0)
        assert stats.completion_rate_today == 0

    def test_totals(self):
        habits = [
            habit(5, NOW),
            habit(2, NOW - timedelta(days=1)),
            habit(0, None),
        ]
        stats = aggregate_stats(habits, TODAY)
        assert stats.total_habits == 3
        assert stats.total_streak == 7
        assert stats.longest_streak == 5
        assert stats.completed_today == 1
        assert stats.to_dict()["completion_rate_today"] == 33
