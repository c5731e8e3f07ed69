"""Tests for productivity score, project health and time block arithmetic."""

from datetime import timedelta

import pytest

from core.exceptions import ValidationError
from core.metrics import average, calculate_health_score, productivity_score, round_half_up
from core.timeblocks import (
    calculate_duration,
    check_overlap,
    summarize_by_category,
    time_to_minutes,
)
from models.analytics import ProjectStats

from tests.conftest import NOW


class TestProductivityScore:
    """Tests for productivity_score()."""

    def test_reference_values(self):
        assert productivity_score(120, 3, 5) == 45

    def test_all_zero(self):
        assert productivity_score(0, 0, 0) == 0

    def test_fractional_energy(self):
        # 10 + 0 + 7.5 = 17.5 -> 18
        assert productivity_score(60, 0, 3.75) == 18

    def test_half_rounds_up(self):
        # 45 минут -> 7.5
        assert productivity_score(45, 0, 0) == 8

    @pytest.mark.parametrize("value, expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (-2.5, -3),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestHealthScore:
    """Tests for calculate_health_score()."""

    def test_empty_project_updated_today(self):
        assert calculate_health_score(ProjectStats(), NOW, NOW) == 80

    def test_completion_and_blockers(self):
        stats = ProjectStats(total=4, done=2, in_progress=1, blocked=1)
        # 50 + 25 + 30 - 5
        assert calculate_health_score(stats, NOW, NOW) == 100

    @pytest.mark.parametrize("days, bonus", [(2, 20), (3, 20), (5, 10), (7, 10), (8, 0)])
    def test_activity_bonus(self, days, bonus):
        assert calculate_health_score(ProjectStats(), NOW - timedelta(days=days), NOW) == 50 + bonus

    def test_blocked_stale_project(self):
        stats = ProjectStats(total=2, blocked=2)
        assert calculate_health_score(stats, NOW - timedelta(days=30), NOW) == 30

    def test_clamped_to_hundred(self):
        stats = ProjectStats(total=1, done=1)
        assert calculate_health_score(stats, NOW, NOW) == 100

    def test_average(self):
        assert average([1, None, 3]) == 2
        assert average([], default=0.0) == 0.0


class TestTimeBlocks:
    """Tests for HH:MM block arithmetic."""

    def test_time_to_minutes(self):
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("00:00") == 0

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "", None])
    def test_invalid_time(self, value):
        with pytest.raises(ValidationError):
            time_to_minutes(value)

    def test_duration(self):
        assert calculate_duration("09:00", "10:30") == 90

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            calculate_duration("10:00", "10:00")
        assert exc_info.value.field == "end_time"

    def test_overlap(self):
        blocks = [{"id": "a", "start_time": "09:00", "end_time": "10:00"}]
        assert check_overlap(blocks, "09:30", "10:30")
        assert not check_overlap(blocks, "10:00", "11:00")
        assert not check_overlap(blocks, "08:00", "09:00")
        assert not check_overlap(blocks, "09:30", "10:30", exclude_id="a")

    def test_overlap_skips_blocks_without_times(self):
        assert not check_overlap([{"start_time": None, "end_time": "10:00"}], "09:00", "11:00")

    def test_summary_by_category(self):
        blocks = [
            {"category": "work", "duration_minutes": 60},
            {"category": "work", "duration_minutes": 30},
            {"category": None, "duration_minutes": 15},
        ]
        assert summarize_by_category(blocks) == [
            {"category": "work", "minutes": 90},
            {"category": "other", "minutes": 15},
        ]
