"""Tests for the capture classifier and inbox age formatting."""

from datetime import timedelta

import pytest

from core.capture import classify, time_ago
from models.capture import ClassifiedCapture
from models.enums import CaptureType

from tests.conftest import NOW


class TestClassify:
    """Tests for classify()."""

    def test_task_prefix(self):
        assert classify("[] buy milk") == ClassifiedCapture(CaptureType.TASK, "buy milk")

    def test_note_prefix(self):
        assert classify("# idea") == ClassifiedCapture(CaptureType.NOTE, "idea")

    def test_reading_prefix(self):
        assert classify("* Deep Work by Cal Newport") == ClassifiedCapture(
            CaptureType.READING, "Deep Work by Cal Newport"
        )

    def test_project_prefix(self):
        assert classify("project: Garden shed") == ClassifiedCapture(CaptureType.PROJECT, "Garden shed")

    def test_no_prefix(self):
        assert classify("no prefix here") == ClassifiedCapture(CaptureType.NONE, "no prefix here")

    def test_outer_whitespace_is_trimmed_first(self):
        result = classify("   []   call mom   ")
        assert result.type is CaptureType.TASK
        assert result.clean_content == "call mom"

    def test_prefix_without_space(self):
        assert classify("#idea").clean_content == "idea"
        assert classify("*article").type is CaptureType.READING

    def test_project_prefix_is_case_sensitive(self):
        result = classify("Project: Garden")
        assert result.type is CaptureType.NONE
        assert result.clean_content == "Project: Garden"

    def test_precedence_follows_rule_order(self):
        assert classify("[]# both").type is CaptureType.TASK
        assert classify("#* both").type is CaptureType.NOTE

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
    def test_empty_input_still_classifies(self, raw):
        assert classify(raw) == ClassifiedCapture(CaptureType.NONE, "")

    @pytest.mark.parametrize("raw, expected_type", [
        ("[]", CaptureType.TASK),
        ("#   ", CaptureType.NOTE),
        ("project:", CaptureType.PROJECT),
    ])
    def test_prefix_only_gives_empty_content(self, raw, expected_type):
        result = classify(raw)
        assert result.type is expected_type
        assert result.is_empty

    def test_none_input_is_treated_as_empty(self):
        assert classify(None).clean_content == ""

    @pytest.mark.parametrize("raw", [
        "[] buy milk",
        "# idea",
        "* a book",
        "project: shed",
        "plain text",
        "  spaced out  ",
    ])
    def test_reclassifying_clean_content_gives_none(self, raw):
        assert classify(classify(raw).clean_content).type is CaptureType.NONE

    def test_clean_content_with_another_prefix_is_reclassified(self):
        # Остаток сам начинается с префикса: допустимый случай
        first = classify("[] # heading")
        assert first == ClassifiedCapture(CaptureType.TASK, "# heading")
        assert classify(first.clean_content).type is CaptureType.NOTE

    def test_result_is_immutable(self):
        result = classify("# idea")
        with pytest.raises(AttributeError):
            result.clean_content = "changed"

    def test_stored_type_for_generic_capture_is_null(self):
        assert classify("plain").stored_type is None
        assert classify("[] task").stored_type == "task"


class TestTimeAgo:
    """Tests for time_ago()."""

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5 min ago"),
        (timedelta(hours=3, minutes=59), "3 hr ago"),
        (timedelta(days=2), "2 days ago"),
    ])
    def test_relative_ages(self, delta, expected):
        assert time_ago(NOW - delta, now=NOW) == expected

    def test_week_or_older_shows_date(self):
        assert time_ago(NOW - timedelta(days=7), now=NOW) == "2026-10-10"

    def test_naive_datetime_is_utc(self):
        naive = (NOW - timedelta(minutes=10)).replace(tzinfo=None)
        assert time_ago(naive, now=NOW) == "10 min ago"
