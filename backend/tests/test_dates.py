"""Tests for Canvas date parsing and the Notion instant format."""

from datetime import datetime, timezone

import pytest

from canvas_sync.dates import SOURCE_TZ, parse_due_date, to_notion_instant

NOW = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


class TestParseDueDate:
    @pytest.mark.parametrize("text,expected", [
        ("Mon Sep 22, 2025 4:00pm", datetime(2025, 9, 22, 16, 0)),
        ("Sep 20, 2025 at 10:13am", datetime(2025, 9, 20, 10, 13)),
        ("Sep 23 at 11:59pm", datetime(2025, 9, 23, 23, 59)),
        ("Due: Sep 23 at 11:59 PM", datetime(2025, 9, 23, 23, 59)),
        ("Friday, Oct 3 at 9am", datetime(2025, 10, 3, 9, 0)),
        ("September 30, 2025", datetime(2025, 9, 30, 12, 0)),
        ("Sep 20, 2025, 10:13 AM", datetime(2025, 9, 20, 10, 13)),
        ("Sep 22", datetime(2025, 9, 22, 12, 0)),
    ])
    def test_formats(self, text, expected):
        assert parse_due_date(text, now=NOW) == expected.replace(tzinfo=SOURCE_TZ)

    # NOW is Monday 2025-09-01 06:00 in the source zone
    @pytest.mark.parametrize("text,expected", [
        ("Tomorrow at 11:59pm", datetime(2025, 9, 2, 23, 59)),
        ("Today at 4pm", datetime(2025, 9, 1, 16, 0)),
        ("today", datetime(2025, 9, 1, 12, 0)),
        ("Yesterday at 9:00 AM", datetime(2025, 8, 31, 9, 0)),
        ("Friday at 9am", datetime(2025, 9, 5, 9, 0)),
        ("Monday 11:59pm", datetime(2025, 9, 1, 23, 59)),
        ("Mon 5am", datetime(2025, 9, 8, 5, 0)),
    ])
    def test_relative_days(self, text, expected):
        assert parse_due_date(text, now=NOW) == expected.replace(tzinfo=SOURCE_TZ)

    def test_result_is_in_source_zone(self):
        parsed = parse_due_date("Sep 23 at 11:59pm", now=NOW)
        assert parsed.utcoffset() == SOURCE_TZ.utcoffset(None)

    def test_past_date_without_year_moves_forward(self):
        parsed = parse_due_date("Jan 5 at 11:59pm", now=NOW)
        assert (parsed.year, parsed.month, parsed.day) == (2026, 1, 5)

    def test_past_date_with_year_stays(self):
        parsed = parse_due_date("Jan 5, 2025 11:59pm", now=NOW)
        assert parsed.year == 2025

    @pytest.mark.parametrize("text", ["", "No due date", "No publish date", "whenever"])
    def test_unparseable(self, text):
        assert parse_due_date(text, now=NOW) is None


class TestNotionInstant:
    def test_offset_and_format(self):
        dt = datetime(2025, 9, 22, 16, 0, tzinfo=SOURCE_TZ)
        assert to_notion_instant(dt) == "2025-09-22T15:00:00.000Z"

    def test_utc_input(self):
        assert to_notion_instant(NOW) == "2025-09-01T05:00:00.000Z"
