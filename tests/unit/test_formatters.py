"""Unit tests for shrutam.formatters."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from shrutam.formatters import (
    SHARE_TRAILER,
    format_date,
    format_quote,
    format_quote_list,
    format_share_text,
)


class TestFormatDate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-03-02", "02 Mar 2024"),
            ("2024-12-25T10:00:00Z", "25 Dec 2024"),
            (date(2023, 1, 9), "09 Jan 2023"),
            (datetime(2024, 7, 4, 23, 59, tzinfo=timezone.utc), "04 Jul 2024"),
        ],
    )
    def test_formats(self, value, expected):
        assert format_date(value) == expected


class TestShareText:
    def test_contains_all_parts_in_order(self, make_quote):
        quote = make_quote("q1", source_label="Rigveda 1.164.46", category="unity")
        text = format_share_text(quote)
        parts = text.split("\n\n")
        assert parts == [
            "shlok q1",
            "Rigveda 1.164.46 • unity",
            "hindi meaning q1",
            "english meaning q1",
            SHARE_TRAILER,
        ]


class TestQuoteRendering:
    def test_format_quote_starts_with_date(self, make_quote):
        rendered = format_quote(make_quote("q1", created_at="2024-03-02"))
        assert rendered.splitlines()[0] == "02 Mar 2024"
        assert "shlok q1" in rendered

    def test_list_one_line_per_quote(self, make_quote):
        quotes = [
            make_quote("a", created_at="2024-03-02", text="line one\nline two"),
            make_quote("b", created_at="2024-03-01"),
        ]
        lines = format_quote_list(quotes).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("02 Mar 2024")
        assert lines[0].endswith("line one")

    def test_empty_list(self):
        assert format_quote_list([]) == "No quotes."
