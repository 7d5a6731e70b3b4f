"""Unit tests for shrutam.models."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from shrutam.models import (
    DailyCacheEntry,
    PersistResult,
    PersistStatus,
    Quote,
    SyncResult,
    SyncState,
    parse_date_string,
    to_date_string,
)


# ---------------------------------------------------------------------------
# Quote
# ---------------------------------------------------------------------------


class TestQuote:
    def test_parses_wire_shape(self, quote_wire):
        quote = Quote.model_validate(quote_wire)
        assert quote.id == "q1"
        assert quote.source_label == "Bhagavad Gita 2.47"
        assert quote.meaning_secondary == "You have a right to your actions alone"
        assert quote.created_at == datetime(2024, 3, 2, 5, 30, tzinfo=timezone.utc)

    def test_to_wire_uses_wire_names(self, quote_wire):
        wire = Quote.model_validate(quote_wire).to_wire()
        assert set(wire) == set(quote_wire)
        assert wire["shlok"] == quote_wire["shlok"]
        assert wire["meaning_hindi"] == quote_wire["meaning_hindi"]

    def test_date_only_created_at_is_utc_midnight(self, make_quote):
        quote = make_quote("q1", created_at="2024-03-01")
        assert quote.created_at == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_missing_field_rejected(self, quote_wire):
        del quote_wire["shlok"]
        with pytest.raises(ValidationError):
            Quote.model_validate(quote_wire)

    def test_empty_id_rejected(self, quote_wire):
        quote_wire["id"] = ""
        with pytest.raises(ValidationError):
            Quote.model_validate(quote_wire)

    def test_quote_is_immutable(self, make_quote):
        quote = make_quote("q1")
        with pytest.raises(ValidationError):
            quote.text = "changed"


# ---------------------------------------------------------------------------
# DailyCacheEntry and date strings
# ---------------------------------------------------------------------------


class TestDateString:
    def test_renders_like_to_date_string(self):
        assert to_date_string(date(2024, 1, 1)) == "Mon Jan 01 2024"
        assert to_date_string(date(2024, 3, 2)) == "Sat Mar 02 2024"

    def test_parse_inverts_render(self):
        d = date(2023, 12, 31)
        assert parse_date_string(to_date_string(d)) == d

    def test_parse_accepts_iso(self):
        assert parse_date_string("2024-03-02") == date(2024, 3, 2)

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date_string("yesterday")


class TestDailyCacheEntry:
    def test_wire_shape(self, make_quote):
        entry = DailyCacheEntry(quote=make_quote("q1"), cached_on=date(2024, 1, 1))
        wire = entry.to_wire()
        assert wire["date"] == "Mon Jan 01 2024"
        assert wire["data"]["id"] == "q1"

    def test_parses_wire_shape(self, make_quote):
        wire = {"data": make_quote("q1").to_wire(), "date": "Mon Jan 01 2024"}
        entry = DailyCacheEntry.model_validate(wire)
        assert entry.cached_on == date(2024, 1, 1)
        assert entry.quote.id == "q1"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestResults:
    def test_persist_ok(self):
        result = PersistResult.ok()
        assert result.is_ok
        assert result.reason is None

    def test_persist_degraded(self):
        result = PersistResult.degraded("disk full")
        assert not result.is_ok
        assert result.status is PersistStatus.DEGRADED
        assert result.reason == "disk full"

    def test_sync_result_from_cache(self):
        assert SyncResult("x", SyncState.FALLEN_BACK).from_cache is True
        assert SyncResult("x", SyncState.SUCCEEDED).from_cache is False
