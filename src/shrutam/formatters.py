"""Text formatting for quotes shown on the command line or shared."""

from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from shrutam.models import Quote

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SHARE_TRAILER = "Shared from Shrutam - Daily Wisdom from Ancient Texts"


def format_date(value: str | date | datetime) -> str:
    """Format a date as ``DD MMM YYYY``, e.g. ``02 Mar 2024``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value.day:02d} {_MONTHS[value.month - 1]} {value.year}"


def format_share_text(quote: Quote) -> str:
    """Plain-text rendering used when sharing a quote."""
    return "\n\n".join(
        [
            quote.text,
            f"{quote.source_label} • {quote.category}",
            quote.meaning_primary,
            quote.meaning_secondary,
            SHARE_TRAILER,
        ]
    )


def format_quote(quote: Quote) -> str:
    """Full multi-line rendering of a single quote."""
    lines = [
        format_date(quote.created_at),
        "",
        quote.text,
        "",
        f"  {quote.source_label} • {quote.category}",
        "",
        quote.meaning_primary,
        quote.meaning_secondary,
    ]
    return "\n".join(lines)


def format_quote_list(quotes: Sequence[Quote]) -> str:
    """One line per quote: date, source and the first line of the passage."""
    if not quotes:
        return "No quotes."
    lines = []
    for quote in quotes:
        first_line = quote.text.strip().splitlines()[0] if quote.text.strip() else ""
        lines.append(f"{format_date(quote.created_at)}  [{quote.source_label}]  {first_line}")
    return "\n".join(lines)
