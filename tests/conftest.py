"""Shared test fixtures."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from shrutam.models import Quote
from shrutam.providers.stores.memory import InMemoryStore


def build_quote(quote_id: str, created_at: str = "2024-03-01", **overrides) -> Quote:
    """Create a Quote with plausible defaults for every field."""
    fields = {
        "id": quote_id,
        "text": f"shlok {quote_id}",
        "source_label": "Bhagavad Gita 2.47",
        "category": "karma",
        "created_at": created_at,
        "meaning_primary": f"hindi meaning {quote_id}",
        "meaning_secondary": f"english meaning {quote_id}",
    }
    fields.update(overrides)
    return Quote(**fields)


@pytest.fixture
def make_quote() -> Callable[..., Quote]:
    return build_quote


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def today() -> date:
    return date(2024, 3, 2)


@pytest.fixture
def quote_wire() -> dict:
    """A quote exactly as the backend sends it."""
    return {
        "id": "q1",
        "shlok": "कर्मण्येवाधिकारस्ते मा फलेषु कदाचन",
        "source": "Bhagavad Gita 2.47",
        "category": "karma",
        "created_at": "2024-03-02T05:30:00Z",
        "meaning_hindi": "तुम्हारा अधिकार केवल कर्म पर है",
        "meaning_english": "You have a right to your actions alone",
    }
