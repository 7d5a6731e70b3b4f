"""Single-slot cache for the quote of the day, scoped to a calendar date."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Optional

from pydantic import ValidationError

from shrutam.models import DailyCacheEntry, PersistResult, Quote
from shrutam.providers.base import PersistentStore, StoreError

logger = logging.getLogger(__name__)

TODAYS_QUOTE_KEY = "todaysQuote"


class DailyQuoteCache:
    """Own the ``todaysQuote`` key of the persistent store.

    A quote cached yesterday is still valid data, but it is never served
    as *today's* quote: freshness is decided purely by the client-local
    calendar date recorded when the entry was written.
    """

    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    async def store(self, quote: Quote, as_of: date) -> PersistResult:
        """Overwrite the slot with *quote* tagged with *as_of*.

        Never raises.  A store failure is logged and reported as degraded.
        """
        entry = DailyCacheEntry(quote=quote, cached_on=as_of)
        try:
            await self._store.set(TODAYS_QUOTE_KEY, json.dumps(entry.to_wire()))
        except StoreError as exc:
            logger.error("Error caching today's quote %s: %s", quote.id, exc)
            return PersistResult.degraded(str(exc))
        logger.info("Cached today's quote %s for %s", quote.id, as_of)
        return PersistResult.ok()

    async def retrieve_if_fresh(self, today: date) -> Optional[Quote]:
        """Return the cached quote only if it was cached on *today*."""
        entry = await self.peek()
        if entry is None:
            return None
        if entry.cached_on != today:
            logger.info(
                "Cached quote %s is from %s, not %s; ignoring",
                entry.quote.id,
                entry.cached_on,
                today,
            )
            return None
        return entry.quote

    async def peek(self) -> Optional[DailyCacheEntry]:
        """Return the stored entry regardless of its date.

        Missing, unreadable or corrupt entries are treated as absent.
        """
        try:
            raw = await self._store.get(TODAYS_QUOTE_KEY)
        except StoreError as exc:
            logger.error("Error retrieving cached quote: %s", exc)
            return None
        if raw is None:
            logger.debug("No cached quote of the day")
            return None
        try:
            return DailyCacheEntry.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            logger.warning("Discarding corrupt cached quote of the day: %s", exc)
            return None
