"""Bounded, deduplicated, recency-ordered cache of historical quotes."""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from typing import Sequence

from pydantic import TypeAdapter, ValidationError

from shrutam.models import MergeResult, PersistResult, Quote
from shrutam.providers.base import PersistentStore, StoreError

logger = logging.getLogger(__name__)

CACHED_QUOTES_KEY = "cachedQuotes"
RECENT_CACHE_CAPACITY = 30

_QUOTE_LIST = TypeAdapter(list[Quote])


def merge_quotes(
    existing: Sequence[Quote],
    incoming: Sequence[Quote],
    capacity: int = RECENT_CACHE_CAPACITY,
) -> list[Quote]:
    """Return ``incoming + (existing not superseded by incoming)``, capped.

    Incoming quotes always come first, in the order given (callers pass
    them newest-first).  Existing quotes whose id appears in *incoming*
    are dropped; the rest keep their prior relative order and fill the
    remaining capacity.  Only the first *capacity* entries survive.
    """
    merged: list[Quote] = []
    seen: set[str] = set()
    for quote in itertools.chain(incoming, existing):
        if len(merged) >= capacity:
            break
        if quote.id in seen:
            continue
        seen.add(quote.id)
        merged.append(quote)
    return merged


class RecentQuoteCache:
    """Own the ``cachedQuotes`` key of the persistent store.

    Invariants after every mutation:
    1. No two entries share an ``id``.
    2. At most ``capacity`` entries are kept.
    3. Entries are ordered most-recently-cached first.
    """

    def __init__(self, store: PersistentStore, capacity: int = RECENT_CACHE_CAPACITY) -> None:
        self._store = store
        self._capacity = capacity
        # Serialises read-modify-write for overlapping refreshes.
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def read_all(self) -> list[Quote]:
        """Return the persisted list, or ``[]`` if missing or corrupt."""
        try:
            raw = await self._store.get(CACHED_QUOTES_KEY)
        except StoreError as exc:
            logger.error("Error getting cached quotes: %s", exc)
            return []
        if raw is None:
            logger.debug("Cache miss for %s", CACHED_QUOTES_KEY)
            return []
        try:
            quotes = _QUOTE_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupt cached quotes: %s", exc)
            return []
        logger.debug("Cache hit for %s: %d quotes", CACHED_QUOTES_KEY, len(quotes))
        return quotes

    async def merge_and_store(self, incoming: Sequence[Quote]) -> MergeResult:
        """Merge *incoming* ahead of the cached quotes and persist the result.

        Never raises.  If persisting fails the merged list is still
        returned, flagged as degraded.
        """
        async with self._lock:
            existing = await self.read_all()
            merged = merge_quotes(existing, incoming, self._capacity)
            persist = await self._write(merged)

        logger.info(
            "Merged %d incoming quotes into cache (total %d)",
            len(incoming),
            len(merged),
        )
        return MergeResult(quotes=merged, persist=persist)

    async def merge_single_and_store(self, quote: Quote) -> MergeResult:
        """Same as ``merge_and_store([quote])``."""
        return await self.merge_and_store([quote])

    async def validate(self) -> bool:
        """Run integrity checks on the persisted list.

        Checks:
        1. The stored value exists and parses as a list of quotes.
        2. No more than ``capacity`` entries.
        3. No duplicate ids.
        """
        try:
            raw = await self._store.get(CACHED_QUOTES_KEY)
        except StoreError as exc:
            logger.warning("Validation failed: store unreadable (%s)", exc)
            return False
        if raw is None:
            logger.warning("Validation failed: no cached quotes")
            return False

        try:
            quotes = _QUOTE_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Validation failed: cached quotes are corrupt (%s)", exc)
            return False

        if len(quotes) > self._capacity:
            logger.warning(
                "Validation failed: %d cached quotes exceeds capacity %d",
                len(quotes),
                self._capacity,
            )
            return False

        ids = [q.id for q in quotes]
        if len(set(ids)) != len(ids):
            logger.warning("Validation failed: duplicate quote ids found")
            return False

        logger.debug("Validation passed (%d quotes)", len(quotes))
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _write(self, quotes: list[Quote]) -> PersistResult:
        payload = json.dumps([q.to_wire() for q in quotes])
        try:
            await self._store.set(CACHED_QUOTES_KEY, payload)
        except StoreError as exc:
            logger.error("Error caching quotes: %s", exc)
            return PersistResult.degraded(str(exc))
        return PersistResult.ok()
