"""Abstract base classes for pluggable persistence backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


# ---- Exceptions ----


class StoreError(Exception):
    """A persistent store could not complete a read or write."""

    def __init__(self, message: str, key: str = ""):
        super().__init__(message)
        self.key = key


# ---- Provider ABCs ----


class PersistentStore(ABC):
    """Durable string-keyed store that survives process restarts.

    Values are opaque strings (the caches store JSON text).  Each key is
    written by exactly one owner:
        'todaysQuote'  -> DailyQuoteCache
        'cachedQuotes' -> RecentQuoteCache
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or ``None`` if absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None
