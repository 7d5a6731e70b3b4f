"""Quote synchronisation orchestrator.

Tries the backend first and keeps the local caches up to date with
whatever it returns.  Falls back gracefully to cached data if the
backend is unavailable, and only raises :class:`SyncError` when neither
source has anything usable.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from shrutam.config import SyncConfig
from shrutam.data.daily_cache import DailyQuoteCache
from shrutam.data.recent_cache import RecentQuoteCache
from shrutam.data.remote_client import RemoteClient, RemoteError
from shrutam.models import Quote, SyncResult, SyncState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncError(Exception):
    """Raised when both the remote read and the cache fallback came up empty."""

    def __init__(self, cause: RemoteError):
        super().__init__(f"No data available: {cause}")
        self.cause = cause


def _is_retriable(exc: BaseException) -> bool:
    return isinstance(exc, RemoteError) and exc.retriable


class SyncOrchestrator:
    """Coordinate remote reads, cache updates and offline fallback.

    Typical usage::

        orchestrator = SyncOrchestrator(remote, daily_cache, recent_cache)
        quote = await orchestrator.fetch_today()
        history = await orchestrator.fetch_recent()

    Each call runs its own ``ATTEMPTING -> SUCCEEDED | FALLEN_BACK | FAILED``
    sequence; nothing is carried over between calls.
    """

    def __init__(
        self,
        remote: RemoteClient,
        daily_cache: DailyQuoteCache,
        recent_cache: RecentQuoteCache,
        sync_config: Optional[SyncConfig] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._remote = remote
        self._daily = daily_cache
        self._recent = recent_cache
        self._config = sync_config or SyncConfig()
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_today(self) -> Quote:
        """Return today's quote, fresh if possible, else today's cached copy."""
        result = await self.sync_today()
        return result.value

    async def fetch_recent(self) -> list[Quote]:
        """Return recent quotes, fresh if possible, else the cached history."""
        result = await self.sync_recent()
        return result.value

    async def sync_today(self) -> SyncResult[Quote]:
        """Like :meth:`fetch_today` but also report how the value was obtained."""
        today = self._clock()
        logger.info("--- Syncing today's quote (%s) ---", today)
        _log_state("today", SyncState.ATTEMPTING)

        try:
            quote = await self._call_remote(self._remote.fetch_today)
        except RemoteError as exc:
            logger.error("Error fetching today's quote: %s; falling back to cache", exc)
            cached = await self._daily.retrieve_if_fresh(today)
            if cached is None:
                _log_state("today", SyncState.FAILED)
                raise SyncError(exc) from exc
            _log_state("today", SyncState.FALLEN_BACK)
            return SyncResult(cached, SyncState.FALLEN_BACK, exc)

        await self._daily.store(quote, today)
        await self._recent.merge_single_and_store(quote)
        _log_state("today", SyncState.SUCCEEDED)
        return SyncResult(quote, SyncState.SUCCEEDED)

    async def sync_recent(self) -> SyncResult[list[Quote]]:
        """Like :meth:`fetch_recent` but also report how the value was obtained."""
        logger.info("--- Syncing recent quotes ---")
        _log_state("recent", SyncState.ATTEMPTING)

        try:
            quotes = await self._call_remote(self._remote.fetch_recent)
        except RemoteError as exc:
            logger.error("Error fetching recent quotes: %s; falling back to cache", exc)
            cached = await self._recent.read_all()
            if not cached:
                _log_state("recent", SyncState.FAILED)
                raise SyncError(exc) from exc
            _log_state("recent", SyncState.FALLEN_BACK)
            return SyncResult(cached, SyncState.FALLEN_BACK, exc)

        merged = await self._recent.merge_and_store(quotes)
        if not merged.persist.is_ok:
            logger.warning("Recent quotes not persisted: %s", merged.persist.reason)
        newest_first = sorted(merged.quotes, key=lambda q: q.created_at, reverse=True)
        _log_state("recent", SyncState.SUCCEEDED)
        return SyncResult(newest_first, SyncState.SUCCEEDED)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _call_remote(self, fetch: Callable[[], Awaitable[T]]) -> T:
        """Run *fetch*, retrying transient failures as configured."""
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_retriable),
            wait=wait_exponential(
                multiplier=1,
                min=self._config.backoff_min_seconds,
                max=self._config.backoff_max_seconds,
            ),
            stop=stop_after_attempt(self._config.max_attempts),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(fetch)


def _log_state(operation: str, state: SyncState) -> None:
    logger.debug("sync %s -> %s", operation, state.value)
