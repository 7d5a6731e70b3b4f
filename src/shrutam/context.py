"""Explicit application context, built once at process start."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from shrutam.config import ShrutamConfig
from shrutam.data.daily_cache import DailyQuoteCache
from shrutam.data.recent_cache import RecentQuoteCache
from shrutam.data.remote_client import RemoteClient
from shrutam.data.sync import SyncOrchestrator
from shrutam.providers import create_store
from shrutam.providers.base import PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything the sync core needs, passed by reference instead of globals."""

    config: ShrutamConfig
    store: PersistentStore
    remote: RemoteClient
    daily_cache: DailyQuoteCache
    recent_cache: RecentQuoteCache
    orchestrator: SyncOrchestrator

    async def aclose(self) -> None:
        await self.remote.aclose()
        await self.store.close()


def build_context(
    config: ShrutamConfig,
    *,
    store: Optional[PersistentStore] = None,
    remote: Optional[RemoteClient] = None,
    clock: Callable[[], date] = date.today,
) -> AppContext:
    """Wire store, remote client, caches and orchestrator from *config*.

    *store* and *remote* may be supplied to substitute test doubles.
    """
    store = store or create_store(config.storage)
    remote = remote or RemoteClient(config.api.base_url, timeout_ms=config.api.timeout_ms)
    daily_cache = DailyQuoteCache(store)
    recent_cache = RecentQuoteCache(store)
    orchestrator = SyncOrchestrator(
        remote=remote,
        daily_cache=daily_cache,
        recent_cache=recent_cache,
        sync_config=config.sync,
        clock=clock,
    )
    logger.debug(
        "Context built: base_url=%s storage=%s",
        config.api.base_url or "<unset>",
        config.storage.provider,
    )
    return AppContext(
        config=config,
        store=store,
        remote=remote,
        daily_cache=daily_cache,
        recent_cache=recent_cache,
        orchestrator=orchestrator,
    )
