"""Data layer: remote client, daily and recent quote caches, sync orchestrator."""

from shrutam.data.daily_cache import DailyQuoteCache
from shrutam.data.recent_cache import RecentQuoteCache
from shrutam.data.remote_client import RemoteClient, RemoteError
from shrutam.data.sync import SyncError, SyncOrchestrator

__all__ = [
    "DailyQuoteCache",
    "RecentQuoteCache",
    "RemoteClient",
    "RemoteError",
    "SyncError",
    "SyncOrchestrator",
]
