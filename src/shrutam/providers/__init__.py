"""Provider factory functions for config-driven wiring."""

from __future__ import annotations

from shrutam.config import StorageConfig
from shrutam.providers.base import PersistentStore


def create_store(config: StorageConfig) -> PersistentStore:
    match config.provider:
        case "file":
            from .stores.file import FileStore
            return FileStore(directory=config.directory)
        case "memory":
            from .stores.memory import InMemoryStore
            return InMemoryStore()
        case _:
            raise ValueError(f"Unknown storage provider: {config.provider}")
