"""In-memory store for tests and dry runs."""

from __future__ import annotations

import logging
from typing import Optional

from shrutam.providers.base import PersistentStore

logger = logging.getLogger(__name__)


class InMemoryStore(PersistentStore):
    """Keeps values in a dict.  Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
        logger.debug("Memory store set %s (%d chars)", key, len(value))

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw contents, for assertions."""
        return dict(self._data)
