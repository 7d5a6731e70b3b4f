"""File-backed persistent store: one file per key inside a directory."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from shrutam.providers.base import PersistentStore, StoreError

logger = logging.getLogger(__name__)

# Filename convention: todaysQuote.json, cachedQuotes.json, etc.
_FILENAME_TEMPLATE = "{key}.json"
_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStore(PersistentStore):
    """Persist each key as a UTF-8 text file inside *directory*.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash mid-write never leaves a
    half-written value behind.  The directory is created on first write.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        logger.debug("FileStore initialised: directory=%s", self._dir)

    @property
    def directory(self) -> Path:
        return self._dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        return await asyncio.to_thread(self._read, key, path)

    async def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        await asyncio.to_thread(self._write, key, path, value)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise StoreError(f"Invalid store key: {key!r}", key=key)
        return self._dir / _FILENAME_TEMPLATE.format(key=key)

    @staticmethod
    def _read(key: str, path: Path) -> Optional[str]:
        try:
            if not path.is_file():
                logger.debug("Store miss for %s (file does not exist)", key)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreError(f"Failed to read {key}: {exc}", key=key) from exc

    def _write(self, key: str, path: Path, value: str) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Failed to write {key}: {exc}", key=key) from exc
        logger.debug("Wrote %d chars to %s", len(value), path)
