"""Durable key/value storage for the session blob."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Protocol


class PersistenceStore(Protocol):
    """Protocol for blob persistence backends."""

    def save(self, key: str, blob: str) -> None:
        """Overwrite the blob stored under ``key``."""

    def load(self, key: str) -> str | None:
        """Return the blob stored under ``key`` or ``None`` when absent."""

    def remove(self, key: str) -> None:
        """Delete the blob under ``key``; a missing key is not an error."""


class MemoryPersistence:
    """Process-local store used by tests and ephemeral shells."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})

    def save(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def load(self, key: str) -> str | None:
        return self._blobs.get(key)

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._blobs


class JsonFilePersistence:
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so a reader never sees a partial blob.
    """

    def __init__(self, directory: str | Path, *, encoding: str = "utf-8") -> None:
        self._directory = Path(directory)
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self._directory / f"{safe}.json"

    def save(self, key: str, blob: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{target.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding=self._encoding) as handle:
                handle.write(blob)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return None

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
