"""Key/value storage backends for save data.

Values are JSON text, one record per key, mirroring a browser's local
storage. Only the read/write contract matters to the rest of the game.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager, nullcontext
from pathlib import Path
from typing import ContextManager, Iterator, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...

    def batch(self) -> ContextManager[None]: ...


class MemoryStore:
    """Dict-backed store for tests and headless runs."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def batch(self) -> ContextManager[None]:
        return nullcontext()


class JsonFileStore:
    """All records in one JSON document on disk.

    Every write replaces the file atomically (temp file + ``os.replace``),
    so a crash mid-save leaves the previous document intact. Inside
    ``batch()`` writes are held in memory and flushed once on exit.
    """

    __slots__ = ("_path", "_data", "_lock", "_depth")

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._depth = 0
        self._data: dict[str, str] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            doc = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Save file %s unreadable (%s); starting empty", self._path, exc)
            return {}
        if not isinstance(doc, dict):
            logger.warning("Save file %s is not an object; starting empty", self._path)
            return {}
        return {str(k): v for k, v in doc.items() if isinstance(v, str)}

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self._path.name, suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _changed(self) -> None:
        if self._depth == 0:
            self._write()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._changed()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._changed()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    @contextmanager
    def batch(self) -> Iterator[None]:
        with self._lock:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            if self._depth == 0:
                self._write()
