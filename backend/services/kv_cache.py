"""Key-value caches with a time-to-live, used to memoize raw API responses.

``FileCache`` persists one JSON document per key on disk, ``MemoryCache``
keeps entries in a dict (tests, single runs) and ``NullCache`` stores nothing.
"""

import hashlib
import json
import logging
import os
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Cache(ABC):
    """Minimal key-value store interface.

    Subclasses must implement get(), set(), remove() and clear().
    ``get`` returns ``None`` for missing or expired keys.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete *key* if present."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every entry."""


class NullCache(Cache):
    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any) -> None:
        pass

    def remove(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass


class MemoryCache(Cache):
    def __init__(self, ttl_seconds: float | None = None, *, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: dict[str, tuple[Any, float]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Any | None:
        item = self._items.get(key)
        if item is None:
            return None
        value, stored_at = item
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._items[key] = (value, self._clock())

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileCache(Cache):
    """One ``{"data": ..., "timestamp": ...}`` JSON file per key.

    File names are the SHA-1 of the key, so any string (URLs with query
    strings included) is a valid key.
    """

    def __init__(
        self,
        directory: str | Path,
        ttl_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as fh:
                item = json.load(fh)
            stored_at = float(item["timestamp"])
            data = item["data"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Unreadable cache entry %s, discarding: %s", path.name, e)
            self.remove(key)
            return None

        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            self.remove(key)
            return None
        return data

    def set(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump({"data": value, "timestamp": self._clock()}, fh)
            os.replace(tmp, path)
        except OSError as e:
            logger.warning("Cache write error for %s: %s", path.name, e)

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob("*.json"):
            path.unlink(missing_ok=True)

    def stats(self) -> dict[str, float]:
        """Entry count, total size and the age of the oldest entry (seconds)."""
        entries = 0
        size = 0
        oldest = self._clock()
        if self.directory.exists():
            for path in self.directory.glob("*.json"):
                entries += 1
                size += path.stat().st_size
                try:
                    with open(path, "r", encoding="utf-8") as fh:
                        oldest = min(oldest, float(json.load(fh)["timestamp"]))
                except (OSError, ValueError, KeyError, TypeError):
                    continue
        return {
            "entries": entries,
            "size_bytes": size,
            "oldest_age": self._clock() - oldest if entries else 0.0,
            "max_age": self.ttl_seconds or 0.0,
        }
