"""Persistent lookup cache for registry and search results.

Provides:
- Namespaced keys (``npmInfo:<package>``, ``alt:<package>``)
- Write-through persistence on every set
- Hit/miss statistics for the current process

Entries never expire; they live until the cache is cleared or the backing
file is deleted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from dep_migrate.storage import atomic_write_text

logger = logging.getLogger(__name__)

INFO_PREFIX = "npmInfo:"
ALT_PREFIX = "alt:"


def info_key(package: str) -> str:
    """Cache key for a package's registry metadata."""
    return f"{INFO_PREFIX}{package}"


def alt_key(package: str) -> str:
    """Cache key for a package's suggested replacement."""
    return f"{ALT_PREFIX}{package}"


class CacheStore(Protocol):
    """Backing store for the lookup cache."""

    def read(self) -> dict[str, Any] | None: ...

    def write(self, data: dict[str, Any]) -> None: ...


class JsonFileStore:
    """Cache store backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def read(self) -> dict[str, Any] | None:
        """Read the persisted mapping.

        Returns:
            The mapping, or None if the file is missing, unreadable, or not a
            JSON object.
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug(f"Ignoring unreadable cache file {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.debug(f"Ignoring cache file {self.path}: not a JSON object")
            return None
        return data

    def write(self, data: dict[str, Any]) -> None:
        atomic_write_text(self.path, json.dumps(data, indent=2))


class MemoryStore:
    """In-memory cache store."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = data
        self.write_count = 0

    def read(self) -> dict[str, Any] | None:
        return dict(self.data) if self.data is not None else None

    def write(self, data: dict[str, Any]) -> None:
        self.data = dict(data)
        self.write_count += 1


@dataclass
class CacheStats:
    """Hit/miss counters for the current process."""

    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0


class LookupCache:
    """Key-value cache of registry and search lookups.

    The persisted store is read once on construction. A missing or corrupt
    store yields an empty cache. Every ``set`` writes the whole mapping back.

    Example:
        cache = LookupCache(JsonFileStore(Path("~/.cache/dep-migrate/cache.json")))
        if "npmInfo:left-pad" in cache:
            info = cache.get("npmInfo:left-pad")
    """

    def __init__(self, store: CacheStore | None = None) -> None:
        self._store: CacheStore = store if store is not None else MemoryStore()
        self._data: dict[str, Any] = self._store.read() or {}
        self.stats = CacheStats()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Any:
        """Get a cached value.

        Args:
            key: Namespaced cache key.

        Returns:
            Cached value, or None if missing. A cached None is indistinguishable
            here; use ``key in cache`` to test presence.
        """
        if key in self._data:
            self.stats.hits += 1
            return self._data[key]
        self.stats.misses += 1
        return None

    def set(self, key: str, value: Any) -> None:
        """Store a value and persist the cache immediately.

        A failed write keeps the entry in memory for the rest of the run.
        """
        self._data[key] = value
        try:
            self._store.write(self._data)
        except OSError as e:
            logger.warning(f"Could not persist lookup cache: {e}")

    def clear(self) -> None:
        """Remove all entries and persist the empty cache."""
        self._data.clear()
        self._store.write(self._data)

    def summary(self) -> dict[str, int]:
        """Entry counts per namespace."""
        info = sum(1 for key in self._data if key.startswith(INFO_PREFIX))
        alt = sum(1 for key in self._data if key.startswith(ALT_PREFIX))
        return {"total": len(self._data), "npmInfo": info, "alt": alt}


def open_cache(path: Path) -> LookupCache:
    """Open the JSON-file backed cache at path."""
    return LookupCache(JsonFileStore(path))
