"""In-memory LRU memo store bounded by entry count."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from asciidoc_transformer.cache.stats import CacheStats
from asciidoc_transformer.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_DEFAULT_MAX_ENTRIES = 1000


class MemoCache:
    """In-memory LRU cache with count-based eviction.

    Values are opaque: a resolved artifact or a pending computation. Both
    ``get`` and ``set`` count as a use. Nothing expires by time.
    """

    def __init__(self, max_entries: int = _DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ConfigurationError(
                f"Cache capacity must be at least 1, got {max_entries}",
                option="cache_max_entries",
            )
        self._store: OrderedDict[str, Any] = OrderedDict()
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._evictions = 0

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key not in self._store:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return self._store[key]

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._insert(key, value)

    def get_or_set(self, key: str, factory: Callable[[], Any]) -> tuple[Any, bool]:
        """Atomic insert-if-absent.

        Returns ``(value, created)``. ``factory`` runs under the lock and only
        when the key is absent, so two callers can never both create a value.
        """
        with self._lock:
            if key in self._store:
                self._store.move_to_end(key)
                return self._store[key], False
            value = factory()
            self._insert(key, value)
            return value, True

    def discard(self, key: str, expected: Any) -> bool:
        """Remove ``key`` only while it still maps to ``expected``."""
        with self._lock:
            if key in self._store and self._store[key] is expected:
                del self._store[key]
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> CacheStats:
        """Occupancy and eviction counters; hit accounting lives in the manager."""
        return CacheStats(
            entries=len(self._store), capacity=self._max_entries, evictions=self._evictions
        )

    @property
    def capacity(self) -> int:
        return self._max_entries

    @property
    def evictions(self) -> int:
        return self._evictions

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def _insert(self, key: str, value: Any) -> None:
        if key in self._store:
            self._store.move_to_end(key)
        self._store[key] = value
        while len(self._store) > self._max_entries:
            self._evict_oldest()

    def _evict_oldest(self) -> None:
        key, _ = self._store.popitem(last=False)
        self._evictions += 1
        logger.debug("Evicted cache entry %s", key[:12])
