"""Cache manager — single-flight memoization on top of the LRU memo store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from asciidoc_transformer.cache.keys import fingerprint
from asciidoc_transformer.cache.memory import MemoCache
from asciidoc_transformer.cache.stats import CacheStats
from asciidoc_transformer.types import DocumentNode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoCacheManager:
    """Memoizes derived artifacts per (node state, derivation key).

    Each slot moves ``absent -> pending -> resolved``. The pending
    ``asyncio.Task`` is stored before the first suspension point, so
    concurrent requests for the same fingerprint await one computation.
    A failed computation removes its own slot before the failure is
    delivered, which sends the next request back to ``absent``.

    Created once per transformer and discarded with it.
    """

    def __init__(self, max_entries: int = 1000, enabled: bool = True) -> None:
        self._enabled = enabled
        self._cache = MemoCache(max_entries=max_entries)
        self._stats = CacheStats()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def cache(self) -> MemoCache:
        return self._cache

    async def memoize(
        self,
        node: DocumentNode,
        derivation_key: str,
        compute: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the artifact for ``derivation_key``, computing it at most once."""
        if not self._enabled:
            self._stats.misses += 1
            return await compute()

        key = fingerprint(node, derivation_key)
        task, created = self._cache.get_or_set(
            key, lambda: asyncio.ensure_future(self._run(key, compute))
        )

        if created:
            self._stats.misses += 1
            logger.debug("Cache miss for %s (%s)", derivation_key, key[:12])
        elif task.done():
            self._stats.hits += 1
            logger.debug("Cache hit for %s (%s)", derivation_key, key[:12])
        else:
            self._stats.coalesced += 1
            logger.debug("Joining in-flight %s computation (%s)", derivation_key, key[:12])

        # Abandoning callers must not cancel work other callers are awaiting
        return await asyncio.shield(task)

    async def _run(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await compute()
        except BaseException:
            self._stats.failures += 1
            self._cache.discard(key, asyncio.current_task())
            logger.debug("Dropped failed computation for %s", key[:12])
            raise

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        self._cache.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        return self._cache.stats().model_copy(
            update={
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "coalesced": self._stats.coalesced,
                "failures": self._stats.failures,
            }
        )
