"""Tests for the in-memory LRU memo store."""

import threading

import pytest

from asciidoc_transformer.cache.memory import MemoCache
from asciidoc_transformer.errors.exceptions import ConfigurationError


class TestMemoCache:
    def test_get_set(self):
        cache = MemoCache()
        cache.set("k1", "<p>Hello</p>")
        assert cache.get("k1") == "<p>Hello</p>"

    def test_get_miss(self):
        cache = MemoCache()
        assert cache.get("nonexistent") is None

    def test_default_capacity(self):
        assert MemoCache().capacity == 1000

    @pytest.mark.parametrize("max_entries", [0, -1])
    def test_invalid_capacity(self, max_entries):
        with pytest.raises(ConfigurationError) as exc_info:
            MemoCache(max_entries=max_entries)
        assert exc_info.value.option == "cache_max_entries"

    def test_evicts_least_recently_used(self):
        cache = MemoCache(max_entries=3)
        for key in ("k1", "k2", "k3", "k4"):
            cache.set(key, key.upper())
        assert len(cache) == 3
        assert cache.get("k1") is None
        assert cache.get("k4") == "K4"
        assert cache.evictions == 1

    def test_get_refreshes_recency(self):
        cache = MemoCache(max_entries=2)
        cache.set("k1", 1)
        cache.set("k2", 2)
        cache.get("k1")
        cache.set("k3", 3)
        assert cache.get("k1") == 1
        assert cache.get("k2") is None

    def test_set_existing_refreshes_recency(self):
        cache = MemoCache(max_entries=2)
        cache.set("k1", 1)
        cache.set("k2", 2)
        cache.set("k1", 10)
        cache.set("k3", 3)
        assert cache.get("k1") == 10
        assert "k2" not in cache

    def test_contains_does_not_refresh_recency(self):
        cache = MemoCache(max_entries=2)
        cache.set("k1", 1)
        cache.set("k2", 2)
        assert "k1" in cache
        cache.set("k3", 3)
        assert "k1" not in cache

    def test_clear(self):
        cache = MemoCache()
        cache.set("k1", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("k1") is None

    def test_stats(self):
        cache = MemoCache(max_entries=1)
        cache.set("k1", 1)
        cache.set("k2", 2)
        stats = cache.stats()
        assert stats.entries == 1
        assert stats.capacity == 1
        assert stats.evictions == 1


class TestGetOrSet:
    def test_creates_when_absent(self):
        cache = MemoCache()
        value, created = cache.get_or_set("k1", lambda: "fresh")
        assert (value, created) == ("fresh", True)
        assert cache.get("k1") == "fresh"

    def test_returns_existing_without_calling_factory(self):
        cache = MemoCache()
        cache.set("k1", "old")
        calls = []
        value, created = cache.get_or_set("k1", lambda: calls.append(1) or "new")
        assert (value, created) == ("old", False)
        assert calls == []

    def test_single_creation_under_threads(self):
        cache = MemoCache()
        created_count = 0
        counter_lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker():
            nonlocal created_count
            barrier.wait()
            _, created = cache.get_or_set("shared", object)
            if created:
                with counter_lock:
                    created_count += 1

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert created_count == 1


class TestDiscard:
    def test_removes_expected_value(self):
        cache = MemoCache()
        sentinel = object()
        cache.set("k1", sentinel)
        assert cache.discard("k1", sentinel) is True
        assert "k1" not in cache

    def test_keeps_replaced_value(self):
        cache = MemoCache()
        old, new = object(), object()
        cache.set("k1", old)
        cache.set("k1", new)
        assert cache.discard("k1", old) is False
        assert cache.get("k1") is new

    def test_missing_key(self):
        assert MemoCache().discard("nope", None) is False
