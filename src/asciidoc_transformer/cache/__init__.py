"""Cache subsystem — in-memory LRU memo store with content-addressed keys."""

from asciidoc_transformer.cache.keys import (
    AST_KEY,
    HEADINGS_KEY,
    HTML_KEY,
    TIME_TO_READ_KEY,
    fingerprint,
)
from asciidoc_transformer.cache.manager import MemoCacheManager
from asciidoc_transformer.cache.memory import MemoCache
from asciidoc_transformer.cache.stats import CacheStats

__all__ = [
    "AST_KEY",
    "HEADINGS_KEY",
    "HTML_KEY",
    "TIME_TO_READ_KEY",
    "CacheStats",
    "MemoCache",
    "MemoCacheManager",
    "fingerprint",
]
