"""Cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Aggregate memo cache statistics."""

    entries: int = 0
    capacity: int = 0
    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    evictions: int = 0
    failures: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
