from __future__ import annotations
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence
import hashlib
import logging
import time
from grammar_assistant.core.config import CACHE_CAPACITY, CACHE_TTL_SECONDS
from grammar_assistant.models.suggestion import CheckMode, Suggestion

log = logging.getLogger("cache")


class CacheEntry(NamedTuple):
    suggestions: List[Suggestion]
    created_at: float


def cache_key(text: str, mode: CheckMode = "quick") -> str:
    # case/whitespace-insensitive, namespaced by check mode
    normalized = f"{mode}:{text.strip().lower()}"
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


class ResultCache:
    """Suggestion lists keyed by normalized text, with a TTL and a size bound."""

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, capacity: int = CACHE_CAPACITY,
                 clock: Callable[[], float] = time.time):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self.ttl = ttl
        self.capacity = capacity
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _expired(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.created_at >= self.ttl

    def lookup(self, text: str, mode: CheckMode = "quick") -> Optional[List[Suggestion]]:
        key = cache_key(text, mode)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[key]
            return None
        return list(entry.suggestions)

    def store(self, text: str, suggestions: Sequence[Suggestion], mode: CheckMode = "quick") -> None:
        key = cache_key(text, mode)
        if key not in self._entries and len(self._entries) >= self.capacity:
            oldest = min(self._entries, key=lambda k: self._entries[k].created_at)
            del self._entries[oldest]
            log.debug("Evicted oldest cache entry %s", oldest[:12])
        self._entries[key] = CacheEntry(list(suggestions), self.clock())

    def purge_expired(self) -> int:
        stale = [k for k, e in self._entries.items() if self._expired(e)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
