"""
In-process memory tier for cached news.
"""

import threading
from collections import OrderedDict
from typing import Any, List, Optional, Tuple

from shared.logging import get_logger

from .base import NewsCacheStore
from .entry import CacheEntry
from .keys import CacheKey, KeyPredicate


DEFAULT_COUNT_LIMIT = 100
DEFAULT_TOTAL_COST_LIMIT = 50 * 1024 * 1024

# Rough per-article footprint used for cost accounting
ARTICLE_COST = 1024


def estimate_cost(data: Any) -> int:
    """Approximate memory cost of a payload."""
    if isinstance(data, list):
        return len(data) * ARTICLE_COST
    return ARTICLE_COST


class MemoryNewsCacheStore(NewsCacheStore):
    """Count- and cost-bounded LRU table of cache entries.

    Entries live in one ordered map that doubles as the key index, so
    ``keys()`` and ``remove_matching`` always reflect exactly what is
    stored. Eviction drops the least recently used entry until both the
    count and the cost ceilings hold again.

    The store knows nothing about memory pressure signals; whoever owns
    it calls ``remove_all`` when the host is short on memory.
    """

    def __init__(self, count_limit: int = DEFAULT_COUNT_LIMIT, total_cost_limit: int = DEFAULT_TOTAL_COST_LIMIT):
        self.count_limit = count_limit
        self.total_cost_limit = total_cost_limit
        self.logger = get_logger("news.cache.memory")

        self._entries: "OrderedDict[CacheKey, Tuple[CacheEntry[Any], int]]" = OrderedDict()
        self._total_cost = 0
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[CacheEntry[Any]]:
        with self._lock:
            slot = self._entries.get(key)
            if slot is None:
                return None
            self._entries.move_to_end(key)
            return slot[0]

    def set(self, entry: CacheEntry[Any], key: CacheKey) -> None:
        cost = estimate_cost(entry.data)
        with self._lock:
            self._pop(key)
            self._entries[key] = (entry, cost)
            self._total_cost += cost
            evicted = self._evict()
            count, total_cost = len(self._entries), self._total_cost

        if evicted:
            self.logger.debug(
                "Evicted memory cache entries",
                evicted=[evicted_key.canonical for evicted_key in evicted],
                count=count,
                total_cost=total_cost
            )

    def remove(self, key: CacheKey) -> None:
        with self._lock:
            self._pop(key)

    def remove_all(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_cost = 0

    def remove_matching(self, predicate: KeyPredicate) -> int:
        """Remove every entry whose key satisfies ``predicate``.

        The key snapshot is taken under the lock but the predicate runs
        outside it. Keys that disappear in between are skipped by
        ``remove``. Returns the number of keys matched.
        """
        snapshot = self.keys()
        matched = [key for key in snapshot if predicate(key)]
        for key in matched:
            self.remove(key)

        if matched:
            self.logger.debug("Removed matching memory cache entries", count=len(matched))
        return len(matched)

    def keys(self) -> List[CacheKey]:
        """Snapshot of the stored keys, least recently used first."""
        with self._lock:
            return list(self._entries.keys())

    @property
    def total_cost(self) -> int:
        with self._lock:
            return self._total_cost

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _pop(self, key: CacheKey) -> None:
        slot = self._entries.pop(key, None)
        if slot is not None:
            self._total_cost -= slot[1]

    def _evict(self) -> List[CacheKey]:
        evicted: List[CacheKey] = []
        while self._entries and (
            len(self._entries) > self.count_limit or self._total_cost > self.total_cost_limit
        ):
            key, (_, cost) = self._entries.popitem(last=False)
            self._total_cost -= cost
            evicted.append(key)
        return evicted
