"""
Caching decorator around a live news service.
"""

import time
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar, Union

from shared.errors import OfflineNoCacheError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .disk_store import DiskNewsCacheStore
from .entry import CacheEntry, Clock, Duration, utcnow
from .keys import (
    ArticleKey,
    BreakingNewsKey,
    CacheKey,
    CategoryHeadlinesKey,
    KeyPredicate,
    TopHeadlinesKey,
)
from .memory_store import MemoryNewsCacheStore
from .ttl import DISK_TTL, TtlPolicy, ttl_for
from ..adapters.news_service import NetworkMonitor, NewsService
from ..models.article import Article, NewsCategory

T = TypeVar("T")


class CachingNewsService(NewsService):
    """Serve news from a tiered cache, falling back to the wrapped service.

    Lookup order per request:

    1. Memory entry younger than its TTL policy value: returned as is.
    2. Disk entry younger than both its TTL policy value and ``disk_ttl``
       (for instance one written before a restart): promoted to memory
       and returned.
    3. Offline (per ``network_monitor``): stale memory, then stale disk,
       otherwise ``OfflineNoCacheError``. Disk entries past their policy
       TTL are only ever served here or as a failure fallback.
    4. Otherwise the wrapped service is awaited. Success is written to
       both tiers with the current time. Failure falls back to a stale
       disk entry when one exists, else the original exception propagates.

    Without a disk store or network monitor, steps 2 and 3 and the stale
    fallback are skipped and the service is a plain read-through memory
    cache. Concurrent misses for one key are not coalesced; the last
    successful writer wins.
    """

    def __init__(
        self,
        wrapped: NewsService,
        memory_store: Optional[MemoryNewsCacheStore] = None,
        disk_store: Optional[DiskNewsCacheStore] = None,
        *,
        network_monitor: Optional[NetworkMonitor] = None,
        ttl_policy: TtlPolicy = ttl_for,
        disk_ttl: timedelta = DISK_TTL,
        clock: Clock = utcnow,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.wrapped = wrapped
        self.memory_store = memory_store if memory_store is not None else MemoryNewsCacheStore()
        self.disk_store = disk_store
        self.network_monitor = network_monitor
        self.ttl_policy = ttl_policy
        self.disk_ttl = disk_ttl
        self.clock = clock
        self.metrics = metrics
        self.logger = get_logger("news.cache.service")

    async def fetch_top_headlines(self, country: str, page: int) -> List[Article]:
        key = TopHeadlinesKey(country=country, page=page)
        return await self._fetch_with_tiered_cache(
            key,
            "top_headlines",
            lambda: self.wrapped.fetch_top_headlines(country, page)
        )

    async def fetch_category_headlines(
        self,
        category: Union[NewsCategory, str],
        country: str,
        page: int
    ) -> List[Article]:
        key = CategoryHeadlinesKey(category=category, country=country, page=page)
        return await self._fetch_with_tiered_cache(
            key,
            "category_headlines",
            lambda: self.wrapped.fetch_category_headlines(category, country, page)
        )

    async def fetch_breaking_news(self, country: str) -> List[Article]:
        key = BreakingNewsKey(country=country)
        return await self._fetch_with_tiered_cache(
            key,
            "breaking_news",
            lambda: self.wrapped.fetch_breaking_news(country)
        )

    async def fetch_article(self, article_id: str) -> Article:
        key = ArticleKey(article_id=article_id)
        return await self._fetch_with_tiered_cache(
            key,
            "article",
            lambda: self.wrapped.fetch_article(article_id)
        )

    def invalidate_cache(self) -> None:
        """Drop the whole memory tier (pull-to-refresh). Disk stays as offline fallback."""
        self.memory_store.remove_all()
        self.logger.debug("Memory cache invalidated")

    def invalidate_cache_for(self, keys: Iterable[CacheKey]) -> None:
        """Drop specific keys from the memory tier."""
        count = 0
        for key in keys:
            self.memory_store.remove(key)
            count += 1
        self.logger.debug("Memory cache invalidated for keys", count=count)

    def invalidate_matching(self, predicate: KeyPredicate) -> int:
        """Drop memory entries whose key satisfies ``predicate``."""
        removed = self.memory_store.remove_matching(predicate)
        self.logger.debug("Memory cache invalidated by predicate", count=removed)
        return removed

    def invalidate_all_caches(self) -> None:
        """Drop both tiers, e.g. on sign-out."""
        self.memory_store.remove_all()
        if self.disk_store is not None:
            self.disk_store.remove_all()
        self.logger.debug("All cache tiers invalidated")

    async def _fetch_with_tiered_cache(
        self,
        key: CacheKey,
        operation: str,
        network_fetch: Callable[[], Awaitable[T]],
    ) -> T:
        now = self.clock()
        ttl = self.ttl_policy(key)

        cached: Optional[CacheEntry[Any]] = self.memory_store.get(key)
        if cached is not None and not cached.is_expired(ttl, now):
            self.logger.debug("Memory cache hit", key=key.canonical, operation=operation)
            self._record_lookup("memory", "hit")
            return cached.data
        self._record_lookup("memory", "miss" if cached is None else "stale")

        disk_cached: Optional[CacheEntry[Any]] = None
        if self.disk_store is not None:
            disk_cached = self.disk_store.get(key)
            if disk_cached is not None and self._is_disk_fresh(disk_cached, ttl, now):
                self.logger.debug("Disk cache hit, promoting to memory", key=key.canonical, operation=operation)
                self._record_lookup("disk", "hit")
                self.memory_store.set(disk_cached, key)
                return disk_cached.data
            self._record_lookup("disk", "miss" if disk_cached is None else "stale")

        if self._is_offline():
            if cached is not None:
                self.logger.debug("Offline, serving stale memory entry", key=key.canonical, operation=operation)
                return cached.data
            if disk_cached is not None:
                self.logger.debug("Offline, serving stale disk entry", key=key.canonical, operation=operation)
                return disk_cached.data
            self.logger.debug("Offline with no cached entry", key=key.canonical, operation=operation)
            raise OfflineNoCacheError(details={"key": key.canonical, "operation": operation})

        self.logger.debug("Cache miss, fetching from news service", key=key.canonical, operation=operation)
        start = time.perf_counter()
        try:
            data = await network_fetch()
        except Exception as exc:
            stale = self.disk_store.get(key) if self.disk_store is not None else None
            if stale is None:
                raise
            self.logger.debug(
                "News service failed, serving stale disk entry",
                key=key.canonical,
                operation=operation,
                error=str(exc)
            )
            return stale.data
        finally:
            self._record_fetch_duration(operation, time.perf_counter() - start)

        entry = CacheEntry(data=data, timestamp=self.clock())
        self.memory_store.set(entry, key)
        self._record_write("memory")
        if self.disk_store is not None:
            self.disk_store.set(entry, key)
            self._record_write("disk")
        return data

    def _is_disk_fresh(self, entry: CacheEntry[Any], ttl: Duration, now: datetime) -> bool:
        return not entry.is_expired(ttl, now) and not entry.is_expired(self.disk_ttl, now)

    def _is_offline(self) -> bool:
        return self.network_monitor is not None and not self.network_monitor.is_connected

    def _record_lookup(self, tier: str, result: str) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.record_lookup(tier, result)
        except Exception as exc:  # pragma: no cover - metrics failures never affect fetches
            self.logger.debug("Failed to record cache lookup metric", error=str(exc))

    def _record_write(self, tier: str) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.record_write(tier)
        except Exception as exc:  # pragma: no cover
            self.logger.debug("Failed to record cache write metric", error=str(exc))

    def _record_fetch_duration(self, operation: str, duration: float) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.observe_histogram("news_fetch_duration_seconds", duration, operation=operation)
        except Exception as exc:  # pragma: no cover
            self.logger.debug("Failed to record fetch duration", error=str(exc))
