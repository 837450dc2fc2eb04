"""
News caching package.

Memory and disk tiers plus the decorator that consults them before the
live news service. Prefer short TTLs for volatile content and explicit
invalidation on user refresh.
"""

from .caching_service import CachingNewsService
from .disk_store import DiskNewsCacheStore
from .entry import CacheEntry
from .keys import (
    ArticleKey,
    BreakingNewsKey,
    CacheKey,
    CategoryHeadlinesKey,
    PayloadKind,
    TopHeadlinesKey,
    canonical_string,
)
from .memory_store import MemoryNewsCacheStore
from .ttl import DISK_TTL, ttl_for

__all__ = [
    "ArticleKey",
    "BreakingNewsKey",
    "CacheEntry",
    "CacheKey",
    "CachingNewsService",
    "CategoryHeadlinesKey",
    "DISK_TTL",
    "DiskNewsCacheStore",
    "MemoryNewsCacheStore",
    "PayloadKind",
    "TopHeadlinesKey",
    "canonical_string",
    "ttl_for",
]
