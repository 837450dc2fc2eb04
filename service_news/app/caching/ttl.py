"""
Time-to-live policy per cache key.

Breaking news goes stale fastest; deeper headline pages and single
articles change rarely and are kept longer.
"""

from datetime import timedelta
from typing import Callable

from .keys import ArticleKey, BreakingNewsKey, CacheKey, CategoryHeadlinesKey, TopHeadlinesKey


BREAKING_NEWS_TTL = timedelta(minutes=5)
FIRST_PAGE_HEADLINES_TTL = timedelta(minutes=10)
LATER_PAGE_HEADLINES_TTL = timedelta(minutes=30)
CATEGORY_HEADLINES_TTL = timedelta(minutes=10)
ARTICLE_TTL = timedelta(minutes=60)

# Disk tier uses one fixed TTL regardless of key
DISK_TTL = timedelta(hours=24)

TtlPolicy = Callable[[CacheKey], timedelta]


def ttl_for(key: CacheKey) -> timedelta:
    """Return the memory-tier TTL for ``key``."""
    if isinstance(key, BreakingNewsKey):
        return BREAKING_NEWS_TTL
    if isinstance(key, TopHeadlinesKey):
        return FIRST_PAGE_HEADLINES_TTL if key.page == 1 else LATER_PAGE_HEADLINES_TTL
    if isinstance(key, CategoryHeadlinesKey):
        return CATEGORY_HEADLINES_TTL
    if isinstance(key, ArticleKey):
        return ARTICLE_TTL
    raise TypeError(f"No TTL defined for cache key type {type(key).__name__}")
