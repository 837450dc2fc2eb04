"""
Interface shared by the memory and disk cache tiers.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .entry import CacheEntry
from .keys import CacheKey


class NewsCacheStore(ABC):
    """Key to entry storage for cached news payloads.

    Stores never raise for cache conditions: a missing, evicted or
    unreadable entry is reported as ``None``. Freshness is judged by the
    caller with ``CacheEntry.is_expired``.
    """

    @abstractmethod
    def get(self, key: CacheKey) -> Optional[CacheEntry[Any]]:
        """Return the entry stored for ``key``, if any."""

    @abstractmethod
    def set(self, entry: CacheEntry[Any], key: CacheKey) -> None:
        """Insert or replace the entry for ``key``."""

    @abstractmethod
    def remove(self, key: CacheKey) -> None:
        """Drop the entry for ``key``; unknown keys are ignored."""

    @abstractmethod
    def remove_all(self) -> None:
        """Drop every entry."""
