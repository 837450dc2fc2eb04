"""
Timestamped cache entries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")

Clock = Callable[[], datetime]
Duration = Union[timedelta, int, float]


def utcnow() -> datetime:
    """Timezone-aware current time, the default clock for every tier."""
    return datetime.now(timezone.utc)


def as_timedelta(value: Duration) -> timedelta:
    """Accept a timedelta or a number of seconds."""
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Payload paired with the moment it was fetched.

    Entries are immutable: a refresh replaces the entry rather than
    touching its timestamp.
    """

    data: T
    timestamp: datetime = field(default_factory=utcnow)

    def age(self, now: Optional[datetime] = None) -> timedelta:
        """Time elapsed since the entry was created."""
        return (now or utcnow()) - self.timestamp

    def is_expired(self, ttl: Duration, now: Optional[datetime] = None) -> bool:
        """True once the entry is at least ``ttl`` old (boundary inclusive)."""
        return self.age(now) >= as_timedelta(ttl)
