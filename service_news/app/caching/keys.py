"""
Cache keys identifying each cacheable news request shape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar

from ..models.article import NewsCategory


class PayloadKind(str, Enum):
    """Payload shape stored under a key."""
    ARTICLE_LIST = "article_list"
    ARTICLE = "article"


@dataclass(frozen=True)
class CacheKey:
    """Base class for the four cache key variants.

    Equality and hashing come from the dataclass fields plus the concrete
    class, so two variants never compare equal even if their canonical
    strings happened to collide.
    """

    payload_kind: ClassVar[PayloadKind] = PayloadKind.ARTICLE_LIST

    @property
    def canonical(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class BreakingNewsKey(CacheKey):
    country: str

    @property
    def canonical(self) -> str:
        return f"breaking_{self.country}"


@dataclass(frozen=True)
class TopHeadlinesKey(CacheKey):
    country: str
    page: int

    @property
    def canonical(self) -> str:
        return f"headlines_{self.country}_p{self.page}"


@dataclass(frozen=True)
class CategoryHeadlinesKey(CacheKey):
    category: str
    country: str
    page: int

    def __post_init__(self):
        # Store the plain value so NewsCategory.X and "x" build the same key
        if isinstance(self.category, NewsCategory):
            object.__setattr__(self, "category", self.category.value)

    @property
    def canonical(self) -> str:
        return f"category_{self.category}_{self.country}_p{self.page}"


@dataclass(frozen=True)
class ArticleKey(CacheKey):
    payload_kind: ClassVar[PayloadKind] = PayloadKind.ARTICLE

    article_id: str

    @property
    def canonical(self) -> str:
        return f"article_{self.article_id}"


KeyPredicate = Callable[[CacheKey], bool]


def canonical_string(key: CacheKey) -> str:
    """Canonical storage string for a key."""
    return key.canonical


def is_breaking_news(key: CacheKey) -> bool:
    return isinstance(key, BreakingNewsKey)


def is_article(key: CacheKey) -> bool:
    return isinstance(key, ArticleKey)


def for_country(country: str) -> KeyPredicate:
    """Predicate matching every list key for ``country``."""
    def _matches(key: CacheKey) -> bool:
        return getattr(key, "country", None) == country
    return _matches


def category_headlines_for(country: str) -> KeyPredicate:
    """Predicate matching category headline keys for ``country``."""
    def _matches(key: CacheKey) -> bool:
        return isinstance(key, CategoryHeadlinesKey) and key.country == country
    return _matches
