"""
Contract of the live news source wrapped by the caching layer.
"""

from abc import ABC, abstractmethod
from typing import List, Protocol, Union, runtime_checkable

from ..models.article import Article, NewsCategory


class NewsService(ABC):
    """Async fetch interface implemented by live news clients.

    Implementations raise on failure; the caching layer passes those
    exceptions through unchanged.
    """

    @abstractmethod
    async def fetch_top_headlines(self, country: str, page: int) -> List[Article]:
        """Fetch a page of top headlines for a country."""

    @abstractmethod
    async def fetch_category_headlines(
        self,
        category: Union[NewsCategory, str],
        country: str,
        page: int
    ) -> List[Article]:
        """Fetch a page of top headlines for a category."""

    @abstractmethod
    async def fetch_breaking_news(self, country: str) -> List[Article]:
        """Fetch the current breaking news for a country."""

    @abstractmethod
    async def fetch_article(self, article_id: str) -> Article:
        """Fetch one article by id."""


@runtime_checkable
class NetworkMonitor(Protocol):
    """Reports whether the device currently has connectivity."""

    @property
    def is_connected(self) -> bool:
        ...
