"""
Shared fixtures for news cache tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import AsyncMock

import pytest

from service_news.app.adapters.news_service import NewsService
from service_news.app.models.article import Article, ArticleSource, NewsCategory


T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now

    def set(self, seconds_since_start: float) -> datetime:
        self.now = T0 + timedelta(seconds=seconds_since_start)
        return self.now


class FakeNetworkMonitor:
    """Network monitor with a switchable connection flag."""

    def __init__(self, is_connected: bool = True):
        self.is_connected = is_connected


def make_article(index: int, category: NewsCategory = NewsCategory.WORLD) -> Article:
    return Article(
        id=f"world/2024/jan/01/story-{index}",
        title=f"Story {index}",
        description=f"Lead paragraph for story {index}",
        content=f"<p>Body of story {index}</p>",
        author="Pulse Newsroom",
        source=ArticleSource(id="guardian", name="World news"),
        url=f"https://www.theguardian.com/world/2024/jan/01/story-{index}",
        image_url=f"https://media.guim.co.uk/story-{index}.jpg",
        published_at=T0 - timedelta(hours=index),
        category=category,
    )


def make_articles(count: int, start: int = 0) -> List[Article]:
    return [make_article(index) for index in range(start, start + count)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def articles():
    return make_articles(5)


@pytest.fixture
def article():
    return make_article(42, category=NewsCategory.TECHNOLOGY)


@pytest.fixture
def news_service():
    """Inner live service double."""
    return AsyncMock(spec=NewsService)
